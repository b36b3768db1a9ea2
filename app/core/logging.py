"""
Logging Configuration and Utilities

Structured logging built on structlog, rendered through the standard
library so that python-json-logger can emit one JSON document per record.
"""

import sys
import logging
from typing import Any, Dict, Optional
from datetime import datetime, timezone
from contextvars import ContextVar

import structlog
from pythonjsonlogger import jsonlogger

from app.config import settings

# Context variables for request tracking
request_id: ContextVar[Optional[str]] = ContextVar('request_id', default=None)
admin_id: ContextVar[Optional[str]] = ContextVar('admin_id', default=None)

SENSITIVE_KEYS = (
    'password', 'token', 'secret', 'authorization', 'cookie', 'card_number',
)


class RequestContextProcessor:
    """Add request context to log records"""

    def __call__(self, logger, method_name, event_dict):
        req_id = request_id.get()
        if req_id:
            event_dict['request_id'] = req_id

        uid = admin_id.get()
        if uid:
            event_dict['admin_id'] = uid

        event_dict['timestamp'] = datetime.now(timezone.utc).isoformat()
        event_dict['service'] = 'hotel-reservation'
        event_dict['environment'] = settings.ENVIRONMENT

        return event_dict


class RedactionProcessor:
    """Mask values whose key looks like a credential"""

    def __call__(self, logger, method_name, event_dict):
        self._sanitize(event_dict)
        return event_dict

    def _sanitize(self, data: Dict[str, Any]) -> None:
        for key in list(data.keys()):
            if key == 'event':
                continue
            if any(sensitive in key.lower() for sensitive in SENSITIVE_KEYS):
                data[key] = '[REDACTED]'
            elif isinstance(data[key], dict):
                self._sanitize(data[key])


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter for structured logging"""

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)

        log_record['level'] = record.levelname
        log_record['logger'] = record.name
        log_record['function'] = record.funcName
        log_record['line'] = record.lineno

        if record.exc_info and 'exc_info' not in log_record:
            log_record['exception'] = self.formatException(record.exc_info)


class LoggerAdapter:
    """Thin wrapper keeping the ``logger.info(msg, extra={...})`` call style"""

    def __init__(self, logger):
        self.logger = logger

    def _log(self, level: int, message: str, extra: Optional[Dict[str, Any]] = None, exc_info: bool = False):
        fields = dict(extra or {})
        if exc_info:
            fields['exc_info'] = True
        self.logger.log(level, message, **fields)

    def debug(self, message: str, **kwargs):
        self._log(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs):
        self._log(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs):
        self._log(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs):
        self._log(logging.ERROR, message, **kwargs)

    def exception(self, message: str, **kwargs):
        kwargs.setdefault('exc_info', True)
        self._log(logging.ERROR, message, **kwargs)

    def critical(self, message: str, **kwargs):
        self._log(logging.CRITICAL, message, **kwargs)


def _configure_structlog() -> None:
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            RequestContextProcessor(),
            RedactionProcessor(),
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.render_to_log_kwargs,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )


def _configure_standard_logging() -> None:
    level = getattr(logging, settings.LOG_LEVEL)
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)

    if settings.LOG_FORMAT == "json":
        formatter = CustomJsonFormatter('%(asctime)s %(name)s %(levelname)s %(message)s')
    else:
        formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # Reduce noise from external libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.LOG_SQL_QUERIES else logging.WARNING
    )


def configure_logging() -> None:
    """Initialize logging configuration"""
    _configure_structlog()
    _configure_standard_logging()


def get_logger(name: Optional[str] = None) -> LoggerAdapter:
    """
    Get configured logger instance.

    Args:
        name: Logger name, usually the caller's ``__name__``

    Returns:
        Logger adapter accepting ``extra`` dictionaries
    """
    return LoggerAdapter(structlog.get_logger(name or 'app'))


# Initialize logging when module is imported
configure_logging()

__all__ = [
    'get_logger',
    'configure_logging',
    'LoggerAdapter',
    'request_id',
    'admin_id',
]
