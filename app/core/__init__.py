"""
Core infrastructure: exceptions, logging, middleware, security and the
real-time notification relay.
"""

from app.core.exceptions import BaseAppException, ErrorCode
from app.core.logging import configure_logging, get_logger

__all__ = [
    "BaseAppException",
    "ErrorCode",
    "configure_logging",
    "get_logger",
]
