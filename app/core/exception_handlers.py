"""
Exception handlers rendering every failure in the standard response envelope.

    {"success": false, "message": "...", "errors": [...], "error_code": "..."}
"""

from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import settings
from app.core.exceptions import BaseAppException, ErrorCode
from app.core.logging import get_logger

logger = get_logger(__name__)


def error_payload(
    message: str,
    error_code: Optional[str] = None,
    errors: Optional[List[Dict[str, Any]]] = None,
    details: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"success": False, "message": message}
    if errors:
        payload["errors"] = errors
    if error_code:
        payload["error_code"] = error_code
    if details:
        payload["details"] = details
    return payload


def format_validation_errors(errors: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Flatten pydantic error locations into ``field``/``message`` pairs."""
    formatted = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        formatted.append({
            "field": ".".join(loc) or None,
            "message": error.get("msg", "Invalid value"),
            "code": error.get("type"),
        })
    return formatted


async def app_exception_handler(request: Request, exc: BaseAppException) -> JSONResponse:
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        f"Application exception: {exc.error_code.value} - {exc.message}",
        extra={
            "error_code": exc.error_code.value,
            "error_details": exc.details,
            "path": request.url.path,
            "method": request.method,
            "status_code": exc.status_code,
        }
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=jsonable_encoder(
            error_payload(exc.message, exc.error_code.value, details=exc.details or None)
        ),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = format_validation_errors(exc.errors())
    logger.warning(
        f"Validation error: {len(errors)} field(s) failed validation",
        extra={
            "validation_errors": errors,
            "path": request.url.path,
            "method": request.method,
        }
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=jsonable_encoder(
            error_payload("Validation failed", ErrorCode.VALIDATION_ERROR.value, errors)
        ),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return JSONResponse(
        status_code=exc.status_code,
        content=error_payload(message),
        headers=getattr(exc, "headers", None),
    )


async def operational_error_handler(request: Request, exc: OperationalError) -> JSONResponse:
    logger.error(
        "Database unavailable",
        extra={
            "path": request.url.path,
            "method": request.method,
            "exception_type": type(exc).__name__,
        },
        exc_info=True
    )
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content=error_payload(
            "Database temporarily unavailable", ErrorCode.CONNECTION_ERROR.value
        ),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.critical(
        f"Unexpected exception: {type(exc).__name__} - {exc}",
        extra={
            "path": request.url.path,
            "method": request.method,
            "exception_type": type(exc).__name__,
        },
        exc_info=True
    )
    details = {"error": str(exc), "type": type(exc).__name__} if settings.DEBUG else None
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_payload(
            "Internal server error", ErrorCode.INTERNAL_ERROR.value, details=details
        ),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BaseAppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(OperationalError, operational_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
