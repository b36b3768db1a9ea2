# --- File: app/schemas/common/response.py ---
"""
Standard API response wrappers for success, list and error responses.
"""

from typing import Generic, List, TypeVar, Union

from pydantic import Field

from app.schemas.common.base import BaseSchema
from app.schemas.common.pagination import PaginationMeta

T = TypeVar("T")

__all__ = [
    "SuccessResponse",
    "ListResponse",
    "ErrorDetail",
    "ErrorResponse",
    "paginated",
]


class SuccessResponse(BaseSchema, Generic[T]):
    """Standard success response."""

    success: bool = Field(default=True, description="Success flag")
    message: str = Field(..., description="Response message")
    data: Union[T, None] = Field(default=None, description="Response data")


class ListResponse(BaseSchema, Generic[T]):
    """Success response for a page of items."""

    success: bool = Field(default=True, description="Success flag")
    message: str = Field(default="OK", description="Response message")
    count: int = Field(..., ge=0, description="Items on this page")
    total: int = Field(..., ge=0, description="Items across all pages")
    pagination: PaginationMeta
    data: List[T] = Field(default_factory=list)


class ErrorDetail(BaseSchema):
    """Error detail information."""

    field: Union[str, None] = Field(default=None, description="Field name causing error")
    message: str = Field(..., description="Error message")
    code: Union[str, None] = Field(default=None, description="Error code")


class ErrorResponse(BaseSchema):
    """Standard error response."""

    success: bool = Field(default=False, description="Success flag")
    message: str = Field(..., description="Error message")
    errors: Union[List[ErrorDetail], None] = Field(default=None, description="Detailed errors")
    error_code: Union[str, None] = Field(default=None, description="Application error code")


def paginated(page, schema, message: str = "OK") -> dict:
    """
    Body for a ``ListResponse`` built from a repository page.

    ``page`` exposes ``items``, ``total``, ``page``, ``limit``, ``pages``
    and ``count``; each item is validated through ``schema``.
    """
    return {
        "success": True,
        "message": message,
        "count": page.count,
        "total": page.total,
        "pagination": {"page": page.page, "limit": page.limit, "pages": page.pages},
        "data": [schema.model_validate(item) for item in page.items],
    }
