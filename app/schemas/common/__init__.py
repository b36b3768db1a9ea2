from app.schemas.common.base import BaseSchema, BaseCreateSchema, BaseUpdateSchema, BaseResponseSchema, Money
from app.schemas.common.pagination import PaginationParams, PaginationMeta
from app.schemas.common.response import ErrorDetail, ErrorResponse, ListResponse, SuccessResponse, paginated

__all__ = [
    "BaseSchema",
    "BaseCreateSchema",
    "BaseUpdateSchema",
    "BaseResponseSchema",
    "Money",
    "PaginationParams",
    "PaginationMeta",
    "ErrorDetail",
    "ErrorResponse",
    "ListResponse",
    "SuccessResponse",
    "paginated",
]
