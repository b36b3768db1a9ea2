from app.schemas.contact.contact import (
    ContactBulkDelete,
    ContactBulkResult,
    ContactBulkStatusUpdate,
    ContactCreate,
    ContactReceipt,
    ContactReply,
    ContactResponse,
    ContactStats,
    ContactStatusUpdate,
)

__all__ = [
    "ContactBulkDelete",
    "ContactBulkResult",
    "ContactBulkStatusUpdate",
    "ContactCreate",
    "ContactReceipt",
    "ContactReply",
    "ContactResponse",
    "ContactStats",
    "ContactStatusUpdate",
]
