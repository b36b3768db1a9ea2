# --- File: app/schemas/contact/contact.py ---
"""
Contact inquiry schemas.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import EmailStr, Field, field_validator

from app.models.base.enums import (
    ContactMethod,
    ContactPriority,
    ContactSource,
    ContactStatus,
    ContactTime,
    InquiryType,
)
from app.schemas.common.base import BaseCreateSchema, BaseResponseSchema, BaseSchema

__all__ = [
    "ContactBulkDelete",
    "ContactBulkResult",
    "ContactBulkStatusUpdate",
    "ContactCreate",
    "ContactStatusUpdate",
    "ContactReply",
    "ContactReceipt",
    "ContactResponse",
    "ContactStats",
]


class ContactCreate(BaseCreateSchema):
    """Public contact form submission."""

    name: str = Field(..., min_length=2, max_length=100)
    email: EmailStr
    phone: str = Field(..., pattern=r"^\+?[0-9][0-9\s\-()]{6,19}$")
    inquiry_type: InquiryType = InquiryType.GENERAL_INQUIRY
    subject: str = Field(..., min_length=5, max_length=200)
    message: str = Field(..., min_length=10, max_length=2000)
    preferred_contact_method: ContactMethod = ContactMethod.EMAIL
    preferred_contact_time: ContactTime = ContactTime.ANYTIME
    source: ContactSource = ContactSource.WEBSITE_CONTACT_FORM

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()


class ContactStatusUpdate(BaseCreateSchema):
    status: ContactStatus
    notes: Optional[str] = Field(default=None, max_length=1000)


class ContactReply(BaseCreateSchema):
    response_message: str = Field(..., min_length=1, max_length=2000)


class ContactReceipt(BaseSchema):
    """Acknowledgement returned to the public submitter."""

    id: str
    submitted_at: datetime


class ContactResponse(BaseResponseSchema):
    name: str
    email: str
    phone: str
    inquiry_type: InquiryType
    inquiry_type_display: str
    subject: str
    message: str
    preferred_contact_method: ContactMethod
    preferred_contact_time: ContactTime
    status: ContactStatus
    priority: ContactPriority
    is_read: bool
    read_at: Optional[datetime] = None
    read_by: Optional[str] = None
    response_message: Optional[str] = None
    responded_at: Optional[datetime] = None
    responded_by: Optional[str] = None
    resolved_at: Optional[datetime] = None
    closed_at: Optional[datetime] = None
    notes: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    source: ContactSource


class ContactStats(BaseSchema):
    total: int
    unread: int
    pending: int
    recent: int = Field(..., description="Received in the last 30 days")
    by_status: Dict[str, int] = Field(default_factory=dict)
    by_priority: Dict[str, int] = Field(default_factory=dict)
    by_inquiry_type: Dict[str, int] = Field(default_factory=dict)


class ContactBulkStatusUpdate(BaseCreateSchema):
    contact_ids: List[str] = Field(..., min_length=1, max_length=100)
    status: ContactStatus
    notes: Optional[str] = Field(default=None, max_length=500)


class ContactBulkDelete(BaseCreateSchema):
    contact_ids: List[str] = Field(..., min_length=1, max_length=100)


class ContactBulkResult(BaseSchema):
    """Counts reported by bulk inbox operations."""

    matched_count: int = 0
    modified_count: int = 0
    deleted_count: int = 0
