"""
Contact inquiry model.

Inbound messages from the public contact form, triaged by admins.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import DateTime, Enum, Index, JSON, String, Text, Boolean
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base.base_model import TimestampModel
from app.models.base.enums import (
    ContactMethod,
    ContactPriority,
    ContactSource,
    ContactStatus,
    ContactTime,
    InquiryType,
)

__all__ = ["Contact", "INQUIRY_TYPE_LABELS"]

INQUIRY_TYPE_LABELS = {
    InquiryType.GENERAL_INQUIRY: "General Inquiry",
    InquiryType.BOOKING_ASSISTANCE: "Booking Assistance",
    InquiryType.ROOM_INFORMATION: "Room Information",
    InquiryType.SERVICES_AMENITIES: "Services & Amenities",
    InquiryType.EVENT_PLANNING: "Event Planning",
    InquiryType.COMPLAINT: "Complaint",
    InquiryType.FEEDBACK: "Feedback",
    InquiryType.PARTNERSHIP: "Partnership",
    InquiryType.MEDIA_PRESS: "Media & Press",
    InquiryType.OTHER: "Other",
}


class Contact(TimestampModel):
    """
    Contact form submission.

    Priority is derived from the inquiry type on creation; status moves
    new -> in_progress -> resolved -> closed as admins work the inbox.
    """

    __tablename__ = "contacts"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    phone: Mapped[str] = mapped_column(String(30), nullable=False)

    inquiry_type: Mapped[InquiryType] = mapped_column(
        Enum(InquiryType),
        nullable=False,
        default=InquiryType.GENERAL_INQUIRY,
        index=True,
    )
    subject: Mapped[str] = mapped_column(String(200), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)

    preferred_contact_method: Mapped[ContactMethod] = mapped_column(
        Enum(ContactMethod), nullable=False, default=ContactMethod.EMAIL
    )
    preferred_contact_time: Mapped[ContactTime] = mapped_column(
        Enum(ContactTime), nullable=False, default=ContactTime.ANYTIME
    )

    status: Mapped[ContactStatus] = mapped_column(
        Enum(ContactStatus), nullable=False, default=ContactStatus.NEW, index=True
    )
    priority: Mapped[ContactPriority] = mapped_column(
        Enum(ContactPriority), nullable=False, default=ContactPriority.MEDIUM, index=True
    )

    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    read_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    read_by: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    # Admin response
    response_message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    responded_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    responded_by: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    resolved_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    closed_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    notes: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    tags: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)

    ip_address: Mapped[Optional[str]] = mapped_column(String(45), nullable=True)
    user_agent: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    source: Mapped[ContactSource] = mapped_column(
        Enum(ContactSource), nullable=False, default=ContactSource.WEBSITE_CONTACT_FORM
    )

    __table_args__ = (
        Index("ix_contacts_status_created", "status", "created_at"),
    )

    @property
    def inquiry_type_display(self) -> str:
        return INQUIRY_TYPE_LABELS.get(self.inquiry_type, str(self.inquiry_type))

    def __repr__(self) -> str:
        return f"<Contact(id={self.id}, status={self.status}, priority={self.priority})>"
