"""
Base models package.

Provides the declarative base, abstract base classes and enums for all
database models.
"""

from app.models.base.base_model import (
    Base,
    BaseModel,
    TimestampModel,
    SoftDeleteModel,
)

from app.models.base.enums import (
    RoomType,
    BedType,
    RoomWing,
    RoomView,
    BookingStatus,
    PaymentStatus,
    PaymentMethod,
    RefundStatus,
    InquiryType,
    ContactPriority,
    ContactStatus,
    ContactMethod,
    ContactTime,
    ContactSource,
    AdminRole,
    Permission,
    ROLE_PERMISSIONS,
    BLOCKING_BOOKING_STATUSES,
    ACTIVE_BOOKING_STATUSES,
    TERMINAL_BOOKING_STATUSES,
)

__all__ = [
    "Base",
    "BaseModel",
    "TimestampModel",
    "SoftDeleteModel",
    "RoomType",
    "BedType",
    "RoomWing",
    "RoomView",
    "BookingStatus",
    "PaymentStatus",
    "PaymentMethod",
    "RefundStatus",
    "InquiryType",
    "ContactPriority",
    "ContactStatus",
    "ContactMethod",
    "ContactTime",
    "ContactSource",
    "AdminRole",
    "Permission",
    "ROLE_PERMISSIONS",
    "BLOCKING_BOOKING_STATUSES",
    "ACTIVE_BOOKING_STATUSES",
    "TERMINAL_BOOKING_STATUSES",
]
