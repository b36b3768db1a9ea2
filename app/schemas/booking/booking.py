# --- File: app/schemas/booking/booking.py ---
"""
Booking schemas: reservation requests, lifecycle updates and responses.
"""

from __future__ import annotations

from datetime import date as Date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import EmailStr, Field, field_validator

from app.models.base.enums import (
    BookingStatus,
    PaymentMethod,
    PaymentStatus,
    RefundStatus,
)
from app.schemas.common.base import (
    BaseCreateSchema,
    BaseResponseSchema,
    BaseSchema,
    Money,
)
from app.schemas.room.room import RoomSummary

__all__ = [
    "GuestAddress",
    "GuestInfo",
    "PaymentInfo",
    "BookingCreate",
    "BookingStatusUpdate",
    "PaymentUpdate",
    "BookingCancel",
    "BookingResponse",
    "BookingStats",
]

PHONE_PATTERN = r"^\+?[0-9][0-9\s\-()]{6,19}$"


class GuestAddress(BaseSchema):
    street: Optional[str] = Field(default=None, min_length=5, max_length=100)
    city: Optional[str] = Field(default=None, min_length=2, max_length=50)
    state: Optional[str] = Field(default=None, max_length=50)
    zip_code: Optional[str] = Field(default=None, min_length=3, max_length=10)
    country: Optional[str] = Field(default=None, min_length=2, max_length=50)


class GuestInfo(BaseSchema):
    """
    Guest contact details captured with the booking.
    """

    first_name: str = Field(..., min_length=2, max_length=50)
    last_name: str = Field(..., min_length=2, max_length=50)
    email: EmailStr
    phone: str = Field(..., pattern=PHONE_PATTERN)
    address: Optional[GuestAddress] = None
    special_requests: Optional[str] = Field(default=None, max_length=500)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()


class PaymentInfo(BaseSchema):
    """
    Payment method chosen at booking time.

    Only the last four digits of a card number are kept.
    """

    method: PaymentMethod
    card_number: Optional[str] = Field(default=None, min_length=12, max_length=19, pattern=r"^[0-9 ]+$")
    card_holder_name: Optional[str] = Field(default=None, min_length=2, max_length=100)

    @property
    def card_last_four(self) -> Optional[str]:
        if not self.card_number:
            return None
        digits = self.card_number.replace(" ", "")
        return digits[-4:]


class BookingCreate(BaseCreateSchema):
    """Public reservation request."""

    room_id: str = Field(..., min_length=1, max_length=36)
    check_in_date: Date
    check_out_date: Date
    number_of_guests: int = Field(..., ge=1, le=10)
    guest_info: GuestInfo
    payment_info: PaymentInfo


class BookingStatusUpdate(BaseCreateSchema):
    status: BookingStatus
    notes: Optional[str] = Field(default=None, max_length=1000)


class PaymentUpdate(BaseCreateSchema):
    payment_status: PaymentStatus
    transaction_id: Optional[str] = Field(default=None, max_length=100)
    payment_date: Optional[datetime] = None


class BookingCancel(BaseCreateSchema):
    reason: Optional[str] = Field(default=None, max_length=500)
    refund_amount: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)


class BookingResponse(BaseResponseSchema):
    booking_reference: str
    confirmation_number: Optional[str] = None
    room_id: str
    room: Optional[RoomSummary] = None

    guest_first_name: str
    guest_last_name: str
    guest_email: str
    guest_phone: str
    address_street: Optional[str] = None
    address_city: Optional[str] = None
    address_state: Optional[str] = None
    address_zip_code: Optional[str] = None
    address_country: Optional[str] = None
    special_requests: Optional[str] = None

    check_in_date: Date
    check_out_date: Date
    number_of_guests: int
    number_of_nights: int

    price_per_night: Money
    subtotal: Money
    taxes: Money
    fees: Money
    total_amount: Money
    currency: str

    payment_method: PaymentMethod
    payment_status: PaymentStatus
    transaction_id: Optional[str] = None
    payment_date: Optional[datetime] = None
    card_last_four: Optional[str] = None

    booking_status: BookingStatus
    cancelled_at: Optional[datetime] = None
    cancellation_reason: Optional[str] = None
    refund_amount: Optional[Money] = None
    refund_status: Optional[RefundStatus] = None

    check_in_time: Optional[datetime] = None
    check_out_time: Optional[datetime] = None
    notes: Optional[str] = None
    source: str


class BookingStats(BaseSchema):
    """Booking counters over a trailing window."""

    period_days: int
    total_bookings: int
    confirmed_bookings: int
    cancelled_bookings: int
    cancellation_rate: float = Field(..., description="Percentage, two decimals")
    total_revenue: Money
    upcoming_check_ins: int
    status_breakdown: dict = Field(default_factory=dict)
    recent_bookings: List[BookingResponse] = Field(default_factory=list)
