from app.schemas.booking.booking import (
    BookingCancel,
    BookingCreate,
    BookingResponse,
    BookingStats,
    BookingStatusUpdate,
    GuestAddress,
    GuestInfo,
    PaymentInfo,
    PaymentUpdate,
)

__all__ = [
    "BookingCancel",
    "BookingCreate",
    "BookingResponse",
    "BookingStats",
    "BookingStatusUpdate",
    "GuestAddress",
    "GuestInfo",
    "PaymentInfo",
    "PaymentUpdate",
]
