"""
Booking service layer.

Provides business logic for:
- Reservation creation and lookups
- Availability checks
- Pricing
- Status lifecycle, payments and cancellation
"""

from app.services.booking.booking_availability_service import (
    AvailabilityResult,
    BookingAvailabilityService,
)
from app.services.booking.booking_pricing_service import BookingPricingService, PriceBreakdown
from app.services.booking.booking_service import BookingService
from app.services.booking.booking_status_service import BookingStatusService

__all__ = [
    "AvailabilityResult",
    "BookingAvailabilityService",
    "BookingPricingService",
    "BookingService",
    "BookingStatusService",
    "PriceBreakdown",
]
