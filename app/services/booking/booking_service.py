# app/services/booking/booking_service.py
"""
Booking service: reservation creation and lookups.

Creation validates the request against the room, checks for overlapping
bookings, prices the stay and persists the booking together with one
room-night claim per night in a single transaction. The claims' unique
``(room_id, night)`` constraint turns a lost check-then-insert race into a
409 instead of a double booking.
"""

from datetime import date
from typing import Any, Callable, Dict, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.config.settings import Settings
from app.core.exceptions import (
    BookingNotFoundError,
    EntityAlreadyExistsError,
    InvalidDateRangeError,
    OccupancyExceededError,
    RoomNotAvailableError,
    RoomNotFoundError,
    RoomUnavailableError,
)
from app.core.notifications import ADMIN_GROUP, EVENT_NEW_BOOKING, NotificationRelay
from app.models.base.enums import BookingStatus, PaymentStatus
from app.models.booking.booking import Booking
from app.repositories.base.base_repository import PageResult
from app.repositories.booking.booking_repository import (
    BookingRepository,
    BookingSearchCriteria,
)
from app.repositories.room.room_repository import RoomRepository
from app.schemas.booking.booking import BookingCreate, BookingResponse
from app.services.base import BaseService, track_performance
from app.services.booking.booking_pricing_service import BookingPricingService
from app.services.notification.email_service import EmailService
from app.utils.date_utils import count_nights, today_utc
from app.utils.reference_utils import generate_booking_reference

CLAIM_CONSTRAINT_MARKER = "room_night"


def booking_event_payload(booking: Booking) -> Dict[str, Any]:
    """JSON-ready booking representation pushed to dashboards."""
    return BookingResponse.model_validate(booking).model_dump(mode="json")


def is_claim_violation(error: IntegrityError) -> bool:
    return CLAIM_CONSTRAINT_MARKER in str(error.orig).lower()


class BookingService(BaseService):
    """
    Service for booking creation and retrieval.

    Collaborators are injected: the relay and mailer so that side effects
    can be observed in tests, and ``clock`` so that "today" can be pinned.
    """

    def __init__(
        self,
        db_session: Session,
        settings: Settings,
        relay: NotificationRelay,
        email_service: Optional[EmailService] = None,
        clock: Callable[[], date] = today_utc,
        room_repository: Optional[RoomRepository] = None,
        booking_repository: Optional[BookingRepository] = None,
        pricing_service: Optional[BookingPricingService] = None,
    ):
        super().__init__(db_session)
        self.settings = settings
        self.relay = relay
        self.email_service = email_service or EmailService(settings)
        self.clock = clock
        self.rooms = room_repository or RoomRepository(db_session)
        self.bookings = booking_repository or BookingRepository(db_session)
        self.pricing = pricing_service or BookingPricingService(
            settings.TAX_RATE, settings.SERVICE_FEE, settings.CURRENCY
        )

    # ==================== CREATE ====================

    @track_performance("create_booking")
    def create_booking(self, payload: BookingCreate) -> Booking:
        """
        Create a pending booking.

        Raises:
            RoomNotFoundError: Unknown or deleted room
            RoomUnavailableError: Room is switched off for booking
            InvalidDateRangeError: Check-out not after check-in, or check-in in the past
            OccupancyExceededError: More guests than the room holds
            RoomNotAvailableError: Another booking holds some of the nights
        """
        room = self.rooms.find_by_id(payload.room_id)
        if room is None:
            raise RoomNotFoundError(payload.room_id)
        if not room.is_available:
            raise RoomUnavailableError(room.id)

        check_in, check_out = payload.check_in_date, payload.check_out_date
        if check_out <= check_in:
            raise InvalidDateRangeError("Check-out date must be after check-in date", check_in, check_out)
        if check_in < self.clock():
            raise InvalidDateRangeError("Check-in date cannot be in the past", check_in, check_out)

        if payload.number_of_guests > room.max_occupancy:
            raise OccupancyExceededError(room.max_occupancy, payload.number_of_guests)

        conflicts = self.bookings.find_conflicting(room.id, check_in, check_out)
        if conflicts:
            self._logger.info(
                "Booking rejected: overlapping stay",
                extra={"room_id": room.id, "conflicting_bookings": len(conflicts)},
            )
            raise RoomNotAvailableError(room.id, len(conflicts))

        price = self.pricing.calculate(room.price_per_night, count_nights(check_in, check_out))
        booking = self._build_booking(payload, room, price.as_dict())
        self.bookings.add_claims(booking)
        self.db.add(booking)

        try:
            self._commit()
        except IntegrityError as e:
            self._rollback()
            if is_claim_violation(e):
                self._logger.warning(
                    "Booking lost room-night race",
                    extra={"room_id": room.id, "check_in": str(check_in), "check_out": str(check_out)},
                )
                raise RoomNotAvailableError(room.id) from e
            raise EntityAlreadyExistsError("Booking reference collision, please retry") from e

        self._logger.info(
            "Booking created",
            extra={
                "booking_id": booking.id,
                "booking_reference": booking.booking_reference,
                "room_id": room.id,
                "nights": booking.number_of_nights,
                "total_amount": str(booking.total_amount),
            },
        )

        self.relay.publish(
            ADMIN_GROUP,
            EVENT_NEW_BOOKING,
            booking_event_payload(booking),
            "New booking created",
        )
        self.email_service.send_booking_confirmation(booking)
        return booking

    def _build_booking(self, payload: BookingCreate, room, pricing: Dict[str, Any]) -> Booking:
        guest = payload.guest_info
        address = guest.address
        return Booking(
            booking_reference=generate_booking_reference(),
            room=room,
            room_id=room.id,
            guest_first_name=guest.first_name,
            guest_last_name=guest.last_name,
            guest_email=guest.email,
            guest_phone=guest.phone,
            address_street=address.street if address else None,
            address_city=address.city if address else None,
            address_state=address.state if address else None,
            address_zip_code=address.zip_code if address else None,
            address_country=address.country if address else None,
            special_requests=guest.special_requests,
            check_in_date=payload.check_in_date,
            check_out_date=payload.check_out_date,
            number_of_guests=payload.number_of_guests,
            payment_method=payload.payment_info.method,
            card_last_four=payload.payment_info.card_last_four,
            payment_status=PaymentStatus.PENDING,
            booking_status=BookingStatus.PENDING,
            **pricing,
        )

    # ==================== READ ====================

    def get_booking(self, booking_id: str) -> Booking:
        booking = self.bookings.find_by_id(booking_id)
        if booking is None:
            raise BookingNotFoundError(booking_id)
        return booking

    def get_by_confirmation(self, number: str) -> Booking:
        """Guest lookup by confirmation number, or by booking reference before confirmation."""
        number = number.strip().upper()
        booking = self.bookings.find_by_confirmation_number(number) or self.bookings.find_by_reference(number)
        if booking is None:
            raise BookingNotFoundError(message="Booking not found with this confirmation number")
        return booking

    def list_bookings(self, criteria: BookingSearchCriteria, page: int, limit: int) -> PageResult[Booking]:
        return self.bookings.search(criteria, page, limit)
