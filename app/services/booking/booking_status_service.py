# app/services/booking/booking_status_service.py
"""
Booking lifecycle: status changes, payment updates, cancellation and
booking statistics.

    pending -> confirmed -> checked_in -> checked_out
    pending | confirmed -> cancelled
    confirmed -> no_show

A booking holds its room-night claims exactly while its status is one of
pending, confirmed or checked_in.
"""

from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Callable, Dict, FrozenSet, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.config.settings import Settings
from app.core.exceptions import (
    BookingAlreadyCancelledError,
    BookingCompletedError,
    BookingNotFoundError,
    EntityAlreadyExistsError,
    InvalidStatusTransitionError,
    RoomNotAvailableError,
)
from app.core.notifications import ADMIN_GROUP, EVENT_BOOKING_UPDATED, NotificationRelay
from app.models.base.enums import (
    BLOCKING_BOOKING_STATUSES,
    BookingStatus,
    PaymentStatus,
    RefundStatus,
)
from app.models.booking.booking import Booking
from app.repositories.booking.booking_repository import BookingRepository
from app.schemas.booking.booking import BookingResponse, BookingStats
from app.services.base import BaseService, track_performance
from app.services.booking.booking_pricing_service import to_money
from app.services.booking.booking_service import booking_event_payload, is_claim_violation
from app.services.notification.email_service import EmailService
from app.utils.date_utils import to_naive_utc, today_utc, utcnow
from app.utils.reference_utils import generate_confirmation_number

DEFAULT_CANCELLATION_REASON = "Cancelled by guest"

ALLOWED_TRANSITIONS: Dict[BookingStatus, FrozenSet[BookingStatus]] = {
    BookingStatus.PENDING: frozenset({BookingStatus.CONFIRMED, BookingStatus.CANCELLED}),
    BookingStatus.CONFIRMED: frozenset({
        BookingStatus.CHECKED_IN,
        BookingStatus.CANCELLED,
        BookingStatus.NO_SHOW,
    }),
    BookingStatus.CHECKED_IN: frozenset({BookingStatus.CHECKED_OUT}),
    BookingStatus.CHECKED_OUT: frozenset(),
    BookingStatus.CANCELLED: frozenset(),
    BookingStatus.NO_SHOW: frozenset(),
}


def can_transition(current: BookingStatus, requested: BookingStatus) -> bool:
    """Re-asserting the current status is always allowed."""
    return requested == current or requested in ALLOWED_TRANSITIONS[current]


class BookingStatusService(BaseService):
    """Applies lifecycle changes to existing bookings."""

    def __init__(
        self,
        db_session: Session,
        settings: Settings,
        relay: NotificationRelay,
        email_service: Optional[EmailService] = None,
        clock: Callable[[], date] = today_utc,
        booking_repository: Optional[BookingRepository] = None,
    ):
        super().__init__(db_session)
        self.settings = settings
        self.relay = relay
        self.email_service = email_service or EmailService(settings)
        self.clock = clock
        self.bookings = booking_repository or BookingRepository(db_session)

    # ==================== STATUS ====================

    @track_performance("update_booking_status")
    def update_status(
        self,
        booking_id: str,
        new_status: BookingStatus,
        notes: Optional[str] = None,
    ) -> Booking:
        """
        Move a booking to ``new_status``.

        Raises:
            BookingNotFoundError: Unknown booking
            InvalidStatusTransitionError: Transition not allowed (when enforced)
            RoomNotAvailableError: Re-activating a booking whose nights were taken
        """
        booking = self._get(booking_id)
        current = booking.booking_status

        if self.settings.ENFORCE_STATUS_TRANSITIONS and not can_transition(current, new_status):
            raise InvalidStatusTransitionError(current.value, new_status.value)

        self._apply_status(booking, new_status)
        if notes is not None:
            booking.notes = notes

        self._save(booking)
        self._logger.info(
            "Booking status updated",
            extra={
                "booking_id": booking.id,
                "from_status": current.value,
                "to_status": new_status.value,
            },
        )
        self._publish(booking, f"Booking {booking.booking_reference} status updated to {new_status.value}")
        return booking

    def _apply_status(self, booking: Booking, new_status: BookingStatus) -> None:
        was_blocking = booking.booking_status in BLOCKING_BOOKING_STATUSES
        now = utcnow()

        booking.booking_status = new_status
        if new_status == BookingStatus.CONFIRMED:
            self._ensure_confirmation_number(booking)
        elif new_status == BookingStatus.CHECKED_IN and booking.check_in_time is None:
            booking.check_in_time = now
        elif new_status == BookingStatus.CHECKED_OUT and booking.check_out_time is None:
            booking.check_out_time = now
        elif new_status == BookingStatus.CANCELLED and booking.cancelled_at is None:
            booking.cancelled_at = now

        is_blocking = new_status in BLOCKING_BOOKING_STATUSES
        if was_blocking and not is_blocking:
            self.bookings.release_claims(booking)
        elif is_blocking and not was_blocking:
            # Only reachable with transition enforcement switched off
            conflicts = self.bookings.find_conflicting(
                booking.room_id,
                booking.check_in_date,
                booking.check_out_date,
                exclude_booking_id=booking.id,
            )
            if conflicts:
                self.db.rollback()
                raise RoomNotAvailableError(booking.room_id, len(conflicts))
            self.bookings.add_claims(booking)

    @staticmethod
    def _ensure_confirmation_number(booking: Booking) -> None:
        if not booking.confirmation_number:
            booking.confirmation_number = generate_confirmation_number()

    # ==================== PAYMENT ====================

    @track_performance("update_booking_payment")
    def update_payment(
        self,
        booking_id: str,
        payment_status: PaymentStatus,
        transaction_id: Optional[str] = None,
        payment_date: Optional[datetime] = None,
    ) -> Booking:
        """
        Record a payment status change.

        A completed payment on a pending booking confirms it.
        """
        booking = self._get(booking_id)

        booking.payment_status = payment_status
        if transaction_id:
            booking.transaction_id = transaction_id
        if payment_date is not None:
            booking.payment_date = to_naive_utc(payment_date)
        elif payment_status == PaymentStatus.COMPLETED and booking.payment_date is None:
            booking.payment_date = utcnow()

        promoted = False
        if payment_status == PaymentStatus.COMPLETED and booking.booking_status == BookingStatus.PENDING:
            booking.booking_status = BookingStatus.CONFIRMED
            self._ensure_confirmation_number(booking)
            promoted = True

        self._save(booking)
        self._logger.info(
            "Booking payment updated",
            extra={
                "booking_id": booking.id,
                "payment_status": payment_status.value,
                "auto_confirmed": promoted,
            },
        )
        self._publish(booking, f"Booking {booking.booking_reference} payment status updated to {payment_status.value}")
        return booking

    # ==================== CANCELLATION ====================

    @track_performance("cancel_booking")
    def cancel(
        self,
        booking_id: str,
        reason: Optional[str] = None,
        refund_amount: Optional[Decimal] = None,
    ) -> Booking:
        """
        Cancel a booking and record the refund owed.

        The refund amount is supplied by the caller; nothing is computed.

        Raises:
            BookingNotFoundError: Unknown booking
            BookingAlreadyCancelledError: Booking is already cancelled
            BookingCompletedError: Guest has already checked out
            InvalidStatusTransitionError: Booking is checked in or a no-show (when enforced)
        """
        booking = self._get(booking_id)
        current = booking.booking_status

        if current == BookingStatus.CANCELLED:
            raise BookingAlreadyCancelledError()
        if current == BookingStatus.CHECKED_OUT:
            raise BookingCompletedError()
        if self.settings.ENFORCE_STATUS_TRANSITIONS and not can_transition(current, BookingStatus.CANCELLED):
            raise InvalidStatusTransitionError(current.value, BookingStatus.CANCELLED.value)

        refund = to_money(refund_amount) if refund_amount is not None else to_money(0)

        self._apply_status(booking, BookingStatus.CANCELLED)
        booking.cancelled_at = utcnow()
        booking.cancellation_reason = reason or DEFAULT_CANCELLATION_REASON
        booking.refund_amount = refund
        booking.refund_status = RefundStatus.PENDING if refund > 0 else RefundStatus.NOT_APPLICABLE

        self._save(booking)
        self._logger.info(
            "Booking cancelled",
            extra={
                "booking_id": booking.id,
                "previous_status": current.value,
                "refund_amount": str(refund),
            },
        )
        self._publish(booking, f"Booking {booking.booking_reference} cancelled")
        self.email_service.send_booking_cancellation(booking)
        return booking

    # ==================== STATISTICS ====================

    def stats(self, period_days: int = 30) -> BookingStats:
        """Counters over bookings created in the last ``period_days`` days."""
        now = utcnow()
        window = self.bookings.find_created_between(now - timedelta(days=period_days), now + timedelta(seconds=1))

        by_status: Dict[str, int] = {}
        for booking in window:
            key = booking.booking_status.value
            by_status[key] = by_status.get(key, 0) + 1

        total = len(window)
        cancelled = by_status.get(BookingStatus.CANCELLED.value, 0)
        revenue = sum(
            (b.total_amount for b in window if b.payment_status == PaymentStatus.COMPLETED),
            Decimal("0"),
        )
        today = self.clock()
        upcoming = self.bookings.find_check_ins_between(today, today + timedelta(days=1))
        recent = sorted(window, key=lambda b: b.created_at, reverse=True)[:5]

        return BookingStats(
            period_days=period_days,
            total_bookings=total,
            confirmed_bookings=by_status.get(BookingStatus.CONFIRMED.value, 0),
            cancelled_bookings=cancelled,
            cancellation_rate=round(cancelled / total * 100, 2) if total else 0.0,
            total_revenue=to_money(revenue),
            upcoming_check_ins=len(upcoming),
            status_breakdown=by_status,
            recent_bookings=[BookingResponse.model_validate(b) for b in recent],
        )

    # ==================== HELPERS ====================

    def _get(self, booking_id: str) -> Booking:
        booking = self.bookings.find_by_id(booking_id)
        if booking is None:
            raise BookingNotFoundError(booking_id)
        return booking

    def _save(self, booking: Booking) -> None:
        try:
            self._commit()
        except IntegrityError as e:
            self._rollback()
            if is_claim_violation(e):
                raise RoomNotAvailableError(booking.room_id) from e
            raise EntityAlreadyExistsError("Booking update conflicts with existing data") from e

    def _publish(self, booking: Booking, message: str) -> None:
        self.relay.publish(ADMIN_GROUP, EVENT_BOOKING_UPDATED, booking_event_payload(booking), message)
