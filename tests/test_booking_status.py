from datetime import date, datetime, timezone
from decimal import Decimal

import pytest
from sqlalchemy import func, select

from app.core.exceptions import (
    BookingAlreadyCancelledError,
    BookingCompletedError,
    BookingNotFoundError,
    InvalidStatusTransitionError,
    RoomNotAvailableError,
)
from app.core.notifications import EVENT_BOOKING_UPDATED
from app.models.base.enums import BookingStatus, PaymentStatus, RefundStatus
from app.models.booking.booking import RoomNight
from app.services.booking import BookingStatusService
from app.services.booking.booking_status_service import ALLOWED_TRANSITIONS, can_transition

from conftest import TODAY


def claims_for(db, booking):
    return db.execute(
        select(func.count()).select_from(RoomNight).where(RoomNight.booking_id == booking.id)
    ).scalar_one()



def cancellation_snapshot(db, booking):
    db.refresh(booking)
    return {
        "booking_status": booking.booking_status,
        "cancelled_at": booking.cancelled_at,
        "cancellation_reason": booking.cancellation_reason,
        "refund_amount": booking.refund_amount,
        "refund_status": booking.refund_status,
        "claims": claims_for(db, booking),
    }


@pytest.fixture
def pending(booking_factory, room):
    return booking_factory(room, date(2025, 8, 1), date(2025, 8, 3), booking_status=BookingStatus.PENDING)


@pytest.fixture
def confirmed(booking_factory, room):
    return booking_factory(room, date(2025, 8, 1), date(2025, 8, 3), booking_status=BookingStatus.CONFIRMED)


class TestTransitionTable:
    def test_terminal_statuses_allow_nothing(self):
        for status in (BookingStatus.CHECKED_OUT, BookingStatus.CANCELLED, BookingStatus.NO_SHOW):
            assert ALLOWED_TRANSITIONS[status] == frozenset()

    def test_reasserting_status_is_allowed(self):
        assert all(can_transition(status, status) for status in BookingStatus)

    def test_cannot_skip_check_in(self):
        assert not can_transition(BookingStatus.CONFIRMED, BookingStatus.CHECKED_OUT)
        assert not can_transition(BookingStatus.PENDING, BookingStatus.CHECKED_IN)


class TestUpdateStatus:
    def test_confirm_assigns_confirmation_number_once(self, status_service, pending):
        booking = status_service.update_status(pending.id, BookingStatus.CONFIRMED)
        number = booking.confirmation_number

        booking = status_service.update_status(pending.id, BookingStatus.CONFIRMED)

        assert number.startswith("CONF")
        assert booking.confirmation_number == number

    def test_full_stay_stamps_times_and_releases_claims(self, status_service, confirmed, db):
        booking = status_service.update_status(confirmed.id, BookingStatus.CHECKED_IN)
        checked_in_at = booking.check_in_time
        assert checked_in_at is not None
        assert claims_for(db, booking) == 2

        booking = status_service.update_status(confirmed.id, BookingStatus.CHECKED_OUT, notes="Late checkout")

        assert booking.check_in_time == checked_in_at
        assert booking.check_out_time is not None
        assert booking.notes == "Late checkout"
        assert claims_for(db, booking) == 0

    def test_no_show_releases_claims(self, status_service, confirmed, db):
        status_service.update_status(confirmed.id, BookingStatus.NO_SHOW)

        assert claims_for(db, confirmed) == 0

    def test_invalid_transition_leaves_booking_untouched(self, status_service, pending, db, relay):
        with pytest.raises(InvalidStatusTransitionError) as exc_info:
            status_service.update_status(pending.id, BookingStatus.CHECKED_OUT)

        db.refresh(pending)
        assert exc_info.value.status_code == 400
        assert pending.booking_status == BookingStatus.PENDING
        assert claims_for(db, pending) == 2
        assert relay.events == []

    def test_publishes_booking_updated(self, status_service, pending, relay):
        status_service.update_status(pending.id, BookingStatus.CONFIRMED)

        event = relay.events[-1]
        assert event["event"] == EVENT_BOOKING_UPDATED
        assert event["message"] == f"Booking {pending.booking_reference} status updated to confirmed"
        assert event["data"]["booking_status"] == "confirmed"

    def test_unknown_booking(self, status_service):
        with pytest.raises(BookingNotFoundError):
            status_service.update_status("missing", BookingStatus.CONFIRMED)

    def test_permissive_mode_accepts_any_status(self, db, settings, relay, email_service, pending):
        settings.ENFORCE_STATUS_TRANSITIONS = False
        service = BookingStatusService(db, settings, relay, email_service, clock=lambda: TODAY)

        booking = service.update_status(pending.id, BookingStatus.CHECKED_OUT)

        assert booking.booking_status == BookingStatus.CHECKED_OUT
        assert claims_for(db, booking) == 0

    def test_permissive_reactivation_reclaims_nights(self, db, settings, relay, email_service, booking_factory, room):
        settings.ENFORCE_STATUS_TRANSITIONS = False
        service = BookingStatusService(db, settings, relay, email_service, clock=lambda: TODAY)
        cancelled = booking_factory(room, date(2025, 8, 1), date(2025, 8, 3), booking_status=BookingStatus.CANCELLED)

        booking = service.update_status(cancelled.id, BookingStatus.CONFIRMED)

        assert booking.booking_status == BookingStatus.CONFIRMED
        assert claims_for(db, booking) == 2

    def test_permissive_reactivation_refused_when_nights_taken(
        self, db, settings, relay, email_service, booking_factory, room
    ):
        settings.ENFORCE_STATUS_TRANSITIONS = False
        service = BookingStatusService(db, settings, relay, email_service, clock=lambda: TODAY)
        cancelled = booking_factory(room, date(2025, 8, 1), date(2025, 8, 3), booking_status=BookingStatus.CANCELLED)
        booking_factory(room, date(2025, 8, 2), date(2025, 8, 4))

        with pytest.raises(RoomNotAvailableError):
            service.update_status(cancelled.id, BookingStatus.CONFIRMED)

        db.refresh(cancelled)
        assert cancelled.booking_status == BookingStatus.CANCELLED


class TestUpdatePayment:
    def test_completed_payment_confirms_pending_booking(self, status_service, pending):
        booking = status_service.update_payment(pending.id, PaymentStatus.COMPLETED, transaction_id="txn_123")

        assert booking.payment_status == PaymentStatus.COMPLETED
        assert booking.booking_status == BookingStatus.CONFIRMED
        assert booking.confirmation_number is not None
        assert booking.transaction_id == "txn_123"
        assert booking.payment_date is not None

    def test_completed_payment_keeps_later_status(self, status_service, booking_factory, room):
        checked_in = booking_factory(
            room, date(2025, 8, 1), date(2025, 8, 3), booking_status=BookingStatus.CHECKED_IN
        )

        booking = status_service.update_payment(checked_in.id, PaymentStatus.COMPLETED)

        assert booking.booking_status == BookingStatus.CHECKED_IN

    def test_other_payment_statuses_do_not_confirm(self, status_service, pending):
        booking = status_service.update_payment(pending.id, PaymentStatus.PROCESSING)

        assert booking.booking_status == BookingStatus.PENDING
        assert booking.payment_date is None

    def test_explicit_payment_date_is_stored_as_naive_utc(self, status_service, pending):
        paid_at = datetime(2025, 7, 2, 12, 30, tzinfo=timezone.utc)

        booking = status_service.update_payment(pending.id, PaymentStatus.COMPLETED, payment_date=paid_at)

        assert booking.payment_date == datetime(2025, 7, 2, 12, 30)


class TestCancel:
    def test_cancel_with_refund(self, status_service, confirmed, db, email_service):
        booking = status_service.cancel(confirmed.id, "Change of plans", Decimal("50"))

        assert booking.booking_status == BookingStatus.CANCELLED
        assert booking.cancelled_at is not None
        assert booking.cancellation_reason == "Change of plans"
        assert booking.refund_amount == Decimal("50.00")
        assert booking.refund_status == RefundStatus.PENDING
        assert claims_for(db, booking) == 0
        assert email_service.outbox[-1].subject.startswith("Booking Cancelled")

    def test_cancel_defaults(self, status_service, pending):
        booking = status_service.cancel(pending.id)

        assert booking.cancellation_reason == "Cancelled by guest"
        assert booking.refund_amount == Decimal("0.00")
        assert booking.refund_status == RefundStatus.NOT_APPLICABLE

    def test_cancel_twice_leaves_booking_untouched(self, status_service, pending, db, relay):
        status_service.cancel(pending.id, "First reason", Decimal("20"))
        before = cancellation_snapshot(db, pending)
        events_before = len(relay.events)

        with pytest.raises(BookingAlreadyCancelledError):
            status_service.cancel(pending.id, "Second reason", Decimal("80"))

        db.expire_all()
        assert cancellation_snapshot(db, pending) == before
        assert before["refund_amount"] == Decimal("20.00")
        assert len(relay.events) == events_before

    def test_cannot_cancel_checked_out(self, status_service, booking_factory, room, db, relay):
        done = booking_factory(room, date(2025, 8, 1), date(2025, 8, 3), booking_status=BookingStatus.CHECKED_OUT)
        before = cancellation_snapshot(db, done)

        with pytest.raises(BookingCompletedError, match="Cannot cancel completed booking"):
            status_service.cancel(done.id, "Too late", Decimal("10"))

        db.expire_all()
        assert cancellation_snapshot(db, done) == before
        assert before["booking_status"] == BookingStatus.CHECKED_OUT
        assert relay.events == []

    def test_cannot_cancel_checked_in_when_enforced(self, status_service, booking_factory, room):
        staying = booking_factory(room, date(2025, 8, 1), date(2025, 8, 3), booking_status=BookingStatus.CHECKED_IN)

        with pytest.raises(InvalidStatusTransitionError):
            status_service.cancel(staying.id)

    def test_cancelled_nights_can_be_rebooked(self, status_service, booking_service, confirmed, room):
        from conftest import make_booking_request

        status_service.cancel(confirmed.id)
        booking = booking_service.create_booking(make_booking_request(room.id, date(2025, 8, 1), date(2025, 8, 3)))

        assert booking.booking_status == BookingStatus.PENDING


class TestStats:
    def test_counts_recent_bookings(self, status_service, booking_service, room_factory):
        from conftest import make_booking_request

        first = booking_service.create_booking(
            make_booking_request(room_factory().id, date(2025, 8, 1), date(2025, 8, 2))
        )
        second = booking_service.create_booking(
            make_booking_request(room_factory().id, date(2025, 8, 1), date(2025, 8, 2))
        )
        status_service.update_payment(first.id, PaymentStatus.COMPLETED)
        status_service.cancel(second.id)

        stats = status_service.stats(30)

        assert stats.total_bookings == 2
        assert stats.confirmed_bookings == 1
        assert stats.cancelled_bookings == 1
        assert stats.cancellation_rate == 50.0
        assert stats.total_revenue == Decimal("137.00")
        assert len(stats.recent_bookings) == 2
