# app/repositories/booking/booking_repository.py
"""
Booking repository.

Lookup by reference, the overlap query behind availability checks,
room-night claims, admin search and the date-window queries used by
statistics and maintenance.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import List, Optional, Sequence

from sqlalchemy import delete, desc, or_, select
from sqlalchemy.orm import Session

from app.models.base.enums import (
    ACTIVE_BOOKING_STATUSES,
    BLOCKING_BOOKING_STATUSES,
    BookingStatus,
    PaymentStatus,
)
from app.models.booking.booking import Booking, RoomNight
from app.repositories.base.base_repository import BaseRepository, PageResult
from app.utils.date_utils import iter_nights


@dataclass
class BookingSearchCriteria:
    """Admin search criteria for bookings."""

    status: Optional[BookingStatus] = None
    payment_status: Optional[PaymentStatus] = None
    room_id: Optional[str] = None
    guest_email: Optional[str] = None
    check_in_from: Optional[date] = None
    check_in_to: Optional[date] = None
    search: Optional[str] = None


class BookingRepository(BaseRepository[Booking]):
    """Repository for bookings and their room-night claims."""

    def __init__(self, db: Session):
        super().__init__(Booking, db)

    # ==================== Lookups ====================

    def find_by_reference(self, booking_reference: str) -> Optional[Booking]:
        return self.find_one_by_criteria({"booking_reference": booking_reference})

    def find_by_confirmation_number(self, confirmation_number: str) -> Optional[Booking]:
        return self.find_one_by_criteria({"confirmation_number": confirmation_number})

    def search(self, criteria: BookingSearchCriteria, page: int, limit: int) -> PageResult[Booking]:
        stmt = self._base_query()

        if criteria.status is not None:
            stmt = stmt.where(Booking.booking_status == criteria.status)
        if criteria.payment_status is not None:
            stmt = stmt.where(Booking.payment_status == criteria.payment_status)
        if criteria.room_id:
            stmt = stmt.where(Booking.room_id == criteria.room_id)
        if criteria.guest_email:
            stmt = stmt.where(Booking.guest_email == criteria.guest_email.lower())
        if criteria.check_in_from:
            stmt = stmt.where(Booking.check_in_date >= criteria.check_in_from)
        if criteria.check_in_to:
            stmt = stmt.where(Booking.check_in_date <= criteria.check_in_to)
        if criteria.search:
            term = f"%{criteria.search.strip()}%"
            stmt = stmt.where(
                or_(
                    Booking.booking_reference.ilike(term),
                    Booking.confirmation_number.ilike(term),
                    Booking.guest_first_name.ilike(term),
                    Booking.guest_last_name.ilike(term),
                    Booking.guest_email.ilike(term),
                )
            )

        stmt = stmt.order_by(desc(Booking.created_at), desc(Booking.id))
        return self.paginate(stmt, page, limit)

    # ==================== Availability ====================

    def find_conflicting(
        self,
        room_id: str,
        check_in: date,
        check_out: date,
        exclude_booking_id: Optional[str] = None,
        statuses: Sequence[BookingStatus] = BLOCKING_BOOKING_STATUSES,
    ) -> List[Booking]:
        """
        Bookings on ``room_id`` in one of ``statuses`` whose stay intersects
        the half-open range ``[check_in, check_out)``.
        """
        stmt = self._base_query().where(
            Booking.room_id == room_id,
            Booking.booking_status.in_(statuses),
            Booking.check_in_date < check_out,
            Booking.check_out_date > check_in,
        )
        if exclude_booking_id:
            stmt = stmt.where(Booking.id != exclude_booking_id)
        return self._scalars(stmt)

    def add_claims(self, booking: Booking) -> List[RoomNight]:
        """Stage one claim per night; the caller flushes or commits."""
        claims = [
            RoomNight(room_id=booking.room_id, night=night)
            for night in iter_nights(booking.check_in_date, booking.check_out_date)
        ]
        booking.nights.extend(claims)
        return claims

    def release_claims(self, booking: Booking) -> int:
        """Drop every claim the booking holds; the caller commits."""
        released = len(booking.nights)
        booking.nights.clear()
        return released

    def count_active(self, today: date, room_id: Optional[str] = None) -> int:
        """Confirmed or checked-in bookings that have not yet ended."""
        stmt = self._base_query().where(
            Booking.booking_status.in_(ACTIVE_BOOKING_STATUSES),
            Booking.check_out_date >= today,
        )
        if room_id:
            stmt = stmt.where(Booking.room_id == room_id)
        return self.count(stmt)

    def count_active_for_room(self, room_id: str, today: date) -> int:
        return self.count_active(today, room_id)

    # ==================== Reporting windows ====================

    def find_created_between(
        self,
        start: datetime,
        end: datetime,
        payment_status: Optional[PaymentStatus] = None,
    ) -> List[Booking]:
        stmt = self._base_query().where(Booking.created_at >= start, Booking.created_at < end)
        if payment_status is not None:
            stmt = stmt.where(Booking.payment_status == payment_status)
        return self._scalars(stmt)

    def find_all_bookings(self) -> List[Booking]:
        return self._scalars(self._base_query())

    def find_recent(self, limit: int = 5) -> List[Booking]:
        stmt = self._base_query().order_by(desc(Booking.created_at)).limit(limit)
        return self._scalars(stmt)

    def find_check_ins_between(self, start: date, end: date) -> List[Booking]:
        """Confirmed bookings arriving within ``[start, end]``."""
        stmt = self._base_query().where(
            Booking.booking_status == BookingStatus.CONFIRMED,
            Booking.check_in_date >= start,
            Booking.check_in_date <= end,
        )
        return self._scalars(stmt)

    def find_occupying(self, day: date) -> List[Booking]:
        """Active bookings whose stay covers ``day``."""
        stmt = self._base_query().where(
            Booking.booking_status.in_(ACTIVE_BOOKING_STATUSES),
            Booking.check_in_date <= day,
            Booking.check_out_date > day,
        )
        return self._scalars(stmt)

    # ==================== Maintenance ====================

    def delete_closed_before(self, cutoff: datetime, statuses: Sequence[BookingStatus]) -> int:
        """Hard delete closed bookings created before ``cutoff``; the caller commits."""
        ids = list(
            self.db.execute(
                select(Booking.id).where(
                    Booking.booking_status.in_(statuses),
                    Booking.created_at < cutoff,
                )
            ).scalars()
        )
        if not ids:
            return 0
        self.db.execute(delete(RoomNight).where(RoomNight.booking_id.in_(ids)))
        self.db.execute(delete(Booking).where(Booking.id.in_(ids)))
        return len(ids)
