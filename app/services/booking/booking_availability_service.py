# app/services/booking/booking_availability_service.py
"""
Room availability checks over half-open ``[check_in, check_out)`` ranges.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session

from app.core.exceptions import InvalidDateRangeError, RoomNotFoundError
from app.models.booking.booking import Booking
from app.models.room.room import Room
from app.repositories.booking.booking_repository import BookingRepository
from app.repositories.room.room_repository import RoomRepository
from app.services.base import BaseService


@dataclass
class AvailabilityResult:
    room_id: str
    check_in: date
    check_out: date
    is_available: bool
    conflicts: List[Booking] = field(default_factory=list)

    @property
    def conflicting_bookings(self) -> int:
        return len(self.conflicts)


class BookingAvailabilityService(BaseService):
    """
    Answers "can this room be booked for these dates".

    A room is available when it exists, its availability flag is on and no
    pending, confirmed or checked-in booking intersects the range.
    Touching ranges (one check-out day equal to another's check-in day)
    do not conflict.
    """

    def __init__(
        self,
        db_session: Session,
        room_repository: Optional[RoomRepository] = None,
        booking_repository: Optional[BookingRepository] = None,
    ):
        super().__init__(db_session)
        self.rooms = room_repository or RoomRepository(db_session)
        self.bookings = booking_repository or BookingRepository(db_session)

    def check(
        self,
        room_id: str,
        check_in: date,
        check_out: date,
        exclude_booking_id: Optional[str] = None,
    ) -> AvailabilityResult:
        """
        Raises:
            RoomNotFoundError: Unknown or deleted room
            InvalidDateRangeError: ``check_out`` is not after ``check_in``
        """
        if check_out <= check_in:
            raise InvalidDateRangeError("Check-out date must be after check-in date", check_in, check_out)

        room = self.rooms.find_by_id(room_id)
        if room is None:
            raise RoomNotFoundError(room_id)

        return self._evaluate(room, check_in, check_out, exclude_booking_id)

    def is_available(
        self,
        room_id: str,
        check_in: date,
        check_out: date,
        exclude_booking_id: Optional[str] = None,
    ) -> bool:
        """Boolean form of :meth:`check`; unknown rooms are simply unavailable."""
        if check_out <= check_in:
            return False
        room = self.rooms.find_by_id(room_id)
        if room is None:
            return False
        return self._evaluate(room, check_in, check_out, exclude_booking_id).is_available

    def _evaluate(
        self,
        room: Room,
        check_in: date,
        check_out: date,
        exclude_booking_id: Optional[str],
    ) -> AvailabilityResult:
        conflicts = self.bookings.find_conflicting(
            room.id, check_in, check_out, exclude_booking_id=exclude_booking_id
        )
        return AvailabilityResult(
            room_id=room.id,
            check_in=check_in,
            check_out=check_out,
            is_available=bool(room.is_available) and not conflicts,
            conflicts=conflicts,
        )
