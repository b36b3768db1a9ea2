# app/services/room/room_service.py
"""
Room catalog management and browsing.
"""

from datetime import date
from typing import Callable, List, Optional

from sqlalchemy.orm import Session

from app.core.exceptions import (
    InvalidDateRangeError,
    RoomHasActiveBookingsError,
    RoomNotFoundError,
)
from app.models.room.room import Room
from app.repositories.base.base_repository import PageResult
from app.repositories.booking.booking_repository import BookingRepository
from app.repositories.room.room_repository import RoomRepository, RoomSearchCriteria
from app.schemas.room.room import RoomCreate, RoomUpdate
from app.services.base import BaseService
from app.services.booking.booking_availability_service import (
    AvailabilityResult,
    BookingAvailabilityService,
)
from app.utils.date_utils import today_utc


class RoomService(BaseService):
    """
    Service for room CRUD, search and availability.

    Deletion is a soft delete and is refused while the room has confirmed
    or checked-in bookings that have not ended.
    """

    def __init__(
        self,
        db_session: Session,
        clock: Callable[[], date] = today_utc,
        room_repository: Optional[RoomRepository] = None,
        booking_repository: Optional[BookingRepository] = None,
    ):
        super().__init__(db_session)
        self.clock = clock
        self.rooms = room_repository or RoomRepository(db_session)
        self.bookings = booking_repository or BookingRepository(db_session)
        self.availability = BookingAvailabilityService(db_session, self.rooms, self.bookings)

    # ==================== QUERIES ====================

    def list_rooms(self, criteria: RoomSearchCriteria, page: int, limit: int) -> PageResult[Room]:
        if (criteria.check_in is None) != (criteria.check_out is None):
            raise InvalidDateRangeError(
                "Both check_in and check_out are required to filter by dates",
                criteria.check_in,
                criteria.check_out,
            )
        if criteria.check_in and criteria.check_out <= criteria.check_in:
            raise InvalidDateRangeError(
                "Check-out date must be after check-in date",
                criteria.check_in,
                criteria.check_out,
            )
        return self.rooms.search(criteria, page, limit)

    def featured_rooms(self, limit: int = 6) -> List[Room]:
        return self.rooms.find_featured(limit)

    def get_room(self, room_id: str) -> Room:
        room = self.rooms.find_by_id(room_id)
        if room is None:
            raise RoomNotFoundError(room_id)
        return room

    def check_availability(self, room_id: str, check_in: date, check_out: date) -> AvailabilityResult:
        return self.availability.check(room_id, check_in, check_out)

    # ==================== COMMANDS ====================

    def create_room(self, payload: RoomCreate) -> Room:
        room = Room(**payload.model_dump())
        self.rooms.create(room)
        self._logger.info("Room created", extra={"room_id": room.id, "room_name": room.name})
        return room

    def update_room(self, room_id: str, payload: RoomUpdate) -> Room:
        room = self.get_room(room_id)
        changes = payload.model_dump(exclude_unset=True)
        self.rooms.update(room, changes)
        self._logger.info(
            "Room updated",
            extra={"room_id": room.id, "fields": sorted(changes.keys())},
        )
        return room

    def delete_room(self, room_id: str) -> None:
        room = self.get_room(room_id)
        active = self.bookings.count_active_for_room(room.id, self.clock())
        if active:
            raise RoomHasActiveBookingsError(room.id, active)
        self.rooms.delete(room)
        self._logger.info("Room deleted", extra={"room_id": room.id})
