# app/repositories/room/room_repository.py
"""
Room repository.

Catalog search with attribute filters, optional date-range availability
filtering and sorting.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import and_, asc, desc, exists, select
from sqlalchemy.orm import Session
from sqlalchemy.sql import Select

from app.models.base.enums import BLOCKING_BOOKING_STATUSES, RoomType
from app.models.booking.booking import Booking
from app.models.room.room import Room
from app.repositories.base.base_repository import BaseRepository, PageResult

SORTABLE_FIELDS = {
    "price_per_night": Room.price_per_night,
    "rating": Room.rating,
    "name": Room.name,
    "max_occupancy": Room.max_occupancy,
    "size": Room.size,
    "created_at": Room.created_at,
}


@dataclass
class RoomSearchCriteria:
    """Filters accepted by the room listing."""

    type: Optional[RoomType] = None
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
    max_occupancy: Optional[int] = None
    amenities: List[str] = field(default_factory=list)
    is_available: Optional[bool] = None
    is_featured: Optional[bool] = None
    is_popular: Optional[bool] = None
    check_in: Optional[date] = None
    check_out: Optional[date] = None
    sort: str = "price_per_night"


def conflicting_booking_clause(room_id_column, check_in: date, check_out: date):
    """
    Correlated condition: a blocking booking on the room intersects
    ``[check_in, check_out)``.
    """
    return exists().where(
        and_(
            Booking.room_id == room_id_column,
            Booking.booking_status.in_(BLOCKING_BOOKING_STATUSES),
            Booking.check_in_date < check_out,
            Booking.check_out_date > check_in,
        )
    )


class RoomRepository(BaseRepository[Room]):
    """Repository for the room catalog."""

    def __init__(self, db: Session):
        super().__init__(Room, db)

    def search(self, criteria: RoomSearchCriteria, page: int, limit: int) -> PageResult[Room]:
        stmt = self._apply_sort(self._build_search(criteria), criteria.sort)
        if not criteria.amenities:
            return self.paginate(stmt, page, limit)

        # Amenities live in a JSON list; match them in Python, then page
        rooms = self.filter_by_amenities(self._scalars(stmt), criteria.amenities)
        start = (page - 1) * limit
        return PageResult(items=rooms[start:start + limit], total=len(rooms), page=page, limit=limit)

    def find_featured(self, limit: int = 6) -> List[Room]:
        stmt = (
            self._base_query()
            .where(Room.is_featured.is_(True), Room.is_available.is_(True))
            .order_by(desc(Room.rating), asc(Room.price_per_night))
            .limit(limit)
        )
        return self._scalars(stmt)

    def count_rooms(self, available_only: bool = False) -> int:
        stmt = self._base_query()
        if available_only:
            stmt = stmt.where(Room.is_available.is_(True))
        return self.count(stmt)

    def _build_search(self, criteria: RoomSearchCriteria) -> Select:
        stmt = self._base_query()

        if criteria.type is not None:
            stmt = stmt.where(Room.type == criteria.type)
        if criteria.min_price is not None:
            stmt = stmt.where(Room.price_per_night >= criteria.min_price)
        if criteria.max_price is not None:
            stmt = stmt.where(Room.price_per_night <= criteria.max_price)
        if criteria.max_occupancy is not None:
            # Rooms that fit at least this many guests
            stmt = stmt.where(Room.max_occupancy >= criteria.max_occupancy)
        if criteria.is_available is not None:
            stmt = stmt.where(Room.is_available.is_(criteria.is_available))
        if criteria.is_featured is not None:
            stmt = stmt.where(Room.is_featured.is_(criteria.is_featured))
        if criteria.is_popular is not None:
            stmt = stmt.where(Room.is_popular.is_(criteria.is_popular))
        if criteria.check_in and criteria.check_out:
            stmt = stmt.where(
                Room.is_available.is_(True),
                ~conflicting_booking_clause(Room.id, criteria.check_in, criteria.check_out),
            )
        return stmt

    def _apply_sort(self, stmt: Select, sort: str) -> Select:
        descending = sort.startswith("-")
        column = SORTABLE_FIELDS.get(sort.lstrip("-"), Room.price_per_night)
        return stmt.order_by(desc(column) if descending else asc(column), asc(Room.id))

    def filter_by_amenities(self, rooms: List[Room], amenities: List[str]) -> List[Room]:
        """Keep rooms offering every requested amenity (case-insensitive)."""
        wanted = {a.strip().lower() for a in amenities if a.strip()}
        if not wanted:
            return rooms
        return [
            room for room in rooms
            if wanted.issubset({a.lower() for a in (room.amenities or [])})
        ]
