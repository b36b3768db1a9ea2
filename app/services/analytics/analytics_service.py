"""
Admin analytics: dashboard counters, revenue series and booking
distributions.

Aggregation runs in Python over ORM rows so the same code serves
PostgreSQL and SQLite.
"""

from collections import OrderedDict
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Callable, Dict, Iterable, List, Optional

from sqlalchemy.orm import Session

from app.core.exceptions import ValidationError
from app.models.base.enums import PaymentStatus
from app.models.booking.booking import Booking
from app.repositories.booking.booking_repository import BookingRepository
from app.repositories.contact.contact_repository import ContactRepository
from app.repositories.room.room_repository import RoomRepository
from app.schemas.analytics.analytics import (
    BookingAnalytics,
    DashboardOverview,
    DashboardStats,
    PeriodFigures,
    RevenueAnalytics,
    RevenuePeriod,
    RevenuePoint,
    RoomOccupancy,
    RoomTypePopularity,
)
from app.schemas.booking.booking import BookingResponse
from app.schemas.contact.contact import ContactResponse
from app.services.base import BaseService, track_performance
from app.services.booking.booking_pricing_service import to_money
from app.utils.date_utils import day_start, month_start, utcnow, year_bounds

RECENT_ITEMS = 5

# year_bounds needs Jan 1 of the following year
MIN_REVENUE_YEAR = 1970
MAX_REVENUE_YEAR = 9998

BUCKET_FORMATS = {
    RevenuePeriod.DAILY: "%Y-%m-%d",
    RevenuePeriod.WEEKLY: "%Y-W%U",
    RevenuePeriod.MONTHLY: "%Y-%m",
    RevenuePeriod.YEARLY: "%Y",
}


def bucket_key(moment: datetime, period: RevenuePeriod) -> str:
    """Key of the revenue bucket ``moment`` falls in; weeks start on Sunday."""
    return moment.strftime(BUCKET_FORMATS[period])


def total_of(bookings: Iterable[Booking]) -> Decimal:
    return sum((b.total_amount for b in bookings), Decimal("0"))


def percentage(part: int, whole: int, places: int = 1) -> float:
    return round(part / whole * 100, places) if whole else 0.0


class AnalyticsService(BaseService):
    """Read-only reporting over bookings, rooms and contacts."""

    def __init__(
        self,
        db_session: Session,
        now: Callable[[], datetime] = utcnow,
        booking_repository: Optional[BookingRepository] = None,
        room_repository: Optional[RoomRepository] = None,
        contact_repository: Optional[ContactRepository] = None,
    ):
        super().__init__(db_session)
        self.now = now
        self.bookings = booking_repository or BookingRepository(db_session)
        self.rooms = room_repository or RoomRepository(db_session)
        self.contacts = contact_repository or ContactRepository(db_session)

    # ==================== REVENUE ====================

    @track_performance("revenue_analytics")
    def revenue(self, period: RevenuePeriod = RevenuePeriod.MONTHLY, year: Optional[int] = None) -> RevenueAnalytics:
        """
        Completed-payment revenue for ``year`` grouped by creation-time bucket.

        Buckets without bookings are omitted; buckets are in chronological order.
        """
        year = year if year is not None else self.now().year
        if not MIN_REVENUE_YEAR <= year <= MAX_REVENUE_YEAR:
            raise ValidationError("Year out of range", {"year": [str(year)]})

        start, end = year_bounds(year)
        paid = self.bookings.find_created_between(start, end, PaymentStatus.COMPLETED)

        buckets: Dict[str, List[Booking]] = OrderedDict()
        for booking in sorted(paid, key=lambda b: b.created_at):
            buckets.setdefault(bucket_key(booking.created_at, period), []).append(booking)

        points = []
        for key, members in buckets.items():
            revenue = total_of(members)
            points.append(
                RevenuePoint(
                    period=key,
                    revenue=to_money(revenue),
                    bookings=len(members),
                    average_booking_value=to_money(revenue / len(members)),
                )
            )

        return RevenueAnalytics(
            period=period,
            year=year,
            total_revenue=to_money(total_of(paid)),
            analytics=points,
        )

    # ==================== BOOKINGS ====================

    @track_performance("booking_analytics")
    def booking_analytics(self) -> BookingAnalytics:
        bookings = self.bookings.find_all_bookings()

        status_distribution: Dict[str, int] = {}
        popularity: Dict[str, Dict[str, object]] = {}
        party_sizes: Dict[int, int] = {}
        for booking in bookings:
            status = booking.booking_status.value
            status_distribution[status] = status_distribution.get(status, 0) + 1

            room_type = booking.room.type.value if booking.room else "unknown"
            entry = popularity.setdefault(room_type, {"bookings": 0, "revenue": Decimal("0")})
            entry["bookings"] += 1
            entry["revenue"] += booking.total_amount

            party_sizes[booking.number_of_guests] = party_sizes.get(booking.number_of_guests, 0) + 1

        ranked = sorted(popularity.items(), key=lambda item: (-item[1]["bookings"], item[0]))
        average_stay = (
            round(sum(b.number_of_nights for b in bookings) / len(bookings), 2) if bookings else 0.0
        )

        return BookingAnalytics(
            status_distribution=status_distribution,
            room_type_popularity=[
                RoomTypePopularity(room_type=name, bookings=data["bookings"], revenue=to_money(data["revenue"]))
                for name, data in ranked
            ],
            average_stay_duration=average_stay,
            guest_demographics=dict(sorted(party_sizes.items())),
        )

    # ==================== DASHBOARD ====================

    @track_performance("dashboard_stats")
    def dashboard(self) -> DashboardStats:
        now = self.now()
        today = now.date()
        tomorrow = day_start(today) + timedelta(days=1)

        todays = self.bookings.find_created_between(day_start(today), tomorrow)
        monthly = self.bookings.find_created_between(month_start(today), tomorrow)
        yearly_paid = self.bookings.find_created_between(
            year_bounds(today.year)[0], tomorrow, PaymentStatus.COMPLETED
        )

        total_rooms = self.rooms.count_rooms()
        occupied_rooms = len({b.room_id for b in self.bookings.find_occupying(today)})
        occupancy_rate = percentage(occupied_rooms, total_rooms)

        return DashboardStats(
            overview=DashboardOverview(
                total_rooms=total_rooms,
                total_bookings=self.bookings.count(),
                total_contacts=self.contacts.count(),
                active_bookings=self.bookings.count_active(today),
                occupancy_rate=occupancy_rate,
            ),
            today=PeriodFigures(
                bookings=len(todays),
                revenue=to_money(total_of(self._paid(todays))),
                contacts=self.contacts.count_created_since(day_start(today)),
            ),
            monthly=PeriodFigures(
                bookings=len(monthly),
                revenue=to_money(total_of(self._paid(monthly))),
            ),
            yearly=PeriodFigures(
                bookings=len(yearly_paid),
                revenue=to_money(total_of(yearly_paid)),
            ),
            recent_bookings=[
                BookingResponse.model_validate(b) for b in self.bookings.find_recent(RECENT_ITEMS)
            ],
            pending_contacts=[
                ContactResponse.model_validate(c) for c in self.contacts.find_pending(RECENT_ITEMS)
            ],
            room_occupancy=RoomOccupancy(
                total=total_rooms,
                occupied=occupied_rooms,
                available=total_rooms - occupied_rooms,
                rate=occupancy_rate,
            ),
        )

    @staticmethod
    def _paid(bookings: Iterable[Booking]) -> List[Booking]:
        return [b for b in bookings if b.payment_status == PaymentStatus.COMPLETED]
