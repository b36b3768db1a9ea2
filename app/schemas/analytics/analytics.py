# --- File: app/schemas/analytics/analytics.py ---
"""
Admin analytics schemas: dashboard counters, revenue series and booking
distributions.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, List

from pydantic import Field

from app.schemas.booking.booking import BookingResponse
from app.schemas.common.base import BaseSchema, Money
from app.schemas.contact.contact import ContactResponse

__all__ = [
    "RevenuePeriod",
    "RevenuePoint",
    "RevenueAnalytics",
    "RoomTypePopularity",
    "BookingAnalytics",
    "DashboardOverview",
    "PeriodFigures",
    "RoomOccupancy",
    "DashboardStats",
    "CleanupReport",
]


class RevenuePeriod(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class RevenuePoint(BaseSchema):
    period: str = Field(..., description="Bucket key, e.g. 2025-08 for monthly")
    revenue: Money
    bookings: int
    average_booking_value: Money


class RevenueAnalytics(BaseSchema):
    period: RevenuePeriod
    year: int
    total_revenue: Money
    analytics: List[RevenuePoint] = Field(default_factory=list)


class RoomTypePopularity(BaseSchema):
    room_type: str
    bookings: int
    revenue: Money


class BookingAnalytics(BaseSchema):
    status_distribution: Dict[str, int] = Field(default_factory=dict)
    room_type_popularity: List[RoomTypePopularity] = Field(default_factory=list)
    average_stay_duration: float
    guest_demographics: Dict[int, int] = Field(
        default_factory=dict,
        description="Number of bookings per party size",
    )


class DashboardOverview(BaseSchema):
    total_rooms: int
    total_bookings: int
    total_contacts: int
    active_bookings: int
    occupancy_rate: float


class PeriodFigures(BaseSchema):
    bookings: int
    revenue: Money
    contacts: int = 0


class RoomOccupancy(BaseSchema):
    total: int
    occupied: int
    available: int
    rate: float


class DashboardStats(BaseSchema):
    overview: DashboardOverview
    today: PeriodFigures
    monthly: PeriodFigures
    yearly: PeriodFigures
    recent_bookings: List[BookingResponse] = Field(default_factory=list)
    pending_contacts: List[ContactResponse] = Field(default_factory=list)
    room_occupancy: RoomOccupancy


class CleanupReport(BaseSchema):
    contacts_removed: int
    bookings_removed: int
