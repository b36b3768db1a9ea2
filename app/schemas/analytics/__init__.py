from app.schemas.analytics.analytics import (
    BookingAnalytics,
    CleanupReport,
    DashboardOverview,
    DashboardStats,
    PeriodFigures,
    RevenueAnalytics,
    RevenuePeriod,
    RevenuePoint,
    RoomOccupancy,
    RoomTypePopularity,
)

__all__ = [
    "BookingAnalytics",
    "CleanupReport",
    "DashboardOverview",
    "DashboardStats",
    "PeriodFigures",
    "RevenueAnalytics",
    "RevenuePeriod",
    "RevenuePoint",
    "RoomOccupancy",
    "RoomTypePopularity",
]
