# app/utils/date_utils.py
"""
Date and time utility functions used across the project.

Notes:
- Stored timestamps are naive datetimes in UTC; ``utcnow`` produces them.
- Stay ranges are half-open ``[check_in, check_out)`` date intervals.
"""

from __future__ import annotations

import math
from datetime import date, datetime, timedelta, timezone
from typing import Iterator, Tuple

UTC = timezone.utc


def now_utc() -> datetime:
    """Return current UTC datetime (timezone-aware)."""
    return datetime.now(UTC)


def utcnow() -> datetime:
    """Return current UTC datetime without tzinfo, the form stored in the database."""
    return now_utc().replace(tzinfo=None)


def today_utc() -> date:
    return now_utc().date()


def to_naive_utc(value: datetime) -> datetime:
    """Convert an aware datetime to naive UTC; naive values are assumed to be UTC already."""
    if value.tzinfo is None:
        return value
    return value.astimezone(UTC).replace(tzinfo=None)


def count_nights(check_in: date, check_out: date) -> int:
    """
    Number of nights between two dates, rounded up to whole days.

    Plain dates always differ by whole days; datetimes with a time part
    count a partial day as a full night.
    """
    delta = check_out - check_in
    return math.ceil(delta.total_seconds() / timedelta(days=1).total_seconds())


def ranges_overlap(a_start: date, a_end: date, b_start: date, b_end: date) -> bool:
    """Half-open interval intersection: touching ranges do not overlap."""
    return a_start < b_end and a_end > b_start


def iter_nights(check_in: date, check_out: date) -> Iterator[date]:
    """Yield each night of a stay, check-in inclusive and check-out exclusive."""
    current = check_in
    while current < check_out:
        yield current
        current += timedelta(days=1)


def year_bounds(year: int) -> Tuple[datetime, datetime]:
    """Half-open ``[Jan 1, Jan 1 next year)`` bounds as naive UTC datetimes."""
    return datetime(year, 1, 1), datetime(year + 1, 1, 1)


def month_start(d: date) -> datetime:
    return datetime(d.year, d.month, 1)


def day_start(d: date) -> datetime:
    return datetime(d.year, d.month, d.day)
