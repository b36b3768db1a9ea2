"""
Utility package initialization and exports
"""

from .date_utils import (
    count_nights,
    iter_nights,
    now_utc,
    ranges_overlap,
    today_utc,
    utcnow,
)
from .reference_utils import (
    generate_booking_reference,
    generate_confirmation_number,
)

__all__ = [
    "count_nights",
    "iter_nights",
    "now_utc",
    "ranges_overlap",
    "today_utc",
    "utcnow",
    "generate_booking_reference",
    "generate_confirmation_number",
]
