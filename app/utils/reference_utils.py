# app/utils/reference_utils.py
"""
Human-readable identifiers for bookings.

Both identifiers are built from the current epoch milliseconds plus a
random upper-case base-36 suffix, e.g. ``BK1722470400000K3J9Q2ZXA``.
"""

import secrets
import string
import time
from typing import Optional

BASE36_ALPHABET = string.digits + string.ascii_uppercase

BOOKING_REFERENCE_PREFIX = "BK"
BOOKING_REFERENCE_SUFFIX_LENGTH = 9

CONFIRMATION_PREFIX = "CONF"
CONFIRMATION_SUFFIX_LENGTH = 6


def _random_base36(length: int) -> str:
    return "".join(secrets.choice(BASE36_ALPHABET) for _ in range(length))


def _epoch_millis(now_ms: Optional[int] = None) -> int:
    return now_ms if now_ms is not None else int(time.time() * 1000)


def generate_booking_reference(now_ms: Optional[int] = None) -> str:
    return (
        f"{BOOKING_REFERENCE_PREFIX}{_epoch_millis(now_ms)}"
        f"{_random_base36(BOOKING_REFERENCE_SUFFIX_LENGTH)}"
    )


def generate_confirmation_number(now_ms: Optional[int] = None) -> str:
    return (
        f"{CONFIRMATION_PREFIX}{_epoch_millis(now_ms)}"
        f"{_random_base36(CONFIRMATION_SUFFIX_LENGTH)}"
    )
