# --- File: app/schemas/room/room.py ---
"""
Room schemas for catalog management and browsing.
"""

from __future__ import annotations

from datetime import date as Date
from decimal import Decimal
from typing import List, Optional

from pydantic import Field, computed_field, field_validator

from app.models.base.enums import BedType, RoomType, RoomView, RoomWing
from app.schemas.common.base import (
    BaseCreateSchema,
    BaseResponseSchema,
    BaseSchema,
    BaseUpdateSchema,
    Money,
)

__all__ = [
    "RoomImage",
    "RoomCreate",
    "RoomUpdate",
    "RoomResponse",
    "RoomSummary",
    "RoomAvailabilityResponse",
]


class RoomImage(BaseSchema):
    url: str = Field(..., min_length=1, max_length=500)
    alt: str = Field(default="Room image", max_length=200)
    is_primary: bool = False


def _clean_amenities(values: Optional[List[str]]) -> Optional[List[str]]:
    if values is None:
        return values
    cleaned = []
    for item in values:
        item = item.strip()
        if not 1 <= len(item) <= 50:
            raise ValueError("Each amenity must be between 1 and 50 characters")
        cleaned.append(item)
    return cleaned


class RoomCreate(BaseCreateSchema):
    """Payload for adding a room to the catalog."""

    name: str = Field(..., min_length=2, max_length=100)
    description: str = Field(..., min_length=10, max_length=1000)
    type: RoomType
    price_per_night: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    max_occupancy: int = Field(..., ge=1, le=10)
    size: int = Field(..., ge=10, description="Square feet")
    bed_type: BedType
    amenities: List[str] = Field(default_factory=list)
    images: List[RoomImage] = Field(default_factory=list)
    is_available: bool = True
    is_featured: bool = False
    is_popular: bool = False
    rating: Decimal = Field(default=Decimal("4.5"), ge=1, le=5)
    review_count: int = Field(default=0, ge=0)
    floor: Optional[int] = Field(default=None, ge=1, le=50)
    wing: Optional[RoomWing] = None
    view: Optional[RoomView] = None
    check_in_policy: str = Field(default="3:00 PM", max_length=20)
    check_out_policy: str = Field(default="11:00 AM", max_length=20)
    cancellation_policy: str = Field(
        default="Free cancellation up to 24 hours before check-in",
        max_length=255,
    )
    smoking_allowed: bool = False
    pets_allowed: bool = False

    @field_validator("amenities")
    @classmethod
    def validate_amenities(cls, v: List[str]) -> List[str]:
        return _clean_amenities(v)


class RoomUpdate(BaseUpdateSchema):
    """Partial room update; omitted fields are left untouched."""

    name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    description: Optional[str] = Field(default=None, min_length=10, max_length=1000)
    type: Optional[RoomType] = None
    price_per_night: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    max_occupancy: Optional[int] = Field(default=None, ge=1, le=10)
    size: Optional[int] = Field(default=None, ge=10)
    bed_type: Optional[BedType] = None
    amenities: Optional[List[str]] = None
    images: Optional[List[RoomImage]] = None
    is_available: Optional[bool] = None
    is_featured: Optional[bool] = None
    is_popular: Optional[bool] = None
    rating: Optional[Decimal] = Field(default=None, ge=1, le=5)
    review_count: Optional[int] = Field(default=None, ge=0)
    floor: Optional[int] = Field(default=None, ge=1, le=50)
    wing: Optional[RoomWing] = None
    view: Optional[RoomView] = None
    check_in_policy: Optional[str] = Field(default=None, max_length=20)
    check_out_policy: Optional[str] = Field(default=None, max_length=20)
    cancellation_policy: Optional[str] = Field(default=None, max_length=255)
    smoking_allowed: Optional[bool] = None
    pets_allowed: Optional[bool] = None

    @field_validator("amenities")
    @classmethod
    def validate_amenities(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        return _clean_amenities(v)


class RoomSummary(BaseSchema):
    """Compact room view embedded in bookings."""

    id: str
    name: str
    type: RoomType
    price_per_night: Money
    max_occupancy: int
    bed_type: BedType
    primary_image: Optional[str] = None


class RoomResponse(BaseResponseSchema):
    name: str
    description: str
    type: RoomType
    price_per_night: Money
    max_occupancy: int
    size: int
    bed_type: BedType
    amenities: List[str]
    images: List[RoomImage]
    primary_image: Optional[str] = None
    is_available: bool
    is_featured: bool
    is_popular: bool
    rating: Money
    review_count: int
    floor: Optional[int] = None
    wing: Optional[RoomWing] = None
    view: Optional[RoomView] = None
    check_in_policy: str
    check_out_policy: str
    cancellation_policy: str
    smoking_allowed: bool
    pets_allowed: bool


class RoomAvailabilityResponse(BaseSchema):
    room_id: str
    check_in: Date
    check_out: Date
    is_available: bool
    conflicting_bookings: int = Field(..., ge=0)

    @computed_field  # type: ignore[misc]
    @property
    def nights(self) -> int:
        return (self.check_out - self.check_in).days
