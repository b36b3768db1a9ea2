"""
Room model.

A room is a bookable unit of the hotel's catalog. Rooms are soft-deleted
so that historical bookings keep resolving their room.
"""

from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Enum,
    Index,
    Integer,
    JSON,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from app.models.base.base_model import SoftDeleteModel
from app.models.base.enums import BedType, RoomType, RoomView, RoomWing

if TYPE_CHECKING:
    from app.models.booking.booking import Booking

__all__ = ["Room"]


class Room(SoftDeleteModel):
    """
    Hotel room definition.

    Attributes:
        name: Display name
        type: Room category
        price_per_night: Nightly rate in the hotel currency
        max_occupancy: Maximum number of guests
        size: Floor area in square feet
        amenities: List of amenity labels
        images: List of ``{"url", "alt", "is_primary"}`` entries
        is_available: Manual availability switch
    """

    __tablename__ = "rooms"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)

    type: Mapped[RoomType] = mapped_column(
        Enum(RoomType),
        nullable=False,
        index=True,
    )

    price_per_night: Mapped[Decimal] = mapped_column(
        Numeric(10, 2),
        nullable=False,
        comment="Nightly rate",
    )

    max_occupancy: Mapped[int] = mapped_column(Integer, nullable=False)
    size: Mapped[int] = mapped_column(Integer, nullable=False, comment="Square feet")

    bed_type: Mapped[BedType] = mapped_column(Enum(BedType), nullable=False)

    amenities: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    images: Mapped[List[Dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)

    is_available: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)
    is_featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    is_popular: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)

    rating: Mapped[Decimal] = mapped_column(Numeric(2, 1), nullable=False, default=Decimal("4.5"))
    review_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Location
    floor: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    wing: Mapped[Optional[RoomWing]] = mapped_column(Enum(RoomWing), nullable=True)
    view: Mapped[Optional[RoomView]] = mapped_column(Enum(RoomView), nullable=True)

    # Policies
    check_in_policy: Mapped[str] = mapped_column(String(20), nullable=False, default="3:00 PM")
    check_out_policy: Mapped[str] = mapped_column(String(20), nullable=False, default="11:00 AM")
    cancellation_policy: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        default="Free cancellation up to 24 hours before check-in",
    )
    smoking_allowed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    pets_allowed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    bookings: Mapped[List["Booking"]] = relationship(
        "Booking",
        back_populates="room",
        lazy="select",
    )

    __table_args__ = (
        CheckConstraint("price_per_night >= 0", name="ck_room_price_positive"),
        CheckConstraint("max_occupancy BETWEEN 1 AND 10", name="ck_room_occupancy_range"),
        CheckConstraint("size >= 10", name="ck_room_size_min"),
        Index("ix_rooms_type_price", "type", "price_per_night"),
    )

    @validates("images")
    def _normalize_primary_image(self, key: str, images: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Exactly one image is primary whenever any image exists."""
        images = [dict(img) for img in images or []]
        if not images:
            return images
        primaries = [img for img in images if img.get("is_primary")]
        if len(primaries) != 1:
            for index, img in enumerate(images):
                img["is_primary"] = index == 0
        return images

    @property
    def primary_image(self) -> Optional[str]:
        for img in self.images or []:
            if img.get("is_primary"):
                return img.get("url")
        return self.images[0]["url"] if self.images else None

    def __repr__(self) -> str:
        return f"<Room(id={self.id}, name={self.name}, type={self.type})>"
