"""
Booking models for hotel reservations.

``Booking`` holds the guest, stay, pricing, payment and cancellation data
of a reservation. ``RoomNight`` rows are the per-night claims a booking
holds on its room; the unique constraint on ``(room_id, night)`` is what
keeps two live bookings from sharing a night.
"""

from datetime import date as Date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import (
    CheckConstraint,
    Date as SQLDate,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base.base_model import BaseModel, TimestampModel
from app.models.base.enums import (
    BookingStatus,
    PaymentMethod,
    PaymentStatus,
    RefundStatus,
)

if TYPE_CHECKING:
    from app.models.room.room import Room

__all__ = [
    "Booking",
    "RoomNight",
]


class Booking(TimestampModel):
    """
    Guest reservation of one room for a date range.

    Attributes:
        booking_reference: Unique human-readable reference (``BK...``)
        confirmation_number: Assigned the first time the booking is confirmed
        check_in_date: First night of the stay
        check_out_date: Departure day, exclusive
        booking_status: Lifecycle status
        payment_status: Payment processing status
    """

    __tablename__ = "bookings"

    booking_reference: Mapped[str] = mapped_column(
        String(50),
        unique=True,
        nullable=False,
        index=True,
        comment="Unique human-readable booking reference",
    )
    confirmation_number: Mapped[Optional[str]] = mapped_column(
        String(50),
        unique=True,
        nullable=True,
        index=True,
    )

    room_id: Mapped[str] = mapped_column(
        ForeignKey("rooms.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    # Guest information
    guest_first_name: Mapped[str] = mapped_column(String(50), nullable=False)
    guest_last_name: Mapped[str] = mapped_column(String(50), nullable=False)
    guest_email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    guest_phone: Mapped[str] = mapped_column(String(30), nullable=False)
    address_street: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    address_city: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    address_state: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    address_zip_code: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    address_country: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    special_requests: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Stay
    check_in_date: Mapped[Date] = mapped_column(SQLDate, nullable=False, index=True)
    check_out_date: Mapped[Date] = mapped_column(SQLDate, nullable=False, index=True)
    number_of_guests: Mapped[int] = mapped_column(Integer, nullable=False)
    number_of_nights: Mapped[int] = mapped_column(Integer, nullable=False)

    # Pricing (precision: 10, scale: 2)
    price_per_night: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    subtotal: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    taxes: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    fees: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    total_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="USD")

    # Payment
    payment_method: Mapped[PaymentMethod] = mapped_column(Enum(PaymentMethod), nullable=False)
    payment_status: Mapped[PaymentStatus] = mapped_column(
        Enum(PaymentStatus),
        nullable=False,
        default=PaymentStatus.PENDING,
        index=True,
    )
    transaction_id: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    payment_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    card_last_four: Mapped[Optional[str]] = mapped_column(String(4), nullable=True)

    booking_status: Mapped[BookingStatus] = mapped_column(
        Enum(BookingStatus),
        nullable=False,
        default=BookingStatus.PENDING,
        index=True,
    )

    # Cancellation
    cancelled_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    cancellation_reason: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    refund_amount: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2), nullable=True)
    refund_status: Mapped[Optional[RefundStatus]] = mapped_column(Enum(RefundStatus), nullable=True)

    # Front desk
    check_in_time: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    check_out_time: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    source: Mapped[str] = mapped_column(String(50), nullable=False, default="website")

    room: Mapped["Room"] = relationship("Room", back_populates="bookings", lazy="joined")
    nights: Mapped[List["RoomNight"]] = relationship(
        "RoomNight",
        back_populates="booking",
        cascade="all, delete-orphan",
        lazy="select",
    )

    __table_args__ = (
        CheckConstraint("check_out_date > check_in_date", name="ck_booking_date_order"),
        CheckConstraint("number_of_guests BETWEEN 1 AND 10", name="ck_booking_guest_range"),
        CheckConstraint("total_amount >= 0", name="ck_booking_total_positive"),
        Index("ix_bookings_room_dates", "room_id", "check_in_date", "check_out_date"),
    )

    @property
    def guest_full_name(self) -> str:
        return f"{self.guest_first_name} {self.guest_last_name}"

    def __repr__(self) -> str:
        return (
            f"<Booking(id={self.id}, reference={self.booking_reference}, "
            f"status={self.booking_status})>"
        )


class RoomNight(BaseModel):
    """One night of a room held by a booking."""

    __tablename__ = "room_nights"

    booking_id: Mapped[str] = mapped_column(
        ForeignKey("bookings.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    room_id: Mapped[str] = mapped_column(
        ForeignKey("rooms.id", ondelete="RESTRICT"),
        nullable=False,
    )
    night: Mapped[Date] = mapped_column(SQLDate, nullable=False)

    booking: Mapped["Booking"] = relationship("Booking", back_populates="nights")

    __table_args__ = (
        UniqueConstraint("room_id", "night", name="uq_room_nights_room_night"),
    )

    def __repr__(self) -> str:
        return f"<RoomNight(room_id={self.room_id}, night={self.night})>"
