# models/__init__.py
from .base import Base
from .room import Room
from .booking import Booking, RoomNight
from .contact import Contact
from .admin import AdminUser

__all__ = [
    "Base",
    "Room",
    "Booking",
    "RoomNight",
    "Contact",
    "AdminUser",
]
