from app.models.booking.booking import Booking, RoomNight

__all__ = ["Booking", "RoomNight"]
