from app.repositories.booking.booking_repository import BookingRepository, BookingSearchCriteria

__all__ = ["BookingRepository", "BookingSearchCriteria"]
