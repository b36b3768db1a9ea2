from app.schemas.room.room import (
    RoomAvailabilityResponse,
    RoomCreate,
    RoomImage,
    RoomResponse,
    RoomSummary,
    RoomUpdate,
)

__all__ = [
    "RoomAvailabilityResponse",
    "RoomCreate",
    "RoomImage",
    "RoomResponse",
    "RoomSummary",
    "RoomUpdate",
]
