from app.repositories.room.room_repository import RoomRepository, RoomSearchCriteria

__all__ = ["RoomRepository", "RoomSearchCriteria"]
