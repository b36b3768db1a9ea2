"""
API v1 Router - Main Entry Point
Aggregates all v1 API endpoints for the hotel reservation system
"""
from fastapi import APIRouter

from app.api.v1 import admin, bookings, contacts, rooms
from app.config.settings import settings

# Create main API v1 router with proper configuration
router = APIRouter(
    responses={
        400: {"description": "Bad Request"},
        401: {"description": "Unauthorized"},
        403: {"description": "Forbidden"},
        404: {"description": "Not Found"},
        409: {"description": "Conflict"},
        423: {"description": "Locked"},
        500: {"description": "Internal Server Error"}
    }
)

router.include_router(rooms.router, tags=["Room Management"])
router.include_router(bookings.router, tags=["Booking Management"])
router.include_router(contacts.router, tags=["Contact Management"])
router.include_router(admin.router, tags=["Admin Management"])


# Health and diagnostic endpoints
@router.get("/health", tags=["System Health"])
async def api_health_check():
    """API v1 health check"""
    return {
        "status": "healthy",
        "version": settings.API_VERSION,
        "api_version": "v1",
        "description": "Hotel Reservation API v1",
    }
