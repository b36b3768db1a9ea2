"""
Room catalog endpoints.

Browsing is public; writes require ``manage_rooms``.
"""

from datetime import date
from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from app.api.deps import get_pagination, get_room_service, require_permission
from app.models.base.enums import Permission, RoomType
from app.repositories.room.room_repository import RoomSearchCriteria
from app.schemas.common.pagination import PaginationParams
from app.schemas.common.response import ListResponse, SuccessResponse, paginated
from app.schemas.room.room import (
    RoomAvailabilityResponse,
    RoomCreate,
    RoomResponse,
    RoomUpdate,
)
from app.services.room import RoomService

router = APIRouter(prefix="/rooms")

manage_rooms = require_permission(Permission.MANAGE_ROOMS)


@router.get("", response_model=ListResponse[RoomResponse])
def list_rooms(
    type: Optional[RoomType] = Query(None, description="Room type"),
    min_price: Optional[Decimal] = Query(None, ge=0),
    max_price: Optional[Decimal] = Query(None, ge=0),
    max_occupancy: Optional[int] = Query(None, ge=1, description="Rooms sleeping at least this many guests"),
    amenities: Optional[str] = Query(None, description="Comma-separated amenities; all must be offered"),
    is_available: Optional[bool] = None,
    is_featured: Optional[bool] = None,
    is_popular: Optional[bool] = None,
    check_in: Optional[date] = Query(None, description="Only rooms free from this date"),
    check_out: Optional[date] = Query(None, description="Only rooms free until this date"),
    sort: str = Query("price_per_night", description="Sort field, prefix with '-' for descending"),
    pagination: PaginationParams = Depends(get_pagination),
    service: RoomService = Depends(get_room_service),
):
    criteria = RoomSearchCriteria(
        type=type,
        min_price=min_price,
        max_price=max_price,
        max_occupancy=max_occupancy,
        amenities=[a for a in (amenities or "").split(",") if a.strip()],
        is_available=is_available,
        is_featured=is_featured,
        is_popular=is_popular,
        check_in=check_in,
        check_out=check_out,
        sort=sort,
    )
    page = service.list_rooms(criteria, pagination.page, pagination.limit)
    return paginated(page, RoomResponse)


@router.get("/featured", response_model=SuccessResponse[List[RoomResponse]])
def featured_rooms(
    limit: int = Query(6, ge=1, le=24),
    service: RoomService = Depends(get_room_service),
):
    rooms = service.featured_rooms(limit)
    return SuccessResponse(
        message="Featured rooms retrieved",
        data=[RoomResponse.model_validate(r) for r in rooms],
    )


@router.get("/{room_id}", response_model=SuccessResponse[RoomResponse])
def get_room(room_id: str, service: RoomService = Depends(get_room_service)):
    room = service.get_room(room_id)
    return SuccessResponse(message="Room retrieved", data=RoomResponse.model_validate(room))


@router.get("/{room_id}/availability", response_model=SuccessResponse[RoomAvailabilityResponse])
def check_availability(
    room_id: str,
    check_in: date = Query(...),
    check_out: date = Query(...),
    service: RoomService = Depends(get_room_service),
):
    result = service.check_availability(room_id, check_in, check_out)
    return SuccessResponse(
        message="Room is available" if result.is_available else "Room is not available for the selected dates",
        data=RoomAvailabilityResponse(
            room_id=result.room_id,
            check_in=result.check_in,
            check_out=result.check_out,
            is_available=result.is_available,
            conflicting_bookings=result.conflicting_bookings,
        ),
    )


@router.post("", response_model=SuccessResponse[RoomResponse], status_code=status.HTTP_201_CREATED)
def create_room(
    payload: RoomCreate,
    service: RoomService = Depends(get_room_service),
    _admin=Depends(manage_rooms),
):
    room = service.create_room(payload)
    return SuccessResponse(message="Room created successfully", data=RoomResponse.model_validate(room))


@router.put("/{room_id}", response_model=SuccessResponse[RoomResponse])
def update_room(
    room_id: str,
    payload: RoomUpdate,
    service: RoomService = Depends(get_room_service),
    _admin=Depends(manage_rooms),
):
    room = service.update_room(room_id, payload)
    return SuccessResponse(message="Room updated successfully", data=RoomResponse.model_validate(room))


@router.delete("/{room_id}", response_model=SuccessResponse)
def delete_room(
    room_id: str,
    service: RoomService = Depends(get_room_service),
    _admin=Depends(manage_rooms),
):
    service.delete_room(room_id)
    return SuccessResponse(message="Room deleted successfully")
