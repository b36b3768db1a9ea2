"""
Booking endpoints.

Guests create bookings and look them up by confirmation number; everything
else is back-office.
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from app.api.deps import (
    get_booking_service,
    get_booking_status_service,
    get_current_admin,
    get_pagination,
    require_permission,
)
from app.models.base.enums import BookingStatus, PaymentStatus, Permission
from app.repositories.booking.booking_repository import BookingSearchCriteria
from app.schemas.booking.booking import (
    BookingCancel,
    BookingCreate,
    BookingResponse,
    BookingStats,
    BookingStatusUpdate,
    PaymentUpdate,
)
from app.schemas.common.pagination import PaginationParams
from app.schemas.common.response import ListResponse, SuccessResponse, paginated
from app.services.booking import BookingService, BookingStatusService

router = APIRouter(prefix="/bookings")


@router.post("", response_model=SuccessResponse[BookingResponse], status_code=status.HTTP_201_CREATED)
def create_booking(payload: BookingCreate, service: BookingService = Depends(get_booking_service)):
    booking = service.create_booking(payload)
    return SuccessResponse(message="Booking created successfully", data=BookingResponse.model_validate(booking))


@router.get("/confirmation/{confirmation_number}", response_model=SuccessResponse[BookingResponse])
def get_by_confirmation(confirmation_number: str, service: BookingService = Depends(get_booking_service)):
    booking = service.get_by_confirmation(confirmation_number)
    return SuccessResponse(message="Booking retrieved", data=BookingResponse.model_validate(booking))


@router.get("", response_model=ListResponse[BookingResponse])
def list_bookings(
    booking_status: Optional[BookingStatus] = Query(None, alias="status"),
    payment_status: Optional[PaymentStatus] = None,
    room_id: Optional[str] = None,
    guest_email: Optional[str] = None,
    check_in_from: Optional[date] = None,
    check_in_to: Optional[date] = None,
    search: Optional[str] = Query(None, description="Reference, confirmation number, guest name or email"),
    pagination: PaginationParams = Depends(get_pagination),
    service: BookingService = Depends(get_booking_service),
    _admin=Depends(get_current_admin),
):
    criteria = BookingSearchCriteria(
        status=booking_status,
        payment_status=payment_status,
        room_id=room_id,
        guest_email=guest_email,
        check_in_from=check_in_from,
        check_in_to=check_in_to,
        search=search,
    )
    page = service.list_bookings(criteria, pagination.page, pagination.limit)
    return paginated(page, BookingResponse)


@router.get("/stats", response_model=SuccessResponse[BookingStats])
def booking_stats(
    period: int = Query(30, ge=1, le=365, description="Window in days"),
    service: BookingStatusService = Depends(get_booking_status_service),
    _admin=Depends(get_current_admin),
):
    return SuccessResponse(message="Booking statistics retrieved", data=service.stats(period))


@router.get("/{booking_id}", response_model=SuccessResponse[BookingResponse])
def get_booking(
    booking_id: str,
    service: BookingService = Depends(get_booking_service),
    _admin=Depends(get_current_admin),
):
    booking = service.get_booking(booking_id)
    return SuccessResponse(message="Booking retrieved", data=BookingResponse.model_validate(booking))


@router.patch("/{booking_id}/status", response_model=SuccessResponse[BookingResponse])
def update_status(
    booking_id: str,
    payload: BookingStatusUpdate,
    service: BookingStatusService = Depends(get_booking_status_service),
    _admin=Depends(require_permission(Permission.MANAGE_BOOKINGS)),
):
    booking = service.update_status(booking_id, payload.status, payload.notes)
    return SuccessResponse(
        message="Booking status updated successfully",
        data=BookingResponse.model_validate(booking),
    )


@router.patch("/{booking_id}/payment", response_model=SuccessResponse[BookingResponse])
def update_payment(
    booking_id: str,
    payload: PaymentUpdate,
    service: BookingStatusService = Depends(get_booking_status_service),
    _admin=Depends(require_permission(Permission.MANAGE_PAYMENTS)),
):
    booking = service.update_payment(
        booking_id,
        payload.payment_status,
        transaction_id=payload.transaction_id,
        payment_date=payload.payment_date,
    )
    return SuccessResponse(
        message="Payment status updated successfully",
        data=BookingResponse.model_validate(booking),
    )


@router.patch("/{booking_id}/cancel", response_model=SuccessResponse[BookingResponse])
def cancel_booking(
    booking_id: str,
    payload: Optional[BookingCancel] = None,
    service: BookingStatusService = Depends(get_booking_status_service),
    _admin=Depends(require_permission(Permission.MANAGE_BOOKINGS)),
):
    payload = payload or BookingCancel()
    booking = service.cancel(booking_id, payload.reason, payload.refund_amount)
    return SuccessResponse(message="Booking cancelled successfully", data=BookingResponse.model_validate(booking))
