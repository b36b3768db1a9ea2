"""
Contact inbox endpoints.
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status

from app.api.deps import get_contact_service, get_current_admin, get_pagination, require_permission
from app.models.admin.admin_user import AdminUser
from app.models.base.enums import ContactPriority, ContactStatus, InquiryType, Permission
from app.repositories.contact.contact_repository import ContactSearchCriteria
from app.schemas.common.pagination import PaginationParams
from app.schemas.common.response import ListResponse, SuccessResponse, paginated
from app.schemas.contact.contact import (
    ContactBulkDelete,
    ContactBulkResult,
    ContactBulkStatusUpdate,
    ContactCreate,
    ContactReceipt,
    ContactReply,
    ContactResponse,
    ContactStats,
    ContactStatusUpdate,
)
from app.services.contact import ContactService

router = APIRouter(prefix="/contacts")

manage_contacts = require_permission(Permission.MANAGE_CONTACTS)


@router.post("", response_model=SuccessResponse[ContactReceipt], status_code=status.HTTP_201_CREATED)
def submit_contact(
    payload: ContactCreate,
    request: Request,
    service: ContactService = Depends(get_contact_service),
):
    contact = service.create_contact(
        payload,
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )
    return SuccessResponse(
        message="Contact submission received successfully. We will get back to you soon.",
        data=ContactReceipt(id=contact.id, submitted_at=contact.created_at),
    )


@router.get("", response_model=ListResponse[ContactResponse])
def list_contacts(
    contact_status: Optional[ContactStatus] = Query(None, alias="status"),
    priority: Optional[ContactPriority] = None,
    inquiry_type: Optional[InquiryType] = None,
    is_read: Optional[bool] = None,
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
    search: Optional[str] = Query(None, description="Name, email, subject or message"),
    pagination: PaginationParams = Depends(get_pagination),
    service: ContactService = Depends(get_contact_service),
    _admin=Depends(get_current_admin),
):
    criteria = ContactSearchCriteria(
        status=contact_status,
        priority=priority,
        inquiry_type=inquiry_type,
        is_read=is_read,
        date_from=date_from,
        date_to=date_to,
        search=search,
    )
    page = service.list_contacts(criteria, pagination.page, pagination.limit)
    return paginated(page, ContactResponse)


@router.get("/stats", response_model=SuccessResponse[ContactStats])
def contact_stats(
    service: ContactService = Depends(get_contact_service),
    _admin=Depends(get_current_admin),
):
    return SuccessResponse(message="Contact statistics retrieved", data=service.stats())


@router.patch("/bulk/status", response_model=SuccessResponse[ContactBulkResult])
def bulk_update_contact_status(
    payload: ContactBulkStatusUpdate,
    service: ContactService = Depends(get_contact_service),
    _admin=Depends(manage_contacts),
):
    result = service.bulk_update_status(payload.contact_ids, payload.status, payload.notes)
    return SuccessResponse(message=f"Updated {result.modified_count} contacts", data=result)


@router.delete("/bulk/delete", response_model=SuccessResponse[ContactBulkResult])
def bulk_delete_contacts(
    payload: ContactBulkDelete,
    service: ContactService = Depends(get_contact_service),
    _admin=Depends(require_permission(Permission.DELETE_CONTACTS)),
):
    result = service.bulk_delete(payload.contact_ids)
    return SuccessResponse(message=f"Deleted {result.deleted_count} contacts", data=result)


@router.get("/{contact_id}", response_model=SuccessResponse[ContactResponse])
def get_contact(
    contact_id: str,
    service: ContactService = Depends(get_contact_service),
    admin: AdminUser = Depends(get_current_admin),
):
    contact = service.get_contact(contact_id, reader=admin.full_name)
    return SuccessResponse(message="Contact retrieved", data=ContactResponse.model_validate(contact))


@router.patch("/{contact_id}/status", response_model=SuccessResponse[ContactResponse])
def update_contact_status(
    contact_id: str,
    payload: ContactStatusUpdate,
    service: ContactService = Depends(get_contact_service),
    _admin=Depends(manage_contacts),
):
    contact = service.update_status(contact_id, payload.status, payload.notes)
    return SuccessResponse(
        message="Contact status updated successfully",
        data=ContactResponse.model_validate(contact),
    )


@router.post("/{contact_id}/response", response_model=SuccessResponse[ContactResponse])
def respond_to_contact(
    contact_id: str,
    payload: ContactReply,
    service: ContactService = Depends(get_contact_service),
    admin: AdminUser = Depends(manage_contacts),
):
    contact = service.add_response(contact_id, payload.response_message, responded_by=admin.full_name)
    return SuccessResponse(message="Response added successfully", data=ContactResponse.model_validate(contact))


@router.delete("/{contact_id}", response_model=SuccessResponse)
def delete_contact(
    contact_id: str,
    service: ContactService = Depends(get_contact_service),
    _admin=Depends(require_permission(Permission.DELETE_CONTACTS)),
):
    service.delete_contact(contact_id)
    return SuccessResponse(message="Contact deleted successfully")
