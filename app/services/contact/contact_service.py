# app/services/contact/contact_service.py
"""
Contact inbox: public submissions, triage and admin responses.
"""

from datetime import datetime, timedelta
from typing import Any, Dict, Optional, Sequence

from sqlalchemy.orm import Session

from app.core.exceptions import ContactNotFoundError
from app.models.base.enums import ContactPriority, ContactStatus, InquiryType
from app.models.contact.contact import Contact
from app.repositories.base.base_repository import PageResult
from app.repositories.contact.contact_repository import ContactRepository, ContactSearchCriteria
from app.schemas.contact.contact import ContactBulkResult, ContactCreate, ContactStats
from app.services.base import BaseService
from app.services.notification.email_service import EmailService
from app.utils.date_utils import utcnow

DEFAULT_RESPONDER = "Admin"
RECENT_WINDOW_DAYS = 30

HIGH_PRIORITY_TYPES = frozenset({InquiryType.COMPLAINT})
LOW_PRIORITY_TYPES = frozenset({InquiryType.GENERAL_INQUIRY, InquiryType.FEEDBACK})


def derive_priority(inquiry_type: InquiryType) -> ContactPriority:
    if inquiry_type in HIGH_PRIORITY_TYPES:
        return ContactPriority.HIGH
    if inquiry_type in LOW_PRIORITY_TYPES:
        return ContactPriority.LOW
    return ContactPriority.MEDIUM


def _status_changes(contact: Contact, status: ContactStatus, notes: Optional[str], now: datetime) -> Dict[str, Any]:
    changes: Dict[str, Any] = {"status": status}
    if notes:
        changes["notes"] = notes
    if status == ContactStatus.RESOLVED and contact.resolved_at is None:
        changes["resolved_at"] = now
    if status == ContactStatus.CLOSED and contact.closed_at is None:
        changes["closed_at"] = now
    return changes


class ContactService(BaseService):
    """
    Service for contact inquiries.

    Viewing an inquiry marks it read. Emails (acknowledgement, admin
    notification, response) never fail the request.
    """

    def __init__(
        self,
        db_session: Session,
        email_service: EmailService,
        contact_repository: Optional[ContactRepository] = None,
    ):
        super().__init__(db_session)
        self.email_service = email_service
        self.contacts = contact_repository or ContactRepository(db_session)

    def create_contact(
        self,
        payload: ContactCreate,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> Contact:
        contact = Contact(
            **payload.model_dump(),
            priority=derive_priority(payload.inquiry_type),
            status=ContactStatus.NEW,
            ip_address=ip_address,
            user_agent=user_agent,
        )
        self.contacts.create(contact)
        self._logger.info(
            "Contact submission received",
            extra={
                "contact_id": contact.id,
                "inquiry_type": contact.inquiry_type.value,
                "priority": contact.priority.value,
            },
        )

        self.email_service.send_contact_acknowledgement(contact)
        self.email_service.send_admin_contact_notification(contact)
        return contact

    def list_contacts(self, criteria: ContactSearchCriteria, page: int, limit: int) -> PageResult[Contact]:
        return self.contacts.search(criteria, page, limit)

    def get_contact(self, contact_id: str, reader: Optional[str] = None) -> Contact:
        """Fetch an inquiry and mark it read on first view."""
        contact = self._get(contact_id)
        if not contact.is_read:
            self.contacts.update(contact, {"is_read": True, "read_at": utcnow(), "read_by": reader})
        return contact

    def update_status(self, contact_id: str, status: ContactStatus, notes: Optional[str] = None) -> Contact:
        contact = self._get(contact_id)
        self.contacts.update(contact, _status_changes(contact, status, notes, utcnow()))
        self._logger.info(
            "Contact status updated",
            extra={"contact_id": contact.id, "contact_status": status.value},
        )
        return contact

    def bulk_update_status(
        self,
        contact_ids: Sequence[str],
        status: ContactStatus,
        notes: Optional[str] = None,
    ) -> ContactBulkResult:
        """
        Move several inquiries to ``status`` in one transaction.

        Unknown ids are skipped. ``modified_count`` counts inquiries whose
        status or notes actually changed.
        """
        contacts = self.contacts.find_by_ids(list(dict.fromkeys(contact_ids)))
        now = utcnow()
        modified = 0

        with self.contacts.transaction():
            for contact in contacts:
                if contact.status != status or (notes and contact.notes != notes):
                    modified += 1
                self.contacts.update(contact, _status_changes(contact, status, notes, now), commit=False)

        self._logger.info(
            "Contact statuses updated in bulk",
            extra={"matched": len(contacts), "modified": modified, "contact_status": status.value},
        )
        return ContactBulkResult(matched_count=len(contacts), modified_count=modified)

    def add_response(self, contact_id: str, message: str, responded_by: Optional[str] = None) -> Contact:
        contact = self._get(contact_id)

        changes = {
            "response_message": message,
            "responded_by": responded_by or DEFAULT_RESPONDER,
            "responded_at": utcnow(),
        }
        if contact.status == ContactStatus.NEW:
            changes["status"] = ContactStatus.IN_PROGRESS

        self.contacts.update(contact, changes)
        self._logger.info("Contact response added", extra={"contact_id": contact.id})
        self.email_service.send_contact_response(contact)
        return contact

    def delete_contact(self, contact_id: str) -> None:
        contact = self._get(contact_id)
        self.contacts.delete(contact)

    def bulk_delete(self, contact_ids: Sequence[str]) -> ContactBulkResult:
        with self.contacts.transaction():
            deleted = self.contacts.delete_by_ids(list(dict.fromkeys(contact_ids)))
        self._logger.info("Contacts deleted in bulk", extra={"deleted": deleted})
        return ContactBulkResult(matched_count=deleted, deleted_count=deleted)

    def stats(self) -> ContactStats:
        return ContactStats(
            total=self.contacts.count(),
            unread=self.contacts.count_unread(),
            pending=self.contacts.count_pending(),
            recent=self.contacts.count_created_since(utcnow() - timedelta(days=RECENT_WINDOW_DAYS)),
            by_status=self.contacts.count_grouped_by(Contact.status),
            by_priority=self.contacts.count_grouped_by(Contact.priority),
            by_inquiry_type=self.contacts.count_grouped_by(Contact.inquiry_type),
        )

    def _get(self, contact_id: str) -> Contact:
        contact = self.contacts.find_by_id(contact_id)
        if contact is None:
            raise ContactNotFoundError(contact_id)
        return contact
