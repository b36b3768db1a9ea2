# app/repositories/contact/contact_repository.py
"""
Contact inquiry repository.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from sqlalchemy import delete, desc, func, or_, select
from sqlalchemy.orm import Session

from app.models.base.enums import ContactPriority, ContactStatus, InquiryType
from app.models.contact.contact import Contact
from app.repositories.base.base_repository import BaseRepository, PageResult


@dataclass
class ContactSearchCriteria:
    status: Optional[ContactStatus] = None
    priority: Optional[ContactPriority] = None
    inquiry_type: Optional[InquiryType] = None
    is_read: Optional[bool] = None
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None
    search: Optional[str] = None


class ContactRepository(BaseRepository[Contact]):
    """Repository for the contact inbox."""

    def __init__(self, db: Session):
        super().__init__(Contact, db)

    def search(self, criteria: ContactSearchCriteria, page: int, limit: int) -> PageResult[Contact]:
        stmt = self._base_query()

        if criteria.status is not None:
            stmt = stmt.where(Contact.status == criteria.status)
        if criteria.priority is not None:
            stmt = stmt.where(Contact.priority == criteria.priority)
        if criteria.inquiry_type is not None:
            stmt = stmt.where(Contact.inquiry_type == criteria.inquiry_type)
        if criteria.is_read is not None:
            stmt = stmt.where(Contact.is_read.is_(criteria.is_read))
        if criteria.date_from is not None:
            stmt = stmt.where(Contact.created_at >= criteria.date_from)
        if criteria.date_to is not None:
            stmt = stmt.where(Contact.created_at <= criteria.date_to)
        if criteria.search:
            term = f"%{criteria.search.strip()}%"
            stmt = stmt.where(
                or_(
                    Contact.name.ilike(term),
                    Contact.email.ilike(term),
                    Contact.subject.ilike(term),
                    Contact.message.ilike(term),
                )
            )

        stmt = stmt.order_by(desc(Contact.created_at), desc(Contact.id))
        return self.paginate(stmt, page, limit)

    def find_by_ids(self, contact_ids: Sequence[str]) -> List[Contact]:
        if not contact_ids:
            return []
        return self._scalars(self._base_query().where(Contact.id.in_(contact_ids)))

    def delete_by_ids(self, contact_ids: Sequence[str]) -> int:
        """Hard delete the given inquiries; the caller commits."""
        result = self.db.execute(delete(Contact).where(Contact.id.in_(contact_ids)))
        return result.rowcount or 0

    def count_unread(self) -> int:
        return self.count(self._base_query().where(Contact.is_read.is_(False)))

    def count_pending(self) -> int:
        return self.count(
            self._base_query().where(
                Contact.status.in_((ContactStatus.NEW, ContactStatus.IN_PROGRESS))
            )
        )

    def find_pending(self, limit: int = 5) -> List[Contact]:
        stmt = (
            self._base_query()
            .where(Contact.status.in_((ContactStatus.NEW, ContactStatus.IN_PROGRESS)))
            .order_by(desc(Contact.created_at))
            .limit(limit)
        )
        return self._scalars(stmt)

    def count_created_since(self, since: datetime) -> int:
        return self.count(self._base_query().where(Contact.created_at >= since))

    def count_grouped_by(self, column) -> Dict[str, int]:
        stmt = select(column, func.count(Contact.id)).group_by(column)
        return {
            (key.value if hasattr(key, "value") else key): total
            for key, total in self.db.execute(stmt).all()
        }

    def delete_closed_before(self, cutoff: datetime, statuses: Sequence[ContactStatus]) -> int:
        """Hard delete closed inquiries created before ``cutoff``; the caller commits."""
        result = self.db.execute(
            delete(Contact).where(
                Contact.status.in_(statuses),
                Contact.created_at < cutoff,
            )
        )
        return result.rowcount or 0
