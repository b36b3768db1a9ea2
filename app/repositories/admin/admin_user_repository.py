# app/repositories/admin/admin_user_repository.py
"""
Admin user repository.
"""

from dataclasses import dataclass
from typing import Optional

from sqlalchemy import desc, or_
from sqlalchemy.orm import Session

from app.models.admin.admin_user import AdminUser
from app.models.base.enums import AdminRole
from app.repositories.base.base_repository import BaseRepository, PageResult


@dataclass
class AdminUserSearchCriteria:
    role: Optional[AdminRole] = None
    is_active: Optional[bool] = None
    search: Optional[str] = None


class AdminUserRepository(BaseRepository[AdminUser]):
    """Repository for back-office accounts."""

    def __init__(self, db: Session):
        super().__init__(AdminUser, db)

    def find_by_email(self, email: str) -> Optional[AdminUser]:
        return self.find_one_by_criteria({"email": email.strip().lower()})

    def email_exists(self, email: str) -> bool:
        return self.find_by_email(email) is not None

    def search(self, criteria: AdminUserSearchCriteria, page: int, limit: int) -> PageResult[AdminUser]:
        stmt = self._base_query()
        if criteria.role is not None:
            stmt = stmt.where(AdminUser.role == criteria.role)
        if criteria.is_active is not None:
            stmt = stmt.where(AdminUser.is_active.is_(criteria.is_active))
        if criteria.search:
            term = f"%{criteria.search.strip()}%"
            stmt = stmt.where(
                or_(
                    AdminUser.first_name.ilike(term),
                    AdminUser.last_name.ilike(term),
                    AdminUser.email.ilike(term),
                )
            )
        stmt = stmt.order_by(desc(AdminUser.created_at), desc(AdminUser.id))
        return self.paginate(stmt, page, limit)
