"""
Admin user model.

Staff accounts for the back office. Accounts are deactivated, never
hard-deleted.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import Boolean, DateTime, Enum, Integer, JSON, String
from sqlalchemy.orm import Mapped, mapped_column, validates

from app.models.base.base_model import TimestampModel
from app.models.base.enums import AdminRole, ROLE_PERMISSIONS

__all__ = ["AdminUser"]


class AdminUser(TimestampModel):
    """
    Back-office account.

    Attributes:
        email: Unique, stored lower-case
        password_hash: bcrypt hash, never serialized
        role: Role driving the default permission set
        permissions: Effective permissions
        login_attempts: Consecutive failed logins
        lock_until: Lock expiry after too many failures
    """

    __tablename__ = "admin_users"

    first_name: Mapped[str] = mapped_column(String(50), nullable=False)
    last_name: Mapped[str] = mapped_column(String(50), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)

    role: Mapped[AdminRole] = mapped_column(Enum(AdminRole), nullable=False, default=AdminRole.ADMIN)
    permissions: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    last_login: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    login_attempts: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    lock_until: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    @validates("email")
    def _lowercase_email(self, key: str, value: str) -> str:
        return value.strip().lower() if value else value

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def is_locked(self, now: datetime) -> bool:
        return bool(self.lock_until and self.lock_until > now)

    def has_permission(self, permission: str) -> bool:
        if self.role == AdminRole.ADMIN:
            return True
        return permission in (self.permissions or [])

    @staticmethod
    def default_permissions(role: AdminRole) -> List[str]:
        return [p.value for p in ROLE_PERMISSIONS[role]]

    def __repr__(self) -> str:
        return f"<AdminUser(id={self.id}, email={self.email}, role={self.role})>"
