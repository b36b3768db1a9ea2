"""
Admin user management service.
"""

from typing import Optional

from sqlalchemy.orm import Session

from app.core.exceptions import EntityAlreadyExistsError
from app.core.security.password_hasher import PasswordHasher
from app.models.admin.admin_user import AdminUser
from app.repositories.admin.admin_user_repository import AdminUserRepository, AdminUserSearchCriteria
from app.repositories.base.base_repository import PageResult
from app.schemas.admin.admin_user import AdminCreate, AdminProfileUpdate
from app.services.base import BaseService


class AdminUserService(BaseService):
    """Creates back-office accounts. Accounts are deactivated, never deleted."""

    def __init__(
        self,
        db_session: Session,
        password_hasher: PasswordHasher,
        repository: Optional[AdminUserRepository] = None,
    ):
        super().__init__(db_session)
        self.password_hasher = password_hasher
        self.repository = repository or AdminUserRepository(db_session)

    def create_admin(self, payload: AdminCreate, created_by: Optional[str] = None) -> AdminUser:
        """
        Raises:
            EntityAlreadyExistsError: Email already registered
        """
        if self.repository.email_exists(payload.email):
            raise EntityAlreadyExistsError("User with this email already exists", field="email")

        permissions = (
            [p.value for p in payload.permissions]
            if payload.permissions is not None
            else AdminUser.default_permissions(payload.role)
        )
        admin = AdminUser(
            first_name=payload.first_name,
            last_name=payload.last_name,
            email=payload.email,
            password_hash=self.password_hasher.hash(payload.password),
            phone=payload.phone,
            role=payload.role,
            permissions=permissions,
        )
        self.repository.create(admin)
        self._logger.info(
            "Admin user created",
            extra={"admin_id": admin.id, "role": admin.role.value, "created_by": created_by},
        )
        return admin

    def list_users(self, criteria: AdminUserSearchCriteria, page: int, limit: int) -> PageResult[AdminUser]:
        return self.repository.search(criteria, page, limit)

    def update_profile(self, admin: AdminUser, payload: AdminProfileUpdate) -> AdminUser:
        changes = payload.model_dump(exclude_unset=True)
        self.repository.update(admin, changes)
        self._logger.info(
            "Admin profile updated",
            extra={"admin_id": admin.id, "fields": sorted(changes.keys())},
        )
        return admin
