"""
Admin authentication: credential checks, lockout after repeated failures,
token issuance and password changes.
"""

import math
from datetime import datetime, timedelta
from typing import Callable, Optional, Tuple

from sqlalchemy.orm import Session

from app.config.settings import Settings
from app.core.exceptions import (
    AccountLockedError,
    AdminNotFoundError,
    AuthenticationError,
)
from app.core.security.jwt_handler import JWTManager
from app.core.security.password_hasher import PasswordHasher
from app.models.admin.admin_user import AdminUser
from app.repositories.admin.admin_user_repository import AdminUserRepository
from app.services.base import BaseService
from app.utils.date_utils import utcnow

INVALID_CREDENTIALS = "Invalid credentials"


class AdminAuthenticationService(BaseService):
    """
    Service handling admin authentication operations.

    Responsibilities:
    - Login authentication with lockout
    - Token issuance and resolution
    - Password changes
    """

    def __init__(
        self,
        db_session: Session,
        settings: Settings,
        password_hasher: PasswordHasher,
        jwt_manager: JWTManager,
        now: Callable[[], datetime] = utcnow,
        repository: Optional[AdminUserRepository] = None,
    ):
        super().__init__(db_session)
        self.settings = settings
        self.password_hasher = password_hasher
        self.jwt_manager = jwt_manager
        self.now = now
        self.repository = repository or AdminUserRepository(db_session)

    # =========================================================================
    # Authentication
    # =========================================================================

    def login(self, email: str, password: str) -> Tuple[AdminUser, str]:
        """
        Authenticate an admin and issue an access token.

        Process:
        1. Locate admin by email
        2. Refuse inactive or locked accounts
        3. Verify password, counting failures
        4. Reset counters, stamp last login, issue token

        Raises:
            AuthenticationError: Unknown email, wrong password or inactive account
            AccountLockedError: Too many failed attempts
        """
        admin = self.repository.find_by_email(email.strip().lower())
        if admin is None:
            self._logger.warning("Login failed: unknown email")
            raise AuthenticationError(INVALID_CREDENTIALS)

        now = self.now()
        if admin.is_locked(now):
            minutes = math.ceil((admin.lock_until - now).total_seconds() / 60)
            self._logger.warning("Login refused: account locked", extra={"admin_id": admin.id})
            raise AccountLockedError(minutes)

        if not self.password_hasher.verify(password, admin.password_hash):
            self._register_failure(admin, now)
            raise AuthenticationError(INVALID_CREDENTIALS)

        if not admin.is_active:
            raise AuthenticationError("Account is deactivated")

        self.repository.update(
            admin,
            {"login_attempts": 0, "lock_until": None, "last_login": now},
        )
        self._logger.info("Admin logged in", extra={"admin_id": admin.id})
        return admin, self.issue_token(admin)

    def _register_failure(self, admin: AdminUser, now: datetime) -> None:
        if admin.lock_until is not None and admin.lock_until <= now:
            # Previous lock expired: start counting again
            changes = {"login_attempts": 1, "lock_until": None}
        else:
            attempts = (admin.login_attempts or 0) + 1
            changes = {"login_attempts": attempts}
            if attempts >= self.settings.MAX_LOGIN_ATTEMPTS:
                changes["lock_until"] = now + timedelta(minutes=self.settings.LOCKOUT_MINUTES)

        self.repository.update(admin, changes)
        self._logger.warning(
            "Login failed: wrong password",
            extra={
                "admin_id": admin.id,
                "login_attempts": admin.login_attempts,
                "locked": admin.lock_until is not None,
            },
        )

    def issue_token(self, admin: AdminUser) -> str:
        return self.jwt_manager.create_access_token(
            subject=admin.id,
            role=admin.role.value,
            permissions=list(admin.permissions or []),
        )

    def resolve_token(self, token: str) -> AdminUser:
        """
        Load the admin a bearer token belongs to.

        Raises:
            AuthenticationError: Bad token, unknown or inactive admin
            AccountLockedError: Admin is locked out
        """
        payload = self.jwt_manager.verify_token(token)
        admin = self.repository.find_by_id(payload["sub"])
        if admin is None or not admin.is_active:
            raise AuthenticationError("Not authorized to access this route")

        now = self.now()
        if admin.is_locked(now):
            raise AccountLockedError(math.ceil((admin.lock_until - now).total_seconds() / 60))
        return admin

    # =========================================================================
    # Password management
    # =========================================================================

    def change_password(self, admin_id: str, current_password: str, new_password: str) -> AdminUser:
        admin = self.repository.find_by_id(admin_id)
        if admin is None:
            raise AdminNotFoundError(admin_id)

        if not self.password_hasher.verify(current_password, admin.password_hash):
            raise AuthenticationError("Current password is incorrect")

        self.repository.update(admin, {"password_hash": self.password_hasher.hash(new_password)})
        self._logger.info("Admin password changed", extra={"admin_id": admin.id})
        return admin
