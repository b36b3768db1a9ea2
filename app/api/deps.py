# app/api/deps.py
"""
FastAPI dependencies shared by the v1 routers.

Example usage in a router:

    from fastapi import Depends, APIRouter
    from app.api import deps

    router = APIRouter()

    @router.get("/me")
    def read_me(current_admin = Depends(deps.get_current_admin)):
        return current_admin
"""

from typing import Callable, Optional

from fastapi import Depends, Query
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.config.settings import Settings, get_settings
from app.core.exceptions import AuthenticationError, PermissionDeniedError
from app.core.logging import admin_id as admin_id_context
from app.core.notifications import NotificationRelay, get_relay
from app.core.security import JWTManager, PasswordHasher
from app.db.session import get_db
from app.models.admin.admin_user import AdminUser
from app.models.base.enums import Permission
from app.schemas.common.pagination import PaginationParams
from app.services.admin import AdminAuthenticationService, AdminUserService
from app.services.analytics import AnalyticsService
from app.services.background import CleanupConfig, CleanupService
from app.services.booking import BookingService, BookingStatusService
from app.services.contact import ContactService
from app.services.notification import EmailService
from app.services.room import RoomService

__all__ = [
    "get_db",
    "get_settings",
    "get_relay",
    "get_pagination",
    "get_current_admin",
    "require_permission",
]

bearer_scheme = HTTPBearer(auto_error=False)


# --- Infrastructure ------------------------------------------------------------

def get_password_hasher(settings: Settings = Depends(get_settings)) -> PasswordHasher:
    return PasswordHasher(rounds=settings.PASSWORD_BCRYPT_ROUNDS)


def get_jwt_manager(settings: Settings = Depends(get_settings)) -> JWTManager:
    return JWTManager(
        secret_key=settings.JWT_SECRET_KEY,
        algorithm=settings.JWT_ALGORITHM,
        access_token_expire_minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES,
    )


def get_email_service(settings: Settings = Depends(get_settings)) -> EmailService:
    return EmailService(settings)


def get_pagination(
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    limit: int = Query(10, ge=1, le=100, description="Items per page"),
) -> PaginationParams:
    return PaginationParams(page=page, limit=limit)


# --- Services ------------------------------------------------------------------

def get_room_service(db: Session = Depends(get_db)) -> RoomService:
    return RoomService(db)


def get_booking_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    relay: NotificationRelay = Depends(get_relay),
    email_service: EmailService = Depends(get_email_service),
) -> BookingService:
    return BookingService(db, settings, relay, email_service)


def get_booking_status_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    relay: NotificationRelay = Depends(get_relay),
    email_service: EmailService = Depends(get_email_service),
) -> BookingStatusService:
    return BookingStatusService(db, settings, relay, email_service)


def get_contact_service(
    db: Session = Depends(get_db),
    email_service: EmailService = Depends(get_email_service),
) -> ContactService:
    return ContactService(db, email_service)


def get_auth_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    password_hasher: PasswordHasher = Depends(get_password_hasher),
    jwt_manager: JWTManager = Depends(get_jwt_manager),
) -> AdminAuthenticationService:
    return AdminAuthenticationService(db, settings, password_hasher, jwt_manager)


def get_admin_user_service(
    db: Session = Depends(get_db),
    password_hasher: PasswordHasher = Depends(get_password_hasher),
) -> AdminUserService:
    return AdminUserService(db, password_hasher)


def get_analytics_service(db: Session = Depends(get_db)) -> AnalyticsService:
    return AnalyticsService(db)


def get_cleanup_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> CleanupService:
    return CleanupService(db, CleanupConfig.from_settings(settings))


# --- Authentication & Authorization -------------------------------------------

def get_current_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    auth_service: AdminAuthenticationService = Depends(get_auth_service),
) -> AdminUser:
    """
    Resolve the bearer token to an active admin.

    Raises:
        AuthenticationError: Missing, invalid or expired token; unknown or inactive admin
        AccountLockedError: The admin is currently locked out
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError()

    admin = auth_service.resolve_token(credentials.credentials)
    admin_id_context.set(admin.id)
    return admin


def require_permission(permission: Permission) -> Callable[..., AdminUser]:
    """
    Dependency factory enforcing a single permission.

        @router.post("/rooms")
        def create_room(admin = Depends(require_permission(Permission.MANAGE_ROOMS))):
            ...
    """

    def _check(admin: AdminUser = Depends(get_current_admin)) -> AdminUser:
        if not admin.has_permission(permission.value):
            raise PermissionDeniedError(permission.value)
        return admin

    return _check
