from app.services.admin.admin_authentication_service import AdminAuthenticationService
from app.services.admin.admin_user_service import AdminUserService

__all__ = ["AdminAuthenticationService", "AdminUserService"]
