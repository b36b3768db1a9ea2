from app.schemas.admin.admin_user import (
    AdminCreate,
    AdminLogin,
    AdminProfileUpdate,
    AdminResponse,
    PasswordChange,
    TokenResponse,
)

__all__ = [
    "AdminCreate",
    "AdminLogin",
    "AdminProfileUpdate",
    "AdminResponse",
    "PasswordChange",
    "TokenResponse",
]
