# --- File: app/schemas/admin/admin_user.py ---
"""
Admin account and authentication schemas.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import EmailStr, Field, field_validator, model_validator

from app.models.base.enums import AdminRole, Permission
from app.schemas.common.base import (
    BaseCreateSchema,
    BaseResponseSchema,
    BaseSchema,
    BaseUpdateSchema,
)

__all__ = [
    "AdminLogin",
    "AdminCreate",
    "PasswordChange",
    "AdminProfileUpdate",
    "AdminResponse",
    "TokenResponse",
]


class AdminLogin(BaseCreateSchema):
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()


class AdminCreate(BaseCreateSchema):
    """
    New back-office account.

    When ``permissions`` is omitted the role's default set applies.
    """

    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    role: AdminRole = AdminRole.STAFF
    permissions: Optional[List[Permission]] = None
    phone: Optional[str] = Field(default=None, pattern=r"^\+?[0-9][0-9\s\-()]{6,19}$")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()


class PasswordChange(BaseCreateSchema):
    current_password: str = Field(..., min_length=1, max_length=128)
    new_password: str = Field(..., min_length=6, max_length=128)

    @model_validator(mode="after")
    def passwords_differ(self) -> "PasswordChange":
        if self.current_password == self.new_password:
            raise ValueError("New password must differ from the current password")
        return self


class AdminProfileUpdate(BaseUpdateSchema):
    first_name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    last_name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    phone: Optional[str] = Field(default=None, pattern=r"^\+?[0-9][0-9\s\-()]{6,19}$")


class AdminResponse(BaseResponseSchema):
    first_name: str
    last_name: str
    full_name: str
    email: str
    phone: Optional[str] = None
    role: AdminRole
    permissions: List[str]
    is_active: bool
    last_login: Optional[datetime] = None


class TokenResponse(BaseSchema):
    access_token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Seconds until expiry")
    user: AdminResponse
