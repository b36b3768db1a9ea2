"""Security module for authentication and authorization."""

from .password_hasher import PasswordHasher
from .jwt_handler import JWTManager

__all__ = [
    "PasswordHasher",
    "JWTManager",
]
