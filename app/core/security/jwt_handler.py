"""
JWT token management utilities.

Handles access token creation and validation for admin sessions.
"""

import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import jwt

from app.core.exceptions import InvalidTokenError, TokenExpiredError
from app.core.logging import get_logger

logger = get_logger(__name__)


class JWTManager:
    """
    JWT token manager for admin authentication.

    Tokens carry the admin id in ``sub`` plus the role and permission set
    that were current when the token was issued.
    """

    DEFAULT_ALGORITHM = "HS256"
    DEFAULT_ACCESS_TOKEN_EXPIRE_MINUTES = 60 * 24

    def __init__(
        self,
        secret_key: str,
        algorithm: str = DEFAULT_ALGORITHM,
        access_token_expire_minutes: int = DEFAULT_ACCESS_TOKEN_EXPIRE_MINUTES,
    ):
        if not secret_key:
            raise ValueError("JWT secret key is required")
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.access_token_expire_minutes = access_token_expire_minutes

    def create_access_token(
        self,
        subject: str,
        role: Optional[str] = None,
        permissions: Optional[List[str]] = None,
        expires_delta: Optional[timedelta] = None,
    ) -> str:
        """
        Create JWT access token.

        Args:
            subject: Admin identifier
            role: Admin role at issue time
            permissions: Effective permissions at issue time
            expires_delta: Custom expiration time

        Returns:
            Encoded JWT token
        """
        now = datetime.now(timezone.utc)
        expire = now + (expires_delta or timedelta(minutes=self.access_token_expire_minutes))

        payload: Dict[str, Any] = {
            "sub": str(subject),
            "token_type": "access",
            "iat": now,
            "exp": expire,
            "jti": secrets.token_hex(16),
        }
        if role is not None:
            payload["role"] = role
        if permissions is not None:
            payload["permissions"] = list(permissions)

        token = jwt.encode(payload, self.secret_key, algorithm=self.algorithm)
        logger.debug("Access token created", extra={"subject": str(subject)})
        return token

    def verify_token(self, token: str) -> Dict[str, Any]:
        """
        Verify and decode JWT token.

        Raises:
            TokenExpiredError: If token is expired
            InvalidTokenError: If token is malformed, tampered or not an access token
        """
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError:
            logger.warning("Token verification failed: token expired")
            raise TokenExpiredError()
        except jwt.InvalidTokenError as e:
            logger.warning("Token verification failed", extra={"error": str(e)})
            raise InvalidTokenError()

        if payload.get("token_type") != "access" or not payload.get("sub"):
            raise InvalidTokenError()
        return payload
