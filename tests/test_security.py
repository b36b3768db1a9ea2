from datetime import timedelta

import jwt
import pytest

from app.core.exceptions import InvalidTokenError, TokenExpiredError
from app.core.security import JWTManager, PasswordHasher


class TestPasswordHasher:
    def test_hash_and_verify(self):
        hasher = PasswordHasher(rounds=4)
        hashed = hasher.hash("s3cret-pass")

        assert hashed != "s3cret-pass"
        assert hasher.verify("s3cret-pass", hashed)
        assert not hasher.verify("wrong-pass", hashed)

    def test_verify_tolerates_malformed_hash(self):
        assert PasswordHasher(rounds=4).verify("anything", "not-a-bcrypt-hash") is False

    def test_rejects_empty_password(self):
        with pytest.raises(ValueError):
            PasswordHasher(rounds=4).hash("")

    def test_rounds_bounds(self):
        with pytest.raises(ValueError):
            PasswordHasher(rounds=3)


class TestJWTManager:
    def test_round_trip_claims(self):
        manager = JWTManager("secret")
        token = manager.create_access_token("admin-1", role="staff", permissions=["manage_bookings"])

        payload = manager.verify_token(token)

        assert payload["sub"] == "admin-1"
        assert payload["role"] == "staff"
        assert payload["permissions"] == ["manage_bookings"]

    def test_expired_token(self):
        manager = JWTManager("secret")
        token = manager.create_access_token("admin-1", expires_delta=timedelta(seconds=-5))

        with pytest.raises(TokenExpiredError):
            manager.verify_token(token)

    def test_wrong_secret(self):
        token = JWTManager("secret").create_access_token("admin-1")

        with pytest.raises(InvalidTokenError):
            JWTManager("other-secret").verify_token(token)

    def test_rejects_token_without_access_type(self):
        token = jwt.encode({"sub": "admin-1"}, "secret", algorithm="HS256")

        with pytest.raises(InvalidTokenError):
            JWTManager("secret").verify_token(token)

    def test_secret_required(self):
        with pytest.raises(ValueError):
            JWTManager("")
