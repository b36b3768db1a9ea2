from datetime import datetime, timedelta

import pytest

from app.core.exceptions import AccountLockedError, AuthenticationError
from app.core.security import JWTManager, PasswordHasher
from app.models.admin.admin_user import AdminUser
from app.repositories.admin.admin_user_repository import AdminUserRepository
from app.services.admin import AdminAuthenticationService

from conftest import ADMIN_EMAIL, ADMIN_PASSWORD, login

ADMIN = "/api/v1/admin"


class FakeClock:
    def __init__(self, start: datetime):
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> None:
        self.current += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock(datetime(2025, 7, 1, 9, 0))


@pytest.fixture
def auth_service(db, settings, clock):
    return AdminAuthenticationService(
        db,
        settings,
        PasswordHasher(rounds=settings.PASSWORD_BCRYPT_ROUNDS),
        JWTManager(settings.JWT_SECRET_KEY),
        now=clock,
    )


def admin_record(db) -> AdminUser:
    admin = AdminUserRepository(db).find_by_email(ADMIN_EMAIL)
    db.refresh(admin)
    return admin


class TestLockout:
    def test_five_failures_lock_the_account(self, auth_service, db, clock):
        for _ in range(5):
            with pytest.raises(AuthenticationError):
                auth_service.login(ADMIN_EMAIL, "wrong-password")

        admin = admin_record(db)
        assert admin.login_attempts == 5
        assert admin.lock_until == clock.current + timedelta(hours=2)

        with pytest.raises(AccountLockedError) as exc_info:
            auth_service.login(ADMIN_EMAIL, ADMIN_PASSWORD)
        assert exc_info.value.status_code == 423
        assert "120 minutes" in exc_info.value.message

    def test_expired_lock_restarts_the_count(self, auth_service, db, clock):
        for _ in range(5):
            with pytest.raises(AuthenticationError):
                auth_service.login(ADMIN_EMAIL, "wrong-password")
        clock.advance(hours=2, minutes=1)

        with pytest.raises(AuthenticationError):
            auth_service.login(ADMIN_EMAIL, "wrong-password")

        admin = admin_record(db)
        assert admin.login_attempts == 1
        assert admin.lock_until is None

    def test_success_resets_counters(self, auth_service, db, clock):
        for _ in range(3):
            with pytest.raises(AuthenticationError):
                auth_service.login(ADMIN_EMAIL, "wrong-password")

        admin, token = auth_service.login(ADMIN_EMAIL.upper(), ADMIN_PASSWORD)

        assert token
        assert admin.login_attempts == 0
        assert admin.last_login == clock.current

    def test_locked_account_token_is_refused(self, auth_service, db):
        _, token = auth_service.login(ADMIN_EMAIL, ADMIN_PASSWORD)
        for _ in range(5):
            with pytest.raises(AuthenticationError):
                auth_service.login(ADMIN_EMAIL, "wrong-password")

        with pytest.raises(AccountLockedError):
            auth_service.resolve_token(token)


class TestLoginEndpoint:
    def test_login(self, client, settings):
        response = client.post(f"{ADMIN}/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})

        body = response.json()
        assert response.status_code == 200
        assert body["message"] == "Login successful"
        assert body["data"]["token_type"] == "bearer"
        assert body["data"]["expires_in"] == settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60
        assert body["data"]["user"]["role"] == "admin"
        assert "password_hash" not in body["data"]["user"]

    def test_wrong_password(self, client):
        response = client.post(f"{ADMIN}/login", json={"email": ADMIN_EMAIL, "password": "nope-nope"})

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid credentials"

    def test_unknown_email(self, client):
        response = client.post(f"{ADMIN}/login", json={"email": "ghost@example.com", "password": "whatever"})

        assert response.status_code == 401

    def test_lockout_over_http(self, client):
        for _ in range(5):
            client.post(f"{ADMIN}/login", json={"email": ADMIN_EMAIL, "password": "nope-nope"})

        response = client.post(f"{ADMIN}/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})

        assert response.status_code == 423
        assert response.json()["error_code"] == "ACCOUNT_LOCKED"


class TestAccount:
    def test_me(self, client, admin_headers):
        body = client.get(f"{ADMIN}/me", headers=admin_headers).json()

        assert body["data"]["email"] == ADMIN_EMAIL
        assert body["data"]["full_name"] == "Hotel Admin"
        assert body["data"]["last_login"] is not None

    def test_me_without_token(self, client):
        response = client.get(f"{ADMIN}/me")

        assert response.status_code == 401
        assert response.json()["message"] == "Not authorized to access this route"

    def test_me_with_garbage_token(self, client):
        response = client.get(f"{ADMIN}/me", headers={"Authorization": "Bearer garbage"})

        assert response.status_code == 401
        assert response.json()["error_code"] == "TOKEN_INVALID"

    def test_profile_update(self, client, admin_headers):
        response = client.put(f"{ADMIN}/profile", json={"first_name": "Head", "phone": "+1 555 010 9999"}, headers=admin_headers)

        data = response.json()["data"]
        assert response.json()["message"] == "Profile updated successfully"
        assert data["full_name"] == "Head Admin"
        assert data["phone"] == "+1 555 010 9999"

    def test_profile_rejects_email_change(self, client, admin_headers):
        response = client.put(f"{ADMIN}/profile", json={"email": "new@example.com"}, headers=admin_headers)

        assert response.status_code == 400

    def test_change_password(self, client, admin_headers):
        response = client.put(
            f"{ADMIN}/password",
            json={"current_password": ADMIN_PASSWORD, "new_password": "brand-new-pass"},
            headers=admin_headers,
        )

        assert response.json()["message"] == "Password changed successfully"
        assert login(client, ADMIN_EMAIL, "brand-new-pass")

    def test_change_password_wrong_current(self, client, admin_headers):
        response = client.put(
            f"{ADMIN}/password",
            json={"current_password": "not-it-at-all", "new_password": "brand-new-pass"},
            headers=admin_headers,
        )

        assert response.status_code == 401
        assert response.json()["message"] == "Current password is incorrect"

    def test_change_password_must_differ(self, client, admin_headers):
        response = client.put(
            f"{ADMIN}/password",
            json={"current_password": ADMIN_PASSWORD, "new_password": ADMIN_PASSWORD},
            headers=admin_headers,
        )

        assert response.status_code == 400


class TestUsers:
    def test_role_defaults_apply(self, client, admin_headers):
        response = client.post(
            f"{ADMIN}/users",
            json={
                "first_name": "Mia",
                "last_name": "Manager",
                "email": "Mia@example.com",
                "password": "manager-pass",
                "role": "manager",
            },
            headers=admin_headers,
        )

        data = response.json()["data"]
        assert response.status_code == 201
        assert data["email"] == "mia@example.com"
        assert set(data["permissions"]) == {
            "manage_rooms",
            "manage_bookings",
            "manage_payments",
            "manage_contacts",
            "view_analytics",
            "view_reports",
        }

    def test_explicit_permissions(self, client, admin_headers):
        data = client.post(
            f"{ADMIN}/users",
            json={
                "first_name": "Rex",
                "last_name": "Reports",
                "email": "rex@example.com",
                "password": "reports-pass",
                "role": "staff",
                "permissions": ["view_reports"],
            },
            headers=admin_headers,
        ).json()["data"]

        assert data["permissions"] == ["view_reports"]

    def test_duplicate_email(self, client, admin_headers):
        response = client.post(
            f"{ADMIN}/users",
            json={"first_name": "A", "last_name": "B", "email": ADMIN_EMAIL, "password": "whatever-1"},
            headers=admin_headers,
        )

        assert response.status_code == 409
        assert response.json()["message"] == "User with this email already exists"

    def test_staff_cannot_create_users(self, client, staff_headers):
        response = client.post(
            f"{ADMIN}/users",
            json={"first_name": "A", "last_name": "B", "email": "c@example.com", "password": "whatever-1"},
            headers=staff_headers,
        )

        assert response.status_code == 403

    def test_staff_cannot_view_analytics(self, client, staff_headers):
        assert client.get(f"{ADMIN}/analytics/revenue", headers=staff_headers).status_code == 403
        assert client.get(f"{ADMIN}/dashboard/stats", headers=staff_headers).status_code == 200

    def test_list_users(self, client, admin_headers, staff_headers):
        body = client.get(f"{ADMIN}/users", headers=admin_headers).json()

        assert body["message"] == "Admin users retrieved"
        assert body["total"] == 2
        assert {u["email"] for u in body["data"]} == {ADMIN_EMAIL, "staff@example.com"}
        assert all("password_hash" not in u for u in body["data"])

    def test_list_users_filters(self, client, admin_headers, staff_headers):
        staff_only = client.get(f"{ADMIN}/users", params={"role": "staff"}, headers=admin_headers).json()
        by_name = client.get(f"{ADMIN}/users", params={"search": "desk"}, headers=admin_headers).json()
        inactive = client.get(f"{ADMIN}/users", params={"is_active": False}, headers=admin_headers).json()

        assert [u["email"] for u in staff_only["data"]] == ["staff@example.com"]
        assert [u["full_name"] for u in by_name["data"]] == ["Sam Desk"]
        assert inactive["total"] == 0

    def test_list_users_paginates(self, client, admin_headers, staff_headers):
        body = client.get(f"{ADMIN}/users", params={"page": 2, "limit": 1}, headers=admin_headers).json()

        assert body["count"] == 1
        assert body["pagination"] == {"page": 2, "limit": 1, "pages": 2}

    def test_staff_cannot_list_users(self, client, staff_headers):
        assert client.get(f"{ADMIN}/users", headers=staff_headers).status_code == 403
