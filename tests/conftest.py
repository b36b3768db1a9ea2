"""
Shared fixtures.

Each test gets its own SQLite file under ``tmp_path`` so that separate
sessions (and threads) really contend for the same database.
"""

from datetime import date, timedelta
from decimal import Decimal
from typing import Any, Dict

import pytest
from fastapi.testclient import TestClient

from app.api.deps import get_email_service, get_relay, get_settings
from app.config.settings import Settings
from app.core.notifications import RecordingRelay
from app.db.init_db import init_db
from app.db.session import build_engine, build_session_factory, get_db
from app.main import create_app
from app.models.base.enums import BedType, BookingStatus, PaymentMethod, PaymentStatus, RoomType
from app.models.booking.booking import Booking
from app.models.room.room import Room
from app.repositories.booking.booking_repository import BookingRepository
from app.schemas.booking.booking import BookingCreate
from app.services.booking import BookingService, BookingStatusService
from app.services.notification import EmailService
from app.utils.date_utils import today_utc
from app.utils.reference_utils import generate_booking_reference

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "admin-pass-1"

# Pinned "today" for service-level tests
TODAY = date(2025, 7, 1)


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        DATABASE_URL=f"sqlite:///{tmp_path / 'test.db'}",
        ENVIRONMENT="testing",
        JWT_SECRET_KEY="test-secret-key",
        PASSWORD_BCRYPT_ROUNDS=4,
        FIRST_ADMIN_EMAIL=ADMIN_EMAIL,
        FIRST_ADMIN_PASSWORD=ADMIN_PASSWORD,
        EMAIL_ENABLED=False,
        ADMIN_NOTIFICATION_EMAIL="frontdesk@example.com",
        ENFORCE_STATUS_TRANSITIONS=True,
    )


@pytest.fixture
def engine(settings):
    engine = build_engine(settings)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine, settings):
    factory = build_session_factory(engine)
    init_db(bind=engine, session_factory=factory, app_settings=settings)
    return factory


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def relay() -> RecordingRelay:
    return RecordingRelay()


@pytest.fixture
def email_service(settings) -> EmailService:
    return EmailService(settings)


@pytest.fixture
def app(settings, session_factory, relay, email_service):
    application = create_app()

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    application.dependency_overrides[get_db] = override_get_db
    application.dependency_overrides[get_settings] = lambda: settings
    application.dependency_overrides[get_relay] = lambda: relay
    application.dependency_overrides[get_email_service] = lambda: email_service
    return application


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


def login(client: TestClient, email: str, password: str) -> Dict[str, str]:
    response = client.post("/api/v1/admin/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['data']['access_token']}"}


@pytest.fixture
def admin_headers(client) -> Dict[str, str]:
    return login(client, ADMIN_EMAIL, ADMIN_PASSWORD)


@pytest.fixture
def staff_headers(client, admin_headers) -> Dict[str, str]:
    response = client.post(
        "/api/v1/admin/users",
        json={
            "first_name": "Sam",
            "last_name": "Desk",
            "email": "staff@example.com",
            "password": "staff-pass-1",
            "role": "staff",
        },
        headers=admin_headers,
    )
    assert response.status_code == 201, response.text
    return login(client, "staff@example.com", "staff-pass-1")


# --- Factories -----------------------------------------------------------------

@pytest.fixture
def room_factory(db):
    def create(**overrides: Any) -> Room:
        values = {
            "name": "Ocean Deluxe",
            "description": "Bright deluxe room facing the ocean.",
            "type": RoomType.DELUXE,
            "price_per_night": Decimal("100.00"),
            "max_occupancy": 2,
            "size": 350,
            "bed_type": BedType.KING,
            "amenities": ["WiFi", "Mini Bar"],
            "images": [],
            "is_available": True,
        }
        values.update(overrides)
        room = Room(**values)
        db.add(room)
        db.commit()
        return room

    return create


@pytest.fixture
def room(room_factory) -> Room:
    return room_factory()


def booking_payload(room_id: str, check_in: date, check_out: date, guests: int = 2, **overrides: Any) -> Dict[str, Any]:
    payload = {
        "room_id": room_id,
        "check_in_date": check_in.isoformat(),
        "check_out_date": check_out.isoformat(),
        "number_of_guests": guests,
        "guest_info": {
            "first_name": "Ada",
            "last_name": "Lovelace",
            "email": "Ada@Example.com",
            "phone": "+1 555 010 2000",
        },
        "payment_info": {"method": "credit_card", "card_number": "4111 1111 1111 1234"},
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def booking_factory(db):
    """Insert a booking directly, with claims when its status is blocking."""

    def create(room: Room, check_in: date, check_out: date, **overrides: Any) -> Booking:
        nights = (check_out - check_in).days
        subtotal = room.price_per_night * nights
        values = {
            "booking_reference": generate_booking_reference(),
            "room_id": room.id,
            "guest_first_name": "Grace",
            "guest_last_name": "Hopper",
            "guest_email": "grace@example.com",
            "guest_phone": "+1 555 010 3000",
            "check_in_date": check_in,
            "check_out_date": check_out,
            "number_of_guests": 1,
            "number_of_nights": nights,
            "price_per_night": room.price_per_night,
            "subtotal": subtotal,
            "taxes": Decimal("0.00"),
            "fees": Decimal("0.00"),
            "total_amount": subtotal,
            "payment_method": PaymentMethod.CASH,
            "payment_status": PaymentStatus.PENDING,
            "booking_status": BookingStatus.CONFIRMED,
        }
        values.update(overrides)
        booking = Booking(**values)
        if booking.booking_status in (BookingStatus.PENDING, BookingStatus.CONFIRMED, BookingStatus.CHECKED_IN):
            BookingRepository(db).add_claims(booking)
        db.add(booking)
        db.commit()
        return booking

    return create


@pytest.fixture
def booking_service(db, settings, relay, email_service) -> BookingService:
    return BookingService(db, settings, relay, email_service, clock=lambda: TODAY)


@pytest.fixture
def status_service(db, settings, relay, email_service) -> BookingStatusService:
    return BookingStatusService(db, settings, relay, email_service, clock=lambda: TODAY)


def make_booking_request(room_id: str, check_in: date, check_out: date, guests: int = 2) -> BookingCreate:
    return BookingCreate.model_validate(booking_payload(room_id, check_in, check_out, guests))


def future(days: int) -> date:
    """A date ``days`` after the real current UTC date, for API tests."""
    return today_utc() + timedelta(days=days)
