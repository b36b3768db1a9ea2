from decimal import Decimal

from app.models.base.enums import BookingStatus, RoomType

from conftest import future

ROOMS = "/api/v1/rooms"


def room_payload(**overrides):
    payload = {
        "name": "Garden Suite",
        "description": "Quiet suite opening onto the garden.",
        "type": "suite",
        "price_per_night": "180.00",
        "max_occupancy": 3,
        "size": 500,
        "bed_type": "queen",
        "amenities": ["WiFi", " Balcony "],
    }
    payload.update(overrides)
    return payload


class TestBrowse:
    def test_list_envelope_and_sorting(self, client, room_factory):
        room_factory(name="Budget", price_per_night=Decimal("80.00"), type=RoomType.SINGLE)
        room_factory(name="Premium", price_per_night=Decimal("300.00"), type=RoomType.PRESIDENTIAL)

        response = client.get(ROOMS, params={"sort": "-price_per_night"})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["total"] == 2
        assert body["count"] == 2
        assert body["pagination"] == {"page": 1, "limit": 10, "pages": 1}
        assert [r["name"] for r in body["data"]] == ["Premium", "Budget"]
        assert body["data"][0]["price_per_night"] == 300.0

    def test_middleware_headers(self, client):
        response = client.get(ROOMS, headers={"X-Request-ID": "req-123"})

        assert response.headers["X-Request-ID"] == "req-123"
        assert float(response.headers["X-Process-Time"]) >= 0
        assert response.headers["X-Content-Type-Options"] == "nosniff"

    def test_attribute_filters(self, client, room_factory):
        room_factory(name="Small", max_occupancy=1, price_per_night=Decimal("60.00"))
        room_factory(name="Family", max_occupancy=4, price_per_night=Decimal("150.00"))
        room_factory(name="Closed", max_occupancy=4, is_available=False)

        response = client.get(ROOMS, params={"max_occupancy": 3, "max_price": 200, "is_available": True})

        assert [r["name"] for r in response.json()["data"]] == ["Family"]

    def test_amenities_must_all_match(self, client, room_factory):
        room_factory(name="Plain", amenities=["WiFi"])
        room_factory(name="Loaded", amenities=["WiFi", "Jacuzzi"])

        response = client.get(ROOMS, params={"amenities": "wifi,jacuzzi"})

        assert [r["name"] for r in response.json()["data"]] == ["Loaded"]

    def test_date_filter_excludes_booked_rooms(self, client, room_factory, booking_factory):
        booked = room_factory(name="Booked")
        room_factory(name="Free")
        booking_factory(booked, future(10), future(12))

        response = client.get(ROOMS, params={"check_in": future(11).isoformat(), "check_out": future(13).isoformat()})

        assert [r["name"] for r in response.json()["data"]] == ["Free"]

    def test_date_filter_ignores_cancelled_bookings(self, client, room, booking_factory):
        booking_factory(room, future(10), future(12), booking_status=BookingStatus.CANCELLED)

        response = client.get(ROOMS, params={"check_in": future(10).isoformat(), "check_out": future(12).isoformat()})

        assert response.json()["total"] == 1

    def test_date_filter_needs_both_dates(self, client):
        response = client.get(ROOMS, params={"check_in": future(1).isoformat()})

        assert response.status_code == 400
        assert response.json()["error_code"] == "INVALID_DATE_RANGE"

    def test_pagination(self, client, room_factory):
        for i in range(3):
            room_factory(name=f"Room {i}", price_per_night=Decimal(100 + i))

        body = client.get(ROOMS, params={"page": 2, "limit": 2}).json()

        assert body["count"] == 1
        assert body["total"] == 3
        assert body["pagination"]["pages"] == 2

    def test_featured(self, client, room_factory):
        room_factory(name="Star", is_featured=True)
        room_factory(name="Regular")

        body = client.get(f"{ROOMS}/featured").json()

        assert [r["name"] for r in body["data"]] == ["Star"]

    def test_get_room(self, client, room):
        body = client.get(f"{ROOMS}/{room.id}").json()

        assert body["data"]["id"] == room.id
        assert body["data"]["amenities"] == ["WiFi", "Mini Bar"]

    def test_get_unknown_room(self, client):
        response = client.get(f"{ROOMS}/missing")

        assert response.status_code == 404
        assert response.json() == {
            "success": False,
            "message": "Room not found",
            "error_code": "ROOM_NOT_FOUND",
            "details": {"resource_type": "Room", "resource_id": "missing"},
        }


class TestAvailability:
    def test_available(self, client, room):
        response = client.get(
            f"{ROOMS}/{room.id}/availability",
            params={"check_in": future(5).isoformat(), "check_out": future(8).isoformat()},
        )

        body = response.json()
        assert body["message"] == "Room is available"
        assert body["data"]["is_available"] is True
        assert body["data"]["nights"] == 3
        assert body["data"]["conflicting_bookings"] == 0

    def test_conflict_reported(self, client, room, booking_factory):
        booking_factory(room, future(5), future(7))

        body = client.get(
            f"{ROOMS}/{room.id}/availability",
            params={"check_in": future(6).isoformat(), "check_out": future(9).isoformat()},
        ).json()

        assert body["message"] == "Room is not available for the selected dates"
        assert body["data"]["is_available"] is False
        assert body["data"]["conflicting_bookings"] == 1

    def test_dates_required(self, client, room):
        response = client.get(f"{ROOMS}/{room.id}/availability")

        assert response.status_code == 400
        fields = {e["field"] for e in response.json()["errors"]}
        assert fields == {"check_in", "check_out"}


class TestManage:
    def test_create_requires_token(self, client):
        response = client.post(ROOMS, json=room_payload())

        assert response.status_code == 401
        assert response.json()["success"] is False

    def test_staff_cannot_create(self, client, staff_headers):
        response = client.post(ROOMS, json=room_payload(), headers=staff_headers)

        assert response.status_code == 403
        assert response.json()["error_code"] == "INSUFFICIENT_PERMISSIONS"

    def test_create(self, client, admin_headers):
        response = client.post(ROOMS, json=room_payload(), headers=admin_headers)

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Room created successfully"
        assert body["data"]["amenities"] == ["WiFi", "Balcony"]
        assert body["data"]["rating"] == 4.5
        assert body["data"]["is_available"] is True

    def test_create_validation(self, client, admin_headers):
        response = client.post(
            ROOMS,
            json=room_payload(max_occupancy=11, type="penthouse"),
            headers=admin_headers,
        )

        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "Validation failed"
        assert {e["field"] for e in body["errors"]} == {"max_occupancy", "type"}

    def test_partial_update(self, client, admin_headers, room):
        response = client.put(
            f"{ROOMS}/{room.id}",
            json={"price_per_night": "120.50", "is_featured": True},
            headers=admin_headers,
        )

        data = response.json()["data"]
        assert response.status_code == 200
        assert data["price_per_night"] == 120.5
        assert data["is_featured"] is True
        assert data["name"] == "Ocean Deluxe"

    def test_delete(self, client, admin_headers, room):
        response = client.delete(f"{ROOMS}/{room.id}", headers=admin_headers)

        assert response.status_code == 200
        assert client.get(f"{ROOMS}/{room.id}").status_code == 404

    def test_delete_refused_with_active_booking(self, client, admin_headers, room, booking_factory):
        booking_factory(room, future(3), future(5))

        response = client.delete(f"{ROOMS}/{room.id}", headers=admin_headers)

        assert response.status_code == 409
        assert response.json()["message"] == "Cannot delete room with active bookings"

    def test_delete_allowed_with_only_past_bookings(self, client, admin_headers, room, booking_factory):
        booking_factory(room, future(-5), future(-3), booking_status=BookingStatus.CHECKED_OUT)

        assert client.delete(f"{ROOMS}/{room.id}", headers=admin_headers).status_code == 200
