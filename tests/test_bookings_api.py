from app.models.base.enums import BookingStatus

from conftest import booking_payload, future

BOOKINGS = "/api/v1/bookings"


def create(client, room_id, check_in, check_out, **overrides):
    return client.post(BOOKINGS, json=booking_payload(room_id, check_in, check_out, **overrides))


class TestCreate:
    def test_public_create(self, client, room, relay):
        response = create(client, room.id, future(10), future(12))

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Booking created successfully"
        data = body["data"]
        assert data["booking_status"] == "pending"
        assert data["payment_status"] == "pending"
        assert data["number_of_nights"] == 2
        assert data["subtotal"] == 200.0
        assert data["taxes"] == 24.0
        assert data["fees"] == 25.0
        assert data["total_amount"] == 249.0
        assert data["card_last_four"] == "1234"
        assert data["guest_email"] == "ada@example.com"
        assert data["room"]["id"] == room.id
        assert "card_number" not in data
        assert relay.events[0]["event"] == "new-booking"

    def test_overlap_conflict(self, client, room):
        assert create(client, room.id, future(10), future(13)).status_code == 201

        response = create(client, room.id, future(12), future(14))

        assert response.status_code == 409
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Room is not available for the selected dates"
        assert body["error_code"] == "BOOKING_CONFLICT"

    def test_back_to_back(self, client, room):
        assert create(client, room.id, future(10), future(12)).status_code == 201
        assert create(client, room.id, future(12), future(14)).status_code == 201

    def test_past_check_in(self, client, room):
        response = create(client, room.id, future(-1), future(2))

        assert response.status_code == 400
        assert response.json()["message"] == "Check-in date cannot be in the past"

    def test_too_many_guests(self, client, room):
        response = create(client, room.id, future(3), future(4), guests=4)

        assert response.status_code == 400
        assert response.json()["message"] == "Room can accommodate maximum 2 guests"

    def test_unknown_room(self, client):
        response = create(client, "missing", future(3), future(4))

        assert response.status_code == 404

    def test_validation_errors_are_field_level(self, client, room):
        payload = booking_payload(room.id, future(3), future(4))
        payload["guest_info"]["email"] = "not-an-email"
        payload["number_of_guests"] = 0

        response = client.post(BOOKINGS, json=payload)

        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "Validation failed"
        assert {e["field"] for e in body["errors"]} == {"guest_info.email", "number_of_guests"}

    def test_unknown_fields_rejected(self, client, room):
        response = client.post(BOOKINGS, json=booking_payload(room.id, future(3), future(4), total_amount=1))

        assert response.status_code == 400


class TestLookup:
    def test_confirmation_lookup_is_public(self, client, room, admin_headers):
        booking = create(client, room.id, future(3), future(4)).json()["data"]
        client.patch(f"{BOOKINGS}/{booking['id']}/status", json={"status": "confirmed"}, headers=admin_headers)
        number = client.get(f"{BOOKINGS}/{booking['id']}", headers=admin_headers).json()["data"]["confirmation_number"]

        response = client.get(f"{BOOKINGS}/confirmation/{number}")

        assert response.status_code == 200
        assert response.json()["data"]["id"] == booking["id"]

    def test_unknown_confirmation(self, client):
        response = client.get(f"{BOOKINGS}/confirmation/CONF0")

        assert response.status_code == 404
        assert response.json()["error_code"] == "BOOKING_NOT_FOUND"

    def test_list_requires_auth(self, client):
        assert client.get(BOOKINGS).status_code == 401

    def test_list_with_filters(self, client, admin_headers, room_factory, booking_factory):
        first = room_factory(name="First")
        second = room_factory(name="Second")
        booking_factory(first, future(3), future(5))
        booking_factory(second, future(3), future(5), booking_status=BookingStatus.CANCELLED, guest_email="x@y.com")

        all_bookings = client.get(BOOKINGS, headers=admin_headers).json()
        cancelled = client.get(BOOKINGS, params={"status": "cancelled"}, headers=admin_headers).json()
        by_room = client.get(BOOKINGS, params={"room_id": first.id}, headers=admin_headers).json()

        assert all_bookings["total"] == 2
        assert [b["guest_email"] for b in cancelled["data"]] == ["x@y.com"]
        assert by_room["total"] == 1

    def test_get_unknown(self, client, admin_headers):
        assert client.get(f"{BOOKINGS}/missing", headers=admin_headers).status_code == 404

    def test_stats(self, client, admin_headers, room):
        create(client, room.id, future(3), future(4))

        body = client.get(f"{BOOKINGS}/stats", params={"period": 7}, headers=admin_headers).json()

        assert body["data"]["period_days"] == 7
        assert body["data"]["total_bookings"] == 1
        assert body["data"]["cancellation_rate"] == 0.0


class TestLifecycle:
    def test_status_progression(self, client, admin_headers, room, relay):
        booking_id = create(client, room.id, future(0), future(2)).json()["data"]["id"]

        for status in ("confirmed", "checked_in", "checked_out"):
            response = client.patch(
                f"{BOOKINGS}/{booking_id}/status", json={"status": status}, headers=admin_headers
            )
            assert response.status_code == 200, response.text

        data = response.json()["data"]
        assert data["booking_status"] == "checked_out"
        assert data["confirmation_number"].startswith("CONF")
        assert data["check_in_time"] is not None
        assert data["check_out_time"] is not None
        assert [e["event"] for e in relay.events] == ["new-booking"] + ["booking-updated"] * 3

    def test_checked_out_room_can_be_rebooked(self, client, admin_headers, room):
        booking_id = create(client, room.id, future(0), future(2)).json()["data"]["id"]
        for status in ("confirmed", "checked_in", "checked_out"):
            client.patch(f"{BOOKINGS}/{booking_id}/status", json={"status": status}, headers=admin_headers)

        assert create(client, room.id, future(1), future(3)).status_code == 201

    def test_invalid_transition(self, client, admin_headers, room):
        booking_id = create(client, room.id, future(3), future(4)).json()["data"]["id"]

        response = client.patch(
            f"{BOOKINGS}/{booking_id}/status", json={"status": "checked_out"}, headers=admin_headers
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Cannot change booking status from pending to checked_out"

    def test_unknown_status_value(self, client, admin_headers, room):
        booking_id = create(client, room.id, future(3), future(4)).json()["data"]["id"]

        response = client.patch(
            f"{BOOKINGS}/{booking_id}/status", json={"status": "teleported"}, headers=admin_headers
        )

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "status"

    def test_payment_confirms(self, client, admin_headers, room):
        booking_id = create(client, room.id, future(3), future(4)).json()["data"]["id"]

        response = client.patch(
            f"{BOOKINGS}/{booking_id}/payment",
            json={"payment_status": "completed", "transaction_id": "txn_1"},
            headers=admin_headers,
        )

        data = response.json()["data"]
        assert response.json()["message"] == "Payment status updated successfully"
        assert data["booking_status"] == "confirmed"
        assert data["payment_status"] == "completed"
        assert data["payment_date"] is not None

    def test_staff_cannot_update_payment(self, client, staff_headers, room):
        booking_id = create(client, room.id, future(3), future(4)).json()["data"]["id"]

        response = client.patch(
            f"{BOOKINGS}/{booking_id}/payment", json={"payment_status": "completed"}, headers=staff_headers
        )

        assert response.status_code == 403

    def test_staff_can_cancel(self, client, staff_headers, room):
        booking_id = create(client, room.id, future(3), future(4)).json()["data"]["id"]

        response = client.patch(
            f"{BOOKINGS}/{booking_id}/cancel",
            json={"reason": "Flight cancelled", "refund_amount": "40.00"},
            headers=staff_headers,
        )

        data = response.json()["data"]
        assert response.status_code == 200
        assert data["booking_status"] == "cancelled"
        assert data["cancellation_reason"] == "Flight cancelled"
        assert data["refund_amount"] == 40.0
        assert data["refund_status"] == "pending"

    def test_cancel_without_body(self, client, admin_headers, room):
        booking_id = create(client, room.id, future(3), future(4)).json()["data"]["id"]

        data = client.patch(f"{BOOKINGS}/{booking_id}/cancel", headers=admin_headers).json()["data"]

        assert data["cancellation_reason"] == "Cancelled by guest"
        assert data["refund_status"] == "not_applicable"

    def test_cancel_twice(self, client, admin_headers, room):
        booking_id = create(client, room.id, future(3), future(4)).json()["data"]["id"]
        client.patch(f"{BOOKINGS}/{booking_id}/cancel", headers=admin_headers)

        response = client.patch(f"{BOOKINGS}/{booking_id}/cancel", headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["error_code"] == "BOOKING_ALREADY_CANCELLED"
