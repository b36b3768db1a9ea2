import pytest

from app.models.base.enums import ContactPriority, InquiryType
from app.services.contact.contact_service import derive_priority

CONTACTS = "/api/v1/contacts"


def contact_payload(**overrides):
    payload = {
        "name": "Linus Guest",
        "email": "Linus@Example.com",
        "phone": "+1 555 010 4000",
        "inquiry_type": "room_information",
        "subject": "Question about suites",
        "message": "Do your suites have a kitchenette available?",
    }
    payload.update(overrides)
    return payload


def submit(client, **overrides):
    response = client.post(CONTACTS, json=contact_payload(**overrides))
    assert response.status_code == 201, response.text
    return response.json()["data"]["id"]


@pytest.mark.parametrize(
    "inquiry_type, priority",
    [
        (InquiryType.COMPLAINT, ContactPriority.HIGH),
        (InquiryType.GENERAL_INQUIRY, ContactPriority.LOW),
        (InquiryType.FEEDBACK, ContactPriority.LOW),
        (InquiryType.EVENT_PLANNING, ContactPriority.MEDIUM),
        (InquiryType.OTHER, ContactPriority.MEDIUM),
    ],
)
def test_priority_follows_inquiry_type(inquiry_type, priority):
    assert derive_priority(inquiry_type) == priority


class TestSubmit:
    def test_public_submission(self, client, email_service):
        response = client.post(CONTACTS, json=contact_payload())

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Contact submission received successfully. We will get back to you soon."
        assert set(body["data"]) == {"id", "submitted_at"}
        assert [m.to for m in email_service.outbox] == [["linus@example.com"], ["frontdesk@example.com"]]
        assert "room_information" in email_service.outbox[1].subject

    def test_records_request_metadata(self, client, admin_headers):
        contact_id = submit(client, inquiry_type="complaint")

        data = client.get(f"{CONTACTS}/{contact_id}", headers=admin_headers).json()["data"]

        assert data["priority"] == "high"
        assert data["status"] == "new"
        assert data["ip_address"] == "testclient"
        assert data["user_agent"] == "testclient"
        assert data["email"] == "linus@example.com"

    def test_validation(self, client):
        response = client.post(CONTACTS, json=contact_payload(subject="Hi", inquiry_type="spam"))

        assert response.status_code == 400
        assert {e["field"] for e in response.json()["errors"]} == {"subject", "inquiry_type"}


class TestInbox:
    def test_list_requires_auth(self, client):
        assert client.get(CONTACTS).status_code == 401

    def test_list_and_filter(self, client, admin_headers):
        submit(client, inquiry_type="complaint")
        submit(client, name="Other Person", inquiry_type="feedback")

        everything = client.get(CONTACTS, headers=admin_headers).json()
        high = client.get(CONTACTS, params={"priority": "high"}, headers=admin_headers).json()
        searched = client.get(CONTACTS, params={"search": "other"}, headers=admin_headers).json()

        assert everything["total"] == 2
        assert [c["inquiry_type"] for c in high["data"]] == ["complaint"]
        assert [c["name"] for c in searched["data"]] == ["Other Person"]

    def test_viewing_marks_read_once(self, client, admin_headers, staff_headers):
        contact_id = submit(client)

        first = client.get(f"{CONTACTS}/{contact_id}", headers=admin_headers).json()["data"]
        second = client.get(f"{CONTACTS}/{contact_id}", headers=staff_headers).json()["data"]

        assert first["is_read"] is True
        assert first["read_by"] == "Hotel Admin"
        assert second["read_by"] == "Hotel Admin"
        assert second["read_at"] == first["read_at"]

    def test_unknown_contact(self, client, admin_headers):
        response = client.get(f"{CONTACTS}/missing", headers=admin_headers)

        assert response.status_code == 404
        assert response.json()["error_code"] == "CONTACT_NOT_FOUND"

    def test_status_stamps(self, client, staff_headers):
        contact_id = submit(client)

        resolved = client.patch(
            f"{CONTACTS}/{contact_id}/status",
            json={"status": "resolved", "notes": "Answered by phone"},
            headers=staff_headers,
        ).json()
        closed = client.patch(
            f"{CONTACTS}/{contact_id}/status", json={"status": "closed"}, headers=staff_headers
        ).json()["data"]

        assert resolved["message"] == "Contact status updated successfully"
        assert resolved["data"]["resolved_at"] is not None
        assert resolved["data"]["notes"] == "Answered by phone"
        assert closed["closed_at"] is not None
        assert closed["resolved_at"] == resolved["data"]["resolved_at"]

    def test_response_moves_new_to_in_progress(self, client, staff_headers, email_service):
        contact_id = submit(client)

        response = client.post(
            f"{CONTACTS}/{contact_id}/response",
            json={"response_message": "Yes, every suite has one."},
            headers=staff_headers,
        )

        data = response.json()["data"]
        assert response.json()["message"] == "Response added successfully"
        assert data["status"] == "in_progress"
        assert data["response_message"] == "Yes, every suite has one."
        assert data["responded_by"] == "Sam Desk"
        assert data["responded_at"] is not None
        assert email_service.outbox[-1].subject.startswith("Re: Question about suites")

    def test_staff_cannot_delete(self, client, staff_headers):
        contact_id = submit(client)

        assert client.delete(f"{CONTACTS}/{contact_id}", headers=staff_headers).status_code == 403

    def test_admin_deletes(self, client, admin_headers):
        contact_id = submit(client)

        response = client.delete(f"{CONTACTS}/{contact_id}", headers=admin_headers)

        assert response.json()["message"] == "Contact deleted successfully"
        assert client.get(f"{CONTACTS}/{contact_id}", headers=admin_headers).status_code == 404

    def test_stats(self, client, admin_headers, staff_headers):
        submit(client, inquiry_type="complaint")
        submit(client, inquiry_type="feedback")
        read_id = submit(client, inquiry_type="feedback")
        client.get(f"{CONTACTS}/{read_id}", headers=admin_headers)
        client.patch(f"{CONTACTS}/{read_id}/status", json={"status": "closed"}, headers=staff_headers)

        stats = client.get(f"{CONTACTS}/stats", headers=admin_headers).json()["data"]

        assert stats["total"] == 3
        assert stats["unread"] == 2
        assert stats["pending"] == 2
        assert stats["recent"] == 3
        assert stats["by_priority"] == {"high": 1, "low": 2}
        assert stats["by_inquiry_type"] == {"complaint": 1, "feedback": 2}
        assert stats["by_status"] == {"new": 2, "closed": 1}


class TestBulk:
    def test_bulk_status_update(self, client, admin_headers, staff_headers):
        first, second = submit(client), submit(client)
        closed = submit(client)
        client.patch(f"{CONTACTS}/{closed}/status", json={"status": "closed"}, headers=staff_headers)

        response = client.patch(
            f"{CONTACTS}/bulk/status",
            json={"contact_ids": [first, second, closed, "missing"], "status": "closed", "notes": "Batch close"},
            headers=staff_headers,
        )

        body = response.json()
        assert response.status_code == 200
        assert body["message"] == "Updated 3 contacts"
        assert body["data"]["matched_count"] == 3
        assert body["data"]["modified_count"] == 3
        for contact_id in (first, second):
            data = client.get(f"{CONTACTS}/{contact_id}", headers=admin_headers).json()["data"]
            assert data["status"] == "closed"
            assert data["closed_at"] is not None
            assert data["notes"] == "Batch close"

    def test_bulk_status_counts_only_real_changes(self, client, staff_headers):
        contact_id = submit(client)

        data = client.patch(
            f"{CONTACTS}/bulk/status", json={"contact_ids": [contact_id], "status": "new"}, headers=staff_headers
        ).json()["data"]

        assert data["matched_count"] == 1
        assert data["modified_count"] == 0

    def test_bulk_status_needs_ids(self, client, staff_headers):
        response = client.patch(
            f"{CONTACTS}/bulk/status", json={"contact_ids": [], "status": "closed"}, headers=staff_headers
        )

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "contact_ids"

    def test_bulk_status_requires_manage_contacts(self, client):
        response = client.patch(f"{CONTACTS}/bulk/status", json={"contact_ids": ["x"], "status": "closed"})

        assert response.status_code == 401

    def test_bulk_delete(self, client, admin_headers):
        doomed = [submit(client), submit(client)]
        kept = submit(client)

        response = client.request(
            "DELETE", f"{CONTACTS}/bulk/delete", json={"contact_ids": doomed + ["missing"]}, headers=admin_headers
        )

        assert response.json()["message"] == "Deleted 2 contacts"
        assert response.json()["data"]["deleted_count"] == 2
        remaining = client.get(CONTACTS, headers=admin_headers).json()["data"]
        assert [c["id"] for c in remaining] == [kept]

    def test_staff_cannot_bulk_delete(self, client, staff_headers):
        contact_id = submit(client)

        response = client.request(
            "DELETE", f"{CONTACTS}/bulk/delete", json={"contact_ids": [contact_id]}, headers=staff_headers
        )

        assert response.status_code == 403
