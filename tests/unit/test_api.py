"""Tests for the HTTP layer — status codes and JSON bodies."""

import uuid
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from src.config import settings
from src.main import create_app
from src.registrations.errors import StoreUnavailable
from src.repositories.base import RegistrationStore

PAYLOAD = {
    "name": "Asha Verma",
    "phone": "9876543210",
    "email": "Asha@Example.com",
    "state": "Maharashtra",
    "city": "Pune",
}


def _register(client: TestClient, **overrides):
    return client.post("/api/register", json={**PAYLOAD, **overrides})


@pytest.fixture
def broken_store():
    store = AsyncMock(spec=RegistrationStore)
    store.name = "mock"
    return store


class TestHealth:
    """GET /api/health."""
    def test_health(self, client: TestClient):
        """Health check reports ok with a timestamp."""
        response = client.get("/api/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert body["message"]
        assert body["timestamp"]


class TestRegister:
    """POST /api/register."""
    def test_created(self, client: TestClient):
        """A valid submission returns 201 with id, name and normalized email."""
        response = _register(client)

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Registration submitted successfully!"
        assert body["data"]["id"]
        assert body["data"]["name"] == "Asha Verma"
        assert body["data"]["email"] == "asha@example.com"

    def test_missing_field(self, client: TestClient):
        """An absent field is rejected with the generic message."""
        payload = dict(PAYLOAD)
        del payload["city"]

        response = client.post("/api/register", json=payload)

        assert response.status_code == 400
        assert response.json() == {"success": False, "message": "All fields are required"}

    def test_invalid_phone(self, client: TestClient):
        """A phone outside the mobile pattern is a 400."""
        response = _register(client, phone="5123456789")

        assert response.status_code == 400
        assert response.json()["message"] == (
            "Please enter a valid 10-digit Indian mobile number"
        )

    def test_malformed_body(self, client: TestClient):
        """Unparseable JSON gets the standard failure body."""
        response = client.post(
            "/api/register",
            content="not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_duplicate_then_window_elapses(self, client: TestClient, clock):
        """Same phone inside 24h is a 409; allowed again once the window passes."""
        assert _register(client).status_code == 201

        response = _register(client, email="different@example.com")
        assert response.status_code == 409
        assert response.json()["success"] is False
        assert "already submitted" in response.json()["message"]

        clock.advance(hours=25)
        assert _register(client).status_code == 201

    def test_store_unavailable(self, broken_store):
        """A store outage maps to 503 and nothing is written."""
        broken_store.exists_since.side_effect = StoreUnavailable()

        with TestClient(create_app(store=broken_store)) as client:
            response = _register(client)

        assert response.status_code == 503
        assert response.json()["success"] is False
        broken_store.create.assert_not_called()

    def test_unexpected_error_hidden_in_production(self, broken_store, monkeypatch):
        """Production responses never carry the underlying error."""
        monkeypatch.setattr(settings, "environment", "production")
        broken_store.exists_since.return_value = False
        broken_store.create.side_effect = RuntimeError("disk on fire")

        with TestClient(create_app(store=broken_store)) as client:
            response = _register(client)

        assert response.status_code == 500
        assert response.json() == {
            "success": False,
            "message": "Something went wrong. Please try again later.",
        }

    def test_unexpected_error_detail_in_development(self, broken_store, monkeypatch):
        """Development responses echo the underlying error."""
        monkeypatch.setattr(settings, "environment", "development")
        broken_store.exists_since.return_value = False
        broken_store.create.side_effect = RuntimeError("disk on fire")

        with TestClient(create_app(store=broken_store)) as client:
            response = _register(client)

        assert response.status_code == 500
        assert response.json()["error"] == "disk on fire"


class TestListRegistrations:
    """GET /api/registrations."""
    def test_page_two_of_three(self, client: TestClient, clock):
        """page=2, limit=1 returns the second-newest record."""
        for i in range(3):
            _register(client, name=f"Lead {i}", phone=f"900000000{i}", email=f"l{i}@ex.com")
            clock.advance(minutes=5)

        response = client.get("/api/registrations", params={"page": 2, "limit": 1})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert [r["name"] for r in body["data"]] == ["Lead 1"]
        assert body["pagination"] == {"page": 2, "limit": 1, "total": 3, "pages": 3}

    def test_round_trip_fields(self, client: TestClient):
        """Listed records use camelCase keys and default status."""
        _register(client, inquiryType="inquiry")

        body = client.get("/api/registrations").json()

        assert body["pagination"] == {"page": 1, "limit": 20, "total": 1, "pages": 1}
        record = body["data"][0]
        assert record["name"] == "Asha Verma"
        assert record["email"] == "asha@example.com"
        assert record["status"] == "new"
        assert record["inquiryType"] == "inquiry"
        assert record["notes"] == ""
        assert record["createdAt"]

    def test_filter_by_inquiry_type(self, client: TestClient):
        """inquiryType query param filters the listing."""
        _register(client)
        _register(client, phone="9123456789", email="q@ex.com", inquiryType="inquiry")

        body = client.get("/api/registrations", params={"inquiryType": "inquiry"}).json()

        assert [r["email"] for r in body["data"]] == ["q@ex.com"]

    def test_bad_page(self, client: TestClient):
        """page below 1 is a 400."""
        response = client.get("/api/registrations", params={"page": 0})
        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_failure(self, broken_store):
        """Unexpected store errors return the route's own 500 message."""
        broken_store.list.side_effect = RuntimeError("boom")

        with TestClient(create_app(store=broken_store)) as client:
            response = client.get("/api/registrations")

        assert response.status_code == 500
        assert response.json()["message"] == "Failed to fetch registrations"


class TestUpdateRegistration:
    """PATCH /api/registrations/{id}."""
    def test_update_status_and_notes(self, client: TestClient):
        """Both fields can be changed in one call."""
        registration_id = _register(client).json()["data"]["id"]

        response = client.patch(
            f"/api/registrations/{registration_id}",
            json={"status": "contacted", "notes": "Called on Monday"},
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["id"] == registration_id
        assert data["status"] == "contacted"
        assert data["notes"] == "Called on Monday"

    def test_omitted_notes_unchanged(self, client: TestClient):
        """Notes survive a status-only update."""
        registration_id = _register(client).json()["data"]["id"]
        client.patch(f"/api/registrations/{registration_id}", json={"notes": "keep me"})

        data = client.patch(
            f"/api/registrations/{registration_id}", json={"status": "closed"}
        ).json()["data"]

        assert data["status"] == "closed"
        assert data["notes"] == "keep me"

    def test_bogus_status_existing(self, client: TestClient):
        """Unknown status is a 400 for an existing record."""
        registration_id = _register(client).json()["data"]["id"]

        response = client.patch(
            f"/api/registrations/{registration_id}", json={"status": "bogus"}
        )

        assert response.status_code == 400
        assert response.json() == {"success": False, "message": "Invalid status value"}

    def test_bogus_status_missing(self, client: TestClient):
        """Unknown status is a 400 even when the id does not exist."""
        response = client.patch(
            f"/api/registrations/{uuid.uuid4()}", json={"status": "bogus"}
        )
        assert response.status_code == 400

    def test_not_found(self, client: TestClient):
        """Unknown id is a 404."""
        response = client.patch(
            f"/api/registrations/{uuid.uuid4()}", json={"status": "enrolled"}
        )

        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Registration not found"}

    def test_failure(self, broken_store):
        """Unexpected store errors return the route's own 500 message."""
        broken_store.get.side_effect = RuntimeError("boom")

        with TestClient(create_app(store=broken_store)) as client:
            response = client.patch("/api/registrations/abc", json={"status": "new"})

        assert response.status_code == 500
        assert response.json()["message"] == "Failed to update registration"
