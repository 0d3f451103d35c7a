"""
Tests for FastAPI Endpoints

Integration tests for the rental API.
"""

import pytest
from fastapi.testclient import TestClient

from memberclub.api.server import app


@pytest.fixture
def client(system):
    """Test client bound to the fixture session."""
    app.state.system = system
    yield TestClient(app)
    app.state.system = None


@pytest.fixture
def auth_headers():
    """Headers with valid API key."""
    return {"X-API-Key": "test-key-12345"}


class TestHealthEndpoint:

    def test_health_no_auth_required(self, client, tent):
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["items"] == 1
        assert "uptime_seconds" in data

    def test_no_session_attached(self):
        app.state.system = None
        response = TestClient(app).get("/health")

        assert response.status_code == 503


class TestLoginEndpoint:

    def test_login_returns_api_key(self, client):
        response = client.post("/login", json={"username": "operator", "password": "s3cret"})

        assert response.status_code == 200
        assert response.json()["api_key"] == "test-key-12345"

    def test_login_wrong_password(self, client):
        response = client.post("/login", json={"username": "operator", "password": "nope"})

        assert response.status_code == 401


class TestAuth:

    def test_missing_key(self, client):
        assert client.get("/items").status_code == 422

    def test_wrong_key(self, client):
        assert client.get("/items", headers={"X-API-Key": "wrong-key"}).status_code == 401


class TestRentalEndpoints:

    def test_quote(self, client, auth_headers, tent, premium_member):
        response = client.post(
            "/quote",
            json={"member_id": premium_member.member_id, "item_id": tent.item_id, "duration": 2},
            headers=auth_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["base_price"] == 200.0
        assert data["price"] == pytest.approx(140.0)

    def test_create_and_conflict(self, client, auth_headers, tent, standard_member):
        body = {"member_id": standard_member.member_id, "item_id": tent.item_id, "duration": 3}

        first = client.post("/rentals", json=body, headers=auth_headers)
        second = client.post("/rentals", json=body, headers=auth_headers)

        assert first.status_code == 201
        assert first.json()["rental_id"] == "RENT-001"
        assert first.json()["total_cost"] == 300.0
        assert second.status_code == 409
        assert second.json()["detail"]["error"] == "ITEM_NOT_AVAILABLE"

    def test_create_unknown_member(self, client, auth_headers, tent):
        response = client.post(
            "/rentals",
            json={"member_id": 99, "item_id": tent.item_id, "duration": 1},
            headers=auth_headers,
        )

        assert response.status_code == 404
        assert response.json()["detail"]["error"] == "MEMBER_NOT_FOUND"

    def test_invalid_unit(self, client, auth_headers, tent, standard_member):
        response = client.post(
            "/rentals",
            json={
                "member_id": standard_member.member_id,
                "item_id": tent.item_id,
                "duration": 1,
                "unit": "WEEKLY",
            },
            headers=auth_headers,
        )

        assert response.status_code == 400

    def test_zero_duration_rejected(self, client, auth_headers, tent, standard_member):
        response = client.post(
            "/rentals",
            json={"member_id": standard_member.member_id, "item_id": tent.item_id, "duration": 0},
            headers=auth_headers,
        )

        assert response.status_code == 422

    def test_return_with_late_fee(self, client, auth_headers, clock, tent, standard_member):
        client.post(
            "/rentals",
            json={"member_id": standard_member.member_id, "item_id": tent.item_id, "duration": 3},
            headers=auth_headers,
        )
        clock.advance(5)

        pending = client.get("/rentals/RENT-001", headers=auth_headers).json()
        assert pending["pending_late_fee"]["fee"] == 200.0

        response = client.post("/rentals/RENT-001/return", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["late_fee"] == 200.0
        assert client.post("/rentals/RENT-001/return", headers=auth_headers).status_code == 409

        revenue = client.get("/revenue", headers=auth_headers).json()
        assert revenue["by_source"]["LATE_FEE"] == 200.0

    def test_cancel_frees_item(self, client, auth_headers, tent, standard_member):
        client.post(
            "/rentals",
            json={"member_id": standard_member.member_id, "item_id": tent.item_id, "duration": 1},
            headers=auth_headers,
        )

        response = client.post("/rentals/RENT-001/cancel", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["status"] == "CANCELLED"
        items = client.get("/items?available_only=true", headers=auth_headers).json()
        assert items["total"] == 1

    def test_list_by_status(self, client, auth_headers, tent, kayak, standard_member):
        for item in (tent, kayak):
            client.post(
                "/rentals",
                json={"member_id": standard_member.member_id, "item_id": item.item_id, "duration": 1},
                headers=auth_headers,
            )
        client.post("/rentals/RENT-001/cancel", headers=auth_headers)

        data = client.get("/rentals?status=active", headers=auth_headers).json()

        assert [r["rental_id"] for r in data["rentals"]] == ["RENT-002"]


class TestCheckoutEndpoints:

    def test_checkout_quote(self, client, auth_headers, tent, kayak, student_member):
        response = client.post(
            "/checkout/quote",
            json={
                "member_id": student_member.member_id,
                "lines": [
                    {"item_id": tent.item_id, "duration": 1},
                    {"item_id": kayak.item_id, "duration": 1},
                ],
            },
            headers=auth_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["total_before_discount"] == pytest.approx(144.0)
        assert data["total_after_discount"] == pytest.approx(115.2)
        assert client.get("/revenue", headers=auth_headers).json()["total"] == 0.0

    def test_checkout_partial(self, client, auth_headers, tent, kayak, standard_member, student_member):
        client.post(
            "/rentals",
            json={"member_id": student_member.member_id, "item_id": tent.item_id, "duration": 1},
            headers=auth_headers,
        )

        response = client.post(
            "/checkout",
            json={
                "member_id": standard_member.member_id,
                "lines": [
                    {"item_id": tent.item_id, "duration": 1},
                    {"item_id": kayak.item_id, "duration": 1},
                ],
            },
            headers=auth_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "PARTIAL"
        assert data["failures"][0]["item_id"] == tent.item_id
        assert data["revenue_credited"] == 180.0

    def test_checkout_all_failed(self, client, auth_headers, tent, standard_member, student_member):
        client.post(
            "/rentals",
            json={"member_id": student_member.member_id, "item_id": tent.item_id, "duration": 1},
            headers=auth_headers,
        )

        response = client.post(
            "/checkout",
            json={"member_id": standard_member.member_id, "lines": [{"item_id": tent.item_id, "duration": 1}]},
            headers=auth_headers,
        )

        assert response.status_code == 409
        assert response.json()["detail"]["status"] == "FAILED"

    def test_checkout_empty_lines(self, client, auth_headers, standard_member):
        response = client.post(
            "/checkout",
            json={"member_id": standard_member.member_id, "lines": []},
            headers=auth_headers,
        )

        assert response.status_code == 422


class TestReturnEndpoints:

    def test_bulk_return_by_member(self, client, auth_headers, clock, tent, kayak, standard_member):
        client.post(
            "/checkout",
            json={
                "member_id": standard_member.member_id,
                "lines": [
                    {"item_id": tent.item_id, "duration": 1},
                    {"item_id": kayak.item_id, "duration": 1},
                ],
            },
            headers=auth_headers,
        )
        clock.advance(2)

        response = client.post("/returns", json={"member_id": standard_member.member_id}, headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["success_count"] == 2
        assert data["total_late_fees"] == pytest.approx(180.0)

    def test_bulk_return_reports_failures(self, client, auth_headers):
        response = client.post("/returns", json={"rental_ids": ["RENT-404"]}, headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["failure_count"] == 1

    def test_bulk_return_needs_target(self, client, auth_headers):
        assert client.post("/returns", json={}, headers=auth_headers).status_code == 400


class TestMemberEndpoints:

    def test_register_and_update_tier(self, client, auth_headers):
        created = client.post("/members", json={"name": "Ny Medlem"}, headers=auth_headers)

        assert created.status_code == 201
        member_id = created.json()["member_id"]

        updated = client.put(f"/members/{member_id}/tier", json={"tier": "student"}, headers=auth_headers)

        assert updated.status_code == 200
        assert updated.json()["tier"] == "STUDENT"

    def test_update_unknown_member(self, client, auth_headers):
        response = client.put("/members/99/tier", json={"tier": "PREMIUM"}, headers=auth_headers)

        assert response.status_code == 404

    def test_member_rentals(self, client, auth_headers, tent, standard_member):
        client.post(
            "/rentals",
            json={"member_id": standard_member.member_id, "item_id": tent.item_id, "duration": 1},
            headers=auth_headers,
        )

        data = client.get(f"/members/{standard_member.member_id}/rentals", headers=auth_headers).json()

        assert data["total"] == 1

    def test_remove_member_refused_while_renting(self, client, auth_headers, tent, standard_member):
        client.post(
            "/rentals",
            json={"member_id": standard_member.member_id, "item_id": tent.item_id, "duration": 1},
            headers=auth_headers,
        )

        refused = client.delete(f"/members/{standard_member.member_id}", headers=auth_headers)
        client.post("/rentals/RENT-001/return", headers=auth_headers)
        removed = client.delete(f"/members/{standard_member.member_id}", headers=auth_headers)

        assert refused.status_code == 409
        assert refused.json()["detail"]["error"] == "MEMBER_HAS_ACTIVE_RENTALS"
        assert removed.status_code == 204
        assert client.delete(f"/members/{standard_member.member_id}", headers=auth_headers).status_code == 404
