"""API tests for account routes and the health check."""

import pytest


@pytest.mark.unit
class TestSignupRoute:
    def test_signup_returns_token(self, client):
        response = client.post(
            "/api/auth/signup", json={"name": "Carol", "email": "carol@example.com", "password": "secret123"}
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["name"] == "Carol"
        assert data["email"] == "carol@example.com"
        assert data["token"]
        assert "password" not in data

    def test_duplicate_email_is_bad_request(self, client, alice):
        response = client.post(
            "/api/auth/signup", json={"name": "Imposter", "email": "ALICE@example.com", "password": "secret123"}
        )

        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "message": "User already exists",
            "errors": [{"field": "email", "message": "User already exists"}],
        }

    def test_short_password_rejected(self, client):
        response = client.post("/api/auth/signup", json={"name": "D", "email": "d@example.com", "password": "123"})

        assert response.status_code == 400
        assert {
            "field": "password",
            "message": "Password must be at least 6 characters",
        } in response.json()["errors"]

    def test_invalid_email_rejected(self, client):
        response = client.post("/api/auth/signup", json={"name": "D", "email": "not-an-email", "password": "secret123"})

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "email"

    def test_blank_name_rejected(self, client):
        response = client.post("/api/auth/signup", json={"name": "  ", "email": "d@example.com", "password": "secret123"})

        assert response.status_code == 400
        assert {"field": "name", "message": "Name is required"} in response.json()["errors"]


@pytest.mark.unit
class TestLoginRoute:
    def test_login_returns_fresh_token(self, client, alice):
        response = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "secret123"})

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["id"] == alice["id"]

        tasks = client.get("/api/tasks", headers={"Authorization": f"Bearer {data['token']}"})
        assert tasks.status_code == 200

    def test_bad_password_unauthorized(self, client, alice):
        response = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "nope-nope"})

        assert response.status_code == 401
        assert response.json() == {"success": False, "message": "Invalid credentials"}


@pytest.mark.unit
class TestProfileRoutes:
    def test_profile_requires_token(self, client):
        assert client.get("/api/auth/profile").status_code == 401

    def test_get_profile(self, client, alice):
        response = client.get("/api/auth/profile", headers=alice["headers"])

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["id"] == alice["id"]
        assert data["email"] == "alice@example.com"
        assert data["bio"] == ""
        assert data["createdAt"]
        assert "password" not in data

    def test_update_profile(self, client, alice):
        response = client.put(
            "/api/auth/profile", json={"bio": "Likes lists", "avatar": "https://example.com/a.png"}, headers=alice["headers"]
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["bio"] == "Likes lists"
        assert data["avatar"] == "https://example.com/a.png"
        assert data["name"] == "Alice"

    def test_update_profile_to_taken_email(self, client, alice, bob):
        response = client.put("/api/auth/profile", json={"email": "bob@example.com"}, headers=alice["headers"])

        assert response.status_code == 400
        assert response.json()["message"] == "User already exists"


@pytest.mark.unit
def test_health_check(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {"status": "OK", "message": "Server is running"}


@pytest.mark.unit
def test_unknown_route_uses_error_envelope(client):
    response = client.get("/api/nope")

    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Not Found"}
