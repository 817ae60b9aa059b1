"""
End-to-end HTTP tests through FastAPI's TestClient.
"""

import base64
import time

import pytest

from auth.errors import GENERIC_AUTH_ERROR
from auth.jwt import TokenIssuer

ALICE = {"username": "alice", "email": "alice@example.com", "password": "Str0ng!Passw0rd"}


def _bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def _register_and_login(client) -> str:
    client.post("/auth/register", json=ALICE)
    response = client.post("/auth/login", json={"identifier": "alice", "password": ALICE["password"]})
    return response.json()["data"]["token"]


class TestAuthEndpoints:
    def test_register_then_duplicate(self, client):
        first = client.post("/auth/register", json=ALICE)
        assert first.status_code == 201
        body = first.json()
        assert body["success"] is True
        assert body["data"]["token"]
        assert body["data"]["user"]["username"] == "alice"

        second = client.post(
            "/auth/register",
            json={"username": "Alice", "email": "bob@example.com", "password": "An0ther!Secret"},
        )
        assert second.status_code == 400
        assert second.json() == {
            "success": False,
            "message": "Registration failed",
            "errors": [{"field": "username", "message": "Username already exists"}],
        }

    def test_login_wrong_password_is_generic(self, client):
        client.post("/auth/register", json=ALICE)
        response = client.post("/auth/login", json={"identifier": "alice@example.com", "password": "wrong"})
        assert response.status_code == 401
        assert response.json() == {"success": False, "message": GENERIC_AUTH_ERROR}

    def test_login_success_shape(self, client):
        client.post("/auth/register", json=ALICE)
        response = client.post("/auth/login", json={"identifier": "ALICE", "password": ALICE["password"]})
        assert response.status_code == 200
        user = response.json()["data"]["user"]
        assert set(user) == {"id", "username", "displayName", "email", "lastLogin"}

    def test_validation_errors(self, client):
        response = client.post("/auth/register", json={"username": "admin2", "email": "x", "password": "password"})
        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "Validation failed"
        assert {e["field"] for e in body["errors"]} == {"username", "email", "password"}

    def test_wrongly_typed_body_is_a_validation_error(self, client):
        response = client.post("/auth/login", json={"identifier": 123, "password": "x"})
        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "identifier"

    def test_me(self, client):
        token = _register_and_login(client)
        response = client.get("/auth/me", headers=_bearer(token))
        assert response.status_code == 200
        user = response.json()["data"]["user"]
        assert user["email"] == "alice@example.com"
        assert user["createdAt"] and user["lastLogin"]

    def test_logout(self, client):
        token = _register_and_login(client)
        response = client.post("/auth/logout", headers=_bearer(token))
        assert response.json() == {"success": True, "message": "Logout successful"}


class TestProtectedResources:
    def test_missing_token(self, client):
        response = client.get("/dashboard")
        assert response.status_code == 401
        assert response.json() == {"success": False, "message": "Access token required"}

    def test_non_bearer_scheme_counts_as_missing(self, client):
        response = client.get("/dashboard", headers={"Authorization": "Basic YWxpY2U6c2VjcmV0"})
        assert response.status_code == 401

    @pytest.mark.parametrize("token", ["garbage", "a.b.c"])
    def test_invalid_token(self, client, token):
        response = client.get("/dashboard", headers=_bearer(token))
        assert response.status_code == 403
        assert response.json() == {"success": False, "message": "Invalid or expired token"}

    def test_deeply_nested_token_is_forbidden(self, client):
        nested = base64.urlsafe_b64encode(b"[" * 3000).rstrip(b"=").decode()
        response = client.get("/dashboard", headers=_bearer(f"{nested}.e30.sig"))
        assert response.status_code == 403
        assert response.json() == {"success": False, "message": "Invalid or expired token"}

    def test_expired_token(self, client, settings):
        issued_long_ago = TokenIssuer(settings.jwt_secret, clock=lambda: time.time() - 90000)
        token = issued_long_ago.issue(
            user_id="1", username="alice", display_name="alice", email="alice@example.com"
        )
        response = client.get("/auth/me", headers=_bearer(token))
        assert response.status_code == 403

    def test_dashboard_echoes_claims(self, client):
        token = _register_and_login(client)
        response = client.get("/dashboard", headers=_bearer(token))
        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Welcome to your dashboard!"
        assert body["data"]["user"]["username"] == "alice"


class TestMisc:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["message"] == "Server is healthy"
        assert "X-Process-Time" in response.headers

    def test_unknown_route(self, client):
        response = client.get("/nope")
        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Route not found"}
