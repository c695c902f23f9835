"""
Pytest tests for registration, login and token handling
"""

import pytest

from helpers import register


class TestAuth:

    @pytest.fixture(autouse=True)
    def setup(self, client):
        self.client = client

    def test_register_returns_user_and_token(self):
        response = self.client.post(
            "/api/auth/register",
            json={
                "email": "jane@example.com",
                "password": "secret123",
                "firstName": "Jane",
                "lastName": "Doe",
            },
        )

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["data"]["user"]["email"] == "jane@example.com"
        assert body["data"]["user"]["role"] == "user"
        assert "password" not in body["data"]["user"]
        assert body["data"]["token"]

    def test_duplicate_email_is_rejected(self):
        register(self.client, "jane@example.com")

        response = self.client.post(
            "/api/auth/register",
            json={"email": "jane@example.com", "password": "secret123", "firstName": "Jane", "lastName": "Doe"},
        )

        assert response.status_code == 400
        assert response.json()["message"] == "User already exists with this email"

    def test_admin_registration_requires_passcode(self):
        response = self.client.post(
            "/api/auth/register",
            json={
                "email": "boss@example.com",
                "password": "secret123",
                "firstName": "Big",
                "lastName": "Boss",
                "role": "admin",
                "adminPasscode": "wrong",
            },
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid admin passcode"

    def test_short_password_is_a_validation_error(self):
        response = self.client.post(
            "/api/auth/register",
            json={"email": "jane@example.com", "password": "123", "firstName": "Jane", "lastName": "Doe"},
        )

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Validation error"
        assert body["errors"]

    def test_login(self):
        register(self.client, "jane@example.com", password="secret123")

        ok = self.client.post("/api/auth/login", json={"email": "jane@example.com", "password": "secret123"})
        bad = self.client.post("/api/auth/login", json={"email": "jane@example.com", "password": "nope"})
        unknown = self.client.post("/api/auth/login", json={"email": "who@example.com", "password": "secret123"})

        assert ok.status_code == 200
        assert ok.json()["data"]["token"]
        assert bad.status_code == 401
        assert bad.json()["message"] == "Invalid credentials"
        assert unknown.status_code == 401

    def test_me(self):
        user_id, headers = register(self.client, "jane@example.com", first_name="Jane")

        response = self.client.get("/api/auth/me", headers=headers)

        assert response.status_code == 200
        assert response.json()["data"]["user"]["id"] == user_id
        assert response.json()["data"]["user"]["firstName"] == "Jane"

    def test_missing_and_invalid_tokens(self):
        missing = self.client.get("/api/auth/me")
        invalid = self.client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})

        assert missing.status_code == 401
        assert missing.json()["message"] == "No token provided, authorization denied"
        assert invalid.status_code == 401
        assert invalid.json()["message"] == "Invalid token"

    def test_change_password(self):
        _, headers = register(self.client, "jane@example.com", password="secret123")

        wrong = self.client.put(
            "/api/auth/change-password",
            json={"currentPassword": "nope", "newPassword": "newsecret"},
            headers=headers,
        )
        ok = self.client.put(
            "/api/auth/change-password",
            json={"currentPassword": "secret123", "newPassword": "newsecret"},
            headers=headers,
        )
        login = self.client.post("/api/auth/login", json={"email": "jane@example.com", "password": "newsecret"})

        assert wrong.status_code == 400
        assert ok.status_code == 200
        assert login.status_code == 200

    def test_deactivated_user_loses_access(self, admin_headers):
        user_id, headers = register(self.client, "jane@example.com", password="secret123")

        self.client.delete(f"/api/users/{user_id}", headers=admin_headers)

        me = self.client.get("/api/auth/me", headers=headers)
        login = self.client.post("/api/auth/login", json={"email": "jane@example.com", "password": "secret123"})

        assert me.status_code == 401
        assert login.status_code == 401
        assert login.json()["message"] == "Account has been deactivated"

    def test_regular_user_cannot_reach_admin_routes(self):
        _, headers = register(self.client, "jane@example.com")

        response = self.client.get("/api/users", headers=headers)

        assert response.status_code == 403
        assert response.json()["success"] is False
