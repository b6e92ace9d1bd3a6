"""
Travel Journal Backend — Auth API Integration Tests
======================================================

What:  /api/auth/login, /register and /profile over HTTP.
How:   The app fixture seeds the demo account, so it is user 1 here too.

What we test:
    ✅ Demo login returns demo-token
    ✅ Register returns a token that works on journal routes
    ✅ Error bodies for bad credentials, duplicates and missing fields
    ✅ Profile lookup and its 401/404 cases
"""

import pytest


class TestLogin:
    """POST /api/auth/login."""

    @pytest.mark.asyncio
    async def test_demo_login(self, test_client):
        response = await test_client.post(
            "/api/auth/login", json={"username": "demo", "password": "demo"}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["token"] == "demo-token"
        assert body["user"]["id"] == 1
        assert body["user"]["username"] == "demo"
        assert "password" not in body["user"]
        assert "passwordHash" not in body["user"]

    @pytest.mark.asyncio
    async def test_wrong_password(self, test_client):
        response = await test_client.post(
            "/api/auth/login", json={"username": "demo", "password": "nope"}
        )

        assert response.status_code == 401
        assert response.json()["error"] == "Invalid credentials"

    @pytest.mark.asyncio
    async def test_empty_body(self, test_client):
        response = await test_client.post("/api/auth/login", json={})
        assert response.status_code == 401


class TestRegister:
    """POST /api/auth/register."""

    @pytest.mark.asyncio
    async def test_register_and_use_token(self, test_client):
        response = await test_client.post(
            "/api/auth/register",
            json={"username": "alice", "email": "alice@example.com", "password": "pw"},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["user"]["id"] == 2
        assert body["token"] == "token-2"

        headers = {"Authorization": f"Bearer {body['token']}"}
        created = await test_client.post(
            "/api/journal",
            json={"countryCode": "FI", "countryName": "Finland", "entry": "Hello"},
            headers=headers,
        )
        assert created.json()["userId"] == 2

    @pytest.mark.asyncio
    async def test_duplicate(self, test_client):
        response = await test_client.post(
            "/api/auth/register",
            json={"username": "demo", "email": "other@example.com", "password": "pw"},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "User already exists"

    @pytest.mark.asyncio
    async def test_missing_field(self, test_client):
        response = await test_client.post(
            "/api/auth/register", json={"username": "bob", "password": "pw"}
        )

        assert response.status_code == 400
        assert response.json()["error"] == "All fields are required"


class TestProfile:
    """GET /api/auth/profile."""

    @pytest.mark.asyncio
    async def test_profile(self, test_client, demo_headers):
        response = await test_client.get("/api/auth/profile", headers=demo_headers)

        assert response.status_code == 200
        assert response.json()["email"] == "demo@example.com"

    @pytest.mark.asyncio
    async def test_profile_requires_token(self, test_client):
        response = await test_client.get("/api/auth/profile")

        assert response.status_code == 401
        assert response.json()["error"] == "No token provided"

    @pytest.mark.asyncio
    async def test_profile_for_unknown_account(self, test_client):
        response = await test_client.get(
            "/api/auth/profile", headers={"Authorization": "Bearer token-77"}
        )

        assert response.status_code == 404
        assert response.json()["error"] == "User not found"
