"""
Integration tests for authentication endpoints.

Covers:
  POST /api/v1/auth/register
  POST /api/v1/auth/login
  POST /api/v1/auth/admin/login
  POST /api/v1/auth/refresh
  POST /api/v1/auth/logout
"""

from __future__ import annotations

from httpx import AsyncClient


class TestRegister:
    async def test_register_creates_candidate(self, async_client: AsyncClient):
        response = await async_client.post(
            "/api/v1/auth/register",
            json={"email": "New.User@Example.com", "password": "Password123", "full_name": "New User"},
        )
        assert response.status_code == 201
        tokens = response.json()
        assert tokens["token_type"] == "bearer"

        me = await async_client.get(
            "/api/v1/profiles/me",
            headers={"Authorization": f"Bearer {tokens['access_token']}"},
        )
        assert me.status_code == 200
        assert me.json()["email"] == "new.user@example.com"
        assert me.json()["role"] == "candidate"

    async def test_duplicate_email_is_refused(self, async_client: AsyncClient, candidate):
        response = await async_client.post(
            "/api/v1/auth/register",
            json={"email": "CANDIDATE@example.com", "password": "Password123", "full_name": "Dup"},
        )
        assert response.status_code == 400

    async def test_short_password_is_422(self, async_client: AsyncClient):
        response = await async_client.post(
            "/api/v1/auth/register",
            json={"email": "x@example.com", "password": "short", "full_name": "X"},
        )
        assert response.status_code == 422


class TestLogin:
    async def test_login_returns_tokens(self, async_client: AsyncClient, candidate):
        response = await async_client.post(
            "/api/v1/auth/login",
            json={"email": "candidate@example.com", "password": "Password123"},
        )
        assert response.status_code == 200
        assert response.json()["access_token"]
        assert response.json()["refresh_token"]

    async def test_wrong_password_is_401(self, async_client: AsyncClient, candidate):
        response = await async_client.post(
            "/api/v1/auth/login",
            json={"email": "candidate@example.com", "password": "WrongPassword"},
        )
        assert response.status_code == 401

    async def test_admin_login_refuses_candidates(self, async_client: AsyncClient, candidate):
        response = await async_client.post(
            "/api/v1/auth/admin/login",
            json={"email": "candidate@example.com", "password": "Password123"},
        )
        assert response.status_code == 403
        assert response.json()["detail"] == "Access denied. Admin privileges required."

    async def test_admin_login(self, async_client: AsyncClient, admin):
        response = await async_client.post(
            "/api/v1/auth/admin/login",
            json={"email": "hr@example.com", "password": "Password123"},
        )
        assert response.status_code == 200


class TestTokens:
    async def test_refresh_rotates_tokens(self, async_client: AsyncClient, candidate):
        login = await async_client.post(
            "/api/v1/auth/login",
            json={"email": "candidate@example.com", "password": "Password123"},
        )
        refresh_token = login.json()["refresh_token"]

        first = await async_client.post("/api/v1/auth/refresh", json={"refresh_token": refresh_token})
        assert first.status_code == 200
        assert first.json()["refresh_token"] != refresh_token

        replay = await async_client.post("/api/v1/auth/refresh", json={"refresh_token": refresh_token})
        assert replay.status_code == 401

    async def test_access_token_cannot_refresh(self, async_client: AsyncClient, candidate):
        login = await async_client.post(
            "/api/v1/auth/login",
            json={"email": "candidate@example.com", "password": "Password123"},
        )
        response = await async_client.post(
            "/api/v1/auth/refresh",
            json={"refresh_token": login.json()["access_token"]},
        )
        assert response.status_code == 401

    async def test_logout_invalidates_access_token(self, async_client: AsyncClient, candidate_headers):
        response = await async_client.post("/api/v1/auth/logout", headers=candidate_headers)
        assert response.status_code == 200

        me = await async_client.get("/api/v1/profiles/me", headers=candidate_headers)
        assert me.status_code == 401

    async def test_missing_token_is_401(self, async_client: AsyncClient):
        response = await async_client.get("/api/v1/profiles/me")
        assert response.status_code == 401
