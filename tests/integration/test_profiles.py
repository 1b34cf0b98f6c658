"""
Integration tests for profile endpoints.

Covers:
  GET    /api/v1/profiles/me
  PATCH  /api/v1/profiles/me
  POST   /api/v1/profiles/me/photo
  DELETE /api/v1/profiles/me/photo
"""

from __future__ import annotations

import io

from httpx import AsyncClient
from PIL import Image


def _jpeg_bytes(size=(800, 600)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, (20, 160, 90)).save(buffer, format="JPEG")
    return buffer.getvalue()


class TestProfile:
    async def test_get_me(self, async_client: AsyncClient, admin_headers: dict):
        response = await async_client.get("/api/v1/profiles/me", headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["role"] == "admin"
        assert response.json()["avatar_url"] is None

    async def test_update_name(self, async_client: AsyncClient, candidate_headers: dict):
        response = await async_client.patch(
            "/api/v1/profiles/me", json={"full_name": "  Asha V. Verma "}, headers=candidate_headers
        )
        assert response.status_code == 200
        assert response.json()["full_name"] == "Asha V. Verma"


class TestProfilePhoto:
    async def test_upload_replace_and_delete(self, async_client: AsyncClient, candidate_headers: dict, storage_root):
        first = await async_client.post(
            "/api/v1/profiles/me/photo",
            files={"file": ("me.jpg", _jpeg_bytes(), "image/jpeg")},
            headers=candidate_headers,
        )
        assert first.status_code == 200
        first_url = first.json()["avatar_url"]
        assert first_url.startswith("/api/v1/storage/profile-photos/")
        assert first_url.endswith(".webp")

        # Public bucket: readable without a token
        photo = await async_client.get(first_url)
        assert photo.status_code == 200
        assert Image.open(io.BytesIO(photo.content)).size == (512, 512)

        second = await async_client.post(
            "/api/v1/profiles/me/photo",
            files={"file": ("me2.jpg", _jpeg_bytes((300, 300)), "image/jpeg")},
            headers=candidate_headers,
        )
        assert second.status_code == 200
        old_path = first_url.removeprefix("/api/v1/storage/profile-photos/")
        assert not (storage_root / "profile-photos" / old_path).exists()

        deleted = await async_client.delete("/api/v1/profiles/me/photo", headers=candidate_headers)
        assert deleted.status_code == 200
        me = await async_client.get("/api/v1/profiles/me", headers=candidate_headers)
        assert me.json()["avatar_url"] is None

    async def test_delete_without_photo_is_404(self, async_client: AsyncClient, candidate_headers: dict):
        response = await async_client.delete("/api/v1/profiles/me/photo", headers=candidate_headers)
        assert response.status_code == 404

    async def test_non_image_is_400(self, async_client: AsyncClient, candidate_headers: dict):
        response = await async_client.post(
            "/api/v1/profiles/me/photo",
            files={"file": ("me.pdf", b"%PDF-1.4\n%%EOF\n", "application/pdf")},
            headers=candidate_headers,
        )
        assert response.status_code == 400
