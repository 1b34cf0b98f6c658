"""
Integration tests for health probes and request id propagation.
"""

from __future__ import annotations

from httpx import AsyncClient


class TestHealth:
    async def test_healthz(self, async_client: AsyncClient):
        response = await async_client.get("/healthz")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    async def test_readyz(self, async_client: AsyncClient):
        response = await async_client.get("/readyz")
        assert response.status_code == 200
        assert response.json() == {"status": "ready"}

    async def test_request_id_is_echoed(self, async_client: AsyncClient):
        response = await async_client.get("/healthz", headers={"X-Request-ID": "req-123"})
        assert response.headers["X-Request-ID"] == "req-123"

    async def test_request_id_is_generated(self, async_client: AsyncClient):
        response = await async_client.get("/healthz")
        assert response.headers["X-Request-ID"]
