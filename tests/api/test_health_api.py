"""API tests for health endpoints."""

import pytest
from httpx import AsyncClient

from stockroom import __version__


class TestHealth:
    async def test_root_liveness(self, client: AsyncClient):
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "version": __version__}

    async def test_healthy_without_provider(self, client: AsyncClient):
        response = await client.get("/api/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["version"] == __version__
        assert data["database"]["available"] is True
        assert data["llm"]["name"] == "disabled"
        assert data["uptime_seconds"] >= 0

    async def test_request_id_echoed(self, client: AsyncClient):
        response = await client.get("/health", headers={"X-Request-ID": "abc123"})
        assert response.headers["X-Request-ID"] == "abc123"

    async def test_request_id_generated(self, client: AsyncClient):
        response = await client.get("/health")
        assert response.headers["X-Request-ID"]
        assert response.headers["X-Response-Time"].endswith("ms")


class TestDegradedHealth:
    @pytest.fixture
    def llm(self, make_llm):
        return make_llm(healthy=False)

    async def test_down_provider_degrades(self, client: AsyncClient):
        data = (await client.get("/api/health")).json()
        assert data["status"] == "degraded"
        assert data["llm"]["name"] == "stub"
        assert data["llm"]["available"] is False
        assert data["database"]["available"] is True
