"""Tests for health endpoints."""

import pytest
from httpx import ASGITransport, AsyncClient

from orderdesk import __version__
from orderdesk.api.main import app


@pytest.fixture
async def async_client():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.mark.asyncio
async def test_root_health_check(async_client):
    response = await async_client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "version": __version__}


@pytest.mark.asyncio
async def test_api_health_check(async_client):
    response = await async_client.get("/api/health")
    assert response.status_code == 200

    data = response.json()
    assert data["status"] == "healthy"
    assert data["uptime_seconds"] >= 0


@pytest.mark.asyncio
async def test_db_health_check(async_client, migrated_db):
    response = await async_client.get("/api/health/db")
    assert response.status_code == 200

    data = response.json()
    assert data["status"] == "healthy"
    assert data["database"]["status"] == "available"


@pytest.mark.asyncio
async def test_request_id_echoed(async_client):
    response = await async_client.get("/health", headers={"X-Request-ID": "abc123"})
    assert response.headers["X-Request-ID"] == "abc123"
    assert "X-Response-Time" in response.headers
