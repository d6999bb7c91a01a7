"""Health check endpoint tests."""

import pytest

from hookgate import __version__


@pytest.mark.asyncio
async def test_health_check(client):
    response = await client.get("/api/v1/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["service"] == "hookgate"
    assert data["version"] == __version__


@pytest.mark.asyncio
async def test_liveness(client):
    response = await client.get("/api/v1/health/live")
    assert response.json() == {"status": "alive"}
