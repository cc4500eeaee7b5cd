"""Health endpoint tests."""

import pytest


@pytest.mark.asyncio
async def test_health_returns_ok(unauthenticated_client):
    """Health is open and reports status, timestamp, and the database."""
    resp = await unauthenticated_client.get("/api/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "ok"
    assert data["database"] == "ok"
    assert "timestamp" in data
    assert "version" in data


@pytest.mark.asyncio
async def test_health_reports_redis_disabled_without_pool(unauthenticated_client):
    """Lifespan doesn't run under ASGITransport, so Redis is never initialized."""
    resp = await unauthenticated_client.get("/api/health")
    assert resp.json()["redis"] == "disabled"
