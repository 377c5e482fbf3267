"""Tests for the health check endpoint."""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_health_check_returns_200(api_client: AsyncClient):
    """Health endpoint should return 200 with status, version, environment and database state."""
    response = await api_client.get("/api/v1/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["database"] == "connected"
    assert "version" in data
    assert "environment" in data


@pytest.mark.asyncio
async def test_unknown_route_uses_error_envelope(api_client: AsyncClient):
    response = await api_client.get("/api/v1/nope")

    assert response.status_code == 404
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Route GET /api/v1/nope not found"
