"""
Tests for the health/metrics endpoints and response middleware.
"""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    response = await client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert "version" in data


@pytest.mark.asyncio
async def test_metrics_exposes_counters(client: AsyncClient):
    response = await client.get("/metrics")
    assert response.status_code == 200
    assert "eventhub_registration_attempts_total" in response.text


@pytest.mark.asyncio
async def test_response_headers(client: AsyncClient):
    response = await client.get("/")
    assert response.status_code == 200
    assert len(response.headers["x-request-id"]) == 8
    assert response.headers["x-response-time"].endswith("ms")
    assert response.headers["x-content-type-options"] == "nosniff"
    assert response.headers["x-frame-options"] == "SAMEORIGIN"
    assert "content-security-policy" not in response.headers


@pytest.mark.asyncio
async def test_stylesheet_served(client: AsyncClient):
    response = await client.get("/static/style.css")
    assert response.status_code == 200
    assert "text/css" in response.headers["content-type"]
