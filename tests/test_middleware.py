"""Tests for middleware components."""
import pytest
from httpx import AsyncClient, ASGITransport
from tokenvault.main import app, metrics

from .conftest import PAYLOAD, TOKEN


def request_count(method: str, path: str, status: int) -> float:
    value = metrics.registry.get_sample_value(
        "http_requests_total",
        {"service": "tokenvault", "method": method, "path": path, "status": str(status)},
    )
    return value or 0.0


@pytest.mark.asyncio
async def test_correlation_id_injection(api_vault):
    """Test that correlation ID is auto-generated if not provided."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.post("/token", json={"data": {"payload": PAYLOAD}})
        assert response.status_code == 201
        assert response.headers["X-Correlation-ID"]


@pytest.mark.asyncio
async def test_correlation_id_preserved(api_vault):
    """Test that provided correlation ID is preserved."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        correlation_id = "test-correlation-123"
        response = await client.post(
            "/token",
            json={"data": {"payload": PAYLOAD}},
            headers={"X-Correlation-ID": correlation_id}
        )
        assert response.status_code == 201
        assert response.headers["X-Correlation-ID"] == correlation_id


@pytest.mark.asyncio
async def test_correlation_id_in_error_body(api_vault):
    """Test that error responses carry the request's correlation ID."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get(
            "/token/unknown",
            headers={"X-Correlation-ID": "error-correlation-456"}
        )
        assert response.status_code == 404
        assert response.json()["correlation_id"] == "error-correlation-456"


@pytest.mark.asyncio
async def test_metrics_label_route_template(api_vault):
    """Test that request metrics use the route template, not the token."""
    before = request_count("GET", "/token/{token}/decrypt", 200)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        await client.post("/token", json={"data": {"payload": PAYLOAD}})
        response = await client.get(f"/token/{TOKEN}/decrypt")
        assert response.status_code == 200

    assert request_count("GET", "/token/{token}/decrypt", 200) == before + 1
    for family in metrics.registry.collect():
        for sample in family.samples:
            assert TOKEN not in sample.labels.get("path", "")


@pytest.mark.asyncio
async def test_metrics_count_error_statuses(api_vault):
    """Test that handled errors are counted with their status."""
    before = request_count("DELETE", "/token/{token}", 404)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.delete("/token/unknown")
        assert response.status_code == 404

    assert request_count("DELETE", "/token/{token}", 404) == before + 1


@pytest.mark.asyncio
async def test_metrics_endpoint_not_counted():
    """Test that scraping does not count itself."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        await client.get("/metrics/")

    for family in metrics.registry.collect():
        for sample in family.samples:
            assert not sample.labels.get("path", "").startswith("/metrics")
