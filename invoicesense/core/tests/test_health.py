"""Tests for health check endpoints."""

import pytest

from invoicesense.features.datastore.sources import InvoiceSource
from invoicesense.main import app


class StubSource(InvoiceSource):
    """Source whose reachability is fixed at construction."""

    def __init__(self, reachable: bool) -> None:
        self.reachable = reachable

    async def fetch_records(self):
        return []

    async def fetch_clients(self):
        return []

    async def check(self) -> bool:
        return self.reachable


@pytest.mark.asyncio
async def test_health_check_returns_ok(client):
    """Health endpoint should return status ok."""
    response = await client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"


@pytest.mark.asyncio
async def test_health_check_includes_request_id_header(client):
    """Health endpoint should include X-Request-ID in response."""
    response = await client.get("/health")

    assert "X-Request-ID" in response.headers
    assert len(response.headers["X-Request-ID"]) > 0


@pytest.mark.asyncio
async def test_readiness_reports_sample_mode(client):
    """Readiness should be degraded while serving the sample dataset."""
    response = await client.get("/health/ready")

    assert response.status_code == 200
    assert response.json() == {"status": "degraded", "datastore": "sample"}


@pytest.mark.asyncio
async def test_readiness_with_reachable_datastore(client):
    """Readiness should be ok when the datastore answers."""
    app.state.invoice_source = StubSource(reachable=True)

    response = await client.get("/health/ready")

    assert response.json() == {"status": "ok", "datastore": "connected"}


@pytest.mark.asyncio
async def test_readiness_with_unreachable_datastore(client):
    """Readiness should be unhealthy when the datastore check fails."""
    app.state.invoice_source = StubSource(reachable=False)

    response = await client.get("/health/ready")

    assert response.json() == {"status": "unhealthy", "datastore": "disconnected"}
