"""Shared pytest fixtures for InvoiceSense tests."""

import pytest
from httpx import ASGITransport, AsyncClient

from invoicesense.features.datastore.sources import SampleInvoiceSource
from invoicesense.main import app


@pytest.fixture
async def client():
    """Create async HTTP client for testing FastAPI endpoints.

    ASGITransport does not run the lifespan, so the invoice source is set on
    app.state here. Tests may replace it before issuing requests.
    """
    app.state.invoice_source = SampleInvoiceSource()
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
