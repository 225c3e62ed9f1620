"""Wiring of the invoice source into the FastAPI app."""

from fastapi import Request

from invoicesense.core.config import Settings
from invoicesense.core.logging import get_logger
from invoicesense.features.datastore.sources import (
    AirtableInvoiceSource,
    InvoiceSource,
    SampleInvoiceSource,
)

logger = get_logger(__name__)


def build_invoice_source(settings: Settings) -> InvoiceSource:
    """Choose the invoice source once, at startup.

    Args:
        settings: Application settings.

    Returns:
        Airtable source when credentials are set, otherwise the sample source.
    """
    if settings.airtable_configured:
        logger.info(
            "datastore.airtable_configured",
            base_id=settings.airtable_base_id,
            table=settings.airtable_table_name,
        )
        return AirtableInvoiceSource.from_settings(settings)

    logger.warning("datastore.sample_mode", reason="Airtable credentials not set")
    return SampleInvoiceSource()


def get_invoice_source(request: Request) -> InvoiceSource:
    """FastAPI dependency returning the source stored on app.state."""
    source: InvoiceSource = request.app.state.invoice_source
    return source
