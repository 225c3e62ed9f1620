"""Snapshot loading with optional fallback to the sample dataset."""

from __future__ import annotations

from dataclasses import dataclass, field

from invoicesense.core.exceptions import DatastoreError
from invoicesense.core.logging import get_logger
from invoicesense.features.analytics.schemas import ClientRecord, InvoiceRecord
from invoicesense.features.datastore.sources import InvoiceSource, SampleInvoiceSource

logger = get_logger(__name__)


@dataclass(frozen=True)
class Snapshot:
    """Records fetched for a single request.

    Attributes:
        invoices: Normalized invoice records.
        clients: Normalized client records (empty unless requested).
        sample: True when the data came from the sample dataset.
    """

    invoices: list[InvoiceRecord]
    clients: list[ClientRecord] = field(default_factory=lambda: [])
    sample: bool = False


async def load_snapshot(
    source: InvoiceSource,
    include_clients: bool = False,
    fallback_to_sample: bool = False,
) -> Snapshot:
    """Fetch invoices (and optionally clients) from a source.

    Args:
        source: Configured invoice source.
        include_clients: Also fetch the clients table.
        fallback_to_sample: Serve the sample dataset if the source fails.

    Returns:
        Snapshot of the fetched records.

    Raises:
        DatastoreError: If the source fails and fallback is disabled.
    """
    try:
        invoices = await source.fetch_records()
        clients = await source.fetch_clients() if include_clients else []
        return Snapshot(invoices=invoices, clients=clients, sample=source.is_sample)
    except DatastoreError as e:
        if not fallback_to_sample:
            raise
        logger.warning(
            "datastore.fallback_to_sample",
            error=e.message,
            error_code=e.code,
        )

    fallback = SampleInvoiceSource()
    return Snapshot(
        invoices=await fallback.fetch_records(),
        clients=await fallback.fetch_clients() if include_clients else [],
        sample=True,
    )
