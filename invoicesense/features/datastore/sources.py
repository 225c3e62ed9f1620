"""Invoice sources feeding the analytics engine.

A source is configured once at startup and handed to request handlers by
reference (see dependencies.py):
- AirtableInvoiceSource: live data from the Airtable base
- SampleInvoiceSource: built-in demo dataset
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from datetime import UTC, datetime

from invoicesense.core.config import Settings
from invoicesense.core.exceptions import DatastoreError, DatastoreNotConfiguredError
from invoicesense.core.logging import get_logger
from invoicesense.features.analytics.schemas import ClientRecord, InvoiceRecord
from invoicesense.features.datastore.airtable import AirtableClient
from invoicesense.features.datastore.normalize import normalize_client, normalize_invoice
from invoicesense.features.datastore.sample import sample_clients, sample_invoices

logger = get_logger(__name__)


class InvoiceSource(ABC):
    """Abstract provider of invoice and client snapshots."""

    is_sample: bool = False

    @abstractmethod
    async def fetch_records(self) -> list[InvoiceRecord]:
        """Fetch all invoice records.

        Raises:
            DatastoreError: If the backing store cannot be read.
        """
        ...

    @abstractmethod
    async def fetch_clients(self) -> list[ClientRecord]:
        """Fetch all client records.

        Raises:
            DatastoreError: If the backing store cannot be read.
        """
        ...

    @abstractmethod
    async def check(self) -> bool:
        """Return True if the backing store is reachable."""
        ...

    async def aclose(self) -> None:
        """Release held resources."""
        return None


class AirtableInvoiceSource(InvoiceSource):
    """Invoice source backed by an Airtable base."""

    def __init__(
        self,
        client: AirtableClient,
        invoices_table: str = "Invoices",
        clients_table: str = "Clients",
    ) -> None:
        """Initialize the source.

        Args:
            client: Configured Airtable client.
            invoices_table: Name of the invoices table.
            clients_table: Name of the clients table.
        """
        self.client = client
        self.invoices_table = invoices_table
        self.clients_table = clients_table

    @classmethod
    def from_settings(cls, settings: Settings) -> AirtableInvoiceSource:
        """Create a source from application settings.

        Args:
            settings: Application settings.

        Returns:
            Configured Airtable source.

        Raises:
            DatastoreNotConfiguredError: If either Airtable credential is blank.
        """
        if not settings.airtable_configured:
            raise DatastoreNotConfiguredError(
                "Airtable not configured. Set AIRTABLE_API_KEY and AIRTABLE_BASE_ID."
            )
        client = AirtableClient(
            api_key=settings.airtable_api_key,
            base_id=settings.airtable_base_id,
            api_url=settings.airtable_api_url,
            timeout_seconds=settings.airtable_timeout_seconds,
            page_size=settings.airtable_page_size,
            max_retries=settings.airtable_max_retries,
            retry_delay=settings.airtable_retry_delay_seconds,
        )
        return cls(
            client,
            invoices_table=settings.airtable_table_name,
            clients_table=settings.airtable_clients_table,
        )

    async def fetch_records(self) -> list[InvoiceRecord]:
        """Fetch and normalize every invoice, newest first."""
        rows = await self.client.list_records(self.invoices_table, sort_field="Created")
        records = [normalize_invoice(row) for row in rows]
        undated = sum(1 for record in records if record.created_at is None)
        logger.info(
            "datastore.records_fetched",
            table=self.invoices_table,
            record_count=len(records),
            undated_count=undated,
        )
        return records

    async def fetch_clients(self) -> list[ClientRecord]:
        """Fetch and normalize every client."""
        rows = await self.client.list_records(self.clients_table)
        clients = [normalize_client(row) for row in rows]
        logger.info(
            "datastore.clients_fetched",
            table=self.clients_table,
            client_count=len(clients),
        )
        return clients

    async def check(self) -> bool:
        """Check connectivity with a single-record request to the invoices table."""
        try:
            await self.client.list_records(self.invoices_table, max_records=1)
        except DatastoreError:
            return False
        return True

    async def aclose(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()


class SampleInvoiceSource(InvoiceSource):
    """Serves the built-in demo dataset."""

    is_sample = True

    def __init__(self, clock: Callable[[], datetime] | None = None) -> None:
        """Initialize the source.

        Args:
            clock: Returns the reference time for sample timestamps.
        """
        self._clock = clock or (lambda: datetime.now(UTC))

    async def fetch_records(self) -> list[InvoiceRecord]:
        """Return the demo invoices."""
        return sample_invoices(self._clock())

    async def fetch_clients(self) -> list[ClientRecord]:
        """Return the demo clients."""
        return sample_clients(self._clock())

    async def check(self) -> bool:
        """The sample dataset is always available."""
        return True
