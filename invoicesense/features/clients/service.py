"""Service layer for the client directory.

Client totals are all-time; no date window applies.
"""

from collections.abc import Sequence
from datetime import datetime

from invoicesense.core.config import get_settings
from invoicesense.core.exceptions import NotFoundError
from invoicesense.core.logging import get_logger
from invoicesense.features.analytics.engine import EARLIEST, AggregationEngine
from invoicesense.features.analytics.parsing import round2
from invoicesense.features.analytics.schemas import ClientRecord, InvoiceRecord
from invoicesense.features.clients.schemas import ClientDetail, ClientInvoice, ClientProfile
from invoicesense.features.datastore.service import load_snapshot
from invoicesense.features.datastore.sources import InvoiceSource

logger = get_logger(__name__)


def _newest_first(record: InvoiceRecord) -> tuple[bool, datetime]:
    # Undated invoices sort last
    return (record.created_at is not None, record.created_at or EARLIEST)


class ClientsService:
    """Join clients to their invoices."""

    def __init__(self) -> None:
        """Initialize clients service."""
        self.settings = get_settings()
        self.engine = AggregationEngine()

    def build_profile(
        self,
        client: ClientRecord,
        invoices: Sequence[InvoiceRecord],
    ) -> ClientProfile:
        """Summarize one client's invoices.

        Args:
            client: Client record.
            invoices: Invoices already matched to the client.

        Returns:
            Client profile with revenue, count and last invoice date.
        """
        dated = [record.created_at for record in invoices if record.created_at is not None]
        return ClientProfile(
            id=client.id,
            client_id=client.client_id,
            name=client.name,
            email=client.email,
            phone=client.phone,
            address=client.address,
            website=client.website,
            industry=client.industry,
            notes=client.notes,
            status=client.status,
            join_date=client.join_date,
            total_revenue=round2(sum(record.total for record in invoices)),
            invoice_count=len(invoices),
            last_invoice=max(dated).date() if dated else None,
        )

    def list_profiles(
        self,
        clients: Sequence[ClientRecord],
        records: Sequence[InvoiceRecord],
    ) -> list[ClientProfile]:
        """Profiles for every client, in table order.

        Args:
            clients: Client records.
            records: All invoice records.

        Returns:
            One profile per client.
        """
        return [
            self.build_profile(client, [record for record in records if client.owns(record)])
            for client in clients
        ]

    def build_detail(
        self,
        clients: Sequence[ClientRecord],
        records: Sequence[InvoiceRecord],
        client_id: str,
    ) -> ClientDetail:
        """Profile and invoice history for one client.

        Args:
            clients: Client records.
            records: All invoice records.
            client_id: Record ID or business client ID.

        Returns:
            Client detail with invoices newest first.

        Raises:
            NotFoundError: If no client matches ``client_id``.
        """
        client = next((c for c in clients if c.matches_id(client_id)), None)
        if client is None:
            raise NotFoundError(
                f"Client not found: {client_id}",
                details={"client_id": client_id},
            )

        invoices = sorted(
            (record for record in records if client.owns(record)),
            key=_newest_first,
            reverse=True,
        )
        return ClientDetail(
            client=self.build_profile(client, invoices),
            invoices=[
                ClientInvoice(
                    id=record.id,
                    description=record.description,
                    category=self.engine.categorize(record.description),
                    quantity=record.quantity,
                    unit_price=record.unit_price,
                    amount=record.total,
                    currency=record.currency,
                    status=record.status,
                    created_at=record.created_at,
                )
                for record in invoices
            ],
        )

    async def list_clients(self, source: InvoiceSource) -> tuple[list[ClientProfile], bool]:
        """Fetch a snapshot and build every client profile.

        Args:
            source: Configured invoice source.

        Returns:
            The profiles and whether they were built from sample data.

        Raises:
            DatastoreError: If the source fails and sample fallback is disabled.
        """
        snapshot = await load_snapshot(
            source,
            include_clients=True,
            fallback_to_sample=self.settings.datastore_fallback_to_sample,
        )
        profiles = self.list_profiles(snapshot.clients, snapshot.invoices)

        logger.info(
            "clients.listed",
            client_count=len(profiles),
            invoice_count=len(snapshot.invoices),
            sample=snapshot.sample,
        )
        return profiles, snapshot.sample

    async def get_client(
        self,
        source: InvoiceSource,
        client_id: str,
    ) -> tuple[ClientDetail, bool]:
        """Fetch a snapshot and build one client's detail.

        Args:
            source: Configured invoice source.
            client_id: Record ID or business client ID.

        Returns:
            The client detail and whether it was built from sample data.

        Raises:
            NotFoundError: If no client matches ``client_id``.
            DatastoreError: If the source fails and sample fallback is disabled.
        """
        snapshot = await load_snapshot(
            source,
            include_clients=True,
            fallback_to_sample=self.settings.datastore_fallback_to_sample,
        )
        detail = self.build_detail(snapshot.clients, snapshot.invoices, client_id)

        logger.info(
            "clients.detail_built",
            client_id=client_id,
            invoice_count=len(detail.invoices),
            sample=snapshot.sample,
        )
        return detail, snapshot.sample
