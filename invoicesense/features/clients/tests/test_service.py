"""Tests for the clients service."""

from datetime import date

import pytest

from invoicesense.core.exceptions import NotFoundError
from invoicesense.features.analytics.schemas import Category
from invoicesense.features.clients.service import ClientsService
from invoicesense.features.datastore.sources import SampleInvoiceSource


class TestListProfiles:
    """Tests for ClientsService.list_profiles."""

    def test_totals_per_client(self, clients, invoices):
        """Each client sums its own invoices; orphans belong to nobody."""
        profiles = ClientsService().list_profiles(clients, invoices)

        assert [(p.name, p.total_revenue, p.invoice_count) for p in profiles] == [
            ("Alpha", 175.25, 3),
            ("Beta", 300, 1),
            ("Delta", 0, 0),
        ]

    def test_last_invoice_ignores_undated(self, clients, invoices):
        """lastInvoice is the newest dated invoice, None without any."""
        profiles = ClientsService().list_profiles(clients, invoices)

        assert [p.last_invoice for p in profiles] == [date(2024, 6, 3), date(2024, 5, 20), None]

    def test_profile_carries_contact_fields(self, clients, invoices):
        """Contact columns pass through unchanged."""
        alpha = ClientsService().list_profiles(clients, invoices)[0]

        assert alpha.id == "rec1"
        assert alpha.client_id == "C1"
        assert alpha.email == "a@alpha.test"
        assert alpha.industry == "Technology"
        assert alpha.status == "active"
        assert alpha.join_date == date(2023, 1, 1)

    def test_serializes_with_camel_case(self, clients, invoices):
        """Profiles use the dashboard's camelCase keys."""
        payload = ClientsService().list_profiles(clients, invoices)[0].model_dump(by_alias=True)

        assert {"totalRevenue", "invoiceCount", "lastInvoice", "joinDate", "clientId"} <= set(
            payload
        )


class TestBuildDetail:
    """Tests for ClientsService.build_detail."""

    def test_history_newest_first_undated_last(self, clients, invoices):
        """Invoices are ordered newest first with undated ones at the end."""
        detail = ClientsService().build_detail(clients, invoices, "rec1")

        assert detail.client.name == "Alpha"
        assert [invoice.id for invoice in detail.invoices] == ["i2", "i1", "i3"]

    def test_history_entries(self, clients, invoices):
        """History entries carry amounts and an inferred category."""
        detail = ClientsService().build_detail(clients, invoices, "rec1")

        newest = detail.invoices[0]
        assert newest.amount == 50
        assert newest.currency == "USD"
        assert newest.category == Category.CONSULTING
        assert detail.invoices[2].category == Category.DESIGN_SERVICES

    @pytest.mark.parametrize("client_id", ["rec2", "C2"])
    def test_lookup_by_record_or_client_id(self, clients, invoices, client_id):
        """Either identifier finds the client."""
        detail = ClientsService().build_detail(clients, invoices, client_id)

        assert detail.client.name == "Beta"
        assert [invoice.id for invoice in detail.invoices] == ["i4"]

    def test_unknown_client_raises_not_found(self, clients, invoices):
        """An unknown identifier raises NotFoundError."""
        with pytest.raises(NotFoundError) as exc_info:
            ClientsService().build_detail(clients, invoices, "missing")

        assert exc_info.value.status_code == 404
        assert exc_info.value.details == {"client_id": "missing"}


class TestAsyncEntryPoints:
    """Tests for the snapshot-loading entry points."""

    @pytest.mark.asyncio
    async def test_list_clients_from_sample(self):
        """The sample dataset yields six clients with revenue."""
        profiles, sample = await ClientsService().list_clients(SampleInvoiceSource())

        assert sample is True
        assert len(profiles) == 6
        assert profiles[0].name == "Tech Solutions Inc"
        assert profiles[0].total_revenue == 6920
        assert profiles[0].invoice_count == 3

    @pytest.mark.asyncio
    async def test_get_client_from_sample(self):
        """A sample client is found by its business ID."""
        detail, sample = await ClientsService().get_client(SampleInvoiceSource(), "CLIENT-003")

        assert sample is True
        assert detail.client.name == "Creative Agency"
        assert len(detail.invoices) == 3
