"""Test fixtures for analytics module."""

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import pytest

from invoicesense.features.analytics.schemas import DateWindow, InvoiceRecord

NOW = datetime(2024, 6, 15, 12, 0, tzinfo=UTC)


@pytest.fixture
def now() -> datetime:
    """Fixed reference time."""
    return NOW


@pytest.fixture
def make_record() -> Callable[..., InvoiceRecord]:
    """Factory for invoice records with sensible defaults."""
    counter = iter(range(1, 10_000))

    def _make(
        total: float = 100.0,
        created_at: datetime | None = NOW,
        company: str | None = "Acme Corp",
        client_id: str | None = None,
        currency: str = "USD",
        description: str = "",
        status: str = "processed",
    ) -> InvoiceRecord:
        return InvoiceRecord(
            id=f"rec-{next(counter):04d}",
            client_id=client_id,
            company=company,
            description=description,
            quantity=1,
            unit_price=total,
            total=total,
            currency=currency,
            status=status,
            created_at=created_at,
        )

    return _make


@pytest.fixture
def two_day_window() -> DateWindow:
    """Window covering 2024-06-01 and 2024-06-02 in full."""
    return DateWindow(
        start=datetime(2024, 6, 1, tzinfo=UTC),
        end=datetime(2024, 6, 2, 23, 59, 59, tzinfo=UTC),
    )


@pytest.fixture
def thirty_day_window() -> DateWindow:
    """The 30 days ending at NOW."""
    return DateWindow(start=NOW - timedelta(days=30), end=NOW)


@pytest.fixture
def scenario_records(make_record) -> list[InvoiceRecord]:
    """Two USD invoices and one IQD invoice across two days."""
    day0 = datetime(2024, 6, 1, 9, 0, tzinfo=UTC)
    day1 = datetime(2024, 6, 2, 15, 30, tzinfo=UTC)
    return [
        make_record(total=100, currency="USD", created_at=day0, company="Alpha"),
        make_record(total=200, currency="IQD", created_at=day0, company="Beta"),
        make_record(total=50, currency="USD", created_at=day1, company="Alpha"),
    ]
