"""Test fixtures for reports module."""

from datetime import UTC, date, datetime

import pytest

from invoicesense.features.analytics.schemas import ClientRecord, DateWindow, InvoiceRecord


@pytest.fixture
def window() -> DateWindow:
    """Window covering 2024-06-01 and 2024-06-02 in full."""
    return DateWindow(
        start=datetime(2024, 6, 1, tzinfo=UTC),
        end=datetime(2024, 6, 2, 23, 59, 59, tzinfo=UTC),
    )


@pytest.fixture
def invoices() -> list[InvoiceRecord]:
    """Three invoices in the window, one in the previous period, one older."""
    rows = [
        ("r1", "C1", "Alpha", "Web build", 100, "USD", "processed", datetime(2024, 6, 1, 9)),
        ("r2", "C2", "Beta", "Logo design", 200, "IQD", "failed", datetime(2024, 6, 1, 10)),
        ("r3", "C1", "Alpha", "Strategy", 50, "USD", "processed", datetime(2024, 6, 2, 15, 30)),
        ("r4", "C1", "Alpha", "Web build", 40, "USD", "processed", datetime(2024, 5, 31, 8)),
        ("r5", "C3", "Gamma", "Hosting", 500, "USD", "processed", datetime(2024, 4, 10, 12)),
    ]
    return [
        InvoiceRecord(
            id=record_id,
            client_id=client_id,
            company=company,
            description=description,
            quantity=1,
            unit_price=total,
            total=total,
            currency=currency,
            status=status,
            created_at=created_at.replace(tzinfo=UTC),
        )
        for record_id, client_id, company, description, total, currency, status, created_at in rows
    ]


@pytest.fixture
def clients() -> list[ClientRecord]:
    """Four clients; Delta has no invoices and Gamma is inactive."""
    return [
        ClientRecord(id="c1", client_id="C1", name="Alpha", status="active", join_date=date(2023, 1, 1)),
        ClientRecord(id="c2", client_id="C2", name="Beta", status="active", join_date=date(2024, 6, 2)),
        ClientRecord(id="c3", client_id="C3", name="Gamma", status="inactive", join_date=date(2024, 3, 1)),
        ClientRecord(id="c4", client_id="C4", name="Delta", status="active", join_date=date(2024, 6, 1)),
    ]
