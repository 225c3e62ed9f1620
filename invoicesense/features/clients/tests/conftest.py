"""Test fixtures for clients module."""

from datetime import UTC, date, datetime

import pytest

from invoicesense.features.analytics.schemas import ClientRecord, InvoiceRecord


@pytest.fixture
def invoices() -> list[InvoiceRecord]:
    """Alpha by ID (one undated), Beta by company name only, one orphan."""
    rows = [
        ("i1", "C1", "Alpha", "Web build", 100.25, datetime(2024, 6, 1, 9, tzinfo=UTC)),
        ("i2", "C1", "Alpha", "Strategy", 50, datetime(2024, 6, 3, 15, tzinfo=UTC)),
        ("i3", "C1", "Alpha", "Logo design", 25, None),
        ("i4", None, "Beta", "Ad campaign", 300, datetime(2024, 5, 20, tzinfo=UTC)),
        ("i5", "C9", "Nobody", "Hosting", 999, datetime(2024, 6, 1, tzinfo=UTC)),
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
            created_at=created_at,
        )
        for record_id, client_id, company, description, total, created_at in rows
    ]


@pytest.fixture
def clients() -> list[ClientRecord]:
    """Three clients; Delta has no invoices."""
    return [
        ClientRecord(
            id="rec1",
            client_id="C1",
            name="Alpha",
            email="a@alpha.test",
            industry="Technology",
            join_date=date(2023, 1, 1),
        ),
        ClientRecord(id="rec2", client_id="C2", name="Beta", status="inactive"),
        ClientRecord(id="rec4", client_id="C4", name="Delta"),
    ]
