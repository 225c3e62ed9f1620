"""Demo dataset served when no Airtable base is configured.

Timestamps are generated relative to the moment of the call so that every
dashboard range has data, including a previous period for growth figures.
"""

from datetime import UTC, datetime, timedelta

from invoicesense.features.analytics.schemas import ClientRecord, InvoiceRecord

# (days ago, hours ago, client id, company, description, quantity, unit price, currency, status)
_SAMPLE_INVOICES: tuple[tuple[int, int, str, str, str, float, float, str, str], ...] = (
    (0, 2, "CLIENT-001", "Tech Solutions Inc", "Frontend development", 16, 75.0, "USD", "processed"),
    (0, 6, "CLIENT-002", "Digital Marketing Co", "Social media marketing", 10, 85.0, "USD", "processed"),
    (1, 3, "CLIENT-003", "Creative Agency", "UI/UX design sprint", 24, 90.0, "USD", "processed"),
    (2, 1, "CLIENT-004", "Consulting Group", "Growth strategy workshop", 8, 150.0, "USD", "processed"),
    (3, 5, "CLIENT-005", "Baghdad Trading", "Web development retainer", 1, 1250000.0, "IQD", "processed"),
    (5, 4, "CLIENT-001", "Tech Solutions Inc", "Backend coding", 32, 85.0, "USD", "processed"),
    (8, 2, "CLIENT-006", "Software Company", "Hosting and support", 1, 480.0, "USD", "processed"),
    (11, 7, "CLIENT-002", "Digital Marketing Co", "Advertising campaign setup", 12, 70.0, "USD", "failed"),
    (15, 3, "CLIENT-003", "Creative Agency", "Brand design refresh", 20, 95.0, "USD", "processed"),
    (21, 9, "CLIENT-004", "Consulting Group", "Technical advice retainer", 10, 140.0, "USD", "processed"),
    (26, 1, "CLIENT-005", "Baghdad Trading", "Promotion materials", 1, 640000.0, "IQD", "processed"),
    (34, 6, "CLIENT-001", "Tech Solutions Inc", "Web development phase 1", 40, 75.0, "USD", "processed"),
    (41, 2, "CLIENT-006", "Software Company", "QA and testing", 18, 60.0, "USD", "processed"),
    (48, 5, "CLIENT-003", "Creative Agency", "UX research", 14, 90.0, "USD", "error"),
    (55, 8, "CLIENT-002", "Digital Marketing Co", "Marketing analytics", 9, 80.0, "USD", "processed"),
    (72, 4, "CLIENT-004", "Consulting Group", "Operations consulting", 12, 150.0, "USD", "processed"),
)

# (client id, name, email, industry, status, joined days ago)
_SAMPLE_CLIENTS: tuple[tuple[str, str, str, str, str, int], ...] = (
    ("CLIENT-001", "Tech Solutions Inc", "contact@techsolutions.com", "Technology", "active", 420),
    ("CLIENT-002", "Digital Marketing Co", "hello@digitalmarketing.com", "Marketing", "active", 360),
    ("CLIENT-003", "Creative Agency", "studio@creativeagency.com", "Design", "active", 200),
    ("CLIENT-004", "Consulting Group", "team@consultinggroup.com", "Consulting", "active", 150),
    ("CLIENT-005", "Baghdad Trading", "info@baghdadtrading.iq", "Retail", "active", 20),
    ("CLIENT-006", "Software Company", "billing@softwareco.com", "Technology", "inactive", 95),
)


def sample_invoices(now: datetime | None = None) -> list[InvoiceRecord]:
    """Build the demo invoice list relative to ``now``."""
    now = now or datetime.now(UTC)
    records: list[InvoiceRecord] = []
    for index, row in enumerate(_SAMPLE_INVOICES, start=1):
        days_ago, hours_ago, client_id, company, description, quantity, price, currency, status = row
        records.append(
            InvoiceRecord(
                id=f"sample-inv-{index:03d}",
                client_id=client_id,
                company=company,
                description=description,
                quantity=quantity,
                unit_price=price,
                total=quantity * price,
                currency=currency,
                status=status,
                created_at=now - timedelta(days=days_ago, hours=hours_ago),
            )
        )
    return records


def sample_clients(now: datetime | None = None) -> list[ClientRecord]:
    """Build the demo client list relative to ``now``."""
    now = now or datetime.now(UTC)
    return [
        ClientRecord(
            id=f"sample-client-{index:03d}",
            client_id=client_id,
            name=name,
            email=email,
            industry=industry,
            status=status,
            join_date=(now - timedelta(days=joined_days_ago)).date(),
        )
        for index, (client_id, name, email, industry, status, joined_days_ago) in enumerate(
            _SAMPLE_CLIENTS, start=1
        )
    ]
