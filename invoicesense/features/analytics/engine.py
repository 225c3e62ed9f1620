"""Aggregation engine for invoice analytics.

Turns a flat list of InvoiceRecords into dashboard aggregates:
- KPIs with growth against the preceding period of equal length
- Zero-filled daily revenue trend
- Top-N rankings
- Currency and category breakdowns
- Recent activity feed

Every operation is a pure function of its arguments: no I/O, no shared
state, inputs are never mutated. Malformed values were already coerced to
0/defaults when the records were built, and every division is guarded, so
no operation raises on valid-shaped input.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import UTC, date, datetime, timedelta

from invoicesense.features.analytics.parsing import round2, round_half_up
from invoicesense.features.analytics.schemas import (
    ActivityEntry,
    Category,
    CategoryBreakdown,
    CurrencyBreakdown,
    DateWindow,
    InvoiceRecord,
    KPISummary,
    RankedEntity,
    RevenueTrendPoint,
)

# Ordered (keywords, category) rules; the first rule with a matching keyword wins.
CATEGORY_RULES: tuple[tuple[tuple[str, ...], Category], ...] = (
    (("web", "development", "coding"), Category.WEB_DEVELOPMENT),
    (("design", "ui", "ux"), Category.DESIGN_SERVICES),
    (("consulting", "advice", "strategy"), Category.CONSULTING),
    (("marketing", "advertising", "promotion"), Category.MARKETING),
)

DEFAULT_TOP_LIMIT = 5
DEFAULT_ACTIVITY_LIMIT = 10

EARLIEST = datetime.min.replace(tzinfo=UTC)

_MINUTES_PER_HOUR = 60
_MINUTES_PER_DAY = 1440


def by_display_name(record: InvoiceRecord) -> str:
    """Group key for client rankings."""
    return record.display_name


class AggregationEngine:
    """Compute invoice analytics over an in-memory record list.

    All methods are static and side-effect free, so one engine can serve
    concurrent requests.
    """

    # -------------------------------------------------------------------------
    # Window helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def filter_window(
        records: Sequence[InvoiceRecord],
        window: DateWindow,
    ) -> list[InvoiceRecord]:
        """Records whose created_at lies inside the window (both ends inclusive)."""
        return [record for record in records if window.contains(record.created_at)]

    @staticmethod
    def previous_period(
        records: Sequence[InvoiceRecord],
        window: DateWindow,
    ) -> list[InvoiceRecord]:
        """Records in the period of equal length right before the window.

        The previous period is ``[start - period_days, start)``: the lower
        bound is inclusive, the window start is excluded. Near year 1 the
        lower bound is clamped to EARLIEST.
        """
        try:
            prev_start = window.start - timedelta(days=window.period_days)
        except OverflowError:
            prev_start = EARLIEST
        return [
            record
            for record in records
            if record.created_at is not None and prev_start <= record.created_at < window.start
        ]

    @staticmethod
    def growth_rate(current: float, previous: float) -> float:
        """Percentage change from previous to current, rounded to cents.

        Returns 0 when there is no positive previous value, so "no prior
        data" reads the same as "no growth".
        """
        if previous <= 0:
            return 0.0
        return round2((current - previous) / previous * 100)

    # -------------------------------------------------------------------------
    # KPIs and trend
    # -------------------------------------------------------------------------

    @staticmethod
    def compute_kpis(
        records: Sequence[InvoiceRecord],
        window: DateWindow,
        success_rate: float | None = None,
        avg_processing_time: float | None = None,
    ) -> KPISummary:
        """KPI summary for the window with period-over-period growth.

        Args:
            records: All available records.
            window: Current analysis window.
            success_rate: Processing success rate, reported as given.
            avg_processing_time: Average processing time, reported as given.

        Returns:
            KPISummary for the window.
        """
        current = AggregationEngine.filter_window(records, window)
        previous = AggregationEngine.previous_period(records, window)

        revenue = sum(record.total for record in current)
        prev_revenue = sum(record.total for record in previous)
        clients = len({record.client_key for record in current})
        prev_clients = len({record.client_key for record in previous})

        return KPISummary(
            total_revenue=round2(revenue),
            total_invoices=len(current),
            total_clients=clients,
            success_rate=success_rate,
            avg_processing_time=avg_processing_time,
            revenue_growth=AggregationEngine.growth_rate(revenue, prev_revenue),
            invoice_growth=AggregationEngine.growth_rate(len(current), len(previous)),
            client_growth=AggregationEngine.growth_rate(clients, prev_clients),
        )

    @staticmethod
    def compute_revenue_trend(
        records: Sequence[InvoiceRecord],
        window: DateWindow,
    ) -> list[RevenueTrendPoint]:
        """Daily revenue for each of the window's period_days, oldest first.

        Day ``i`` is the UTC calendar date of ``start + i days``; a record
        belongs to it when its created_at falls on that date, regardless of
        time of day. Days without records are emitted with zeros.
        """
        days = [(window.start + timedelta(days=i)).date() for i in range(window.period_days)]
        revenue: dict[date, float] = dict.fromkeys(days, 0.0)
        counts: dict[date, int] = dict.fromkeys(days, 0)

        for record in records:
            if record.created_at is None:
                continue
            day = record.created_at.date()
            if day in revenue:
                revenue[day] += record.total
                counts[day] += 1

        return [
            RevenueTrendPoint(date=day, revenue=round2(revenue[day]), invoices=counts[day])
            for day in days
        ]

    # -------------------------------------------------------------------------
    # Rankings and breakdowns
    # -------------------------------------------------------------------------

    @staticmethod
    def rank_top_entities(
        records: Sequence[InvoiceRecord],
        key: Callable[[InvoiceRecord], str] = by_display_name,
        limit: int = DEFAULT_TOP_LIMIT,
    ) -> list[RankedEntity]:
        """Top entities by summed revenue.

        Records are not window-filtered. Ties keep the order in which the
        groups first appeared.

        Args:
            records: Records to rank.
            key: Grouping function (client display name by default).
            limit: Maximum number of entities returned.

        Returns:
            Entities ordered by revenue, highest first.
        """
        revenue: dict[str, float] = {}
        counts: dict[str, int] = {}
        for record in records:
            name = key(record)
            revenue[name] = revenue.get(name, 0.0) + record.total
            counts[name] = counts.get(name, 0) + 1

        ranked = sorted(revenue, key=lambda name: revenue[name], reverse=True)
        return [
            RankedEntity(name=name, revenue=round2(revenue[name]), invoices=counts[name])
            for name in ranked[: max(limit, 0)]
        ]

    @staticmethod
    def breakdown_by_currency(
        records: Sequence[InvoiceRecord],
        percent_decimals: int = 0,
    ) -> list[CurrencyBreakdown]:
        """Revenue per currency with its share of the combined total.

        Amounts in different currencies are summed without conversion.
        Shares are whole percentages by default. Buckets are listed in
        first-seen order; every share is 0 when the combined total is 0.
        """
        amounts: dict[str, float] = {}
        counts: dict[str, int] = {}
        for record in records:
            amounts[record.currency] = amounts.get(record.currency, 0.0) + record.total
            counts[record.currency] = counts.get(record.currency, 0) + 1

        combined = sum(amounts.values())
        breakdown: list[CurrencyBreakdown] = []
        for currency, amount in amounts.items():
            if combined == 0:
                share: int | float = 0 if percent_decimals == 0 else 0.0
            else:
                share = round_half_up(amount / combined * 100, percent_decimals)
            breakdown.append(
                CurrencyBreakdown(
                    currency=currency,
                    amount=round2(amount),
                    count=counts[currency],
                    percentage=share,
                )
            )
        return breakdown

    @staticmethod
    def categorize(description: str | None) -> Category:
        """Infer a category by case-insensitive keyword match.

        Rules in CATEGORY_RULES are tried in order; the first rule with any
        matching keyword decides, so "Web design consulting" is Web
        Development.
        """
        text = (description or "").lower()
        for keywords, category in CATEGORY_RULES:
            if any(keyword in text for keyword in keywords):
                return category
        return Category.OTHER

    @staticmethod
    def breakdown_by_category(records: Sequence[InvoiceRecord]) -> list[CategoryBreakdown]:
        """Revenue and count per inferred category, highest revenue first."""
        revenue: dict[Category, float] = {}
        counts: dict[Category, int] = {}
        for record in records:
            category = AggregationEngine.categorize(record.description)
            revenue[category] = revenue.get(category, 0.0) + record.total
            counts[category] = counts.get(category, 0) + 1

        ranked = sorted(revenue, key=lambda category: revenue[category], reverse=True)
        return [
            CategoryBreakdown(
                category=category,
                count=counts[category],
                revenue=round2(revenue[category]),
            )
            for category in ranked
        ]

    # -------------------------------------------------------------------------
    # Activity feed
    # -------------------------------------------------------------------------

    @staticmethod
    def time_ago(created_at: datetime, now: datetime) -> str:
        """Relative label using floor division ("3 hours ago" at 3h59m)."""
        minutes = max(int((now - created_at).total_seconds() // 60), 0)
        if minutes < _MINUTES_PER_HOUR:
            return f"{minutes} minutes ago"
        if minutes < _MINUTES_PER_DAY:
            return f"{minutes // _MINUTES_PER_HOUR} hours ago"
        return f"{minutes // _MINUTES_PER_DAY} days ago"

    @staticmethod
    def recent_activity(
        records: Sequence[InvoiceRecord],
        limit: int = DEFAULT_ACTIVITY_LIMIT,
        now: datetime | None = None,
    ) -> list[ActivityEntry]:
        """Newest records first, labelled with how long ago they were created.

        Records without a timestamp sort last and get the label "unknown".

        Args:
            records: Records to list.
            limit: Maximum number of entries.
            now: Reference time (defaults to the current UTC time).

        Returns:
            Activity entries, newest first.
        """
        now = now or datetime.now(UTC)
        dated = sorted(
            (record for record in records if record.created_at is not None),
            key=lambda record: record.created_at,  # type: ignore[arg-type,return-value]
            reverse=True,
        )
        undated = [record for record in records if record.created_at is None]

        entries: list[ActivityEntry] = []
        for record in (dated + undated)[: max(limit, 0)]:
            entries.append(
                ActivityEntry(
                    id=record.id,
                    client=record.display_name,
                    amount=record.total,
                    time=(
                        AggregationEngine.time_ago(record.created_at, now)
                        if record.created_at is not None
                        else "unknown"
                    ),
                    created_at=record.created_at,
                )
            )
        return entries
