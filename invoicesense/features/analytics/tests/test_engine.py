"""Unit tests for the aggregation engine."""

from datetime import UTC, date, datetime, timedelta

import pytest

from invoicesense.features.analytics.engine import CATEGORY_RULES, AggregationEngine
from invoicesense.features.analytics.schemas import Category, DateWindow


class TestWindowFiltering:
    """Tests for window and previous-period selection."""

    def test_both_window_ends_are_inclusive(self, make_record, two_day_window):
        """Records exactly on start or end are inside the window."""
        on_start = make_record(created_at=two_day_window.start)
        on_end = make_record(created_at=two_day_window.end)
        after = make_record(created_at=two_day_window.end + timedelta(seconds=1))

        result = AggregationEngine.filter_window([on_start, on_end, after], two_day_window)

        assert result == [on_start, on_end]

    def test_undated_records_are_excluded(self, make_record, two_day_window):
        """Records without a timestamp never fall in a window."""
        assert AggregationEngine.filter_window([make_record(created_at=None)], two_day_window) == []

    def test_previous_period_excludes_window_start(self, make_record, two_day_window):
        """The previous period ends right before the window starts."""
        start = two_day_window.start
        first = make_record(created_at=start - timedelta(days=2))
        inside = make_record(created_at=start - timedelta(seconds=1))
        on_start = make_record(created_at=start)
        too_old = make_record(created_at=start - timedelta(days=2, seconds=1))

        result = AggregationEngine.previous_period([first, inside, on_start, too_old], two_day_window)

        assert result == [first, inside]

    def test_previous_period_clamps_at_earliest_datetime(self, make_record):
        """A window starting on year 1 has an empty previous period instead of overflowing."""
        window = DateWindow(
            start=datetime(1, 1, 1, tzinfo=UTC),
            end=datetime(1, 1, 5, 23, 59, 59, tzinfo=UTC),
        )
        inside = make_record(created_at=datetime(1, 1, 2, tzinfo=UTC))

        assert AggregationEngine.previous_period([inside], window) == []
        assert AggregationEngine.filter_window([inside], window) == [inside]

    def test_kpis_for_window_starting_on_year_one(self, make_record):
        """KPIs for the earliest possible window report 0 growth."""
        window = DateWindow(
            start=datetime(1, 1, 1, tzinfo=UTC),
            end=datetime(1, 1, 5, 23, 59, 59, tzinfo=UTC),
        )
        records = [make_record(total=100, created_at=datetime(1, 1, 3, tzinfo=UTC))]

        kpis = AggregationEngine.compute_kpis(records, window)

        assert kpis.total_revenue == 100
        assert kpis.revenue_growth == 0


class TestGrowthRate:
    """Tests for growth_rate."""

    def test_growth_rate(self):
        """Growth is the rounded percentage change."""
        assert AggregationEngine.growth_rate(150, 100) == 50.0
        assert AggregationEngine.growth_rate(50, 150) == -66.67

    @pytest.mark.parametrize("previous", [0, -10])
    def test_growth_rate_zero_guard(self, previous):
        """No positive previous value means 0 growth."""
        assert AggregationEngine.growth_rate(1000, previous) == 0.0


class TestComputeKPIs:
    """Tests for compute_kpis."""

    def test_kpis_for_window(self, scenario_records, two_day_window):
        """Totals cover only the window."""
        kpis = AggregationEngine.compute_kpis(scenario_records, two_day_window)

        assert kpis.total_revenue == 350
        assert kpis.total_invoices == 3
        assert kpis.total_clients == 2

    def test_growth_is_zero_without_previous_data(self, scenario_records, two_day_window):
        """An empty previous period gives 0 growth regardless of current revenue."""
        kpis = AggregationEngine.compute_kpis(scenario_records, two_day_window)

        assert kpis.revenue_growth == 0.0
        assert kpis.invoice_growth == 0.0
        assert kpis.client_growth == 0.0

    def test_growth_against_previous_period(self, make_record, scenario_records, two_day_window):
        """Growth compares against the period of equal length before the window."""
        earlier = make_record(total=175, created_at=datetime(2024, 5, 31, 8, tzinfo=UTC))

        kpis = AggregationEngine.compute_kpis([*scenario_records, earlier], two_day_window)

        assert kpis.revenue_growth == 100.0
        assert kpis.invoice_growth == 200.0
        assert kpis.client_growth == 100.0

    def test_passes_through_processing_metrics(self, two_day_window):
        """Success rate and processing time are reported as given."""
        kpis = AggregationEngine.compute_kpis(
            [], two_day_window, success_rate=98.5, avg_processing_time=12.3
        )

        assert kpis.success_rate == 98.5
        assert kpis.avg_processing_time == 12.3
        assert kpis.total_revenue == 0

    def test_clients_counted_by_id_then_name(self, make_record, two_day_window):
        """Distinct clients use the client ID when present, else the company."""
        moment = two_day_window.start
        records = [
            make_record(client_id="C1", company="Acme", created_at=moment),
            make_record(client_id="C1", company="Acme Ltd", created_at=moment),
            make_record(client_id=None, company="Acme", created_at=moment),
        ]

        assert AggregationEngine.compute_kpis(records, two_day_window).total_clients == 2


class TestRevenueTrend:
    """Tests for compute_revenue_trend."""

    def test_scenario_trend(self, scenario_records, two_day_window):
        """Records are bucketed per UTC calendar day."""
        trend = AggregationEngine.compute_revenue_trend(scenario_records, two_day_window)

        assert [(p.date, p.revenue, p.invoices) for p in trend] == [
            (date(2024, 6, 1), 300, 2),
            (date(2024, 6, 2), 50, 1),
        ]

    @pytest.mark.parametrize("days", [1, 7, 30, 90])
    def test_zero_fill_with_no_records(self, days, now):
        """A window of N days yields N zero points without records."""
        window = DateWindow(start=now - timedelta(days=days), end=now)

        trend = AggregationEngine.compute_revenue_trend([], window)

        assert len(trend) == days
        assert all(p.revenue == 0 and p.invoices == 0 for p in trend)

    def test_zero_fill_with_sparse_records(self, make_record, thirty_day_window, now):
        """Sparse input still yields one point per day, oldest first."""
        records = [make_record(created_at=now - timedelta(days=3))]

        trend = AggregationEngine.compute_revenue_trend(records, thirty_day_window)

        assert len(trend) == 30
        assert trend[0].date == (now - timedelta(days=30)).date()
        assert sum(p.invoices for p in trend) == 1

    def test_trend_conserves_kpi_revenue(self, make_record, two_day_window):
        """Trend revenue sums to the KPI total for the same window."""
        start = two_day_window.start
        records = [
            make_record(total=10.105, created_at=start + timedelta(hours=1)),
            make_record(total=20.333, created_at=start + timedelta(hours=30)),
            make_record(total=5.5, created_at=start + timedelta(hours=40)),
        ]

        trend = AggregationEngine.compute_revenue_trend(records, two_day_window)
        kpis = AggregationEngine.compute_kpis(records, two_day_window)

        assert sum(p.revenue for p in trend) == pytest.approx(kpis.total_revenue, abs=0.01)


class TestRankTopEntities:
    """Tests for rank_top_entities."""

    def test_ranks_by_revenue(self, scenario_records):
        """Groups are ordered by summed revenue."""
        ranked = AggregationEngine.rank_top_entities(scenario_records)

        assert [(r.name, r.revenue, r.invoices) for r in ranked] == [
            ("Beta", 200, 1),
            ("Alpha", 150, 2),
        ]

    def test_ties_keep_first_seen_order(self, make_record):
        """Equal revenue keeps the order groups first appeared in."""
        records = [
            make_record(total=50, company="Zeta"),
            make_record(total=100, company="Alpha"),
            make_record(total=50, company="Zeta"),
        ]

        ranked = AggregationEngine.rank_top_entities(records)

        assert [r.name for r in ranked] == ["Zeta", "Alpha"]

    def test_limit_and_unknown_clients(self, make_record):
        """The limit caps the list and nameless records group as Unknown."""
        records = [make_record(total=i, company=f"C{i}") for i in range(1, 8)]
        records.append(make_record(total=1000, company=None, client_id=None))

        ranked = AggregationEngine.rank_top_entities(records, limit=3)

        assert [r.name for r in ranked] == ["Unknown", "C7", "C6"]

    def test_custom_key(self, scenario_records):
        """A key function can group by any attribute."""
        ranked = AggregationEngine.rank_top_entities(scenario_records, key=lambda r: r.currency)

        assert [r.name for r in ranked] == ["IQD", "USD"]


class TestCurrencyBreakdown:
    """Tests for breakdown_by_currency."""

    def test_scenario_breakdown(self, scenario_records):
        """Whole-number shares in first-seen order."""
        breakdown = AggregationEngine.breakdown_by_currency(scenario_records)

        assert [(b.currency, b.amount, b.count, b.percentage) for b in breakdown] == [
            ("USD", 150, 2, 43),
            ("IQD", 200, 1, 57),
        ]

    def test_percentages_sum_to_about_100(self, make_record):
        """Independent rounding may drift by at most one per currency."""
        records = [
            make_record(total=1, currency="USD"),
            make_record(total=1, currency="EUR"),
            make_record(total=1, currency="IQD"),
        ]

        breakdown = AggregationEngine.breakdown_by_currency(records)

        assert abs(sum(b.percentage for b in breakdown) - 100) <= len(breakdown)

    def test_zero_total_gives_zero_shares(self, make_record):
        """No division by zero when everything sums to 0."""
        breakdown = AggregationEngine.breakdown_by_currency([make_record(total=0)])

        assert breakdown[0].percentage == 0

    def test_cent_precision(self, scenario_records):
        """Reports ask for shares with two decimals."""
        breakdown = AggregationEngine.breakdown_by_currency(scenario_records, percent_decimals=2)

        assert [b.percentage for b in breakdown] == [42.86, 57.14]

    def test_empty_input(self):
        """No records, no buckets."""
        assert AggregationEngine.breakdown_by_currency([]) == []


class TestCategorize:
    """Tests for categorize and breakdown_by_category."""

    @pytest.mark.parametrize(
        ("description", "expected"),
        [
            ("Web design consulting", Category.WEB_DEVELOPMENT),
            ("Backend CODING", Category.WEB_DEVELOPMENT),
            ("UX research", Category.DESIGN_SERVICES),
            ("Strategy workshop", Category.CONSULTING),
            ("Advertising campaign", Category.MARKETING),
            ("Hosting fee", Category.OTHER),
            ("", Category.OTHER),
            (None, Category.OTHER),
        ],
    )
    def test_first_matching_rule_wins(self, description, expected):
        """Rules are evaluated in order, case-insensitively."""
        assert AggregationEngine.categorize(description) == expected

    def test_rules_are_ordered(self):
        """Web development is checked before design, consulting and marketing."""
        assert [category for _, category in CATEGORY_RULES] == [
            Category.WEB_DEVELOPMENT,
            Category.DESIGN_SERVICES,
            Category.CONSULTING,
            Category.MARKETING,
        ]

    def test_breakdown_by_category(self, make_record):
        """Categories are ordered by revenue."""
        records = [
            make_record(total=100, description="Logo design"),
            make_record(total=300, description="Web app"),
            make_record(total=50, description="Design review"),
        ]

        breakdown = AggregationEngine.breakdown_by_category(records)

        assert [(b.category, b.count, b.revenue) for b in breakdown] == [
            (Category.WEB_DEVELOPMENT, 1, 300),
            (Category.DESIGN_SERVICES, 2, 150),
        ]


class TestRecentActivity:
    """Tests for time_ago and recent_activity."""

    @pytest.mark.parametrize(
        ("delta", "label"),
        [
            (timedelta(seconds=30), "0 minutes ago"),
            (timedelta(minutes=59, seconds=59), "59 minutes ago"),
            (timedelta(hours=3, minutes=59), "3 hours ago"),
            (timedelta(hours=23, minutes=59), "23 hours ago"),
            (timedelta(days=1), "1 days ago"),
            (timedelta(days=45, hours=5), "45 days ago"),
            (timedelta(minutes=-10), "0 minutes ago"),
        ],
    )
    def test_time_ago_floors(self, now, delta, label):
        """Labels use floor division and clamp future times."""
        assert AggregationEngine.time_ago(now - delta, now) == label

    def test_newest_first_with_limit(self, make_record, now):
        """Entries are ordered newest first and capped."""
        records = [make_record(created_at=now - timedelta(hours=h)) for h in (5, 1, 3)]

        activity = AggregationEngine.recent_activity(records, limit=2, now=now)

        assert [a.time for a in activity] == ["1 hours ago", "3 hours ago"]
        assert activity[0].id == records[1].id
        assert activity[0].type == "invoice"

    def test_undated_records_come_last(self, make_record, now):
        """Records without a timestamp are listed last as unknown."""
        undated = make_record(created_at=None, company=None, client_id="C-9")
        dated = make_record(created_at=now - timedelta(minutes=5))

        activity = AggregationEngine.recent_activity([undated, dated], now=now)

        assert [a.time for a in activity] == ["5 minutes ago", "unknown"]
        assert activity[1].client == "C-9"


class TestPurity:
    """Operations do not mutate input and are repeatable."""

    def test_operations_are_repeatable(self, scenario_records, two_day_window, now):
        """Same input gives the same output and leaves the input untouched."""
        snapshot = [record.model_copy() for record in scenario_records]

        for operation in (
            lambda: AggregationEngine.compute_kpis(scenario_records, two_day_window),
            lambda: AggregationEngine.compute_revenue_trend(scenario_records, two_day_window),
            lambda: AggregationEngine.rank_top_entities(scenario_records),
            lambda: AggregationEngine.breakdown_by_currency(scenario_records),
            lambda: AggregationEngine.breakdown_by_category(scenario_records),
            lambda: AggregationEngine.recent_activity(scenario_records, now=now),
        ):
            assert operation() == operation()

        assert scenario_records == snapshot
