"""Service layer for the analytics dashboard.

Fetches a record snapshot and runs the aggregation engine over it.
"""

from datetime import UTC, datetime

from invoicesense.core.config import get_settings
from invoicesense.core.logging import get_logger
from invoicesense.features.analytics.engine import AggregationEngine
from invoicesense.features.analytics.schemas import AnalyticsDashboard, InvoiceRecord
from invoicesense.features.analytics.windows import RangePreset, resolve_window
from invoicesense.features.datastore.service import load_snapshot
from invoicesense.features.datastore.sources import InvoiceSource

logger = get_logger(__name__)


class AnalyticsService:
    """Service for computing the analytics dashboard.

    KPIs and the revenue trend are limited to the requested window; rankings,
    breakdowns and the activity feed cover every fetched record.
    """

    def __init__(self) -> None:
        """Initialize analytics service."""
        self.settings = get_settings()
        self.engine = AggregationEngine()

    def build_dashboard(
        self,
        records: list[InvoiceRecord],
        preset: RangePreset,
        now: datetime | None = None,
        sample: bool = False,
    ) -> AnalyticsDashboard:
        """Aggregate records into the dashboard payload.

        Args:
            records: Invoice records to aggregate.
            preset: Range preset for KPIs and trend.
            now: Reference time (defaults to the current UTC time).
            sample: Whether the records are sample data.

        Returns:
            Dashboard aggregates.
        """
        now = now or datetime.now(UTC)
        window = resolve_window(preset, now=now)

        dashboard = AnalyticsDashboard(
            kpis=self.engine.compute_kpis(
                records,
                window,
                success_rate=self.settings.analytics_success_rate,
                avg_processing_time=self.settings.analytics_avg_processing_time,
            ),
            revenue_data=self.engine.compute_revenue_trend(records, window),
            top_clients=self.engine.rank_top_entities(
                records, limit=self.settings.analytics_top_clients_limit
            ),
            currency_distribution=self.engine.breakdown_by_currency(records),
            invoice_categories=self.engine.breakdown_by_category(records),
            recent_activity=self.engine.recent_activity(
                records, limit=self.settings.analytics_recent_activity_limit, now=now
            ),
            time_range=preset.value,
            generated=now,
            sample=sample,
        )

        logger.info(
            "analytics.dashboard_computed",
            time_range=preset.value,
            window_start=window.start.isoformat(),
            window_end=window.end.isoformat(),
            record_count=len(records),
            total_revenue=dashboard.kpis.total_revenue,
            total_invoices=dashboard.kpis.total_invoices,
            sample=sample,
        )
        return dashboard

    async def compute_dashboard(
        self,
        source: InvoiceSource,
        preset: RangePreset,
    ) -> AnalyticsDashboard:
        """Fetch records from the source and build the dashboard.

        Args:
            source: Configured invoice source.
            preset: Range preset for KPIs and trend.

        Returns:
            Dashboard aggregates.

        Raises:
            DatastoreError: If the source fails and sample fallback is disabled.
        """
        snapshot = await load_snapshot(
            source,
            fallback_to_sample=self.settings.datastore_fallback_to_sample,
        )
        return self.build_dashboard(snapshot.invoices, preset, sample=snapshot.sample)
