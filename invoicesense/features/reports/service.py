"""Service layer for reports.

Report builders are synchronous functions of (records, window); the async
``generate`` entry point fetches the snapshot first.
"""

from collections.abc import Sequence
from datetime import date

from invoicesense.core.config import get_settings
from invoicesense.core.logging import get_logger
from invoicesense.features.analytics.engine import AggregationEngine
from invoicesense.features.analytics.parsing import round2
from invoicesense.features.analytics.schemas import (
    ClientRecord,
    DateWindow,
    InvoiceRecord,
    RevenueTrendPoint,
)
from invoicesense.features.datastore.service import load_snapshot
from invoicesense.features.datastore.sources import InvoiceSource
from invoicesense.features.reports.schemas import (
    AnalyticsSummaryReport,
    AnalyticsSummaryTotals,
    ClientHighlights,
    ClientReport,
    ClientReportRow,
    ClientSummary,
    InvoiceHighlights,
    InvoiceReport,
    InvoiceSummary,
    MonthlyTrendPoint,
    ReportData,
    ReportType,
    RevenueHighlights,
    RevenueReport,
    RevenueSummary,
    StatusBreakdown,
    TopPerformer,
)

logger = get_logger(__name__)

DAILY_BREAKDOWN_LIMIT = 30
REPORT_TOP_CLIENTS = 10
SUMMARY_TREND_DAYS = 7
SUMMARY_TOP_CLIENTS = 5
SUMMARY_CATEGORIES = 5

_FAILED_MARKERS = ("fail", "error")


def _share(part: float, whole: float) -> float:
    """Percentage rounded to cents, 0 when whole is 0."""
    return round2(part / whole * 100) if whole else 0.0


def _is_failed(record: InvoiceRecord) -> bool:
    status = record.status.lower()
    return any(marker in status for marker in _FAILED_MARKERS)


class ReportsService:
    """Build revenue, client, invoice and summary reports."""

    def __init__(self) -> None:
        """Initialize reports service."""
        self.settings = get_settings()
        self.engine = AggregationEngine()

    # -------------------------------------------------------------------------
    # Revenue
    # -------------------------------------------------------------------------

    def revenue_report(
        self,
        records: Sequence[InvoiceRecord],
        window: DateWindow,
    ) -> RevenueReport:
        """Revenue report for the window.

        Args:
            records: All records (the previous period feeds the growth rate).
            window: Report window.

        Returns:
            Revenue report.
        """
        current = self.engine.filter_window(records, window)
        total = sum(record.total for record in current)

        daily_revenue: dict[date, float] = {}
        daily_count: dict[date, int] = {}
        for record in current:
            day = record.created_at.date()  # type: ignore[union-attr]
            daily_revenue[day] = daily_revenue.get(day, 0.0) + record.total
            daily_count[day] = daily_count.get(day, 0) + 1

        days = window.period_days
        currency = sorted(
            self.engine.breakdown_by_currency(current, percent_decimals=2),
            key=lambda item: item.amount,
            reverse=True,
        )

        return RevenueReport(
            summary=RevenueSummary(
                total_revenue=round2(total),
                average_daily=round2(total / days) if days > 0 else 0.0,
                highest_day=round2(max(daily_revenue.values(), default=0.0)),
                lowest_day=round2(min(daily_revenue.values(), default=0.0)),
                growth_rate=self.engine.compute_kpis(records, window).revenue_growth,
                period=f"{days} days",
                invoice_count=len(current),
            ),
            daily_breakdown=[
                RevenueTrendPoint(
                    date=day,
                    revenue=round2(daily_revenue[day]),
                    invoices=daily_count[day],
                )
                for day in sorted(daily_revenue, reverse=True)[:DAILY_BREAKDOWN_LIMIT]
            ],
            top_clients=self.engine.rank_top_entities(current, limit=REPORT_TOP_CLIENTS),
            currency_breakdown=currency,
        )

    # -------------------------------------------------------------------------
    # Clients
    # -------------------------------------------------------------------------

    def client_report(
        self,
        clients: Sequence[ClientRecord],
        records: Sequence[InvoiceRecord],
        window: DateWindow,
    ) -> ClientReport:
        """Client report.

        Client revenue and invoice counts are all-time; new clients and
        performer growth refer to the window.

        Args:
            clients: Client records.
            records: All invoice records.
            window: Report window.

        Returns:
            Client report.
        """
        rows: list[ClientReportRow] = []
        performers: list[TopPerformer] = []
        total_revenue = 0.0

        for client in clients:
            invoices = [record for record in records if client.owns(record)]
            revenue = sum(record.total for record in invoices)
            total_revenue += revenue
            dated = [record.created_at for record in invoices if record.created_at is not None]

            rows.append(
                ClientReportRow(
                    id=client.id,
                    name=client.name,
                    email=client.email,
                    revenue=round2(revenue),
                    invoices=len(invoices),
                    status=client.status,
                    join_date=client.join_date,
                    last_invoice=max(dated).date() if dated else None,
                )
            )
            window_revenue = sum(r.total for r in self.engine.filter_window(invoices, window))
            previous_revenue = sum(r.total for r in self.engine.previous_period(invoices, window))
            performers.append(
                TopPerformer(
                    name=client.name,
                    revenue=round2(revenue),
                    growth=self.engine.growth_rate(window_revenue, previous_revenue),
                )
            )

        total = len(clients)
        active = sum(1 for client in clients if client.status == "active")
        first_day, last_day = window.start.date(), window.end.date()
        new_clients = sum(
            1
            for client in clients
            if client.join_date is not None and first_day <= client.join_date <= last_day
        )

        return ClientReport(
            summary=ClientSummary(
                total_clients=total,
                active_clients=active,
                new_clients=new_clients,
                churn_rate=round2((1 - active / total) * 100) if total else 0.0,
                average_revenue=round2(total_revenue / total) if total else 0.0,
            ),
            client_list=sorted(rows, key=lambda row: row.revenue, reverse=True),
            top_performers=sorted(performers, key=lambda p: p.revenue, reverse=True)[
                :REPORT_TOP_CLIENTS
            ],
        )

    # -------------------------------------------------------------------------
    # Invoices
    # -------------------------------------------------------------------------

    def invoice_report(
        self,
        records: Sequence[InvoiceRecord],
        window: DateWindow,
    ) -> InvoiceReport:
        """Invoice processing report for the window.

        Args:
            records: All invoice records.
            window: Report window.

        Returns:
            Invoice report.
        """
        current = self.engine.filter_window(records, window)
        total_value = sum(record.total for record in current)
        failed = sum(1 for record in current if _is_failed(record))
        processed = len(current) - failed

        monthly_revenue: dict[str, float] = {}
        monthly_count: dict[str, int] = {}
        for record in current:
            month = record.created_at.strftime("%Y-%m")  # type: ignore[union-attr]
            monthly_revenue[month] = monthly_revenue.get(month, 0.0) + record.total
            monthly_count[month] = monthly_count.get(month, 0) + 1

        return InvoiceReport(
            summary=InvoiceSummary(
                total_invoices=len(current),
                successful_processing=processed,
                failed_processing=failed,
                average_processing_time=self.settings.analytics_avg_processing_time,
                average_value=round2(total_value / len(current)) if current else 0.0,
                total_value=round2(total_value),
            ),
            status_breakdown=[
                StatusBreakdown(
                    status="Processed",
                    count=processed,
                    percentage=_share(processed, len(current)),
                ),
                StatusBreakdown(
                    status="Failed",
                    count=failed,
                    percentage=_share(failed, len(current)),
                ),
            ],
            category_breakdown=self.engine.breakdown_by_category(current),
            monthly_trend=[
                MonthlyTrendPoint(
                    month=month,
                    invoices=monthly_count[month],
                    revenue=round2(monthly_revenue[month]),
                )
                for month in sorted(monthly_revenue, reverse=True)
            ],
        )

    # -------------------------------------------------------------------------
    # Summary
    # -------------------------------------------------------------------------

    def analytics_summary(
        self,
        clients: Sequence[ClientRecord],
        records: Sequence[InvoiceRecord],
        window: DateWindow,
    ) -> AnalyticsSummaryReport:
        """Condensed view of the revenue, client and invoice reports.

        Args:
            clients: Client records.
            records: All invoice records.
            window: Report window.

        Returns:
            Summary report.
        """
        revenue = self.revenue_report(records, window)
        client = self.client_report(clients, records, window)
        invoice = self.invoice_report(records, window)
        success_rate = _share(
            invoice.summary.successful_processing,
            invoice.summary.total_invoices,
        )

        return AnalyticsSummaryReport(
            summary=AnalyticsSummaryTotals(
                total_revenue=revenue.summary.total_revenue,
                total_invoices=invoice.summary.total_invoices,
                total_clients=client.summary.total_clients,
                success_rate=success_rate,
                average_invoice_value=invoice.summary.average_value,
                period=revenue.summary.period,
            ),
            revenue=RevenueHighlights(
                trend=revenue.daily_breakdown[:SUMMARY_TREND_DAYS],
                top_clients=revenue.top_clients[:SUMMARY_TOP_CLIENTS],
            ),
            clients=ClientHighlights(
                active_clients=client.summary.active_clients,
                new_clients=client.summary.new_clients,
                churn_rate=client.summary.churn_rate,
            ),
            invoices=InvoiceHighlights(
                success_rate=success_rate,
                categories=invoice.category_breakdown[:SUMMARY_CATEGORIES],
            ),
        )

    # -------------------------------------------------------------------------
    # Entry point
    # -------------------------------------------------------------------------

    async def generate(
        self,
        source: InvoiceSource,
        report_type: ReportType,
        window: DateWindow,
    ) -> tuple[ReportData, bool]:
        """Fetch a snapshot and build the requested report.

        Args:
            source: Configured invoice source.
            report_type: Report kind.
            window: Report window.

        Returns:
            The report and whether it was built from sample data.

        Raises:
            DatastoreError: If the source fails and sample fallback is disabled.
        """
        needs_clients = report_type in (ReportType.CLIENT, ReportType.ANALYTICS)
        snapshot = await load_snapshot(
            source,
            include_clients=needs_clients,
            fallback_to_sample=self.settings.datastore_fallback_to_sample,
        )

        report: ReportData
        if report_type == ReportType.REVENUE:
            report = self.revenue_report(snapshot.invoices, window)
        elif report_type == ReportType.CLIENT:
            report = self.client_report(snapshot.clients, snapshot.invoices, window)
        elif report_type == ReportType.INVOICE:
            report = self.invoice_report(snapshot.invoices, window)
        else:  # ANALYTICS
            report = self.analytics_summary(snapshot.clients, snapshot.invoices, window)

        logger.info(
            "reports.report_generated",
            report_type=report_type.value,
            window_start=window.start.isoformat(),
            window_end=window.end.isoformat(),
            invoice_count=len(snapshot.invoices),
            client_count=len(snapshot.clients),
            sample=snapshot.sample,
        )
        return report, snapshot.sample
