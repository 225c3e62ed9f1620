"""Pydantic schemas for report endpoints."""

from datetime import date, datetime
from enum import Enum
from typing import Literal

from pydantic import Field

from invoicesense.features.analytics.schemas import (
    CategoryBreakdown,
    CurrencyBreakdown,
    RankedEntity,
    RevenueTrendPoint,
)
from invoicesense.shared.schemas import ApiEnvelope, CamelModel

# =============================================================================
# Enums
# =============================================================================


class ReportType(str, Enum):
    """Report kinds served by GET /reports."""

    REVENUE = "revenue"
    CLIENT = "client"
    INVOICE = "invoice"
    ANALYTICS = "analytics"


# =============================================================================
# Revenue Report
# =============================================================================


class RevenueSummary(CamelModel):
    """Headline revenue figures for the window."""

    total_revenue: float
    average_daily: float = Field(..., description="Total revenue divided by the window's days.")
    highest_day: float = Field(..., description="Best day among days with invoices.")
    lowest_day: float = Field(..., description="Worst day among days with invoices.")
    growth_rate: float = Field(..., description="Revenue growth vs the previous period (%).")
    period: str = Field(..., description='Window length, e.g. "30 days".')
    invoice_count: int = Field(..., ge=0)


class RevenueReport(CamelModel):
    """Revenue report for a window."""

    summary: RevenueSummary
    daily_breakdown: list[RevenueTrendPoint] = Field(
        ...,
        description="Days with invoices, newest first (at most 30).",
    )
    top_clients: list[RankedEntity]
    currency_breakdown: list[CurrencyBreakdown] = Field(
        ...,
        description="Sorted by amount; percentages rounded to cents.",
    )


# =============================================================================
# Client Report
# =============================================================================


class ClientSummary(CamelModel):
    """Client base figures."""

    total_clients: int = Field(..., ge=0)
    active_clients: int = Field(..., ge=0)
    new_clients: int = Field(..., ge=0, description="Clients who joined inside the window.")
    churn_rate: float = Field(..., description="Share of clients not active (%).")
    average_revenue: float


class ClientReportRow(CamelModel):
    """One client with its all-time invoice totals."""

    id: str
    name: str
    email: str
    revenue: float
    invoices: int = Field(..., ge=0)
    status: str
    join_date: date | None = None
    last_invoice: date | None = None


class TopPerformer(CamelModel):
    """Client ranked by revenue with its growth in the window."""

    name: str
    revenue: float
    growth: float = Field(..., description="Revenue growth vs the previous period (%).")


class ClientReport(CamelModel):
    """Client report."""

    summary: ClientSummary
    client_list: list[ClientReportRow]
    top_performers: list[TopPerformer]


# =============================================================================
# Invoice Report
# =============================================================================


class InvoiceSummary(CamelModel):
    """Invoice processing figures for the window."""

    total_invoices: int = Field(..., ge=0)
    successful_processing: int = Field(..., ge=0)
    failed_processing: int = Field(..., ge=0)
    average_processing_time: float
    average_value: float
    total_value: float


class StatusBreakdown(CamelModel):
    """Invoices per processing outcome."""

    status: Literal["Processed", "Failed"]
    count: int = Field(..., ge=0)
    percentage: float


class MonthlyTrendPoint(CamelModel):
    """Invoices and revenue for one calendar month."""

    month: str = Field(..., description="Month as YYYY-MM.")
    invoices: int = Field(..., ge=0)
    revenue: float


class InvoiceReport(CamelModel):
    """Invoice report for a window."""

    summary: InvoiceSummary
    status_breakdown: list[StatusBreakdown]
    category_breakdown: list[CategoryBreakdown]
    monthly_trend: list[MonthlyTrendPoint] = Field(..., description="Newest month first.")


# =============================================================================
# Analytics Summary Report
# =============================================================================


class AnalyticsSummaryTotals(CamelModel):
    """Combined headline figures."""

    total_revenue: float
    total_invoices: int = Field(..., ge=0)
    total_clients: int = Field(..., ge=0)
    success_rate: float
    average_invoice_value: float
    period: str


class RevenueHighlights(CamelModel):
    """Revenue excerpt of the summary."""

    trend: list[RevenueTrendPoint]
    top_clients: list[RankedEntity]


class ClientHighlights(CamelModel):
    """Client excerpt of the summary."""

    active_clients: int = Field(..., ge=0)
    new_clients: int = Field(..., ge=0)
    churn_rate: float


class InvoiceHighlights(CamelModel):
    """Invoice excerpt of the summary."""

    success_rate: float
    categories: list[CategoryBreakdown]


class AnalyticsSummaryReport(CamelModel):
    """Revenue, client and invoice reports condensed into one payload."""

    summary: AnalyticsSummaryTotals
    revenue: RevenueHighlights
    clients: ClientHighlights
    invoices: InvoiceHighlights


ReportData = RevenueReport | ClientReport | InvoiceReport | AnalyticsSummaryReport


class ReportEnvelope(ApiEnvelope[ReportData]):
    """Envelope for report responses."""

    type: ReportType
    range: str
    generated: datetime
    sample: bool = False
