"""API routes for the analytics dashboard."""

from fastapi import APIRouter, Depends, Query

from invoicesense.core.config import get_settings
from invoicesense.core.logging import get_logger
from invoicesense.features.analytics.schemas import AnalyticsDashboard
from invoicesense.features.analytics.service import AnalyticsService
from invoicesense.features.analytics.windows import RangePreset, parse_range
from invoicesense.features.datastore.dependencies import get_invoice_source
from invoicesense.features.datastore.sources import InvoiceSource
from invoicesense.shared.schemas import ApiEnvelope

logger = get_logger(__name__)

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.get(
    "",
    response_model=ApiEnvelope[AnalyticsDashboard],
    summary="Compute dashboard analytics",
    description="""
Compute KPIs, revenue trend, top clients, currency and category breakdowns
and recent activity for the dashboard.

**Ranges**: `7d`, `30d` (default), `90d`, `1y`, `mtd`, `ytd`.
Unknown values fall back to the default.

**Window semantics**:
- KPIs and the revenue trend cover the selected range only
- Growth compares against the preceding period of equal length
  (0 when that period has no data)
- Top clients, breakdowns and recent activity cover all invoices

Amounts in different currencies are summed without conversion.
""",
)
async def get_analytics(
    range_: str | None = Query(
        None,
        alias="range",
        description="Range preset: 7d, 30d, 90d, 1y, mtd or ytd.",
    ),
    source: InvoiceSource = Depends(get_invoice_source),
) -> ApiEnvelope[AnalyticsDashboard]:
    """Compute dashboard analytics for a range preset.

    Args:
        range_: Range preset.
        source: Configured invoice source.

    Returns:
        Envelope with dashboard aggregates.
    """
    settings = get_settings()
    preset = parse_range(range_, default=RangePreset(settings.analytics_default_range))
    if preset == RangePreset.CUSTOM:
        preset = RangePreset(settings.analytics_default_range)
        logger.info("analytics.custom_range_replaced", range=preset.value)

    service = AnalyticsService()
    dashboard = await service.compute_dashboard(source, preset)

    if source.is_sample:
        message = "Sample analytics data (Airtable not configured)"
    elif dashboard.sample:
        message = "Sample analytics data (Airtable unavailable)"
    else:
        message = "Analytics data generated successfully"
    return ApiEnvelope[AnalyticsDashboard](data=dashboard, message=message)
