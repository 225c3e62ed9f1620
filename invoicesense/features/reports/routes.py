"""API routes for reports."""

from datetime import UTC, date, datetime

from fastapi import APIRouter, Depends, Query

from invoicesense.core.config import get_settings
from invoicesense.core.exceptions import BadRequestError
from invoicesense.core.logging import get_logger
from invoicesense.features.analytics.windows import RangePreset, parse_range, resolve_window
from invoicesense.features.datastore.dependencies import get_invoice_source
from invoicesense.features.datastore.sources import InvoiceSource
from invoicesense.features.reports.schemas import ReportEnvelope, ReportType
from invoicesense.features.reports.service import ReportsService

logger = get_logger(__name__)

router = APIRouter(prefix="/reports", tags=["reports"])

_REPORT_TYPES = ", ".join(report_type.value for report_type in ReportType)


def parse_report_type(value: str | None) -> ReportType:
    """Map the ``type`` query value to a ReportType.

    Args:
        value: Raw query value.

    Returns:
        The matching report type.

    Raises:
        BadRequestError: If the value is missing or unknown.
    """
    if not value:
        raise BadRequestError(
            "Report type is required",
            details={"allowed": _REPORT_TYPES},
        )
    try:
        return ReportType(value.strip().lower())
    except ValueError:
        raise BadRequestError(
            f"Invalid report type: {value}",
            details={"allowed": _REPORT_TYPES},
        ) from None


@router.get(
    "",
    response_model=ReportEnvelope,
    summary="Generate a report",
    description="""
Generate a revenue, client, invoice or combined analytics report.

**Types**: `revenue`, `client`, `invoice`, `analytics`.

**Ranges**: `7d`, `30d` (default), `90d`, `1y`, `mtd`, `ytd` or `custom`.
A custom range needs `startDate` and `endDate` (YYYY-MM-DD, both inclusive);
passing both dates without a range implies `custom`.
""",
)
async def get_report(
    type_: str | None = Query(
        None,
        alias="type",
        description="Report type: revenue, client, invoice or analytics.",
    ),
    range_: str | None = Query(
        None,
        alias="range",
        description="Range preset or custom.",
    ),
    start_date: date | None = Query(None, alias="startDate"),
    end_date: date | None = Query(None, alias="endDate"),
    source: InvoiceSource = Depends(get_invoice_source),
) -> ReportEnvelope:
    """Generate a report.

    Args:
        type_: Report type.
        range_: Range preset.
        start_date: First day of a custom range.
        end_date: Last day of a custom range.
        source: Configured invoice source.

    Returns:
        Envelope with the report payload.

    Raises:
        BadRequestError: If the type is missing or invalid, or a custom
            range is incomplete.
    """
    report_type = parse_report_type(type_)

    settings = get_settings()
    if range_ is None and start_date is not None and end_date is not None:
        preset = RangePreset.CUSTOM
        logger.info(
            "reports.custom_range_implied",
            start_date=start_date.isoformat(),
            end_date=end_date.isoformat(),
        )
    else:
        preset = parse_range(range_, default=RangePreset(settings.analytics_default_range))

    now = datetime.now(UTC)
    window = resolve_window(preset, now=now, start_date=start_date, end_date=end_date)

    service = ReportsService()
    report, sample = await service.generate(source, report_type, window)

    return ReportEnvelope(
        data=report,
        message=f"{report_type.value} report generated successfully",
        type=report_type,
        range=preset.value,
        generated=now,
        sample=sample,
    )
