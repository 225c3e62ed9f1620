"""Resolve dashboard range presets into DateWindows.

Presets end at "now" and reach back a fixed span:
- 7d / 30d / 90d: that many days
- 1y: the same calendar day one year earlier
- mtd / ytd: the first of the month / year at 00:00 UTC
- custom: explicit start and end dates (end date taken to 23:59:59.999999)
"""

from datetime import UTC, date, datetime, time, timedelta
from enum import Enum

from invoicesense.core.exceptions import BadRequestError
from invoicesense.core.logging import get_logger
from invoicesense.features.analytics.schemas import DateWindow

logger = get_logger(__name__)


class RangePreset(str, Enum):
    """Named analysis ranges accepted by the analytics and report endpoints."""

    LAST_7_DAYS = "7d"
    LAST_30_DAYS = "30d"
    LAST_90_DAYS = "90d"
    LAST_YEAR = "1y"
    MONTH_TO_DATE = "mtd"
    YEAR_TO_DATE = "ytd"
    CUSTOM = "custom"


DEFAULT_RANGE = RangePreset.LAST_30_DAYS

_DAY_SPANS = {
    RangePreset.LAST_7_DAYS: 7,
    RangePreset.LAST_30_DAYS: 30,
    RangePreset.LAST_90_DAYS: 90,
}


def parse_range(value: str | None, default: RangePreset = DEFAULT_RANGE) -> RangePreset:
    """Map a query value to a preset, falling back to the default.

    Args:
        value: Raw ``range`` query parameter.
        default: Preset used for missing or unknown values.

    Returns:
        The matching preset.
    """
    if not value:
        return default
    try:
        return RangePreset(value.strip().lower())
    except ValueError:
        logger.warning("analytics.unknown_range", range=value, fallback=default.value)
        return default


def _one_year_before(moment: datetime) -> datetime:
    try:
        return moment.replace(year=moment.year - 1)
    except ValueError:
        # 29 February
        return moment.replace(year=moment.year - 1, day=28)


def resolve_window(
    preset: RangePreset,
    now: datetime | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
) -> DateWindow:
    """Build the DateWindow for a preset.

    Args:
        preset: Range preset.
        now: Reference time (defaults to the current UTC time).
        start_date: First day of a custom range.
        end_date: Last day of a custom range (inclusive).

    Returns:
        The resolved window.

    Raises:
        BadRequestError: If a custom range is incomplete, reversed, or its
            previous period would start before year 1.
    """
    now = now or datetime.now(UTC)

    if preset == RangePreset.CUSTOM:
        if start_date is None or end_date is None:
            raise BadRequestError(
                "Custom range requires both startDate and endDate",
                details={"start_date": str(start_date), "end_date": str(end_date)},
            )
        if end_date < start_date:
            raise BadRequestError(
                "endDate must be on or after startDate",
                details={"start_date": str(start_date), "end_date": str(end_date)},
            )
        period_days = (end_date - start_date).days + 1
        if (start_date - date.min).days < period_days:
            raise BadRequestError(
                "Custom range is too early: the comparison period would start before year 1",
                details={"start_date": str(start_date), "end_date": str(end_date)},
            )
        return DateWindow(
            start=datetime.combine(start_date, time.min, tzinfo=UTC),
            end=datetime.combine(end_date, time.max, tzinfo=UTC),
        )

    if preset in _DAY_SPANS:
        start = now - timedelta(days=_DAY_SPANS[preset])
    elif preset == RangePreset.LAST_YEAR:
        start = _one_year_before(now)
    elif preset == RangePreset.MONTH_TO_DATE:
        start = datetime(now.year, now.month, 1, tzinfo=UTC)
    else:  # YEAR_TO_DATE
        start = datetime(now.year, 1, 1, tzinfo=UTC)

    return DateWindow(start=start, end=now)
