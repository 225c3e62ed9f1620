"""Analytics module: invoice KPIs, trends, rankings and breakdowns.

The aggregation engine is pure; analytics.service fetches records from the
configured invoice source and feeds them through it.
"""

from invoicesense.features.analytics.engine import CATEGORY_RULES, AggregationEngine
from invoicesense.features.analytics.schemas import (
    AnalyticsDashboard,
    Category,
    ClientRecord,
    DateWindow,
    InvoiceRecord,
    KPISummary,
)
from invoicesense.features.analytics.windows import RangePreset, resolve_window

__all__ = [
    "CATEGORY_RULES",
    "AggregationEngine",
    "AnalyticsDashboard",
    "Category",
    "ClientRecord",
    "DateWindow",
    "InvoiceRecord",
    "KPISummary",
    "RangePreset",
    "resolve_window",
]
