"""Pydantic schemas for invoice analytics.

Input records are immutable (frozen=True) and coerce messy datastore values
instead of rejecting them. Output schemas serialize with camelCase keys for
the dashboard.

Monetary totals mix currencies arithmetically; no FX conversion is applied.
"""

import math
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from invoicesense.features.analytics.parsing import parse_amount, parse_timestamp
from invoicesense.shared.schemas import CamelModel

DEFAULT_CURRENCY = "USD"
UNKNOWN_CLIENT = "Unknown"

# =============================================================================
# Enums
# =============================================================================


class Category(str, Enum):
    """Service category inferred from an invoice description."""

    WEB_DEVELOPMENT = "Web Development"
    DESIGN_SERVICES = "Design Services"
    CONSULTING = "Consulting"
    MARKETING = "Marketing"
    OTHER = "Other"


# =============================================================================
# Input Records
# =============================================================================


def _optional_text(value: object) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


class InvoiceRecord(BaseModel):
    """One normalized invoice line item.

    Missing or malformed fields fall back to defaults: amounts to 0,
    currency to USD, status to "processed", timestamp to None.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Opaque identifier, unique within a fetch batch.")
    client_id: str | None = Field(None, description="Stable client identifier, if any.")
    company: str | None = Field(None, description="Client display name.")
    description: str = Field("", description="Free text used for category inference.")
    quantity: float = Field(0.0, ge=0, description="Quantity billed.")
    unit_price: float = Field(0.0, description="Unit price.")
    total: float = Field(0.0, description="Line total.")
    currency: str = Field(DEFAULT_CURRENCY, description="ISO code or symbol.")
    status: str = Field("processed", description="Extraction/processing status.")
    created_at: datetime | None = Field(None, description="Creation timestamp (UTC).")

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: object) -> str:
        """Accept any identifier type."""
        return "" if v is None else str(v)

    @field_validator("client_id", "company", mode="before")
    @classmethod
    def coerce_optional_text(cls, v: object) -> str | None:
        """Blank identifiers count as missing."""
        return _optional_text(v)

    @field_validator("description", mode="before")
    @classmethod
    def coerce_description(cls, v: object) -> str:
        """Missing description becomes an empty string."""
        return "" if v is None else str(v)

    @field_validator("unit_price", "total", mode="before")
    @classmethod
    def coerce_amount(cls, v: object) -> float:
        """Parse numbers or currency-formatted strings."""
        return parse_amount(v)

    @field_validator("quantity", mode="before")
    @classmethod
    def coerce_quantity(cls, v: object) -> float:
        """Negative or unreadable quantities become 0."""
        return max(parse_amount(v), 0.0)

    @field_validator("currency", mode="before")
    @classmethod
    def coerce_currency(cls, v: object) -> str:
        """Blank currency defaults to USD."""
        return _optional_text(v) or DEFAULT_CURRENCY

    @field_validator("status", mode="before")
    @classmethod
    def coerce_status(cls, v: object) -> str:
        """Blank status defaults to processed."""
        return _optional_text(v) or "processed"

    @field_validator("created_at", mode="before")
    @classmethod
    def coerce_created_at(cls, v: object) -> datetime | None:
        """Unreadable timestamps become None."""
        return parse_timestamp(v)

    @property
    def client_key(self) -> str | None:
        """Grouping key for distinct clients (ID, else display name)."""
        return self.client_id or self.company

    @property
    def display_name(self) -> str:
        """Name shown in rankings and activity feeds."""
        return self.company or self.client_id or UNKNOWN_CLIENT


class ClientRecord(BaseModel):
    """A client row from the clients table."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Datastore record identifier.")
    client_id: str | None = Field(None, description="Business client identifier.")
    name: str = Field("", description="Client display name.")
    email: str = Field("", description="Contact email.")
    phone: str = Field("", description="Contact phone number.")
    address: str = Field("", description="Postal address.")
    website: str = Field("", description="Client website.")
    industry: str = Field("", description="Industry the client operates in.")
    notes: str = Field("", description="Free-text account notes.")
    status: str = Field("active", description="Client status (active, inactive, ...).")
    join_date: date | None = Field(None, description="Date the client was added.")

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: object) -> str:
        """Accept any identifier type."""
        return "" if v is None else str(v)

    @field_validator("client_id", mode="before")
    @classmethod
    def coerce_client_id(cls, v: object) -> str | None:
        """Blank identifiers count as missing."""
        return _optional_text(v)

    @field_validator(
        "name", "email", "phone", "address", "website", "industry", "notes", mode="before"
    )
    @classmethod
    def coerce_text(cls, v: object) -> str:
        """Missing text becomes an empty string."""
        return "" if v is None else str(v).strip()

    @field_validator("status", mode="before")
    @classmethod
    def coerce_status(cls, v: object) -> str:
        """Blank status defaults to active."""
        return (_optional_text(v) or "active").lower()

    @field_validator("join_date", mode="before")
    @classmethod
    def coerce_join_date(cls, v: object) -> date | None:
        """Unreadable dates become None."""
        parsed = parse_timestamp(v)
        return parsed.date() if parsed else None

    @property
    def key(self) -> str:
        """Identifier invoices reference (client ID, else record ID)."""
        return self.client_id or self.id

    def owns(self, record: InvoiceRecord) -> bool:
        """Whether an invoice belongs to this client.

        Invoices reference clients by ID or, lacking a match, by name.
        """
        if record.client_id is not None and record.client_id == self.key:
            return True
        return bool(self.name) and record.company == self.name

    def matches_id(self, value: str) -> bool:
        """Whether ``value`` is this client's record ID or client ID."""
        return value in (self.id, self.client_id)


# =============================================================================
# Date Windows
# =============================================================================


class DateWindow(BaseModel):
    """Analysis window. Both ends are inclusive."""

    model_config = ConfigDict(frozen=True)

    start: datetime = Field(..., description="Start of the window (inclusive, UTC).")
    end: datetime = Field(..., description="End of the window (inclusive, UTC).")

    @field_validator("start", "end", mode="after")
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        """Normalize to aware UTC datetimes."""
        normalized = parse_timestamp(v)
        return normalized if normalized is not None else v

    @field_validator("end")
    @classmethod
    def validate_date_range(cls, v: datetime, info: object) -> datetime:
        """Ensure end >= start."""
        data = getattr(info, "data", {})
        if "start" in data and v < data["start"]:
            msg = "end must be >= start"
            raise ValueError(msg)
        return v

    @property
    def period_days(self) -> int:
        """Window length in days, rounded up."""
        return math.ceil((self.end - self.start) / timedelta(days=1))

    def contains(self, moment: datetime | None) -> bool:
        """Check whether a timestamp falls inside the window (both ends inclusive)."""
        return moment is not None and self.start <= moment <= self.end


# =============================================================================
# Aggregate Outputs
# =============================================================================


class KPISummary(CamelModel):
    """Top-line numbers for a window and their growth against the previous period.

    Growth percentages are 0 when the previous period has no data.
    """

    total_revenue: float = Field(..., description="Sum of totals in the window.")
    total_invoices: int = Field(..., ge=0, description="Invoices in the window.")
    total_clients: int = Field(..., ge=0, description="Distinct clients in the window.")
    success_rate: float | None = Field(None, description="Processing success rate (%).")
    avg_processing_time: float | None = Field(None, description="Average seconds per invoice.")
    revenue_growth: float = Field(0.0, description="Revenue growth vs previous period (%).")
    invoice_growth: float = Field(0.0, description="Invoice count growth (%).")
    client_growth: float = Field(0.0, description="Distinct client growth (%).")


class RevenueTrendPoint(CamelModel):
    """Revenue for one calendar day."""

    date: date
    revenue: float
    invoices: int = Field(..., ge=0)


class RankedEntity(CamelModel):
    """An entity (usually a client) ranked by revenue."""

    name: str
    revenue: float
    invoices: int = Field(..., ge=0)


class CurrencyBreakdown(CamelModel):
    """Revenue share of a single currency."""

    currency: str
    amount: float
    count: int = Field(..., ge=0)
    percentage: int | float = Field(
        ...,
        description="Share of the combined total across all currencies. "
        "Whole numbers on the dashboard, cents in reports.",
    )


class CategoryBreakdown(CamelModel):
    """Revenue and invoice count for one inferred category."""

    category: Category
    count: int = Field(..., ge=0)
    revenue: float


class ActivityEntry(CamelModel):
    """A row of the recent activity feed."""

    id: str
    type: Literal["invoice"] = "invoice"
    client: str
    amount: float
    time: str = Field(..., description='Relative label, e.g. "3 hours ago".')
    created_at: datetime | None = None


class AnalyticsDashboard(CamelModel):
    """Everything the dashboard's analytics page renders."""

    kpis: KPISummary
    revenue_data: list[RevenueTrendPoint]
    top_clients: list[RankedEntity]
    currency_distribution: list[CurrencyBreakdown]
    invoice_categories: list[CategoryBreakdown]
    recent_activity: list[ActivityEntry]
    time_range: str
    generated: datetime
    sample: bool = Field(False, description="True when built from the sample dataset.")
