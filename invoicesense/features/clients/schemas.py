"""Pydantic schemas for client endpoints."""

from datetime import date, datetime

from pydantic import Field

from invoicesense.features.analytics.schemas import Category
from invoicesense.shared.schemas import CamelModel


class ClientProfile(CamelModel):
    """A client with its all-time invoice totals."""

    id: str = Field(..., description="Datastore record identifier.")
    client_id: str | None = Field(None, description="Business client identifier.")
    name: str
    email: str
    phone: str = ""
    address: str = ""
    website: str = ""
    industry: str = ""
    notes: str = ""
    status: str
    join_date: date | None = None
    total_revenue: float = Field(..., description="Sum of invoice totals, rounded to cents.")
    invoice_count: int = Field(..., ge=0)
    last_invoice: date | None = Field(None, description="Date of the newest dated invoice.")


class ClientInvoice(CamelModel):
    """One invoice in a client's history."""

    id: str
    description: str
    category: Category
    quantity: float
    unit_price: float
    amount: float = Field(..., description="Line total.")
    currency: str
    status: str
    created_at: datetime | None = None


class ClientDetail(CamelModel):
    """A client profile with its invoice history, newest first."""

    client: ClientProfile
    invoices: list[ClientInvoice]
