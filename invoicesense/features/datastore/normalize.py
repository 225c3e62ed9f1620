"""Map raw Airtable rows onto analytics records."""

from collections.abc import Mapping
from typing import Any

from invoicesense.features.analytics.parsing import parse_timestamp
from invoicesense.features.analytics.schemas import ClientRecord, InvoiceRecord

# Airtable column names
INVOICE_FIELDS = {
    "client_id": "Client ID",
    "company": "Company",
    "description": "Description",
    "quantity": "Quantity",
    "unit_price": "Unit Price",
    "total": "Total",
    "currency": "Currency",
    "status": "Status",
    "created_at": "Created",
}

CLIENT_FIELDS = {
    "client_id": "Client ID",
    "name": "Name",
    "email": "Email",
    "phone": "Phone",
    "address": "Address",
    "website": "Website",
    "industry": "Industry",
    "notes": "Notes",
    "status": "Status",
    "join_date": "Join Date",
}


def _fields(raw: Mapping[str, Any]) -> Mapping[str, Any]:
    fields = raw.get("fields")
    return fields if isinstance(fields, Mapping) else {}


def normalize_invoice(raw: Mapping[str, Any]) -> InvoiceRecord:
    """Build an InvoiceRecord from an Airtable invoice row.

    The explicit ``Created`` field wins; when it is missing or unreadable the
    row's ``createdTime`` metadata is used instead.
    """
    fields = _fields(raw)
    values = {name: fields.get(column) for name, column in INVOICE_FIELDS.items()}
    values["created_at"] = parse_timestamp(values["created_at"]) or parse_timestamp(
        raw.get("createdTime")
    )
    return InvoiceRecord(id=raw.get("id"), **values)


def normalize_client(raw: Mapping[str, Any]) -> ClientRecord:
    """Build a ClientRecord from an Airtable client row.

    ``Join Date`` falls back to the row's ``createdTime``.
    """
    fields = _fields(raw)
    values = {name: fields.get(column) for name, column in CLIENT_FIELDS.items()}
    values["join_date"] = values["join_date"] or raw.get("createdTime")
    return ClientRecord(id=raw.get("id"), **values)
