"""API routes for the client directory."""

from fastapi import APIRouter, Depends

from invoicesense.features.clients.schemas import ClientDetail, ClientProfile
from invoicesense.features.clients.service import ClientsService
from invoicesense.features.datastore.dependencies import get_invoice_source
from invoicesense.features.datastore.sources import InvoiceSource
from invoicesense.shared.schemas import ApiEnvelope

router = APIRouter(prefix="/clients", tags=["clients"])


def _message(sample: bool, source: InvoiceSource, found: str) -> str:
    if source.is_sample:
        return "Sample client data (Airtable not configured)"
    if sample:
        return "Sample client data (Airtable unavailable)"
    return found


@router.get(
    "",
    response_model=ApiEnvelope[list[ClientProfile]],
    summary="List clients",
    description="""
List every client with all-time invoice totals.

Invoices belong to a client when their `Client ID` matches the client's ID,
or failing that, when their `Company` matches the client's name.
""",
)
async def list_clients(
    source: InvoiceSource = Depends(get_invoice_source),
) -> ApiEnvelope[list[ClientProfile]]:
    """List clients with revenue, invoice count and last invoice date.

    Args:
        source: Configured invoice source.

    Returns:
        Envelope with client profiles in table order.
    """
    profiles, sample = await ClientsService().list_clients(source)
    return ApiEnvelope[list[ClientProfile]](
        data=profiles,
        message=_message(sample, source, "Clients retrieved successfully"),
    )


@router.get(
    "/{client_id}",
    response_model=ApiEnvelope[ClientDetail],
    summary="Get client details",
    description="""
Get one client's profile and invoice history (newest first).

`client_id` may be the datastore record ID or the business client ID.
Returns 404 if no client matches.
""",
)
async def get_client(
    client_id: str,
    source: InvoiceSource = Depends(get_invoice_source),
) -> ApiEnvelope[ClientDetail]:
    """Get a client's profile and invoice history.

    Args:
        client_id: Record ID or business client ID.
        source: Configured invoice source.

    Returns:
        Envelope with the client detail.

    Raises:
        NotFoundError: If no client matches.
    """
    detail, sample = await ClientsService().get_client(source, client_id)
    return ApiEnvelope[ClientDetail](
        data=detail,
        message=_message(sample, source, "Client retrieved successfully"),
    )
