"""Health check endpoints."""

from typing import Literal

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from invoicesense.core.logging import get_logger
from invoicesense.features.datastore.dependencies import get_invoice_source
from invoicesense.features.datastore.sources import InvoiceSource

logger = get_logger(__name__)

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: Literal["ok", "degraded", "unhealthy"]
    datastore: Literal["connected", "disconnected", "sample"] | None = None


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Basic health check endpoint.

    Returns:
        Health status response.
    """
    logger.debug("health.check_started")
    return HealthResponse(status="ok")


@router.get("/health/ready", response_model=HealthResponse)
async def readiness_check(
    source: InvoiceSource = Depends(get_invoice_source),
) -> HealthResponse:
    """Readiness check including datastore connectivity.

    A service running on the sample dataset reports ``degraded``.

    Args:
        source: Configured invoice source.

    Returns:
        Health status with datastore state.
    """
    logger.debug("health.readiness_check_started")

    if source.is_sample:
        return HealthResponse(status="degraded", datastore="sample")

    if await source.check():
        logger.info("health.datastore_connected")
        return HealthResponse(status="ok", datastore="connected")

    logger.error("health.datastore_disconnected")
    return HealthResponse(status="unhealthy", datastore="disconnected")
