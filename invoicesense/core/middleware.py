"""Request middleware for correlation, timing and access logging.

Every response carries ``X-Request-ID`` and a ``Server-Timing`` entry with
the handler duration, so the dashboard can correlate slow or failed calls
with server logs. Health checks are polled by the orchestrator and are
logged at DEBUG only.
"""

import time
import uuid
from collections.abc import Awaitable, Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from invoicesense.core.logging import get_logger, request_id_ctx

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
QUIET_PATH_PREFIXES = ("/health",)


def _completion_level(path: str, status_code: int) -> str:
    """Log method name for a finished request."""
    if status_code >= 500:
        return "error"
    if status_code >= 400:
        return "warning"
    if path.startswith(QUIET_PATH_PREFIXES):
        return "debug"
    return "info"


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Tag every request with an X-Request-ID, time it and log its outcome."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        """Process request with correlation ID and timing.

        Args:
            request: Incoming HTTP request.
            call_next: Next middleware/handler in chain.

        Returns:
            Response with X-Request-ID and Server-Timing headers.
        """
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        token = request_id_ctx.set(request_id)
        started = time.perf_counter()
        path = request.url.path

        try:
            response = await call_next(request)
            duration_ms = round((time.perf_counter() - started) * 1000, 2)

            log = getattr(logger, _completion_level(path, response.status_code))
            log(
                "http.request_completed",
                method=request.method,
                path=path,
                query=request.url.query or None,
                status_code=response.status_code,
                duration_ms=duration_ms,
                client_host=request.client.host if request.client else None,
            )

            response.headers[REQUEST_ID_HEADER] = request_id
            response.headers["Server-Timing"] = f"app;dur={duration_ms}"
            return response
        finally:
            request_id_ctx.reset(token)
