"""Async Airtable REST client.

Reads whole tables through the list-records endpoint, following the
``offset`` cursor page by page. Rate-limited requests (429) are retried with
exponential backoff; every other failure surfaces as DatastoreError.

Reference: https://airtable.com/developers/web/api/list-records
"""

from __future__ import annotations

import asyncio
from typing import Any
from urllib.parse import quote

import httpx

from invoicesense.core.exceptions import DatastoreError
from invoicesense.core.logging import get_logger

logger = get_logger(__name__)

AirtableRecord = dict[str, Any]


class AirtableClient:
    """Thin read-only wrapper around the Airtable list-records endpoint."""

    def __init__(
        self,
        api_key: str,
        base_id: str,
        api_url: str = "https://api.airtable.com/v0",
        timeout_seconds: float = 30.0,
        page_size: int = 100,
        max_retries: int = 3,
        retry_delay: float = 1.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            api_key: Personal access token.
            base_id: Airtable base identifier (``app...``).
            api_url: API root URL.
            timeout_seconds: Per-request timeout.
            page_size: Records per page (Airtable maximum is 100).
            max_retries: Retries for rate-limited requests.
            retry_delay: Initial backoff delay (doubles each retry).
            transport: Optional httpx transport (used by tests).
        """
        self.base_id = base_id
        self.page_size = page_size
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self._api_key = api_key
        self._api_url = api_url.rstrip("/")
        self._timeout = httpx.Timeout(timeout_seconds, connect=10.0)
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the async HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=f"{self._api_url}/{self.base_id}",
                headers={"Authorization": f"Bearer {self._api_key}"},
                timeout=self._timeout,
                transport=self._transport,
            )
        return self._client

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def list_records(
        self,
        table: str,
        sort_field: str | None = None,
        sort_direction: str = "desc",
        max_records: int | None = None,
    ) -> list[AirtableRecord]:
        """Fetch every record of a table.

        Args:
            table: Table name or ID.
            sort_field: Optional field to sort by.
            sort_direction: ``asc`` or ``desc``.
            max_records: Optional cap on the number of records.

        Returns:
            Raw Airtable records (``id``, ``createdTime``, ``fields``).

        Raises:
            DatastoreError: If any page cannot be fetched.
        """
        params: dict[str, str | int] = {"pageSize": self.page_size}
        if sort_field:
            params["sort[0][field]"] = sort_field
            params["sort[0][direction]"] = sort_direction
        if max_records is not None:
            params["maxRecords"] = max_records

        records: list[AirtableRecord] = []
        offset: str | None = None
        pages = 0

        while True:
            page_params = dict(params)
            if offset:
                page_params["offset"] = offset
            payload = await self._get_page(table, page_params)
            records.extend(payload.get("records", []))
            pages += 1
            offset = payload.get("offset")
            if not offset:
                break

        logger.info(
            "datastore.table_fetched",
            table=table,
            record_count=len(records),
            pages=pages,
        )
        return records

    async def _get_page(self, table: str, params: dict[str, str | int]) -> dict[str, Any]:
        """Fetch one page with retry on rate limiting.

        Args:
            table: Table name or ID.
            params: Query parameters.

        Returns:
            Decoded JSON page.

        Raises:
            DatastoreError: On transport errors, non-2xx responses or bad JSON.
        """
        client = self._get_client()
        path = f"/{quote(table, safe='')}"

        for attempt in range(self.max_retries + 1):
            try:
                response = await client.get(path, params=params)
                response.raise_for_status()
                payload = response.json()
            except httpx.HTTPStatusError as e:
                status = e.response.status_code
                if status == 429 and attempt < self.max_retries:
                    wait_time = self.retry_delay * (2**attempt)
                    logger.warning(
                        "datastore.rate_limited",
                        table=table,
                        attempt=attempt + 1,
                        max_retries=self.max_retries,
                        wait_seconds=wait_time,
                    )
                    await asyncio.sleep(wait_time)
                    continue
                logger.error(
                    "datastore.http_error",
                    table=table,
                    status_code=status,
                    error=e.response.text[:200],
                )
                raise DatastoreError(
                    f"Airtable returned HTTP {status} for table '{table}'",
                    details={"table": table, "status_code": status},
                ) from e
            except httpx.RequestError as e:
                logger.error(
                    "datastore.request_error",
                    table=table,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                raise DatastoreError(
                    f"Could not reach Airtable: {e}",
                    details={"table": table},
                ) from e
            except ValueError as e:
                logger.error("datastore.invalid_payload", table=table, error=str(e))
                raise DatastoreError(
                    "Airtable returned an unreadable response",
                    details={"table": table},
                ) from e

            if not isinstance(payload, dict):
                raise DatastoreError(
                    "Airtable returned an unexpected payload",
                    details={"table": table},
                )
            return payload

        # Unreachable: the final attempt either returns or raises.
        raise DatastoreError("Airtable rate limit retries exhausted", details={"table": table})
