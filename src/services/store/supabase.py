"""Supabase (PostgREST) adapter for the entity store.

Talks to ``{SUPABASE_URL}/rest/v1`` with the service key.  Filtering,
ordering and counting are pushed down to PostgREST so only visible rows
ever leave the database.

Reads retry transient transport failures with exponential backoff.
Writes are issued exactly once: a status write is conditional on the
expected current status, and whatever the database reports (success,
no matching row, constraint rejection) is surfaced as-is.
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from src.services.errors import Conflict, StoreUnavailable
from src.services.store.base import Predicate, WriteOutcome, WriteResult

logger = structlog.get_logger(__name__)


def _parse_content_range(header: str | None) -> int:
    """Extract the total from a ``Content-Range`` header like ``0-9/42``."""
    if not header or "/" not in header:
        return 0
    total = header.rsplit("/", 1)[1]
    return int(total) if total.isdigit() else 0


class SupabaseEntityStore:
    """:class:`EntityStore` backed by Supabase's PostgREST endpoint.

    Parameters
    ----------
    url:
        Project URL, e.g. ``https://xyz.supabase.co``.
    service_key:
        Service-role key sent as both ``apikey`` and bearer token.
    timeout:
        Per-request timeout in seconds.
    transport:
        Optional httpx transport (tests pass ``httpx.MockTransport``).
    """

    def __init__(
        self,
        url: str,
        service_key: str,
        *,
        timeout: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=f"{url.rstrip('/')}/rest/v1",
            timeout=timeout,
            headers={
                "apikey": service_key,
                "Authorization": f"Bearer {service_key}",
                "Accept": "application/json",
                "Content-Type": "application/json",
            },
            transport=transport,
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @retry(
        retry=retry_if_exception_type(httpx.TransportError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.5, min=0.5, max=4),
        reraise=True,
    )
    async def _read(
        self,
        method: str,
        table: str,
        params: list[tuple[str, str]],
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        response = await self._client.request(method, f"/{table}", params=params, headers=headers)
        response.raise_for_status()
        return response

    async def _write(
        self,
        method: str,
        table: str,
        params: list[tuple[str, str]],
        body: dict[str, Any],
    ) -> httpx.Response:
        try:
            return await self._client.request(
                method,
                f"/{table}",
                params=params,
                json=body,
                headers={"Prefer": "return=representation"},
            )
        except httpx.HTTPError as exc:
            logger.warning("store.supabase.write_failed", table=table, method=method, exc_info=True)
            raise StoreUnavailable(f"{method} {table} failed") from exc

    # ------------------------------------------------------------------
    # EntityStore interface
    # ------------------------------------------------------------------

    async def select(
        self,
        table: str,
        predicate: Predicate,
        *,
        order_by: str = "created_at",
        descending: bool = True,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        if predicate.empty:
            return []
        direction = "desc" if descending else "asc"
        params = [("select", "*"), ("order", f"{order_by}.{direction}"), *predicate.to_postgrest()]
        if limit is not None:
            params.append(("limit", str(limit)))
        try:
            response = await self._read("GET", table, params)
        except httpx.HTTPError as exc:
            logger.warning("store.supabase.select_failed", table=table, exc_info=True)
            raise StoreUnavailable(f"select from {table} failed") from exc
        return response.json()

    async def count(self, table: str, predicate: Predicate) -> int:
        if predicate.empty:
            return 0
        params = [("select", "id"), *predicate.to_postgrest()]
        try:
            response = await self._read("HEAD", table, params, headers={"Prefer": "count=exact"})
        except httpx.HTTPError as exc:
            logger.warning("store.supabase.count_failed", table=table, exc_info=True)
            raise StoreUnavailable(f"count on {table} failed") from exc
        return _parse_content_range(response.headers.get("Content-Range"))

    async def insert(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        response = await self._write("POST", table, [], row)
        if response.status_code == 409:
            raise Conflict(f"{table} row {row.get('id')} violates a unique constraint")
        if response.is_error:
            logger.warning("store.supabase.insert_rejected", table=table, status=response.status_code)
            raise StoreUnavailable(f"insert into {table} rejected ({response.status_code})")
        created = response.json()
        return created[0] if isinstance(created, list) else created

    async def update(self, table: str, row_id: str, changes: dict[str, Any]) -> dict[str, Any] | None:
        response = await self._write("PATCH", table, [("id", f"eq.{row_id}")], changes)
        if response.is_error:
            raise StoreUnavailable(f"update of {table} rejected ({response.status_code})")
        rows = response.json()
        return rows[0] if rows else None

    async def conditional_update(
        self,
        table: str,
        row_id: str,
        status_field: str,
        expected_status: str,
        changes: dict[str, Any],
    ) -> WriteResult:
        params = [("id", f"eq.{row_id}"), (status_field, f"eq.{expected_status}")]
        response = await self._write("PATCH", table, params, changes)

        if response.status_code == 409:
            # Constraint rejection from the database: another write won.
            return WriteResult(WriteOutcome.CONFLICT)
        if response.is_error:
            raise StoreUnavailable(f"status update on {table} rejected ({response.status_code})")

        rows = response.json()
        if rows:
            return WriteResult(WriteOutcome.SUCCESS, rows[0])

        # Nothing matched: either the row is gone or its status moved on.
        existing = await self.select(table, Predicate().where("id", row_id), limit=1)
        if not existing:
            return WriteResult(WriteOutcome.NOT_FOUND)
        return WriteResult(WriteOutcome.CONFLICT, existing[0])
