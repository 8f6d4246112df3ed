"""Process-local entity store used in development and tests.

Rows are kept as JSON-compatible dicts, exactly as the Supabase adapter
returns them, so services behave identically against either backend.
Writes are serialised with an :class:`asyncio.Lock`; reads return copies.
"""

from __future__ import annotations

import asyncio
import copy
from collections import defaultdict
from datetime import datetime
from typing import Any

import structlog

from src.services.errors import Conflict
from src.services.store.base import UNIQUE_COLUMNS, Predicate, WriteOutcome, WriteResult

logger = structlog.get_logger(__name__)


def _sort_key(value: Any) -> tuple[int, Any]:
    """Order ISO timestamps chronologically; other values by their text."""
    if value is None:
        return (0, "")
    if isinstance(value, str):
        try:
            return (1, datetime.fromisoformat(value))
        except ValueError:
            pass
    return (2, str(value))


class InMemoryEntityStore:
    """Dict-of-dicts implementation of :class:`EntityStore`."""

    def __init__(self) -> None:
        self._tables: defaultdict[str, dict[str, dict[str, Any]]] = defaultdict(dict)
        self._lock = asyncio.Lock()

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
        rows = [copy.deepcopy(r) for r in self._tables[table].values() if predicate.matches(r)]
        rows.sort(key=lambda r: _sort_key(r.get(order_by)), reverse=descending)
        if limit is not None:
            rows = rows[:limit]
        return rows

    async def count(self, table: str, predicate: Predicate) -> int:
        if predicate.empty:
            return 0
        return sum(1 for r in self._tables[table].values() if predicate.matches(r))

    async def insert(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        async with self._lock:
            if row["id"] in self._tables[table]:
                raise Conflict(f"duplicate id {row['id']} in {table}")
            for column in UNIQUE_COLUMNS.get(table, ()):
                value = row.get(column)
                if value is not None and any(r.get(column) == value for r in self._tables[table].values()):
                    raise Conflict(f"{table} row {row['id']} violates a unique constraint on {column}")
            self._tables[table][row["id"]] = copy.deepcopy(row)
        logger.debug("store.memory.insert", table=table, row_id=row["id"])
        return copy.deepcopy(row)

    async def update(self, table: str, row_id: str, changes: dict[str, Any]) -> dict[str, Any] | None:
        async with self._lock:
            current = self._tables[table].get(row_id)
            if current is None:
                return None
            current.update(copy.deepcopy(changes))
            return copy.deepcopy(current)

    async def conditional_update(
        self,
        table: str,
        row_id: str,
        status_field: str,
        expected_status: str,
        changes: dict[str, Any],
    ) -> WriteResult:
        async with self._lock:
            current = self._tables[table].get(row_id)
            if current is None:
                return WriteResult(WriteOutcome.NOT_FOUND)
            if current.get(status_field) != expected_status:
                return WriteResult(WriteOutcome.CONFLICT, copy.deepcopy(current))
            current.update(copy.deepcopy(changes))
            return WriteResult(WriteOutcome.SUCCESS, copy.deepcopy(current))

    async def close(self) -> None:
        return None

    def table_size(self, table: str) -> int:
        return len(self._tables[table])
