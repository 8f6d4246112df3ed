"""Entity store interface shared by the Supabase and in-memory adapters.

The remote store owns physical storage.  The core only ever talks to it
through :class:`EntityStore`: a filtered, ordered read; an exact count; an
insert; and a status write that is conditional on the status the caller
last observed.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import Any, Final, Protocol, runtime_checkable

from src.models.enums import EntityType

# ---------------------------------------------------------------------------
# Table names
# ---------------------------------------------------------------------------

PROFILES_TABLE: Final[str] = "profiles"
CHAT_MESSAGES_TABLE: Final[str] = "chat_messages"

ENTITY_TABLES: Final[dict[EntityType, str]] = {
    EntityType.CASE: "cases",
    EntityType.DISBURSEMENT: "disbursements",
    EntityType.GRIEVANCE: "grievances",
    EntityType.VICTIM: "victims",
}


def table_for(entity_type: EntityType) -> str:
    return ENTITY_TABLES[EntityType(entity_type)]


# Columns with a unique constraint besides ``id``.  The Supabase schema
# declares the same constraints; adapters report violations as ``Conflict``.
UNIQUE_COLUMNS: Final[dict[str, tuple[str, ...]]] = {
    "victims": ("user_id",),
}


# ---------------------------------------------------------------------------
# Predicate
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Predicate:
    """Row filter: a conjunction of equality and membership tests.

    ``Predicate.nothing()`` matches no row at all and lets adapters skip the
    round-trip entirely.
    """

    equals: tuple[tuple[str, Any], ...] = ()
    one_of: tuple[tuple[str, tuple[Any, ...]], ...] = ()
    empty: bool = False

    @classmethod
    def everything(cls) -> Predicate:
        return cls()

    @classmethod
    def nothing(cls) -> Predicate:
        return cls(empty=True)

    @property
    def is_unrestricted(self) -> bool:
        return not (self.empty or self.equals or self.one_of)

    def where(self, column: str, value: Any) -> Predicate:
        return replace(self, equals=(*self.equals, (column, value)))

    def where_in(self, column: str, values: Any) -> Predicate:
        return replace(self, one_of=(*self.one_of, (column, tuple(values))))

    def matches(self, row: dict[str, Any]) -> bool:
        if self.empty:
            return False
        for column, value in self.equals:
            if row.get(column) != value:
                return False
        for column, values in self.one_of:
            if row.get(column) not in values:
                return False
        return True

    def to_postgrest(self) -> list[tuple[str, str]]:
        """Render as PostgREST horizontal-filter query parameters."""
        params: list[tuple[str, str]] = []
        for column, value in self.equals:
            params.append((column, f"eq.{value}"))
        for column, values in self.one_of:
            joined = ",".join(f'"{v}"' for v in values)
            params.append((column, f"in.({joined})"))
        return params


# ---------------------------------------------------------------------------
# Write results
# ---------------------------------------------------------------------------


class WriteOutcome(StrEnum):
    __slots__ = ()

    SUCCESS = "success"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"


@dataclass(slots=True)
class WriteResult:
    outcome: WriteOutcome
    row: dict[str, Any] | None = field(default=None)


# ---------------------------------------------------------------------------
# Store protocol
# ---------------------------------------------------------------------------


@runtime_checkable
class EntityStore(Protocol):
    """Async interface to the remote queryable data service."""

    async def select(
        self,
        table: str,
        predicate: Predicate,
        *,
        order_by: str = "created_at",
        descending: bool = True,
        limit: int | None = None,
    ) -> list[dict[str, Any]]: ...

    async def count(self, table: str, predicate: Predicate) -> int: ...

    async def insert(self, table: str, row: dict[str, Any]) -> dict[str, Any]: ...

    async def update(self, table: str, row_id: str, changes: dict[str, Any]) -> dict[str, Any] | None: ...

    async def conditional_update(
        self,
        table: str,
        row_id: str,
        status_field: str,
        expected_status: str,
        changes: dict[str, Any],
    ) -> WriteResult: ...

    async def close(self) -> None: ...
