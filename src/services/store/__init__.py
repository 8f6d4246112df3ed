"""Entity store adapters.

The Supabase adapter is used whenever ``SUPABASE_URL`` and
``SUPABASE_SERVICE_KEY`` are configured; otherwise the process-local
store is used (development and tests).
"""

from __future__ import annotations

from src.services.store.base import (
    CHAT_MESSAGES_TABLE,
    ENTITY_TABLES,
    PROFILES_TABLE,
    EntityStore,
    Predicate,
    WriteOutcome,
    WriteResult,
    table_for,
)
from src.services.store.memory import InMemoryEntityStore
from src.services.store.supabase import SupabaseEntityStore

__all__ = [
    "CHAT_MESSAGES_TABLE",
    "ENTITY_TABLES",
    "EntityStore",
    "InMemoryEntityStore",
    "PROFILES_TABLE",
    "Predicate",
    "SupabaseEntityStore",
    "WriteOutcome",
    "WriteResult",
    "table_for",
]
