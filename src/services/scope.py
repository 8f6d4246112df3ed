"""Access scope resolver: the single authorisation surface for reads.

Every query path asks :meth:`AccessScopeResolver.scope_filter` for the
row predicate of the caller before touching the store; no listing or
count builds its own role filter.

Rules
-----
* Officer roles (admin, district_officer, social_welfare) see every row.
* A user sees cases and disbursements linked to *their* Victim record.
  With no Victim (or a failed lookup) they see none of them.
* A user sees grievances they filed and the Victim record they own.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from src.models.enums import EntityType, Role
from src.services.errors import ScopeLookupFailure, StoreUnavailable
from src.services.store.base import Predicate, table_for

if TYPE_CHECKING:
    from src.models.entities import Profile
    from src.services.cache import CacheManager
    from src.services.store.base import EntityStore

logger = structlog.get_logger(__name__)


def build_scope_filter(profile: Profile, entity_type: EntityType, victim_id: str | None) -> Predicate:
    """Pure predicate builder; *victim_id* is the caller's resolved Victim."""
    entity_type = EntityType(entity_type)
    if profile.role.is_officer:
        return Predicate.everything()

    if entity_type in (EntityType.CASE, EntityType.DISBURSEMENT):
        if victim_id is None:
            return Predicate.nothing()
        return Predicate().where("victim_id", victim_id)
    return Predicate().where("user_id", profile.id)


def can_create(profile: Profile, entity_type: EntityType) -> bool:
    """Whether *profile* may create a new record of *entity_type*."""
    entity_type = EntityType(entity_type)
    if entity_type in (EntityType.GRIEVANCE, EntityType.VICTIM):
        return True
    return profile.role.is_officer


class AccessScopeResolver:
    """Computes row predicates per (profile, entity type).

    Victim lookups for user-role callers are cached per profile id for
    ``cache_ttl`` seconds.  Call :meth:`invalidate` whenever the Victim
    linked to a profile changes.
    """

    def __init__(self, store: EntityStore, cache: CacheManager, *, cache_ttl: int = 300) -> None:
        self._store = store
        self._cache = cache
        self._cache_ttl = cache_ttl

    @staticmethod
    def _cache_key(profile_id: str) -> str:
        return f"victim:{profile_id}"

    async def resolve_victim_id(self, profile: Profile) -> str | None:
        """Id of the Victim owned by *profile*, or ``None``.

        Raises :class:`ScopeLookupFailure` when the lookup errors or finds
        more than one Victim for the profile.
        """
        if profile.role is not Role.USER:
            return None

        key = self._cache_key(profile.id)
        cached = await self._cache.get(key)
        if cached is not None:
            return cached["victim_id"]

        try:
            rows = await self._store.select(
                table_for(EntityType.VICTIM),
                Predicate().where("user_id", profile.id),
                limit=2,
            )
        except StoreUnavailable as exc:
            raise ScopeLookupFailure(f"victim lookup failed for profile {profile.id}") from exc

        if len(rows) > 1:
            raise ScopeLookupFailure(f"profile {profile.id} owns {len(rows)} victim records")

        victim_id = rows[0]["id"] if rows else None
        await self._cache.set(key, {"victim_id": victim_id}, ttl_seconds=self._cache_ttl)
        return victim_id

    async def try_resolve_victim_id(self, profile: Profile) -> tuple[bool, str | None]:
        """``(ok, victim_id)``; ``ok`` is false when the lookup failed."""
        try:
            return True, await self.resolve_victim_id(profile)
        except ScopeLookupFailure as exc:
            logger.warning("scope.victim_lookup_failed", profile_id=profile.id, error=str(exc))
            return False, None

    async def scope_filter(self, profile: Profile, entity_type: EntityType) -> Predicate:
        """Row predicate restricting *entity_type* to what *profile* may see."""
        entity_type = EntityType(entity_type)
        if profile.role.is_officer or entity_type not in (EntityType.CASE, EntityType.DISBURSEMENT):
            return build_scope_filter(profile, entity_type, None)

        ok, victim_id = await self.try_resolve_victim_id(profile)
        if not ok:
            return Predicate.nothing()
        return build_scope_filter(profile, entity_type, victim_id)

    async def invalidate(self, profile_id: str) -> None:
        await self._cache.delete(self._cache_key(profile_id))
