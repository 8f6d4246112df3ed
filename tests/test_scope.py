"""Tests for the access scope resolver."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from src.data import seed
from src.models.entities import Profile, Victim
from src.models.enums import CasteCategory, EntityType, Role
from src.services.cache import CacheManager
from src.services.errors import ScopeLookupFailure, StoreUnavailable
from src.services.scope import AccessScopeResolver, build_scope_filter, can_create
from src.services.store.base import Predicate
from src.services.store.memory import InMemoryEntityStore


class TestBuildScopeFilter:
    @pytest.mark.parametrize("role", [Role.ADMIN, Role.DISTRICT_OFFICER, Role.SOCIAL_WELFARE])
    def test_officers_unrestricted(self, role: Role) -> None:
        profile = Profile(id="p1", role=role)
        for entity_type in EntityType:
            assert build_scope_filter(profile, entity_type, None).is_unrestricted

    def test_user_cases_by_victim(self) -> None:
        profile = Profile(id="p1")
        predicate = build_scope_filter(profile, EntityType.CASE, "v1")
        assert predicate.matches({"victim_id": "v1"})
        assert not predicate.matches({"victim_id": "v2"})

    def test_user_without_victim_sees_no_cases(self) -> None:
        predicate = build_scope_filter(Profile(id="p1"), EntityType.DISBURSEMENT, None)
        assert predicate == Predicate.nothing()
        assert not predicate.matches({"victim_id": "v1"})

    def test_user_grievances_by_filer(self) -> None:
        predicate = build_scope_filter(Profile(id="p1"), EntityType.GRIEVANCE, None)
        assert predicate.matches({"user_id": "p1"})
        assert not predicate.matches({"user_id": "p2"})

    def test_can_create(self) -> None:
        user = Profile(id="p1")
        officer = Profile(id="p2", role=Role.SOCIAL_WELFARE)
        assert can_create(user, EntityType.GRIEVANCE)
        assert can_create(user, EntityType.VICTIM)
        assert not can_create(user, EntityType.CASE)
        assert not can_create(user, EntityType.DISBURSEMENT)
        assert can_create(officer, EntityType.CASE)


class TestAccessScopeResolver:
    async def test_resolves_victim_for_user(self, scope: AccessScopeResolver, user: Profile) -> None:
        assert await scope.resolve_victim_id(user) == seed.VICTIM_ID

    async def test_no_victim(self, scope: AccessScopeResolver, user_without_victim: Profile) -> None:
        assert await scope.resolve_victim_id(user_without_victim) is None

    async def test_officer_has_no_victim(self, scope: AccessScopeResolver, admin: Profile) -> None:
        assert await scope.resolve_victim_id(admin) is None

    async def test_lookup_is_cached(self, store: InMemoryEntityStore, user: Profile) -> None:
        resolver = AccessScopeResolver(store, CacheManager())
        await resolver.resolve_victim_id(user)
        store.select = AsyncMock(side_effect=AssertionError("should be served from cache"))  # type: ignore[method-assign]
        assert await resolver.resolve_victim_id(user) == seed.VICTIM_ID

    async def test_invalidate_forces_new_lookup(
        self, store: InMemoryEntityStore, scope: AccessScopeResolver, user_without_victim: Profile
    ) -> None:
        assert await scope.resolve_victim_id(user_without_victim) is None
        victim = Victim(
            user_id=user_without_victim.id,
            victim_name="Ravi Das",
            caste_category=CasteCategory.SC,
        )
        await store.insert("victims", victim.model_dump(mode="json"))
        assert await scope.resolve_victim_id(user_without_victim) is None, "stale negative entry is cached"

        await scope.invalidate(user_without_victim.id)
        assert await scope.resolve_victim_id(user_without_victim) == victim.id

    async def test_store_failure_raises_lookup_failure(self, user: Profile) -> None:
        store = InMemoryEntityStore()
        store.select = AsyncMock(side_effect=StoreUnavailable("down"))  # type: ignore[method-assign]
        resolver = AccessScopeResolver(store, CacheManager())
        with pytest.raises(ScopeLookupFailure):
            await resolver.resolve_victim_id(user)

    async def test_duplicate_victims_raise_lookup_failure(self, user: Profile) -> None:
        store = InMemoryEntityStore()
        for name in ("First", "Second"):
            victim = Victim(user_id=user.id, victim_name=name, caste_category=CasteCategory.ST)
            await store.insert("victims", victim.model_dump(mode="json"))
        resolver = AccessScopeResolver(store, CacheManager())
        with pytest.raises(ScopeLookupFailure):
            await resolver.resolve_victim_id(user)

    async def test_failed_lookup_scopes_to_nothing(self, user: Profile) -> None:
        store = InMemoryEntityStore()
        store.select = AsyncMock(side_effect=StoreUnavailable("down"))  # type: ignore[method-assign]
        resolver = AccessScopeResolver(store, CacheManager())
        assert await resolver.scope_filter(user, EntityType.CASE) == Predicate.nothing()

    async def test_scope_filter_user_cases(self, scope: AccessScopeResolver, user: Profile) -> None:
        predicate = await scope.scope_filter(user, EntityType.CASE)
        assert predicate.matches({"victim_id": seed.VICTIM_ID})
        assert not predicate.matches({"victim_id": seed.OTHER_VICTIM_ID})
