"""Shared fixtures: a seeded in-memory store and the services built on it."""

from __future__ import annotations

import pytest

from src.data import seed
from src.models.entities import Profile
from src.models.enums import Role
from src.services.cache import CacheManager
from src.services.case_tracker import CaseTrackingService
from src.services.dashboard import DashboardAggregator
from src.services.scope import AccessScopeResolver
from src.services.store.memory import InMemoryEntityStore


@pytest.fixture
async def store() -> InMemoryEntityStore:
    memory = InMemoryEntityStore()
    await seed.seed_demo_data(memory)
    return memory


@pytest.fixture
def scope(store: InMemoryEntityStore) -> AccessScopeResolver:
    return AccessScopeResolver(store, CacheManager(namespace="test:"), cache_ttl=60)


@pytest.fixture
def tracker(store: InMemoryEntityStore, scope: AccessScopeResolver) -> CaseTrackingService:
    return CaseTrackingService(store, scope)


@pytest.fixture
def dashboard(store: InMemoryEntityStore, scope: AccessScopeResolver) -> DashboardAggregator:
    return DashboardAggregator(store, scope)


@pytest.fixture
def admin() -> Profile:
    return Profile(id=seed.ADMIN_ID, full_name="Kavita Sharma", role=Role.ADMIN)


@pytest.fixture
def officer() -> Profile:
    return Profile(id=seed.DISTRICT_OFFICER_ID, full_name="Rajesh Verma", role=Role.DISTRICT_OFFICER)


@pytest.fixture
def user() -> Profile:
    """User whose Victim record is :data:`seed.VICTIM_ID`."""
    return Profile(id=seed.USER_WITH_VICTIM_ID, full_name="Asha Devi", role=Role.USER)


@pytest.fixture
def other_user() -> Profile:
    return Profile(id=seed.OTHER_USER_ID, full_name="Meena Kumari", role=Role.USER)


@pytest.fixture
def user_without_victim() -> Profile:
    return Profile(id=seed.USER_WITHOUT_VICTIM_ID, full_name="Ravi Das", role=Role.USER)
