"""Tests for the dashboard aggregator."""

from __future__ import annotations

from unittest.mock import AsyncMock

from src.models.entities import Profile
from src.models.response import DashboardStats
from src.services.cache import CacheManager
from src.services.dashboard import DashboardAggregator
from src.services.errors import StoreUnavailable
from src.services.scope import AccessScopeResolver
from src.services.store.memory import InMemoryEntityStore


class TestDashboardAggregator:
    async def test_user_without_victim_sees_zeros(
        self, dashboard: DashboardAggregator, user_without_victim: Profile
    ) -> None:
        stats = await dashboard.compute_stats(user_without_victim)
        assert stats == DashboardStats(
            total_cases=0, pending_disbursements=0, active_grievances=0, verified_victims=0
        )

    async def test_user_with_victim(self, dashboard: DashboardAggregator, user: Profile) -> None:
        stats = await dashboard.compute_stats(user)
        assert stats.total_cases == 2, "two seeded cases belong to the user's victim"
        assert stats.pending_disbursements == 1, "one processing disbursement"
        assert stats.active_grievances == 1, "one open grievance filed by the user"
        assert stats.verified_victims == 1

    async def test_other_user(self, dashboard: DashboardAggregator, other_user: Profile) -> None:
        stats = await dashboard.compute_stats(other_user)
        assert stats.total_cases == 1
        assert stats.pending_disbursements == 1, "sanctioned disbursement counts as pending"
        assert stats.active_grievances == 1, "in-progress grievance counts as active"
        assert stats.verified_victims == 0, "victim is still pending verification"

    async def test_admin_sees_everything(self, dashboard: DashboardAggregator, admin: Profile) -> None:
        stats = await dashboard.compute_stats(admin)
        assert stats.total_cases == 3
        assert stats.pending_disbursements == 2
        assert stats.active_grievances == 2
        assert stats.verified_victims == 1

    async def test_failed_victim_lookup_gives_zeros(self, user: Profile) -> None:
        store = InMemoryEntityStore()
        store.select = AsyncMock(side_effect=StoreUnavailable("down"))  # type: ignore[method-assign]
        aggregator = DashboardAggregator(store, AccessScopeResolver(store, CacheManager()))
        assert await aggregator.compute_stats(user) == DashboardStats()
