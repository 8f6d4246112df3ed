"""Dashboard aggregator: the four headline counts for a caller.

Counts are always measured against the store through the caller's scope
predicate, never inferred.  A user with no linked Victim sees all zeros.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import structlog

from src.models.enums import (
    DisbursementStatus,
    EntityType,
    GrievanceStatus,
    Role,
    VerificationStatus,
)
from src.models.response import DashboardStats
from src.services.lifecycle import status_field
from src.services.store.base import table_for

if TYPE_CHECKING:
    from src.models.entities import Profile
    from src.services.scope import AccessScopeResolver
    from src.services.store.base import EntityStore, Predicate

logger = structlog.get_logger(__name__)

PENDING_DISBURSEMENT_STATUSES: tuple[str, ...] = (
    DisbursementStatus.SANCTIONED,
    DisbursementStatus.PROCESSING,
)
ACTIVE_GRIEVANCE_STATUSES: tuple[str, ...] = (
    GrievanceStatus.OPEN,
    GrievanceStatus.IN_PROGRESS,
)


class DashboardAggregator:
    def __init__(self, store: EntityStore, scope: AccessScopeResolver) -> None:
        self._store = store
        self._scope = scope

    async def _count(self, entity_type: EntityType, predicate: Predicate) -> int:
        return max(0, await self._store.count(table_for(entity_type), predicate))

    async def compute_stats(self, profile: Profile) -> DashboardStats:
        """Total visible cases, pending disbursements, active grievances, verified victims."""
        if profile.role is Role.USER:
            ok, victim_id = await self._scope.try_resolve_victim_id(profile)
            if not ok or victim_id is None:
                logger.info("dashboard.no_linked_victim", profile_id=profile.id)
                return DashboardStats()

        cases, disbursements, grievances, victims = await asyncio.gather(
            self._scope.scope_filter(profile, EntityType.CASE),
            self._scope.scope_filter(profile, EntityType.DISBURSEMENT),
            self._scope.scope_filter(profile, EntityType.GRIEVANCE),
            self._scope.scope_filter(profile, EntityType.VICTIM),
        )

        total_cases, pending, active, verified = await asyncio.gather(
            self._count(EntityType.CASE, cases),
            self._count(
                EntityType.DISBURSEMENT,
                disbursements.where_in(status_field(EntityType.DISBURSEMENT), PENDING_DISBURSEMENT_STATUSES),
            ),
            self._count(
                EntityType.GRIEVANCE,
                grievances.where_in(status_field(EntityType.GRIEVANCE), ACTIVE_GRIEVANCE_STATUSES),
            ),
            self._count(
                EntityType.VICTIM,
                victims.where(status_field(EntityType.VICTIM), VerificationStatus.VERIFIED),
            ),
        )

        stats = DashboardStats(
            total_cases=total_cases,
            pending_disbursements=pending,
            active_grievances=active,
            verified_victims=verified,
        )
        logger.info("dashboard.stats_computed", profile_id=profile.id, role=str(profile.role), **stats.model_dump())
        return stats
