"""Profile lookups for request authentication and self-service updates."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

import structlog
from pydantic import ValidationError

from src.models.entities import Profile
from src.services.errors import NotFound
from src.services.store.base import PROFILES_TABLE, Predicate

if TYPE_CHECKING:
    from src.models.request import ProfileUpdate
    from src.services.store.base import EntityStore

logger = structlog.get_logger(__name__)


class ProfileService:
    def __init__(self, store: EntityStore) -> None:
        self._store = store

    async def get(self, profile_id: str) -> Profile:
        """Load the profile with *profile_id*; :class:`NotFound` if absent."""
        rows = await self._store.select(PROFILES_TABLE, Predicate().where("id", profile_id), limit=1)
        if not rows:
            raise NotFound("profile", profile_id)
        try:
            return Profile.model_validate(rows[0])
        except ValidationError:
            logger.error("profiles.row_invalid", profile_id=profile_id, exc_info=True)
            raise

    async def update(self, profile: Profile, changes: ProfileUpdate) -> Profile:
        """Apply self-service *changes*.  The role column is never written."""
        fields = changes.model_dump(mode="json", exclude_none=True)
        if not fields:
            return profile
        fields["updated_at"] = datetime.now(UTC).isoformat()
        row = await self._store.update(PROFILES_TABLE, profile.id, fields)
        if row is None:
            raise NotFound("profile", profile.id)
        logger.info("profiles.updated", profile_id=profile.id, fields=sorted(fields))
        return Profile.model_validate(row)
