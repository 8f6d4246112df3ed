"""Victim registration and verification endpoints for NyayAdhaar API v1."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, Request
from fastapi.responses import ORJSONResponse

from src.api.responses import transition_response
from src.middleware.auth import get_current_profile
from src.models.entities import Profile
from src.models.enums import EntityType
from src.models.request import TransitionBody, VictimCreate
from src.models.response import EntityView, VictimRegistered

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

router = APIRouter(prefix="/victims", tags=["victims"])


@router.get("", response_model=list[EntityView])
async def list_victims(
    request: Request,
    profile: Profile = Depends(get_current_profile),
) -> list[EntityView]:
    """Victim records visible to the caller; Aadhaar numbers are masked."""
    return await request.app.state.tracker.list_victims(profile)


@router.post("", status_code=201, response_model=VictimRegistered)
async def register_victim(
    body: VictimCreate,
    request: Request,
    profile: Profile = Depends(get_current_profile),
) -> VictimRegistered:
    """Register the Victim record for the caller (or, for officers, for ``user_id``)."""
    victim = await request.app.state.tracker.register_victim(profile, body)
    return VictimRegistered.model_validate(victim.model_dump())


@router.post("/{victim_id}/transition")
async def transition_victim(
    victim_id: str,
    body: TransitionBody,
    request: Request,
    profile: Profile = Depends(get_current_profile),
) -> ORJSONResponse:
    """Verify or reject a pending victim record (officers only)."""
    result = await request.app.state.tracker.request_transition(
        profile, body.for_entity(EntityType.VICTIM, victim_id)
    )
    return transition_response(result)
