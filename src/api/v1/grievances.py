"""Grievance endpoints for NyayAdhaar API v1.

Any signed-in profile may file a grievance about its own case or
disbursement.  Officers work grievances through ``in_progress`` to
``resolved``; the filer may withdraw an open grievance.
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, Request
from fastapi.responses import ORJSONResponse

from src.api.responses import transition_response
from src.middleware.auth import get_current_profile
from src.models.entities import Grievance, Profile
from src.models.enums import EntityType
from src.models.request import GrievanceCreate, TransitionBody
from src.models.response import EntityView

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

router = APIRouter(prefix="/grievances", tags=["grievances"])


@router.get("", response_model=list[EntityView])
async def list_grievances(
    request: Request,
    profile: Profile = Depends(get_current_profile),
) -> list[EntityView]:
    return await request.app.state.tracker.list_grievances(profile)


@router.post("", response_model=Grievance, status_code=201)
async def file_grievance(
    body: GrievanceCreate,
    request: Request,
    profile: Profile = Depends(get_current_profile),
) -> Grievance:
    """File a grievance owned by the caller."""
    return await request.app.state.tracker.file_grievance(profile, body)


@router.post("/{grievance_id}/transition")
async def transition_grievance(
    grievance_id: str,
    body: TransitionBody,
    request: Request,
    profile: Profile = Depends(get_current_profile),
) -> ORJSONResponse:
    result = await request.app.state.tracker.request_transition(
        profile, body.for_entity(EntityType.GRIEVANCE, grievance_id)
    )
    return transition_response(result)
