"""Case endpoints for NyayAdhaar API v1.

Lists the caller's visible PCR/PoA cases, registers new cases (officers
only) and moves cases through their lifecycle.
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, Request
from fastapi.responses import ORJSONResponse

from src.api.responses import transition_response
from src.middleware.auth import get_current_profile
from src.models.entities import Case, Profile
from src.models.enums import EntityType
from src.models.request import CaseCreate, TransitionBody
from src.models.response import EntityView

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

router = APIRouter(prefix="/cases", tags=["cases"])


@router.get("", response_model=list[EntityView])
async def list_cases(
    request: Request,
    profile: Profile = Depends(get_current_profile),
) -> list[EntityView]:
    """Cases visible to the caller, newest first."""
    return await request.app.state.tracker.list_cases(profile)


@router.post("", response_model=Case, status_code=201)
async def register_case(
    body: CaseCreate,
    request: Request,
    profile: Profile = Depends(get_current_profile),
) -> Case:
    return await request.app.state.tracker.register_case(profile, body)


@router.post("/{case_id}/transition")
async def transition_case(
    case_id: str,
    body: TransitionBody,
    request: Request,
    profile: Profile = Depends(get_current_profile),
) -> ORJSONResponse:
    """Move a case to ``to_status``; ``override`` lets an admin reopen it."""
    result = await request.app.state.tracker.request_transition(
        profile, body.for_entity(EntityType.CASE, case_id)
    )
    return transition_response(result)
