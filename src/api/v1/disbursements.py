"""Disbursement (DBT) endpoints for NyayAdhaar API v1.

Relief sanctions are bookkeeping only: marking a disbursement
``disbursed`` records a transfer made through PFMS, it does not move
money.
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, Request
from fastapi.responses import ORJSONResponse

from src.api.responses import transition_response
from src.middleware.auth import get_current_profile
from src.models.entities import Disbursement, Profile
from src.models.enums import EntityType
from src.models.request import DisbursementCreate, TransitionBody
from src.models.response import EntityView

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

router = APIRouter(prefix="/disbursements", tags=["disbursements"])


@router.get("", response_model=list[EntityView])
async def list_disbursements(
    request: Request,
    profile: Profile = Depends(get_current_profile),
) -> list[EntityView]:
    """Disbursements visible to the caller, newest first.

    Users see bank account numbers reduced to their last four digits.
    """
    return await request.app.state.tracker.list_disbursements(profile)


@router.post("", response_model=Disbursement, status_code=201)
async def sanction_disbursement(
    body: DisbursementCreate,
    request: Request,
    profile: Profile = Depends(get_current_profile),
) -> Disbursement:
    return await request.app.state.tracker.sanction_disbursement(profile, body)


@router.post("/{disbursement_id}/transition")
async def transition_disbursement(
    disbursement_id: str,
    body: TransitionBody,
    request: Request,
    profile: Profile = Depends(get_current_profile),
) -> ORJSONResponse:
    result = await request.app.state.tracker.request_transition(
        profile, body.for_entity(EntityType.DISBURSEMENT, disbursement_id)
    )
    return transition_response(result)
