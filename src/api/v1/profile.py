"""Profile endpoints for NyayAdhaar API v1.

A profile may read and edit its own details.  The role is not editable
here: ``ProfileUpdate`` forbids unknown fields, so a body carrying
``role`` is rejected with 422.
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, Request

from src.middleware.auth import get_current_profile
from src.models.entities import Profile
from src.models.request import ProfileUpdate

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("/me", response_model=Profile)
async def get_my_profile(profile: Profile = Depends(get_current_profile)) -> Profile:
    return profile


@router.patch("/me", response_model=Profile)
async def update_my_profile(
    body: ProfileUpdate,
    request: Request,
    profile: Profile = Depends(get_current_profile),
) -> Profile:
    return await request.app.state.profiles.update(profile, body)
