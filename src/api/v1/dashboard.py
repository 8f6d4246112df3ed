"""Dashboard statistics endpoint for NyayAdhaar API v1."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from src.middleware.auth import get_current_profile
from src.models.entities import Profile
from src.models.response import DashboardStats

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/stats", response_model=DashboardStats)
async def dashboard_stats(
    request: Request,
    profile: Profile = Depends(get_current_profile),
) -> DashboardStats:
    """Total cases, pending disbursements, active grievances and verified victims in scope."""
    return await request.app.state.dashboard.compute_stats(profile)
