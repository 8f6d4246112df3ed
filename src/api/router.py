"""Main API router combining all v1 route modules.

Aggregates all routers under the ``/api/v1`` prefix so the
FastAPI application only needs to include a single router.

Includes:
    * Tracking: cases, disbursements, grievances, victims
    * Dashboard statistics
    * AI assistant chat
    * Profile and health
"""

from __future__ import annotations

from fastapi import APIRouter

from src.api.v1 import (
    cases,
    chat,
    dashboard,
    disbursements,
    grievances,
    health,
    profile,
    victims,
)

api_router = APIRouter(prefix="/api/v1")

# -- Tracking sub-routers --------------------------------------------------
api_router.include_router(cases.router)
api_router.include_router(disbursements.router)
api_router.include_router(grievances.router)
api_router.include_router(victims.router)
api_router.include_router(dashboard.router)

# -- Assistant and account sub-routers -------------------------------------
api_router.include_router(chat.router)
api_router.include_router(profile.router)
api_router.include_router(health.router)
