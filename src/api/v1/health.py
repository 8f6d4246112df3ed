"""Health check endpoints for NyayAdhaar API v1.

Provides liveness and readiness probes.  The readiness check verifies the
cache round-trip and that the entity store answers a profile count.
"""

from __future__ import annotations

import time

import structlog
from fastapi import APIRouter, Request
from pydantic import BaseModel

from src.services.errors import StoreUnavailable
from src.services.store.base import PROFILES_TABLE, Predicate

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class HealthResponse(BaseModel):
    """Basic health check response."""

    status: str
    version: str
    uptime_seconds: float


class ReadinessResponse(BaseModel):
    """Readiness check response with individual dependency statuses."""

    status: str
    checks: dict[str, str]


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.get("", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """Liveness probe.

    Returns 200 if the application process is running.  Does *not* check
    the entity store or cache.
    """
    start_time: float = getattr(request.app.state, "start_time", time.time())
    uptime = time.time() - start_time

    return HealthResponse(
        status="healthy",
        version=request.app.version,
        uptime_seconds=round(uptime, 2),
    )


@router.get("/ready", response_model=ReadinessResponse)
async def readiness_check(request: Request) -> ReadinessResponse:
    """Readiness probe: cache round-trip and entity store reachability."""
    checks: dict[str, str] = {}
    all_ok = True

    # -- Cache ---------------------------------------------------------------
    cache = getattr(request.app.state, "cache", None)
    if cache is not None:
        await cache.set("_health_check", "ok", ttl_seconds=10)
        if await cache.get("_health_check") == "ok":
            checks["cache"] = "ok"
        else:
            checks["cache"] = "degraded"
            all_ok = False
    else:
        checks["cache"] = "not_configured"

    # -- Entity store --------------------------------------------------------
    store = getattr(request.app.state, "store", None)
    if store is not None:
        try:
            profiles = await store.count(PROFILES_TABLE, Predicate.everything())
            checks["store"] = f"ok ({profiles} profiles)"
        except StoreUnavailable as exc:
            checks["store"] = f"error: {exc!s}"
            all_ok = False
    else:
        checks["store"] = "not_initialised"
        all_ok = False

    status = "ready" if all_ok else "degraded"
    logger.info("health.readiness_check", status=status, checks=checks)
    return ReadinessResponse(status=status, checks=checks)
