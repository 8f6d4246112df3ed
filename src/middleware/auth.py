"""Caller identity for protected endpoints.

Authentication itself happens upstream (Supabase Auth); requests reach
this service with the authenticated profile id in the ``X-Profile-Id``
header.  The dependency below loads that profile so handlers receive a
:class:`~src.models.entities.Profile` with its role already resolved.
"""

from __future__ import annotations

import structlog
from fastapi import HTTPException, Request, Security
from fastapi.security import APIKeyHeader

from src.models.entities import Profile
from src.services.errors import NotFound, StoreUnavailable

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

_profile_header = APIKeyHeader(name="X-Profile-Id", auto_error=False)


async def get_current_profile(
    request: Request,
    profile_id: str | None = Security(_profile_header),
) -> Profile:
    """FastAPI dependency returning the calling profile; 401 when unknown.

    Usage::

        @router.get("/cases")
        async def list_cases(profile: Profile = Depends(get_current_profile)): ...
    """
    if not profile_id:
        logger.warning(
            "auth.missing_profile_id",
            path=request.url.path,
            client_ip=request.client.host if request.client else "unknown",
        )
        raise HTTPException(
            status_code=401,
            detail="Missing X-Profile-Id header.",
            headers={"WWW-Authenticate": "ApiKey"},
        )

    profiles = request.app.state.profiles
    try:
        profile = await profiles.get(profile_id)
    except NotFound:
        logger.warning("auth.unknown_profile", path=request.url.path)
        raise HTTPException(status_code=401, detail="Unknown profile.") from None
    except StoreUnavailable:
        logger.error("auth.profile_lookup_failed", exc_info=True)
        raise HTTPException(status_code=503, detail="Profile store unavailable.") from None

    structlog.contextvars.bind_contextvars(profile_id=profile.id, role=str(profile.role))
    return profile
