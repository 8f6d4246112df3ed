"""NyayAdhaar FastAPI application entry point.

Creates the FastAPI app, configures middleware, includes routers, maps
domain errors onto HTTP responses, and manages the lifecycle of the
backend services (entity store, cache, scope resolver, tracker,
dashboard and chat assistant).
"""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse

from config.settings import settings
from src.api.router import api_router
from src.middleware.privacy import PrivacyMiddleware
from src.services.errors import (
    Conflict,
    InvalidRequest,
    NotFound,
    NyayAdhaarError,
    PermissionDenied,
    ScopeLookupFailure,
    StoreUnavailable,
)

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


# ---------------------------------------------------------------------------
# Structured logging configuration
# ---------------------------------------------------------------------------


def _configure_logging() -> None:
    """Set up structlog with JSON or console rendering based on settings."""
    processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if settings.log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelNamesMapping()[settings.log_level.upper()],
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


# ---------------------------------------------------------------------------
# Application lifespan
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage startup and shutdown of all NyayAdhaar services.

    On startup:
      1. Open the entity store (Supabase when configured, else in-memory)
      2. Seed demo data into the in-memory store
      3. Initialise cache manager and access scope resolver
      4. Create tracker, dashboard, profile and chat services
      5. Store everything on ``app.state``

    On shutdown:
      - Wait for pending chat log appends.
      - Close the store and cache.
    """
    _configure_logging()
    logger.info("app.startup", env=settings.env, supabase=settings.uses_supabase)

    app.state.start_time = time.time()

    # -- 1. Entity store ----------------------------------------------------
    from src.services.store import InMemoryEntityStore, SupabaseEntityStore

    if settings.uses_supabase:
        store = SupabaseEntityStore(
            settings.supabase_url,
            settings.supabase_service_key,
            timeout=settings.store_timeout_seconds,
        )
        logger.info("app.store_initialised", backend="supabase")
    else:
        if settings.is_production:
            logger.warning("app.store_in_memory_in_production")
        store = InMemoryEntityStore()
        logger.info("app.store_initialised", backend="memory")
    app.state.store = store

    # -- 2. Demo data -------------------------------------------------------
    if isinstance(store, InMemoryEntityStore) and settings.seed_demo_data:
        from src.data.seed import seed_demo_data

        await seed_demo_data(store)

    # -- 3. Cache and access scope -----------------------------------------
    from src.services.cache import CacheManager
    from src.services.scope import AccessScopeResolver

    cache = CacheManager(
        redis_url=settings.redis_url if settings.redis_url else None,
        namespace="nyayadhaar:",
    )
    app.state.cache = cache
    scope = AccessScopeResolver(store, cache, cache_ttl=settings.scope_cache_ttl)
    app.state.scope = scope
    logger.info("app.scope_initialised", cache_ttl=settings.scope_cache_ttl)

    # -- 4. Services --------------------------------------------------------
    from src.services.case_tracker import CaseTrackingService
    from src.services.dashboard import DashboardAggregator
    from src.services.intent_classifier import IntentClassifier
    from src.services.labels import StaticLabelProvider
    from src.services.profiles import ProfileService

    app.state.tracker = CaseTrackingService(store, scope, StaticLabelProvider())
    app.state.dashboard = DashboardAggregator(store, scope)
    app.state.profiles = ProfileService(store)
    classifier = IntentClassifier(store, log_enabled=settings.chat_log_enabled)
    app.state.classifier = classifier

    logger.info("app.startup_complete")

    yield

    # -- Shutdown -----------------------------------------------------------
    logger.info("app.shutdown_start")
    await classifier.drain()
    await store.close()
    await cache.close()
    logger.info("app.shutdown_complete")


# ---------------------------------------------------------------------------
# FastAPI application
# ---------------------------------------------------------------------------

app = FastAPI(
    title="NyayAdhaar API",
    description=(
        "NyayAdhaar (न्याय आधार) -- case, relief disbursement and grievance "
        "tracking for victims under the PCR Act, 1955 and the PoA Act, 1989."
    ),
    version="0.1.0",
    lifespan=lifespan,
    default_response_class=ORJSONResponse,
    docs_url="/docs" if not settings.is_production else None,
    redoc_url="/redoc" if not settings.is_production else None,
)

# -- CORS middleware --------------------------------------------------------
if settings.is_production:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH"],
        allow_headers=["Content-Type", "Authorization", "X-Profile-Id"],
    )
else:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000", "http://localhost:5173", "http://127.0.0.1:8000"],
        allow_credentials=False,
        allow_methods=["GET", "POST", "PATCH", "OPTIONS", "HEAD"],
        allow_headers=["Content-Type", "Accept", "Authorization", "X-Profile-Id"],
    )

# -- Custom middleware ------------------------------------------------------
app.add_middleware(PrivacyMiddleware)


# -- Domain error mapping ---------------------------------------------------

_ERROR_STATUS: dict[type[NyayAdhaarError], int] = {
    PermissionDenied: 403,
    NotFound: 404,
    Conflict: 409,
    InvalidRequest: 422,
    ScopeLookupFailure: 503,
    StoreUnavailable: 503,
}


@app.exception_handler(NyayAdhaarError)
async def domain_error_handler(request: Request, exc: NyayAdhaarError) -> ORJSONResponse:
    status_code = next(
        (code for error_type, code in _ERROR_STATUS.items() if isinstance(exc, error_type)),
        500,
    )
    log = logger.error if status_code >= 500 else logger.info
    log("api.domain_error", path=request.url.path, error=type(exc).__name__, status_code=status_code)
    return ORJSONResponse(status_code=status_code, content={"detail": str(exc)})


# -- Include routers -------------------------------------------------------
app.include_router(api_router)


@app.get("/api", response_class=ORJSONResponse)
async def api_info() -> dict:
    """API information endpoint."""
    return {
        "name": "NyayAdhaar API",
        "description": "Case, DBT and grievance tracking under the PCR and PoA Acts",
        "version": app.version,
        "docs": "/docs",
        "health": "/api/v1/health",
        "endpoints": {
            "cases": "/api/v1/cases",
            "disbursements": "/api/v1/disbursements",
            "grievances": "/api/v1/grievances",
            "victims": "/api/v1/victims",
            "dashboard": "/api/v1/dashboard/stats",
            "chat": "/api/v1/chat",
            "profile": "/api/v1/profile/me",
        },
    }


def run() -> None:
    """Serve the app with uvicorn on ``API_HOST``:``API_PORT``."""
    import uvicorn

    uvicorn.run(
        "src.main:app",
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
