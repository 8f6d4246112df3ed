"""NyayAdhaar service layer -- lifecycle rules, access scope, tracking and chat.

Storage backends live in :mod:`src.services.store`; everything here talks
to them through the :class:`~src.services.store.EntityStore` protocol.
"""

from __future__ import annotations

from src.services.cache import CacheManager, LocalTTLCache
from src.services.case_tracker import CaseTrackingService
from src.services.dashboard import DashboardAggregator
from src.services.errors import (
    Conflict,
    IllegalTransition,
    InvalidRequest,
    NotFound,
    NyayAdhaarError,
    PermissionDenied,
    ScopeLookupFailure,
    StoreUnavailable,
    UnknownStatus,
)
from src.services.intent_classifier import IntentClassifier, classify
from src.services.labels import LabelProvider, StaticLabelProvider
from src.services.profiles import ProfileService
from src.services.scope import AccessScopeResolver, build_scope_filter

__all__ = [
    "AccessScopeResolver",
    "CacheManager",
    "CaseTrackingService",
    "Conflict",
    "DashboardAggregator",
    "IllegalTransition",
    "InvalidRequest",
    "IntentClassifier",
    "LabelProvider",
    "LocalTTLCache",
    "NotFound",
    "NyayAdhaarError",
    "PermissionDenied",
    "ProfileService",
    "ScopeLookupFailure",
    "StaticLabelProvider",
    "StoreUnavailable",
    "UnknownStatus",
    "build_scope_filter",
    "classify",
]
