"""Lifecycle engine: legal statuses, transitions and status presentation.

Every consumer (listings, dashboard, API) reads status metadata and
transition rules from the tables in this module, so views cannot drift
apart.  The engine never writes to storage; :mod:`src.services.case_tracker`
executes transitions after asking :func:`can_transition`.

Adjacency (forward progress only)::

    case          registered -> under_investigation -> in_trial -> closed
    disbursement  sanctioned -> processing -> disbursed
                                          \\-> failed
    grievance     open -> in_progress -> resolved | closed
                  open -> closed                      (withdrawal)
    victim        pending -> verified | rejected

Officer roles (admin, district_officer, social_welfare) may take any edge.
A user may only withdraw a grievance (``open -> closed``).  An admin can
pass ``override=True`` to move a case or grievance to any other status,
e.g. to reopen it; disbursements and victims have no override.
"""

from __future__ import annotations

from typing import Final

import structlog

from src.models.enums import (
    CaseStatus,
    CaseType,
    DisbursementStatus,
    EntityType,
    GrievancePriority,
    GrievanceStatus,
    GrievanceType,
    ReliefType,
    Role,
    VerificationStatus,
)
from src.models.response import StatusMetadata
from src.services.errors import IllegalTransition, UnknownStatus

logger = structlog.get_logger(__name__)


def _badge(color: str) -> str:
    if color == "slate":
        return "bg-slate-50 dark:bg-slate-700 text-slate-600 dark:text-slate-300"
    return f"bg-{color}-50 dark:bg-{color}-900/20 text-{color}-600 dark:text-{color}-400"


# ---------------------------------------------------------------------------
# Status sets and storage columns
# ---------------------------------------------------------------------------

STATUS_FIELDS: Final[dict[EntityType, str]] = {
    EntityType.CASE: "case_status",
    EntityType.DISBURSEMENT: "disbursement_status",
    EntityType.GRIEVANCE: "status",
    EntityType.VICTIM: "verification_status",
}

STATUSES: Final[dict[EntityType, tuple[str, ...]]] = {
    EntityType.CASE: tuple(CaseStatus),
    EntityType.DISBURSEMENT: tuple(DisbursementStatus),
    EntityType.GRIEVANCE: tuple(GrievanceStatus),
    EntityType.VICTIM: tuple(VerificationStatus),
}

INITIAL_STATUS: Final[dict[EntityType, str]] = {
    EntityType.CASE: CaseStatus.REGISTERED,
    EntityType.DISBURSEMENT: DisbursementStatus.SANCTIONED,
    EntityType.GRIEVANCE: GrievanceStatus.OPEN,
    EntityType.VICTIM: VerificationStatus.PENDING,
}

# ---------------------------------------------------------------------------
# Adjacency
# ---------------------------------------------------------------------------

TRANSITIONS: Final[dict[EntityType, dict[str, frozenset[str]]]] = {
    EntityType.CASE: {
        CaseStatus.REGISTERED: frozenset({CaseStatus.UNDER_INVESTIGATION}),
        CaseStatus.UNDER_INVESTIGATION: frozenset({CaseStatus.IN_TRIAL}),
        CaseStatus.IN_TRIAL: frozenset({CaseStatus.CLOSED}),
        CaseStatus.CLOSED: frozenset(),
    },
    EntityType.DISBURSEMENT: {
        DisbursementStatus.SANCTIONED: frozenset({DisbursementStatus.PROCESSING}),
        DisbursementStatus.PROCESSING: frozenset({DisbursementStatus.DISBURSED, DisbursementStatus.FAILED}),
        DisbursementStatus.DISBURSED: frozenset(),
        DisbursementStatus.FAILED: frozenset(),
    },
    EntityType.GRIEVANCE: {
        GrievanceStatus.OPEN: frozenset({GrievanceStatus.IN_PROGRESS, GrievanceStatus.CLOSED}),
        GrievanceStatus.IN_PROGRESS: frozenset({GrievanceStatus.RESOLVED, GrievanceStatus.CLOSED}),
        GrievanceStatus.RESOLVED: frozenset(),
        GrievanceStatus.CLOSED: frozenset(),
    },
    EntityType.VICTIM: {
        VerificationStatus.PENDING: frozenset({VerificationStatus.VERIFIED, VerificationStatus.REJECTED}),
        VerificationStatus.VERIFIED: frozenset(),
        VerificationStatus.REJECTED: frozenset(),
    },
}

# Edges a user-role caller may take on records in their own scope.
_USER_EDGES: Final[frozenset[tuple[EntityType, str, str]]] = frozenset({
    (EntityType.GRIEVANCE, GrievanceStatus.OPEN, GrievanceStatus.CLOSED),
})

_OVERRIDABLE: Final[frozenset[EntityType]] = frozenset({EntityType.CASE, EntityType.GRIEVANCE})

# ---------------------------------------------------------------------------
# Presentation
# ---------------------------------------------------------------------------

FALLBACK_METADATA: Final[StatusMetadata] = StatusMetadata(
    icon="file-text",
    label="status.unknown",
    color_class=_badge("slate"),
)

_METADATA: Final[dict[tuple[EntityType, str], StatusMetadata]] = {
    (EntityType.CASE, CaseStatus.REGISTERED): StatusMetadata(
        icon="clock", label="case.registered", color_class=_badge("blue"),
    ),
    (EntityType.CASE, CaseStatus.UNDER_INVESTIGATION): StatusMetadata(
        icon="alert-circle", label="case.investigation", color_class=_badge("amber"),
    ),
    (EntityType.CASE, CaseStatus.IN_TRIAL): StatusMetadata(
        icon="file-text", label="case.trial", color_class=_badge("violet"),
    ),
    (EntityType.CASE, CaseStatus.CLOSED): StatusMetadata(
        icon="check-circle-2", label="case.closed", color_class=_badge("green"),
    ),
    (EntityType.DISBURSEMENT, DisbursementStatus.SANCTIONED): StatusMetadata(
        icon="clock", label="disbursement.sanctioned", color_class=_badge("blue"),
    ),
    (EntityType.DISBURSEMENT, DisbursementStatus.PROCESSING): StatusMetadata(
        icon="trending-up", label="disbursement.processing", color_class=_badge("amber"),
    ),
    (EntityType.DISBURSEMENT, DisbursementStatus.DISBURSED): StatusMetadata(
        icon="check-circle-2", label="disbursement.disbursed", color_class=_badge("green"),
    ),
    (EntityType.DISBURSEMENT, DisbursementStatus.FAILED): StatusMetadata(
        icon="x-circle", label="disbursement.failed", color_class=_badge("red"),
    ),
    (EntityType.GRIEVANCE, GrievanceStatus.OPEN): StatusMetadata(
        icon="alert-circle", label="grievance.open", color_class=_badge("red"),
    ),
    (EntityType.GRIEVANCE, GrievanceStatus.IN_PROGRESS): StatusMetadata(
        icon="clock", label="grievance.in_progress", color_class=_badge("amber"),
    ),
    (EntityType.GRIEVANCE, GrievanceStatus.RESOLVED): StatusMetadata(
        icon="check-circle-2", label="grievance.resolved", color_class=_badge("green"),
    ),
    (EntityType.GRIEVANCE, GrievanceStatus.CLOSED): StatusMetadata(
        icon="x-circle", label="grievance.closed", color_class=_badge("slate"),
    ),
    (EntityType.VICTIM, VerificationStatus.PENDING): StatusMetadata(
        icon="clock", label="victim.pending", color_class=_badge("amber"),
    ),
    (EntityType.VICTIM, VerificationStatus.VERIFIED): StatusMetadata(
        icon="check-circle-2", label="victim.verified", color_class=_badge("green"),
    ),
    (EntityType.VICTIM, VerificationStatus.REJECTED): StatusMetadata(
        icon="x-circle", label="victim.rejected", color_class=_badge("red"),
    ),
}

_PRIORITY_COLORS: Final[dict[str, str]] = {
    GrievancePriority.URGENT: "bg-red-100 dark:bg-red-900/30 text-red-700 dark:text-red-300",
    GrievancePriority.HIGH: "bg-orange-100 dark:bg-orange-900/30 text-orange-700 dark:text-orange-300",
    GrievancePriority.MEDIUM: "bg-yellow-100 dark:bg-yellow-900/30 text-yellow-700 dark:text-yellow-300",
    GrievancePriority.LOW: "bg-blue-100 dark:bg-blue-900/30 text-blue-700 dark:text-blue-300",
}
_PRIORITY_FALLBACK: Final[str] = "bg-slate-100 dark:bg-slate-700 text-slate-700 dark:text-slate-300"

_TYPE_LABEL_KEYS: Final[dict[str, str]] = {
    CaseType.PCR: "case.pcr",
    CaseType.POA: "case.poa",
    CaseType.INTER_CASTE_MARRIAGE: "case.marriage",
    ReliefType.IMMEDIATE_RELIEF: "relief.immediate_relief",
    ReliefType.REHABILITATION: "relief.rehabilitation",
    ReliefType.MARRIAGE_INCENTIVE: "relief.marriage_incentive",
    GrievanceType.DELAY: "grievance.delay",
    GrievanceType.WRONG_AMOUNT: "grievance.wrong_amount",
    GrievanceType.NOT_RECEIVED: "grievance.not_received",
    GrievanceType.DOCUMENTATION: "grievance.documentation",
    GrievanceType.OTHER: "grievance.other",
}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def status_field(entity_type: EntityType) -> str:
    """Column holding the lifecycle status for *entity_type*."""
    return STATUS_FIELDS[EntityType(entity_type)]


def is_known_status(entity_type: EntityType, status: str) -> bool:
    return status in STATUSES[EntityType(entity_type)]


def status_metadata(entity_type: EntityType, status: str) -> StatusMetadata:
    """Icon, label key and colour class for *status*.

    Raises :class:`UnknownStatus` when *status* is not defined for
    *entity_type*.
    """
    meta = _METADATA.get((EntityType(entity_type), status))
    if meta is None:
        raise UnknownStatus(str(entity_type), status)
    return meta


def safe_status_metadata(entity_type: EntityType, status: str) -> StatusMetadata:
    """Like :func:`status_metadata` but renders the neutral fallback."""
    try:
        return status_metadata(entity_type, status)
    except UnknownStatus:
        logger.error("lifecycle.unknown_status", entity_type=str(entity_type), status=status)
        return FALLBACK_METADATA


def can_transition(
    entity_type: EntityType,
    from_status: str,
    to_status: str,
    role: Role,
    *,
    override: bool = False,
) -> bool:
    """Whether *role* may move an entity from *from_status* to *to_status*."""
    entity_type = EntityType(entity_type)
    if not (is_known_status(entity_type, from_status) and is_known_status(entity_type, to_status)):
        return False
    if from_status == to_status:
        return False

    role = Role(role)
    if override:
        return role is Role.ADMIN and entity_type in _OVERRIDABLE

    if to_status not in TRANSITIONS[entity_type][from_status]:
        return False
    if role.is_officer:
        return True
    return (entity_type, from_status, to_status) in _USER_EDGES


def ensure_transition(
    entity_type: EntityType,
    from_status: str,
    to_status: str,
    role: Role,
    *,
    override: bool = False,
) -> None:
    """Raise :class:`IllegalTransition` unless :func:`can_transition` allows it."""
    if not can_transition(entity_type, from_status, to_status, role, override=override):
        raise IllegalTransition(str(entity_type), from_status, to_status, str(role))


def allowed_transitions(entity_type: EntityType, from_status: str, role: Role) -> list[str]:
    """Targets the UI may offer as actions for *role*, in declaration order."""
    entity_type = EntityType(entity_type)
    if not is_known_status(entity_type, from_status):
        return []
    return [
        target
        for target in STATUSES[entity_type]
        if can_transition(entity_type, from_status, target, role)
    ]


def is_terminal(entity_type: EntityType, status: str) -> bool:
    entity_type = EntityType(entity_type)
    return is_known_status(entity_type, status) and not TRANSITIONS[entity_type][status]


def priority_metadata(priority: str) -> str:
    """Badge colour class for a grievance priority."""
    return _PRIORITY_COLORS.get(priority, _PRIORITY_FALLBACK)


def type_label_key(value: str) -> str:
    """Label key for a case type, relief type or grievance type."""
    return _TYPE_LABEL_KEYS.get(value, value)
