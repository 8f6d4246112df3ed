"""Tests for the lifecycle engine: status metadata and transition rules."""

from __future__ import annotations

import itertools

import pytest

from src.models.enums import (
    CaseStatus,
    CaseType,
    DisbursementStatus,
    EntityType,
    GrievanceStatus,
    Role,
    VerificationStatus,
)
from src.services.errors import IllegalTransition, UnknownStatus
from src.services.lifecycle import (
    FALLBACK_METADATA,
    STATUSES,
    allowed_transitions,
    can_transition,
    ensure_transition,
    is_terminal,
    priority_metadata,
    safe_status_metadata,
    status_field,
    status_metadata,
    type_label_key,
)

_OFFICERS = (Role.ADMIN, Role.DISTRICT_OFFICER, Role.SOCIAL_WELFARE)

# Legal edges for officers, spelled out independently of the engine's tables.
_EDGES: dict[EntityType, set[tuple[str, str]]] = {
    EntityType.CASE: {
        ("registered", "under_investigation"),
        ("under_investigation", "in_trial"),
        ("in_trial", "closed"),
    },
    EntityType.DISBURSEMENT: {
        ("sanctioned", "processing"),
        ("processing", "disbursed"),
        ("processing", "failed"),
    },
    EntityType.GRIEVANCE: {
        ("open", "in_progress"),
        ("open", "closed"),
        ("in_progress", "resolved"),
        ("in_progress", "closed"),
    },
    EntityType.VICTIM: {
        ("pending", "verified"),
        ("pending", "rejected"),
    },
}

_USER_EDGES = {(EntityType.GRIEVANCE, "open", "closed")}


# -----------------------------------------------------------------------
# Metadata
# -----------------------------------------------------------------------


class TestStatusMetadata:
    @pytest.mark.parametrize(
        ("entity_type", "status"),
        [(entity_type, status) for entity_type, statuses in STATUSES.items() for status in statuses],
    )
    def test_every_defined_status_has_metadata(self, entity_type: EntityType, status: str) -> None:
        meta = status_metadata(entity_type, status)
        assert meta.icon, f"{entity_type}/{status} should have an icon"
        assert meta.label, f"{entity_type}/{status} should have a label key"
        assert meta.color_class, f"{entity_type}/{status} should have a colour class"

    def test_case_investigation_label_key(self) -> None:
        meta = status_metadata(EntityType.CASE, CaseStatus.UNDER_INVESTIGATION)
        assert meta.label == "case.investigation"
        assert meta.icon == "alert-circle"
        assert "amber" in meta.color_class

    def test_disbursed_is_green(self) -> None:
        meta = status_metadata(EntityType.DISBURSEMENT, DisbursementStatus.DISBURSED)
        assert "green" in meta.color_class

    def test_unknown_status_raises(self) -> None:
        with pytest.raises(UnknownStatus) as exc_info:
            status_metadata(EntityType.CASE, "archived")
        assert exc_info.value.status == "archived"

    def test_status_of_other_entity_is_unknown(self) -> None:
        with pytest.raises(UnknownStatus):
            status_metadata(EntityType.CASE, GrievanceStatus.OPEN)

    def test_safe_metadata_falls_back(self) -> None:
        assert safe_status_metadata(EntityType.GRIEVANCE, "escalated") == FALLBACK_METADATA
        assert FALLBACK_METADATA.label == "status.unknown"

    def test_status_fields(self) -> None:
        assert status_field(EntityType.CASE) == "case_status"
        assert status_field(EntityType.DISBURSEMENT) == "disbursement_status"
        assert status_field(EntityType.GRIEVANCE) == "status"
        assert status_field(EntityType.VICTIM) == "verification_status"


# -----------------------------------------------------------------------
# Transitions
# -----------------------------------------------------------------------


class TestCanTransition:
    @pytest.mark.parametrize(
        ("entity_type", "from_status", "to_status"),
        [
            (EntityType.CASE, CaseStatus.REGISTERED, CaseStatus.UNDER_INVESTIGATION),
            (EntityType.CASE, CaseStatus.UNDER_INVESTIGATION, CaseStatus.IN_TRIAL),
            (EntityType.CASE, CaseStatus.IN_TRIAL, CaseStatus.CLOSED),
            (EntityType.DISBURSEMENT, DisbursementStatus.SANCTIONED, DisbursementStatus.PROCESSING),
            (EntityType.DISBURSEMENT, DisbursementStatus.PROCESSING, DisbursementStatus.DISBURSED),
            (EntityType.DISBURSEMENT, DisbursementStatus.PROCESSING, DisbursementStatus.FAILED),
            (EntityType.GRIEVANCE, GrievanceStatus.OPEN, GrievanceStatus.IN_PROGRESS),
            (EntityType.GRIEVANCE, GrievanceStatus.IN_PROGRESS, GrievanceStatus.RESOLVED),
            (EntityType.GRIEVANCE, GrievanceStatus.IN_PROGRESS, GrievanceStatus.CLOSED),
            (EntityType.GRIEVANCE, GrievanceStatus.OPEN, GrievanceStatus.CLOSED),
            (EntityType.VICTIM, VerificationStatus.PENDING, VerificationStatus.VERIFIED),
            (EntityType.VICTIM, VerificationStatus.PENDING, VerificationStatus.REJECTED),
        ],
    )
    def test_forward_edges_allowed_for_officers(
        self, entity_type: EntityType, from_status: str, to_status: str
    ) -> None:
        for role in _OFFICERS:
            assert can_transition(entity_type, from_status, to_status, role), (
                f"{role} should move {entity_type} {from_status} -> {to_status}"
            )

    @pytest.mark.parametrize(
        ("entity_type", "from_status", "to_status"),
        [
            (EntityType.CASE, CaseStatus.REGISTERED, CaseStatus.IN_TRIAL),
            (EntityType.CASE, CaseStatus.CLOSED, CaseStatus.REGISTERED),
            (EntityType.CASE, CaseStatus.IN_TRIAL, CaseStatus.UNDER_INVESTIGATION),
            (EntityType.DISBURSEMENT, DisbursementStatus.SANCTIONED, DisbursementStatus.DISBURSED),
            (EntityType.DISBURSEMENT, DisbursementStatus.FAILED, DisbursementStatus.PROCESSING),
            (EntityType.DISBURSEMENT, DisbursementStatus.DISBURSED, DisbursementStatus.FAILED),
            (EntityType.GRIEVANCE, GrievanceStatus.CLOSED, GrievanceStatus.OPEN),
            (EntityType.GRIEVANCE, GrievanceStatus.RESOLVED, GrievanceStatus.IN_PROGRESS),
            (EntityType.GRIEVANCE, GrievanceStatus.OPEN, GrievanceStatus.RESOLVED),
            (EntityType.VICTIM, VerificationStatus.VERIFIED, VerificationStatus.PENDING),
        ],
    )
    def test_other_edges_rejected(self, entity_type: EntityType, from_status: str, to_status: str) -> None:
        for role in (*_OFFICERS, Role.USER):
            assert not can_transition(entity_type, from_status, to_status, role), (
                f"{role} must not move {entity_type} {from_status} -> {to_status}"
            )

    def test_sanctioned_to_disbursed_never_allowed(self) -> None:
        for role in (*_OFFICERS, Role.USER):
            assert not can_transition(
                EntityType.DISBURSEMENT, DisbursementStatus.SANCTIONED, DisbursementStatus.DISBURSED, role
            )
            assert DisbursementStatus.DISBURSED not in allowed_transitions(
                EntityType.DISBURSEMENT, DisbursementStatus.SANCTIONED, role
            )

    def test_sanctioned_to_failed_never_allowed(self) -> None:
        for role in (*_OFFICERS, Role.USER):
            assert not can_transition(
                EntityType.DISBURSEMENT, DisbursementStatus.SANCTIONED, DisbursementStatus.FAILED, role
            )

    @pytest.mark.parametrize("entity_type", list(EntityType))
    def test_every_status_pair_matches_adjacency(self, entity_type: EntityType) -> None:
        for role in Role:
            for from_status, to_status in itertools.product(STATUSES[entity_type], repeat=2):
                if role is Role.USER:
                    expected = (entity_type, from_status, to_status) in _USER_EDGES
                else:
                    expected = (from_status, to_status) in _EDGES[entity_type]
                assert can_transition(entity_type, from_status, to_status, role) is expected, (
                    f"{role} {entity_type} {from_status} -> {to_status}: expected {expected}"
                )

    @pytest.mark.parametrize("entity_type", list(EntityType))
    def test_every_status_pair_with_override(self, entity_type: EntityType) -> None:
        for role in Role:
            for from_status, to_status in itertools.product(STATUSES[entity_type], repeat=2):
                expected = (
                    role is Role.ADMIN
                    and entity_type in (EntityType.CASE, EntityType.GRIEVANCE)
                    and from_status != to_status
                )
                assert can_transition(entity_type, from_status, to_status, role, override=True) is expected, (
                    f"{role} override {entity_type} {from_status} -> {to_status}: expected {expected}"
                )

    def test_same_status_rejected(self) -> None:
        assert not can_transition(EntityType.CASE, CaseStatus.REGISTERED, CaseStatus.REGISTERED, Role.ADMIN)

    def test_unknown_status_rejected(self) -> None:
        assert not can_transition(EntityType.CASE, "archived", CaseStatus.CLOSED, Role.ADMIN)
        assert not can_transition(EntityType.CASE, CaseStatus.REGISTERED, "archived", Role.ADMIN)

    def test_user_may_only_withdraw_open_grievance(self) -> None:
        assert can_transition(EntityType.GRIEVANCE, GrievanceStatus.OPEN, GrievanceStatus.CLOSED, Role.USER)
        assert not can_transition(
            EntityType.GRIEVANCE, GrievanceStatus.OPEN, GrievanceStatus.IN_PROGRESS, Role.USER
        )
        assert not can_transition(EntityType.CASE, CaseStatus.REGISTERED, CaseStatus.UNDER_INVESTIGATION, Role.USER)
        assert not can_transition(
            EntityType.VICTIM, VerificationStatus.PENDING, VerificationStatus.VERIFIED, Role.USER
        )


class TestOverride:
    def test_admin_can_reopen_closed_grievance(self) -> None:
        assert can_transition(
            EntityType.GRIEVANCE, GrievanceStatus.CLOSED, GrievanceStatus.OPEN, Role.ADMIN, override=True
        )

    def test_admin_can_reopen_closed_case(self) -> None:
        assert can_transition(
            EntityType.CASE, CaseStatus.CLOSED, CaseStatus.UNDER_INVESTIGATION, Role.ADMIN, override=True
        )

    def test_override_reserved_for_admin(self) -> None:
        for role in (Role.DISTRICT_OFFICER, Role.SOCIAL_WELFARE, Role.USER):
            assert not can_transition(
                EntityType.GRIEVANCE, GrievanceStatus.CLOSED, GrievanceStatus.OPEN, role, override=True
            )

    def test_no_override_for_disbursements_or_victims(self) -> None:
        assert not can_transition(
            EntityType.DISBURSEMENT,
            DisbursementStatus.FAILED,
            DisbursementStatus.PROCESSING,
            Role.ADMIN,
            override=True,
        )
        assert not can_transition(
            EntityType.VICTIM,
            VerificationStatus.REJECTED,
            VerificationStatus.PENDING,
            Role.ADMIN,
            override=True,
        )


class TestHelpers:
    def test_ensure_transition_raises(self) -> None:
        with pytest.raises(IllegalTransition) as exc_info:
            ensure_transition(EntityType.GRIEVANCE, GrievanceStatus.CLOSED, GrievanceStatus.OPEN, Role.USER)
        assert exc_info.value.from_status == GrievanceStatus.CLOSED
        assert exc_info.value.to_status == GrievanceStatus.OPEN

    def test_allowed_transitions_for_officer(self) -> None:
        assert allowed_transitions(EntityType.DISBURSEMENT, DisbursementStatus.PROCESSING, Role.ADMIN) == [
            DisbursementStatus.DISBURSED,
            DisbursementStatus.FAILED,
        ]

    def test_allowed_transitions_for_user(self) -> None:
        assert allowed_transitions(EntityType.GRIEVANCE, GrievanceStatus.OPEN, Role.USER) == [
            GrievanceStatus.CLOSED,
        ]
        assert allowed_transitions(EntityType.CASE, CaseStatus.REGISTERED, Role.USER) == []

    def test_allowed_transitions_unknown_status(self) -> None:
        assert allowed_transitions(EntityType.CASE, "archived", Role.ADMIN) == []

    def test_terminal_statuses(self) -> None:
        assert is_terminal(EntityType.CASE, CaseStatus.CLOSED)
        assert is_terminal(EntityType.DISBURSEMENT, DisbursementStatus.FAILED)
        assert not is_terminal(EntityType.GRIEVANCE, GrievanceStatus.OPEN)

    def test_type_label_keys(self) -> None:
        assert type_label_key(CaseType.POA) == "case.poa"
        assert type_label_key("mystery") == "mystery"

    def test_priority_colours(self) -> None:
        assert "red" in priority_metadata("urgent")
        assert "slate" in priority_metadata("unheard-of")
