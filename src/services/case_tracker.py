"""Case tracking service: scoped listings, status transitions and record creation.

This is the surface the API layer talks to.  It composes the access scope
resolver (which rows the caller may see), the lifecycle engine (which
moves are legal and how statuses render) and the entity store (where rows
live).

Transitions
-----------
:meth:`CaseTrackingService.request_transition` never raises for expected
outcomes.  It returns a :class:`TransitionResult` whose ``outcome`` is one
of ``success``, ``illegal_transition``, ``not_found`` or ``conflict``:

1. The lifecycle engine checks the edge for the caller's role.  Illegal
   requests are rejected before the store is touched.
2. The entity is fetched *through the caller's scope*.  Rows the caller
   cannot see are reported as ``not_found``.
3. If the stored status is no longer ``from_status`` the caller is looking
   at stale data: ``conflict``.
4. The write is conditional on ``from_status``.  If another request won
   the race in between, the store's verdict is returned unchanged.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, Final
from uuid import uuid4

import structlog

from src.models.entities import (
    Case,
    Disbursement,
    Grievance,
    Victim,
    mask_aadhaar_number,
    mask_account_number,
)
from src.models.enums import (
    CaseType,
    DisbursementStatus,
    EntityType,
    GrievanceStatus,
    Role,
    VerificationStatus,
)
from src.models.response import EntityView, TransitionOutcome, TransitionResult
from src.services.errors import (
    Conflict,
    IllegalTransition,
    InvalidRequest,
    NotFound,
    PermissionDenied,
)
from src.services.labels import StaticLabelProvider
from src.services.lifecycle import (
    INITIAL_STATUS,
    allowed_transitions,
    ensure_transition,
    is_terminal,
    priority_metadata,
    safe_status_metadata,
    status_field,
    type_label_key,
)
from src.services.scope import can_create
from src.services.store.base import WriteOutcome, table_for

if TYPE_CHECKING:
    from src.models.entities import Profile
    from src.models.request import (
        CaseCreate,
        DisbursementCreate,
        GrievanceCreate,
        TransitionRequest,
        VictimCreate,
    )
    from src.services.labels import LabelProvider
    from src.services.scope import AccessScopeResolver
    from src.services.store.base import EntityStore

logger = structlog.get_logger(__name__)

_CASE_NUMBER_PREFIX: Final[dict[str, str]] = {
    CaseType.PCR: "PCR",
    CaseType.POA: "POA",
    CaseType.INTER_CASTE_MARRIAGE: "ICM",
}

_WRITE_OUTCOMES: Final[dict[WriteOutcome, TransitionOutcome]] = {
    WriteOutcome.SUCCESS: TransitionOutcome.SUCCESS,
    WriteOutcome.CONFLICT: TransitionOutcome.CONFLICT,
    WriteOutcome.NOT_FOUND: TransitionOutcome.NOT_FOUND,
}

_TYPE_FIELDS: Final[dict[EntityType, str]] = {
    EntityType.CASE: "case_type",
    EntityType.DISBURSEMENT: "relief_type",
    EntityType.GRIEVANCE: "grievance_type",
}

STALE_STATE_MESSAGE: Final[str] = "State changed, refresh and try again."


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()


def _display_number(prefix: str) -> str:
    return f"{prefix}/{datetime.now(UTC).year}/{uuid4().hex[:8].upper()}"


class CaseTrackingService:
    """Scoped reads and guarded writes over cases, disbursements, grievances and victims."""

    def __init__(
        self,
        store: EntityStore,
        scope: AccessScopeResolver,
        labels: LabelProvider | None = None,
    ) -> None:
        self._store = store
        self._scope = scope
        self._labels = labels or StaticLabelProvider()

    # ------------------------------------------------------------------
    # Listings
    # ------------------------------------------------------------------

    def _view(self, profile: Profile, entity_type: EntityType, row: dict[str, Any]) -> EntityView:
        status = str(row.get(status_field(entity_type)) or "")
        meta = safe_status_metadata(entity_type, status)
        language = profile.language_preference
        record = dict(row)
        if entity_type is EntityType.DISBURSEMENT and not profile.is_officer:
            record["bank_account_number"] = mask_account_number(record.get("bank_account_number"))
        if entity_type is EntityType.VICTIM:
            record["aadhaar_number"] = mask_aadhaar_number(record.get("aadhaar_number"))

        type_value = record.get(_TYPE_FIELDS.get(entity_type, ""))
        priority = record.get("priority") if entity_type is EntityType.GRIEVANCE else None
        return EntityView(
            entity_type=str(entity_type),
            record=record,
            status=status,
            status_meta=meta,
            status_label=self._labels.render(meta.label, language),
            type_label=self._labels.render(type_label_key(type_value), language) if type_value else "",
            priority_class=priority_metadata(priority) if priority else None,
            terminal=is_terminal(entity_type, status),
            allowed_transitions=allowed_transitions(entity_type, status, profile.role),
        )

    async def list_entities(self, profile: Profile, entity_type: EntityType) -> list[EntityView]:
        """Rows of *entity_type* visible to *profile*, newest first."""
        entity_type = EntityType(entity_type)
        predicate = await self._scope.scope_filter(profile, entity_type)
        rows = await self._store.select(table_for(entity_type), predicate, order_by="created_at", descending=True)
        logger.debug(
            "tracker.listed",
            entity_type=str(entity_type),
            profile_id=profile.id,
            count=len(rows),
        )
        return [self._view(profile, entity_type, row) for row in rows]

    async def list_cases(self, profile: Profile) -> list[EntityView]:
        return await self.list_entities(profile, EntityType.CASE)

    async def list_disbursements(self, profile: Profile) -> list[EntityView]:
        return await self.list_entities(profile, EntityType.DISBURSEMENT)

    async def list_grievances(self, profile: Profile) -> list[EntityView]:
        return await self.list_entities(profile, EntityType.GRIEVANCE)

    async def list_victims(self, profile: Profile) -> list[EntityView]:
        return await self.list_entities(profile, EntityType.VICTIM)

    async def _get_visible(self, profile: Profile, entity_type: EntityType, entity_id: str) -> dict[str, Any]:
        predicate = (await self._scope.scope_filter(profile, entity_type)).where("id", entity_id)
        rows = await self._store.select(table_for(entity_type), predicate, limit=1)
        if not rows:
            raise NotFound(str(entity_type), entity_id)
        return rows[0]

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    @staticmethod
    def _transition_changes(profile: Profile, request: TransitionRequest) -> dict[str, Any]:
        """Columns written alongside the new status.

        Raises :class:`IllegalTransition` when a side field breaks a record
        invariant (e.g. ``disbursed`` without a disbursed amount).
        """
        entity_type = request.entity_type
        target = request.to_status
        changes: dict[str, Any] = {status_field(entity_type): target}

        def reject(reason: str) -> IllegalTransition:
            return IllegalTransition(str(entity_type), request.from_status, target, str(profile.role), reason)

        if request.disbursed_amount is not None and not (
            entity_type is EntityType.DISBURSEMENT
            and target in (DisbursementStatus.DISBURSED, DisbursementStatus.FAILED)
        ):
            raise reject("a disbursed amount is only recorded when a disbursement is disbursed or fails")
        if request.resolution_notes and not (
            entity_type is EntityType.GRIEVANCE
            and target in (GrievanceStatus.RESOLVED, GrievanceStatus.CLOSED)
        ):
            raise reject("resolution notes are only recorded when a grievance is resolved or closed")

        if entity_type is EntityType.DISBURSEMENT:
            if target == DisbursementStatus.DISBURSED:
                if request.disbursed_amount is None:
                    raise reject("a disbursed amount is required")
                changes["disbursement_date"] = datetime.now(UTC).date().isoformat()
            if request.disbursed_amount is not None:
                changes["disbursed_amount"] = str(request.disbursed_amount)
            if request.transaction_id:
                changes["transaction_id"] = request.transaction_id
            if request.remarks:
                changes["remarks"] = request.remarks

        elif entity_type is EntityType.GRIEVANCE:
            if target in (GrievanceStatus.RESOLVED, GrievanceStatus.CLOSED):
                if request.resolution_notes:
                    changes["resolution_notes"] = request.resolution_notes
                if target == GrievanceStatus.RESOLVED:
                    changes["resolved_at"] = _now_iso()
            else:
                # Reopened by override, or picked up by an officer.
                changes["resolution_notes"] = None
                changes["resolved_at"] = None
            if target == GrievanceStatus.IN_PROGRESS and profile.is_officer:
                changes["assigned_to"] = profile.id

        elif entity_type is EntityType.VICTIM:
            changes["verified_by"] = profile.id
            changes["verified_at"] = _now_iso() if target == VerificationStatus.VERIFIED else None

        if entity_type is not EntityType.VICTIM:
            changes["updated_at"] = _now_iso()
        return changes

    async def request_transition(self, profile: Profile, request: TransitionRequest) -> TransitionResult:
        """Move one entity to a new status on behalf of *profile*."""
        entity_type = request.entity_type
        log = logger.bind(
            entity_type=str(entity_type),
            entity_id=request.entity_id,
            from_status=request.from_status,
            to_status=request.to_status,
            profile_id=profile.id,
            role=str(profile.role),
        )

        def result(outcome: TransitionOutcome, message: str = "", record: dict[str, Any] | None = None) -> TransitionResult:
            return TransitionResult(
                outcome=outcome,
                entity_type=str(entity_type),
                entity_id=request.entity_id,
                message=message,
                record=record,
            )

        try:
            ensure_transition(
                entity_type,
                request.from_status,
                request.to_status,
                profile.role,
                override=request.override,
            )
            changes = self._transition_changes(profile, request)
        except IllegalTransition as exc:
            log.info("tracker.transition_illegal", reason=str(exc))
            return result(TransitionOutcome.ILLEGAL_TRANSITION, str(exc))

        try:
            current = await self._get_visible(profile, entity_type, request.entity_id)
        except NotFound as exc:
            log.info("tracker.transition_not_found")
            return result(TransitionOutcome.NOT_FOUND, str(exc))

        field = status_field(entity_type)
        if current.get(field) != request.from_status:
            log.info("tracker.transition_stale", stored_status=current.get(field))
            return result(TransitionOutcome.CONFLICT, STALE_STATE_MESSAGE, current)

        write = await self._store.conditional_update(
            table_for(entity_type),
            request.entity_id,
            field,
            request.from_status,
            changes,
        )
        outcome = _WRITE_OUTCOMES[write.outcome]
        message = STALE_STATE_MESSAGE if outcome is TransitionOutcome.CONFLICT else ""
        log.info("tracker.transition_applied", outcome=str(outcome))
        return result(outcome, message, write.row)

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    def _require_create(self, profile: Profile, entity_type: EntityType) -> None:
        if not can_create(profile, entity_type):
            logger.warning("tracker.create_denied", entity_type=str(entity_type), profile_id=profile.id)
            raise PermissionDenied(f"{profile.role} may not create {entity_type} records")

    async def register_victim(self, profile: Profile, payload: VictimCreate) -> Victim:
        """Record the Victim linked to a user profile (one per profile)."""
        self._require_create(profile, EntityType.VICTIM)
        if profile.role is Role.USER:
            owner_id = profile.id
        elif payload.user_id:
            owner_id = payload.user_id
        else:
            raise InvalidRequest("user_id is required when an officer registers a victim")

        victim = Victim(
            user_id=owner_id,
            victim_name=payload.victim_name,
            aadhaar_number=payload.aadhaar_number,
            phone=payload.phone,
            email=payload.email,
            address=payload.address,
            state=payload.state,
            district=payload.district,
            caste_category=payload.caste_category,
            verification_status=INITIAL_STATUS[EntityType.VICTIM],
        )
        # victims.user_id is unique in the store; concurrent registrations
        # for one profile leave exactly one row.
        try:
            row = await self._store.insert(table_for(EntityType.VICTIM), victim.model_dump(mode="json"))
        except Conflict:
            logger.info("tracker.victim_exists", user_id=owner_id)
            raise Conflict(f"profile {owner_id} already has a victim record") from None
        await self._scope.invalidate(owner_id)
        logger.info("tracker.victim_registered", victim_id=victim.id, user_id=owner_id)
        return Victim.model_validate(row)

    async def register_case(self, profile: Profile, payload: CaseCreate) -> Case:
        self._require_create(profile, EntityType.CASE)
        await self._get_visible(profile, EntityType.VICTIM, payload.victim_id)

        case = Case(
            case_number=_display_number(_CASE_NUMBER_PREFIX[payload.case_type]),
            victim_id=payload.victim_id,
            case_type=payload.case_type,
            incident_date=payload.incident_date,
            incident_description=payload.incident_description,
            fir_number=payload.fir_number,
            police_station=payload.police_station,
            court_name=payload.court_name,
            case_status=INITIAL_STATUS[EntityType.CASE],
            cctns_reference=payload.cctns_reference,
            ecourt_reference=payload.ecourt_reference,
        )
        row = await self._store.insert(table_for(EntityType.CASE), case.model_dump(mode="json"))
        logger.info("tracker.case_registered", case_id=case.id, case_number=case.case_number)
        return Case.model_validate(row)

    async def sanction_disbursement(self, profile: Profile, payload: DisbursementCreate) -> Disbursement:
        self._require_create(profile, EntityType.DISBURSEMENT)
        case_row = await self._get_visible(profile, EntityType.CASE, payload.case_id)

        disbursement = Disbursement(
            disbursement_number=_display_number("DBT"),
            case_id=payload.case_id,
            victim_id=case_row["victim_id"],
            relief_type=payload.relief_type,
            sanction_amount=payload.sanction_amount,
            sanctioned_by=profile.id,
            sanction_date=datetime.now(UTC).date(),
            sanction_order_number=payload.sanction_order_number,
            disbursement_status=INITIAL_STATUS[EntityType.DISBURSEMENT],
            bank_account_number=payload.bank_account_number,
            ifsc_code=payload.ifsc_code,
            beneficiary_name=payload.beneficiary_name,
            remarks=payload.remarks,
        )
        row = await self._store.insert(table_for(EntityType.DISBURSEMENT), disbursement.model_dump(mode="json"))
        logger.info(
            "tracker.disbursement_sanctioned",
            disbursement_id=disbursement.id,
            case_id=payload.case_id,
            relief_type=str(payload.relief_type),
        )
        return Disbursement.model_validate(row)

    async def file_grievance(self, profile: Profile, payload: GrievanceCreate) -> Grievance:
        """File a grievance owned by *profile*; linked records must be visible to it."""
        self._require_create(profile, EntityType.GRIEVANCE)
        if payload.related_case_id:
            await self._get_visible(profile, EntityType.CASE, payload.related_case_id)
        if payload.related_disbursement_id:
            disbursement = await self._get_visible(profile, EntityType.DISBURSEMENT, payload.related_disbursement_id)
            if payload.related_case_id and disbursement["case_id"] != payload.related_case_id:
                raise InvalidRequest("related disbursement does not belong to the related case")

        grievance = Grievance(
            grievance_number=_display_number("GRV"),
            user_id=profile.id,
            related_case_id=payload.related_case_id,
            related_disbursement_id=payload.related_disbursement_id,
            grievance_type=payload.grievance_type,
            description=payload.description,
            priority=payload.priority,
            status=INITIAL_STATUS[EntityType.GRIEVANCE],
        )
        row = await self._store.insert(table_for(EntityType.GRIEVANCE), grievance.model_dump(mode="json"))
        logger.info(
            "tracker.grievance_filed",
            grievance_id=grievance.id,
            grievance_type=str(payload.grievance_type),
            priority=str(payload.priority),
        )
        return Grievance.model_validate(row)
