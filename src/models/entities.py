"""Persistent record types for NyayAdhaar.

These models mirror the rows held by the remote entity store (Supabase
tables ``profiles``, ``victims``, ``cases``, ``disbursements``,
``grievances`` and ``chat_messages``).  They carry no behaviour beyond
field-level invariants; lifecycle rules live in
:mod:`src.services.lifecycle` and visibility rules in
:mod:`src.services.scope`.

Status fields are typed as plain ``str`` rather than the matching enum so
that a row carrying an unknown status still loads.  Such rows are data
integrity defects and are rendered with neutral metadata instead of
crashing a listing.
"""

from __future__ import annotations

from datetime import UTC, date, datetime
from decimal import Decimal
from uuid import uuid4

from pydantic import BaseModel, Field, model_validator

from src.models.enums import (
    DisbursementStatus,
    GrievancePriority,
    GrievanceStatus,
    LanguageCode,
    Role,
    VerificationStatus,
)


def _now() -> datetime:
    return datetime.now(UTC)


def _new_id() -> str:
    return str(uuid4())


def mask_account_number(account: str | None) -> str | None:
    """Bank account reduced to its last four digits."""
    if not account:
        return None
    return f"XXXX{account[-4:]}"


def mask_aadhaar_number(aadhaar: str | None) -> str | None:
    if not aadhaar:
        return aadhaar
    return f"XXXX-XXXX-{aadhaar[-4:]}"


class Profile(BaseModel):
    """Identity record for a signed-up person.

    ``role`` is frozen: nobody, including the profile owner, can change it
    through the service once the profile exists.
    """

    model_config = {"frozen": False}

    id: str = Field(default_factory=_new_id)
    email: str = ""
    full_name: str = ""
    phone: str | None = None
    role: Role = Field(default=Role.USER, frozen=True)
    aadhaar_number: str | None = None
    state: str | None = None
    district: str | None = None
    language_preference: str = LanguageCode.en
    created_at: datetime = Field(default_factory=_now)
    updated_at: datetime = Field(default_factory=_now)

    @property
    def is_officer(self) -> bool:
        return self.role.is_officer


class Victim(BaseModel):
    """Beneficiary record owned by exactly one user-role profile."""

    id: str = Field(default_factory=_new_id)
    user_id: str
    victim_name: str
    aadhaar_number: str = ""
    phone: str = ""
    email: str | None = None
    address: str = ""
    state: str = ""
    district: str = ""
    caste_category: str
    verification_status: str = VerificationStatus.PENDING
    digilocker_verified: bool = False
    verified_by: str | None = None
    verified_at: datetime | None = None
    created_at: datetime = Field(default_factory=_now)


class Case(BaseModel):
    """One legal proceeding under the PCR or PoA Act."""

    id: str = Field(default_factory=_new_id)
    case_number: str
    victim_id: str
    case_type: str
    incident_date: date | None = None
    incident_description: str = ""
    fir_number: str | None = None
    police_station: str | None = None
    court_name: str | None = None
    case_status: str
    cctns_reference: str | None = None
    ecourt_reference: str | None = None
    created_at: datetime = Field(default_factory=_now)
    updated_at: datetime = Field(default_factory=_now)


class Disbursement(BaseModel):
    """A monetary sanction tied to one case and one victim.

    Bookkeeping only: moving a disbursement to ``disbursed`` records that
    funds were transferred elsewhere, it does not move money.
    """

    id: str = Field(default_factory=_new_id)
    disbursement_number: str
    case_id: str
    victim_id: str
    relief_type: str
    sanction_amount: Decimal = Field(gt=0, frozen=True)
    sanctioned_by: str | None = None
    sanction_date: date | None = None
    sanction_order_number: str | None = None
    disbursement_status: str
    disbursed_amount: Decimal | None = None
    disbursement_date: date | None = None
    transaction_id: str | None = None
    bank_account_number: str | None = None
    ifsc_code: str | None = None
    beneficiary_name: str
    remarks: str | None = None
    created_at: datetime = Field(default_factory=_now)
    updated_at: datetime = Field(default_factory=_now)

    @model_validator(mode="after")
    def _check_disbursed_amount(self) -> Disbursement:
        status = self.disbursement_status
        if status == DisbursementStatus.DISBURSED and self.disbursed_amount is None:
            raise ValueError("disbursed_amount is required once a disbursement is disbursed")
        if (
            status in (DisbursementStatus.SANCTIONED, DisbursementStatus.PROCESSING)
            and self.disbursed_amount is not None
        ):
            raise ValueError(f"disbursed_amount must be empty while {status}")
        return self


class Grievance(BaseModel):
    """A complaint filed by a profile, optionally about a case or disbursement."""

    id: str = Field(default_factory=_new_id)
    grievance_number: str
    user_id: str
    related_case_id: str | None = None
    related_disbursement_id: str | None = None
    grievance_type: str
    description: str
    priority: str = GrievancePriority.MEDIUM
    status: str = GrievanceStatus.OPEN
    assigned_to: str | None = None
    resolution_notes: str | None = None
    resolved_at: datetime | None = None
    created_at: datetime = Field(default_factory=_now)
    updated_at: datetime = Field(default_factory=_now)

    @model_validator(mode="after")
    def _check_resolution_notes(self) -> Grievance:
        if self.resolution_notes and self.status not in (
            GrievanceStatus.RESOLVED,
            GrievanceStatus.CLOSED,
        ):
            raise ValueError("resolution_notes can only be set on resolved or closed grievances")
        return self


class ChatExchange(BaseModel):
    """One user message and the generated reply.  Append-only."""

    model_config = {"frozen": True}

    id: str = Field(default_factory=_new_id)
    user_id: str
    session_id: str
    message: str
    response: str
    intent: str
    created_at: datetime = Field(default_factory=_now)
