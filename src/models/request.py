from __future__ import annotations

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field

from src.models.enums import (
    CaseType,
    CasteCategory,
    EntityType,
    GrievancePriority,
    GrievanceType,
    LanguageCode,
    ReliefType,
)


class TransitionRequest(BaseModel):
    """Move one entity from ``from_status`` to ``to_status``.

    ``from_status`` is the status the caller last saw; the write is
    conditional on the store still holding it.
    """

    entity_type: EntityType
    entity_id: str = Field(..., min_length=1, max_length=100)
    from_status: str = Field(..., min_length=1, max_length=50)
    to_status: str = Field(..., min_length=1, max_length=50)
    override: bool = False
    disbursed_amount: Decimal | None = Field(default=None, gt=0)
    transaction_id: str | None = Field(default=None, max_length=100)
    resolution_notes: str | None = Field(default=None, max_length=2000)
    remarks: str | None = Field(default=None, max_length=2000)


class TransitionBody(BaseModel):
    """Transition request body; the entity comes from the URL."""

    from_status: str = Field(..., min_length=1, max_length=50)
    to_status: str = Field(..., min_length=1, max_length=50)
    override: bool = False
    disbursed_amount: Decimal | None = Field(default=None, gt=0)
    transaction_id: str | None = Field(default=None, max_length=100)
    resolution_notes: str | None = Field(default=None, max_length=2000)
    remarks: str | None = Field(default=None, max_length=2000)

    def for_entity(self, entity_type: EntityType, entity_id: str) -> TransitionRequest:
        return TransitionRequest(entity_type=entity_type, entity_id=entity_id, **self.model_dump())


class VictimCreate(BaseModel):
    victim_name: str = Field(..., min_length=2, max_length=200)
    aadhaar_number: str = Field(..., pattern=r"^\d{12}$")
    phone: str = Field(..., min_length=10, max_length=15)
    email: str | None = Field(default=None, max_length=200)
    address: str = Field(..., min_length=5, max_length=500)
    state: str = Field(..., min_length=2, max_length=100)
    district: str = Field(..., min_length=2, max_length=100)
    caste_category: CasteCategory
    # Only honoured for officers registering on behalf of a user.
    user_id: str | None = None


class CaseCreate(BaseModel):
    victim_id: str = Field(..., min_length=1)
    case_type: CaseType
    incident_date: date | None = None
    incident_description: str = Field(..., min_length=10, max_length=5000)
    fir_number: str | None = Field(default=None, max_length=100)
    police_station: str | None = Field(default=None, max_length=200)
    court_name: str | None = Field(default=None, max_length=200)
    cctns_reference: str | None = Field(default=None, max_length=100)
    ecourt_reference: str | None = Field(default=None, max_length=100)


class DisbursementCreate(BaseModel):
    case_id: str = Field(..., min_length=1)
    relief_type: ReliefType
    sanction_amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    sanction_order_number: str | None = Field(default=None, max_length=100)
    bank_account_number: str | None = Field(default=None, pattern=r"^\d{9,18}$")
    ifsc_code: str | None = Field(default=None, pattern=r"^[A-Z]{4}0[A-Z0-9]{6}$")
    beneficiary_name: str = Field(..., min_length=2, max_length=200)
    remarks: str | None = Field(default=None, max_length=2000)


class GrievanceCreate(BaseModel):
    grievance_type: GrievanceType
    description: str = Field(..., min_length=10, max_length=5000)
    priority: GrievancePriority = GrievancePriority.MEDIUM
    related_case_id: str | None = None
    related_disbursement_id: str | None = None


class ProfileUpdate(BaseModel):
    """Self-service profile changes.  There is no ``role`` field."""

    model_config = {"extra": "forbid"}

    full_name: str | None = Field(default=None, min_length=2, max_length=200)
    phone: str | None = Field(default=None, min_length=10, max_length=15)
    state: str | None = Field(default=None, max_length=100)
    district: str | None = Field(default=None, max_length=100)
    language_preference: LanguageCode | None = None


class ChatMessageRequest(BaseModel):
    session_id: str = Field(..., min_length=1, max_length=100)
    message: str = Field(..., min_length=1, max_length=2000)
