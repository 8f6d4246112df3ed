from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class StatusMetadata(BaseModel):
    """Presentation metadata derived from an entity's status.

    ``label`` is a label key, not display text; the label provider renders
    it in the caller's language.
    """

    model_config = {"frozen": True}

    icon: str
    label: str
    color_class: str


class EntityView(BaseModel):
    """One stored row plus its status-derived presentation."""

    entity_type: str
    record: dict[str, Any]
    status: str
    status_meta: StatusMetadata
    status_label: str = ""
    type_label: str = ""
    priority_class: str | None = None  # grievances only
    terminal: bool = False
    allowed_transitions: list[str] = Field(default_factory=list)


class VictimRegistered(BaseModel):
    """Victim registration receipt.  Omits Aadhaar, phone and address."""

    id: str
    user_id: str
    victim_name: str
    verification_status: str
    created_at: datetime


class DashboardStats(BaseModel):
    total_cases: int = Field(default=0, ge=0)
    pending_disbursements: int = Field(default=0, ge=0)
    active_grievances: int = Field(default=0, ge=0)
    verified_victims: int = Field(default=0, ge=0)


class TransitionOutcome(StrEnum):
    __slots__ = ()

    SUCCESS = "success"
    ILLEGAL_TRANSITION = "illegal_transition"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"


class TransitionResult(BaseModel):
    outcome: TransitionOutcome
    entity_type: str
    entity_id: str
    message: str = ""
    record: dict[str, Any] | None = None

    @property
    def ok(self) -> bool:
        return self.outcome == TransitionOutcome.SUCCESS


class ChatSession(BaseModel):
    session_id: str
    greeting: str


class ChatReply(BaseModel):
    session_id: str
    response: str
    intent: str
