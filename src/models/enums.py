from __future__ import annotations

from enum import StrEnum


class Role(StrEnum):
    __slots__ = ()

    USER = "user"
    ADMIN = "admin"
    DISTRICT_OFFICER = "district_officer"
    SOCIAL_WELFARE = "social_welfare"

    @property
    def is_officer(self) -> bool:
        return self is not Role.USER


class EntityType(StrEnum):
    __slots__ = ()

    CASE = "case"
    DISBURSEMENT = "disbursement"
    GRIEVANCE = "grievance"
    VICTIM = "victim"


class CasteCategory(StrEnum):
    __slots__ = ()

    SC = "SC"
    ST = "ST"


class VerificationStatus(StrEnum):
    __slots__ = ()

    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"


class CaseType(StrEnum):
    __slots__ = ()

    PCR = "PCR"
    POA = "PoA"
    INTER_CASTE_MARRIAGE = "Inter-caste Marriage"


class CaseStatus(StrEnum):
    __slots__ = ()

    REGISTERED = "registered"
    UNDER_INVESTIGATION = "under_investigation"
    IN_TRIAL = "in_trial"
    CLOSED = "closed"


class ReliefType(StrEnum):
    __slots__ = ()

    IMMEDIATE_RELIEF = "immediate_relief"
    REHABILITATION = "rehabilitation"
    MARRIAGE_INCENTIVE = "marriage_incentive"


class DisbursementStatus(StrEnum):
    __slots__ = ()

    SANCTIONED = "sanctioned"
    PROCESSING = "processing"
    DISBURSED = "disbursed"
    FAILED = "failed"


class GrievanceType(StrEnum):
    __slots__ = ()

    DELAY = "delay"
    WRONG_AMOUNT = "wrong_amount"
    NOT_RECEIVED = "not_received"
    DOCUMENTATION = "documentation"
    OTHER = "other"


class GrievancePriority(StrEnum):
    __slots__ = ()

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class GrievanceStatus(StrEnum):
    __slots__ = ()

    OPEN = "open"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    CLOSED = "closed"


class ChatIntent(StrEnum):
    __slots__ = ()

    DOCUMENTS = "documents"
    DBT = "dbt"
    CASE_REGISTRATION = "case_registration"
    GRIEVANCE = "grievance"
    VERIFICATION = "verification"
    STATUS_TRACKING = "status_tracking"
    RELIEF_ELIGIBILITY = "relief_eligibility"
    HELP = "help"
    LEGAL_ACTS = "legal_acts"
    MARRIAGE_INCENTIVE = "marriage_incentive"
    FALLBACK = "fallback"


class LanguageCode(StrEnum):
    """Interface languages with label tables."""

    __slots__ = ()

    en = "en"  # English
    hi = "hi"  # Hindi
