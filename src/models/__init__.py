from src.models.entities import (
    Case,
    ChatExchange,
    Disbursement,
    Grievance,
    Profile,
    Victim,
)
from src.models.enums import (
    CaseStatus,
    CaseType,
    CasteCategory,
    ChatIntent,
    DisbursementStatus,
    EntityType,
    GrievancePriority,
    GrievanceStatus,
    GrievanceType,
    LanguageCode,
    ReliefType,
    Role,
    VerificationStatus,
)
from src.models.request import (
    CaseCreate,
    ChatMessageRequest,
    DisbursementCreate,
    GrievanceCreate,
    ProfileUpdate,
    TransitionBody,
    TransitionRequest,
    VictimCreate,
)
from src.models.response import (
    ChatReply,
    ChatSession,
    DashboardStats,
    EntityView,
    StatusMetadata,
    TransitionOutcome,
    TransitionResult,
    VictimRegistered,
)

__all__ = [
    "Case",
    "CaseCreate",
    "CaseStatus",
    "CaseType",
    "CasteCategory",
    "ChatExchange",
    "ChatIntent",
    "ChatMessageRequest",
    "ChatReply",
    "ChatSession",
    "DashboardStats",
    "Disbursement",
    "DisbursementCreate",
    "DisbursementStatus",
    "EntityType",
    "EntityView",
    "Grievance",
    "GrievanceCreate",
    "GrievancePriority",
    "GrievanceStatus",
    "GrievanceType",
    "LanguageCode",
    "Profile",
    "ProfileUpdate",
    "ReliefType",
    "Role",
    "StatusMetadata",
    "TransitionBody",
    "TransitionOutcome",
    "TransitionRequest",
    "TransitionResult",
    "VerificationStatus",
    "Victim",
    "VictimCreate",
    "VictimRegistered",
]
