"""Rule-based assistant answering beneficiary questions.

The assistant is a deterministic first-match keyword table, not a learned
model.  Input is lower-cased; rules are tried top-down; a rule fires when
any one of its trigger substrings occurs in the input; the first rule to
fire supplies the reply.  If none fires, :data:`FALLBACK_RESPONSE` is
returned.

Rule order is part of the behaviour.  "What documents are required for
DBT?" mentions both a document trigger and a DBT trigger, and gets the
documents answer because that rule is listed first.  A message about a
delayed *transfer* that also asks about a *grievance* gets the DBT answer
because DBT precedes grievances.

Each exchange is appended to the ``chat_messages`` log in a detached task.
The append is best-effort: a failure is logged and never reaches the
person chatting.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final
from uuid import uuid4

import structlog

from src.middleware.privacy import sanitize_pii
from src.models.entities import ChatExchange
from src.models.enums import ChatIntent
from src.models.response import ChatReply, ChatSession
from src.services.store.base import CHAT_MESSAGES_TABLE

if TYPE_CHECKING:
    from src.models.entities import Profile
    from src.services.store.base import EntityStore

logger = structlog.get_logger(__name__)


# ---------------------------------------------------------------------------
# Rule table
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class IntentRule:
    """Trigger substrings (OR semantics) bound to one canned reply."""

    intent: ChatIntent
    triggers: tuple[str, ...]
    response: str

    def matches(self, normalized: str) -> bool:
        return any(trigger in normalized for trigger in self.triggers)


@dataclass(frozen=True, slots=True)
class IntentMatch:
    intent: ChatIntent
    response: str


GREETING: Final[str] = "Hello! I am your NYAY ADHAAR AI assistant. How can I help you today?"

FALLBACK_RESPONSE: Final[str] = (
    "I can help you with information about DBT, case registration, grievance submission, "
    "document requirements, disbursement tracking, and the PCR/PoA Acts. Please ask me a "
    "specific question or visit the respective section in the application."
)

RULES: Final[tuple[IntentRule, ...]] = (
    IntentRule(
        intent=ChatIntent.DOCUMENTS,
        triggers=("document", "required", "upload"),
        response=(
            "Required documents include: Aadhaar card, caste certificate, FIR copy, medical "
            "reports (if applicable), bank account details with cancelled cheque, and any other "
            "supporting evidence. All documents can be uploaded through DigiLocker for secure "
            "verification."
        ),
    ),
    IntentRule(
        intent=ChatIntent.DBT,
        triggers=("dbt", "transfer", "benefit"),
        response=(
            "Direct Benefit Transfer (DBT) under the PCR and PoA Acts ensures timely financial "
            "assistance to victims. You can track your disbursement status in the Disbursements "
            "section. The funds are transferred directly to your Aadhaar-linked bank account."
        ),
    ),
    IntentRule(
        intent=ChatIntent.CASE_REGISTRATION,
        triggers=("case", "register", "fir"),
        response=(
            'To register a case, navigate to the Cases section and click "Register New Case". '
            "You will need to provide incident details, FIR number, and supporting documents. "
            "Cases are tracked through CCTNS and eCourts for real-time updates."
        ),
    ),
    IntentRule(
        intent=ChatIntent.GRIEVANCE,
        triggers=("grievance", "complaint", "delay"),
        response=(
            "For any issues with your case or disbursement, you can submit a grievance in the "
            "Grievances section. Our officers will review and resolve your concern within 7 "
            "working days. Priority is given based on urgency."
        ),
    ),
    IntentRule(
        intent=ChatIntent.VERIFICATION,
        triggers=("verify", "aadhaar", "digilocker"),
        response=(
            "Victim verification is done through Aadhaar and DigiLocker integration. Upload your "
            "identity proof and caste certificate. The verification process typically takes 2-3 "
            "business days. You will receive an email notification once verified."
        ),
    ),
    IntentRule(
        intent=ChatIntent.STATUS_TRACKING,
        triggers=("status", "track", "check"),
        response=(
            "You can track your case status, disbursement progress, and grievance resolution in "
            "real-time through your dashboard. All updates are also sent via SMS and email to "
            "your registered contact information."
        ),
    ),
    IntentRule(
        intent=ChatIntent.RELIEF_ELIGIBILITY,
        triggers=("eligible", "relief", "amount"),
        response=(
            "Relief amounts vary based on the type of atrocity and case specifics. Immediate "
            "relief ranges from ₹25,000 to ₹8,25,000. Rehabilitation assistance is provided "
            "separately. Check with your District Social Welfare Officer for specific eligibility."
        ),
    ),
    IntentRule(
        intent=ChatIntent.HELP,
        triggers=("help", "support", "contact"),
        response=(
            "For immediate assistance, contact the National Commission for Scheduled "
            "Castes/Tribes helpline or your District Social Welfare Officer. Emergency cases can "
            'be escalated through the grievance system with "Urgent" priority.'
        ),
    ),
    IntentRule(
        intent=ChatIntent.LEGAL_ACTS,
        triggers=("pcr", "poa", "act"),
        response=(
            "The PCR Act, 1955 addresses civil rights violations and untouchability. The PoA "
            "Act, 1989 specifically covers atrocities against SC/ST communities. Both acts "
            "provide legal protection, compensation, and rehabilitation for victims."
        ),
    ),
    IntentRule(
        intent=ChatIntent.MARRIAGE_INCENTIVE,
        triggers=("marriage", "inter-caste", "incentive"),
        response=(
            "Inter-caste marriage incentive scheme provides financial assistance to couples where "
            "one partner belongs to SC/ST community. The incentive amount varies by state, "
            "typically ₹2.5 lakhs. Apply through the Social Welfare Department with marriage "
            "certificate and caste certificates."
        ),
    ),
)


def classify(text: str, rules: tuple[IntentRule, ...] = RULES) -> IntentMatch:
    """Return the reply bound to the first rule that fires on *text*."""
    normalized = text.lower()
    for rule in rules:
        if rule.matches(normalized):
            return IntentMatch(intent=rule.intent, response=rule.response)
    return IntentMatch(intent=ChatIntent.FALLBACK, response=FALLBACK_RESPONSE)


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class IntentClassifier:
    """Answers chat messages and appends each exchange to the log.

    Parameters
    ----------
    store:
        Entity store receiving ``chat_messages`` rows.
    rules:
        Ordered rule table; defaults to :data:`RULES`.
    log_enabled:
        When false, exchanges are answered but not persisted.
    """

    def __init__(
        self,
        store: EntityStore,
        *,
        rules: tuple[IntentRule, ...] = RULES,
        log_enabled: bool = True,
    ) -> None:
        self._store = store
        self._rules = rules
        self._log_enabled = log_enabled
        self._pending: set[asyncio.Task[None]] = set()

    @staticmethod
    def new_session() -> ChatSession:
        """Start a conversation: one session id per widget activation."""
        return ChatSession(session_id=str(uuid4()), greeting=GREETING)

    def classify(self, text: str) -> IntentMatch:
        return classify(text, self._rules)

    async def respond(self, profile: Profile, session_id: str, text: str) -> ChatReply:
        """Answer *text* and schedule the log append without awaiting it."""
        match = self.classify(text)
        logger.info(
            "chat.classified",
            session_id=session_id,
            profile_id=profile.id,
            intent=str(match.intent),
            message=sanitize_pii(text)[:200],
        )

        if self._log_enabled:
            task = asyncio.create_task(
                self._append_exchange(profile.id, session_id, text, match),
            )
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)

        return ChatReply(session_id=session_id, response=match.response, intent=str(match.intent))

    async def _append_exchange(self, user_id: str, session_id: str, text: str, match: IntentMatch) -> None:
        try:
            exchange = ChatExchange(
                user_id=user_id,
                session_id=session_id,
                message=text,
                response=match.response,
                intent=str(match.intent),
            )
            await self._store.insert(CHAT_MESSAGES_TABLE, exchange.model_dump(mode="json"))
        except Exception:
            logger.warning("chat.log_append_failed", session_id=session_id, exc_info=True)

    async def drain(self) -> None:
        """Wait for outstanding log appends (shutdown and tests)."""
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)

    @property
    def pending_count(self) -> int:
        return len(self._pending)
