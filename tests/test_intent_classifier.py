"""Tests for the rule-based chat assistant."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from src.models.entities import Profile
from src.models.enums import ChatIntent
from src.services.intent_classifier import (
    FALLBACK_RESPONSE,
    GREETING,
    RULES,
    IntentClassifier,
    classify,
)
from src.services.store.base import CHAT_MESSAGES_TABLE, Predicate
from src.services.store.memory import InMemoryEntityStore


def _response_for(intent: ChatIntent) -> str:
    return next(rule.response for rule in RULES if rule.intent is intent)


# -----------------------------------------------------------------------
# Rule table
# -----------------------------------------------------------------------


class TestClassify:
    def test_documents_question_about_dbt_gets_documents_reply(self) -> None:
        match = classify("What documents are required for DBT?")
        assert match.intent is ChatIntent.DOCUMENTS
        assert match.response.startswith("Required documents include: Aadhaar card, caste certificate, FIR copy")

    def test_transfer_outranks_grievance(self) -> None:
        match = classify("My transfer is late, how do I file a grievance?")
        assert match.intent is ChatIntent.DBT, "DBT rule precedes the grievance rule"

    def test_unmatched_gets_fallback(self) -> None:
        match = classify("xyz")
        assert match.intent is ChatIntent.FALLBACK
        assert match.response == FALLBACK_RESPONSE
        assert match.response.startswith("I can help you with information about DBT")

    def test_case_insensitive(self) -> None:
        assert classify("HOW DO I REGISTER AN FIR").intent is ChatIntent.CASE_REGISTRATION

    @pytest.mark.parametrize(
        ("text", "intent"),
        [
            ("When will I get my benefit?", ChatIntent.DBT),
            ("I want to register", ChatIntent.CASE_REGISTRATION),
            ("I have a complaint", ChatIntent.GRIEVANCE),
            ("verify me through digilocker", ChatIntent.VERIFICATION),
            ("track my application", ChatIntent.STATUS_TRACKING),
            ("am I eligible?", ChatIntent.RELIEF_ELIGIBILITY),
            ("I need help", ChatIntent.HELP),
            ("tell me about the pcr law", ChatIntent.LEGAL_ACTS),
            ("inter-caste incentive", ChatIntent.MARRIAGE_INCENTIVE),
        ],
    )
    def test_each_rule_fires(self, text: str, intent: ChatIntent) -> None:
        assert classify(text).intent is intent

    def test_substring_semantics(self) -> None:
        # "act" occurs inside "contact"; the help rule is listed first.
        assert classify("contact").intent is ChatIntent.HELP

    def test_custom_rule_order(self) -> None:
        reordered = tuple(sorted(RULES, key=lambda rule: rule.intent is not ChatIntent.DBT))
        assert classify("What documents are required for DBT?", reordered).intent is ChatIntent.DBT


# -----------------------------------------------------------------------
# Service
# -----------------------------------------------------------------------


class TestIntentClassifier:
    def test_new_session_greets(self) -> None:
        first = IntentClassifier.new_session()
        second = IntentClassifier.new_session()
        assert first.greeting == GREETING
        assert first.session_id != second.session_id

    async def test_respond_logs_exchange(self) -> None:
        store = InMemoryEntityStore()
        classifier = IntentClassifier(store)
        profile = Profile(id="p1")

        reply = await classifier.respond(profile, "s1", "What documents are required for DBT?")
        await classifier.drain()

        assert reply.response == _response_for(ChatIntent.DOCUMENTS)
        assert reply.intent == ChatIntent.DOCUMENTS
        rows = await store.select(CHAT_MESSAGES_TABLE, Predicate().where("session_id", "s1"))
        assert len(rows) == 1
        assert rows[0]["user_id"] == "p1"
        assert rows[0]["message"] == "What documents are required for DBT?"
        assert rows[0]["response"] == reply.response

    async def test_log_failure_does_not_reach_caller(self) -> None:
        store = InMemoryEntityStore()
        store.insert = AsyncMock(side_effect=RuntimeError("store down"))  # type: ignore[method-assign]
        classifier = IntentClassifier(store)

        reply = await classifier.respond(Profile(id="p1"), "s1", "xyz")
        await classifier.drain()

        assert reply.response == FALLBACK_RESPONSE
        assert classifier.pending_count == 0

    async def test_logging_disabled(self) -> None:
        store = InMemoryEntityStore()
        classifier = IntentClassifier(store, log_enabled=False)
        await classifier.respond(Profile(id="p1"), "s1", "help")
        await classifier.drain()
        assert store.table_size(CHAT_MESSAGES_TABLE) == 0
