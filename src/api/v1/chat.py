"""AI assistant chat endpoints for NyayAdhaar API v1.

The assistant is a keyword rule table; each exchange is logged to
``chat_messages`` in the background and never delays the reply.
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, Request

from src.middleware.auth import get_current_profile
from src.models.entities import Profile
from src.models.request import ChatMessageRequest
from src.models.response import ChatReply, ChatSession

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

router = APIRouter(prefix="/chat", tags=["chat"])


@router.post("/sessions", response_model=ChatSession, status_code=201)
async def start_session(
    request: Request,
    profile: Profile = Depends(get_current_profile),
) -> ChatSession:
    """Open a chat session and return the assistant's greeting."""
    session = request.app.state.classifier.new_session()
    logger.info("chat.session_started", session_id=session.session_id)
    return session


@router.post("/messages", response_model=ChatReply)
async def send_message(
    body: ChatMessageRequest,
    request: Request,
    profile: Profile = Depends(get_current_profile),
) -> ChatReply:
    return await request.app.state.classifier.respond(profile, body.session_id, body.message)
