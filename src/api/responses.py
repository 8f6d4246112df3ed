"""Shared response helpers for the v1 routers."""

from __future__ import annotations

from typing import Final

from fastapi.responses import ORJSONResponse

from src.models.response import TransitionOutcome, TransitionResult

TRANSITION_STATUS_CODES: Final[dict[TransitionOutcome, int]] = {
    TransitionOutcome.SUCCESS: 200,
    TransitionOutcome.ILLEGAL_TRANSITION: 403,
    TransitionOutcome.NOT_FOUND: 404,
    TransitionOutcome.CONFLICT: 409,
}


def transition_response(result: TransitionResult) -> ORJSONResponse:
    """Render a transition result with the HTTP status matching its outcome."""
    return ORJSONResponse(
        status_code=TRANSITION_STATUS_CODES[result.outcome],
        content=result.model_dump(mode="json"),
    )
