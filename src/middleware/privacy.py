"""Privacy helpers and response-header middleware.

Victim records and chat messages carry Aadhaar numbers, bank accounts,
phone numbers and e-mail addresses.  Nothing of that may reach the logs
in clear text: log call sites pass free text through :func:`sanitize_pii`
first.  The middleware adds privacy and security headers to every
response and logs each request without PII.
"""

from __future__ import annotations

import re
from typing import Final

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

# ---------------------------------------------------------------------------
# PII sanitisation patterns
# ---------------------------------------------------------------------------

# Aadhaar: 12 digits, optionally grouped as XXXX-XXXX-XXXX or XXXX XXXX XXXX.
_AADHAAR_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"\b(\d{4})[\s-]?(\d{4})[\s-]?(\d{4})\b"
)

# Bank account numbers: 9 to 18 contiguous digits.
_ACCOUNT_PATTERN: Final[re.Pattern[str]] = re.compile(r"\b(\d{5,14})(\d{4})\b")

# Indian mobile numbers: optional +91, then 10 digits starting with 6-9.
_PHONE_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"(?<!\d)(?:\+91[\s-]?)?([6-9]\d{5})(\d{4})\b"
)

_EMAIL_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b"
)


def sanitize_aadhaar(text: str) -> str:
    """``1234 5678 9012`` becomes ``XXXX-XXXX-9012``."""
    return _AADHAAR_PATTERN.sub(lambda m: f"XXXX-XXXX-{m.group(3)}", text)


def sanitize_phone(text: str) -> str:
    """``+91-9876543210`` keeps only its last 4 digits."""
    return _PHONE_PATTERN.sub(lambda m: f"XXXXXX{m.group(2)}", text)


def sanitize_bank_account(text: str) -> str:
    """``123456789012345`` becomes ``XXXX2345``."""
    return _ACCOUNT_PATTERN.sub(lambda m: f"XXXX{m.group(2)}", text)


def sanitize_email(text: str) -> str:
    return _EMAIL_PATTERN.sub("[EMAIL_REDACTED]", text)


def sanitize_pii(text: str) -> str:
    """Apply every masking routine to *text*.

    Aadhaar runs first so a 12-digit number keeps its Aadhaar mask.  Mobile
    numbers run before account numbers and only match a standalone 10-digit
    run, so the tail of a longer account number is never read as a phone.
    """
    text = sanitize_aadhaar(text)
    text = sanitize_phone(text)
    text = sanitize_bank_account(text)
    return sanitize_email(text)


# ---------------------------------------------------------------------------
# Middleware
# ---------------------------------------------------------------------------


class PrivacyMiddleware(BaseHTTPMiddleware):
    """Logs requests without PII and adds privacy headers to every response."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        structlog.contextvars.clear_contextvars()
        logger.info(
            "request.incoming",
            method=request.method,
            path=sanitize_pii(request.url.path),
        )

        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Strict-Transport-Security"] = "max-age=63072000; includeSubDomains"
        response.headers["Cache-Control"] = "no-store, no-cache, must-revalidate, private"
        response.headers["X-Data-Processing-Purpose"] = "welfare-case-tracking"
        return response
