"""Tests for PII sanitisation and the privacy headers middleware."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.middleware.privacy import (
    PrivacyMiddleware,
    sanitize_aadhaar,
    sanitize_bank_account,
    sanitize_email,
    sanitize_phone,
    sanitize_pii,
)


# -----------------------------------------------------------------------
# Aadhaar sanitisation tests
# -----------------------------------------------------------------------


class TestSanitizeAadhaar:
    def test_aadhaar_with_spaces(self) -> None:
        result = sanitize_aadhaar("My Aadhaar is 1234 5678 9012")
        assert result == "My Aadhaar is XXXX-XXXX-9012", (
            f"Aadhaar with spaces should be masked: got '{result}'"
        )

    def test_aadhaar_with_dashes(self) -> None:
        result = sanitize_aadhaar("Aadhaar: 1234-5678-9012")
        assert result == "Aadhaar: XXXX-XXXX-9012"

    def test_aadhaar_without_separator(self) -> None:
        result = sanitize_aadhaar("Number is 123456789012")
        assert result == "Number is XXXX-XXXX-9012"

    def test_no_aadhaar_unchanged(self) -> None:
        text = "No Aadhaar number here, just regular text."
        assert sanitize_aadhaar(text) == text, "text without Aadhaar should be unchanged"


# -----------------------------------------------------------------------
# Phone and account sanitisation tests
# -----------------------------------------------------------------------


class TestSanitizePhone:
    def test_indian_phone_with_plus91(self) -> None:
        result = sanitize_phone("Call me at +91 9876543210")
        assert "XXXXXX3210" in result, (
            f"Indian phone with +91 should be masked, preserving last 4: got '{result}'"
        )
        assert "+91" not in result

    def test_bare_10_digit_indian_phone(self) -> None:
        result = sanitize_phone("Number: 9876543210")
        assert result == "Number: XXXXXX3210"

    def test_digits_inside_longer_number_not_phone(self) -> None:
        text = "Account 123456789012345"
        assert sanitize_phone(text) == text, "tail of a longer digit run must not match as a phone"


class TestSanitizeBankAccount:
    def test_long_account_keeps_last_four(self) -> None:
        result = sanitize_bank_account("A/c 123456789012345")
        assert result == "A/c XXXX2345"

    def test_short_numbers_unchanged(self) -> None:
        text = "Case 2024 filed on 15-01"
        assert sanitize_bank_account(text) == text


class TestSanitizeEmail:
    def test_basic_email(self) -> None:
        result = sanitize_email("Email: user@example.com")
        assert "[EMAIL_REDACTED]" in result
        assert "user@example.com" not in result, "original email should be removed"


# -----------------------------------------------------------------------
# Combined sanitize_pii tests
# -----------------------------------------------------------------------


class TestSanitizePII:
    def test_combined_all_pii(self) -> None:
        text = (
            "Aadhaar: 1234 5678 9012, Phone: 9876543210, "
            "A/c 123456789012345, Email: user@gov.in"
        )
        result = sanitize_pii(text)
        assert "XXXX-XXXX-9012" in result, "Aadhaar should be masked"
        assert "XXXXXX3210" in result, "Phone should be masked"
        assert "XXXX2345" in result, "Account number should be masked"
        assert "[EMAIL_REDACTED]" in result, "Email should be redacted"
        assert "123456789012345" not in result

    def test_aadhaar_takes_precedence_over_account(self) -> None:
        assert sanitize_pii("123456789012") == "XXXX-XXXX-9012"

    def test_no_pii_unchanged(self) -> None:
        text = "What documents are required for DBT?"
        assert sanitize_pii(text) == text

    def test_empty_string(self) -> None:
        assert sanitize_pii("") == ""


# -----------------------------------------------------------------------
# Middleware
# -----------------------------------------------------------------------


class TestPrivacyMiddleware:
    def test_privacy_headers_added(self) -> None:
        app = FastAPI()
        app.add_middleware(PrivacyMiddleware)

        @app.get("/ping")
        async def ping() -> dict:
            return {"ok": True}

        response = TestClient(app).get("/ping")
        assert response.status_code == 200
        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"
        assert response.headers["X-Data-Processing-Purpose"] == "welfare-case-tracking"
        assert "no-store" in response.headers["Cache-Control"]
