"""Verification Rules — pure transition checks for Unregistered → PendingVerification → Verified.

Invariants:
    - A code is only ever checked against the code currently stored (last-write-wins)
    - No stored code means any supplied code is invalid (verified users cannot re-verify)
    - Mismatch is reported before expiry: an expired wrong code is "invalid", not "expired"
    - Expiry is evaluated lazily against the `now` passed in, never swept
    - Email addresses are normalized (trimmed, lower-cased) before any comparison

Design Decisions:
    - Functions take `now` explicitly: pure, testable without sleeping or patching clocks
    - Codes drawn from `secrets`, compared with hmac.compare_digest (constant time)
    - Domain check is an exact domain match; subdomains of the permitted domain are rejected
"""

import hmac
import secrets
from datetime import datetime, timedelta, timezone

from email_validator import EmailNotValidError, validate_email

from liquidator.core.domain_types import VerificationState
from liquidator.core.errors import (
    InputValidationError,
    InvalidVerificationCodeError,
    VerificationCodeExpiredError,
)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def check_permitted_email(email: str, allowed_domain: str) -> str:
    """Validate syntax and domain; returns the normalized address."""
    normalized = normalize_email(email)
    if not normalized:
        raise InputValidationError("Email is required", "email")
    try:
        info = validate_email(normalized, check_deliverability=False)
    except EmailNotValidError as e:
        raise InputValidationError(f"Invalid email address: {e}", "email")
    if info.domain.lower() != allowed_domain.lower():
        raise InputValidationError(
            f"Email must belong to the @{allowed_domain} domain", "email",
        )
    return normalized


def require_text(value: str | None, field: str, label: str) -> str:
    """Return the stripped value or raise InputValidationError when blank."""
    stripped = (value or "").strip()
    if not stripped:
        raise InputValidationError(f"{label} is required", field)
    return stripped


def generate_verification_code(length: int = 6) -> str:
    """Fixed-length, zero-padded numeric code from a CSPRNG."""
    return f"{secrets.randbelow(10 ** length):0{length}d}"


def code_expiry(issued_at: datetime, ttl_minutes: int) -> datetime:
    return issued_at + timedelta(minutes=ttl_minutes)


def check_verification_code(
    stored_code: str | None,
    stored_expires: datetime | None,
    supplied_code: str,
    now: datetime,
) -> None:
    """Raise unless supplied_code is the current, unexpired code."""
    if not stored_code or not supplied_code:
        raise InvalidVerificationCodeError()
    if not hmac.compare_digest(stored_code.encode(), supplied_code.encode()):
        raise InvalidVerificationCodeError()
    if stored_expires is not None and as_utc(now) > as_utc(stored_expires):
        raise VerificationCodeExpiredError()


def as_utc(value: datetime) -> datetime:
    """SQLite hands back naive datetimes; treat them as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def verification_state(user: object | None) -> VerificationState:
    """Derive the state of a stored user (None means never registered)."""
    if user is None:
        return VerificationState.UNREGISTERED
    if getattr(user, "email_verified", False):
        return VerificationState.VERIFIED
    return VerificationState.PENDING_VERIFICATION
