"""Verification Rules — email domain gate, code generation, code/expiry checks."""

from datetime import datetime, timedelta, timezone

import pytest

from liquidator.core.domain_types import VerificationState
from liquidator.core.errors import (
    InputValidationError,
    InvalidVerificationCodeError,
    VerificationCodeExpiredError,
)
from liquidator.core.verification import (
    check_permitted_email,
    check_verification_code,
    code_expiry,
    generate_verification_code,
    require_text,
    verification_state,
)

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def test_permitted_email_is_normalized():
    assert check_permitted_email("  Ana.Silva@FL1Capital.com ", "fl1capital.com") == (
        "ana.silva@fl1capital.com"
    )


@pytest.mark.parametrize("email", [
    "someone@gmail.com",
    "someone@fl1capital.com.evil.org",
    "someone@eu.fl1capital.com",
    "not-an-email",
    "",
])
def test_email_outside_domain_is_rejected(email):
    with pytest.raises(InputValidationError) as exc:
        check_permitted_email(email, "fl1capital.com")
    assert exc.value.field == "email"
    assert exc.value.http_status == 400


def test_require_text_rejects_blank():
    assert require_text("  Ana ", "fullName", "Full name") == "Ana"
    with pytest.raises(InputValidationError):
        require_text("   ", "fullName", "Full name")
    with pytest.raises(InputValidationError):
        require_text(None, "password", "Password")


def test_generated_codes_are_fixed_length_digits():
    codes = {generate_verification_code(6) for _ in range(50)}
    assert all(len(c) == 6 and c.isdigit() for c in codes)
    assert len(codes) > 1
    assert len(generate_verification_code(8)) == 8


def test_code_expiry_adds_ttl():
    assert code_expiry(NOW, 10) == NOW + timedelta(minutes=10)


def test_matching_code_within_window_passes():
    check_verification_code("123456", NOW + timedelta(minutes=1), "123456", NOW)


def test_mismatched_code_is_invalid():
    with pytest.raises(InvalidVerificationCodeError):
        check_verification_code("123456", NOW + timedelta(minutes=1), "654321", NOW)


def test_code_must_match_exactly():
    with pytest.raises(InvalidVerificationCodeError):
        check_verification_code("123456", NOW + timedelta(minutes=1), " 123456", NOW)


def test_no_stored_code_is_invalid():
    with pytest.raises(InvalidVerificationCodeError):
        check_verification_code(None, None, "123456", NOW)


def test_expired_code_is_rejected():
    with pytest.raises(VerificationCodeExpiredError):
        check_verification_code("123456", NOW - timedelta(seconds=1), "123456", NOW)


def test_expiry_instant_itself_is_still_valid():
    check_verification_code("123456", NOW, "123456", NOW)


def test_naive_stored_expiry_is_treated_as_utc():
    naive_past = (NOW - timedelta(minutes=5)).replace(tzinfo=None)
    with pytest.raises(VerificationCodeExpiredError):
        check_verification_code("123456", naive_past, "123456", NOW)


def test_wrong_code_reported_before_expiry():
    with pytest.raises(InvalidVerificationCodeError):
        check_verification_code("123456", NOW - timedelta(minutes=5), "000000", NOW)


class _StoredUser:
    def __init__(self, email_verified: bool):
        self.email_verified = email_verified


def test_verification_state_derivation():
    assert verification_state(None) is VerificationState.UNREGISTERED
    assert verification_state(_StoredUser(False)) is VerificationState.PENDING_VERIFICATION
    assert verification_state(_StoredUser(True)) is VerificationState.VERIFIED
