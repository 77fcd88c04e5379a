"""Verification Service — register, resend, verify, and login over a UserRepository.

Invariants:
    - Register never stores the plaintext password; duplicate email is decided by the store
    - Every issued code replaces the previous one (last-write-wins)
    - VerifyCode clears the code on success, so a second call with the same code fails
    - Login is a query: NotFound, then Forbidden (unverified), then Unauthorized
    - Verification codes are never written to logs

Design Decisions:
    - Clock injected as a callable: expiry tests run without sleeping
    - Resend on a verified account is a Conflict: issuing a code there would break
      the "verified users carry no code" invariant
    - Outcomes returned as small dataclasses; routes decide whether the code is exposed
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable

from liquidator.core.domain_types import UserId, VerificationState
from liquidator.core.errors import (
    EmailAlreadyVerifiedError,
    EmailNotVerifiedError,
    ErrorContext,
    InvalidCredentialsError,
    ResourceNotFoundError,
)
from liquidator.core.repository_protocols import UserLike, UserRepository
from liquidator.core.verification import (
    check_permitted_email,
    check_verification_code,
    code_expiry,
    generate_verification_code,
    normalize_email,
    require_text,
    verification_state,
)
from liquidator.infrastructure.passwords import hash_password, verify_password

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class IssuedCode:
    """A freshly issued verification code for a user."""
    user_id: UserId
    code: str


class VerificationService:
    """Identity state machine: Unregistered → PendingVerification → Verified."""

    def __init__(
        self,
        users: UserRepository,
        *,
        allowed_domain: str,
        code_length: int = 6,
        code_ttl_minutes: int = 10,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.users = users
        self.allowed_domain = allowed_domain
        self.code_length = code_length
        self.code_ttl_minutes = code_ttl_minutes
        self.clock = clock

    async def register(self, email: str, password: str, full_name: str) -> IssuedCode:
        """Create a pending user and issue its first code."""
        normalized = check_permitted_email(email, self.allowed_domain)
        require_text(password, "password", "Password")
        name = require_text(full_name, "fullName", "Full name")

        code, expires = self._new_code()
        user = await self.users.create(
            email=normalized,
            password_hash=hash_password(password),
            full_name=name,
            verification_code=code,
            verification_code_expires=expires,
        )
        logger.info("User registered", extra={"user_id": str(user.id)})
        return IssuedCode(user_id=user.id, code=code)

    async def resend_code(self, email: str) -> IssuedCode:
        """Issue a fresh code, invalidating any outstanding one."""
        user = await self._require_user(email)
        if verification_state(user) is VerificationState.VERIFIED:
            raise EmailAlreadyVerifiedError(
                user.email, ErrorContext(user_id=str(user.id)),
            )
        code, expires = self._new_code()
        await self.users.set_verification_code(user.id, code, expires)
        logger.info("Verification code reissued", extra={"user_id": str(user.id)})
        return IssuedCode(user_id=user.id, code=code)

    async def verify_code(self, email: str, code: str) -> UserLike:
        """Confirm the current code; transitions the user to Verified."""
        user = await self._require_user(email)
        check_verification_code(
            user.verification_code,
            user.verification_code_expires,
            code or "",
            self.clock(),
        )
        await self.users.mark_verified(user.id)
        logger.info("Email verified", extra={"user_id": str(user.id)})
        return user

    async def login(self, email: str, password: str) -> UserLike:
        """Return the user when verified and the password matches."""
        user = await self._require_user(email)
        context = ErrorContext(user_id=str(user.id))
        if verification_state(user) is not VerificationState.VERIFIED:
            raise EmailNotVerifiedError(context)
        if not verify_password(user.password_hash, password or ""):
            raise InvalidCredentialsError(context)
        return user

    async def _require_user(self, email: str) -> UserLike:
        normalized = normalize_email(email or "")
        user = await self.users.get_by_email(normalized) if normalized else None
        if user is None:
            raise ResourceNotFoundError("User", normalized)
        return user

    def _new_code(self) -> tuple[str, datetime]:
        code = generate_verification_code(self.code_length)
        return code, code_expiry(self.clock(), self.code_ttl_minutes)
