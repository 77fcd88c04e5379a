"""Boundary Protocols — typed repository contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - One repository per entity (User, Calculation); services depend on these, not on ORM queries
    - Implementations provided by infrastructure/repositories.py via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, tests can pass in-memory fakes
    - Async in Protocol: implementations do IO; the pure rules they feed are never async
    - UserRepository.create relies on the store's unique constraint for email and
      raises EmailAlreadyRegisteredError itself (no check-then-insert race)
"""

from datetime import datetime
from typing import Protocol

from liquidator.core.domain_types import CalculationId, CalculationType, UserId


class UserLike(Protocol):
    """Structural contract for stored users handed to services."""
    id: UserId
    email: str
    full_name: str
    password_hash: str
    email_verified: bool
    verification_code: str | None
    verification_code_expires: datetime | None
    created_at: datetime


class CalculationLike(Protocol):
    """Structural contract for stored ledger records."""
    id: CalculationId
    user_id: UserId
    type: str
    title: str
    input_data: dict
    result_data: dict
    status: str
    error_message: str | None
    created_at: datetime


class UserRepository(Protocol):
    """Contract for identity persistence — implemented by shell."""
    async def get_by_id(self, user_id: UserId) -> UserLike | None: ...
    async def get_by_email(self, email: str) -> UserLike | None: ...
    async def create(
        self,
        *,
        email: str,
        password_hash: str,
        full_name: str,
        verification_code: str,
        verification_code_expires: datetime,
    ) -> UserLike: ...
    async def set_verification_code(
        self, user_id: UserId, code: str, expires: datetime,
    ) -> None: ...
    async def mark_verified(self, user_id: UserId) -> None: ...


class CalculationRepository(Protocol):
    """Contract for ledger persistence — implemented by shell."""
    async def count_for(
        self, user_id: UserId, calculation_type: CalculationType,
    ) -> int: ...
    async def add(
        self,
        *,
        user_id: UserId,
        calculation_type: CalculationType,
        title: str,
        input_data: dict,
        result_data: dict,
    ) -> CalculationLike: ...
    async def list_for(
        self, user_id: UserId, calculation_type: CalculationType, limit: int,
    ) -> list[CalculationLike]: ...
    async def rename(self, calculation_id: CalculationId, title: str) -> CalculationLike | None: ...
    async def delete_all_for(self, user_id: UserId) -> int: ...
