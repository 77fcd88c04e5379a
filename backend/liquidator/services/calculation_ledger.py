"""Calculation Ledger — create, list, rename, and clear persisted calculator runs.

Invariants:
    - create() requires a known user; the title number is prior (user, type) count + 1
    - create() is all-or-nothing: a persistence failure after computing raises
      CalculationNotSavedError and never reports a calculation id
    - list_recent() returns [] (not an error) when the user cannot be resolved or the
      calculation type is not one the ledger records
    - A supplied but malformed user id resolves to nobody; the email fallback only
      applies when no id is supplied at all
    - update_title() only touches the title; a blank title leaves the record unchanged
    - clear_all() on an unresolvable user is a successful no-op

Design Decisions:
    - User resolution accepts an id or an email: history and clear fall back to the
      X-User-Email header when the client sends no id
    - Title numbering reads a live count (no lock): concurrent creates may share N
"""

import logging
from dataclasses import dataclass
from uuid import UUID

from liquidator.core.domain_types import CalculationId, CalculationType, UserId
from liquidator.core.errors import (
    CalculationNotSavedError,
    ErrorContext,
    ResourceNotFoundError,
)
from liquidator.core.ledger_titles import clean_title, default_title
from liquidator.core.liquidation import (
    LiquidationInput,
    LiquidationResult,
    calculate_liquidation,
)
from liquidator.core.repository_protocols import (
    CalculationLike,
    CalculationRepository,
    UserRepository,
)
from liquidator.core.verification import normalize_email

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecordedCalculation:
    """Id of the stored ledger record plus the result for immediate display."""
    calculation_id: CalculationId
    title: str
    result: dict


class CalculationLedger:
    """Per-user ledger of calculator runs."""

    def __init__(self, users: UserRepository, calculations: CalculationRepository):
        self.users = users
        self.calculations = calculations

    async def record_liquidation(
        self, user_id: UserId, data: LiquidationInput,
    ) -> RecordedCalculation:
        """Run the liquidation calculator and persist the snapshot."""
        result: LiquidationResult = calculate_liquidation(data)
        return await self.create(
            user_id,
            CalculationType.LIQUIDATION_TARGET,
            data.to_dict(),
            result.to_dict(),
        )

    async def create(
        self,
        user_id: UserId,
        calculation_type: CalculationType,
        input_data: dict,
        result_data: dict,
    ) -> RecordedCalculation:
        await self._require_user(user_id)
        context = ErrorContext(user_id=str(user_id))
        try:
            prior = await self.calculations.count_for(user_id, calculation_type)
            record = await self.calculations.add(
                user_id=user_id,
                calculation_type=calculation_type,
                title=default_title(calculation_type, prior),
                input_data=input_data,
                result_data=result_data,
            )
        except Exception as e:
            logger.error(
                f"Failed to record {calculation_type.value} calculation: {e}",
                extra={"user_id": str(user_id)},
                exc_info=True,
            )
            raise CalculationNotSavedError(context)

        logger.info(
            f"Recorded '{record.title}'",
            extra={"user_id": str(user_id), "calculation_id": str(record.id)},
        )
        return RecordedCalculation(
            calculation_id=record.id, title=record.title, result=result_data,
        )

    async def list_recent(
        self,
        user_id: str | UUID | None,
        calculation_type: CalculationType | str,
        limit: int,
        *,
        email: str | None = None,
    ) -> list[CalculationLike]:
        try:
            known_type = CalculationType(calculation_type)
        except ValueError:
            return []
        resolved = await self.resolve_user_id(user_id, email)
        if resolved is None:
            return []
        return await self.calculations.list_for(resolved, known_type, limit)

    async def update_title(
        self, calculation_id: CalculationId, title: str,
    ) -> CalculationLike:
        cleaned = clean_title(title)
        record = await self.calculations.rename(calculation_id, cleaned)
        if record is None:
            raise ResourceNotFoundError(
                "Calculation", str(calculation_id),
                ErrorContext(calculation_id=str(calculation_id)),
            )
        logger.info(
            "Calculation renamed", extra={"calculation_id": str(calculation_id)},
        )
        return record

    async def clear_all(
        self, user_id: str | UUID | None, *, email: str | None = None,
    ) -> int:
        resolved = await self.resolve_user_id(user_id, email)
        if resolved is None:
            return 0
        deleted = await self.calculations.delete_all_for(resolved)
        logger.info(
            f"Cleared {deleted} calculation(s)", extra={"user_id": str(resolved)},
        )
        return deleted

    async def resolve_user_id(
        self, user_id: str | UUID | None, email: str | None = None,
    ) -> UserId | None:
        """Known user id from an explicit id or, when none is supplied, an email."""
        if user_id is not None and user_id != "":
            parsed = parse_user_id(user_id)
            if parsed is None:
                return None
            user = await self.users.get_by_id(parsed)
            return user.id if user is not None else None
        normalized = normalize_email(email or "")
        if not normalized:
            return None
        user = await self.users.get_by_email(normalized)
        return user.id if user is not None else None

    async def _require_user(self, user_id: UserId) -> None:
        if await self.users.get_by_id(user_id) is None:
            raise ResourceNotFoundError("User", str(user_id))


def parse_user_id(raw: str | UUID | None) -> UserId | None:
    """UserId from a client-supplied value; malformed ids resolve to nobody."""
    if raw is None or raw == "":
        return None
    if isinstance(raw, UUID):
        return UserId(raw)
    try:
        return UserId(UUID(str(raw)))
    except ValueError:
        return None
