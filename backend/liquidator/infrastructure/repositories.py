"""SQLAlchemy Repositories — UserRepository and CalculationRepository over an AsyncSession.

Invariants:
    - Every mutating method commits its own unit of work (one operation = one commit)
    - Duplicate email on insert surfaces as EmailAlreadyRegisteredError, decided by
      the unique constraint at flush time
    - list_for orders by created_at descending and never returns more than `limit` rows
    - delete_all_for removes rows across all calculation types and returns the count

Design Decisions:
    - Bulk DELETE statement for clear: one round-trip regardless of ledger size
    - Returned objects are ORM instances; services only rely on the *Like Protocol fields
"""

import logging
from datetime import datetime

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from liquidator.core.domain_types import (
    CalculationId, CalculationStatus, CalculationType, UserId,
)
from liquidator.core.errors import (
    EmailAlreadyRegisteredError, ResourceNotFoundError,
)
from liquidator.models.calculation import Calculation
from liquidator.models.user import User

logger = logging.getLogger(__name__)


class SqlUserRepository:
    """UserRepository backed by the `users` table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, user_id: UserId) -> User | None:
        return await self.db.get(User, user_id)

    async def get_by_email(self, email: str) -> User | None:
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def create(
        self,
        *,
        email: str,
        password_hash: str,
        full_name: str,
        verification_code: str,
        verification_code_expires: datetime,
    ) -> User:
        user = User(
            email=email,
            password_hash=password_hash,
            full_name=full_name,
            email_verified=False,
            verification_code=verification_code,
            verification_code_expires=verification_code_expires,
        )
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            logger.info("Registration rejected: email already present")
            raise EmailAlreadyRegisteredError(email)
        return user

    async def set_verification_code(
        self, user_id: UserId, code: str, expires: datetime,
    ) -> None:
        user = await self._require(user_id)
        user.verification_code = code
        user.verification_code_expires = expires
        await self.db.commit()

    async def mark_verified(self, user_id: UserId) -> None:
        user = await self._require(user_id)
        user.email_verified = True
        user.verification_code = None
        user.verification_code_expires = None
        await self.db.commit()

    async def _require(self, user_id: UserId) -> User:
        user = await self.db.get(User, user_id)
        if user is None:
            raise ResourceNotFoundError("User", str(user_id))
        return user


class SqlCalculationRepository:
    """CalculationRepository backed by the `calculations` table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def count_for(
        self, user_id: UserId, calculation_type: CalculationType,
    ) -> int:
        result = await self.db.execute(
            select(func.count())
            .select_from(Calculation)
            .where(Calculation.user_id == user_id)
            .where(Calculation.type == calculation_type.value),
        )
        return result.scalar_one()

    async def add(
        self,
        *,
        user_id: UserId,
        calculation_type: CalculationType,
        title: str,
        input_data: dict,
        result_data: dict,
    ) -> Calculation:
        calculation = Calculation(
            user_id=user_id,
            type=calculation_type.value,
            title=title,
            input_data=input_data,
            result_data=result_data,
            status=CalculationStatus.COMPLETED.value,
        )
        self.db.add(calculation)
        await self.db.commit()
        return calculation

    async def list_for(
        self, user_id: UserId, calculation_type: CalculationType, limit: int,
    ) -> list[Calculation]:
        result = await self.db.execute(
            select(Calculation)
            .where(Calculation.user_id == user_id)
            .where(Calculation.type == calculation_type.value)
            .order_by(Calculation.created_at.desc())
            .limit(limit),
        )
        return list(result.scalars().all())

    async def rename(
        self, calculation_id: CalculationId, title: str,
    ) -> Calculation | None:
        calculation = await self.db.get(Calculation, calculation_id)
        if calculation is None:
            return None
        calculation.title = title
        await self.db.commit()
        return calculation

    async def delete_all_for(self, user_id: UserId) -> int:
        result = await self.db.execute(
            delete(Calculation).where(Calculation.user_id == user_id),
        )
        await self.db.commit()
        return result.rowcount or 0
