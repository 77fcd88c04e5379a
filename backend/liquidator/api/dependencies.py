"""Service Dependencies — FastAPI providers wiring repositories into services.

Invariants:
    - One AsyncSession per request; both repositories of a request share it
    - Settings come from get_settings() (overridable in tests via dependency_overrides)
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from liquidator.config import Settings, get_settings
from liquidator.infrastructure.database import get_db
from liquidator.infrastructure.repositories import (
    SqlCalculationRepository, SqlUserRepository,
)
from liquidator.services.calculation_ledger import CalculationLedger
from liquidator.services.verification_service import VerificationService


def get_verification_service(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> VerificationService:
    return VerificationService(
        SqlUserRepository(db),
        allowed_domain=settings.allowed_email_domain,
        code_length=settings.verification_code_length,
        code_ttl_minutes=settings.verification_code_ttl_minutes,
    )


def get_calculation_ledger(
    db: AsyncSession = Depends(get_db),
) -> CalculationLedger:
    return CalculationLedger(SqlUserRepository(db), SqlCalculationRepository(db))
