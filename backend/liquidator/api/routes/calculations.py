"""Calculation Routes — run the liquidation calculator and manage the ledger.

Invariants:
    - POST /liquidation: 400 for bad input, 404 for unknown user, 500
      CALCULATION_NOT_SAVED when computed but not recorded
    - GET /history and POST /clear never fail for an unresolvable user
      (empty list / no-op); X-User-Email is the fallback only when no userId is sent
    - GET /history answers [] for a type the ledger does not record
    - Stored snapshots are returned as structured JSON, not strings

Design Decisions:
    - GET /liquidation is the compact summary (id, title, createdAt, resultData);
      GET /history is the full record list for any calculation type
"""

import logging

from fastapi import APIRouter, Depends, Header, Query

from liquidator.api.dependencies import get_calculation_ledger
from liquidator.config import Settings, get_settings
from liquidator.core.domain_types import CalculationType
from liquidator.core.errors import InputValidationError
from liquidator.core.repository_protocols import CalculationLike
from liquidator.schemas.calculation import (
    ClearRequest, LiquidationRequest, UpdateTitleRequest,
)
from liquidator.services.calculation_ledger import CalculationLedger, parse_user_id

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/calculations", tags=["calculations"])


def _serialize(calc: CalculationLike) -> dict:
    return {
        "id": str(calc.id),
        "title": calc.title,
        "type": calc.type,
        "inputData": calc.input_data,
        "resultData": calc.result_data,
        "status": calc.status,
        "errorMessage": calc.error_message,
        "createdAt": calc.created_at.isoformat(),
    }


@router.post("/liquidation")
async def create_liquidation(
    body: LiquidationRequest,
    ledger: CalculationLedger = Depends(get_calculation_ledger),
):
    """Compute a sell plan and record it in the user's ledger."""
    recorded = await ledger.record_liquidation(
        parse_user_id(body.user_id), body.input_data.to_domain(),
    )
    return {
        "success": True,
        "calculationId": str(recorded.calculation_id),
        "title": recorded.title,
        "result": recorded.result,
    }


@router.get("/liquidation")
async def list_liquidation_summaries(
    user_id: str | None = Query(None, alias="userId"),
    ledger: CalculationLedger = Depends(get_calculation_ledger),
    settings: Settings = Depends(get_settings),
):
    """Compact list of the latest liquidation plans."""
    if not user_id:
        raise InputValidationError("userId is required", "userId")
    calculations = await ledger.list_recent(
        user_id,
        CalculationType.LIQUIDATION_TARGET,
        settings.summary_limit,
    )
    return {
        "success": True,
        "calculations": [
            {
                "id": str(c.id),
                "title": c.title,
                "createdAt": c.created_at.isoformat(),
                "resultData": c.result_data,
            }
            for c in calculations
        ],
    }


@router.get("/history")
async def calculation_history(
    user_id: str | None = Query(None, alias="userId"),
    calculation_type: str = Query(
        CalculationType.LIQUIDATION_TARGET.value, alias="type",
    ),
    x_user_email: str | None = Header(None),
    ledger: CalculationLedger = Depends(get_calculation_ledger),
    settings: Settings = Depends(get_settings),
):
    """Most recent ledger records of one type, newest first."""
    calculations = await ledger.list_recent(
        user_id,
        calculation_type,
        settings.history_limit,
        email=x_user_email,
    )
    return {
        "success": True,
        "calculations": [_serialize(c) for c in calculations],
    }


@router.post("/clear")
async def clear_history(
    body: ClearRequest | None = None,
    x_user_email: str | None = Header(None),
    ledger: CalculationLedger = Depends(get_calculation_ledger),
):
    """Delete every ledger record of the user, across calculation types."""
    deleted = await ledger.clear_all(
        body.user_id if body else None,
        email=x_user_email,
    )
    return {
        "success": True,
        "message": "Calculation history cleared",
        "deleted": deleted,
    }


@router.post("/update-title")
async def update_title(
    body: UpdateTitleRequest,
    ledger: CalculationLedger = Depends(get_calculation_ledger),
):
    calculation = await ledger.update_title(body.id, body.title)
    return {
        "success": True,
        "calculation": {"id": str(calculation.id), "title": calculation.title},
    }
