"""Calculation Schemas — calculator input validation and ledger request bodies.

Invariants:
    - LiquidationInputData rejects non-positive units/target and out-of-range rates
      before the calculator runs (these become 400s, never ledger records)
    - Numbers must be finite: NaN/Infinity are rejected at the boundary

Design Decisions:
    - inputData also accepted as calculationData (older clients send that key)
    - userId kept as a string on history/clear: malformed or unknown ids resolve to
      nobody there instead of failing
"""

from uuid import UUID

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from liquidator.core.liquidation import LiquidationInput


class LiquidationInputData(BaseModel):
    model_config = ConfigDict(populate_by_name=True, allow_inf_nan=False)

    current_units: float = Field(alias="currentUnits", gt=0)
    purchase_price: float = Field(alias="purchasePrice", ge=0)
    current_price: float = Field(alias="currentPrice", ge=0)
    commission_rate: float = Field(alias="commissionRate", ge=0, le=100)
    target_amount: float = Field(alias="targetAmount", gt=0)

    def to_domain(self) -> LiquidationInput:
        return LiquidationInput(
            current_units=self.current_units,
            purchase_price=self.purchase_price,
            current_price=self.current_price,
            commission_rate=self.commission_rate,
            target_amount=self.target_amount,
        )


class LiquidationRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: UUID = Field(alias="userId")
    input_data: LiquidationInputData = Field(
        validation_alias=AliasChoices("inputData", "calculationData", "input_data"),
    )


class ClearRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: str | None = Field(None, alias="userId")


class UpdateTitleRequest(BaseModel):
    id: UUID
    title: str = Field(max_length=1000)
