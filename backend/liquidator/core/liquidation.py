"""Liquidation Calculator — units to sell so that net proceeds hit a target amount.

Invariants:
    - Pure and deterministic: plain values in, plain values out, no IO
    - Commission is levied on per-unit profit only and never goes below zero
    - units_to_sell is always within [0, current_units]
    - No division can produce inf/NaN: degenerate divisors have defined results
    - Recommendations are appended in a fixed order (target match, remaining
      holdings, commission, profit, retained share, price improvement)

Design Decisions:
    - Frozen dataclasses for input/result: hashable, immutable snapshots
    - to_dict() emits the camelCase keys stored in the ledger and sent to clients
    - Non-positive net amount per unit sells everything and says so, instead of
      propagating an infinite unit count
"""

from dataclasses import dataclass, field

EXACT_MATCH_TOLERANCE = 1.0
HIGH_COMMISSION_RATE = 10.0
SIGNIFICANT_HOLDINGS_SHARE = 0.5


@dataclass(frozen=True)
class LiquidationInput:
    """Holding and market data for one sell plan."""
    current_units: float
    purchase_price: float
    current_price: float
    commission_rate: float
    target_amount: float

    def to_dict(self) -> dict:
        return {
            "currentUnits": self.current_units,
            "purchasePrice": self.purchase_price,
            "currentPrice": self.current_price,
            "commissionRate": self.commission_rate,
            "targetAmount": self.target_amount,
        }


@dataclass(frozen=True)
class LiquidationResult:
    """Computed sell plan. Per-unit figures are kept for display."""
    units_to_sell: float
    gross_profit: float
    commission_amount: float
    net_profit: float
    total_amount: float
    remaining_units: float
    remaining_value: float
    profit_percentage: float
    profit_per_unit: float
    commission_per_unit: float
    net_amount_per_unit: float
    recommendations: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "unitsToSell": self.units_to_sell,
            "grossProfit": self.gross_profit,
            "commissionAmount": self.commission_amount,
            "netProfit": self.net_profit,
            "totalAmount": self.total_amount,
            "remainingUnits": self.remaining_units,
            "remainingValue": self.remaining_value,
            "profitPercentage": self.profit_percentage,
            "profitPerUnit": self.profit_per_unit,
            "commissionPerUnit": self.commission_per_unit,
            "netAmountPerUnit": self.net_amount_per_unit,
            "recommendations": list(self.recommendations),
        }


def calculate_liquidation(data: LiquidationInput) -> LiquidationResult:
    """Plan how many units to sell to net data.target_amount after commission."""
    profit_per_unit = data.current_price - data.purchase_price
    commission_per_unit = max(0.0, profit_per_unit * data.commission_rate / 100)
    net_amount_per_unit = data.current_price - commission_per_unit

    no_price_improvement = net_amount_per_unit <= 0
    if no_price_improvement:
        units_to_sell = data.current_units
    else:
        units_to_sell = _clamp(
            data.target_amount / net_amount_per_unit, 0.0, data.current_units,
        )

    total_amount = units_to_sell * net_amount_per_unit
    gross_profit = units_to_sell * profit_per_unit
    commission_amount = units_to_sell * commission_per_unit
    net_profit = gross_profit - commission_amount
    remaining_units = data.current_units - units_to_sell
    remaining_value = remaining_units * data.current_price

    cost_of_sold_units = units_to_sell * data.purchase_price
    profit_percentage = (
        net_profit / cost_of_sold_units * 100 if cost_of_sold_units != 0 else 0.0
    )

    recommendations = build_recommendations(
        data,
        total_amount=total_amount,
        remaining_units=remaining_units,
        remaining_value=remaining_value,
        profit_per_unit=profit_per_unit,
        no_price_improvement=no_price_improvement,
    )

    return LiquidationResult(
        units_to_sell=units_to_sell,
        gross_profit=gross_profit,
        commission_amount=commission_amount,
        net_profit=net_profit,
        total_amount=total_amount,
        remaining_units=remaining_units,
        remaining_value=remaining_value,
        profit_percentage=profit_percentage,
        profit_per_unit=profit_per_unit,
        commission_per_unit=commission_per_unit,
        net_amount_per_unit=net_amount_per_unit,
        recommendations=recommendations,
    )


def build_recommendations(
    data: LiquidationInput,
    *,
    total_amount: float,
    remaining_units: float,
    remaining_value: float,
    profit_per_unit: float,
    no_price_improvement: bool = False,
) -> list[str]:
    """Human-readable notes for a computed plan, in fixed order."""
    notes: list[str] = []

    difference = total_amount - data.target_amount
    if abs(difference) <= EXACT_MATCH_TOLERANCE:
        notes.append("Exact match: proceeds equal the target within $1")
    elif difference < 0:
        notes.append(f"Shortfall: ${-difference:,.2f} more is needed to reach the target")
    else:
        notes.append(f"Surplus: proceeds exceed the target by ${difference:,.2f}")

    if remaining_units > 0:
        notes.append(
            f"{remaining_units:,.2f} units remain, worth {format_usd(remaining_value)}",
        )
    else:
        notes.append("All units will be sold")

    if data.commission_rate > HIGH_COMMISSION_RATE:
        notes.append(
            f"High commission ({data.commission_rate:g}%) significantly reduces profit",
        )

    if profit_per_unit <= 0:
        notes.append("Current price is not above purchase price: there is no profit")
    else:
        notes.append(f"Profit per unit: {format_usd(profit_per_unit)}")

    if data.current_units > 0 and remaining_units / data.current_units > SIGNIFICANT_HOLDINGS_SHARE:
        notes.append("A significant share of holdings is retained")

    if no_price_improvement:
        notes.append(
            "Net amount per unit is not positive: selling cannot reach the target, "
            "the plan sells all units",
        )

    return notes


def format_usd(amount: float) -> str:
    """Whole-dollar amount with thousands separators, e.g. $1,234."""
    if amount < 0:
        return f"-${-amount:,.0f}"
    return f"${amount:,.0f}"


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(value, high))
