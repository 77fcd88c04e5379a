"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - UserId, CalculationId wrap UUIDs — never use bare UUID in domain logic
    - All valid states encoded as Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON and to String DB columns without custom encoders
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", UUID)
CalculationId = NewType("CalculationId", UUID)


# ─── Enums ───────────────────────────────────────────────────────

class VerificationState(str, Enum):
    """Identity lifecycle — VERIFIED is terminal, login is a query not a transition."""
    UNREGISTERED = "unregistered"
    PENDING_VERIFICATION = "pending_verification"
    VERIFIED = "verified"


class CalculationType(str, Enum):
    """Ledger discriminator — one value per calculator the ledger records."""
    LIQUIDATION_TARGET = "liquidation-target"

    @property
    def label(self) -> str:
        """Display label used in default ledger titles."""
        return _TYPE_LABELS[self]


_TYPE_LABELS = {
    CalculationType.LIQUIDATION_TARGET: "Liquidation",
}


class CalculationStatus(str, Enum):
    """Ledger record outcome — error_message is set only for ERROR."""
    COMPLETED = "completed"
    ERROR = "error"
