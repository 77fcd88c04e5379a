"""Calculation ORM — one immutable input/result snapshot in a user's ledger.

Invariants:
    - Always belongs to a User (user_id FK, ON DELETE CASCADE)
    - input_data/result_data are written once at creation and never updated
    - title is the only mutable field; its default number is fixed at creation
    - error_message is set only when status == "error"

Design Decisions:
    - JSON columns for snapshots: each calculator type stores its own shape
    - (user_id, type, created_at) index: serves both the title count and history listing
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Index, JSON, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from liquidator.core.domain_types import CalculationStatus
from liquidator.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Calculation(Base):
    """Ledger record — a persisted calculator run."""
    __tablename__ = "calculations"
    __table_args__ = (
        Index("ix_calculations_user_type_created", "user_id", "type", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    type: Mapped[str] = mapped_column(String(50), nullable=False)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    input_data: Mapped[dict] = mapped_column(JSON, nullable=False)
    result_data: Mapped[dict] = mapped_column(JSON, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=CalculationStatus.COMPLETED.value,
    )
    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow,
    )

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="calculations")
