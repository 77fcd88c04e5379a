"""User ORM — persists an email-domain-restricted identity and its verification state.

Invariants:
    - email is unique (DB constraint) and stored normalized (trimmed, lower-cased)
    - password_hash is an argon2 encoded hash, never the plaintext
    - verification_code and verification_code_expires are both set or both NULL
    - email_verified=True implies no stored verification code

Design Decisions:
    - Uniqueness enforced by the unique index, not by a read-before-insert:
      concurrent registrations resolve to exactly one winner
    - cascade delete for calculations: the user exclusively owns its ledger
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from liquidator.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    """User aggregate root — owns all ledger records."""
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    email: Mapped[str] = mapped_column(
        String(320), nullable=False, unique=True, index=True,
    )
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    full_name: Mapped[str] = mapped_column(String(200), nullable=False)
    email_verified: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
    verification_code: Mapped[str | None] = mapped_column(
        String(12), nullable=True,
    )
    verification_code_expires: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow,
    )

    # Relationships
    calculations: Mapped[list["Calculation"]] = relationship(
        "Calculation", back_populates="user",
        cascade="all, delete-orphan", passive_deletes=True,
    )
