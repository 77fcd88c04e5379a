"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - User is the aggregate root; calculations are scoped by user_id

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from liquidator.models.user import User  # noqa: F401
from liquidator.models.calculation import Calculation  # noqa: F401
