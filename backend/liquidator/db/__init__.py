"""Database Infrastructure — SQLAlchemy declarative Base shared by all ORM models.

Invariants:
    - Every model inherits from db.base.Base, so one metadata drives create_all and Alembic

Design Decisions:
    - Engine and sessions live in infrastructure/database.py; this package only owns the Base
"""
