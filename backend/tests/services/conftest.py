"""Service test fixtures — async DB, repositories, services, and FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database with foreign keys enforced
    - get_db and get_settings overridden for route-level dependency injection; request
      sessions still come from DatabaseSessionManager.session()
    - db_manager patched so the readiness probe sees the test database
    - Services get a controllable clock (frozen_clock) for expiry tests

Design Decisions:
    - SQLite in-memory: fast, no external dependency; cascade still exercised
      because build_engine turns on PRAGMA foreign_keys
"""

from datetime import datetime, timedelta, timezone

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

import liquidator.infrastructure.database as db_module
from liquidator.config import Settings, get_settings
from liquidator.db.base import Base
from liquidator.infrastructure.database import (
    DatabaseSessionManager, build_engine, get_db,
)
from liquidator.infrastructure.repositories import (
    SqlCalculationRepository, SqlUserRepository,
)
from liquidator.main import app
import liquidator.models  # noqa: F401
from liquidator.services.calculation_ledger import CalculationLedger
from liquidator.services.verification_service import VerificationService

DOMAIN = "fl1capital.com"


class FrozenClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
async def test_engine():
    engine = build_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def test_settings():
    return Settings(
        _env_file=None,
        database_url="sqlite+aiosqlite:///:memory:",
        allowed_email_domain=DOMAIN,
        expose_verification_code=True,
    )


@pytest.fixture
def frozen_clock():
    return FrozenClock(datetime(2026, 3, 1, 9, 30, tzinfo=timezone.utc))


@pytest.fixture
def verification_service(test_db, frozen_clock):
    return VerificationService(
        SqlUserRepository(test_db),
        allowed_domain=DOMAIN,
        code_length=6,
        code_ttl_minutes=10,
        clock=frozen_clock,
    )


@pytest.fixture
def ledger(test_db):
    return CalculationLedger(
        SqlUserRepository(test_db), SqlCalculationRepository(test_db),
    )


@pytest.fixture
async def verified_user(verification_service):
    """A registered and verified user (password 's3cret-pass')."""
    issued = await verification_service.register(
        "ana@fl1capital.com", "s3cret-pass", "Ana Silva",
    )
    await verification_service.verify_code("ana@fl1capital.com", issued.code)
    return issued.user_id


@pytest.fixture
def session_manager(test_engine, test_session_factory):
    """DatabaseSessionManager bound to the test engine."""
    manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    manager.engine = test_engine
    manager._session_factory = test_session_factory
    return manager


@pytest.fixture
async def client(session_manager, test_settings):
    """FastAPI test client with DB and settings dependencies overridden."""
    manager = session_manager

    async def override_get_db():
        async with manager.session() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: test_settings

    original_manager = db_module.db_manager
    db_module.db_manager = manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager
