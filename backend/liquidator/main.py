"""Liquidation Planner API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map LiquidatorError → structured JSON responses
    - One CORSMiddleware wraps every route, preflight included
    - Database initialized on startup via lifespan context manager

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - SQLite databases get their tables created on startup; server databases are
      migrated with Alembic
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from liquidator.api.error_handlers import register_error_handlers
from liquidator.api.routes import auth, calculations, health
from liquidator.config import get_settings
from liquidator.infrastructure.database import init_db
from liquidator.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    manager = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    if settings.database_url.startswith("sqlite"):
        await manager.create_all()
    if settings.expose_verification_code:
        logger.warning("Verification codes are returned in API responses")
    logger.info("Liquidation Planner API started")
    yield
    await manager.dispose()
    logger.info("Liquidation Planner API shutting down")


app = FastAPI(
    title="Liquidation Planner API", version="1.0.0", lifespan=lifespan,
)

# CORS — configured from settings, not hardcoded
settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-User-Email"],
)

# Routes — explicit registration
app.include_router(health.router)
app.include_router(auth.router)
app.include_router(calculations.router)

register_error_handlers(app)
