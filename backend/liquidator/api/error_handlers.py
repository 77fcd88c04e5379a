"""Error Handlers — global exception handlers for the liquidation-planner API.

Invariants:
    - LiquidatorError → structured JSON with error code, message, severity
    - RequestValidationError → 400 with field-level error details
    - Exception (catch-all) → 500, never leaks internal details

Design Decisions:
    - Three-layer handler: domain (LiquidatorError), validation (Pydantic), catch-all (Exception)
    - 4xx domain errors logged at warning, 5xx at error: client mistakes are not incidents
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from liquidator.core.errors import ErrorSeverity, LiquidatorError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_domain_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _register_domain_error_handler(app: FastAPI) -> None:
    """Register domain/infrastructure error handler."""

    @app.exception_handler(LiquidatorError)
    async def liquidator_error_handler(request: Request, exc: LiquidatorError):
        """Handle all domain/infrastructure errors."""
        level = logging.ERROR if exc.http_status >= 500 else logging.WARNING
        logger.log(
            level,
            f"LiquidatorError: {exc.message}",
            extra={
                "error_code": exc.code,
                "path": request.url.path,
                "user_id": exc.context.user_id,
                "calculation_id": exc.context.calculation_id,
            },
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_validation_error_handler(app: FastAPI) -> None:
    """Register Pydantic validation error handler."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle Pydantic validation errors."""
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_build_validation_error_response(exc),
        )


def _register_generic_error_handler(app: FastAPI) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "success": False,
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": "An unexpected error occurred",
                    "category": "internal",
                    "severity": ErrorSeverity.CRITICAL.value,
                },
            },
        )


def _build_validation_error_response(exc: RequestValidationError) -> dict:
    """Build structured validation error response."""
    return {
        "success": False,
        "error": {
            "code": "VALIDATION_ERROR",
            "message": "Invalid request data",
            "category": "validation",
            "severity": ErrorSeverity.WARNING.value,
            "details": [
                {
                    "field": ".".join(str(loc) for loc in e["loc"]),
                    "message": e["msg"],
                    "type": e["type"],
                }
                for e in exc.errors()
            ],
        },
    }
