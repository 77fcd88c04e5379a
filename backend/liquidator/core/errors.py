"""Error Hierarchy — typed, categorized exceptions for all liquidation-planner failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are recoverable; infrastructure errors (500-level) are critical
    - to_response() produces the {success: false, error: {...}} REST envelope
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with LiquidatorError base: FastAPI global handler catches all
    - ErrorContext as dataclass: observability fields without coupling to the logging framework
    - CalculationNotSavedError separate from DatabaseError: the caller learns the
      result was computed but NOT recorded, distinct from "input rejected"
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    user_id: str | None = None
    calculation_id: str | None = None


class LiquidatorError(Exception):
    """Base exception for all liquidation-planner errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "success": False,
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
            },
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class InputValidationError(LiquidatorError):
    """Malformed, missing, or out-of-range input."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )
        self.field = field

    def to_response(self) -> dict:
        response = super().to_response()
        if self.field:
            response["error"]["field"] = self.field
        return response


class InvalidVerificationCodeError(LiquidatorError):
    """Supplied code does not match the stored one (or none is stored)."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Invalid verification code",
            "INVALID_VERIFICATION_CODE", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )


class VerificationCodeExpiredError(LiquidatorError):
    """Stored code matched but its expiry has passed."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Verification code has expired, request a new one",
            "VERIFICATION_CODE_EXPIRED", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )


class ResourceNotFoundError(LiquidatorError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, context, 404,
        )
        self.resource_type = resource_type


class EmailAlreadyRegisteredError(LiquidatorError):
    """Registration attempted with an email that already has an account."""
    def __init__(self, email: str, context: ErrorContext | None = None):
        super().__init__(
            f"A user with email '{email}' already exists",
            "EMAIL_ALREADY_REGISTERED", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, context, 409,
        )


class EmailAlreadyVerifiedError(LiquidatorError):
    """Code resend requested for an account that is already verified."""
    def __init__(self, email: str, context: ErrorContext | None = None):
        super().__init__(
            f"Email '{email}' is already verified",
            "EMAIL_ALREADY_VERIFIED", ErrorCategory.CONFLICT,
            ErrorSeverity.INFO, context, 409,
        )


class InvalidCredentialsError(LiquidatorError):
    """Password does not match the stored hash."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Invalid password",
            "INVALID_CREDENTIALS", ErrorCategory.UNAUTHORIZED,
            ErrorSeverity.WARNING, context, 401,
        )


class EmailNotVerifiedError(LiquidatorError):
    """Login attempted before the verification code was confirmed."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Email is not verified. Confirm the verification code first.",
            "EMAIL_NOT_VERIFIED", ErrorCategory.FORBIDDEN,
            ErrorSeverity.WARNING, context, 403,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(LiquidatorError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.operation = operation


class CalculationNotSavedError(LiquidatorError):
    """Result was computed but could not be recorded in the ledger."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Calculation was computed but could not be saved; it is not in your history",
            "CALCULATION_NOT_SAVED", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 500,
        )
