"""Error Hierarchy — typed, categorized exceptions for all Harbor Quest failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Usage errors (bad coordinate, bad input, out-of-sequence round operation) surface immediately
    - PersistenceFailureError is non-fatal: callers keep the computed GameSession
    - to_response() produces the REST envelope; no internal details leaked

Design Decisions:
    - Single hierarchy with HarborQuestError base: FastAPI global handler catches all (ADR: uniform error shape)
    - ErrorContext as dataclass: rich observability without coupling to logging framework
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    EXTERNAL_API = "external_api"
    INTERNAL = "internal"
    CONFLICT = "conflict"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    session_id: str | None = None
    round_id: str | None = None
    user_message: str | None = None
    debug_info: dict[str, Any] | None = None


class HarborQuestError(Exception):
    """Base exception for all Harbor Quest errors."""

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
            "error": {
                "code": self.code,
                "message": self.context.user_message or self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "session_id": self.context.session_id,
                    "round_id": self.context.round_id,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class InvalidCoordinateError(HarborQuestError):
    """Latitude or longitude outside the valid range."""
    def __init__(
        self, latitude: float, longitude: float, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Coordinate ({latitude}, {longitude}) is out of range: "
            f"latitude must be in [-90, 90], longitude in [-180, 180]",
            "INVALID_COORDINATE", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.latitude = latitude
        self.longitude = longitude


class InvalidInputError(HarborQuestError):
    """Numeric input rejected (negative distance/time, bad limit, unknown answer)."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INVALID_INPUT", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.field = field


class InvalidRoundStateError(HarborQuestError):
    """Operation attempted out of sequence (e.g. guessing twice)."""
    def __init__(
        self, operation: str, phase: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Cannot {operation} while round is {phase}",
            "INVALID_ROUND_STATE", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )
        self.operation = operation
        self.phase = phase


class CatalogEmptyError(HarborQuestError):
    """No harbors/questions available for the requested difficulty."""
    def __init__(
        self, catalog: str, difficulty: str | None = None,
        context: ErrorContext | None = None,
    ):
        scope = f" for difficulty '{difficulty}'" if difficulty else ""
        super().__init__(
            f"No {catalog} available{scope}",
            "CATALOG_EMPTY", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 422,
        )
        self.catalog = catalog
        self.difficulty = difficulty


class ResourceNotFoundError(HarborQuestError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class PersistenceFailureError(HarborQuestError):
    """External save of a session result failed."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"Session result could not be saved: {message}",
            "PERSISTENCE_FAILURE", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.WARNING, context, 503,
        )


class DatabaseError(HarborQuestError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
