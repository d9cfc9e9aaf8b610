"""Error Hierarchy — typed, categorized exceptions for every admin API failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - http_status is what the global handler returns to the client
    - create_error(status_code, message) is the single entry point used by services
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with TradeDeskError base: one FastAPI handler serializes all of them
    - ErrorContext as dataclass: carries request/record identifiers for observability
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
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Context attached to an error for logs and the response envelope."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    request_id: str | None = None
    resource: str | None = None
    record_id: str | None = None
    debug_info: dict[str, Any] | None = None


class TradeDeskError(Exception):
    """Base exception for all admin API errors."""

    def __init__(
        self,
        message: str,
        code: str = "ERROR",
        category: ErrorCategory = ErrorCategory.INTERNAL,
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

    @property
    def is_client_error(self) -> bool:
        return 400 <= self.http_status < 500

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "status_code": self.http_status,
                "timestamp": self.context.timestamp.isoformat(),
            }
        }


# ─── Client Errors (400-level) ──────────────────────────────────

class BadRequestError(TradeDeskError):
    """Request is well-formed but violates a business rule."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "BAD_REQUEST", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )


class UnauthorizedError(TradeDeskError):
    """Missing or invalid credentials."""
    def __init__(self, message: str = "Unauthorized", context: ErrorContext | None = None):
        super().__init__(
            message, "UNAUTHORIZED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


class ForbiddenError(TradeDeskError):
    """Authenticated but lacking the required permission."""
    def __init__(self, message: str = "Forbidden", context: ErrorContext | None = None):
        super().__init__(
            message, "FORBIDDEN", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, context, 403,
        )


class ResourceNotFoundError(TradeDeskError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str | None = None,
        context: ErrorContext | None = None,
    ):
        message = (
            f"{resource_type} '{resource_id}' not found" if resource_id
            else f"{resource_type} not found"
        )
        super().__init__(
            message, "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, context, 404,
        )
        self.resource_type = resource_type


class ConflictError(TradeDeskError):
    """Record already exists or is in a conflicting state."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, context, 409,
        )


# ─── Server Errors (500-level) ──────────────────────────────────

class InternalError(TradeDeskError):
    """Unexpected server-side failure."""
    def __init__(self, message: str = "Internal Server Error", context: ErrorContext | None = None):
        super().__init__(
            message, "INTERNAL_ERROR", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, context, 500,
        )


class DatabaseError(TradeDeskError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


_STATUS_ERRORS = {
    400: BadRequestError,
    401: UnauthorizedError,
    403: ForbiddenError,
    409: ConflictError,
    500: InternalError,
}


def create_error(status_code: int, message: str) -> TradeDeskError:
    """Build the typed error for an HTTP status code.

    404 keeps the message verbatim ("Offering not found") instead of the
    "<type> '<id>' not found" phrasing of ResourceNotFoundError's own ctor.
    """
    if status_code == 404:
        err = ResourceNotFoundError("Resource")
        err.message = message
        err.args = (message,)
        return err
    error_cls = _STATUS_ERRORS.get(status_code)
    if error_cls is not None:
        return error_cls(message)
    severity = ErrorSeverity.WARNING if status_code < 500 else ErrorSeverity.CRITICAL
    return TradeDeskError(
        message, f"HTTP_{status_code}", ErrorCategory.INTERNAL,
        severity, None, status_code,
    )
