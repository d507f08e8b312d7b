"""Error Hierarchy — typed, categorized exceptions for every dashboard failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Validation/auth errors (400-level) are recoverable; persistence errors (500-level) are critical
    - to_response() produces the REST envelope
    - No internal details (SQL, driver messages) leaked in user-facing messages

Design Decisions:
    - Single hierarchy with DashboardError base: FastAPI global handler catches all
    - AuthenticationError carries a `type` discriminant so callers map it without isinstance ladders
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
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    AUTHENTICATION = "authentication"
    CONFLICT = "conflict"
    INTERNAL = "internal"


class AuthErrorType(str, Enum):
    """Discriminant carried by AuthenticationError."""
    CREDENTIALS_SIGNIN = "CredentialsSignin"
    CALLBACK_ROUTE_ERROR = "CallbackRouteError"
    INVALID_PROVIDER = "InvalidProvider"
    CONFIGURATION = "Configuration"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    path: str | None = None
    operation: str | None = None
    resource_id: str | None = None
    debug_info: dict[str, Any] | None = None


class DashboardError(Exception):
    """Base exception for all dashboard errors."""

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
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "path": self.context.path,
                    "operation": self.context.operation,
                    "resource_id": self.context.resource_id,
                },
            }
        }


# ─── Request Errors (400-level) ─────────────────────────────────

class FormValidationError(DashboardError):
    """Submitted form failed schema validation."""
    def __init__(
        self,
        message: str,
        fields: dict[str, list[str]] | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )
        self.fields = fields or {}


class ResourceNotFoundError(DashboardError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class AuthenticationError(DashboardError):
    """Sign-in failed. `type` tells credential mismatch apart from everything else."""
    def __init__(
        self,
        type: AuthErrorType,
        message: str | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message or f"Authentication failed ({type.value})",
            "AUTHENTICATION_ERROR", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )
        self.type = type


class NotAuthenticatedError(DashboardError):
    """Protected route called without a signed-in user."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Sign in required", "NOT_AUTHENTICATED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.INFO, context, 401,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class PersistenceError(DashboardError):
    """Database statement failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class DuplicateRecordError(PersistenceError):
    """Unique constraint rejected the write."""
    def __init__(self, operation: str, context: ErrorContext | None = None):
        super().__init__("Unique constraint violated", operation, context)
        self.code = "DUPLICATE_RECORD"
        self.category = ErrorCategory.CONFLICT
        self.severity = ErrorSeverity.ERROR
        self.http_status = 409
