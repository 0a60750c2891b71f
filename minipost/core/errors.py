"""Error Hierarchy — typed, categorized exceptions for every request failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Client errors (400-level) are recoverable; store/template errors (500-level) are critical
    - to_response() produces the JSON error envelope returned to the caller
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with PostServerError base: the dispatcher catches all of it in one place
    - Absence of a post is NOT an error: the store returns None and the handler answers 404
    - ErrorContext as dataclass: rich observability without coupling to logging framework
"""

from dataclasses import dataclass, field
from enum import Enum
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
    DATABASE = "database"
    TEMPLATE = "template"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Where the failure happened — surfaced in the response envelope and logs."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    field: str | None = None
    operation: str | None = None
    template: str | None = None


class PostServerError(Exception):
    """Base exception for all minipost errors."""

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
                    "field": self.context.field,
                    "operation": self.context.operation,
                    "template": self.context.template,
                },
            }
        }


# ─── Client Errors (400-level) ──────────────────────────────────

class MalformedRequestError(PostServerError):
    """Body unreadable, required form field missing, or id not parseable."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.field = field
        super().__init__(
            message, "MALFORMED_REQUEST", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, ctx, 400,
        )
        self.field = field


# ─── Server Errors (500-level) ──────────────────────────────────

class StoreUnavailableError(PostServerError):
    """Persistence handle unreachable or the underlying statement failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.operation = operation
        super().__init__(
            f"Post store {operation} failed: {message}",
            "STORE_UNAVAILABLE", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, ctx, 503,
        )
        self.operation = operation


class TemplateError(PostServerError):
    """Unknown template name or missing binding — an internal wiring defect."""
    def __init__(self, message: str, template: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.template = template
        super().__init__(
            message, "TEMPLATE_ERROR", ErrorCategory.TEMPLATE,
            ErrorSeverity.CRITICAL, ctx, 500,
        )
        self.template = template
