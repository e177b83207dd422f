"""Error Hierarchy — typed, categorized exceptions for all directory failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Validation/auth errors (400/403) are raised before any write is attempted
    - to_response() always produces {"error": <message>, "code": <code>}
    - FeedError never reaches a response as a status code; readers downgrade it to a warning string

Design Decisions:
    - Single hierarchy with DirectoryError base: FastAPI global handler catches all (ADR: uniform error shape)
    - AuthError subclasses share 403: callers only need to know "not allowed", logs keep the precise code
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
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    DATABASE = "database"
    EXTERNAL_API = "external_api"
    CONFIGURATION = "configuration"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    entry_id: str | None = None
    actor: str | None = None
    debug_info: dict[str, Any] | None = None


class DirectoryError(Exception):
    """Base exception for all website directory errors."""

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
        return {"error": self.message, "code": self.code}


# ─── Validation (400) ───────────────────────────────────────────

class EntryValidationError(DirectoryError):
    """Admin payload failed field validation."""
    def __init__(self, messages: list[str], context: ErrorContext | None = None):
        super().__init__(
            ", ".join(messages), "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )
        self.messages = messages


# ─── Auth (403) ─────────────────────────────────────────────────

class AuthError(DirectoryError):
    """Caller could not be authenticated as an admin."""
    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory = ErrorCategory.AUTHENTICATION,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, code, category, ErrorSeverity.WARNING, context, 403,
        )


class MissingCredentialError(AuthError):
    """No bearer credential on the request."""
    def __init__(self, message: str = "Missing Bearer token", context: ErrorContext | None = None):
        super().__init__(message, "MISSING_CREDENTIAL", context=context)


class InvalidCredentialError(AuthError):
    """Identity service rejected the credential or resolved no user."""
    def __init__(self, message: str = "Invalid ID token", context: ErrorContext | None = None):
        super().__init__(message, "INVALID_CREDENTIAL", context=context)


class InsufficientPrivilegeError(AuthError):
    """Credential is valid but carries no admin claim."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Admin privileges are required", "INSUFFICIENT_PRIVILEGE",
            ErrorCategory.AUTHORIZATION, context,
        )


# ─── Store preconditions (404 / 409) ────────────────────────────

class NotFoundError(DirectoryError):
    """Must-exist precondition failed."""
    def __init__(self, entry_id: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.entry_id = entry_id
        super().__init__(
            f"Directory entry '{entry_id}' not found",
            "NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, ctx, 404,
        )
        self.entry_id = entry_id


class AlreadyExistsError(DirectoryError):
    """Must-not-exist precondition failed."""
    def __init__(self, entry_id: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.entry_id = entry_id
        super().__init__(
            f"Directory entry '{entry_id}' already exists",
            "ALREADY_EXISTS", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, ctx, 409,
        )
        self.entry_id = entry_id


# ─── Infrastructure (500-level) ─────────────────────────────────

class StoreError(DirectoryError):
    """Read or commit against the internal backend failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Directory store {operation} failed: {message}",
            "STORE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.operation = operation


class ConfigurationError(DirectoryError):
    """A required setting is missing."""
    def __init__(self, setting: str, context: ErrorContext | None = None):
        super().__init__(
            f"{setting} is not configured",
            "CONFIGURATION_ERROR", ErrorCategory.CONFIGURATION,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.setting = setting


class FeedError(DirectoryError):
    """Partner feed fetch or parse failed."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "FEED_ERROR", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.WARNING, context, 502,
        )
