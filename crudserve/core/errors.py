"""Error Hierarchy — typed, categorized exceptions for every dispatch failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Client errors (400-level) carry the wrapped decode/validation message, nothing more
    - Storage errors are raised by collaborators; dispatchers decide the HTTP status
    - RegistrationError is raised at startup only and never reaches a client
    - to_response() produces the REST envelope used by every error response

Design Decisions:
    - Single hierarchy with CrudServeError base: one FastAPI handler catches all (ADR: uniform error shape)
    - ErrorContext as dataclass: path/store/operation travel with the error into logs
    - Read failures and operation failures folded into one status each (404 / 400),
      kept from the original service contract
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
    METHOD = "method"
    STORAGE = "storage"
    REGISTRATION = "registration"
    INTERNAL = "internal"
    REMOTE = "remote"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    path: str | None = None
    store: str | None = None
    operation: str | None = None
    debug_info: dict[str, Any] | None = None


class CrudServeError(Exception):
    """Base exception for all CrudServe errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
        details: list[dict] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status
        self.details = details

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        body = {
            "code": self.code,
            "message": self.message,
            "category": self.category.value,
            "severity": self.severity.value,
            "timestamp": self.context.timestamp.isoformat(),
            "context": {
                "path": self.context.path,
                "store": self.context.store,
                "operation": self.context.operation,
            },
        }
        if self.details:
            body["details"] = self.details
        return {"error": body}


# ─── Startup Errors ──────────────────────────────────────────────

class RegistrationError(CrudServeError):
    """Registry contract violated while the process is starting."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "REGISTRATION_ERROR", ErrorCategory.REGISTRATION,
            ErrorSeverity.CRITICAL, context, 500,
        )


# ─── Client Errors (400-level) ──────────────────────────────────

class DecodeError(CrudServeError):
    """Request body could not be decoded into the declared shape."""
    def __init__(
        self, message: str, details: list[dict] | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "DECODE_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400, details,
        )


class InvalidPathError(CrudServeError):
    """Request path is not a valid target for the method."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INVALID_PATH", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )


class ItemValidationError(CrudServeError):
    """Decoded value rejected by its own validate_self() hook."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )


class OperationFailedError(CrudServeError):
    """Operation reported a failure. Operations may raise this directly."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "OPERATION_FAILED", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 400,
        )


class RouteNotFoundError(CrudServeError):
    """Read path malformed or the item could not be read."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, context, 404,
        )


class MethodNotAllowedError(CrudServeError):
    """HTTP method not served on this route."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "METHOD_NOT_ALLOWED", ErrorCategory.METHOD,
            ErrorSeverity.WARNING, context, 405,
        )


# ─── Storage Errors (raised by store collaborators) ─────────────

class StoreError(CrudServeError):
    """Storage collaborator failed."""
    def __init__(
        self, message: str, code: str = "STORAGE_ERROR",
        context: ErrorContext | None = None, http_status: int = 500,
    ):
        super().__init__(
            message, code, ErrorCategory.STORAGE,
            ErrorSeverity.CRITICAL, context, http_status,
        )


class ItemNotFoundError(StoreError):
    """Store has no item with the requested id."""
    def __init__(
        self, store: str, item_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{store} '{item_id}' not found", "ITEM_NOT_FOUND", context, 404,
        )
        self.severity = ErrorSeverity.WARNING
        self.item_id = item_id


class DatabaseError(StoreError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}", "DATABASE_ERROR", context,
        )
        self.operation = operation


# ─── Internal Errors (500-level) ────────────────────────────────

class DispatchContractError(CrudServeError):
    """Operation returned something its registered signature rules out."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "DISPATCH_CONTRACT_VIOLATION", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, context, 500,
        )


# ─── Client-side Errors ─────────────────────────────────────────

class RemoteError(CrudServeError):
    """Server answered a client call with a non-2xx status."""
    def __init__(
        self, message: str, code: str, http_status: int,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, code, ErrorCategory.REMOTE,
            ErrorSeverity.ERROR, context, http_status,
        )
