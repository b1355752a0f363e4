"""
Solace Backend — Custom Exception Hierarchy
============================================

What:  Defines application-specific exceptions for every failure kind the
       services can report.
Why:   Each kind is preserved from the point of failure up to the API surface,
       which translates it into a GraphQL error code (or an HTTP status for
       the REST endpoints).
How:   Each exception carries a user-safe message, an optional context dict
       (logged, never returned verbatim) and a machine-readable `error_code`.

Exception Hierarchy:
    SolaceError (base)
    ├── InvalidIdentifierError   → invalid_identifier   (400)
    ├── ValidationError          → validation_error     (400)
    ├── AuthenticationError      → unauthenticated      (401)
    ├── NotFoundError            → not_found            (404)
    ├── ConflictError            → conflict             (409)
    ├── DatabaseError            → database_error       (500)
    ├── LLMServiceError          → llm_service_error    (503)
    └── OperationTimeoutError    → timeout              (504)
"""

from typing import Any, Dict, Optional


class SolaceError(Exception):
    """
    Base exception for all Solace application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    error_code = "internal_error"
    status_code = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class InvalidIdentifierError(SolaceError):
    """
    Raised when a client-supplied identifier is not a valid UUID.

    Always raised before any storage access takes place.
    """

    error_code = "invalid_identifier"
    status_code = 400

    def __init__(
        self,
        resource: str = "resource",
        value: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if value is not None:
            ctx["value"] = value
        super().__init__(message=f"'{value}' is not a valid {resource} ID", context=ctx)
        self.resource = resource
        self.value = value


class ValidationError(SolaceError):
    """
    Raised when client input fails validation.

    When:    Empty problem title or description, malformed user payload.
    """

    error_code = "validation_error"
    status_code = 400

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class AuthenticationError(SolaceError):
    """Raised when an operation needs a verified caller identity and has none."""

    error_code = "unauthenticated"
    status_code = 401

    def __init__(
        self,
        message: str = "A valid bearer token is required for this operation",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(SolaceError):
    """
    Raised when a requested resource does not exist.

    SQLAlchemy returns None for missing records (not an exception). The
    service layer converts None → NotFoundError.
    """

    error_code = "not_found"
    status_code = 404

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource = resource
        self.resource_id = resource_id


class ConflictError(SolaceError):
    """
    Raised when a write violates a uniqueness constraint.

    When:    Creating a user whose username or email is already taken.
    The raw IntegrityError is logged, never returned.
    """

    error_code = "conflict"
    status_code = 409

    def __init__(
        self,
        message: str = "The resource already exists",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class DatabaseError(SolaceError):
    """
    Raised when database operations fail unexpectedly.

    Security Note:
        The message returned to the client is always generic.
        SQL text, constraint names and driver messages stay in the logs.
    """

    error_code = "database_error"
    status_code = 500

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class LLMServiceError(SolaceError):
    """
    Raised when the text-generation endpoint fails or returns nothing useful.

    No retry is performed; the caller may retry the whole operation.
    """

    error_code = "llm_service_error"
    status_code = 503

    def __init__(
        self,
        message: str = "The advice generation service is temporarily unavailable",
        status: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if status is not None:
            ctx["upstream_status"] = status
        super().__init__(message=message, context=ctx)
        self.status = status


class OperationTimeoutError(SolaceError):
    """
    Raised when an operation exceeds its deadline.

    When:    The per-request deadline elapses, or the advice endpoint does
             not answer within its client-side timeout.
    """

    error_code = "timeout"
    status_code = 504

    def __init__(
        self,
        operation: str = "operation",
        timeout: Optional[float] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The {operation} did not complete in time"
        if timeout is not None:
            message = f"The {operation} did not complete within {timeout:g} seconds"
        ctx = context or {}
        ctx["operation"] = operation
        if timeout is not None:
            ctx["timeout"] = timeout
        super().__init__(message=message, context=ctx)
        self.operation = operation
        self.timeout = timeout
