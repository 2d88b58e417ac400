"""
Tourenplan Backend — Custom Exception Hierarchy
=================================================

What:  Defines application-specific exceptions for different error scenarios.
Why:   Services signal failures with types; global exception handlers
       (registered in main.py) turn them into HTTP status codes and a
       uniform JSON error body.
How:   Each exception class carries a message and optional context dict.
Who:   Raised by services and the auth dependency; caught by global handlers.

Exception Hierarchy:
    TourenplanError (base)
    ├── ValidationError          → 400 Bad Request (client can fix)
    │   └── StatusTransitionError → 400 Bad Request (illegal stop status change)
    ├── AuthenticationError      → 401 Unauthorized
    ├── NotFoundError            → 404 Not Found
    ├── FileStorageError         → 500 Internal Server Error
    └── DatabaseError            → 500 Internal Server Error (+ store diagnostic)
"""

from typing import Any, Dict, Optional


class TourenplanError(Exception):
    """
    Base exception for all Tourenplan application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(TourenplanError):
    """
    Raised when client input fails a business rule.

    When:    Empty partial update, missing photo, oversized photo, bad reorder list.
    HTTP:    400 Bad Request

    Schema-level problems (wrong JSON types) are still answered by FastAPI
    with 422; this class covers rules the schemas cannot express.
    """

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


class StatusTransitionError(ValidationError):
    """Raised when a stop status change is not allowed from the current status."""

    def __init__(self, current: str, requested: str):
        super().__init__(
            message=f"Status change from '{current}' to '{requested}' is not allowed",
            field="status",
            context={"current": current, "requested": requested},
        )
        self.current = current
        self.requested = requested


class AuthenticationError(TourenplanError):
    """
    Raised for bad credentials or a missing/invalid bearer token.

    HTTP:    401 Unauthorized (with WWW-Authenticate: Bearer)
    """

    def __init__(
        self,
        message: str = "Missing or invalid token",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(TourenplanError):
    """
    Raised when a requested resource does not exist.

    SQLAlchemy returns None for missing records; services convert that into
    NotFoundError so routes stay free of status-code logic.
    HTTP:    404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id is not None:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = str(resource_id)
        super().__init__(message=message, context=ctx)


class FileStorageError(TourenplanError):
    """
    Raised when writing or deleting a photo file fails.

    When:    Disk full, permission denied, upload directory not writable.
    HTTP:    500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "File storage operation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(TourenplanError):
    """
    Raised when the store rejects or fails a statement.

    When:    Foreign-key violation (unknown driver/tour), unique violation,
             lost connection.
    HTTP:    500 Internal Server Error

    The response carries a generic message plus the raw store diagnostic
    (``context["diagnostic"]``) so operators can see which constraint failed.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        diagnostic: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if diagnostic:
            ctx["diagnostic"] = diagnostic
        super().__init__(message=message, context=ctx)
        self.diagnostic = diagnostic


def database_error(exc: Exception, message: str, **context: Any) -> DatabaseError:
    """
    Wrap a store exception in DatabaseError, keeping the driver's own text.

    SQLAlchemy wraps DBAPI errors; `orig` holds the driver exception whose
    message names the violated constraint.
    """
    diagnostic = str(getattr(exc, "orig", None) or exc)
    return DatabaseError(
        message=message,
        diagnostic=diagnostic,
        context={"error_type": type(exc).__name__, **context},
    )
