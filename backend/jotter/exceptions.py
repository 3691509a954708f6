"""
Jotter Backend — Custom Exception Hierarchy
============================================

What:  Application-specific exceptions for every failure the API reports.
Why:   Services raise these and a single set of exception handlers in
       main.py turns them into status codes and JSON bodies. Routes never
       build error responses themselves.
How:   Each exception carries a user-facing message and an optional context
       dict (context is logged, only selected keys are returned).

Exception Hierarchy:
    JotterError (base)
    ├── ValidationError          → 400 Bad Request
    │   └── DuplicateUsernameError → 400 Bad Request ("must be unique")
    ├── InvalidIdentifierError   → 400 Bad Request (malformed id)
    ├── UnauthorizedError        → 401 Unauthorized
    ├── NotFoundError            → 404 Not Found
    └── DatabaseError            → 500 Internal Server Error
"""

from typing import Any, Dict, Optional


class JotterError(Exception):
    """
    Base exception for all Jotter application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info for server-side logs
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(JotterError):
    """
    Raised when client input fails validation.

    When:    Missing content, short username/password, empty update content.
    HTTP:    400 Bad Request
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


class DuplicateUsernameError(ValidationError):
    """
    Raised when registering a username that already exists.

    The store is left unchanged. The message keeps the wording clients of
    the API already match on ("expected `username` to be unique").
    """

    def __init__(self, username: str):
        super().__init__(
            message="User validation failed: username: expected `username` to be unique",
            field="username",
            context={"username": username},
        )
        self.username = username


class InvalidIdentifierError(JotterError):
    """
    Raised when an id is not a well-formed UUID.

    Distinct from NotFoundError: the id could never match a record, so the
    client gets 400 instead of 404.
    """

    def __init__(self, raw_id: Any, resource: str = "resource"):
        super().__init__(
            message="malformatted id",
            context={"resource": resource, "raw_id": str(raw_id)},
        )
        self.raw_id = raw_id


class UnauthorizedError(JotterError):
    """
    Raised for bad credentials or a missing/invalid bearer token.

    HTTP:    401 Unauthorized, with `WWW-Authenticate: Bearer`.
    """

    def __init__(
        self,
        message: str = "token missing or invalid",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(JotterError):
    """
    Raised when a well-formed id matches no record.

    HTTP:    404 Not Found
    """

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


class DatabaseError(JotterError):
    """
    Raised when a store operation fails in the driver.

    HTTP:    500 Internal Server Error

    Security Note:
        The client always receives a generic message. The driver error type
        and statement details go to the server log only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
