"""
Notes API — Custom Exception Hierarchy
========================================

What:  Defines application-specific exceptions for different error scenarios.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with correct HTTP status codes.
Who:   Raised by services, repositories and the access-control gate; caught by
       global handlers.

Exception Hierarchy:
    NotesAPIError (base)
    ├── ValidationError              → 400 Bad Request
    │   ├── InvalidEmailError
    │   └── WeakPasswordError
    ├── AuthenticationError          → 401 Unauthorized
    │   └── InvalidCredentialsError
    ├── AuthorizationError           → 403 Forbidden
    ├── NotFoundError                → 404 Not Found
    ├── EmailExistsError             → 409 Conflict
    └── DatabaseError                → 500 Internal Server Error

Authorization and not-found messages are deliberately generic: a caller can
never tell "this note does not exist" apart from "this note is not yours".
"""

from typing import Any, Dict, Optional


class NotesAPIError(Exception):
    """
    Base exception for all Notes API application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client
                  unless the handler opts in, as ValidationError does)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(NotesAPIError):
    """
    Raised when client input fails a business rule.

    When:    Empty title/content, malformed email, short password.
    HTTP:    400 Bad Request

    Schema-level problems (wrong JSON types, non-UUID ids) are still reported
    by FastAPI as 422 before the request reaches a service.
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


class InvalidEmailError(ValidationError):
    """Email address does not look like `local@domain.tld`."""

    def __init__(self, message: str = "Invalid email format provided"):
        super().__init__(message=message, field="email")


class WeakPasswordError(ValidationError):
    """Password is shorter than the configured minimum length."""

    def __init__(self, min_length: int = 8):
        super().__init__(
            message=f"Password must be at least {min_length} characters long",
            field="password",
            context={"min_length": min_length},
        )
        self.min_length = min_length


class AuthenticationError(NotesAPIError):
    """
    Raised when the caller's identity cannot be established.

    When:    Missing Authorization header, non-Bearer scheme, bad signature,
             expired token, token without the expected claims.
    HTTP:    401 Unauthorized (with `WWW-Authenticate: Bearer`)
    """

    def __init__(
        self,
        message: str = "Invalid or missing credentials",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class InvalidCredentialsError(AuthenticationError):
    """
    Login failed.

    Same message whether the email is unknown or the password is wrong, so the
    response does not reveal which emails are registered.
    """

    def __init__(self):
        super().__init__(message="Invalid email or password")


class AuthorizationError(NotesAPIError):
    """
    Raised when an authenticated caller is not permitted to act on a note.

    When:    Updating, sharing or revoking a grant on a note the caller does
             not own (or that does not exist).
    HTTP:    403 Forbidden
    """

    def __init__(
        self,
        message: str = "You are not allowed to modify this note",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(NotesAPIError):
    """
    Raised when a requested resource does not exist for this caller.

    When:    Reading or deleting a note that is missing or owned by someone
             else; slug lookups the caller may not see.
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
            message = f"{resource} '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class EmailExistsError(NotesAPIError):
    """
    Raised when registering an email that already belongs to an account.

    HTTP:    409 Conflict
    """

    def __init__(self, message: str = "Email provided is already in use"):
        super().__init__(message=message, context={"field": "email"})


class DatabaseError(NotesAPIError):
    """
    Raised when database operations fail unexpectedly.

    When:    Connection lost mid-query, unexpected constraint violation, etc.
    HTTP:    500 Internal Server Error

    The message returned to the client is always generic. Detailed error info
    (SQL, constraint names) is logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
