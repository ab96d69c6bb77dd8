"""
NoteNest — Custom Exception Hierarchy
=======================================

What:  Application-specific exceptions for the failure classes the app knows about.
Why:   View controllers and route handlers need to tell validation problems,
       remote-reported errors and missing sessions apart from genuinely
       unexpected failures.
How:   Each exception carries a user-facing message and an optional context dict.
       View controllers catch them and show the message inline; anything that
       reaches the HTTP layer is turned into JSON by the handlers in main.py.

Exception Hierarchy:
    NoteNestError (base)
    ├── ValidationError          → 400 Bad Request (blocked before any remote call)
    ├── AuthRequiredError        → 401 Unauthorized (no signed-in identity)
    ├── NotFoundError            → 404 Not Found
    ├── RateLimitExceededError   → 429 Too Many Requests
    └── RemoteError              → 502 Bad Gateway (backend reported an error)
        └── StaleCacheError      → 502 (write succeeded, reload after it failed)

Expected auth failures (bad password, unconfirmed email, ...) are NOT exceptions.
They come back as values from SessionStore; see notenest.services.session_store.
"""

from typing import Any, Dict, Optional


class NoteNestError(Exception):
    """
    Base exception for all NoteNest application errors.

    Attributes:
        message:  User-facing error description (safe to show in the UI)
        context:  Additional debug info (logged, returned only as `details`)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(NoteNestError):
    """
    Raised when user input fails a local check.

    When:    Blank note, missing form field, password too short or mismatched.
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


class AuthRequiredError(NoteNestError):
    """Raised when a note operation is attempted without a signed-in identity."""

    def __init__(
        self,
        message: str = "Sign in to access your notes",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(NoteNestError):
    """
    Raised when a referenced resource is not in the current cache.

    The cache mirrors the server, so a note id missing locally is treated the
    same as one missing remotely.
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


class RemoteError(NoteNestError):
    """
    Raised when the backend-as-a-service reports an error for a table call.

    What:    The request reached Supabase and came back with `{message: ...}`.
    HTTP:    502 Bad Gateway

    `message` is the remote message verbatim. That matches how the UI treats
    unrecognized messages: they pass through unchanged.
    """

    def __init__(
        self,
        message: str = "The notes service reported an error",
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if operation:
            ctx["operation"] = operation
        super().__init__(message=message, context=ctx)
        self.operation = operation


class StaleCacheError(RemoteError):
    """
    Raised when a note write succeeded but the reload that follows it failed.

    The change is on the server, so callers must treat the action as done and
    must not offer to repeat it. The cache keeps its previous rows and is
    marked for reload.
    """

    def __init__(
        self,
        action: str,
        cause: str = "",
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["action"] = action
        if cause:
            ctx["cause"] = cause
        super().__init__(
            message="Your change was saved, but your notes could not be reloaded",
            operation="select",
            context=ctx,
        )
        self.action = action


class RateLimitExceededError(NoteNestError):
    """
    Raised when a client exceeds the login/registration rate limit.

    HTTP:    429 Too Many Requests (with Retry-After header)
    """

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"Too many requests. Please wait {retry_after} seconds before trying again."
        )
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after
