"""
Tareas Backend: Custom Exception Hierarchy
==========================================

What:  Application-specific exceptions for the error scenarios of the service.
How:   Each exception carries a user-facing message and an optional context
       dict. Global exception handlers (registered in main.py) turn them into
       redirects or structured JSON error responses.
Who:   Raised by dependencies, services and middleware; caught by handlers.

Exception Hierarchy:
    TareasError (base)
    ├── LoginRequiredError       → 303 redirect to the login page (page surface)
    ├── AuthenticationError      → 401 Unauthorized (API surface)
    ├── ValidationError          → 400 Bad Request (client can fix)
    ├── NotFoundError            → 404 Not Found
    ├── IdentityServiceError     → 502 Bad Gateway (sign-up / sign-in rejected or failed)
    ├── TaskStoreError           → 500 Internal Server Error
    └── RateLimitExceededError   → 429 Too Many Requests
"""

from typing import Any, Dict, Optional


class TareasError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in a response)
        context:  Additional debug info (logged but NOT returned for 5xx errors)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class LoginRequiredError(TareasError):
    """
    Raised by the page guard when a request carries no valid session.

    Never rendered as an error: the handler answers with a redirect to the
    login page.
    """

    def __init__(
        self,
        login_path: str = "/login",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message="Login required", context=context)
        self.login_path = login_path


class AuthenticationError(TareasError):
    """Raised by the API guard when a request carries no valid session (401)."""

    def __init__(
        self,
        message: str = "Not authenticated",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ValidationError(TareasError):
    """
    Raised when client input fails a business rule.

    When:    Blank task text, password confirmation mismatch, short password.
    HTTP:    400 Bad Request

    Example response:
        {
            "error": "validation_error",
            "message": "Task text is required",
            "details": {"field": "text"}
        }
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


class NotFoundError(TareasError):
    """
    Raised when a requested resource does not exist for the caller.

    A task that exists but belongs to another principal is reported the same
    way as a task that does not exist at all.
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


class IdentityServiceError(TareasError):
    """
    Raised when the identity service rejects or fails an account operation.

    When:    Sign-up refused (email taken, weak password), wrong credentials on
             sign-in, identity service unreachable.
    HTTP:    502 on the API; shown inline on the login / register pages.

    The message is the provider's own explanation so the user can act on it.
    """

    def __init__(
        self,
        message: str = "The authentication service could not complete the request",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class TaskStoreError(TareasError):
    """
    Raised when a task store operation fails.

    When:    Connection lost mid-query, constraint violation, etc.
    HTTP:    500 Internal Server Error

    Security Note:
        The driver error is kept in `context` and logged server-side only.
    """

    def __init__(
        self,
        message: str = "Could not save your changes. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RateLimitExceededError(TareasError):
    """Raised when a client exceeds the per-IP limit on login / register posts."""

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"Too many attempts. Please wait {retry_after} seconds before trying again."
        )
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after
