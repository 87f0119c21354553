"""
TimeTracker Backend - Custom Exception Hierarchy
=================================================

What:  Application-specific exceptions for the error outcomes of the API.
How:   Each exception carries a message and an optional context dict.
       Global handlers (registered in main.py) map them to HTTP status codes
       and a single JSON error envelope.
Who:   Raised by services, the security stub, the version check and the
       rate limiters.

Exception Hierarchy:
    TimeTrackerError (base)
    ├── NotFoundError                → 404 Not Found
    ├── AuthenticationError          → 401 Unauthorized
    ├── AuthorizationError           → 403 Forbidden
    ├── UnsupportedApiVersionError   → 400 Bad Request
    ├── RateLimitExceededError       → 429 Too Many Requests
    └── DatabaseError                → 500 Internal Server Error

Input validation is not part of this hierarchy: Pydantic rejects bad bodies
and parameters with RequestValidationError, which main.py renders as 400.
"""

from typing import Any, Dict, Iterable, Optional


class TimeTrackerError(Exception):
    """
    Base exception for all TimeTracker application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info, returned only where a handler opts in
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class NotFoundError(TimeTrackerError):
    """
    Raised when a requested row, or a row referenced by the input, does not exist.

    When:  GET/PUT/DELETE with an unknown id, or POST/PUT whose clientId,
           userId or projectId does not resolve.
    HTTP:  404 Not Found
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


class AuthenticationError(TimeTrackerError):
    """
    Raised by the demo auth stub when a bearer token is required but missing.

    HTTP:  401 Unauthorized, with WWW-Authenticate: Bearer
    """

    def __init__(
        self,
        message: str = "Authentication is required to access this resource",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class AuthorizationError(TimeTrackerError):
    """
    Raised when the principal lacks every role an operation accepts.

    When:  POST/PUT/DELETE without the Admin role.
    HTTP:  403 Forbidden
    """

    def __init__(
        self,
        required_roles: Iterable[str] = (),
        context: Optional[Dict[str, Any]] = None,
    ):
        roles = list(required_roles)
        message = "You do not have permission to perform this operation"
        if roles:
            message = f"{message}. Required role: {' or '.join(roles)}"
        ctx = context or {}
        ctx["required_roles"] = roles
        super().__init__(message=message, context=ctx)
        self.required_roles = roles


class UnsupportedApiVersionError(TimeTrackerError):
    """
    Raised when the URL names an API version the service does not implement.

    When:  /api/v3/users while only v1 and v2 exist.
    HTTP:  400 Bad Request
    """

    def __init__(
        self,
        requested: Any,
        supported: Iterable[str],
        context: Optional[Dict[str, Any]] = None,
    ):
        supported_list = list(supported)
        message = (
            f"The HTTP resource does not support API version '{requested}'. "
            f"Supported versions: {', '.join(supported_list)}"
        )
        ctx = context or {}
        ctx["requested_version"] = str(requested)
        ctx["supported_versions"] = supported_list
        super().__init__(message=message, context=ctx)


class DatabaseError(TimeTrackerError):
    """
    Raised when a database operation fails unexpectedly.

    HTTP:  500 Internal Server Error
    The client always gets a generic message; details are logged server-side.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RateLimitExceededError(TimeTrackerError):
    """
    Raised when a rate-limit partition has no permit and its queue is full.

    HTTP:  429 Too Many Requests, with a Retry-After header
    """

    def __init__(
        self,
        policy: str,
        retry_after: int = 1,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"Rate limit exceeded for '{policy}' requests. "
            f"Please wait {retry_after} seconds before retrying."
        )
        ctx = context or {}
        ctx["policy"] = policy
        ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.policy = policy
        self.retry_after = retry_after
