"""
Travel Journal Backend — Custom Exception Hierarchy
=====================================================

What:  Application-specific exceptions for the different failure scenarios.
Why:   Custom exceptions carry the right HTTP status and a client-safe message,
       so services never build HTTP responses themselves.
How:   Each exception carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses.
Who:   Raised by services, the authentication gate and middleware.

Exception Hierarchy:
    TravelJournalError (base)
    ├── ValidationError           → 400 Bad Request
    ├── AuthenticationError       → 401 Unauthorized
    ├── NotFoundError             → 404 Not Found (absent OR not owned)
    ├── UpstreamUnavailableError  → 500 Internal Server Error (country API)
    ├── DatabaseError             → 500 Internal Server Error (generic message)
    └── RateLimitExceededError    → 429 Too Many Requests

The `message` is what the browser client displays; `context` is logged
server-side only.
"""

from typing import Any, Dict, Optional


class TravelJournalError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    code = "server_error"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(TravelJournalError):
    """
    Raised when client input fails validation.

    When:    Missing countryCode/countryName, missing registration fields,
             duplicate user, malformed request body.
    HTTP:    400 Bad Request
    """

    code = "validation_error"

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


class AuthenticationError(TravelJournalError):
    """
    Raised when the caller cannot be identified.

    When:    Missing or non-Bearer Authorization header ("No token provided"),
             unknown token ("Invalid token"), token-<n> that does not parse to
             a positive integer ("Invalid token format"), bad login.
    HTTP:    401 Unauthorized
    """

    code = "authentication_error"

    def __init__(
        self,
        message: str = "Authentication required",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(TravelJournalError):
    """
    Raised when a requested resource does not exist for this caller.

    Ownership is part of the lookup, so "belongs to someone else" and
    "does not exist" both land here with the same message.
    HTTP:    404 Not Found
    """

    code = "not_found"

    def __init__(
        self,
        message: str = "The requested resource was not found",
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class UpstreamUnavailableError(TravelJournalError):
    """
    Raised when the external country directory fails.

    When:    Transport error, timeout, or non-success status on the list call.
    HTTP:    500 Internal Server Error
    No retry: the request fails immediately; a later request tries again.
    """

    code = "upstream_error"

    def __init__(
        self,
        message: str = "Failed to fetch countries data",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(TravelJournalError):
    """
    Raised when database operations fail unexpectedly.

    The message returned to the client is always the generic "Database error".
    Detailed error info is logged server-side only.
    HTTP:    500 Internal Server Error
    """

    code = "database_error"

    def __init__(
        self,
        message: str = "Database error",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RateLimitExceededError(TravelJournalError):
    """
    Raised when a client exceeds the per-IP request rate limit.
    HTTP:    429 Too Many Requests (with Retry-After header)
    """

    code = "rate_limit_exceeded"

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"Too many requests. Please wait {retry_after} seconds before retrying."
        )
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after
