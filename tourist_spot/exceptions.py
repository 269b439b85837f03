"""
Tourist Spot API — Custom Exception Hierarchy
==============================================

What:  Application-specific exceptions for every failure the API reports.
How:   Each exception carries a user-facing message, an HTTP status code, a
       machine-readable error code, and an optional context dict. The global
       handler registered in main.py turns any of them into the uniform
       `{success: false, message}` envelope.
Who:   Raised by services and the AuthGuard dependency; caught by main.py.

Exception Hierarchy:
    TouristSpotError (base)         → 500
    ├── BadRequestError             → 400 Bad Request
    ├── IssuanceError               → 401 Unauthorized (no identity claim)
    ├── UnauthenticatedError        → 403 Forbidden (no session cookie)
    ├── ForbiddenError              → 403 Forbidden (bad token / not the owner)
    ├── NotFoundError               → 404 Not Found
    ├── WriteFailedError            → 500 Internal Server Error
    ├── DatabaseError               → 500 Internal Server Error
    ├── AssetStoreError             → 500 Internal Server Error
    └── RateLimitExceededError      → 429 Too Many Requests

A missing cookie answers 403 rather than 401; browser clients of this API
treat both the same way and the status is part of the public contract.
"""

from typing import Any, Dict, Optional


class TouristSpotError(Exception):
    """
    Base exception for all Tourist Spot API errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    status_code: int = 500
    error: str = "internal_error"

    def __init__(
        self,
        message: str = "Internal server error",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class BadRequestError(TouristSpotError):
    """
    Raised when a required parameter is missing or malformed.

    When:    Blank email path parameter, id that is not an ObjectId, body that
             is not a JSON object.
    HTTP:    400 Bad Request
    """

    status_code = 400
    error = "bad_request"

    def __init__(
        self,
        message: str = "Bad request",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class IssuanceError(TouristSpotError):
    """Raised by POST /jwt when the body carries no identity claim."""

    status_code = 401
    error = "issuance_failed"

    def __init__(
        self,
        message: str = "Identity claim is required to issue a token",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class UnauthenticatedError(TouristSpotError):
    """
    Raised when a session-guarded route is called without the token cookie.

    HTTP:    403 Forbidden
    """

    status_code = 403
    error = "unauthenticated"

    def __init__(
        self,
        message: str = "Unauthorized access",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ForbiddenError(TouristSpotError):
    """
    Raised when the presented token is invalid or expired, or when the
    verified identity does not own the requested data.

    HTTP:    403 Forbidden
    """

    status_code = 403
    error = "forbidden"

    def __init__(
        self,
        message: str = "Forbidden access",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(TouristSpotError):
    """
    Raised when a query matches, or a delete removes, zero documents.

    An empty collection is reported the same way as a missing document;
    clients cannot tell the two apart.

    HTTP:    404 Not Found
    """

    status_code = 404
    error = "not_found"

    def __init__(
        self,
        message: str = "No data found",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class WriteFailedError(TouristSpotError):
    """
    Raised when an insert is rejected or an update modifies zero documents.

    Zero modified documents covers both "id not found" and "new values equal
    to the stored ones".

    HTTP:    500 Internal Server Error
    """

    status_code = 500
    error = "write_failed"

    def __init__(
        self,
        message: str = "Failed to write tourist spot",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(TouristSpotError):
    """
    Raised when a MongoDB operation fails unexpectedly.

    Security Note:
        The message returned to the client is always generic. Driver errors
        are logged server-side only.
    """

    status_code = 500
    error = "database_error"

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class AssetStoreError(TouristSpotError):
    """
    Raised when Cloudinary fails to delete an image and the cleanup policy
    is `abort`. Under the default `ignore` policy the failure is only logged.
    """

    status_code = 500
    error = "asset_store_error"

    def __init__(
        self,
        message: str = "Failed to delete the hosted image",
        public_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if public_id:
            ctx["public_id"] = public_id
        super().__init__(message=message, context=ctx)
        self.public_id = public_id


class RateLimitExceededError(TouristSpotError):
    """
    Raised when a client exceeds the per-IP request window.

    HTTP:    429 Too Many Requests, with a Retry-After header
    """

    status_code = 429
    error = "rate_limit_exceeded"

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(
            message="Too many requests, please try again later", context=ctx
        )
        self.retry_after = retry_after
