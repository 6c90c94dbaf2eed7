# medprep/core/exceptions.py
"""Application errors carrying the HTTP status they are rendered with."""

from typing import List, Optional


class AppError(Exception):
    """Base class for operational errors surfaced to API callers."""

    status_code: int = 500
    default_message: str = "Internal Server Error"

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


# ===== AUTHORIZATION =====


class NoActiveSubscription(AppError):
    """No subscription record for the email, or it was unsubscribed."""

    status_code = 403
    default_message = "No active subscription found"


class InsufficientAccess(AppError):
    """Subscription tier is not in the resource's allow-list."""

    status_code = 403
    default_message = "Insufficient access level for this resource"


class AdminAccessRequired(AppError):
    status_code = 401
    default_message = "Administrative access required"


# ===== LOOKUPS =====


class ResourceNotFound(AppError):
    """Resource is missing or inactive."""

    status_code = 404
    default_message = "Resource not found or inactive"


class SubscriptionNotFound(AppError):
    status_code = 404
    default_message = "Subscription not found"


# ===== REQUEST PROBLEMS =====


class ValidationError(AppError):
    """Malformed body, query or path parameters.

    The message aggregates every violated field so a single response
    describes all problems with the request.
    """

    status_code = 400
    default_message = "Validation failed"

    def __init__(self, message: Optional[str] = None, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.errors = errors or []


class BadRequestError(AppError):
    status_code = 400
    default_message = "Bad request"


class ConflictError(AppError):
    status_code = 409
    default_message = "Resource already exists"


# ===== UPSTREAM =====


class UpstreamServiceError(AppError):
    """The object-storage service could not issue a signed URL."""

    status_code = 502
    default_message = "Upstream service error"
