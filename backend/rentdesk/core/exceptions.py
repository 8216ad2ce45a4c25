# backend/rentdesk/core/exceptions.py
"""
Domain error taxonomy.

Services raise these; the API layer renders them as `{"detail": message}`
with the status code carried by the class.
"""
from typing import Any, Optional


class RentDeskError(Exception):
    """Base class for errors that map to a client-visible response"""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, **context: Any):
        self.message = message or self.default_message
        self.context = context
        super().__init__(self.message)


class ValidationError(RentDeskError):
    """Missing or malformed input"""
    status_code = 400
    default_message = "Validation failed"


class UnauthenticatedError(RentDeskError):
    status_code = 401
    default_message = "Authentication required"


class QuotaExceededError(RentDeskError):
    """Plan limit reached for a resource"""
    status_code = 403
    default_message = "Plan limit reached. Please upgrade."


class NotFoundError(RentDeskError):
    status_code = 404
    default_message = "Resource not found"


class ConflictError(RentDeskError):
    status_code = 409
    default_message = "Resource already exists"


class UpstreamError(RentDeskError):
    """Data store unreachable or timed out"""
    status_code = 500
    default_message = "Upstream service unavailable"
