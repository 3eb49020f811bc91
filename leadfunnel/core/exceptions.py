"""
Custom exceptions for the Lead Funnel API.
Services raise these; main.py translates them into HTTP responses.
"""
from typing import Iterable, Optional

from fastapi import status


class LeadFunnelException(Exception):
    """Base exception for Lead Funnel"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = "An error occurred"):
        self.message = message
        super().__init__(self.message)


class NotFoundError(LeadFunnelException):
    """Resource not found (or not owned by the calling company)"""
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, resource: str = "Resource", resource_id: Optional[str] = None):
        message = f"{resource} not found"
        if resource_id:
            message = f"{resource} with id '{resource_id}' not found"
        super().__init__(message)


class ValidationError(LeadFunnelException):
    """Validation failed"""
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY

    def __init__(self, message: str = "Validation failed", field: Optional[str] = None):
        if field:
            message = f"Validation failed for field '{field}': {message}"
        super().__init__(message)


class ConflictError(LeadFunnelException):
    """Resource is not in the state the operation expects"""
    status_code = status.HTTP_409_CONFLICT


class QuotaExceededError(LeadFunnelException):
    """Daily activation capacity would be exceeded"""
    status_code = status.HTTP_429_TOO_MANY_REQUESTS

    def __init__(self, remaining: int):
        self.remaining = remaining
        super().__init__(
            f"Daily limit exceeded. You can activate {remaining} more lead(s) today."
        )


class UnauthorizedError(LeadFunnelException):
    """Authentication failed"""
    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "Could not validate credentials"):
        super().__init__(message)


class UpstreamDeliveryError(LeadFunnelException):
    """External service call failed"""
    status_code = status.HTTP_502_BAD_GATEWAY

    def __init__(self, service: str = "External service", message: Optional[str] = None):
        msg = f"{service} call failed"
        if message:
            msg = f"{msg}: {message}"
        super().__init__(msg)


class StoreUnavailableError(LeadFunnelException):
    """Database unreachable"""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    def __init__(self, message: str = "Database is unavailable"):
        super().__init__(message)


class ConfigurationError(LeadFunnelException):
    """A required integration is not configured"""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


def describe_ids(ids: Iterable) -> str:
    """Render ids for error messages: 'a, b, c'."""
    return ", ".join(str(i) for i in ids)
