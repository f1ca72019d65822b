from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for dashboard errors."""


class ValidationError(DomainError):
    """Raised when input data is invalid, before any request is sent.

    ``errors`` maps form field names to messages.
    """

    def __init__(self, message: str, errors: Optional[dict[str, str]] = None):
        super().__init__(message)
        self.errors = dict(errors or {})


class ApiError(DomainError):
    """Raised when the attendance API call fails."""

    def __init__(self, message: str, *, status_code: Optional[int] = None, payload=None):
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload


class NetworkError(ApiError):
    """No response was received."""


class BadRequestError(ApiError):
    """HTTP 400, carries the server validation message."""


class NotFoundError(ApiError):
    """HTTP 404."""


class ServerError(ApiError):
    """HTTP 500."""


class StateTransitionError(DomainError):
    """Raised when a marking session action is not allowed in its current state."""
