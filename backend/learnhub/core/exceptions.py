"""
Error taxonomy for LearnHub.

Storage adapters, services and routers raise these; the application's
exception handlers translate them into JSON error responses.
"""

from typing import Any, Dict, List, Optional
from fastapi import status


class LearnHubError(Exception):
    """Base class for errors that map onto an HTTP status."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {"detail": self.message}


class ValidationError(LearnHubError):
    """Malformed or missing input, reported before any mutation."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"

    def __init__(
        self,
        message: Optional[str] = None,
        errors: Optional[List[Dict[str, str]]] = None
    ) -> None:
        super().__init__(message)
        self.errors = errors or []

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        if self.errors:
            data["errors"] = self.errors
        return data


class Unauthorized(LearnHubError):
    """No session or an invalid token."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"


class Forbidden(LearnHubError):
    """Authenticated, but lacking the role or ownership required."""

    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class NotFound(LearnHubError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class Conflict(LearnHubError):
    """Duplicate enrollment/review or another unique-key violation."""

    # Duplicates have always been answered with 400 on the wire
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Resource already exists"


class InternalError(LearnHubError):
    """Unexpected storage failure; the message never carries details."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"
