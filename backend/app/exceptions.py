"""Typed domain exceptions rendered by the API exception handlers."""

from datetime import datetime
from typing import Any, Dict, Optional


class PlacewikiException(Exception):
    """Base exception for all Placewiki errors."""

    status_code = 500
    default_code = "GENERIC_ERROR"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize a Placewiki exception.

        Args:
            message: Human-readable error message, safe to show to clients
            code: Optional machine-processable error code
            details: Additional error details
        """
        self.message = message
        self.code = code or self.default_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "detail": self.message,
            "code": self.code,
            "details": self.details,
            "timestamp": datetime.now().isoformat(),
        }


class ValidationError(PlacewikiException):
    """Raised when a required field is missing, blank or out of range."""

    status_code = 400
    default_code = "VALIDATION_ERROR"


class UnauthorizedError(PlacewikiException):
    """Raised when a privileged operation has no valid identity."""

    status_code = 401
    default_code = "UNAUTHORIZED"


class NotFoundError(PlacewikiException):
    """Raised when a referenced user, entry, comment or city does not exist."""

    status_code = 404
    default_code = "NOT_FOUND"

    def __init__(self, entity_type: str, entity_id: Any, message: Optional[str] = None):
        super().__init__(
            message or f"{entity_type} not found",
            details={"entity_type": entity_type, "entity_id": entity_id},
        )


class ConflictError(PlacewikiException):
    """Raised on a duplicate-location entry or any uniqueness violation."""

    status_code = 409
    default_code = "CONFLICT"


class InternalError(PlacewikiException):
    """Raised for unexpected storage or upstream failures; the message stays generic."""

    status_code = 500
    default_code = "INTERNAL_ERROR"

    def __init__(self, message: str = "Internal Server Error", status_code: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        if status_code is not None:
            self.status_code = status_code
