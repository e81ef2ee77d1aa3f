"""
Domain errors raised by the listing services.

Each error carries a machine-readable ``kind`` and optional context so the
HTTP layer can render a precise message without parsing strings.
"""

from __future__ import annotations

from typing import Any


class ListingServiceError(Exception):
    """Base class for all domain errors."""

    kind = "error"

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.kind, "message": self.message, **self.context}


class NotFoundError(ListingServiceError):
    kind = "not_found"


class ForbiddenError(ListingServiceError):
    kind = "forbidden"


class InvalidStateError(ListingServiceError):
    kind = "invalid_state"


class ValidationError(ListingServiceError):
    kind = "validation_error"


class InvalidTransitionError(ListingServiceError):
    """Raised when a lifecycle action is not allowed from the current status."""

    kind = "invalid_transition"

    def __init__(self, current_status: str, action: str) -> None:
        super().__init__(
            f"Action {action} is not allowed while listing status is {current_status}",
            current_status=current_status,
            action=action,
        )
        self.current_status = current_status
        self.action = action
