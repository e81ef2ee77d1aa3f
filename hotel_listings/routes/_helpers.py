"""
Internal helper functions for route handlers.

Maps domain errors raised by the services to HTTP errors with a structured
body: ``{"detail": {"error": <kind>, "message": ..., **context}}``.
"""

from __future__ import annotations

from fastapi import HTTPException, status

from hotel_listings.errors import (
    ForbiddenError,
    InvalidStateError,
    InvalidTransitionError,
    ListingServiceError,
    NotFoundError,
    ValidationError,
)

STATUS_CODES: dict[type[ListingServiceError], int] = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ForbiddenError: status.HTTP_403_FORBIDDEN,
    InvalidTransitionError: status.HTTP_409_CONFLICT,
    InvalidStateError: status.HTTP_409_CONFLICT,
    ValidationError: status.HTTP_422_UNPROCESSABLE_ENTITY,
}


def to_http_exception(error: ListingServiceError) -> HTTPException:
    """
    Convert a domain error into an HTTPException.

    Args:
        error: Domain error raised by a service

    Returns:
        HTTPException: Exception with the mapped status code and structured detail
    """
    status_code = STATUS_CODES.get(type(error), status.HTTP_400_BAD_REQUEST)
    return HTTPException(status_code=status_code, detail=error.to_dict())
