"""
Unit tests for mapping domain errors to HTTP errors.
"""

from __future__ import annotations

import pytest

from hotel_listings.errors import (
    ForbiddenError,
    InvalidStateError,
    InvalidTransitionError,
    ListingServiceError,
    NotFoundError,
    ValidationError,
)
from hotel_listings.routes._helpers import to_http_exception


@pytest.mark.unit
@pytest.mark.parametrize(
    "error,status_code",
    [
        (NotFoundError("Listing 1 not found", listing_id=1), 404),
        (ForbiddenError("nope"), 403),
        (InvalidTransitionError("APPROVED", "SUBMIT"), 409),
        (InvalidStateError("Listing cannot be edited", current_status="PENDING"), 409),
        (ValidationError("A reason is required", field="reason"), 422),
        (ListingServiceError("generic"), 400),
    ],
)
def test_error_status_codes(error: ListingServiceError, status_code: int) -> None:
    assert to_http_exception(error).status_code == status_code


@pytest.mark.unit
def test_invalid_transition_detail_names_status_and_action() -> None:
    """Test that the rendered error carries the current status and rejected action."""
    exc = to_http_exception(InvalidTransitionError("APPROVED", "SUBMIT"))

    assert exc.detail == {
        "error": "invalid_transition",
        "message": "Action SUBMIT is not allowed while listing status is APPROVED",
        "current_status": "APPROVED",
        "action": "SUBMIT",
    }


@pytest.mark.unit
def test_error_context_is_included_in_detail() -> None:
    exc = to_http_exception(NotFoundError("Room type 3 not found", room_type_id=3))

    assert exc.detail["error"] == "not_found"
    assert exc.detail["room_type_id"] == 3
