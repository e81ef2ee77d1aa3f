from datetime import datetime
from typing import Optional

from pydantic import Field

from hotel_listings.models.enums import ListingStatus
from hotel_listings.schemas.common import CamelModel


class ReviewActionPayload(CamelModel):
    """
    Schema for an admin review action.

    ``action`` is one of APPROVE, REJECT, OFFLINE, ONLINE. A non-blank
    ``reason`` is required for REJECT.
    """

    hotel_id: int = Field(..., description="Listing ID")
    action: str = Field(..., description="APPROVE, REJECT, OFFLINE or ONLINE")
    reason: Optional[str] = Field(None, description="Reason shown to the merchant")


class SubmitPayload(CamelModel):
    reason: Optional[str] = Field(None, description="Optional note for the reviewer")


class ReviewLogOut(CamelModel):
    id: int
    listing_id: int = Field(..., serialization_alias="hotelId")
    reviewer_id: int
    from_status: ListingStatus
    to_status: ListingStatus
    reason: Optional[str] = None
    created_at: datetime
