from datetime import date, datetime
from typing import Optional

from pydantic import Field, model_validator

from hotel_listings.models.enums import ListingStatus, NearbySpotType, PromotionType
from hotel_listings.schemas.common import CamelModel
from hotel_listings.schemas.rooms import RoomTypeOut


class ListingImageIn(CamelModel):
    url: str = Field(..., min_length=1, description="Image URL from the upload service")
    sort: int = Field(0, description="Display rank (ascending)")
    is_cover: bool = Field(False, description="Whether this is the cover image")


class NearbySpotIn(CamelModel):
    type: NearbySpotType
    name: str = Field(..., min_length=1)
    distance: str = Field(..., description="Free-form distance, e.g. '500m'")


class PromotionIn(CamelModel):
    type: PromotionType
    discount_rate: Optional[float] = Field(None, gt=0, le=1, description="e.g. 0.85 for 15% off")
    reduce_amount: Optional[float] = Field(None, ge=0)
    min_amount: Optional[float] = Field(None, ge=0)
    start_date: date
    end_date: date

    @model_validator(mode="after")
    def check_terms(self) -> "PromotionIn":
        """Require the amount field of the promotion type and an ordered date range."""
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        if self.type == PromotionType.DISCOUNT and self.discount_rate is None:
            raise ValueError("discount_rate is required for a DISCOUNT promotion")
        if self.type == PromotionType.REDUCTION and self.reduce_amount is None:
            raise ValueError("reduce_amount is required for a REDUCTION promotion")
        return self


class ListingCreatePayload(CamelModel):
    """
    Schema for creating a listing. Listings always start in DRAFT.
    """

    name_zh: str = Field(..., min_length=1, description="Chinese name")
    name_en: str = Field(..., min_length=1, description="English name")
    address: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    star_level: int = Field(..., ge=2, le=5, description="Star rating, 2 to 5")
    description: str = Field("", description="Free-text description")
    phone: str = Field(..., min_length=1, description="Contact phone")
    images: Optional[list[ListingImageIn]] = None
    nearby_spots: Optional[list[NearbySpotIn]] = None
    promotions: Optional[list[PromotionIn]] = None


class ListingUpdatePayload(CamelModel):
    """
    Schema for updating a listing. All fields are optional; a collection that
    is present replaces the stored one.
    """

    name_zh: Optional[str] = Field(None, min_length=1)
    name_en: Optional[str] = Field(None, min_length=1)
    address: Optional[str] = Field(None, min_length=1)
    city: Optional[str] = Field(None, min_length=1)
    star_level: Optional[int] = Field(None, ge=2, le=5)
    description: Optional[str] = None
    phone: Optional[str] = Field(None, min_length=1)
    images: Optional[list[ListingImageIn]] = None
    nearby_spots: Optional[list[NearbySpotIn]] = None
    promotions: Optional[list[PromotionIn]] = None


class ListingImageOut(CamelModel):
    id: int
    url: str
    sort: int
    is_cover: bool


class NearbySpotOut(CamelModel):
    id: int
    type: NearbySpotType
    name: str
    distance: str


class PromotionOut(CamelModel):
    id: int
    type: PromotionType
    discount_rate: Optional[float] = None
    reduce_amount: Optional[float] = None
    min_amount: Optional[float] = None
    start_date: date
    end_date: date


class ListingSummary(CamelModel):
    id: int
    owner_id: int
    name_zh: str
    name_en: str
    address: str
    city: str
    star_level: int
    phone: str
    description: str
    min_price: Optional[float] = None
    status: ListingStatus
    created_at: datetime
    updated_at: datetime
    images: list[ListingImageOut] = []
    promotions: list[PromotionOut] = []


class ListingDetail(ListingSummary):
    nearby_spots: list[NearbySpotOut] = []
    room_types: list[RoomTypeOut] = []
