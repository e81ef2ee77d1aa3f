from typing import Optional

from pydantic import Field

from hotel_listings.schemas.common import CamelModel


class BannerListing(CamelModel):
    id: int
    name_zh: str
    name_en: str
    city: str
    min_price: Optional[float] = None


class BannerOut(CamelModel):
    id: int
    image_url: str
    listing_id: Optional[int] = Field(None, serialization_alias="hotelId")
    sort: int
    is_active: bool
    listing: Optional[BannerListing] = Field(None, serialization_alias="hotel")
