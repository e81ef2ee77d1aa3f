from datetime import date, datetime
from typing import Optional

from pydantic import Field

from hotel_listings.models.enums import BedType, PriceRuleType
from hotel_listings.schemas.common import CamelModel


class RoomTypeCreatePayload(CamelModel):
    hotel_id: int = Field(..., description="Parent listing ID")
    name: str = Field(..., min_length=1)
    bed_type: BedType
    area: float = Field(..., ge=0, description="Floor area in square metres")
    max_guests: int = Field(..., ge=1)
    base_price: float = Field(..., ge=0, description="Base nightly price")
    stock: int = Field(..., ge=0)
    description: Optional[str] = None
    facilities: Optional[list[str]] = None
    images: Optional[list[str]] = None


class RoomTypeUpdatePayload(CamelModel):
    name: Optional[str] = Field(None, min_length=1)
    bed_type: Optional[BedType] = None
    area: Optional[float] = Field(None, ge=0)
    max_guests: Optional[int] = Field(None, ge=1)
    base_price: Optional[float] = Field(None, ge=0)
    stock: Optional[int] = Field(None, ge=0)
    description: Optional[str] = None
    facilities: Optional[list[str]] = None
    images: Optional[list[str]] = None


class PriceRuleCreatePayload(CamelModel):
    room_type_id: int
    type: PriceRuleType
    start_date: date = Field(..., examples=["2024-01-01"])
    end_date: date = Field(..., examples=["2024-12-31"])
    price: float = Field(..., ge=0)


class PriceRuleUpdatePayload(CamelModel):
    type: Optional[PriceRuleType] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    price: Optional[float] = Field(None, ge=0)


class PriceRuleOut(CamelModel):
    id: int
    room_type_id: int
    type: PriceRuleType
    start_date: date
    end_date: date
    price: float


class RoomTypeOut(CamelModel):
    id: int
    listing_id: int = Field(..., serialization_alias="hotelId")
    name: str
    bed_type: BedType
    area: float
    max_guests: int
    base_price: float
    stock: int
    description: Optional[str] = None
    facilities: list[str] = []
    images: list[str] = []
    created_at: datetime
    updated_at: datetime
    price_rules: list[PriceRuleOut] = []
