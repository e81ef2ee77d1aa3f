from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.sql import func

from hotel_listings.models.base import Base
from hotel_listings.models.enums import ListingStatus, NearbySpotType, PromotionType


class Listing(Base):
    """
    ORM model for a hotel listing.

    A listing is owned by exactly one merchant (``owner_id``, immutable after
    creation) and moves through the review lifecycle via ``status``.
    ``min_price`` is a cached aggregate of the listing's room type base prices
    and is only ever written by the room inventory service.
    """

    __tablename__ = "listings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(Integer, nullable=False, index=True)
    name_zh = Column(String(200), nullable=False)
    name_en = Column(String(200), nullable=False)
    address = Column(String(500), nullable=False)
    city = Column(String(100), nullable=False, index=True)
    star_level = Column(Integer, nullable=False)
    phone = Column(String(50), nullable=False)
    description = Column(Text, nullable=False, default="")
    min_price = Column(Numeric(10, 2, asdecimal=False), nullable=True)
    status = Column(
        Enum(ListingStatus, native_enum=False, length=16),
        nullable=False,
        default=ListingStatus.DRAFT,
        index=True,
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )


class ListingImage(Base):
    """Listing photo; ``sort`` is the display rank and is not required to be unique."""

    __tablename__ = "listing_images"

    id = Column(Integer, primary_key=True, autoincrement=True)
    listing_id = Column(
        Integer, ForeignKey("listings.id", ondelete="CASCADE"), nullable=False, index=True
    )
    url = Column(String(1000), nullable=False)
    sort = Column(Integer, nullable=False, default=0)
    is_cover = Column(Boolean, nullable=False, default=False)


class NearbySpot(Base):
    __tablename__ = "nearby_spots"

    id = Column(Integer, primary_key=True, autoincrement=True)
    listing_id = Column(
        Integer, ForeignKey("listings.id", ondelete="CASCADE"), nullable=False, index=True
    )
    type = Column(Enum(NearbySpotType, native_enum=False, length=16), nullable=False)
    name = Column(String(200), nullable=False)
    distance = Column(String(50), nullable=False)


class Promotion(Base):
    """
    Listing-level promotion.

    DISCOUNT promotions use ``discount_rate`` (e.g. 0.85); REDUCTION promotions
    take ``reduce_amount`` off once the order reaches ``min_amount``.
    """

    __tablename__ = "promotions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    listing_id = Column(
        Integer, ForeignKey("listings.id", ondelete="CASCADE"), nullable=False, index=True
    )
    type = Column(Enum(PromotionType, native_enum=False, length=16), nullable=False)
    discount_rate = Column(Float, nullable=True)
    reduce_amount = Column(Numeric(10, 2, asdecimal=False), nullable=True)
    min_amount = Column(Numeric(10, 2, asdecimal=False), nullable=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
