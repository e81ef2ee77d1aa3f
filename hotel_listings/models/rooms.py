from sqlalchemy import (
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

from hotel_listings.models.base import Base, JSONList
from hotel_listings.models.enums import BedType, PriceRuleType


class RoomType(Base):
    """
    ORM model for a bookable room type of a listing.

    ``facilities`` and ``images`` are stored as native JSON arrays of strings.
    Any insert, update or delete of a room type must be followed by a
    recompute of the parent listing's ``min_price``.
    """

    __tablename__ = "room_types"

    id = Column(Integer, primary_key=True, autoincrement=True)
    listing_id = Column(
        Integer, ForeignKey("listings.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name = Column(String(200), nullable=False)
    bed_type = Column(Enum(BedType, native_enum=False, length=16), nullable=False)
    area = Column(Float, nullable=False)
    max_guests = Column(Integer, nullable=False)
    base_price = Column(Numeric(10, 2, asdecimal=False), nullable=False)
    stock = Column(Integer, nullable=False, default=0)
    description = Column(Text, nullable=True)
    facilities = Column(JSONList, nullable=False, default=list)
    images = Column(JSONList, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )


class PriceRule(Base):
    """
    Date-ranged price override for a room type.

    Rules may overlap; no precedence between overlapping rules is defined.
    """

    __tablename__ = "price_rules"

    id = Column(Integer, primary_key=True, autoincrement=True)
    room_type_id = Column(
        Integer, ForeignKey("room_types.id", ondelete="CASCADE"), nullable=False, index=True
    )
    type = Column(Enum(PriceRuleType, native_enum=False, length=16), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    price = Column(Numeric(10, 2, asdecimal=False), nullable=False)
