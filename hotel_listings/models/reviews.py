from sqlalchemy import Column, DateTime, Enum, ForeignKey, Integer, Text
from sqlalchemy.sql import func

from hotel_listings.models.base import Base
from hotel_listings.models.enums import ListingStatus


class ReviewLog(Base):
    """
    Append-only audit trail of listing status transitions.

    One row is written per executed transition, in the same transaction as the
    status change. Rows are never updated or deleted by the application.
    """

    __tablename__ = "review_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    listing_id = Column(Integer, ForeignKey("listings.id"), nullable=False, index=True)
    reviewer_id = Column(Integer, nullable=False)
    from_status = Column(Enum(ListingStatus, native_enum=False, length=16), nullable=False)
    to_status = Column(Enum(ListingStatus, native_enum=False, length=16), nullable=False)
    reason = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
