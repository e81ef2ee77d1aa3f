from sqlalchemy import Boolean, Column, ForeignKey, Integer, String, text

from hotel_listings.models.base import Base


class Banner(Base):
    """Home page banner, optionally linking to a listing."""

    __tablename__ = "banners"

    id = Column(Integer, primary_key=True, autoincrement=True)
    image_url = Column(String(1000), nullable=False)
    listing_id = Column(
        Integer, ForeignKey("listings.id", ondelete="SET NULL"), nullable=True, index=True
    )
    sort = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, server_default=text("TRUE"))
