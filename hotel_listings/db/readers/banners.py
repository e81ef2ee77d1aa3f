from typing import Any

from sqlalchemy import select
from sqlalchemy.engine import Connection

from hotel_listings.models.banners import Banner
from hotel_listings.models.listings import Listing


def list_active_banners(conn: Connection) -> list[dict[str, Any]]:
    """
    List active banners ordered by ``sort``, with a summary of the linked listing.

    Args:
        conn (Connection): Active SQLAlchemy connection.

    Returns:
        list[dict[str, Any]]: Banners; ``listing`` is None when no listing is linked.
    """
    rows = conn.execute(
        select(
            Banner.id,
            Banner.image_url,
            Banner.listing_id,
            Banner.sort,
            Banner.is_active,
            Listing.name_zh,
            Listing.name_en,
            Listing.city,
            Listing.min_price,
        )
        .outerjoin(Listing, Listing.id == Banner.listing_id)
        .where(Banner.is_active == True)  # noqa: E712
        .order_by(Banner.sort, Banner.id)
    ).mappings()

    banners = []
    for row in rows:
        listing = None
        if row["listing_id"] is not None:
            listing = {
                "id": row["listing_id"],
                "name_zh": row["name_zh"],
                "name_en": row["name_en"],
                "city": row["city"],
                "min_price": row["min_price"],
            }
        banners.append(
            {
                "id": row["id"],
                "image_url": row["image_url"],
                "listing_id": row["listing_id"],
                "sort": row["sort"],
                "is_active": row["is_active"],
                "listing": listing,
            }
        )
    return banners
