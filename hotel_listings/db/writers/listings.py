from typing import Any, Optional

import structlog
from sqlalchemy import delete, insert, select, update
from sqlalchemy.engine import Connection

from hotel_listings.metrics import db_operations
from hotel_listings.models.banners import Banner
from hotel_listings.models.enums import ListingStatus
from hotel_listings.models.listings import Listing, ListingImage, NearbySpot, Promotion
from hotel_listings.models.rooms import PriceRule, RoomType
from hotel_listings.utils.datetime import utc_now

logger = structlog.get_logger(__name__)


def insert_listing(conn: Connection, owner_id: int, data: dict[str, Any]) -> int:
    """
    Insert a new listing in DRAFT status.

    Args:
        conn (Connection): SQLAlchemy connection (within transaction).
        owner_id (int): Owning merchant identity.
        data (dict[str, Any]): Descriptive listing columns.

    Returns:
        int: ID of the new listing.
    """
    now = utc_now()
    result = conn.execute(
        insert(Listing).values(
            **data,
            owner_id=owner_id,
            status=ListingStatus.DRAFT,
            min_price=None,
            created_at=now,
            updated_at=now,
        )
    )
    db_operations.labels(operation="insert", table="listings").inc()
    return result.inserted_primary_key[0]


def update_listing_fields(conn: Connection, listing_id: int, data: dict[str, Any]) -> None:
    """
    Update descriptive columns of a listing and bump ``updated_at``.

    Args:
        conn (Connection): SQLAlchemy connection (within transaction).
        listing_id (int): Listing ID.
        data (dict[str, Any]): Columns to update (may be empty).
    """
    conn.execute(
        update(Listing).where(Listing.id == listing_id).values(**data, updated_at=utc_now())
    )
    db_operations.labels(operation="update", table="listings").inc()


# Each promotion type fills only some amount columns; executemany needs every key.
PROMOTION_DEFAULTS = {"discount_rate": None, "reduce_amount": None, "min_amount": None}


def replace_images(conn: Connection, listing_id: int, images: list[dict[str, Any]]) -> None:
    """Replace all images of a listing (delete then insert)."""
    conn.execute(delete(ListingImage).where(ListingImage.listing_id == listing_id))
    if images:
        conn.execute(insert(ListingImage), [{**img, "listing_id": listing_id} for img in images])
    db_operations.labels(operation="update", table="listing_images").inc()


def replace_nearby_spots(conn: Connection, listing_id: int, spots: list[dict[str, Any]]) -> None:
    """Replace all nearby spots of a listing (delete then insert)."""
    conn.execute(delete(NearbySpot).where(NearbySpot.listing_id == listing_id))
    if spots:
        conn.execute(insert(NearbySpot), [{**spot, "listing_id": listing_id} for spot in spots])
    db_operations.labels(operation="update", table="nearby_spots").inc()


def replace_promotions(conn: Connection, listing_id: int, promotions: list[dict[str, Any]]) -> None:
    """Replace all promotions of a listing (delete then insert)."""
    conn.execute(delete(Promotion).where(Promotion.listing_id == listing_id))
    if promotions:
        rows = [{**PROMOTION_DEFAULTS, **promo, "listing_id": listing_id} for promo in promotions]
        conn.execute(insert(Promotion), rows)
    db_operations.labels(operation="update", table="promotions").inc()


def transition_status(
    conn: Connection,
    listing_id: int,
    from_status: ListingStatus,
    to_status: ListingStatus,
) -> bool:
    """
    Move a listing from one status to another, only if it is still in ``from_status``.

    The WHERE clause on the current status makes this a compare-and-set: when
    two transactions race on the same listing, only one of them matches a row.

    Args:
        conn (Connection): SQLAlchemy connection (within transaction).
        listing_id (int): Listing ID.
        from_status (ListingStatus): Status the caller observed.
        to_status (ListingStatus): Status to set.

    Returns:
        bool: True if the row was updated, False if the status had already changed.
    """
    result = conn.execute(
        update(Listing)
        .where(Listing.id == listing_id)
        .where(Listing.status == from_status)
        .values(status=to_status, updated_at=utc_now())
    )
    db_operations.labels(operation="update", table="listings").inc()
    return result.rowcount == 1


def set_min_price(conn: Connection, listing_id: int, min_price: Optional[float]) -> None:
    """
    Store the cached minimum room price of a listing.

    ``updated_at`` is left alone: the aggregate is derived data, not an edit.
    """
    conn.execute(update(Listing).where(Listing.id == listing_id).values(min_price=min_price))
    db_operations.labels(operation="update", table="listings").inc()


def delete_listing_cascade(conn: Connection, listing_id: int) -> None:
    """
    Permanently delete a listing and every dependent row.

    Children are removed explicitly rather than relying on ON DELETE CASCADE,
    which SQLite only honours with foreign keys enabled. Banners pointing at the
    listing are detached, not deleted.

    Args:
        conn (Connection): SQLAlchemy connection (within transaction).
        listing_id (int): Listing ID.
    """
    room_type_ids = select(RoomType.id).where(RoomType.listing_id == listing_id)

    conn.execute(delete(PriceRule).where(PriceRule.room_type_id.in_(room_type_ids)))
    conn.execute(delete(RoomType).where(RoomType.listing_id == listing_id))
    conn.execute(delete(ListingImage).where(ListingImage.listing_id == listing_id))
    conn.execute(delete(NearbySpot).where(NearbySpot.listing_id == listing_id))
    conn.execute(delete(Promotion).where(Promotion.listing_id == listing_id))
    conn.execute(update(Banner).where(Banner.listing_id == listing_id).values(listing_id=None))
    conn.execute(delete(Listing).where(Listing.id == listing_id))

    db_operations.labels(operation="delete", table="listings").inc()
    logger.debug("listing_rows_deleted", listing_id=listing_id)
