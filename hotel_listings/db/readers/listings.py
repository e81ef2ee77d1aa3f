from __future__ import annotations

from typing import Any, Iterable, Optional

from sqlalchemy import select
from sqlalchemy.engine import Connection

from hotel_listings.db.readers.rooms import list_room_types
from hotel_listings.models.enums import ListingStatus
from hotel_listings.models.listings import Listing, ListingImage, NearbySpot, Promotion

listings_table = Listing.__table__


def get_listing_row(
    conn: Connection, listing_id: int, for_update: bool = False
) -> Optional[dict[str, Any]]:
    """
    Fetch the listing row (without child collections).

    Args:
        conn (Connection): Active SQLAlchemy connection.
        listing_id (int): Listing ID.
        for_update (bool): Lock the row until the surrounding transaction ends.
            Ignored by SQLite, which serialises writers on its own.

    Returns:
        Optional[dict[str, Any]]: Listing columns, or None if not found.
    """
    stmt = select(listings_table).where(Listing.id == listing_id)
    if for_update:
        stmt = stmt.with_for_update()

    row = conn.execute(stmt).mappings().first()
    return dict(row) if row else None


def get_listing_status(conn: Connection, listing_id: int) -> Optional[ListingStatus]:
    """
    Read only the current status of a listing.

    Args:
        conn (Connection): Active SQLAlchemy connection.
        listing_id (int): Listing ID.

    Returns:
        Optional[ListingStatus]: Current status, or None if the listing is gone.
    """
    return conn.execute(select(Listing.status).where(Listing.id == listing_id)).scalar()


def get_images_for_listings(
    conn: Connection, listing_ids: Iterable[int]
) -> dict[int, list[dict[str, Any]]]:
    """
    Load images for several listings at once, ordered by display rank.

    Args:
        conn (Connection): Active SQLAlchemy connection.
        listing_ids (Iterable[int]): Listings to load images for.

    Returns:
        dict[int, list[dict]]: Images keyed by listing ID (every requested ID present).
    """
    ids = list(listing_ids)
    images: dict[int, list[dict[str, Any]]] = {listing_id: [] for listing_id in ids}
    if not ids:
        return images

    rows = conn.execute(
        select(ListingImage.__table__)
        .where(ListingImage.listing_id.in_(ids))
        .order_by(ListingImage.listing_id, ListingImage.sort, ListingImage.id)
    ).mappings()

    for row in rows:
        images[row["listing_id"]].append(dict(row))
    return images


def get_nearby_spots(conn: Connection, listing_id: int) -> list[dict[str, Any]]:
    rows = conn.execute(
        select(NearbySpot.__table__)
        .where(NearbySpot.listing_id == listing_id)
        .order_by(NearbySpot.id)
    ).mappings()
    return [dict(row) for row in rows]


def get_promotions(conn: Connection, listing_id: int) -> list[dict[str, Any]]:
    rows = conn.execute(
        select(Promotion.__table__)
        .where(Promotion.listing_id == listing_id)
        .order_by(Promotion.start_date, Promotion.id)
    ).mappings()
    return [dict(row) for row in rows]


def get_promotions_for_listings(
    conn: Connection, listing_ids: Iterable[int]
) -> dict[int, list[dict[str, Any]]]:
    """Load promotions for several listings at once, keyed by listing ID."""
    ids = list(listing_ids)
    promotions: dict[int, list[dict[str, Any]]] = {listing_id: [] for listing_id in ids}
    if not ids:
        return promotions

    rows = conn.execute(
        select(Promotion.__table__)
        .where(Promotion.listing_id.in_(ids))
        .order_by(Promotion.listing_id, Promotion.start_date, Promotion.id)
    ).mappings()

    for row in rows:
        promotions[row["listing_id"]].append(dict(row))
    return promotions


def get_listing_detail(conn: Connection, listing_id: int) -> Optional[dict[str, Any]]:
    """
    Fetch a listing with all of its child collections.

    Includes images (ordered by rank), nearby spots, promotions and room types
    with their price rules.

    Args:
        conn (Connection): Active SQLAlchemy connection.
        listing_id (int): Listing ID.

    Returns:
        Optional[dict[str, Any]]: Listing detail, or None if not found.
    """
    listing = get_listing_row(conn, listing_id)
    if listing is None:
        return None

    listing["images"] = get_images_for_listings(conn, [listing_id])[listing_id]
    listing["nearby_spots"] = get_nearby_spots(conn, listing_id)
    listing["promotions"] = get_promotions(conn, listing_id)
    listing["room_types"] = list_room_types(conn, listing_id)
    return listing
