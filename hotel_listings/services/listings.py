"""
Listing editing service.

Create, update, read and delete listings. Descriptive fields and child
collections (images, nearby spots, promotions) are editable by the owning
merchant only while the listing is DRAFT or REJECTED. Status changes are never
made here; they go through the lifecycle engine.
"""

from __future__ import annotations

from typing import Any, Optional

import structlog
from sqlalchemy.engine import Connection, Engine

from hotel_listings.db.readers.listings import get_listing_detail, get_listing_row
from hotel_listings.db.readers.reviews import list_review_logs
from hotel_listings.db.writers.listings import (
    insert_listing,
    replace_images,
    replace_nearby_spots,
    replace_promotions,
    update_listing_fields,
)
from hotel_listings.errors import (
    ForbiddenError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from hotel_listings.identity import Identity
from hotel_listings.models.enums import EDITABLE_STATUSES, STAR_LEVELS
from hotel_listings.services.lifecycle import ReviewAction, execute_transition

logger = structlog.get_logger(__name__)

LISTING_FIELDS = ("name_zh", "name_en", "address", "city", "star_level", "phone", "description")
CHILD_COLLECTIONS = ("images", "nearby_spots", "promotions")


def ensure_listing_owner(
    conn: Connection, listing_id: int, identity: Identity, for_update: bool = False
) -> dict[str, Any]:
    """
    Load a listing and check that the identity owns it.

    Args:
        conn: Active connection
        listing_id: Listing ID
        identity: Caller identity
        for_update: Lock the listing row for the rest of the transaction

    Returns:
        dict: Listing row

    Raises:
        NotFoundError: Listing does not exist
        ForbiddenError: Caller is not the owner
    """
    listing = get_listing_row(conn, listing_id, for_update=for_update)
    if listing is None:
        raise NotFoundError(f"Listing {listing_id} not found", listing_id=listing_id)
    if listing["owner_id"] != identity.user_id:
        raise ForbiddenError(
            "You do not have permission to modify this listing", listing_id=listing_id
        )
    return listing


def _validate_star_level(star_level: Any) -> None:
    if star_level is not None and star_level not in STAR_LEVELS:
        raise ValidationError(
            f"star_level must be one of {sorted(STAR_LEVELS)}", field="star_level"
        )


def _write_children(conn: Connection, listing_id: int, data: dict[str, Any]) -> None:
    if data.get("images") is not None:
        replace_images(conn, listing_id, data["images"])
    if data.get("nearby_spots") is not None:
        replace_nearby_spots(conn, listing_id, data["nearby_spots"])
    if data.get("promotions") is not None:
        replace_promotions(conn, listing_id, data["promotions"])


def create_listing(engine: Engine, identity: Identity, data: dict[str, Any]) -> dict[str, Any]:
    """
    Create a listing in DRAFT status owned by the caller.

    Args:
        engine: SQLAlchemy engine
        identity: Caller identity (must be a merchant)
        data: Listing fields plus optional ``images``, ``nearby_spots`` and ``promotions``

    Returns:
        dict: Listing detail
    """
    if not identity.is_merchant:
        raise ForbiddenError("Only merchants can create listings")
    _validate_star_level(data.get("star_level"))

    fields = {key: data[key] for key in LISTING_FIELDS if data.get(key) is not None}

    with engine.begin() as conn:
        listing_id = insert_listing(conn, identity.user_id, fields)
        _write_children(conn, listing_id, data)
        listing = get_listing_detail(conn, listing_id)

    logger.info("listing_created", listing_id=listing_id, owner_id=identity.user_id)
    return listing


def update_listing(
    engine: Engine, listing_id: int, identity: Identity, data: dict[str, Any]
) -> dict[str, Any]:
    """
    Partially update a listing owned by the caller.

    Only fields present (not None) in ``data`` are changed. A child collection
    present in ``data`` replaces the stored one.

    Raises:
        NotFoundError: Listing does not exist
        ForbiddenError: Caller is not the owner
        InvalidStateError: Listing is not DRAFT or REJECTED
        ValidationError: Star level outside {2, 3, 4, 5}
    """
    _validate_star_level(data.get("star_level"))
    fields = {key: data[key] for key in LISTING_FIELDS if data.get(key) is not None}

    with engine.begin() as conn:
        listing = ensure_listing_owner(conn, listing_id, identity, for_update=True)

        if listing["status"] not in EDITABLE_STATUSES:
            raise InvalidStateError(
                f"Listing cannot be edited while status is {listing['status'].value}",
                listing_id=listing_id,
                current_status=listing["status"].value,
            )

        update_listing_fields(conn, listing_id, fields)
        _write_children(conn, listing_id, data)
        updated = get_listing_detail(conn, listing_id)

    logger.info(
        "listing_updated",
        listing_id=listing_id,
        fields=sorted(fields),
        collections=[key for key in CHILD_COLLECTIONS if data.get(key) is not None],
    )
    return updated


def delete_listing(engine: Engine, listing_id: int, identity: Identity) -> None:
    """Delete a DRAFT listing owned by the caller, with all of its child records."""
    execute_transition(engine, listing_id, ReviewAction.DELETE, identity)


def get_listing(engine: Engine, listing_id: int) -> dict[str, Any]:
    """
    Fetch a listing with images, nearby spots, promotions and room types.

    Raises:
        NotFoundError: Listing does not exist
    """
    with engine.connect() as conn:
        listing = get_listing_detail(conn, listing_id)
    if listing is None:
        raise NotFoundError(f"Listing {listing_id} not found", listing_id=listing_id)
    return listing


def list_audit_log(
    engine: Engine, listing_id: int, identity: Optional[Identity]
) -> list[dict[str, Any]]:
    """
    List review log entries of a listing, newest first.

    Admins may read any listing's log; merchants only their own.

    Raises:
        NotFoundError: Listing does not exist
        ForbiddenError: Caller is neither admin nor owner
    """
    with engine.connect() as conn:
        listing = get_listing_row(conn, listing_id)
        if listing is None:
            raise NotFoundError(f"Listing {listing_id} not found", listing_id=listing_id)
        if identity is None or not (identity.is_admin or listing["owner_id"] == identity.user_id):
            raise ForbiddenError(
                "You do not have permission to view this review log", listing_id=listing_id
            )
        return list_review_logs(conn, listing_id)
