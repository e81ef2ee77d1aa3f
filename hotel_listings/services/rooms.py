"""
Room inventory service.

Room type and price rule CRUD for the owning merchant. Room type mutations
are allowed in every listing status. Every room type insert, update or
delete finishes by recomputing the parent listing's cached ``min_price``
inside the same transaction, with the listing row locked, so concurrent
mutations of one listing serialise and the cache always matches the committed
room types.
"""

from __future__ import annotations

from typing import Any, Optional

import structlog
from sqlalchemy.engine import Connection, Engine

from hotel_listings.db.readers.listings import get_listing_row
from hotel_listings.db.readers.rooms import (
    get_min_base_price,
    get_price_rule_row,
    get_room_type_detail,
    get_room_type_row,
    list_price_rules as read_price_rules,
    list_room_types as read_room_types,
)
from hotel_listings.db.writers import rooms as room_writer
from hotel_listings.db.writers.listings import set_min_price
from hotel_listings.errors import NotFoundError, ValidationError
from hotel_listings.identity import Identity
from hotel_listings.metrics import min_price_recomputes
from hotel_listings.services.listings import ensure_listing_owner

logger = structlog.get_logger(__name__)

ROOM_TYPE_FIELDS = (
    "name",
    "bed_type",
    "area",
    "max_guests",
    "base_price",
    "stock",
    "description",
    "facilities",
    "images",
)
PRICE_RULE_FIELDS = ("type", "start_date", "end_date", "price")


def recompute_min_price(conn: Connection, listing_id: int) -> Optional[float]:
    """
    Recompute and persist a listing's minimum room price.

    Must run on the connection of the room type mutation that triggered it,
    as the last step before commit.

    Returns:
        Optional[float]: New minimum price, or None when the listing has no room types.
    """
    min_price = get_min_base_price(conn, listing_id)
    set_min_price(conn, listing_id, min_price)
    min_price_recomputes.inc()
    logger.debug("min_price_recomputed", listing_id=listing_id, min_price=min_price)
    return min_price


def _require_room_type(conn: Connection, room_type_id: int) -> dict[str, Any]:
    room = get_room_type_row(conn, room_type_id)
    if room is None:
        raise NotFoundError(f"Room type {room_type_id} not found", room_type_id=room_type_id)
    return room


def _validate_date_range(start_date: Any, end_date: Any) -> None:
    if start_date is not None and end_date is not None and end_date < start_date:
        raise ValidationError("end_date must not be before start_date", field="end_date")


# ---- Room types ----


def list_room_types(engine: Engine, listing_id: int) -> list[dict[str, Any]]:
    """List a listing's room types, cheapest first, each with its price rules."""
    with engine.connect() as conn:
        return read_room_types(conn, listing_id)


def get_room_type(engine: Engine, room_type_id: int) -> dict[str, Any]:
    with engine.connect() as conn:
        room = get_room_type_detail(conn, room_type_id)
    if room is None:
        raise NotFoundError(f"Room type {room_type_id} not found", room_type_id=room_type_id)
    return room


def create_room_type(
    engine: Engine, identity: Identity, listing_id: int, data: dict[str, Any]
) -> dict[str, Any]:
    """
    Create a room type on a listing owned by the caller.

    Raises:
        NotFoundError: Listing does not exist
        ForbiddenError: Caller is not the owner
    """
    fields = {key: data[key] for key in ROOM_TYPE_FIELDS if data.get(key) is not None}
    fields.setdefault("facilities", [])
    fields.setdefault("images", [])

    with engine.begin() as conn:
        ensure_listing_owner(conn, listing_id, identity, for_update=True)
        room_type_id = room_writer.insert_room_type(conn, listing_id, fields)
        recompute_min_price(conn, listing_id)
        room = get_room_type_detail(conn, room_type_id)

    logger.info("room_type_created", room_type_id=room_type_id, listing_id=listing_id)
    return room


def update_room_type(
    engine: Engine, identity: Identity, room_type_id: int, data: dict[str, Any]
) -> dict[str, Any]:
    """
    Partially update a room type of a listing owned by the caller.

    Raises:
        NotFoundError: Room type does not exist
        ForbiddenError: Caller does not own the parent listing
    """
    fields = {key: data[key] for key in ROOM_TYPE_FIELDS if data.get(key) is not None}

    with engine.begin() as conn:
        room = _require_room_type(conn, room_type_id)
        ensure_listing_owner(conn, room["listing_id"], identity, for_update=True)
        if fields:
            room_writer.update_room_type(conn, room_type_id, fields)
        recompute_min_price(conn, room["listing_id"])
        updated = get_room_type_detail(conn, room_type_id)

    logger.info("room_type_updated", room_type_id=room_type_id, fields=sorted(fields))
    return updated


def delete_room_type(engine: Engine, identity: Identity, room_type_id: int) -> None:
    """
    Delete a room type and its price rules.

    Raises:
        NotFoundError: Room type does not exist
        ForbiddenError: Caller does not own the parent listing
    """
    with engine.begin() as conn:
        room = _require_room_type(conn, room_type_id)
        ensure_listing_owner(conn, room["listing_id"], identity, for_update=True)
        room_writer.delete_room_type(conn, room_type_id)
        recompute_min_price(conn, room["listing_id"])

    logger.info("room_type_deleted", room_type_id=room_type_id, listing_id=room["listing_id"])


# ---- Price rules ----


def list_price_rules(engine: Engine, room_type_id: int) -> list[dict[str, Any]]:
    with engine.connect() as conn:
        return read_price_rules(conn, room_type_id)


def create_price_rule(
    engine: Engine, identity: Identity, room_type_id: int, data: dict[str, Any]
) -> dict[str, Any]:
    """
    Add a price rule to a room type of a listing owned by the caller.

    Overlapping rules are stored as given.

    Raises:
        NotFoundError: Room type does not exist
        ForbiddenError: Caller does not own the parent listing
        ValidationError: end_date before start_date
    """
    _validate_date_range(data.get("start_date"), data.get("end_date"))
    fields = {key: data[key] for key in PRICE_RULE_FIELDS if data.get(key) is not None}

    with engine.begin() as conn:
        room = _require_room_type(conn, room_type_id)
        ensure_listing_owner(conn, room["listing_id"], identity)
        price_rule_id = room_writer.insert_price_rule(conn, room_type_id, fields)
        rule = get_price_rule_row(conn, price_rule_id)

    logger.info("price_rule_created", price_rule_id=price_rule_id, room_type_id=room_type_id)
    return rule


def update_price_rule(
    engine: Engine, identity: Identity, price_rule_id: int, data: dict[str, Any]
) -> dict[str, Any]:
    """
    Partially update a price rule.

    Raises:
        NotFoundError: Price rule does not exist
        ForbiddenError: Caller does not own the parent listing
        ValidationError: Resulting end_date before start_date
    """
    fields = {key: data[key] for key in PRICE_RULE_FIELDS if data.get(key) is not None}

    with engine.begin() as conn:
        rule = get_price_rule_row(conn, price_rule_id)
        if rule is None:
            raise NotFoundError(
                f"Price rule {price_rule_id} not found", price_rule_id=price_rule_id
            )
        ensure_listing_owner(conn, rule["listing_id"], identity)
        _validate_date_range(
            fields.get("start_date", rule["start_date"]), fields.get("end_date", rule["end_date"])
        )
        room_writer.update_price_rule(conn, price_rule_id, fields)
        updated = get_price_rule_row(conn, price_rule_id)

    logger.info("price_rule_updated", price_rule_id=price_rule_id, fields=sorted(fields))
    return updated


def delete_price_rule(engine: Engine, identity: Identity, price_rule_id: int) -> None:
    with engine.begin() as conn:
        rule = get_price_rule_row(conn, price_rule_id)
        if rule is None:
            raise NotFoundError(
                f"Price rule {price_rule_id} not found", price_rule_id=price_rule_id
            )
        ensure_listing_owner(conn, rule["listing_id"], identity)
        room_writer.delete_price_rule(conn, price_rule_id)

    logger.info("price_rule_deleted", price_rule_id=price_rule_id)
