from __future__ import annotations

from typing import Any, Iterable, Optional

from sqlalchemy import func, select
from sqlalchemy.engine import Connection

from hotel_listings.models.rooms import PriceRule, RoomType


def get_room_type_row(conn: Connection, room_type_id: int) -> Optional[dict[str, Any]]:
    """
    Fetch a single room type row.

    Args:
        conn (Connection): Active SQLAlchemy connection.
        room_type_id (int): Room type ID.

    Returns:
        Optional[dict[str, Any]]: Room type columns, or None if not found.
    """
    row = (
        conn.execute(select(RoomType.__table__).where(RoomType.id == room_type_id))
        .mappings()
        .first()
    )
    return dict(row) if row else None


def get_price_rules_for_room_types(
    conn: Connection, room_type_ids: Iterable[int]
) -> dict[int, list[dict[str, Any]]]:
    """
    Load price rules for several room types, ordered by start date.

    Returns:
        dict[int, list[dict]]: Rules keyed by room type ID (every requested ID present).
    """
    ids = list(room_type_ids)
    rules: dict[int, list[dict[str, Any]]] = {room_type_id: [] for room_type_id in ids}
    if not ids:
        return rules

    rows = conn.execute(
        select(PriceRule.__table__)
        .where(PriceRule.room_type_id.in_(ids))
        .order_by(PriceRule.start_date, PriceRule.id)
    ).mappings()

    for row in rows:
        rules[row["room_type_id"]].append(dict(row))
    return rules


def get_room_type_detail(conn: Connection, room_type_id: int) -> Optional[dict[str, Any]]:
    room = get_room_type_row(conn, room_type_id)
    if room is None:
        return None
    room["price_rules"] = get_price_rules_for_room_types(conn, [room_type_id])[room_type_id]
    return room


def list_room_types(conn: Connection, listing_id: int) -> list[dict[str, Any]]:
    """
    List a listing's room types (cheapest first), each with its price rules.

    Args:
        conn (Connection): Active SQLAlchemy connection.
        listing_id (int): Parent listing ID.

    Returns:
        list[dict[str, Any]]: Room types with a ``price_rules`` list.
    """
    rows = conn.execute(
        select(RoomType.__table__)
        .where(RoomType.listing_id == listing_id)
        .order_by(RoomType.base_price, RoomType.id)
    ).mappings()
    rooms = [dict(row) for row in rows]

    rules = get_price_rules_for_room_types(conn, [room["id"] for room in rooms])
    for room in rooms:
        room["price_rules"] = rules[room["id"]]
    return rooms


def get_min_base_price(conn: Connection, listing_id: int) -> Optional[float]:
    """
    Compute the lowest base price among a listing's room types.

    Returns:
        Optional[float]: Minimum base price, or None if the listing has no room types.
    """
    return conn.execute(
        select(func.min(RoomType.base_price)).where(RoomType.listing_id == listing_id)
    ).scalar()


def get_price_rule_row(conn: Connection, price_rule_id: int) -> Optional[dict[str, Any]]:
    """
    Fetch a price rule together with the listing that owns its room type.

    Returns:
        Optional[dict[str, Any]]: Price rule columns plus ``listing_id``, or None.
    """
    row = (
        conn.execute(
            select(PriceRule.__table__, RoomType.listing_id)
            .join(RoomType, RoomType.id == PriceRule.room_type_id)
            .where(PriceRule.id == price_rule_id)
        )
        .mappings()
        .first()
    )
    return dict(row) if row else None


def list_price_rules(conn: Connection, room_type_id: int) -> list[dict[str, Any]]:
    return get_price_rules_for_room_types(conn, [room_type_id])[room_type_id]
