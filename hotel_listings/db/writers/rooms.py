from typing import Any

from sqlalchemy import delete, insert, update
from sqlalchemy.engine import Connection

from hotel_listings.metrics import db_operations
from hotel_listings.models.rooms import PriceRule, RoomType
from hotel_listings.utils.datetime import utc_now


def insert_room_type(conn: Connection, listing_id: int, data: dict[str, Any]) -> int:
    """
    Insert a room type for a listing.

    Args:
        conn (Connection): SQLAlchemy connection (within transaction).
        listing_id (int): Parent listing ID.
        data (dict[str, Any]): Room type columns.

    Returns:
        int: ID of the new room type.
    """
    now = utc_now()
    result = conn.execute(
        insert(RoomType).values(**data, listing_id=listing_id, created_at=now, updated_at=now)
    )
    db_operations.labels(operation="insert", table="room_types").inc()
    return result.inserted_primary_key[0]


def update_room_type(conn: Connection, room_type_id: int, data: dict[str, Any]) -> None:
    conn.execute(
        update(RoomType).where(RoomType.id == room_type_id).values(**data, updated_at=utc_now())
    )
    db_operations.labels(operation="update", table="room_types").inc()


def delete_room_type(conn: Connection, room_type_id: int) -> None:
    """Delete a room type and its price rules."""
    conn.execute(delete(PriceRule).where(PriceRule.room_type_id == room_type_id))
    conn.execute(delete(RoomType).where(RoomType.id == room_type_id))
    db_operations.labels(operation="delete", table="room_types").inc()


def insert_price_rule(conn: Connection, room_type_id: int, data: dict[str, Any]) -> int:
    result = conn.execute(insert(PriceRule).values(**data, room_type_id=room_type_id))
    db_operations.labels(operation="insert", table="price_rules").inc()
    return result.inserted_primary_key[0]


def update_price_rule(conn: Connection, price_rule_id: int, data: dict[str, Any]) -> None:
    if not data:
        return
    conn.execute(update(PriceRule).where(PriceRule.id == price_rule_id).values(**data))
    db_operations.labels(operation="update", table="price_rules").inc()


def delete_price_rule(conn: Connection, price_rule_id: int) -> None:
    conn.execute(delete(PriceRule).where(PriceRule.id == price_rule_id))
    db_operations.labels(operation="delete", table="price_rules").inc()
