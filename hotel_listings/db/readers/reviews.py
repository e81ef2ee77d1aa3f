from typing import Any

from sqlalchemy import func, select
from sqlalchemy.engine import Connection

from hotel_listings.models.reviews import ReviewLog


def list_review_logs(conn: Connection, listing_id: int) -> list[dict[str, Any]]:
    """
    List the audit trail of a listing, newest first.

    Args:
        conn (Connection): Active SQLAlchemy connection.
        listing_id (int): Listing ID.

    Returns:
        list[dict[str, Any]]: Review log rows.
    """
    rows = conn.execute(
        select(ReviewLog.__table__)
        .where(ReviewLog.listing_id == listing_id)
        .order_by(ReviewLog.created_at.desc(), ReviewLog.id.desc())
    ).mappings()
    return [dict(row) for row in rows]


def count_review_logs(conn: Connection, listing_id: int) -> int:
    return conn.execute(
        select(func.count()).select_from(ReviewLog).where(ReviewLog.listing_id == listing_id)
    ).scalar_one()
