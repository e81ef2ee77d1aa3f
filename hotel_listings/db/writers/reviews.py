from typing import Optional

from sqlalchemy import insert
from sqlalchemy.engine import Connection

from hotel_listings.metrics import db_operations
from hotel_listings.models.enums import ListingStatus
from hotel_listings.models.reviews import ReviewLog
from hotel_listings.utils.datetime import utc_now


def insert_review_log(
    conn: Connection,
    listing_id: int,
    reviewer_id: int,
    from_status: ListingStatus,
    to_status: ListingStatus,
    reason: Optional[str] = None,
) -> int:
    """
    Append an audit entry for an executed transition.

    Must be called on the same connection and transaction as the status
    update it records.

    Args:
        conn (Connection): SQLAlchemy connection (within transaction).
        listing_id (int): Listing ID.
        reviewer_id (int): Identity that executed the transition.
        from_status (ListingStatus): Status before the transition.
        to_status (ListingStatus): Status after the transition.
        reason (Optional[str]): Free-text reason, if any.

    Returns:
        int: ID of the new review log entry.
    """
    result = conn.execute(
        insert(ReviewLog).values(
            listing_id=listing_id,
            reviewer_id=reviewer_id,
            from_status=from_status,
            to_status=to_status,
            reason=reason,
            created_at=utc_now(),
        )
    )
    db_operations.labels(operation="insert", table="review_logs").inc()
    return result.inserted_primary_key[0]
