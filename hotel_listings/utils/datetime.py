"""UTC datetime utilities."""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """
    Return current UTC time as timezone-aware datetime.

    All timestamps written by this service (listing and room type timestamps,
    review log entries) go through this helper so they are stored in UTC.

    Returns:
        Timezone-aware datetime in UTC
    """
    return datetime.now(timezone.utc)
