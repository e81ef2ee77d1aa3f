"""
Listing query builder.

Turns optional, possibly malformed filter input into a SQLAlchemy query for
one of three views. Each view carries a base filter the caller cannot
override:

- PUBLIC_SEARCH: only APPROVED listings, whatever status filter is supplied.
- OWNER_LISTINGS: only listings owned by the caller.
- REVIEW_QUEUE: every status (admins only).

Searches are read-only.
"""

from __future__ import annotations

import enum
import math
import time
from dataclasses import dataclass
from typing import Any, Optional

import structlog
from sqlalchemy import Select, func, or_, select
from sqlalchemy.engine import Engine

from hotel_listings.config import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from hotel_listings.db.readers.listings import (
    get_images_for_listings,
    get_promotions_for_listings,
    listings_table,
)
from hotel_listings.errors import ForbiddenError
from hotel_listings.identity import Identity
from hotel_listings.metrics import listing_search_duration, listing_searches
from hotel_listings.models.enums import STAR_LEVELS, ListingStatus
from hotel_listings.models.listings import Listing

logger = structlog.get_logger(__name__)


class ListingView(str, enum.Enum):
    PUBLIC_SEARCH = "public_search"
    OWNER_LISTINGS = "owner_listings"
    REVIEW_QUEUE = "review_queue"


class SortField(str, enum.Enum):
    PRICE = "price"
    STAR_LEVEL = "starLevel"
    CREATED_AT = "createdAt"


class SortOrder(str, enum.Enum):
    ASC = "asc"
    DESC = "desc"


SORT_COLUMNS = {
    SortField.PRICE: Listing.min_price,
    SortField.STAR_LEVEL: Listing.star_level,
    SortField.CREATED_AT: Listing.created_at,
}

# Integer filters and offsets must fit a 32-bit INTEGER column.
INT32_MAX = 2**31 - 1


def parse_int(value: Any) -> Optional[int]:
    """Parse an integer filter; anything malformed or outside int32 is treated as absent."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        number = value
    else:
        try:
            parsed = float(str(value).strip())
        except ValueError:
            return None
        if not math.isfinite(parsed) or not parsed.is_integer():
            return None
        number = int(parsed)
    return number if -INT32_MAX - 1 <= number <= INT32_MAX else None


def parse_float(value: Any) -> Optional[float]:
    """Parse a numeric filter; anything malformed or non-finite is treated as absent."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(str(value).strip())
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def parse_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_status(value: Any) -> Optional[ListingStatus]:
    text = parse_text(value)
    if text is None:
        return None
    try:
        return ListingStatus(text.upper())
    except ValueError:
        return None


@dataclass(frozen=True)
class ListingFilters:
    """Optional listing filters, combined with AND semantics."""

    keyword: Optional[str] = None
    city: Optional[str] = None
    star_level: Optional[int] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    status: Optional[ListingStatus] = None

    @classmethod
    def from_raw(
        cls,
        keyword: Any = None,
        city: Any = None,
        star_level: Any = None,
        min_price: Any = None,
        max_price: Any = None,
        status: Any = None,
    ) -> ListingFilters:
        """
        Build filters from raw request values.

        Blank strings, malformed numbers, star levels outside 2-5 and unknown
        statuses become None so a bad filter never fails the request.
        """
        stars = parse_int(star_level)
        return cls(
            keyword=parse_text(keyword),
            city=parse_text(city),
            star_level=stars if stars in STAR_LEVELS else None,
            min_price=parse_float(min_price),
            max_price=parse_float(max_price),
            status=parse_status(status),
        )


@dataclass(frozen=True)
class ListingSort:
    field: SortField = SortField.CREATED_AT
    order: SortOrder = SortOrder.DESC

    @classmethod
    def from_raw(cls, sort_by: Any = None, sort_order: Any = None) -> ListingSort:
        """Unknown sort fields fall back to creation time, unknown orders to descending."""
        try:
            field = SortField(parse_text(sort_by))
        except ValueError:
            field = SortField.CREATED_AT
        order = SortOrder.ASC if (parse_text(sort_order) or "").lower() == "asc" else SortOrder.DESC
        return cls(field=field, order=order)


def build_listing_query(
    view: ListingView,
    filters: ListingFilters,
    sort: Optional[ListingSort] = None,
    owner_id: Optional[int] = None,
) -> Select:
    """
    Build the filtered and sorted listing query for a view.

    Args:
        view: Query context, which decides the mandatory base filter
        filters: Optional filters
        sort: Sort order (default: creation time, newest first)
        owner_id: Caller identity, required for OWNER_LISTINGS

    Returns:
        Select: Unpaginated query over the listings table
    """
    stmt = select(listings_table)

    if view == ListingView.PUBLIC_SEARCH:
        stmt = stmt.where(Listing.status == ListingStatus.APPROVED)
    elif view == ListingView.OWNER_LISTINGS:
        if owner_id is None:
            raise ValueError("owner_id is required for the owner listings view")
        stmt = stmt.where(Listing.owner_id == owner_id)

    if filters.status is not None and view != ListingView.PUBLIC_SEARCH:
        stmt = stmt.where(Listing.status == filters.status)

    if filters.keyword:
        stmt = stmt.where(
            or_(
                Listing.name_zh.icontains(filters.keyword, autoescape=True),
                Listing.name_en.icontains(filters.keyword, autoescape=True),
                Listing.city.icontains(filters.keyword, autoescape=True),
            )
        )

    if filters.city:
        stmt = stmt.where(Listing.city == filters.city)

    if filters.star_level is not None:
        stmt = stmt.where(Listing.star_level == filters.star_level)

    # min_price > max_price simply matches nothing
    if filters.min_price is not None:
        stmt = stmt.where(Listing.min_price >= filters.min_price)
    if filters.max_price is not None:
        stmt = stmt.where(Listing.min_price <= filters.max_price)

    sort = sort or ListingSort()
    column = SORT_COLUMNS[sort.field]
    if sort.order == SortOrder.ASC:
        stmt = stmt.order_by(column.asc(), Listing.id.asc())
    else:
        stmt = stmt.order_by(column.desc(), Listing.id.desc())

    return stmt


def normalize_page(page: Any, page_size: Any) -> tuple[int, int]:
    """
    Resolve page and page size, falling back to defaults for invalid values.

    A page whose offset would not fit a 32-bit integer also falls back to page 1.

    Returns:
        tuple[int, int]: 1-indexed page and page size capped at MAX_PAGE_SIZE.
    """
    size = parse_int(page_size)
    if size is None or size < 1:
        size = DEFAULT_PAGE_SIZE
    size = min(size, MAX_PAGE_SIZE)

    page_number = parse_int(page)
    if page_number is None or page_number < 1 or (page_number - 1) * size > INT32_MAX:
        page_number = 1
    return page_number, size


def search_listings(
    engine: Engine,
    view: ListingView,
    filters: Optional[ListingFilters] = None,
    sort: Optional[ListingSort] = None,
    page: Any = 1,
    page_size: Any = DEFAULT_PAGE_SIZE,
    identity: Optional[Identity] = None,
) -> dict[str, Any]:
    """
    Run a paginated listing search.

    Args:
        engine: SQLAlchemy engine
        view: Query context
        filters: Optional filters
        sort: Sort order
        page: 1-indexed page number
        page_size: Items per page
        identity: Caller; required for OWNER_LISTINGS, admin required for REVIEW_QUEUE

    Returns:
        dict: ``items``, ``total``, ``page``, ``page_size`` and ``total_pages``

    Raises:
        ForbiddenError: Missing identity, or non-admin on the review queue.
    """
    if view == ListingView.REVIEW_QUEUE and (identity is None or not identity.is_admin):
        raise ForbiddenError("Admin role required for the review queue")
    if view == ListingView.OWNER_LISTINGS and identity is None:
        raise ForbiddenError("Authentication required to list your listings")

    filters = filters or ListingFilters()
    page_number, size = normalize_page(page, page_size)
    owner_id = identity.user_id if view == ListingView.OWNER_LISTINGS and identity else None

    stmt = build_listing_query(view, filters, sort, owner_id=owner_id)
    count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())

    started = time.perf_counter()
    with engine.connect() as conn:
        total = conn.execute(count_stmt).scalar_one()
        rows = conn.execute(stmt.limit(size).offset((page_number - 1) * size)).mappings()
        items = [dict(row) for row in rows]

        ids = [item["id"] for item in items]
        images = get_images_for_listings(conn, ids)
        promotions = get_promotions_for_listings(conn, ids)
        for item in items:
            item["images"] = images[item["id"]]
            item["promotions"] = promotions[item["id"]]

    listing_searches.labels(view=view.value).inc()
    listing_search_duration.labels(view=view.value).observe(time.perf_counter() - started)
    logger.debug(
        "listings_searched",
        view=view.value,
        total=total,
        page=page_number,
        page_size=size,
    )

    return {
        "items": items,
        "total": total,
        "page": page_number,
        "page_size": size,
        "total_pages": math.ceil(total / size),
    }
