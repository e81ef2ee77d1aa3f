"""
Integration tests for paginated listing search across the three views.
"""

from __future__ import annotations

from datetime import date
from typing import Any

import pytest
from sqlalchemy import update
from sqlalchemy.engine import Engine

from hotel_listings.errors import ForbiddenError
from hotel_listings.identity import Identity
from hotel_listings.models.enums import ListingStatus
from hotel_listings.models.listings import Listing
from hotel_listings.services.listing_query import (
    ListingFilters,
    ListingSort,
    ListingView,
    SortField,
    SortOrder,
    search_listings,
)
from hotel_listings.services.listings import update_listing


def _set_status(engine: Engine, listing_id: int, status: ListingStatus) -> None:
    with engine.begin() as conn:
        conn.execute(update(Listing).where(Listing.id == listing_id).values(status=status))


@pytest.fixture
def catalogue(
    test_engine: Engine, make_listing: Any, make_room_type: Any, other_merchant: Identity
) -> dict[str, int]:
    """Listings in several statuses, cities and price points."""
    ids = {
        "bund": make_listing(name_en="Bund View", city="Shanghai", star_level=5),
        "lake": make_listing(name_en="West Lake Inn", city="Hangzhou", star_level=3),
        "draft": make_listing(name_en="Unfinished Place", city="Shanghai", star_level=4),
        "pending": make_listing(name_en="Waiting Hotel", city="Shanghai", star_level=4),
        "rival": make_listing(
            owner=other_merchant, name_en="Rival Suites", city="Shanghai", star_level=4
        ),
    }
    make_room_type(ids["bund"], base_price=900)
    make_room_type(ids["lake"], base_price=300)
    make_room_type(ids["rival"], owner=other_merchant, base_price=600)

    for key in ("bund", "lake", "rival"):
        _set_status(test_engine, ids[key], ListingStatus.APPROVED)
    _set_status(test_engine, ids["pending"], ListingStatus.PENDING)
    return ids


def _ids(result: dict[str, Any]) -> list[int]:
    return [item["id"] for item in result["items"]]


@pytest.mark.integration
def test_public_search_returns_only_approved(
    test_engine: Engine, catalogue: dict[str, int]
) -> None:
    result = search_listings(
        test_engine,
        ListingView.PUBLIC_SEARCH,
        ListingFilters(status=ListingStatus.DRAFT),
    )

    expected = [catalogue["bund"], catalogue["lake"], catalogue["rival"]]
    assert sorted(_ids(result)) == sorted(expected)
    assert all(item["status"] == ListingStatus.APPROVED for item in result["items"])
    assert result["total"] == 3


@pytest.mark.integration
def test_owner_view_returns_only_own_listings(
    test_engine: Engine, catalogue: dict[str, int], merchant: Identity
) -> None:
    result = search_listings(test_engine, ListingView.OWNER_LISTINGS, identity=merchant)

    assert catalogue["rival"] not in _ids(result)
    assert result["total"] == 4

    pending = search_listings(
        test_engine,
        ListingView.OWNER_LISTINGS,
        ListingFilters(status=ListingStatus.PENDING),
        identity=merchant,
    )
    assert _ids(pending) == [catalogue["pending"]]


@pytest.mark.integration
def test_owner_view_requires_identity(test_engine: Engine) -> None:
    with pytest.raises(ForbiddenError):
        search_listings(test_engine, ListingView.OWNER_LISTINGS)


@pytest.mark.integration
def test_review_queue_requires_admin(
    test_engine: Engine, catalogue: dict[str, int], merchant: Identity, admin: Identity
) -> None:
    with pytest.raises(ForbiddenError):
        search_listings(test_engine, ListingView.REVIEW_QUEUE, identity=merchant)

    result = search_listings(test_engine, ListingView.REVIEW_QUEUE, identity=admin)
    assert result["total"] == 5


@pytest.mark.integration
def test_keyword_matches_names_and_city_case_insensitively(
    test_engine: Engine, catalogue: dict[str, int]
) -> None:
    by_name = search_listings(
        test_engine, ListingView.PUBLIC_SEARCH, ListingFilters(keyword="west lake")
    )
    by_city = search_listings(
        test_engine, ListingView.PUBLIC_SEARCH, ListingFilters(keyword="hangzhou")
    )

    assert _ids(by_name) == [catalogue["lake"]]
    assert _ids(by_city) == [catalogue["lake"]]


@pytest.mark.integration
def test_keyword_wildcards_are_literal(test_engine: Engine, catalogue: dict[str, int]) -> None:
    result = search_listings(test_engine, ListingView.PUBLIC_SEARCH, ListingFilters(keyword="%"))

    assert result["total"] == 0


@pytest.mark.integration
def test_filters_combine_with_and(test_engine: Engine, catalogue: dict[str, int]) -> None:
    result = search_listings(
        test_engine,
        ListingView.PUBLIC_SEARCH,
        ListingFilters(city="Shanghai", star_level=4, min_price=500, max_price=700),
    )

    assert _ids(result) == [catalogue["rival"]]


@pytest.mark.integration
def test_min_price_above_max_price_matches_nothing(
    test_engine: Engine, catalogue: dict[str, int]
) -> None:
    result = search_listings(
        test_engine, ListingView.PUBLIC_SEARCH, ListingFilters(min_price=800, max_price=100)
    )

    assert result["items"] == []
    assert result["total"] == 0
    assert result["total_pages"] == 0


@pytest.mark.integration
def test_sort_by_price_and_star_level(test_engine: Engine, catalogue: dict[str, int]) -> None:
    by_price = search_listings(
        test_engine,
        ListingView.PUBLIC_SEARCH,
        sort=ListingSort(SortField.PRICE, SortOrder.ASC),
    )
    by_star = search_listings(
        test_engine,
        ListingView.PUBLIC_SEARCH,
        sort=ListingSort(SortField.STAR_LEVEL, SortOrder.DESC),
    )

    assert _ids(by_price) == [catalogue["lake"], catalogue["rival"], catalogue["bund"]]
    assert _ids(by_star)[0] == catalogue["bund"]


@pytest.mark.integration
def test_default_sort_is_newest_first(test_engine: Engine, catalogue: dict[str, int]) -> None:
    result = search_listings(test_engine, ListingView.PUBLIC_SEARCH)

    assert _ids(result) == [catalogue["rival"], catalogue["lake"], catalogue["bund"]]


@pytest.mark.integration
def test_pagination(test_engine: Engine, catalogue: dict[str, int], admin: Identity) -> None:
    first = search_listings(
        test_engine, ListingView.REVIEW_QUEUE, page=1, page_size=2, identity=admin
    )
    last = search_listings(
        test_engine, ListingView.REVIEW_QUEUE, page="3", page_size="2", identity=admin
    )
    beyond = search_listings(
        test_engine, ListingView.REVIEW_QUEUE, page=9, page_size=2, identity=admin
    )

    assert first["total"] == 5
    assert first["total_pages"] == 3
    assert len(first["items"]) == 2
    assert len(last["items"]) == 1
    assert beyond["items"] == []
    assert beyond["total"] == 5


@pytest.mark.integration
def test_malformed_page_input_falls_back_to_defaults(
    test_engine: Engine, catalogue: dict[str, int]
) -> None:
    result = search_listings(
        test_engine, ListingView.PUBLIC_SEARCH, page="abc", page_size="-1"
    )

    assert result["page"] == 1
    assert result["page_size"] == 10
    assert result["total"] == 3


@pytest.mark.integration
def test_search_items_include_images(
    test_engine: Engine, make_listing: Any, merchant: Identity
) -> None:
    listing_id = make_listing()
    update_listing(
        test_engine,
        listing_id,
        merchant,
        {
            "images": [
                {"url": "https://cdn/2.jpg", "sort": 2, "is_cover": False},
                {"url": "https://cdn/1.jpg", "sort": 1, "is_cover": True},
            ]
        },
    )

    result = search_listings(test_engine, ListingView.OWNER_LISTINGS, identity=merchant)

    images = result["items"][0]["images"]
    assert [image["url"] for image in images] == ["https://cdn/1.jpg", "https://cdn/2.jpg"]
    assert images[0]["is_cover"] is True


@pytest.mark.integration
def test_out_of_range_numbers_are_treated_as_absent(
    test_engine: Engine, catalogue: dict[str, int]
) -> None:
    """Test that numbers too large for the database fall back instead of failing."""
    result = search_listings(
        test_engine,
        ListingView.PUBLIC_SEARCH,
        ListingFilters.from_raw(star_level="99999999999999999999"),
        page="99999999999999999999",
        page_size="1e30",
    )

    assert result["page"] == 1
    assert result["page_size"] == 10
    assert result["total"] == 3


@pytest.mark.integration
def test_unknown_star_level_does_not_narrow_results(
    test_engine: Engine, catalogue: dict[str, int]
) -> None:
    result = search_listings(
        test_engine, ListingView.PUBLIC_SEARCH, ListingFilters.from_raw(star_level="7")
    )

    assert result["total"] == 3


@pytest.mark.integration
def test_last_page_within_offset_range_is_queried(
    test_engine: Engine, catalogue: dict[str, int]
) -> None:
    result = search_listings(
        test_engine, ListingView.PUBLIC_SEARCH, page="21474837", page_size="100"
    )

    assert result["page"] == 21474837
    assert result["items"] == []
    assert result["total"] == 3


@pytest.mark.integration
def test_search_items_include_promotions(
    test_engine: Engine, make_listing: Any, merchant: Identity
) -> None:
    promoted = make_listing(name_en="Promoted")
    plain = make_listing(name_en="Plain")
    update_listing(
        test_engine,
        promoted,
        merchant,
        {
            "promotions": [
                {
                    "type": "REDUCTION",
                    "reduce_amount": 50,
                    "min_amount": 300,
                    "start_date": date(2026, 12, 1),
                    "end_date": date(2026, 12, 31),
                },
                {
                    "type": "DISCOUNT",
                    "discount_rate": 0.9,
                    "start_date": date(2026, 11, 1),
                    "end_date": date(2026, 11, 30),
                },
            ]
        },
    )

    result = search_listings(test_engine, ListingView.OWNER_LISTINGS, identity=merchant)
    items = {item["id"]: item for item in result["items"]}

    promotions = items[promoted]["promotions"]
    assert [promotion["type"] for promotion in promotions] == ["DISCOUNT", "REDUCTION"]
    assert promotions[1]["reduce_amount"] == 50
    assert items[plain]["promotions"] == []
