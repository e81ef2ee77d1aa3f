"""
Integration tests for room types, price rules and the cached minimum price.
"""

from __future__ import annotations

from datetime import date
from typing import Any
from unittest.mock import patch

import pytest
from sqlalchemy.engine import Engine

from hotel_listings.db.readers.listings import get_listing_row
from hotel_listings.errors import ForbiddenError, NotFoundError, ValidationError
from hotel_listings.identity import Identity
from hotel_listings.services.lifecycle import ReviewAction, execute_transition
from hotel_listings.services.rooms import (
    create_price_rule,
    delete_price_rule,
    delete_room_type,
    get_room_type,
    list_price_rules,
    list_room_types,
    update_price_rule,
    update_room_type,
)


def _min_price(engine: Engine, listing_id: int) -> Any:
    with engine.connect() as conn:
        return get_listing_row(conn, listing_id)["min_price"]


def _rule(**overrides: Any) -> dict[str, Any]:
    data: dict[str, Any] = {
        "type": "HOLIDAY",
        "start_date": date(2026, 10, 1),
        "end_date": date(2026, 10, 7),
        "price": 888.0,
    }
    data.update(overrides)
    return data


@pytest.mark.integration
def test_min_price_tracks_room_type_mutations(
    test_engine: Engine, make_listing: Any, make_room_type: Any, merchant: Identity
) -> None:
    """The cached minimum follows every insert, update and delete."""
    listing_id = make_listing()
    assert _min_price(test_engine, listing_id) is None

    standard = make_room_type(listing_id, name="Standard", base_price=400)
    assert _min_price(test_engine, listing_id) == 400

    suite = make_room_type(listing_id, name="Suite", base_price=1200, bed_type="SUITE")
    assert _min_price(test_engine, listing_id) == 400

    update_room_type(test_engine, merchant, suite, {"base_price": 350})
    assert _min_price(test_engine, listing_id) == 350

    delete_room_type(test_engine, merchant, suite)
    assert _min_price(test_engine, listing_id) == 400

    delete_room_type(test_engine, merchant, standard)
    assert _min_price(test_engine, listing_id) is None


@pytest.mark.integration
def test_list_room_types_cheapest_first(
    test_engine: Engine, make_listing: Any, make_room_type: Any
) -> None:
    listing_id = make_listing()
    make_room_type(listing_id, name="Suite", base_price=1200)
    make_room_type(listing_id, name="Twin", base_price=380, bed_type="TWIN")

    rooms = list_room_types(test_engine, listing_id)

    assert [room["name"] for room in rooms] == ["Twin", "Suite"]
    assert rooms[0]["facilities"] == ["wifi", "minibar"]
    assert rooms[0]["price_rules"] == []


@pytest.mark.integration
def test_room_types_editable_in_any_status(
    test_engine: Engine, make_listing: Any, make_room_type: Any, merchant: Identity, admin: Identity
) -> None:
    listing_id = make_listing()
    room_type_id = make_room_type(listing_id, base_price=500)
    execute_transition(test_engine, listing_id, ReviewAction.SUBMIT, merchant)
    execute_transition(test_engine, listing_id, ReviewAction.APPROVE, admin)

    update_room_type(test_engine, merchant, room_type_id, {"base_price": 450, "stock": 2})

    assert _min_price(test_engine, listing_id) == 450
    assert get_room_type(test_engine, room_type_id)["stock"] == 2


@pytest.mark.integration
def test_room_type_mutations_require_owner(
    test_engine: Engine, make_listing: Any, make_room_type: Any, other_merchant: Identity
) -> None:
    listing_id = make_listing()
    room_type_id = make_room_type(listing_id, base_price=500)

    with pytest.raises(ForbiddenError):
        make_room_type(listing_id, owner=other_merchant)
    with pytest.raises(ForbiddenError):
        update_room_type(test_engine, other_merchant, room_type_id, {"base_price": 1})
    with pytest.raises(ForbiddenError):
        delete_room_type(test_engine, other_merchant, room_type_id)

    assert _min_price(test_engine, listing_id) == 500


@pytest.mark.integration
def test_room_type_on_missing_listing(test_engine: Engine, make_room_type: Any) -> None:
    with pytest.raises(NotFoundError):
        make_room_type(4040)


@pytest.mark.integration
def test_missing_room_type(test_engine: Engine, merchant: Identity) -> None:
    with pytest.raises(NotFoundError):
        get_room_type(test_engine, 1)
    with pytest.raises(NotFoundError):
        update_room_type(test_engine, merchant, 1, {"stock": 1})
    with pytest.raises(NotFoundError):
        delete_room_type(test_engine, merchant, 1)


@pytest.mark.integration
def test_price_rule_crud(
    test_engine: Engine, make_listing: Any, make_room_type: Any, merchant: Identity
) -> None:
    listing_id = make_listing()
    room_type_id = make_room_type(listing_id)

    rule = create_price_rule(test_engine, merchant, room_type_id, _rule())
    assert rule["room_type_id"] == room_type_id
    assert rule["price"] == 888.0

    updated = update_price_rule(test_engine, merchant, rule["id"], {"price": 799.0})
    assert updated["price"] == 799.0
    assert updated["start_date"] == date(2026, 10, 1)

    assert [r["id"] for r in list_price_rules(test_engine, room_type_id)] == [rule["id"]]
    assert get_room_type(test_engine, room_type_id)["price_rules"][0]["price"] == 799.0

    delete_price_rule(test_engine, merchant, rule["id"])
    assert list_price_rules(test_engine, room_type_id) == []


@pytest.mark.integration
def test_overlapping_price_rules_are_both_kept(
    test_engine: Engine, make_listing: Any, make_room_type: Any, merchant: Identity
) -> None:
    room_type_id = make_room_type(make_listing())

    create_price_rule(test_engine, merchant, room_type_id, _rule())
    create_price_rule(
        test_engine,
        merchant,
        room_type_id,
        _rule(type="CUSTOM", start_date=date(2026, 10, 5), end_date=date(2026, 10, 10)),
    )

    assert len(list_price_rules(test_engine, room_type_id)) == 2


@pytest.mark.integration
def test_price_rule_date_range_validation(
    test_engine: Engine, make_listing: Any, make_room_type: Any, merchant: Identity
) -> None:
    room_type_id = make_room_type(make_listing())

    with pytest.raises(ValidationError):
        create_price_rule(
            test_engine,
            merchant,
            room_type_id,
            _rule(start_date=date(2026, 10, 7), end_date=date(2026, 10, 1)),
        )

    rule = create_price_rule(test_engine, merchant, room_type_id, _rule())
    with pytest.raises(ValidationError):
        update_price_rule(test_engine, merchant, rule["id"], {"end_date": date(2026, 9, 1)})


@pytest.mark.integration
def test_price_rules_do_not_affect_min_price(
    test_engine: Engine, make_listing: Any, make_room_type: Any, merchant: Identity
) -> None:
    listing_id = make_listing()
    room_type_id = make_room_type(listing_id, base_price=500)

    create_price_rule(test_engine, merchant, room_type_id, _rule(price=99.0))

    assert _min_price(test_engine, listing_id) == 500


@pytest.mark.integration
def test_price_rule_mutations_require_owner(
    test_engine: Engine,
    make_listing: Any,
    make_room_type: Any,
    merchant: Identity,
    other_merchant: Identity,
) -> None:
    room_type_id = make_room_type(make_listing())
    rule = create_price_rule(test_engine, merchant, room_type_id, _rule())

    with pytest.raises(ForbiddenError):
        create_price_rule(test_engine, other_merchant, room_type_id, _rule())
    with pytest.raises(ForbiddenError):
        update_price_rule(test_engine, other_merchant, rule["id"], {"price": 1.0})
    with pytest.raises(ForbiddenError):
        delete_price_rule(test_engine, other_merchant, rule["id"])
    with pytest.raises(NotFoundError):
        delete_price_rule(test_engine, merchant, 9999)


@pytest.mark.integration
def test_failed_min_price_recompute_rolls_back_room_type_insert(
    test_engine: Engine, make_listing: Any, make_room_type: Any
) -> None:
    listing_id = make_listing()
    make_room_type(listing_id, name="Standard", base_price=400)

    with patch(
        "hotel_listings.services.rooms.set_min_price",
        side_effect=RuntimeError("db went away"),
    ):
        with pytest.raises(RuntimeError):
            make_room_type(listing_id, name="Budget", base_price=150)

    assert [room["name"] for room in list_room_types(test_engine, listing_id)] == ["Standard"]
    assert _min_price(test_engine, listing_id) == 400


@pytest.mark.integration
def test_failed_min_price_read_rolls_back_room_type_update(
    test_engine: Engine, make_listing: Any, make_room_type: Any, merchant: Identity
) -> None:
    listing_id = make_listing()
    room_type_id = make_room_type(listing_id, base_price=400)

    with patch(
        "hotel_listings.services.rooms.get_min_base_price",
        side_effect=RuntimeError("db went away"),
    ):
        with pytest.raises(RuntimeError):
            update_room_type(test_engine, merchant, room_type_id, {"base_price": 90})

    assert get_room_type(test_engine, room_type_id)["base_price"] == 400
    assert _min_price(test_engine, listing_id) == 400
