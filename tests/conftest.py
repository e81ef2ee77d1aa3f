"""
Shared fixtures for the test suite.

Every test that touches the database gets its own SQLite file, created from
the ORM metadata, and the FastAPI app is pointed at it through
``app.dependency_overrides``.
"""

from __future__ import annotations

import os

# Config refuses to load without a database URL; tests never use this one.
os.environ.setdefault("DATABASE_URL", "sqlite:///./hotel_listings_test.db")

from pathlib import Path  # noqa: E402
from typing import Any, Generator, Optional  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.engine import Engine  # noqa: E402

from hotel_listings.db.engine import build_engine  # noqa: E402
from hotel_listings.dependencies import get_db_engine  # noqa: E402
from hotel_listings.identity import Identity  # noqa: E402
from hotel_listings.main import app  # noqa: E402
from hotel_listings.models.banners import Banner  # noqa: E402,F401
from hotel_listings.models.base import Base  # noqa: E402
from hotel_listings.models.enums import Role  # noqa: E402
from hotel_listings.models.listings import Listing  # noqa: E402,F401
from hotel_listings.models.reviews import ReviewLog  # noqa: E402,F401
from hotel_listings.models.rooms import PriceRule, RoomType  # noqa: E402,F401
from hotel_listings.services.listings import create_listing  # noqa: E402
from hotel_listings.services.rooms import create_room_type  # noqa: E402

MERCHANT_ID = 101
OTHER_MERCHANT_ID = 202
ADMIN_ID = 1


@pytest.fixture
def test_engine(tmp_path: Path) -> Generator[Engine, None, None]:
    """Create a fresh SQLite database with all tables."""
    engine = build_engine(f"sqlite:///{tmp_path / 'listings.db'}")
    Base.metadata.create_all(engine)

    yield engine

    engine.dispose()


@pytest.fixture
def client(test_engine: Engine) -> Generator[TestClient, None, None]:
    """FastAPI test client bound to the test database."""
    app.dependency_overrides[get_db_engine] = lambda: test_engine
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def merchant() -> Identity:
    return Identity(user_id=MERCHANT_ID, role=Role.MERCHANT)


@pytest.fixture
def other_merchant() -> Identity:
    return Identity(user_id=OTHER_MERCHANT_ID, role=Role.MERCHANT)


@pytest.fixture
def admin() -> Identity:
    return Identity(user_id=ADMIN_ID, role=Role.ADMIN)


def auth_headers(identity: Identity) -> dict[str, str]:
    """Gateway identity headers for an identity."""
    return {"X-User-Id": str(identity.user_id), "X-User-Role": identity.role.value}


def listing_data(**overrides: Any) -> dict[str, Any]:
    """Valid listing fields, in service (snake_case) form."""
    data: dict[str, Any] = {
        "name_zh": "测试酒店",
        "name_en": "Test Hotel",
        "address": "1 Harbour Road",
        "city": "Shanghai",
        "star_level": 4,
        "phone": "021-5555-0100",
        "description": "Quiet rooms near the river",
    }
    data.update(overrides)
    return data


def room_type_data(**overrides: Any) -> dict[str, Any]:
    data: dict[str, Any] = {
        "name": "Deluxe King",
        "bed_type": "KING",
        "area": 32.5,
        "max_guests": 2,
        "base_price": 500.0,
        "stock": 5,
        "facilities": ["wifi", "minibar"],
        "images": [],
    }
    data.update(overrides)
    return data


@pytest.fixture
def listing_fields() -> Any:
    """Builder for valid listing fields."""
    return listing_data


@pytest.fixture
def headers_for() -> Any:
    """Builder for gateway identity headers."""
    return auth_headers


@pytest.fixture
def make_listing(test_engine: Engine, merchant: Identity) -> Any:
    """Factory creating a DRAFT listing and returning its ID."""

    def _make(owner: Optional[Identity] = None, **overrides: Any) -> int:
        listing = create_listing(test_engine, owner or merchant, listing_data(**overrides))
        return listing["id"]

    return _make


@pytest.fixture
def make_room_type(test_engine: Engine, merchant: Identity) -> Any:
    """Factory creating a room type on a listing and returning its ID."""

    def _make(listing_id: int, owner: Optional[Identity] = None, **overrides: Any) -> int:
        room = create_room_type(
            test_engine, owner or merchant, listing_id, room_type_data(**overrides)
        )
        return room["id"]

    return _make
