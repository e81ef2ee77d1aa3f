"""Enumerations shared by the ORM models, schemas and services."""

import enum


class ListingStatus(str, enum.Enum):
    """Review lifecycle status of a listing."""

    DRAFT = "DRAFT"
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    OFFLINE = "OFFLINE"


# Statuses in which the owning merchant may edit descriptive fields
EDITABLE_STATUSES = frozenset({ListingStatus.DRAFT, ListingStatus.REJECTED})

STAR_LEVELS = frozenset({2, 3, 4, 5})


class Role(str, enum.Enum):
    MERCHANT = "MERCHANT"
    ADMIN = "ADMIN"


class BedType(str, enum.Enum):
    SINGLE = "SINGLE"
    DOUBLE = "DOUBLE"
    TWIN = "TWIN"
    KING = "KING"
    SUITE = "SUITE"


class NearbySpotType(str, enum.Enum):
    SCENIC = "SCENIC"
    TRANSPORT = "TRANSPORT"
    SHOPPING = "SHOPPING"


class PriceRuleType(str, enum.Enum):
    WEEKEND = "WEEKEND"
    HOLIDAY = "HOLIDAY"
    CUSTOM = "CUSTOM"


class PromotionType(str, enum.Enum):
    DISCOUNT = "DISCOUNT"
    REDUCTION = "REDUCTION"
