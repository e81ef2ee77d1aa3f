from typing import Any

import structlog
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.engine import Engine

from hotel_listings.dependencies import get_db_engine, get_identity
from hotel_listings.errors import ListingServiceError
from hotel_listings.identity import Identity
from hotel_listings.routes._helpers import to_http_exception
from hotel_listings.schemas.common import MessageResponse
from hotel_listings.schemas.rooms import (
    PriceRuleCreatePayload,
    PriceRuleOut,
    PriceRuleUpdatePayload,
    RoomTypeCreatePayload,
    RoomTypeOut,
    RoomTypeUpdatePayload,
)
from hotel_listings.services import rooms as room_service

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.get("/hotel/{listing_id}", response_model=list[RoomTypeOut])
def list_room_types(
    listing_id: int, engine: Engine = Depends(get_db_engine)
) -> list[dict[str, Any]]:
    """Room types of a listing, cheapest first."""
    try:
        return room_service.list_room_types(engine, listing_id)
    except Exception as e:
        logger.exception("room_type_list_failed", listing_id=listing_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


# ---- Price rules ----


@router.post("/price-rules", status_code=status.HTTP_201_CREATED, response_model=PriceRuleOut)
def create_price_rule(
    payload: PriceRuleCreatePayload,
    identity: Identity = Depends(get_identity),
    engine: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    try:
        return room_service.create_price_rule(
            engine, identity, payload.room_type_id, payload.model_dump(exclude={"room_type_id"})
        )
    except ListingServiceError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.exception(
            "price_rule_creation_failed", room_type_id=payload.room_type_id, error=str(e)
        )
        raise HTTPException(status_code=500, detail="Internal server error")


@router.put("/price-rules/{price_rule_id}", response_model=PriceRuleOut)
def update_price_rule(
    price_rule_id: int,
    payload: PriceRuleUpdatePayload,
    identity: Identity = Depends(get_identity),
    engine: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    try:
        return room_service.update_price_rule(
            engine, identity, price_rule_id, payload.model_dump(exclude_unset=True)
        )
    except ListingServiceError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.exception("price_rule_update_failed", price_rule_id=price_rule_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.delete("/price-rules/{price_rule_id}", response_model=MessageResponse)
def delete_price_rule(
    price_rule_id: int,
    identity: Identity = Depends(get_identity),
    engine: Engine = Depends(get_db_engine),
) -> dict[str, str]:
    try:
        room_service.delete_price_rule(engine, identity, price_rule_id)
        return {"message": f"Price rule {price_rule_id} deleted"}
    except ListingServiceError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.exception("price_rule_deletion_failed", price_rule_id=price_rule_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/{room_type_id}/price-rules", response_model=list[PriceRuleOut])
def list_price_rules(
    room_type_id: int, engine: Engine = Depends(get_db_engine)
) -> list[dict[str, Any]]:
    try:
        return room_service.list_price_rules(engine, room_type_id)
    except Exception as e:
        logger.exception("price_rule_list_failed", room_type_id=room_type_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


# ---- Room types ----


@router.get("/{room_type_id}", response_model=RoomTypeOut)
def get_room_type(room_type_id: int, engine: Engine = Depends(get_db_engine)) -> dict[str, Any]:
    try:
        return room_service.get_room_type(engine, room_type_id)
    except ListingServiceError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.exception("room_type_fetch_failed", room_type_id=room_type_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("", status_code=status.HTTP_201_CREATED, response_model=RoomTypeOut)
def create_room_type(
    payload: RoomTypeCreatePayload,
    identity: Identity = Depends(get_identity),
    engine: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    """
    Create a room type on one of the caller's listings.

    The listing's cached minimum price is recomputed in the same transaction.
    """
    try:
        return room_service.create_room_type(
            engine, identity, payload.hotel_id, payload.model_dump(exclude={"hotel_id"})
        )
    except ListingServiceError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.exception("room_type_creation_failed", listing_id=payload.hotel_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.put("/{room_type_id}", response_model=RoomTypeOut)
def update_room_type(
    room_type_id: int,
    payload: RoomTypeUpdatePayload,
    identity: Identity = Depends(get_identity),
    engine: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    try:
        return room_service.update_room_type(
            engine, identity, room_type_id, payload.model_dump(exclude_unset=True)
        )
    except ListingServiceError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.exception("room_type_update_failed", room_type_id=room_type_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.delete("/{room_type_id}", response_model=MessageResponse)
def delete_room_type(
    room_type_id: int,
    identity: Identity = Depends(get_identity),
    engine: Engine = Depends(get_db_engine),
) -> dict[str, str]:
    try:
        room_service.delete_room_type(engine, identity, room_type_id)
        return {"message": f"Room type {room_type_id} deleted"}
    except ListingServiceError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.exception("room_type_deletion_failed", room_type_id=room_type_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")
