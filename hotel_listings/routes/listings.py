from typing import Any, Optional

import structlog
from fastapi import APIRouter, Body, Depends, HTTPException, Query, status
from sqlalchemy.engine import Engine

from hotel_listings.dependencies import get_db_engine, get_identity
from hotel_listings.errors import ListingServiceError
from hotel_listings.identity import Identity
from hotel_listings.routes._helpers import to_http_exception
from hotel_listings.schemas.common import MessageResponse, Page
from hotel_listings.schemas.listings import (
    ListingCreatePayload,
    ListingDetail,
    ListingSummary,
    ListingUpdatePayload,
)
from hotel_listings.schemas.reviews import SubmitPayload
from hotel_listings.services import listings as listing_service
from hotel_listings.services.lifecycle import ReviewAction, execute_transition
from hotel_listings.services.listing_query import (
    ListingFilters,
    ListingSort,
    ListingView,
    search_listings,
)

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.get("", response_model=Page[ListingSummary])
def search_hotels(
    keyword: Optional[str] = Query(None, description="Matches names and city"),
    city: Optional[str] = Query(None),
    star_level: Optional[str] = Query(None, alias="starLevel"),
    min_price: Optional[str] = Query(None, alias="minPrice"),
    max_price: Optional[str] = Query(None, alias="maxPrice"),
    sort_by: Optional[str] = Query(
        None, alias="sortBy", description="price, starLevel or createdAt"
    ),
    sort_order: Optional[str] = Query(None, alias="sortOrder", description="asc or desc"),
    page: Optional[str] = Query(None),
    page_size: Optional[str] = Query(None, alias="pageSize"),
    engine: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    """
    Public search over approved listings.

    Numeric parameters are parsed leniently: malformed values are ignored.
    """
    try:
        return search_listings(
            engine,
            ListingView.PUBLIC_SEARCH,
            ListingFilters.from_raw(keyword, city, star_level, min_price, max_price),
            ListingSort.from_raw(sort_by, sort_order),
            page=page,
            page_size=page_size,
        )
    except Exception as e:
        logger.exception("listing_search_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/my", response_model=Page[ListingSummary])
def my_hotels(
    keyword: Optional[str] = Query(None),
    city: Optional[str] = Query(None),
    star_level: Optional[str] = Query(None, alias="starLevel"),
    min_price: Optional[str] = Query(None, alias="minPrice"),
    max_price: Optional[str] = Query(None, alias="maxPrice"),
    status_filter: Optional[str] = Query(None, alias="status"),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    sort_order: Optional[str] = Query(None, alias="sortOrder"),
    page: Optional[str] = Query(None),
    page_size: Optional[str] = Query(None, alias="pageSize"),
    identity: Identity = Depends(get_identity),
    engine: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    """List the caller's own listings in any status."""
    try:
        return search_listings(
            engine,
            ListingView.OWNER_LISTINGS,
            ListingFilters.from_raw(
                keyword, city, star_level, min_price, max_price, status_filter
            ),
            ListingSort.from_raw(sort_by, sort_order),
            page=page,
            page_size=page_size,
            identity=identity,
        )
    except ListingServiceError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.exception("owner_listing_search_failed", user_id=identity.user_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/{listing_id}", response_model=ListingDetail)
def get_hotel(listing_id: int, engine: Engine = Depends(get_db_engine)) -> dict[str, Any]:
    try:
        return listing_service.get_listing(engine, listing_id)
    except ListingServiceError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.exception("listing_fetch_failed", listing_id=listing_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("", status_code=status.HTTP_201_CREATED, response_model=ListingDetail)
def create_hotel(
    payload: ListingCreatePayload,
    identity: Identity = Depends(get_identity),
    engine: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    """
    Create a listing in DRAFT status owned by the caller (merchants only).

    Returns:
        dict: The created listing
    """
    try:
        return listing_service.create_listing(engine, identity, payload.model_dump())
    except ListingServiceError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.exception("listing_creation_failed", user_id=identity.user_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.put("/{listing_id}", response_model=ListingDetail)
def update_hotel(
    listing_id: int,
    payload: ListingUpdatePayload,
    identity: Identity = Depends(get_identity),
    engine: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    """
    Update a listing. Only the owner may edit, and only in DRAFT or REJECTED.
    """
    try:
        return listing_service.update_listing(
            engine, listing_id, identity, payload.model_dump(exclude_unset=True)
        )
    except ListingServiceError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.exception("listing_update_failed", listing_id=listing_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.delete("/{listing_id}", response_model=MessageResponse)
def delete_hotel(
    listing_id: int,
    identity: Identity = Depends(get_identity),
    engine: Engine = Depends(get_db_engine),
) -> dict[str, str]:
    """Permanently delete a DRAFT listing owned by the caller."""
    try:
        listing_service.delete_listing(engine, listing_id, identity)
        return {"message": f"Listing {listing_id} deleted"}
    except ListingServiceError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.exception("listing_deletion_failed", listing_id=listing_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/{listing_id}/submit", response_model=ListingDetail)
def submit_hotel(
    listing_id: int,
    payload: Optional[SubmitPayload] = Body(None),
    identity: Identity = Depends(get_identity),
    engine: Engine = Depends(get_db_engine),
) -> Optional[dict[str, Any]]:
    """Submit a DRAFT or REJECTED listing for review."""
    try:
        return execute_transition(
            engine,
            listing_id,
            ReviewAction.SUBMIT,
            identity,
            reason=payload.reason if payload else None,
        )
    except ListingServiceError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.exception("listing_submit_failed", listing_id=listing_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")
