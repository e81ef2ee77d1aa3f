from typing import Any, Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.engine import Engine

from hotel_listings.dependencies import get_db_engine, get_identity
from hotel_listings.errors import ListingServiceError, ValidationError
from hotel_listings.identity import Identity
from hotel_listings.routes._helpers import to_http_exception
from hotel_listings.schemas.common import Page
from hotel_listings.schemas.listings import ListingDetail, ListingSummary
from hotel_listings.schemas.reviews import ReviewActionPayload, ReviewLogOut
from hotel_listings.services.lifecycle import REVIEWER_ACTIONS, execute_transition, parse_action
from hotel_listings.services.listing_query import (
    ListingFilters,
    ListingSort,
    ListingView,
    search_listings,
)
from hotel_listings.services.listings import list_audit_log

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.get("", response_model=Page[ListingSummary])
def review_queue(
    status_filter: Optional[str] = Query(None, alias="status"),
    keyword: Optional[str] = Query(None),
    city: Optional[str] = Query(None),
    star_level: Optional[str] = Query(None, alias="starLevel"),
    min_price: Optional[str] = Query(None, alias="minPrice"),
    max_price: Optional[str] = Query(None, alias="maxPrice"),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    sort_order: Optional[str] = Query(None, alias="sortOrder"),
    page: Optional[str] = Query(None),
    page_size: Optional[str] = Query(None, alias="pageSize"),
    identity: Identity = Depends(get_identity),
    engine: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    """Admin view over listings in every status."""
    try:
        return search_listings(
            engine,
            ListingView.REVIEW_QUEUE,
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
        logger.exception("review_queue_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/action", response_model=ListingDetail)
def review_action(
    payload: ReviewActionPayload,
    identity: Identity = Depends(get_identity),
    engine: Engine = Depends(get_db_engine),
) -> Optional[dict[str, Any]]:
    """
    Execute an admin review action (APPROVE, REJECT, OFFLINE, ONLINE).

    Returns:
        dict: The listing after the transition
    """
    try:
        action = parse_action(payload.action)
        if action not in REVIEWER_ACTIONS:
            raise ValidationError(f"Action {action.value} is not a review action", field="action")

        return execute_transition(
            engine, payload.hotel_id, action, identity, reason=payload.reason
        )
    except ListingServiceError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.exception(
            "review_action_failed",
            listing_id=payload.hotel_id,
            action=payload.action,
            error=str(e),
        )
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/{listing_id}/logs", response_model=list[ReviewLogOut])
def review_logs(
    listing_id: int,
    identity: Identity = Depends(get_identity),
    engine: Engine = Depends(get_db_engine),
) -> list[dict[str, Any]]:
    """Audit trail of a listing, newest first (admins, or the owning merchant)."""
    try:
        return list_audit_log(engine, listing_id, identity)
    except ListingServiceError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.exception("review_logs_failed", listing_id=listing_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")
