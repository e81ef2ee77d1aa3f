"""Home page banner feed."""

from typing import Any

import structlog
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.engine import Engine

from hotel_listings.db.readers.banners import list_active_banners
from hotel_listings.dependencies import get_db_engine
from hotel_listings.schemas.banners import BannerOut

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.get("/banners", response_model=list[BannerOut])
def active_banners(engine: Engine = Depends(get_db_engine)) -> list[dict[str, Any]]:
    """Active banners ordered by ``sort``, with the linked listing summary."""
    try:
        with engine.connect() as conn:
            return list_active_banners(conn)
    except Exception as e:
        logger.exception("banner_list_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")
