# hotel_listings/main.py

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from hotel_listings.config import ALLOWED_ORIGINS
from hotel_listings.logging_config import setup_logging
from hotel_listings.middleware import RequestIDMiddleware
from hotel_listings.routes.banners import router as banners_router
from hotel_listings.routes.health import router as health_router
from hotel_listings.routes.listings import router as listings_router
from hotel_listings.routes.metrics import router as metrics_router
from hotel_listings.routes.reviews import router as reviews_router
from hotel_listings.routes.rooms import router as rooms_router

# Initialize structured logging
setup_logging()
logger = structlog.get_logger(__name__)

app = FastAPI(
    title="Hotel Listings API",
    description="Hotel listings, room inventory and listing review workflow",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS if "*" not in ALLOWED_ORIGINS else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestIDMiddleware)

# Register routers
app.include_router(health_router, tags=["Health"])
app.include_router(metrics_router, tags=["Metrics"])
app.include_router(listings_router, prefix="/hotels", tags=["Hotels"])
app.include_router(reviews_router, prefix="/admin/reviews", tags=["Reviews"])
app.include_router(rooms_router, prefix="/rooms", tags=["Rooms"])
app.include_router(banners_router, tags=["Banners"])

logger.info("application_configured", allowed_origins=ALLOWED_ORIGINS)
