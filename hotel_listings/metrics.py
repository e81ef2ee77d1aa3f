"""
Prometheus metrics for the listing lifecycle, search and database operations.

Metrics are exposed via the /metrics endpoint for scraping by Prometheus.

Example:
    >>> from hotel_listings.metrics import listing_transitions
    >>> listing_transitions.labels(action="APPROVE", result="success").inc()
"""

from __future__ import annotations

from prometheus_client import Counter, Histogram

# =============================================================================
# Lifecycle Metrics
# =============================================================================

listing_transitions = Counter(
    "listing_transitions_total",
    "Total number of listing lifecycle transition attempts",
    ["action", "result"],
)
"""
Counter for lifecycle transition attempts.

Labels:
    action: SUBMIT, APPROVE, REJECT, OFFLINE, ONLINE or DELETE
    result: success, or the error kind that rejected the attempt
"""

# =============================================================================
# Search Metrics
# =============================================================================

listing_searches = Counter(
    "listing_searches_total",
    "Total number of listing searches",
    ["view"],
)

listing_search_duration = Histogram(
    "listing_search_duration_seconds",
    "Duration of listing searches in seconds",
    ["view"],
    buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, float("inf")),
)
"""
Histogram for search latency (filter, count and page load).

Labels:
    view: public_search, owner_listings or review_queue
"""

# =============================================================================
# Database Metrics
# =============================================================================

min_price_recomputes = Counter(
    "min_price_recomputes_total",
    "Total number of listing minimum price recomputations",
)

db_operations = Counter(
    "listing_db_operations_total",
    "Total database write operations performed",
    ["operation", "table"],
)
"""
Counter for database write operations.

Labels:
    operation: insert, update or delete
    table: Database table name (listings, room_types, price_rules, ...)
"""
