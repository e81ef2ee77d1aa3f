"""
Listing lifecycle engine.

Guards and executes every status change of a listing. Each transition runs in
a single transaction that locks the listing row, checks ownership or role,
checks the transition table, applies a status-matching conditional update and
appends the review log entry. Deletion is the one action that removes the
listing instead of moving it to a new status, and it leaves no review log.

State diagram::

    DRAFT --SUBMIT--> PENDING --APPROVE--> APPROVED --OFFLINE--> OFFLINE
      ^                  |                    ^                     |
      |               REJECT                  +-------ONLINE--------+
      |                  v
      |              REJECTED --SUBMIT--> PENDING
    (DELETE from DRAFT removes the listing)
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Optional

import structlog
from sqlalchemy.engine import Engine

from hotel_listings.db.readers.listings import (
    get_listing_detail,
    get_listing_row,
    get_listing_status,
)
from hotel_listings.db.writers.listings import delete_listing_cascade, transition_status
from hotel_listings.db.writers.reviews import insert_review_log
from hotel_listings.errors import (
    ForbiddenError,
    InvalidTransitionError,
    ListingServiceError,
    NotFoundError,
    ValidationError,
)
from hotel_listings.identity import Identity
from hotel_listings.metrics import listing_transitions
from hotel_listings.models.enums import ListingStatus

logger = structlog.get_logger(__name__)


class ReviewAction(str, enum.Enum):
    SUBMIT = "SUBMIT"
    APPROVE = "APPROVE"
    REJECT = "REJECT"
    OFFLINE = "OFFLINE"
    ONLINE = "ONLINE"
    DELETE = "DELETE"


class Actor(str, enum.Enum):
    OWNER = "owner"
    ADMIN = "admin"


@dataclass(frozen=True)
class Transition:
    allowed_from: frozenset[ListingStatus]
    to: Optional[ListingStatus]  # None means the listing is removed
    actor: Actor


TRANSITIONS: dict[ReviewAction, Transition] = {
    ReviewAction.SUBMIT: Transition(
        frozenset({ListingStatus.DRAFT, ListingStatus.REJECTED}), ListingStatus.PENDING, Actor.OWNER
    ),
    ReviewAction.APPROVE: Transition(
        frozenset({ListingStatus.PENDING}), ListingStatus.APPROVED, Actor.ADMIN
    ),
    ReviewAction.REJECT: Transition(
        frozenset({ListingStatus.PENDING}), ListingStatus.REJECTED, Actor.ADMIN
    ),
    ReviewAction.OFFLINE: Transition(
        frozenset({ListingStatus.APPROVED}), ListingStatus.OFFLINE, Actor.ADMIN
    ),
    ReviewAction.ONLINE: Transition(
        frozenset({ListingStatus.OFFLINE}), ListingStatus.APPROVED, Actor.ADMIN
    ),
    ReviewAction.DELETE: Transition(frozenset({ListingStatus.DRAFT}), None, Actor.OWNER),
}

# Actions an admin runs from the review console
REVIEWER_ACTIONS = frozenset(
    action for action, transition in TRANSITIONS.items() if transition.actor == Actor.ADMIN
)


def parse_action(action: str | ReviewAction) -> ReviewAction:
    """
    Resolve an action name to a ReviewAction.

    Raises:
        ValidationError: If the name is not a known action.
    """
    if isinstance(action, ReviewAction):
        return action
    try:
        return ReviewAction(str(action).strip().upper())
    except ValueError:
        raise ValidationError(f"Unknown review action: {action}", field="action") from None


def normalize_reason(action: ReviewAction, reason: Optional[str]) -> Optional[str]:
    """
    Trim the reason and enforce that REJECT carries a non-blank one.

    Returns:
        Optional[str]: Trimmed reason, or None when blank and optional.

    Raises:
        ValidationError: If the action is REJECT and the reason is blank.
    """
    cleaned = reason.strip() if reason else ""
    if action == ReviewAction.REJECT and not cleaned:
        raise ValidationError("A reason is required to reject a listing", field="reason")
    return cleaned or None


def can_transition(current: ListingStatus, action: ReviewAction) -> bool:
    return current in TRANSITIONS[action].allowed_from


def check_actor(listing: dict[str, Any], transition: Transition, identity: Identity) -> None:
    """
    Check that the identity may run a transition on the listing.

    Owner actions require the listing's owner; admin actions require the admin role.

    Raises:
        ForbiddenError: If the identity lacks ownership or role.
    """
    if transition.actor == Actor.OWNER and listing["owner_id"] != identity.user_id:
        raise ForbiddenError(
            "You do not have permission to modify this listing", listing_id=listing["id"]
        )
    if transition.actor == Actor.ADMIN and not identity.is_admin:
        raise ForbiddenError("Admin role required for review actions", listing_id=listing["id"])


def execute_transition(
    engine: Engine,
    listing_id: int,
    action: str | ReviewAction,
    identity: Identity,
    reason: Optional[str] = None,
) -> Optional[dict[str, Any]]:
    """
    Validate and execute a lifecycle action on a listing.

    Args:
        engine: SQLAlchemy engine
        listing_id: Listing to transition
        action: Action name (SUBMIT, APPROVE, REJECT, OFFLINE, ONLINE, DELETE)
        identity: Caller identity
        reason: Free-text reason; required for REJECT

    Returns:
        Listing detail after the transition, or None after DELETE.

    Raises:
        ValidationError: Unknown action, or REJECT without a reason.
        NotFoundError: Listing does not exist.
        ForbiddenError: Caller lacks ownership (owner actions) or admin role.
        InvalidTransitionError: Action not allowed from the current status,
            including when a concurrent transition changed it first.
    """
    action_name = str(getattr(action, "value", action))
    try:
        review_action = parse_action(action)
        cleaned_reason = normalize_reason(review_action, reason)
        transition = TRANSITIONS[review_action]

        with engine.begin() as conn:
            listing = get_listing_row(conn, listing_id, for_update=True)
            if listing is None:
                raise NotFoundError(f"Listing {listing_id} not found", listing_id=listing_id)

            check_actor(listing, transition, identity)

            current = listing["status"]
            if current not in transition.allowed_from:
                raise InvalidTransitionError(current.value, review_action.value)

            if transition.to is None:
                delete_listing_cascade(conn, listing_id)
                updated = None
            else:
                if not transition_status(conn, listing_id, current, transition.to):
                    # Another transaction moved the listing after our read
                    observed = get_listing_status(conn, listing_id)
                    if observed is None:
                        raise NotFoundError(
                            f"Listing {listing_id} not found", listing_id=listing_id
                        )
                    raise InvalidTransitionError(observed.value, review_action.value)

                insert_review_log(
                    conn,
                    listing_id=listing_id,
                    reviewer_id=identity.user_id,
                    from_status=current,
                    to_status=transition.to,
                    reason=cleaned_reason,
                )
                updated = get_listing_detail(conn, listing_id)

    except ListingServiceError as e:
        listing_transitions.labels(action=action_name, result=e.kind).inc()
        logger.info(
            "listing_transition_rejected",
            listing_id=listing_id,
            action=action_name,
            user_id=identity.user_id,
            error=e.kind,
            detail=e.message,
        )
        raise

    listing_transitions.labels(action=review_action.value, result="success").inc()
    logger.info(
        "listing_transition_applied",
        listing_id=listing_id,
        action=review_action.value,
        from_status=current.value,
        to_status=transition.to.value if transition.to else None,
        user_id=identity.user_id,
    )
    return updated
