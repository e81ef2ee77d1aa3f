"""
FastAPI dependency injection providers.

Route handlers receive the database engine and the caller identity through
these providers, so tests can replace them with ``app.dependency_overrides``.

Example:
    >>> app.dependency_overrides[get_db_engine] = lambda: test_engine
"""

from __future__ import annotations

from typing import Generator, Optional

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.engine import Engine

from hotel_listings.db.engine import engine
from hotel_listings.identity import Identity
from hotel_listings.models.enums import Role


def get_db_engine() -> Generator[Engine, None, None]:
    """
    Provide the database engine for dependency injection.

    Yields:
        Engine: SQLAlchemy database engine
    """
    yield engine


def get_optional_identity(
    x_user_id: Optional[str] = Header(None, description="Authenticated user ID"),
    x_user_role: Optional[str] = Header(None, description="MERCHANT or ADMIN"),
) -> Optional[Identity]:
    """
    Resolve the caller identity from gateway headers, if present.

    The authenticating gateway sets ``X-User-Id`` and ``X-User-Role`` after
    verifying credentials; this service trusts them as given.

    Returns:
        Optional[Identity]: Caller identity, or None when no headers are sent

    Raises:
        HTTPException: 401 if the headers are present but malformed
    """
    if x_user_id is None and x_user_role is None:
        return None

    try:
        user_id = int(x_user_id or "")
        role = Role((x_user_role or "").strip().upper())
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid identity headers",
        ) from None

    return Identity(user_id=user_id, role=role)


def get_identity(
    identity: Optional[Identity] = Depends(get_optional_identity),
) -> Identity:
    """
    Require an authenticated caller.

    Raises:
        HTTPException: 401 if no identity was supplied
    """
    if identity is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    return identity
