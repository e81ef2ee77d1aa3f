"""
SQLAlchemy engine singleton.

Server databases (PostgreSQL) get a connection pool sized for concurrent web
traffic. SQLite, used for local development and tests, gets the driver's
default pool with cross-thread access enabled.
"""

from typing import Any

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine

from hotel_listings.config import DATABASE_URL

if not DATABASE_URL:
    raise RuntimeError("DATABASE_URL is not set.")


def build_engine(url: str) -> Engine:
    """
    Create an engine for the given database URL.

    Args:
        url: SQLAlchemy database URL

    Returns:
        Engine: configured SQLAlchemy engine
    """
    kwargs: dict[str, Any] = {"future": True, "echo": False}

    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
    else:
        kwargs.update(
            pool_size=10,  # Number of connections to maintain in the pool
            max_overflow=20,  # Additional connections when pool is exhausted
            pool_pre_ping=True,  # Detect stale connections before use
            pool_recycle=3600,  # Recycle connections after 1 hour
        )

    return create_engine(url, **kwargs)


engine: Engine = build_engine(DATABASE_URL)


def check_engine_health(db_engine: Engine | None = None) -> bool:
    """
    Check if the database is reachable.

    Used by the /ready endpoint to verify database connectivity before
    allowing traffic to the service.

    Args:
        db_engine: Engine to check (defaults to the module engine)

    Returns:
        bool: True if database is reachable and healthy, False otherwise
    """
    try:
        with (db_engine or engine).connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception:
        return False
