from __future__ import annotations

import logging
import sys
from typing import Any, Callable, MutableMapping, cast

import structlog

from hotel_listings.config import LOG_LEVEL

# Type alias for structlog processor
Processor = Callable[[Any, str, MutableMapping[str, Any]], Any]


def setup_logging() -> None:
    """
    Configure structured logging globally using structlog.

    In production (LOG_LEVEL=INFO): outputs JSON for log aggregation.
    Any other level: human-readable console output.

    Request-scoped values bound through ``structlog.contextvars`` (such as the
    request ID set by RequestIDMiddleware) are merged into every event.
    """
    logging.basicConfig(
        format="[%(asctime)s] %(levelname)s in %(name)s:%(lineno)d: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
        level=LOG_LEVEL,
    )

    for noisy_logger in [
        "sqlalchemy.engine",
        "sqlalchemy.pool",
        "alembic.runtime.migration",
        "uvicorn.access",
        "multipart",
    ]:
        logging.getLogger(noisy_logger).setLevel(logging.WARNING)

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]

    if LOG_LEVEL == "INFO":
        # Tracebacks from logger.exception() become structured fields in JSON output
        processors += [
            cast(Processor, structlog.processors.dict_tracebacks),
            cast(Processor, structlog.processors.JSONRenderer()),
        ]
    else:
        processors.append(cast(Processor, structlog.dev.ConsoleRenderer(colors=True)))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(LOG_LEVEL)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
