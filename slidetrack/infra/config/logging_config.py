"""
Structlog configuration and helpers.
"""

from __future__ import annotations

import logging
from typing import Any, Optional
from uuid import UUID

import structlog


def _drop_none_values(logger, method_name, event_dict):
    """Unlinked navigation events carry session_id=None; keep them out of the output."""
    return {key: value for key, value in event_dict.items() if value is not None}


def setup_logging(
    log_level: Optional[str] = None, log_format: Optional[str] = None
) -> None:
    """Configure structlog for the application.

    Args:
        log_level: Optional log level name (e.g., "INFO"). Defaults from settings.
        log_format: "json" or "console". Defaults from settings.
    """
    from slidetrack.infra.config.settings import get_settings

    settings = get_settings()
    level_name = (log_level or settings.log_level or "INFO").upper()
    fmt = (log_format or settings.log_format or "json").lower()
    level = getattr(logging, level_name, logging.INFO)

    logging.basicConfig(level=level)
    # SQL echo is controlled by DATABASE_ECHO, not by the app log level
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.debug_sql else logging.WARNING
    )

    renderer = (
        structlog.processors.JSONRenderer(sort_keys=True)
        if fmt == "json"
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            _drop_none_values,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=True,
    )


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:  # type: ignore[name-defined]
    """Get a structlog logger bound with a name."""
    if name:
        return structlog.get_logger(name)
    return structlog.get_logger()


def bind_context(**kwargs: Any) -> None:
    """Bind contextvars for correlation (e.g., request_id, deck_id, viewer_id)."""
    structlog.contextvars.bind_contextvars(**kwargs)


def bind_tracking_context(
    deck_id: Optional[UUID] = None,
    viewer_id: Optional[UUID] = None,
    session_id: Optional[UUID] = None,
) -> None:
    """Bind the ids every write-path log line should carry."""
    values = {
        "deck_id": deck_id,
        "viewer_id": viewer_id,
        "session_id": session_id,
    }
    bind_context(**{k: str(v) for k, v in values.items() if v is not None})


def clear_context() -> None:
    """Clear bound contextvars (call at end of request)."""
    structlog.contextvars.clear_contextvars()
