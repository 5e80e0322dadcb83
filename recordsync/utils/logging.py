"""Structured logging setup for recordsync"""

import logging
from typing import Optional

import structlog

from ..config.settings import Settings, get_settings

_configured = False


def configure_logging(config: Optional[Settings] = None, force: bool = False) -> None:
    """
    Configure structlog once per process.

    JSON lines in production (LOG_JSON), console rendering otherwise.

    Args:
        config: Settings to read LOG_LEVEL / LOG_JSON from (defaults to global settings)
        force: Reconfigure even if already configured
    """
    global _configured
    if _configured and not force:
        return

    config = config or get_settings()
    renderer = (
        structlog.processors.JSONRenderer()
        if config.LOG_JSON
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, config.LOG_LEVEL, logging.INFO)
        ),
        cache_logger_on_first_use=False,
    )
    _configured = True

