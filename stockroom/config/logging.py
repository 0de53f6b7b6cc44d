"""
structlog setup.

Events are snake_case names with keyword context, routed through stdlib
logging so uvicorn and library records end up in the same stream.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import Processor

from stockroom.config.settings import Settings, get_settings

# Libraries that log every request or page at INFO
QUIET_LOGGERS = ("httpx", "httpcore", "uvicorn.access", "fpdf", "aiosqlite")

# Filled in by configure_logging
_app_context: dict[str, str] = {}


def add_app_context(
    logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Stamp app name, version and environment on every event."""
    for key, value in _app_context.items():
        event_dict.setdefault(key, value)
    return event_dict


def _renderers(settings: Settings) -> list[Processor]:
    if settings.environment == "development":
        return [structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())]
    return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]


def configure_logging(settings: Settings | None = None) -> None:
    """Configure structlog and the root stdlib logger. Safe to call again."""
    settings = settings or get_settings()
    _app_context.update(
        app=settings.app_name,
        version=settings.app_version,
        environment=settings.environment,
    )

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        add_app_context,
        *_renderers(settings),
    ]
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.log_level),
    )
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Module logger: ``logger = get_logger(__name__)``."""
    return structlog.get_logger(name)
