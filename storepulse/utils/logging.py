"""
Structured logging for StorePulse.

Engine components log computation summaries (record counts, drop counts,
growth figures) as structlog key/value events. Every line also carries the
reporting zone, since day keys, heatmap cells and month buckets in those
events are only meaningful relative to it.
"""

import logging
import sys
from typing import Any, Optional

import structlog
from structlog.types import EventDict, Processor

from storepulse.config import Settings, get_settings


def add_severity(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Add severity level for structured logging."""
    event_dict["severity"] = method_name.upper()
    return event_dict


def reporting_zone_stamper(tz_name: str) -> Processor:
    """Build a processor that tags each event with the reporting zone."""

    def add_reporting_zone(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
        event_dict.setdefault("tz", tz_name)
        return event_dict

    return add_reporting_zone


def build_processors(settings: Settings) -> list[Processor]:
    """
    Processor chain for the given settings.

    JSON lines in production (Thai names kept readable), console output in
    development and tests.
    """
    if settings.log_format == "json" and not settings.dev_mode:
        renderer: Processor = structlog.processors.JSONRenderer(ensure_ascii=False)
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=not settings.testing)

    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        reporting_zone_stamper(settings.app_timezone),
        add_severity,
        structlog.processors.UnicodeDecoder(),
        renderer,
    ]


def configure_logging(settings: Optional[Settings] = None) -> None:
    """Route structlog through stdlib logging at the configured level."""
    settings = settings or get_settings()

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
    )

    structlog.configure(
        processors=build_processors(settings),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str = __name__) -> structlog.BoundLogger:
    """Named logger for routers and the app factory."""
    return structlog.get_logger(name)
