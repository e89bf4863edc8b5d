"""structlog configuration shared by both services.

Learn: every module does `logger = structlog.get_logger()` and logs dotted
event names with keyword context (`logger.info("history.loaded", count=3)`).
This module only decides how those events are rendered. The request-ID
middleware binds `request_id` through contextvars, so merge_contextvars
has to stay first in the chain.
"""

import logging

import structlog

from chatdrop.config import Settings


def configure_logging(settings: Settings) -> None:
    """Configure structlog for the process. Safe to call more than once."""
    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if settings.log_json:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        # ConsoleRenderer formats exceptions itself
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=False,
    )
