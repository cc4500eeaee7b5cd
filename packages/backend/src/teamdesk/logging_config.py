"""structlog setup.

Learn: structlog is configured once, at app creation. Every log entry
picks up the request_id bound by RequestIdMiddleware through the
contextvars processor, so one request's lines can be grepped together.

Development gets the colored console renderer; everything else gets
one JSON object per line for log shippers.
"""

import logging

import structlog

from teamdesk.config import settings


def configure_logging() -> None:
    level = logging.DEBUG if settings.debug else logging.INFO
    renderer = (
        structlog.processors.JSONRenderer()
        if settings.log_json or settings.environment != "development"
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=True,
    )
