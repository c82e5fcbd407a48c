import logging
import sys

import structlog

from infrastructure.config import LOG_LEVEL


def select_renderer(level: str):
    """Console output while debugging, one JSON object per line otherwise"""
    if level == "DEBUG":
        return structlog.dev.ConsoleRenderer(colors=True)
    return structlog.processors.JSONRenderer()


def setup_logging(level: str = LOG_LEVEL) -> None:
    """
    Route reservation events through structlog.

    Service modules log event names such as ``reservation_created`` or
    ``concurrent_write_retry`` with keyword context; stdlib loggers from
    FastAPI and uvicorn share the same stdout stream and level.
    """
    logging.basicConfig(
        format="[%(asctime)s] %(levelname)s in %(name)s: %(message)s",
        stream=sys.stdout,
        level=level,
    )
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            select_renderer(level),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(level)),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
