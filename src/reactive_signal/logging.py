"""Structured logging configuration using structlog."""

import logging
import sys

import structlog

from reactive_signal.config import Settings


def configure_logging(settings: Settings | None = None) -> None:
    """Configure structlog for the embedding process.

    Args:
        settings: Logging settings, read from the environment when None.
    """
    if settings is None:
        settings = Settings()
    level = logging.DEBUG if settings.debug else logging.INFO

    renderer: structlog.types.Processor
    if settings.log_format == "console":
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=False,
    )

    logging.basicConfig(
        format="%(message)s",
        level=level,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
