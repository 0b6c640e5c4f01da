"""Structured logging configuration using structlog."""

import logging
import sys

import structlog


def _renderer(json_output: bool) -> structlog.types.Processor:
    if json_output or not sys.stderr.isatty():
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer()


def setup_logging(log_level: str = "INFO", json_output: bool = False) -> None:
    """Configure structlog for reporter output.

    Reporter logs go to stderr so that stdout stays free for whatever a
    downstream renderer prints.
    """
    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        _renderer(json_output),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, log_level.upper(), logging.INFO),
    )


def setup_logging_from_settings() -> None:
    """Configure logging from the cached settings."""
    from runreporter.config.settings import get_settings

    settings = get_settings()
    setup_logging(log_level=settings.log_level, json_output=settings.json_logs)
