"""Structured logging configuration."""

import logging
import sys
from typing import TextIO

import structlog

from confnode.settings import LibrarySettings, get_settings


def configure_logging(
    level: int | str | None = None,
    output: TextIO = sys.stderr,
    json_format: bool | None = None,
    settings: LibrarySettings | None = None,
) -> None:
    """Configure structured logging for applications using the library.

    The library itself only emits events; it never configures logging on
    import. Hosts call this once at startup, or configure structlog
    themselves.

    Args:
        level: Logging level; defaults to ``settings.log_level``.
        output: Output stream (default: stderr).
        json_format: Whether to use JSON format; defaults to
            ``settings.log_json``.
        settings: Library settings; read from the environment when omitted.
    """
    if level is None or json_format is None:
        settings = settings or get_settings()
        if level is None:
            level = settings.log_level
        if json_format is None:
            json_format = settings.log_json
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if json_format:
        processors.append(structlog.processors.JSONRenderer(sort_keys=True))
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=output),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=output,
        level=level,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a bound logger instance.

    Args:
        name: Optional logger name.

    Returns:
        Bound logger instance.
    """
    logger: structlog.stdlib.BoundLogger = structlog.get_logger(name)
    return logger
