"""Observability: structured logging."""

from confnode.observability.logging import configure_logging, get_logger


__all__ = ["configure_logging", "get_logger"]
