"""Utility helpers (logging, identifiers, clock) shared across dynamodel."""

from dynamodel.utils.logging import configure_logging, get_logger

__all__ = ["configure_logging", "get_logger"]
