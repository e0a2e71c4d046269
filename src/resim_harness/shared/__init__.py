"""Shared helpers used by every harness module."""

from .logging import configure_logging, get_logger
from .paths import HARNESS_DIR, LOCK_FILE

__all__ = [
    "HARNESS_DIR",
    "LOCK_FILE",
    "configure_logging",
    "get_logger",
]
