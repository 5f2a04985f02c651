"""Monitoring module for logging."""

from .logger import get_logger, setup_logging, SyncLogger

__all__ = [
    "get_logger",
    "setup_logging",
    "SyncLogger",
]
