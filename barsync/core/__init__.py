"""Core types, constants, exceptions and configuration."""

from .constants import PriceType
from .exceptions import (
    BarSyncError,
    InvalidConfigError,
    MissingConfigError,
    ConfigValidationError,
)
from .types import BarPoint, QuoteRecord, Watermarks, DispatchEvent, Tick
from .config import SyncConfig, load_config

__all__ = [
    "PriceType",
    "BarSyncError",
    "InvalidConfigError",
    "MissingConfigError",
    "ConfigValidationError",
    "BarPoint",
    "QuoteRecord",
    "Watermarks",
    "DispatchEvent",
    "Tick",
    "SyncConfig",
    "load_config",
]
