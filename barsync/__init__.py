"""
barsync - Time-bucketed, cross-symbol aligned price bars.

Main Components:
    DateBuffer: Per-symbol bucketed series with sliding or periodic retention
    QuoteSync: Multi-symbol aligner dispatching closed and intra-bar values
    AlignedBarStore: Dispatch consumer building an aligned pandas table
    SyncEngine: Named-symbol pipeline from ticks to aligned bars
"""

from .core.constants import PriceType
from .core.types import BarPoint, QuoteRecord, DispatchEvent, Tick
from .core.config import SyncConfig, load_config
from .data.date_buffer import DateBuffer
from .data.quote_sync import QuoteSync
from .data.aligned_store import AlignedBarStore
from .engine import SyncEngine

__version__ = "0.1.0"

__all__ = [
    "PriceType",
    "BarPoint",
    "QuoteRecord",
    "DispatchEvent",
    "Tick",
    "SyncConfig",
    "load_config",
    "DateBuffer",
    "QuoteSync",
    "AlignedBarStore",
    "SyncEngine",
]
