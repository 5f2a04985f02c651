"""
Data Layer - Time bucketing and cross-symbol alignment.

Main Components:
    DateBuffer: Per-symbol bucketed series (sliding or periodic)
    QuoteSync: Multi-symbol aligner emitting ordered dispatch events
    AlignedBarStore: pandas-backed consumer of the dispatch stream
    BucketQueue: Contiguous bucket storage shared by both engines
"""

from .bucketing import bucket, period_start, ms_to_seconds, to_timestamp
from .bucket_queue import BucketQueue
from .window_policy import WindowPolicy, SlidingWindow, PeriodicWindow, make_policy
from .date_buffer import DateBuffer
from .quote_sync import QuoteSync
from .aligned_store import AlignedBarStore

__all__ = [
    "bucket",
    "period_start",
    "ms_to_seconds",
    "to_timestamp",
    "BucketQueue",
    "WindowPolicy",
    "SlidingWindow",
    "PeriodicWindow",
    "make_policy",
    "DateBuffer",
    "QuoteSync",
    "AlignedBarStore",
]
