"""Core data types for the synchronization engine.

This module defines the records stored by the bucketed series and the
aligner, the watermark state both of them own, and the event emitted to
dispatch consumers. Conventions:
- Bucket timestamps are integer epoch seconds, always a multiple of the timeframe
- Wall times are integer epoch milliseconds as supplied by the caller
- Records are immutable; an open bucket is updated by replacing its record
"""

from dataclasses import dataclass

from .constants import PriceType


# ============================================================================
# Series Records
# ============================================================================

@dataclass(frozen=True)
class BarPoint:
    """
    One entry of a per-symbol bucketed series.

    Attributes:
        value: Last value observed in (or carried into) the bucket
        bucket: Bucket start timestamp
    """
    value: float
    bucket: int

    def carried_to(self, bucket: int, trigger: "BarPoint") -> "BarPoint":
        """
        Copy of this point moved forward to fill a skipped bucket.

        Args:
            bucket: Skipped bucket to fill
            trigger: Real record whose arrival exposed the gap; subclasses
                     copy arrival metadata from it
        """
        return BarPoint(value=self.value, bucket=bucket)


@dataclass(frozen=True)
class QuoteRecord(BarPoint):
    """
    Aligner record: a bar point with arrival time and fill flag.

    Attributes:
        wall_time: Raw arrival time in milliseconds
        synthesized: True when the record was carry-forward filled
    """
    wall_time: int = 0
    synthesized: bool = False

    def carried_to(self, bucket: int, trigger: "QuoteRecord") -> "QuoteRecord":
        """Synthesized copy stamped with the arrival time of the tick that caused the fill."""
        return QuoteRecord(
            value=self.value,
            bucket=bucket,
            wall_time=trigger.wall_time,
            synthesized=True
        )


# ============================================================================
# State Types
# ============================================================================

@dataclass
class Watermarks:
    """
    Instance-scoped progress markers.

    Attributes:
        start_time: Oldest bucket every series should retain
        target_length: Length every series must have to be ready
        last_open_date: Most advanced bucket seen across all symbols
        last_wall_time: Most advanced raw arrival time across all symbols (ms)
    """
    start_time: int = 0
    target_length: int = 0
    last_open_date: int = 0
    last_wall_time: int = 0

    def reset(self, target_length: int = 0) -> None:
        """Restore the initial state."""
        self.start_time = 0
        self.target_length = target_length
        self.last_open_date = 0
        self.last_wall_time = 0


# ============================================================================
# Dispatch Types
# ============================================================================

@dataclass(frozen=True)
class DispatchEvent:
    """
    A single value delivered to a dispatch consumer.

    Closed events describe settled buckets; intra-bar events describe the
    still-open bucket of each symbol.
    """
    symbol_index: int
    value: float
    bucket: int
    delay_ms: int
    price_type: PriceType
    is_update: bool = False
    is_gap: bool = False

    @property
    def is_close(self) -> bool:
        return self.price_type == PriceType.CLOSE


@dataclass(frozen=True)
class Tick:
    """Real-time price tick addressed by symbol name."""
    symbol: str
    price: float
    time_ms: int
