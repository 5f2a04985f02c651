"""
Window Policy - Retention strategies for bucketed series.

Two strategies share the same storage:
- SlidingWindow keeps the N most recent buckets
- PeriodicWindow accumulates buckets from the start of the current
  period and restarts at every period boundary

The strategy is chosen once at construction. On every accepted update it
moves the shared watermarks (start_time, target_length) forward; the
series then evicts entries older than start_time and reports readiness
against target_length.
"""

from abc import ABC, abstractmethod

from ..core.types import Watermarks
from .bucketing import period_start


class WindowPolicy(ABC):
    """
    Abstract retention strategy.

    Subclasses must implement:
    - initial_length()
    - advance()
    """

    def __init__(self, window_size: int, timeframe: int):
        """
        Args:
            window_size: Buckets per window or per period
            timeframe: Bucket width
        """
        self.window_size = window_size
        self.timeframe = timeframe

    @abstractmethod
    def initial_length(self) -> int:
        """Target length before any update."""
        pass

    @abstractmethod
    def advance(self, watermarks: Watermarks, bucket: int, timestamp: int) -> None:
        """
        Move watermarks forward for an accepted update.

        Args:
            watermarks: Shared watermarks of the owning series
            bucket: Bucket of the update
            timestamp: Raw timestamp of the update
        """
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        pass


class SlidingWindow(WindowPolicy):
    """Retains the ``window_size`` most recent buckets."""

    def __init__(self, window_size: int, timeframe: int):
        super().__init__(window_size, timeframe)
        self.span = (window_size - 1) * timeframe

    @property
    def name(self) -> str:
        return "sliding"

    def initial_length(self) -> int:
        return self.window_size

    def advance(self, watermarks: Watermarks, bucket: int, timestamp: int) -> None:
        if bucket >= self.span:
            watermarks.start_time = max(watermarks.start_time, bucket - self.span)


class PeriodicWindow(WindowPolicy):
    """Accumulates from the period origin; ``window_size`` buckets per period."""

    def __init__(self, window_size: int, timeframe: int):
        super().__init__(window_size, timeframe)
        self.period = window_size * timeframe

    @property
    def name(self) -> str:
        return "periodic"

    def initial_length(self) -> int:
        return 0

    def advance(self, watermarks: Watermarks, bucket: int, timestamp: int) -> None:
        origin = period_start(timestamp, self.period)
        elapsed = (bucket - max(watermarks.start_time, origin)) // self.timeframe + 1

        if origin > watermarks.start_time:
            # New period: length restarts, 1 when the tick is on the boundary
            watermarks.start_time = origin
            watermarks.target_length = elapsed
        else:
            watermarks.target_length = max(watermarks.target_length, elapsed)


def make_policy(window_size: int, timeframe: int, periodic_mode: bool) -> WindowPolicy:
    """Select the retention strategy."""
    if periodic_mode:
        return PeriodicWindow(window_size, timeframe)
    return SlidingWindow(window_size, timeframe)
