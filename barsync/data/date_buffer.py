"""
Date Buffer - Time-bucketed history for several symbols.

Each symbol owns a contiguous series of buckets. Missing buckets are filled
by carrying the previous value forward. All series share one set of
watermarks, so ``is_ready()`` tells whether every symbol holds the same,
complete window of buckets.

Usage:
    buffer = DateBuffer(window_size=5, timeframe=60, symbol_count=3)
    buffer.update(0, 1.0842, 1700000000)
    if buffer.is_ready():
        closes = buffer.to_vector(0)
"""

from typing import List, Optional

import pandas as pd

from ..core.constants import DEFAULT_TIMEFRAME_SECONDS, DEFAULT_WINDOW_SIZE, PriceType
from ..core.exceptions import InvalidConfigError
from ..core.types import BarPoint, Watermarks
from ..monitoring.logger import get_logger
from .bucket_queue import BucketQueue
from .bucketing import TimestampLike, bucket, to_datetime_index, to_timestamp
from .window_policy import make_policy


class DateBuffer:
    """
    Per-symbol bucketed series with sliding or periodic retention.

    Runtime operations never raise; rejected updates return False and
    leave the buffer untouched.
    """

    def __init__(
        self,
        window_size: int = DEFAULT_WINDOW_SIZE,
        timeframe: int = DEFAULT_TIMEFRAME_SECONDS,
        periodic_mode: bool = False,
        symbol_count: int = 1
    ):
        """
        Initialize date buffer.

        Args:
            window_size: Buffer size, or period length in buckets when periodic
            timeframe: Bucket width (same unit as the timestamps)
            periodic_mode: Accumulate within a period instead of sliding
            symbol_count: Number of independent series
        """
        for name, value in (
            ('window_size', window_size),
            ('timeframe', timeframe),
            ('symbol_count', symbol_count)
        ):
            if value <= 0:
                raise InvalidConfigError(f"{name} must be positive", value=value)

        self.window_size = window_size
        self.timeframe = timeframe
        self.periodic_mode = periodic_mode
        self.policy = make_policy(window_size, timeframe, periodic_mode)

        self.watermarks = Watermarks(target_length=self.policy.initial_length())
        self.series: List[BucketQueue] = [BucketQueue(timeframe) for _ in range(symbol_count)]
        self.output: List[Optional[float]] = [None] * symbol_count

        self.logger = get_logger(__name__)

    @property
    def symbol_count(self) -> int:
        return len(self.series)

    @property
    def start_time(self) -> int:
        return self.watermarks.start_time

    @property
    def target_length(self) -> int:
        return self.watermarks.target_length

    def update(
        self,
        index: int,
        value: float,
        timestamp: TimestampLike,
        price_type: PriceType = PriceType.CLOSE
    ) -> bool:
        """
        Add a value to a symbol's series.

        Args:
            index: Symbol index
            value: Price or indicator value
            timestamp: Time of the value
            price_type: Accepted for interface parity, does not affect storage

        Returns:
            True if the buffer was updated
        """
        if not 0 <= index < len(self.series):
            self.logger.debug("Rejected update: index out of range", index=index)
            return False

        timestamp = to_timestamp(timestamp)
        open_time = bucket(timestamp, self.timeframe)
        series = self.series[index]

        if series.is_behind(open_time):
            self.logger.warning(
                "Rejected update: bucket regressed",
                index=index,
                bucket=open_time,
                last_bucket=series.back().bucket
            )
            return False

        self.policy.advance(self.watermarks, open_time, timestamp)

        filled = series.push(BarPoint(value=value, bucket=open_time))
        if filled:
            self.logger.debug("Carried forward missing buckets", index=index, count=filled)

        series.evict_before(self.watermarks.start_time)
        self.output[index] = series.front().value
        return True

    def is_ready(self) -> bool:
        """True when every series starts at start_time and has the target length."""
        for series in self.series:
            if not series:
                return False
            if series.front().bucket != self.watermarks.start_time:
                return False
            if len(series) != self.watermarks.target_length:
                return False
        return True

    def _series_at(self, index: int) -> Optional[BucketQueue]:
        if not 0 <= index < len(self.series):
            return None
        return self.series[index]

    def get(self, index: int = 0) -> Optional[float]:
        """Current value of a symbol: the oldest retained entry."""
        if self._series_at(index) is None:
            return None
        return self.output[index]

    def to_vector(self, index: int = 0) -> List[float]:
        """Retained values, oldest first. Empty for an unknown index."""
        series = self._series_at(index)
        return series.values() if series is not None else []

    def to_series(self, index: int = 0) -> pd.Series:
        """Retained values indexed by bucket time (UTC)."""
        series = self._series_at(index)
        values = series.values() if series is not None else []
        buckets = series.buckets() if series is not None else []
        return pd.Series(
            values,
            index=to_datetime_index(buckets),
            dtype='float64',
            name=index
        )

    def buckets(self, index: int = 0) -> List[int]:
        series = self._series_at(index)
        return series.buckets() if series is not None else []

    def front(self, index: int = 0) -> Optional[float]:
        series = self._series_at(index)
        point = series.front() if series is not None else None
        return point.value if point else None

    def back(self, index: int = 0) -> Optional[float]:
        series = self._series_at(index)
        point = series.back() if series is not None else None
        return point.value if point else None

    def size(self, index: int = 0) -> int:
        series = self._series_at(index)
        return len(series) if series is not None else 0

    def reset(self) -> None:
        """Clear all series and watermarks."""
        for series in self.series:
            series.clear()
        self.output = [None] * len(self.series)
        self.watermarks.reset(target_length=self.policy.initial_length())
