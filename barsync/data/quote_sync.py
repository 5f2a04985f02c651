"""
Quote Sync - Aligns bucketed quotes across several symbols.

Each symbol has its own queue of bucket records. A dispatch pass (calc)
runs only when every symbol has reached the most advanced bucket seen so
far, so consumers always receive a consistent cross-symbol view.

Dispatch order within one calc():
1. Closed buckets, oldest first, symbols in index order (PriceType.CLOSE)
2. The open bucket of every symbol, in index order (PriceType.INTRA_BAR)

Closed buckets are removed from the queues once dispatched.
"""

from typing import Callable, List, Optional

from ..core.constants import DEFAULT_TIMEFRAME_SECONDS, PriceType
from ..core.exceptions import InvalidConfigError
from ..core.types import QuoteRecord, Watermarks
from ..monitoring.logger import get_logger
from .bucket_queue import BucketQueue
from .bucketing import bucket, ms_to_seconds

# (index, value, bucket, delay_ms, price_type, is_update, is_gap)
DispatchHandler = Callable[[int, float, int, int, PriceType, bool, bool], None]


class QuoteSync:
    """
    Multi-symbol quote synchronizer.

    Single-writer and not reentrant: a handler invoked from calc() must not
    call update(), calc() or reset() on the same instance. Such calls are
    refused.

    Known limitation: queues are only trimmed by a dispatch pass, and a pass
    needs every symbol at the global bucket. While one symbol stays silent,
    the queues of the active symbols grow by one record per bucket.
    """

    def __init__(
        self,
        symbol_count: int = 1,
        timeframe: int = DEFAULT_TIMEFRAME_SECONDS,
        auto_calc: bool = False,
        on_update: Optional[DispatchHandler] = None
    ):
        """
        Initialize quote synchronizer.

        Args:
            symbol_count: Number of symbols
            timeframe: Bucket width in seconds
            auto_calc: Call calc() after every successful update
            on_update: Dispatch handler
        """
        if symbol_count <= 0:
            raise InvalidConfigError("symbol_count must be positive", value=symbol_count)
        if timeframe <= 0:
            raise InvalidConfigError("timeframe must be positive", value=timeframe)

        self.timeframe = timeframe
        self.auto_calc = auto_calc
        self.on_update = on_update

        self.queues: List[BucketQueue] = [BucketQueue(timeframe) for _ in range(symbol_count)]
        self.update_flags: List[bool] = [False] * symbol_count
        self.watermarks = Watermarks()

        self._dispatching = False
        self.logger = get_logger(__name__)

    @property
    def symbol_count(self) -> int:
        return len(self.queues)

    @property
    def last_open_date(self) -> int:
        return self.watermarks.last_open_date

    @property
    def last_wall_time(self) -> int:
        return self.watermarks.last_wall_time

    def set_handler(self, handler: Optional[DispatchHandler]) -> None:
        self.on_update = handler

    def queue_length(self, index: int) -> int:
        return len(self.queues[index])

    def update(self, index: int, value: float, time_ms: int) -> bool:
        """
        Record a tick for a symbol.

        Args:
            index: Symbol index
            value: Price
            time_ms: Arrival time in milliseconds

        Returns:
            True if the tick was stored (and, with auto_calc, the result of calc())
        """
        if self._refuse_reentry("update"):
            return False

        if not 0 <= index < len(self.queues):
            self.logger.debug("Rejected tick: index out of range", index=index)
            return False

        open_date = bucket(ms_to_seconds(time_ms), self.timeframe)
        queue = self.queues[index]

        if queue.is_behind(open_date):
            self.logger.warning(
                "Rejected tick: bucket regressed",
                index=index,
                bucket=open_date,
                last_bucket=queue.back().bucket
            )
            return False

        self.watermarks.last_wall_time = max(self.watermarks.last_wall_time, time_ms)
        self.watermarks.last_open_date = max(self.watermarks.last_open_date, open_date)

        filled = queue.push(QuoteRecord(value=value, bucket=open_date, wall_time=time_ms))
        if filled:
            self.logger.debug("Carried forward missing buckets", index=index, count=filled)

        self.update_flags[index] = True

        if self.auto_calc:
            return self.calc()
        return True

    def is_aligned(self) -> bool:
        """True when every symbol's newest record is at the global bucket watermark."""
        for queue in self.queues:
            if not queue:
                return False
            if queue.back().bucket != self.watermarks.last_open_date:
                return False
        return True

    def calc(self) -> bool:
        """
        Dispatch closed and open buckets if all symbols are aligned.

        Returns:
            True if the dispatch pass ran
        """
        if self.on_update is None:
            return False
        if self._refuse_reentry("calc"):
            return False
        if not self.is_aligned():
            return False

        self._dispatching = True
        try:
            self._dispatch()
        finally:
            self._dispatching = False
        return True

    def _dispatch(self) -> None:
        min_len = min(len(queue) for queue in self.queues)

        # History older than the oldest bucket shared by all symbols was never
        # reached by every symbol and is not dispatched
        for queue in self.queues:
            queue.keep_last(min_len)

        closed = min_len - 1
        for _ in range(closed):
            is_gap = all(queue.front().synthesized for queue in self.queues)
            for index, queue in enumerate(self.queues):
                self._emit(index, queue.front(), PriceType.CLOSE, False, is_gap)
            for queue in self.queues:
                queue.drop_front()

        if closed:
            self.logger.debug(
                "Flushed closed buckets",
                count=closed,
                last_bucket=self.queues[0].back().bucket
            )

        for index, queue in enumerate(self.queues):
            self._emit(index, queue.back(), PriceType.INTRA_BAR, self.update_flags[index], False)
            self.update_flags[index] = False

    def _emit(
        self,
        index: int,
        record: QuoteRecord,
        price_type: PriceType,
        is_update: bool,
        is_gap: bool
    ) -> None:
        delay_ms = self.watermarks.last_wall_time - record.wall_time
        self.on_update(index, record.value, record.bucket, delay_ms, price_type, is_update, is_gap)

    def _refuse_reentry(self, operation: str) -> bool:
        if self._dispatching:
            self.logger.error("Refused re-entrant call from dispatch handler", operation=operation)
            return True
        return False

    def reset(self) -> None:
        """Clear all queues, update flags and watermarks."""
        if self._refuse_reentry("reset"):
            return
        for queue in self.queues:
            queue.clear()
        self.update_flags = [False] * len(self.queues)
        self.watermarks.reset()
