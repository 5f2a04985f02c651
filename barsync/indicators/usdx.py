"""
USDX - US dollar index from six synchronized currency pairs.

Formula (ICE weights):
    USDX = 50.14348112 × EURUSD^-0.576 × USDJPY^0.136 × GBPUSD^-0.119
                       × USDCAD^0.091 × USDCHF^0.036 × USDSEK^0.042

Pair quotes are bucketed by a one-bucket DateBuffer, so the index is only
computed when all six pairs hold a value for the same bucket.
"""

from enum import IntEnum
from typing import Optional

import numpy as np

from ..core.constants import DEFAULT_TIMEFRAME_SECONDS, PriceType
from ..data.bucketing import TimestampLike
from ..data.date_buffer import DateBuffer


class UsdxPair(IntEnum):
    """Symbol index of each pair."""
    EURUSD = 0
    USDJPY = 1
    GBPUSD = 2
    USDCAD = 3
    USDCHF = 4
    USDSEK = 5


USDX_SCALE = 50.14348112
USDX_WEIGHTS = np.array([-0.576, 0.136, -0.119, 0.091, 0.036, 0.042])


class USDX:
    """US dollar index calculator."""

    def __init__(self, timeframe: int = DEFAULT_TIMEFRAME_SECONDS, auto_calc: bool = False):
        """
        Args:
            timeframe: Bucket width in seconds
            auto_calc: Recalculate after every update; otherwise call calc()
        """
        self.auto_calc = auto_calc
        self.buffer = DateBuffer(window_size=1, timeframe=timeframe, periodic_mode=False,
                                 symbol_count=len(UsdxPair))
        self.value: Optional[float] = None
        self._ready = False

    def update(
        self,
        index: int,
        value: float,
        timestamp: TimestampLike,
        price_type: PriceType = PriceType.CLOSE
    ) -> bool:
        """
        Update a pair quote.

        Args:
            index: Pair index (see UsdxPair)
            value: Pair quote
            timestamp: Quote time

        Returns:
            True if stored; with auto_calc, True only if the index was recalculated
        """
        if not self.auto_calc:
            self._ready = False
            return self.buffer.update(index, value, timestamp, price_type)

        if not self.buffer.update(index, value, timestamp, price_type):
            return False
        return self.calc()

    def calc(self) -> bool:
        """Compute the index from the latest quotes of all pairs."""
        if not self.buffer.is_ready():
            return False

        quotes = np.array([self.buffer.back(i) for i in range(len(UsdxPair))], dtype=float)
        self.value = float(USDX_SCALE * np.prod(np.power(quotes, USDX_WEIGHTS)))
        self._ready = True
        return True

    def is_ready(self) -> bool:
        if self.auto_calc:
            return self.buffer.is_ready()
        return self._ready

    def reset(self) -> None:
        self.buffer.reset()
        self.value = None
        self._ready = False
