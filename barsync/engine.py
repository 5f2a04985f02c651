"""
Sync Engine - Central orchestration of named-symbol tick alignment.

Responsibilities:
1. Map symbol names to aligner indices
2. Feed ticks into the QuoteSync aligner
3. Collect aligned closes in an AlignedBarStore
4. Keep a sliding or periodic window of aligned closes in a DateBuffer
"""

from typing import Dict, List, Optional, Sequence

import pandas as pd

from .core.config import SyncConfig
from .core.constants import (
    DEFAULT_MAX_BARS,
    DEFAULT_TIMEFRAME_SECONDS,
    DEFAULT_WINDOW_SIZE,
    PriceType,
)
from .core.exceptions import InvalidConfigError
from .core.types import Tick
from .data.aligned_store import AlignedBarStore
from .data.date_buffer import DateBuffer
from .data.quote_sync import QuoteSync
from .monitoring.logger import get_logger


class SyncEngine:
    """
    Tick-to-aligned-bar pipeline for a fixed set of symbols.
    """

    def __init__(
        self,
        symbols: Sequence[str],
        timeframe: int = DEFAULT_TIMEFRAME_SECONDS,
        auto_calc: bool = True,
        max_bars: int = DEFAULT_MAX_BARS,
        window_size: int = DEFAULT_WINDOW_SIZE,
        periodic_mode: bool = False
    ):
        """
        Initialize sync engine.

        Args:
            symbols: Symbol names, list position becomes the symbol index
            timeframe: Bucket width in seconds
            auto_calc: Dispatch after every tick; otherwise call calc()
            max_bars: Aligned rows kept in memory
            window_size: Closes per window, or per period when periodic
            periodic_mode: Accumulate closes per period instead of sliding
        """
        if not symbols:
            raise InvalidConfigError("At least one symbol is required")

        self.symbols: List[str] = list(symbols)
        self.indices: Dict[str, int] = {s: i for i, s in enumerate(self.symbols)}
        if len(self.indices) != len(self.symbols):
            raise InvalidConfigError("Duplicate symbol names", symbols=self.symbols)

        self.auto_calc = auto_calc
        self.store = AlignedBarStore(self.symbols, max_bars=max_bars)
        self.date_buffer = DateBuffer(
            window_size=window_size,
            timeframe=timeframe,
            periodic_mode=periodic_mode,
            symbol_count=len(self.symbols)
        )
        # calc() is driven here so on_tick can tell a stored tick from a rejected one
        self.quote_sync = QuoteSync(
            symbol_count=len(self.symbols),
            timeframe=timeframe,
            auto_calc=False,
            on_update=self._on_dispatch
        )

        self.ticks_received = 0
        self.ticks_rejected = 0

        self.logger = get_logger(__name__)
        self.logger.info(
            "Sync engine initialized",
            symbols=','.join(self.symbols),
            timeframe=timeframe,
            auto_calc=auto_calc,
            window_size=window_size,
            periodic_mode=periodic_mode
        )

    @classmethod
    def from_config(cls, config: SyncConfig) -> "SyncEngine":
        return cls(
            symbols=config.symbols,
            timeframe=config.timeframe,
            auto_calc=config.auto_calc,
            max_bars=config.max_bars,
            window_size=config.window_size,
            periodic_mode=config.periodic_mode
        )

    def _on_dispatch(
        self,
        index: int,
        value: float,
        bucket: int,
        delay_ms: int,
        price_type: PriceType,
        is_update: bool,
        is_gap: bool
    ) -> None:
        self.store.on_update(index, value, bucket, delay_ms, price_type, is_update, is_gap)
        if price_type == PriceType.CLOSE:
            self.date_buffer.update(index, value, bucket, price_type)

    def on_tick(self, tick: Tick) -> bool:
        """
        Process incoming tick.

        Args:
            tick: New tick

        Returns:
            True if the tick was stored. A stored tick may still wait for
            slower symbols before anything is dispatched.
        """
        index = self.indices.get(tick.symbol)
        if index is None:
            self.ticks_rejected += 1
            self.logger.warning("Unknown symbol", symbol=tick.symbol)
            return False

        if not self.quote_sync.update(index, tick.price, tick.time_ms):
            self.ticks_rejected += 1
            return False

        self.ticks_received += 1
        if self.auto_calc:
            self.quote_sync.calc()
        return True

    def calc(self) -> bool:
        """Dispatch pending buckets; False while a symbol lags behind."""
        return self.quote_sync.calc()

    def get_bars(self, count: Optional[int] = None) -> pd.DataFrame:
        """Aligned closes, one column per symbol."""
        return self.store.get_bars(count=count)

    def window(self, symbol: str) -> List[float]:
        """Windowed aligned closes of a symbol, oldest first."""
        index = self.indices.get(symbol)
        if index is None:
            return []
        return self.date_buffer.to_vector(index)

    def window_ready(self) -> bool:
        """True when every symbol holds a complete window of closes."""
        return self.date_buffer.is_ready()

    def latest_snapshot(self) -> Dict[str, Optional[float]]:
        return self.store.latest_snapshot()

    def get_status(self) -> Dict[str, Dict]:
        """
        Status per symbol.

        Returns:
            {
                'EURUSD': {'queued': 2, 'latest': 1.0842, 'delay_ms': 150},
                ...
            }
        """
        status = {}
        for symbol, index in self.indices.items():
            status[symbol] = {
                'queued': self.quote_sync.queue_length(index),
                'latest': self.store.latest_prices[index],
                'delay_ms': self.store.latest_delays[index],
            }
        return status

    def reset(self) -> None:
        self.quote_sync.reset()
        self.store.reset()
        self.date_buffer.reset()
        self.ticks_received = 0
        self.ticks_rejected = 0
