"""
Aligned Bar Store - Collects dispatched buckets into a pandas table.

Plugs into QuoteSync as its dispatch handler. Closed events of one bucket
are gathered until every symbol has reported, then committed as a single
row with one column per symbol. Intra-bar events only refresh the latest
prices.
"""

from typing import Dict, List, Optional, Sequence, Union

import pandas as pd

from ..core.constants import DEFAULT_MAX_BARS, PriceType
from ..core.types import DispatchEvent
from ..monitoring.logger import get_logger
from .bucketing import to_datetime_index


class AlignedBarStore:
    """
    Store for aligned multi-symbol closes.

    Uses pandas DataFrame internally, indexed by bucket time (UTC).
    """

    def __init__(self, symbols: Union[int, Sequence[str]], max_bars: int = DEFAULT_MAX_BARS):
        """
        Initialize store.

        Args:
            symbols: Symbol names in index order, or a symbol count
            max_bars: Maximum rows to keep in memory
        """
        if isinstance(symbols, int):
            symbols = [str(i) for i in range(symbols)]
        self.symbols: List[str] = list(symbols)
        self.max_bars = max_bars

        self.df = self._empty_frame()
        self.pending: Dict[int, Dict[int, float]] = {}
        self.pending_gap: Dict[int, bool] = {}

        self.latest_prices: List[Optional[float]] = [None] * len(self.symbols)
        self.latest_delays: List[Optional[int]] = [None] * len(self.symbols)
        self.latest_bucket: Optional[int] = None
        self.last_event: Optional[DispatchEvent] = None

        self.logger = get_logger(__name__)

    def _empty_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            {
                **{s: pd.Series(dtype='float64') for s in self.symbols},
                'is_gap': pd.Series(dtype='bool')
            },
            index=pd.DatetimeIndex([], tz='UTC', name='timestamp')
        )

    def on_update(
        self,
        index: int,
        value: float,
        bucket: int,
        delay_ms: int,
        price_type: PriceType,
        is_update: bool,
        is_gap: bool
    ) -> None:
        """Dispatch handler for QuoteSync."""
        self.last_event = DispatchEvent(
            symbol_index=index,
            value=value,
            bucket=bucket,
            delay_ms=delay_ms,
            price_type=price_type,
            is_update=is_update,
            is_gap=is_gap
        )

        if price_type == PriceType.INTRA_BAR:
            self.latest_prices[index] = value
            self.latest_delays[index] = delay_ms
            self.latest_bucket = bucket
            return

        row = self.pending.setdefault(bucket, {})
        row[index] = value
        self.pending_gap[bucket] = is_gap

        if len(row) == len(self.symbols):
            self._commit(bucket)

    def _commit(self, bucket: int) -> None:
        values = self.pending.pop(bucket)
        is_gap = self.pending_gap.pop(bucket)

        row = pd.DataFrame(
            {
                **{name: [float(values[i])] for i, name in enumerate(self.symbols)},
                'is_gap': [is_gap]
            },
            index=to_datetime_index([bucket])
        )
        row.index.name = 'timestamp'

        if self.df.empty:
            self.df = row
        else:
            self.df = pd.concat([self.df, row])

        # Remove duplicates (keep latest)
        self.df = self.df[~self.df.index.duplicated(keep='last')]
        self.df.sort_index(inplace=True)

        if len(self.df) > self.max_bars:
            self.df = self.df.iloc[-self.max_bars:]

        if is_gap:
            self.logger.info("Gap bucket committed", bucket=bucket)
        else:
            self.logger.debug("Aligned bucket committed", bucket=bucket)

    def get_bars(self, count: Optional[int] = None) -> pd.DataFrame:
        """
        Get committed rows.

        Args:
            count: Number of most recent rows

        Returns:
            DataFrame with a timestamp column, one column per symbol and is_gap
        """
        df = self.df.copy()
        if count and len(df) > count:
            df = df.iloc[-count:]
        return df.reset_index()

    def latest_snapshot(self) -> Dict[str, Optional[float]]:
        """Latest intra-bar price per symbol name."""
        return dict(zip(self.symbols, self.latest_prices))

    def gap_count(self) -> int:
        if self.df.empty:
            return 0
        return int(self.df['is_gap'].sum())

    def reset(self) -> None:
        self.df = self._empty_frame()
        self.pending.clear()
        self.pending_gap.clear()
        self.latest_prices = [None] * len(self.symbols)
        self.latest_delays = [None] * len(self.symbols)
        self.latest_bucket = None
        self.last_event = None

    def __len__(self) -> int:
        return len(self.df)
