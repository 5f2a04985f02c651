"""
Time Bucketing - Maps raw timestamps onto fixed-width buckets.

A bucket ``b`` covers the half-open interval ``[b, b + timeframe)``.
The timeframe unit is chosen by the caller; the aligner works in seconds.
"""

from datetime import datetime, timezone
from typing import Union

import numpy as np
import pandas as pd

from ..core.constants import MS_PER_SECOND

TimestampLike = Union[int, np.integer, datetime, pd.Timestamp]


def bucket(timestamp: int, timeframe: int) -> int:
    """Start of the bucket containing ``timestamp``."""
    return timestamp - timestamp % timeframe


def period_start(timestamp: int, period: int) -> int:
    """Start of the period containing ``timestamp``."""
    return timestamp - timestamp % period


def ms_to_seconds(time_ms: int) -> int:
    return time_ms // MS_PER_SECOND


def to_timestamp(value: TimestampLike) -> int:
    """
    Normalize a time value to integer epoch seconds.

    Args:
        value: Epoch seconds, datetime (naive is treated as UTC) or pandas Timestamp

    Returns:
        Integer epoch seconds
    """
    if isinstance(value, pd.Timestamp):
        if value.tzinfo is None:
            value = value.tz_localize('UTC')
        return int(value.timestamp())

    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return int(value.timestamp())

    return int(value)


def to_datetime_index(buckets) -> pd.DatetimeIndex:
    """UTC DatetimeIndex from bucket timestamps in seconds."""
    return pd.to_datetime(np.asarray(list(buckets), dtype='int64'), unit='s', utc=True)
