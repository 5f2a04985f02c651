"""Constants and enumerations shared by the synchronization engine.

This module defines the price type carried by every dispatch event and the
default construction values used when a configuration omits them.
"""

from enum import Enum


# ============================================================================
# Enumerations
# ============================================================================

class PriceType(str, Enum):
    """Enumeration of dispatched price types.
    
    - INTRA_BAR: Value of the still-open bucket, may change on the next tick
    - CLOSE: Final value of a settled bucket
    """
    INTRA_BAR = "INTRA_BAR"
    CLOSE = "CLOSE"


# ============================================================================
# Defaults
# ============================================================================

DEFAULT_TIMEFRAME_SECONDS: int = 60
"""Default bucket width in seconds (one-minute bars)."""

DEFAULT_WINDOW_SIZE: int = 1
"""Default number of buckets retained by a bucketed series."""

DEFAULT_MAX_BARS: int = 5000
"""Maximum aligned snapshots kept in memory by the snapshot store."""

MS_PER_SECOND: int = 1000
"""Conversion factor from aligner wall time (ms) to bucket units (s)."""
