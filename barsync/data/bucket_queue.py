"""
Bucket Queue - Contiguous per-symbol bucket storage.

Shared by the bucketed series and the aligner. Consecutive entries are
always exactly one timeframe apart: skipped buckets are synthesized by
carrying the previous record forward.
"""

from collections import deque
from typing import Deque, Iterator, List, Optional

from ..core.types import BarPoint


class BucketQueue:
    """
    Ordered bucket records, oldest first.

    Uses deque for O(1) append and eviction at both ends.
    """

    def __init__(self, timeframe: int):
        self.timeframe = timeframe
        self.items: Deque[BarPoint] = deque()

    def push(self, record: BarPoint) -> int:
        """
        Add a record for its bucket.

        A record for the last stored bucket replaces it (still-open bucket).
        Buckets skipped since the last stored one are filled with carried
        copies of the last record, never past the new bucket.

        Args:
            record: New record; its bucket must not be behind the last stored one

        Returns:
            Number of synthesized records
        """
        if not self.items:
            self.items.append(record)
            return 0

        last = self.items[-1]
        if record.bucket == last.bucket:
            self.items[-1] = record
            return 0

        filled = 0
        while last.bucket + self.timeframe < record.bucket:
            last = last.carried_to(last.bucket + self.timeframe, record)
            self.items.append(last)
            filled += 1

        self.items.append(record)
        return filled

    def is_behind(self, bucket: int) -> bool:
        """True if ``bucket`` is older than the last stored bucket."""
        return bool(self.items) and bucket < self.items[-1].bucket

    def evict_before(self, start_time: int) -> int:
        """
        Drop entries older than ``start_time``.

        The last remaining entry is always kept, even if stale.

        Returns:
            Number of evicted entries
        """
        evicted = 0
        while len(self.items) > 1 and self.items[0].bucket < start_time:
            self.items.popleft()
            evicted += 1
        return evicted

    def keep_last(self, count: int) -> None:
        """Drop everything except the newest ``count`` entries."""
        while len(self.items) > max(count, 0):
            self.items.popleft()

    def drop_front(self) -> None:
        self.items.popleft()

    def front(self) -> Optional[BarPoint]:
        return self.items[0] if self.items else None

    def back(self) -> Optional[BarPoint]:
        return self.items[-1] if self.items else None

    def values(self) -> List[float]:
        return [item.value for item in self.items]

    def buckets(self) -> List[int]:
        return [item.bucket for item in self.items]

    def clear(self) -> None:
        self.items.clear()

    def __getitem__(self, pos: int) -> BarPoint:
        return self.items[pos]

    def __iter__(self) -> Iterator[BarPoint]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)
