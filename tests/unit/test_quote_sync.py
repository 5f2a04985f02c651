"""
Unit tests for the multi-symbol quote synchronizer.

Timeframe is 60 seconds; tick times are in milliseconds.
"""

import pytest

from barsync.core.constants import PriceType
from barsync.core.exceptions import InvalidConfigError
from barsync.core.types import DispatchEvent
from barsync.data.quote_sync import QuoteSync


MINUTE_MS = 60_000


def make_sync(symbols: int = 3, timeframe: int = 60, auto_calc: bool = False):
    """QuoteSync wired to a list collecting dispatch events."""
    events = []

    def handler(index, value, bucket, delay_ms, price_type, is_update, is_gap):
        events.append(DispatchEvent(index, value, bucket, delay_ms, price_type, is_update, is_gap))

    sync = QuoteSync(symbols, timeframe, auto_calc, on_update=handler)
    return sync, events


def update_all(sync: QuoteSync, value: float, time_ms: int) -> None:
    for s in range(sync.symbol_count):
        assert sync.update(s, value, time_ms)


def closes(events):
    return [e for e in events if e.price_type == PriceType.CLOSE]


def intrabars(events):
    return [e for e in events if e.price_type == PriceType.INTRA_BAR]


# ══════════════════════════════════════════════════════════
#  Rejections and readiness
# ══════════════════════════════════════════════════════════


def test_calc_without_handler_is_refused():
    sync = QuoteSync(symbol_count=2, timeframe=60)
    sync.update(0, 1.0, MINUTE_MS)
    sync.update(1, 1.0, MINUTE_MS)

    assert not sync.calc()


def test_out_of_range_index_is_rejected():
    sync, _ = make_sync(symbols=2)

    assert not sync.update(2, 1.0, MINUTE_MS)
    assert not sync.update(-1, 1.0, MINUTE_MS)
    assert sync.last_wall_time == 0
    assert sync.last_open_date == 0


def test_regressing_bucket_is_rejected_without_mutation():
    sync, _ = make_sync(symbols=1)
    sync.update(0, 1.0, 2 * MINUTE_MS)

    assert not sync.update(0, 2.0, MINUTE_MS)
    assert sync.queue_length(0) == 1
    assert sync.last_wall_time == 2 * MINUTE_MS
    assert sync.last_open_date == 120


def test_earlier_tick_in_same_bucket_is_accepted():
    sync, _ = make_sync(symbols=1)
    sync.update(0, 1.0, 125_000)

    assert sync.update(0, 2.0, 121_000)
    assert sync.last_wall_time == 125_000


def test_waits_for_slowest_symbol():
    sync, events = make_sync()
    update_all(sync, 100.0, MINUTE_MS)
    assert sync.calc()
    events.clear()

    sync.update(0, 101.0, 2 * MINUTE_MS)
    assert not sync.calc()
    sync.update(1, 101.0, 2 * MINUTE_MS + 1000)
    assert not sync.calc()
    assert events == []

    sync.update(2, 101.0, 2 * MINUTE_MS + 2000)
    assert sync.calc()
    assert [e.bucket for e in closes(events)] == [60, 60, 60]


def test_invalid_construction_raises():
    with pytest.raises(InvalidConfigError):
        QuoteSync(symbol_count=0)
    with pytest.raises(InvalidConfigError):
        QuoteSync(timeframe=0)


def test_milliseconds_are_bucketed_in_seconds():
    sync, _ = make_sync(symbols=1, timeframe=300)
    sync.update(0, 1.0, 299_999)
    assert sync.last_open_date == 0

    sync.update(0, 1.0, 300_000)
    assert sync.last_open_date == 300


# ══════════════════════════════════════════════════════════
#  Dispatch
# ══════════════════════════════════════════════════════════


class TestDispatch:

    def test_delays_are_measured_from_latest_wall_time(self):
        sync, events = make_sync()
        update_all(sync, 100.0, MINUTE_MS)
        sync.calc()
        events.clear()

        sync.update(0, 101.0, 2 * MINUTE_MS)
        sync.update(1, 102.0, 2 * MINUTE_MS + 1000)
        sync.update(2, 103.0, 2 * MINUTE_MS + 2000)
        assert sync.calc()

        assert [(e.symbol_index, e.delay_ms) for e in closes(events)] == [
            (0, 62_000), (1, 62_000), (2, 62_000)
        ]
        assert [(e.symbol_index, e.value, e.delay_ms) for e in intrabars(events)] == [
            (0, 101.0, 2000), (1, 102.0, 1000), (2, 103.0, 0)
        ]

    def test_closed_buckets_precede_open_pass_in_order(self):
        sync, events = make_sync()
        update_all(sync, 100.0, MINUTE_MS)
        sync.calc()
        events.clear()

        update_all(sync, 103.0, 4 * MINUTE_MS)
        assert sync.calc()

        assert [(e.bucket, e.symbol_index, e.price_type) for e in events] == [
            (60, 0, PriceType.CLOSE), (60, 1, PriceType.CLOSE), (60, 2, PriceType.CLOSE),
            (120, 0, PriceType.CLOSE), (120, 1, PriceType.CLOSE), (120, 2, PriceType.CLOSE),
            (180, 0, PriceType.CLOSE), (180, 1, PriceType.CLOSE), (180, 2, PriceType.CLOSE),
            (240, 0, PriceType.INTRA_BAR), (240, 1, PriceType.INTRA_BAR), (240, 2, PriceType.INTRA_BAR),
        ]

    def test_gap_when_no_symbol_ticked(self):
        sync, events = make_sync()
        update_all(sync, 100.0, MINUTE_MS)
        sync.calc()
        events.clear()

        update_all(sync, 102.0, 3 * MINUTE_MS)
        sync.calc()

        by_bucket = {}
        for e in closes(events):
            by_bucket.setdefault(e.bucket, []).append(e)

        assert all(not e.is_gap for e in by_bucket[60])
        assert all(e.is_gap for e in by_bucket[120])
        assert all(e.value == 100.0 for e in by_bucket[120])
        # Filled records carry the arrival time of the tick that caused the fill
        assert all(e.delay_ms == 0 for e in by_bucket[120])
        assert all(not e.is_gap for e in intrabars(events))

    def test_no_gap_when_one_symbol_ticked(self):
        sync, events = make_sync()
        update_all(sync, 100.0, MINUTE_MS)
        sync.calc()
        events.clear()

        sync.update(0, 101.0, 2 * MINUTE_MS)
        update_all(sync, 102.0, 3 * MINUTE_MS)
        sync.calc()

        bucket_120 = [e for e in closes(events) if e.bucket == 120]
        assert len(bucket_120) == 3
        assert not any(e.is_gap for e in bucket_120)
        assert [e.value for e in bucket_120] == [101.0, 100.0, 100.0]

    def test_update_flag_is_consumed_per_calc(self):
        sync, events = make_sync()
        update_all(sync, 100.0, MINUTE_MS)
        sync.calc()
        assert [e.is_update for e in intrabars(events)] == [True, True, True]
        events.clear()

        sync.update(1, 100.5, MINUTE_MS + 1000)
        sync.calc()
        assert [e.is_update for e in intrabars(events)] == [False, True, False]
        events.clear()

        sync.calc()
        assert [e.is_update for e in intrabars(events)] == [False, False, False]

    def test_flushed_history_is_discarded(self):
        sync, _ = make_sync()
        update_all(sync, 100.0, MINUTE_MS)
        update_all(sync, 101.0, 5 * MINUTE_MS)
        assert sync.queue_length(0) == 5

        sync.calc()

        for s in range(3):
            assert sync.queue_length(s) == 1

    def test_bad_start_symbol_never_fabricates_history(self):
        sync, events = make_sync()

        sync.update(0, 100.0, MINUTE_MS)
        assert not sync.calc()

        update_all(sync, 101.0, 2 * MINUTE_MS)
        assert sync.calc()
        assert closes(events) == []
        assert [e.bucket for e in intrabars(events)] == [120, 120, 120]

        update_all(sync, 102.0, 3 * MINUTE_MS)
        assert sync.calc()

        assert all(e.bucket != 60 for e in events)
        assert [(e.symbol_index, e.bucket, e.value) for e in closes(events)] == [
            (0, 120, 101.0), (1, 120, 101.0), (2, 120, 101.0)
        ]


# ══════════════════════════════════════════════════════════
#  Auto calc, re-entry and reset
# ══════════════════════════════════════════════════════════


def test_auto_calc_dispatches_once_aligned():
    sync, events = make_sync(auto_calc=True)

    assert not sync.update(0, 100.0, MINUTE_MS)
    assert sync.queue_length(0) == 1
    assert not sync.update(1, 100.0, MINUTE_MS)
    assert sync.update(2, 100.0, MINUTE_MS)

    assert len(intrabars(events)) == 3


def test_queues_grow_while_a_symbol_is_silent():
    sync, events = make_sync(symbols=2, auto_calc=True)

    for minute in range(1, 1001):
        sync.update(0, 100.0 + minute, minute * MINUTE_MS)

    assert sync.queue_length(0) == 1000
    assert sync.queue_length(1) == 0
    assert events == []

    # First tick of the silent symbol trims the backlog to the shared bucket
    assert sync.update(1, 50.0, 1000 * MINUTE_MS)
    assert sync.queue_length(0) == 1
    assert closes(events) == []


def test_handler_cannot_mutate_during_dispatch():
    sync = QuoteSync(symbol_count=2, timeframe=60)
    results = []

    def handler(index, value, bucket, delay_ms, price_type, is_update, is_gap):
        results.append(sync.update(index, value + 1, 10 * MINUTE_MS))
        results.append(sync.calc())

    sync.set_handler(handler)
    sync.update(0, 1.0, MINUTE_MS)
    sync.update(1, 1.0, MINUTE_MS)

    assert sync.calc()
    assert results == [False, False, False, False]
    assert sync.last_open_date == 60
    assert sync.queue_length(0) == 1


def test_reset_clears_state():
    sync, events = make_sync()
    update_all(sync, 100.0, MINUTE_MS)
    sync.update(0, 101.0, 2 * MINUTE_MS)

    sync.reset()

    assert sync.last_open_date == 0
    assert sync.last_wall_time == 0
    assert all(sync.queue_length(s) == 0 for s in range(3))
    assert not sync.calc()
    assert events == []
