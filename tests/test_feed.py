"""Tests for blotter/datafeed/feed.py"""

import asyncio

import pytest

from blotter.datafeed.feed import SimulatedFeed
from blotter.types import Action, FeedEvent


def drain(feed):
    events = []
    while not feed.event_queue.empty():
        events.append(feed.event_queue.get_nowait())
    return events


def test_requires_rows():
    with pytest.raises(ValueError):
        SimulatedFeed([])


def test_run_emits_events():
    feed = SimulatedFeed(["0", "1", "2"], tick_interval_ms=1, seed=5)
    asyncio.run(feed.run(max_events=20))

    events = drain(feed)
    assert feed.events_emitted == 20
    assert len(events) == 20
    assert all(isinstance(e, FeedEvent) for e in events)
    assert {e.row_id for e in events} <= {"0", "1", "2"}
    assert {e.action for e in events} <= set(Action)


def test_full_queue_drops_oldest():
    feed = SimulatedFeed(["0"], tick_interval_ms=1, queue_size=5, seed=5)
    asyncio.run(feed.run(max_events=12))

    assert feed.events_emitted == 12
    assert feed.events_dropped == 7
    assert len(drain(feed)) == 5


def test_seed_is_reproducible():
    a = SimulatedFeed(["0", "1", "2", "3"], seed=9)
    b = SimulatedFeed(["0", "1", "2", "3"], seed=9)
    assert [a.next_event() for _ in range(30)] == [b.next_event() for _ in range(30)]


def test_stop_ends_run():
    feed = SimulatedFeed(["0"], tick_interval_ms=1)

    async def scenario():
        task = asyncio.create_task(feed.run())
        await asyncio.sleep(0.02)
        feed.stop()
        await asyncio.wait_for(task, timeout=1.0)

    asyncio.run(scenario())
    assert feed.events_emitted >= 1
