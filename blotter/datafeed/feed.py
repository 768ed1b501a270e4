"""
Simulated feed with async orchestration.

Handles:
1. Picking a random row and a random action once per tick
2. Pushing FeedEvents to a bounded, thread-safe queue for the UI

Performance notes:
- The queue is bounded; when the UI falls behind the oldest event is dropped
- Events are tiny (row id + enum), the UI drains the whole queue per frame
"""

from __future__ import annotations

import asyncio
import logging
import queue
import random
import time
from typing import Sequence

from ..types import Action, FeedEvent

logger = logging.getLogger(__name__)


class SimulatedFeed:
    """
    Async producer of random row actions.

    Usage:
        feed = SimulatedFeed(grid.row_ids, tick_interval_ms=100)
        asyncio.create_task(feed.run())
        event = feed.event_queue.get_nowait()
    """

    def __init__(
        self,
        row_ids: Sequence[str],
        tick_interval_ms: int = 100,
        queue_size: int = 256,
        seed: int | None = None,
    ) -> None:
        if not row_ids:
            raise ValueError("feed needs at least one row")
        self.row_ids = list(row_ids)
        self.tick_interval_ms = tick_interval_ms
        self._rng = random.Random(seed)

        # State
        self._running = False
        self.events_emitted: int = 0
        self.events_dropped: int = 0

        # Output queue for UI - thread-safe for the GUI's feed thread
        self.event_queue: queue.Queue[FeedEvent] = queue.Queue(maxsize=queue_size)

    def next_event(self) -> FeedEvent:
        row_id = self._rng.choice(self.row_ids)
        action = self._rng.choice(list(Action))
        return FeedEvent(row_id, action)

    def _push(self, event: FeedEvent) -> None:
        """Non-blocking put. Drops the oldest event if the queue is full."""
        try:
            self.event_queue.put_nowait(event)
        except queue.Full:
            try:
                self.event_queue.get_nowait()
            except queue.Empty:
                pass
            else:
                self.events_dropped += 1
            self.event_queue.put_nowait(event)
        self.events_emitted += 1

    async def run(self, max_events: int | None = None) -> None:
        """
        Main run loop. Emits one event per tick until stop() is called.

        `max_events` bounds the run (used by tests and the benchmark).
        """
        self._running = True
        interval = self.tick_interval_ms / 1000.0
        logger.info("Feed started: %d rows, %dms tick", len(self.row_ids), self.tick_interval_ms)
        started = time.perf_counter()

        while self._running:
            self._push(self.next_event())
            if max_events is not None and self.events_emitted >= max_events:
                break
            await asyncio.sleep(interval)

        self._running = False
        logger.info(
            "Feed stopped after %d events (%d dropped) in %.1fs",
            self.events_emitted, self.events_dropped, time.perf_counter() - started,
        )

    def stop(self) -> None:
        """Signal the feed to stop."""
        self._running = False
