#!/usr/bin/env python3
"""
Blotter GUI - Standalone window version.

Usage:
    python -m blotter.gui --rows 100 --tick-ms 50
"""

from __future__ import annotations

import asyncio
import logging
import random
import sys
import threading

from .config import BlotterConfig, configure_logging
from .main import build_parser, resolve_config

logger = logging.getLogger(__name__)


def run_async_feed(feed, loop: asyncio.AbstractEventLoop) -> None:
    """Run the async feed in a separate thread."""
    try:
        logger.info("Starting feed thread")
        asyncio.set_event_loop(loop)
        loop.run_until_complete(feed.run())
    except Exception:
        logger.exception("Error in feed thread")


def main(config: BlotterConfig) -> None:
    """Main entry point - runs the feed in background, GUI in main thread."""

    from .datafeed.feed import SimulatedFeed
    from .datafeed.simulator import random_rows
    from .ui.blotter_window import run_gui
    from .ui.grid import Grid

    print(f"Starting Blotter GUI with {config.feed.rows} rows...")
    print(f"  Tick: {config.feed.tick_interval_ms}ms")
    print()

    rng = random.Random(config.feed.seed)
    grid = Grid(random_rows(config.feed.rows, rng), rng=rng)
    feed = SimulatedFeed(
        grid.row_ids,
        tick_interval_ms=config.feed.tick_interval_ms,
        queue_size=config.feed.queue_size,
        seed=config.feed.seed,
    )

    loop = asyncio.new_event_loop()

    feed_thread = threading.Thread(
        target=run_async_feed,
        args=(feed, loop),
        daemon=True
    )
    feed_thread.start()

    # Run GUI in main thread (required by Qt)
    try:
        run_gui(grid, feed.event_queue, config)
    finally:
        feed.stop()


def cli() -> None:
    """CLI entry point."""
    parser = build_parser("Blotter GUI - Standalone window")
    args = parser.parse_args()
    config = resolve_config(args)
    configure_logging(config.logging)

    try:
        main(config)
    except KeyboardInterrupt:
        print("\nShutdown requested.")
        sys.exit(0)


if __name__ == "__main__":
    cli()
