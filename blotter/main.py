#!/usr/bin/env python3
"""
Blotter - Live trading blotter in the terminal.

Usage:
    python -m blotter.main --rows 50 --tick-ms 100

Controls:
    up/down - Focus row (or click a row)
    e       - Edit focused row (enter: next field, escape: done)
    escape  - Unfocus row when not editing
    s / r   - Cycle sort column / reverse sort
    /       - Filter by symbol or trader
    q       - Quit
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import random
import sys

from .config import BlotterConfig, configure_logging, load_config, with_overrides

logger = logging.getLogger(__name__)


async def main(config: BlotterConfig) -> None:
    """Main entry point - runs the simulated feed and UI concurrently."""

    # Import here to avoid slow startup for --help
    from .datafeed.feed import SimulatedFeed
    from .datafeed.simulator import random_rows
    from .ui.blotter_view import run_ui
    from .ui.grid import Grid

    rng = random.Random(config.feed.seed)
    grid = Grid(random_rows(config.feed.rows, rng), rng=rng)
    feed = SimulatedFeed(
        grid.row_ids,
        tick_interval_ms=config.feed.tick_interval_ms,
        queue_size=config.feed.queue_size,
        seed=config.feed.seed,
    )

    async def run_feed() -> None:
        try:
            await feed.run()
        except asyncio.CancelledError:
            pass
        except Exception:
            logger.exception("Feed error")

    feed_task = asyncio.create_task(run_feed())

    try:
        # Run UI (blocks until quit)
        await run_ui(grid, feed, config)
    finally:
        feed.stop()
        feed_task.cancel()
        try:
            await feed_task
        except asyncio.CancelledError:
            pass


def build_parser(description: str) -> argparse.ArgumentParser:
    """Arguments shared by the terminal and window entry points."""
    parser = argparse.ArgumentParser(description=description)

    parser.add_argument(
        "--config",
        default=None,
        help="YAML config file (default: built-in defaults)"
    )

    parser.add_argument(
        "--rows",
        type=int,
        default=None,
        help="Number of simulated instruments (default: 50)"
    )

    parser.add_argument(
        "--tick-ms",
        type=int,
        default=None,
        help="Feed interval between market events in ms (default: 100)"
    )

    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for reproducible data"
    )

    return parser


def resolve_config(args: argparse.Namespace) -> BlotterConfig:
    config = load_config(args.config)
    return with_overrides(
        config, rows=args.rows, tick_interval_ms=args.tick_ms, seed=args.seed
    )


def cli() -> None:
    """CLI entry point."""
    parser = build_parser("Blotter - Live trading blotter in the terminal")
    args = parser.parse_args()
    config = resolve_config(args)
    configure_logging(config.logging, stderr=False)

    try:
        asyncio.run(main(config))
    except KeyboardInterrupt:
        print("\nShutdown requested.")
        sys.exit(0)


if __name__ == "__main__":
    cli()
