#!/usr/bin/env python3
"""
Micro-benchmark for blotter performance.

Tests:
1. Action application throughput (kicks)
2. Sorting rows by each column kind
3. Filtering rows by pattern
4. Full frame: visible row views, cold vs memoized

Usage:
    python -m blotter.benchmark
"""

from __future__ import annotations

import random
import time
from datetime import datetime, timedelta, timezone
from statistics import mean, stdev

from .datafeed.simulator import apply_action, random_rows
from .engine.columns import column, matches_filter
from .engine.sort_key import sort_rows
from .types import Action, FeedEvent
from .ui.grid import Grid


def benchmark_actions(iterations: int = 100000) -> None:
    """Benchmark kick throughput."""
    print("\n=== Action Application Benchmark ===")

    rng = random.Random(1)
    row = random_rows(1, rng)[0]
    actions = [rng.choice(list(Action)) for _ in range(iterations)]
    now = datetime.now(timezone.utc)

    start = time.perf_counter()
    for a in actions:
        row = apply_action(a, row, rng, now)
    elapsed = time.perf_counter() - start

    print(f"  Actions applied: {iterations:,}")
    print(f"  Time: {elapsed*1000:.1f}ms")
    print(f"  Rate: {iterations / elapsed:,.0f} actions/sec")
    print(f"  Per action: {elapsed/iterations*1_000_000:.2f}µs")


def benchmark_sort(n_rows: int = 1000, iterations: int = 100) -> None:
    """Benchmark sorting by a string, a float and an int column."""
    print("\n=== Sort Benchmark ===")

    rows = random_rows(n_rows, random.Random(2))
    for name in ("symbol", "bid", "position"):
        col = column(name)
        times = []
        for _ in range(iterations):
            start = time.perf_counter()
            sort_rows(rows, col)
            times.append(time.perf_counter() - start)
        print(f"  {name:<10} {n_rows} rows: avg {mean(times)*1000:.3f}ms "
              f"(std {stdev(times)*1000:.3f}ms)")


def benchmark_filter(n_rows: int = 1000, iterations: int = 1000) -> None:
    """Benchmark pattern filtering."""
    print("\n=== Filter Benchmark ===")

    rows = random_rows(n_rows, random.Random(3))
    start = time.perf_counter()
    for _ in range(iterations):
        [r for r in rows if matches_filter(r, "ab")]
    elapsed = time.perf_counter() - start

    print(f"  Rows filtered: {n_rows * iterations:,}")
    print(f"  Per row: {elapsed/(n_rows * iterations)*1_000_000:.3f}µs")


def benchmark_frame(n_rows: int = 1000, iterations: int = 200) -> None:
    """Benchmark a full frame (what the UI needs) with a trickle of feed events."""
    print("\n=== Full Frame Benchmark ===")

    rng = random.Random(4)
    start_time = datetime.now(timezone.utc)
    grid = Grid(random_rows(n_rows, rng, start_time - timedelta(seconds=10)), rng=rng)
    grid.set_sort("bid")

    # Cold frame
    start = time.perf_counter()
    grid.visible_views(start_time)
    cold = time.perf_counter() - start

    times = []
    for i in range(iterations):
        now = start_time + timedelta(milliseconds=16 * i)
        for _ in range(5):
            grid.apply_event(FeedEvent(rng.choice(grid.row_ids), Action.KICK_PRICE), now)
        start = time.perf_counter()
        grid.visible_views(now)
        times.append(time.perf_counter() - start)

    avg_time = mean(times) * 1000
    print(f"  Rows: {n_rows}")
    print(f"  Cold frame: {cold*1000:.3f}ms")
    print(f"  Warm frame avg: {avg_time:.3f}ms (std {stdev(times)*1000:.3f}ms)")
    print(f"  Views built: {grid.views_built:,}")
    print(f"  Max FPS possible: {1000/avg_time:,.0f}")


def main() -> None:
    """Run all benchmarks."""
    print("=" * 60)
    print("Blotter Performance Benchmark")
    print("=" * 60)

    benchmark_actions()
    benchmark_sort()
    benchmark_filter()
    benchmark_frame()

    print("\n" + "=" * 60)
    print("Benchmark complete.")
    print("=" * 60)


if __name__ == "__main__":
    main()
