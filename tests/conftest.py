"""Shared test fixtures."""

import random
from datetime import datetime, timezone

import pytest

from blotter.types import RowModel


@pytest.fixture
def now() -> datetime:
    """A fixed wall-clock time."""
    return datetime(2024, 3, 1, 14, 30, 0, tzinfo=timezone.utc)


@pytest.fixture
def row(now: datetime) -> RowModel:
    """A single instrument row filled at `now`."""
    return RowModel(
        symbol="ABCD",
        edge=0.03,
        max_edge=0.08,
        trader="hsimmons",
        bid_size=500,
        bid=52.10,
        ask=52.25,
        ask_size=700,
        position=-1200,
        last_fill=now,
    )


@pytest.fixture
def rows(row: RowModel) -> list[RowModel]:
    """A few rows with distinct values in every sortable field."""
    return [
        row,
        row._replace(symbol="WXYZ", trader="bkent", bid=11.5, ask=11.6, position=300, bid_size=100),
        row._replace(symbol="MNOP", trader="qhayes", bid=99.0, ask=99.2, position=0, bid_size=2000),
        row._replace(symbol="abcd", trader="gfernandez", bid=52.1, ask=52.3, position=-5, bid_size=500),
    ]


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)
