"""Tests for blotter/datafeed/simulator.py"""

import random
from datetime import timedelta

import pytest

from blotter.datafeed.simulator import (
    BID_FLOOR,
    TRADERS,
    apply_action,
    kick_fill_time,
    kick_price,
    random_rows,
    random_stock,
)
from blotter.types import Action


def test_kick_price_preserves_spread(row, rng):
    for _ in range(100):
        kicked = kick_price(row, rng)
        assert kicked.ask - kicked.bid == pytest.approx(row.ask - row.bid)
        assert abs(kicked.bid - row.bid) <= 0.02 + 1e-9
        row = kicked


def test_kick_price_floors_bid(row, rng):
    low = row._replace(bid=10.0, ask=10.05)
    for _ in range(100):
        low = kick_price(low, rng)
        assert low.bid >= BID_FLOOR


def test_kick_price_touches_only_quotes(row, rng):
    kicked = kick_price(row, rng)
    assert kicked._replace(bid=row.bid, ask=row.ask) == row


def test_kick_fill_time(row, rng, now):
    later = now + timedelta(seconds=5)
    for _ in range(100):
        kicked = kick_fill_time(row, rng, later)
        assert -200 <= kicked.position - row.position <= 200
        assert kicked.last_fill == later
        assert kicked._replace(position=row.position, last_fill=row.last_fill) == row


def test_kick_fill_time_defaults_to_now(row, rng):
    kicked = kick_fill_time(row, rng)
    assert kicked.last_fill > row.last_fill


def test_apply_action_dispatches(row, rng, now):
    assert apply_action(Action.KICK_FILL_TIME, row, rng, now + timedelta(1)).last_fill == now + timedelta(1)
    kicked = apply_action(Action.KICK_PRICE, row, rng)
    assert kicked.last_fill == row.last_fill


def test_apply_action_is_pure(row, rng):
    before = tuple(row)
    apply_action(Action.KICK_PRICE, row, rng)
    apply_action(Action.KICK_FILL_TIME, row, rng)
    assert tuple(row) == before


def test_random_stock_shape(now):
    rng = random.Random(7)
    for _ in range(200):
        s = random_stock(rng, now)
        assert len(s.symbol) == 4 and s.symbol.isupper()
        assert s.trader in TRADERS
        assert s.bid_size % 100 == 0 and 100 <= s.bid_size <= 2000
        assert s.ask_size >= 100
        assert s.bid <= s.ask
        assert 0.0 <= s.edge <= s.max_edge
        assert s.position % 100 == 0
        assert s.last_fill == now


def test_random_rows_reproducible(now):
    assert random_rows(5, random.Random(3), now) == random_rows(5, random.Random(3), now)
    assert len(random_rows(12, random.Random(3), now)) == 12
