"""
Simulated market data for the blotter.

Random rows plus the two perturbations the feed applies to them:
- KICK_PRICE: small random walk of the bid, spread preserved, bid floored at 10.0
- KICK_FILL_TIME: random signed position change, last_fill set to now

All functions are pure given the rng: they return a new RowModel.
"""

from __future__ import annotations

import random
import string
from datetime import datetime, timezone

from ..types import Action, RowModel

BID_FLOOR = 10.0
TRADERS = ("hsimmons", "bkent", "qhayes", "gfernandez")


def _now() -> datetime:
    return datetime.now(timezone.utc)


def kick_price(m: RowModel, rng: random.Random) -> RowModel:
    """Move the bid by -0.02..+0.02, keeping the spread."""
    move = (rng.randint(0, 4) - 2) / 100.0
    spread = m.ask - m.bid
    bid = max(BID_FLOOR, m.bid + move)
    return m._replace(bid=bid, ask=bid + spread)


def kick_fill_time(m: RowModel, rng: random.Random, now: datetime | None = None) -> RowModel:
    """Simulate a fill: position moves by a random signed amount."""
    delta = rng.randrange(200)
    position = m.position + delta if rng.random() < 0.5 else m.position - delta
    return m._replace(position=position, last_fill=now or _now())


def apply_action(
    action: Action,
    m: RowModel,
    rng: random.Random | None = None,
    now: datetime | None = None,
) -> RowModel:
    rng = rng or random.Random()
    if action is Action.KICK_PRICE:
        return kick_price(m, rng)
    if action is Action.KICK_FILL_TIME:
        return kick_fill_time(m, rng, now)
    raise ValueError(f"unknown action: {action!r}")


def random_stock(rng: random.Random, now: datetime | None = None) -> RowModel:
    """Generate one plausible instrument row."""
    symbol = "".join(rng.choice(string.ascii_uppercase) for _ in range(4))
    fair = 10.0 + rng.randrange(10000) / 100.0
    bid_size = (1 + rng.randrange(20)) * 100
    ask_size = max(100, bid_size + 100 * (rng.randrange(5) - 2))
    bid = fair - rng.randrange(20) / 100.0
    ask = fair + rng.randrange(20) / 100.0
    edge = rng.randrange(10) / 100.0
    max_edge = edge + rng.randrange(10) / 100.0
    position = rng.randrange(500) * 100

    return RowModel(
        symbol=symbol,
        edge=edge,
        max_edge=max_edge,
        trader=rng.choice(TRADERS),
        bid_size=bid_size,
        bid=bid,
        ask=ask,
        ask_size=ask_size,
        position=position,
        last_fill=now or _now(),
    )


def random_rows(
    n: int,
    rng: random.Random | None = None,
    now: datetime | None = None,
) -> list[RowModel]:
    rng = rng or random.Random()
    now = now or _now()
    return [random_stock(rng, now) for _ in range(n)]
