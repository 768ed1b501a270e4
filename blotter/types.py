"""
Data types for the blotter.

Performance notes:
- Using NamedTuple for immutable, memory-efficient structures
- A RowModel is never mutated; every edit or kick produces a new value via _replace()
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import NamedTuple


class RowModel(NamedTuple):
    """One instrument's market data. This is what a single blotter row renders."""
    symbol: str
    edge: float
    max_edge: float
    trader: str
    bid_size: int
    bid: float
    ask: float
    ask_size: int
    position: int         # Signed
    last_fill: datetime   # tz-aware UTC


class Mode(Enum):
    """Interaction state of a row. Owned by the grid, never by the row itself."""
    UNFOCUSED = "unfocused"
    FOCUSED = "focused"
    EDITING = "editing"


class Action(Enum):
    """Simulated market events."""
    KICK_PRICE = "kick_price"
    KICK_FILL_TIME = "kick_fill_time"


class FeedEvent(NamedTuple):
    """Single action targeted at one row, pushed by the feed."""
    row_id: str
    action: Action
