"""
Fill highlight state machine.

After a fill, the position cell is highlighted "new" for one second, "fading"
for the next second, then not at all. The state is a pure step function of
last_fill and the query time: nothing ticks, nothing needs cancelling. Callers
re-sample whenever last_fill changes or the display refreshes.
"""

from __future__ import annotations

from bisect import bisect_right
from datetime import datetime, timedelta
from enum import Enum
from functools import lru_cache
from typing import Generic, Iterable, TypeVar

T = TypeVar("T")

FADE_AFTER = timedelta(seconds=1.0)
CLEAR_AFTER = timedelta(seconds=2.0)


class Highlight(Enum):
    NEW = "new"
    FADING = "fading"
    NONE = "none"

    @property
    def css_class(self) -> str | None:
        """Class to attach to the highlighted cell, None when not highlighted."""
        return None if self is Highlight.NONE else self.value


class StepFunction(Generic[T]):
    """
    Time -> value mapping defined by an initial value and ascending breakpoints.

    at(t) is the value of the last breakpoint at or before t, or the initial
    value if t precedes every breakpoint.
    """

    __slots__ = ('init', '_times', '_values')

    def __init__(self, init: T, steps: Iterable[tuple[datetime, T]] = ()) -> None:
        self.init = init
        self._times: list[datetime] = []
        self._values: list[T] = []
        for at, value in steps:
            if self._times and at < self._times[-1]:
                raise ValueError("step function breakpoints must be ascending")
            self._times.append(at)
            self._values.append(value)

    def at(self, t: datetime) -> T:
        i = bisect_right(self._times, t)
        return self._values[i - 1] if i else self.init


@lru_cache(maxsize=4096)
def highlight_schedule(last_fill: datetime) -> StepFunction[Highlight]:
    """Highlight schedule for one fill. Cached per last_fill value."""
    return StepFunction(
        Highlight.NEW,
        [
            (last_fill + FADE_AFTER, Highlight.FADING),
            (last_fill + CLEAR_AFTER, Highlight.NONE),
        ],
    )


def highlight_at(last_fill: datetime, now: datetime) -> Highlight:
    return highlight_schedule(last_fill).at(now)
