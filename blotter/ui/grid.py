"""
Grid state shared by the terminal app and the Qt window.

The grid is the sole owner of each row's model and mode:
- mode transitions (focus, edit) happen here, never in the row view
- edit commits from the view are folded in through apply_edit
- feed events are folded in through apply_action

Row views are memoized per row on (model, mode, sort column, highlight), so a
refresh only rebuilds the rows whose inputs changed.
"""

from __future__ import annotations

import logging
import random
from datetime import datetime, timezone
from functools import cmp_to_key, partial
from typing import Iterable

from ..datafeed.simulator import apply_action
from ..engine.columns import apply_edit, column, matches_filter
from ..engine.highlight import Highlight, highlight_at
from ..engine.sort_key import column_comparator
from ..types import FeedEvent, Mode, RowModel
from .row_view import RowNode, view

logger = logging.getLogger(__name__)


class Grid:
    """
    Rows keyed by id ("0", "1", ...) in insertion order.

    Thread-safety: NOT thread-safe. All calls come from the UI thread.
    """

    def __init__(self, rows: Iterable[RowModel], *, rng: random.Random | None = None) -> None:
        self.rows: dict[str, RowModel] = {str(i): row for i, row in enumerate(rows)}
        self.modes: dict[str, Mode] = {row_id: Mode.UNFOCUSED for row_id in self.rows}
        self.focused: str | None = None
        self.sort_column: str | None = None
        self.sort_reverse: bool = False
        self.pattern: str = ""
        self._rng = rng or random.Random()

        # row_id -> (inputs, node)
        self._views: dict[str, tuple[tuple[RowModel, Mode, str | None, Highlight], RowNode]] = {}
        self.views_built: int = 0

    @property
    def row_ids(self) -> list[str]:
        return list(self.rows)

    @property
    def editing(self) -> bool:
        return self.focused is not None and self.modes[self.focused] is Mode.EDITING

    # Mode transitions

    def focus(self, row_id: str) -> None:
        if row_id not in self.rows:
            raise KeyError(row_id)
        if self.focused == row_id:
            return
        if self.focused is not None:
            self.modes[self.focused] = Mode.UNFOCUSED
        self.focused = row_id
        self.modes[row_id] = Mode.FOCUSED

    def clear_focus(self) -> None:
        if self.focused is not None:
            self.modes[self.focused] = Mode.UNFOCUSED
            self.focused = None

    def move_focus(self, delta: int) -> str | None:
        """Move focus up/down among visible rows. Returns the newly focused id."""
        ids = self.visible_ids()
        if not ids:
            return None
        if self.focused in ids:
            i = max(0, min(len(ids) - 1, ids.index(self.focused) + delta))
        else:
            i = 0 if delta >= 0 else len(ids) - 1
        self.stop_edit()
        self.focus(ids[i])
        return ids[i]

    def start_edit(self) -> bool:
        """Put the focused row into edit mode. False if nothing is focused."""
        if self.focused is None:
            return False
        self.modes[self.focused] = Mode.EDITING
        return True

    def stop_edit(self) -> None:
        if self.editing:
            self.modes[self.focused] = Mode.FOCUSED

    # Model updates

    def remember_edit(self, row_id: str, column_name: str, raw: str) -> None:
        row = self.rows.get(row_id)
        if row is None:
            logger.warning("Edit for unknown row %s ignored", row_id)
            return
        self.rows[row_id] = apply_edit(row, column_name, raw)

    def apply_event(self, event: FeedEvent, now: datetime | None = None) -> None:
        row = self.rows.get(event.row_id)
        if row is None:
            logger.warning("Feed event for unknown row %s ignored", event.row_id)
            return
        self.rows[event.row_id] = apply_action(event.action, row, self._rng, now)

    # Sorting and filtering

    def set_sort(self, column_name: str) -> None:
        """Sort by a column. Selecting the current sort column flips direction."""
        column(column_name)  # Raises UnknownColumn
        if self.sort_column == column_name:
            self.sort_reverse = not self.sort_reverse
        else:
            self.sort_column = column_name
            self.sort_reverse = False

    def set_filter(self, pattern: str) -> None:
        self.pattern = pattern

    def visible_ids(self) -> list[str]:
        ids = [row_id for row_id, row in self.rows.items() if matches_filter(row, self.pattern)]
        if self.sort_column is not None:
            cmp = column_comparator(column(self.sort_column))
            ids.sort(
                key=cmp_to_key(lambda a, b: cmp(self.rows[a], self.rows[b])),
                reverse=self.sort_reverse,
            )
        return ids

    # Views

    def view(self, row_id: str, now: datetime | None = None) -> RowNode:
        now = now or datetime.now(timezone.utc)
        m = self.rows[row_id]
        mode = self.modes[row_id]
        inputs = (m, mode, self.sort_column, highlight_at(m.last_fill, now))

        cached = self._views.get(row_id)
        if cached is not None and cached[0] == inputs:
            return cached[1]

        node = view(
            m,
            row_id=row_id,
            mode=mode,
            sort_column=self.sort_column,
            focus_me=partial(self.focus, row_id),
            remember_edit=partial(self.remember_edit, row_id),
            now=now,
        )
        self._views[row_id] = (inputs, node)
        self.views_built += 1
        return node

    def visible_views(self, now: datetime | None = None) -> list[RowNode]:
        now = now or datetime.now(timezone.utc)
        return [self.view(row_id, now) for row_id in self.visible_ids()]
