"""
Blotter TUI using Textual.

Displays:
- Top: status bar (row count, sort, filter, feed rate)
- Middle: one table line per row view, walked cell by cell
- Bottom: edit / filter input, shown only while in use

Performance notes:
- Row views are memoized by the grid; only changed rows are rebuilt
- The table is redrawn on a fixed interval, which also re-samples the fill highlight
"""

from __future__ import annotations

import queue
import time
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from rich.console import RenderableType
from rich.table import Table
from rich.text import Text

from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.message import Message
from textual.widgets import Footer, Input, Static

from ..engine.columns import columns
from .row_view import FOCUS_ON_EDIT_ID, ROW_FOCUSED, SORT_COLUMN, CellNode, InputNode, RowNode

if TYPE_CHECKING:
    from ..config import BlotterConfig
    from ..datafeed.feed import SimulatedFeed
    from .grid import Grid

# Color scheme (dark theme)
NEW_COLOR = "#22c55e"      # Green
FADING_COLOR = "#86efac"   # Pale green
HEADER_COLOR = "#94a3b8"
FOCUS_BG = "#1e293b"
EDIT_BG = "#334155"
EDIT_ACTIVE_BG = "#1e40af"

CLASS_STYLES = {
    SORT_COLUMN: "bold underline",
    "new": f"bold black on {NEW_COLOR}",
    "fading": FADING_COLOR,
}


def render_cell(cell: CellNode, editing_column: str | None = None) -> Text:
    """Render one cell node as Rich Text."""
    content = cell.content
    if isinstance(content, InputNode):
        bg = EDIT_ACTIVE_BG if cell.column == editing_column else EDIT_BG
        text = Text(f" {content.value} ", style=f"white on {bg}")
    else:
        text = Text(content.text)
    for cls in cell.classes:
        style = CLASS_STYLES.get(cls)
        if style:
            text.stylize(style)
    return text


def initial_edit_column(node: RowNode) -> str | None:
    """Column that receives keyboard focus when a row enters edit mode."""
    inputs = [cell for cell in node.cells if isinstance(cell.content, InputNode)]
    for cell in inputs:
        if cell.content.id == FOCUS_ON_EDIT_ID:
            return cell.column
    return inputs[0].column if inputs else None


class BlotterTable(Static):
    """Main blotter grid widget."""

    DEFAULT_CSS = """
    BlotterTable {
        width: 100%;
        height: 100%;
    }
    """

    class RowSelected(Message):
        """A row was clicked and has already been focused."""

        def __init__(self, key: str) -> None:
            super().__init__()
            self.key = key

    def __init__(self) -> None:
        super().__init__()
        self._row_nodes: list[RowNode] = []
        self._sort_column: str | None = None
        self._sort_reverse = False
        self._editing_column: str | None = None

    def update_rows(
        self,
        nodes: list[RowNode],
        sort_column: str | None,
        sort_reverse: bool,
        editing_column: str | None,
    ) -> None:
        self._row_nodes = nodes
        self._sort_column = sort_column
        self._sort_reverse = sort_reverse
        self._editing_column = editing_column
        self.refresh()

    def render(self) -> RenderableType:
        if not self._row_nodes:
            return Text("No rows", style="dim")

        table = Table(
            show_header=True,
            header_style=HEADER_COLOR,
            box=None,
            padding=(0, 1),
            collapse_padding=True,
        )
        for col in columns():
            label = col.name
            if col.name == self._sort_column:
                label += " ▼" if self._sort_reverse else " ▲"
            justify = "left" if col.field_type.name == "string" else "right"
            table.add_column(label, justify=justify, no_wrap=True)

        for node in self._row_nodes:
            style = f"on {FOCUS_BG}" if ROW_FOCUSED in node.classes else None
            table.add_row(
                *(render_cell(cell, self._editing_column) for cell in node.cells),
                style=style,
            )
        return table

    def on_click(self, event: events.Click) -> None:
        index = event.y - 1  # Header line
        if 0 <= index < len(self._row_nodes):
            node = self._row_nodes[index]
            node.on_click()
            self.post_message(self.RowSelected(node.key))


class StatusBar(Static):
    """Status bar showing row count, sort, filter and feed rate."""

    DEFAULT_CSS = """
    StatusBar {
        dock: top;
        height: 3;
        padding: 0 2;
        background: #0f172a;
    }
    """

    def __init__(self) -> None:
        super().__init__()
        self._parts: list[Text] = []

    def update_status(
        self, visible: int, total: int, sort: str | None, pattern: str, events_per_sec: float
    ) -> None:
        self._parts = [
            Text(" BLOTTER ", style="bold white on #1e40af"),
            Text("  Rows: ", style="dim"),
            Text(f"{visible}/{total}", style="cyan"),
            Text("  Sort: ", style="dim"),
            Text(sort or "-", style="yellow"),
            Text("  Filter: ", style="dim"),
            Text(pattern or "-", style="yellow"),
            Text("  │  ", style="dim"),
            Text("Events/s: ", style="dim"),
            Text(f"{events_per_sec:.0f}", style="cyan"),
        ]
        self.refresh()

    def render(self) -> RenderableType:
        if not self._parts:
            return Text("Starting...", style="dim")
        result = Text()
        for p in self._parts:
            result.append(p)
        return result


class BlotterApp(App):
    """Main blotter application."""

    CSS = """
    Screen {
        background: #0f172a;
    }

    #main-container {
        width: 100%;
        height: 1fr;
        padding: 1 2;
    }

    Input {
        dock: bottom;
        display: none;
    }
    """

    # Inputs stay hidden until edit or filter opens them; nothing is focused at start
    AUTO_FOCUS = None

    BINDINGS = [
        ("q", "quit", "Quit"),
        ("down", "move_focus(1)", "Down"),
        ("up", "move_focus(-1)", "Up"),
        ("e", "edit", "Edit"),
        Binding("escape", "stop_edit", "Done", priority=True),
        ("s", "cycle_sort", "Sort"),
        ("r", "reverse_sort", "Reverse"),
        ("slash", "filter", "Filter"),
    ]

    def __init__(self, grid: Grid, feed: SimulatedFeed, config: BlotterConfig) -> None:
        super().__init__()
        self.grid = grid
        self.feed = feed
        self.blotter_config = config
        self._editing_column: str | None = None
        self._table: BlotterTable | None = None
        self._status_bar: StatusBar | None = None

        # Rolling event rate
        self._events_last = 0
        self._rate_calc_time = time.perf_counter()
        self._events_per_sec = 0.0

    def compose(self) -> ComposeResult:
        self._status_bar = StatusBar()
        self._table = BlotterTable()

        yield self._status_bar
        yield Container(self._table, id="main-container")
        yield Input(placeholder="edit value", id="edit-input")
        yield Input(placeholder="filter symbol / trader", id="filter-input")
        yield Footer()

    def on_mount(self) -> None:
        self.set_interval(self.blotter_config.display.refresh_interval_ms / 1000.0, self._tick)
        self.redraw()

    def _tick(self) -> None:
        """Drain feed events, then redraw (re-samples highlight decay)."""
        now = datetime.now(timezone.utc)
        while True:
            try:
                event = self.feed.event_queue.get_nowait()
            except queue.Empty:
                break
            self.grid.apply_event(event, now)

        elapsed = time.perf_counter() - self._rate_calc_time
        if elapsed >= 1.0:
            self._events_per_sec = (self.feed.events_emitted - self._events_last) / elapsed
            self._events_last = self.feed.events_emitted
            self._rate_calc_time = time.perf_counter()

        self.redraw(now)

    def redraw(self, now: datetime | None = None) -> None:
        now = now or datetime.now(timezone.utc)
        nodes = self.grid.visible_views(now)
        if self._table:
            self._table.update_rows(
                nodes, self.grid.sort_column, self.grid.sort_reverse, self._editing_column
            )
        if self._status_bar:
            self._status_bar.update_status(
                len(nodes), len(self.grid.rows), self.grid.sort_column,
                self.grid.pattern, self._events_per_sec,
            )

    def _edit_cell(self) -> CellNode | None:
        if not self.grid.editing or self._editing_column is None:
            return None
        node = self.grid.view(self.grid.focused)
        return next((c for c in node.cells if c.column == self._editing_column), None)

    def _show_edit_value(self) -> None:
        cell = self._edit_cell()
        edit_input = self.query_one("#edit-input", Input)
        if cell is not None and isinstance(cell.content, InputNode):
            edit_input.placeholder = cell.column
            edit_input.value = cell.content.value

    # Actions

    def action_move_focus(self, delta: int) -> None:
        self._close_editor()
        self.grid.move_focus(delta)
        self.redraw()

    def action_edit(self) -> None:
        if not self.grid.start_edit():
            return
        self._editing_column = initial_edit_column(self.grid.view(self.grid.focused))
        edit_input = self.query_one("#edit-input", Input)
        edit_input.display = True
        self._show_edit_value()
        edit_input.focus()
        self.redraw()

    def _close_editor(self) -> None:
        self.grid.stop_edit()
        self._editing_column = None
        edit_input = self.query_one("#edit-input", Input)
        edit_input.display = False
        if self.focused is edit_input:
            self.set_focus(None)

    def action_stop_edit(self) -> None:
        """Escape closes the filter, else leaves edit mode, else unfocuses the row."""
        filter_input = self.query_one("#filter-input", Input)
        if filter_input.display:
            filter_input.display = False
        elif self.grid.editing:
            self._close_editor()
        else:
            self.grid.clear_focus()
        self.set_focus(None)
        self.redraw()

    def action_cycle_sort(self) -> None:
        names = [col.name for col in columns()]
        current = self.grid.sort_column
        nxt = names[0] if current is None else names[(names.index(current) + 1) % len(names)]
        self.grid.set_sort(nxt)
        self.redraw()

    def action_reverse_sort(self) -> None:
        if self.grid.sort_column is not None:
            self.grid.set_sort(self.grid.sort_column)
            self.redraw()

    def action_filter(self) -> None:
        self._close_editor()
        filter_input = self.query_one("#filter-input", Input)
        filter_input.display = True
        filter_input.value = self.grid.pattern
        filter_input.focus()

    # Events

    def on_blotter_table_row_selected(self, message: BlotterTable.RowSelected) -> None:
        self._close_editor()
        self.redraw()

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id == "filter-input":
            self.grid.set_filter(event.value)
        else:
            cell = self._edit_cell()
            if cell is not None and isinstance(cell.content, InputNode):
                cell.content.on_input(event.value)
        self.redraw()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "filter-input":
            event.input.display = False
            self.set_focus(None)
            return
        # Enter moves to the next editable column
        node = self.grid.view(self.grid.focused) if self.grid.editing else None
        if node is None:
            return
        editable = [c.column for c in node.cells if isinstance(c.content, InputNode)]
        if self._editing_column in editable:
            i = (editable.index(self._editing_column) + 1) % len(editable)
            self._editing_column = editable[i]
            self._show_edit_value()
            self.redraw()


async def run_ui(grid: Grid, feed: SimulatedFeed, config: BlotterConfig) -> None:
    """Run the TUI application."""
    app = BlotterApp(grid, feed, config)
    await app.run_async()
