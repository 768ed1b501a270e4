"""
Blotter GUI using PyQt6 - pops out as a standalone window.

- One QTableWidget row per row view, cells re-used between frames
- Click a row to focus it, double-click (or F2) to edit, Escape to finish
- Click a header to sort by that column, again to reverse
"""

from __future__ import annotations

import queue
import sys
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from PyQt6.QtCore import Qt, QTimer
from PyQt6.QtGui import QColor, QFont, QKeySequence, QShortcut
from PyQt6.QtWidgets import (
    QAbstractItemView, QApplication, QHeaderView, QLabel, QMainWindow,
    QTableWidget, QTableWidgetItem, QVBoxLayout, QWidget,
)

from ..engine.columns import columns
from .row_view import FOCUS_ON_EDIT_ID, ROW_FOCUSED, SORT_COLUMN, InputNode, RowNode

if TYPE_CHECKING:
    from ..config import BlotterConfig
    from ..types import FeedEvent
    from .grid import Grid

# Colors
NEW_COLOR = QColor(34, 197, 94)       # Green
FADING_COLOR = QColor(134, 239, 172)  # Pale green
BG_COLOR = QColor(15, 23, 42)         # Dark blue-gray
HEADER_BG = QColor(30, 41, 59)
FOCUS_BG = QColor(30, 41, 59)
EDIT_BG = QColor(51, 65, 85)
TEXT_COLOR = QColor(248, 250, 252)


class BlotterWindow(QMainWindow):
    """Main blotter window."""

    def __init__(self, grid: Grid, event_queue: queue.Queue[FeedEvent], config: BlotterConfig) -> None:
        super().__init__()
        self.grid = grid
        self.event_queue = event_queue
        self.blotter_config = config
        self._nodes: list[RowNode] = []
        self._table_items: list[list[QTableWidgetItem]] = []  # Cache table items
        self._columns = columns()

        self.setWindowTitle("Blotter")
        self.setMinimumSize(1000, 600)
        self.setStyleSheet(f"background-color: {BG_COLOR.name()}; color: {TEXT_COLOR.name()};")

        self._setup_ui()
        self._setup_timer()

    def _setup_ui(self) -> None:
        central = QWidget()
        self.setCentralWidget(central)
        layout = QVBoxLayout(central)
        layout.setContentsMargins(10, 10, 10, 10)

        self.header = QLabel("Starting...")
        self.header.setFont(QFont("Consolas", 14, QFont.Weight.Bold))
        self.header.setStyleSheet(f"background-color: {HEADER_BG.name()}; padding: 10px;")
        layout.addWidget(self.header)

        self.table = QTableWidget()
        self.table.setColumnCount(len(self._columns))
        self.table.setHorizontalHeaderLabels([col.name for col in self._columns])
        self.table.horizontalHeader().setSectionResizeMode(QHeaderView.ResizeMode.Stretch)
        self.table.verticalHeader().setVisible(False)
        self.table.setShowGrid(False)
        self.table.setEditTriggers(QAbstractItemView.EditTrigger.NoEditTriggers)
        self.table.setStyleSheet(f"""
            QTableWidget {{
                background-color: {BG_COLOR.name()};
                font-family: Consolas;
                font-size: 12px;
            }}
            QHeaderView::section {{
                background-color: {HEADER_BG.name()};
                color: {TEXT_COLOR.name()};
                padding: 5px;
                border: none;
            }}
        """)
        self.table.cellClicked.connect(self._on_cell_clicked)
        self.table.cellDoubleClicked.connect(self._on_cell_double_clicked)
        self.table.itemChanged.connect(self._on_item_changed)
        self.table.horizontalHeader().sectionClicked.connect(self._on_header_clicked)
        layout.addWidget(self.table)

        QShortcut(QKeySequence("F2"), self, activated=self._start_edit)
        QShortcut(QKeySequence("Escape"), self, activated=self._stop_edit)

    def _setup_timer(self) -> None:
        """Poll the feed queue and re-sample the highlight on a timer."""
        self.timer = QTimer()
        self.timer.timeout.connect(self._poll_events)
        self.timer.start(self.blotter_config.display.refresh_interval_ms)

    def _poll_events(self) -> None:
        now = datetime.now(timezone.utc)
        while True:
            try:
                self.grid.apply_event(self.event_queue.get_nowait(), now)
            except queue.Empty:
                break

        # Don't rebuild items under an open editor
        if self.table.state() != QAbstractItemView.State.EditingState:
            self._update_display(now)

    def _update_display(self, now: datetime | None = None) -> None:
        self._nodes = self.grid.visible_views(now)
        n_rows = len(self._nodes)

        sort = self.grid.sort_column or "-"
        if self.grid.sort_column and self.grid.sort_reverse:
            sort += " (desc)"
        self.header.setText(
            f"  Rows: {n_rows}/{len(self.grid.rows)}  │  Sort: {sort}  │  "
            f"Filter: {self.grid.pattern or '-'}"
        )

        if len(self._table_items) != n_rows:
            self._init_table_items(n_rows)

        # Block signals during bulk update so itemChanged doesn't fire edits
        self.table.blockSignals(True)

        for row, node in enumerate(self._nodes):
            focused = ROW_FOCUSED in node.classes
            for col, cell in enumerate(node.cells):
                item = self._table_items[row][col]
                content = cell.content
                editable = isinstance(content, InputNode)

                item.setText(content.value if editable else content.text)
                flags = item.flags() | Qt.ItemFlag.ItemIsEditable
                item.setFlags(flags if editable else flags & ~Qt.ItemFlag.ItemIsEditable)

                if editable:
                    item.setBackground(EDIT_BG)
                elif focused:
                    item.setBackground(FOCUS_BG)
                else:
                    item.setBackground(BG_COLOR)

                if "new" in cell.classes:
                    item.setForeground(NEW_COLOR)
                elif "fading" in cell.classes:
                    item.setForeground(FADING_COLOR)
                else:
                    item.setForeground(TEXT_COLOR)

                font = item.font()
                font.setBold(SORT_COLUMN in cell.classes)
                item.setFont(font)

        self.table.blockSignals(False)
        self.table.viewport().update()

    def _init_table_items(self, n_rows: int) -> None:
        """Initialize table with reusable items."""
        self.table.setRowCount(n_rows)
        self._table_items = []

        for row in range(n_rows):
            row_items = []
            for col, column in enumerate(self._columns):
                item = QTableWidgetItem("")
                if column.field_type.name != "string":
                    item.setTextAlignment(Qt.AlignmentFlag.AlignRight | Qt.AlignmentFlag.AlignVCenter)
                self.table.setItem(row, col, item)
                row_items.append(item)
            self._table_items.append(row_items)

    # Input

    def _on_cell_clicked(self, row: int, col: int) -> None:
        if 0 <= row < len(self._nodes) and self._nodes[row].key != f"row-{self.grid.focused}":
            self.grid.stop_edit()
            self._nodes[row].on_click()
            self._update_display()

    def _on_cell_double_clicked(self, row: int, col: int) -> None:
        self._on_cell_clicked(row, col)
        self._start_edit(col)

    def _start_edit(self, col: int | None = None) -> None:
        if not self.grid.start_edit():
            return
        self._update_display()
        row = next(
            (i for i, n in enumerate(self._nodes) if n.key == f"row-{self.grid.focused}"), None
        )
        if row is None:
            # Focused row is filtered out; there is no cell to edit
            self._stop_edit()
            return
        cells = self._nodes[row].cells
        if col is None or not isinstance(cells[col].content, InputNode):
            col = next(
                (i for i, c in enumerate(cells)
                 if isinstance(c.content, InputNode) and c.content.id == FOCUS_ON_EDIT_ID),
                None,
            )
        if col is not None:
            self.table.editItem(self._table_items[row][col])

    def _stop_edit(self) -> None:
        self.grid.stop_edit()
        self._update_display()

    def _on_item_changed(self, item: QTableWidgetItem) -> None:
        row, col = item.row(), item.column()
        if not 0 <= row < len(self._nodes):
            return
        content = self._nodes[row].cells[col].content
        if isinstance(content, InputNode):
            content.on_input(item.text())
            self._update_display()

    def _on_header_clicked(self, col: int) -> None:
        self.grid.set_sort(self._columns[col].name)
        self._update_display()


def run_gui(grid: Grid, event_queue: queue.Queue[FeedEvent], config: BlotterConfig) -> None:
    """Run the GUI application (blocking)."""
    app = QApplication(sys.argv)
    app.setStyle("Fusion")

    window = BlotterWindow(grid, event_queue, config)
    window.show()

    app.exec()
