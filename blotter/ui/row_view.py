"""
Row view: one RowModel + its Mode -> a tree of attributed nodes.

The tree is renderer-agnostic. The Textual app and the Qt window both walk it:
- TextNode cells are static text
- InputNode cells are editable; on_input commits every change via remember_edit
- classes carry the visual markers (focused row, sort column, fill highlight)

The view never changes a row's mode. Clicking a row only calls focus_me.
"""

from __future__ import annotations

from datetime import datetime
from typing import Callable, NamedTuple

from ..engine.columns import Column, columns
from ..engine.highlight import highlight_at
from ..types import Mode, RowModel

FOCUS_ON_EDIT_ID = "focus-on-edit"
ROW_FOCUSED = "row-focused"
SORT_COLUMN = "sort-column"
HIGHLIGHT_COLUMN = "position"

RememberEdit = Callable[[str, str], None]


class TextNode(NamedTuple):
    text: str


class InputNode(NamedTuple):
    value: str
    id: str | None
    on_input: Callable[[str], None]


class CellNode(NamedTuple):
    column: str
    classes: tuple[str, ...]
    content: TextNode | InputNode


class RowNode(NamedTuple):
    key: str  # Also the element id
    classes: tuple[str, ...]
    cells: tuple[CellNode, ...]
    on_click: Callable[[], None]


def editable_cell(m: RowModel, col: Column, remember_edit: RememberEdit) -> InputNode:
    def on_input(value: str) -> None:
        remember_edit(col.name, value)

    return InputNode(
        value=col.get(m),
        id=FOCUS_ON_EDIT_ID if col.focus_on_edit else None,
        on_input=on_input,
    )


def column_cell(
    m: RowModel, col: Column, *, editing: bool, remember_edit: RememberEdit
) -> TextNode | InputNode:
    if editing and col.editable:
        return editable_cell(m, col, remember_edit)
    return TextNode(col.get(m))


def view(
    m: RowModel,
    *,
    row_id: str,
    mode: Mode,
    sort_column: str | None,
    focus_me: Callable[[], None],
    remember_edit: RememberEdit,
    now: datetime,
) -> RowNode:
    """Render one row. `now` is the time the highlight is sampled at."""
    highlight = highlight_at(m.last_fill, now).css_class
    editing = mode is Mode.EDITING
    focused = mode is not Mode.UNFOCUSED

    cells = []
    for col in columns():
        classes: list[str] = []
        if col.name == sort_column and not focused:
            classes.append(SORT_COLUMN)
        if col.name == HIGHLIGHT_COLUMN and highlight is not None:
            classes.append(highlight)
        cells.append(CellNode(
            column=col.name,
            classes=tuple(classes),
            content=column_cell(m, col, editing=editing, remember_edit=remember_edit),
        ))

    return RowNode(
        key=f"row-{row_id}",
        classes=(ROW_FOCUSED,) if focused else (),
        cells=tuple(cells),
        on_click=focus_me,
    )
