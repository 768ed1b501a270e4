"""Tests for blotter/ui/blotter_view.py: Rich cell rendering and the Textual app"""

import asyncio

from textual.widgets import Input

from blotter.config import BlotterConfig
from blotter.datafeed.feed import SimulatedFeed
from blotter.types import Mode
from blotter.ui.blotter_view import (
    CLASS_STYLES,
    BlotterApp,
    BlotterTable,
    initial_edit_column,
    render_cell,
)
from blotter.ui.grid import Grid
from blotter.ui.row_view import SORT_COLUMN, CellNode, InputNode, TextNode, view


def _noop(*args):
    pass


def _view(row, now, mode):
    return view(
        row, row_id="0", mode=mode, sort_column=None,
        focus_me=_noop, remember_edit=_noop, now=now,
    )


def test_text_cell_plain():
    text = render_cell(CellNode("symbol", (), TextNode("ABCD")))
    assert text.plain == "ABCD"
    assert not text.spans


def test_class_styles_applied():
    text = render_cell(CellNode("position", (SORT_COLUMN, "new"), TextNode("100")))
    styles = [str(span.style) for span in text.spans]
    assert styles == [CLASS_STYLES[SORT_COLUMN], CLASS_STYLES["new"]]


def test_input_cell_padded():
    cell = CellNode("edge", (), InputNode("0.03", None, _noop))
    assert render_cell(cell).plain == " 0.03 "


def test_active_input_cell_differs():
    cell = CellNode("edge", (), InputNode("0.03", None, _noop))
    assert render_cell(cell, "edge").style != render_cell(cell, "trader").style


def test_initial_edit_column_uses_focus_marker(row, now):
    assert initial_edit_column(_view(row, now, Mode.EDITING)) == "edge"


def test_initial_edit_column_none_when_not_editing(row, now):
    assert initial_edit_column(_view(row, now, Mode.FOCUSED)) is None


# App behaviour, driven headless through Textual's pilot


def _run_app(grid, scenario):
    """Run `scenario(app, pilot)` against a BlotterApp over `grid` with an idle feed."""
    feed = SimulatedFeed(grid.row_ids, seed=1)
    app = BlotterApp(grid, feed, BlotterConfig())

    async def main():
        async with app.run_test(size=(160, 40)) as pilot:
            await pilot.pause()
            await scenario(app, pilot)

    asyncio.run(main())


def test_app_starts_with_rows_and_no_focus(rows, rng):
    grid = Grid(rows, rng=rng)

    async def scenario(app, pilot):
        assert app.focused is None
        assert len(app.query_one(BlotterTable)._row_nodes) == 4
        assert not app.query_one("#edit-input", Input).display

    _run_app(grid, scenario)


def test_arrow_keys_focus_rows(rows, rng):
    grid = Grid(rows, rng=rng)

    async def scenario(app, pilot):
        await pilot.press("down")
        assert grid.focused == "0"
        await pilot.press("down", "down")
        assert grid.focused == "2"
        await pilot.press("up")
        assert grid.focused == "1"
        assert grid.modes["1"] is Mode.FOCUSED

    _run_app(grid, scenario)


def test_click_focuses_row(rows, rng):
    grid = Grid(rows, rng=rng)

    async def scenario(app, pilot):
        # First line is the header
        await pilot.click(BlotterTable, offset=(2, 3))
        await pilot.pause()
        assert grid.focused == grid.visible_ids()[2]

    _run_app(grid, scenario)


def test_edit_commits_typed_values(rows, rng):
    """Typing into the editor folds each change into the row through remember_edit."""
    grid = Grid(rows, rng=rng)

    async def scenario(app, pilot):
        await pilot.press("down", "e")
        edit_input = app.query_one("#edit-input", Input)
        assert grid.modes["0"] is Mode.EDITING
        assert app.focused is edit_input
        assert edit_input.value == "0.03"

        edit_input.value = "0.07"
        await pilot.pause()
        assert grid.rows["0"].edge == 0.07

        await pilot.press("enter", "enter")
        assert app._editing_column == "trader"
        edit_input.value = ""
        await pilot.pause()
        await pilot.press("z", "e", "d")
        await pilot.pause()
        assert grid.rows["0"].trader == "zed"
        assert grid.modes["0"] is Mode.EDITING

    _run_app(grid, scenario)


def test_enter_moves_to_next_editable_column(rows, rng):
    grid = Grid(rows, rng=rng)

    async def scenario(app, pilot):
        await pilot.press("down", "e")
        assert app._editing_column == "edge"
        await pilot.press("enter")
        assert app._editing_column == "max_edge"
        assert app.query_one("#edit-input", Input).value == "0.08"
        await pilot.press("enter", "enter")
        assert app._editing_column == "edge"

    _run_app(grid, scenario)


def test_escape_leaves_edit_then_unfocuses(rows, rng):
    grid = Grid(rows, rng=rng)

    async def scenario(app, pilot):
        await pilot.press("down", "e")
        await pilot.press("escape")
        assert grid.modes["0"] is Mode.FOCUSED
        assert not app.query_one("#edit-input", Input).display
        assert app.focused is None

        await pilot.press("escape")
        assert grid.focused is None
        assert grid.modes["0"] is Mode.UNFOCUSED

    _run_app(grid, scenario)


def test_slash_filters_rows(rows, rng):
    grid = Grid(rows, rng=rng)

    async def scenario(app, pilot):
        await pilot.press("slash", "k", "e", "n", "t")
        await pilot.pause()
        assert grid.pattern == "kent"
        assert grid.visible_ids() == ["1"]
        assert len(app.query_one(BlotterTable)._row_nodes) == 1

        await pilot.press("enter")
        assert not app.query_one("#filter-input", Input).display
        assert app.focused is None

    _run_app(grid, scenario)


def test_s_cycles_sort_column(rows, rng):
    grid = Grid(rows, rng=rng)

    async def scenario(app, pilot):
        await pilot.press("s")
        assert grid.sort_column == "symbol"
        await pilot.press("s")
        assert grid.sort_column == "edge"
        await pilot.press("r")
        assert grid.sort_reverse

    _run_app(grid, scenario)
