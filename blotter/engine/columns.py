"""
Column registry for blotter rows.

One Column per RowModel field ties together display, parsing (editable fields
only) and sort-key extraction, so the view, the grid's sort and the edit path
never special-case individual fields.

The registry is a hand-written table in declared field order. It is built
lazily on first use and shared read-only by every row.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from functools import cache
from operator import attrgetter
from typing import Any, Callable, Generic, TypeVar

from ..types import RowModel
from .sort_key import SortKey

logger = logging.getLogger(__name__)

R = TypeVar("R")
V = TypeVar("V")


class EditError(ValueError):
    """An edit could not be applied to a row."""


class ParseFailure(EditError):
    """Raw edit input is not a valid value for the column's field type."""

    def __init__(self, column: str, raw: str) -> None:
        super().__init__(f"cannot parse {raw!r} for column {column!r}")
        self.column = column
        self.raw = raw


class UnknownColumn(EditError):
    """Edit targets a column that does not exist or is not editable."""

    def __init__(self, column: str) -> None:
        super().__init__(f"no editable column named {column!r}")
        self.column = column


@dataclass(frozen=True)
class FieldType(Generic[V]):
    """How one native type is displayed, parsed and sorted."""
    name: str
    to_string: Callable[[V], str]
    of_string: Callable[[str], V]  # Raises ValueError on bad input
    sort_by: Callable[[V], SortKey]


def _parse_float(raw: str) -> float:
    value = float(raw)
    if not math.isfinite(value):
        raise ValueError(f"non-finite float: {raw!r}")
    return value


def _format_time(t: datetime) -> str:
    return t.astimezone(timezone.utc).isoformat(sep=" ", timespec="milliseconds")


def _parse_time(raw: str) -> datetime:
    t = datetime.fromisoformat(raw.strip())
    if t.tzinfo is None:
        t = t.replace(tzinfo=timezone.utc)
    return t.astimezone(timezone.utc)


STRING: FieldType[str] = FieldType("string", str, str, SortKey.of_string)
FLOAT: FieldType[float] = FieldType("float", repr, _parse_float, SortKey.of_float)
INT: FieldType[int] = FieldType("int", str, int, lambda v: SortKey.of_float(float(v)))
TIME: FieldType[datetime] = FieldType(
    "time", _format_time, _parse_time, lambda t: SortKey.of_float(t.timestamp())
)


@dataclass(frozen=True)
class Column(Generic[R, V]):
    """Per-field metadata unifying display, sort and edit behavior."""
    name: str
    field_type: FieldType[V]
    getter: Callable[[R], V]
    setter: Callable[[R, V], R] | None = None
    focus_on_edit: bool = False

    def __post_init__(self) -> None:
        if self.focus_on_edit and self.setter is None:
            raise ValueError(f"column {self.name!r} is focus-on-edit but not editable")

    @classmethod
    def of_field(
        cls,
        name: str,
        field_type: FieldType[V],
        *,
        editable: bool = False,
        focus_on_edit: bool = False,
    ) -> Column[RowModel, V]:
        """Build a column reading (and optionally writing) the RowModel field `name`."""
        setter = None
        if editable:
            def setter(row: RowModel, value: V) -> RowModel:
                return row._replace(**{name: value})
        return cls(name, field_type, attrgetter(name), setter, focus_on_edit)

    @property
    def editable(self) -> bool:
        return self.setter is not None

    def get(self, row: R) -> str:
        """Display text for the field's current value."""
        return self.field_type.to_string(self.getter(row))

    def set(self, row: R, raw: str) -> R:
        """
        Parse raw input into the field's type and return an updated row.

        Raises UnknownColumn if the column is not editable, ParseFailure if
        `raw` does not parse. The original row is never modified.
        """
        if self.setter is None:
            raise UnknownColumn(self.name)
        try:
            value = self.field_type.of_string(raw)
        except ValueError as e:
            raise ParseFailure(self.name, raw) from e
        return self.setter(row, value)

    def sort_key(self, row: R) -> SortKey:
        return self.field_type.sort_by(self.getter(row))


def _validate(cols: tuple[Column[RowModel, Any], ...]) -> None:
    names = tuple(col.name for col in cols)
    if names != RowModel._fields:
        raise ValueError(f"column order {names} does not match RowModel fields {RowModel._fields}")
    focus = [col.name for col in cols if col.focus_on_edit]
    if len(focus) > 1:
        raise ValueError(f"more than one focus-on-edit column: {focus}")


@cache
def columns() -> tuple[Column[RowModel, Any], ...]:
    """All columns in declared field order. Built once."""
    cols = (
        Column.of_field("symbol", STRING),
        Column.of_field("edge", FLOAT, editable=True, focus_on_edit=True),
        Column.of_field("max_edge", FLOAT, editable=True),
        Column.of_field("trader", STRING, editable=True),
        Column.of_field("bid_size", INT),
        Column.of_field("bid", FLOAT),
        Column.of_field("ask", FLOAT),
        Column.of_field("ask_size", INT),
        Column.of_field("position", INT),
        Column.of_field("last_fill", TIME),
    )
    _validate(cols)
    return cols


@cache
def _columns_by_name() -> dict[str, Column[RowModel, Any]]:
    return {col.name: col for col in columns()}


def column(name: str) -> Column[RowModel, Any]:
    """Look up a column by name. Raises UnknownColumn."""
    try:
        return _columns_by_name()[name]
    except KeyError:
        raise UnknownColumn(name) from None


def editable_columns() -> tuple[Column[RowModel, Any], ...]:
    return tuple(col for col in columns() if col.editable)


def focus_on_edit_column() -> Column[RowModel, Any] | None:
    return next((col for col in columns() if col.focus_on_edit), None)


def apply_edit(row: RowModel, column_name: str, raw: str) -> RowModel:
    """
    Apply a raw edit to one field.

    Unknown or read-only columns and unparseable input leave the row unchanged.
    Never raises EditError.
    """
    try:
        return column(column_name).set(row, raw)
    except EditError as e:
        logger.debug("Discarding edit on %s: %s", row.symbol, e)
        return row


def matches_filter(row: RowModel, pattern: str) -> bool:
    """Case-insensitive substring match against symbol or trader."""
    pattern = pattern.casefold()
    return pattern in row.symbol.casefold() or pattern in row.trader.casefold()
