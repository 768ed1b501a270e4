"""
Sort keys for heterogeneous columns.

Every column maps its field to a SortKey so the grid can build one comparator
shape for all columns. A column always produces the same kind of key; comparing
keys of different kinds is a programming error.
"""

from __future__ import annotations

from enum import Enum
from functools import cmp_to_key
from typing import TYPE_CHECKING, Any, Callable, Iterable, NamedTuple, TypeVar

if TYPE_CHECKING:
    from .columns import Column

R = TypeVar("R")


class SortKind(Enum):
    STRING = "string"
    FLOAT = "float"


class SortKey(NamedTuple):
    """Comparable value extracted from a field, tagged by its underlying type."""
    kind: SortKind
    value: str | float

    @classmethod
    def of_string(cls, value: str) -> SortKey:
        return cls(SortKind.STRING, value)

    @classmethod
    def of_float(cls, value: float) -> SortKey:
        return cls(SortKind.FLOAT, float(value))


def compare(a: SortKey, b: SortKey) -> int:
    """Three-way compare. Returns -1, 0 or 1."""
    if a.kind is not b.kind:
        raise TypeError(f"cannot compare {a.kind.value} key with {b.kind.value} key")
    if a.value < b.value:
        return -1
    if a.value > b.value:
        return 1
    return 0


def column_comparator(column: Column[R, Any]) -> Callable[[R, R], int]:
    """Build a (row1, row2) -> int comparator from a column's sort key."""
    def cmp(row1: R, row2: R) -> int:
        return compare(column.sort_key(row1), column.sort_key(row2))
    return cmp


def sort_rows(rows: Iterable[R], column: Column[R, Any], reverse: bool = False) -> list[R]:
    """Stable sort of rows by one column."""
    return sorted(rows, key=cmp_to_key(column_comparator(column)), reverse=reverse)
