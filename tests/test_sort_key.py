"""Tests for blotter/engine/sort_key.py"""

import itertools

import pytest

from blotter.engine.columns import column, columns
from blotter.engine.sort_key import SortKey, SortKind, column_comparator, compare, sort_rows


def test_string_keys_compare_by_code_point():
    """Uppercase sorts before lowercase (case-sensitive, byte order)."""
    assert compare(SortKey.of_string("B"), SortKey.of_string("a")) == -1
    assert compare(SortKey.of_string("abc"), SortKey.of_string("abd")) == -1
    assert compare(SortKey.of_string("x"), SortKey.of_string("x")) == 0


def test_float_keys_compare_numerically():
    assert compare(SortKey.of_float(10), SortKey.of_float(9.5)) == 1
    assert compare(SortKey.of_float(-1), SortKey.of_float(0)) == -1
    assert compare(SortKey.of_float(2), SortKey.of_float(2.0)) == 0


def test_of_float_promotes_ints():
    key = SortKey.of_float(3)
    assert key.kind is SortKind.FLOAT
    assert isinstance(key.value, float)


def test_mixed_kinds_fail_fast():
    with pytest.raises(TypeError):
        compare(SortKey.of_string("1"), SortKey.of_float(1.0))


def test_each_column_produces_one_kind(rows):
    for col in columns():
        kinds = {col.sort_key(r).kind for r in rows}
        assert len(kinds) == 1, col.name


def test_comparator_is_a_total_order(rows):
    """Reflexive, antisymmetric and transitive for every column."""
    for col in columns():
        cmp = column_comparator(col)
        for a in rows:
            assert cmp(a, a) == 0
        for a, b in itertools.product(rows, repeat=2):
            assert cmp(a, b) == -cmp(b, a)
        for a, b, c in itertools.product(rows, repeat=3):
            if cmp(a, b) <= 0 and cmp(b, c) <= 0:
                assert cmp(a, c) <= 0


def test_sort_rows_by_string_column(rows):
    result = sort_rows(rows, column("symbol"))
    assert [r.symbol for r in result] == ["ABCD", "MNOP", "WXYZ", "abcd"]


def test_sort_rows_by_int_column_reversed(rows):
    result = sort_rows(rows, column("position"), reverse=True)
    assert [r.position for r in result] == [300, 0, -5, -1200]


def test_sort_rows_is_stable(rows):
    """ABCD and abcd share bid_size 500 and keep their input order."""
    result = sort_rows(rows, column("bid_size"))
    assert [r.symbol for r in result] == ["WXYZ", "ABCD", "abcd", "MNOP"]
