"""Tests for grid extraction and cell coercion."""

from datetime import date, datetime, time
from decimal import Decimal
from typing import Any

import pytest

from excel_comparer.services.grid_extractor import (
    coerce_cell,
    extract_grid,
    resolve_cell,
)
from excel_comparer.workbook import CellRange, FormulaResult, InMemorySheet


class _Unprintable:
    def __str__(self) -> str:
        raise RuntimeError("no string form")


class _OffsetSheet:
    """Sheet whose used range starts at B2."""

    name = "Offset"

    def __init__(self, cells: dict[tuple[int, int], Any]) -> None:
        self._cells = cells

    @property
    def dimensions(self) -> CellRange | None:
        return CellRange(top=2, left=2, bottom=3, right=3)

    def cell_value(self, row: int, col: int) -> Any:
        return self._cells.get((row, col))


class TestCoerceCell:
    """Tests for coerce_cell."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (None, ""),
            ("", ""),
            ("text", "text"),
            (True, "true"),
            (False, "false"),
            (30, "30"),
            (30.0, "30"),
            (-0.0, "0"),
            (3.5, "3.5"),
            (0.1, "0.1"),
            (1e-6, "0.000001"),
            (1.5e-5, "0.000015"),
            (1e-7, "1e-7"),
            (-2.5e-8, "-2.5e-8"),
            (1e16, "10000000000000000"),
            (1e21, "1e+21"),
            (2.5e25, "2.5e+25"),
            (float("nan"), "NaN"),
            (float("inf"), "Infinity"),
            (float("-inf"), "-Infinity"),
            (datetime(2024, 1, 15, 9, 30), "2024-01-15T09:30:00"),
            (date(2024, 1, 15), "2024-01-15"),
            (time(9, 30), "09:30:00"),
            (Decimal("1.50"), "1.50"),
        ],
    )
    def test_coercion(self, value: Any, expected: str) -> None:
        assert coerce_cell(value) == expected

    def test_unprintable_value_degrades_to_empty(self) -> None:
        """Coercion never raises."""
        assert coerce_cell(_Unprintable()) == ""


class TestResolveCell:
    """Tests for formula result resolution."""

    def test_formula_result_uses_computed_value(self) -> None:
        assert resolve_cell(FormulaResult(result=42)) == "42"

    def test_formula_without_result_is_empty(self) -> None:
        assert resolve_cell(FormulaResult()) == ""

    def test_result_mapping(self) -> None:
        assert resolve_cell({"result": "done", "formula": "=B1"}) == "done"
        assert resolve_cell({"result": None}) == ""

    def test_plain_value(self) -> None:
        assert resolve_cell(7) == "7"


class TestExtractGrid:
    """Tests for extract_grid."""

    def test_dense_grid_from_ragged_rows(self) -> None:
        sheet = InMemorySheet(name="S", rows=[["a", "b"], ["c"], [None, 2]])
        assert extract_grid(sheet) == [["a", "b"], ["c", ""], ["", "2"]]

    def test_empty_sheet_yields_empty_grid(self) -> None:
        assert extract_grid(InMemorySheet(name="Empty")) == []
        assert extract_grid(InMemorySheet(name="Blank", rows=[[], []])) == []

    def test_formula_cells_resolved(self) -> None:
        sheet = InMemorySheet(name="S", rows=[["Total", FormulaResult(result=10.0)]])
        assert extract_grid(sheet) == [["Total", "10"]]

    def test_grid_spans_used_range_only(self) -> None:
        sheet = _OffsetSheet({(2, 2): "x", (3, 3): 5})
        assert extract_grid(sheet) == [["x", ""], ["", "5"]]
