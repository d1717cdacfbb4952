"""Normalize decoded sheets into grids of string-coerced cell values."""

from __future__ import annotations

import math
from collections.abc import Mapping
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any

from excel_comparer.workbook import FormulaResult, SheetSource

Grid = list[list[str]]

# Magnitudes outside [1e-6, 1e21) print in exponent form: "1e-7", "1e+21".
_EXPONENT_FROM = 1e21
_MIN_DECIMAL_EXPONENT = -6


def _format_float(value: float) -> str:
    """Shortest round-trip digits, laid out the way ECMAScript prints numbers."""
    text = repr(value)
    mantissa, _, exponent_text = text.partition("e")
    if not exponent_text:
        return text
    exponent = int(exponent_text)
    if _MIN_DECIMAL_EXPONENT <= exponent and abs(value) < _EXPONENT_FROM:
        return format(Decimal(text), "f")
    sign = "+" if exponent > 0 else "-"
    return f"{mantissa}e{sign}{abs(exponent)}"


def coerce_cell(value: Any) -> str:
    """Coerce a primitive cell value to the string used for comparison.

    Absent values become "". Booleans render lowercase and integral floats
    drop their fractional part, so ``30`` and ``30.0`` compare equal.
    Never raises.
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer() and abs(value) < _EXPONENT_FROM:
            return str(int(value))
        return _format_float(value)
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    try:
        return str(value)
    except Exception:
        return ""


def resolve_cell(value: Any) -> str:
    """Resolve a raw cell (primitive, formula result or None) to a string."""
    if isinstance(value, FormulaResult):
        return coerce_cell(value.result)
    if isinstance(value, Mapping) and "result" in value:
        return coerce_cell(value["result"])
    return coerce_cell(value)


def extract_grid(sheet: SheetSource) -> Grid:
    """Read a sheet's used range into a dense grid.

    Rows run top..bottom and columns left..right of the used range. A sheet
    without a used range yields an empty grid.
    """
    dimensions = sheet.dimensions
    if dimensions is None:
        return []

    grid: Grid = []
    for row in range(dimensions.top, dimensions.bottom + 1):
        grid.append(
            [
                resolve_cell(sheet.cell_value(row, col))
                for col in range(dimensions.left, dimensions.right + 1)
            ]
        )
    return grid
