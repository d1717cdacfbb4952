"""Workbook abstraction consumed by the comparison core.

A workbook is an ordered collection of named sheets. Each sheet exposes its
used range and cell access by 1-based (row, col). Cell access returns a
primitive, a FormulaResult wrapper or None for an absent cell.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable


@dataclass(frozen=True)
class CellRange:
    """Used range of a sheet, 1-based and inclusive on both ends."""

    top: int
    left: int
    bottom: int
    right: int


@dataclass(frozen=True)
class FormulaResult:
    """Computed value of a formula cell, as cached by the saving application."""

    result: Any = None


@runtime_checkable
class SheetSource(Protocol):
    """A decoded worksheet."""

    @property
    def name(self) -> str: ...

    @property
    def dimensions(self) -> CellRange | None: ...

    def cell_value(self, row: int, col: int) -> Any: ...


@runtime_checkable
class WorkbookSource(Protocol):
    """A decoded workbook: ordered sheet names plus lookup by name."""

    @property
    def sheet_names(self) -> list[str]: ...

    def get_sheet(self, name: str) -> SheetSource | None: ...


@dataclass
class InMemorySheet:
    """Sheet backed by nested Python lists, anchored at cell A1.

    Rows may be ragged; positions beyond a row's end read as absent.
    """

    name: str
    rows: list[list[Any]] = field(default_factory=list)

    @property
    def dimensions(self) -> CellRange | None:
        width = max((len(row) for row in self.rows), default=0)
        if not self.rows or width == 0:
            return None
        return CellRange(top=1, left=1, bottom=len(self.rows), right=width)

    def cell_value(self, row: int, col: int) -> Any:
        if row < 1 or col < 1 or row > len(self.rows):
            return None
        values = self.rows[row - 1]
        if col > len(values):
            return None
        return values[col - 1]


@dataclass
class InMemoryWorkbook:
    """Workbook whose sheets are held in insertion order."""

    sheets: list[InMemorySheet] = field(default_factory=list)

    @classmethod
    def from_rows(
        cls, sheets: Mapping[str, Sequence[Sequence[Any]]]
    ) -> InMemoryWorkbook:
        """Build a workbook from a ``{sheet_name: rows}`` mapping."""
        return cls(
            sheets=[
                InMemorySheet(name=name, rows=[list(row) for row in rows])
                for name, rows in sheets.items()
            ]
        )

    @property
    def sheet_names(self) -> list[str]:
        return [sheet.name for sheet in self.sheets]

    def get_sheet(self, name: str) -> InMemorySheet | None:
        for sheet in self.sheets:
            if sheet.name == name:
                return sheet
        return None
