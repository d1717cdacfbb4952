"""Cell- and row-level differences for a single sheet name.

The header row and every row above it are excluded from comparison. Output
row numbers stay relative to the original sheet: the data row at offset
``i`` below the header is reported as row ``i + header_row + 1``.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from excel_comparer.models import (
    CellDifference,
    DifferenceKind,
    RowCell,
    RowDifference,
    SheetComparison,
    SheetPresence,
)
from excel_comparer.services.grid_extractor import resolve_cell
from excel_comparer.utils.logging import get_logger

logger = get_logger(__name__)

GridLike = Sequence[Sequence[Any]]


def clamp_header_row(header_row: int) -> int:
    """Header rows are 1-based; anything below 1 means row 1."""
    return max(1, int(header_row))


def _cell(rows: GridLike, row: int, col: int) -> str:
    if row >= len(rows):
        return ""
    values = rows[row]
    if col >= len(values):
        return ""
    return resolve_cell(values[col])


def _max_width(*row_sets: GridLike) -> int:
    return max((len(row) for rows in row_sets for row in rows), default=0)


class SheetDiffer:
    """Compares the grids of one sheet name relative to a header row."""

    def __init__(self, header_row: int = 1) -> None:
        self.header_row = clamp_header_row(header_row)

    def headers(self, grid1: GridLike | None, grid2: GridLike | None) -> list[str]:
        """Header labels from the first grid that reaches the header row."""
        for grid in (grid1, grid2):
            if grid is not None and len(grid) >= self.header_row:
                return [resolve_cell(value) for value in grid[self.header_row - 1]]
        return []

    def data_rows(self, grid: GridLike | None) -> GridLike:
        """Rows strictly below the header row."""
        if grid is None:
            return []
        return grid[self.header_row :]

    def data_shape(
        self, grid1: GridLike | None, grid2: GridLike | None
    ) -> tuple[int, int]:
        """Return ``(max_rows, max_cols)`` of the data regions of both grids."""
        rows1 = self.data_rows(grid1)
        rows2 = self.data_rows(grid2)
        return max(len(rows1), len(rows2)), _max_width(rows1, rows2)

    def row_number(self, offset: int) -> int:
        return offset + self.header_row + 1

    def diff(
        self,
        sheet_name: str,
        grid1: GridLike | None,
        grid2: GridLike | None,
    ) -> SheetComparison:
        """Compare one sheet name given the grid from each workbook.

        A missing grid (None) means the sheet does not exist in that
        workbook; every non-empty data cell of the other side is then
        reported as added or removed.
        """
        headers = tuple(self.headers(grid1, grid2))

        if grid1 is None and grid2 is None:
            return SheetComparison(sheet_name=sheet_name, headers=headers)

        if grid1 is None:
            presence = SheetPresence.ONLY_IN_FILE2
            differences, row_differences = self._diff_one_sided(
                self.data_rows(grid2), DifferenceKind.ADDED
            )
        elif grid2 is None:
            presence = SheetPresence.ONLY_IN_FILE1
            differences, row_differences = self._diff_one_sided(
                self.data_rows(grid1), DifferenceKind.REMOVED
            )
        else:
            presence = SheetPresence.BOTH
            differences, row_differences = self._diff_both(
                self.data_rows(grid1), self.data_rows(grid2)
            )

        logger.debug(
            "Sheet compared",
            sheet=sheet_name,
            presence=presence.value,
            differences=len(differences),
            rows_with_differences=len(row_differences),
        )
        return SheetComparison(
            sheet_name=sheet_name,
            presence=presence,
            headers=headers,
            differences=tuple(differences),
            row_differences=tuple(row_differences),
            total_differences=len(differences),
            has_differences=bool(differences),
        )

    def _diff_one_sided(
        self, rows: GridLike, kind: DifferenceKind
    ) -> tuple[list[CellDifference], list[RowDifference]]:
        max_cols = _max_width(rows)
        differences: list[CellDifference] = []
        row_differences: list[RowDifference] = []

        for offset in range(len(rows)):
            row_number = self.row_number(offset)
            cells: list[RowCell] = []
            for col_index in range(max_cols):
                col = col_index + 1
                value = _cell(rows, offset, col_index)
                if value == "":
                    cells.append(
                        RowCell(col=col, value1="", value2="", is_different=False)
                    )
                    continue

                if kind is DifferenceKind.ADDED:
                    value1, value2 = "", value
                else:
                    value1, value2 = value, ""
                cells.append(
                    RowCell(
                        col=col,
                        value1=value1,
                        value2=value2,
                        is_different=True,
                        kind=kind,
                    )
                )
                differences.append(
                    CellDifference(
                        row=row_number, col=col, value1=value1, value2=value2, kind=kind
                    )
                )

            if any(cell.is_different for cell in cells):
                row_differences.append(
                    RowDifference(
                        row_number=row_number, cells=tuple(cells), has_differences=True
                    )
                )

        return differences, row_differences

    def _diff_both(
        self, rows1: GridLike, rows2: GridLike
    ) -> tuple[list[CellDifference], list[RowDifference]]:
        max_rows = max(len(rows1), len(rows2))
        max_cols = _max_width(rows1, rows2)
        differences: list[CellDifference] = []
        rows_with_differences: set[int] = set()

        for offset in range(max_rows):
            for col_index in range(max_cols):
                value1 = _cell(rows1, offset, col_index)
                value2 = _cell(rows2, offset, col_index)
                kind = DifferenceKind.classify(value1, value2)
                if kind is None:
                    continue
                row_number = self.row_number(offset)
                rows_with_differences.add(row_number)
                differences.append(
                    CellDifference(
                        row=row_number,
                        col=col_index + 1,
                        value1=value1,
                        value2=value2,
                        kind=kind,
                    )
                )

        row_differences = [
            self._build_row(rows1, rows2, row_number, max_cols)
            for row_number in rows_with_differences
        ]
        row_differences.sort(key=lambda row_diff: row_diff.row_number)
        return differences, row_differences

    def _build_row(
        self, rows1: GridLike, rows2: GridLike, row_number: int, max_cols: int
    ) -> RowDifference:
        offset = row_number - self.header_row - 1
        cells = []
        for col_index in range(max_cols):
            value1 = _cell(rows1, offset, col_index)
            value2 = _cell(rows2, offset, col_index)
            kind = DifferenceKind.classify(value1, value2)
            cells.append(
                RowCell(
                    col=col_index + 1,
                    value1=value1,
                    value2=value2,
                    is_different=kind is not None,
                    kind=kind,
                )
            )
        return RowDifference(
            row_number=row_number, cells=tuple(cells), has_differences=True
        )
