"""Workbook comparison across the union of sheet names."""

from __future__ import annotations

from collections.abc import Sequence

from excel_comparer.models import ComparisonResult, SheetComparison
from excel_comparer.services.grid_extractor import Grid, extract_grid
from excel_comparer.services.sheet_differ import SheetDiffer
from excel_comparer.utils.logging import (
    LogContext,
    ProgressTracker,
    get_logger,
    timed_operation,
)
from excel_comparer.workbook import WorkbookSource

logger = get_logger(__name__)


def union_sheet_names(
    workbook1: WorkbookSource, workbook2: WorkbookSource
) -> list[str]:
    """Sheet names of both workbooks in first-seen order, without duplicates."""
    return list(dict.fromkeys([*workbook1.sheet_names, *workbook2.sheet_names]))


def select_active_sheet(sheets: Sequence[SheetComparison]) -> str | None:
    """First sheet with differences, else the first sheet, else None."""
    for sheet in sheets:
        if sheet.has_differences:
            return sheet.sheet_name
    return sheets[0].sheet_name if sheets else None


def _load_grid(workbook: WorkbookSource, name: str) -> Grid | None:
    sheet = workbook.get_sheet(name)
    if sheet is None:
        return None
    return extract_grid(sheet)


class WorkbookComparator:
    """Compares two workbooks sheet by sheet.

    Each call recomputes the full result from its inputs; the comparator
    holds only the header row setting.
    """

    def __init__(self, header_row: int = 1) -> None:
        self._differ = SheetDiffer(header_row)

    @property
    def header_row(self) -> int:
        return self._differ.header_row

    def compare(
        self, workbook1: WorkbookSource, workbook2: WorkbookSource
    ) -> ComparisonResult:
        sheet_names = union_sheet_names(workbook1, workbook2)
        comparisons: list[SheetComparison] = []

        with timed_operation(logger, "compare_workbooks") as metrics:
            tracker = ProgressTracker(
                logger, "Comparing sheets", total=len(sheet_names)
            )
            for name in sheet_names:
                with LogContext(sheet=name):
                    grid1 = _load_grid(workbook1, name)
                    grid2 = _load_grid(workbook2, name)
                    max_rows, max_cols = self._differ.data_shape(grid1, grid2)
                    metrics.cells_compared += max_rows * max_cols
                    comparisons.append(self._differ.diff(name, grid1, grid2))
                tracker.update(details=name)
            tracker.complete()

            total_differences = sum(sheet.total_differences for sheet in comparisons)
            metrics.sheets_compared = len(comparisons)
            metrics.differences_found = total_differences

        result = ComparisonResult(
            sheets=tuple(comparisons),
            total_differences=total_differences,
            active_sheet=select_active_sheet(comparisons),
            header_row=self.header_row,
        )
        logger.log_comparison_result(
            sheets_compared=len(result.sheets),
            sheets_with_differences=len(result.sheets_with_differences),
            total_differences=result.total_differences,
            header_row=result.header_row,
            active_sheet=result.active_sheet,
        )
        return result


def compare_workbooks(
    workbook1: WorkbookSource, workbook2: WorkbookSource, header_row: int = 1
) -> ComparisonResult:
    """Compare two workbooks using ``header_row`` as the header row."""
    return WorkbookComparator(header_row).compare(workbook1, workbook2)
