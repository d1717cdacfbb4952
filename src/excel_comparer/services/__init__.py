"""Services for the Excel comparer."""

from excel_comparer.services.comparison import WorkbookComparator, compare_workbooks
from excel_comparer.services.format_detector import (
    FormatDetector,
    UnsupportedFormatError,
)
from excel_comparer.services.grid_extractor import coerce_cell, extract_grid
from excel_comparer.services.sheet_differ import SheetDiffer

__all__ = [
    "FormatDetector",
    "SheetDiffer",
    "UnsupportedFormatError",
    "WorkbookComparator",
    "coerce_cell",
    "compare_workbooks",
    "extract_grid",
]
