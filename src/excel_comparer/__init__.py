"""Excel Comparer - sheet-by-sheet, cell-by-cell workbook comparison."""

__version__ = "0.1.0"

from excel_comparer.models import (  # noqa: E402
    CellDifference,
    ComparisonResult,
    DifferenceKind,
    RowDifference,
    SheetComparison,
)
from excel_comparer.services.comparison import compare_workbooks  # noqa: E402
from excel_comparer.workbook import (  # noqa: E402
    FormulaResult,
    InMemorySheet,
    InMemoryWorkbook,
)

__all__ = [
    "CellDifference",
    "ComparisonResult",
    "DifferenceKind",
    "FormulaResult",
    "InMemorySheet",
    "InMemoryWorkbook",
    "RowDifference",
    "SheetComparison",
    "compare_workbooks",
    "main",
]


def main() -> None:
    """Run the FastAPI server using uvicorn."""
    import uvicorn

    from excel_comparer.config import settings

    uvicorn.run(
        "excel_comparer.api:app",
        host=settings.server_host,
        port=settings.server_port,
    )
