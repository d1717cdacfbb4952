"""Pydantic models for comparison results and API responses."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from excel_comparer.utils.columns import cell_address, column_letter
from excel_comparer.utils.exceptions import ErrorCode


class DifferenceKind(str, Enum):
    """Classification of a differing cell pair."""

    ADDED = "added"
    REMOVED = "removed"
    MODIFIED = "modified"

    @classmethod
    def classify(cls, value1: str, value2: str) -> "DifferenceKind | None":
        """Classify a pair of coerced cell values.

        Returns None when the values are equal.
        """
        if value1 == value2:
            return None
        if value1 == "":
            return cls.ADDED
        if value2 == "":
            return cls.REMOVED
        return cls.MODIFIED


class SheetPresence(str, Enum):
    """Which of the two workbooks contain a sheet."""

    BOTH = "both"
    ONLY_IN_FILE1 = "only_in_file1"
    ONLY_IN_FILE2 = "only_in_file2"


class CellDifference(BaseModel):
    """A single (row, col) position whose values differ."""

    model_config = ConfigDict(frozen=True)

    row: int = Field(..., description="1-based row number in the original sheet")
    col: int = Field(..., description="1-based column number")
    value1: str = Field(..., description="Value in the first workbook")
    value2: str = Field(..., description="Value in the second workbook")
    kind: DifferenceKind

    @property
    def address(self) -> str:
        return cell_address(self.row, self.col)


class RowCell(BaseModel):
    """One column position of a row difference."""

    model_config = ConfigDict(frozen=True)

    col: int
    value1: str
    value2: str
    is_different: bool
    kind: DifferenceKind | None = None


class RowDifference(BaseModel):
    """Full-width view of one differing row."""

    model_config = ConfigDict(frozen=True)

    row_number: int
    cells: tuple[RowCell, ...] = ()
    has_differences: bool = False

    def count(self, kind: DifferenceKind) -> int:
        return sum(1 for cell in self.cells if cell.kind is kind)

    def summary(self) -> str:
        """Describe the row's changes, e.g. ``"1 added, 2 modified"``."""
        counts = [(self.count(kind), kind) for kind in DifferenceKind]
        return ", ".join(f"{n} {kind.value}" for n, kind in counts if n)


class SheetComparison(BaseModel):
    """Comparison result for one sheet name."""

    model_config = ConfigDict(frozen=True)

    sheet_name: str
    presence: SheetPresence = SheetPresence.BOTH
    headers: tuple[str, ...] = ()
    differences: tuple[CellDifference, ...] = ()
    row_differences: tuple[RowDifference, ...] = ()
    total_differences: int = 0
    has_differences: bool = False

    def header_for(self, col: int) -> str:
        """Header text for a 1-based column, or its letter when unlabeled."""
        if 1 <= col <= len(self.headers) and self.headers[col - 1]:
            return self.headers[col - 1]
        return column_letter(col)


class ComparisonResult(BaseModel):
    """Aggregate result of comparing two workbooks."""

    model_config = ConfigDict(frozen=True)

    sheets: tuple[SheetComparison, ...] = ()
    total_differences: int = 0
    active_sheet: str | None = None
    header_row: int = 1

    @property
    def sheets_with_differences(self) -> list[SheetComparison]:
        return [sheet for sheet in self.sheets if sheet.has_differences]

    def get_sheet(self, name: str) -> SheetComparison | None:
        for sheet in self.sheets:
            if sheet.sheet_name == name:
                return sheet
        return None


# =============================================================================
# API models
# =============================================================================


class HealthResponse(BaseModel):
    """Response model for health check endpoint."""

    status: str
    timestamp: str
    version: str


class WorkbookSummary(BaseModel):
    """Name and sheet count of an uploaded workbook."""

    name: str = Field(..., description="Original filename of the upload")
    sheet_count: int = Field(..., description="Number of worksheets")


class CompareResponse(BaseModel):
    """Response model for the compare endpoint."""

    file1: WorkbookSummary
    file2: WorkbookSummary
    header_row: int = Field(..., description="Header row used for the comparison")
    total_differences: int = Field(..., description="Differences across all sheets")
    sheets_compared: int = Field(..., description="Number of sheet names compared")
    sheets_with_differences: int = Field(
        ..., description="Number of sheets with at least one difference"
    )
    active_sheet: str | None = Field(
        default=None, description="Sheet to show first in a presentation"
    )
    sheets: list[SheetComparison] = Field(default_factory=list)


class ErrorDetail(BaseModel):
    """Error detail model for API error responses."""

    detail: str = Field(..., description="Human-readable error message")
    error_code: str | None = Field(
        default=None,
        description="Machine-readable error code (e.g., 'E1001')",
    )
    details: dict[str, Any] | None = Field(
        default=None,
        description="Additional error details for debugging",
    )
    request_id: str | None = Field(
        default=None,
        description="Request ID for error correlation",
    )

    @classmethod
    def from_error_code(
        cls,
        error_code: ErrorCode,
        detail: str,
        details: dict[str, Any] | None = None,
        request_id: str | None = None,
    ) -> "ErrorDetail":
        return cls(
            detail=detail,
            error_code=error_code.value,
            details=details,
            request_id=request_id,
        )


class FormatInfo(BaseModel):
    """Spreadsheet format detection result."""

    mime_type: str = Field(..., description="MIME type of the workbook")
    extension: str = Field(
        ..., description="File extension including the dot (e.g., '.xlsx')"
    )
    detected_from_content: bool = Field(
        default=False,
        description="Whether format was detected from file content (magic bytes)",
    )
    original_extension: str | None = Field(
        default=None,
        description="Original file extension if different from detected format",
    )
