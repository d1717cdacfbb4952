"""Decode Excel workbooks with openpyxl into the comparison abstraction."""

from __future__ import annotations

from io import BytesIO
from pathlib import Path
from typing import IO, Any
from zipfile import BadZipFile

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException
from openpyxl.workbook.workbook import Workbook
from openpyxl.worksheet.worksheet import Worksheet

from excel_comparer.utils.exceptions import WorkbookNotFoundError, WorkbookReadError
from excel_comparer.utils.logging import get_logger
from excel_comparer.workbook import CellRange

logger = get_logger(__name__)

_DECODE_ERRORS = (InvalidFileException, BadZipFile, KeyError, ValueError, OSError)


class OpenpyxlSheet:
    """Read-only view of an openpyxl worksheet.

    Values of the used range are read once, on first access.
    """

    def __init__(self, worksheet: Worksheet) -> None:
        self._worksheet = worksheet
        self._dimensions = self._used_range(worksheet)
        self._values: list[tuple[Any, ...]] | None = None

    @property
    def name(self) -> str:
        return str(self._worksheet.title)

    @property
    def dimensions(self) -> CellRange | None:
        return self._dimensions

    def cell_value(self, row: int, col: int) -> Any:
        dims = self._dimensions
        if dims is None:
            return None
        if not (dims.top <= row <= dims.bottom and dims.left <= col <= dims.right):
            return None
        if self._values is None:
            self._values = list(
                self._worksheet.iter_rows(
                    min_row=dims.top,
                    max_row=dims.bottom,
                    min_col=dims.left,
                    max_col=dims.right,
                    values_only=True,
                )
            )
        return self._values[row - dims.top][col - dims.left]

    @staticmethod
    def _used_range(worksheet: Worksheet) -> CellRange | None:
        """Used range of a worksheet, or None when it holds no values.

        openpyxl reports A1:A1 for an empty sheet, so a single-cell range is
        only kept when that cell has a value.
        """
        top, bottom = worksheet.min_row, worksheet.max_row
        left, right = worksheet.min_column, worksheet.max_column
        if top == bottom and left == right:
            if worksheet.cell(row=top, column=left).value is None:
                return None
        return CellRange(top=top, left=left, bottom=bottom, right=right)


class OpenpyxlWorkbook:
    """Workbook abstraction over an openpyxl ``Workbook`` opened data-only."""

    def __init__(self, workbook: Workbook, name: str | None = None) -> None:
        self.name = name
        self._sheets = {
            worksheet.title: OpenpyxlSheet(worksheet)
            for worksheet in workbook.worksheets
        }

    @property
    def sheet_names(self) -> list[str]:
        return list(self._sheets)

    def get_sheet(self, name: str) -> OpenpyxlSheet | None:
        return self._sheets.get(name)


class WorkbookLoader:
    """Load workbooks from paths or bytes.

    Workbooks are opened with ``data_only=True``: formula cells read as the
    result cached by the application that last saved the file.
    """

    def load_from_path(self, file_path: Path) -> OpenpyxlWorkbook:
        """Load a workbook from a file path."""
        if not file_path.exists():
            raise WorkbookNotFoundError(str(file_path))
        with file_path.open("rb") as handle:
            return self._load(handle, file_path.name)

    def load_from_bytes(
        self, content: bytes, filename: str | None = None
    ) -> OpenpyxlWorkbook:
        """Load a workbook from in-memory content, e.g. an upload."""
        return self._load(BytesIO(content), filename)

    def get_sheet_names(self, file_path: Path) -> list[str]:
        """List the worksheet names of a workbook file."""
        return self.load_from_path(file_path).sheet_names

    def _load(self, source: IO[bytes], name: str | None) -> OpenpyxlWorkbook:
        try:
            workbook = load_workbook(filename=source, data_only=True, read_only=False)
        except _DECODE_ERRORS as e:
            logger.warning(
                "Workbook could not be decoded",
                file=name,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise WorkbookReadError(
                "Unable to read workbook. Is it a valid .xlsx file?",
                file_path=name,
                cause=f"{type(e).__name__}: {e}",
            ) from e

        try:
            loaded = OpenpyxlWorkbook(workbook, name=name)
        finally:
            workbook.close()

        logger.debug(
            "Workbook loaded",
            file=name,
            sheets=len(loaded.sheet_names),
        )
        return loaded
