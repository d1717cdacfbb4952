from __future__ import annotations

from collections.abc import Callable
from io import BytesIO
from typing import Any

import pytest
from openpyxl import Workbook

from excel_comparer.workbook import InMemoryWorkbook

SheetRows = dict[str, list[list[Any]]]


def build_xlsx(sheets: SheetRows) -> bytes:
    """Serialize ``{sheet_name: rows}`` to .xlsx bytes with openpyxl."""
    wb = Workbook()
    wb.remove(wb.active)
    for name, rows in sheets.items():
        ws = wb.create_sheet(name)
        for row in rows:
            ws.append(row)
    buffer = BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


@pytest.fixture
def xlsx_bytes() -> Callable[[SheetRows], bytes]:
    return build_xlsx


@pytest.fixture
def people_v1() -> InMemoryWorkbook:
    return InMemoryWorkbook.from_rows(
        {
            "Sheet1": [
                ["Name", "Age", "City"],
                ["Alice", 30, "Paris"],
                ["Bob", 25, "Berlin"],
            ],
            "Archive": [
                ["Id", "Note"],
                [1, "old"],
            ],
        }
    )


@pytest.fixture
def people_v2() -> InMemoryWorkbook:
    return InMemoryWorkbook.from_rows(
        {
            "Sheet1": [
                ["Name", "Age", "City"],
                ["Alice", 31, "Paris"],
                ["Bob", 25, None],
                ["Carol", 40, "Rome"],
            ],
            "Summary": [
                ["Total"],
                [3],
            ],
        }
    )
