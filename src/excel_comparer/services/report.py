"""Flat tabular report of all cell differences."""

from __future__ import annotations

import pandas as pd

from excel_comparer.models import ComparisonResult

REPORT_COLUMNS = [
    "sheet",
    "row",
    "col",
    "address",
    "header",
    "value1",
    "value2",
    "kind",
    "row_summary",
]


def differences_to_dataframe(result: ComparisonResult) -> pd.DataFrame:
    """One row per cell difference, in sheet then row-major order.

    ``row_summary`` describes every change in the difference's row, e.g.
    ``"1 removed, 2 modified"``.
    """
    records = []
    for sheet in result.sheets:
        summaries = {
            row_diff.row_number: row_diff.summary()
            for row_diff in sheet.row_differences
        }
        for diff in sheet.differences:
            records.append(
                {
                    "sheet": sheet.sheet_name,
                    "row": diff.row,
                    "col": diff.col,
                    "address": diff.address,
                    "header": sheet.header_for(diff.col),
                    "value1": diff.value1,
                    "value2": diff.value2,
                    "kind": diff.kind.value,
                    "row_summary": summaries.get(diff.row, ""),
                }
            )
    return pd.DataFrame.from_records(records, columns=REPORT_COLUMNS)


def differences_to_csv(result: ComparisonResult) -> str:
    """Render the difference report as CSV text."""
    return differences_to_dataframe(result).to_csv(index=False)
