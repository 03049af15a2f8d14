"""
Export projection: flatten a sheet into column-name-keyed records.

This is the contract every downstream consumer reads (stock analytics, the
chart workflow, PDF reports, Sheets sync). Records are plain dicts keyed by
column *name*, in column order, with ``None`` for absent cells.

Two behaviours to note:
- Selecting nothing and exporting "selected only" exports every row, so a
  downstream chart never receives an empty dataset by accident.
- Columns sharing a name collapse into one key; the right-most column wins.
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd

from stockbook.spreadsheet.model import Row, Sheet, Workbook
from stockbook.utils.logging import get_logger

logger = get_logger(__name__)

SELECTED_FLAG = "_selected"

Record = Dict[str, Any]


class Selection(Enum):
    """Which rows an export covers."""

    ALL = "all"
    SELECTED_ONLY = "selected_only"


def rows_for_export(sheet: Sheet, selection: Selection = Selection.ALL) -> Sequence[Row]:
    """Rows covered by ``selection``, falling back to all rows if none are selected."""
    if selection is Selection.SELECTED_ONLY:
        selected = sheet.selected_rows
        if selected:
            return selected
    return sheet.rows


def duplicate_column_names(sheet: Sheet) -> List[str]:
    """Names used by more than one column, in first-seen order."""
    seen: Dict[str, int] = {}
    for col in sheet.columns:
        seen[col.name] = seen.get(col.name, 0) + 1
    return [name for name, count in seen.items() if count > 1]


def export_sheet(
    sheet: Sheet,
    selection: Selection = Selection.ALL,
    include_selected_flag: bool = False,
) -> List[Record]:
    """Flatten ``sheet`` into records keyed by column name.

    Args:
        sheet: Sheet to export
        selection: ALL, or SELECTED_ONLY (empty selection exports all rows)
        include_selected_flag: Add a ``_selected`` boolean to each record

    Returns:
        One dict per exported row, keys in column order
    """
    duplicates = duplicate_column_names(sheet)
    if duplicates:
        logger.debug(
            "Sheet %r has duplicate column names %s; last column wins on export",
            sheet.name, duplicates,
        )

    records: List[Record] = []
    for row in rows_for_export(sheet, selection):
        record: Record = {}
        for col in sheet.columns:
            record[col.name] = row.value(col.id).to_python()
        if include_selected_flag:
            record[SELECTED_FLAG] = row.selected
        records.append(record)
    return records


def export_workbook_sheet(
    workbook: Workbook,
    sheet_id: Optional[str] = None,
    selection: Selection = Selection.ALL,
    include_selected_flag: bool = False,
) -> List[Record]:
    """Export one sheet of a workbook, the active sheet by default.

    An unknown ``sheet_id`` exports nothing.
    """
    sheet = workbook.active_sheet if sheet_id is None else workbook.sheet(sheet_id)
    if sheet is None:
        return []
    return export_sheet(sheet, selection, include_selected_flag)


def to_dataframe(sheet: Sheet, selection: Selection = Selection.ALL) -> pd.DataFrame:
    """Export projection as a pandas DataFrame.

    Column order follows the sheet; duplicate names appear once (last wins),
    matching ``export_sheet``. Absent cells are missing values.
    """
    records = export_sheet(sheet, selection)
    columns = list(dict.fromkeys(col.name for col in sheet.columns))
    return pd.DataFrame.from_records(records, columns=columns)


def build_chart_request(prompt: str, records: Sequence[Record]) -> Dict[str, Any]:
    """Payload handed to the external chart workflow.

    Args:
        prompt: What the user wants charted
        records: Export projection rows

    Returns:
        ``{"prompt": ..., "inventario": [...]}``

    Raises:
        ValueError: If the prompt is blank
    """
    text = (prompt or "").strip()
    if not text:
        raise ValueError("Chart prompt must be a non-empty string")
    return {"prompt": text, "inventario": [dict(r) for r in records]}
