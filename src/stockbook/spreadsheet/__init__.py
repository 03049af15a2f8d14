"""
Spreadsheet engine.

This module provides the workbook value types, the pure structural edit
functions that keep them consistent, serializable edit commands, and the
export projection consumed by analytics and external collaborators.
"""

from stockbook.spreadsheet.model import (
    ABSENT,
    Absent,
    CellMap,
    CellValue,
    Column,
    ColumnKind,
    DEFAULT_COLUMNS,
    Number,
    Row,
    Sheet,
    Text,
    Workbook,
    monthly_workbook,
    new_workbook,
)
from stockbook.spreadsheet.engine import (
    EditResult,
    EditStatus,
    add_column,
    add_row,
    add_sheet,
    delete_column,
    delete_row,
    delete_sheet,
    find_rows,
    rename_column,
    rename_sheet,
    retype_column,
    select_all,
    set_active_sheet,
    toggle_row_selected,
    write_cell,
)
from stockbook.spreadsheet.export import (
    Selection,
    build_chart_request,
    export_sheet,
    export_workbook_sheet,
    to_dataframe,
)
from stockbook.spreadsheet.operations import EditOp, apply_all, op_from_dict

__all__ = [
    "ABSENT",
    "Absent",
    "CellMap",
    "CellValue",
    "Column",
    "ColumnKind",
    "DEFAULT_COLUMNS",
    "Number",
    "Row",
    "Sheet",
    "Text",
    "Workbook",
    "monthly_workbook",
    "new_workbook",
    "EditResult",
    "EditStatus",
    "add_column",
    "add_row",
    "add_sheet",
    "delete_column",
    "delete_row",
    "delete_sheet",
    "find_rows",
    "rename_column",
    "rename_sheet",
    "retype_column",
    "select_all",
    "set_active_sheet",
    "toggle_row_selected",
    "write_cell",
    "Selection",
    "build_chart_request",
    "export_sheet",
    "export_workbook_sheet",
    "to_dataframe",
    "EditOp",
    "apply_all",
    "op_from_dict",
]
