"""
Sheet visualization utilities.

Provides a plain-text grid rendering of a sheet for logs, debugging and the
example scripts. Each row shows its selection marker, its 1-based position
and its cells in column order.
"""

from typing import List, Optional

from stockbook.spreadsheet.coercion import format_number
from stockbook.spreadsheet.model import CellValue, Number, Sheet, Text

ABSENT_MARKER = "-"


def _format_cell(value: CellValue) -> str:
    if isinstance(value, Number):
        return format_number(value.value)
    if isinstance(value, Text):
        return value.value
    return ABSENT_MARKER


def render_sheet(sheet: Sheet, max_rows: Optional[int] = None) -> str:
    """Generate a text grid for a sheet.

    Args:
        sheet: The sheet to render
        max_rows: Render at most this many rows; the rest are summarized

    Returns:
        A string with a header line, one line per row and a size footer

    Example:
        >>> print(render_sheet(new_workbook().active_sheet))
         | # | Producto | Stock Actual | Stock Mínimo | Stock Máximo | Coste Unit.
        0 rows x 5 columns
    """
    if not isinstance(sheet, Sheet):
        raise TypeError(f"Expected Sheet, got {type(sheet)}")

    rows = sheet.rows if max_rows is None else sheet.rows[:max_rows]
    table: List[List[str]] = [["", "#"] + [col.name for col in sheet.columns]]
    for idx, row in enumerate(rows, start=1):
        marker = "[x]" if row.selected else "[ ]"
        table.append(
            [marker, str(idx)] + [_format_cell(row.value(col.id)) for col in sheet.columns]
        )

    widths = [max(len(line[i]) for line in table) for i in range(len(table[0]))]
    lines = [
        " | ".join(cell.ljust(width) for cell, width in zip(line, widths)).rstrip()
        for line in table
    ]

    hidden = len(sheet.rows) - len(rows)
    if hidden > 0:
        lines.append(f"... {hidden} more rows")
    lines.append(f"{len(sheet.rows)} rows x {len(sheet.columns)} columns")
    return "\n".join(lines)
