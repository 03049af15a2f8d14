"""
Pure structural transitions on a workbook.

Every function here takes a ``Workbook`` and returns an ``EditResult`` holding
the next workbook and a status. Nothing is mutated in place: a rejected edit
hands back the very same workbook object, and an applied edit builds new
sheet/row values in one step, so a caller never sees, say, a new column that
has not yet reached every row.

Rejections are statuses, not exceptions:
- LAST_SHEET / LAST_COLUMN: the edit would leave the workbook or sheet empty
- NOT_FOUND: a stale sheet, column or row id
- EMPTY_NAME: a rename to a blank name
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, List, Optional, Tuple

from stockbook.spreadsheet.coercion import coerce_for_kind, format_number
from stockbook.spreadsheet.model import (
    ABSENT,
    DEFAULT_COLUMNS,
    Column,
    ColumnKind,
    Row,
    Sheet,
    Workbook,
    empty_cells,
    new_id,
    new_sheet,
)
from stockbook.utils.logging import get_logger

logger = get_logger(__name__)


class EditStatus(Enum):
    """Outcome of a structural edit."""

    APPLIED = "applied"
    LAST_SHEET = "last_sheet"
    LAST_COLUMN = "last_column"
    NOT_FOUND = "not_found"
    EMPTY_NAME = "empty_name"


@dataclass(frozen=True)
class EditResult:
    """The workbook after an edit, and whether the edit took effect.

    Attributes:
        workbook: Next workbook value (the input itself when rejected)
        status: Why the edit was or was not applied
    """

    workbook: Workbook
    status: EditStatus = EditStatus.APPLIED

    @property
    def applied(self) -> bool:
        return self.status is EditStatus.APPLIED


def _reject(workbook: Workbook, status: EditStatus, op: str, **context: Any) -> EditResult:
    logger.debug("%s rejected (%s): %s", op, status.value, context)
    return EditResult(workbook, status)


def _replace_sheet(workbook: Workbook, sheet: Sheet) -> Workbook:
    sheets = tuple(sheet if s.id == sheet.id else s for s in workbook.sheets)
    return replace(workbook, sheets=sheets)


def _edit_sheet(
    workbook: Workbook,
    sheet_id: str,
    op: str,
    edit: Callable[[Sheet], Tuple[Optional[Sheet], EditStatus]],
) -> EditResult:
    """Apply ``edit`` to one sheet and splice the result back in."""
    sheet = workbook.sheet(sheet_id)
    if sheet is None:
        return _reject(workbook, EditStatus.NOT_FOUND, op, sheet_id=sheet_id)
    updated, status = edit(sheet)
    if status is not EditStatus.APPLIED or updated is None:
        return _reject(workbook, status, op, sheet_id=sheet_id)
    return EditResult(_replace_sheet(workbook, updated))


def _insert_after(items: Tuple[Any, ...], new_item: Any, after_index: int) -> Tuple[Any, ...]:
    """Insert after position ``after_index``; -1 appends."""
    if after_index < 0:
        return items + (new_item,)
    return items[: after_index + 1] + (new_item,) + items[after_index + 1:]


# --------------------------------------------------------------------------- #
# Sheets
# --------------------------------------------------------------------------- #

def add_sheet(workbook: Workbook, name: Optional[str] = None) -> EditResult:
    """Append an empty sheet with the default columns and make it active.

    The display name defaults to ``"Sheet N"`` where N is the new sheet count.
    """
    sheet = new_sheet(name or f"Sheet {len(workbook.sheets) + 1}", DEFAULT_COLUMNS)
    return EditResult(
        Workbook(sheets=workbook.sheets + (sheet,), active_sheet_id=sheet.id)
    )


def delete_sheet(workbook: Workbook, sheet_id: str) -> EditResult:
    """Remove a sheet unless it is the only one.

    If the removed sheet was active, the first remaining sheet becomes active.
    """
    if workbook.sheet(sheet_id) is None:
        return _reject(workbook, EditStatus.NOT_FOUND, "delete_sheet", sheet_id=sheet_id)
    if len(workbook.sheets) <= 1:
        return _reject(workbook, EditStatus.LAST_SHEET, "delete_sheet", sheet_id=sheet_id)

    sheets = tuple(s for s in workbook.sheets if s.id != sheet_id)
    active = workbook.active_sheet_id
    if active == sheet_id:
        active = sheets[0].id
    return EditResult(Workbook(sheets=sheets, active_sheet_id=active))


def rename_sheet(workbook: Workbook, sheet_id: str, new_name: str) -> EditResult:
    """Rename a sheet; blank names are rejected, duplicates are allowed."""
    name = (new_name or "").strip()
    if not name:
        return _reject(workbook, EditStatus.EMPTY_NAME, "rename_sheet", sheet_id=sheet_id)
    return _edit_sheet(
        workbook, sheet_id, "rename_sheet",
        lambda sheet: (replace(sheet, name=name), EditStatus.APPLIED),
    )


def set_active_sheet(workbook: Workbook, sheet_id: str) -> EditResult:
    """Switch the sheet the editor is showing."""
    if workbook.sheet(sheet_id) is None:
        return _reject(workbook, EditStatus.NOT_FOUND, "set_active_sheet", sheet_id=sheet_id)
    return EditResult(replace(workbook, active_sheet_id=sheet_id))


# --------------------------------------------------------------------------- #
# Columns
# --------------------------------------------------------------------------- #

def add_column(
    workbook: Workbook,
    sheet_id: str,
    after_column_id: Optional[str] = None,
    name: Optional[str] = None,
    kind: ColumnKind = ColumnKind.TEXT,
) -> EditResult:
    """Insert a new column and give every existing row an absent cell for it.

    Args:
        workbook: Current state
        sheet_id: Target sheet
        after_column_id: Insert right after this column; appended when None
            or unknown
        name: Display name, ``"Column N"`` by default
        kind: Declared kind, Text by default
    """
    def edit(sheet: Sheet) -> Tuple[Sheet, EditStatus]:
        column = Column(
            id=new_id("col"),
            name=name or f"Column {len(sheet.columns) + 1}",
            kind=kind,
        )
        after = sheet.column_index(after_column_id) if after_column_id else -1
        columns = _insert_after(sheet.columns, column, after)
        rows = tuple(
            replace(r, cells={**r.cells, column.id: ABSENT}) for r in sheet.rows
        )
        return replace(sheet, columns=columns, rows=rows), EditStatus.APPLIED

    return _edit_sheet(workbook, sheet_id, "add_column", edit)


def delete_column(workbook: Workbook, sheet_id: str, column_id: str) -> EditResult:
    """Remove a column and its key from every row; the last column stays."""
    def edit(sheet: Sheet) -> Tuple[Optional[Sheet], EditStatus]:
        if sheet.column(column_id) is None:
            return None, EditStatus.NOT_FOUND
        if len(sheet.columns) <= 1:
            return None, EditStatus.LAST_COLUMN
        columns = tuple(c for c in sheet.columns if c.id != column_id)
        rows = tuple(
            replace(r, cells={k: v for k, v in r.cells.items() if k != column_id})
            for r in sheet.rows
        )
        return replace(sheet, columns=columns, rows=rows), EditStatus.APPLIED

    return _edit_sheet(workbook, sheet_id, "delete_column", edit)


def _edit_column(
    workbook: Workbook,
    sheet_id: str,
    column_id: str,
    op: str,
    change: Callable[[Column], Column],
) -> EditResult:
    def edit(sheet: Sheet) -> Tuple[Optional[Sheet], EditStatus]:
        if sheet.column(column_id) is None:
            return None, EditStatus.NOT_FOUND
        columns = tuple(change(c) if c.id == column_id else c for c in sheet.columns)
        return replace(sheet, columns=columns), EditStatus.APPLIED

    return _edit_sheet(workbook, sheet_id, op, edit)


def rename_column(workbook: Workbook, sheet_id: str, column_id: str, new_name: str) -> EditResult:
    """Rename a column. Names need not be unique."""
    name = (new_name or "").strip()
    if not name:
        return _reject(workbook, EditStatus.EMPTY_NAME, "rename_column", column_id=column_id)
    return _edit_column(
        workbook, sheet_id, column_id, "rename_column", lambda c: replace(c, name=name)
    )


def retype_column(
    workbook: Workbook,
    sheet_id: str,
    column_id: str,
    kind: Optional[ColumnKind] = None,
) -> EditResult:
    """Toggle a column between Text and Number, or set ``kind`` explicitly.

    Stored cell values are left untouched; readers re-parse them.
    """
    return _edit_column(
        workbook, sheet_id, column_id, "retype_column",
        lambda c: replace(c, kind=kind if kind is not None else c.kind.toggled()),
    )


# --------------------------------------------------------------------------- #
# Rows
# --------------------------------------------------------------------------- #

def add_row(workbook: Workbook, sheet_id: str, after_row_id: Optional[str] = None) -> EditResult:
    """Insert a row with an absent cell for every current column.

    The row goes right after ``after_row_id``, or at the end when that is
    None or unknown.
    """
    def edit(sheet: Sheet) -> Tuple[Sheet, EditStatus]:
        row = Row(id=new_id("row"), cells=empty_cells(sheet.columns))
        after = sheet.row_index(after_row_id) if after_row_id else -1
        return replace(sheet, rows=_insert_after(sheet.rows, row, after)), EditStatus.APPLIED

    return _edit_sheet(workbook, sheet_id, "add_row", edit)


def delete_row(workbook: Workbook, sheet_id: str, row_id: str) -> EditResult:
    """Remove a row. A sheet may end up with no rows."""
    def edit(sheet: Sheet) -> Tuple[Optional[Sheet], EditStatus]:
        if sheet.row(row_id) is None:
            return None, EditStatus.NOT_FOUND
        return replace(sheet, rows=tuple(r for r in sheet.rows if r.id != row_id)), EditStatus.APPLIED

    return _edit_sheet(workbook, sheet_id, "delete_row", edit)


def _edit_rows(
    workbook: Workbook,
    sheet_id: str,
    op: str,
    change: Callable[[Row], Row],
    row_id: Optional[str] = None,
) -> EditResult:
    """Apply ``change`` to one row (``row_id``) or to every row."""
    def edit(sheet: Sheet) -> Tuple[Optional[Sheet], EditStatus]:
        if row_id is not None and sheet.row(row_id) is None:
            return None, EditStatus.NOT_FOUND
        rows = tuple(
            change(r) if row_id is None or r.id == row_id else r for r in sheet.rows
        )
        return replace(sheet, rows=rows), EditStatus.APPLIED

    return _edit_sheet(workbook, sheet_id, op, edit)


def toggle_row_selected(workbook: Workbook, sheet_id: str, row_id: str) -> EditResult:
    """Flip the selection flag of one row."""
    return _edit_rows(
        workbook, sheet_id, "toggle_row_selected",
        lambda r: replace(r, selected=not r.selected), row_id=row_id,
    )


def select_all(workbook: Workbook, sheet_id: str, selected: bool = True) -> EditResult:
    """Set the selection flag of every row in the sheet."""
    return _edit_rows(
        workbook, sheet_id, "select_all", lambda r: replace(r, selected=bool(selected))
    )


# --------------------------------------------------------------------------- #
# Cells
# --------------------------------------------------------------------------- #

def write_cell(
    workbook: Workbook,
    sheet_id: str,
    row_id: str,
    column_id: str,
    raw_input: Any,
) -> EditResult:
    """Store editor input in one cell, coerced by the column's kind.

    Number columns store a number, or ``ABSENT`` when the input does not
    parse. Text columns store the string as given, including ``""``.
    """
    def edit(sheet: Sheet) -> Tuple[Optional[Sheet], EditStatus]:
        column = sheet.column(column_id)
        if column is None or sheet.row(row_id) is None:
            return None, EditStatus.NOT_FOUND
        value = coerce_for_kind(column.kind, raw_input)
        rows = tuple(
            replace(r, cells={**r.cells, column_id: value}) if r.id == row_id else r
            for r in sheet.rows
        )
        return replace(sheet, rows=rows), EditStatus.APPLIED

    return _edit_sheet(workbook, sheet_id, "write_cell", edit)


def find_rows(workbook: Workbook, sheet_id: str, query: str) -> List[str]:
    """Ids of rows whose cells contain ``query`` (case-insensitive).

    Used to locate a product from a scanned code. Blank queries match
    nothing; absent cells never match.
    """
    needle = (query or "").strip().lower()
    sheet = workbook.sheet(sheet_id)
    if not needle or sheet is None:
        return []

    matches: List[str] = []
    for row in sheet.rows:
        for value in row.cells.values():
            python_value = value.to_python()
            if python_value is None:
                continue
            text = python_value if isinstance(python_value, str) else format_number(python_value)
            if needle in text.lower():
                matches.append(row.id)
                break
    return matches

