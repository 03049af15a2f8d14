"""Tabular import with column kind inference.

Reads an xlsx workbook (or a CSV file) into one ``Sheet`` per table:

1. The first row of each table holds the column names; blank names become
   ``"Untitled"``.
2. Each column's kind is inferred from the first ``sample_rows`` data rows
   only: Number when the sample has at least one non-empty cell and every
   non-empty cell parses as a number, Text otherwise.
3. Each data row becomes a ``Row`` by walking the columns in order and
   taking the positionally matching field. Missing fields are ``ABSENT``.
   Values past the sample window that contradict a Number column are kept
   as text rather than raising.

Each table is first cropped to its used range, so data that starts away from
A1 still reads its header from the first non-blank row. Blank rows inside
the range are kept as empty rows. Tables with no rows at all produce no sheet. Any failure to read the payload
raises ``WorkbookImportError`` and nothing is applied.
"""

from __future__ import annotations

import csv
import io
from enum import Enum
from pathlib import Path
from typing import Any, BinaryIO, Dict, List, Optional, Sequence, Union

import pandas as pd

from stockbook.exceptions import WorkbookImportError
from stockbook.spreadsheet.coercion import format_number, is_blank, parse_number
from stockbook.spreadsheet.model import (
    ABSENT,
    CellValue,
    Column,
    ColumnKind,
    Number,
    Row,
    Sheet,
    Text,
    Workbook,
    new_id,
)
from stockbook.utils.logging import get_logger

logger = get_logger(__name__)

INFERENCE_SAMPLE_ROWS = 10
UNTITLED_COLUMN = "Untitled"

Source = Union[bytes, bytearray, BinaryIO, str, Path]
Table = List[List[Any]]


class ImportMode(Enum):
    """How imported sheets are combined with the current workbook."""

    REPLACE = "replace"
    APPEND = "append"


def infer_column_kind(values: Sequence[Any]) -> ColumnKind:
    """Infer a column kind from sampled values.

    Args:
        values: The sampled cells of one column

    Returns:
        NUMBER if at least one value is non-empty and all non-empty values
        are numeric, TEXT otherwise
    """
    has_content = False
    for value in values:
        if is_blank(value):
            continue
        has_content = True
        if parse_number(value) is None:
            return ColumnKind.TEXT
    return ColumnKind.NUMBER if has_content else ColumnKind.TEXT


def _header_name(value: Any) -> str:
    if is_blank(value):
        return UNTITLED_COLUMN
    if isinstance(value, float):
        return format_number(value)
    return str(value).strip()


def _literal_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, float):
        return format_number(value)
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value)


def build_cell(kind: ColumnKind, value: Any) -> CellValue:
    """Convert one raw source value for a column of ``kind``.

    Blank values are ``ABSENT``. Number columns hold numbers where the value
    parses and the literal text otherwise. Text columns keep native numbers
    as numbers and everything else as text.
    """
    if is_blank(value):
        return ABSENT
    number = parse_number(value)
    if kind is ColumnKind.NUMBER:
        if number is not None:
            return Number(number)
        return Text(_literal_text(value))
    if number is not None and isinstance(value, (int, float)) and not isinstance(value, bool):
        return Number(number)
    return Text(_literal_text(value))


def _column_count(header: Sequence[Any], data_rows: Sequence[Sequence[Any]]) -> int:
    """Columns are bounded by the last named header cell.

    A header row with no names at all falls back to the widest data row.
    """
    width = 0
    for idx, value in enumerate(header):
        if not is_blank(value):
            width = idx + 1
    if width == 0:
        width = max((len(r) for r in data_rows), default=0)
    return width


def _field(row: Sequence[Any], index: int) -> Any:
    return row[index] if index < len(row) else None


def _is_blank_row(row: Sequence[Any]) -> bool:
    return all(is_blank(v) for v in row)


def trim_table(table: Sequence[Sequence[Any]]) -> Table:
    """Crop a raw table to its used range.

    Leading and trailing blank rows are removed, as are leading columns that
    are blank in every row, so a table placed away from A1 still has its
    header first. Blank rows inside the range are kept.
    """
    rows = [list(r) for r in table]
    start = 0
    while start < len(rows) and _is_blank_row(rows[start]):
        start += 1
    end = len(rows)
    while end > start and _is_blank_row(rows[end - 1]):
        end -= 1
    rows = rows[start:end]
    if not rows:
        return []

    lead = min(
        next(idx for idx, value in enumerate(r) if not is_blank(value))
        for r in rows
        if not _is_blank_row(r)
    )
    return [r[lead:] for r in rows]


def sheet_from_table(
    name: str,
    table: Sequence[Sequence[Any]],
    sample_rows: int = INFERENCE_SAMPLE_ROWS,
) -> Optional[Sheet]:
    """Build a sheet from a raw table whose first row is the header.

    The table is cropped with ``trim_table`` first. Blank rows inside the
    range become rows of ``ABSENT`` cells and count toward the sample window.

    Args:
        name: Sheet display name
        table: Rows of raw values; the first row holds column names
        sample_rows: Data rows inspected per column for kind inference

    Returns:
        The sheet, or None for a table with no rows or no columns
    """
    table = trim_table(table)
    if not table:
        return None

    header = table[0]
    data_rows = table[1:]
    width = _column_count(header, data_rows)
    if width == 0:
        logger.info("Skipping table %r: no columns", name)
        return None

    sample = data_rows[:sample_rows]
    columns = tuple(
        Column(
            id=new_id("col"),
            name=_header_name(_field(header, idx)),
            kind=infer_column_kind([_field(r, idx) for r in sample]),
        )
        for idx in range(width)
    )

    rows = tuple(
        Row(
            id=new_id("row"),
            cells={col.id: build_cell(col.kind, _field(raw, idx)) for idx, col in enumerate(columns)},
        )
        for raw in data_rows
    )
    return Sheet(id=new_id("sheet"), name=name or "Sheet", columns=columns, rows=rows)


def _frame_to_table(frame: pd.DataFrame) -> Table:
    frame = frame.astype(object)
    return frame.where(pd.notna(frame), None).values.tolist()


def _csv_text(handle: Any) -> str:
    if isinstance(handle, (str, Path)):
        return Path(handle).read_text(encoding="utf-8-sig")
    data = handle.read()
    return data.decode("utf-8-sig") if isinstance(data, (bytes, bytearray)) else data


def _read_csv(handle: Any) -> pd.DataFrame:
    """Read a CSV whose lines may have different field counts.

    The frame is as wide as the longest line; shorter lines are padded with
    missing values and blank lines are kept.
    """
    text = _csv_text(handle)
    width = max((len(r) for r in csv.reader(io.StringIO(text))), default=0)
    if width == 0:
        raise pd.errors.EmptyDataError("No columns to parse from file")
    return pd.read_csv(
        io.StringIO(text),
        header=None,
        names=range(width),
        dtype=str,
        keep_default_na=False,
        na_values=[""],
        skip_blank_lines=False,
    )


def _is_csv(source: Source, fmt: Optional[str]) -> bool:
    if fmt is not None:
        return fmt.lower() == "csv"
    if isinstance(source, (str, Path)):
        return Path(source).suffix.lower() == ".csv"
    return False


def read_tables(source: Source, fmt: Optional[str] = None) -> Dict[str, Table]:
    """Read every table of a spreadsheet file into raw rows.

    Args:
        source: xlsx/csv content as bytes or a binary file object, or a path
        fmt: ``"xlsx"`` or ``"csv"``; guessed from a path suffix when None

    Returns:
        Ordered mapping of table name to rows (header row included)

    Raises:
        WorkbookImportError: If the payload cannot be read
    """
    if isinstance(source, (bytes, bytearray)):
        handle: Any = io.BytesIO(bytes(source))
    else:
        handle = source

    try:
        if _is_csv(source, fmt):
            frame = _read_csv(handle)
            name = Path(source).stem if isinstance(source, (str, Path)) else "Sheet 1"
            return {name: _frame_to_table(frame)}

        frames = pd.read_excel(handle, sheet_name=None, header=None, dtype=object, engine="openpyxl")
    except pd.errors.EmptyDataError:
        return {}
    except Exception as e:
        raise WorkbookImportError(f"Failed to read spreadsheet: {e}") from e

    return {str(name): _frame_to_table(frame) for name, frame in frames.items()}


def import_sheets(
    source: Source,
    fmt: Optional[str] = None,
    sample_rows: Optional[int] = None,
) -> List[Sheet]:
    """Read a spreadsheet file into sheets, one per non-empty table.

    Raises:
        WorkbookImportError: If the payload cannot be read or converted
    """
    if sample_rows is None:
        from stockbook.config import get_settings

        sample_rows = get_settings().inference_sample_rows

    tables = read_tables(source, fmt)
    sheets: List[Sheet] = []
    try:
        for name, table in tables.items():
            sheet = sheet_from_table(name, table, sample_rows)
            if sheet is None:
                logger.info("Skipping empty table %r", name)
                continue
            sheets.append(sheet)
    except (TypeError, ValueError) as e:
        raise WorkbookImportError(f"Failed to convert spreadsheet: {e}") from e

    logger.info("Imported %d of %d tables", len(sheets), len(tables))
    return sheets


def apply_import(
    workbook: Workbook,
    sheets: Sequence[Sheet],
    mode: ImportMode = ImportMode.REPLACE,
) -> Workbook:
    """Combine imported sheets with ``workbook`` in a single step.

    REPLACE swaps in the imported sheets and activates the first one;
    APPEND adds them after the existing sheets. No sheets means no change.
    """
    if not sheets:
        return workbook
    if mode is ImportMode.REPLACE:
        return Workbook.from_sheets(sheets)
    return Workbook.from_sheets(tuple(workbook.sheets) + tuple(sheets), workbook.active_sheet_id)


def import_workbook(
    workbook: Workbook,
    source: Source,
    mode: ImportMode = ImportMode.REPLACE,
    fmt: Optional[str] = None,
) -> Workbook:
    """Import a spreadsheet file into ``workbook``.

    The caller's workbook is untouched if the import fails.

    Raises:
        WorkbookImportError: If the payload cannot be read
    """
    return apply_import(workbook, import_sheets(source, fmt), mode)
