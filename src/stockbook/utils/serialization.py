"""
Workbook snapshot serialization.

Provides JSON serialization and deserialization for workbooks, for callers
that persist editor state (remote database or local fallback storage). The
serialized format includes versioning for forward compatibility.

Cell encoding keeps the three cell variants distinct:
    {"t": "text", "v": "..."}    Text
    {"t": "number", "v": 1.5}    Number
    null                         Absent
"""

import json
from typing import Any, Dict, Optional

from stockbook.exceptions import SnapshotFormatError
from stockbook.spreadsheet.coercion import parse_number
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
)


# Current serialization format version
SERIALIZATION_VERSION = "1.0"


def _encode_cell(value: CellValue) -> Optional[Dict[str, Any]]:
    if isinstance(value, Text):
        return {"t": "text", "v": value.value}
    if isinstance(value, Number):
        return {"t": "number", "v": value.value}
    return None


def _decode_cell(data: Any) -> CellValue:
    if data is None:
        return ABSENT
    if not isinstance(data, dict):
        raise SnapshotFormatError(f"Invalid cell encoding: {data!r}")
    tag = data.get("t")
    if tag == "text":
        return Text(str(data["v"]))
    if tag == "number":
        number = parse_number(data.get("v"))
        if number is None:
            raise SnapshotFormatError(f"Invalid number cell: {data!r}")
        return Number(number)
    raise SnapshotFormatError(f"Unknown cell tag: {tag!r}")


def serialize(workbook: Workbook) -> Dict[str, Any]:
    """Serialize a workbook to a JSON-serializable dictionary.

    Args:
        workbook: The workbook to serialize

    Returns:
        Dictionary that can be serialized to JSON

    Raises:
        TypeError: If workbook is not a Workbook instance

    Example:
        >>> data = serialize(new_workbook())
        >>> assert data["version"] == "1.0"
        >>> assert len(data["sheets"]) == 1
    """
    if not isinstance(workbook, Workbook):
        raise TypeError(f"Expected Workbook, got {type(workbook)}")

    return {
        "version": SERIALIZATION_VERSION,
        "active_sheet_id": workbook.active_sheet_id,
        "sheets": [
            {
                "id": sheet.id,
                "name": sheet.name,
                "columns": [
                    {"id": col.id, "name": col.name, "kind": col.kind.value}
                    for col in sheet.columns
                ],
                "rows": [
                    {
                        "id": row.id,
                        "selected": row.selected,
                        "cells": {k: _encode_cell(v) for k, v in row.cells.items()},
                    }
                    for row in sheet.rows
                ],
            }
            for sheet in workbook.sheets
        ],
    }


def _decode_sheet(data: Dict[str, Any]) -> Sheet:
    columns = tuple(
        Column(id=c["id"], name=c["name"], kind=ColumnKind(c["kind"]))
        for c in data["columns"]
    )
    rows = tuple(
        Row(
            id=r["id"],
            cells={k: _decode_cell(v) for k, v in r.get("cells", {}).items()},
            selected=bool(r.get("selected", False)),
        )
        for r in data["rows"]
    )
    return Sheet(id=data["id"], name=data["name"], columns=columns, rows=rows)


def deserialize(data: Dict[str, Any]) -> Workbook:
    """Deserialize a workbook from a dictionary.

    Args:
        data: Dictionary containing serialized workbook data

    Returns:
        Reconstructed, validated Workbook

    Raises:
        TypeError: If data is not a dictionary
        SnapshotFormatError: If data is missing fields or has an unknown version
        WorkbookInvariantError: If the decoded workbook breaks an invariant
    """
    if not isinstance(data, dict):
        raise TypeError(f"Expected dict, got {type(data)}")

    for key in ("version", "sheets"):
        if key not in data:
            raise SnapshotFormatError(f"Serialized workbook must have '{key}' field")

    version = data["version"]
    if version != SERIALIZATION_VERSION:
        raise SnapshotFormatError(
            f"Unsupported serialization version: {version}. "
            f"Expected {SERIALIZATION_VERSION}"
        )

    try:
        sheets = [_decode_sheet(s) for s in data["sheets"]]
    except SnapshotFormatError:
        raise
    except KeyError as e:
        raise SnapshotFormatError(f"Missing required field in sheet: {e}") from e
    except (TypeError, ValueError) as e:
        raise SnapshotFormatError(f"Failed to decode sheet: {e}") from e

    return Workbook.from_sheets(sheets, data.get("active_sheet_id"))


def to_json(workbook: Workbook, **kwargs) -> str:
    """Serialize a workbook to a JSON string.

    Args:
        workbook: The workbook to serialize
        **kwargs: Additional arguments to pass to json.dumps (e.g., indent=2)
    """
    return json.dumps(serialize(workbook), **kwargs)


def from_json(json_str: str) -> Workbook:
    """Deserialize a workbook from a JSON string.

    Raises:
        TypeError: If json_str is not a string
        SnapshotFormatError: If JSON is invalid or the structure is invalid
    """
    if not isinstance(json_str, str):
        raise TypeError(f"Expected str, got {type(json_str)}")

    try:
        data = json.loads(json_str)
    except json.JSONDecodeError as e:
        raise SnapshotFormatError(f"Invalid JSON: {e}") from e

    return deserialize(data)

