"""
Spreadsheet edit commands.

This module defines one serializable command per structural edit:
- AddSheet / DeleteSheet / RenameSheet / SetActiveSheet
- AddColumn / DeleteColumn / RenameColumn / RetypeColumn
- AddRow / DeleteRow
- WriteCell
- ToggleRowSelected / SelectAll

A host UI builds commands from user gestures and applies them to its single
workbook reference. Commands are plain data, so they can be queued, logged or
sent across a process boundary and rebuilt with ``op_from_dict``.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional, Union

from stockbook.spreadsheet import engine
from stockbook.spreadsheet.engine import EditResult
from stockbook.spreadsheet.model import ColumnKind, Workbook


@dataclass
class AddSheet:
    """Append a new sheet with the default columns.

    Attributes:
        name: Display name; auto-numbered when None
    """
    name: Optional[str] = None

    def apply(self, workbook: Workbook) -> EditResult:
        return engine.add_sheet(workbook, self.name)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {"type": "AddSheet", "name": self.name}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AddSheet":
        """Create from dictionary representation."""
        return cls(name=data.get("name"))


@dataclass
class DeleteSheet:
    """Remove a sheet (never the last one)."""
    sheet_id: str

    def apply(self, workbook: Workbook) -> EditResult:
        return engine.delete_sheet(workbook, self.sheet_id)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "DeleteSheet", "sheet_id": self.sheet_id}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DeleteSheet":
        return cls(sheet_id=data["sheet_id"])


@dataclass
class RenameSheet:
    """Rename a sheet.

    Attributes:
        sheet_id: Target sheet
        name: New display name; blank names are rejected
    """
    sheet_id: str
    name: str

    def apply(self, workbook: Workbook) -> EditResult:
        return engine.rename_sheet(workbook, self.sheet_id, self.name)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "RenameSheet", "sheet_id": self.sheet_id, "name": self.name}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RenameSheet":
        return cls(sheet_id=data["sheet_id"], name=data["name"])


@dataclass
class SetActiveSheet:
    """Switch the active sheet."""
    sheet_id: str

    def apply(self, workbook: Workbook) -> EditResult:
        return engine.set_active_sheet(workbook, self.sheet_id)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "SetActiveSheet", "sheet_id": self.sheet_id}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SetActiveSheet":
        return cls(sheet_id=data["sheet_id"])


@dataclass
class AddColumn:
    """Insert a column; every existing row gets an absent cell for it.

    Attributes:
        sheet_id: Target sheet
        after_column_id: Insert after this column (append when None/unknown)
        name: Display name; auto-numbered when None
        kind: Declared kind of the new column
    """
    sheet_id: str
    after_column_id: Optional[str] = None
    name: Optional[str] = None
    kind: ColumnKind = ColumnKind.TEXT

    def apply(self, workbook: Workbook) -> EditResult:
        return engine.add_column(
            workbook, self.sheet_id, self.after_column_id, self.name, self.kind
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "AddColumn",
            "sheet_id": self.sheet_id,
            "after_column_id": self.after_column_id,
            "name": self.name,
            "kind": self.kind.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AddColumn":
        return cls(
            sheet_id=data["sheet_id"],
            after_column_id=data.get("after_column_id"),
            name=data.get("name"),
            kind=ColumnKind(data.get("kind", ColumnKind.TEXT.value)),
        )


@dataclass
class DeleteColumn:
    """Remove a column and its cells (never the last column)."""
    sheet_id: str
    column_id: str

    def apply(self, workbook: Workbook) -> EditResult:
        return engine.delete_column(workbook, self.sheet_id, self.column_id)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "DeleteColumn", "sheet_id": self.sheet_id, "column_id": self.column_id}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DeleteColumn":
        return cls(sheet_id=data["sheet_id"], column_id=data["column_id"])


@dataclass
class RenameColumn:
    """Rename a column; names need not be unique."""
    sheet_id: str
    column_id: str
    name: str

    def apply(self, workbook: Workbook) -> EditResult:
        return engine.rename_column(workbook, self.sheet_id, self.column_id, self.name)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "RenameColumn",
            "sheet_id": self.sheet_id,
            "column_id": self.column_id,
            "name": self.name,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RenameColumn":
        return cls(sheet_id=data["sheet_id"], column_id=data["column_id"], name=data["name"])


@dataclass
class RetypeColumn:
    """Toggle a column's kind, or set it when ``kind`` is given.

    Stored values are not converted.
    """
    sheet_id: str
    column_id: str
    kind: Optional[ColumnKind] = None

    def apply(self, workbook: Workbook) -> EditResult:
        return engine.retype_column(workbook, self.sheet_id, self.column_id, self.kind)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "RetypeColumn",
            "sheet_id": self.sheet_id,
            "column_id": self.column_id,
            "kind": self.kind.value if self.kind is not None else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RetypeColumn":
        kind = data.get("kind")
        return cls(
            sheet_id=data["sheet_id"],
            column_id=data["column_id"],
            kind=ColumnKind(kind) if kind is not None else None,
        )


@dataclass
class AddRow:
    """Insert an empty row after ``after_row_id`` (append when None/unknown)."""
    sheet_id: str
    after_row_id: Optional[str] = None

    def apply(self, workbook: Workbook) -> EditResult:
        return engine.add_row(workbook, self.sheet_id, self.after_row_id)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "AddRow", "sheet_id": self.sheet_id, "after_row_id": self.after_row_id}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AddRow":
        return cls(sheet_id=data["sheet_id"], after_row_id=data.get("after_row_id"))


@dataclass
class DeleteRow:
    """Remove a row."""
    sheet_id: str
    row_id: str

    def apply(self, workbook: Workbook) -> EditResult:
        return engine.delete_row(workbook, self.sheet_id, self.row_id)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "DeleteRow", "sheet_id": self.sheet_id, "row_id": self.row_id}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DeleteRow":
        return cls(sheet_id=data["sheet_id"], row_id=data["row_id"])


@dataclass
class WriteCell:
    """Write raw editor input to one cell.

    Attributes:
        sheet_id: Target sheet
        row_id: Target row
        column_id: Target column; its kind decides coercion
        value: Raw input (usually the text typed by the user)
    """
    sheet_id: str
    row_id: str
    column_id: str
    value: Any

    def apply(self, workbook: Workbook) -> EditResult:
        return engine.write_cell(workbook, self.sheet_id, self.row_id, self.column_id, self.value)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "WriteCell",
            "sheet_id": self.sheet_id,
            "row_id": self.row_id,
            "column_id": self.column_id,
            "value": self.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WriteCell":
        return cls(
            sheet_id=data["sheet_id"],
            row_id=data["row_id"],
            column_id=data["column_id"],
            value=data.get("value"),
        )


@dataclass
class ToggleRowSelected:
    """Flip one row's selection flag."""
    sheet_id: str
    row_id: str

    def apply(self, workbook: Workbook) -> EditResult:
        return engine.toggle_row_selected(workbook, self.sheet_id, self.row_id)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "ToggleRowSelected", "sheet_id": self.sheet_id, "row_id": self.row_id}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ToggleRowSelected":
        return cls(sheet_id=data["sheet_id"], row_id=data["row_id"])


@dataclass
class SelectAll:
    """Select or deselect every row of a sheet."""
    sheet_id: str
    selected: bool = True

    def apply(self, workbook: Workbook) -> EditResult:
        return engine.select_all(workbook, self.sheet_id, self.selected)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "SelectAll", "sheet_id": self.sheet_id, "selected": self.selected}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SelectAll":
        return cls(sheet_id=data["sheet_id"], selected=bool(data.get("selected", True)))


# Type alias for all command types
EditOp = Union[
    AddSheet, DeleteSheet, RenameSheet, SetActiveSheet,
    AddColumn, DeleteColumn, RenameColumn, RetypeColumn,
    AddRow, DeleteRow, WriteCell, ToggleRowSelected, SelectAll,
]

_OP_TYPES = {
    cls.__name__: cls
    for cls in (
        AddSheet, DeleteSheet, RenameSheet, SetActiveSheet,
        AddColumn, DeleteColumn, RenameColumn, RetypeColumn,
        AddRow, DeleteRow, WriteCell, ToggleRowSelected, SelectAll,
    )
}


def op_from_dict(data: Dict[str, Any]) -> EditOp:
    """Deserialize an edit command from dictionary representation.

    Args:
        data: Dictionary with 'type' key indicating the command type

    Returns:
        The corresponding command object

    Raises:
        ValueError: If the command type is unknown
    """
    op_type = data.get("type")
    op_cls = _OP_TYPES.get(op_type)
    if op_cls is None:
        raise ValueError(f"Unknown operation type: {op_type}")
    return op_cls.from_dict(data)


def apply_all(workbook: Workbook, ops: Iterable[EditOp]) -> Workbook:
    """Apply commands in order and return the final workbook.

    Rejected commands leave the workbook as it was and the sequence continues.
    """
    for op in ops:
        workbook = op.apply(workbook).workbook
    return workbook
