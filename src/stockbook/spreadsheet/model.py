"""
Spreadsheet engine model classes.

This module provides the value types that make up the editor state:
- Text / Number / Absent: the three cell value variants
- Column: a stable-id, renamable, retypeable field definition
- Row: a stable-id record of cell values keyed by column id
- Sheet: one named grid of columns and rows
- Workbook: the ordered collection of sheets plus the active sheet id

All types are frozen. Mutation happens only through the pure functions in
``stockbook.spreadsheet.engine``, which build new values.
"""

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, Iterator, Mapping, Optional, Tuple, Union

from stockbook.exceptions import WorkbookInvariantError


class ColumnKind(Enum):
    """Declared type of a column; drives coercion on cell writes."""

    TEXT = "text"
    NUMBER = "number"

    def toggled(self) -> "ColumnKind":
        return ColumnKind.NUMBER if self is ColumnKind.TEXT else ColumnKind.TEXT


@dataclass(frozen=True)
class Text:
    """A text cell value. The empty string is a legitimate value."""

    value: str

    def to_python(self) -> str:
        return self.value


@dataclass(frozen=True)
class Number:
    """A numeric cell value, always stored as a float."""

    value: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", float(self.value))

    def to_python(self) -> float:
        return self.value


class Absent:
    """The "no value" marker. Use the ``ABSENT`` singleton."""

    _instance: Optional["Absent"] = None

    def __new__(cls) -> "Absent":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def to_python(self) -> None:
        return None

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self):
        return (Absent, ())


ABSENT = Absent()

CellValue = Union[Text, Number, Absent]


def new_id(prefix: str) -> str:
    """Generate an opaque identifier such as ``row-3f2a...``."""
    return f"{prefix}-{uuid.uuid4().hex}"


@dataclass(frozen=True)
class Column:
    """A field definition within a sheet.

    Attributes:
        id: Stable key used in every row's cell map (never changes)
        name: Display name; not required to be unique
        kind: Declared kind used to coerce writes
    """

    id: str
    name: str
    kind: ColumnKind = ColumnKind.TEXT


class CellMap(Mapping):
    """Read-only, hashable mapping from column id to cell value.

    The constructor copies its input, so later changes to the source dict
    never reach a row.
    """

    def __init__(self, cells: Union[Mapping[str, CellValue], Iterable[Tuple[str, CellValue]]] = ()):
        self._cells: Dict[str, CellValue] = dict(cells)

    def __getitem__(self, column_id: str) -> CellValue:
        return self._cells[column_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._cells)

    def __len__(self) -> int:
        return len(self._cells)

    def __hash__(self) -> int:
        return hash(frozenset(self._cells.items()))

    def __repr__(self) -> str:
        return f"CellMap({self._cells!r})"


@dataclass(frozen=True)
class Row:
    """An ordered record of cell values keyed by column id.

    Attributes:
        id: Stable identifier, unchanged by edits and reorders
        cells: Read-only mapping from column id to cell value; any mapping
            passed in is copied into a ``CellMap``
        selected: Whether the row is part of the current selection
    """

    id: str
    cells: Mapping[str, CellValue] = field(default_factory=CellMap)
    selected: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.cells, CellMap):
            object.__setattr__(self, "cells", CellMap(self.cells))

    def value(self, column_id: str) -> CellValue:
        """Return the cell value for ``column_id``, ``ABSENT`` if missing."""
        return self.cells.get(column_id, ABSENT)


@dataclass(frozen=True)
class Sheet:
    """One named grid of typed columns and ordered rows.

    Attributes:
        id: Stable sheet identifier
        name: Display name (tab label)
        columns: Ordered column definitions
        rows: Ordered rows
    """

    id: str
    name: str
    columns: Tuple[Column, ...] = ()
    rows: Tuple[Row, ...] = ()

    def column(self, column_id: str) -> Optional[Column]:
        for col in self.columns:
            if col.id == column_id:
                return col
        return None

    def row(self, row_id: str) -> Optional[Row]:
        for r in self.rows:
            if r.id == row_id:
                return r
        return None

    def column_index(self, column_id: str) -> int:
        """Position of ``column_id`` in the column list, or -1."""
        for idx, col in enumerate(self.columns):
            if col.id == column_id:
                return idx
        return -1

    def row_index(self, row_id: str) -> int:
        """Position of ``row_id`` in the row list, or -1."""
        for idx, r in enumerate(self.rows):
            if r.id == row_id:
                return idx
        return -1

    @property
    def column_ids(self) -> Tuple[str, ...]:
        return tuple(col.id for col in self.columns)

    @property
    def selected_rows(self) -> Tuple[Row, ...]:
        return tuple(r for r in self.rows if r.selected)

    def validate(self) -> None:
        """Check the structural invariants of this sheet.

        Raises:
            WorkbookInvariantError: If column or row ids repeat, or a row
                holds a key for a column that does not exist
        """
        column_ids = self.column_ids
        if len(set(column_ids)) != len(column_ids):
            raise WorkbookInvariantError(f"Sheet {self.id!r} has duplicate column ids")
        row_ids = [r.id for r in self.rows]
        if len(set(row_ids)) != len(row_ids):
            raise WorkbookInvariantError(f"Sheet {self.id!r} has duplicate row ids")
        known = set(column_ids)
        for r in self.rows:
            stray = set(r.cells) - known
            if stray:
                raise WorkbookInvariantError(
                    f"Row {r.id!r} in sheet {self.id!r} references unknown columns: {sorted(stray)}"
                )

    def __repr__(self) -> str:
        return (
            f"Sheet(id={self.id!r}, name={self.name!r}, "
            f"columns={len(self.columns)}, rows={len(self.rows)})"
        )


@dataclass(frozen=True)
class Workbook:
    """The full engine state.

    Attributes:
        sheets: Ordered sheets; never empty
        active_sheet_id: Id of the sheet the editor is showing
    """

    sheets: Tuple[Sheet, ...]
    active_sheet_id: str

    @classmethod
    def from_sheets(cls, sheets: Iterable[Sheet], active_sheet_id: Optional[str] = None) -> "Workbook":
        """Build a workbook from sheets; the first sheet is active by default.

        Raises:
            WorkbookInvariantError: If ``sheets`` is empty or invalid
        """
        sheets = tuple(sheets)
        if not sheets:
            raise WorkbookInvariantError("A workbook needs at least one sheet")
        workbook = cls(sheets=sheets, active_sheet_id=active_sheet_id or sheets[0].id)
        workbook.validate()
        return workbook

    def sheet(self, sheet_id: str) -> Optional[Sheet]:
        for s in self.sheets:
            if s.id == sheet_id:
                return s
        return None

    @property
    def active_sheet(self) -> Sheet:
        return self.sheet(self.active_sheet_id) or self.sheets[0]

    def validate(self) -> None:
        """Check workbook-level and per-sheet invariants.

        Raises:
            WorkbookInvariantError: On any violation
        """
        if not self.sheets:
            raise WorkbookInvariantError("A workbook needs at least one sheet")
        sheet_ids = [s.id for s in self.sheets]
        if len(set(sheet_ids)) != len(sheet_ids):
            raise WorkbookInvariantError("Workbook has duplicate sheet ids")
        if self.active_sheet_id not in sheet_ids:
            raise WorkbookInvariantError(
                f"Active sheet {self.active_sheet_id!r} is not in the workbook"
            )
        for s in self.sheets:
            s.validate()


# Baseline inventory columns. Names match the aliases analytics looks up.
DEFAULT_COLUMNS: Tuple[Column, ...] = (
    Column("nombre", "Producto", ColumnKind.TEXT),
    Column("stock_actual", "Stock Actual", ColumnKind.NUMBER),
    Column("stock_minimo", "Stock Mínimo", ColumnKind.NUMBER),
    Column("stock_maximo", "Stock Máximo", ColumnKind.NUMBER),
    Column("coste", "Coste Unit.", ColumnKind.NUMBER),
)

MONTH_NAMES: Tuple[str, ...] = (
    "Enero", "Febrero", "Marzo", "Abril", "Mayo", "Junio",
    "Julio", "Agosto", "Septiembre", "Octubre", "Noviembre", "Diciembre",
)


def empty_cells(columns: Iterable[Column]) -> Dict[str, CellValue]:
    """Cell map with an ``ABSENT`` entry for every column."""
    return {col.id: ABSENT for col in columns}


def new_sheet(name: str, columns: Iterable[Column] = DEFAULT_COLUMNS) -> Sheet:
    """Create an empty sheet with a fresh id."""
    return Sheet(id=new_id("sheet"), name=name, columns=tuple(columns), rows=())


def new_workbook() -> Workbook:
    """Create the default editor state: one sheet with the default columns."""
    return Workbook.from_sheets([new_sheet("Sheet 1")])


def monthly_workbook() -> Workbook:
    """Create a workbook with one empty sheet per month of the year."""
    return Workbook.from_sheets([new_sheet(month) for month in MONTH_NAMES])
