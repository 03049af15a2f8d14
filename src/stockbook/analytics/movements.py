"""Stock movement ledger.

A movement records a change to a numeric cell: which product, which column,
the value before and after, and whether stock came in, went out, or was
adjusted. The ledger keeps the newest movements first and drops the oldest
beyond its limit.
"""

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Tuple

from stockbook.analytics.stock import NAME_ALIASES
from stockbook.spreadsheet.coercion import to_number
from stockbook.spreadsheet.model import ColumnKind, Workbook, new_id


class MovementKind(Enum):
    INBOUND = "entrada"
    OUTBOUND = "salida"
    ADJUSTMENT = "ajuste"


@dataclass(frozen=True)
class Movement:
    """One recorded change to a numeric cell."""

    id: str
    product_name: str
    column_name: str
    previous_value: Optional[float]
    new_value: Optional[float]
    kind: MovementKind
    timestamp: datetime
    sheet_name: Optional[str] = None


def classify_movement(previous: Optional[float], new: Optional[float]) -> MovementKind:
    """INBOUND on increase, OUTBOUND on decrease, ADJUSTMENT otherwise."""
    if previous is None or new is None:
        return MovementKind.ADJUSTMENT
    if new > previous:
        return MovementKind.INBOUND
    if new < previous:
        return MovementKind.OUTBOUND
    return MovementKind.ADJUSTMENT


@dataclass(frozen=True)
class MovementLog:
    """Newest-first ledger capped at ``limit`` entries."""

    movements: Tuple[Movement, ...] = ()
    limit: int = 100

    def record(self, movement: Movement) -> "MovementLog":
        return replace(self, movements=((movement,) + self.movements)[: self.limit])

    def filter(self, kind: Optional[MovementKind] = None) -> Tuple[Movement, ...]:
        if kind is None:
            return self.movements
        return tuple(m for m in self.movements if m.kind is kind)

    def clear(self) -> "MovementLog":
        return replace(self, movements=())

    def __len__(self) -> int:
        return len(self.movements)


def new_movement_log(limit: Optional[int] = None) -> MovementLog:
    """Empty ledger; the limit defaults to ``movement_history_limit``."""
    if limit is None:
        from stockbook.config import get_settings

        limit = get_settings().movement_history_limit
    return MovementLog(limit=limit)


def movement_for_edit(
    before: Workbook,
    after: Workbook,
    sheet_id: str,
    row_id: str,
    column_id: str,
    now: Optional[datetime] = None,
) -> Optional[Movement]:
    """Describe the change a cell edit made to a Number column.

    Returns None when the column is not numeric, the ids are stale, or the
    numeric value did not change.
    """
    old_sheet = before.sheet(sheet_id)
    new_sheet = after.sheet(sheet_id)
    if old_sheet is None or new_sheet is None:
        return None
    column = new_sheet.column(column_id)
    old_row = old_sheet.row(row_id)
    new_row = new_sheet.row(row_id)
    if column is None or column.kind is not ColumnKind.NUMBER or old_row is None or new_row is None:
        return None

    previous = to_number(old_row.value(column_id))
    current = to_number(new_row.value(column_id))
    if previous == current:
        return None

    product_name = ""
    for alias in NAME_ALIASES:
        for col in new_sheet.columns:
            if col.name == alias:
                text = new_row.value(col.id).to_python()
                if text is not None and str(text).strip():
                    product_name = str(text).strip()
                    break
        if product_name:
            break

    return Movement(
        id=new_id("mov"),
        product_name=product_name,
        column_name=column.name,
        previous_value=previous,
        new_value=current,
        kind=classify_movement(previous, current),
        timestamp=now or datetime.now(timezone.utc),
        sheet_name=new_sheet.name,
    )
