"""
Cell value coercion.

Write path: ``coerce_for_kind`` turns raw editor input into a cell value
according to the column's declared kind. Number columns never hold a
non-numeric value; input that does not parse becomes ``ABSENT``.

Read path: ``to_number`` re-parses a stored value as a number. Retyping a
column does not convert what is already stored, so every numeric consumer
(analytics, movements, dataframe export) reads through this function.
"""

import math
from typing import Any, Optional

from stockbook.spreadsheet.model import ABSENT, Absent, CellValue, ColumnKind, Number, Text


def parse_number(raw: Any) -> Optional[float]:
    """Parse ``raw`` as a finite number.

    Accepts ints, floats and numeric strings (surrounding whitespace allowed).
    Booleans, blank strings, NaN and infinities are rejected.

    Returns:
        The float value, or None if ``raw`` is not numeric
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        try:
            value = float(raw)
        except OverflowError:
            return None
    elif isinstance(raw, str):
        text = raw.strip()
        if not text:
            return None
        try:
            value = float(text)
        except ValueError:
            return None
    else:
        try:
            value = float(raw)
        except (TypeError, ValueError, OverflowError):
            return None
    if math.isnan(value) or math.isinf(value):
        return None
    return value


def is_blank(raw: Any) -> bool:
    """True for None, NaN and whitespace-only strings."""
    if raw is None:
        return True
    if isinstance(raw, float) and math.isnan(raw):
        return True
    if isinstance(raw, str) and not raw.strip():
        return True
    return False


def coerce_number(raw: Any) -> CellValue:
    """Coerce ``raw`` for a Number column: ``Number`` or ``ABSENT``."""
    if isinstance(raw, Number):
        return raw
    if isinstance(raw, Text):
        raw = raw.value
    value = parse_number(raw)
    if value is None:
        return ABSENT
    return Number(value)


def coerce_text(raw: Any) -> CellValue:
    """Coerce ``raw`` for a Text column. Empty strings are kept as text."""
    if raw is None or isinstance(raw, Absent):
        return ABSENT
    if isinstance(raw, Text):
        return raw
    if isinstance(raw, Number):
        return Text(format_number(raw.value))
    return Text(raw if isinstance(raw, str) else str(raw))


def coerce_for_kind(kind: ColumnKind, raw: Any) -> CellValue:
    """Coerce raw editor input for a column of the given kind."""
    if kind is ColumnKind.NUMBER:
        return coerce_number(raw)
    return coerce_text(raw)


def to_number(value: Any) -> Optional[float]:
    """Read a stored or exported value as a number.

    Works on cell variants and on plain exported values, so a Number-kind
    column still holding legacy text is read consistently.
    """
    if isinstance(value, Number):
        return value.value
    if isinstance(value, Absent):
        return None
    if isinstance(value, Text):
        return parse_number(value.value)
    return parse_number(value)


def format_number(value: float) -> str:
    """Render a float without a trailing ``.0`` when it is integral."""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))
