"""
Analytics over the export projection.

- stock: status classification, stock calculation and dashboard KPIs
- movements: ledger of changes to numeric cells
"""

from stockbook.analytics.stock import (
    COST_ALIASES,
    STOCK_ALIASES,
    KPISummary,
    StockCalculation,
    StockStatus,
    Thresholds,
    calculate_stock,
    classify_record,
    classify_stock,
    kpi_summary,
    lookup_number,
)
from stockbook.analytics.movements import (
    Movement,
    MovementKind,
    MovementLog,
    classify_movement,
    movement_for_edit,
    new_movement_log,
)

__all__ = [
    "COST_ALIASES",
    "STOCK_ALIASES",
    "KPISummary",
    "StockCalculation",
    "StockStatus",
    "Thresholds",
    "calculate_stock",
    "classify_record",
    "classify_stock",
    "kpi_summary",
    "lookup_number",
    "Movement",
    "MovementKind",
    "MovementLog",
    "classify_movement",
    "movement_for_edit",
    "new_movement_log",
]
