"""
stockbook - An in-memory spreadsheet engine for inventory management.

This package models a workbook of named sheets whose columns are typed as
Text or Number. Every edit is a pure function that returns a new workbook and
an edit status, so the caller owns the single current value and can undo by
keeping the old one.

Usage:
    >>> import stockbook
    >>> wb = stockbook.new_workbook()
    >>> sheet = wb.active_sheet
    >>> result = stockbook.add_row(wb, sheet.id)
    >>> records = stockbook.export_workbook_sheet(result.workbook)
    >>> summary = stockbook.calculate_stock(records)

Key components:
- spreadsheet: Workbook model, structural edits, edit commands and export
- io: xlsx/csv import with column kind inference
- analytics: Stock classification, dashboard KPIs and the movement ledger
- sync: Google Sheets push/pull via gspread
- utils: Logging, JSON snapshots and text rendering
"""

from .spreadsheet import *
from .spreadsheet import __all__ as _spreadsheet_all
from .analytics import (
    KPISummary,
    MovementLog,
    StockCalculation,
    StockStatus,
    Thresholds,
    calculate_stock,
    classify_stock,
    kpi_summary,
    movement_for_edit,
)
from .io import ImportMode, import_sheets, import_workbook
from .utils import configure_logging, from_json, render_sheet, to_json
from .exceptions import *

# Version
__version__ = "0.1.0"

__all__ = list(_spreadsheet_all) + [
    'KPISummary',
    'MovementLog',
    'StockCalculation',
    'StockStatus',
    'Thresholds',
    'calculate_stock',
    'classify_stock',
    'kpi_summary',
    'movement_for_edit',
    'ImportMode',
    'import_sheets',
    'import_workbook',
    'configure_logging',
    'from_json',
    'render_sheet',
    'to_json',
    'WorkbookImportError',
    'WorkbookInvariantError',
    'SnapshotFormatError',
    'MissingStockColumnError',
    'SheetsAPIError',
]
