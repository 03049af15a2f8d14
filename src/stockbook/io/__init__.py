"""
Tabular import.

Converts spreadsheet files into sheets, inferring each column's kind from a
fixed sample of data rows.
"""

from stockbook.io.importer import (
    INFERENCE_SAMPLE_ROWS,
    ImportMode,
    apply_import,
    build_cell,
    import_sheets,
    import_workbook,
    infer_column_kind,
    read_tables,
    sheet_from_table,
    trim_table,
)

__all__ = [
    "INFERENCE_SAMPLE_ROWS",
    "ImportMode",
    "apply_import",
    "build_cell",
    "import_sheets",
    "import_workbook",
    "infer_column_kind",
    "read_tables",
    "sheet_from_table",
    "trim_table",
]
