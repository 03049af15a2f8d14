"""
Exception classes for stockbook.

Structural edits never raise: rejected or stale edits come back as an
``EditStatus`` and failed numeric coercion stores ``ABSENT``. The exceptions
below cover the few paths where there is no partial state worth preserving.
"""


class WorkbookImportError(Exception):
    """Raised when a tabular import payload cannot be read.

    The whole import is rejected; no sheet from the payload reaches the
    workbook. Common causes include:
        - Bytes that are not an xlsx/csv document
        - Corrupt or password-protected workbooks
        - A path that does not exist
    """
    pass


class WorkbookInvariantError(Exception):
    """Raised when a workbook value breaks a structural invariant.

    Examples:
        - Duplicate sheet, column or row ids
        - A row holding a cell for a column the sheet does not define
        - An active sheet id that names no sheet
        - A workbook with no sheets
    """
    pass


class SnapshotFormatError(ValueError):
    """Raised when a serialized workbook snapshot is malformed.

    Covers unsupported format versions, missing fields and unknown cell tags.
    """
    pass


class MissingStockColumnError(Exception):
    """Raised when stock figures are requested for records with no stock column.

    The stock column is located through the known aliases
    (``Stock Actual``, ``stock_actual``, ``Stock``).
    """
    pass


class SheetsAPIError(Exception):
    """Raised when a Google Sheets API call fails.

    This error wraps exceptions from the Google Sheets API (via gspread) and
    provides context about which sync operation failed. Common causes include:
        - Authentication failures
        - Rate limiting (HTTP 429)
        - Invalid spreadsheet keys or permission errors
    """
    pass
