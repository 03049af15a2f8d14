"""
Google Sheets sync client.

This module pushes a sheet's export projection to a Google Sheets worksheet
and pulls a worksheet back into a ``Sheet`` via gspread, wrapping API errors
in ``SheetsAPIError``. Pulled worksheets go through the same header and
column-kind inference as file imports.
"""

from typing import Any, List, Optional

import gspread
from gspread.exceptions import APIError, WorksheetNotFound

from stockbook.exceptions import SheetsAPIError
from stockbook.io.importer import sheet_from_table
from stockbook.spreadsheet.export import Selection, rows_for_export
from stockbook.spreadsheet.model import Sheet
from stockbook.utils.logging import get_logger

logger = get_logger(__name__)


def _cell(value: Any) -> Any:
    """Export values as written to a worksheet; absent becomes blank."""
    return "" if value is None else value


class SheetsClient:
    """
    A wrapper around gspread for syncing sheets with Google Sheets.

    Attributes:
        gc: The authenticated gspread client instance
    """

    def __init__(self, gc: gspread.Client) -> None:
        """
        Initialize the client with an authenticated gspread client.

        Args:
            gc: An authenticated gspread client, e.g. from ``gspread.service_account()``
                or ``gspread.oauth()``.
        """
        self.gc = gc

    def open_spreadsheet(self, key: str) -> gspread.Spreadsheet:
        """
        Open a spreadsheet by key.

        Raises:
            SheetsAPIError: If the API call fails
        """
        try:
            return self.gc.open_by_key(key)
        except APIError as e:
            raise SheetsAPIError(f"Failed to open spreadsheet '{key}': {e}") from e

    def get_or_create_worksheet(
        self,
        spreadsheet: gspread.Spreadsheet,
        title: str,
        rows: int = 1000,
        cols: int = 26,
    ) -> gspread.Worksheet:
        """
        Return the worksheet named ``title``, creating it when missing.

        Args:
            spreadsheet: The spreadsheet to look in
            title: Worksheet title
            rows: Rows for a newly created worksheet
            cols: Columns for a newly created worksheet

        Raises:
            SheetsAPIError: If the API call fails
        """
        try:
            return spreadsheet.worksheet(title)
        except WorksheetNotFound:
            pass
        except APIError as e:
            raise SheetsAPIError(f"Failed to look up worksheet '{title}': {e}") from e

        try:
            return spreadsheet.add_worksheet(title=title, rows=rows, cols=cols)
        except APIError as e:
            raise SheetsAPIError(
                f"Failed to add worksheet '{title}' to spreadsheet: {e}"
            ) from e

    def push_sheet(
        self,
        spreadsheet: gspread.Spreadsheet,
        sheet: Sheet,
        selection: Selection = Selection.ALL,
    ) -> int:
        """
        Overwrite the worksheet titled after ``sheet`` with its export projection.

        The first worksheet row holds the column names; absent cells are
        written blank.

        Returns:
            Number of data rows written

        Raises:
            SheetsAPIError: If an API call fails
        """
        header = [col.name for col in sheet.columns]
        # Positional values so duplicate column names keep their own cells.
        rows = [
            [_cell(row.value(col.id).to_python()) for col in sheet.columns]
            for row in rows_for_export(sheet, selection)
        ]
        values: List[List[Any]] = [header] + rows

        worksheet = self.get_or_create_worksheet(
            spreadsheet, sheet.name, rows=max(len(values), 1), cols=max(len(header), 1)
        )
        try:
            worksheet.clear()
            worksheet.update(values, range_name="A1")
        except APIError as e:
            raise SheetsAPIError(
                f"Failed to write {len(rows)} rows to worksheet '{sheet.name}': {e}"
            ) from e

        logger.info("Pushed %d rows to worksheet %r", len(rows), sheet.name)
        return len(rows)

    def pull_sheet(self, spreadsheet: gspread.Spreadsheet, title: str) -> Optional[Sheet]:
        """
        Read a worksheet into a new ``Sheet``.

        Returns:
            The sheet, or None when the worksheet is empty

        Raises:
            SheetsAPIError: If the API call fails or the worksheet is missing
        """
        try:
            values = spreadsheet.worksheet(title).get_all_values()
        except WorksheetNotFound as e:
            raise SheetsAPIError(f"Worksheet '{title}' not found") from e
        except APIError as e:
            raise SheetsAPIError(f"Failed to read worksheet '{title}': {e}") from e

        sheet = sheet_from_table(title, values)
        logger.info("Pulled worksheet %r (%d rows)", title, len(sheet.rows) if sheet else 0)
        return sheet


def client_from_settings(service_account_file: Optional[str] = None) -> SheetsClient:
    """Build a client from a service account key.

    Args:
        service_account_file: Key path; defaults to the configured
            ``google_service_account_file``, then gspread's default location
    """
    if service_account_file is None:
        from stockbook.config import get_settings

        service_account_file = get_settings().google_service_account_file
    if service_account_file:
        gc = gspread.service_account(filename=service_account_file)
    else:
        gc = gspread.service_account()
    return SheetsClient(gc)
