"""
Unit tests for the Google Sheets sync client.

All tests mock gspread - no real API calls are made, except the live test
at the bottom, which needs --run-slow and a service account.
"""

import os
from unittest.mock import Mock, patch

import gspread
import pytest
from gspread.exceptions import APIError, WorksheetNotFound

from stockbook.exceptions import SheetsAPIError
from stockbook.spreadsheet.export import Selection
from stockbook.spreadsheet.model import ColumnKind, Number, Text
from stockbook.sync.sheets_client import SheetsClient, client_from_settings
from tests.helpers.builders import N, T, make_sheet


def _api_error(message="Quota exceeded", code=429):
    mock_response = Mock()
    mock_response.json.return_value = {
        "error": {
            "code": code,
            "message": message,
            "status": "RESOURCE_EXHAUSTED"
        }
    }
    return APIError(mock_response)


def _client():
    mock_gc = Mock(spec=gspread.Client)
    return SheetsClient(mock_gc), mock_gc


class TestSheetsClient:
    """Test suite for the SheetsClient wrapper."""

    def test_init_stores_gc(self):
        client, mock_gc = _client()
        assert client.gc is mock_gc

    def test_open_spreadsheet(self):
        client, mock_gc = _client()
        mock_spreadsheet = Mock(spec=gspread.Spreadsheet)
        mock_gc.open_by_key.return_value = mock_spreadsheet

        assert client.open_spreadsheet("abc123") is mock_spreadsheet
        mock_gc.open_by_key.assert_called_once_with("abc123")

    def test_open_spreadsheet_api_error(self):
        """APIError during open is re-raised as SheetsAPIError with context."""
        client, mock_gc = _client()
        mock_gc.open_by_key.side_effect = _api_error()

        with pytest.raises(SheetsAPIError) as exc_info:
            client.open_spreadsheet("abc123")

        assert "abc123" in str(exc_info.value)
        assert "Quota exceeded" in str(exc_info.value)

    def test_get_existing_worksheet(self):
        client, _ = _client()
        mock_spreadsheet = Mock(spec=gspread.Spreadsheet)
        mock_worksheet = Mock(spec=gspread.Worksheet)
        mock_spreadsheet.worksheet.return_value = mock_worksheet

        assert client.get_or_create_worksheet(mock_spreadsheet, "Enero") is mock_worksheet
        mock_spreadsheet.add_worksheet.assert_not_called()

    def test_create_missing_worksheet(self):
        client, _ = _client()
        mock_spreadsheet = Mock(spec=gspread.Spreadsheet)
        mock_worksheet = Mock(spec=gspread.Worksheet)
        mock_spreadsheet.worksheet.side_effect = WorksheetNotFound("Enero")
        mock_spreadsheet.add_worksheet.return_value = mock_worksheet

        result = client.get_or_create_worksheet(mock_spreadsheet, "Enero", rows=10, cols=3)

        assert result is mock_worksheet
        mock_spreadsheet.add_worksheet.assert_called_once_with(title="Enero", rows=10, cols=3)

    def test_create_worksheet_api_error(self):
        client, _ = _client()
        mock_spreadsheet = Mock(spec=gspread.Spreadsheet)
        mock_spreadsheet.worksheet.side_effect = WorksheetNotFound("Enero")
        mock_spreadsheet.add_worksheet.side_effect = _api_error("Permission denied", 403)

        with pytest.raises(SheetsAPIError, match="Failed to add worksheet 'Enero'"):
            client.get_or_create_worksheet(mock_spreadsheet, "Enero")


class TestPushSheet:

    def _setup(self):
        client, _ = _client()
        mock_spreadsheet = Mock(spec=gspread.Spreadsheet)
        mock_worksheet = Mock(spec=gspread.Worksheet)
        mock_spreadsheet.worksheet.return_value = mock_worksheet
        return client, mock_spreadsheet, mock_worksheet

    def test_writes_header_and_values(self):
        client, mock_spreadsheet, mock_worksheet = self._setup()
        sheet = make_sheet(
            "Enero",
            [("Producto", T), ("Stock", N)],
            [["Tornillos", 5], ["Clavos", None]],
        )

        written = client.push_sheet(mock_spreadsheet, sheet)

        assert written == 2
        mock_spreadsheet.worksheet.assert_called_once_with("Enero")
        mock_worksheet.clear.assert_called_once()
        mock_worksheet.update.assert_called_once_with(
            [["Producto", "Stock"], ["Tornillos", 5.0], ["Clavos", ""]],
            range_name="A1",
        )

    def test_duplicate_names_keep_their_own_cells(self):
        client, mock_spreadsheet, mock_worksheet = self._setup()
        sheet = make_sheet("S", [("Stock", N), ("Stock", N)], [[1, 2]])

        client.push_sheet(mock_spreadsheet, sheet)

        values = mock_worksheet.update.call_args[0][0]
        assert values == [["Stock", "Stock"], [1.0, 2.0]]

    def test_selected_only(self):
        client, mock_spreadsheet, mock_worksheet = self._setup()
        sheet = make_sheet("S", [("A", T)], [["a"], ["b"]], selected=[1])

        written = client.push_sheet(mock_spreadsheet, sheet, Selection.SELECTED_ONLY)

        assert written == 1
        assert mock_worksheet.update.call_args[0][0] == [["A"], ["b"]]

    def test_update_api_error(self):
        client, mock_spreadsheet, mock_worksheet = self._setup()
        mock_worksheet.update.side_effect = _api_error()
        sheet = make_sheet("Enero", [("A", T)], [["a"]])

        with pytest.raises(SheetsAPIError, match="Failed to write 1 rows to worksheet 'Enero'"):
            client.push_sheet(mock_spreadsheet, sheet)


class TestPullSheet:

    def test_pull_infers_kinds(self):
        client, _ = _client()
        mock_spreadsheet = Mock(spec=gspread.Spreadsheet)
        mock_worksheet = Mock(spec=gspread.Worksheet)
        mock_worksheet.get_all_values.return_value = [
            ["Producto", "Stock"],
            ["Tornillos", "5"],
            ["Tuercas", ""],
        ]
        mock_spreadsheet.worksheet.return_value = mock_worksheet

        sheet = client.pull_sheet(mock_spreadsheet, "Enero")

        assert sheet.name == "Enero"
        assert [c.kind for c in sheet.columns] == [ColumnKind.TEXT, ColumnKind.NUMBER]
        name_col, stock_col = sheet.column_ids
        assert sheet.rows[0].value(name_col) == Text("Tornillos")
        assert sheet.rows[0].value(stock_col) == Number(5)
        assert len(sheet.rows) == 2

    def test_pull_empty_worksheet(self):
        client, _ = _client()
        mock_spreadsheet = Mock(spec=gspread.Spreadsheet)
        mock_spreadsheet.worksheet.return_value.get_all_values.return_value = []
        assert client.pull_sheet(mock_spreadsheet, "Vacía") is None

    def test_pull_missing_worksheet(self):
        client, _ = _client()
        mock_spreadsheet = Mock(spec=gspread.Spreadsheet)
        mock_spreadsheet.worksheet.side_effect = WorksheetNotFound("Nope")

        with pytest.raises(SheetsAPIError, match="Worksheet 'Nope' not found"):
            client.pull_sheet(mock_spreadsheet, "Nope")

    def test_pull_api_error(self):
        client, _ = _client()
        mock_spreadsheet = Mock(spec=gspread.Spreadsheet)
        mock_spreadsheet.worksheet.side_effect = _api_error()

        with pytest.raises(SheetsAPIError, match="Failed to read worksheet"):
            client.pull_sheet(mock_spreadsheet, "Enero")


class TestClientFromSettings:

    def test_explicit_key_file(self):
        with patch("stockbook.sync.sheets_client.gspread.service_account") as factory:
            client = client_from_settings("/keys/sa.json")
        factory.assert_called_once_with(filename="/keys/sa.json")
        assert client.gc is factory.return_value

    def test_key_file_from_settings(self, monkeypatch):
        from stockbook.config import reset_settings

        monkeypatch.setenv("STOCKBOOK_GOOGLE_SERVICE_ACCOUNT_FILE", "/keys/env.json")
        reset_settings()
        with patch("stockbook.sync.sheets_client.gspread.service_account") as factory:
            client_from_settings()
        factory.assert_called_once_with(filename="/keys/env.json")

    def test_default_location(self):
        with patch("stockbook.sync.sheets_client.gspread.service_account") as factory:
            client_from_settings()
        factory.assert_called_once_with()


@pytest.mark.slow
def test_live_push_and_pull():
    """Round-trip a sheet through a real spreadsheet.

    Needs STOCKBOOK_GOOGLE_SERVICE_ACCOUNT_FILE and STOCKBOOK_TEST_SPREADSHEET_KEY.
    """
    key = os.environ.get("STOCKBOOK_TEST_SPREADSHEET_KEY")
    if not key or not os.environ.get("STOCKBOOK_GOOGLE_SERVICE_ACCOUNT_FILE"):
        pytest.skip("live Sheets credentials not configured")

    client = client_from_settings()
    spreadsheet = client.open_spreadsheet(key)
    sheet = make_sheet("stockbook-live", [("Producto", T), ("Stock", N)], [["A", 1], ["B", 2]])

    assert client.push_sheet(spreadsheet, sheet) == 2
    pulled = client.pull_sheet(spreadsheet, "stockbook-live")
    assert [c.kind for c in pulled.columns] == [ColumnKind.TEXT, ColumnKind.NUMBER]
    assert len(pulled.rows) == 2
