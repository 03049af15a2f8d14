"""
Google Sheets sync.

Pushes export projections to worksheets and pulls worksheets back into sheets.
"""

from stockbook.sync.sheets_client import SheetsClient, client_from_settings

__all__ = ["SheetsClient", "client_from_settings"]
