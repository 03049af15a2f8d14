"""
Unit tests for serializable edit commands.

These tests verify:
1. Each command applies the matching engine edit
2. to_dict/from_dict preserve every field, including column kinds
3. op_from_dict dispatches on the "type" key and rejects unknown types
4. apply_all applies a sequence and skips rejected commands
"""

import json

import pytest

from stockbook.spreadsheet.engine import EditStatus
from stockbook.spreadsheet.model import ABSENT, ColumnKind, Number, new_workbook
from stockbook.spreadsheet.operations import (
    AddColumn,
    AddRow,
    AddSheet,
    DeleteColumn,
    DeleteRow,
    DeleteSheet,
    RenameColumn,
    RenameSheet,
    RetypeColumn,
    SelectAll,
    SetActiveSheet,
    ToggleRowSelected,
    WriteCell,
    apply_all,
    op_from_dict,
)


class TestCommandSerialization:

    @pytest.mark.parametrize("op", [
        AddSheet(name="Abril"),
        AddSheet(),
        DeleteSheet(sheet_id="s1"),
        RenameSheet(sheet_id="s1", name="Mayo"),
        SetActiveSheet(sheet_id="s1"),
        AddColumn(sheet_id="s1", after_column_id="c0", name="SKU", kind=ColumnKind.NUMBER),
        DeleteColumn(sheet_id="s1", column_id="c0"),
        RenameColumn(sheet_id="s1", column_id="c0", name="Nombre"),
        RetypeColumn(sheet_id="s1", column_id="c0"),
        RetypeColumn(sheet_id="s1", column_id="c0", kind=ColumnKind.TEXT),
        AddRow(sheet_id="s1", after_row_id="r0"),
        DeleteRow(sheet_id="s1", row_id="r0"),
        WriteCell(sheet_id="s1", row_id="r0", column_id="c0", value="12"),
        ToggleRowSelected(sheet_id="s1", row_id="r0"),
        SelectAll(sheet_id="s1", selected=False),
    ])
    def test_dict_form_rebuilds_the_command(self, op):
        data = op.to_dict()
        assert data["type"] == type(op).__name__
        # Commands must survive a trip through JSON.
        assert op_from_dict(json.loads(json.dumps(data))) == op

    def test_unknown_type_rejected(self):
        with pytest.raises(ValueError, match="Unknown operation type"):
            op_from_dict({"type": "MergeCells"})

    def test_missing_type_rejected(self):
        with pytest.raises(ValueError):
            op_from_dict({"sheet_id": "s1"})


class TestCommandApplication:

    def test_commands_drive_the_engine(self):
        wb = new_workbook()
        sheet_id = wb.active_sheet_id

        result = AddRow(sheet_id=sheet_id).apply(wb)
        assert result.applied
        row_id = result.workbook.active_sheet.rows[0].id

        result = WriteCell(sheet_id, row_id, "stock_actual", "25").apply(result.workbook)
        assert result.workbook.active_sheet.row(row_id).value("stock_actual") == Number(25)

    def test_rejected_command_reports_status(self):
        wb = new_workbook()
        result = DeleteSheet(sheet_id=wb.active_sheet_id).apply(wb)
        assert result.status is EditStatus.LAST_SHEET
        assert result.workbook is wb

    def test_apply_all_runs_in_order(self):
        wb = new_workbook()
        sheet_id = wb.active_sheet_id
        final = apply_all(wb, [
            RenameSheet(sheet_id, "Enero"),
            AddColumn(sheet_id, name="Ubicación"),
            DeleteColumn(sheet_id, "coste"),
            DeleteSheet(sheet_id),  # rejected: last sheet
            AddRow(sheet_id),
            AddSheet("Febrero"),
        ])

        assert [s.name for s in final.sheets] == ["Enero", "Febrero"]
        first = final.sheets[0]
        assert [c.name for c in first.columns][-1] == "Ubicación"
        assert "coste" not in first.column_ids
        assert len(first.rows) == 1
        assert all(v is ABSENT for v in first.rows[0].cells.values())
        assert final.active_sheet.name == "Febrero"
