"""
Unit tests for the movement ledger.

These tests verify:
1. classify_movement direction rules
2. movement_for_edit only reports changed Number cells and names the product
3. MovementLog keeps the newest first, caps its size and filters by kind
"""

from datetime import datetime, timezone

import pytest

from stockbook.analytics.movements import (
    Movement,
    MovementKind,
    MovementLog,
    classify_movement,
    movement_for_edit,
    new_movement_log,
)
from stockbook.spreadsheet.engine import write_cell


NOW = datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc)


def _movement(n, kind=MovementKind.INBOUND):
    return Movement(
        id=f"m{n}",
        product_name="X",
        column_name="Stock Actual",
        previous_value=0.0,
        new_value=float(n),
        kind=kind,
        timestamp=NOW,
    )


class TestClassifyMovement:

    @pytest.mark.parametrize("previous, new, expected", [
        (5, 8, MovementKind.INBOUND),
        (8, 5, MovementKind.OUTBOUND),
        (5, 5, MovementKind.ADJUSTMENT),
        (None, 5, MovementKind.ADJUSTMENT),
        (5, None, MovementKind.ADJUSTMENT),
    ])
    def test_direction(self, previous, new, expected):
        assert classify_movement(previous, new) is expected

    def test_kind_values(self):
        assert [k.value for k in MovementKind] == ["entrada", "salida", "ajuste"]


class TestMovementForEdit:

    def test_stock_increase(self, inventory):
        sheet_id = inventory.active_sheet_id
        after = write_cell(inventory, sheet_id, "r0", "c1", "25").workbook

        movement = movement_for_edit(inventory, after, sheet_id, "r0", "c1", now=NOW)

        assert movement.kind is MovementKind.INBOUND
        assert movement.product_name == "Tornillos"
        assert movement.column_name == "Stock Actual"
        assert movement.previous_value == 5.0
        assert movement.new_value == 25.0
        assert movement.timestamp == NOW
        assert movement.sheet_name == "Inventario"
        assert movement.id.startswith("mov-")

    def test_stock_decrease(self, inventory):
        sheet_id = inventory.active_sheet_id
        after = write_cell(inventory, sheet_id, "r1", "c1", "30").workbook
        movement = movement_for_edit(inventory, after, sheet_id, "r1", "c1")
        assert movement.kind is MovementKind.OUTBOUND
        assert movement.timestamp.tzinfo is not None

    def test_first_value_is_adjustment(self, inventory):
        sheet_id = inventory.active_sheet_id
        after = write_cell(inventory, sheet_id, "r3", "c1", "12").workbook
        movement = movement_for_edit(inventory, after, sheet_id, "r3", "c1")
        assert movement.kind is MovementKind.ADJUSTMENT
        assert movement.previous_value is None

    def test_unchanged_value(self, inventory):
        sheet_id = inventory.active_sheet_id
        after = write_cell(inventory, sheet_id, "r0", "c1", "5").workbook
        assert movement_for_edit(inventory, after, sheet_id, "r0", "c1") is None

    def test_text_column_is_ignored(self, inventory):
        sheet_id = inventory.active_sheet_id
        after = write_cell(inventory, sheet_id, "r0", "c0", "Pernos").workbook
        assert movement_for_edit(inventory, after, sheet_id, "r0", "c0") is None

    def test_stale_ids(self, inventory):
        sheet_id = inventory.active_sheet_id
        assert movement_for_edit(inventory, inventory, "missing", "r0", "c1") is None
        assert movement_for_edit(inventory, inventory, sheet_id, "missing", "c1") is None
        assert movement_for_edit(inventory, inventory, sheet_id, "r0", "missing") is None


class TestMovementLog:

    def test_newest_first(self):
        log = MovementLog().record(_movement(1)).record(_movement(2))
        assert [m.id for m in log.movements] == ["m2", "m1"]
        assert len(log) == 2

    def test_record_returns_new_log(self):
        log = MovementLog()
        updated = log.record(_movement(1))
        assert len(log) == 0
        assert len(updated) == 1

    def test_limit_drops_oldest(self):
        log = MovementLog(limit=3)
        for n in range(5):
            log = log.record(_movement(n))
        assert [m.id for m in log.movements] == ["m4", "m3", "m2"]

    def test_filter_and_clear(self):
        log = (
            MovementLog()
            .record(_movement(1))
            .record(_movement(2, MovementKind.OUTBOUND))
        )
        assert [m.id for m in log.filter(MovementKind.OUTBOUND)] == ["m2"]
        assert len(log.filter()) == 2
        assert len(log.clear()) == 0

    def test_default_limit_from_settings(self, monkeypatch):
        from stockbook.config import reset_settings

        assert new_movement_log().limit == 100
        monkeypatch.setenv("STOCKBOOK_MOVEMENT_HISTORY_LIMIT", "5")
        reset_settings()
        assert new_movement_log().limit == 5
        assert new_movement_log(limit=7).limit == 7
