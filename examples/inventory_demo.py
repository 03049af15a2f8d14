"""
Demonstration of the spreadsheet engine and stock analytics.

This script builds an inventory workbook through edit commands, exports the
active sheet, classifies stock, records a movement and snapshots the workbook
to JSON. Pass a path to an .xlsx or .csv file to import it first.

Optional Google Sheets push: set STOCKBOOK_GOOGLE_SERVICE_ACCOUNT_FILE and
pass ``--push <spreadsheet-key>``.
"""

import sys

import stockbook
from stockbook.analytics import new_movement_log
from stockbook.spreadsheet.operations import AddRow, WriteCell, apply_all
from stockbook.sync import client_from_settings


PRODUCTS = [
    ("Tornillos", "5", "10", "100", "0.5"),
    ("Tuercas", "40", "10", "100", "0.25"),
    ("Arandelas", "150", "10", "100", "0.1"),
]
COLUMN_IDS = ["nombre", "stock_actual", "stock_minimo", "stock_maximo", "coste"]


def build_inventory() -> stockbook.Workbook:
    """Fill the default sheet with a few products using edit commands."""
    wb = stockbook.new_workbook()
    sheet_id = wb.active_sheet_id

    for product in PRODUCTS:
        wb = AddRow(sheet_id).apply(wb).workbook
        row_id = wb.active_sheet.rows[-1].id
        wb = apply_all(wb, [
            WriteCell(sheet_id, row_id, column_id, value)
            for column_id, value in zip(COLUMN_IDS, product)
        ])
    return wb


def main():
    print("=" * 70)
    print("Stockbook Inventory Demo")
    print("=" * 70)
    print()

    stockbook.configure_logging()
    args = sys.argv[1:]
    push_key = None
    if "--push" in args:
        idx = args.index("--push")
        push_key = args[idx + 1] if idx + 1 < len(args) else None
        args = args[:idx] + args[idx + 2:]

    wb = build_inventory()
    if args:
        print(f"Importing {args[0]} ...")
        wb = stockbook.import_workbook(wb, args[0], stockbook.ImportMode.APPEND)
        print(f"  Workbook now has {len(wb.sheets)} sheets")
        print()

    print("Active sheet:")
    print(stockbook.render_sheet(wb.active_sheet))
    print()

    records = stockbook.export_workbook_sheet(wb)
    calc = stockbook.calculate_stock(records)
    print("Stock calculation:")
    print(f"  Products:        {calc.total_products}")
    print(f"  Total stock:     {calc.total_stock:g}")
    print(f"  Mean unit cost:  {calc.mean_unit_cost:.2f}")
    print(f"  Low:     {calc.low_count} {calc.low_products}")
    print(f"  Correct: {calc.correct_count} {calc.correct_products}")
    print(f"  High:    {calc.high_count} {calc.high_products}")
    print()

    # Restock the first product and log the movement
    sheet_id = wb.active_sheet_id
    row_id = wb.active_sheet.rows[0].id
    after = stockbook.write_cell(wb, sheet_id, row_id, "stock_actual", "60").workbook
    log = new_movement_log()
    movement = stockbook.movement_for_edit(wb, after, sheet_id, row_id, "stock_actual")
    if movement is not None:
        log = log.record(movement)
        print(
            f"Movement: {movement.kind.value} {movement.product_name} "
            f"{movement.previous_value:g} -> {movement.new_value:g}"
        )
    wb = after

    kpis = stockbook.kpi_summary(stockbook.export_workbook_sheet(wb))
    print(f"KPIs: critical={kpis.critical} healthy={kpis.healthy} excess={kpis.excess} "
          f"value={kpis.inventory_value:.2f} days={kpis.avg_days_of_stock}")
    print()

    snapshot = stockbook.to_json(wb)
    restored = stockbook.from_json(snapshot)
    print(f"Snapshot: {len(snapshot)} bytes, round-trip equal: {restored == wb}")

    if push_key:
        client = client_from_settings()
        spreadsheet = client.open_spreadsheet(push_key)
        written = client.push_sheet(spreadsheet, wb.active_sheet)
        print(f"Pushed {written} rows to {spreadsheet.url}")

    print()
    print("=" * 70)


if __name__ == "__main__":
    main()
