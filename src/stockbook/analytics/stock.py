"""
Stock-status analytics over the export projection.

Records come from ``export_sheet`` and carry whatever column names the user
chose, so the stock, cost and threshold columns are located through ordered
alias lists rather than a fixed schema. Numbers are read with
``coercion.to_number`` so that a retyped column still holding text is read
the same way everywhere.

Classification boundaries (minimum exclusive-low, maximum inclusive-high):

    stock <  minimum            -> LOW
    minimum <= stock < maximum  -> CORRECT
    stock >= maximum            -> HIGH
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Mapping, Optional, Sequence

from stockbook.exceptions import MissingStockColumnError
from stockbook.spreadsheet.coercion import to_number

STOCK_ALIASES = ("Stock Actual", "stock_actual", "Stock")
COST_ALIASES = ("Coste Unit.", "coste_unitario", "Coste", "Precio")
MINIMUM_ALIASES = ("Stock Mínimo", "stock_minimo")
MAXIMUM_ALIASES = ("Stock Máximo", "stock_maximo")
NAME_ALIASES = ("Producto", "Nombre", "nombre")


class StockStatus(Enum):
    """Stock level of a product relative to its thresholds."""

    LOW = "bajo"
    CORRECT = "correcto"
    HIGH = "alto"


@dataclass(frozen=True)
class Thresholds:
    """Stock thresholds. ``ideal`` is informational only.

    Attributes:
        minimum: Below this the product is low
        ideal: Target level shown to users
        maximum: At or above this the product is high
    """

    minimum: float = 10
    ideal: float = 50
    maximum: float = 100


def classify_stock(stock: float, thresholds: Thresholds) -> StockStatus:
    """Classify a stock quantity against ``thresholds``."""
    if stock < thresholds.minimum:
        return StockStatus.LOW
    if stock >= thresholds.maximum:
        return StockStatus.HIGH
    return StockStatus.CORRECT


def has_alias(record: Mapping[str, Any], aliases: Sequence[str]) -> bool:
    return any(alias in record for alias in aliases)


def lookup_number(record: Mapping[str, Any], aliases: Sequence[str]) -> Optional[float]:
    """First alias present in ``record`` whose value reads as a number."""
    for alias in aliases:
        if alias in record:
            value = to_number(record[alias])
            if value is not None:
                return value
    return None


def lookup_text(record: Mapping[str, Any], aliases: Sequence[str]) -> Optional[str]:
    """First alias present in ``record`` with a non-blank value, as text."""
    for alias in aliases:
        value = record.get(alias)
        if value is None:
            continue
        text = str(value).strip()
        if text:
            return text
    return None


def record_stock(record: Mapping[str, Any]) -> float:
    """Stock quantity of a record; 0 when the stock cell is missing or empty."""
    stock = lookup_number(record, STOCK_ALIASES)
    return stock if stock is not None else 0.0


def classify_record(record: Mapping[str, Any], thresholds: Thresholds) -> StockStatus:
    """Classify one exported record against global thresholds."""
    return classify_stock(record_stock(record), thresholds)


def has_stock_column(records: Sequence[Mapping[str, Any]]) -> bool:
    """True if any record carries one of the stock column aliases."""
    return any(has_alias(r, STOCK_ALIASES) for r in records)


@dataclass
class StockCalculation:
    """Aggregate stock figures for a set of records.

    Attributes:
        total_products: Number of records
        total_stock: Sum of stock quantities
        mean_unit_cost: Mean of the positive unit costs (0 when there are none)
        low_count / correct_count / high_count: Records per status
        low_products / correct_products / high_products: Product names per status
    """

    total_products: int = 0
    total_stock: float = 0.0
    mean_unit_cost: float = 0.0
    low_count: int = 0
    correct_count: int = 0
    high_count: int = 0
    low_products: List[str] = field(default_factory=list)
    correct_products: List[str] = field(default_factory=list)
    high_products: List[str] = field(default_factory=list)


def calculate_stock(
    records: Sequence[Mapping[str, Any]],
    thresholds: Optional[Thresholds] = None,
) -> StockCalculation:
    """Compute stock totals and status counts for exported records.

    Args:
        records: Export projection rows
        thresholds: Global thresholds; defaults to ``Thresholds()``

    Returns:
        The aggregate calculation (all zeros for no records)

    Raises:
        MissingStockColumnError: If records exist but none has a stock column
    """
    thresholds = thresholds or Thresholds()
    result = StockCalculation()
    if not records:
        return result
    if not has_stock_column(records):
        raise MissingStockColumnError(
            f"No stock column found; expected one of {list(STOCK_ALIASES)}"
        )

    cost_total = 0.0
    cost_count = 0
    for index, record in enumerate(records):
        stock = record_stock(record)
        result.total_stock += stock

        cost = lookup_number(record, COST_ALIASES)
        if cost is not None and cost > 0:
            cost_total += cost
            cost_count += 1

        name = lookup_text(record, NAME_ALIASES) or f"#{index + 1}"
        status = classify_stock(stock, thresholds)
        if status is StockStatus.LOW:
            result.low_count += 1
            result.low_products.append(name)
        elif status is StockStatus.HIGH:
            result.high_count += 1
            result.high_products.append(name)
        else:
            result.correct_count += 1
            result.correct_products.append(name)

    result.total_products = len(records)
    result.mean_unit_cost = cost_total / cost_count if cost_count else 0.0
    return result


@dataclass
class KPISummary:
    """Dashboard indicators.

    ``critical``/``healthy``/``excess`` use per-record minimum and maximum
    columns when present, the global thresholds otherwise.
    """

    total_products: int = 0
    total_stock: float = 0.0
    inventory_value: float = 0.0
    critical: int = 0
    healthy: int = 0
    excess: int = 0
    avg_days_of_stock: int = 0


def kpi_summary(
    records: Sequence[Mapping[str, Any]],
    thresholds: Optional[Thresholds] = None,
    daily_consumption: float = 10.0,
) -> KPISummary:
    """Dashboard indicators for exported records.

    Args:
        records: Export projection rows
        thresholds: Fallback thresholds for records without their own
        daily_consumption: Average units consumed per product per day

    Returns:
        The summary; all zeros for no records
    """
    thresholds = thresholds or Thresholds()
    summary = KPISummary()
    if not records:
        return summary

    for record in records:
        stock = record_stock(record)
        cost = lookup_number(record, COST_ALIASES) or 0.0
        summary.total_stock += stock
        summary.inventory_value += stock * cost

        minimum = lookup_number(record, MINIMUM_ALIASES)
        maximum = lookup_number(record, MAXIMUM_ALIASES)
        row_thresholds = Thresholds(
            minimum=minimum if minimum is not None else thresholds.minimum,
            ideal=thresholds.ideal,
            maximum=maximum if maximum is not None else thresholds.maximum,
        )
        status = classify_stock(stock, row_thresholds)
        if status is StockStatus.LOW:
            summary.critical += 1
        elif status is StockStatus.HIGH:
            summary.excess += 1
        else:
            summary.healthy += 1

    summary.total_products = len(records)
    if summary.total_stock > 0 and daily_consumption > 0:
        summary.avg_days_of_stock = round(
            summary.total_stock / summary.total_products / daily_consumption
        )
    return summary
