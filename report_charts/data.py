from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

import numpy as np
import pandas as pd


ORDERS = "orders"
PRODUCTS = "products"
PERFORMANCE = "performance"
CATEGORIES = (ORDERS, PRODUCTS, PERFORMANCE)

UNCATEGORIZED = "Uncategorized"
UNKNOWN_LABEL = "Unknown"

# Month names are fixed so labels do not depend on the process locale.
_MONTH_ABBR = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def to_float(value: Any, default: Optional[float] = 0.0) -> Optional[float]:
    """Coerce a loosely-typed numeric field; anything unusable becomes `default`."""
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return default
    try:
        out = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(out) or math.isinf(out):
        return default
    return out


def to_int(value: Any, default: int = 0) -> int:
    """Like `to_float` but truncates toward zero ("5.7" -> 5)."""
    number = to_float(value, default=None)
    if number is None:
        return default
    return int(number)


def has_value(value: Any) -> bool:
    """False for None, blank strings and pandas missing markers (NaN, NaT, NA)."""
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    missing = pd.isna(value)
    if isinstance(missing, (bool, np.bool_)):
        return not missing
    return True


def to_label(value: Any, default: str = UNKNOWN_LABEL) -> str:
    if not has_value(value):
        return default
    return str(value)


def parse_date(value: Any) -> Optional[pd.Timestamp]:
    """Parse a date-like value into a naive Timestamp, or None when it can't be read.

    Timezone-aware inputs keep their wall-clock time so the calendar day a
    caller wrote down is the day that gets bucketed. Bare numbers are epoch
    milliseconds. Dates outside the nanosecond range (before 1677 or after
    2262) count as unreadable.
    """
    if not has_value(value) or isinstance(value, bool):
        return None
    try:
        if isinstance(value, (int, float, np.integer, np.floating)):
            ts = pd.to_datetime(value, unit="ms", errors="coerce")
        else:
            ts = pd.to_datetime(value, errors="coerce")
    except (TypeError, ValueError, OverflowError):
        return None
    if not isinstance(ts, pd.Timestamp) or pd.isna(ts):
        return None
    if ts.tzinfo is not None:
        ts = ts.tz_localize(None)
    try:
        return ts.as_unit("ns")
    except (pd.errors.OutOfBoundsDatetime, OverflowError):
        return None


def format_date_label(value: Any) -> str:
    """Render a date as "Jan 5, 2024"; unparseable input is returned unchanged."""
    if value is None:
        return ""
    ts = parse_date(value)
    if ts is None:
        return value if isinstance(value, str) else str(value)
    return f"{_MONTH_ABBR[ts.month - 1]} {ts.day}, {ts.year:04d}"


def parse_dates(values: pd.Series) -> pd.Series:
    """Vector form of `parse_date`; unreadable entries become NaT."""
    parsed = [parse_date(v) for v in values]
    return pd.Series(
        [ts if ts is not None else pd.NaT for ts in parsed],
        index=values.index,
        dtype="datetime64[ns]",
    )


@dataclass(frozen=True)
class OrderRow:
    product_name: str
    total_amount: float
    status: str
    date: Any = None
    order_id: Optional[str] = None

    @classmethod
    def from_mapping(cls, row: Mapping[str, Any]) -> "OrderRow":
        order_id = row.get("order_id")
        return cls(
            product_name=to_label(row.get("product_name")),
            total_amount=to_float(row.get("total_amount")),
            status=to_label(row.get("status")),
            date=row.get("date"),
            order_id=str(order_id) if has_value(order_id) else None,
        )


@dataclass(frozen=True)
class ProductRow:
    product_name: str
    stock_level: float
    category: str
    sales_data: Dict[str, float] = field(default_factory=dict)
    total_sold: float = 0.0
    total_revenue: float = 0.0

    @classmethod
    def from_mapping(cls, row: Mapping[str, Any]) -> "ProductRow":
        raw_sales = row.get("sales_data")
        sales: Dict[str, float] = {}
        if isinstance(raw_sales, Mapping):
            sales = {str(k): to_float(v) for k, v in raw_sales.items()}
        return cls(
            product_name=to_label(row.get("product_name")),
            stock_level=to_float(row.get("stock_level")),
            category=to_label(row.get("category"), UNCATEGORIZED),
            sales_data=sales,
            total_sold=to_float(row.get("total_sold")),
            total_revenue=to_float(row.get("total_revenue")),
        )


@dataclass(frozen=True)
class PerformanceRow:
    period: str
    completed_orders: float
    on_time: int
    late: int
    early: int
    rating: float

    @classmethod
    def from_mapping(cls, row: Mapping[str, Any]) -> "PerformanceRow":
        return cls(
            period=to_label(row.get("period"), ""),
            completed_orders=to_float(row.get("completed_orders")),
            on_time=to_int(row.get("on_time")),
            late=to_int(row.get("late")),
            early=to_int(row.get("early")),
            rating=to_float(row.get("rating")),
        )


ReportRecord = Union[OrderRow, ProductRow, PerformanceRow]

ROW_TYPES = {
    ORDERS: OrderRow,
    PRODUCTS: ProductRow,
    PERFORMANCE: PerformanceRow,
}


def as_rows(rows: Union[None, pd.DataFrame, Iterable[Any]]) -> List[Mapping[str, Any]]:
    """Normalize the caller's row collection to a list of mappings.

    Entries that are not mappings are kept as empty records so every field
    falls back to its default instead of failing.
    """
    if rows is None:
        return []
    if isinstance(rows, pd.DataFrame):
        rows = rows.to_dict(orient="records")
    elif isinstance(rows, (str, bytes, Mapping)) or not isinstance(rows, Iterable):
        return []
    return [row if isinstance(row, Mapping) else {} for row in rows]


def to_records(category: str, rows: Union[None, pd.DataFrame, Iterable[Any]]) -> List[ReportRecord]:
    row_type = ROW_TYPES.get(category) if isinstance(category, str) else None
    if row_type is None:
        return []
    return [row_type.from_mapping(row) for row in as_rows(rows)]
