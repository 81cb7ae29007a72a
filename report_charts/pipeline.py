"""Report rows -> chart-ready bar/pie/line projections.

Every public function is pure: rows are coerced into per-category records,
aggregated with pandas and returned as fresh dataclasses. Categories are
dispatched through `_STRATEGIES`; anything unregistered lands on the fallback
strategy, which returns the neutral result for each projection.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Type, Union

import pandas as pd

from report_charts.data import (
    ORDERS,
    PERFORMANCE,
    PRODUCTS,
    OrderRow,
    PerformanceRow,
    ProductRow,
    ReportRecord,
    as_rows,
    format_date_label,
    has_value,
    parse_date,
    parse_dates,
)


logger = logging.getLogger(__name__)

TOP_N_DEFAULT = 7

Rows = Union[None, pd.DataFrame, Iterable[Any]]


@dataclass(frozen=True)
class ChartSeries:
    labels: List[str] = field(default_factory=list)
    values: List[float] = field(default_factory=list)
    is_currency: bool = False
    title: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "labels": list(self.labels),
            "values": list(self.values),
            "isCurrency": self.is_currency,
            "title": self.title,
        }


@dataclass(frozen=True)
class PieSlice:
    label: str
    value: float
    percentage: float

    def to_dict(self) -> Dict[str, Any]:
        return {"label": self.label, "value": self.value, "percentage": self.percentage}


def _frame(records: Sequence[ReportRecord]) -> pd.DataFrame:
    return pd.DataFrame([asdict(r) for r in records])


def _series(labels: Iterable[Any], values: Iterable[Any], *, is_currency: bool, title: str) -> ChartSeries:
    return ChartSeries(
        labels=[str(x) for x in labels],
        values=[float(v) for v in values],
        is_currency=is_currency,
        title=title,
    )


def _slices(counts: pd.Series, total: float) -> List[PieSlice]:
    return [
        PieSlice(label=str(label), value=int(count), percentage=(int(count) / total) * 100)
        for label, count in counts.items()
    ]


def _chronological(frame: pd.DataFrame, column: str) -> pd.DataFrame:
    """Stable ascending sort on `column` read as a date; unreadable dates go last."""
    return (
        frame.assign(_ts=parse_dates(frame[column]))
        .sort_values("_ts", na_position="last", kind="stable")
        .drop(columns="_ts")
    )


class _ReportStrategy:
    """Fallback: no aggregation rules, neutral results."""

    row_type: Optional[Type[ReportRecord]] = None

    def records(self, rows: Rows) -> List[ReportRecord]:
        if self.row_type is None:
            return []
        return [self.row_type.from_mapping(row) for row in as_rows(rows)]

    def bar(self, records: List[ReportRecord], top_n: int) -> ChartSeries:
        return ChartSeries()

    def pie(self, records: List[ReportRecord]) -> List[PieSlice]:
        return []

    def line(self, records: List[ReportRecord]) -> ChartSeries:
        return ChartSeries()


class _OrdersStrategy(_ReportStrategy):
    row_type = OrderRow

    def bar(self, records, top_n):
        df = _frame(records)
        top = (
            df.groupby("product_name", sort=False)["total_amount"]
            .sum()
            .sort_values(ascending=False, kind="stable")
            .head(top_n)
        )
        return _series(top.index, top.tolist(), is_currency=True, title="Top Products by Sales Value")

    def pie(self, records):
        df = _frame(records)
        return _slices(df.groupby("status", sort=False).size(), len(df))

    def line(self, records):
        dated = [r for r in records if has_value(r.date)]
        if not dated:
            return ChartSeries(is_currency=True, title="Daily Sales Trend")

        # Bucket on the calendar day, not on the rendered label.
        days = []
        labels = []
        for r in dated:
            ts = parse_date(r.date)
            days.append(ts.normalize() if ts is not None else pd.NaT)
            labels.append(format_date_label(ts) if ts is not None else str(r.date))
        df = pd.DataFrame(
            {
                "day": pd.Series(days, dtype="datetime64[ns]"),
                "label": labels,
                "amount": [r.total_amount for r in dated],
            }
        )
        buckets = (
            df.groupby(["day", "label"], sort=False, dropna=False)["amount"]
            .sum()
            .reset_index()
            .sort_values("day", na_position="last", kind="stable")
        )
        return _series(buckets["label"], buckets["amount"], is_currency=True, title="Daily Sales Trend")


class _ProductsStrategy(_ReportStrategy):
    row_type = ProductRow

    def bar(self, records, top_n):
        df = _frame(records)
        top = df.sort_values("stock_level", ascending=False, kind="stable").head(top_n)
        return _series(top["product_name"], top["stock_level"], is_currency=False, title="Product Inventory Levels")

    def pie(self, records):
        df = _frame(records)
        return _slices(df.groupby("category", sort=False).size(), len(df))

    def line(self, records):
        entries = [(date_key, value) for r in records for date_key, value in r.sales_data.items()]
        if not entries:
            return ChartSeries(is_currency=True, title="Product Sales Trend")
        merged = (
            pd.DataFrame(entries, columns=["label", "value"])
            .groupby("label", sort=False)["value"]
            .sum()
            .reset_index()
        )
        merged = _chronological(merged, "label")
        return _series(merged["label"], merged["value"], is_currency=True, title="Product Sales Trend")


class _PerformanceStrategy(_ReportStrategy):
    row_type = PerformanceRow

    def bar(self, records, top_n):
        # Periods are a timeline, so top_n does not apply here.
        df = _chronological(_frame(records), "period")
        return _series(df["period"], df["completed_orders"], is_currency=False, title="Completed Orders by Period")

    def pie(self, records):
        df = _frame(records)
        totals = {
            "On Time": int(df["on_time"].sum()),
            "Late": int(df["late"].sum()),
            "Early": int(df["early"].sum()),
        }
        total = sum(totals.values())
        if total == 0:
            return []
        return [PieSlice(label=k, value=v, percentage=(v / total) * 100) for k, v in totals.items()]

    def line(self, records):
        df = _chronological(_frame(records), "period")
        return _series(df["period"], df["rating"], is_currency=False, title="Rating Trend")


_FALLBACK = _ReportStrategy()

_STRATEGIES: Dict[str, _ReportStrategy] = {
    ORDERS: _OrdersStrategy(),
    PRODUCTS: _ProductsStrategy(),
    PERFORMANCE: _PerformanceStrategy(),
}


def _strategy_for(category: Any) -> _ReportStrategy:
    strategy = _STRATEGIES.get(category) if isinstance(category, str) else None
    if strategy is None:
        logger.debug("No aggregation rules for report category %r; using fallback", category)
        return _FALLBACK
    return strategy


def _report_rows(report: Any) -> Rows:
    if isinstance(report, Mapping):
        return report.get("data")
    return getattr(report, "data", None)


def prepare_bar_chart_data(category: Any, rows: Rows, *, top_n: int = TOP_N_DEFAULT) -> ChartSeries:
    """Bar series for a report.

    orders -> top products by summed sales, products -> top stock levels,
    performance -> completed orders per period in date order.
    """
    strategy = _strategy_for(category)
    records = strategy.records(rows)
    if not records:
        return ChartSeries()
    return strategy.bar(records, max(1, int(top_n)))


def prepare_pie_chart_data(category: Any, rows: Rows) -> List[PieSlice]:
    strategy = _strategy_for(category)
    records = strategy.records(rows)
    if not records:
        return []
    return strategy.pie(records)


def prepare_line_chart_data(category: Any, report: Any) -> ChartSeries:
    """Line series for a report wrapper exposing its rows under `data`."""
    strategy = _strategy_for(category)
    records = strategy.records(_report_rows(report))
    if not records:
        return ChartSeries()
    return strategy.line(records)
