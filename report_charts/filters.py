from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Mapping, Optional

from report_charts.data import (
    ORDERS,
    PERFORMANCE,
    PRODUCTS,
    UNCATEGORIZED,
    as_rows,
    parse_date,
    to_label,
)
from report_charts.pipeline import TOP_N_DEFAULT


TOP_N_MAX = 50

_DATE_FIELDS = {ORDERS: "date", PERFORMANCE: "period"}


@dataclass(frozen=True)
class ReportFilters:
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: Optional[str] = None
    product_category: Optional[str] = None
    top_n: int = TOP_N_DEFAULT

    @property
    def has_date_range(self) -> bool:
        return self.start_date is not None or self.end_date is not None


def _as_date(value: object) -> Optional[date]:
    ts = parse_date(value)
    return ts.date() if ts is not None else None


def _as_text(value: object) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def normalize_filters(raw: Optional[Mapping[str, Any]]) -> ReportFilters:
    raw = raw or {}

    start_date = _as_date(raw.get("start_date"))
    end_date = _as_date(raw.get("end_date"))
    if start_date and end_date and start_date > end_date:
        start_date, end_date = end_date, start_date

    top_n = raw.get("top_n", TOP_N_DEFAULT)
    try:
        top_n = int(top_n)
    except Exception:
        top_n = TOP_N_DEFAULT
    top_n = max(1, min(TOP_N_MAX, top_n))

    return ReportFilters(
        start_date=start_date,
        end_date=end_date,
        status=_as_text(raw.get("status")),
        product_category=_as_text(raw.get("product_category")),
        top_n=top_n,
    )


def _in_range(value: Any, filters: ReportFilters) -> bool:
    day = _as_date(value)
    if day is None:
        return False
    if filters.start_date and day < filters.start_date:
        return False
    if filters.end_date and day > filters.end_date:
        return False
    return True


def apply_filters(category: Any, rows: Any, filters: Optional[ReportFilters] = None) -> List[Dict[str, Any]]:
    """Narrow a report's rows to the requested window, status and product category.

    Returns a new list; the caller's rows are not touched.
    """
    out = [dict(row) for row in as_rows(rows)]
    if filters is None:
        return out

    if filters.has_date_range:
        date_field = _DATE_FIELDS.get(category) if isinstance(category, str) else None
        if date_field:
            out = [row for row in out if _in_range(row.get(date_field), filters)]

    if category == ORDERS and filters.status:
        wanted = filters.status.lower()
        out = [row for row in out if to_label(row.get("status"), "").lower() == wanted]

    if category == PRODUCTS and filters.product_category:
        wanted = filters.product_category.lower()
        out = [row for row in out if to_label(row.get("category"), UNCATEGORIZED).lower() == wanted]

    return out
