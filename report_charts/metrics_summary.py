from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict

import pandas as pd

from report_charts.data import ORDERS, PERFORMANCE, PRODUCTS, to_records


LOW_STOCK_THRESHOLD = 10
REVISIONS_PER_LATE_ORDER = 1.5


def _frame(category: str, rows: Any) -> pd.DataFrame:
    return pd.DataFrame([asdict(r) for r in to_records(category, rows)])


def _orders_summary(df: pd.DataFrame) -> Dict[str, Any]:
    if df.empty:
        return {"totalSales": 0.0, "orderCount": 0, "avgOrderValue": 0.0, "topProduct": "None", "uniqueProducts": 0}

    total_sales = float(df["total_amount"].sum())
    # One order spans several rows (one per line item); rows without an id count on their own.
    with_id = df["order_id"].dropna()
    order_count = int(with_id.nunique()) + int(df["order_id"].isna().sum())
    by_product = (
        df.groupby("product_name", sort=False)["total_amount"]
        .sum()
        .sort_values(ascending=False, kind="stable")
    )
    return {
        "totalSales": total_sales,
        "orderCount": order_count,
        "avgOrderValue": total_sales / order_count if order_count else 0.0,
        "topProduct": str(by_product.index[0]) if not by_product.empty else "None",
        "uniqueProducts": int(len(by_product)),
    }


def _products_summary(df: pd.DataFrame) -> Dict[str, Any]:
    if df.empty:
        return {}

    total_products = int(len(df))
    total_revenue = float(df["total_revenue"].sum())
    stock = df["stock_level"]
    return {
        "totalProducts": total_products,
        "totalRevenue": total_revenue,
        "totalSold": int(df["total_sold"].astype(int).sum()),
        "lowStockCount": int(((stock > 0) & (stock < LOW_STOCK_THRESHOLD)).sum()),
        "outOfStockCount": int((stock <= 0).sum()),
        "avgRevenuePerProduct": total_revenue / total_products if total_products else 0.0,
    }


def _performance_summary(df: pd.DataFrame) -> Dict[str, Any]:
    if df.empty:
        return {"totalCompletedOrders": 0, "avgRating": 0.0, "onTimeDeliveryRate": 0.0, "totalRevisions": 0.0}

    completed = df["completed_orders"].astype(int)
    total_completed = int(completed.sum())
    weighted_rating = float((df["rating"] * completed).sum())
    total_on_time = int(df["on_time"].sum())
    total_late = int(df["late"].sum())
    return {
        "totalCompletedOrders": total_completed,
        "avgRating": weighted_rating / total_completed if total_completed else 0.0,
        "onTimeDeliveryRate": (total_on_time / total_completed) * 100 if total_completed else 0.0,
        "totalRevisions": total_late * REVISIONS_PER_LATE_ORDER,
    }


_SUMMARIES = {
    ORDERS: _orders_summary,
    PRODUCTS: _products_summary,
    PERFORMANCE: _performance_summary,
}


def compute_summary(category: Any, rows: Any) -> Dict[str, Any]:
    """Headline KPIs for a report, keyed the way the report cards expect them."""
    summarize = _SUMMARIES.get(category) if isinstance(category, str) else None
    if summarize is None:
        return {}
    return summarize(_frame(category, rows))
