from __future__ import annotations

import re
from typing import Any, Dict, List, Mapping

from report_charts.data import format_date_label, to_float


CURRENCY_PREFIX = "Rs"

_HIDDEN_SUMMARY_KEYS = {"filterApplied", "filterType"}
_CURRENCY_KEYWORDS = ("sales", "revenue", "amount")

METRIC_DESCRIPTIONS = {
    "totalSales": "Total monetary value of all sales in the selected period.",
    "orderCount": "Number of orders placed during the selected period.",
    "averageOrderValue": "Average monetary value per order.",
    "avgOrderValue": "Average monetary value per order.",
    "topProduct": "Product with the highest sales value in the selected period.",
    "uniqueProducts": "Count of distinct products sold during this period.",
    "uniqueCustomers": "Count of distinct customers who made purchases.",
    "totalQuantity": "Total number of products sold across all orders.",
    "totalProducts": "Total number of products in inventory.",
    "totalRevenue": "Revenue earned by the listed products in the selected period.",
    "totalSold": "Units sold across the listed products.",
    "lowStockCount": "Number of products with low inventory levels.",
    "productsLowStock": "Number of products with low inventory levels.",
    "outOfStockCount": "Number of products that are currently out of stock.",
    "productsOutOfStock": "Number of products that are currently out of stock.",
    "avgRevenuePerProduct": "Average revenue per listed product.",
    "totalCompletedOrders": "Orders completed during the selected period.",
    "avgRating": "Customer rating averaged over completed orders.",
    "onTimeDeliveryRate": "Share of completed orders delivered on time.",
    "totalRevisions": "Estimated revisions, derived from late deliveries.",
}


def format_currency(value: Any) -> str:
    number = to_float(value, default=None)
    if number is None:
        return f"{CURRENCY_PREFIX} 0.00"
    return f"{CURRENCY_PREFIX} {number:,.2f}"


def format_number(value: Any) -> str:
    number = to_float(value, default=None)
    if number is None:
        return "0"
    if number.is_integer():
        return f"{int(number):,}"
    return f"{number:,.2f}".rstrip("0").rstrip(".")


def format_percentage(value: Any) -> str:
    number = to_float(value)
    return f"{number:.1f}%"


def format_table_cell(value: Any, column: str) -> str:
    """Format a report table cell based on what its column name suggests."""
    if value is None:
        return "-"

    col = column.lower()
    if "date" in col or "time" in col:
        return format_date_label(value)
    if any(k in col for k in ("price", "amount", "sales", "revenue", "value", "spent")):
        return format_currency(value)
    if any(k in col for k in ("percent", "growth", "rate")):
        return format_percentage(value)
    if any(k in col for k in ("count", "quantity", "number")):
        return format_number(value)
    return str(value)


def summary_display_name(key: str) -> str:
    """Turn a camelCase or snake_case key into a card label, e.g. "Avg Order Value"."""
    name = re.sub(r"([A-Z])", r" \1", key).replace("_", " ").strip()
    return name[:1].upper() + name[1:]


def get_metric_description(key: str) -> str:
    return METRIC_DESCRIPTIONS.get(key, "No description available.")


def format_summary(summary: Mapping[str, Any]) -> List[Dict[str, Any]]:
    cards: List[Dict[str, Any]] = []
    for key, value in summary.items():
        if key in _HIDDEN_SUMMARY_KEYS:
            continue

        is_money = any(k in key.lower() for k in _CURRENCY_KEYWORDS)
        number = None if isinstance(value, bool) else to_float(value, default=None)
        if number is None:
            display = "" if value is None else str(value)
        elif is_money:
            display = format_currency(number)
        else:
            display = format_number(number)

        cards.append(
            {
                "key": key,
                "label": summary_display_name(key),
                "value": value,
                "display": display,
                "description": get_metric_description(key),
            }
        )
    return cards
