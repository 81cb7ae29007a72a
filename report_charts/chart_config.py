from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Tuple

from report_charts.data import ORDERS, PERFORMANCE, PRODUCTS


BAR_CHART = "barChart"
PIE_CHART = "pieChart"
LINE_CHART = "lineChart"

SECONDARY_COLOR = "#6c757d"

VISUALIZATION_COLORS = (
    "#FF4747",
    "#FF6A00",
    "#20C997",
    "#0D6EFD",
    "#FFC107",
    "#6F42C1",
    "#20c9c9",
    "#fd7e14",
    "#0dcaf0",
    "#198754",
)


def _palette(red: int, green: int, blue: int) -> Tuple[str, ...]:
    return tuple(f"rgba({red}, {green}, {blue}, {alpha})" for alpha in (0.7, 0.6, 0.5, 0.4, 0.3, 0.2))


@dataclass(frozen=True)
class ColorScheme:
    primary: str
    secondary: str
    palette: Tuple[str, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {"primary": self.primary, "secondary": self.secondary, "palette": list(self.palette)}


@dataclass(frozen=True)
class ChartConfig:
    show_bar_chart: bool = True
    show_pie_chart: bool = True
    show_line_chart: bool = True
    show_tables: bool = True
    show_summary: bool = True
    dashboard_charts: Tuple[str, ...] = field(default_factory=lambda: (BAR_CHART, PIE_CHART, LINE_CHART))
    bar_chart_title: str = ""
    pie_chart_title: str = ""
    line_chart_title: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "showBarChart": self.show_bar_chart,
            "showPieChart": self.show_pie_chart,
            "showLineChart": self.show_line_chart,
            "showTables": self.show_tables,
            "showSummary": self.show_summary,
            "dashboardCharts": list(self.dashboard_charts),
            "barChartTitle": self.bar_chart_title,
            "pieChartTitle": self.pie_chart_title,
            "lineChartTitle": self.line_chart_title,
        }


_ORDERS_COLORS = ColorScheme(primary="#0d6efd", secondary=SECONDARY_COLOR, palette=_palette(13, 110, 253))

COLOR_SCHEMES: Dict[str, ColorScheme] = {
    ORDERS: _ORDERS_COLORS,
    PRODUCTS: ColorScheme(primary="#198754", secondary=SECONDARY_COLOR, palette=_palette(25, 135, 84)),
    PERFORMANCE: ColorScheme(primary="#6f42c1", secondary=SECONDARY_COLOR, palette=_palette(111, 66, 193)),
}
DEFAULT_COLOR_SCHEME = _ORDERS_COLORS

BASE_CHART_CONFIG = ChartConfig()

CHART_CONFIGS: Dict[str, ChartConfig] = {
    ORDERS: replace(
        BASE_CHART_CONFIG,
        bar_chart_title="Top Products by Sales Value",
        pie_chart_title="Order Status Distribution",
        line_chart_title="Sales Trend Over Time",
    ),
    PRODUCTS: replace(
        BASE_CHART_CONFIG,
        bar_chart_title="Product Inventory Levels",
        pie_chart_title="Products by Category",
        line_chart_title="Product Sales Over Time",
    ),
    PERFORMANCE: replace(
        BASE_CHART_CONFIG,
        bar_chart_title="Completed Orders by Period",
        pie_chart_title="Delivery Performance",
        line_chart_title="Rating Trend",
    ),
}


def get_color_scheme(category: Any) -> ColorScheme:
    if isinstance(category, str) and category in COLOR_SCHEMES:
        return COLOR_SCHEMES[category]
    return DEFAULT_COLOR_SCHEME


def get_chart_config(category: Any) -> ChartConfig:
    if isinstance(category, str) and category in CHART_CONFIGS:
        return CHART_CONFIGS[category]
    return BASE_CHART_CONFIG


def get_visualization_color(index: int) -> str:
    """Cycle through the shared table/legend palette."""
    return VISUALIZATION_COLORS[int(index) % len(VISUALIZATION_COLORS)]
