"""Core (UI-agnostic) artisan report chart logic.

This package contains:
- row coercion and date helpers
- color schemes and chart configuration per report category
- bar/pie/line chart data preparation (JSON-serializable payloads)
- report summaries, display formatting and row filters
- chart helpers (Altair -> Vega-Lite spec dict)
"""

from report_charts.chart_config import ChartConfig, ColorScheme, get_chart_config, get_color_scheme
from report_charts.pipeline import (
    ChartSeries,
    PieSlice,
    prepare_bar_chart_data,
    prepare_line_chart_data,
    prepare_pie_chart_data,
)

__all__ = [
    "ChartConfig",
    "ChartSeries",
    "ColorScheme",
    "PieSlice",
    "get_chart_config",
    "get_color_scheme",
    "prepare_bar_chart_data",
    "prepare_line_chart_data",
    "prepare_pie_chart_data",
]
