from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, Optional

from report_charts.chart_config import BAR_CHART, LINE_CHART, PIE_CHART, get_chart_config, get_color_scheme
from report_charts.charts import bar_chart_spec, line_chart_spec, pie_chart_spec
from report_charts.filters import ReportFilters, apply_filters
from report_charts.formatters import format_summary
from report_charts.metrics_summary import compute_summary
from report_charts.pipeline import prepare_bar_chart_data, prepare_line_chart_data, prepare_pie_chart_data


def compute_report(
    category: Any,
    rows: Any,
    *,
    filters: Optional[ReportFilters] = None,
    include_specs: bool = True,
) -> Dict[str, Any]:
    """Everything a report view needs for one category, as plain JSON-ready data."""
    filters = filters or ReportFilters()
    data = apply_filters(category, rows, filters)

    config = get_chart_config(category)
    colors = get_color_scheme(category)
    bar = prepare_bar_chart_data(category, data, top_n=filters.top_n)
    pie = prepare_pie_chart_data(category, data)
    line = prepare_line_chart_data(category, {"data": data})
    summary = compute_summary(category, data)

    charts: Dict[str, Any] = {}
    if include_specs:
        if config.show_bar_chart and bar.labels:
            charts[BAR_CHART] = bar_chart_spec(bar, colors)
        if config.show_pie_chart and pie:
            charts[PIE_CHART] = pie_chart_spec(pie, colors, title=config.pie_chart_title)
        if config.show_line_chart and line.labels:
            charts[LINE_CHART] = line_chart_spec(line, colors)

    return {
        "category": category,
        "filters": asdict(filters),
        "rowCount": len(data),
        "config": config.to_dict(),
        "colors": colors.to_dict(),
        "summary": summary,
        "summaryCards": format_summary(summary),
        "bar": bar.to_dict(),
        "pie": [s.to_dict() for s in pie],
        "line": line.to_dict(),
        "charts": charts,
    }
