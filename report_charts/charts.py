from __future__ import annotations

from typing import Any, Dict, List, Sequence

import altair as alt
import pandas as pd

from report_charts.chart_config import ColorScheme
from report_charts.formatters import CURRENCY_PREFIX
from report_charts.pipeline import ChartSeries, PieSlice

alt.data_transformers.disable_max_rows()


def to_vega_spec(chart: alt.Chart) -> Dict[str, Any]:
    """Convert an Altair chart into a Vega-Lite spec dict (JSON-serializable)."""
    return chart.to_dict()


def _label_order(labels: Sequence[str]) -> List[str]:
    return list(dict.fromkeys(labels))


def _value_axis(series: ChartSeries) -> alt.Y:
    title = CURRENCY_PREFIX if series.is_currency else None
    fmt = ",.2f" if series.is_currency else "~s"
    return alt.Y("value:Q", title=title, axis=alt.Axis(format=fmt, gridDash=[4, 4], domain=False, ticks=False))


def _titled(chart: alt.Chart, title: str) -> alt.Chart:
    return chart.properties(title=title) if title else chart


def bar_chart_spec(series: ChartSeries, colors: ColorScheme) -> Dict[str, Any]:
    if not series.labels:
        return {}
    df = pd.DataFrame({"label": series.labels, "value": series.values})
    value_format = ",.2f" if series.is_currency else ",.0f"
    chart = (
        alt.Chart(df)
        .mark_bar(color=colors.primary, cornerRadiusTopLeft=3, cornerRadiusTopRight=3)
        .encode(
            x=alt.X("label:N", sort=_label_order(series.labels), title=None, axis=alt.Axis(labelAngle=-30, grid=False)),
            y=_value_axis(series),
            tooltip=[
                alt.Tooltip("label:N", title="Label"),
                alt.Tooltip("value:Q", title="Value", format=value_format),
            ],
        )
    )
    return to_vega_spec(_titled(chart, series.title))


def pie_chart_spec(slices: Sequence[PieSlice], colors: ColorScheme, title: str = "") -> Dict[str, Any]:
    if not slices:
        return {}
    df = pd.DataFrame([s.to_dict() for s in slices])
    df["order"] = range(len(df))
    labels = _label_order(df["label"].tolist())
    chart = (
        alt.Chart(df)
        .mark_arc(innerRadius=40)
        .encode(
            theta=alt.Theta("value:Q", stack=True),
            order=alt.Order("order:Q"),
            color=alt.Color("label:N", title=None, scale=alt.Scale(domain=labels, range=list(colors.palette))),
            tooltip=[
                alt.Tooltip("label:N", title="Label"),
                alt.Tooltip("value:Q", title="Count"),
                alt.Tooltip("percentage:Q", title="Share %", format=".1f"),
            ],
        )
    )
    return to_vega_spec(_titled(chart, title))


def line_chart_spec(series: ChartSeries, colors: ColorScheme) -> Dict[str, Any]:
    if not series.labels:
        return {}
    df = pd.DataFrame({"label": series.labels, "value": series.values})
    chart = (
        alt.Chart(df)
        .mark_line(color=colors.primary, point={"filled": True, "size": 60, "color": colors.primary})
        .encode(
            x=alt.X("label:O", sort=_label_order(series.labels), title=None, axis=alt.Axis(grid=False)),
            y=_value_axis(series),
            tooltip=[
                alt.Tooltip("label:O", title="Period"),
                alt.Tooltip("value:Q", title="Value", format=",.2f"),
            ],
        )
    )
    return to_vega_spec(_titled(chart, series.title))
