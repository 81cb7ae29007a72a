import math

import pandas as pd
import pytest

from report_charts.pipeline import (
    ChartSeries,
    PieSlice,
    prepare_bar_chart_data,
    prepare_line_chart_data,
    prepare_pie_chart_data,
)


ZERO_SERIES = {"labels": [], "values": [], "isCurrency": False, "title": ""}


# ---------- bar ----------

def test_orders_bar_groups_and_sums_by_product():
    rows = [
        {"product_name": "Mug", "total_amount": "100"},
        {"product_name": "Mug", "total_amount": "50"},
        {"product_name": "Vase", "total_amount": "30"},
    ]
    assert prepare_bar_chart_data("orders", rows).to_dict() == {
        "labels": ["Mug", "Vase"],
        "values": [150, 30],
        "isCurrency": True,
        "title": "Top Products by Sales Value",
    }


def test_orders_bar_keeps_top_seven_sorted_descending():
    rows = [{"product_name": f"P{i}", "total_amount": str(i * 10)} for i in range(1, 11)]
    series = prepare_bar_chart_data("orders", rows)
    assert len(series.labels) == 7
    assert series.labels[0] == "P10"
    assert series.values == sorted(series.values, reverse=True)


def test_orders_bar_ties_keep_first_seen_order():
    rows = [
        {"product_name": "Bowl", "total_amount": 20},
        {"product_name": "Cup", "total_amount": 50},
        {"product_name": "Plate", "total_amount": 20},
        {"product_name": "Jug", "total_amount": "20.0"},
    ]
    series = prepare_bar_chart_data("orders", rows)
    assert series.labels == ["Cup", "Bowl", "Plate", "Jug"]


def test_orders_bar_treats_bad_amounts_as_zero():
    rows = [
        {"product_name": "Mug", "total_amount": "abc"},
        {"product_name": "Mug"},
        {"product_name": "Mug", "total_amount": None},
        {"product_name": "Vase", "total_amount": "12.5"},
    ]
    series = prepare_bar_chart_data("orders", rows)
    assert series.labels == ["Vase", "Mug"]
    assert series.values == [12.5, 0.0]


def test_products_bar_sorts_by_stock_and_caps_at_seven():
    rows = [{"product_name": f"P{i}", "stock_level": i, "category": "A"} for i in range(9)]
    series = prepare_bar_chart_data("products", rows)
    assert series.labels == ["P8", "P7", "P6", "P5", "P4", "P3", "P2"]
    assert series.values == [8, 7, 6, 5, 4, 3, 2]
    assert series.is_currency is False
    assert series.title == "Product Inventory Levels"


def test_performance_bar_is_chronological_without_cap():
    rows = [{"period": f"2024-{m:02d}", "completed_orders": str(m)} for m in range(12, 0, -1)]
    series = prepare_bar_chart_data("performance", rows)
    assert series.labels == [f"2024-{m:02d}" for m in range(1, 13)]
    assert series.values == [float(m) for m in range(1, 13)]
    assert series.title == "Completed Orders by Period"


def test_performance_bar_puts_unreadable_periods_last():
    rows = [
        {"period": "not a date", "completed_orders": "1"},
        {"period": "2024-02", "completed_orders": "2"},
        {"period": "2024-01", "completed_orders": "x"},
    ]
    series = prepare_bar_chart_data("performance", rows)
    assert series.labels == ["2024-01", "2024-02", "not a date"]
    assert series.values == [0.0, 2.0, 1.0]


def test_out_of_range_period_sorts_last_with_raw_label():
    rows = [
        {"period": "1500-01-01", "completed_orders": "4"},
        {"period": "2024-01", "completed_orders": "2"},
    ]
    series = prepare_bar_chart_data("performance", rows)
    assert series.labels == ["2024-01", "1500-01-01"]
    assert series.values == [2.0, 4.0]

    line = prepare_line_chart_data("performance", {"data": rows})
    assert line.labels == ["2024-01", "1500-01-01"]


def test_orders_line_keeps_out_of_range_date_as_label():
    report = {"data": [{"date": "9999-12-31", "total_amount": 5}, {"date": "2024-03-02", "total_amount": 1}]}
    series = prepare_line_chart_data("orders", report)
    assert series.labels == ["Mar 2, 2024", "9999-12-31"]
    assert series.values == [1.0, 5.0]


def test_products_line_sorts_out_of_range_keys_last():
    report = {"data": [{"product_name": "A", "sales_data": {"0001-01-01": 1, "2024-01-01": 2}}]}
    series = prepare_line_chart_data("products", report)
    assert series.labels == ["2024-01-01", "0001-01-01"]
    assert series.values == [2.0, 1.0]


def test_orders_line_reads_numeric_dates_as_epoch_milliseconds():
    report = {"data": [{"date": 1704412800000, "total_amount": 2}, {"date": "2024-01-05", "total_amount": 3}]}
    series = prepare_line_chart_data("orders", report)
    assert series.labels == ["Jan 5, 2024"]
    assert series.values == [5.0]


def test_bar_unknown_category_is_zero_series():
    assert prepare_bar_chart_data("unknown", [{"anything": 1}]).to_dict() == ZERO_SERIES


@pytest.mark.parametrize("rows", [None, [], pd.DataFrame()])
@pytest.mark.parametrize("category", ["orders", "products", "performance"])
def test_bar_empty_rows_is_zero_series(category, rows):
    assert prepare_bar_chart_data(category, rows).to_dict() == ZERO_SERIES


def test_bar_accepts_dataframe_rows():
    df = pd.DataFrame(
        [
            {"product_name": "Mug", "total_amount": 10.0},
            {"product_name": "Mug", "total_amount": 5.0},
        ]
    )
    assert prepare_bar_chart_data("orders", df).values == [15.0]


def test_custom_top_n():
    rows = [{"product_name": f"P{i}", "total_amount": i} for i in range(10)]
    assert len(prepare_bar_chart_data("orders", rows, top_n=3).labels) == 3


# ---------- pie ----------

def test_orders_pie_counts_statuses():
    rows = [
        {"status": "Completed"},
        {"status": "Pending"},
        {"status": "Completed"},
        {"status": "Completed"},
    ]
    slices = prepare_pie_chart_data("orders", rows)
    assert [s.label for s in slices] == ["Completed", "Pending"]
    assert [s.value for s in slices] == [3, 1]
    assert slices[0].percentage == pytest.approx(75.0)


def test_products_pie_coalesces_missing_category():
    rows = [
        {"product_name": "A", "category": "Pottery"},
        {"product_name": "B"},
        {"product_name": "C", "category": ""},
        {"product_name": "D", "category": None},
    ]
    slices = prepare_pie_chart_data("products", rows)
    assert [(s.label, s.value) for s in slices] == [("Pottery", 1), ("Uncategorized", 3)]


def test_performance_pie_single_row():
    slices = prepare_pie_chart_data("performance", [{"on_time": "5", "late": "0", "early": "0"}])
    assert [s.to_dict() for s in slices] == [
        {"label": "On Time", "value": 5, "percentage": 100},
        {"label": "Late", "value": 0, "percentage": 0},
        {"label": "Early", "value": 0, "percentage": 0},
    ]


def test_performance_pie_zero_total_is_empty():
    assert prepare_pie_chart_data("performance", [{"on_time": "0", "late": "0", "early": "0"}]) == []


def test_performance_pie_truncates_like_integers():
    slices = prepare_pie_chart_data("performance", [{"on_time": "2.9", "late": "1", "early": "bad"}])
    assert [s.value for s in slices] == [2, 1, 0]


@pytest.mark.parametrize(
    "category, rows",
    [
        ("orders", [{"status": s} for s in ["a", "b", "c", "a", "b", "a", "d"]]),
        ("products", [{"category": c} for c in ["x", "y", None, "z", "x", "y"]]),
        ("performance", [{"on_time": "3", "late": "1", "early": "2"}, {"on_time": "7", "late": "0", "early": "1"}]),
    ],
)
def test_pie_percentages_sum_to_hundred(category, rows):
    slices = prepare_pie_chart_data(category, rows)
    assert slices
    assert math.isclose(sum(s.percentage for s in slices), 100.0, abs_tol=1e-9)
    assert all(0 <= s.percentage <= 100 for s in slices)


def test_pie_unknown_or_empty_is_empty():
    assert prepare_pie_chart_data("unknown", [{"status": "x"}]) == []
    assert prepare_pie_chart_data("orders", []) == []
    assert prepare_pie_chart_data("orders", None) == []


# ---------- line ----------

def test_orders_line_collapses_same_day():
    report = {"data": [{"date": "2024-01-05", "total_amount": "10"}, {"date": "2024-01-05", "total_amount": "5"}]}
    series = prepare_line_chart_data("orders", report)
    assert series.labels == ["Jan 5, 2024"]
    assert series.values == [15]
    assert series.is_currency is True


def test_orders_line_buckets_by_calendar_day_and_sorts():
    report = {
        "data": [
            {"date": "2024-02-01T18:30:00", "total_amount": 4},
            {"date": "2023-12-31", "total_amount": 1},
            {"date": "2024-02-01T08:00:00", "total_amount": 6},
            {"date": "2024-01-15", "total_amount": "2.5"},
            {"total_amount": 99},
        ]
    }
    series = prepare_line_chart_data("orders", report)
    assert series.labels == ["Dec 31, 2023", "Jan 15, 2024", "Feb 1, 2024"]
    assert series.values == [1.0, 2.5, 10.0]
    assert series.title == "Daily Sales Trend"


def test_orders_line_keeps_unparseable_dates_as_labels():
    report = {"data": [{"date": "someday", "total_amount": 3}, {"date": "2024-03-02", "total_amount": 1}]}
    series = prepare_line_chart_data("orders", report)
    assert series.labels == ["Mar 2, 2024", "someday"]
    assert series.values == [1.0, 3.0]


def test_products_line_merges_sales_data():
    report = {
        "data": [
            {"product_name": "A", "sales_data": {"2024-01-02": "10", "2024-01-01": 1}},
            {"product_name": "B", "sales_data": {"2024-01-02": 5.5, "2024-01-03": "bad"}},
            {"product_name": "C"},
        ]
    }
    series = prepare_line_chart_data("products", report)
    assert series.labels == ["2024-01-01", "2024-01-02", "2024-01-03"]
    assert series.values == [1.0, 15.5, 0.0]
    assert series.is_currency is True
    assert series.title == "Product Sales Trend"


def test_performance_line_uses_rating_in_period_order():
    report = {"data": [{"period": "2024-03", "rating": "4.5"}, {"period": "2024-01", "rating": None}]}
    series = prepare_line_chart_data("performance", report)
    assert series.to_dict() == {
        "labels": ["2024-01", "2024-03"],
        "values": [0.0, 4.5],
        "isCurrency": False,
        "title": "Rating Trend",
    }


class _Wrapper:
    def __init__(self, data):
        self.data = data


def test_line_accepts_object_wrapper():
    series = prepare_line_chart_data("performance", _Wrapper([{"period": "2024-01", "rating": "3"}]))
    assert series.values == [3.0]


@pytest.mark.parametrize("report", [None, {}, {"data": None}, {"data": []}, _Wrapper(None)])
def test_line_empty_is_zero_series(report):
    assert prepare_line_chart_data("orders", report).to_dict() == ZERO_SERIES


def test_line_unknown_category_is_zero_series():
    assert prepare_line_chart_data("unknown", {"data": [{"date": "2024-01-01"}]}) == ChartSeries()


# ---------- purity ----------

def test_preparation_is_repeatable_and_does_not_touch_input():
    rows = [
        {"product_name": "Mug", "total_amount": "1.1", "status": "Done", "date": "2024-01-01"},
        {"product_name": "Vase", "total_amount": "2.2", "status": "Open", "date": "2024-01-02"},
    ]
    snapshot = [dict(r) for r in rows]
    first = (
        prepare_bar_chart_data("orders", rows),
        prepare_pie_chart_data("orders", rows),
        prepare_line_chart_data("orders", {"data": rows}),
    )
    second = (
        prepare_bar_chart_data("orders", rows),
        prepare_pie_chart_data("orders", rows),
        prepare_line_chart_data("orders", {"data": rows}),
    )
    assert first == second
    assert rows == snapshot
    assert isinstance(first[1][0], PieSlice)
