"""
Tests for sales aggregation and trend analysis
"""
from datetime import date, datetime

import pytest

from stockroom.business.analytics.sales_aggregation import (
    build_daily_series,
    product_demand,
    series_totals,
    window_dates,
)
from stockroom.business.analytics.trend_analysis import analyze_sales_trend, percent_change, product_status

TODAY = date(2024, 3, 10)


def test_window_is_dense_and_ends_today():
    dates = window_dates(7, TODAY)
    assert len(dates) == 7
    assert dates[0] == date(2024, 3, 4)
    assert dates[-1] == TODAY


def test_window_rejects_non_positive_length():
    with pytest.raises(ValueError):
        window_dates(0, TODAY)


def test_daily_series_fills_missing_days_and_ignores_outside_orders():
    orders = [
        (datetime(2024, 3, 10, 9, 30), 50.0),
        (datetime(2024, 3, 10, 17, 0), 25.5),
        (datetime(2024, 3, 8, 12, 0), 10.0),
        (datetime(2024, 3, 1, 12, 0), 999.0),  # before the window
    ]
    series = build_daily_series(orders, 7, TODAY)
    assert [point.date for point in series][-1] == '2024-03-10'
    assert len(series) == 7
    by_date = {point.date: point for point in series}
    assert by_date['2024-03-10'].total_sales == 75.5
    assert by_date['2024-03-10'].order_count == 2
    assert by_date['2024-03-08'].order_count == 1
    assert by_date['2024-03-05'].total_sales == 0
    assert series_totals(series)['total_sales'] == 85.5
    assert series[0].to_dict() == {'date': '2024-03-04', 'totalSales': 0.0, 'orderCount': 0}


def test_product_demand_is_average_over_window():
    demand = product_demand([(1, 30), (1, 15), (2, 3), (None, 100)], window_days=30)
    assert demand == {1: 1.5, 2: 0.1}


def test_percent_change_guards_zero_baseline():
    assert percent_change(0, 0) == 0
    assert percent_change(0, 10) == 100
    assert percent_change(50, 75) == 50


def test_trend_needs_at_least_two_points():
    assert analyze_sales_trend([]).direction == 'insufficient data'
    single = analyze_sales_trend([{'date': '2024-03-10', 'totalSales': 5, 'orderCount': 1}])
    assert single.details == 'Not enough data for trend analysis'


def test_upward_trend():
    series = [
        {'date': '2024-03-01', 'totalSales': 100, 'orderCount': 1},
        {'date': '2024-03-02', 'totalSales': 100, 'orderCount': 1},
        {'date': '2024-03-03', 'totalSales': 200, 'orderCount': 2},
        {'date': '2024-03-04', 'totalSales': 200, 'orderCount': 2},
    ]
    trend = analyze_sales_trend(series)
    # Totals double, average order value unchanged
    assert trend.direction == 'upward'
    assert trend.percentage_change == 50
    assert trend.status == 'strong growth'
    assert trend.confidence == 'low'


def test_flat_zero_series_is_stable():
    series = [{'date': f'2024-03-0{d}', 'totalSales': 0, 'orderCount': 0} for d in range(1, 5)]
    trend = analyze_sales_trend(series)
    assert trend.direction == 'stable'
    assert trend.status == 'stable'


def test_product_status():
    assert product_status(25, 3) == 'excellent'
    assert product_status(5, 3) == 'good'
    assert product_status(0, 3) == 'fair'
    assert product_status(-10, 0) == 'fair'
    assert product_status(-10, 3) == 'poor'
