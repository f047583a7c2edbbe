"""
Sales aggregation

Pure functions that turn order rows into daily series and per-product demand.
Nothing here touches the database; services feed it plain tuples.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterable

# Trailing window used for product demand (dailySales)
DEMAND_WINDOW_DAYS = 30

# History fed to per-product sales prediction
PREDICTION_HISTORY_DAYS = 90


@dataclass(frozen=True)
class DailySales:
    date: str  # ISO YYYY-MM-DD, UTC calendar day
    total_sales: float
    order_count: int

    def to_dict(self) -> dict:
        # Report payloads use the client-facing camelCase names
        return {'date': self.date, 'totalSales': self.total_sales, 'orderCount': self.order_count}


def _as_date(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def window_dates(days: int, today: date) -> list[date]:
    """The `days` calendar days ending with (and including) `today`, oldest first"""
    if days < 1:
        raise ValueError("days must be >= 1")
    start = today - timedelta(days=days - 1)
    return [start + timedelta(days=offset) for offset in range(days)]


def window_start(days: int, today: date) -> datetime:
    """Midnight UTC of the first day of the window, for query filters"""
    first = window_dates(days, today)[0]
    return datetime(first.year, first.month, first.day)


def build_daily_series(orders: Iterable[tuple], days: int, today: date) -> list[DailySales]:
    """
    Dense daily series over the window.

    Args:
        orders: (created_at, total_amount) pairs, already filtered by status
        days: window length
        today: last day of the window (UTC)

    Every day of the window is present; days without orders carry zeros.
    Orders outside the window are ignored.
    """
    dates = window_dates(days, today)
    totals = defaultdict(float)
    counts = defaultdict(int)
    first, last = dates[0], dates[-1]
    for created_at, amount in orders:
        day = _as_date(created_at)
        if day < first or day > last:
            continue
        totals[day] += amount or 0.0
        counts[day] += 1

    return [
        DailySales(date=day.isoformat(), total_sales=round(totals[day], 2), order_count=counts[day])
        for day in dates
    ]


def product_demand(lines: Iterable[tuple], window_days: int = DEMAND_WINDOW_DAYS) -> dict[int, float]:
    """
    Average units sold per day for each product.

    Args:
        lines: (product_id, quantity) pairs from qualifying orders in the window
    """
    quantities = defaultdict(int)
    for product_id, quantity in lines:
        if product_id is None:
            continue
        quantities[product_id] += quantity
    return {product_id: qty / window_days for product_id, qty in quantities.items()}


def build_quantity_series(lines: Iterable[tuple], days: int, today: date) -> list[dict]:
    """
    Dense daily units sold for one product.

    Args:
        lines: (created_at, quantity) pairs of the product's order lines
    """
    dates = window_dates(days, today)
    quantities = defaultdict(int)
    first, last = dates[0], dates[-1]
    for created_at, quantity in lines:
        day = _as_date(created_at)
        if first <= day <= last:
            quantities[day] += quantity or 0
    return [{'date': day.isoformat(), 'quantity': quantities[day]} for day in dates]


def series_totals(series: list[DailySales]) -> dict:
    total_sales = round(sum(point.total_sales for point in series), 2)
    order_count = sum(point.order_count for point in series)
    return {
        'total_sales': total_sales,
        'order_count': order_count,
        'average_daily_sales': round(total_sales / len(series), 2) if series else 0.0,
    }
