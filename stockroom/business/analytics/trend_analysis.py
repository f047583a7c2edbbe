"""
Trend and performance classification over aggregated sales
"""

from __future__ import annotations

from dataclasses import dataclass


def percent_change(previous: float, current: float) -> float:
    """
    Relative change in percent. Growth from nothing counts as 100 %,
    nothing to nothing as 0 %.
    """
    if previous == 0:
        return 0.0 if current == 0 else 100.0
    return (current - previous) / previous * 100


@dataclass(frozen=True)
class SalesTrend:
    direction: str
    percentage_change: float
    confidence: str
    status: str
    action: str
    details: str

    def to_dict(self) -> dict:
        return {
            'direction': self.direction,
            'percentageChange': self.percentage_change,
            'confidence': self.confidence,
            'status': self.status,
            'action': self.action,
            'details': self.details,
        }


def _confidence(avg_order_value_change: float, total_sales_change: float) -> str:
    variation = abs(avg_order_value_change - total_sales_change)
    if variation > 50:
        return 'low'
    if variation > 25:
        return 'medium'
    return 'high'


def _trend_status(change: float) -> str:
    if abs(change) < 5:
        return 'stable'
    if change > 20:
        return 'strong growth'
    if change > 0:
        return 'moderate growth'
    if change > -20:
        return 'moderate decline'
    return 'significant decline'


def _action(change: float, confidence: str) -> str:
    if confidence == 'low':
        return 'Gather more consistent sales data'
    if change < -10:
        return 'Investigate sales decline and implement recovery strategies'
    if change < 0:
        return 'Monitor market conditions and optimize pricing'
    if change > 20:
        return 'Scale operations to maintain growth momentum'
    if change > 0:
        return 'Continue current successful strategies'
    return 'Maintain current operations while monitoring trends'


def analyze_sales_trend(series: list[dict]) -> SalesTrend:
    """
    Compare the second half of a daily series against the first half.

    `series` items carry `date`, `totalSales` and `orderCount` (the report
    payload shape). The overall change averages total sales change and
    average order value change; their disagreement sets the confidence.
    """
    if not series:
        return SalesTrend('insufficient data', 0, 'low', 'insufficient data',
                          'Start recording sales data', 'No sales data available for analysis')
    if len(series) < 2:
        return SalesTrend('insufficient data', 0, 'low', 'insufficient data',
                          'Collect more data', 'Not enough data for trend analysis')

    ordered = sorted(series, key=lambda point: point['date'])
    middle = len(ordered) // 2
    first, second = ordered[:middle], ordered[middle:]

    def avg_order_value(points):
        return sum(p['totalSales'] / (p['orderCount'] or 1) for p in points) / len(points)

    def total_sales(points):
        return sum(p['totalSales'] for p in points)

    aov_change = percent_change(avg_order_value(first), avg_order_value(second))
    sales_change = percent_change(total_sales(first), total_sales(second))
    overall = (aov_change + sales_change) / 2

    confidence = _confidence(aov_change, sales_change)
    if overall > 0:
        direction = 'upward'
    elif overall < 0:
        direction = 'downward'
    else:
        direction = 'stable'

    details = (
        f"Overall sales trend shows {abs(overall):.2f}% {'growth' if overall > 0 else 'decline'} "
        f"with {confidence} confidence. Average order value "
        f"{'increased' if aov_change > 0 else 'decreased'} by {abs(aov_change):.2f}% while total sales "
        f"volume {'increased' if sales_change > 0 else 'decreased'} by {abs(sales_change):.2f}%."
    )
    return SalesTrend(
        direction=direction,
        percentage_change=round(abs(overall), 2),
        confidence=confidence,
        status=_trend_status(overall),
        action=_action(overall, confidence),
        details=details,
    )


def product_status(growth: float, units_sold: int) -> str:
    if growth > 20 and units_sold > 0:
        return 'excellent'
    if growth > 0 and units_sold > 0:
        return 'good'
    if growth == 0 or units_sold == 0:
        return 'fair'
    return 'poor'
