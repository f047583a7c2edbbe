"""
Deterministic report analysis

Used whenever the AI summarizer is not configured, fails, or answers with
something unusable. Works on report payloads (see variants.to_payload), so it
also handles client-supplied data.
"""

from __future__ import annotations

import math

from stockroom.business.analytics.reorder_engine import DEFAULT_LEAD_TIME_DAYS, days_of_stock, recommended_order
from stockroom.business.analytics.sales_aggregation import DEMAND_WINDOW_DAYS
from stockroom.business.analytics.trend_analysis import analyze_sales_trend, percent_change
from stockroom.business.reports.variants import (
    MonthlySalesReport,
    ProductPerformanceReport,
    ProductSalesHistory,
    ReorderReport,
    SalesTrendReport,
    WeeklySalesReport,
)

# Percent change between the halves of a prediction history that counts as a trend
PREDICTION_TREND_THRESHOLD = 10


def _money(currency: str, amount: float) -> str:
    return f"{currency}{amount:,.0f}"


def empty_analysis() -> dict:
    return {
        'summary': 'No data available for analysis',
        'trend': {'direction': 'insufficient data', 'percentageChange': 0, 'confidence': 'low'},
        'patterns': ['No patterns detected - insufficient data'],
        'recommendations': ['Start recording data to enable analysis'],
    }


def _to_number(value, cast):
    """Cast a client-supplied value, None when it is not numeric"""
    if value is None:
        return cast(0)
    if isinstance(value, bool):
        return None
    try:
        number = cast(value)
    except (TypeError, ValueError, OverflowError):
        return None
    return number if math.isfinite(number) else None


def _series_points(data) -> list:
    # Client payloads reach here unchecked; malformed points are skipped
    if not isinstance(data, (list, tuple)):
        return []
    points = []
    for point in data:
        if not isinstance(point, dict):
            continue
        total_sales = _to_number(point.get('totalSales'), float)
        order_count = _to_number(point.get('orderCount'), int)
        if total_sales is None or order_count is None:
            continue
        points.append({
            'date': str(point.get('date', '')),
            'totalSales': total_sales,
            'orderCount': order_count,
        })
    return points


def sales_series_analysis(kind: str, data, currency: str) -> tuple[list, dict]:
    points = _series_points(data)
    if not points:
        return [], empty_analysis()

    weekly = kind == WeeklySalesReport.kind
    total_sales = sum(p['totalSales'] for p in points)
    avg_sales = total_sales / len(points)
    total_orders = sum(p['orderCount'] for p in points)
    growth = round(percent_change(points[0]['totalSales'], points[-1]['totalSales']), 2) if len(points) > 1 else 0

    annotated = []
    for point in points:
        if point['totalSales'] > avg_sales:
            performance = 'above'
        elif point['totalSales'] < avg_sales:
            performance = 'below'
        else:
            performance = 'average'
        annotated.append(dict(point, performance=performance))

    recommendations = [
        f"Average daily sales: {_money(currency, avg_sales)}" if avg_sales > 0 else 'No sales recorded',
        'Maintain positive sales momentum' if growth > 0 else 'Investigate ways to improve sales',
        f"Process {total_orders} orders efficiently" if total_orders > 0 else 'Focus on generating orders',
    ]

    analysis = {
        'summary': f"Total sales for the {'week' if weekly else 'month'}: {currency}{total_sales:,.2f}",
        'totalSales': round(total_sales, 2),
        'averageDailySales': round(avg_sales),
        'totalOrders': total_orders,
        'periodGrowth': growth,
        'prediction': {
            'nextPeriod': round(avg_sales * (7 if weekly else 30)),
            'confidence': 'medium',
        },
        'recommendations': recommendations,
    }
    return annotated, analysis


def sales_trend_analysis(data, currency: str) -> tuple[list, dict]:
    points = _series_points(data)
    if not points:
        return [], empty_analysis()

    trend = analyze_sales_trend(points)
    average = sum(p['totalSales'] for p in points) / len(points)
    analysis = {
        'summary': f"Sales trend analysis shows {trend.details}",
        'trend': {
            'direction': trend.direction,
            'percentageChange': trend.percentage_change,
            'confidence': trend.confidence,
            'status': trend.status,
        },
        'patterns': [trend.details, f"Average daily sales: {_money(currency, average)}"],
        'recommendations': [
            trend.action,
            'Monitor customer feedback and market trends',
            'Review pricing strategy regularly',
        ],
    }
    return points, analysis


def reorder_analysis(data) -> tuple[dict, dict]:
    data = data if isinstance(data, dict) else {}
    items = data.get('suggestions', data.get('lowStock'))
    items = [item for item in items if isinstance(item, dict)] if isinstance(items, list) else []
    analysis = {
        'summary': f"{len(items)} products need attention",
        'reorderItems': [
            {
                'productName': item.get('productName'),
                'currentStock': item.get('currentStock'),
                'recommendedOrder': item.get('recommendedOrder'),
                'priority': item.get('priority'),
            }
            for item in items
        ],
        'recommendations': [
            'Review stock levels regularly',
            'Consider increasing reorder points for high-priority items',
            'Monitor supplier lead times',
        ],
    }
    return data, analysis


def product_performance_analysis(data) -> tuple[dict, dict]:
    data = data if isinstance(data, dict) else {}
    products = data.get('products')
    products = [p for p in products if isinstance(p, dict)] if isinstance(products, list) else []
    analysis = {
        'summary': 'Product performance analysis based on revenue and growth',
        'topPerformer': data.get('topPerformer') or {'name': 'N/A', 'revenue': 0, 'growth': 0},
        'mostImproved': data.get('mostImproved') or {'name': 'N/A', 'growth': 0},
        'needsAttention': data.get('needsAttention') or {'name': 'N/A', 'reason': 'No issues found'},
        'products': [
            {
                'name': p.get('name'),
                'revenue': p.get('revenue'),
                'unitsSold': p.get('unitsSold'),
                'growth': p.get('growth'),
                'status': p.get('status'),
            }
            for p in products
        ],
    }
    return data, analysis


def sales_prediction_analysis(data) -> tuple[dict, dict]:
    """
    Daily rate over the trailing demand window, projected to a week and a
    month; trend compares the two halves of the history.
    """
    data = data if isinstance(data, dict) else {}
    product = data.get('product') if isinstance(data.get('product'), dict) else {}
    history = data.get('history') if isinstance(data.get('history'), list) else []
    quantities = [
        quantity for quantity in (
            _to_number(point.get('quantity'), float) for point in history if isinstance(point, dict)
        )
        if quantity is not None
    ]
    if not quantities:
        return data, empty_analysis()

    recent = quantities[-DEMAND_WINDOW_DAYS:]
    daily = sum(recent) / len(recent)
    half = len(quantities) // 2
    change = round(percent_change(sum(quantities[:half]), sum(quantities[half:])), 2) if half else 0
    if change > PREDICTION_TREND_THRESHOLD:
        trend = 'increasing'
    elif change < -PREDICTION_TREND_THRESHOLD:
        trend = 'decreasing'
    else:
        trend = 'stable'

    stock = _to_number(product.get('stock'), int) or 0
    reorder_point = _to_number(product.get('reorderPoint'), int) or 0
    lead_time = _to_number(product.get('leadTime'), int) or DEFAULT_LEAD_TIME_DAYS
    quantity = recommended_order(stock, daily, lead_time)
    should_reorder = quantity > 0 or stock <= reorder_point
    days_left = days_of_stock(stock, daily)

    if stock <= reorder_point:
        reason = f"Stock of {stock} is at or below the reorder point of {reorder_point}"
    elif quantity > 0:
        reason = f"About {round(days_left)} days of stock left against a {lead_time}-day lead time"
    else:
        reason = 'Stock covers the lead time and planning horizon'

    analysis = {
        'summary': f"{product.get('name') or 'Product'} sells about {daily:.1f} units per day",
        'weeklyPrediction': round(daily * 7),
        'monthlyPrediction': round(daily * 30),
        'trend': trend,
        'trendChange': change,
        'reorderRecommendation': {
            'shouldReorder': should_reorder,
            'recommendedQuantity': quantity,
            'reason': reason,
        },
        'insights': [
            f"{round(sum(quantities))} units sold in the last {len(quantities)} days",
            f"Sales are {trend} ({change:+.0f}% between the two halves of the period)",
            f"Current stock lasts about {round(days_left)} days" if daily > 0 else 'No recent sales to project from',
        ],
    }
    return data, analysis


def fallback_analysis(kind: str, data, currency: str = '') -> tuple[object, dict]:
    """
    Returns:
        tuple: (data, analysis) - data may be annotated (sales series)
    """
    if kind in (WeeklySalesReport.kind, MonthlySalesReport.kind):
        return sales_series_analysis(kind, data, currency)
    if kind == SalesTrendReport.kind:
        return sales_trend_analysis(data, currency)
    if kind == ReorderReport.kind:
        return reorder_analysis(data)
    if kind == ProductPerformanceReport.kind:
        return product_performance_analysis(data)
    if kind == ProductSalesHistory.kind:
        return sales_prediction_analysis(data)
    return data, {
        'summary': 'Basic statistical analysis (AI service unavailable)',
        'recommendations': ['Enable AI service for detailed insights'],
    }
