"""
Product Performance Service
Revenue, units and growth per product over the trailing month.
"""

from collections import defaultdict
from datetime import date
from typing import Optional

from stockroom import db
from stockroom.business.analytics.sales_aggregation import DEMAND_WINDOW_DAYS, window_start
from stockroom.business.analytics.trend_analysis import product_status
from stockroom.business.orders.state_machine import OrderStateMachine
from stockroom.business.reports.variants import ProductPerformance, ProductPerformanceReport
from stockroom.data.catalog.product import Product
from stockroom.data.orders.order import Order
from stockroom.data.orders.order_item import OrderItem
from stockroom.services.analytics.sales_service import utc_today


class PerformanceService:

    @staticmethod
    def _revenue_by_product(user_id, start, end=None):
        query = (
            db.session.query(OrderItem.product_id, OrderItem.quantity, OrderItem.price)
            .join(Order, OrderItem.order_id == Order.id)
            .filter(
                Order.user_id == user_id,
                Order.status.in_(list(OrderStateMachine.FULFILLED)),
                Order.created_at >= start,
                OrderItem.product_id.isnot(None),
            )
        )
        if end is not None:
            query = query.filter(Order.created_at < end)

        revenue = defaultdict(float)
        units = defaultdict(int)
        for product_id, quantity, price in query.all():
            revenue[product_id] += quantity * price
            units[product_id] += quantity
        return revenue, units

    @staticmethod
    def get_report(user_id: int, today: Optional[date] = None) -> ProductPerformanceReport:
        """
        Current window is the last 30 days, compared against the 30 days
        before it. Growth is 0 when the previous window had no revenue.
        Products are ordered by revenue, highest first.
        """
        today = today or utc_today()
        current_start = window_start(DEMAND_WINDOW_DAYS, today)
        previous_start = window_start(DEMAND_WINDOW_DAYS * 2, today)

        revenue, units = PerformanceService._revenue_by_product(user_id, current_start)
        previous_revenue, _ = PerformanceService._revenue_by_product(user_id, previous_start, current_start)

        performances = []
        for product in Product.owned_by(user_id).all():
            current = round(revenue.get(product.id, 0.0), 2)
            previous = previous_revenue.get(product.id, 0.0)
            growth = round((current - previous) / previous * 100, 2) if previous > 0 else 0
            sold = units.get(product.id, 0)
            performances.append(ProductPerformance(
                product_id=product.id,
                name=product.name,
                sku=product.sku,
                revenue=current,
                units_sold=sold,
                growth=growth,
                status=product_status(growth, sold),
            ))

        performances.sort(key=lambda p: (-p.revenue, p.sku))
        return ProductPerformanceReport(products=performances)
