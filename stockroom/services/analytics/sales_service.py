"""
Sales Service
Read-side queries feeding the pure sales aggregation functions.
"""

from datetime import date, datetime
from typing import Dict, Iterable, List, Optional

from stockroom import db
from stockroom.business.analytics.sales_aggregation import (
    DEMAND_WINDOW_DAYS,
    PREDICTION_HISTORY_DAYS,
    DailySales,
    build_daily_series,
    build_quantity_series,
    product_demand,
    window_start,
)
from stockroom.business.orders.state_machine import OrderStateMachine
from stockroom.business.reports.pdf_export import ProductSales, SalesReportData
from stockroom.data.orders.order import Order
from stockroom.data.orders.order_item import OrderItem


def utc_today() -> date:
    return datetime.utcnow().date()


class SalesService:
    """
    Service for sales aggregates.

    Every method is scoped to one owner and takes an optional `today` so the
    window can be pinned in tests.
    """

    @staticmethod
    def daily_series(
        user_id: int,
        days: int,
        today: Optional[date] = None,
        statuses: Iterable[str] = OrderStateMachine.REALIZED
    ) -> List[DailySales]:
        """
        Dense per-day totals for the `days` UTC days ending today.
        """
        today = today or utc_today()
        rows = (
            db.session.query(Order.created_at, Order.total_amount)
            .filter(
                Order.user_id == user_id,
                Order.status.in_(list(statuses)),
                Order.created_at >= window_start(days, today),
            )
            .all()
        )
        return build_daily_series(rows, days, today)

    @staticmethod
    def demand_lines(
        user_id: int,
        start: datetime,
        statuses: Iterable[str],
        end: Optional[datetime] = None
    ) -> List[tuple]:
        """(product_id, quantity) pairs of qualifying orders since `start`"""
        query = (
            db.session.query(OrderItem.product_id, OrderItem.quantity)
            .join(Order, OrderItem.order_id == Order.id)
            .filter(
                Order.user_id == user_id,
                Order.status.in_(list(statuses)),
                Order.created_at >= start,
            )
        )
        if end is not None:
            query = query.filter(Order.created_at < end)
        return query.all()

    @staticmethod
    def product_daily_demand(
        user_id: int,
        today: Optional[date] = None,
        statuses: Iterable[str] = OrderStateMachine.REALIZED
    ) -> Dict[int, float]:
        """Average units per day over the trailing demand window, per product id"""
        today = today or utc_today()
        lines = SalesService.demand_lines(user_id, window_start(DEMAND_WINDOW_DAYS, today), statuses)
        return product_demand(lines, DEMAND_WINDOW_DAYS)

    @staticmethod
    def product_quantity_series(
        user_id: int,
        product_id: int,
        days: int = PREDICTION_HISTORY_DAYS,
        today: Optional[date] = None,
        statuses: Iterable[str] = OrderStateMachine.FULFILLED
    ) -> List[dict]:
        """Dense daily units of one product sold in fulfilled orders"""
        today = today or utc_today()
        rows = (
            db.session.query(Order.created_at, OrderItem.quantity)
            .join(OrderItem, OrderItem.order_id == Order.id)
            .filter(
                Order.user_id == user_id,
                OrderItem.product_id == product_id,
                Order.status.in_(list(statuses)),
                Order.created_at >= window_start(days, today),
            )
            .all()
        )
        return build_quantity_series(rows, days, today)

    @staticmethod
    def sales_report_data(
        user_id: int,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None
    ) -> SalesReportData:
        """Totals and product-wise sales of fulfilled orders in [start, end]"""
        query = Order.owned_by(user_id).filter(Order.status.in_(list(OrderStateMachine.FULFILLED)))
        if start is not None:
            query = query.filter(Order.created_at >= start)
        if end is not None:
            query = query.filter(Order.created_at <= end)
        orders = query.all()

        products: Dict[str, ProductSales] = {}
        for order in orders:
            for item in order.items:
                key = item.sku
                entry = products.setdefault(key, ProductSales(name=item.product_name))
                entry.quantity += item.quantity
                entry.revenue = round(entry.revenue + item.quantity * item.price, 2)

        return SalesReportData(
            start_label=start.date().isoformat() if start else 'All time',
            end_label=end.date().isoformat() if end else 'Present',
            total_sales=round(sum(o.total_amount for o in orders), 2),
            total_orders=len(orders),
            products=list(products.values()),
        )
