"""
Dashboard Service
Headline counters and revenue figures for the dashboard views.
"""

from collections import defaultdict
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

from sqlalchemy import func

from stockroom import db
from stockroom.business.orders.state_machine import OrderStateMachine
from stockroom.data.catalog.product import Product
from stockroom.data.orders.order import Order


def _period_starts(now: datetime) -> Dict[str, datetime]:
    today = datetime(now.year, now.month, now.day)
    # Weeks start on Sunday
    days_since_sunday = (today.weekday() + 1) % 7
    return {
        'today': today,
        'week': today - timedelta(days=days_since_sunday),
        'month': datetime(now.year, now.month, 1),
    }


class DashboardService:

    @staticmethod
    def _revenue_since(user_id: int, start: datetime) -> float:
        total = (
            db.session.query(func.coalesce(func.sum(Order.total_amount), 0.0))
            .filter(
                Order.user_id == user_id,
                Order.status != OrderStateMachine.CANCELLED,
                Order.created_at >= start,
            )
            .scalar()
        )
        return round(float(total or 0.0), 2)

    @staticmethod
    def get_stats(user_id: int, now: Optional[datetime] = None) -> Dict[str, Any]:
        """
        Catalog and order counters plus revenue of non-cancelled orders for
        today, this week (from Sunday) and this month, in UTC.
        """
        now = now or datetime.utcnow()
        starts = _period_starts(now)
        products = Product.owned_by(user_id)
        orders = Order.owned_by(user_id)

        return {
            'totalProducts': products.count(),
            'lowStockProducts': products.filter(Product.stock <= Product.reorder_point).count(),
            'outOfStockProducts': products.filter(Product.stock == 0).count(),
            'totalOrders': orders.count(),
            'pendingOrders': orders.filter(Order.status == OrderStateMachine.PENDING).count(),
            'revenue': {
                'daily': DashboardService._revenue_since(user_id, starts['today']),
                'weekly': DashboardService._revenue_since(user_id, starts['week']),
                'monthly': DashboardService._revenue_since(user_id, starts['month']),
            },
        }

    @staticmethod
    def get_report(user_id: int, now: Optional[datetime] = None) -> Dict[str, Any]:
        """Month-to-date fulfilled sales, inventory health and top 5 products by units"""
        now = now or datetime.utcnow()
        month_start = _period_starts(now)['month']

        monthly_orders = Order.owned_by(user_id).filter(
            Order.status.in_(list(OrderStateMachine.FULFILLED)),
            Order.created_at >= month_start,
        ).all()

        totals = defaultdict(lambda: {'quantity': 0, 'revenue': 0.0, 'name': None})
        for order in monthly_orders:
            for item in order.items:
                entry = totals[item.sku]
                entry['name'] = item.product_name
                entry['quantity'] += item.quantity
                entry['revenue'] += item.quantity * item.price

        top_products = sorted(totals.items(), key=lambda kv: (-kv[1]['quantity'], kv[0]))[:5]
        products = Product.owned_by(user_id)

        return {
            'sales': {
                'monthly': round(sum(o.total_amount for o in monthly_orders), 2),
                'orderCount': len(monthly_orders),
            },
            'inventory': {
                'totalProducts': products.count(),
                'lowStock': products.filter(Product.stock <= Product.reorder_point).count(),
                'outOfStock': products.filter(Product.stock == 0).count(),
            },
            'topProducts': [
                {
                    'sku': sku,
                    'name': entry['name'],
                    'totalQuantity': entry['quantity'],
                    'totalRevenue': round(entry['revenue'], 2),
                }
                for sku, entry in top_products
            ],
        }
