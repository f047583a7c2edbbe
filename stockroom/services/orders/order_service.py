"""
Order Service
Read-side order queries.
"""

from typing import List, Optional

from sqlalchemy.orm import selectinload

from stockroom.business.core.errors import OrderNotFound, ValidationError
from stockroom.business.orders.state_machine import OrderStateMachine
from stockroom.data.orders.order import Order


class OrderService:

    @staticmethod
    def list_orders(user_id: int, status: Optional[str] = None) -> List[Order]:
        """Newest first, optionally restricted to one status"""
        query = Order.owned_by(user_id).options(selectinload(Order.items))
        if status:
            if status not in OrderStateMachine.STATUSES:
                raise ValidationError({'status': f"status must be one of {', '.join(OrderStateMachine.STATUSES)}"})
            query = query.filter(Order.status == status)
        return query.order_by(Order.created_at.desc(), Order.id.desc()).all()

    @staticmethod
    def get_order(user_id: int, order_id: int) -> Order:
        order = Order.get_owned(order_id, user_id)
        if order is None:
            raise OrderNotFound(order_id)
        return order
