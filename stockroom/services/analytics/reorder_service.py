"""
Reorder Service
Loads catalog and demand for an owner and runs the reorder engine.
"""

from datetime import date
from typing import List, Optional

from sqlalchemy.orm import joinedload

from stockroom.business.analytics.reorder_engine import (
    PRIORITY_RANK,
    ReorderInput,
    ReorderResult,
    classify_velocity,
    suggest_reorders,
)
from stockroom.business.core.errors import ValidationError
from stockroom.business.orders.state_machine import OrderStateMachine
from stockroom.data.catalog.product import Product
from stockroom.services.analytics.sales_service import SalesService


class ReorderService:
    """
    Service for reorder suggestions and inventory velocity.
    Results are computed per call and never cached.
    """

    @staticmethod
    def build_inputs(
        user_id: int,
        demand: dict,
        category: Optional[str] = None
    ) -> List[ReorderInput]:
        query = Product.owned_by(user_id).options(joinedload(Product.supplier))
        if category:
            query = query.filter(Product.category == category)
        products = query.order_by(Product.sku).all()

        return [
            ReorderInput(
                product_id=p.id,
                name=p.name,
                sku=p.sku,
                stock=p.stock,
                reorder_point=p.reorder_point,
                price=p.price,
                daily_sales=demand.get(p.id, 0.0),
                lead_time_days=p.lead_time_days,
                supplier_name=p.supplier.name if p.supplier else None,
                category=p.category,
            )
            for p in products
        ]

    @staticmethod
    def get_suggestions(
        user_id: int,
        priority: Optional[str] = None,
        category: Optional[str] = None,
        today: Optional[date] = None
    ) -> ReorderResult:
        """
        Args:
            priority: keep only suggestions of this tier
            category: restrict the catalog to one category

        Raises:
            ValidationError: unknown priority filter
        """
        if priority is not None and priority not in PRIORITY_RANK:
            raise ValidationError({'priority': f"priority must be one of {', '.join(PRIORITY_RANK)}"})

        demand = SalesService.product_daily_demand(user_id, today, OrderStateMachine.REALIZED)
        result = suggest_reorders(ReorderService.build_inputs(user_id, demand, category))
        if priority is not None:
            result.suggestions = [s for s in result.suggestions if s.priority == priority]
        return result

    @staticmethod
    def velocity_recommendations(user_id: int, today: Optional[date] = None) -> List[dict]:
        """Stock health per product from shipped/delivered demand"""
        demand = SalesService.product_daily_demand(user_id, today, OrderStateMachine.FULFILLED)
        return [classify_velocity(item).to_dict() for item in ReorderService.build_inputs(user_id, demand)]
