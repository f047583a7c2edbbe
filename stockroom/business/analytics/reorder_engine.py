"""
Reorder recommendation engine

Classifies products into reorder priority tiers and computes how much to
order. Pure: inputs are plain values, so the rules can be exercised without
a database.

Policy constants are fixed; there is no configuration surface for them.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable, Optional

# Days of stock reported when there is stock but no demand. Means "will not
# run out at the current rate", never a literal day count.
NO_DEMAND_DAYS_OF_STOCK = 999
DEFAULT_LEAD_TIME_DAYS = 7
PLANNING_HORIZON_DAYS = 14
SAFETY_FACTOR = 1.5

HIGH_URGENCY_DAYS = 7
MEDIUM_URGENCY_DAYS = 14
MEDIUM_REORDER_POINT_FACTOR = 1.5

HIGH = 'high'
MEDIUM = 'medium'
LOW = 'low'
PRIORITY_RANK = {HIGH: 0, MEDIUM: 1, LOW: 2}

NO_SUPPLIER = 'No supplier assigned'


@dataclass(frozen=True)
class ReorderInput:
    """Everything the engine needs to know about one product"""
    product_id: int
    name: str
    sku: str
    stock: int
    reorder_point: int
    price: float
    daily_sales: float
    lead_time_days: Optional[int] = None
    supplier_name: Optional[str] = None
    category: Optional[str] = None


@dataclass(frozen=True)
class ReorderSuggestion:
    product_id: int
    product_name: str
    sku: str
    current_stock: int
    reorder_point: int
    price: float
    daily_sales: float
    days_of_stock: float
    safety_stock: int
    recommended_order: int
    priority: str
    supplier: str
    lead_time: int
    category: Optional[str]

    def to_dict(self) -> dict:
        return {
            'productId': self.product_id,
            'productName': self.product_name,
            'sku': self.sku,
            'currentStock': self.current_stock,
            'reorderPoint': self.reorder_point,
            'price': self.price,
            'dailySales': round(self.daily_sales, 2),
            'daysOfStock': round(self.days_of_stock),
            'safetyStock': self.safety_stock,
            'recommendedOrder': self.recommended_order,
            'priority': self.priority,
            'supplier': self.supplier,
            'leadTime': self.lead_time,
            'category': self.category,
        }


@dataclass
class ReorderResult:
    suggestions: list = field(default_factory=list)
    total_products: int = 0

    def count(self, priority: str) -> int:
        return sum(1 for s in self.suggestions if s.priority == priority)

    @property
    def critical_count(self) -> int:
        return self.count(HIGH)

    @property
    def total_value(self) -> float:
        return round(sum(s.current_stock * (s.price or 0) for s in self.suggestions), 2)

    def to_dict(self) -> dict:
        return {
            'suggestions': [s.to_dict() for s in self.suggestions],
            'totalProducts': self.total_products,
            'criticalCount': self.critical_count,
            'summary': {
                'highPriority': self.count(HIGH),
                'mediumPriority': self.count(MEDIUM),
                'lowPriority': self.count(LOW),
                'totalValue': self.total_value,
            },
        }


def days_of_stock(stock: int, daily_sales: float) -> float:
    if daily_sales > 0:
        return stock / daily_sales
    return NO_DEMAND_DAYS_OF_STOCK if stock > 0 else 0


def safety_stock(daily_sales: float, lead_time: int) -> int:
    return math.ceil(daily_sales * lead_time * SAFETY_FACTOR)


def recommended_order(stock: int, daily_sales: float, lead_time: int) -> int:
    """Cover lead time plus the planning horizon, minus stock on hand, plus safety stock"""
    needed = daily_sales * (lead_time + PLANNING_HORIZON_DAYS) - stock + safety_stock(daily_sales, lead_time)
    return max(0, math.ceil(needed))


def classify_priority(stock: int, reorder_point: int, days: float) -> str:
    if stock <= reorder_point or days < HIGH_URGENCY_DAYS:
        return HIGH
    if stock <= reorder_point * MEDIUM_REORDER_POINT_FACTOR or days < MEDIUM_URGENCY_DAYS:
        return MEDIUM
    return LOW


def evaluate(item: ReorderInput) -> ReorderSuggestion:
    lead_time = item.lead_time_days or DEFAULT_LEAD_TIME_DAYS
    days = days_of_stock(item.stock, item.daily_sales)
    return ReorderSuggestion(
        product_id=item.product_id,
        product_name=item.name,
        sku=item.sku,
        current_stock=item.stock,
        reorder_point=item.reorder_point,
        price=item.price,
        daily_sales=item.daily_sales,
        days_of_stock=days,
        safety_stock=safety_stock(item.daily_sales, lead_time),
        recommended_order=recommended_order(item.stock, item.daily_sales, lead_time),
        priority=classify_priority(item.stock, item.reorder_point, days),
        supplier=item.supplier_name or NO_SUPPLIER,
        lead_time=lead_time,
        category=item.category,
    )


def needs_attention(suggestion: ReorderSuggestion) -> bool:
    return (
        suggestion.current_stock <= suggestion.reorder_point
        or suggestion.days_of_stock < MEDIUM_URGENCY_DAYS
        or suggestion.recommended_order > 0
    )


def sort_key(suggestion: ReorderSuggestion):
    return (PRIORITY_RANK[suggestion.priority], suggestion.days_of_stock, suggestion.sku)


def suggest_reorders(items: Iterable[ReorderInput]) -> ReorderResult:
    """
    Evaluate every product, keep those needing attention, most urgent first.
    An empty catalog gives an empty result with zero counts.
    """
    items = list(items)
    evaluated = [evaluate(item) for item in items]
    listed = sorted((s for s in evaluated if needs_attention(s)), key=sort_key)
    return ReorderResult(suggestions=listed, total_products=len(items))


# Inventory velocity ---------------------------------------------------------

OVERSTOCK_DAYS = 60


@dataclass(frozen=True)
class VelocityRecommendation:
    product_id: int
    name: str
    sku: str
    current_stock: int
    daily_sales: float
    days_of_stock: Optional[float]
    status: str
    action: str
    priority: str

    def to_dict(self) -> dict:
        return {
            'product': {'id': self.product_id, 'name': self.name, 'sku': self.sku},
            'currentStock': self.current_stock,
            'dailySales': round(self.daily_sales, 2),
            'daysOfStock': round(self.days_of_stock) if self.days_of_stock is not None else None,
            'status': self.status,
            'action': self.action,
            'priority': self.priority,
        }


def classify_velocity(item: ReorderInput) -> VelocityRecommendation:
    """
    Stock health from sales velocity alone. Without demand there is nothing
    to measure, so the product is reported as optimal with no days of stock.
    """
    days = item.stock / item.daily_sales if item.daily_sales > 0 else None
    status, action, priority = 'optimal', 'none', LOW
    if days is not None:
        if days < HIGH_URGENCY_DAYS:
            status, action, priority = 'critical', 'reorder_urgent', HIGH
        elif days < MEDIUM_URGENCY_DAYS:
            status, action, priority = 'warning', 'reorder_soon', MEDIUM
        elif days > OVERSTOCK_DAYS:
            status, action, priority = 'overstocked', 'reduce_inventory', MEDIUM
    return VelocityRecommendation(
        product_id=item.product_id,
        name=item.name,
        sku=item.sku,
        current_stock=item.stock,
        daily_sales=item.daily_sales,
        days_of_stock=days,
        status=status,
        action=action,
        priority=priority,
    )
