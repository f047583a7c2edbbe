"""
Report variants

One class per report kind, each with a fixed field set and a `kind` tag.
`to_payload()` gives the JSON-ready data block that analyses, prompts and
API responses share.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Optional

from stockroom.business.analytics.reorder_engine import ReorderResult
from stockroom.business.analytics.sales_aggregation import DailySales


@dataclass
class SalesSeriesReport:
    kind: ClassVar[str] = ''
    period_label: ClassVar[str] = ''
    days: ClassVar[int] = 0

    series: list[DailySales] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.series

    def to_payload(self) -> list:
        return [point.to_dict() for point in self.series]


@dataclass
class WeeklySalesReport(SalesSeriesReport):
    kind: ClassVar[str] = 'weekly-sales'
    period_label: ClassVar[str] = 'week'
    days: ClassVar[int] = 7


@dataclass
class MonthlySalesReport(SalesSeriesReport):
    kind: ClassVar[str] = 'monthly-sales'
    period_label: ClassVar[str] = 'month'
    days: ClassVar[int] = 30


@dataclass
class SalesTrendReport(SalesSeriesReport):
    kind: ClassVar[str] = 'sales-trends'
    period_label: ClassVar[str] = 'month'
    days: ClassVar[int] = 30


@dataclass
class ReorderReport:
    kind: ClassVar[str] = 'reorder-suggestions'

    result: ReorderResult = field(default_factory=ReorderResult)

    @property
    def is_empty(self) -> bool:
        return self.result.total_products == 0

    def to_payload(self) -> dict:
        return self.result.to_dict()


@dataclass(frozen=True)
class ProductPerformance:
    product_id: int
    name: str
    sku: str
    revenue: float
    units_sold: int
    growth: float
    status: str

    def to_dict(self) -> dict:
        return {
            'productId': self.product_id,
            'name': self.name,
            'sku': self.sku,
            'revenue': self.revenue,
            'unitsSold': self.units_sold,
            'growth': self.growth,
            'status': self.status,
        }


@dataclass
class ProductPerformanceReport:
    kind: ClassVar[str] = 'product-performance'

    products: list[ProductPerformance] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.products

    @property
    def top_performer(self) -> Optional[ProductPerformance]:
        return self.products[0] if self.products else None

    @property
    def most_improved(self) -> Optional[ProductPerformance]:
        if not self.products:
            return None
        return max(self.products, key=lambda p: p.growth)

    @property
    def needs_attention(self) -> Optional[ProductPerformance]:
        return next((p for p in self.products if p.status == 'poor'), None)

    def to_payload(self) -> dict:
        attention = self.needs_attention
        return {
            'products': [p.to_dict() for p in self.products],
            'topPerformer': self.top_performer.to_dict() if self.top_performer else None,
            'mostImproved': self.most_improved.to_dict() if self.most_improved else None,
            'needsAttention': dict(attention.to_dict(), reason='Declining sales') if attention else None,
        }


@dataclass
class ProductSalesHistory:
    """
    Daily units sold of one product, the input to sales prediction.
    Requested per product, so it is not listed in REPORT_TYPES.
    """
    kind: ClassVar[str] = 'sales-prediction'

    product_id: int
    name: str
    sku: str
    stock: int
    reorder_point: int
    lead_time_days: Optional[int] = None
    history: list = field(default_factory=list)

    def to_payload(self) -> dict:
        return {
            'product': {
                'id': self.product_id,
                'name': self.name,
                'sku': self.sku,
                'stock': self.stock,
                'reorderPoint': self.reorder_point,
                'leadTime': self.lead_time_days,
            },
            'windowDays': len(self.history),
            'history': self.history,
        }


REPORT_TYPES = {
    report.kind: report
    for report in (
        WeeklySalesReport,
        MonthlySalesReport,
        SalesTrendReport,
        ReorderReport,
        ProductPerformanceReport,
    )
}

REPORT_KINDS = tuple(REPORT_TYPES)
