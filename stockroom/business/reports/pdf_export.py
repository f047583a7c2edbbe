"""
PDF rendering for sales, inventory and invoice documents

Renderers take plain values and return the PDF as bytes; routes stream them.
"""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import datetime
from io import BytesIO
from typing import Optional

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle
from xml.sax.saxutils import escape

HEADER_STYLE = TableStyle([
    ('BACKGROUND', (0, 0), (-1, 0), colors.grey),
    ('TEXTCOLOR', (0, 0), (-1, 0), colors.whitesmoke),
    ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
    ('BOTTOMPADDING', (0, 0), (-1, 0), 8),
    ('GRID', (0, 0), (-1, -1), 0.5, colors.grey),
    ('FONTSIZE', (0, 0), (-1, -1), 9),
])


@dataclass
class ProductSales:
    name: str
    quantity: int = 0
    revenue: float = 0.0


@dataclass
class SalesReportData:
    start_label: str
    end_label: str
    total_sales: float
    total_orders: int
    products: list[ProductSales] = field(default_factory=list)

    @property
    def average_order_value(self) -> float:
        return self.total_sales / self.total_orders if self.total_orders else 0.0


def _money(currency: str, amount: float) -> str:
    return f"{currency}{amount:,.2f}"


def _build(story) -> bytes:
    buffer = BytesIO()
    doc = SimpleDocTemplate(buffer, pagesize=A4, leftMargin=20 * mm, rightMargin=20 * mm,
                            topMargin=20 * mm, bottomMargin=20 * mm)
    doc.build(story)
    return buffer.getvalue()


def _para(text, style):
    return Paragraph(escape(str(text)), style)


def render_sales_report(report: SalesReportData, currency: str = '',
                        analysis: Optional[dict] = None) -> bytes:
    styles = getSampleStyleSheet()
    story = [
        _para('Sales Report', styles['Title']),
        _para(f"Period: {report.start_label} to {report.end_label}", styles['Normal']),
        Spacer(1, 6 * mm),
    ]

    summary = Table([
        ['Metric', 'Value'],
        ['Total Sales', _money(currency, report.total_sales)],
        ['Total Orders', str(report.total_orders)],
        ['Average Order Value', _money(currency, report.average_order_value)],
    ], colWidths=[60 * mm, 60 * mm])
    summary.setStyle(HEADER_STYLE)
    story += [summary, Spacer(1, 8 * mm), _para('Product-wise Sales', styles['Heading2'])]

    rows = [['Product', 'Quantity Sold', 'Revenue']]
    for product in sorted(report.products, key=lambda p: p.revenue, reverse=True):
        rows.append([product.name[:50], str(product.quantity), _money(currency, product.revenue)])
    if len(rows) == 1:
        rows.append(['No fulfilled orders in this period', '', ''])
    table = Table(rows, colWidths=[90 * mm, 30 * mm, 40 * mm])
    table.setStyle(HEADER_STYLE)
    story.append(table)

    if analysis and analysis.get('summary'):
        story += [Spacer(1, 8 * mm), _para('Analysis Summary', styles['Heading2']),
                  _para(analysis['summary'], styles['Normal'])]
    if analysis and analysis.get('recommendations'):
        story += [Spacer(1, 4 * mm), _para('Recommendations', styles['Heading2'])]
        story += [_para(f"• {rec}", styles['Normal']) for rec in analysis['recommendations']]

    return _build(story)


def render_inventory_report(products: list[dict], generated_on: Optional[datetime] = None) -> bytes:
    """
    `products` are Product.to_dict() results; grouped by category, sorted by name.
    """
    styles = getSampleStyleSheet()
    generated_on = generated_on or datetime.utcnow()
    story = [
        _para('Inventory Report', styles['Title']),
        _para(f"Generated on: {generated_on.strftime('%Y-%m-%d')}", styles['Normal']),
        Spacer(1, 6 * mm),
    ]

    by_category = OrderedDict()
    for product in sorted(products, key=lambda p: (p.get('category') or '', p.get('name') or '')):
        by_category.setdefault(product.get('category') or 'Uncategorized', []).append(product)

    for category, items in by_category.items():
        story.append(_para(category, styles['Heading2']))
        rows = [['Product', 'SKU', 'Stock', 'Reorder Point', 'Status']]
        for p in items:
            unit = p.get('unit') or ''
            rows.append([
                str(p.get('name', ''))[:40],
                str(p.get('sku', '')),
                f"{p.get('stock', 0)} {unit}".strip(),
                f"{p.get('reorder_point', 0)} {unit}".strip(),
                str(p.get('status', '')),
            ])
        table = Table(rows, colWidths=[55 * mm, 30 * mm, 25 * mm, 30 * mm, 25 * mm])
        table.setStyle(HEADER_STYLE)
        story += [table, Spacer(1, 5 * mm)]

    low_stock = sum(1 for p in products if p.get('stock', 0) <= p.get('reorder_point', 0))
    out_of_stock = sum(1 for p in products if p.get('stock', 0) == 0)
    story += [
        _para('Summary', styles['Heading2']),
        _para(f"Total Products: {len(products)}", styles['Normal']),
        _para(f"Low Stock Items: {low_stock}", styles['Normal']),
        _para(f"Out of Stock Items: {out_of_stock}", styles['Normal']),
    ]
    return _build(story)


def render_invoice(order: dict, currency: str = '') -> bytes:
    """
    `order` is Order.to_dict(); line amounts use the price snapshot stored
    on each item, never the current catalog price.
    """
    styles = getSampleStyleSheet()
    created = (order.get('created_at') or '')[:10]
    story = [
        _para('Invoice', styles['Title']),
        _para(f"Order: {order.get('order_number')}", styles['Normal']),
        _para(f"Date: {created}", styles['Normal']),
        Spacer(1, 5 * mm),
        _para('Customer Details', styles['Heading2']),
        _para(f"Name: {order.get('customer_name')}", styles['Normal']),
        _para(f"Email: {order.get('customer_email')}", styles['Normal']),
    ]
    if order.get('customer_phone'):
        story.append(_para(f"Phone: {order['customer_phone']}", styles['Normal']))
    if order.get('customer_address'):
        story.append(_para(f"Address: {order['customer_address']}", styles['Normal']))
    story.append(Spacer(1, 5 * mm))

    rows = [['Item', 'SKU', 'Qty', 'Unit Price', 'Amount']]
    total = 0.0
    for item in order.get('items', []):
        amount = item['quantity'] * item['price']
        total += amount
        rows.append([
            str(item['product_name'])[:40],
            str(item['sku']),
            str(item['quantity']),
            _money(currency, item['price']),
            _money(currency, amount),
        ])
    rows.append(['', '', '', 'Total', _money(currency, total)])
    table = Table(rows, colWidths=[55 * mm, 30 * mm, 15 * mm, 30 * mm, 35 * mm])
    table.setStyle(HEADER_STYLE)
    table.setStyle(TableStyle([('FONTNAME', (0, -1), (-1, -1), 'Helvetica-Bold')]))
    story.append(table)
    return _build(story)
