"""
Tests for PDF exports, the demo data build and the CLI commands
"""
from datetime import datetime

import pytest

from stockroom.business.analytics.reorder_engine import ReorderInput, suggest_reorders
from stockroom.business.reports.pdf_export import (
    ProductSales,
    SalesReportData,
    render_inventory_report,
    render_invoice,
    render_sales_report,
)
from stockroom.cli import REORDER_HEADERS, format_reorder_table
from stockroom.data.catalog.product import Product
from stockroom.data.orders.order import Order


def test_sales_report_pdf():
    report = SalesReportData(
        start_label='2024-03-01',
        end_label='2024-03-31',
        total_sales=150.0,
        total_orders=3,
        products=[ProductSales('Lamp <deluxe>', 2, 100.0), ProductSales('Bulb & holder', 5, 50.0)],
    )
    assert report.average_order_value == 50.0
    pdf = render_sales_report(report, 'Rs. ', {'summary': 'Fine', 'recommendations': ['Restock lamps']})
    assert pdf.startswith(b'%PDF')


def test_empty_sales_report_pdf():
    report = SalesReportData('All time', 'Present', 0.0, 0)
    assert report.average_order_value == 0.0
    assert render_sales_report(report).startswith(b'%PDF')


def test_inventory_and_invoice_pdf():
    products = [
        {'name': 'Lamp', 'sku': 'L-1', 'category': 'Lighting', 'unit': 'piece', 'stock': 0, 'reorder_point': 2,
         'status': 'active'},
        {'name': 'Rope', 'sku': 'R-1', 'category': None, 'stock': 12, 'reorder_point': 2, 'status': 'active'},
    ]
    assert render_inventory_report(products, datetime(2024, 3, 1)).startswith(b'%PDF')

    order = {
        'order_number': 'ORD-2403-0001',
        'created_at': '2024-03-01T10:00:00',
        'customer_name': 'Ann',
        'customer_email': 'ann@example.com',
        'customer_address': '1 Main St',
        'items': [{'product_name': 'Lamp', 'sku': 'L-1', 'quantity': 2, 'price': 12.5}],
    }
    assert render_invoice(order, '$').startswith(b'%PDF')


def test_format_reorder_table():
    result = suggest_reorders([
        ReorderInput(product_id=1, name='Lamp', sku='L-1', stock=1, reorder_point=5, price=3.0, daily_sales=0.5),
    ])
    table = format_reorder_table(result)
    for header in REORDER_HEADERS:
        assert header in table
    assert 'L-1' in table
    assert 'No supplier assigned' in table


def test_init_db_with_demo_data(app, monkeypatch):
    monkeypatch.delenv('DEMO_USER_EMAIL', raising=False)
    runner = app.test_cli_runner()

    result = runner.invoke(args=['init-db', '--seed-demo'])
    assert result.exit_code == 0, result.output
    assert 'Database initialized.' in result.output

    assert Product.query.count() == 5
    assert Order.query.count() == 3
    stock = {p.sku: p.stock for p in Product.query.all()}
    assert stock == {'RICE-5KG': 38, 'OIL-1L': 9, 'TEA-250': 55, 'COF-100': 6, 'SOAP-500': 21}

    # Second run finds the demo user and leaves data alone
    assert runner.invoke(args=['init-db', '--seed-demo']).exit_code == 0
    assert Order.query.count() == 3

    report = runner.invoke(args=['reorder-report', 'demo@stockroom.local'])
    assert report.exit_code == 0, report.output
    assert report.output.index('OIL-1L') < report.output.index('COF-100')
    assert 'High: 2' in report.output

    low_only = runner.invoke(args=['reorder-report', 'demo@stockroom.local', '--priority', 'low'])
    assert 'No products need reordering (5 products checked).' in low_only.output


def test_reorder_report_unknown_user(app):
    result = app.test_cli_runner().invoke(args=['reorder-report', 'nobody@example.com'])
    assert result.exit_code != 0
    assert 'No user with email nobody@example.com' in result.output


@pytest.mark.parametrize('status', ['pending', 'processing', 'shipped', 'delivered', 'cancelled'])
def test_every_status_accepts_invoice(authenticated_client, user, make_product, make_order, status):
    product = make_product(user, stock=5)
    order = make_order(user, [(product, 1)], status=status)
    response = authenticated_client.get(f'/api/orders/{order.id}/invoice')
    assert response.status_code == 200
