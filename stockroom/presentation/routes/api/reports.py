"""
Report routes: JSON series, reorder suggestions, performance and PDF exports
"""

from datetime import datetime
from io import BytesIO

from flask import Blueprint, current_app, jsonify, request, send_file
from flask_login import login_required

from stockroom.business.reports.pdf_export import render_inventory_report, render_sales_report
from stockroom.business.reports.variants import MonthlySalesReport, SalesTrendReport, WeeklySalesReport
from stockroom.logger import get_logger
from stockroom.presentation.routes.api import owner_id, query_date
from stockroom.services.analytics.dashboard_service import DashboardService
from stockroom.services.analytics.performance_service import PerformanceService
from stockroom.services.analytics.reorder_service import ReorderService
from stockroom.services.analytics.report_service import ReportService
from stockroom.services.analytics.sales_service import SalesService
from stockroom.services.catalog.product_service import ProductService

logger = get_logger("stockroom.routes.reports")

bp = Blueprint('reports', __name__)


def _series(report_type):
    series = SalesService.daily_series(owner_id(), report_type.days)
    return jsonify([point.to_dict() for point in series])


@bp.route('/weekly-sales', methods=['GET'])
@login_required
def weekly_sales():
    return _series(WeeklySalesReport)


@bp.route('/monthly-sales', methods=['GET'])
@login_required
def monthly_sales():
    return _series(MonthlySalesReport)


@bp.route('/sales-trends', methods=['GET'])
@login_required
def sales_trends():
    return _series(SalesTrendReport)


@bp.route('/reorder-suggestions', methods=['GET'])
@login_required
def reorder_suggestions():
    result = ReorderService.get_suggestions(
        owner_id(),
        priority=request.args.get('priority') or None,
        category=request.args.get('category') or None,
    )
    return jsonify(result.to_dict())


@bp.route('/product-performance', methods=['GET'])
@login_required
def product_performance():
    return jsonify(PerformanceService.get_report(owner_id()).to_payload())


@bp.route('/dashboard', methods=['GET'])
@login_required
def dashboard_report():
    return jsonify(DashboardService.get_report(owner_id()))


@bp.route('/sales', methods=['GET'])
@login_required
def sales_pdf():
    """Sales PDF for fulfilled orders, with the deterministic or AI analysis of the month"""
    start = query_date('startDate')
    end = query_date('endDate', end_of_day=True)
    data = SalesService.sales_report_data(owner_id(), start, end)
    analysis = ReportService.generate(MonthlySalesReport.kind, owner_id()).analysis
    pdf = render_sales_report(data, current_app.config.get('CURRENCY_SYMBOL', ''), analysis)
    logger.info(f"Generated sales report PDF ({data.total_orders} orders)")
    return send_file(
        BytesIO(pdf),
        mimetype='application/pdf',
        as_attachment=True,
        download_name=f"sales-report-{datetime.utcnow().strftime('%Y%m%d')}.pdf",
    )


@bp.route('/inventory', methods=['GET'])
@login_required
def inventory_pdf():
    products = [p.to_dict(include_relationships=False) for p in ProductService.list_products(owner_id())]
    pdf = render_inventory_report(products)
    return send_file(
        BytesIO(pdf),
        mimetype='application/pdf',
        as_attachment=True,
        download_name=f"inventory-report-{datetime.utcnow().strftime('%Y%m%d')}.pdf",
    )
