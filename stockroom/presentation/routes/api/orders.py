"""
Order routes
"""

from flask import Blueprint, current_app, jsonify, request, send_file
from flask_login import current_user, login_required
from io import BytesIO

from stockroom.business.core.validators import validate_order_payload
from stockroom.business.orders.order_manager import OrderManager
from stockroom.business.reports.pdf_export import render_invoice
from stockroom.logger import get_logger
from stockroom.presentation.routes.api import json_body, owner_id
from stockroom.services.orders.order_service import OrderService
from stockroom.utils.logging_sanitizer import sanitize_payload

logger = get_logger("stockroom.routes.orders")

bp = Blueprint('orders', __name__)


@bp.route('', methods=['GET'])
@login_required
def list_orders():
    orders = OrderService.list_orders(owner_id(), status=request.args.get('status') or None)
    return jsonify([o.to_dict() for o in orders])


@bp.route('', methods=['POST'])
@login_required
def create_order():
    payload = json_body()
    logger.info(f"Create order request from user {current_user.id}: {sanitize_payload(payload)}")
    data = validate_order_payload(payload)
    order = OrderManager(owner_id()).create_order(data, processed_by_id=current_user.id)
    return jsonify({'success': True, 'order': order.to_dict()}), 201


@bp.route('/<int:order_id>', methods=['GET'])
@login_required
def get_order(order_id):
    return jsonify(OrderService.get_order(owner_id(), order_id).to_dict())


@bp.route('/<int:order_id>/status', methods=['PATCH'])
@login_required
def update_status(order_id):
    payload = json_body()
    status = payload.get('status') if isinstance(payload, dict) else None
    order = OrderManager(owner_id()).update_status(order_id, status)
    return jsonify({'success': True, 'order': order.to_dict(), 'message': 'Order status updated successfully'})


@bp.route('/<int:order_id>/invoice', methods=['GET'])
@login_required
def invoice(order_id):
    order = OrderService.get_order(owner_id(), order_id)
    pdf = render_invoice(order.to_dict(), current_app.config.get('CURRENCY_SYMBOL', ''))
    return send_file(
        BytesIO(pdf),
        mimetype='application/pdf',
        as_attachment=True,
        download_name=f"invoice-{order.order_number}.pdf",
    )
