"""
Product catalog routes
"""

from flask import Blueprint, jsonify, request
from flask_login import login_required

from stockroom.business.core.validators import validate_product_payload, validate_stock_delta
from stockroom.business.inventory.catalog_manager import CatalogManager
from stockroom.logger import get_logger
from stockroom.presentation.routes.api import json_body, owner_id, query_flag
from stockroom.services.catalog.product_service import ProductService
from stockroom.utils.logging_sanitizer import sanitize_payload

logger = get_logger("stockroom.routes.products")

bp = Blueprint('products', __name__)


@bp.route('', methods=['GET'])
@login_required
def list_products():
    products = ProductService.list_products(
        owner_id(),
        search=request.args.get('search', '').strip() or None,
        category=request.args.get('category') or None,
        low_stock=query_flag('low_stock'),
    )
    return jsonify([p.to_dict() for p in products])


@bp.route('/categories', methods=['GET'])
@login_required
def list_categories():
    return jsonify(ProductService.list_categories(owner_id()))


@bp.route('', methods=['POST'])
@login_required
def create_product():
    payload = json_body()
    logger.debug(f"Create product request: {sanitize_payload(payload)}")
    product = CatalogManager(owner_id()).create_product(validate_product_payload(payload))
    return jsonify(product.to_dict()), 201


@bp.route('/<int:product_id>', methods=['GET'])
@login_required
def get_product(product_id):
    return jsonify(ProductService.get_product(owner_id(), product_id).to_dict())


@bp.route('/<int:product_id>', methods=['PUT'])
@login_required
def update_product(product_id):
    data = validate_product_payload(json_body(), partial=True)
    product = CatalogManager(owner_id()).update_product(product_id, data)
    return jsonify(product.to_dict())


@bp.route('/<int:product_id>', methods=['DELETE'])
@login_required
def delete_product(product_id):
    CatalogManager(owner_id()).delete_product(product_id)
    return jsonify({'success': True, 'message': 'Product deleted'})


@bp.route('/<int:product_id>/stock', methods=['PATCH'])
@login_required
def adjust_stock(product_id):
    payload = json_body()
    delta = validate_stock_delta(payload)
    notes = payload.get('notes') if isinstance(payload.get('notes'), str) else None
    product = CatalogManager(owner_id()).adjust_stock(product_id, delta, notes=notes)
    return jsonify(product.to_dict())


@bp.route('/<int:product_id>/movements', methods=['GET'])
@login_required
def list_movements(product_id):
    limit = request.args.get('limit', type=int)
    movements = ProductService.get_movements(owner_id(), product_id, limit=limit)
    return jsonify([m.to_dict() for m in movements])
