"""
Supplier routes
"""

from flask import Blueprint, jsonify
from flask_login import login_required

from stockroom.business.core.validators import validate_supplier_payload
from stockroom.business.inventory.catalog_manager import CatalogManager
from stockroom.logger import get_logger
from stockroom.presentation.routes.api import json_body, owner_id
from stockroom.services.catalog.supplier_service import SupplierService

logger = get_logger("stockroom.routes.suppliers")

bp = Blueprint('suppliers', __name__)


@bp.route('', methods=['GET'])
@login_required
def list_suppliers():
    suppliers = SupplierService.list_suppliers(owner_id())
    return jsonify([s.to_dict() for s in suppliers])


@bp.route('', methods=['POST'])
@login_required
def create_supplier():
    data = validate_supplier_payload(json_body())
    supplier = CatalogManager(owner_id()).create_supplier(data)
    return jsonify(supplier.to_dict()), 201


@bp.route('/<int:supplier_id>', methods=['GET'])
@login_required
def get_supplier(supplier_id):
    return jsonify(SupplierService.get_supplier(owner_id(), supplier_id).to_dict())


@bp.route('/<int:supplier_id>', methods=['PUT'])
@login_required
def update_supplier(supplier_id):
    data = validate_supplier_payload(json_body(), partial=True)
    supplier = CatalogManager(owner_id()).update_supplier(supplier_id, data)
    return jsonify(supplier.to_dict())


@bp.route('/<int:supplier_id>', methods=['DELETE'])
@login_required
def delete_supplier(supplier_id):
    CatalogManager(owner_id()).delete_supplier(supplier_id)
    return jsonify({'success': True, 'message': 'Supplier deleted'})
