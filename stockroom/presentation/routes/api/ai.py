"""
AI analysis routes. All of them answer even when no AI service is configured.
"""

from flask import Blueprint, current_app, jsonify
from flask_login import login_required

from stockroom import limiter
from stockroom.business.core.errors import ValidationError
from stockroom.business.core.validators import pick
from stockroom.presentation.routes.api import json_body, owner_id
from stockroom.services.analytics.reorder_service import ReorderService
from stockroom.services.analytics.report_service import ReportService

bp = Blueprint('ai', __name__)


@bp.route('/health', methods=['GET'])
@login_required
def health():
    available = bool(current_app.config.get('TOGETHER_API_KEY'))
    return jsonify({
        'available': available,
        'message': 'AI service is available' if available else 'AI service is not configured',
    })


@bp.route('/reports/<kind>', methods=['GET'])
@login_required
@limiter.limit("30 per minute")
def report(kind):
    return jsonify(ReportService.generate(kind, owner_id()).to_dict())


@bp.route('/analyze', methods=['POST'])
@login_required
@limiter.limit("30 per minute")
def analyze():
    payload = json_body()
    kind = pick(payload, 'reportType', 'report_type') if isinstance(payload, dict) else None
    data = payload.get('data') if isinstance(payload, dict) else None
    if not kind or data is None:
        raise ValidationError({'reportType': 'Report type and data are required'})
    result = ReportService.analyze_payload(kind, data)
    return jsonify(dict(result.to_dict(), success=True))


@bp.route('/predict/sales/<int:product_id>', methods=['GET'])
@login_required
@limiter.limit("30 per minute")
def predict_sales(product_id):
    return jsonify(ReportService.predict_product_sales(owner_id(), product_id).to_dict())


@bp.route('/recommendations/inventory', methods=['GET'])
@login_required
def inventory_recommendations():
    return jsonify(ReorderService.velocity_recommendations(owner_id()))
