"""
Dashboard routes
"""

from flask import Blueprint, jsonify
from flask_login import login_required

from stockroom.presentation.routes.api import owner_id
from stockroom.services.analytics.dashboard_service import DashboardService

bp = Blueprint('dashboard', __name__)


@bp.route('/stats', methods=['GET'])
@login_required
def stats():
    return jsonify(DashboardService.get_stats(owner_id()))
