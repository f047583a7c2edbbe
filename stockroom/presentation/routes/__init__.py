"""
Routes package for the stockroom JSON API
"""

from flask import jsonify
from flask_wtf.csrf import generate_csrf
from stockroom.logger import get_logger

logger = get_logger("stockroom.routes")


def init_app(app):
    """Initialize all route blueprints with the Flask app"""
    logger.debug("Initializing route blueprints")

    from .api import ai, dashboard, orders, products, reports, suppliers

    app.register_blueprint(suppliers.bp, url_prefix='/api/suppliers')
    app.register_blueprint(products.bp, url_prefix='/api/products')
    app.register_blueprint(orders.bp, url_prefix='/api/orders')
    app.register_blueprint(dashboard.bp, url_prefix='/api/dashboard')
    app.register_blueprint(reports.bp, url_prefix='/api/reports')
    app.register_blueprint(ai.bp, url_prefix='/api/ai')

    @app.route('/api/csrf-token')
    def csrf_token():
        return jsonify({'csrfToken': generate_csrf()})

    @app.route('/api/health')
    def health():
        return jsonify({'status': 'ok'})

    logger.info("Route blueprints registered")
