"""
Error handlers translating domain exceptions into JSON responses
"""

from flask import jsonify
from flask_wtf.csrf import CSRFError
from werkzeug.exceptions import HTTPException

from stockroom import db
from stockroom.business.core.errors import StockroomError
from stockroom.logger import get_logger
from stockroom.utils.logging_sanitizer import sanitize_exception_message

logger = get_logger("stockroom.presentation.errors")


def register_error_handlers(app):

    @app.errorhandler(StockroomError)
    def handle_domain_error(error):
        if error.status_code >= 500:
            logger.error(f"{type(error).__name__}: {error.message}")
        else:
            logger.info(f"{type(error).__name__}: {sanitize_exception_message(error)}")
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(CSRFError)
    def handle_csrf_error(error):
        logger.warning(f"CSRF validation failed: {error.description}")
        return jsonify({'success': False, 'message': error.description}), 400

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify({'success': False, 'message': error.description}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        db.session.rollback()
        logger.error(f"Unhandled error: {sanitize_exception_message(error)}", exc_info=True)
        message = str(error) if app.debug else 'Internal server error'
        return jsonify({'success': False, 'message': message}), 500
