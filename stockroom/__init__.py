from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_login import LoginManager
from flask_wtf.csrf import CSRFProtect
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
import os
from stockroom.logger import get_logger

# Initialize extensions
db = SQLAlchemy()
migrate = Migrate()
login_manager = LoginManager()
csrf = CSRFProtect()
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["2000 per day", "300 per hour"],
    storage_uri="memory://"  # Use Redis in production for distributed systems
)


def _env_flag(name, default):
    return os.environ.get(name, default).lower() in ('true', '1', 'yes', 'on')


def create_app(config_overrides=None):
    from pathlib import Path

    app = Flask(__name__)

    logger = get_logger("stockroom")
    logger.info("Initializing Flask application")

    # SECURITY: Require SECRET_KEY - from the environment or explicit overrides
    app.config['SECRET_KEY'] = os.environ.get('SECRET_KEY')
    if config_overrides and config_overrides.get('SECRET_KEY'):
        app.config['SECRET_KEY'] = config_overrides['SECRET_KEY']
    if not app.config['SECRET_KEY']:
        logger.critical("SECRET_KEY not set in environment! Application cannot start.")
        raise RuntimeError("SECRET_KEY environment variable is required")

    # Prefer an explicit DATABASE_URL; otherwise keep the SQLite file under instance/
    db_env = os.environ.get('DATABASE_URL')
    if db_env:
        app.config['SQLALCHEMY_DATABASE_URI'] = db_env
    else:
        base_dir = Path(__file__).parent.parent
        instance_dir = base_dir / 'instance'
        instance_dir.mkdir(parents=True, exist_ok=True)
        default_db_path = instance_dir / 'stockroom.db'
        app.config['SQLALCHEMY_DATABASE_URI'] = f"sqlite:///{str(default_db_path.resolve())}"

    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False

    # HTTPS/TLS Configuration
    app.config['ENABLE_HTTPS'] = _env_flag('ENABLE_HTTPS', 'True')
    app.config['FORCE_HTTPS_REDIRECT'] = _env_flag('FORCE_HTTPS_REDIRECT', 'True')

    # Session cookie security configuration
    app.config['SESSION_COOKIE_SECURE'] = _env_flag('SESSION_COOKIE_SECURE', 'True')
    app.config['SESSION_COOKIE_HTTPONLY'] = True
    app.config['SESSION_COOKIE_SAMESITE'] = 'Lax'
    app.config['PERMANENT_SESSION_LIFETIME'] = int(os.environ.get('PERMANENT_SESSION_LIFETIME', '86400'))
    app.config['REMEMBER_COOKIE_SECURE'] = _env_flag('REMEMBER_COOKIE_SECURE', 'True')
    app.config['REMEMBER_COOKIE_HTTPONLY'] = True

    # Optional AI summarization (Together.ai compatible completion endpoint)
    app.config['TOGETHER_API_KEY'] = os.environ.get('TOGETHER_API_KEY')
    app.config['AI_API_URL'] = os.environ.get('AI_API_URL', 'https://api.together.xyz/inference')
    app.config['AI_MODEL'] = os.environ.get('AI_MODEL', 'mistralai/Mixtral-8x7B-Instruct-v0.1')
    app.config['AI_TIMEOUT_SECONDS'] = float(os.environ.get('AI_TIMEOUT_SECONDS', '10'))
    app.config['AI_TRANSPORT'] = None

    # Reports
    app.config['CURRENCY_SYMBOL'] = os.environ.get('CURRENCY_SYMBOL', 'Rs. ')

    if config_overrides:
        app.config.update(config_overrides)

    if app.config['ENABLE_HTTPS']:
        logger.info("HTTPS enforcement enabled")
    else:
        logger.warning("HTTPS enforcement DISABLED - Acceptable for development only!")

    # Initialize extensions with app
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    csrf.init_app(app)
    limiter.init_app(app)

    logger.debug("Extensions initialized")

    # Import models to ensure they're registered with SQLAlchemy
    from stockroom.data.core.user import User
    from stockroom.data.catalog.supplier import Supplier
    from stockroom.data.catalog.product import Product
    from stockroom.data.orders.order import Order
    from stockroom.data.orders.order_item import OrderItem
    from stockroom.data.inventory.stock_movement import StockMovement

    logger.debug("Models imported and registered")

    # Register blueprints
    from stockroom.auth import auth
    from stockroom.presentation.routes import init_app as init_routes

    csrf.exempt(auth)
    app.register_blueprint(auth, url_prefix='/api/auth')
    init_routes(app)

    from stockroom.presentation.errors import register_error_handlers
    register_error_handlers(app)

    from stockroom.cli import register_cli
    register_cli(app)

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({'success': False, 'message': 'Authentication required'}), 401

    # Add HTTPS redirect before request processing
    @app.before_request
    def enforce_https():
        """Redirect HTTP requests to HTTPS if HTTPS enforcement is enabled"""
        if app.config.get('ENABLE_HTTPS') and app.config.get('FORCE_HTTPS_REDIRECT'):
            from flask import request, redirect

            if not request.is_secure and not request.headers.get('X-Forwarded-Proto') == 'https':
                url = request.url.replace('http://', 'https://', 1)
                return redirect(url, code=301)

    # Add security headers to all responses
    @app.after_request
    def set_security_headers(response):
        response.headers['X-Frame-Options'] = 'DENY'
        response.headers['X-Content-Type-Options'] = 'nosniff'
        response.headers['Content-Security-Policy'] = "default-src 'none'; frame-ancestors 'none'"
        response.headers['Cache-Control'] = 'no-store'
        if app.config.get('ENABLE_HTTPS'):
            response.headers['Strict-Transport-Security'] = 'max-age=31536000; includeSubDomains'
        return response

    logger.info("Flask application initialization complete")

    return app
