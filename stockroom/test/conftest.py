"""
Pytest configuration and fixtures
"""
import pytest
from stockroom import create_app
from stockroom import db as _db
from stockroom.build import build_models
from stockroom.data.core.user import User

TEST_PASSWORD = 'Passw0rdTest'

TEST_CONFIG = {
    'SECRET_KEY': 'test-secret-key',
    'TESTING': True,
    'SQLALCHEMY_DATABASE_URI': 'sqlite://',
    'WTF_CSRF_ENABLED': False,
    'RATELIMIT_ENABLED': False,
    'ENABLE_HTTPS': False,
    'FORCE_HTTPS_REDIRECT': False,
    'SESSION_COOKIE_SECURE': False,
    'REMEMBER_COOKIE_SECURE': False,
    'TOGETHER_API_KEY': None,
}


@pytest.fixture(scope='function')
def app_factory():
    """Build an app with extra config; tables exist inside the yielded context"""
    contexts = []

    def factory(**overrides):
        app = create_app(dict(TEST_CONFIG, **overrides))
        ctx = app.app_context()
        ctx.push()
        build_models()
        contexts.append(ctx)
        return app

    yield factory

    for ctx in reversed(contexts):
        _db.session.remove()
        _db.drop_all()
        ctx.pop()


@pytest.fixture(scope='function')
def app(app_factory):
    """Create Flask application for testing"""
    return app_factory()


@pytest.fixture(scope='function')
def client(app):
    """Create Flask test client"""
    return app.test_client()


def make_user(email='owner@example.com', name='Owner'):
    user = User(name=name, email=email)
    user.set_password(TEST_PASSWORD)
    _db.session.add(user)
    _db.session.commit()
    return user


@pytest.fixture(scope='function')
def user(app):
    return make_user()


@pytest.fixture(scope='function')
def other_user(app):
    return make_user(email='other@example.com', name='Other')


def login(client, email='owner@example.com', password=TEST_PASSWORD):
    """Helper function to login a user"""
    return client.post('/api/auth/login', json={'email': email, 'password': password})


@pytest.fixture(scope='function')
def authenticated_client(client, user):
    """Test client logged in as `user`"""
    response = login(client)
    assert response.status_code == 200
    return client


@pytest.fixture(scope='function')
def make_product(app):
    """Factory creating products directly through the catalog manager"""
    from stockroom.business.inventory.catalog_manager import CatalogManager

    counter = {'n': 0}

    def factory(owner, **fields):
        counter['n'] += 1
        data = {
            'name': f"Product {counter['n']}",
            'sku': f"SKU-{counter['n']:03d}",
            'category': 'General',
            'price': 10.0,
            'stock': 10,
            'reorder_point': 10,
        }
        data.update(fields)
        return CatalogManager(owner.id).create_product(data)

    return factory


@pytest.fixture(scope='function')
def make_order(app):
    """
    Factory creating orders through the order manager.
    `lines` is a list of (product, quantity); status and created_at are
    applied afterwards.
    """
    from stockroom.business.orders.order_manager import OrderManager

    def factory(owner, lines, status=None, created_at=None):
        manager = OrderManager(owner.id)
        order = manager.create_order({
            'customer_name': 'Test Customer',
            'customer_email': 'customer@example.com',
            'payment_method': 'cash',
            'items': [(product.id, qty) for product, qty in lines],
        })
        if status and status != order.status:
            order = manager.update_status(order.id, status)
        if created_at is not None:
            order.created_at = created_at
            _db.session.commit()
        return order

    return factory
