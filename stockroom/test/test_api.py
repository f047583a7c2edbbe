"""
Tests for the JSON API: authentication, catalog, orders, reports and dashboard
"""
from datetime import datetime, timedelta

from stockroom import db
from stockroom.data.catalog.product import Product
from stockroom.test.conftest import TEST_PASSWORD, login


def product_body(**fields):
    body = {'name': 'Widget', 'sku': 'W-1', 'category': 'Tools', 'price': 12.5, 'stock': 20, 'reorderPoint': 5}
    body.update(fields)
    return body


def order_body(*lines, **extra):
    body = {
        'customer': {'name': 'Ann Buyer', 'email': 'ann@example.com'},
        'paymentMethod': 'cash',
        'items': [{'productId': pid, 'quantity': qty} for pid, qty in lines],
    }
    body.update(extra)
    return body


# Auth ----------------------------------------------------------------------

def test_health_is_public(client):
    assert client.get('/api/health').get_json() == {'status': 'ok'}


def test_protected_routes_require_login(client):
    for url in ('/api/products', '/api/orders', '/api/dashboard/stats', '/api/reports/weekly-sales'):
        response = client.get(url)
        assert response.status_code == 401
        assert response.get_json()['success'] is False


def test_signup_logs_in(client):
    response = client.post('/api/auth/signup', json={
        'name': 'New Owner', 'email': 'New@Example.com', 'password': TEST_PASSWORD,
    })
    assert response.status_code == 201
    assert response.get_json()['user']['email'] == 'new@example.com'
    assert client.get('/api/auth/me').status_code == 200


def test_signup_rejects_duplicate_and_weak_password(client, user):
    duplicate = client.post('/api/auth/signup', json={
        'name': 'Again', 'email': user.email, 'password': TEST_PASSWORD,
    })
    assert duplicate.status_code == 409

    weak = client.post('/api/auth/signup', json={'name': 'Weak', 'email': 'weak@example.com', 'password': 'short'})
    assert weak.status_code == 400
    assert 'password' in weak.get_json()['errors']


def test_login_and_logout(client, user):
    assert login(client, password='WrongPass1').status_code == 401
    assert login(client).status_code == 200
    assert client.post('/api/auth/logout').status_code == 200
    assert client.get('/api/auth/me').status_code == 401


def test_profile_update(authenticated_client, user):
    client = authenticated_client
    response = client.put('/api/auth/profile', json={'name': 'Renamed', 'email': 'Renamed@Example.com'})
    assert response.status_code == 200
    payload = response.get_json()
    assert payload['message'] == 'Profile updated successfully'
    assert payload['user'] == {'id': user.id, 'name': 'Renamed', 'email': 'renamed@example.com'}
    assert client.get('/api/auth/me').get_json()['user']['name'] == 'Renamed'


def test_profile_password_change_needs_current_password(authenticated_client):
    client = authenticated_client
    body = {'name': 'Owner', 'email': 'owner@example.com', 'newPassword': 'N3wPassword'}

    missing = client.put('/api/auth/profile', json=body)
    assert missing.status_code == 400
    assert 'currentPassword' in missing.get_json()['errors']

    wrong = client.put('/api/auth/profile', json=dict(body, currentPassword='WrongPass1'))
    assert wrong.status_code == 400
    assert 'currentPassword' in wrong.get_json()['errors']

    changed = client.put('/api/auth/profile', json=dict(body, currentPassword=TEST_PASSWORD))
    assert changed.status_code == 200

    client.post('/api/auth/logout')
    assert login(client).status_code == 401
    assert login(client, password='N3wPassword').status_code == 200


def test_profile_rejects_taken_email_and_bad_fields(authenticated_client, other_user):
    client = authenticated_client
    taken = client.put('/api/auth/profile', json={'name': 'Owner', 'email': other_user.email})
    assert taken.status_code == 409

    invalid = client.put('/api/auth/profile', json={'name': ' ', 'email': 'nope'})
    assert invalid.status_code == 400
    assert set(invalid.get_json()['errors']) == {'name', 'email'}


# Catalog -------------------------------------------------------------------

def test_product_crud(authenticated_client):
    client = authenticated_client
    created = client.post('/api/products', json=product_body())
    assert created.status_code == 201
    product = created.get_json()
    assert product['reorder_point'] == 5
    assert product['supplier'] is None

    updated = client.put(f"/api/products/{product['id']}", json={'price': 15})
    assert updated.get_json()['price'] == 15.0

    listed = client.get('/api/products?search=widg').get_json()
    assert [p['sku'] for p in listed] == ['W-1']
    assert client.get('/api/products/categories').get_json() == ['Tools']

    assert client.delete(f"/api/products/{product['id']}").status_code == 200
    assert client.get(f"/api/products/{product['id']}").status_code == 404


def test_duplicate_sku_is_conflict(authenticated_client):
    assert authenticated_client.post('/api/products', json=product_body()).status_code == 201
    response = authenticated_client.post('/api/products', json=product_body(name='Other'))
    assert response.status_code == 409
    assert response.get_json()['sku'] == 'W-1'


def test_invalid_product_lists_field_errors(authenticated_client):
    response = authenticated_client.post('/api/products', json={'name': 'No sku', 'price': -3})
    assert response.status_code == 400
    assert set(response.get_json()['errors']) == {'sku', 'price'}


def test_products_are_scoped_to_owner(client, user, other_user, make_product):
    foreign = make_product(other_user)
    login(client)
    assert client.get('/api/products').get_json() == []
    assert client.get(f'/api/products/{foreign.id}').status_code == 404


def test_supplier_lead_time_reaches_product(authenticated_client):
    client = authenticated_client
    supplier = client.post('/api/suppliers', json={'name': 'Acme', 'leadTime': 3}).get_json()
    product = client.post('/api/products', json=product_body(supplierId=supplier['id'])).get_json()
    assert product['supplier']['lead_time_days'] == 3

    assert client.delete(f"/api/suppliers/{supplier['id']}").status_code == 200
    assert client.get(f"/api/products/{product['id']}").get_json()['supplier_id'] is None


def test_stock_adjustment_and_movements(authenticated_client):
    client = authenticated_client
    product = client.post('/api/products', json=product_body(stock=4)).get_json()

    response = client.patch(f"/api/products/{product['id']}/stock", json={'delta': -5})
    assert response.status_code == 409
    assert response.get_json()['product']['available'] == 4

    response = client.patch(f"/api/products/{product['id']}/stock", json={'delta': 6, 'notes': 'Delivery'})
    assert response.get_json()['stock'] == 10

    movements = client.get(f"/api/products/{product['id']}/movements").get_json()
    assert sorted(m['quantity_delta'] for m in movements) == [4, 6]


# Orders --------------------------------------------------------------------

def test_order_lifecycle(authenticated_client):
    client = authenticated_client
    product = client.post('/api/products', json=product_body(stock=10, price=2.5)).get_json()

    created = client.post('/api/orders', json=order_body((product['id'], 4), totalAmount=10))
    assert created.status_code == 201
    order = created.get_json()['order']
    assert order['total_amount'] == 10.0
    assert order['items'][0]['product_name'] == 'Widget'
    assert client.get(f"/api/products/{product['id']}").get_json()['stock'] == 6

    cancelled = client.patch(f"/api/orders/{order['id']}/status", json={'status': 'cancelled'})
    assert cancelled.get_json()['order']['status'] == 'cancelled'
    assert client.get(f"/api/products/{product['id']}").get_json()['stock'] == 10

    bad = client.patch(f"/api/orders/{order['id']}/status", json={'status': 'teleported'})
    assert bad.status_code == 400

    assert [o['id'] for o in client.get('/api/orders?status=cancelled').get_json()] == [order['id']]
    assert client.get('/api/orders?status=unknown').status_code == 400


def test_order_exceeding_stock_is_conflict(authenticated_client):
    client = authenticated_client
    product = client.post('/api/products', json=product_body(stock=1)).get_json()
    response = client.post('/api/orders', json=order_body((product['id'], 2)))
    assert response.status_code == 409
    assert response.get_json()['product']['requested'] == 2
    assert client.get('/api/orders').get_json() == []


def test_order_with_payment_object(authenticated_client):
    client = authenticated_client
    product = client.post('/api/products', json=product_body(stock=5)).get_json()

    payment = {'method': 'card', 'status': 'completed', 'transactionId': 'tx-1'}
    body = order_body((product['id'], 1), payment=payment)
    del body['paymentMethod']
    created = client.post('/api/orders', json=body)
    assert created.status_code == 201
    order = created.get_json()['order']
    assert order['payment_method'] == 'card'
    assert order['payment_status'] == 'completed'
    assert order['transaction_id'] == 'tx-1'

    body['payment'] = {'method': 'card', 'status': 'lost'}
    rejected = client.post('/api/orders', json=body)
    assert rejected.status_code == 400
    assert 'payment.status' in rejected.get_json()['errors']


def test_order_validation_errors(authenticated_client):
    response = authenticated_client.post('/api/orders', json={'items': []})
    assert response.status_code == 400
    errors = response.get_json()['errors']
    assert 'items' in errors
    assert 'customer.name' in errors


def test_invoice_pdf(authenticated_client):
    client = authenticated_client
    product = client.post('/api/products', json=product_body()).get_json()
    order = client.post('/api/orders', json=order_body((product['id'], 1))).get_json()['order']

    response = client.get(f"/api/orders/{order['id']}/invoice")
    assert response.status_code == 200
    assert response.mimetype == 'application/pdf'
    assert response.data.startswith(b'%PDF')


# Reports and dashboard -----------------------------------------------------

def test_weekly_series_is_dense(authenticated_client, user, make_product, make_order):
    product = make_product(user, price=10.0, stock=50)
    make_order(user, [(product, 2)], status='delivered')
    make_order(user, [(product, 1)], status='processing', created_at=datetime.utcnow() - timedelta(days=2))
    make_order(user, [(product, 5)])  # pending: not realized
    make_order(user, [(product, 5)], status='cancelled')

    series = authenticated_client.get('/api/reports/weekly-sales').get_json()
    assert len(series) == 7
    assert series[-1]['date'] == datetime.utcnow().date().isoformat()
    assert series[-1] == {'date': series[-1]['date'], 'totalSales': 20.0, 'orderCount': 1}
    assert series[-3]['totalSales'] == 10.0
    assert sum(point['orderCount'] for point in series) == 2

    assert len(authenticated_client.get('/api/reports/monthly-sales').get_json()) == 30


def test_reorder_suggestions_endpoint(authenticated_client, user, make_product):
    make_product(user, sku='LOW', stock=2, reorder_point=10, category='Tools')
    make_product(user, sku='OK', stock=500, reorder_point=10, category='Food')

    payload = authenticated_client.get('/api/reports/reorder-suggestions').get_json()
    assert payload['totalProducts'] == 2
    assert [s['sku'] for s in payload['suggestions']] == ['LOW']
    assert payload['summary']['highPriority'] == 1
    assert authenticated_client.get('/api/reports/reorder-suggestions').get_json() == payload

    filtered = authenticated_client.get('/api/reports/reorder-suggestions?category=Food').get_json()
    assert filtered['suggestions'] == []
    assert filtered['totalProducts'] == 1

    assert authenticated_client.get('/api/reports/reorder-suggestions?priority=urgent').status_code == 400


def test_dashboard_stats(authenticated_client, user, make_product, make_order):
    a = make_product(user, price=10.0, stock=5, reorder_point=10)
    b = make_product(user, price=4.0, stock=30, reorder_point=10)
    make_order(user, [(a, 5)])
    make_order(user, [(b, 1)], status='cancelled')

    stats = authenticated_client.get('/api/dashboard/stats').get_json()
    assert stats['totalProducts'] == 2
    assert stats['outOfStockProducts'] == 1
    assert stats['lowStockProducts'] == 1
    assert stats['totalOrders'] == 2
    assert stats['pendingOrders'] == 1
    assert stats['revenue'] == {'daily': 50.0, 'weekly': 50.0, 'monthly': 50.0}


def test_dashboard_report_and_performance(authenticated_client, user, make_product, make_order):
    product = make_product(user, name='Lamp', price=8.0, stock=20)
    make_order(user, [(product, 3)], status='shipped')

    report = authenticated_client.get('/api/reports/dashboard').get_json()
    assert report['sales'] == {'monthly': 24.0, 'orderCount': 1}
    assert report['topProducts'][0]['totalQuantity'] == 3

    performance = authenticated_client.get('/api/reports/product-performance').get_json()
    assert performance['products'][0]['name'] == 'Lamp'
    assert performance['products'][0]['unitsSold'] == 3


def test_pdf_reports(authenticated_client, user, make_product, make_order):
    product = make_product(user, stock=20)
    make_order(user, [(product, 2)], status='delivered')

    sales = authenticated_client.get('/api/reports/sales?startDate=2020-01-01')
    assert sales.status_code == 200
    assert sales.data.startswith(b'%PDF')

    inventory = authenticated_client.get('/api/reports/inventory')
    assert inventory.data.startswith(b'%PDF')

    assert authenticated_client.get('/api/reports/sales?startDate=yesterday').status_code == 400
