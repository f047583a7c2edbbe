"""
Tests for request payload validation and password rules
"""
import pytest

from stockroom.business.core.errors import ValidationError
from stockroom.business.core.validators import (
    PasswordValidator,
    validate_order_payload,
    validate_product_payload,
    validate_stock_delta,
    validate_supplier_payload,
)


def test_password_rules():
    assert PasswordValidator.validate('Passw0rdTest') == (True, "")
    assert PasswordValidator.validate('') == (False, "Password is required")
    assert PasswordValidator.validate('Sh0rt')[0] is False
    assert PasswordValidator.validate('alllowercase1')[0] is False
    assert PasswordValidator.validate('ALLUPPERCASE1')[0] is False
    assert PasswordValidator.validate('NoDigitsHere')[0] is False


def test_product_payload_accepts_camel_case_and_rounds_price():
    cleaned = validate_product_payload({
        'name': ' Widget ', 'sku': 'W-1', 'price': 9.999, 'reorderPoint': 4, 'supplierId': None,
    })
    assert cleaned == {'name': 'Widget', 'sku': 'W-1', 'price': 10.0, 'reorder_point': 4, 'supplier_id': None}


def test_product_payload_collects_all_errors():
    with pytest.raises(ValidationError) as exc:
        validate_product_payload({'price': -1, 'stock': 2.5, 'status': 'gone'})
    assert set(exc.value.errors) == {'name', 'sku', 'price', 'stock', 'status'}


def test_partial_product_payload_skips_required_fields():
    assert validate_product_payload({'category': 'Tools'}, partial=True) == {'category': 'Tools'}


def test_boolean_is_not_an_integer():
    with pytest.raises(ValidationError) as exc:
        validate_product_payload({'name': 'A', 'sku': 'B', 'price': 1, 'stock': True})
    assert 'stock' in exc.value.errors


def test_supplier_payload():
    cleaned = validate_supplier_payload({'name': 'Acme', 'email': 'Sales@Acme.io', 'leadTime': 5})
    assert cleaned == {'name': 'Acme', 'email': 'sales@acme.io', 'lead_time_days': 5}
    with pytest.raises(ValidationError) as exc:
        validate_supplier_payload({'name': 'Acme', 'reliability': 150, 'lead_time_days': -2})
    assert set(exc.value.errors) == {'reliability', 'lead_time_days'}


def test_order_payload_nested_customer():
    cleaned = validate_order_payload({
        'customer': {'name': 'Ann', 'email': 'ANN@example.com', 'address': {'city': 'Pune', 'zip': '411001'}},
        'paymentMethod': 'card',
        'items': [{'productId': 3, 'quantity': 2}, {'product_id': 4, 'quantity': 1}],
        'totalAmount': 30,
    })
    assert cleaned['customer_email'] == 'ann@example.com'
    assert cleaned['customer_address'] == 'Pune, 411001'
    assert cleaned['items'] == [(3, 2), (4, 1)]
    assert cleaned['client_total'] == 30


def test_order_payload_errors_are_keyed_by_item():
    with pytest.raises(ValidationError) as exc:
        validate_order_payload({
            'customer_name': 'Ann',
            'customer_email': 'not-an-email',
            'payment_method': 'barter',
            'items': [{'product_id': 1, 'quantity': 0}, {'product_id': 'x', 'quantity': 1}],
        })
    errors = exc.value.errors
    assert 'customer.email' in errors
    assert 'payment_method' in errors
    assert 'items[0].quantity' in errors
    assert 'items[1].product_id' in errors


def test_order_without_items_is_rejected():
    with pytest.raises(ValidationError) as exc:
        validate_order_payload({'customer_name': 'Ann', 'customer_email': 'a@b.co', 'payment_method': 'cash', 'items': []})
    assert exc.value.errors == {'items': 'Order must contain at least one item'}


def test_order_payload_nested_payment():
    cleaned = validate_order_payload({
        'customer': {'name': 'Ann', 'email': 'ann@example.com'},
        'payment': {'method': 'card', 'status': 'completed', 'transactionId': 'tx-1'},
        'items': [{'productId': 3, 'quantity': 1}],
    })
    assert cleaned['payment_method'] == 'card'
    assert cleaned['payment_status'] == 'completed'
    assert cleaned['transaction_id'] == 'tx-1'


def test_flat_payment_defaults_to_pending():
    cleaned = validate_order_payload({
        'customer_name': 'Ann', 'customer_email': 'a@b.co', 'payment_method': 'cash',
        'items': [{'product_id': 1, 'quantity': 1}],
    })
    assert cleaned['payment_status'] == 'pending'
    assert cleaned['transaction_id'] is None


def test_nested_payment_errors():
    with pytest.raises(ValidationError) as exc:
        validate_order_payload({
            'customer_name': 'Ann', 'customer_email': 'a@b.co',
            'payment': {'method': 'barter', 'status': 'maybe'},
            'items': [{'product_id': 1, 'quantity': 1}],
        })
    assert set(exc.value.errors) == {'payment.method', 'payment.status'}

    with pytest.raises(ValidationError) as exc:
        validate_order_payload({
            'customer_name': 'Ann', 'customer_email': 'a@b.co', 'payment': 'card',
            'items': [{'product_id': 1, 'quantity': 1}],
        })
    assert 'payment' in exc.value.errors


def test_stock_delta():
    assert validate_stock_delta({'delta': -3}) == -3
    assert validate_stock_delta({'quantity': 5}) == 5
    for bad in ({'delta': 0}, {'delta': 1.5}, {}, []):
        with pytest.raises(ValidationError):
            validate_stock_delta(bad)
