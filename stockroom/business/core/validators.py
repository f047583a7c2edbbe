"""
Input validation for request payloads

Validators collect every field problem before raising, so a client sees all
errors of a payload at once. They return cleaned dictionaries keyed by model
column names; callers never touch the raw payload after validation.
"""

import re
from stockroom.business.core.errors import ValidationError

EMAIL_PATTERN = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')


class PasswordValidator:
    """Password strength rules applied on signup"""

    MIN_LENGTH = 8
    MAX_LENGTH = 128
    REQUIRE_UPPERCASE = True
    REQUIRE_LOWERCASE = True
    REQUIRE_DIGIT = True
    REQUIRE_SPECIAL = False

    @classmethod
    def validate(cls, password):
        """
        Returns:
            tuple: (is_valid, error_message) - error_message is empty when valid
        """
        if not password:
            return False, "Password is required"

        if len(password) < cls.MIN_LENGTH:
            return False, f"Password must be at least {cls.MIN_LENGTH} characters"

        if len(password) > cls.MAX_LENGTH:
            return False, f"Password must be less than {cls.MAX_LENGTH} characters"

        if cls.REQUIRE_UPPERCASE and not re.search(r'[A-Z]', password):
            return False, "Password must contain at least one uppercase letter"

        if cls.REQUIRE_LOWERCASE and not re.search(r'[a-z]', password):
            return False, "Password must contain at least one lowercase letter"

        if cls.REQUIRE_DIGIT and not re.search(r'\d', password):
            return False, "Password must contain at least one digit"

        if cls.REQUIRE_SPECIAL and not re.search(r'[!@#$%^&*()_+\-=\[\]{}|;:,.<>?]', password):
            return False, "Password must contain at least one special character"

        return True, ""


def pick(data, *keys, default=None):
    """First present key wins; accepts snake_case and camelCase spellings"""
    for key in keys:
        if key in data:
            return data[key]
    return default


def _is_int(value):
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value):
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _clean_str(value):
    return value.strip() if isinstance(value, str) else value


def _require_dict(data):
    if not isinstance(data, dict):
        raise ValidationError({'_': 'Request body must be a JSON object'})


def _check_non_negative_int(errors, cleaned, field, value):
    if not _is_int(value) or value < 0:
        errors[field] = f"{field} must be a non-negative integer"
    else:
        cleaned[field] = value


def validate_product_payload(data, partial=False):
    """
    Validate a product create (partial=False) or update (partial=True) payload.
    """
    _require_dict(data)
    errors = {}
    cleaned = {}

    for field in ('name', 'sku'):
        value = _clean_str(data.get(field))
        if value is None:
            if not partial:
                errors[field] = f"{field} is required"
        elif not isinstance(value, str) or not value:
            errors[field] = f"{field} must be a non-empty string"
        else:
            cleaned[field] = value

    for field in ('description', 'category', 'unit'):
        if field in data:
            value = _clean_str(data[field])
            if value is not None and not isinstance(value, str):
                errors[field] = f"{field} must be a string"
            elif field == 'category' and not value:
                errors[field] = "category must be a non-empty string"
            elif field == 'unit' and not value:
                errors[field] = "unit must be a non-empty string"
            else:
                cleaned[field] = value

    price = pick(data, 'price')
    if price is None:
        if not partial:
            errors['price'] = "price is required"
    elif not _is_number(price) or price < 0:
        errors['price'] = "price must be a non-negative number"
    else:
        cleaned['price'] = round(float(price), 2)

    stock = pick(data, 'stock')
    if stock is not None:
        _check_non_negative_int(errors, cleaned, 'stock', stock)

    reorder_point = pick(data, 'reorder_point', 'reorderPoint')
    if reorder_point is not None:
        _check_non_negative_int(errors, cleaned, 'reorder_point', reorder_point)

    status = pick(data, 'status')
    if status is not None:
        from stockroom.data.catalog.product import Product
        if status not in Product.STATUSES:
            errors['status'] = f"status must be one of {', '.join(Product.STATUSES)}"
        else:
            cleaned['status'] = status

    supplier_key = 'supplier_id' if 'supplier_id' in data else ('supplierId' if 'supplierId' in data else None)
    if supplier_key is not None:
        supplier_id = data[supplier_key]
        if supplier_id is not None and not _is_int(supplier_id):
            errors['supplier_id'] = "supplier_id must be an integer or null"
        else:
            cleaned['supplier_id'] = supplier_id

    if errors:
        raise ValidationError(errors)
    return cleaned


def validate_supplier_payload(data, partial=False):
    _require_dict(data)
    errors = {}
    cleaned = {}

    name = _clean_str(data.get('name'))
    if name is None:
        if not partial:
            errors['name'] = "name is required"
    elif not isinstance(name, str) or not name:
        errors['name'] = "name must be a non-empty string"
    else:
        cleaned['name'] = name

    if 'contact' in data:
        cleaned['contact'] = _clean_str(data['contact'])

    email = _clean_str(data.get('email'))
    if email:
        if not isinstance(email, str) or not EMAIL_PATTERN.match(email):
            errors['email'] = "email is not a valid address"
        else:
            cleaned['email'] = email.lower()

    lead_key = next((k for k in ('lead_time_days', 'leadTime', 'lead_time') if k in data), None)
    if lead_key is not None:
        lead_time = data[lead_key]
        if lead_time is not None and (not _is_int(lead_time) or lead_time < 0):
            errors['lead_time_days'] = "lead_time_days must be a non-negative integer or null"
        else:
            cleaned['lead_time_days'] = lead_time

    if 'reliability' in data:
        reliability = data['reliability']
        if reliability is not None and (not _is_number(reliability) or not 0 <= reliability <= 100):
            errors['reliability'] = "reliability must be between 0 and 100"
        else:
            cleaned['reliability'] = reliability

    if errors:
        raise ValidationError(errors)
    return cleaned


def validate_order_payload(data):
    """
    Validate an order creation payload.

    Payment comes as a `payment` object (method, status, transactionId) or
    as flat payment_method / payment_status / transaction_id keys.

    Returns a dict with `customer_*` fields, `payment_method`,
    `payment_status` (default pending), optional
    `transaction_id`/`notes`, `items` as a list of (product_id, quantity)
    tuples in request order, and `client_total` (None when not supplied).
    """
    from stockroom.data.orders.order import Order

    _require_dict(data)
    errors = {}
    cleaned = {}

    customer = data.get('customer')
    if customer is None:
        customer = {
            'name': data.get('customer_name'),
            'email': data.get('customer_email'),
            'phone': data.get('customer_phone'),
            'address': data.get('customer_address'),
        }
    if not isinstance(customer, dict):
        errors['customer'] = "customer must be an object"
        customer = {}

    name = _clean_str(customer.get('name'))
    if not name or not isinstance(name, str):
        errors['customer.name'] = "customer name is required"
    else:
        cleaned['customer_name'] = name

    email = _clean_str(customer.get('email'))
    if not email or not isinstance(email, str):
        errors['customer.email'] = "customer email is required"
    elif not EMAIL_PATTERN.match(email):
        errors['customer.email'] = "customer email is not a valid address"
    else:
        cleaned['customer_email'] = email.lower()

    cleaned['customer_phone'] = _clean_str(customer.get('phone'))
    address = customer.get('address')
    if isinstance(address, dict):
        address = ', '.join(str(v) for v in address.values() if v)
    cleaned['customer_address'] = _clean_str(address)

    # Either a nested `payment` object or flat payment_* keys
    payment = data.get('payment')
    if payment is None:
        payment_key = 'payment_method'
        payment = {
            'method': pick(data, 'payment_method', 'paymentMethod'),
            'status': pick(data, 'payment_status', 'paymentStatus'),
            'transaction_id': pick(data, 'transaction_id', 'transactionId'),
        }
    elif isinstance(payment, dict):
        payment_key = 'payment.method'
    else:
        errors['payment'] = "payment must be an object"
        payment_key = 'payment.method'
        payment = {}

    payment_method = payment.get('method')
    if payment_method not in Order.PAYMENT_METHODS:
        errors[payment_key] = f"payment method must be one of {', '.join(Order.PAYMENT_METHODS)}"
    else:
        cleaned['payment_method'] = payment_method

    payment_status = payment.get('status')
    if payment_status is None:
        cleaned['payment_status'] = 'pending'
    elif payment_status not in Order.PAYMENT_STATUSES:
        errors['payment.status'] = f"payment status must be one of {', '.join(Order.PAYMENT_STATUSES)}"
    else:
        cleaned['payment_status'] = payment_status

    cleaned['transaction_id'] = _clean_str(pick(payment, 'transaction_id', 'transactionId'))
    cleaned['notes'] = _clean_str(data.get('notes'))

    items = data.get('items')
    cleaned_items = []
    if not isinstance(items, list) or not items:
        errors['items'] = "Order must contain at least one item"
    else:
        for index, item in enumerate(items):
            if not isinstance(item, dict):
                errors[f'items[{index}]'] = "item must be an object"
                continue
            product_id = pick(item, 'product_id', 'productId', 'product')
            quantity = item.get('quantity')
            if not _is_int(product_id):
                errors[f'items[{index}].product_id'] = "product_id must be an integer"
            if not _is_int(quantity) or quantity < 1:
                errors[f'items[{index}].quantity'] = "quantity must be an integer of at least 1"
            if _is_int(product_id) and _is_int(quantity) and quantity >= 1:
                cleaned_items.append((product_id, quantity))
    cleaned['items'] = cleaned_items

    client_total = pick(data, 'total_amount', 'totalAmount')
    if client_total is not None and (not _is_number(client_total) or client_total < 0):
        errors['totalAmount'] = "totalAmount must be a non-negative number"
        client_total = None
    cleaned['client_total'] = client_total

    if errors:
        raise ValidationError(errors)
    return cleaned


def validate_stock_delta(data):
    _require_dict(data)
    delta = pick(data, 'delta', 'quantity')
    if not _is_int(delta) or delta == 0:
        raise ValidationError({'delta': "delta must be a non-zero integer"})
    return delta
