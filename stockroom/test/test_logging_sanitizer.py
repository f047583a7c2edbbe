"""
Test the logging sanitizer utility.
Verifies passwords and payment secrets are redacted from logged payloads.
"""

from stockroom.utils.logging_sanitizer import (
    SENSITIVE_FIELDS,
    redacted_keys,
    sanitize_dict,
    sanitize_exception_message,
    sanitize_payload,
)


def test_sanitize_dict():
    """Test dictionary sanitization"""
    result = sanitize_dict({'email': 'owner@example.com', 'password': 'secret123'})
    assert result['email'] == 'owner@example.com', "Email should not be redacted"
    assert result['password'] == '[REDACTED]', "Password should be redacted"

    # Case-insensitive keys
    result = sanitize_dict({'Password': 'a', 'API_KEY': 'b', 'transactionId': 'c'})
    assert set(result.values()) == {'[REDACTED]'}

    # Nested dictionaries
    result = sanitize_dict({'customer': {'name': 'Ann', 'token': 'xyz'}})
    assert result['customer']['name'] == 'Ann'
    assert result['customer']['token'] == '[REDACTED]'

    assert sanitize_dict({}) == {}
    assert sanitize_dict(None) is None


def test_sanitize_order_payload():
    """Order bodies carry lists of items and a transaction id"""
    payload = {
        'customer': {'name': 'Ann', 'email': 'ann@example.com'},
        'paymentMethod': 'card',
        'transactionId': 'txn-4242',
        'items': [{'productId': 1, 'quantity': 2, 'card_number': '4111'}],
    }
    result = sanitize_payload(payload)
    assert result['transactionId'] == '[REDACTED]'
    assert result['items'][0]['card_number'] == '[REDACTED]'
    assert result['items'][0]['quantity'] == 2
    # Original is not modified
    assert payload['transactionId'] == 'txn-4242'

    assert sanitize_payload([{'password': 'x'}]) == [{'password': '[REDACTED]'}]
    assert sanitize_payload('plain') == 'plain'


def test_custom_redact_text():
    assert sanitize_dict({'secret': 'x'}, redact_text='***') == {'secret': '***'}


def test_sanitize_exception_message():
    assert sanitize_exception_message(ValueError('Product not found: 4')) == 'Product not found: 4'
    assert sanitize_exception_message(ValueError('bad password for user')) == \
        'ValueError: [Message contains sensitive data]'


def test_redacted_keys():
    assert redacted_keys({'email': 'a', 'password': 'b', 'csrf_token': 'c'}) == ['password', 'csrf_token']
    assert redacted_keys(None) == []
    assert 'password' in SENSITIVE_FIELDS


def test_sanitize_profile_payload():
    payload = {'name': 'Ann', 'currentPassword': 'Old1Password', 'newPassword': 'N3wPassword'}
    assert sanitize_payload(payload) == {'name': 'Ann', 'currentPassword': '[REDACTED]', 'newPassword': '[REDACTED]'}
