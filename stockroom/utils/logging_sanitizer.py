"""
Logging Sanitizer Utility

Redacts credentials and payment secrets from request payloads before they are logged.
"""

from typing import Dict, Any, List


# Fields that should never be logged
SENSITIVE_FIELDS = {
    'password',
    'password_confirm',
    'confirm_password',
    'current_password',
    'new_password',
    'currentpassword',
    'newpassword',
    'secret',
    'token',
    'api_key',
    'apikey',
    'access_token',
    'refresh_token',
    'csrf_token',
    'transactionid',
    'transaction_id',
    'credit_card',
    'card_number',
    'cvv',
}


def _sanitize_value(value: Any, redact_text: str) -> Any:
    if isinstance(value, dict):
        return sanitize_dict(value, redact_text)
    if isinstance(value, list):
        return [_sanitize_value(item, redact_text) for item in value]
    return value


def sanitize_dict(data: Dict[str, Any], redact_text: str = '[REDACTED]') -> Dict[str, Any]:
    """
    Sanitize a dictionary by replacing sensitive field values with redaction text.

    Nested dictionaries and lists of dictionaries (order items, for instance) are
    walked recursively.

    Example:
        >>> sanitize_dict({'email': 'a@b.c', 'password': 'secret123'})
        {'email': 'a@b.c', 'password': '[REDACTED]'}
    """
    if not data:
        return data

    sanitized = {}
    for key, value in data.items():
        if str(key).lower() in SENSITIVE_FIELDS:
            sanitized[key] = redact_text
        else:
            sanitized[key] = _sanitize_value(value, redact_text)

    return sanitized


def sanitize_payload(payload: Any, redact_text: str = '[REDACTED]') -> Any:
    """Sanitize a decoded JSON request body (object, list or scalar)."""
    return _sanitize_value(payload, redact_text)


def sanitize_exception_message(exception: Exception) -> str:
    """
    Sanitize exception messages to ensure they don't contain sensitive data.
    """
    message = str(exception)

    if any(field in message.lower() for field in SENSITIVE_FIELDS):
        return f"{type(exception).__name__}: [Message contains sensitive data]"

    return message


def redacted_keys(data: Dict[str, Any]) -> List[str]:
    """List the top-level keys that sanitize_dict would redact."""
    return [key for key in (data or {}) if str(key).lower() in SENSITIVE_FIELDS]
