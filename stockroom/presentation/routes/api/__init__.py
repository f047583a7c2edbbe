"""
JSON API blueprints. Every route is scoped to the logged-in user.
"""

from datetime import datetime

from flask import request
from flask_login import current_user

from stockroom.business.core.errors import ValidationError


def owner_id():
    """Owner scope of the current request"""
    return current_user.id


def json_body():
    data = request.get_json(silent=True)
    if data is None:
        raise ValidationError({'_': 'Request body must be valid JSON'})
    return data


def query_flag(name):
    return request.args.get(name, '').lower() in ('true', '1', 'yes', 'on')


def query_date(name, end_of_day=False):
    """Parse an ISO date (or datetime) query parameter; None when absent"""
    value = request.args.get(name)
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        raise ValidationError({name: f"{name} must be an ISO date (YYYY-MM-DD)"})
    if end_of_day and len(value) == 10:
        parsed = parsed.replace(hour=23, minute=59, second=59, microsecond=999999)
    return parsed
