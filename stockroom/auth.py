from flask import Blueprint, jsonify, request
from flask_login import login_user, logout_user, login_required, current_user
from stockroom.business.core.errors import ConflictError, ValidationError
from stockroom.business.core.validators import EMAIL_PATTERN, PasswordValidator
from stockroom.data.core.user import User
from stockroom import db, limiter
from stockroom.logger import get_logger
from stockroom.utils.logging_sanitizer import sanitize_payload

logger = get_logger("stockroom.auth")
auth = Blueprint('auth', __name__)


def _credentials():
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        raise ValidationError({'_': 'Request body must be a JSON object'})
    email = (data.get('email') or '').strip().lower()
    password = data.get('password') or ''
    return data, email, password


@auth.route('/signup', methods=['POST'])
@limiter.limit("10 per hour")
def signup():
    data, email, password = _credentials()
    logger.debug(f"Signup attempt: {sanitize_payload(data)}")

    errors = {}
    name = (data.get('name') or '').strip()
    if not name:
        errors['name'] = 'Name is required'
    if not EMAIL_PATTERN.match(email):
        errors['email'] = 'A valid email is required'
    is_valid, message = PasswordValidator.validate(password)
    if not is_valid:
        errors['password'] = message
    if errors:
        raise ValidationError(errors)

    if User.query.filter_by(email=email).first() is not None:
        logger.warning(f"Signup with existing email: {email}")
        raise ConflictError('An account with this email already exists')

    user = User(name=name, email=email)
    user.set_password(password)
    db.session.add(user)
    db.session.commit()

    login_user(user)
    logger.info(f"New user registered: {email}")
    return jsonify({'success': True, 'user': user.to_public_dict()}), 201


@auth.route('/login', methods=['POST'])
@limiter.limit("5 per minute")
def login():
    data, email, password = _credentials()
    logger.debug(f"Login attempt: {sanitize_payload(data)}")

    if not email or not password:
        logger.warning(f"Login attempt with missing credentials for email: {email}")
        raise ValidationError({'_': 'Please enter both email and password'})

    user = User.query.filter_by(email=email).first()

    if user is None or not user.check_password(password):
        logger.warning(f"Failed login attempt for email: {email}")
        return jsonify({'success': False, 'message': 'Invalid email or password'}), 401

    if not user.is_active:
        logger.warning(f"Login attempt for disabled account: {email}")
        return jsonify({'success': False, 'message': 'Account is disabled'}), 403

    login_user(user, remember=bool(data.get('remember')))
    logger.info(f"Successful login for user: {email}")
    return jsonify({'success': True, 'user': user.to_public_dict()})


@auth.route('/logout', methods=['POST'])
@login_required
def logout():
    email = current_user.email
    logout_user()
    logger.info(f"User logged out: {email}")
    return jsonify({'success': True, 'message': 'You have been logged out'})


@auth.route('/me', methods=['GET'])
@login_required
def me():
    return jsonify({'success': True, 'user': current_user.to_public_dict()})


@auth.route('/profile', methods=['PUT'])
@login_required
@limiter.limit("10 per hour")
def update_profile():
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        raise ValidationError({'_': 'Request body must be a JSON object'})
    logger.debug(f"Profile update for user {current_user.id}: {sanitize_payload(data)}")

    errors = {}
    name = data.get('name')
    name = name.strip() if isinstance(name, str) else ''
    if not name:
        errors['name'] = 'Name is required'
    email = data.get('email')
    email = email.strip().lower() if isinstance(email, str) else ''
    if not EMAIL_PATTERN.match(email):
        errors['email'] = 'A valid email is required'

    new_password = data.get('newPassword') or data.get('new_password')
    current_password = data.get('currentPassword') or data.get('current_password')
    if new_password:
        if not current_password:
            errors['currentPassword'] = 'Current password is required to set a new password'
        elif not current_user.check_password(current_password):
            logger.warning(f"Profile update with wrong current password for user {current_user.id}")
            errors['currentPassword'] = 'Current password is incorrect'
        is_valid, message = PasswordValidator.validate(new_password)
        if not is_valid:
            errors['newPassword'] = message
    if errors:
        raise ValidationError(errors)

    if email != current_user.email:
        taken = User.query.filter(User.email == email, User.id != current_user.id).first()
        if taken is not None:
            raise ConflictError('Email is already in use')

    current_user.name = name
    current_user.email = email
    if new_password:
        current_user.set_password(new_password)
    db.session.commit()

    logger.info(f"Profile updated for user {current_user.id}")
    return jsonify({
        'success': True,
        'message': 'Profile updated successfully',
        'user': current_user.to_public_dict(),
    })
