"""Credential verification, token issuance and role gating."""
import enum
import logging
from functools import wraps

import bcrypt
from flask import current_app, jsonify
from flask_jwt_extended import (
    create_access_token,
    get_jwt,
    get_jwt_identity,
    verify_jwt_in_request,
)

from hotelsite import jwt
from hotelsite.errors import AuthenticationError, AuthorizationError
from hotelsite.models import User

logger = logging.getLogger(__name__)


class Role(enum.IntEnum):
    PUBLIC = 0
    USER = 1
    ADMIN = 2
    SUPER_ADMIN = 3

    @classmethod
    def from_name(cls, name):
        return _ROLE_BY_NAME.get(name, cls.PUBLIC)


_ROLE_BY_NAME = {
    'user': Role.USER,
    'admin': Role.ADMIN,
    'super-admin': Role.SUPER_ADMIN,
}


def hash_password(password):
    rounds = current_app.config.get('BCRYPT_ROUNDS', 8)
    return bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt(rounds=rounds)).decode('utf-8')


def check_password(password, hashed):
    try:
        return bcrypt.checkpw(password.encode('utf-8'), hashed.encode('utf-8'))
    except ValueError:
        # hash corrupto o no bcrypt
        return False


def verify_credentials(email, password):
    """Return the matching user or raise ``AuthenticationError``."""
    user = User.query.filter_by(email=email.strip().lower()).first()
    if not user or not check_password(password, user.password):
        logger.info('Failed login for %s', email)
        raise AuthenticationError('Invalid email or password')
    return user


def issue_token(user):
    return create_access_token(identity=str(user.id), additional_claims={'role': user.role})


def current_user_id():
    return int(get_jwt_identity())


def current_role():
    return Role.from_name(get_jwt().get('role'))


def role_required(minimum):
    """Reject the request unless the caller's role tier is at least ``minimum``.

    Runs before the wrapped handler, so no data access happens on failure.
    """

    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            if minimum > Role.PUBLIC:
                verify_jwt_in_request()
                if current_role() < minimum:
                    raise AuthorizationError(_FORBIDDEN_MESSAGES.get(minimum, 'Forbidden'))
            return fn(*args, **kwargs)

        return wrapper

    return decorator


def optional_role():
    """Role of the caller when a valid token is present, PUBLIC otherwise."""
    if verify_jwt_in_request(optional=True) is None:
        return Role.PUBLIC
    return current_role()


_FORBIDDEN_MESSAGES = {
    Role.ADMIN: 'Forbidden: Admin access required',
    Role.SUPER_ADMIN: 'Forbidden: Super admin access required',
}


def _unauthorized(message):
    return jsonify({'success': False, 'error': message}), AuthenticationError.status_code


@jwt.unauthorized_loader
def missing_token(reason):
    return _unauthorized('Unauthorized')


@jwt.invalid_token_loader
def invalid_token(reason):
    return _unauthorized('Invalid token')


@jwt.expired_token_loader
def expired_token(jwt_header, jwt_payload):
    return _unauthorized('Token has expired')
