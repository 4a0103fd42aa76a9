"""
Request identity helpers built on flask-jwt-extended.

Tokens carry the user id as their identity; the permission flag is read
from the users table on each request so demotions apply immediately.
"""
from functools import wraps
import logging

from flask import g
from flask_jwt_extended import get_jwt_identity
from flask_jwt_extended import verify_jwt_in_request

from db import get_connection
from models import User

logger = logging.getLogger(__name__)

_UNSET = object()


def current_user():
    """Return the User behind the request's bearer token, or None when anonymous"""
    cached = g.get('_current_user', _UNSET)
    if cached is not _UNSET:
        return cached

    verify_jwt_in_request(optional=True)
    identity = get_jwt_identity()
    user = None
    if identity is not None:
        with get_connection() as conn:
            cur = conn.cursor()
            cur.execute('SELECT * FROM users WHERE id = %s', (int(identity),))
            user_data = cur.fetchone()
        if user_data:
            user = User(**user_data)
        else:
            logger.warning("Token identity %s does not match any user", identity)

    g._current_user = user
    return user


def current_identity():
    """Return (uid, is_admin) for the request; uid is None when anonymous"""
    user = current_user()
    if user is None:
        return None, False
    return user.id, user.is_admin


def login_required(fn):
    """Reject anonymous requests with 401"""

    @wraps(fn)
    def wrapper(*args, **kwargs):
        if current_user() is None:
            return 'Login required', 401
        return fn(*args, **kwargs)

    return wrapper


def admin_required(fn):
    """Reject requests from anyone but an admin with 403"""

    @wraps(fn)
    def wrapper(*args, **kwargs):
        user = current_user()
        if user is None or not user.is_admin:
            return 'Permission denied', 403
        return fn(*args, **kwargs)

    return wrapper
