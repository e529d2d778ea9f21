"""
Authentication and authorization utilities for HireTrack.

Routes build a SessionContext once per request and hand it to the service
layer, so services never depend on the ambient Flask-Login user.
"""
import logging
import re
from decimal import Decimal
from functools import wraps
from flask import request, jsonify
from flask_login import current_user
from hiretrack_app.models import db
from hiretrack_app.utils.constants import ROLE_ADMINISTRATOR
from hiretrack_app.utils.errors import ValidationError

logger = logging.getLogger(__name__)


def validate_email(email):
    """Validate email format."""
    pattern = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'
    return bool(re.match(pattern, email or ''))


def as_text(value, field, strip=True):
    """Form or JSON input as a string; numbers are accepted, other types are a validation error."""
    if value is None:
        return ''
    if isinstance(value, bool) or not isinstance(value, (str, int, float, Decimal)):
        raise ValidationError({field: 'Must be text.'})
    value = str(value)
    return value.strip() if strip else value


def form_text(data, field, strip=True):
    return as_text(data.get(field), field, strip)


def validate_password(password):
    """
    Validate password strength.
    Returns (is_valid, error_message)
    """
    password = password or ''
    if len(password) < 8:
        return False, "Password must be at least 8 characters long"
    if not re.search(r'[A-Z]', password):
        return False, "Password must contain at least one uppercase letter"
    if not re.search(r'[a-z]', password):
        return False, "Password must contain at least one lowercase letter"
    if not re.search(r'\d', password):
        return False, "Password must contain at least one number"
    return True, None


class SessionContext:
    """The signed-in user a request acts as."""

    def __init__(self, user_id, role, username=None):
        self.user_id = user_id
        self.role = role
        self.username = username

    @classmethod
    def from_user(cls, user):
        return cls(user.id, user.role, user.username)

    @property
    def is_admin(self):
        return self.role == ROLE_ADMINISTRATOR

    def owns(self, resource):
        return getattr(resource, 'author_id', None) == self.user_id

    def can_modify(self, resource):
        return self.is_admin or self.owns(resource)

    def bind(self, session=None):
        """Record this user as the actor for audit logs written by the session."""
        session = session or db.session
        session.info['actor_id'] = self.user_id
        return session

    def __repr__(self):
        return f"<SessionContext {self.username or self.user_id} ({self.role})>"

def context_required(f):
    """Authenticate, then pass the request's SessionContext as ``ctx``."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not current_user.is_authenticated:
            logger.info(f"Unauthenticated API request to {request.path}")
            return jsonify({'error': 'Authentication required'}), 401
        ctx = SessionContext.from_user(current_user)
        ctx.bind()
        return f(*args, ctx=ctx, **kwargs)
    return decorated_function


def admin_required(f):
    """Like context_required, but only for administrators."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not current_user.is_authenticated:
            return jsonify({'error': 'Authentication required'}), 401
        ctx = SessionContext.from_user(current_user)
        if not ctx.is_admin:
            logger.warning(f"Non-admin {ctx.username} denied access to {request.path}")
            return jsonify({'error': 'Administrator access required'}), 403
        ctx.bind()
        return f(*args, ctx=ctx, **kwargs)
    return decorated_function
