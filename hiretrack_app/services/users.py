"""
User account services: sign-up, username allocation, administration.
"""
import logging
import re
from hiretrack_app.models import db, User
from hiretrack_app.utils.auth import form_text, validate_email, validate_password
from hiretrack_app.utils.constants import ROLES, ROLE_RECRUITER, USERNAME_PREFIX
from hiretrack_app.utils.errors import ConflictError, NotFoundError, PermissionDeniedError, ValidationError

logger = logging.getLogger(__name__)

_USERNAME_RE = re.compile(rf'^{USERNAME_PREFIX}(\d+)$')


def next_username():
    """Next free RecruiterNN username, zero padded to two digits."""
    highest = 0
    rows = db.session.query(User.username).filter(User.username.like(f'{USERNAME_PREFIX}%')).all()
    for (username,) in rows:
        match = _USERNAME_RE.match(username or '')
        if match:
            highest = max(highest, int(match.group(1)))
    return f"{USERNAME_PREFIX}{highest + 1:02d}"


def validate_user_form(data, require_password=True):
    """Returns dict of field -> error message (empty if valid)."""
    errors = {}
    email = form_text(data, 'email').lower()
    if not email or not validate_email(email):
        errors['email'] = 'Please enter a valid email address'
    elif User.query.filter_by(email=email).first():
        errors['email'] = 'An account with this email already exists'

    if not form_text(data, 'first_name'):
        errors['first_name'] = 'First name is required'
    if not form_text(data, 'last_name'):
        errors['last_name'] = 'Last name is required'

    role = form_text(data, 'role') or ROLE_RECRUITER
    if role not in ROLES:
        errors['role'] = 'Invalid role'

    if require_password:
        password = form_text(data, 'password', strip=False)
        is_valid, password_error = validate_password(password)
        if not is_valid:
            errors['password'] = password_error
        elif 'confirm_password' in data and password != data.get('confirm_password'):
            errors['confirm_password'] = 'Passwords do not match'
    return errors


def create_user(data, role=ROLE_RECRUITER, ctx=None):
    """Create an account. Self sign-up passes no ctx and always gets the recruiter role."""
    errors = validate_user_form(data)
    if errors:
        raise ValidationError(errors)

    username = form_text(data, 'username') or next_username()
    if User.query.filter_by(username=username).first():
        raise ConflictError(f"Username {username} is already taken")

    user = User(
        email=form_text(data, 'email').lower(),
        first_name=form_text(data, 'first_name'),
        last_name=form_text(data, 'last_name'),
        username=username,
        role=role,
        linkedin_profile=form_text(data, 'linkedin_profile') or None,
    )
    user.set_password(data['password'])
    if ctx is not None:
        ctx.bind()
    db.session.add(user)
    db.session.commit()
    logger.info(f"Created {role} account {user.username}")
    return user


def list_users():
    return User.active().order_by(User.created_at.desc()).all()


def soft_delete_user(ctx, user_id):
    user = User.active().filter_by(id=user_id).first()
    if not user:
        raise NotFoundError('User not found')
    if user.id == ctx.user_id:
        raise PermissionDeniedError('You cannot delete your own account')
    ctx.bind()
    user.soft_delete()
    db.session.commit()
    logger.info(f"User {user.username} deleted by {ctx.username}")
    return user
