"""
Authentication view routes.
"""
import logging
from urllib.parse import urlparse
from flask import Blueprint, render_template, request, redirect, url_for, flash
from flask_login import login_user, logout_user, login_required, current_user
from sqlalchemy.exc import SQLAlchemyError
from hiretrack_app.models import db, User, utcnow
from hiretrack_app.services.users import create_user
from hiretrack_app.utils.errors import ServiceError, ValidationError

logger = logging.getLogger(__name__)

bp = Blueprint('auth', __name__)


def _is_local_path(target):
    """Only same-site paths are accepted as a post-login redirect."""
    if not target or not target.startswith('/') or target.startswith('//') or '\\' in target:
        return False
    parsed = urlparse(target)
    return not parsed.scheme and not parsed.netloc


@bp.route('/register', methods=['GET', 'POST'])
def register():
    """Recruiter self sign-up."""
    if current_user.is_authenticated:
        return redirect(url_for('dashboard.dashboard'))

    if request.method == 'POST':
        data = {
            'email': request.form.get('email', ''),
            'password': request.form.get('password', ''),
            'confirm_password': request.form.get('confirm_password', ''),
            'first_name': request.form.get('first_name', ''),
            'last_name': request.form.get('last_name', ''),
            'linkedin_profile': request.form.get('linkedin_profile', ''),
        }
        try:
            user = create_user(data)
        except ValidationError as e:
            for error in e.errors.values():
                flash(error, 'error')
            return render_template('auth/register.html'), 400
        except ServiceError as e:
            flash(e.message, 'error')
            return render_template('auth/register.html'), e.status_code
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception('Registration failed')
            flash('An error occurred while creating your account.', 'error')
            return render_template('auth/register.html'), 500

        login_user(user)
        flash(f'Welcome to HireTrack! Your username is {user.username}.', 'success')
        return redirect(url_for('dashboard.dashboard'))

    return render_template('auth/register.html')


@bp.route('/login', methods=['GET', 'POST'])
def login():
    """User login."""
    if current_user.is_authenticated:
        return redirect(url_for('dashboard.dashboard'))

    if request.method == 'POST':
        email = request.form.get('email', '').strip().lower()
        password = request.form.get('password', '')
        remember = request.form.get('remember') == 'on'

        user = User.active().filter_by(email=email).first()

        if user and user.check_password(password):
            user.last_login_at = utcnow()
            db.session.commit()

            login_user(user, remember=remember)
            logger.info(f"{user.username} signed in")

            next_page = request.args.get('next')
            if _is_local_path(next_page):
                return redirect(next_page)
            return redirect(url_for('dashboard.dashboard'))

        flash('Invalid email or password', 'error')
        logger.info(f"Failed login for {email}")

    return render_template('auth/login.html')


@bp.route('/logout')
@login_required
def logout():
    """User logout."""
    logger.info(f"{current_user.username} signed out")
    logout_user()
    flash('You have been logged out', 'info')
    return redirect(url_for('auth.login'))
