"""
Dashboard view routes.
"""
from flask import Blueprint, render_template, redirect, url_for
from flask_login import login_required, current_user
from hiretrack_app.services import dashboard as dashboard_service, logs
from hiretrack_app.utils.auth import SessionContext

bp = Blueprint('dashboard', __name__)


@bp.route('/')
def index():
    """Landing page or dashboard."""
    if current_user.is_authenticated:
        return redirect(url_for('dashboard.dashboard'))
    return redirect(url_for('auth.login'))


@bp.route('/dashboard')
@login_required
def dashboard():
    """Main dashboard."""
    return render_template(
        'dashboard.html',
        data=dashboard_service.dashboard_data(),
        activity=logs.recent_activity(SessionContext.from_user(current_user)),
    )
