"""
Dashboard API.
"""
from flask import Blueprint, jsonify
from hiretrack_app.services import dashboard
from hiretrack_app.utils.auth import context_required
from hiretrack_app.utils.errors import register_error_handlers

bp = Blueprint('dashboard_api', __name__, url_prefix='/api/dashboard')
register_error_handlers(bp)


@bp.route('', methods=['GET'])
@context_required
def get_dashboard(ctx):
    return jsonify(dashboard.dashboard_data())
