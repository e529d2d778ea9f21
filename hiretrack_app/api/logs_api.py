"""
System log API. Reading logs needs an administrator and an unlocked session.
"""
from flask import Blueprint, request, jsonify
from sqlalchemy.exc import SQLAlchemyError
from hiretrack_app.services import logs
from hiretrack_app.utils.auth import admin_required, context_required
from hiretrack_app.utils.errors import database_error, register_error_handlers

bp = Blueprint('logs_api', __name__, url_prefix='/api/logs')
register_error_handlers(bp)


def _locked():
    return jsonify({'error': 'Logs are locked', 'locked': True}), 403


@bp.route('/unlock', methods=['POST'])
@admin_required
def unlock(ctx):
    if logs.unlock_logs((request.json or {}).get('password')):
        return jsonify({'success': True, 'locked': False})
    return jsonify({'error': 'Incorrect password', 'locked': True}), 401


@bp.route('/lock', methods=['POST'])
@admin_required
def lock(ctx):
    logs.lock_logs()
    return jsonify({'success': True, 'locked': True})


@bp.route('/password', methods=['PUT'])
@admin_required
def set_password(ctx):
    try:
        logs.set_log_password((request.json or {}).get('password'))
    except SQLAlchemyError:
        return database_error('set log password')
    return jsonify({'success': True})


@bp.route('', methods=['GET'])
@admin_required
def list_logs(ctx):
    if not logs.logs_unlocked():
        return _locked()
    args = request.args
    rows, total = logs.list_logs(
        page=args.get('page', 1, type=int),
        per_page=min(args.get('per_page', logs.DEFAULT_PAGE_SIZE, type=int), 200),
        entity_type=args.get('entity_type'),
        action=args.get('action'),
        start_date=args.get('start_date'),
        end_date=args.get('end_date'),
        search=args.get('search', '').strip() or None,
    )
    return jsonify({'logs': [row.to_dict() for row in rows], 'total': total})


@bp.route('/entity-types', methods=['GET'])
@admin_required
def entity_types(ctx):
    if not logs.logs_unlocked():
        return _locked()
    return jsonify({'entity_types': logs.entity_types()})


@bp.route('/recent', methods=['GET'])
@context_required
def recent_activity(ctx):
    """Latest changes for the dashboard feed."""
    return jsonify({'activity': logs.recent_activity(ctx)})
