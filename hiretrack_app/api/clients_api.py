"""
Client API routes. Management is for administrators; the option list is for everyone.
"""
from flask import Blueprint, request, jsonify
from sqlalchemy.exc import SQLAlchemyError
from hiretrack_app.services import clients
from hiretrack_app.utils.auth import admin_required, context_required
from hiretrack_app.utils.errors import database_error, register_error_handlers

bp = Blueprint('clients_api', __name__, url_prefix='/api/clients')
register_error_handlers(bp)


@bp.route('', methods=['GET'])
@admin_required
def list_clients(ctx):
    rows = clients.list_clients(search=request.args.get('search', '').strip() or None)
    return jsonify({'clients': [c.to_dict(job_order_count=count) for c, count in rows]})


@bp.route('/options', methods=['GET'])
@context_required
def client_options(ctx):
    """Minimal client list for job order forms."""
    return jsonify({'clients': [c.summary_dict() for c in clients.client_options()]})


@bp.route('/<client_id>', methods=['GET'])
@admin_required
def get_client(client_id, ctx):
    client, job_orders = clients.client_job_orders(client_id)
    result = client.to_dict(job_order_count=len(job_orders))
    result['job_orders'] = [j.to_dict(include_client=False) for j in job_orders]
    return jsonify(result)


@bp.route('', methods=['POST'])
@admin_required
def create_client(ctx):
    try:
        client = clients.create_client(ctx, request.json or {})
    except SQLAlchemyError:
        return database_error('create client')
    return jsonify({'success': True, 'client': client.to_dict()}), 201


@bp.route('/<client_id>', methods=['PATCH', 'PUT'])
@admin_required
def update_client(client_id, ctx):
    try:
        client = clients.update_client(ctx, client_id, request.json or {})
    except SQLAlchemyError:
        return database_error('update client')
    return jsonify({'success': True, 'client': client.to_dict()})


@bp.route('/<client_id>', methods=['DELETE'])
@admin_required
def delete_client(client_id, ctx):
    try:
        clients.delete_client(ctx, client_id)
    except SQLAlchemyError:
        return database_error('delete client')
    return jsonify({'success': True})
