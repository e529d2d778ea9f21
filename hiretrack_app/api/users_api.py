"""
User administration API (administrators only).
"""
from flask import Blueprint, request, jsonify
from sqlalchemy.exc import SQLAlchemyError
from hiretrack_app.services import users
from hiretrack_app.utils.auth import admin_required
from hiretrack_app.utils.constants import ROLE_RECRUITER
from hiretrack_app.utils.errors import database_error, register_error_handlers

bp = Blueprint('users_api', __name__, url_prefix='/api/users')
register_error_handlers(bp)


@bp.route('', methods=['GET'])
@admin_required
def list_users(ctx):
    return jsonify({'users': [u.to_dict() for u in users.list_users()]})


@bp.route('/next-username', methods=['GET'])
@admin_required
def next_username(ctx):
    return jsonify({'username': users.next_username()})


@bp.route('', methods=['POST'])
@admin_required
def create_user(ctx):
    data = request.json or {}
    try:
        user = users.create_user(data, role=(data.get('role') or ROLE_RECRUITER).strip(), ctx=ctx)
    except SQLAlchemyError:
        return database_error('create user')
    return jsonify({'success': True, 'user': user.to_dict()}), 201


@bp.route('/<user_id>', methods=['DELETE'])
@admin_required
def delete_user(user_id, ctx):
    try:
        users.soft_delete_user(ctx, user_id)
    except SQLAlchemyError:
        return database_error('delete user')
    return jsonify({'success': True})
