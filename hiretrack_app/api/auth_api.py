"""
Session API: who is signed in.
"""
from flask import Blueprint, jsonify
from flask_login import current_user

bp = Blueprint('auth_api', __name__, url_prefix='/api/auth')


@bp.route('/session', methods=['GET'])
def get_session():
    if not current_user.is_authenticated:
        return jsonify({'user': None}), 401
    return jsonify({'user': current_user.to_dict()})
