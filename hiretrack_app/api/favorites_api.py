"""
Favorite job orders of the signed-in user.
"""
from flask import Blueprint, jsonify
from hiretrack_app.services import job_orders
from hiretrack_app.utils.auth import context_required
from hiretrack_app.utils.errors import register_error_handlers

bp = Blueprint('favorites_api', __name__, url_prefix='/api/favorites')
register_error_handlers(bp)


@bp.route('', methods=['GET'])
@context_required
def list_favorites(ctx):
    rows = job_orders.favorite_job_orders(ctx)
    return jsonify({'job_orders': job_orders.job_order_cards(ctx, rows)})
