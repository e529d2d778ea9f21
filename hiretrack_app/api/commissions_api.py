"""
Commission API routes.
"""
from flask import Blueprint, request, jsonify
from sqlalchemy.exc import SQLAlchemyError
from hiretrack_app.services import commissions
from hiretrack_app.utils.auth import admin_required, context_required
from hiretrack_app.utils.errors import database_error, register_error_handlers

bp = Blueprint('commissions_api', __name__, url_prefix='/api/commissions')
register_error_handlers(bp)


@bp.route('', methods=['GET'])
@context_required
def list_commissions(ctx):
    return jsonify({
        'commissions': [c.to_dict() for c in commissions.list_commissions(ctx)],
        'summary': commissions.commission_summary(ctx),
    })


@bp.route('/summary', methods=['GET'])
@context_required
def commission_summary(ctx):
    return jsonify(commissions.commission_summary(ctx))


@bp.route('/<commission_id>', methods=['GET'])
@context_required
def get_commission(commission_id, ctx):
    commission, payments = commissions.payment_details(ctx, commission_id)
    result = commission.to_dict()
    result['commission_details'] = payments
    return jsonify(result)


@bp.route('/<commission_id>/payments', methods=['POST'])
@admin_required
def add_payment(commission_id, ctx):
    """Record a payment. Accepts JSON or a multipart form with a receipt file."""
    data = request.form if request.files or request.form else (request.get_json(silent=True) or {})
    try:
        commission = commissions.add_payment(
            ctx,
            commission_id,
            payment_type=data.get('payment_type'),
            amount=data.get('amount'),
            receipt_file=request.files.get('receipt'),
            current_commission=data.get('current_commission'),
        )
    except SQLAlchemyError:
        return database_error('record payment')
    return jsonify({'success': True, 'commission': commission.to_dict()})


@bp.route('/<commission_id>', methods=['PATCH', 'PUT'])
@admin_required
def update_commission(commission_id, ctx):
    try:
        commission = commissions.update_commission(ctx, commission_id, request.json or {})
    except SQLAlchemyError:
        return database_error('update commission')
    return jsonify({'success': True, 'commission': commission.to_dict()})


@bp.route('/<commission_id>', methods=['DELETE'])
@admin_required
def delete_commission(commission_id, ctx):
    try:
        commissions.delete_commission(ctx, commission_id)
    except SQLAlchemyError:
        return database_error('delete commission')
    return jsonify({'success': True})
