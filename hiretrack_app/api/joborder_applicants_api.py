"""
Job order applicant API: stage/status, notes and commission creation.
"""
from flask import Blueprint, request, jsonify
from sqlalchemy.exc import SQLAlchemyError
from hiretrack_app.services import commissions, joborder_applicants
from hiretrack_app.utils.auth import admin_required, context_required
from hiretrack_app.utils.errors import database_error, register_error_handlers

bp = Blueprint('joborder_applicants_api', __name__, url_prefix='/api/joborder-applicants')
register_error_handlers(bp)


@bp.route('/<link_id>/stage', methods=['PATCH', 'PUT'])
@admin_required
def update_stage_status(link_id, ctx):
    """Set application_stage and/or application_status."""
    try:
        link = joborder_applicants.update_stage_status(ctx, link_id, request.json or {})
    except SQLAlchemyError:
        return database_error('update stage')
    return jsonify({'success': True, 'joborder_applicant': link.to_dict()})


@bp.route('/<link_id>', methods=['PATCH', 'PUT'])
@context_required
def update_details(link_id, ctx):
    try:
        link = joborder_applicants.update_details(ctx, link_id, request.json or {})
    except SQLAlchemyError:
        return database_error('update candidate details')
    return jsonify({'success': True, 'joborder_applicant': link.to_dict()})


@bp.route('/<link_id>', methods=['DELETE'])
@context_required
def unlink(link_id, ctx):
    try:
        joborder_applicants.unlink(ctx, link_id)
    except SQLAlchemyError:
        return database_error('remove candidate')
    return jsonify({'success': True})


@bp.route('/<link_id>/commission', methods=['POST'])
@admin_required
def create_commission(link_id, ctx):
    try:
        commission = commissions.create_commission(ctx, link_id, request.json or {})
    except SQLAlchemyError:
        return database_error('create commission')
    return jsonify({'success': True, 'commission': commission.to_dict()}), 201
