"""
Applicant API routes.
"""
from flask import Blueprint, request, jsonify
from sqlalchemy.exc import SQLAlchemyError
from hiretrack_app.services import applicants
from hiretrack_app.utils.auth import context_required
from hiretrack_app.utils.errors import database_error, register_error_handlers

bp = Blueprint('applicants_api', __name__, url_prefix='/api/applicants')
register_error_handlers(bp)


@bp.route('', methods=['GET'])
@context_required
def list_applicants(ctx):
    rows = applicants.list_applicants(ctx, search=request.args.get('search', '').strip() or None)
    return jsonify({'applicants': [a.to_dict() for a in rows]})


@bp.route('', methods=['POST'])
@context_required
def create_applicant(ctx):
    try:
        applicant = applicants.create_applicant(ctx, request.json or {})
    except SQLAlchemyError:
        return database_error('create applicant')
    return jsonify({'success': True, 'applicant': applicant.to_dict()}), 201


@bp.route('/<applicant_id>', methods=['GET'])
@context_required
def get_applicant(applicant_id, ctx):
    return jsonify(applicants.get_applicant(ctx, applicant_id).to_dict())


@bp.route('/<applicant_id>', methods=['PATCH', 'PUT'])
@context_required
def update_applicant(applicant_id, ctx):
    try:
        applicant = applicants.update_applicant(ctx, applicant_id, request.json or {})
    except SQLAlchemyError:
        return database_error('update applicant')
    return jsonify({'success': True, 'applicant': applicant.to_dict()})


@bp.route('/<applicant_id>', methods=['DELETE'])
@context_required
def delete_applicant(applicant_id, ctx):
    try:
        applicants.delete_applicant(ctx, applicant_id)
    except SQLAlchemyError:
        return database_error('delete applicant')
    return jsonify({'success': True})


@bp.route('/<applicant_id>/resume', methods=['POST'])
@context_required
def upload_resume(applicant_id, ctx):
    try:
        applicant = applicants.upload_resume(ctx, applicant_id, request.files.get('file'))
    except SQLAlchemyError:
        return database_error('save resume')
    return jsonify({'success': True, 'cv_link': applicant.cv_link})


@bp.route('/<applicant_id>/job-orders', methods=['GET'])
@context_required
def applicant_job_orders(applicant_id, ctx):
    """Job orders this applicant is linked to."""
    applicant, links = applicants.applicant_job_orders(ctx, applicant_id)
    return jsonify({
        'applicant': applicant.to_dict(),
        'job_orders': [link.to_dict(include_applicant=False, include_joborder=True) for link in links],
    })
