"""
Job order API routes: board, CRUD, favorites and candidates.
"""
from flask import Blueprint, request, jsonify
from sqlalchemy.exc import SQLAlchemyError
from hiretrack_app.services import job_orders, joborder_applicants
from hiretrack_app.utils.auth import admin_required, context_required
from hiretrack_app.utils.errors import database_error, register_error_handlers

bp = Blueprint('job_orders_api', __name__, url_prefix='/api/job-orders')
register_error_handlers(bp)


def _list_args():
    return {
        'search': request.args.get('search', '').strip() or None,
        'status': request.args.get('status') or None,
    }


@bp.route('', methods=['GET'])
@context_required
def list_job_orders(ctx):
    include_archived = request.args.get('include_archived') in ('1', 'true')
    rows = job_orders.list_job_orders(include_archived=include_archived, **_list_args())
    return jsonify({'job_orders': job_orders.job_order_cards(ctx, rows)})


@bp.route('/board', methods=['GET'])
@context_required
def priority_board(ctx):
    """Job orders grouped into High, Mid and Low lanes."""
    return jsonify({'lanes': job_orders.priority_board(ctx, **_list_args())})


@bp.route('', methods=['POST'])
@context_required
def create_job_order(ctx):
    try:
        job_order = job_orders.create_job_order(ctx, request.json or {})
    except SQLAlchemyError:
        return database_error('create job order')
    return jsonify({'success': True, 'job_order': job_order.to_dict(applicant_count=0)}), 201


@bp.route('/<joborder_id>', methods=['GET'])
@context_required
def get_job_order(joborder_id, ctx):
    job_order = job_orders.get_job_order(joborder_id)
    links = joborder_applicants.job_order_applicants(joborder_id)
    result = job_order.to_dict(applicant_count=len(links), include_client=ctx.is_admin)
    result['job_description_url'] = job_orders.job_description_url(job_order)
    result['is_favorite'] = job_orders.is_favorite(ctx.user_id, job_order.id)
    result['applicants'] = [link.to_dict() for link in links]
    return jsonify(result)


@bp.route('/<joborder_id>', methods=['PATCH', 'PUT'])
@admin_required
def update_job_order(joborder_id, ctx):
    try:
        job_order = job_orders.update_job_order(ctx, joborder_id, request.json or {})
    except SQLAlchemyError:
        return database_error('update job order')
    return jsonify({'success': True, 'job_order': job_order.to_dict()})


@bp.route('/<joborder_id>/archive', methods=['POST'])
@admin_required
def archive_job_order(joborder_id, ctx):
    archived = (request.get_json(silent=True) or {}).get('archived', True)
    try:
        job_order = job_orders.set_archived(ctx, joborder_id, archived)
    except SQLAlchemyError:
        return database_error('archive job order')
    return jsonify({'success': True, 'archived': job_order.archived})


@bp.route('/<joborder_id>', methods=['DELETE'])
@admin_required
def delete_job_order(joborder_id, ctx):
    try:
        job_orders.delete_job_order(ctx, joborder_id)
    except SQLAlchemyError:
        return database_error('delete job order')
    return jsonify({'success': True})


@bp.route('/<joborder_id>/job-description', methods=['POST'])
@context_required
def upload_job_description(joborder_id, ctx):
    try:
        job_order, url = job_orders.upload_job_description(ctx, joborder_id, request.files.get('file'))
    except SQLAlchemyError:
        return database_error('save job description')
    return jsonify({'success': True, 'job_description': job_order.job_description, 'url': url})


# Favorites

@bp.route('/<joborder_id>/favorite', methods=['POST'])
@context_required
def toggle_favorite(joborder_id, ctx):
    try:
        state = job_orders.toggle_favorite(ctx, joborder_id)
    except SQLAlchemyError:
        return database_error('update favorite')
    return jsonify({'success': True, 'is_favorite': state})


@bp.route('/<joborder_id>/favorite', methods=['PUT'])
@context_required
def add_favorite(joborder_id, ctx):
    try:
        job_orders.add_favorite(ctx, joborder_id)
    except SQLAlchemyError:
        return database_error('add favorite')
    return jsonify({'success': True, 'is_favorite': True})


@bp.route('/<joborder_id>/favorite', methods=['DELETE'])
@context_required
def remove_favorite(joborder_id, ctx):
    try:
        job_orders.remove_favorite(ctx, joborder_id)
    except SQLAlchemyError:
        return database_error('remove favorite')
    return jsonify({'success': True, 'is_favorite': False})


# Candidates

@bp.route('/<joborder_id>/applicants', methods=['GET'])
@context_required
def list_job_order_applicants(joborder_id, ctx):
    links = joborder_applicants.job_order_applicants(joborder_id)
    return jsonify({'applicants': [link.to_dict() for link in links]})


@bp.route('/<joborder_id>/applicants', methods=['POST'])
@context_required
def add_new_candidate(joborder_id, ctx):
    """Create an applicant and link it to this job order."""
    try:
        link = joborder_applicants.add_new_candidate(ctx, joborder_id, request.json or {})
    except SQLAlchemyError:
        return database_error('add candidate')
    return jsonify({'success': True, 'joborder_applicant': link.to_dict()}), 201


@bp.route('/<joborder_id>/endorse-options', methods=['GET'])
@context_required
def endorsement_options(joborder_id, ctx):
    applicants = joborder_applicants.endorsement_options(
        ctx, joborder_id, search=request.args.get('search', '').strip() or None
    )
    return jsonify({'applicants': [a.to_dict() for a in applicants]})


@bp.route('/<joborder_id>/endorse', methods=['POST'])
@context_required
def endorse(joborder_id, ctx):
    applicant_id = (request.json or {}).get('applicant_id')
    if not applicant_id:
        return jsonify({'error': 'applicant_id is required'}), 400
    try:
        link = joborder_applicants.endorse(ctx, joborder_id, applicant_id)
    except SQLAlchemyError:
        return database_error('endorse applicant')
    return jsonify({'success': True, 'joborder_applicant': link.to_dict()}), 201
