"""
Pipeline cards API - free-form candidate lanes.
"""
from flask import Blueprint, request, jsonify
from sqlalchemy.exc import SQLAlchemyError
from hiretrack_app.services import pipeline
from hiretrack_app.utils.auth import context_required
from hiretrack_app.utils.errors import database_error, register_error_handlers

bp = Blueprint('pipeline_api', __name__, url_prefix='/api/pipeline-cards')
register_error_handlers(bp)


@bp.route('', methods=['GET'])
@context_required
def list_cards(ctx):
    """Cards visible to the caller, newest first."""
    return jsonify({'cards': [card.to_dict(applicant_count=count) for card, count in pipeline.list_cards(ctx)]})


@bp.route('', methods=['POST'])
@context_required
def create_card(ctx):
    try:
        card = pipeline.create_card(ctx, (request.json or {}).get('title'))
    except SQLAlchemyError:
        return database_error('create pipeline card')
    return jsonify({'success': True, 'card': card.to_dict(applicant_count=0)}), 201


@bp.route('/<card_id>', methods=['DELETE'])
@context_required
def delete_card(card_id, ctx):
    try:
        pipeline.delete_card(ctx, card_id)
    except SQLAlchemyError:
        return database_error('delete pipeline card')
    return jsonify({'success': True})


@bp.route('/<card_id>/applicants', methods=['GET'])
@context_required
def card_applicants(card_id, ctx):
    card, links = pipeline.card_applicants(ctx, card_id)
    return jsonify({'card': card.to_dict(applicant_count=len(links)), 'applicants': [l.to_dict() for l in links]})


@bp.route('/<card_id>/options', methods=['GET'])
@context_required
def candidate_options(card_id, ctx):
    applicants = pipeline.candidate_options(ctx, card_id, search=request.args.get('search', '').strip() or None)
    return jsonify({'applicants': [a.to_dict() for a in applicants]})


@bp.route('/<card_id>/applicants', methods=['POST'])
@context_required
def add_applicants(card_id, ctx):
    """Payload: { applicant_ids: [...] }. Ids already on the card are skipped."""
    applicant_ids = (request.json or {}).get('applicant_ids')
    if not isinstance(applicant_ids, list):
        return jsonify({'error': 'applicant_ids array required'}), 400
    try:
        links = pipeline.add_applicants(ctx, card_id, applicant_ids)
    except SQLAlchemyError:
        return database_error('add applicants to card')
    return jsonify({'success': True, 'added': len(links), 'links': [l.to_dict() for l in links]})


@bp.route('/<card_id>/applicants/<applicant_id>', methods=['DELETE'])
@context_required
def remove_applicant(card_id, applicant_id, ctx):
    try:
        removed = pipeline.remove_applicant(ctx, card_id, applicant_id)
    except SQLAlchemyError:
        return database_error('remove applicant from card')
    return jsonify({'success': True, 'removed': removed})
