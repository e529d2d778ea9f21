"""
Linking applicants to job orders: new candidates, endorsements and stage/status edits.
"""
import logging
from datetime import date
from decimal import Decimal, InvalidOperation
from hiretrack_app.models import db, Applicant, JobOrderApplicant, utcnow
from hiretrack_app.services.applicants import build_applicant, get_applicant, search_filter, visible_applicants
from hiretrack_app.services.job_orders import get_job_order
from hiretrack_app.utils.auth import form_text
from hiretrack_app.utils.constants import (
    APPLICATION_STAGES, APPLICATION_STATUSES, DEFAULT_APPLICATION_STAGE, ENDORSEMENT_STAGE,
)
from hiretrack_app.utils.errors import ConflictError, NotFoundError, PermissionDeniedError, ValidationError

logger = logging.getLogger(__name__)

NOTE_FIELDS = ('interview_notes', 'client_feedback')


def _validate_stage_status(data):
    errors = {}
    if 'application_stage' in data and data.get('application_stage') not in APPLICATION_STAGES:
        errors['application_stage'] = 'Invalid application stage.'
    if 'application_status' in data and data.get('application_status') not in APPLICATION_STATUSES:
        errors['application_status'] = 'Invalid application status.'
    return errors


def _parse_salary(value):
    if value is None or value == '':
        return None
    try:
        salary = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError({'asking_salary': 'Asking salary must be a number.'})
    if not salary.is_finite():
        raise ValidationError({'asking_salary': 'Asking salary must be a number.'})
    if salary < 0:
        raise ValidationError({'asking_salary': 'Asking salary cannot be negative.'})
    return salary


def _parse_date(value):
    if not value:
        return None
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        raise ValidationError({'candidate_start_date': 'Start date must be YYYY-MM-DD.'})


def linked_applicant_ids(joborder_id):
    rows = db.session.query(JobOrderApplicant.applicant_id).filter_by(joborder_id=joborder_id).all()
    return {row[0] for row in rows}


def job_order_applicants(joborder_id):
    """Links for a job order, hiding soft-deleted applicants."""
    get_job_order(joborder_id)
    return (
        JobOrderApplicant.query
        .join(Applicant, Applicant.id == JobOrderApplicant.applicant_id)
        .filter(
            JobOrderApplicant.joborder_id == joborder_id,
            Applicant.deleted_at.is_(None),
        )
        .order_by(JobOrderApplicant.created_at.desc())
        .all()
    )


def get_link(link_id):
    link = JobOrderApplicant.query.get(link_id)
    if not link:
        raise NotFoundError('Job order applicant not found')
    return link


def _link(ctx, job_order, applicant, stage, status=APPLICATION_STATUSES[0]):
    if applicant.id in linked_applicant_ids(job_order.id):
        raise ConflictError(f"{applicant.full_name} is already linked to this job order")
    link = JobOrderApplicant(
        joborder_id=job_order.id,
        client_id=job_order.client_id,
        applicant_id=applicant.id,
        author_id=ctx.user_id,
        application_stage=stage,
        application_status=status,
    )
    db.session.add(link)
    return link


def add_new_candidate(ctx, joborder_id, data):
    """Create an applicant and link it to the job order in one commit."""
    job_order = get_job_order(joborder_id)
    stage = data.get('application_stage') or DEFAULT_APPLICATION_STAGE
    errors = _validate_stage_status({'application_stage': stage})
    if errors:
        raise ValidationError(errors)
    applicant = build_applicant(ctx, data)
    ctx.bind()
    db.session.add(applicant)
    db.session.flush()
    link = _link(ctx, job_order, applicant, stage)
    db.session.commit()
    logger.info(f"New candidate {applicant.full_name} added to job order {job_order.id} by {ctx.username}")
    return link


def endorsement_options(ctx, joborder_id, search=None):
    """Applicants the caller can endorse, minus those already on the job order."""
    get_job_order(joborder_id)
    linked = linked_applicant_ids(joborder_id)
    query = search_filter(visible_applicants(ctx), search)
    if linked:
        query = query.filter(Applicant.id.notin_(linked))
    return query.order_by(Applicant.first_name.asc()).all()


def endorse(ctx, joborder_id, applicant_id):
    job_order = get_job_order(joborder_id)
    applicant = get_applicant(ctx, applicant_id)
    ctx.bind()
    link = _link(ctx, job_order, applicant, ENDORSEMENT_STAGE)
    db.session.commit()
    logger.info(f"{applicant.full_name} endorsed to job order {job_order.id} by {ctx.username}")
    return link


def update_stage_status(ctx, link_id, data):
    """Administrators may set stage and status to any value of their enums."""
    if not ctx.is_admin:
        raise PermissionDeniedError('Only administrators can change stage or status')
    link = get_link(link_id)
    errors = _validate_stage_status(data)
    if errors:
        raise ValidationError(errors)
    for field in ('application_stage', 'application_status'):
        if field in data:
            setattr(link, field, data[field])
    link.updated_at = utcnow()
    ctx.bind()
    db.session.commit()
    return link


def update_details(ctx, link_id, data):
    """Profiler notes, client feedback, asking salary and start date."""
    link = get_link(link_id)
    if not ctx.can_modify(link):
        raise PermissionDeniedError('You can only edit your own endorsements')
    for field in NOTE_FIELDS:
        if field in data:
            setattr(link, field, form_text(data, field) or None)
    if 'asking_salary' in data:
        link.asking_salary = _parse_salary(data.get('asking_salary'))
    if 'candidate_start_date' in data:
        link.candidate_start_date = _parse_date(data.get('candidate_start_date'))
    link.updated_at = utcnow()
    ctx.bind()
    db.session.commit()
    return link


def unlink(ctx, link_id):
    """Delete the association only; the applicant and job order stay."""
    link = get_link(link_id)
    if not ctx.can_modify(link):
        raise PermissionDeniedError('You can only remove your own endorsements')
    ctx.bind()
    db.session.delete(link)
    db.session.commit()
    logger.info(f"Job order applicant {link_id} removed by {ctx.username}")
