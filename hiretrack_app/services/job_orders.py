"""
Job order services: listing, the priority board, favorites and edits.
"""
import logging
from sqlalchemy import func
from hiretrack_app.models import (
    db, Applicant, Client, JobOrder, JobOrderApplicant, JobOrderFavorite, utcnow
)
from hiretrack_app.services.storage import get_storage, check_upload, job_description_path
from hiretrack_app.utils.auth import form_text
from hiretrack_app.utils.constants import (
    ALLOWED_EXTENSIONS, DEFAULT_JOB_ORDER_STATUS, DEFAULT_PRIORITY,
    JOB_DESCRIPTION_BUCKET, JOB_ORDER_STATUSES, PRIORITIES,
)
from hiretrack_app.utils.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

TEXT_FIELDS = ('schedule', 'client_budget', 'responsibilities_requirements', 'updates')


def _validate_job_order_form(data, partial=False):
    """Validate job order data. Returns dict of field -> error message (empty if valid)."""
    errors = {}
    if not partial or 'job_title' in data:
        title = form_text(data, 'job_title')
        if not title:
            errors['job_title'] = 'Job title is required.'
        elif len(title) > 255:
            errors['job_title'] = 'Job title must be 255 characters or less.'
    if not partial or 'client_id' in data:
        client_id = form_text(data, 'client_id')
        if not client_id:
            errors['client_id'] = 'Client is required.'
        elif not Client.active().filter_by(id=client_id).first():
            errors['client_id'] = 'Client not found.'
    if 'status' in data and data.get('status') not in JOB_ORDER_STATUSES:
        errors['status'] = 'Invalid status.'
    if 'priority' in data and data.get('priority') not in PRIORITIES:
        errors['priority'] = 'Invalid priority.'
    for field, maxlen in [('schedule', 255), ('client_budget', 255)]:
        val = form_text(data, field)
        if val and len(val) > maxlen:
            errors[field] = f'Must be {maxlen} characters or less.'
    return errors


def applicant_counts(joborder_ids):
    """Candidate count per job order from a single grouped query."""
    if not joborder_ids:
        return {}
    counts = db.session.query(
        JobOrderApplicant.joborder_id,
        func.count(JobOrderApplicant.id).label('count')
    ).join(
        Applicant, Applicant.id == JobOrderApplicant.applicant_id
    ).filter(
        JobOrderApplicant.joborder_id.in_(joborder_ids),
        Applicant.deleted_at.is_(None),
    ).group_by(JobOrderApplicant.joborder_id).all()
    return {str(joborder_id): count for joborder_id, count in counts}


def favorite_ids(user_id, joborder_ids=None):
    query = db.session.query(JobOrderFavorite.joborder_id).filter_by(user_id=user_id)
    if joborder_ids is not None:
        if not joborder_ids:
            return set()
        query = query.filter(JobOrderFavorite.joborder_id.in_(joborder_ids))
    return {row[0] for row in query.all()}


def list_job_orders(search=None, status=None, include_archived=False, ids=None):
    query = JobOrder.active()
    if not include_archived:
        query = query.filter(JobOrder.archived.is_(False))
    if status and status != 'all':
        query = query.filter(JobOrder.status == status)
    if search:
        query = query.filter(func.lower(JobOrder.job_title).like(f"%{search.lower()}%"))
    if ids is not None:
        if not ids:
            return []
        query = query.filter(JobOrder.id.in_(ids))
    return query.order_by(JobOrder.created_at.desc()).all()


def age_label(created_at, now=None):
    """Human distance from creation, e.g. '3 days ago'."""
    if not created_at:
        return None
    seconds = max(0, int(((now or utcnow()) - created_at).total_seconds()))
    if seconds < 60:
        return 'less than a minute ago'
    for unit_seconds, unit in ((31536000, 'year'), (2592000, 'month'), (86400, 'day'), (3600, 'hour'), (60, 'minute')):
        if seconds >= unit_seconds:
            n = seconds // unit_seconds
            return f"{n} {unit}{'s' if n != 1 else ''} ago"


def card_dict(job_order, count, is_favorite, now=None):
    now = now or utcnow()
    created = job_order.created_at
    return {
        'id': job_order.id,
        'job_title': job_order.job_title,
        'status': job_order.status,
        'priority': job_order.priority,
        'applicant_count': count,
        'age_days': (now - created).days if created else None,
        'age_label': age_label(created, now),
        'is_favorite': is_favorite,
        'client': job_order.client.summary_dict() if job_order.client else None,
    }


def job_order_cards(ctx, job_orders, now=None):
    ids = [j.id for j in job_orders]
    counts = applicant_counts(ids)
    favorites = favorite_ids(ctx.user_id, ids)
    return [card_dict(j, counts.get(j.id, 0), j.id in favorites, now) for j in job_orders]


def priority_board(ctx, search=None, status=None, now=None):
    """Job orders partitioned into the fixed High, Mid and Low lanes."""
    cards = job_order_cards(ctx, list_job_orders(search=search, status=status), now)
    lanes = {priority: [] for priority in PRIORITIES}
    for card in cards:
        lane = card['priority'] if card['priority'] in lanes else DEFAULT_PRIORITY
        lanes[lane].append(card)
    return [{'priority': priority, 'job_orders': lanes[priority]} for priority in PRIORITIES]


def get_job_order(joborder_id):
    job_order = JobOrder.active().filter_by(id=joborder_id).first()
    if not job_order:
        raise NotFoundError('Job order not found')
    return job_order


def create_job_order(ctx, data):
    errors = _validate_job_order_form(data)
    if errors:
        raise ValidationError(errors)
    job_order = JobOrder(
        author_id=ctx.user_id,
        client_id=form_text(data, 'client_id'),
        job_title=form_text(data, 'job_title'),
        status=data.get('status') or DEFAULT_JOB_ORDER_STATUS,
        priority=data.get('priority') or DEFAULT_PRIORITY,
    )
    for field in TEXT_FIELDS:
        setattr(job_order, field, form_text(data, field) or None)
    job_order.sourcing_tags = data.get('sourcing_preference')
    ctx.bind()
    db.session.add(job_order)
    db.session.commit()
    logger.info(f"Job order '{job_order.job_title}' created by {ctx.username}")
    return job_order


def update_job_order(ctx, joborder_id, data):
    job_order = get_job_order(joborder_id)
    errors = _validate_job_order_form(data, partial=True)
    if errors:
        raise ValidationError(errors)
    if 'job_title' in data:
        job_order.job_title = form_text(data, 'job_title')
    if 'client_id' in data:
        job_order.client_id = form_text(data, 'client_id')
    for field in ('status', 'priority'):
        if field in data:
            setattr(job_order, field, data[field])
    for field in TEXT_FIELDS:
        if field in data:
            setattr(job_order, field, form_text(data, field) or None)
    if 'sourcing_preference' in data:
        job_order.sourcing_tags = data.get('sourcing_preference')
    job_order.updated_at = utcnow()
    ctx.bind()
    db.session.commit()
    return job_order


def set_archived(ctx, joborder_id, archived):
    job_order = get_job_order(joborder_id)
    job_order.archived = bool(archived)
    job_order.updated_at = utcnow()
    ctx.bind()
    db.session.commit()
    logger.info(f"Job order {job_order.id} {'archived' if archived else 'restored'} by {ctx.username}")
    return job_order


def delete_job_order(ctx, joborder_id):
    job_order = get_job_order(joborder_id)
    ctx.bind()
    job_order.soft_delete()
    db.session.commit()
    return job_order


def upload_job_description(ctx, joborder_id, file):
    """Upload first; the job order only changes once the object is stored."""
    job_order = get_job_order(joborder_id)
    data, ext, filename = check_upload(file, ALLOWED_EXTENSIONS)
    storage = get_storage()
    path = storage.upload(
        JOB_DESCRIPTION_BUCKET,
        job_description_path(job_order.id, filename),
        data,
        content_type=file.mimetype,
    )
    job_order.job_description = path
    job_order.updated_at = utcnow()
    ctx.bind()
    db.session.commit()
    return job_order, storage.get_public_url(JOB_DESCRIPTION_BUCKET, path)


def job_description_url(job_order):
    if not job_order.job_description:
        return None
    return get_storage().get_public_url(JOB_DESCRIPTION_BUCKET, job_order.job_description)


# Favorites

def is_favorite(user_id, joborder_id):
    return JobOrderFavorite.query.filter_by(user_id=user_id, joborder_id=joborder_id).first() is not None


def add_favorite(ctx, joborder_id):
    get_job_order(joborder_id)
    if not is_favorite(ctx.user_id, joborder_id):
        db.session.add(JobOrderFavorite(user_id=ctx.user_id, joborder_id=joborder_id))
        db.session.commit()
    return True


def remove_favorite(ctx, joborder_id):
    JobOrderFavorite.query.filter_by(user_id=ctx.user_id, joborder_id=joborder_id).delete()
    db.session.commit()
    return False


def toggle_favorite(ctx, joborder_id):
    """Flip membership and return the new state."""
    if is_favorite(ctx.user_id, joborder_id):
        return remove_favorite(ctx, joborder_id)
    return add_favorite(ctx, joborder_id)


def favorite_job_orders(ctx):
    ids = favorite_ids(ctx.user_id)
    return list_job_orders(include_archived=True, ids=list(ids))
