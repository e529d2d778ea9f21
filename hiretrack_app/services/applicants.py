"""
Applicant services. Recruiters work with their own applicants only.
"""
import logging
from sqlalchemy import func
from hiretrack_app.models import db, Applicant, JobOrder, JobOrderApplicant, utcnow
from hiretrack_app.services.storage import get_storage, check_upload, resume_path
from hiretrack_app.utils.auth import form_text, validate_email
from hiretrack_app.utils.constants import ALLOWED_EXTENSIONS, RESUME_BUCKET
from hiretrack_app.utils.errors import NotFoundError, PermissionDeniedError, StorageError, ValidationError

logger = logging.getLogger(__name__)

APPLICANT_FIELDS = ('first_name', 'last_name', 'email', 'phone', 'location', 'linkedin_profile')


def _validate_applicant_form(data, partial=False):
    errors = {}
    for field, label in [('first_name', 'First name'), ('last_name', 'Last name'), ('email', 'Email')]:
        if (not partial or field in data) and not form_text(data, field):
            errors[field] = f'{label} is required.'
    email = form_text(data, 'email')
    if email and not validate_email(email):
        errors['email'] = 'Please enter a valid email address.'
    linkedin = form_text(data, 'linkedin_profile')
    if linkedin and not linkedin.startswith(('http://', 'https://')):
        errors['linkedin_profile'] = 'LinkedIn profile must be a URL.'
    return errors


def visible_applicants(ctx):
    """Non-deleted applicants the caller may see."""
    query = Applicant.active()
    if not ctx.is_admin:
        query = query.filter(Applicant.author_id == ctx.user_id)
    return query


def search_filter(query, search):
    if not search:
        return query
    term = f"%{search.strip().lower()}%"
    return query.filter(db.or_(
        func.lower(Applicant.first_name).like(term),
        func.lower(Applicant.last_name).like(term),
        func.lower(Applicant.email).like(term),
        func.lower(Applicant.first_name + ' ' + Applicant.last_name).like(term),
    ))


def list_applicants(ctx, search=None):
    query = search_filter(visible_applicants(ctx), search)
    return query.order_by(Applicant.created_at.desc()).all()


def get_applicant(ctx, applicant_id):
    applicant = Applicant.active().filter_by(id=applicant_id).first()
    if not applicant:
        raise NotFoundError('Applicant not found')
    if not ctx.can_modify(applicant):
        raise PermissionDeniedError('You do not have access to this applicant')
    return applicant


def build_applicant(ctx, data):
    """Validated, unsaved Applicant owned by the caller."""
    errors = _validate_applicant_form(data)
    if errors:
        raise ValidationError(errors)
    applicant = Applicant(author_id=ctx.user_id)
    for field in APPLICANT_FIELDS:
        setattr(applicant, field, form_text(data, field) or None)
    applicant.email = applicant.email.lower()
    return applicant


def create_applicant(ctx, data):
    applicant = build_applicant(ctx, data)
    ctx.bind()
    db.session.add(applicant)
    db.session.commit()
    logger.info(f"Applicant {applicant.full_name} created by {ctx.username}")
    return applicant


def update_applicant(ctx, applicant_id, data):
    applicant = get_applicant(ctx, applicant_id)
    errors = _validate_applicant_form(data, partial=True)
    if errors:
        raise ValidationError(errors)
    for field in APPLICANT_FIELDS:
        if field in data:
            setattr(applicant, field, form_text(data, field) or None)
    if applicant.email:
        applicant.email = applicant.email.lower()
    applicant.updated_at = utcnow()
    ctx.bind()
    db.session.commit()
    return applicant


def delete_applicant(ctx, applicant_id):
    applicant = get_applicant(ctx, applicant_id)
    ctx.bind()
    applicant.soft_delete()
    db.session.commit()
    logger.info(f"Applicant {applicant.id} deleted by {ctx.username}")
    return applicant


def upload_resume(ctx, applicant_id, file):
    """Store a new resume, point cv_link at it, then drop the previous object."""
    applicant = get_applicant(ctx, applicant_id)
    data, ext, _ = check_upload(file, ALLOWED_EXTENSIONS)
    storage = get_storage()
    path = storage.upload(RESUME_BUCKET, resume_path(applicant.id, ext), data, content_type=file.mimetype)

    old_path = storage.path_from_public_url(RESUME_BUCKET, applicant.cv_link)
    applicant.cv_link = storage.get_public_url(RESUME_BUCKET, path)
    applicant.updated_at = utcnow()
    ctx.bind()
    db.session.commit()

    if old_path and old_path != path:
        try:
            storage.remove(RESUME_BUCKET, [old_path])
        except StorageError:
            logger.warning(f"Previous resume {old_path} for applicant {applicant.id} was not removed")
    return applicant


def applicant_job_orders(ctx, applicant_id):
    """Every live job order this applicant is linked to, with the link."""
    applicant = get_applicant(ctx, applicant_id)
    links = (
        JobOrderApplicant.query
        .join(JobOrder, JobOrder.id == JobOrderApplicant.joborder_id)
        .filter(
            JobOrderApplicant.applicant_id == applicant.id,
            JobOrder.deleted_at.is_(None),
        )
        .order_by(JobOrderApplicant.created_at.desc())
        .all()
    )
    return applicant, links
