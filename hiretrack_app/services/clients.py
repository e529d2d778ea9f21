"""
Client management services.
"""
import logging
from sqlalchemy import func
from hiretrack_app.models import db, Client, JobOrder, utcnow
from hiretrack_app.utils.auth import form_text, validate_email
from hiretrack_app.utils.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

CLIENT_FIELDS = ('company', 'first_name', 'last_name', 'position', 'email', 'phone', 'location')


def _validate_client_form(data, partial=False):
    errors = {}
    if not partial or 'company' in data:
        if not form_text(data, 'company'):
            errors['company'] = 'Company is required.'
    email = form_text(data, 'email')
    if email and not validate_email(email):
        errors['email'] = 'Please enter a valid email address.'
    for field, maxlen in [('company', 255), ('position', 255), ('location', 255), ('phone', 50)]:
        val = form_text(data, field)
        if val and len(val) > maxlen:
            errors[field] = f'Must be {maxlen} characters or less.'
    return errors


def job_order_counts_by_client(client_ids):
    """One grouped count query: {client_id: live job order count}."""
    if not client_ids:
        return {}
    counts = db.session.query(
        JobOrder.client_id,
        func.count(JobOrder.id).label('count')
    ).filter(
        JobOrder.client_id.in_(client_ids),
        JobOrder.deleted_at.is_(None),
    ).group_by(JobOrder.client_id).all()
    return {str(client_id): count for client_id, count in counts}


def list_clients(search=None):
    query = Client.active()
    if search:
        term = f"%{search.lower()}%"
        query = query.filter(db.or_(
            func.lower(Client.company).like(term),
            func.lower(Client.first_name).like(term),
            func.lower(Client.last_name).like(term),
            func.lower(Client.email).like(term),
        ))
    clients = query.order_by(Client.created_at.desc()).all()
    counts = job_order_counts_by_client([c.id for c in clients])
    return [(c, counts.get(c.id, 0)) for c in clients]


def client_options():
    return Client.active().order_by(Client.company.asc()).all()


def get_client(client_id):
    client = Client.active().filter_by(id=client_id).first()
    if not client:
        raise NotFoundError('Client not found')
    return client


def create_client(ctx, data):
    errors = _validate_client_form(data)
    if errors:
        raise ValidationError(errors)
    client = Client(author_id=ctx.user_id)
    for field in CLIENT_FIELDS:
        setattr(client, field, form_text(data, field) or None)
    ctx.bind()
    db.session.add(client)
    db.session.commit()
    logger.info(f"Client {client.company} created by {ctx.username}")
    return client


def update_client(ctx, client_id, data):
    client = get_client(client_id)
    errors = _validate_client_form(data, partial=True)
    if errors:
        raise ValidationError(errors)
    for field in CLIENT_FIELDS:
        if field in data:
            setattr(client, field, form_text(data, field) or None)
    client.updated_at = utcnow()
    ctx.bind()
    db.session.commit()
    return client


def delete_client(ctx, client_id):
    client = get_client(client_id)
    ctx.bind()
    client.soft_delete()
    db.session.commit()
    logger.info(f"Client {client.company} deleted by {ctx.username}")
    return client


def client_job_orders(client_id):
    client = get_client(client_id)
    return client, (
        JobOrder.active()
        .filter_by(client_id=client.id)
        .order_by(JobOrder.created_at.desc())
        .all()
    )
