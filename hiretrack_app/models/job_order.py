"""
JobOrder and JobOrderFavorite models.
"""
import json
from hiretrack_app.models.base import db, generate_uuid, utcnow, iso, SoftDeleteMixin
from hiretrack_app.utils.constants import DEFAULT_JOB_ORDER_STATUS, DEFAULT_PRIORITY


def parse_sourcing_preference(value):
    """Tags arrive as a list, a JSON list, or a comma separated string."""
    if not value:
        return []
    if isinstance(value, (list, tuple)):
        items = value
    else:
        try:
            items = json.loads(value)
        except (TypeError, ValueError):
            items = str(value).split(',')
        if not isinstance(items, list):
            items = [items]
    tags = []
    for item in items:
        tag = str(item).strip()
        if tag and tag not in tags:
            tags.append(tag)
    return tags


class JobOrder(SoftDeleteMixin, db.Model):
    """An open requisition being recruited for."""
    __tablename__ = 'joborder'

    id = db.Column(db.String(36), primary_key=True, default=generate_uuid)
    author_id = db.Column(
        db.String(36),
        db.ForeignKey('users.id', ondelete='SET NULL'),
        index=True,
    )
    client_id = db.Column(
        db.String(36),
        db.ForeignKey('clients.id', ondelete='SET NULL'),
        index=True,
    )

    job_title = db.Column(db.String(255), nullable=False)
    status = db.Column(db.String(50), nullable=False, default=DEFAULT_JOB_ORDER_STATUS, index=True)
    priority = db.Column(db.String(10), nullable=False, default=DEFAULT_PRIORITY, index=True)
    archived = db.Column(db.Boolean, nullable=False, default=False)

    schedule = db.Column(db.String(255))
    client_budget = db.Column(db.String(255))
    responsibilities_requirements = db.Column(db.Text)
    updates = db.Column(db.Text)
    job_description = db.Column(db.String(500))  # storage path in the job-descriptions bucket
    sourcing_preference = db.Column(db.Text)  # JSON array of tags

    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime)

    author = db.relationship('User', lazy='joined')
    applicants = db.relationship(
        'JobOrderApplicant',
        backref='joborder',
        lazy='dynamic',
        cascade='all, delete-orphan',
    )

    @property
    def sourcing_tags(self):
        return parse_sourcing_preference(self.sourcing_preference)

    @sourcing_tags.setter
    def sourcing_tags(self, value):
        self.sourcing_preference = json.dumps(parse_sourcing_preference(value))

    def to_dict(self, applicant_count=None, include_client=True):
        result = {
            'id': self.id,
            'job_title': self.job_title,
            'client_id': self.client_id,
            'author_id': self.author_id,
            'status': self.status,
            'priority': self.priority,
            'archived': bool(self.archived),
            'schedule': self.schedule,
            'client_budget': self.client_budget,
            'responsibilities_requirements': self.responsibilities_requirements,
            'updates': self.updates,
            'job_description': self.job_description,
            'sourcing_preference': self.sourcing_tags,
            'created_at': iso(self.created_at),
            'updated_at': iso(self.updated_at),
            'deleted_at': iso(self.deleted_at),
        }
        if include_client:
            result['client'] = self.client.summary_dict() if self.client else None
        if applicant_count is not None:
            result['applicant_count'] = applicant_count
        return result


class JobOrderFavorite(db.Model):
    """A job order starred by a user."""
    __tablename__ = 'joborder_favorites'

    id = db.Column(db.String(36), primary_key=True, default=generate_uuid)
    user_id = db.Column(
        db.String(36),
        db.ForeignKey('users.id', ondelete='CASCADE'),
        nullable=False,
        index=True,
    )
    joborder_id = db.Column(
        db.String(36),
        db.ForeignKey('joborder.id', ondelete='CASCADE'),
        nullable=False,
        index=True,
    )
    created_at = db.Column(db.DateTime, default=utcnow)

    __table_args__ = (
        db.UniqueConstraint('user_id', 'joborder_id', name='uq_joborder_favorites_user_joborder'),
    )
