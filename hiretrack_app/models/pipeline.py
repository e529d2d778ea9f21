"""
Pipeline card models for free-form Kanban lanes of candidates.
"""
from hiretrack_app.models.base import db, generate_uuid, utcnow, iso


class PipelineCard(db.Model):
    """Named bucket of candidates, independent of job orders."""
    __tablename__ = 'pipeline_cards'

    id = db.Column(db.String(36), primary_key=True, default=generate_uuid)
    author_id = db.Column(
        db.String(36),
        db.ForeignKey('users.id', ondelete='CASCADE'),
        nullable=False,
        index=True,
    )
    title = db.Column(db.String(255), nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow)

    links = db.relationship(
        'PipelineCardApplicant',
        backref='card',
        lazy='dynamic',
        cascade='all, delete-orphan',
        passive_deletes=True,
    )

    def to_dict(self, applicant_count=None):
        result = {
            'id': self.id,
            'author_id': self.author_id,
            'title': self.title,
            'created_at': iso(self.created_at),
        }
        if applicant_count is not None:
            result['applicant_count'] = applicant_count
        return result


class PipelineCardApplicant(db.Model):
    """Association of an applicant with a pipeline card."""
    __tablename__ = 'pipeline_card_applicants'

    id = db.Column(db.String(36), primary_key=True, default=generate_uuid)
    card_id = db.Column(
        db.String(36),
        db.ForeignKey('pipeline_cards.id', ondelete='CASCADE'),
        nullable=False,
        index=True,
    )
    applicant_id = db.Column(
        db.String(36),
        db.ForeignKey('applicants.id', ondelete='CASCADE'),
        nullable=False,
        index=True,
    )
    added_at = db.Column(db.DateTime, default=utcnow)

    applicant = db.relationship('Applicant', lazy='joined')

    __table_args__ = (
        db.UniqueConstraint('card_id', 'applicant_id', name='uq_pipeline_card_applicants_card_applicant'),
    )

    def to_dict(self):
        applicant = self.applicant
        return {
            'id': self.id,
            'card_id': self.card_id,
            'applicant_id': self.applicant_id,
            'added_at': iso(self.added_at),
            'applicant': {
                'id': applicant.id,
                'first_name': applicant.first_name,
                'last_name': applicant.last_name,
                'email': applicant.email,
                'phone': applicant.phone,
                'cv_link': applicant.cv_link,
            } if applicant else None,
        }
