"""
Applicant and JobOrderApplicant models.
"""
from hiretrack_app.models.base import db, generate_uuid, utcnow, iso, SoftDeleteMixin
from hiretrack_app.utils.constants import APPLICATION_STATUSES


class Applicant(SoftDeleteMixin, db.Model):
    """A candidate, independent of any job order."""
    __tablename__ = 'applicants'

    id = db.Column(db.String(36), primary_key=True, default=generate_uuid)
    author_id = db.Column(
        db.String(36),
        db.ForeignKey('users.id', ondelete='SET NULL'),
        index=True,
    )

    first_name = db.Column(db.String(100), nullable=False)
    last_name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(255), nullable=False, index=True)
    phone = db.Column(db.String(50))
    location = db.Column(db.String(255))
    linkedin_profile = db.Column(db.String(500))
    cv_link = db.Column(db.String(1000))  # public URL of the uploaded resume

    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime)

    author = db.relationship('User', lazy='joined')
    job_order_links = db.relationship('JobOrderApplicant', backref='applicant', lazy='dynamic')

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}"

    def to_dict(self):
        return {
            'id': self.id,
            'author_id': self.author_id,
            'first_name': self.first_name,
            'last_name': self.last_name,
            'email': self.email,
            'phone': self.phone,
            'location': self.location,
            'linkedin_profile': self.linkedin_profile,
            'cv_link': self.cv_link,
            'created_at': iso(self.created_at),
            'updated_at': iso(self.updated_at),
            'deleted_at': iso(self.deleted_at),
            'author': self.author.author_dict() if self.author else None,
        }


class JobOrderApplicant(db.Model):
    """The application record linking an applicant to a job order."""
    __tablename__ = 'joborder_applicant'

    id = db.Column(db.String(36), primary_key=True, default=generate_uuid)
    joborder_id = db.Column(
        db.String(36),
        db.ForeignKey('joborder.id', ondelete='CASCADE'),
        nullable=False,
        index=True,
    )
    # Denormalized from the job order at link time
    client_id = db.Column(
        db.String(36),
        db.ForeignKey('clients.id', ondelete='SET NULL'),
        index=True,
    )
    applicant_id = db.Column(
        db.String(36),
        db.ForeignKey('applicants.id', ondelete='CASCADE'),
        nullable=False,
        index=True,
    )
    author_id = db.Column(
        db.String(36),
        db.ForeignKey('users.id', ondelete='SET NULL'),
        index=True,
    )

    application_stage = db.Column(db.String(50), nullable=False, index=True)
    application_status = db.Column(db.String(20), nullable=False, default=APPLICATION_STATUSES[0])
    asking_salary = db.Column(db.Numeric(12, 2))
    interview_notes = db.Column(db.Text)  # profiler
    client_feedback = db.Column(db.Text)
    candidate_start_date = db.Column(db.Date)

    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime)

    author = db.relationship('User', lazy='joined')
    commission = db.relationship(
        'Commission',
        backref='joborder_applicant',
        uselist=False,
        cascade='all, delete-orphan',
    )

    def to_dict(self, include_applicant=True, include_joborder=False):
        result = {
            'id': self.id,
            'joborder_id': self.joborder_id,
            'client_id': self.client_id,
            'applicant_id': self.applicant_id,
            'author_id': self.author_id,
            'application_stage': self.application_stage,
            'application_status': self.application_status,
            'asking_salary': float(self.asking_salary) if self.asking_salary is not None else None,
            'interview_notes': self.interview_notes,
            'client_feedback': self.client_feedback,
            'candidate_start_date': iso(self.candidate_start_date),
            'created_at': iso(self.created_at),
            'updated_at': iso(self.updated_at),
            'author': self.author.author_dict() if self.author else None,
        }
        if include_applicant:
            result['applicant'] = self.applicant.to_dict() if self.applicant else None
        if include_joborder and self.joborder:
            result['joborder'] = {
                'id': self.joborder.id,
                'job_title': self.joborder.job_title,
                'status': self.joborder.status,
            }
        return result
