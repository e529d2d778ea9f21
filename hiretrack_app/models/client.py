"""
Client model: the companies job orders are recruited for.
"""
from hiretrack_app.models.base import db, generate_uuid, utcnow, iso, SoftDeleteMixin


class Client(SoftDeleteMixin, db.Model):
    """Client company and its point of contact."""
    __tablename__ = 'clients'

    id = db.Column(db.String(36), primary_key=True, default=generate_uuid)
    author_id = db.Column(
        db.String(36),
        db.ForeignKey('users.id', ondelete='SET NULL'),
        index=True,
    )

    company = db.Column(db.String(255), nullable=False)
    first_name = db.Column(db.String(100))
    last_name = db.Column(db.String(100))
    position = db.Column(db.String(255))
    email = db.Column(db.String(255))
    phone = db.Column(db.String(50))
    location = db.Column(db.String(255))

    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime)

    author = db.relationship('User', lazy='joined')
    job_orders = db.relationship('JobOrder', backref='client', lazy='dynamic')

    def to_dict(self, job_order_count=None):
        result = {
            'id': self.id,
            'author_id': self.author_id,
            'company': self.company,
            'first_name': self.first_name,
            'last_name': self.last_name,
            'position': self.position,
            'email': self.email,
            'phone': self.phone,
            'location': self.location,
            'created_at': iso(self.created_at),
            'updated_at': iso(self.updated_at),
            'deleted_at': iso(self.deleted_at),
            'author': self.author.author_dict() if self.author else None,
        }
        if job_order_count is not None:
            result['job_order_count'] = job_order_count
        return result

    def summary_dict(self):
        return {
            'id': self.id,
            'company': self.company,
            'first_name': self.first_name,
            'last_name': self.last_name,
        }
