"""
User model for authentication and role-based access.
"""
from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash
from hiretrack_app.models.base import db, generate_uuid, utcnow, iso, SoftDeleteMixin
from hiretrack_app.utils.constants import ROLE_ADMINISTRATOR, ROLE_RECRUITER


class User(UserMixin, SoftDeleteMixin, db.Model):
    """Recruiter or administrator account."""
    __tablename__ = 'users'

    id = db.Column(db.String(36), primary_key=True, default=generate_uuid)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    first_name = db.Column(db.String(100), nullable=False)
    last_name = db.Column(db.String(100), nullable=False)
    username = db.Column(db.String(50), unique=True, nullable=False, index=True)
    role = db.Column(db.String(20), nullable=False, default=ROLE_RECRUITER)
    linkedin_profile = db.Column(db.String(500))

    # Timestamps
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime)
    last_login_at = db.Column(db.DateTime)

    def set_password(self, password):
        # Use pbkdf2 instead of scrypt for compatibility with LibreSSL
        self.password_hash = generate_password_hash(password, method='pbkdf2:sha256')

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)

    @property
    def is_active(self):
        # Flask-Login refuses sessions for soft-deleted accounts
        return self.deleted_at is None

    @property
    def is_admin(self):
        return self.role == ROLE_ADMINISTRATOR

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}"

    def to_dict(self):
        return {
            'id': self.id,
            'email': self.email,
            'first_name': self.first_name,
            'last_name': self.last_name,
            'username': self.username,
            'role': self.role,
            'linkedin_profile': self.linkedin_profile,
            'created_at': iso(self.created_at),
            'updated_at': iso(self.updated_at),
            'deleted_at': iso(self.deleted_at),
        }

    def author_dict(self):
        """Compact author summary embedded in other rows."""
        return {
            'first_name': self.first_name,
            'last_name': self.last_name,
            'username': self.username,
        }
