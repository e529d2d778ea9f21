"""
Base database setup for HireTrack.
"""
import uuid
from datetime import datetime, timezone
from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()


def generate_uuid():
    """Generate a UUID string for primary keys."""
    return str(uuid.uuid4())


def utcnow():
    """Naive UTC timestamp, matching how DateTime columns are stored."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def iso(value):
    return value.isoformat() if value else None


class SoftDeleteMixin:
    """Rows are hidden by stamping deleted_at instead of being removed."""
    deleted_at = db.Column(db.DateTime, index=True)

    @property
    def is_deleted(self):
        return self.deleted_at is not None

    def soft_delete(self):
        # Only deleted_at changes; updated_at is left as it was
        if self.deleted_at is None:
            self.deleted_at = utcnow()

    @classmethod
    def active(cls):
        """Query excluding soft-deleted rows."""
        return cls.query.filter(cls.deleted_at.is_(None))
