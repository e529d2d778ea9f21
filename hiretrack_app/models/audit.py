"""
SystemLog audit trail and the shared password gating the log page.

Log rows are written by a before_flush listener, so every insert, update
and soft delete of an audited entity is recorded in the same transaction
as the change itself. The acting user is read from session.info, where
SessionContext.bind() puts it.
"""
import json
import logging
from datetime import date, datetime
from decimal import Decimal
from sqlalchemy import Index, event, inspect
from sqlalchemy.orm import Session
from werkzeug.security import generate_password_hash, check_password_hash
from hiretrack_app.models.base import db, generate_uuid, utcnow, iso

logger = logging.getLogger(__name__)

AUDITED_TABLES = {
    'users',
    'clients',
    'joborder',
    'applicants',
    'joborder_applicant',
    'joborder_commission',
}
REDACTED_FIELDS = {'password_hash'}


class SystemLog(db.Model):
    """Append-only record of a change to an audited entity."""
    __tablename__ = 'system_logs'

    id = db.Column(db.String(36), primary_key=True, default=generate_uuid)
    user_id = db.Column(db.String(36), db.ForeignKey('users.id', ondelete='SET NULL'), index=True)

    action = db.Column(db.String(20), nullable=False)  # created, updated, deleted
    entity_type = db.Column(db.String(50), nullable=False)
    entity_id = db.Column(db.String(36))
    details = db.Column(db.Text)  # JSON: {"old": {...}, "new": {...}}

    created_at = db.Column(db.DateTime, default=utcnow, index=True)

    user = db.relationship('User', lazy='joined')

    __table_args__ = (
        Index('idx_system_logs_entity', 'entity_type', 'entity_id'),
    )

    def details_dict(self):
        if not self.details:
            return {}
        return json.loads(self.details)

    def to_dict(self):
        result = {
            'id': self.id,
            'user_id': self.user_id,
            'action': self.action,
            'entity_type': self.entity_type,
            'entity_id': self.entity_id,
            'created_at': iso(self.created_at),
            'user': {
                'id': self.user.id,
                'first_name': self.user.first_name,
                'last_name': self.user.last_name,
                'email': self.user.email,
            } if self.user else None,
        }
        try:
            result['details'] = self.details_dict()
        except (TypeError, ValueError):
            result['details'] = None
            result['details_error'] = 'Error displaying details'
        return result


class LogAccessControl(db.Model):
    """Shared password for the log page. The newest row is authoritative."""
    __tablename__ = 'log_access_control'

    id = db.Column(db.String(36), primary_key=True, default=generate_uuid)
    password_hash = db.Column(db.String(255), nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow, index=True)

    def set_password(self, password):
        self.password_hash = generate_password_hash(password, method='pbkdf2:sha256')

    @staticmethod
    def verify_password(attempt, hashed_password):
        if not attempt or not hashed_password:
            return False
        return check_password_hash(hashed_password, attempt)


def _json_value(value):
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    return value


def _snapshot(obj):
    state = inspect(obj)
    values = {}
    for attr in state.mapper.column_attrs:
        if attr.key in REDACTED_FIELDS:
            continue
        value = getattr(obj, attr.key)
        if value is not None:
            values[attr.key] = _json_value(value)
    return values


def _changes(obj):
    state = inspect(obj)
    old, new = {}, {}
    for attr in state.mapper.column_attrs:
        history = state.attrs[attr.key].history
        if not history.has_changes():
            continue
        before = history.deleted[0] if history.deleted else None
        after = history.added[0] if history.added else None
        if before == after:
            continue
        if attr.key in REDACTED_FIELDS:
            old[attr.key] = new[attr.key] = '[redacted]'
            continue
        old[attr.key] = _json_value(before)
        new[attr.key] = _json_value(after)
    return old, new


def _is_audited(obj):
    return getattr(obj, '__tablename__', None) in AUDITED_TABLES


@event.listens_for(Session, 'before_flush')
def record_system_logs(session, flush_context, instances):
    actor_id = session.info.get('actor_id')
    entries = []

    for obj in list(session.new):
        if not _is_audited(obj):
            continue
        if obj.id is None:
            obj.id = generate_uuid()
        entries.append(('created', obj, {'new': _snapshot(obj)}))

    for obj in list(session.dirty):
        if not _is_audited(obj) or not session.is_modified(obj, include_collections=False):
            continue
        old, new = _changes(obj)
        if not new:
            continue
        action = 'updated'
        if 'deleted_at' in new and old.get('deleted_at') is None and new['deleted_at'] is not None:
            action = 'deleted'
        entries.append((action, obj, {'old': old, 'new': new}))

    for obj in list(session.deleted):
        if not _is_audited(obj):
            continue
        entries.append(('deleted', obj, {'old': _snapshot(obj)}))

    for action, obj, details in entries:
        session.add(SystemLog(
            user_id=actor_id,
            action=action,
            entity_type=obj.__tablename__,
            entity_id=obj.id,
            details=json.dumps(details),
        ))
    if entries:
        logger.debug(f"Recorded {len(entries)} system log entr{'y' if len(entries) == 1 else 'ies'}")
