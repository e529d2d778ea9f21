"""
System log queries, the recent activity feed and the log page password.
"""
import logging
from datetime import date, datetime, timedelta
from flask import session
from sqlalchemy import func
from hiretrack_app.models import db, Applicant, JobOrder, LogAccessControl, SystemLog, utcnow
from hiretrack_app.models.base import iso
from hiretrack_app.utils.constants import (
    ENTITY_LABELS, LOG_ACTIONS, RECENT_ACTIVITY_HOURS, RECENT_ACTIVITY_LIMIT,
)
from hiretrack_app.utils.auth import as_text
from hiretrack_app.utils.errors import ValidationError

logger = logging.getLogger(__name__)

UNLOCK_SESSION_KEY = 'logs_unlocked'
DEFAULT_PAGE_SIZE = 50


def _parse_day(value, field):
    if not value:
        return None
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        raise ValidationError({field: 'Dates must be YYYY-MM-DD.'})


def filter_logs(entity_type=None, action=None, start_date=None, end_date=None, search=None):
    """Query of logs, newest first. The end date is inclusive."""
    query = SystemLog.query
    if entity_type and entity_type != 'all':
        query = query.filter(SystemLog.entity_type == entity_type)
    if action and action != 'all':
        if action not in LOG_ACTIONS:
            raise ValidationError({'action': 'Invalid action.'})
        query = query.filter(SystemLog.action == action)
    start = _parse_day(start_date, 'start_date')
    end = _parse_day(end_date, 'end_date')
    if start:
        query = query.filter(SystemLog.created_at >= datetime.combine(start, datetime.min.time()))
    if end:
        query = query.filter(SystemLog.created_at < datetime.combine(end + timedelta(days=1), datetime.min.time()))
    if search:
        query = query.filter(func.lower(SystemLog.details).like(f"%{search.strip().lower()}%"))
    return query.order_by(SystemLog.created_at.desc())


def list_logs(page=1, per_page=DEFAULT_PAGE_SIZE, **filters):
    query = filter_logs(**filters)
    total = query.count()
    page = max(1, int(page or 1))
    logs = query.offset((page - 1) * per_page).limit(per_page).all()
    return logs, total


def entity_types():
    rows = db.session.query(SystemLog.entity_type).distinct().order_by(SystemLog.entity_type).all()
    return [row[0] for row in rows]


def _entity_titles(entries):
    """Current job titles and applicant names for the entities in entries."""
    titles = {}
    joborder_ids = {e.entity_id for e in entries if e.entity_type == 'joborder'}
    applicant_ids = {e.entity_id for e in entries if e.entity_type == 'applicants'}
    if joborder_ids:
        rows = db.session.query(JobOrder.id, JobOrder.job_title).filter(JobOrder.id.in_(joborder_ids))
        titles.update((('joborder', jid), title) for jid, title in rows)
    if applicant_ids:
        rows = db.session.query(Applicant.id, Applicant.first_name, Applicant.last_name).filter(
            Applicant.id.in_(applicant_ids))
        titles.update((('applicants', aid), f"{first} {last}") for aid, first, last in rows)
    return titles


def _changed_fields(entry):
    try:
        details = entry.details_dict()
    except (TypeError, ValueError):
        return []
    if not isinstance(details, dict):
        return []
    fields = details.get('new') or details.get('old') or {}
    return sorted(key for key in fields if key != 'updated_at')


def recent_activity(ctx, now=None, hours=RECENT_ACTIVITY_HOURS, limit=RECENT_ACTIVITY_LIMIT):
    """
    Latest changes for the dashboard feed, without the logged values.

    Recruiters see job order changes and changes to their own applicants;
    administrators see every entity type. Full details stay behind the log gate.
    """
    since = (now or utcnow()) - timedelta(hours=hours)
    query = SystemLog.query.filter(SystemLog.created_at >= since)
    if not ctx.is_admin:
        own_applicants = db.select(Applicant.id).where(Applicant.author_id == ctx.user_id)
        query = query.filter(db.or_(
            SystemLog.entity_type == 'joborder',
            db.and_(SystemLog.entity_type == 'applicants', SystemLog.entity_id.in_(own_applicants)),
        ))
    entries = query.order_by(SystemLog.created_at.desc()).limit(limit).all()
    titles = _entity_titles(entries)
    return [{
        'id': entry.id,
        'action': entry.action,
        'entity_type': entry.entity_type,
        'entity_id': entry.entity_id,
        'title': titles.get((entry.entity_type, entry.entity_id)) or ENTITY_LABELS.get(entry.entity_type, entry.entity_type),
        'changed_fields': _changed_fields(entry),
        'user': f"{entry.user.first_name} {entry.user.last_name}" if entry.user else None,
        'created_at': iso(entry.created_at),
    } for entry in entries]


def current_log_password_hash():
    latest = LogAccessControl.query.order_by(LogAccessControl.created_at.desc()).first()
    return latest.password_hash if latest else None


def verify_log_password(attempt):
    """Check an attempt against the newest stored password."""
    return LogAccessControl.verify_password(as_text(attempt, 'password', strip=False), current_log_password_hash())


def set_log_password(password):
    password = as_text(password, 'password', strip=False)
    if not password or len(password) < 8:
        raise ValidationError({'password': 'Password must be at least 8 characters long'})
    entry = LogAccessControl()
    entry.set_password(password)
    db.session.add(entry)
    db.session.commit()
    logger.info('Log access password updated')
    return entry


def unlock_logs(attempt):
    if verify_log_password(attempt):
        session[UNLOCK_SESSION_KEY] = True
        return True
    logger.warning('Failed log page unlock attempt')
    return False


def lock_logs():
    session.pop(UNLOCK_SESSION_KEY, None)


def logs_unlocked():
    return bool(session.get(UNLOCK_SESSION_KEY))
