"""
Dashboard aggregates.
"""
from datetime import date
from sqlalchemy import func
from hiretrack_app.models import db, Applicant, JobOrder, JobOrderApplicant
from hiretrack_app.utils.constants import APPLICATION_STATUSES, ENDORSEMENT_STAGE, JOB_ORDER_STATUSES

UPCOMING_STARTS_LIMIT = 10


def _live_links():
    return (
        db.session.query(JobOrderApplicant)
        .join(Applicant, Applicant.id == JobOrderApplicant.applicant_id)
        .join(JobOrder, JobOrder.id == JobOrderApplicant.joborder_id)
        .filter(Applicant.deleted_at.is_(None), JobOrder.deleted_at.is_(None))
    )


def stats():
    return {
        'total_job_orders': JobOrder.active().count(),
        'total_applicants': Applicant.active().count(),
        'pending_endorsements': _live_links().filter(
            JobOrderApplicant.application_stage == ENDORSEMENT_STAGE,
            JobOrderApplicant.application_status == APPLICATION_STATUSES[0],
        ).count(),
    }


def job_orders_by_status():
    """Live job order count for every status, zeros included, in status order."""
    rows = db.session.query(
        JobOrder.status,
        func.count(JobOrder.id).label('count')
    ).filter(JobOrder.deleted_at.is_(None)).group_by(JobOrder.status).all()
    counts = dict(rows)
    return [{'status': status, 'count': counts.get(status, 0)} for status in JOB_ORDER_STATUSES]


def applicants_per_job_order():
    rows = db.session.query(
        JobOrder.id,
        JobOrder.job_title,
        func.count(Applicant.id).label('count')
    ).outerjoin(
        JobOrderApplicant, JobOrderApplicant.joborder_id == JobOrder.id
    ).outerjoin(
        Applicant, db.and_(Applicant.id == JobOrderApplicant.applicant_id, Applicant.deleted_at.is_(None))
    ).filter(
        JobOrder.deleted_at.is_(None)
    ).group_by(JobOrder.id, JobOrder.job_title).order_by(func.count(Applicant.id).desc()).all()
    return [{'joborder_id': jid, 'job_title': title, 'count': count} for jid, title, count in rows]


def upcoming_starts(today=None, limit=UPCOMING_STARTS_LIMIT):
    today = today or date.today()
    return (
        _live_links()
        .filter(JobOrderApplicant.candidate_start_date >= today)
        .order_by(JobOrderApplicant.candidate_start_date.asc())
        .limit(limit)
        .all()
    )


def dashboard_data(today=None):
    return {
        'stats': stats(),
        'job_orders_by_status': job_orders_by_status(),
        'applicants_per_job_order': applicants_per_job_order(),
        'upcoming_starts': [link.to_dict(include_joborder=True) for link in upcoming_starts(today)],
    }
