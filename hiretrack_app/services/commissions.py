"""
Commission services: creation for hired candidates, payment accrual and totals.

Recruiters only ever see commissions on job-order applicants they endorsed.
Writes are for administrators.
"""
import logging
from decimal import Decimal
from hiretrack_app.models import (
    db, Commission, CommissionDetailsError, JobOrderApplicant, PaymentRecord, utcnow
)
from hiretrack_app.models.commission import ZERO, to_decimal
from hiretrack_app.services.storage import get_storage, check_upload, receipt_path
from hiretrack_app.utils.auth import form_text
from hiretrack_app.utils.constants import (
    DEFAULT_COMMISSION_STATUS, HIREABLE_STAGES, PAYMENT_TYPES, RECEIPT_BUCKET, RECEIPT_EXTENSIONS,
)
from hiretrack_app.utils.errors import ConflictError, NotFoundError, PermissionDeniedError, ValidationError

logger = logging.getLogger(__name__)


def _amount(value, field):
    try:
        amount = to_decimal(value)
    except CommissionDetailsError:
        raise ValidationError({field: 'Must be a number.'})
    if amount < 0:
        raise ValidationError({field: 'Cannot be negative.'})
    return amount


def visible_commissions(ctx):
    query = Commission.active().join(
        JobOrderApplicant, JobOrderApplicant.id == Commission.joborder_applicant_id
    )
    if not ctx.is_admin:
        query = query.filter(JobOrderApplicant.author_id == ctx.user_id)
    return query


def list_commissions(ctx):
    return visible_commissions(ctx).order_by(Commission.created_at.desc()).all()


def get_commission(ctx, commission_id):
    commission = visible_commissions(ctx).filter(Commission.id == commission_id).first()
    if not commission:
        raise NotFoundError('Commission not found')
    return commission


def commission_summary(ctx):
    """Totals of current, received and pending over the caller's commissions."""
    current = received = ZERO
    commissions = list_commissions(ctx)
    for commission in commissions:
        current += Decimal(commission.current_commission or 0)
        received += commission.received_total()
    return {
        'count': len(commissions),
        'current_commission': float(current),
        'received_commission': float(received),
        'pending_commission': float(current - received),
    }


def create_commission(ctx, joborder_applicant_id, data=None):
    data = data or {}
    link = JobOrderApplicant.query.get(joborder_applicant_id)
    if not link:
        raise NotFoundError('Job order applicant not found')
    if link.application_stage not in HIREABLE_STAGES:
        raise ValidationError({'application_stage': 'Commissions can only be created at the Offer or Hired stage.'})
    existing = link.commission
    if existing is not None and not existing.is_deleted:
        raise ConflictError('A commission already exists for this candidate')

    current = _amount(data.get('current_commission'), 'current_commission')
    if existing is not None:
        # Revive the soft-deleted row; joborder_applicant_id is unique
        commission = existing
        commission.deleted_at = None
        commission.current_commission = current
        commission.received_commission = ZERO
        commission.commission_details = None
        commission.status = data.get('status') or DEFAULT_COMMISSION_STATUS
        commission.updated_at = utcnow()
    else:
        commission = Commission(
            joborder_applicant_id=link.id,
            current_commission=current,
            received_commission=ZERO,
            status=data.get('status') or DEFAULT_COMMISSION_STATUS,
        )
        db.session.add(commission)
    ctx.bind()
    db.session.commit()
    logger.info(f"Commission {commission.id} created for {link.id} by {ctx.username}")
    return commission


def add_payment(ctx, commission_id, payment_type=None, amount=None, receipt_file=None, current_commission=None):
    """
    Record a payment against a commission.

    The receipt (if any) is uploaded first. The new record is appended to the
    normalised details list and received_commission is recomputed from it;
    both are written in one commit. An amount of zero only updates
    current_commission.
    """
    commission = get_commission(ctx, commission_id)
    amount = _amount(amount, 'amount')
    if current_commission is not None and current_commission != '':
        commission.current_commission = _amount(current_commission, 'current_commission')

    if amount > 0:
        if payment_type not in PAYMENT_TYPES:
            raise ValidationError({'payment_type': f"Payment type must be one of {', '.join(PAYMENT_TYPES)}."})
        details = commission.details()

        path = None
        if receipt_file is not None and receipt_file.filename:
            data, ext, _ = check_upload(receipt_file, RECEIPT_EXTENSIONS, field='receipt')
            link = commission.joborder_applicant
            path = get_storage().upload(
                RECEIPT_BUCKET,
                receipt_path(link.applicant, link.joborder_id, ext),
                data,
                content_type=receipt_file.mimetype,
            )

        details = details.append(PaymentRecord(
            payment_type=payment_type,
            amount=amount,
            receipt_path=path,
            timestamp=utcnow().isoformat(),
        ))
        commission.commission_details = details.dumps()
        commission.received_commission = details.total
    elif current_commission is None or current_commission == '':
        raise ValidationError({'amount': 'Enter a payment amount or a new commission total.'})

    commission.updated_at = utcnow()
    ctx.bind()
    db.session.commit()
    logger.info(f"Commission {commission.id} updated by {ctx.username}: +{amount}")
    return commission


def update_commission(ctx, commission_id, data):
    commission = get_commission(ctx, commission_id)
    if 'current_commission' in data:
        commission.current_commission = _amount(data.get('current_commission'), 'current_commission')
    if 'status' in data:
        status = form_text(data, 'status')
        if not status:
            raise ValidationError({'status': 'Status is required.'})
        commission.status = status
    commission.updated_at = utcnow()
    ctx.bind()
    db.session.commit()
    return commission


def delete_commission(ctx, commission_id):
    if not ctx.is_admin:
        raise PermissionDeniedError('Only administrators can delete commissions')
    commission = get_commission(ctx, commission_id)
    ctx.bind()
    commission.soft_delete()
    db.session.commit()
    return commission


def payment_details(ctx, commission_id):
    """Payment records with a public URL for each stored receipt."""
    commission = get_commission(ctx, commission_id)
    storage = None
    payments = []
    for payment in commission.payments_list():
        if payment.get('receipt_path'):
            storage = storage or get_storage()
            payment['receipt_url'] = storage.get_public_url(RECEIPT_BUCKET, payment['receipt_path'])
        else:
            payment['receipt_url'] = None
        payments.append(payment)
    return commission, payments
