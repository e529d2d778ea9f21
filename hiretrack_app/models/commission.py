"""
Commission model and the payment-details format stored on it.

commission_details is JSON text. Current rows hold a list of payment
records; older rows hold a single record object. CommissionDetails.parse
accepts both shapes and always exposes a list of PaymentRecord.
"""
import json
import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import List, Optional
from hiretrack_app.models.base import db, generate_uuid, utcnow, iso, SoftDeleteMixin
from hiretrack_app.utils.constants import DEFAULT_COMMISSION_STATUS

logger = logging.getLogger(__name__)

ZERO = Decimal('0')


class CommissionDetailsError(ValueError):
    """commission_details could not be parsed as payment records."""


def to_decimal(value) -> Decimal:
    if value is None or value == '':
        return ZERO
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise CommissionDetailsError(f"Invalid amount: {value!r}")
    if not amount.is_finite():
        raise CommissionDetailsError(f"Amount must be finite: {value!r}")
    return amount


@dataclass
class PaymentRecord:
    payment_type: Optional[str]
    amount: Decimal
    receipt_path: Optional[str] = None
    timestamp: Optional[str] = None

    @classmethod
    def from_dict(cls, data):
        if not isinstance(data, dict):
            raise CommissionDetailsError(f"Payment record must be an object, got {type(data).__name__}")
        return cls(
            payment_type=data.get('payment_type'),
            amount=to_decimal(data.get('amount')),
            receipt_path=data.get('receipt_path'),
            timestamp=data.get('timestamp'),
        )

    def to_dict(self):
        return {
            'payment_type': self.payment_type,
            'amount': float(self.amount),
            'receipt_path': self.receipt_path,
            'timestamp': self.timestamp,
        }


class CommissionDetails:
    """Tagged union over the two stored shapes: one record or a list of records."""
    SINGLE = 'single'
    LIST = 'list'

    def __init__(self, kind: str, payments: List[PaymentRecord]):
        self.kind = kind
        self.payments = payments

    @classmethod
    def parse(cls, raw) -> 'CommissionDetails':
        if raw is None or raw == '':
            return cls(cls.LIST, [])
        data = raw
        if isinstance(raw, (str, bytes)):
            try:
                data = json.loads(raw)
            except ValueError as e:
                raise CommissionDetailsError(f"commission_details is not valid JSON: {e}")
        if data is None:
            return cls(cls.LIST, [])
        if isinstance(data, dict):
            return cls(cls.SINGLE, [PaymentRecord.from_dict(data)])
        if isinstance(data, list):
            return cls(cls.LIST, [PaymentRecord.from_dict(item) for item in data])
        raise CommissionDetailsError(f"Unsupported commission_details shape: {type(data).__name__}")

    @property
    def total(self) -> Decimal:
        return sum((p.amount for p in self.payments), ZERO)

    def append(self, record: PaymentRecord) -> 'CommissionDetails':
        return CommissionDetails(self.LIST, self.payments + [record])

    def dumps(self) -> str:
        return json.dumps([p.to_dict() for p in self.payments])

    def __len__(self):
        return len(self.payments)


class Commission(SoftDeleteMixin, db.Model):
    """Recruiter commission owed and paid for a hired job-order applicant."""
    __tablename__ = 'joborder_commission'

    id = db.Column(db.String(36), primary_key=True, default=generate_uuid)
    joborder_applicant_id = db.Column(
        db.String(36),
        db.ForeignKey('joborder_applicant.id', ondelete='CASCADE'),
        nullable=False,
        unique=True,
    )

    current_commission = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    received_commission = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    commission_details = db.Column(db.Text)  # JSON, see CommissionDetails
    status = db.Column(db.String(50), default=DEFAULT_COMMISSION_STATUS)

    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime)

    def details(self) -> CommissionDetails:
        return CommissionDetails.parse(self.commission_details)

    def received_total(self) -> Decimal:
        """Sum of recorded payments, or the stored total when details are absent or unreadable."""
        stored = to_decimal(self.received_commission) if self.received_commission is not None else ZERO
        try:
            details = self.details()
        except CommissionDetailsError as e:
            logger.warning(f"Commission {self.id}: {e}; using stored received_commission")
            return stored
        if not details.payments:
            return stored
        return details.total

    def pending(self) -> Decimal:
        current = self.current_commission if self.current_commission is not None else ZERO
        return Decimal(current) - self.received_total()

    def payments_list(self):
        try:
            return [p.to_dict() for p in self.details().payments]
        except CommissionDetailsError:
            return []

    def to_dict(self):
        jo_applicant = self.joborder_applicant
        result = {
            'id': self.id,
            'joborder_applicant_id': self.joborder_applicant_id,
            'current_commission': float(self.current_commission or 0),
            'received_commission': float(self.received_total()),
            'pending_commission': float(self.pending()),
            'commission_details': self.payments_list(),
            'status': self.status,
            'created_at': iso(self.created_at),
            'updated_at': iso(self.updated_at),
            'deleted_at': iso(self.deleted_at),
        }
        if jo_applicant is not None:
            result['joborder_applicant'] = {
                'joborder': {'job_title': jo_applicant.joborder.job_title} if jo_applicant.joborder else None,
                'applicant': {
                    'first_name': jo_applicant.applicant.first_name,
                    'last_name': jo_applicant.applicant.last_name,
                } if jo_applicant.applicant else None,
                'author': {'username': jo_applicant.author.username} if jo_applicant.author else None,
                'candidate_start_date': iso(jo_applicant.candidate_start_date),
            }
        return result
