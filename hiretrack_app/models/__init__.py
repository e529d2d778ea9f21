"""
Database models for HireTrack.
"""
from hiretrack_app.models.base import db, generate_uuid, utcnow
from hiretrack_app.models.user import User
from hiretrack_app.models.client import Client
from hiretrack_app.models.job_order import JobOrder, JobOrderFavorite
from hiretrack_app.models.applicant import Applicant, JobOrderApplicant
from hiretrack_app.models.commission import (
    Commission, CommissionDetails, CommissionDetailsError, PaymentRecord
)
from hiretrack_app.models.pipeline import PipelineCard, PipelineCardApplicant
from hiretrack_app.models.audit import SystemLog, LogAccessControl

__all__ = [
    'db',
    'generate_uuid',
    'utcnow',
    'User',
    'Client',
    'JobOrder',
    'JobOrderFavorite',
    'Applicant',
    'JobOrderApplicant',
    'Commission',
    'CommissionDetails',
    'CommissionDetailsError',
    'PaymentRecord',
    'PipelineCard',
    'PipelineCardApplicant',
    'SystemLog',
    'LogAccessControl',
]
