"""
API blueprints for HireTrack.
"""
from hiretrack_app.api import (
    auth_api,
    users_api,
    clients_api,
    job_orders_api,
    favorites_api,
    applicants_api,
    joborder_applicants_api,
    commissions_api,
    pipeline_api,
    logs_api,
    dashboard_api,
)

__all__ = [
    'auth_api',
    'users_api',
    'clients_api',
    'job_orders_api',
    'favorites_api',
    'applicants_api',
    'joborder_applicants_api',
    'commissions_api',
    'pipeline_api',
    'logs_api',
    'dashboard_api',
]
