"""
Constants used throughout the application.
"""
ROLE_RECRUITER = 'recruiter'
ROLE_ADMINISTRATOR = 'administrator'
ROLES = (ROLE_RECRUITER, ROLE_ADMINISTRATOR)

USERNAME_PREFIX = 'Recruiter'

JOB_ORDER_STATUSES = (
    'Kickoff',
    'Sourcing',
    'Internal Interview',
    'Internal Assessment',
    'Client Endorsement',
    'Client Assessment',
    'Client Interview',
    'Offer',
    'Hire',
    'Hired',
    'On-hold',
    'Canceled',
)
DEFAULT_JOB_ORDER_STATUS = 'Kickoff'

PRIORITIES = ('High', 'Mid', 'Low')
DEFAULT_PRIORITY = 'Mid'

APPLICATION_STAGES = (
    'Sourced',
    'Interview',
    'Assessment',
    'Internal Interview',
    'Internal Assessment',
    'Client Endorsement',
    'Client Assessment',
    'Client Interview',
    'Offer',
    'Hired',
)
APPLICATION_STATUSES = ('Pending', 'Pass', 'Fail')
DEFAULT_APPLICATION_STAGE = 'Sourced'
ENDORSEMENT_STAGE = 'Client Endorsement'
HIREABLE_STAGES = ('Offer', 'Hired')

PAYMENT_TYPES = ('30day', '60day', '90day')
DEFAULT_COMMISSION_STATUS = 'Pending'

LOG_ACTIONS = ('created', 'updated', 'deleted')

# Object storage buckets
RESUME_BUCKET = 'resumes'
JOB_DESCRIPTION_BUCKET = 'job-descriptions'
RECEIPT_BUCKET = 'transaction-receipts'

ALLOWED_EXTENSIONS = {'pdf', 'txt', 'doc', 'docx'}
RECEIPT_EXTENSIONS = {'pdf', 'png', 'jpg', 'jpeg', 'webp'}

# Recent updates feed
RECENT_ACTIVITY_HOURS = 48
RECENT_ACTIVITY_LIMIT = 6
ENTITY_LABELS = {
    'users': 'User',
    'clients': 'Client',
    'joborder': 'Job order',
    'applicants': 'Applicant',
    'joborder_applicant': 'Candidate',
    'joborder_commission': 'Commission',
}
