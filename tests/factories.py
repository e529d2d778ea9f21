"""Model factories for tests."""
from hiretrack_app.models import (
    db, Applicant, Client, Commission, JobOrder, JobOrderApplicant, User,
)
from hiretrack_app.utils.constants import ROLE_RECRUITER

PASSWORD = 'Secret123'

_counter = {'n': 0}


def _next():
    _counter['n'] += 1
    return _counter['n']


def make_user(role=ROLE_RECRUITER, email=None, username=None, **kwargs):
    n = _next()
    user = User(
        email=email or f'user{n}@example.com',
        first_name=kwargs.pop('first_name', 'Test'),
        last_name=kwargs.pop('last_name', f'User{n}'),
        username=username or f'{role}{n}',
        role=role,
        **kwargs
    )
    user.set_password(PASSWORD)
    db.session.add(user)
    db.session.commit()
    return user


def make_client(author=None, company='Acme Corp', **kwargs):
    client = Client(author_id=author.id if author else None, company=company, **kwargs)
    db.session.add(client)
    db.session.commit()
    return client


def make_job_order(author, client=None, job_title='Backend Engineer', **kwargs):
    client = client or make_client(author)
    job_order = JobOrder(author_id=author.id, client_id=client.id, job_title=job_title, **kwargs)
    db.session.add(job_order)
    db.session.commit()
    return job_order


def make_applicant(author, first_name='Ada', last_name='Lovelace', email=None, **kwargs):
    applicant = Applicant(
        author_id=author.id,
        first_name=first_name,
        last_name=last_name,
        email=email or f'{first_name.lower()}.{last_name.lower()}{_next()}@example.com',
        **kwargs
    )
    db.session.add(applicant)
    db.session.commit()
    return applicant


def make_link(author, job_order, applicant, stage='Sourced', status='Pending', **kwargs):
    link = JobOrderApplicant(
        joborder_id=job_order.id,
        client_id=job_order.client_id,
        applicant_id=applicant.id,
        author_id=author.id,
        application_stage=stage,
        application_status=status,
        **kwargs
    )
    db.session.add(link)
    db.session.commit()
    return link


def make_commission(link, current=0, details=None, received=0):
    commission = Commission(
        joborder_applicant_id=link.id,
        current_commission=current,
        received_commission=received,
        commission_details=details,
    )
    db.session.add(commission)
    db.session.commit()
    return commission




def login(test_client, user):
    """Sign a test client in as user through the Flask-Login session keys."""
    with test_client.session_transaction() as sess:
        sess['_user_id'] = user.id
        sess['_fresh'] = True
    return test_client
