"""Shared fixtures for HireTrack tests."""
import os
from datetime import date

import boto3
import pytest
from flask import g
from flask.testing import FlaskClient
from moto import mock_aws

from hiretrack_app import create_app
from hiretrack_app.models import db
from hiretrack_app.services.storage import StorageClient
from hiretrack_app.utils.auth import SessionContext
from hiretrack_app.utils.constants import (
    JOB_DESCRIPTION_BUCKET, RECEIPT_BUCKET, RESUME_BUCKET, ROLE_ADMINISTRATOR, ROLE_RECRUITER,
)
from tests.factories import login, make_user


@pytest.fixture(scope="session", autouse=True)
def setup_test_env():
    """Credentials for moto; never real AWS."""
    os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
    os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")
    os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")


class FreshUserClient(FlaskClient):
    """The test holds the app context open, so drop the cached Flask-Login user before each request."""

    def open(self, *args, **kwargs):
        g.pop('_login_user', None)
        return super().open(*args, **kwargs)


@pytest.fixture
def app():
    app = create_app('testing')
    app.test_client_class = FreshUserClient
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def storage(app):
    """moto-backed StorageClient installed as the app's storage."""
    with mock_aws():
        s3 = boto3.client('s3', region_name='us-east-1')
        for bucket in (RESUME_BUCKET, JOB_DESCRIPTION_BUCKET, RECEIPT_BUCKET):
            s3.create_bucket(Bucket=bucket)
        store = StorageClient(s3, app.config['STORAGE_PUBLIC_URL'])
        app.extensions['storage'] = store
        yield store
        app.extensions.pop('storage', None)


@pytest.fixture
def admin(app):
    return make_user(ROLE_ADMINISTRATOR, email='admin@example.com', username='Admin01')


@pytest.fixture
def recruiter(app):
    return make_user(ROLE_RECRUITER, email='recruiter@example.com', username='Recruiter01')


@pytest.fixture
def other_recruiter(app):
    return make_user(ROLE_RECRUITER, email='other@example.com', username='Recruiter02')


@pytest.fixture
def admin_ctx(admin):
    return SessionContext.from_user(admin)


@pytest.fixture
def recruiter_ctx(recruiter):
    return SessionContext.from_user(recruiter)


@pytest.fixture
def other_ctx(other_recruiter):
    return SessionContext.from_user(other_recruiter)


@pytest.fixture
def admin_client(app, admin):
    return login(app.test_client(), admin)


@pytest.fixture
def recruiter_client(app, recruiter):
    return login(app.test_client(), recruiter)


@pytest.fixture
def today():
    return date(2026, 3, 2)
