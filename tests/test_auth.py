"""Tests for sign-up, sign-in, usernames and request authorization."""
import pytest

from hiretrack_app.models import db, User
from hiretrack_app.services import users
from hiretrack_app.utils.auth import SessionContext, validate_password
from hiretrack_app.utils.errors import ConflictError, PermissionDeniedError, ValidationError
from tests.factories import PASSWORD, login, make_user


def test_first_username(app):
    assert users.next_username() == 'Recruiter01'


def test_next_username_follows_highest(app):
    make_user(username='Recruiter01')
    make_user(username='Recruiter09')
    make_user(username='Admin42')
    make_user(username='RecruiterX')
    assert users.next_username() == 'Recruiter10'


def test_username_width_grows_past_99(app):
    make_user(username='Recruiter99')
    assert users.next_username() == 'Recruiter100'


@pytest.mark.parametrize('password,ok', [
    ('short1A', False),
    ('alllowercase1', False),
    ('ALLUPPERCASE1', False),
    ('NoDigitsHere', False),
    ('Good1Password', True),
])
def test_password_policy(password, ok):
    assert validate_password(password)[0] is ok


def test_create_user_assigns_username(app):
    user = users.create_user({
        'email': 'New@Example.com', 'password': PASSWORD, 'first_name': 'New', 'last_name': 'Person',
    })
    assert user.username == 'Recruiter01'
    assert user.role == 'recruiter'
    assert user.email == 'new@example.com'
    assert user.check_password(PASSWORD)


def test_create_user_rejects_duplicate_email(app):
    make_user(email='taken@example.com')
    with pytest.raises(ValidationError) as exc:
        users.create_user({'email': 'taken@example.com', 'password': PASSWORD, 'first_name': 'A', 'last_name': 'B'})
    assert 'email' in exc.value.errors


def test_create_user_rejects_taken_username(app):
    make_user(username='Recruiter05')
    with pytest.raises(ConflictError):
        users.create_user({
            'email': 'x@example.com', 'password': PASSWORD, 'first_name': 'A', 'last_name': 'B',
            'username': 'Recruiter05',
        })


def test_admin_cannot_delete_self(admin, admin_ctx):
    with pytest.raises(PermissionDeniedError):
        users.soft_delete_user(admin_ctx, admin.id)


def test_session_context():
    ctx = SessionContext('u1', 'recruiter', 'Recruiter01')
    assert not ctx.is_admin
    assert SessionContext('u2', 'administrator').is_admin
    owned = type('Row', (), {'author_id': 'u1'})()
    assert ctx.owns(owned) and ctx.can_modify(owned)
    assert not ctx.can_modify(type('Row', (), {'author_id': 'u9'})())


class TestViews:

    def test_register_creates_recruiter(self, client):
        resp = client.post('/register', data={
            'email': 'jane@example.com', 'password': PASSWORD, 'confirm_password': PASSWORD,
            'first_name': 'Jane', 'last_name': 'Doe',
        })
        assert resp.status_code == 302
        user = User.query.filter_by(email='jane@example.com').one()
        assert (user.username, user.role) == ('Recruiter01', 'recruiter')

    def test_register_rejects_weak_password(self, client):
        resp = client.post('/register', data={
            'email': 'jane@example.com', 'password': 'weak', 'confirm_password': 'weak',
            'first_name': 'Jane', 'last_name': 'Doe',
        })
        assert resp.status_code == 400
        assert User.query.count() == 0

    def test_login(self, client, recruiter):
        resp = client.post('/login', data={'email': recruiter.email, 'password': PASSWORD})
        assert resp.status_code == 302
        assert recruiter.last_login_at is not None
        assert client.get('/api/auth/session').get_json()['user']['username'] == 'Recruiter01'

    @pytest.mark.parametrize('next_page,location', [
        ('/dashboard?tab=1', '/dashboard?tab=1'),
        ('//evil.example/steal', '/dashboard'),
        ('https://evil.example/', '/dashboard'),
        ('/\\evil.example', '/dashboard'),
    ])
    def test_login_redirects_only_to_local_paths(self, client, recruiter, next_page, location):
        resp = client.post('/login', query_string={'next': next_page}, data={'email': recruiter.email, 'password': PASSWORD})
        assert resp.status_code == 302
        assert resp.headers['Location'] == location

    def test_login_rejects_wrong_password(self, client, recruiter):
        resp = client.post('/login', data={'email': recruiter.email, 'password': 'Wrong1234'})
        assert resp.status_code == 200
        assert client.get('/api/auth/session').status_code == 401

    def test_login_rejects_deleted_user(self, client, recruiter):
        recruiter.soft_delete()
        db.session.commit()
        resp = client.post('/login', data={'email': recruiter.email, 'password': PASSWORD})
        assert resp.status_code == 200
        assert client.get('/api/auth/session').status_code == 401

    def test_deleted_user_session_is_dropped(self, app, recruiter):
        test_client = login(app.test_client(), recruiter)
        assert test_client.get('/api/auth/session').status_code == 200
        recruiter.soft_delete()
        db.session.commit()
        assert test_client.get('/api/auth/session').status_code == 401

    def test_logout(self, recruiter_client):
        assert recruiter_client.get('/logout').status_code == 302
        assert recruiter_client.get('/api/auth/session').status_code == 401


class TestApiAuthorization:

    def test_unauthenticated_api_request(self, client):
        resp = client.get('/api/applicants')
        assert resp.status_code == 401
        assert resp.get_json() == {'error': 'Authentication required'}

    def test_recruiter_cannot_manage_users(self, recruiter_client):
        assert recruiter_client.get('/api/users').status_code == 403

    def test_admin_creates_user(self, admin_client):
        resp = admin_client.post('/api/users', json={
            'email': 'sam@example.com', 'password': PASSWORD, 'first_name': 'Sam', 'last_name': 'Lee',
        })
        assert resp.status_code == 201
        assert resp.get_json()['user']['username'] == 'Recruiter01'
        assert admin_client.get('/api/users/next-username').get_json() == {'username': 'Recruiter02'}

    def test_unknown_api_path_is_json(self, client):
        resp = client.get('/api/does-not-exist')
        assert resp.status_code == 404
        assert resp.get_json() == {'error': 'Not found'}
