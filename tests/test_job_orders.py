"""Tests for job orders, the priority board and favorites."""
import io
from datetime import timedelta

import pytest

from hiretrack_app.models import db, JobOrderFavorite, utcnow
from hiretrack_app.models.job_order import parse_sourcing_preference
from hiretrack_app.services import job_orders
from hiretrack_app.utils.constants import JOB_DESCRIPTION_BUCKET
from hiretrack_app.utils.errors import NotFoundError, ValidationError
from tests.factories import make_applicant, make_client, make_job_order, make_link


def test_create_job_order_defaults(admin, recruiter_ctx):
    client = make_client(admin)
    job_order = job_orders.create_job_order(recruiter_ctx, {
        'job_title': ' Platform Engineer ',
        'client_id': client.id,
        'sourcing_preference': 'LinkedIn, Referrals, LinkedIn',
    })
    assert job_order.job_title == 'Platform Engineer'
    assert job_order.status == 'Kickoff'
    assert job_order.priority == 'Mid'
    assert job_order.archived is False
    assert job_order.sourcing_tags == ['LinkedIn', 'Referrals']


@pytest.mark.parametrize('data,field', [
    ({'client_id': 'x'}, 'job_title'),
    ({'job_title': 'Dev'}, 'client_id'),
    ({'job_title': 'Dev', 'client_id': 'missing'}, 'client_id'),
    ({'job_title': ['Dev'], 'client_id': 'x'}, 'job_title'),
    ({'job_title': 'Dev', 'client_id': {'id': 'x'}}, 'client_id'),
])
def test_create_job_order_validation(recruiter_ctx, data, field):
    with pytest.raises(ValidationError) as exc:
        job_orders.create_job_order(recruiter_ctx, data)
    assert field in exc.value.errors


def test_update_rejects_values_outside_enums(admin, admin_ctx):
    job_order = make_job_order(admin)
    with pytest.raises(ValidationError):
        job_orders.update_job_order(admin_ctx, job_order.id, {'priority': 'Urgent'})
    with pytest.raises(ValidationError):
        job_orders.update_job_order(admin_ctx, job_order.id, {'status': 'Closed'})
    updated = job_orders.update_job_order(admin_ctx, job_order.id, {'priority': 'High', 'status': 'On-hold'})
    assert (updated.priority, updated.status) == ('High', 'On-hold')
    assert updated.updated_at is not None


def test_applicant_counts_are_grouped(admin, recruiter):
    first = make_job_order(admin, job_title='First')
    second = make_job_order(admin, job_title='Second')
    empty = make_job_order(admin, job_title='Empty')
    for _ in range(3):
        make_link(recruiter, first, make_applicant(recruiter))
    make_link(recruiter, second, make_applicant(recruiter))
    gone = make_applicant(recruiter)
    make_link(recruiter, second, gone)
    gone.soft_delete()
    db.session.commit()

    counts = job_orders.applicant_counts([first.id, second.id, empty.id])
    assert counts == {first.id: 3, second.id: 1}
    assert job_orders.applicant_counts([]) == {}


def test_priority_board_lanes(admin, recruiter, recruiter_ctx):
    high = make_job_order(admin, job_title='Urgent role', priority='High')
    mid = make_job_order(admin, job_title='Normal role')
    low = make_job_order(admin, job_title='Someday role', priority='Low')
    make_job_order(admin, job_title='Archived role', priority='High', archived=True)
    deleted = make_job_order(admin, job_title='Deleted role', priority='Low')
    deleted.soft_delete()
    db.session.commit()
    make_link(recruiter, high, make_applicant(recruiter))
    job_orders.add_favorite(recruiter_ctx, low.id)

    lanes = job_orders.priority_board(recruiter_ctx)
    assert [lane['priority'] for lane in lanes] == ['High', 'Mid', 'Low']
    by_lane = {lane['priority']: lane['job_orders'] for lane in lanes}
    assert [c['id'] for c in by_lane['High']] == [high.id]
    assert [c['id'] for c in by_lane['Mid']] == [mid.id]
    assert [c['id'] for c in by_lane['Low']] == [low.id]

    card = by_lane['High'][0]
    assert card['applicant_count'] == 1
    assert card['client']['company'] == 'Acme Corp'
    assert card['age_days'] == 0
    assert by_lane['Low'][0]['is_favorite'] is True
    assert card['is_favorite'] is False


def test_board_filters(admin, recruiter_ctx):
    make_job_order(admin, job_title='Python Developer', status='Sourcing')
    make_job_order(admin, job_title='Java Developer', status='Kickoff')
    lanes = job_orders.priority_board(recruiter_ctx, search='python')
    assert [c['job_title'] for c in lanes[1]['job_orders']] == ['Python Developer']
    lanes = job_orders.priority_board(recruiter_ctx, status='Kickoff')
    assert [c['job_title'] for c in lanes[1]['job_orders']] == ['Java Developer']


@pytest.mark.parametrize('delta,label', [
    (timedelta(seconds=30), 'less than a minute ago'),
    (timedelta(minutes=1), '1 minute ago'),
    (timedelta(hours=5), '5 hours ago'),
    (timedelta(days=3), '3 days ago'),
    (timedelta(days=65), '2 months ago'),
    (timedelta(days=800), '2 years ago'),
])
def test_age_label(delta, label):
    now = utcnow()
    assert job_orders.age_label(now - delta, now) == label


def test_soft_delete_keeps_other_fields(admin, admin_ctx):
    job_order = make_job_order(admin, job_title='Stable')
    before = {'job_title': job_order.job_title, 'updated_at': job_order.updated_at, 'status': job_order.status}

    job_orders.delete_job_order(admin_ctx, job_order.id)
    assert job_order.deleted_at is not None
    assert {'job_title': job_order.job_title, 'updated_at': job_order.updated_at, 'status': job_order.status} == before
    assert job_orders.list_job_orders(include_archived=True) == []
    with pytest.raises(NotFoundError):
        job_orders.get_job_order(job_order.id)


def test_soft_delete_keeps_first_timestamp(admin):
    job_order = make_job_order(admin)
    job_order.soft_delete()
    first = job_order.deleted_at
    job_order.soft_delete()
    assert job_order.deleted_at == first


def test_archive_and_restore(admin, admin_ctx):
    job_order = make_job_order(admin)
    job_orders.set_archived(admin_ctx, job_order.id, True)
    assert job_orders.list_job_orders() == []
    assert job_orders.list_job_orders(include_archived=True) == [job_order]
    job_orders.set_archived(admin_ctx, job_order.id, False)
    assert job_orders.list_job_orders() == [job_order]


class TestFavorites:

    def test_toggle_twice_restores_state(self, admin, recruiter_ctx):
        job_order = make_job_order(admin)
        assert job_orders.toggle_favorite(recruiter_ctx, job_order.id) is True
        assert job_orders.toggle_favorite(recruiter_ctx, job_order.id) is False
        assert not job_orders.is_favorite(recruiter_ctx.user_id, job_order.id)

    def test_add_and_remove_are_idempotent(self, admin, recruiter_ctx):
        job_order = make_job_order(admin)
        job_orders.add_favorite(recruiter_ctx, job_order.id)
        job_orders.add_favorite(recruiter_ctx, job_order.id)
        assert JobOrderFavorite.query.count() == 1
        job_orders.remove_favorite(recruiter_ctx, job_order.id)
        job_orders.remove_favorite(recruiter_ctx, job_order.id)
        assert JobOrderFavorite.query.count() == 0

    def test_favorites_are_per_user(self, admin, recruiter_ctx, other_ctx):
        job_order = make_job_order(admin)
        job_orders.add_favorite(recruiter_ctx, job_order.id)
        assert [j.id for j in job_orders.favorite_job_orders(recruiter_ctx)] == [job_order.id]
        assert job_orders.favorite_job_orders(other_ctx) == []

    def test_favorite_api(self, admin, recruiter_client):
        job_order = make_job_order(admin)
        resp = recruiter_client.post(f'/api/job-orders/{job_order.id}/favorite')
        assert resp.get_json()['is_favorite'] is True
        favorites = recruiter_client.get('/api/favorites').get_json()['job_orders']
        assert [f['id'] for f in favorites] == [job_order.id]
        resp = recruiter_client.post(f'/api/job-orders/{job_order.id}/favorite')
        assert resp.get_json()['is_favorite'] is False


def test_sourcing_preference_parsing():
    assert parse_sourcing_preference('["A", "B", "A"]') == ['A', 'B']
    assert parse_sourcing_preference(['  x ', '', 'y']) == ['x', 'y']
    assert parse_sourcing_preference(None) == []


def test_job_order_api_permissions(admin, admin_client, recruiter_client):
    job_order = make_job_order(admin)
    assert recruiter_client.patch(f'/api/job-orders/{job_order.id}', json={'priority': 'High'}).status_code == 403
    assert recruiter_client.delete(f'/api/job-orders/{job_order.id}').status_code == 403

    resp = admin_client.patch(f'/api/job-orders/{job_order.id}', json={'priority': 'Urgent'})
    assert resp.status_code == 400
    assert 'priority' in resp.get_json()['errors']

    detail = recruiter_client.get(f'/api/job-orders/{job_order.id}').get_json()
    assert 'client' not in detail
    assert 'client' in admin_client.get(f'/api/job-orders/{job_order.id}').get_json()

    assert admin_client.delete(f'/api/job-orders/{job_order.id}').status_code == 200
    assert recruiter_client.get(f'/api/job-orders/{job_order.id}').status_code == 404


def test_board_api(admin, recruiter_client):
    make_job_order(admin, priority='High')
    lanes = recruiter_client.get('/api/job-orders/board').get_json()['lanes']
    assert [len(lane['job_orders']) for lane in lanes] == [1, 0, 0]


def test_job_description_upload(admin, recruiter_client, storage):
    job_order = make_job_order(admin)
    resp = recruiter_client.post(
        f'/api/job-orders/{job_order.id}/job-description',
        data={'file': (io.BytesIO(b'Job description text'), 'role.txt')},
        content_type='multipart/form-data',
    )
    assert resp.status_code == 200
    body = resp.get_json()
    assert body['job_description'].startswith(f'{job_order.id}/')
    assert body['job_description'].endswith('_role.txt')
    assert body['url'] == f"https://storage.test/public/{JOB_DESCRIPTION_BUCKET}/{body['job_description']}"


def test_job_description_upload_rejects_bad_type(admin, recruiter_client, storage):
    job_order = make_job_order(admin)
    resp = recruiter_client.post(
        f'/api/job-orders/{job_order.id}/job-description',
        data={'file': (io.BytesIO(b'MZ'), 'setup.exe')},
        content_type='multipart/form-data',
    )
    assert resp.status_code == 400
    assert job_order.job_description is None
