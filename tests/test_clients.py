"""Tests for client management."""
import pytest

from hiretrack_app.models import Client
from hiretrack_app.services import clients
from hiretrack_app.utils.errors import NotFoundError, ValidationError
from tests.factories import make_client, make_job_order


def test_create_client(admin, admin_ctx):
    client = clients.create_client(admin_ctx, {'company': ' Initech ', 'email': '', 'first_name': 'Bill'})
    assert client.company == 'Initech'
    assert client.email is None
    assert client.author_id == admin.id


@pytest.mark.parametrize('data,field', [
    ({}, 'company'),
    ({'company': 'Initech', 'email': 'nope'}, 'email'),
    ({'company': 'x' * 256}, 'company'),
    ({'company': ['Initech']}, 'company'),
    ({'company': 'Initech', 'email': 42}, 'email'),
])
def test_create_client_validation(admin_ctx, data, field):
    with pytest.raises(ValidationError) as exc:
        clients.create_client(admin_ctx, data)
    assert field in exc.value.errors


def test_job_order_counts_skip_deleted(admin):
    acme = make_client(admin)
    globex = make_client(admin, company='Globex')
    make_job_order(admin, client=acme)
    make_job_order(admin, client=acme)
    make_job_order(admin, client=globex).soft_delete()

    rows = {c.company: count for c, count in clients.list_clients()}
    assert rows == {'Acme Corp': 2, 'Globex': 0}


def test_search(admin):
    make_client(admin, company='Initech', email='bill@initech.com')
    make_client(admin, company='Globex')
    assert [c.company for c, _ in clients.list_clients(search='INITECH')] == ['Initech']
    assert [c.company for c, _ in clients.list_clients(search='bill@')] == ['Initech']


def test_update_is_partial(admin, admin_ctx):
    client = make_client(admin, phone='555-0100')
    clients.update_client(admin_ctx, client.id, {'position': 'CTO'})
    assert (client.company, client.position, client.phone) == ('Acme Corp', 'CTO', '555-0100')
    assert client.updated_at is not None
    with pytest.raises(ValidationError):
        clients.update_client(admin_ctx, client.id, {'company': ''})


def test_soft_delete(admin, admin_ctx):
    client = make_client(admin)
    clients.delete_client(admin_ctx, client.id)
    assert clients.list_clients() == []
    assert clients.client_options() == []
    assert Client.query.get(client.id).deleted_at is not None
    with pytest.raises(NotFoundError):
        clients.get_client(client.id)


class TestClientApi:

    def test_admin_crud(self, admin_client):
        resp = admin_client.post('/api/clients', json={'company': 'Initech', 'last_name': 'Lumbergh'})
        assert resp.status_code == 201
        client_id = resp.get_json()['client']['id']

        resp = admin_client.patch(f'/api/clients/{client_id}', json={'location': 'Austin'})
        assert resp.get_json()['client']['location'] == 'Austin'

        listing = admin_client.get('/api/clients').get_json()['clients']
        assert [(c['company'], c['job_order_count']) for c in listing] == [('Initech', 0)]

        assert admin_client.delete(f'/api/clients/{client_id}').status_code == 200
        assert admin_client.get(f'/api/clients/{client_id}').status_code == 404

    def test_missing_company(self, admin_client):
        resp = admin_client.post('/api/clients', json={'first_name': 'Bill'})
        assert resp.status_code == 400
        assert 'company' in resp.get_json()['errors']

    def test_non_text_fields_are_a_validation_error(self, admin_client):
        resp = admin_client.post('/api/clients', json={'company': {'name': 'Initech'}, 'phone': 5550100})
        assert resp.status_code == 400
        assert resp.get_json()['errors'] == {'company': 'Must be text.'}

    def test_detail_lists_job_orders(self, admin, admin_client):
        client = make_client(admin)
        job_order = make_job_order(admin, client=client)
        body = admin_client.get(f'/api/clients/{client.id}').get_json()
        assert body['job_order_count'] == 1
        assert [j['id'] for j in body['job_orders']] == [job_order.id]

    def test_recruiters_only_get_options(self, admin, recruiter_client):
        make_client(admin, company='Globex')
        make_client(admin, company='Acme Corp')
        assert recruiter_client.get('/api/clients').status_code == 403
        assert recruiter_client.post('/api/clients', json={'company': 'X'}).status_code == 403
        options = recruiter_client.get('/api/clients/options').get_json()['clients']
        assert [c['company'] for c in options] == ['Acme Corp', 'Globex']
