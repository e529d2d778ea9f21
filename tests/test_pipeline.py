"""Tests for pipeline cards and their applicant links."""
import pytest

from hiretrack_app.models import db, PipelineCard, PipelineCardApplicant
from hiretrack_app.services import pipeline
from hiretrack_app.utils.errors import PermissionDeniedError, ValidationError
from tests.factories import make_applicant


@pytest.fixture
def card(recruiter_ctx):
    return pipeline.create_card(recruiter_ctx, '  Shortlist  ')


def test_create_card_trims_title(card):
    assert card.title == 'Shortlist'


@pytest.mark.parametrize('title', [['Shortlist'], {'title': 'Shortlist'}, True])
def test_create_card_rejects_non_text_title(recruiter_ctx, title):
    with pytest.raises(ValidationError) as exc:
        pipeline.create_card(recruiter_ctx, title)
    assert 'title' in exc.value.errors


def test_numeric_card_title_is_kept_as_text(recruiter_ctx):
    assert pipeline.create_card(recruiter_ctx, 2026).title == '2026'


@pytest.mark.parametrize('title', ['', '   ', None])
def test_create_card_requires_title(recruiter_ctx, title):
    with pytest.raises(ValidationError):
        pipeline.create_card(recruiter_ctx, title)


def test_adding_the_same_applicant_twice_keeps_one_link(recruiter, recruiter_ctx, card):
    applicant = make_applicant(recruiter)

    added = pipeline.add_applicants(recruiter_ctx, card.id, [applicant.id, applicant.id])
    assert len(added) == 1
    assert pipeline.add_applicants(recruiter_ctx, card.id, [applicant.id]) == []
    assert PipelineCardApplicant.query.filter_by(card_id=card.id, applicant_id=applicant.id).count() == 1


def test_mixed_selection_only_adds_new_ids(recruiter, recruiter_ctx, card):
    first = make_applicant(recruiter, first_name='Alan', last_name='Turing')
    second = make_applicant(recruiter, first_name='Barbara', last_name='Liskov')
    pipeline.add_applicants(recruiter_ctx, card.id, [first.id])

    added = pipeline.add_applicants(recruiter_ctx, card.id, [first.id, second.id])
    assert [link.applicant_id for link in added] == [second.id]
    _, links = pipeline.card_applicants(recruiter_ctx, card.id)
    assert {link.applicant_id for link in links} == {first.id, second.id}


def test_foreign_or_deleted_applicants_are_rejected(recruiter, other_recruiter, recruiter_ctx, card):
    foreign = make_applicant(other_recruiter)
    deleted = make_applicant(recruiter)
    deleted.soft_delete()
    db.session.commit()

    for applicant_id in (foreign.id, deleted.id, 'missing-id'):
        with pytest.raises(ValidationError):
            pipeline.add_applicants(recruiter_ctx, card.id, [applicant_id])
    assert card.links.count() == 0


def test_candidate_options(recruiter, other_recruiter, recruiter_ctx, card):
    zoe = make_applicant(recruiter, first_name='Zoe', last_name='Adams')
    bob = make_applicant(recruiter, first_name='Bob', last_name='Stone')
    carl = make_applicant(recruiter, first_name='Carl', last_name='Sagan')
    make_applicant(other_recruiter, first_name='Alice', last_name='Other')
    pipeline.add_applicants(recruiter_ctx, card.id, [carl.id])

    options = pipeline.candidate_options(recruiter_ctx, card.id)
    assert [a.id for a in options] == [bob.id, zoe.id]
    assert [a.id for a in pipeline.candidate_options(recruiter_ctx, card.id, search='adams')] == [zoe.id]


def test_remove_applicant(recruiter, recruiter_ctx, card):
    applicant = make_applicant(recruiter)
    pipeline.add_applicants(recruiter_ctx, card.id, [applicant.id])

    assert pipeline.remove_applicant(recruiter_ctx, card.id, applicant.id) == 1
    assert pipeline.remove_applicant(recruiter_ctx, card.id, applicant.id) == 0
    assert applicant.deleted_at is None


def test_re_adding_after_removal_creates_one_link(recruiter, recruiter_ctx, card):
    applicant = make_applicant(recruiter)
    pipeline.add_applicants(recruiter_ctx, card.id, [applicant.id])
    pipeline.remove_applicant(recruiter_ctx, card.id, applicant.id)

    added = pipeline.add_applicants(recruiter_ctx, card.id, [applicant.id])
    assert [link.applicant_id for link in added] == [applicant.id]
    assert PipelineCardApplicant.query.filter_by(card_id=card.id, applicant_id=applicant.id).count() == 1


def test_delete_card_removes_links(recruiter, recruiter_ctx, card):
    pipeline.add_applicants(recruiter_ctx, card.id, [make_applicant(recruiter).id])
    pipeline.delete_card(recruiter_ctx, card.id)
    assert PipelineCard.query.count() == 0
    assert PipelineCardApplicant.query.count() == 0


def test_card_visibility(recruiter_ctx, other_ctx, admin_ctx, card):
    other_card = pipeline.create_card(other_ctx, 'Other lane')

    assert [c.id for c, _ in pipeline.list_cards(recruiter_ctx)] == [card.id]
    assert {c.id for c, _ in pipeline.list_cards(admin_ctx)} == {card.id, other_card.id}
    with pytest.raises(PermissionDeniedError):
        pipeline.get_card(recruiter_ctx, other_card.id)


def test_pipeline_api(recruiter, recruiter_client):
    resp = recruiter_client.post('/api/pipeline-cards', json={'title': 'Final round'})
    assert resp.status_code == 201
    card_id = resp.get_json()['card']['id']
    applicant = make_applicant(recruiter)

    resp = recruiter_client.post(f'/api/pipeline-cards/{card_id}/applicants', json={'applicant_ids': [applicant.id]})
    assert resp.get_json()['added'] == 1
    resp = recruiter_client.post(f'/api/pipeline-cards/{card_id}/applicants', json={'applicant_ids': [applicant.id]})
    assert resp.get_json()['added'] == 0

    cards = recruiter_client.get('/api/pipeline-cards').get_json()['cards']
    assert cards[0]['applicant_count'] == 1

    assert recruiter_client.post('/api/pipeline-cards', json={'title': ' '}).status_code == 400
    assert recruiter_client.delete(f'/api/pipeline-cards/{card_id}/applicants/{applicant.id}').status_code == 200
