"""
Pipeline cards: free-form named lanes of candidates.
"""
import logging
from sqlalchemy import func
from hiretrack_app.models import db, Applicant, PipelineCard, PipelineCardApplicant
from hiretrack_app.services.applicants import search_filter
from hiretrack_app.utils.auth import as_text
from hiretrack_app.utils.errors import NotFoundError, PermissionDeniedError, ValidationError

logger = logging.getLogger(__name__)


def _card_counts(card_ids):
    if not card_ids:
        return {}
    counts = db.session.query(
        PipelineCardApplicant.card_id,
        func.count(PipelineCardApplicant.id).label('count')
    ).filter(
        PipelineCardApplicant.card_id.in_(card_ids)
    ).group_by(PipelineCardApplicant.card_id).all()
    return {str(card_id): count for card_id, count in counts}


def list_cards(ctx):
    """Cards newest first with applicant counts."""
    query = PipelineCard.query
    if not ctx.is_admin:
        query = query.filter(PipelineCard.author_id == ctx.user_id)
    cards = query.order_by(PipelineCard.created_at.desc()).all()
    counts = _card_counts([c.id for c in cards])
    return [(card, counts.get(card.id, 0)) for card in cards]


def get_card(ctx, card_id):
    card = PipelineCard.query.get(card_id)
    if not card:
        raise NotFoundError('Pipeline card not found')
    if not ctx.can_modify(card):
        raise PermissionDeniedError('You do not have access to this pipeline card')
    return card


def create_card(ctx, title):
    title = as_text(title, 'title')
    if not title:
        raise ValidationError({'title': 'Title is required.'})
    if len(title) > 255:
        raise ValidationError({'title': 'Title must be 255 characters or less.'})
    card = PipelineCard(author_id=ctx.user_id, title=title)
    db.session.add(card)
    db.session.commit()
    logger.info(f"Pipeline card '{title}' created by {ctx.username}")
    return card


def delete_card(ctx, card_id):
    card = get_card(ctx, card_id)
    PipelineCardApplicant.query.filter_by(card_id=card.id).delete()
    db.session.delete(card)
    db.session.commit()
    logger.info(f"Pipeline card {card_id} deleted by {ctx.username}")


def card_applicants(ctx, card_id):
    card = get_card(ctx, card_id)
    links = (
        card.links
        .join(Applicant, Applicant.id == PipelineCardApplicant.applicant_id)
        .filter(Applicant.deleted_at.is_(None))
        .order_by(PipelineCardApplicant.added_at.asc())
        .all()
    )
    return card, links


def candidate_options(ctx, card_id, search=None):
    """The caller's own live applicants that are not on the card yet."""
    card = get_card(ctx, card_id)
    on_card = db.select(PipelineCardApplicant.applicant_id).where(PipelineCardApplicant.card_id == card.id)
    query = Applicant.active().filter(
        Applicant.author_id == ctx.user_id,
        Applicant.id.notin_(on_card),
    )
    return search_filter(query, search).order_by(Applicant.first_name.asc()).all()


def add_applicants(ctx, card_id, applicant_ids):
    """Link applicants to the card. Already-linked ids are skipped; returns the new links."""
    card = get_card(ctx, card_id)
    wanted = list(dict.fromkeys(i for i in (applicant_ids or []) if i))
    if not wanted:
        raise ValidationError({'applicant_ids': 'Select at least one applicant.'})

    allowed = {
        row[0] for row in db.session.query(Applicant.id).filter(
            Applicant.id.in_(wanted),
            Applicant.author_id == ctx.user_id,
            Applicant.deleted_at.is_(None),
        ).all()
    }
    rejected = [i for i in wanted if i not in allowed]
    if rejected:
        raise ValidationError({'applicant_ids': f"{len(rejected)} applicant(s) cannot be added to this card."})

    existing = {
        row[0] for row in db.session.query(PipelineCardApplicant.applicant_id).filter(
            PipelineCardApplicant.card_id == card.id,
            PipelineCardApplicant.applicant_id.in_(wanted),
        ).all()
    }
    links = [PipelineCardApplicant(card_id=card.id, applicant_id=i) for i in wanted if i not in existing]
    db.session.add_all(links)
    db.session.commit()
    return links


def remove_applicant(ctx, card_id, applicant_id):
    """Delete the link if present. Missing links are not an error."""
    card = get_card(ctx, card_id)
    removed = PipelineCardApplicant.query.filter_by(card_id=card.id, applicant_id=applicant_id).delete()
    db.session.commit()
    return removed
