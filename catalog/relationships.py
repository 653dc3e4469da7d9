"""
Relationship integrity - link rows between locations and catalog entities.

Core invariant: no link row survives the deletion of either endpoint.

Every link table is declared once in RELATIONS. CASCADE_PLAN is derived from
it: for each entity kind, the (relation, side) pairs whose rows must be purged
before that entity's row is deleted. Adding a link table means adding one
RELATIONS entry; deletion picks it up automatically.
"""
import logging
from collections import namedtuple

from django.db import DatabaseError, transaction
from django.db.models import ProtectedError

from locations.models import Location
from .exceptions import CascadeDeleteError, EntityNotFound, ValidationFailure
from .models import (
    Article,
    ArticleProduct,
    ArticlePromotion,
    LocationArticle,
    LocationProduct,
    LocationPromotion,
    Product,
    ProductPromotion,
    Promotion,
)

logger = logging.getLogger(__name__)


ENTITY_MODELS = {
    'location': Location,
    'article': Article,
    'product': Product,
    'promotion': Promotion,
}

Relation = namedtuple('Relation', ['model', 'left', 'right'])

RELATIONS = {
    'location_articles': Relation(LocationArticle, 'location', 'article'),
    'location_products': Relation(LocationProduct, 'location', 'product'),
    'location_promotions': Relation(LocationPromotion, 'location', 'promotion'),
    'article_products': Relation(ArticleProduct, 'article', 'product'),
    'article_promotions': Relation(ArticlePromotion, 'article', 'promotion'),
    'product_promotions': Relation(ProductPromotion, 'product', 'promotion'),
}


def _build_cascade_plan():
    plan = {kind: [] for kind in ENTITY_MODELS}
    for name, relation in RELATIONS.items():
        plan[relation.left].append((name, relation.left))
        plan[relation.right].append((name, relation.right))
    return plan


# entity kind -> [(relation name, side naming the entity), ...]
CASCADE_PLAN = _build_cascade_plan()


def get_relation(name: str) -> Relation:
    try:
        return RELATIONS[name]
    except KeyError:
        raise ValidationFailure(f"Unknown relation '{name}'") from None


def _other_side(relation: Relation, side: str) -> str:
    if side == relation.left:
        return relation.right
    if side == relation.right:
        return relation.left
    raise ValidationFailure(f"'{side}' is not a side of this relation")


def _lock_entity(kind: str, entity_id):
    """Lock and return the entity row; raise EntityNotFound if it is gone."""
    obj = ENTITY_MODELS[kind].objects.select_for_update().filter(pk=entity_id).first()
    if obj is None:
        raise EntityNotFound(kind, entity_id)
    return obj


# ---------------------------------------------------------------------------
# Cascading delete
# ---------------------------------------------------------------------------

def links_of(kind: str, entity_ids) -> dict:
    """
    Link rows naming any of *entity_ids*, per relation in CASCADE_PLAN[kind].

    Returns:
        {relation name: QuerySet of link rows}
    """
    return {
        name: RELATIONS[name].model.objects.filter(**{f'{side}_id__in': list(entity_ids)})
        for name, side in CASCADE_PLAN[kind]
    }


def delete_entity(kind: str, entity_id) -> dict:
    """
    Delete a location or catalog entity together with every link row naming it.

    Runs in one transaction: the entity row is locked, each relation in
    CASCADE_PLAN[kind] is purged, then the row is deleted. Any failure rolls
    the whole unit back and raises CascadeDeleteError.

    Returns:
        {relation name: number of link rows purged}
    """
    if kind not in ENTITY_MODELS:
        raise ValidationFailure(f"Unknown entity kind '{kind}'")

    try:
        with transaction.atomic():
            entity = _lock_entity(kind, entity_id)
            purged = {}
            for name, rows in links_of(kind, [entity.pk]).items():
                deleted, _ = rows.delete()
                purged[name] = deleted
            entity.delete()
    except (ProtectedError, DatabaseError) as exc:
        logger.exception("Cascading delete of %s %s rolled back", kind, entity_id)
        raise CascadeDeleteError(kind, entity_id, str(exc)) from exc

    logger.info(
        "Deleted %s %s and purged %d link rows",
        kind, entity_id, sum(purged.values()),
    )
    return purged


# ---------------------------------------------------------------------------
# Link management
# ---------------------------------------------------------------------------

@transaction.atomic
def link(relation_name: str, left_id, right_id):
    """
    Link two entities; linking an existing pair returns the existing row.

    Both endpoint rows are locked first, so a link cannot be created for an
    entity whose cascading delete is in flight.
    """
    relation = get_relation(relation_name)
    _lock_entity(relation.left, left_id)
    _lock_entity(relation.right, right_id)

    row, created = relation.model.objects.get_or_create(
        **{f'{relation.left}_id': left_id, f'{relation.right}_id': right_id}
    )
    if created:
        logger.info("Linked %s: %s ↔ %s", relation_name, left_id, right_id)
    return row


def unlink(relation_name: str, left_id, right_id) -> bool:
    """Remove the link between two entities. Returns False when none existed."""
    relation = get_relation(relation_name)
    deleted, _ = relation.model.objects.filter(
        **{f'{relation.left}_id': left_id, f'{relation.right}_id': right_id}
    ).delete()
    return deleted > 0


def remove_link(relation_name: str, link_id) -> bool:
    relation = get_relation(relation_name)
    deleted, _ = relation.model.objects.filter(pk=link_id).delete()
    return deleted > 0


def related(relation_name: str, side: str, entity_id) -> list:
    """
    Entities on the other side of *relation_name* linked to *entity_id*.
    Each returned instance carries the link row id as ``link_id``.
    """
    relation = get_relation(relation_name)
    other = _other_side(relation, side)
    links = relation.model.objects.filter(**{f'{side}_id': entity_id}).select_related(other)

    records = []
    for row in links:
        entity = getattr(row, other)
        entity.link_id = row.pk
        records.append(entity)
    return records


@transaction.atomic
def sync_overrides(relation_name: str, overrides: list[dict]) -> int:
    """
    Replace the links of every location named in *overrides*.

    Each override is ``{'location_ids': [...], '<right>_ids': [...]}``; all
    existing links of the listed locations are removed, then each override's
    location × entity cross product is inserted once.

    Returns the number of links written.
    """
    relation = get_relation(relation_name)
    if relation.left != 'location':
        raise ValidationFailure(f"'{relation_name}' has no per-location overrides")
    right_key = f'{relation.right}_ids'

    location_ids = {pk for override in overrides for pk in override.get('location_ids', [])}
    for pk in sorted(location_ids):
        _lock_entity('location', pk)
    relation.model.objects.filter(location_id__in=location_ids).delete()

    seen = set()
    rows = []
    for override in overrides:
        right_ids = override.get(right_key, [])
        for pk in right_ids:
            _lock_entity(relation.right, pk)
        for location_id in override.get('location_ids', []):
            for right_id in right_ids:
                pair = (location_id, right_id)
                if pair in seen:
                    continue
                seen.add(pair)
                rows.append(relation.model(**{'location_id': location_id, f'{relation.right}_id': right_id}))

    relation.model.objects.bulk_create(rows)
    logger.info(
        "Synced %s for %d locations (%d links)",
        relation_name, len(location_ids), len(rows),
    )
    return len(rows)
