"""
Catalog entity operations shared by articles, products and promotions.

Reads return None or an empty list on a miss. Mutations on a missing row raise
EntityNotFound so that a write to a stale id is never silently dropped.
Deletion lives in ``catalog.relationships`` because it cascades to link rows.
"""
import logging
from typing import Iterable, Optional

from django.db import transaction

from .exceptions import EntityNotFound, ValidationFailure

logger = logging.getLogger(__name__)


def editable_fields(model) -> set[str]:
    """Field names a caller may set; ids and timestamps are excluded."""
    return {
        field.name
        for field in model._meta.concrete_fields
        if field.editable and not field.primary_key
    }


def _check_fields(model, fields: dict):
    unknown = set(fields) - editable_fields(model)
    if unknown:
        raise ValidationFailure(
            f"Unknown {model._meta.model_name} fields: {', '.join(sorted(unknown))}"
        )


def list_entities(model):
    """All rows of *model*, newest first. Returned lazily so callers can filter further."""
    return model.objects.all()


def get_by_id(model, entity_id) -> Optional[object]:
    return model.objects.filter(pk=entity_id).first()


def get_by_ids(model, ids: Iterable) -> list:
    """
    Fetch every existing row among *ids*. Missing ids are skipped; the result
    order is not tied to the order of *ids*.
    """
    return list(model.objects.filter(pk__in=list(ids)))


def list_by_category(model, category: str) -> list:
    return list(model.objects.filter(category=category))


def create_entity(model, **fields):
    _check_fields(model, fields)
    obj = model.objects.create(**fields)
    logger.info("Created %s %s", model._meta.model_name, obj.pk)
    return obj


@transaction.atomic
def update_entity(model, entity_id, **fields):
    """
    Partial update: only the supplied *fields* are written, and ``updated_at``
    is always refreshed.
    """
    _check_fields(model, fields)
    obj = model.objects.select_for_update().filter(pk=entity_id).first()
    if obj is None:
        raise EntityNotFound(model._meta.model_name, entity_id)

    for name, value in fields.items():
        setattr(obj, name, value)
    obj.save(update_fields=[*fields, 'updated_at'])

    logger.info(
        "Updated %s %s (%s)",
        model._meta.model_name, entity_id, ', '.join(sorted(fields)) or 'touch',
    )
    return obj
