"""
Page / page-group store: draft and published content trees, and per-location
rendering of page-group templates.

Pages are addressed by path and page groups by slug; both go through the same
functions, keyed by the model's ``lookup_field``.

Publishing overwrites draft and published data with the same tree in a single
row write. Concurrent publishes of the same key are last-writer-wins.
"""
import logging
from typing import Any, Optional

from django.conf import settings
from django.db import transaction

from locations.directory import list_by_city, list_distinct_cities, list_for_group
from .dynamic import resolve_dynamic_sources
from .models import PageGroup
from .tokens import resolve_tokens

logger = logging.getLogger(__name__)


def get_content(model, key: str):
    """Return the page or page group stored under *key*, or None."""
    return model.objects.filter(**{model.lookup_field: key}).first()


def get_draft_and_published(model, key: str) -> Optional[dict]:
    """
    Both content versions for *key*.

    Returns:
        {'draft': ..., 'published': ...} or None when nothing is stored
    """
    obj = get_content(model, key)
    if obj is None:
        return None
    return {'draft': obj.draft_data, 'published': obj.published_data}


@transaction.atomic
def publish(model, key: str, data: Any):
    """
    Upsert *key* with ``draft_data`` and ``published_data`` both set to *data*.
    """
    obj, created = model.objects.update_or_create(
        **{model.lookup_field: key},
        defaults={'draft_data': data, 'published_data': data},
    )
    logger.info(
        "Published %s '%s' (%s)",
        model._meta.verbose_name, key, 'created' if created else 'updated',
    )
    return obj


@transaction.atomic
def save_draft(model, key: str, data: Any):
    """Upsert *key* writing only ``draft_data``; published content is untouched."""
    obj, created = model.objects.update_or_create(
        **{model.lookup_field: key},
        defaults={'draft_data': data},
    )
    logger.info("Saved draft of %s '%s'", model._meta.verbose_name, key)
    return obj


def _template_for(group_slug: str, preview: bool):
    group = get_content(PageGroup, group_slug)
    if group is None:
        return None
    return group.draft_data if preview else group.published_data


def render_template(template: Any, context: dict) -> Any:
    """Pure composition step: substitute *context* into *template*."""
    return resolve_tokens(template, context)


def render_for_location(group_slug: str, location, preview: bool = False, dynamic: bool = True):
    """
    Render the page group's template for one location.

    Uses published data, or the draft when *preview* is set. With *dynamic*,
    catalog-backed components are filled before tokens are substituted.
    Returns None when the group or the requested version does not exist.
    """
    template = _template_for(group_slug, preview)
    if template is None:
        return None
    if dynamic:
        template = resolve_dynamic_sources(template, location.id)
    return render_template(template, location.as_context())


def city_context(region: str, city: str, locations) -> dict:
    """
    Context record for a city page. Unlike a location page it is wrapped:
    [[city.city]], [[city.region]], [[city.slug.region]], [[city.slug.city]];
    ``locations`` holds each location's ``as_context()`` record.
    """
    first = locations[0]
    return {
        'city': {
            'region': first.address_region,
            'city': first.address_city,
            'slug': {'region': region, 'city': city},
        },
        'locations': [location.as_context() for location in locations],
    }


def render_for_city(group_slug: str, region: str, city: str, preview: bool = False):
    """
    Render the city directory template for the locations under (region, city).
    Returns None when no location is in that city or the template is missing.
    """
    locations = list_by_city(region, city)
    if not locations:
        return None
    template = _template_for(group_slug, preview)
    if template is None:
        return None
    return render_template(template, city_context(region, city, locations))


def affected_paths(group_slug: str) -> list[str]:
    """Public URL paths whose content changes when *group_slug* is published."""
    if group_slug == settings.CITY_PAGE_GROUP:
        return [city['path'] for city in list_distinct_cities(settings.LOCATION_PAGE_GROUP)]
    return [location.path for location in list_for_group(group_slug)]
