"""
Location Directory - read-side lookups over Location records.

Lookups never raise on a miss: single-record reads return None and list reads
return an empty list.
"""
import logging
from typing import Optional

from .models import Location

logger = logging.getLogger(__name__)


def list_for_group(page_group_slug: str) -> list[Location]:
    """All locations rendered by *page_group_slug*, in store order."""
    return list(Location.objects.filter(page_group_slug=page_group_slug))


def get_by_address(region: str, city: str, line1: str) -> Optional[Location]:
    """
    Return the location at the slug address (region, city, line1), or None.
    The slug tuple is unique, so at most one row can match.
    """
    return Location.objects.filter(
        slug_region=region,
        slug_city=city,
        slug_line1=line1,
    ).first()


def list_by_city(region: str, city: str) -> list[Location]:
    """All locations whose slug starts with (region, city)."""
    return list(Location.objects.filter(slug_region=region, slug_city=city))


def list_distinct_cities(page_group_slug: str) -> list[dict]:
    """
    Distinct (region, city) slug pairs among a group's locations.

    Locations are walked in (created_at, id) order and the first location seen
    for a pair supplies the display region/city names, so a later location
    spelling the city differently does not change the entry.

    Returns:
        [ {slug: {region, city}, region, city, path}, ... ] in first-seen order
    """
    cities = {}
    for location in Location.objects.filter(page_group_slug=page_group_slug).order_by('created_at', 'id'):
        key = (location.slug_region, location.slug_city)
        if key in cities:
            continue
        cities[key] = {
            'slug': {'region': location.slug_region, 'city': location.slug_city},
            'region': location.address_region,
            'city': location.address_city,
            'path': f"/{location.slug_region}/{location.slug_city}",
        }

    logger.debug("Group %s spans %d cities", page_group_slug, len(cities))
    return list(cities.values())
