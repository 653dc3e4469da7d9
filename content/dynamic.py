"""
Dynamic content sources - fills catalog-backed components of a page tree.

Editor trees hold component items ``{"type": ..., "props": {...}}`` in the
top-level ``content`` list and in every list under ``zones``. A component whose
``props.contentSource.source`` is ``"dynamic"`` is filled from the catalog:

  - ``synced`` mode: the ids picked in the editor (``selectedIds`` /
    ``selectedId``), shared by every location.
  - ``perLocation`` mode: the location's link rows. The link tables are the
    source of truth; any ``overrides`` kept in the tree are editor metadata.

Only component types listed in COMPONENT_RESOLVERS are touched. The input tree
is never mutated.
"""
import logging
from collections.abc import Mapping

from catalog.models import Product, Promotion
from catalog.relationships import related
from catalog.services import get_by_id, get_by_ids

logger = logging.getLogger(__name__)


def _valid_ids(values) -> list[int]:
    ids = []
    for value in values or []:
        if isinstance(value, int) and not isinstance(value, bool):
            ids.append(value)
        elif isinstance(value, str) and value.isdigit():
            ids.append(int(value))
    return ids


def _dynamic_source(props):
    source = props.get('contentSource')
    if not isinstance(source, Mapping) or source.get('source') != 'dynamic':
        return None
    return source


def _is_per_location(source) -> bool:
    return source.get('dynamicMode') == 'perLocation'


def _map_product(product) -> dict:
    return {
        'title': product.name or 'Product',
        'category': product.category or '',
        'description': product.description or '',
        'imageUrl': product.image or '',
        'link': '#',
        'price': None if product.price is None else f"${product.price}",
    }


def resolve_products(props, location_id):
    source = _dynamic_source(props)
    if source is None:
        return props

    if _is_per_location(source):
        records = related('location_products', 'location', location_id)
    else:
        ids = _valid_ids(source.get('selectedIds'))
        if not ids:
            return props
        by_id = {product.id: product for product in get_by_ids(Product, ids)}
        # Keep the order picked in the editor
        records = [by_id[pk] for pk in ids if pk in by_id]

    if not records:
        return props
    return {**props, 'products': [_map_product(product) for product in records]}


def resolve_promo(props, location_id):
    source = _dynamic_source(props)
    if source is None:
        return props

    if _is_per_location(source):
        promotions = related('location_promotions', 'location', location_id)
        promotion = promotions[0] if promotions else None
    else:
        ids = _valid_ids([source.get('selectedId')])
        promotion = get_by_id(Promotion, ids[0]) if ids else None

    if promotion is None:
        return props
    return {
        **props,
        'title': promotion.name if promotion.name is not None else props.get('title'),
        'description': (
            promotion.description if promotion.description is not None
            else props.get('description', '')
        ),
        'imageUrl': promotion.image if promotion.image is not None else props.get('imageUrl', ''),
    }


COMPONENT_RESOLVERS = {
    'ProductsSection': resolve_products,
    'PromoSection': resolve_promo,
}


def _resolve_component(item, location_id):
    if not isinstance(item, Mapping):
        return item
    resolver = COMPONENT_RESOLVERS.get(item.get('type'))
    props = item.get('props')
    if resolver is None or not isinstance(props, Mapping):
        return item
    resolved = resolver(props, location_id)
    if resolved is props:
        return item
    return {**item, 'props': resolved}


def _resolve_items(items, location_id):
    resolved = [_resolve_component(item, location_id) for item in items]
    if all(new is old for new, old in zip(resolved, items)):
        return items
    return resolved


def resolve_dynamic_sources(data, location_id):
    """
    Fill dynamic components in ``content`` and ``zones`` for *location_id*.
    Returns *data* itself when no component changed.
    """
    if not isinstance(data, Mapping):
        return data

    result = dict(data)
    changed = False

    content = data.get('content')
    if isinstance(content, list):
        resolved = _resolve_items(content, location_id)
        if resolved is not content:
            result['content'] = resolved
            changed = True

    zones = data.get('zones')
    if isinstance(zones, Mapping):
        new_zones = {}
        zones_changed = False
        for name, items in zones.items():
            if isinstance(items, list):
                resolved = _resolve_items(items, location_id)
                zones_changed = zones_changed or resolved is not items
                new_zones[name] = resolved
            else:
                new_zones[name] = items
        if zones_changed:
            result['zones'] = new_zones
            changed = True

    if changed:
        logger.debug("Filled dynamic components for location %s", location_id)
    return result if changed else data
