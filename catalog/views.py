"""
Views for catalog entities and their link relations.
"""
import logging

from rest_framework import viewsets, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticatedOrReadOnly
from rest_framework.response import Response

from cms_backend.errors import domain_error_response, error_response
from locations.serializers import LocationSerializer
from .exceptions import CascadeDeleteError, ValidationFailure
from .models import Article, Product, Promotion
from .relationships import delete_entity, get_relation, link, related, remove_link, sync_overrides, unlink
from .serializers import ArticleSerializer, OverrideListSerializer, ProductSerializer, PromotionSerializer
from .services import create_entity, list_entities, update_entity

logger = logging.getLogger(__name__)

SERIALIZERS = {
    'location': LocationSerializer,
    'article': ArticleSerializer,
    'product': ProductSerializer,
    'promotion': PromotionSerializer,
}


def _parse_ids(raw):
    """'1,2,x' -> [1, 2]; non-numeric parts are ignored."""
    return [int(part) for part in raw.split(',') if part.strip().isdigit()]


class CatalogEntityViewSet(viewsets.ModelViewSet):
    """
    Shared CRUD for catalog entities.

    list: GET /api/v1/<kind>s/ - ?category= and ?ids=1,2 filters
    create: POST /api/v1/<kind>s/
    retrieve: GET /api/v1/<kind>s/{id}/
    update: PUT/PATCH /api/v1/<kind>s/{id}/ - partial patch, only supplied fields change
    destroy: DELETE /api/v1/<kind>s/{id}/ - also removes every link naming the entity
    """
    model = None
    kind = None
    permission_classes = [IsAuthenticatedOrReadOnly]
    lookup_value_regex = r'\d+'

    def get_queryset(self):
        queryset = list_entities(self.model)

        category = self.request.query_params.get('category')
        if category and hasattr(self.model, 'category'):
            queryset = queryset.filter(category=category)

        ids = self.request.query_params.get('ids')
        if ids is not None:
            queryset = queryset.filter(pk__in=_parse_ids(ids))

        return queryset

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            obj = create_entity(self.model, **serializer.validated_data)
        except ValidationFailure as exc:
            return domain_error_response(exc)
        return Response(self.get_serializer(obj).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        """Both PUT and PATCH write only the fields present in the body."""
        serializer = self.get_serializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        try:
            obj = update_entity(self.model, kwargs[self.lookup_field], **serializer.validated_data)
        except ValidationFailure as exc:
            return domain_error_response(exc)
        return Response(self.get_serializer(obj).data)

    def destroy(self, request, *args, **kwargs):
        try:
            purged = delete_entity(self.kind, kwargs[self.lookup_field])
        except (ValidationFailure, CascadeDeleteError) as exc:
            return domain_error_response(exc)
        return Response({
            'message': f'{self.kind.capitalize()} deleted successfully',
            'purged_links': purged,
        }, status=status.HTTP_200_OK)


class ArticleViewSet(CatalogEntityViewSet):
    model = Article
    kind = 'article'
    serializer_class = ArticleSerializer


class ProductViewSet(CatalogEntityViewSet):
    model = Product
    kind = 'product'
    serializer_class = ProductSerializer


class PromotionViewSet(CatalogEntityViewSet):
    model = Promotion
    kind = 'promotion'
    serializer_class = PromotionSerializer


# ---------------------------------------------------------------------------
# Link relations
# ---------------------------------------------------------------------------

def _pair_from(relation, data):
    try:
        return int(data[f'{relation.left}_id']), int(data[f'{relation.right}_id'])
    except (KeyError, TypeError, ValueError):
        return None


def _pair_required(relation):
    return error_response(
        'VALIDATION_ERROR',
        f'{relation.left}_id and {relation.right}_id are required',
        status.HTTP_400_BAD_REQUEST,
    )


@api_view(['GET', 'POST', 'DELETE'])
@permission_classes([IsAuthenticatedOrReadOnly])
def relation_links(request, relation):
    """
    GET    /api/v1/relationships/<relation>/?<side>_id=..  — entities linked to one side
    POST   /api/v1/relationships/<relation>/               — link a pair (idempotent)
    DELETE /api/v1/relationships/<relation>/?<left>_id=..&<right>_id=..  — unlink a pair
    """
    try:
        rel = get_relation(relation)
    except ValidationFailure as exc:
        return domain_error_response(exc)

    if request.method == 'GET':
        return _list_related(request, relation, rel)

    if request.method == 'POST':
        pair = _pair_from(rel, request.data)
        if pair is None:
            return _pair_required(rel)
        try:
            row = link(relation, *pair)
        except ValidationFailure as exc:
            return domain_error_response(exc)
        return Response({
            'id': row.pk,
            f'{rel.left}_id': pair[0],
            f'{rel.right}_id': pair[1],
        }, status=status.HTTP_201_CREATED)

    pair = _pair_from(rel, request.query_params) or _pair_from(rel, request.data)
    if pair is None:
        return _pair_required(rel)
    removed = unlink(relation, *pair)
    return Response({'removed': removed})


def _list_related(request, relation, rel):
    for side, other in ((rel.left, rel.right), (rel.right, rel.left)):
        entity_id = request.query_params.get(f'{side}_id')
        if entity_id is None:
            continue
        if not entity_id.isdigit():
            return _pair_required(rel)
        records = related(relation, side, int(entity_id))
        serializer_class = SERIALIZERS[other]
        return Response({
            'results': [
                {**serializer_class(record).data, 'link_id': record.link_id}
                for record in records
            ],
            'total': len(records),
        })

    return error_response(
        'VALIDATION_ERROR',
        f'{rel.left}_id or {rel.right}_id is required',
        status.HTTP_400_BAD_REQUEST,
    )


@api_view(['DELETE'])
@permission_classes([IsAuthenticatedOrReadOnly])
def relation_link_detail(request, relation, link_id):
    """DELETE /api/v1/relationships/<relation>/<link_id>/ — remove one link row."""
    try:
        removed = remove_link(relation, link_id)
    except ValidationFailure as exc:
        return domain_error_response(exc)
    return Response({'removed': removed})


@api_view(['POST'])
@permission_classes([IsAuthenticatedOrReadOnly])
def relation_sync(request, relation):
    """
    POST /api/v1/relationships/<relation>/sync/
    Body: { "overrides": [ { "location_ids": [1, 2], "product_ids": [5] } ] }

    Replaces every link of the listed locations.
    """
    serializer = OverrideListSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    try:
        written = sync_overrides(relation, serializer.validated_data['overrides'])
    except ValidationFailure as exc:
        return domain_error_response(exc)
    return Response({'status': 'ok', 'links': written})
