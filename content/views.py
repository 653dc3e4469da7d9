"""
API endpoints for pages, page groups and per-location rendering.
"""
import logging

from django.conf import settings
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from accounts.permissions import CanPublish
from cms_backend.errors import error_response, not_found
from locations.directory import get_by_address
from locations.serializers import LocationSerializer
from .models import Page, PageGroup
from .publishing import affected_paths, get_content, publish, render_for_city, render_for_location, save_draft
from .serializers import ContentDataSerializer, PageContentSerializer, PageGroupSerializer, PageSerializer

logger = logging.getLogger(__name__)


def _wants_preview(request):
    return request.query_params.get('preview', '').lower() in ('true', '1', 'yes')


def _preview_denied(request):
    if _wants_preview(request) and not request.user.is_authenticated:
        return error_response(
            'UNAUTHORIZED', 'Previewing drafts requires authentication', status.HTTP_401_UNAUTHORIZED,
        )
    return None


# ---------------------------------------------------------------------------
# Pages
# ---------------------------------------------------------------------------

@api_view(['GET'])
@permission_classes([AllowAny])
def page_detail(request):
    """
    GET /api/v1/pages/?path=/about — draft and published versions of a page.
    """
    path = request.query_params.get('path')
    if not path:
        return error_response('VALIDATION_ERROR', 'path is required', status.HTTP_400_BAD_REQUEST)

    page = get_content(Page, path)
    if page is None:
        return not_found('No page at this path')
    return Response(PageSerializer(page).data)


@api_view(['POST'])
@permission_classes([CanPublish])
def page_publish(request):
    """
    POST /api/v1/pages/publish/
    Body: { "path": "/about", "data": {...} }

    Sets both draft and published content of the page to "data".
    """
    serializer = PageContentSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    path = serializer.validated_data['path']

    publish(Page, path, serializer.validated_data['data'])
    return Response({'status': 'ok', 'revalidated': 1, 'paths': [path]})


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def page_save_draft(request):
    """
    POST /api/v1/pages/draft/
    Body: { "path": "/about", "data": {...} }
    """
    serializer = PageContentSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    page = save_draft(Page, serializer.validated_data['path'], serializer.validated_data['data'])
    return Response(PageSerializer(page).data)


# ---------------------------------------------------------------------------
# Page groups
# ---------------------------------------------------------------------------

@api_view(['GET'])
@permission_classes([AllowAny])
def page_group_detail(request, slug):
    """GET /api/v1/page-groups/<slug>/ — draft and published template of a group."""
    group = get_content(PageGroup, slug)
    if group is None:
        return not_found('No page group with this slug')
    return Response(PageGroupSerializer(group).data)


@api_view(['POST'])
@permission_classes([CanPublish])
def page_group_publish(request, slug):
    """
    POST /api/v1/page-groups/<slug>/publish/
    Body: { "data": {...} }

    Publishes the template and reports the location/city paths it re-renders.
    """
    serializer = ContentDataSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    publish(PageGroup, slug, serializer.validated_data['data'])
    paths = affected_paths(slug)
    return Response({'status': 'ok', 'revalidated': len(paths), 'paths': paths})


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def page_group_save_draft(request, slug):
    """
    POST /api/v1/page-groups/<slug>/draft/
    Body: { "data": {...} }
    """
    serializer = ContentDataSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    group = save_draft(PageGroup, slug, serializer.validated_data['data'])
    return Response(PageGroupSerializer(group).data)


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

@api_view(['GET'])
@permission_classes([AllowAny])
def render_location(request, region, city, line1):
    """
    GET /api/v1/render/<region>/<city>/<line1>/[?preview=true]

    The location's page-group template with its tokens and dynamic
    components resolved for that location.
    """
    denied = _preview_denied(request)
    if denied:
        return denied

    location = get_by_address(region, city, line1)
    if location is None:
        return not_found('No location at this address')

    data = render_for_location(location.page_group_slug, location, preview=_wants_preview(request))
    if data is None:
        return not_found('This location has no published content')

    return Response({'location': LocationSerializer(location).data, 'data': data})


@api_view(['GET'])
@permission_classes([AllowAny])
def render_city(request, region, city):
    """
    GET /api/v1/render/<region>/<city>/[?preview=true]

    The city directory template resolved against the city's locations.
    """
    denied = _preview_denied(request)
    if denied:
        return denied

    data = render_for_city(settings.CITY_PAGE_GROUP, region, city, preview=_wants_preview(request))
    if data is None:
        return not_found('No published city page for this city')
    return Response({'data': data})
