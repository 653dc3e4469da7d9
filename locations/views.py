"""
Views for the location directory and location management.
"""
import logging

from django.conf import settings
from django.db import IntegrityError
from rest_framework import viewsets, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticatedOrReadOnly
from rest_framework.response import Response

from catalog.exceptions import CascadeDeleteError, ValidationFailure
from catalog.relationships import delete_entity
from cms_backend.errors import domain_error_response, error_response, not_found
from .directory import get_by_address, list_by_city, list_distinct_cities
from .models import Location
from .serializers import LocationSerializer

logger = logging.getLogger(__name__)


class LocationViewSet(viewsets.ModelViewSet):
    """
    ViewSet for managing locations.

    list: GET /api/v1/locations/ - optional ?page_group= filter
    create: POST /api/v1/locations/ - slugs derived from the address when omitted
    retrieve: GET /api/v1/locations/{id}/
    update: PUT/PATCH /api/v1/locations/{id}/ - partial patch
    destroy: DELETE /api/v1/locations/{id}/ - also removes every link naming the location
    """
    serializer_class = LocationSerializer
    permission_classes = [IsAuthenticatedOrReadOnly]
    lookup_value_regex = r'\d+'

    def get_queryset(self):
        queryset = Location.objects.all()
        page_group = self.request.query_params.get('page_group')
        if page_group:
            queryset = queryset.filter(page_group_slug=page_group)
        return queryset

    def perform_create(self, serializer):
        location = serializer.save()
        logger.info("Created location %s at %s", location.pk, location.path)

    def create(self, request, *args, **kwargs):
        """Create a location with duplicate slug handling."""
        try:
            return super().create(request, *args, **kwargs)
        except IntegrityError:
            return error_response(
                'VALIDATION_ERROR',
                'A location with this address slug already exists',
                status.HTTP_400_BAD_REQUEST,
            )

    def update(self, request, *args, **kwargs):
        kwargs['partial'] = True
        try:
            return super().update(request, *args, **kwargs)
        except IntegrityError:
            return error_response(
                'VALIDATION_ERROR',
                'A location with this address slug already exists',
                status.HTTP_400_BAD_REQUEST,
            )

    def destroy(self, request, *args, **kwargs):
        try:
            purged = delete_entity('location', kwargs[self.lookup_field])
        except (ValidationFailure, CascadeDeleteError) as exc:
            return domain_error_response(exc)
        return Response({
            'message': 'Location deleted successfully',
            'purged_links': purged,
        }, status=status.HTTP_200_OK)


@api_view(['GET'])
@permission_classes([AllowAny])
def location_by_address(request, region, city, line1):
    """GET /api/v1/locations/by-address/<region>/<city>/<line1>/"""
    location = get_by_address(region, city, line1)
    if location is None:
        return not_found('No location at this address')
    return Response(LocationSerializer(location).data)


@api_view(['GET'])
@permission_classes([AllowAny])
def locations_by_city(request, region, city):
    """GET /api/v1/locations/by-city/<region>/<city>/"""
    locations = list_by_city(region, city)
    return Response({
        'results': LocationSerializer(locations, many=True).data,
        'total': len(locations),
    })


@api_view(['GET'])
@permission_classes([AllowAny])
def location_cities(request):
    """
    GET /api/v1/locations/cities/?page_group=location

    Distinct (region, city) pairs among the group's locations.
    """
    page_group = request.query_params.get('page_group') or settings.LOCATION_PAGE_GROUP
    cities = list_distinct_cities(page_group)
    return Response({'results': cities, 'total': len(cities)})
