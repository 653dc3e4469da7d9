"""
URL routing for locations app.
"""
from django.urls import path, include
from rest_framework.routers import SimpleRouter
from .views import LocationViewSet, location_by_address, location_cities, locations_by_city

router = SimpleRouter()
router.register(r'', LocationViewSet, basename='location')

urlpatterns = [
    path('cities/', location_cities, name='location-cities'),
    path('by-address/<slug:region>/<slug:city>/<slug:line1>/', location_by_address, name='location-by-address'),
    path('by-city/<slug:region>/<slug:city>/', locations_by_city, name='locations-by-city'),
    path('', include(router.urls)),
]
