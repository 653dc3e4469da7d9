"""
API URL routing for cms_backend.
All API endpoints are prefixed with /api/v1/
"""
from django.urls import path, include

from .views import health_check

urlpatterns = [
    # Health check (no auth) - GET /api/v1/health/
    path('health/', health_check, name='health'),
    # Dashboard authentication
    path('auth/', include('accounts.urls')),
    # Location directory and location management
    path('locations/', include('locations.urls')),
    # Pages, page groups and per-location rendering
    path('', include('content.urls')),
    # Articles, products, promotions and their link relations
    path('', include('catalog.urls')),
]
