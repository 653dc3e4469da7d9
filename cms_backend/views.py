"""
Project-level views (health check).
"""
from django.db import connection
from django.http import JsonResponse
from django.views.decorators.http import require_GET


@require_GET
def health_check(request):
    """
    Liveness check for load balancers and monitoring.
    GET /api/v1/health/ - returns 200 if the app is running and the database answers.
    No authentication required.
    """
    with connection.cursor() as cursor:
        cursor.execute('SELECT 1')
    return JsonResponse({"status": "ok", "service": "cms-backend"})
