"""
JSON error envelope shared by the API views.

    {"error": {"code": "NOT_FOUND", "message": "...", "status": 404}}
"""
from rest_framework.response import Response


def error_response(code, message, status_code, detail=None):
    error = {'code': code, 'message': message, 'status': status_code}
    if detail is not None:
        error['detail'] = detail
    return Response({'error': error}, status=status_code)


def domain_error_response(exc):
    """Translate a ValidationFailure / CascadeDeleteError into the envelope."""
    return error_response(exc.error_code, exc.message, exc.status_code)


def not_found(message='The requested resource was not found.'):
    return error_response('NOT_FOUND', message, 404)
