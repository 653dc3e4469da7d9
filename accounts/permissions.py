"""
Custom permissions for editor accounts.
"""
from rest_framework import permissions


class CanPublish(permissions.BasePermission):
    """
    Permission to check if the user may publish pages and page groups.
    """
    message = 'Publishing requires a publisher account.'

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and user.can_publish)
