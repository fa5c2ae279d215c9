from rest_framework import permissions


class IsAdminRole(permissions.BasePermission):
    """Allows access only to users whose stored role is admin."""

    message = "Admin access required"

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and user.is_admin)
