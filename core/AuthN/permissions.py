from rest_framework.permissions import BasePermission, SAFE_METHODS


class IsCompanyAdmin(BasePermission):
    """Company administrators only."""
    message = "Only company admins can perform this action."

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and user.role == 'admin')


class IsCompanyAdminOrReadOnly(BasePermission):
    """Any authenticated member may read; writes are reserved to admins."""
    message = "Only company admins can modify this resource."

    def has_permission(self, request, view):
        user = request.user
        if not (user and user.is_authenticated):
            return False
        if request.method in SAFE_METHODS:
            return True
        return user.role == 'admin'
