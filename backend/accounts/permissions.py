from rest_framework.permissions import BasePermission, SAFE_METHODS


class IsAdmin(BasePermission):
    """Custom role 'admin' or Django staff/superuser."""
    def has_permission(self, request, view):
        u = request.user
        return bool(u and u.is_authenticated and getattr(u, 'is_admin', False))


class IsAdminOrReadOnly(BasePermission):
    """Any authenticated user may read; only admins may write."""
    def has_permission(self, request, view):
        u = request.user
        if not (u and u.is_authenticated):
            return False
        if request.method in SAFE_METHODS:
            return True
        return bool(getattr(u, 'is_admin', False))


class IsTeacherOrReadOnly(BasePermission):
    """Any authenticated user may read; only teachers record work."""
    def has_permission(self, request, view):
        u = request.user
        if not (u and u.is_authenticated):
            return False
        if request.method in SAFE_METHODS:
            return True
        return getattr(u, 'role', None) == 'teacher'
