"""
Permission classes for the staff authorization gate.

Every API endpoint sits behind IsActiveStaff by default (see
REST_FRAMEWORK['DEFAULT_PERMISSION_CLASSES']). Admin-only endpoints add
IsAdminStaff on top.
"""
from rest_framework.permissions import BasePermission

from .models import ADMIN_ROLES, StaffStatus


class IsActiveStaff(BasePermission):
    """
    Authenticated staff member who finished registration and was not revoked.

    Usage:
        permission_classes = [IsActiveStaff]
    """

    message = 'Access denied. Your account is not authorized.'

    def has_permission(self, request, view):
        user = request.user
        return bool(
            user
            and user.is_authenticated
            and user.is_active
            and getattr(user, 'status', None) == StaffStatus.REGISTERED
        )


class IsAdminStaff(IsActiveStaff):
    """
    Active staff member holding the ADMIN or SUPER_ADMIN role.

    Usage:
        def get_permissions(self):
            if self.action == 'void':
                return [IsAdminStaff()]
            return super().get_permissions()
    """

    message = 'Forbidden: Insufficient privileges'

    def has_permission(self, request, view):
        return (
            super().has_permission(request, view)
            and request.user.role in ADMIN_ROLES
        )
