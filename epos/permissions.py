from rest_framework.permissions import BasePermission, SAFE_METHODS

STAFF_ROLES = ('admin', 'staff', 'cashier', 'accountant', 'waiter', 'kitchen')


class APIKeyPermission(BasePermission):
    """
    Custom permission class for API key authentication
    """

    def has_permission(self, request, view):
        # Our APIKeyAuthentication returns (None, api_key) on success
        return hasattr(request, 'auth') and request.auth is not None


class StaffRolePermission(BasePermission):
    """
    Role check driven by the X-Staff-Role header.

    Views opt in by declaring ``allowed_roles``, which gates their write
    methods; reads stay open to any authenticated device. ``admin`` passes
    every role check.
    """
    message = 'Your staff role is not allowed to perform this action'

    def has_permission(self, request, view):
        allowed_roles = getattr(view, 'allowed_roles', None)
        if not allowed_roles or request.method in SAFE_METHODS:
            return True

        role = request.META.get('HTTP_X_STAFF_ROLE', '').strip().lower()
        if role not in STAFF_ROLES:
            return False
        return role == 'admin' or role in allowed_roles
