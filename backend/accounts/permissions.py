from rest_framework import permissions


class IsStaffRole(permissions.BasePermission):
    """
    Allow sales, manager and finance users (or Django staff) through.
    """
    def has_permission(self, request, view):
        return request.user.is_authenticated and request.user.is_staff_role


class IsCustomer(permissions.BasePermission):
    """
    Custom permission for customer portal users.
    """
    def has_permission(self, request, view):
        return request.user.is_authenticated and request.user.role == 'customer'


class CanManageTariffs(permissions.BasePermission):
    """
    Purchase tariffs and their validity dates are edited by managers and finance only.
    """
    def has_permission(self, request, view):
        return request.user.is_authenticated and (
            request.user.is_superuser or request.user.role in ['manager', 'finance']
        )


class CanManagePricing(permissions.BasePermission):
    """
    Custom permission to allow only finance users to modify pricing profiles, rules and tiers.
    """
    def has_permission(self, request, view):
        if request.method in permissions.SAFE_METHODS:
            return request.user.is_authenticated and request.user.is_staff_role
        return request.user.is_authenticated and (
            request.user.is_superuser or request.user.role == 'finance'
        )


class IsOwnerOrStaff(permissions.BasePermission):
    """
    Object level check: customers only reach quotation requests they submitted.
    """
    def has_object_permission(self, request, view, obj):
        user = request.user
        if user.is_staff_role:
            return True
        return getattr(obj, 'customer_user_id', None) == user.id
