"""
Permission Classes for E-Life Admin Backend

Provides role-based access control and division scoping.
"""
import logging
from uuid import UUID

from rest_framework import permissions

from .authentication import AuthenticatedAdmin
from .context import AdminContext
from .exceptions import PermissionDeniedError

logger = logging.getLogger(__name__)


class IsAdmin(permissions.BasePermission):
    """
    Allows access only to division admins and super admins.
    """
    message = 'Admin access required'

    def has_permission(self, request, view):
        user = getattr(request, 'user', None)
        if not isinstance(user, AuthenticatedAdmin):
            return False
        return user.is_admin and user.is_active


class IsSuperAdmin(permissions.BasePermission):
    """
    Allows access only to super admins.
    """
    message = 'Super admin access required'

    def has_permission(self, request, view):
        user = getattr(request, 'user', None)
        if not isinstance(user, AuthenticatedAdmin):
            return False
        return user.is_super_admin


def check_division_access(ctx: AdminContext, division_id: UUID | None) -> None:
    """
    Raise PermissionDeniedError unless the context may access the division.
    """
    if not ctx.can_access_division(division_id):
        logger.info(f'Division access denied for user {ctx.user_id} on division {division_id}')
        raise PermissionDeniedError('Access denied - resource belongs to another division')
