"""Role-based DRF permissions.

Roles are Django auth groups.  The group names are configurable
(``ROLE_OPERATOR``, ``ROLE_COURIER``, ``ROLE_SUPERVISOR``) so the API can
follow whatever the external user service provisions.
"""

from __future__ import annotations

from typing import ClassVar, Tuple

from django.conf import settings
from rest_framework.permissions import BasePermission
from rest_framework.request import Request


def _role(setting_name: str) -> str:
    return getattr(settings, setting_name)


class HasRole(BasePermission):
    """Grant access when the user belongs to any of ``role_settings`` groups."""

    role_settings: ClassVar[Tuple[str, ...]] = ()
    message = "You do not have the role required for this action."

    def has_permission(self, request: Request, view) -> bool:
        user = request.user
        if not user or not user.is_authenticated:
            return False
        if user.is_superuser:
            return True
        roles = {_role(name) for name in self.role_settings}
        return user.groups.filter(name__in=roles).exists()


class IsOperator(HasRole):
    role_settings = ("ROLE_OPERATOR", "ROLE_SUPERVISOR")


class IsCourier(HasRole):
    role_settings = ("ROLE_COURIER", "ROLE_SUPERVISOR")


class IsSupervisor(HasRole):
    role_settings = ("ROLE_SUPERVISOR",)
