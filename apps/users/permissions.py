"""Permission classes shared by the API of every app."""

from __future__ import annotations

from rest_framework import permissions  # type: ignore


class IsAdminRole(permissions.BasePermission):
    """Only users with the ``admin`` role (or Django superusers)."""

    message = "Admin access required"

    def has_permission(self, request, view) -> bool:  # type: ignore
        user = request.user
        if not user or not user.is_authenticated:
            return False
        return hasattr(user, "is_admin") and user.is_admin()
