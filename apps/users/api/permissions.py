"""Permission classes for the admin API."""

from __future__ import annotations

from rest_framework import permissions  # type: ignore


class IsGuesthouseAdmin(permissions.BasePermission):
    """
    Permission class that only allows guesthouse staff to access.

    Staff are Django users with is_staff set; the identity comes from the
    session established by the admin login endpoint.
    """

    message = "Admin authentication required."

    def has_permission(self, request, view) -> bool:  # type: ignore
        user = request.user
        if not user or not user.is_authenticated:
            return False
        return bool(getattr(user, "is_staff", False) or getattr(user, "is_superuser", False))

