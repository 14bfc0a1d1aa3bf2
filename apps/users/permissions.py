"""Role-based permission classes shared by the booking APIs."""

from __future__ import annotations

from rest_framework import permissions  # type: ignore


def is_chain_staff(user) -> bool:
    """Staff flag, superuser or central administrator."""
    if getattr(user, "is_staff", False) or getattr(user, "is_superuser", False):
        return True
    return hasattr(user, "is_central_admin") and user.is_central_admin()


class CanBookPackages(permissions.BasePermission):
    """
    Corporate packages may be confirmed by any authenticated platform role.

    Users without a recognised role are rejected.
    """

    allowed_roles = ("client", "company", "hotel_admin", "central_admin")

    def has_permission(self, request, view) -> bool:  # type: ignore
        user = request.user
        if not user.is_authenticated:
            return False
        if is_chain_staff(user):
            return True
        return getattr(user, "role", None) in self.allowed_roles


class IsReservationStakeholder(permissions.BasePermission):
    """Owner of the reservation, the hotel's administrators and chain staff."""

    def has_object_permission(self, request, view, obj) -> bool:  # type: ignore
        user = request.user
        if not user.is_authenticated:
            return False
        if is_chain_staff(user):
            return True
        if hasattr(user, "manages_hotel") and user.manages_hotel(obj.hotel_id):
            return True
        return obj.user_id == user.id


class IsHotelManager(permissions.BasePermission):
    """Chain staff or an administrator of the reservation's hotel."""

    def has_permission(self, request, view) -> bool:  # type: ignore
        return bool(request.user and request.user.is_authenticated)

    def has_object_permission(self, request, view, obj) -> bool:  # type: ignore
        user = request.user
        if is_chain_staff(user):
            return True
        return hasattr(user, "manages_hotel") and user.manages_hotel(obj.hotel_id)
