"""Permission classes shared by the booking API."""

from __future__ import annotations

from rest_framework import permissions  # type: ignore


def is_staff_member(user) -> bool:
    if not user or not user.is_authenticated:
        return False
    if getattr(user, "is_staff", False) or getattr(user, "is_superuser", False):
        return True
    return hasattr(user, "is_staff_member") and user.is_staff_member()


def stay_id_of(user) -> str | None:
    """Stay the user acts for, or None for staff and anonymous users"""
    if not user or not user.is_authenticated:
        return None
    return getattr(user, "stay_id", "") or None


class IsStaffMember(permissions.BasePermission):
    """Only property staff (staff/admin roles or Django staff)."""

    def has_permission(self, request, view) -> bool:  # type: ignore
        return is_staff_member(request.user)


class IsStaffOrReadOnly(permissions.BasePermission):
    """Any authenticated user may read, only staff may write."""

    def has_permission(self, request, view) -> bool:  # type: ignore
        if not request.user or not request.user.is_authenticated:
            return False
        if request.method in permissions.SAFE_METHODS:
            return True
        return is_staff_member(request.user)


class IsGuestWithStay(permissions.BasePermission):
    """Guests bound to a stay; the stay id owns their bookings."""

    message = "Only guests with an active stay can request bookings."

    def has_permission(self, request, view) -> bool:  # type: ignore
        return stay_id_of(request.user) is not None and not is_staff_member(request.user)
