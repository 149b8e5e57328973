"""API views for the day grid and daily overrides."""

from __future__ import annotations

from django.utils import timezone  # type: ignore
from rest_framework import permissions, status  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.users.permissions import IsStaffMember, is_staff_member, stay_id_of
from shared.infrastructure.api import DomainErrorMixin

from . import services
from .models import DailyOverride
from .serializers import (
    ClearOverrideSerializer,
    DailyOverrideSerializer,
    DayQuerySerializer,
    SetOverrideSerializer,
)


def _query_day(request):  # type: ignore
    serializer = DayQuerySerializer(data=request.query_params)
    serializer.is_valid(raise_exception=True)
    day = serializer.validated_data.get("date") or timezone.localdate()
    return day, serializer.validated_data.get("structure")


class DayGridView(DomainErrorMixin, APIView):
    """Resolved status of every slot of every structure for a day."""

    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):  # type: ignore
        day, structure_id = _query_day(request)
        grid = services.build_day_grid(
            day,
            stay_id=stay_id_of(request.user),
            include_bookings=is_staff_member(request.user),
            structure_id=structure_id,
        )
        return Response({"date": day, "structures": grid})


class DailyOverrideView(DomainErrorMixin, APIView):
    """GET lists a day's overrides; PUT sets one (staff)."""

    def get_permissions(self):  # type: ignore
        if self.request.method in permissions.SAFE_METHODS:
            return [permissions.IsAuthenticated()]
        return [IsStaffMember()]

    def get(self, request):  # type: ignore
        day, structure_id = _query_day(request)
        overrides = DailyOverride.objects.filter(date=day)
        if structure_id is not None:
            overrides = overrides.filter(structure_id=structure_id)
        return Response(DailyOverrideSerializer(overrides, many=True).data)

    def put(self, request):  # type: ignore
        serializer = SetOverrideSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        override = services.set_override(
            data["date"],
            data["structure"],
            data["status"],
            actor=request.user,
        )
        return Response(DailyOverrideSerializer(override).data, status=status.HTTP_200_OK)


class ClearOverrideView(DomainErrorMixin, APIView):
    permission_classes = [IsStaffMember]

    def post(self, request):  # type: ignore
        serializer = ClearOverrideSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        cleared = services.clear_override(
            serializer.validated_data["date"],
            serializer.validated_data["structure"],
        )
        return Response({"cleared": cleared})
