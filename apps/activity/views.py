"""API views for the activity feed."""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.users.permissions import IsStaffMember

from .filters import ActivityLogFilterSet
from .models import ActivityLog
from .serializers import ActivityLogSerializer


class ActivityLogViewSet(viewsets.ReadOnlyModelViewSet):
    """Staff activity feed, newest first."""

    queryset = ActivityLog.objects.all()
    serializer_class = ActivityLogSerializer
    permission_classes = [IsStaffMember]
    filter_backends = [DjangoFilterBackend]
    filterset_class = ActivityLogFilterSet

    @action(detail=True, methods=["post"])
    def mark_read(self, request, pk=None):  # type: ignore
        entry = self.get_object()
        entry.is_read = True
        entry.save(update_fields=["is_read"])
        return Response({"status": "read"}, status=status.HTTP_200_OK)

    @action(detail=False, methods=["post"])
    def mark_all_read(self, request):  # type: ignore
        updated = ActivityLog.objects.filter(is_read=False).update(is_read=True)
        return Response({"status": "read", "updated": updated}, status=status.HTTP_200_OK)
