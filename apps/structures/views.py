"""API views for the structure catalog."""

from __future__ import annotations

import logging

from rest_framework import status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.users.permissions import IsStaffMember, IsStaffOrReadOnly
from shared.infrastructure.api import DomainErrorMixin

from . import services
from .models import Structure
from .serializers import (
    GenerateSlotsSerializer,
    ManualSlotSerializer,
    StructureSerializer,
    TimeSlotSerializer,
)

logger = logging.getLogger(__name__)


class StructureViewSet(DomainErrorMixin, viewsets.ModelViewSet):
    """Catalog of bookable structures; staff write, everyone signed in reads."""

    queryset = Structure.objects.prefetch_related("time_slots")
    serializer_class = StructureSerializer
    permission_classes = [IsStaffOrReadOnly]

    def perform_create(self, serializer):  # type: ignore
        structure = serializer.save()
        logger.info("Structure %s created by %s", structure.pk, self.request.user.pk)

    def perform_destroy(self, instance):  # type: ignore
        # Bookings keep their structure_name snapshot and become orphaned.
        logger.info("Structure %s deleted by %s", instance.pk, self.request.user.pk)
        instance.delete()

    @action(
        detail=True,
        methods=["post"],
        url_path="generate-slots",
        permission_classes=[IsStaffMember],
    )
    def generate_slots(self, request, pk=None):  # type: ignore
        structure = self.get_object()
        serializer = GenerateSlotsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        slots = services.generate_slots_for_structure(structure, **serializer.validated_data)
        return Response(TimeSlotSerializer(slots, many=True).data, status=status.HTTP_200_OK)

    @action(detail=True, methods=["post"], url_path="slots", permission_classes=[IsStaffMember])
    def add_slot(self, request, pk=None):  # type: ignore
        structure = self.get_object()
        serializer = ManualSlotSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        slot = services.add_time_slot(structure, **serializer.validated_data)
        return Response(TimeSlotSerializer(slot).data, status=status.HTTP_201_CREATED)

    @action(
        detail=True,
        methods=["delete"],
        url_path=r"slots/(?P<slot_pk>[^/.]+)",
        permission_classes=[IsStaffMember],
    )
    def remove_slot(self, request, pk=None, slot_pk=None):  # type: ignore
        structure = self.get_object()
        services.remove_time_slot(structure, slot_pk)
        return Response(status=status.HTTP_204_NO_CONTENT)
