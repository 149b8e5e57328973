"""API views for the booking ledger."""

from __future__ import annotations

import logging
from datetime import timedelta

from django.conf import settings  # type: ignore
from django.utils import timezone  # type: ignore
from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.users.permissions import IsGuestWithStay, IsStaffMember, is_staff_member, stay_id_of
from shared.application.message_bus import message_bus
from shared.infrastructure.api import DomainErrorMixin

from .application.bulk import BulkSlotsCommand, SlotSelection
from .application.command_handlers import (
    ApproveBookingCommand,
    BlockSlotCommand,
    CancelBookingCommand,
    CreateBookingCommand,
    MarkConfirmationSentCommand,
    RejectBookingCommand,
    ScheduleForStayCommand,
    UnblockSlotCommand,
)
from .filters import BookingFilterSet
from .models import Booking
from .serializers import (
    BookingSerializer,
    BulkSlotsSerializer,
    CreateBookingSerializer,
    ReasonSerializer,
    ScheduleForStaySerializer,
    SlotTargetSerializer,
)

logger = logging.getLogger(__name__)


class BookingViewSet(
    DomainErrorMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """
    Booking ledger.

    Guests see and cancel their own bookings and request new ones; staff
    see everything and manage the schedule.
    """

    queryset = Booking.objects.select_related("structure")
    serializer_class = BookingSerializer
    filter_backends = [DjangoFilterBackend]
    filterset_class = BookingFilterSet

    def get_permissions(self):  # type: ignore
        if self.action == "create":
            return [IsGuestWithStay()]
        if self.action in {"list", "retrieve", "cancel"}:
            return [permissions.IsAuthenticated()]
        return [IsStaffMember()]

    def get_queryset(self):  # type: ignore
        qs = super().get_queryset()
        user = self.request.user
        if not is_staff_member(user):
            qs = qs.filter(stay_id=stay_id_of(user) or "-")
        if self.action == "list" and "status" not in self.request.query_params:
            qs = qs.active()
        return qs

    def _send(self, command):  # type: ignore
        return message_bus.handle_command(command)

    def create(self, request):  # type: ignore
        serializer = CreateBookingSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        booking = self._send(
            CreateBookingCommand(
                structure_id=data["structure"],
                unit=data["unit"],
                date=data["date"],
                start_time=data["start_time"],
                end_time=data["end_time"],
                stay_id=stay_id_of(request.user),
                guest_name=request.user.cabin_name or request.user.display_name,
                preference_time=data["preference_time"],
                selected_options=data["selected_options"],
                notes=data["notes"],
                created_by_id=request.user.pk,
            )
        )
        return Response(BookingSerializer(booking).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["post"])
    def cancel(self, request, pk=None):  # type: ignore
        serializer = ReasonSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking = self._send(
            CancelBookingCommand(
                booking_id=pk,
                stay_id=stay_id_of(request.user),
                is_staff=is_staff_member(request.user),
                reason=serializer.validated_data["reason"],
            )
        )
        return Response(BookingSerializer(booking).data)

    @action(detail=True, methods=["post"])
    def approve(self, request, pk=None):  # type: ignore
        booking = self._send(ApproveBookingCommand(booking_id=pk))
        return Response(BookingSerializer(booking).data)

    @action(detail=True, methods=["post"])
    def reject(self, request, pk=None):  # type: ignore
        serializer = ReasonSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking = self._send(RejectBookingCommand(booking_id=pk, reason=serializer.validated_data["reason"]))
        return Response(BookingSerializer(booking).data)

    @action(detail=False, methods=["post"])
    def schedule(self, request):  # type: ignore
        serializer = ScheduleForStaySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        booking = self._send(
            ScheduleForStayCommand(
                structure_id=data["structure"],
                unit=data["unit"],
                date=data["date"],
                start_time=data["start_time"],
                end_time=data["end_time"],
                stay_id=data["stay_id"],
                guest_name=data["guest_name"],
                preference_time=data["preference_time"],
                selected_options=data["selected_options"],
                notes=data["notes"],
                created_by_id=request.user.pk,
            )
        )
        return Response(BookingSerializer(booking).data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=["post"])
    def block(self, request):  # type: ignore
        serializer = SlotTargetSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        booking = self._send(
            BlockSlotCommand(
                structure_id=data["structure"],
                unit=data["unit"],
                date=data["date"],
                start_time=data["start_time"],
                created_by_id=request.user.pk,
            )
        )
        return Response(BookingSerializer(booking).data)

    @action(detail=False, methods=["post"])
    def unblock(self, request):  # type: ignore
        serializer = SlotTargetSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        booking = self._send(
            UnblockSlotCommand(
                structure_id=data["structure"],
                unit=data["unit"],
                date=data["date"],
                start_time=data["start_time"],
            )
        )
        return Response({"unblocked": booking is not None, "booking": BookingSerializer(booking).data if booking else None})

    @action(detail=False, methods=["post"])
    def bulk(self, request):  # type: ignore
        serializer = BulkSlotsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        result = self._send(
            BulkSlotsCommand(
                date=data["date"],
                action=data["action"],
                selections=[
                    SlotSelection(
                        structure_id=selection["structure"],
                        unit=selection["unit"],
                        start_time=selection["start_time"],
                    )
                    for selection in data["selections"]
                ],
                created_by_id=request.user.pk,
            )
        )
        return Response(result.to_dict())

    @action(detail=False, methods=["get"])
    def pending(self, request):  # type: ignore
        qs = Booking.objects.select_related("structure").filter(status=Booking.Status.SOLICITADO).order_by("created_at")
        return Response(BookingSerializer(qs, many=True).data)

    @action(detail=False, methods=["get"], url_path="awaiting-confirmation")
    def awaiting_confirmation(self, request):  # type: ignore
        window = settings.BOOKING_ENGINE["CONFIRMATION_WINDOW_HOURS"]
        qs = (
            Booking.objects.select_related("structure")
            .filter(
                status__in=Booking.GUEST_HELD_STATUSES,
                confirmation_sent_at__isnull=True,
                created_at__gte=timezone.now() - timedelta(hours=window),
            )
            .exclude(stay_id="")
            .order_by("-created_at")
        )
        return Response(BookingSerializer(qs, many=True).data)

    @action(detail=True, methods=["post"], url_path="mark-confirmation-sent")
    def mark_confirmation_sent(self, request, pk=None):  # type: ignore
        booking = self._send(MarkConfirmationSentCommand(booking_id=pk))
        return Response(BookingSerializer(booking).data)
