"""Serializers for the booking ledger API."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from apps.structures.serializers import ClockTimeField

from .application.bulk import BULK_ACTIONS
from .models import Booking


class BookingSerializer(serializers.ModelSerializer):
    unit = serializers.CharField(source="unit_or_none", read_only=True, allow_null=True)
    start_time = ClockTimeField(read_only=True)
    end_time = ClockTimeField(read_only=True)
    preference_time = ClockTimeField(read_only=True, allow_null=True)
    stay_id = serializers.SerializerMethodField()

    class Meta:
        model = Booking
        fields = [
            "id",
            "booking_code",
            "structure",
            "structure_name",
            "unit",
            "date",
            "start_time",
            "end_time",
            "stay_id",
            "guest_name",
            "status",
            "preference_time",
            "selected_options",
            "notes",
            "confirmed_at",
            "cancelled_at",
            "cancellation_source",
            "cancellation_reason",
            "superseded_by",
            "confirmation_sent_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_stay_id(self, obj: Booking) -> str | None:
        return obj.stay_id or None


class SlotTargetSerializer(serializers.Serializer):
    structure = serializers.IntegerField(min_value=1)
    unit = serializers.CharField(required=False, allow_null=True, allow_blank=True, default=None)
    date = serializers.DateField()
    start_time = ClockTimeField()


class CreateBookingSerializer(SlotTargetSerializer):
    end_time = ClockTimeField(required=False, allow_null=True, default=None)
    preference_time = ClockTimeField(required=False, allow_null=True, default=None)
    selected_options = serializers.ListField(
        child=serializers.CharField(max_length=100),
        required=False,
        default=list,
    )
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class ScheduleForStaySerializer(CreateBookingSerializer):
    stay_id = serializers.CharField(max_length=64)
    guest_name = serializers.CharField(required=False, allow_blank=True, max_length=150, default="")


class ReasonSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, max_length=255, default="")


class SlotSelectionSerializer(serializers.Serializer):
    structure = serializers.IntegerField(min_value=1)
    unit = serializers.CharField(required=False, allow_null=True, allow_blank=True, default=None)
    start_time = ClockTimeField()


class BulkSlotsSerializer(serializers.Serializer):
    date = serializers.DateField()
    action = serializers.ChoiceField(choices=BULK_ACTIONS)
    selections = SlotSelectionSerializer(many=True, allow_empty=False)
