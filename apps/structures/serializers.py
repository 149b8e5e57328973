"""Serializers for the structure catalog."""

from __future__ import annotations

from typing import Any

from rest_framework import serializers  # type: ignore

from shared.domain.value_objects import CLOCK_FORMAT

from .models import Structure, TimeSlot


class ClockTimeField(serializers.TimeField):
    """Time rendered and parsed as "HH:mm"."""

    def __init__(self, **kwargs: Any) -> None:
        kwargs.setdefault("format", CLOCK_FORMAT)
        kwargs.setdefault("input_formats", [CLOCK_FORMAT])
        super().__init__(**kwargs)


class TimeSlotSerializer(serializers.ModelSerializer):
    start_time = ClockTimeField()
    end_time = ClockTimeField()

    class Meta:
        model = TimeSlot
        fields = ["id", "slot_id", "start_time", "end_time", "label"]
        read_only_fields = ["id", "slot_id"]


class StructureSerializer(serializers.ModelSerializer):
    time_slots = TimeSlotSerializer(many=True, read_only=True)
    units = serializers.ListField(
        child=serializers.CharField(max_length=60),
        required=False,
        allow_empty=True,
    )

    class Meta:
        model = Structure
        fields = [
            "id",
            "name",
            "photo_ref",
            "management_type",
            "units",
            "default_status",
            "approval_mode",
            "time_slots",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "time_slots", "created_at", "updated_at"]

    def validate_name(self, value: str) -> str:
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Name cannot be blank.")
        return value

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:  # type: ignore
        instance = self.instance
        management_type = attrs.get(
            "management_type",
            instance.management_type if instance else Structure.ManagementType.BY_STRUCTURE,
        )
        units = attrs.get("units", instance.units if instance else [])

        if management_type == Structure.ManagementType.BY_STRUCTURE:
            attrs["units"] = []
            return attrs

        cleaned = [unit.strip() for unit in units or []]
        if not cleaned:
            raise serializers.ValidationError({"units": "A structure managed by unit needs at least one unit."})
        if any(not unit for unit in cleaned):
            raise serializers.ValidationError({"units": "Unit names cannot be blank."})
        if len(set(cleaned)) != len(cleaned):
            raise serializers.ValidationError({"units": "Unit names must be unique."})
        attrs["units"] = cleaned
        return attrs


class GenerateSlotsSerializer(serializers.Serializer):
    start = serializers.CharField()
    end = serializers.CharField()
    duration_minutes = serializers.IntegerField()
    gap_minutes = serializers.IntegerField(default=0)
    replace = serializers.BooleanField(default=True)


class ManualSlotSerializer(serializers.Serializer):
    start_time = serializers.CharField()
    end_time = serializers.CharField()
    label = serializers.CharField(required=False, allow_blank=True, max_length=50)
