"""Serializers for availability endpoints."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import DailyOverride


class DayQuerySerializer(serializers.Serializer):
    date = serializers.DateField(required=False)
    structure = serializers.IntegerField(required=False, min_value=1)


class DailyOverrideSerializer(serializers.ModelSerializer):
    updated_by = serializers.ReadOnlyField(source="updated_by_id")

    class Meta:
        model = DailyOverride
        fields = ["id", "date", "structure", "status", "updated_by", "updated_at"]
        read_only_fields = fields


class SetOverrideSerializer(serializers.Serializer):
    date = serializers.DateField()
    structure = serializers.IntegerField(min_value=1)
    status = serializers.ChoiceField(choices=DailyOverride.Status.choices)


class ClearOverrideSerializer(serializers.Serializer):
    date = serializers.DateField()
    structure = serializers.IntegerField(min_value=1)
