"""Serializers for the activity feed."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import ActivityLog


class ActivityLogSerializer(serializers.ModelSerializer):
    class Meta:
        model = ActivityLog
        fields = [
            "id",
            "actor_type",
            "actor_identifier",
            "type",
            "details",
            "link",
            "booking",
            "is_read",
            "created_at",
        ]
        read_only_fields = fields
