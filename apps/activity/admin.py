"""Admin registrations for the activity feed."""

from __future__ import annotations

from django.contrib import admin

from .models import ActivityLog


@admin.register(ActivityLog)
class ActivityLogAdmin(admin.ModelAdmin):
    list_display = ("created_at", "type", "actor_type", "actor_identifier", "is_read")
    list_filter = ("type", "actor_type", "is_read")
    search_fields = ("details", "actor_identifier")
    readonly_fields = ("created_at",)
