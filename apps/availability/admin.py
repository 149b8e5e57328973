"""Admin registrations for availability."""

from __future__ import annotations

from django.contrib import admin

from .models import DailyOverride


@admin.register(DailyOverride)
class DailyOverrideAdmin(admin.ModelAdmin):
    list_display = ("date", "structure", "status", "updated_by", "updated_at")
    list_filter = ("status", "structure")
    date_hierarchy = "date"
