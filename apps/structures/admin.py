"""Admin registrations for the structure catalog."""

from __future__ import annotations

from django.contrib import admin

from .models import Structure, TimeSlot


class TimeSlotInline(admin.TabularInline):
    model = TimeSlot
    extra = 0
    fields = ("slot_id", "start_time", "end_time", "label")


@admin.register(Structure)
class StructureAdmin(admin.ModelAdmin):
    list_display = ("name", "management_type", "default_status", "approval_mode", "updated_at")
    list_filter = ("management_type", "default_status", "approval_mode")
    search_fields = ("name",)
    inlines = [TimeSlotInline]
