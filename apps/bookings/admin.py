"""Admin registration for bookings."""

from __future__ import annotations

from django.contrib import admin

from .models import Booking


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = (
        "booking_code",
        "structure_name",
        "unit",
        "date",
        "start_time",
        "stay_id",
        "guest_name",
        "status",
        "created_at",
    )
    list_filter = ("status", "cancellation_source", "structure", "date")
    search_fields = ("booking_code", "structure_name", "stay_id", "guest_name")
    date_hierarchy = "date"
    readonly_fields = (
        "booking_code",
        "confirmed_at",
        "cancelled_at",
        "cancellation_source",
        "superseded_by",
        "confirmation_sent_at",
        "created_at",
        "updated_at",
    )
