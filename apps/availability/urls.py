"""URL routing for availability."""

from __future__ import annotations

from django.urls import path  # type: ignore

from .views import ClearOverrideView, DailyOverrideView, DayGridView

urlpatterns = [
    path("", DayGridView.as_view(), name="availability-day-grid"),
    path("overrides/", DailyOverrideView.as_view(), name="availability-overrides"),
    path("overrides/clear/", ClearOverrideView.as_view(), name="availability-overrides-clear"),
]
