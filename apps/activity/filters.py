"""FilterSet for the activity feed."""

from __future__ import annotations

import django_filters  # type: ignore

from .models import ActivityLog


class ActivityLogFilterSet(django_filters.FilterSet):
    unread = django_filters.BooleanFilter(method="filter_unread")
    type = django_filters.MultipleChoiceFilter(choices=ActivityLog.Type.choices)

    class Meta:
        model = ActivityLog
        fields = ["type", "actor_type", "booking"]

    def filter_unread(self, queryset, name, value):  # type: ignore
        if value is None:
            return queryset
        return queryset.filter(is_read=not value)
