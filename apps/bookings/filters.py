"""FilterSet for booking lists."""

from __future__ import annotations

import django_filters  # type: ignore

from .models import Booking


class BookingFilterSet(django_filters.FilterSet):
    date = django_filters.DateFilter(field_name="date")
    date_from = django_filters.DateFilter(field_name="date", lookup_expr="gte")
    date_to = django_filters.DateFilter(field_name="date", lookup_expr="lte")
    structure = django_filters.NumberFilter(field_name="structure_id")
    status = django_filters.MultipleChoiceFilter(choices=Booking.Status.choices)
    unit = django_filters.CharFilter(field_name="unit")

    class Meta:
        model = Booking
        fields = ["date", "structure", "status", "unit"]
