"""Override store and day-grid assembly."""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date
from typing import Any

from django.utils import timezone  # type: ignore

from apps.bookings.models import Booking
from apps.structures.models import Structure
from shared.domain.exceptions import NotFound, ValidationFailed
from shared.domain.value_objects import format_clock_time

from .domain.resolver import find_active_booking, resolve
from .models import DailyOverride

logger = logging.getLogger(__name__)


def _get_structure(structure_id) -> Structure:
    try:
        return Structure.objects.get(pk=structure_id)
    except (Structure.DoesNotExist, ValueError, TypeError):
        raise NotFound(f"Structure {structure_id} not found")


def set_override(day: date, structure_id, status: str, *, actor=None) -> DailyOverride:
    """Force a structure open or closed on `day`; last write wins."""

    if status not in DailyOverride.Status.values:
        raise ValidationFailed(f"Invalid override status {status!r}, expected open or closed")
    structure = _get_structure(structure_id)

    override, created = DailyOverride.objects.update_or_create(
        date=day,
        structure=structure,
        defaults={"status": status, "updated_by": actor},
    )
    logger.info(
        "Override %s for structure %s on %s: %s",
        "created" if created else "updated",
        structure.pk,
        day,
        status,
    )
    return override


def clear_override(day: date, structure_id) -> bool:
    """Drop the override so the default policy applies again."""

    deleted, _ = DailyOverride.objects.filter(date=day, structure_id=structure_id).delete()
    if deleted:
        logger.info("Override cleared for structure %s on %s", structure_id, day)
    return bool(deleted)


def get_overrides_for_date(day: date) -> dict[int, str]:
    return dict(DailyOverride.objects.filter(date=day).values_list("structure_id", "status"))


def _booking_summary(booking: Booking) -> dict[str, Any]:
    return {
        "id": booking.pk,
        "status": booking.status,
        "stay_id": booking.stay_id or None,
        "guest_name": booking.guest_name,
    }


def build_day_grid(
    day: date,
    *,
    stay_id: str | None = None,
    include_bookings: bool = False,
    structure_id=None,
    now=None,
) -> list[dict[str, Any]]:
    """
    Resolve every (structure, unit, slot) of a day.

    One query each for structures (plus their slots), the day's active
    bookings and the day's overrides. Staff callers pass
    include_bookings=True to see who occupies each slot.
    """
    now = now or timezone.now()

    structures = Structure.objects.prefetch_related("time_slots")
    bookings = Booking.objects.active().filter(date=day)
    if structure_id is not None:
        structures = structures.filter(pk=structure_id)
        bookings = bookings.filter(structure_id=structure_id)

    bookings_by_structure: dict[int, list[Booking]] = defaultdict(list)
    for booking in bookings:
        bookings_by_structure[booking.structure_id].append(booking)
    overrides = get_overrides_for_date(day)

    grid = []
    for structure in structures:
        structure_bookings = bookings_by_structure.get(structure.pk, [])
        units = []
        for unit in structure.unit_choices():
            slots = []
            for time_slot in structure.time_slots.all():
                entry: dict[str, Any] = {
                    "slot_id": time_slot.slot_id,
                    "label": time_slot.label,
                    "start_time": format_clock_time(time_slot.start_time),
                    "end_time": format_clock_time(time_slot.end_time),
                    "status": resolve(
                        structure,
                        time_slot,
                        unit,
                        day,
                        structure_bookings,
                        overrides,
                        stay_id,
                        now,
                    ).value,
                }
                if include_bookings:
                    booking = find_active_booking(structure, time_slot, unit, structure_bookings)
                    entry["booking"] = _booking_summary(booking) if booking else None
                slots.append(entry)
            units.append({"unit": unit, "slots": slots})

        grid.append(
            {
                "structure_id": structure.pk,
                "structure_name": structure.name,
                "management_type": structure.management_type,
                "approval_mode": structure.approval_mode,
                "default_status": structure.default_status,
                "override": overrides.get(structure.pk),
                "units": units,
            }
        )
    return grid
