"""Domain services shared by the ledger commands."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import date, datetime
from typing import Iterable

from django.db import IntegrityError, transaction  # type: ignore
from django.db.utils import NotSupportedError  # type: ignore
from django.utils import timezone  # type: ignore

from apps.availability.domain.resolver import find_active_booking
from apps.structures.models import Structure, TimeSlot
from shared.domain.exceptions import NotFound, ValidationFailed

from .domain.exceptions import SlotInPast, SlotTaken
from .models import Booking

logger = logging.getLogger(__name__)


def _lock_queryset_if_possible(queryset):
    """Apply select_for_update when inside transaction.atomic()."""

    if not transaction.get_connection().in_atomic_block:
        return queryset

    try:
        return queryset.select_for_update()
    except NotSupportedError:
        return queryset


def lock_structures(structure_ids: Iterable) -> dict[int, Structure]:
    """
    Lock structure rows in id order.

    Every ledger write on a structure goes through this lock, so the
    exclusivity check and the write of concurrent commands serialize.
    """
    ids = sorted({int(pk) for pk in structure_ids})
    queryset = _lock_queryset_if_possible(Structure.objects.filter(pk__in=ids).order_by("pk"))
    structures = {structure.pk: structure for structure in queryset}

    missing = [pk for pk in ids if pk not in structures]
    if missing:
        raise NotFound(f"Structure {missing[0]} not found", structure_id=missing[0])
    return structures


def lock_structure(structure_id) -> Structure:
    try:
        structure_id = int(structure_id)
    except (TypeError, ValueError):
        raise NotFound(f"Structure {structure_id} not found")
    return lock_structures([structure_id])[structure_id]


def get_booking(booking_id, *, lock: bool = False) -> Booking:
    queryset = Booking.objects.all()
    if lock:
        queryset = _lock_queryset_if_possible(queryset)
    try:
        return queryset.get(pk=booking_id)
    except (Booking.DoesNotExist, ValueError, TypeError):
        raise NotFound(f"Booking {booking_id} not found")


def local_now() -> datetime:
    return timezone.localtime(timezone.now())


def ensure_slot_not_started(day: date, time_slot: TimeSlot) -> None:
    now = local_now()
    if day < now.date() or (day == now.date() and time_slot.start_time <= now.time()):
        raise SlotInPast(
            f"Slot {time_slot.label} on {day} has already started",
            date=str(day),
            slot=time_slot.label,
        )


def ensure_staff_can_edit(day: date) -> None:
    """Past days are read-only for the staff schedule."""

    if day < timezone.localdate():
        raise ValidationFailed(f"Cannot change the schedule of a past date ({day})", date=str(day))


def find_slot_booking(structure: Structure, unit: str, day: date, time_slot: TimeSlot) -> Booking | None:
    """Fresh, locked read of the active booking occupying a slot."""

    queryset = _lock_queryset_if_possible(
        Booking.objects.active().filter(structure=structure, date=day, start_time=time_slot.start_time)
    )
    return find_active_booking(structure, time_slot, unit, list(queryset))


def ensure_slot_is_free(
    structure: Structure,
    unit: str,
    day: date,
    time_slot: TimeSlot,
    *,
    stay_id: str,
) -> Booking | None:
    """
    Exclusivity check for a stay about to take a slot.

    Returns the stay's own booking of the slot (to be superseded) or
    None. Raises SlotTaken when another stay holds the slot or staff
    blocked it.
    """
    current = find_slot_booking(structure, unit, day, time_slot)
    if current is None:
        return None
    if current.stay_id and current.stay_id == stay_id:
        return current

    logger.warning(
        "Slot %s of structure %s on %s already taken by booking %s (%s)",
        time_slot.label,
        structure.pk,
        day,
        current.pk,
        current.status,
    )
    raise SlotTaken(
        f"Slot {time_slot.label} of {structure.name} on {day} is not available",
        booking_id=current.pk,
    )


@contextmanager
def slot_conflicts_as_slot_taken(description: str):
    """
    Report a unique-constraint violation on Booking as SlotTaken.

    Wraps the whole unit of work: the partial unique constraints catch a
    concurrent writer that slipped past the locked exclusivity check.
    """
    try:
        yield
    except IntegrityError as exc:
        logger.warning("Integrity conflict while %s: %s", description, exc)
        raise SlotTaken(f"Slot is no longer available ({description})") from exc
