"""Catalog services: storing generated and manual time slots."""

from __future__ import annotations

import logging
from typing import Iterable

from django.db import transaction  # type: ignore

from shared.domain.exceptions import NotFound

from .domain.time_slots import SlotDefinition, generate_time_slots, manual_time_slot
from .models import Structure, TimeSlot

logger = logging.getLogger(__name__)


def _build_slots(structure: Structure, definitions: Iterable[SlotDefinition]) -> list[TimeSlot]:
    return [
        TimeSlot(
            structure=structure,
            slot_id=definition.slot_id,
            start_time=definition.start_time,
            end_time=definition.end_time,
            label=definition.label,
        )
        for definition in definitions
    ]


@transaction.atomic
def generate_slots_for_structure(
    structure: Structure,
    *,
    start,
    end,
    duration_minutes: int,
    gap_minutes: int = 0,
    replace: bool = True,
) -> list[TimeSlot]:
    """Run the generator and store its output on the structure."""

    definitions = generate_time_slots(start, end, duration_minutes, gap_minutes)
    if replace:
        deleted, _ = structure.time_slots.all().delete()
        logger.info("Replaced %s slots of structure %s", deleted, structure.pk)

    created = TimeSlot.objects.bulk_create(_build_slots(structure, definitions))
    logger.info("Generated %s slots for structure %s", len(created), structure.pk)
    return list(TimeSlot.objects.filter(structure=structure))


def add_time_slot(structure: Structure, *, start_time, end_time, label: str | None = None) -> TimeSlot:
    definition = manual_time_slot(start_time, end_time, label)
    (slot,) = _build_slots(structure, [definition])
    slot.save()
    logger.info("Added slot %s to structure %s", slot.label, structure.pk)
    return slot


def remove_time_slot(structure: Structure, slot_pk) -> None:
    try:
        deleted, _ = TimeSlot.objects.filter(structure=structure, pk=slot_pk).delete()
    except (ValueError, TypeError):
        deleted = 0
    if not deleted:
        raise NotFound(f"Slot {slot_pk} not found on structure {structure.pk}")
    logger.info("Removed slot %s from structure %s", slot_pk, structure.pk)
