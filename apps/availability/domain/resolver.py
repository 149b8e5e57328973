"""
Availability Resolver

Reconciles three sources of truth into the status shown for one
(structure, unit, date, slot):

1. the slot already started today -> passou
2. an active booking holds the slot -> meu_horario / bloqueado / indisponivel
3. a daily override exists -> disponivel / indisponivel
4. the structure's default policy -> disponivel / indisponivel

Pure: no I/O, same inputs give the same answer, never raises for
well-formed inputs.
"""

from datetime import date as date_type, datetime
from enum import Enum
from typing import Iterable, Mapping, Optional

from django.utils import timezone  # type: ignore

from apps.bookings.models import Booking
from apps.structures.models import Structure


class SlotStatus(str, Enum):
    """Resolved status of a slot, derived on read and never stored"""
    PASSOU = 'passou'                  # Already started today
    MEU_HORARIO = 'meu_horario'        # Held by the requesting stay
    INDISPONIVEL = 'indisponivel'      # Held by someone else or closed
    BLOQUEADO = 'bloqueado'            # Blocked by staff
    DISPONIVEL = 'disponivel'          # Free to request


def _local(now: datetime) -> datetime:
    return timezone.localtime(now) if timezone.is_aware(now) else now


def find_active_booking(structure, time_slot, unit, active_bookings: Iterable) -> Optional[Booking]:
    """
    Active booking occupying the slot, if any

    Matches on structure and start time. The unit only counts for
    structures managed by unit; a by_structure structure is one pool.
    """
    wanted_unit = (unit or '') if structure.management_type == Structure.ManagementType.BY_UNIT else None

    for booking in active_bookings:
        if booking.structure_id != structure.pk:
            continue
        if booking.status not in Booking.ACTIVE_STATUSES:
            continue
        if booking.start_time != time_slot.start_time:
            continue
        if wanted_unit is not None and (booking.unit or '') != wanted_unit:
            continue
        return booking
    return None


def resolve(
    structure,
    time_slot,
    unit,
    date: date_type,
    active_bookings: Iterable,
    overrides: Mapping,
    requesting_stay_id: Optional[str],
    now: datetime,
) -> SlotStatus:
    """Resolve one slot; first matching rule wins"""
    local_now = _local(now)
    if date == local_now.date() and time_slot.start_time <= local_now.time():
        return SlotStatus.PASSOU

    booking = find_active_booking(structure, time_slot, unit, active_bookings)
    if booking is not None:
        if requesting_stay_id and booking.stay_id == requesting_stay_id:
            return SlotStatus.MEU_HORARIO
        if booking.status == Booking.Status.BLOQUEADO:
            return SlotStatus.BLOQUEADO
        return SlotStatus.INDISPONIVEL

    override = overrides.get(structure.pk)
    if override is not None:
        return SlotStatus.DISPONIVEL if override == 'open' else SlotStatus.INDISPONIVEL

    if structure.default_status == Structure.DefaultStatus.OPEN:
        return SlotStatus.DISPONIVEL
    return SlotStatus.INDISPONIVEL


def is_policy_open(structure, overrides: Mapping) -> bool:
    """Open/closed policy for the day, ignoring bookings"""
    override = overrides.get(structure.pk)
    if override is not None:
        return override == 'open'
    return structure.default_status == Structure.DefaultStatus.OPEN
