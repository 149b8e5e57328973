"""Tests for the availability resolver.

The resolver is pure, so these tests build unsaved model instances and
never touch the database.
"""

from __future__ import annotations

from datetime import date, datetime, time

import pytest

from apps.availability.domain.resolver import SlotStatus, find_active_booking, is_policy_open, resolve
from apps.bookings.models import Booking
from apps.structures.models import Structure, TimeSlot

DAY = date(2030, 3, 15)
MORNING = datetime(2030, 3, 15, 9, 30)
DAY_BEFORE = datetime(2030, 3, 14, 20, 0)


def _structure(pk=1, **kwargs) -> Structure:
    defaults = {
        "name": "Spa",
        "management_type": Structure.ManagementType.BY_STRUCTURE,
        "default_status": Structure.DefaultStatus.OPEN,
        "approval_mode": Structure.ApprovalMode.AUTOMATIC,
    }
    defaults.update(kwargs)
    return Structure(pk=pk, **defaults)


def _slot(start: str, end: str) -> TimeSlot:
    return TimeSlot(
        slot_id=f"{start}-{end}",
        start_time=time.fromisoformat(start),
        end_time=time.fromisoformat(end),
        label=f"{start}-{end}",
    )


def _booking(structure_id=1, start="09:00", status=Booking.Status.CONFIRMADO, stay_id="stay-a", unit="") -> Booking:
    return Booking(
        structure_id=structure_id,
        unit=unit,
        date=DAY,
        start_time=time.fromisoformat(start),
        end_time=time(23, 0),
        status=status,
        stay_id=stay_id,
    )


def test_slot_that_started_today_has_passed() -> None:
    status = resolve(_structure(), _slot("09:00", "10:00"), None, DAY, [], {}, None, MORNING)
    assert status == SlotStatus.PASSOU


def test_passed_wins_over_own_booking() -> None:
    bookings = [_booking()]
    status = resolve(_structure(), _slot("09:00", "10:00"), None, DAY, bookings, {}, "stay-a", MORNING)
    assert status == SlotStatus.PASSOU


def test_later_slot_today_is_not_passed() -> None:
    status = resolve(_structure(), _slot("10:00", "11:00"), None, DAY, [], {}, None, MORNING)
    assert status == SlotStatus.DISPONIVEL


def test_own_booking_is_my_slot() -> None:
    status = resolve(_structure(), _slot("09:00", "10:00"), None, DAY, [_booking()], {}, "stay-a", DAY_BEFORE)
    assert status == SlotStatus.MEU_HORARIO


def test_booking_of_another_stay_is_unavailable() -> None:
    status = resolve(_structure(), _slot("09:00", "10:00"), None, DAY, [_booking()], {}, "stay-b", DAY_BEFORE)
    assert status == SlotStatus.INDISPONIVEL


def test_pending_request_also_holds_the_slot() -> None:
    bookings = [_booking(status=Booking.Status.SOLICITADO)]
    status = resolve(_structure(), _slot("09:00", "10:00"), None, DAY, bookings, {}, None, DAY_BEFORE)
    assert status == SlotStatus.INDISPONIVEL


def test_staff_block_is_blocked() -> None:
    bookings = [_booking(status=Booking.Status.BLOQUEADO, stay_id="")]
    status = resolve(_structure(), _slot("09:00", "10:00"), None, DAY, bookings, {}, "stay-a", DAY_BEFORE)
    assert status == SlotStatus.BLOQUEADO


def test_cancelled_booking_is_ignored() -> None:
    bookings = [_booking(status=Booking.Status.CANCELADO)]
    status = resolve(_structure(), _slot("09:00", "10:00"), None, DAY, bookings, {}, "stay-a", DAY_BEFORE)
    assert status == SlotStatus.DISPONIVEL


def test_booking_takes_precedence_over_closed_override() -> None:
    overrides = {1: "closed"}
    slot = _slot("09:00", "10:00")

    assert resolve(_structure(), slot, None, DAY, [_booking()], overrides, "stay-a", DAY_BEFORE) == SlotStatus.MEU_HORARIO
    assert resolve(_structure(), _slot("10:00", "11:00"), None, DAY, [_booking()], overrides, "stay-a", DAY_BEFORE) == (
        SlotStatus.INDISPONIVEL
    )


@pytest.mark.parametrize(
    "default_status, override, expected",
    [
        (Structure.DefaultStatus.OPEN, None, SlotStatus.DISPONIVEL),
        (Structure.DefaultStatus.CLOSED, None, SlotStatus.INDISPONIVEL),
        (Structure.DefaultStatus.OPEN, "closed", SlotStatus.INDISPONIVEL),
        (Structure.DefaultStatus.CLOSED, "open", SlotStatus.DISPONIVEL),
    ],
)
def test_override_beats_default_policy(default_status, override, expected) -> None:
    structure = _structure(default_status=default_status)
    overrides = {1: override} if override else {}

    status = resolve(structure, _slot("09:00", "10:00"), None, DAY, [], overrides, None, DAY_BEFORE)

    assert status == expected
    assert is_policy_open(structure, overrides) is (expected == SlotStatus.DISPONIVEL)


def test_override_of_another_structure_does_not_apply() -> None:
    status = resolve(_structure(), _slot("09:00", "10:00"), None, DAY, [], {2: "closed"}, None, DAY_BEFORE)
    assert status == SlotStatus.DISPONIVEL


def test_units_are_independent_for_structures_managed_by_unit() -> None:
    grill = _structure(management_type=Structure.ManagementType.BY_UNIT, units=["G1", "G2"])
    bookings = [_booking(unit="G1")]
    slot = _slot("09:00", "10:00")

    assert resolve(grill, slot, "G1", DAY, bookings, {}, "stay-b", DAY_BEFORE) == SlotStatus.INDISPONIVEL
    assert resolve(grill, slot, "G2", DAY, bookings, {}, "stay-b", DAY_BEFORE) == SlotStatus.DISPONIVEL


def test_unit_is_ignored_for_structures_managed_as_a_whole() -> None:
    booking = _booking(unit="")
    assert find_active_booking(_structure(), _slot("09:00", "10:00"), "anything", [booking]) is booking


def test_booking_of_another_structure_does_not_match() -> None:
    bookings = [_booking(structure_id=2)]
    status = resolve(_structure(), _slot("09:00", "10:00"), None, DAY, bookings, {}, "stay-b", DAY_BEFORE)
    assert status == SlotStatus.DISPONIVEL


def test_resolution_is_deterministic() -> None:
    args = (_structure(), _slot("09:00", "10:00"), None, DAY, [_booking()], {1: "closed"}, "stay-b", DAY_BEFORE)
    assert resolve(*args) == resolve(*args) == SlotStatus.INDISPONIVEL
