"""Service-level tests for the booking ledger commands."""

from __future__ import annotations

from datetime import time
from unittest import mock

import pytest

from apps.availability.services import set_override
from apps.bookings.application.command_handlers import (
    ApproveBookingCommand,
    BlockSlotCommand,
    CancelBookingCommand,
    CreateBookingCommand,
    RejectBookingCommand,
    ScheduleForStayCommand,
    UnblockSlotCommand,
)
from apps.bookings.domain.exceptions import InvalidTransition, SlotClosed, SlotInPast, SlotTaken
from apps.bookings.models import Booking
from shared.application.message_bus import message_bus
from shared.domain.exceptions import NotFound, NotOwner, ValidationFailed

pytestmark = pytest.mark.django_db

NINE = time(9, 0)
TEN = time(10, 0)


def request_slot(structure, day, stay_id, start=NINE, unit=None) -> Booking:
    return message_bus.handle_command(
        CreateBookingCommand(
            structure_id=structure.pk,
            unit=unit,
            date=day,
            start_time=start,
            stay_id=stay_id,
            guest_name=f"Hóspede {stay_id}",
        )
    )


def test_automatic_structure_confirms_immediately(spa, tomorrow) -> None:
    booking = request_slot(spa, tomorrow, "stay-a")

    assert booking.status == Booking.Status.CONFIRMADO
    assert booking.confirmed_at is not None
    assert booking.structure_name == "Spa"
    assert booking.unit == ""
    assert booking.end_time == TEN


def test_manual_structure_creates_request(grill, tomorrow) -> None:
    booking = request_slot(grill, tomorrow, "stay-a", start=time(12, 0), unit="Churrasqueira 1")

    assert booking.status == Booking.Status.SOLICITADO
    assert booking.unit == "Churrasqueira 1"
    assert booking.confirmed_at is None


def test_second_stay_cannot_take_the_same_slot(spa, tomorrow) -> None:
    first = request_slot(spa, tomorrow, "stay-a")

    with pytest.raises(SlotTaken) as excinfo:
        request_slot(spa, tomorrow, "stay-b")

    assert excinfo.value.details["booking_id"] == first.pk
    assert Booking.objects.active().filter(structure=spa, date=tomorrow).count() == 1


def test_pending_request_blocks_other_stays(grill, tomorrow) -> None:
    request_slot(grill, tomorrow, "stay-a", start=time(12, 0), unit="Churrasqueira 1")

    with pytest.raises(SlotTaken):
        request_slot(grill, tomorrow, "stay-b", start=time(12, 0), unit="Churrasqueira 1")


def test_other_unit_of_the_same_structure_is_independent(grill, tomorrow) -> None:
    request_slot(grill, tomorrow, "stay-a", start=time(12, 0), unit="Churrasqueira 1")
    other = request_slot(grill, tomorrow, "stay-b", start=time(12, 0), unit="Churrasqueira 2")

    assert other.status == Booking.Status.SOLICITADO


def test_unit_is_required_for_structures_managed_by_unit(grill, tomorrow) -> None:
    with pytest.raises(ValidationFailed):
        request_slot(grill, tomorrow, "stay-a", start=time(12, 0))

    with pytest.raises(ValidationFailed):
        request_slot(grill, tomorrow, "stay-a", start=time(12, 0), unit="Churrasqueira 9")


def test_unknown_slot_or_structure_is_not_found(spa, tomorrow) -> None:
    with pytest.raises(NotFound):
        request_slot(spa, tomorrow, "stay-a", start=time(15, 0))

    spa_id = spa.pk
    spa.delete()
    with pytest.raises(NotFound):
        message_bus.handle_command(
            CreateBookingCommand(structure_id=spa_id, unit=None, date=tomorrow, start_time=NINE, stay_id="stay-a")
        )


def test_new_request_supersedes_previous_booking_of_the_stay(spa, tomorrow) -> None:
    first = request_slot(spa, tomorrow, "stay-a", start=NINE)
    second = request_slot(spa, tomorrow, "stay-a", start=TEN)

    first.refresh_from_db()
    assert first.status == Booking.Status.CANCELADO
    assert first.cancellation_source == Booking.CancellationSource.SUPERSEDED
    assert first.superseded_by_id == second.pk
    assert second.status == Booking.Status.CONFIRMADO
    assert list(Booking.objects.held_by_stay("stay-a").filter(structure=spa, date=tomorrow)) == [second]


def test_requesting_own_slot_again_replaces_it(spa, tomorrow) -> None:
    first = request_slot(spa, tomorrow, "stay-a")
    second = request_slot(spa, tomorrow, "stay-a")

    first.refresh_from_db()
    assert first.status == Booking.Status.CANCELADO
    assert second.start_time == NINE
    assert second.status == Booking.Status.CONFIRMADO


def test_supersession_is_per_structure(spa, grill, tomorrow) -> None:
    at_spa = request_slot(spa, tomorrow, "stay-a")
    request_slot(grill, tomorrow, "stay-a", start=time(12, 0), unit="Churrasqueira 2")

    at_spa.refresh_from_db()
    assert at_spa.status == Booking.Status.CONFIRMADO


def test_slot_in_the_past_is_rejected(spa, yesterday) -> None:
    with pytest.raises(SlotInPast) as excinfo:
        request_slot(spa, yesterday, "stay-a")

    assert excinfo.value.code == "slot_in_past"
    assert not Booking.objects.exists()


def test_closed_override_rejects_guest_request(spa, tomorrow) -> None:
    set_override(tomorrow, spa.pk, "closed")

    with pytest.raises(SlotClosed):
        request_slot(spa, tomorrow, "stay-a")


def test_open_override_allows_request_on_closed_structure(spa, tomorrow) -> None:
    spa.default_status = spa.DefaultStatus.CLOSED
    spa.save()

    with pytest.raises(SlotClosed):
        request_slot(spa, tomorrow, "stay-a")

    set_override(tomorrow, spa.pk, "open")
    assert request_slot(spa, tomorrow, "stay-a").status == Booking.Status.CONFIRMADO


def test_staff_schedule_ignores_policy_and_approval_mode(grill, staff_user, tomorrow) -> None:
    set_override(tomorrow, grill.pk, "closed")

    booking = message_bus.handle_command(
        ScheduleForStayCommand(
            structure_id=grill.pk,
            unit="Churrasqueira 1",
            date=tomorrow,
            start_time=time(18, 0),
            stay_id="stay-a",
            guest_name="Ana",
            created_by_id=staff_user.pk,
        )
    )

    assert booking.status == Booking.Status.CONFIRMADO
    assert booking.created_by == staff_user


def test_staff_schedule_respects_exclusivity(spa, tomorrow) -> None:
    request_slot(spa, tomorrow, "stay-a")

    with pytest.raises(SlotTaken):
        message_bus.handle_command(
            ScheduleForStayCommand(structure_id=spa.pk, unit=None, date=tomorrow, start_time=NINE, stay_id="stay-b")
        )


def test_unique_constraint_violation_is_reported_as_slot_taken(spa, tomorrow) -> None:
    first = request_slot(spa, tomorrow, "stay-a")

    # Simulate a concurrent writer that passed the exclusivity check.
    with mock.patch("apps.bookings.services.ensure_slot_is_free", return_value=None):
        with pytest.raises(SlotTaken):
            request_slot(spa, tomorrow, "stay-b")

    first.refresh_from_db()
    assert first.status == Booking.Status.CONFIRMADO
    assert Booking.objects.filter(stay_id="stay-b").count() == 0


def test_guest_cancels_own_booking(spa, tomorrow) -> None:
    booking = request_slot(spa, tomorrow, "stay-a")

    cancelled = message_bus.handle_command(CancelBookingCommand(booking_id=booking.pk, stay_id="stay-a"))

    assert cancelled.status == Booking.Status.CANCELADO
    assert cancelled.cancellation_source == Booking.CancellationSource.GUEST
    assert request_slot(spa, tomorrow, "stay-b").status == Booking.Status.CONFIRMADO


def test_cancel_is_idempotent(spa, tomorrow) -> None:
    booking = request_slot(spa, tomorrow, "stay-a")
    message_bus.handle_command(CancelBookingCommand(booking_id=booking.pk, stay_id="stay-a"))
    first_cancelled_at = Booking.objects.get(pk=booking.pk).cancelled_at

    again = message_bus.handle_command(CancelBookingCommand(booking_id=booking.pk, stay_id="stay-a"))

    assert again.status == Booking.Status.CANCELADO
    assert again.cancelled_at == first_cancelled_at


def test_guest_cannot_cancel_booking_of_another_stay(spa, tomorrow) -> None:
    booking = request_slot(spa, tomorrow, "stay-a")

    with pytest.raises(NotOwner):
        message_bus.handle_command(CancelBookingCommand(booking_id=booking.pk, stay_id="stay-b"))

    booking.refresh_from_db()
    assert booking.status == Booking.Status.CONFIRMADO


def test_staff_can_cancel_any_booking(spa, tomorrow) -> None:
    booking = request_slot(spa, tomorrow, "stay-a")

    cancelled = message_bus.handle_command(CancelBookingCommand(booking_id=booking.pk, is_staff=True, reason="Manutenção"))

    assert cancelled.cancellation_source == Booking.CancellationSource.STAFF
    assert cancelled.cancellation_reason == "Manutenção"


def test_cancel_unknown_booking_is_not_found(db) -> None:
    with pytest.raises(NotFound):
        message_bus.handle_command(CancelBookingCommand(booking_id=999, is_staff=True))


def test_approve_and_reject_requests(grill, tomorrow) -> None:
    first = request_slot(grill, tomorrow, "stay-a", start=time(12, 0), unit="Churrasqueira 1")
    second = request_slot(grill, tomorrow, "stay-b", start=time(12, 0), unit="Churrasqueira 2")

    approved = message_bus.handle_command(ApproveBookingCommand(booking_id=first.pk))
    rejected = message_bus.handle_command(RejectBookingCommand(booking_id=second.pk, reason="Lotado"))

    assert approved.status == Booking.Status.CONFIRMADO
    assert approved.confirmed_at is not None
    assert rejected.status == Booking.Status.CANCELADO
    assert rejected.cancellation_source == Booking.CancellationSource.STAFF


def test_only_requests_can_be_approved_or_rejected(spa, tomorrow) -> None:
    confirmed = request_slot(spa, tomorrow, "stay-a")

    with pytest.raises(InvalidTransition):
        message_bus.handle_command(ApproveBookingCommand(booking_id=confirmed.pk))
    with pytest.raises(InvalidTransition):
        message_bus.handle_command(RejectBookingCommand(booking_id=confirmed.pk))

    message_bus.handle_command(CancelBookingCommand(booking_id=confirmed.pk, stay_id="stay-a"))
    with pytest.raises(InvalidTransition):
        message_bus.handle_command(ApproveBookingCommand(booking_id=confirmed.pk))


def test_block_and_unblock_slot(spa, staff_user, tomorrow) -> None:
    block = message_bus.handle_command(
        BlockSlotCommand(structure_id=spa.pk, unit=None, date=tomorrow, start_time=NINE, created_by_id=staff_user.pk)
    )

    assert block.status == Booking.Status.BLOQUEADO
    assert block.stay_id == ""
    with pytest.raises(SlotTaken):
        request_slot(spa, tomorrow, "stay-a")

    released = message_bus.handle_command(UnblockSlotCommand(structure_id=spa.pk, unit=None, date=tomorrow, start_time=NINE))

    assert released.pk == block.pk
    assert released.status == Booking.Status.CANCELADO
    assert request_slot(spa, tomorrow, "stay-a").status == Booking.Status.CONFIRMADO


def test_blocking_twice_returns_existing_block(spa, tomorrow) -> None:
    command = BlockSlotCommand(structure_id=spa.pk, unit=None, date=tomorrow, start_time=NINE)

    first = message_bus.handle_command(command)
    second = message_bus.handle_command(command)

    assert first.pk == second.pk
    assert Booking.objects.filter(status=Booking.Status.BLOQUEADO).count() == 1


def test_cannot_block_slot_held_by_guest(spa, tomorrow) -> None:
    request_slot(spa, tomorrow, "stay-a")

    with pytest.raises(SlotTaken):
        message_bus.handle_command(BlockSlotCommand(structure_id=spa.pk, unit=None, date=tomorrow, start_time=NINE))


def test_unblock_never_touches_guest_bookings(spa, tomorrow) -> None:
    booking = request_slot(spa, tomorrow, "stay-a")

    result = message_bus.handle_command(UnblockSlotCommand(structure_id=spa.pk, unit=None, date=tomorrow, start_time=NINE))

    assert result is None
    booking.refresh_from_db()
    assert booking.status == Booking.Status.CONFIRMADO


def test_unblock_free_slot_is_a_noop(spa, tomorrow) -> None:
    result = message_bus.handle_command(UnblockSlotCommand(structure_id=spa.pk, unit=None, date=tomorrow, start_time=TEN))
    assert result is None


def test_staff_cannot_change_past_dates(spa, yesterday) -> None:
    with pytest.raises(ValidationFailed):
        message_bus.handle_command(BlockSlotCommand(structure_id=spa.pk, unit=None, date=yesterday, start_time=NINE))
    with pytest.raises(ValidationFailed):
        message_bus.handle_command(
            ScheduleForStayCommand(structure_id=spa.pk, unit=None, date=yesterday, start_time=NINE, stay_id="stay-a")
        )

    old = Booking.objects.create(
        structure=spa,
        structure_name=spa.name,
        date=yesterday,
        start_time=NINE,
        end_time=TEN,
        stay_id="stay-a",
        status=Booking.Status.CONFIRMADO,
    )
    with pytest.raises(ValidationFailed):
        message_bus.handle_command(CancelBookingCommand(booking_id=old.pk, is_staff=True))


def test_deleting_structure_keeps_bookings(spa, tomorrow) -> None:
    booking = request_slot(spa, tomorrow, "stay-a")

    spa.delete()

    booking.refresh_from_db()
    assert booking.structure is None
    assert booking.structure_name == "Spa"
    assert booking.status == Booking.Status.CONFIRMADO
