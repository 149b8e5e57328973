"""
Booking Command Handlers

These are the use cases of the booking ledger. Each one runs inside a
single unit of work: structure rows are locked first, then the
exclusivity check and the write happen in the same transaction.

Commands:
- CreateBookingCommand: Guest requests a slot for their stay
- ScheduleForStayCommand: Staff books a slot directly for a stay
- CancelBookingCommand: Guest or staff cancels a booking
- ApproveBookingCommand / RejectBookingCommand: Staff decides a request
- BlockSlotCommand / UnblockSlotCommand: Staff closes or reopens one slot
- MarkConfirmationSentCommand: Staff sent the confirmation message
- ExpireStaleRequestsCommand: Housekeeping of forgotten requests
"""

from dataclasses import dataclass, field
from datetime import date, time
from typing import List, Optional
import logging

from shared.application.uow import DjangoUnitOfWork
from shared.domain.exceptions import NotOwner, ValidationFailed
from apps.availability.domain.resolver import is_policy_open
from apps.availability.services import get_overrides_for_date
from apps.bookings import services
from apps.bookings.domain.events import (
    BookingApproved,
    BookingCancelled,
    BookingCreated,
    BookingRejected,
    SlotBlocked,
    SlotUnblocked,
)
from apps.bookings.domain.exceptions import InvalidTransition, SlotClosed, SlotTaken
from apps.bookings.models import Booking

logger = logging.getLogger(__name__)


# ===== Commands =====

@dataclass
class CreateBookingCommand:
    """
    Command to book a slot for a stay

    `unit` is ignored for structures managed as a whole and required
    for structures managed by unit.
    """
    structure_id: int
    unit: Optional[str]
    date: date
    start_time: time
    stay_id: str
    guest_name: str = ''
    end_time: Optional[time] = None
    preference_time: Optional[time] = None
    selected_options: List[str] = field(default_factory=list)
    notes: str = ''
    created_by_id: Optional[int] = None


@dataclass
class ScheduleForStayCommand(CreateBookingCommand):
    """Staff direct schedule: always confirmado, ignores the open/closed policy"""


@dataclass
class CancelBookingCommand:
    """Command to cancel a booking; guests pass their stay id"""
    booking_id: int
    stay_id: Optional[str] = None
    is_staff: bool = False
    reason: str = ''


@dataclass
class ApproveBookingCommand:
    """Command to approve a pending request"""
    booking_id: int


@dataclass
class RejectBookingCommand:
    """Command to decline a pending request"""
    booking_id: int
    reason: str = ''


@dataclass
class BlockSlotCommand:
    """Command to block one slot for one day"""
    structure_id: int
    unit: Optional[str]
    date: date
    start_time: time
    created_by_id: Optional[int] = None


@dataclass
class UnblockSlotCommand:
    """Command to release a staff block"""
    structure_id: int
    unit: Optional[str]
    date: date
    start_time: time


@dataclass
class MarkConfirmationSentCommand:
    """Command to take a booking off the awaiting-confirmation queue"""
    booking_id: int


@dataclass
class ExpireStaleRequestsCommand:
    """Command to cancel solicitado requests for days before `cutoff`"""
    cutoff: date


# ===== Event builders =====

def booking_created_event(booking: Booking, *, scheduled_by_staff: bool, superseded: Optional[Booking]) -> BookingCreated:
    return BookingCreated(
        aggregate_id=booking.pk,
        booking_id=booking.pk,
        structure_id=booking.structure_id,
        structure_name=booking.structure_name,
        unit=booking.unit_or_none,
        date=booking.date,
        start_time=booking.start_time,
        end_time=booking.end_time,
        stay_id=booking.stay_id,
        guest_name=booking.guest_name,
        status=booking.status,
        scheduled_by_staff=scheduled_by_staff,
        superseded_booking_id=superseded.pk if superseded else None,
    )


def booking_cancelled_event(booking: Booking, previous_status: str) -> BookingCancelled:
    return BookingCancelled(
        aggregate_id=booking.pk,
        booking_id=booking.pk,
        structure_id=booking.structure_id,
        structure_name=booking.structure_name,
        date=booking.date,
        start_time=booking.start_time,
        stay_id=booking.stay_id,
        guest_name=booking.guest_name,
        previous_status=previous_status,
        source=booking.cancellation_source,
        reason=booking.cancellation_reason,
    )


def slot_event(event_type, booking: Booking):
    return event_type(
        aggregate_id=booking.pk,
        booking_id=booking.pk,
        structure_id=booking.structure_id,
        structure_name=booking.structure_name,
        unit=booking.unit_or_none,
        date=booking.date,
        start_time=booking.start_time,
    )


# ===== Command Handlers =====

class CreateBookingHandler:
    """
    Handler for CreateBooking command

    Strategy (Defense in Depth):
    1. Start database transaction (atomic)
    2. Lock the structure row (SELECT FOR UPDATE)
    3. Re-read the slot's active booking and the day's policy
    4. Supersede the stay's previous booking on this structure and day
    5. Insert the new booking
    6. Publish BookingCreated after commit
    7. Partial unique constraints as final safety net (-> SlotTaken)
    """

    scheduled_by_staff = False

    def handle(self, command: CreateBookingCommand) -> Booking:
        logger.info(
            f"Booking request from stay {command.stay_id} for structure "
            f"{command.structure_id} on {command.date} at {command.start_time}"
        )

        if not command.stay_id:
            raise ValidationFailed("A stay is required to book a slot")
        if self.scheduled_by_staff:
            services.ensure_staff_can_edit(command.date)

        with services.slot_conflicts_as_slot_taken(f"booking structure {command.structure_id}"):
            with DjangoUnitOfWork() as uow:
                structure = services.lock_structure(command.structure_id)
                unit = structure.normalize_unit(command.unit)
                time_slot = structure.find_time_slot(command.start_time, command.end_time)
                if not self.scheduled_by_staff:
                    services.ensure_slot_not_started(command.date, time_slot)

                own_booking = services.ensure_slot_is_free(
                    structure, unit, command.date, time_slot, stay_id=command.stay_id
                )
                if own_booking is None and not self.scheduled_by_staff:
                    if not is_policy_open(structure, get_overrides_for_date(command.date)):
                        logger.warning(
                            f"Structure {structure.pk} is closed on {command.date}, "
                            f"rejecting request from stay {command.stay_id}"
                        )
                        raise SlotClosed(f"{structure.name} is closed on {command.date}")

                previous = list(
                    services._lock_queryset_if_possible(
                        Booking.objects.held_by_stay(command.stay_id).filter(
                            structure=structure,
                            date=command.date,
                        )
                    )
                )
                for old in previous:
                    old.cancel(Booking.CancellationSource.SUPERSEDED, reason="Substituída por nova solicitação")

                booking = Booking.objects.create(
                    structure=structure,
                    structure_name=structure.name,
                    unit=unit,
                    date=command.date,
                    start_time=time_slot.start_time,
                    end_time=time_slot.end_time,
                    stay_id=command.stay_id,
                    guest_name=command.guest_name,
                    status=self._initial_status(structure),
                    preference_time=command.preference_time,
                    selected_options=command.selected_options,
                    notes=command.notes,
                    created_by_id=command.created_by_id,
                )
                if booking.status == Booking.Status.CONFIRMADO:
                    booking.confirmed_at = booking.created_at
                    booking.save(update_fields=["confirmed_at"])

                for old in previous:
                    old.superseded_by = booking
                    old.save(update_fields=["superseded_by", "updated_at"])

                booking.add_event(
                    booking_created_event(
                        booking,
                        scheduled_by_staff=self.scheduled_by_staff,
                        superseded=previous[0] if previous else None,
                    )
                )
                uow.collect_events(booking)

        logger.info(
            f"Booking {booking.booking_code} (ID: {booking.pk}) created as {booking.status}"
            + (f", superseding {[old.pk for old in previous]}" if previous else "")
        )
        return booking

    def _initial_status(self, structure) -> str:
        if self.scheduled_by_staff or not structure.requires_approval:
            return Booking.Status.CONFIRMADO
        return Booking.Status.SOLICITADO


class ScheduleForStayHandler(CreateBookingHandler):
    """Handler for the staff direct schedule"""

    scheduled_by_staff = True


class CancelBookingHandler:
    """Handler for cancelling a booking or a block"""

    def handle(self, command: CancelBookingCommand) -> Booking:
        logger.info(f"Cancelling booking {command.booking_id}")

        with DjangoUnitOfWork() as uow:
            booking = services.get_booking(command.booking_id, lock=True)

            if not command.is_staff and (not command.stay_id or booking.stay_id != command.stay_id):
                logger.warning(f"Stay {command.stay_id} tried to cancel booking {booking.pk} of another stay")
                raise NotOwner(f"Booking {booking.pk} does not belong to this stay")

            if booking.status == Booking.Status.CANCELADO:
                logger.info(f"Booking {booking.pk} already cancelled")
                return booking

            if command.is_staff:
                services.ensure_staff_can_edit(booking.date)

            previous_status = booking.status
            source = Booking.CancellationSource.STAFF if command.is_staff else Booking.CancellationSource.GUEST
            booking.cancel(source, command.reason)
            booking.add_event(booking_cancelled_event(booking, previous_status))
            uow.collect_events(booking)

        logger.info(f"Booking {booking.booking_code} cancelled by {source}")
        return booking


class ApproveBookingHandler:
    """Handler for approving a request (solicitado -> confirmado)"""

    def handle(self, command: ApproveBookingCommand) -> Booking:
        logger.info(f"Approving booking {command.booking_id}")

        with DjangoUnitOfWork() as uow:
            booking = services.get_booking(command.booking_id, lock=True)
            if booking.status != Booking.Status.SOLICITADO:
                raise InvalidTransition(
                    f"Only requests awaiting approval can be approved (booking is {booking.status})",
                    status=booking.status,
                )
            services.ensure_staff_can_edit(booking.date)

            booking.confirm()
            booking.add_event(
                BookingApproved(
                    aggregate_id=booking.pk,
                    booking_id=booking.pk,
                    structure_id=booking.structure_id,
                    structure_name=booking.structure_name,
                    date=booking.date,
                    start_time=booking.start_time,
                    stay_id=booking.stay_id,
                    guest_name=booking.guest_name,
                )
            )
            uow.collect_events(booking)

        logger.info(f"Booking {booking.booking_code} approved")
        return booking


class RejectBookingHandler:
    """Handler for declining a request (solicitado -> cancelado)"""

    def handle(self, command: RejectBookingCommand) -> Booking:
        logger.info(f"Rejecting booking {command.booking_id}")

        with DjangoUnitOfWork() as uow:
            booking = services.get_booking(command.booking_id, lock=True)
            if booking.status != Booking.Status.SOLICITADO:
                raise InvalidTransition(
                    f"Only requests awaiting approval can be rejected (booking is {booking.status})",
                    status=booking.status,
                )
            services.ensure_staff_can_edit(booking.date)

            booking.cancel(Booking.CancellationSource.STAFF, command.reason)
            booking.add_event(
                BookingRejected(
                    aggregate_id=booking.pk,
                    booking_id=booking.pk,
                    structure_id=booking.structure_id,
                    structure_name=booking.structure_name,
                    date=booking.date,
                    start_time=booking.start_time,
                    stay_id=booking.stay_id,
                    guest_name=booking.guest_name,
                    reason=command.reason,
                )
            )
            uow.collect_events(booking)

        logger.info(f"Booking {booking.booking_code} rejected")
        return booking


class BlockSlotHandler:
    """
    Handler for blocking one slot

    Blocking an already blocked slot returns the existing block. A slot
    held by a stay cannot be blocked.
    """

    def handle(self, command: BlockSlotCommand) -> Booking:
        logger.info(
            f"Blocking structure {command.structure_id} unit {command.unit!r} "
            f"on {command.date} at {command.start_time}"
        )
        services.ensure_staff_can_edit(command.date)

        with services.slot_conflicts_as_slot_taken(f"blocking structure {command.structure_id}"):
            with DjangoUnitOfWork() as uow:
                structure = services.lock_structure(command.structure_id)
                unit = structure.normalize_unit(command.unit)
                time_slot = structure.find_time_slot(command.start_time)

                current = services.find_slot_booking(structure, unit, command.date, time_slot)
                if current is not None:
                    if current.status == Booking.Status.BLOQUEADO:
                        logger.info(f"Slot already blocked by booking {current.pk}")
                        return current
                    logger.warning(f"Cannot block slot held by booking {current.pk} ({current.status})")
                    raise SlotTaken(
                        f"Slot {time_slot.label} is held by a guest booking",
                        booking_id=current.pk,
                    )

                booking = Booking.objects.create(
                    structure=structure,
                    structure_name=structure.name,
                    unit=unit,
                    date=command.date,
                    start_time=time_slot.start_time,
                    end_time=time_slot.end_time,
                    status=Booking.Status.BLOQUEADO,
                    created_by_id=command.created_by_id,
                )
                booking.add_event(slot_event(SlotBlocked, booking))
                uow.collect_events(booking)

        logger.info(f"Slot blocked as booking {booking.booking_code}")
        return booking


class UnblockSlotHandler:
    """
    Handler for releasing a staff block

    No-op when the slot is not blocked; guest bookings are never touched.
    """

    def handle(self, command: UnblockSlotCommand) -> Optional[Booking]:
        logger.info(
            f"Unblocking structure {command.structure_id} unit {command.unit!r} "
            f"on {command.date} at {command.start_time}"
        )
        services.ensure_staff_can_edit(command.date)

        with DjangoUnitOfWork() as uow:
            structure = services.lock_structure(command.structure_id)
            unit = structure.normalize_unit(command.unit)
            time_slot = structure.find_time_slot(command.start_time)

            current = services.find_slot_booking(structure, unit, command.date, time_slot)
            if current is None or current.status != Booking.Status.BLOQUEADO:
                logger.info("Nothing to unblock")
                return None

            current.cancel(Booking.CancellationSource.STAFF, "Desbloqueado")
            current.add_event(slot_event(SlotUnblocked, current))
            uow.collect_events(current)

        logger.info(f"Block {current.booking_code} released")
        return current


class MarkConfirmationSentHandler:
    """Handler for the awaiting-confirmation queue"""

    def handle(self, command: MarkConfirmationSentCommand) -> Booking:
        with DjangoUnitOfWork():
            booking = services.get_booking(command.booking_id, lock=True)
            if booking.confirmation_sent_at is None:
                booking.mark_confirmation_sent()
                logger.info(f"Confirmation message for booking {booking.pk} marked as sent")
        return booking


class ExpireStaleRequestsHandler:
    """Handler for housekeeping: requests nobody decided in time"""

    def handle(self, command: ExpireStaleRequestsCommand) -> List[int]:
        expired: List[int] = []

        with DjangoUnitOfWork() as uow:
            stale = services._lock_queryset_if_possible(
                Booking.objects.filter(
                    status=Booking.Status.SOLICITADO,
                    date__lt=command.cutoff,
                ).order_by("pk")
            )
            for booking in stale:
                booking.cancel(Booking.CancellationSource.SYSTEM, "Solicitação expirada")
                booking.add_event(booking_cancelled_event(booking, Booking.Status.SOLICITADO))
                uow.collect_events(booking)
                expired.append(booking.pk)

        if expired:
            logger.info(f"Expired {len(expired)} stale requests before {command.cutoff}")
        return expired


def get_command_handlers() -> dict:
    """Command type -> handler callable, registered on the message bus at startup"""
    from apps.bookings.application.bulk import BulkSlotsCommand, BulkSlotsHandler

    return {
        CreateBookingCommand: CreateBookingHandler().handle,
        ScheduleForStayCommand: ScheduleForStayHandler().handle,
        CancelBookingCommand: CancelBookingHandler().handle,
        ApproveBookingCommand: ApproveBookingHandler().handle,
        RejectBookingCommand: RejectBookingHandler().handle,
        BlockSlotCommand: BlockSlotHandler().handle,
        UnblockSlotCommand: UnblockSlotHandler().handle,
        MarkConfirmationSentCommand: MarkConfirmationSentHandler().handle,
        ExpireStaleRequestsCommand: ExpireStaleRequestsHandler().handle,
        BulkSlotsCommand: BulkSlotsHandler().handle,
    }
