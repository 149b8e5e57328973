"""
Event subscribers of the activity feed

Each handler runs after the ledger transaction committed. It records
one ActivityLog line and, for guest-facing events, enqueues the
notification task.
"""

from __future__ import annotations

import logging

from apps.bookings.domain.events import (
    BookingApproved,
    BookingCancelled,
    BookingCreated,
    BookingRejected,
    BulkSlotsUpdated,
    SlotBlocked,
    SlotUnblocked,
)
from apps.bookings.models import Booking
from shared.domain.value_objects import format_clock_time

from .models import ActivityLog

logger = logging.getLogger(__name__)

SCHEDULE_LINK = "/admin/agendamentos"
STAFF_IDENTIFIER = "equipe"


def _when(event) -> str:
    return f"{event.date:%d/%m} às {format_clock_time(event.start_time)}"


def _record(*, actor_type: str, actor_identifier: str, log_type: str, details: str, booking_id=None) -> ActivityLog:
    entry = ActivityLog.objects.create(
        actor_type=actor_type,
        actor_identifier=actor_identifier,
        type=log_type,
        details=details,
        link=SCHEDULE_LINK,
        booking_id=booking_id,
    )
    logger.debug("Activity %s recorded for booking %s", log_type, booking_id)
    return entry


def on_booking_created(event: BookingCreated) -> None:
    guest = event.guest_name or event.stay_id
    if event.scheduled_by_staff:
        actor_type, identifier = ActivityLog.ActorType.STAFF, STAFF_IDENTIFIER
        log_type = ActivityLog.Type.BOOKING_CREATED_BY_STAFF
        details = f"Equipe agendou {event.structure_name} para {guest} em {_when(event)}"
    else:
        actor_type, identifier = ActivityLog.ActorType.GUEST, guest
        if event.superseded_booking_id:
            log_type = ActivityLog.Type.BOOKING_CHANGED_BY_GUEST
            details = f"Hóspede {guest} *alterou* seu agendamento de {event.structure_name} para {_when(event)}"
        elif event.status == Booking.Status.CONFIRMADO:
            log_type = ActivityLog.Type.BOOKING_CONFIRMED
            details = f"Hóspede {guest} *agendou e confirmou* {event.structure_name} para {_when(event)}"
        else:
            log_type = ActivityLog.Type.BOOKING_REQUESTED
            details = f"Hóspede {guest} *solicitou* {event.structure_name} para {_when(event)}"

    _record(
        actor_type=actor_type,
        actor_identifier=identifier,
        log_type=log_type,
        details=details,
        booking_id=event.booking_id,
    )


def on_booking_cancelled(event: BookingCancelled) -> None:
    guest = event.guest_name or event.stay_id or "bloqueio"
    if event.source == Booking.CancellationSource.GUEST:
        _record(
            actor_type=ActivityLog.ActorType.GUEST,
            actor_identifier=guest,
            log_type=ActivityLog.Type.BOOKING_CANCELLED_BY_GUEST,
            details=f"Hóspede {guest} cancelou o agendamento: {event.structure_name} de {_when(event)}",
            booking_id=event.booking_id,
        )
    elif event.source == Booking.CancellationSource.SYSTEM:
        _record(
            actor_type=ActivityLog.ActorType.SYSTEM,
            actor_identifier="housekeeping",
            log_type=ActivityLog.Type.BOOKING_EXPIRED,
            details=f"Solicitação de {guest} para {event.structure_name} de {_when(event)} expirou sem resposta",
            booking_id=event.booking_id,
        )
    else:
        _record(
            actor_type=ActivityLog.ActorType.STAFF,
            actor_identifier=STAFF_IDENTIFIER,
            log_type=ActivityLog.Type.BOOKING_CANCELLED_BY_STAFF,
            details=f"Equipe cancelou {event.structure_name} de {_when(event)} ({guest})",
            booking_id=event.booking_id,
        )


def on_booking_approved(event: BookingApproved) -> None:
    _record(
        actor_type=ActivityLog.ActorType.STAFF,
        actor_identifier=STAFF_IDENTIFIER,
        log_type=ActivityLog.Type.BOOKING_APPROVED,
        details=f"Equipe aprovou {event.structure_name} de {_when(event)} para {event.guest_name or event.stay_id}",
        booking_id=event.booking_id,
    )


def on_booking_rejected(event: BookingRejected) -> None:
    details = f"Equipe recusou {event.structure_name} de {_when(event)} para {event.guest_name or event.stay_id}"
    if event.reason:
        details = f"{details}: {event.reason}"
    _record(
        actor_type=ActivityLog.ActorType.STAFF,
        actor_identifier=STAFF_IDENTIFIER,
        log_type=ActivityLog.Type.BOOKING_REJECTED,
        details=details,
        booking_id=event.booking_id,
    )


def on_slot_blocked(event: SlotBlocked) -> None:
    unit = f" ({event.unit})" if event.unit else ""
    _record(
        actor_type=ActivityLog.ActorType.STAFF,
        actor_identifier=STAFF_IDENTIFIER,
        log_type=ActivityLog.Type.SLOT_BLOCKED,
        details=f"Equipe bloqueou {event.structure_name}{unit} em {_when(event)}",
        booking_id=event.booking_id,
    )


def on_slot_unblocked(event: SlotUnblocked) -> None:
    unit = f" ({event.unit})" if event.unit else ""
    _record(
        actor_type=ActivityLog.ActorType.STAFF,
        actor_identifier=STAFF_IDENTIFIER,
        log_type=ActivityLog.Type.SLOT_UNBLOCKED,
        details=f"Equipe liberou {event.structure_name}{unit} em {_when(event)}",
        booking_id=event.booking_id,
    )


def on_bulk_slots_updated(event: BulkSlotsUpdated) -> None:
    if event.action == "block":
        log_type = ActivityLog.Type.BULK_BLOCK
        details = f"Equipe bloqueou {len(event.applied)} horário(s) em {event.date:%d/%m}"
    else:
        log_type = ActivityLog.Type.BULK_RELEASE
        details = f"Equipe liberou {len(event.applied)} horário(s) em {event.date:%d/%m}"
    if event.skipped:
        details = f"{details}; {len(event.skipped)} ignorado(s) por reserva de hóspede"
    _record(
        actor_type=ActivityLog.ActorType.STAFF,
        actor_identifier=STAFF_IDENTIFIER,
        log_type=log_type,
        details=details,
    )


def enqueue_created_notification(event: BookingCreated) -> None:
    from apps.bookings.tasks import notify_booking_created

    notify_booking_created.delay(event.booking_id)


def enqueue_approved_notification(event: BookingApproved) -> None:
    from apps.bookings.tasks import notify_booking_approved

    notify_booking_approved.delay(event.booking_id)


EVENT_HANDLERS = {
    BookingCreated: [on_booking_created, enqueue_created_notification],
    BookingCancelled: [on_booking_cancelled],
    BookingApproved: [on_booking_approved, enqueue_approved_notification],
    BookingRejected: [on_booking_rejected],
    SlotBlocked: [on_slot_blocked],
    SlotUnblocked: [on_slot_unblocked],
    BulkSlotsUpdated: [on_bulk_slots_updated],
}
