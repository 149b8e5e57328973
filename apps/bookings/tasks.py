"""Celery tasks for the booking ledger."""

from __future__ import annotations

import logging
from datetime import timedelta

from celery import shared_task  # type: ignore
from django.conf import settings  # type: ignore
from django.utils import timezone  # type: ignore

from shared.application.message_bus import message_bus
from shared.domain.value_objects import format_clock_time

from .application.command_handlers import ExpireStaleRequestsCommand
from .models import Booking

logger = logging.getLogger(__name__)


# ============================================================================
# PERIODIC TASKS (Celery Beat)
# ============================================================================

@shared_task(name="bookings.expire_stale_requests")
def expire_stale_requests() -> dict[str, int]:
    """
    Cancel solicitado requests nobody approved before their day passed.

    Requests for days before today minus STALE_REQUEST_GRACE_DAYS become
    cancelado with source "system". Runs hourly through Celery Beat.

    Returns:
        dict: {"expired": number of cancelled requests}
    """
    grace_days = settings.BOOKING_ENGINE["STALE_REQUEST_GRACE_DAYS"]
    cutoff = timezone.localdate() - timedelta(days=grace_days)

    expired = message_bus.handle_command(ExpireStaleRequestsCommand(cutoff=cutoff))

    if expired:
        logger.info(f"Expired {len(expired)} stale requests (cutoff {cutoff})")
    return {"expired": len(expired)}


# ============================================================================
# NOTIFICATION TASKS
# ============================================================================

def _guest_message(booking: Booking) -> str:
    when = f"{booking.date:%d/%m} às {format_clock_time(booking.start_time)}"
    if booking.status == Booking.Status.SOLICITADO:
        return f"Recebemos sua solicitação para {booking.structure_name} em {when}. Aguarde a confirmação da equipe."
    return f"Seu horário em {booking.structure_name} está confirmado para {when}."


@shared_task(name="bookings.notify_booking_created")
def notify_booking_created(booking_id: int) -> bool:
    """Hand the guest message for a new booking to the delivery channel."""
    try:
        booking = Booking.objects.get(id=booking_id)
    except Booking.DoesNotExist:
        logger.error(f"Booking {booking_id} not found for creation notification")
        return False

    if not booking.is_active:
        logger.info(f"Booking {booking.booking_code} no longer active, notification skipped")
        return False

    logger.info(
        f"[NOTIFICATION] Booking {booking.booking_code} ({booking.status}) "
        f"for stay {booking.stay_id}: {_guest_message(booking)}"
    )
    return True


@shared_task(name="bookings.notify_booking_approved")
def notify_booking_approved(booking_id: int) -> bool:
    """Tell the guest their request was approved."""
    try:
        booking = Booking.objects.get(id=booking_id)
    except Booking.DoesNotExist:
        logger.error(f"Booking {booking_id} not found for approval notification")
        return False

    logger.info(
        f"[NOTIFICATION] Booking {booking.booking_code} approved "
        f"for stay {booking.stay_id}: {_guest_message(booking)}"
    )
    return True
