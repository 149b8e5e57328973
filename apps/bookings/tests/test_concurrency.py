"""Concurrent requests for one slot against a real database."""

from __future__ import annotations

import threading
from datetime import time

import pytest
from django.db import connection

from apps.bookings.application.command_handlers import CreateBookingCommand
from apps.bookings.domain.exceptions import SlotTaken
from apps.bookings.models import Booking
from shared.application.message_bus import message_bus

CONTENDERS = 4


@pytest.mark.django_db(transaction=True)
def test_concurrent_requests_for_one_slot_have_a_single_winner(spa, tomorrow) -> None:
    barrier = threading.Barrier(CONTENDERS)
    created: list[Booking] = []
    taken: list[str] = []
    errors: list[Exception] = []

    def request(stay_id: str) -> None:
        try:
            barrier.wait()
            created.append(
                message_bus.handle_command(
                    CreateBookingCommand(
                        structure_id=spa.pk,
                        unit=None,
                        date=tomorrow,
                        start_time=time(9, 0),
                        stay_id=stay_id,
                    )
                )
            )
        except SlotTaken:
            taken.append(stay_id)
        except Exception as exc:
            errors.append(exc)
        finally:
            connection.close()

    threads = [threading.Thread(target=request, args=(f"stay-{n}",)) for n in range(CONTENDERS)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=60)

    assert errors == []
    assert len(created) == 1
    assert len(taken) == CONTENDERS - 1
    assert Booking.objects.active().filter(date=tomorrow, start_time=time(9, 0)).count() == 1
    assert Booking.objects.get(status=Booking.Status.CONFIRMADO).stay_id == created[0].stay_id
