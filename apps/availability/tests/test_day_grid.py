"""Tests for the override store, the day grid and their endpoints."""

from __future__ import annotations

from datetime import time

import pytest
from django.urls import reverse
from rest_framework.test import APIClient

from apps.availability.models import DailyOverride
from apps.availability.services import build_day_grid, clear_override, get_overrides_for_date, set_override
from apps.bookings.application.command_handlers import BlockSlotCommand, CreateBookingCommand
from apps.structures.models import Structure
from shared.application.message_bus import message_bus
from shared.domain.exceptions import NotFound

pytestmark = pytest.mark.django_db


def _slots(grid_entry, unit=None) -> dict[str, str]:
    for unit_entry in grid_entry["units"]:
        if unit_entry["unit"] == unit:
            return {slot["start_time"]: slot["status"] for slot in unit_entry["slots"]}
    raise AssertionError(f"unit {unit!r} not in grid")


def _book(structure, day, stay_id, start, unit=None):
    return message_bus.handle_command(
        CreateBookingCommand(
            structure_id=structure.pk,
            unit=unit,
            date=day,
            start_time=start,
            stay_id=stay_id,
        )
    )


@pytest.fixture
def api_client():
    return APIClient()


def test_set_override_last_write_wins(spa, tomorrow, staff_user) -> None:
    set_override(tomorrow, spa.pk, DailyOverride.Status.CLOSED)
    set_override(tomorrow, spa.pk, DailyOverride.Status.OPEN, actor=staff_user)

    override = DailyOverride.objects.get(date=tomorrow, structure=spa)
    assert override.status == DailyOverride.Status.OPEN
    assert override.updated_by == staff_user
    assert get_overrides_for_date(tomorrow) == {spa.pk: "open"}


def test_clear_override(spa, tomorrow) -> None:
    set_override(tomorrow, spa.pk, DailyOverride.Status.CLOSED)

    assert clear_override(tomorrow, spa.pk) is True
    assert clear_override(tomorrow, spa.pk) is False
    assert get_overrides_for_date(tomorrow) == {}


def test_override_for_unknown_structure(tomorrow) -> None:
    with pytest.raises(NotFound):
        set_override(tomorrow, 999, DailyOverride.Status.CLOSED)


def test_closed_day_keeps_own_booking_visible(spa, tomorrow) -> None:
    _book(spa, tomorrow, "stay-a", time(10, 0))
    set_override(tomorrow, spa.pk, DailyOverride.Status.CLOSED)

    grid = build_day_grid(tomorrow, stay_id="stay-a")

    assert _slots(grid[0]) == {
        "09:00": "indisponivel",
        "10:00": "meu_horario",
        "11:00": "indisponivel",
    }
    assert grid[0]["override"] == "closed"


def test_grid_for_other_stay_and_staff(spa, tomorrow) -> None:
    booking = _book(spa, tomorrow, "stay-a", time(10, 0))
    message_bus.handle_command(
        BlockSlotCommand(structure_id=spa.pk, unit=None, date=tomorrow, start_time=time(11, 0))
    )

    guest_grid = build_day_grid(tomorrow, stay_id="stay-b")
    assert _slots(guest_grid[0]) == {
        "09:00": "disponivel",
        "10:00": "indisponivel",
        "11:00": "bloqueado",
    }
    assert "booking" not in guest_grid[0]["units"][0]["slots"][0]

    staff_grid = build_day_grid(tomorrow, include_bookings=True)
    slots = staff_grid[0]["units"][0]["slots"]
    assert slots[0]["booking"] is None
    assert slots[1]["booking"]["id"] == booking.pk
    assert slots[1]["booking"]["stay_id"] == "stay-a"
    assert slots[2]["booking"]["stay_id"] is None


def test_grid_lists_every_unit(grill, tomorrow) -> None:
    _book(grill, tomorrow, "stay-a", time(12, 0), unit="Churrasqueira 2")

    grid = build_day_grid(tomorrow, stay_id="stay-b")

    assert [unit["unit"] for unit in grid[0]["units"]] == ["Churrasqueira 1", "Churrasqueira 2"]
    assert _slots(grid[0], "Churrasqueira 1")["12:00"] == "disponivel"
    assert _slots(grid[0], "Churrasqueira 2")["12:00"] == "indisponivel"


def test_closed_structure_without_override(tomorrow) -> None:
    sauna = Structure.objects.create(name="Sauna", default_status=Structure.DefaultStatus.CLOSED)
    sauna.time_slots.create(slot_id="15:00-16:00", start_time=time(15), end_time=time(16), label="Tarde")

    assert _slots(build_day_grid(tomorrow, structure_id=sauna.pk)[0]) == {"15:00": "indisponivel"}

    set_override(tomorrow, sauna.pk, DailyOverride.Status.OPEN)
    assert _slots(build_day_grid(tomorrow, structure_id=sauna.pk)[0]) == {"15:00": "disponivel"}


def test_day_grid_endpoint(api_client, spa, grill, guest_a, tomorrow) -> None:
    _book(spa, tomorrow, "stay-a", time(9, 0))
    api_client.force_authenticate(guest_a)

    response = api_client.get(reverse("availability-day-grid"), {"date": str(tomorrow)})

    assert response.status_code == 200
    assert response.data["date"] == tomorrow
    names = [entry["structure_name"] for entry in response.data["structures"]]
    assert names == ["Churrasqueira", "Spa"]
    spa_entry = response.data["structures"][1]
    assert _slots(spa_entry)["09:00"] == "meu_horario"


def test_day_grid_requires_authentication(api_client, tomorrow) -> None:
    response = api_client.get(reverse("availability-day-grid"), {"date": str(tomorrow)})
    assert response.status_code == 401


def test_override_endpoints(api_client, spa, staff_user, guest_a, tomorrow) -> None:
    url = reverse("availability-overrides")
    payload = {"date": str(tomorrow), "structure": spa.pk, "status": "closed"}

    api_client.force_authenticate(guest_a)
    assert api_client.put(url, payload, format="json").status_code == 403

    api_client.force_authenticate(staff_user)
    response = api_client.put(url, payload, format="json")
    assert response.status_code == 200
    assert response.data["status"] == "closed"
    assert response.data["updated_by"] == staff_user.pk

    response = api_client.put(url, {**payload, "status": "open"}, format="json")
    assert response.data["status"] == "open"
    assert DailyOverride.objects.count() == 1

    api_client.force_authenticate(guest_a)
    listed = api_client.get(url, {"date": str(tomorrow)})
    assert [item["status"] for item in listed.data] == ["open"]

    api_client.force_authenticate(staff_user)
    cleared = api_client.post(reverse("availability-overrides-clear"), {"date": str(tomorrow), "structure": spa.pk}, format="json")
    assert cleared.data == {"cleared": True}
    assert DailyOverride.objects.count() == 0


def test_override_rejects_unknown_status(api_client, spa, staff_user, tomorrow) -> None:
    api_client.force_authenticate(staff_user)
    response = api_client.put(
        reverse("availability-overrides"),
        {"date": str(tomorrow), "structure": spa.pk, "status": "maybe"},
        format="json",
    )
    assert response.status_code == 400
