"""Fixtures shared by the service-level tests."""

from __future__ import annotations

from datetime import time, timedelta

import pytest
from django.utils import timezone

from apps.structures.models import Structure, TimeSlot
from apps.users.models import User


def add_slots(structure: Structure, *windows: tuple[str, str]) -> Structure:
    for start, end in windows:
        TimeSlot.objects.create(
            structure=structure,
            slot_id=f"{start}-{end}",
            start_time=time.fromisoformat(start),
            end_time=time.fromisoformat(end),
            label=f"{start}-{end}",
        )
    return structure


@pytest.fixture
def tomorrow():
    return timezone.localdate() + timedelta(days=1)


@pytest.fixture
def yesterday():
    return timezone.localdate() - timedelta(days=1)


@pytest.fixture
def staff_user(db):
    return User.objects.create_staff(email="equipe@example.com", password="StrongPass123")


@pytest.fixture
def guest_a(db):
    return User.objects.create_user(
        email="guest-a@example.com",
        password="StrongPass123",
        stay_id="stay-a",
        cabin_name="Cabana Ipê",
    )


@pytest.fixture
def guest_b(db):
    return User.objects.create_user(
        email="guest-b@example.com",
        password="StrongPass123",
        stay_id="stay-b",
        cabin_name="Cabana Jatobá",
    )


@pytest.fixture
def spa(db):
    structure = Structure.objects.create(
        name="Spa",
        management_type=Structure.ManagementType.BY_STRUCTURE,
        default_status=Structure.DefaultStatus.OPEN,
        approval_mode=Structure.ApprovalMode.AUTOMATIC,
    )
    return add_slots(structure, ("09:00", "10:00"), ("10:00", "11:00"), ("11:00", "12:00"))


@pytest.fixture
def grill(db):
    structure = Structure.objects.create(
        name="Churrasqueira",
        management_type=Structure.ManagementType.BY_UNIT,
        units=["Churrasqueira 1", "Churrasqueira 2"],
        default_status=Structure.DefaultStatus.OPEN,
        approval_mode=Structure.ApprovalMode.MANUAL,
    )
    return add_slots(structure, ("12:00", "14:00"), ("18:00", "20:00"))
