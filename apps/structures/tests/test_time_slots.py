"""Tests for the time-slot generator."""

from __future__ import annotations

from datetime import time

import pytest

from apps.structures.domain.time_slots import generate_time_slots, manual_time_slot
from shared.domain.exceptions import ValidationFailed


def test_generates_consecutive_slots_with_gap() -> None:
    slots = generate_time_slots("09:00", "12:00", 50, 10)

    assert [slot.label for slot in slots] == ["09:00-09:50", "10:00-10:50", "11:00-11:50"]
    assert [slot.slot_id for slot in slots] == [slot.label for slot in slots]
    assert slots[0].start_time == time(9, 0)
    assert slots[-1].end_time == time(11, 50)


def test_last_slot_may_end_exactly_at_window_end() -> None:
    slots = generate_time_slots("18:00", "20:00", 60)

    assert [slot.label for slot in slots] == ["18:00-19:00", "19:00-20:00"]


def test_slot_that_would_overflow_is_not_generated() -> None:
    slots = generate_time_slots("09:00", "10:30", 60, 15)

    assert [slot.label for slot in slots] == ["09:00-10:00"]


def test_duration_longer_than_window_yields_no_slots() -> None:
    assert generate_time_slots("09:00", "09:30", 45) == []


@pytest.mark.parametrize(
    "start, end, duration, gap",
    [
        ("10:00", "09:00", 30, 0),
        ("10:00", "10:00", 30, 0),
        ("09:00", "12:00", 0, 0),
        ("09:00", "12:00", -15, 0),
        ("09:00", "12:00", 30, -5),
        ("9h", "12:00", 30, 0),
        ("25:00", "26:00", 30, 0),
    ],
)
def test_invalid_generator_input_is_rejected(start, end, duration, gap) -> None:
    with pytest.raises(ValidationFailed):
        generate_time_slots(start, end, duration, gap)


def test_manual_slot_defaults_label_to_range() -> None:
    slot = manual_time_slot("14:00", "15:30")

    assert slot.label == "14:00-15:30"
    assert slot.slot_id == "14:00-15:30"


def test_manual_slot_keeps_custom_label() -> None:
    slot = manual_time_slot("14:00", "15:30", "Degustação")

    assert slot.label == "Degustação"


def test_manual_slot_rejects_degenerate_window() -> None:
    with pytest.raises(ValidationFailed):
        manual_time_slot("15:00", "15:00")
