"""
Time-Slot Generator

Derives the daily grid of a structure from an opening window, a slot
duration and the gap left between consecutive slots.
"""

from dataclasses import dataclass
from datetime import time
from typing import List

from shared.domain.exceptions import ValidationFailed
from shared.domain.value_objects import (
    TimeWindow,
    minutes_since_midnight,
    parse_clock_time,
    time_from_minutes,
)


@dataclass(frozen=True)
class SlotDefinition:
    """A slot ready to be stored on a structure"""
    slot_id: str
    start_time: time
    end_time: time
    label: str

    @classmethod
    def from_window(cls, window: TimeWindow, label: str | None = None) -> 'SlotDefinition':
        return cls(
            slot_id=window.label,
            start_time=window.start,
            end_time=window.end,
            label=label or window.label,
        )


def generate_time_slots(start, end, duration_minutes: int, gap_minutes: int = 0) -> List[SlotDefinition]:
    """
    Generate consecutive slots inside [start, end]

    Slots are `duration_minutes` long and separated by `gap_minutes`.
    Generation stops as soon as the next slot would end after `end`, so
    a duration longer than the window yields no slots at all.

    Raises:
        ValidationFailed: malformed times, start >= end, duration <= 0
            or gap < 0
    """
    window = TimeWindow.parse(start, end)

    if isinstance(duration_minutes, bool) or not isinstance(duration_minutes, int) or duration_minutes <= 0:
        raise ValidationFailed("Slot duration must be a positive number of minutes")
    if isinstance(gap_minutes, bool) or not isinstance(gap_minutes, int) or gap_minutes < 0:
        raise ValidationFailed("Gap between slots cannot be negative")

    end_minutes = minutes_since_midnight(window.end)
    current = minutes_since_midnight(window.start)
    slots: List[SlotDefinition] = []

    while current + duration_minutes <= end_minutes:
        slot_window = TimeWindow(
            time_from_minutes(current),
            time_from_minutes(current + duration_minutes),
        )
        slots.append(SlotDefinition.from_window(slot_window))
        current += duration_minutes + gap_minutes

    return slots


def manual_time_slot(start, end, label: str | None = None) -> SlotDefinition:
    """A single hand-entered slot; duplicates of existing ranges are allowed"""
    window = TimeWindow(parse_clock_time(start), parse_clock_time(end))
    return SlotDefinition.from_window(window, label=(label or '').strip() or None)
