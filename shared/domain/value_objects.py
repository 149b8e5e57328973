"""
Common Value Objects

- ClockTime helpers: parse/format the "HH:mm" strings used on the wire
- TimeWindow: a (start, end) window on a day's grid
"""

from dataclasses import dataclass
from datetime import datetime, time, timedelta

from shared.domain.base import ValueObject
from shared.domain.exceptions import ValidationFailed

CLOCK_FORMAT = '%H:%M'


def parse_clock_time(value) -> time:
    """
    Parse "HH:mm" into a time

    Accepts an existing time instance unchanged (seconds are dropped).
    Raises ValidationFailed for anything else.
    """
    if isinstance(value, time):
        return value.replace(second=0, microsecond=0)
    if not isinstance(value, str):
        raise ValidationFailed(f"Expected a time in HH:mm format, got {value!r}")
    try:
        return datetime.strptime(value.strip(), CLOCK_FORMAT).time()
    except ValueError:
        raise ValidationFailed(f"Invalid time {value!r}, expected HH:mm")


def format_clock_time(value: time) -> str:
    return value.strftime(CLOCK_FORMAT)


def minutes_since_midnight(value: time) -> int:
    return value.hour * 60 + value.minute


def time_from_minutes(minutes: int) -> time:
    return (datetime.min + timedelta(minutes=minutes)).time()


@dataclass(frozen=True)
class TimeWindow(ValueObject):
    """
    Time window value object

    Represents [start, end) within a single calendar day.
    Degenerate windows (zero or negative length) are rejected.
    """
    start: time
    end: time

    def __post_init__(self):
        if self.start >= self.end:
            raise ValidationFailed(
                f"Start time ({format_clock_time(self.start)}) must be before "
                f"end time ({format_clock_time(self.end)})"
            )

    @classmethod
    def parse(cls, start, end) -> 'TimeWindow':
        return cls(parse_clock_time(start), parse_clock_time(end))

    @property
    def label(self) -> str:
        return f"{format_clock_time(self.start)}-{format_clock_time(self.end)}"

    def __str__(self):
        return self.label
