"""Time model for the day-by-location schedule grid.

Converts between clock strings and minute offsets, and between durations and
grid coordinates. The grid covers 07:00-19:00 at 30-minute resolution
(25 slots); column 1 holds the location label, so the first slot is column 2.
"""

import math
import re
from typing import List


GRID_START_HOUR = 7
GRID_END_HOUR = 19
SLOT_MINUTES = 30
GRID_SLOT_COUNT = 25
LABEL_COLUMN = 1

# Applied when a task has no stored duration
DEFAULT_DURATION_MINUTES = 60

_CLOCK_RE = re.compile(r"([0-9]{1,2}):([0-9]{2})")


class InvalidTimeError(ValueError):
    """Raised when a clock string or minute offset cannot be converted."""


def to_minutes(time_string: str) -> int:
    """Parse "HH:MM" into minutes since midnight.

    Raises:
        InvalidTimeError: If the string is not a valid 24-hour clock time
    """
    match = _CLOCK_RE.fullmatch(time_string or "")
    if not match:
        raise InvalidTimeError(f"Invalid time string: {time_string!r}")
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise InvalidTimeError(f"Time out of range: {time_string!r}")
    return hours * 60 + minutes


def to_time_string(minutes: int) -> str:
    """Format minutes since midnight as zero-padded "HH:MM".

    Values past 23:59 are not wrapped ("24:30" for 1470).
    """
    if minutes < 0:
        raise InvalidTimeError(f"Negative minute offset: {minutes}")
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def normalize_time(time_string: str) -> str:
    """Validate a clock string and return it zero-padded ("9:00" -> "09:00").

    Raises:
        InvalidTimeError: If the string is not a valid 24-hour clock time
    """
    return to_time_string(to_minutes(time_string))


def slot_column(time_string: str, grid_start_hour: int = GRID_START_HOUR) -> int:
    """Map a clock time to its 1-based grid column (07:00 -> 2)."""
    hour, minute = divmod(to_minutes(time_string), 60)
    return (hour - grid_start_hour) * 2 + (1 if minute == 30 else 0) + LABEL_COLUMN + 1


def slot_span(duration_minutes: int) -> int:
    """Number of grid columns a task of the given duration occupies."""
    return math.ceil(duration_minutes / SLOT_MINUTES)


def time_slots() -> List[str]:
    """Slot labels for the grid header, "07:00" through "19:00"."""
    start = GRID_START_HOUR * 60
    return [to_time_string(start + i * SLOT_MINUTES) for i in range(GRID_SLOT_COUNT)]


def effective_start_time(task) -> str:
    """Scheduled start if set, else the requested time."""
    return task.scheduled_start_time or task.requested_time


def effective_start_minutes(task) -> int:
    return to_minutes(effective_start_time(task))


def effective_duration(task) -> int:
    return task.duration or DEFAULT_DURATION_MINUTES


def effective_end_minutes(task) -> int:
    return effective_start_minutes(task) + effective_duration(task)
