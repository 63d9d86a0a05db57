"""Schedule grid engine for dejihai."""

from dejihai.engine.timegrid import (
    InvalidTimeError,
    to_minutes,
    to_time_string,
    normalize_time,
    slot_column,
    slot_span,
    time_slots,
    GRID_START_HOUR,
    SLOT_MINUTES,
)
from dejihai.engine.layout import layout_tasks, track_lane_count, LaneAssignment

__all__ = [
    "InvalidTimeError",
    "to_minutes",
    "to_time_string",
    "normalize_time",
    "slot_column",
    "slot_span",
    "time_slots",
    "GRID_START_HOUR",
    "SLOT_MINUTES",
    "layout_tasks",
    "track_lane_count",
    "LaneAssignment",
]
