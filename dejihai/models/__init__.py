"""Data models for dejihai."""

from dejihai.models.location import Location
from dejihai.models.ship import Ship, Block
from dejihai.models.task import Task, TaskStatus, block_display, format_block_info, ship_display_number

__all__ = [
    "Task",
    "TaskStatus",
    "Location",
    "Ship",
    "Block",
    "block_display",
    "format_block_info",
    "ship_display_number",
]
