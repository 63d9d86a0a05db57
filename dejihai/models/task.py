"""Delivery task data model for dejihai."""

from datetime import date, datetime
from enum import Enum
from typing import Optional, Tuple
from pydantic import BaseModel, Field, field_validator

from dejihai.engine.timegrid import normalize_time
from dejihai.models.location import Location
from dejihai.models.ship import Ship, Block


class TaskStatus(str, Enum):
    """Task status enumeration (operator-controlled, independent of time fields)."""
    PENDING = "PENDING"
    SCHEDULED = "SCHEDULED"
    COMPLETED = "COMPLETED"


BLOCK_INFO_SEPARATOR = " - "


class Task(BaseModel):
    """A material-delivery request placed on the schedule grid."""

    id: str = Field(..., description="Unique task identifier (UUID v4)")
    ship_id: Optional[str] = Field(None, description="Ship reference (null for free-form requests)")
    block_info: Optional[str] = Field(None, description="Serialized ship/block path")
    free_form_title: Optional[str] = Field(None, description="Free-form subject when no block is referenced")
    location_id: str = Field(..., description="Drop-off location")
    requested_date: date = Field(..., description="Requested delivery date")
    requested_time: str = Field(..., description="Requested time of day (HH:MM)")
    scheduled_date: Optional[date] = Field(None, description="Confirmed date")
    scheduled_start_time: Optional[str] = Field(None, description="Confirmed start (HH:MM)")
    scheduled_end_time: Optional[str] = Field(
        None,
        pattern=r"^[0-9]{2}:[0-9]{2}$",
        description="Cached end time for display (may pass 23:59)",
    )
    duration: Optional[int] = Field(None, ge=30, multiple_of=30, description="Duration in minutes (60 when absent)")
    status: TaskStatus = Field(TaskStatus.PENDING, description="Lifecycle marker")
    special_status: Optional[str] = Field(None, description="Toggleable attention marker (e.g. holiday)")
    notes: Optional[str] = Field(None, description="Free-text notes")
    person_in_charge: Optional[str] = Field(None, description="Operator responsible for the delivery")
    created_by: Optional[str] = Field(None, description="Who submitted the request")
    created_at: datetime = Field(..., description="Task creation timestamp")
    updated_at: datetime = Field(..., description="Task last update timestamp")

    # Read-side expansions
    ship: Optional[Ship] = None
    location: Optional[Location] = None

    @field_validator("requested_time", "scheduled_start_time")
    @classmethod
    def _validate_clock_time(cls, v):
        if v is None:
            return v
        return normalize_time(v)

    class Config:
        """Pydantic configuration."""
        use_enum_values = True


def format_block_info(ship_number: str, block: Block) -> str:
    """Serialize a ship/block path into the single display string stored on a task."""
    return BLOCK_INFO_SEPARATOR.join(
        [ship_number, block.section, block.large_block, block.medium_block]
    )


def ship_display_number(task: Task) -> str:
    """Ship number as shown on a task card ("S6313" -> "6313")."""
    if task.ship is None or not task.ship.ship_number:
        return ""
    return task.ship.ship_number.replace("S", "", 1)


def block_display(task: Task) -> Tuple[str, str]:
    """Return (section, block name) for a task card.

    Free-form tasks have no section and use their title as the block name.
    """
    parts = task.block_info.split(BLOCK_INFO_SEPARATOR) if task.block_info else []
    section = parts[1] if len(parts) > 1 else ""
    block_name = parts[-1] if parts and parts[-1] else (task.free_form_title or "")
    return section, block_name
