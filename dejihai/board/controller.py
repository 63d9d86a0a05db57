"""Schedule board interaction controller.

Mediates operator gestures on the day grid: moving a task to another time
slot, resizing its duration, and toggling its special-status marker.

Every mutation is a two-phase transition:
1. apply a provisional change to the local snapshot (visible immediately)
2. ask the store to persist it; if the store reports failure, post an error
   notice and replace the snapshot with a fresh read of the store

Requests are not serialized per task. Two gestures on the same task before
the first request settles can race, and the store keeps whichever write
arrives last.
"""

import logging
import math
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional

from dejihai.board.store import TaskStore
from dejihai.engine.layout import LaneAssignment, layout_tasks
from dejihai.engine.timegrid import (
    InvalidTimeError,
    SLOT_MINUTES,
    effective_duration,
    effective_start_minutes,
    normalize_time,
    to_minutes,
    to_time_string,
)
from dejihai.models.constants import (
    HOLIDAY_MARKER,
    PIXELS_PER_SLOT,
    NOTICE_SCHEDULE_UPDATED,
    NOTICE_SCHEDULE_UPDATE_FAILED,
    NOTICE_DURATION_UPDATED,
    NOTICE_DURATION_UPDATE_FAILED,
    NOTICE_SPECIAL_STATUS_FAILED,
    NOTICE_LOAD_FAILED,
)
from dejihai.models.task import Task

logger = logging.getLogger(__name__)

MIN_DURATION_MINUTES = SLOT_MINUTES


class NoticeKind(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class Notice:
    """Transient message shown to the operator after a gesture."""

    kind: NoticeKind
    text: str


@dataclass(frozen=True)
class DropTarget:
    """A grid cell a task was dropped on."""

    location_id: str
    time_slot: str

    @classmethod
    def parse(cls, cell_id: str) -> Optional["DropTarget"]:
        """Decode a cell id of the form ``<location_id>_<HH:MM>``.

        Returns None for ids that do not name a valid cell.
        """
        location_id, _, time_slot = (cell_id or "").rpartition("_")
        if not location_id or not time_slot:
            return None
        try:
            time_slot = normalize_time(time_slot)
        except InvalidTimeError:
            return None
        return cls(location_id=location_id, time_slot=time_slot)


@dataclass(frozen=True)
class ResizeDrag:
    """An in-progress resize gesture."""

    task_id: str
    anchor_x: float
    anchor_duration: int
    stored_duration: Optional[int]


def quantize_resize_delta(delta_x: float) -> int:
    """Convert horizontal displacement to whole grid slots, in minutes.

    Halfway points round up, so +50 units is one slot and -50 units is zero.
    """
    return math.floor(delta_x / PIXELS_PER_SLOT + 0.5) * SLOT_MINUTES


class ScheduleBoard:
    """Local snapshot of one day's tasks plus the gestures that mutate it."""

    def __init__(self, store: TaskStore, day: date):
        self.store = store
        self.day = day
        self.tasks: List[Task] = []
        self.notice: Optional[Notice] = None
        self.resizing: Optional[ResizeDrag] = None

    # Snapshot

    def refresh(self) -> bool:
        """Replace the snapshot with the store's tasks for the day."""
        result = self.store.list_tasks(self.day)
        if not result.ok:
            logger.error(f"Failed to load tasks for {self.day}: {result.error}")
            self.notice = Notice(NoticeKind.ERROR, NOTICE_LOAD_FAILED)
            return False
        self.tasks = list(result.tasks)
        return True

    def find(self, task_id: str) -> Optional[Task]:
        return next((t for t in self.tasks if t.id == task_id), None)

    def tasks_at(self, location_id: str) -> List[Task]:
        return [t for t in self.tasks if t.location_id == location_id]

    def layout_for(self, location_id: str) -> Dict[str, LaneAssignment]:
        """Lane layout of the current snapshot for one location."""
        return layout_tasks(self.tasks_at(location_id))

    def dismiss_notice(self) -> None:
        self.notice = None

    def _apply_local(self, task_id: str, **changes: Any) -> None:
        self.tasks = [t.model_copy(update=changes) if t.id == task_id else t for t in self.tasks]

    def _persist(
        self,
        task_id: str,
        fields: Dict[str, Any],
        success_text: Optional[str],
        failure_text: str,
    ) -> bool:
        result = self.store.update_task(task_id, fields)
        if result.ok:
            if success_text:
                self.notice = Notice(NoticeKind.SUCCESS, success_text)
            return True

        logger.error(f"Discarding local change to task {task_id}: {result.error}")
        self.notice = Notice(NoticeKind.ERROR, failure_text)
        self.refresh()
        return False

    # Move

    def move(self, task_id: str, target: Optional[DropTarget]) -> bool:
        """Move a task to a new start slot within its own location.

        ``target`` is None when the drag ended outside the grid. Drops on
        another location's row are ignored.

        Returns:
            True if the move was persisted
        """
        if target is None:
            logger.debug(f"Move of task {task_id} aborted")
            return False

        task = self.find(task_id)
        if task is None:
            return False

        if target.location_id != task.location_id:
            logger.debug(f"Ignoring cross-location move of task {task_id}")
            return False

        start = to_minutes(target.time_slot)
        end_time = to_time_string(start + effective_duration(task))

        # Status and location stay as they are
        self._apply_local(task_id, scheduled_start_time=target.time_slot, scheduled_end_time=end_time)

        return self._persist(
            task_id,
            {
                "location_id": task.location_id,
                "scheduled_date": self.day,
                "scheduled_start_time": target.time_slot,
                "scheduled_end_time": end_time,
            },
            NOTICE_SCHEDULE_UPDATED,
            NOTICE_SCHEDULE_UPDATE_FAILED,
        )

    # Resize

    def begin_resize(self, task_id: str, x: float) -> bool:
        """Start dragging a task's duration handle at display position ``x``."""
        if self.resizing is not None:
            return False
        task = self.find(task_id)
        if task is None:
            return False
        self.resizing = ResizeDrag(
            task_id=task_id,
            anchor_x=x,
            anchor_duration=effective_duration(task),
            stored_duration=task.duration,
        )
        return True

    def drag_resize(self, x: float) -> Optional[int]:
        """Update the provisional duration for the current pointer position.

        Nothing is persisted until the gesture is released.

        Returns:
            The candidate duration, or None when no resize is in progress
        """
        drag = self.resizing
        if drag is None:
            return None
        duration = max(MIN_DURATION_MINUTES, drag.anchor_duration + quantize_resize_delta(x - drag.anchor_x))
        self._apply_local(drag.task_id, duration=duration)
        return duration

    def end_resize(self) -> bool:
        """Release the handle and persist the final duration once."""
        drag, self.resizing = self.resizing, None
        if drag is None:
            return False
        task = self.find(drag.task_id)
        if task is None:
            return False

        duration = effective_duration(task)
        end_time = to_time_string(effective_start_minutes(task) + duration)
        return self._persist(
            drag.task_id,
            {"duration": duration, "scheduled_end_time": end_time},
            NOTICE_DURATION_UPDATED,
            NOTICE_DURATION_UPDATE_FAILED,
        )

    def cancel_resize(self) -> None:
        """Abandon the resize and restore the duration it started with."""
        drag, self.resizing = self.resizing, None
        if drag is not None and self.find(drag.task_id) is not None:
            self._apply_local(drag.task_id, duration=drag.stored_duration)

    # Special status

    def toggle_special_status(self, task_id: str, marker: str = HOLIDAY_MARKER) -> bool:
        """Set ``marker`` on a task, or clear it if the task already carries it."""
        task = self.find(task_id)
        if task is None:
            return False

        new_marker = None if task.special_status == marker else marker
        self._apply_local(task_id, special_status=new_marker)
        return self._persist(task_id, {"special_status": new_marker}, None, NOTICE_SPECIAL_STATUS_FAILED)
