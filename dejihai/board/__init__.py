"""Interactive schedule board for dejihai."""

from dejihai.board.controller import ScheduleBoard, DropTarget, Notice, NoticeKind, quantize_resize_delta
from dejihai.board.store import ApiTaskStore, RepositoryTaskStore, StoreResult, TaskStore

__all__ = [
    "ScheduleBoard",
    "DropTarget",
    "Notice",
    "NoticeKind",
    "quantize_resize_delta",
    "ApiTaskStore",
    "RepositoryTaskStore",
    "StoreResult",
    "TaskStore",
]
