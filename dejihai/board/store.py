"""Task store clients used by the schedule board.

Stores never raise on persistence failure: every call returns a StoreResult
whose ``ok`` flag the board inspects before deciding to keep or discard its
optimistic state.
"""

import logging
import os
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional, Protocol

import requests
from dotenv import load_dotenv
from sqlalchemy.exc import SQLAlchemyError

from dejihai.models.task import Task
from dejihai.database.task_repository import TaskRepository

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:8000"
REQUEST_TIMEOUT_SEC = 10


@dataclass
class StoreResult:
    """Outcome of a store call."""

    ok: bool
    task: Optional[Task] = None
    tasks: List[Task] = field(default_factory=list)
    error: Optional[str] = None

    @classmethod
    def failure(cls, error: str) -> "StoreResult":
        return cls(ok=False, error=error)


class TaskStore(Protocol):
    """What the board needs from the store of record."""

    def list_tasks(self, day: date, status: Optional[str] = None) -> StoreResult:
        ...

    def update_task(self, task_id: str, fields: Dict[str, Any]) -> StoreResult:
        ...


def _to_json(fields: Dict[str, Any]) -> Dict[str, Any]:
    return {k: (v.isoformat() if isinstance(v, date) else v) for k, v in fields.items()}


class ApiTaskStore:
    """Task store backed by the dejihai HTTP API."""

    def __init__(self, base_url: Optional[str] = None, session: Optional[requests.Session] = None):
        """Initialize the API client.

        Args:
            base_url: API root. If None, reads DEJIHAI_API_URL (default http://localhost:8000).
            session: Optional requests session (shared connection pool)
        """
        self.base_url = (base_url or os.getenv("DEJIHAI_API_URL", DEFAULT_API_URL)).rstrip("/")
        self.session = session or requests.Session()
        self.headers = {"Content-Type": "application/json"}

    def list_tasks(self, day: date, status: Optional[str] = None) -> StoreResult:
        params = {"date": day.isoformat()}
        if status:
            params["status"] = status
        try:
            response = self.session.get(
                f"{self.base_url}/api/tasks",
                params=params,
                headers=self.headers,
                timeout=REQUEST_TIMEOUT_SEC,
            )
            response.raise_for_status()
            return StoreResult(ok=True, tasks=[Task.model_validate(t) for t in response.json()])
        except (requests.RequestException, ValueError) as e:
            logger.error(f"Failed to fetch tasks for {day}: {type(e).__name__}: {str(e)}")
            return StoreResult.failure(str(e))

    def update_task(self, task_id: str, fields: Dict[str, Any]) -> StoreResult:
        try:
            response = self.session.patch(
                f"{self.base_url}/api/tasks/{task_id}",
                json=_to_json(fields),
                headers=self.headers,
                timeout=REQUEST_TIMEOUT_SEC,
            )
            response.raise_for_status()
            return StoreResult(ok=True, task=Task.model_validate(response.json()))
        except (requests.RequestException, ValueError) as e:
            logger.error(f"Failed to update task {task_id}: {type(e).__name__}: {str(e)}")
            return StoreResult.failure(str(e))


class RepositoryTaskStore:
    """Task store that talks to the database directly (same-process use and tests)."""

    def __init__(self, repository: TaskRepository):
        self.repository = repository

    def list_tasks(self, day: date, status: Optional[str] = None) -> StoreResult:
        try:
            return StoreResult(ok=True, tasks=self.repository.list_tasks(day, status))
        except SQLAlchemyError as e:
            return StoreResult.failure(f"{type(e).__name__}: {e}")

    def update_task(self, task_id: str, fields: Dict[str, Any]) -> StoreResult:
        try:
            return StoreResult(ok=True, task=self.repository.update(task_id, fields))
        except (SQLAlchemyError, ValueError) as e:
            return StoreResult.failure(f"{type(e).__name__}: {e}")
