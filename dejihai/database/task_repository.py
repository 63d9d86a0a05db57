"""Repository layer for delivery task persistence."""

import logging
import uuid
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Session, joinedload
from sqlalchemy import and_, or_

from dejihai.models.task import Task, TaskStatus
from dejihai.database.models import TaskDB, enum_to_value

logger = logging.getLogger(__name__)

# Fields a partial update may touch
UPDATABLE_FIELDS = (
    "scheduled_date",
    "scheduled_start_time",
    "scheduled_end_time",
    "duration",
    "location_id",
    "special_status",
    "status",
    "notes",
    "person_in_charge",
)


class TaskRepository:
    """Repository for delivery task database operations."""

    def __init__(self, db: Session):
        self.db = db

    def _query(self):
        return self.db.query(TaskDB).options(joinedload(TaskDB.ship), joinedload(TaskDB.location))

    def list_tasks(self, day: Optional[date] = None, status: Optional[str] = None) -> List[Task]:
        """List tasks requested or scheduled on ``day``.

        Ordered by scheduled date, scheduled start, requested date, requested
        time (ascending, nulls last).
        """
        query = self._query()

        if day is not None:
            next_day = day + timedelta(days=1)
            query = query.filter(
                or_(
                    and_(TaskDB.requested_date >= day, TaskDB.requested_date < next_day),
                    and_(TaskDB.scheduled_date >= day, TaskDB.scheduled_date < next_day),
                )
            )

        if status:
            query = query.filter(TaskDB.status == enum_to_value(status))

        tasks_db = query.order_by(
            TaskDB.scheduled_date.asc().nulls_last(),
            TaskDB.scheduled_start_time.asc().nulls_last(),
            TaskDB.requested_date.asc(),
            TaskDB.requested_time.asc(),
        ).all()
        return [task_db.to_pydantic() for task_db in tasks_db]

    def get(self, task_id: str) -> Optional[Task]:
        """Get task by ID."""
        task_db = self._query().filter(TaskDB.id == task_id).first()
        return task_db.to_pydantic() if task_db else None

    def create(self, fields: Dict[str, Any]) -> Task:
        """Create a new task. New tasks always start PENDING."""
        now = datetime.utcnow()
        task_db = TaskDB(
            id=fields.get("id") or str(uuid.uuid4()),
            ship_id=fields.get("ship_id"),
            block_info=fields.get("block_info"),
            free_form_title=fields.get("free_form_title"),
            location_id=fields["location_id"],
            requested_date=fields["requested_date"],
            requested_time=fields["requested_time"],
            notes=fields.get("notes"),
            created_by=fields.get("created_by"),
            status=TaskStatus.PENDING.value,
            created_at=now,
            updated_at=now,
        )
        try:
            self.db.add(task_db)
            self.db.commit()
            logger.debug(f"Created task {task_db.id} at location {task_db.location_id}")
            return self.get(task_db.id)
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to create task: {type(e).__name__}: {str(e)}")
            raise

    def update(self, task_id: str, fields: Dict[str, Any]) -> Task:
        """Apply a partial update.

        Keys absent from ``fields`` are left unchanged; an explicit None clears
        the column.

        Raises:
            ValueError: If the task does not exist or a field is not updatable
        """
        task_db = self.db.query(TaskDB).filter(TaskDB.id == task_id).first()
        if not task_db:
            raise ValueError(f"Task {task_id} not found")

        unknown = set(fields) - set(UPDATABLE_FIELDS)
        if unknown:
            raise ValueError(f"Fields not updatable: {sorted(unknown)}")

        for name, value in fields.items():
            if name == "status" and value is not None:
                value = enum_to_value(value)
            setattr(task_db, name, value)
        task_db.updated_at = datetime.utcnow()

        try:
            self.db.commit()
            logger.debug(f"Updated task {task_id}: {sorted(fields)}")
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to update task {task_id}: {type(e).__name__}: {str(e)}")
            raise
        return self.get(task_id)

    def delete(self, task_id: str) -> bool:
        """Permanently delete a task by ID."""
        task_db = self.db.query(TaskDB).filter(TaskDB.id == task_id).first()
        if not task_db:
            return False

        try:
            self.db.delete(task_db)
            self.db.commit()
            logger.debug(f"Deleted task {task_id}")
            return True
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to delete task {task_id}: {type(e).__name__}: {str(e)}")
            raise
