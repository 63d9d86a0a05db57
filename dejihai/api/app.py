"""FastAPI web application for dejihai."""

import logging
from datetime import date
from typing import Dict, List, Optional
from fastapi import Depends, FastAPI, HTTPException, Query, status
from fastapi.responses import StreamingResponse
from pydantic import BaseModel, Field, field_validator, model_validator
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from dejihai.database.database import get_db
from dejihai.database.master_repository import BlockRepository, LocationRepository, ShipRepository
from dejihai.database.task_repository import TaskRepository
from dejihai.engine.board import Board, build_board, schedule_sheet_csv
from dejihai.engine.timegrid import normalize_time
from dejihai.models.location import Location
from dejihai.models.ship import Block, Ship
from dejihai.models.task import Task, TaskStatus

logger = logging.getLogger(__name__)

app = FastAPI(
    title="dejihai API",
    description="Shipyard material-delivery requests and the day-by-location schedule grid",
    version="0.1.0",
)


# Columns a partial update may change but never clear
NON_NULLABLE_UPDATE_FIELDS = ("location_id", "status")


def _check_clock_time(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    return normalize_time(v)


class TaskCreateRequest(BaseModel):
    """Request body for submitting a delivery request."""
    ship_id: Optional[str] = None
    block_info: Optional[str] = None
    free_form_title: Optional[str] = None
    requested_date: date
    requested_time: str = Field(..., description="HH:MM")
    location_id: str
    notes: Optional[str] = None
    created_by: Optional[str] = None

    @field_validator("requested_time")
    @classmethod
    def _validate_requested_time(cls, v):
        return _check_clock_time(v)

    @model_validator(mode="after")
    def _one_subject(self):
        if bool(self.block_info) == bool(self.free_form_title):
            raise ValueError("Exactly one of block_info or free_form_title must be set")
        return self


class TaskUpdateRequest(BaseModel):
    """Partial update. Only fields present in the body are changed."""
    scheduled_date: Optional[date] = None
    scheduled_start_time: Optional[str] = None
    scheduled_end_time: Optional[str] = Field(None, pattern=r"^[0-9]{2}:[0-9]{2}$")
    duration: Optional[int] = Field(None, ge=30, multiple_of=30)
    location_id: Optional[str] = None
    special_status: Optional[str] = None
    status: Optional[TaskStatus] = None
    notes: Optional[str] = None
    person_in_charge: Optional[str] = None

    @field_validator("scheduled_start_time")
    @classmethod
    def _validate_start_time(cls, v):
        return _check_clock_time(v)

    @model_validator(mode="after")
    def _required_columns_not_null(self):
        for name in NON_NULLABLE_UPDATE_FIELDS:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

    class Config:
        """Pydantic configuration."""
        use_enum_values = True


class BlocksResponse(BaseModel):
    """Response for a ship's block hierarchy."""
    blocks: List[Block]
    grouped: Dict[str, Dict[str, List[str]]]


class DeleteResponse(BaseModel):
    success: bool


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy", "version": "0.1.0"}


@app.get("/api/tasks", response_model=List[Task])
def list_tasks(
    day: Optional[date] = Query(None, alias="date"),
    task_status: Optional[TaskStatus] = Query(None, alias="status"),
    db: Session = Depends(get_db),
):
    """List tasks requested or scheduled on a date."""
    try:
        return TaskRepository(db).list_tasks(day, task_status)
    except SQLAlchemyError as e:
        logger.error(f"Error fetching tasks: {type(e).__name__}: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to fetch tasks")


@app.post("/api/tasks", response_model=Task, status_code=status.HTTP_201_CREATED)
def create_task(body: TaskCreateRequest, db: Session = Depends(get_db)):
    """Submit a delivery request. New tasks are always PENDING."""
    if LocationRepository(db).get(body.location_id) is None:
        raise HTTPException(status_code=400, detail=f"Unknown location: {body.location_id}")
    if body.ship_id and ShipRepository(db).get(body.ship_id) is None:
        raise HTTPException(status_code=400, detail=f"Unknown ship: {body.ship_id}")
    try:
        return TaskRepository(db).create(body.model_dump())
    except SQLAlchemyError as e:
        logger.error(f"Error creating task: {type(e).__name__}: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to create task")


@app.get("/api/tasks/{task_id}", response_model=Task)
def get_task(task_id: str, db: Session = Depends(get_db)):
    task = TaskRepository(db).get(task_id)
    if task is None:
        raise HTTPException(status_code=404, detail=f"Task {task_id} not found")
    return task


@app.patch("/api/tasks/{task_id}", response_model=Task)
def update_task(task_id: str, body: TaskUpdateRequest, db: Session = Depends(get_db)):
    """Partially update a task (schedule, duration, markers, notes)."""
    fields = body.model_dump(exclude_unset=True)
    if fields.get("location_id") and LocationRepository(db).get(fields["location_id"]) is None:
        raise HTTPException(status_code=400, detail=f"Unknown location: {fields['location_id']}")

    repo = TaskRepository(db)
    if repo.get(task_id) is None:
        raise HTTPException(status_code=404, detail=f"Task {task_id} not found")
    try:
        return repo.update(task_id, fields)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SQLAlchemyError as e:
        logger.error(f"Error updating task {task_id}: {type(e).__name__}: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to update task")


@app.delete("/api/tasks/{task_id}", response_model=DeleteResponse)
def delete_task(task_id: str, db: Session = Depends(get_db)):
    try:
        deleted = TaskRepository(db).delete(task_id)
    except SQLAlchemyError as e:
        logger.error(f"Error deleting task {task_id}: {type(e).__name__}: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to delete task")
    if not deleted:
        raise HTTPException(status_code=404, detail=f"Task {task_id} not found")
    return DeleteResponse(success=True)


@app.get("/api/locations", response_model=List[Location])
def list_locations(db: Session = Depends(get_db)):
    return LocationRepository(db).list_all()


@app.get("/api/ships", response_model=List[Ship])
def list_ships(db: Session = Depends(get_db)):
    return ShipRepository(db).list_all()


@app.get("/api/blocks", response_model=BlocksResponse)
def list_blocks(ship_id: Optional[str] = Query(None), db: Session = Depends(get_db)):
    """A ship's blocks, flat and grouped by section and large block."""
    if not ship_id:
        raise HTTPException(status_code=400, detail="ship_id is required")
    blocks = BlockRepository(db).list_for_ship(ship_id)
    return BlocksResponse(blocks=blocks, grouped=BlockRepository.grouped(blocks))


@app.get("/api/schedule", response_model=Board)
def view_schedule(day: date = Query(..., alias="date"), db: Session = Depends(get_db)):
    """Day grid: every location's tasks with lane layout and grid columns."""
    tasks = TaskRepository(db).list_tasks(day)
    locations = LocationRepository(db).list_all()
    return build_board(day, tasks, locations)


@app.get("/api/schedule/export")
def export_schedule(day: date = Query(..., alias="date"), db: Session = Depends(get_db)):
    """Download the day's schedule as a CSV sheet."""
    tasks = TaskRepository(db).list_tasks(day)
    locations = LocationRepository(db).list_all()
    content = schedule_sheet_csv(tasks, locations)

    filename = f"Dejihai_Schedule_{day.isoformat()}.csv"
    logger.info(f"Exporting schedule {filename} ({len(tasks)} tasks)")
    # BOM so spreadsheet apps detect UTF-8
    return StreamingResponse(
        iter(["\ufeff" + content]),
        media_type="text/csv; charset=utf-8",
        headers={
            "Content-Disposition": f"attachment; filename={filename}",
            "Cache-Control": "no-cache",
        },
    )
