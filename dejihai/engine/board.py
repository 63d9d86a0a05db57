"""Day board assembly and schedule sheet export.

Groups a day's task snapshot by location, runs the layout engine per location
and attaches grid coordinates. The read-only view and the export share this.
"""

import csv
from datetime import date
from io import StringIO
from typing import Dict, List, Sequence
from pydantic import BaseModel, Field

from dejihai.engine.layout import LaneAssignment, layout_tasks, track_lane_count
from dejihai.engine.timegrid import effective_duration, effective_start_time, slot_column, slot_span, time_slots
from dejihai.models.location import Location
from dejihai.models.task import Task, block_display, ship_display_number

EXPORT_LABEL_HEADER = "場所"


class BoardTask(BaseModel):
    """A task positioned on the grid."""

    task: Task
    layout: LaneAssignment
    column_start: int = Field(..., description="First grid column (1-based, label column is 1)")
    column_span: int = Field(..., description="Number of slot columns covered")


class BoardRow(BaseModel):
    """One location's track."""

    location: Location
    lane_count: int = Field(1, ge=1, description="Lanes needed to draw the row")
    tasks: List[BoardTask] = Field(default_factory=list)


class Board(BaseModel):
    """The full grid for one day."""

    day: date
    time_slots: List[str]
    rows: List[BoardRow]


def group_by_location(tasks: Sequence[Task]) -> Dict[str, List[Task]]:
    """Group tasks by location id, preserving snapshot order."""
    grouped: Dict[str, List[Task]] = {}
    for task in tasks:
        grouped.setdefault(task.location_id, []).append(task)
    return grouped


def build_board(day: date, tasks: Sequence[Task], locations: Sequence[Location]) -> Board:
    """Lay out a day's tasks for every location, in location display order.

    Tasks at locations not in ``locations`` are not shown.
    """
    grouped = group_by_location(tasks)
    rows: List[BoardRow] = []

    for location in sorted(locations, key=lambda loc: loc.display_order):
        location_tasks = grouped.get(location.id, [])
        layout = layout_tasks(location_tasks)
        rows.append(
            BoardRow(
                location=location,
                lane_count=track_lane_count(layout),
                tasks=[
                    BoardTask(
                        task=task,
                        layout=layout[task.id],
                        column_start=slot_column(effective_start_time(task)),
                        column_span=slot_span(effective_duration(task)),
                    )
                    for task in location_tasks
                ],
            )
        )

    return Board(day=day, time_slots=time_slots(), rows=rows)


def export_cell_text(task: Task) -> str:
    section, block_name = block_display(task)
    return f"({ship_display_number(task)}) {section} {block_name}"


def schedule_sheet_rows(tasks: Sequence[Task], locations: Sequence[Location]) -> List[List[str]]:
    """Build the export sheet: a header row, then one row per location.

    A cell holds the first task (in snapshot order) whose effective start
    equals the slot; tasks starting off-grid are not exported.
    """
    slots = time_slots()
    grouped = group_by_location(tasks)
    rows: List[List[str]] = [[EXPORT_LABEL_HEADER] + slots]

    for location in sorted(locations, key=lambda loc: loc.display_order):
        location_tasks = grouped.get(location.id, [])
        row = [location.name]
        for slot in slots:
            task = next((t for t in location_tasks if effective_start_time(t) == slot), None)
            row.append(export_cell_text(task) if task else "")
        rows.append(row)

    return rows


def schedule_sheet_csv(tasks: Sequence[Task], locations: Sequence[Location]) -> str:
    """Render the export sheet as CSV text."""
    output = StringIO()
    writer = csv.writer(output)
    writer.writerows(schedule_sheet_rows(tasks, locations))
    return output.getvalue()
