"""Lane layout for tasks sharing one location.

Assigns each task a lane so that tasks overlapping in time render side by side
instead of on top of each other. Tasks that overlap nothing stay in lane 0, so
the common case renders at a single height.
"""

from typing import Dict, List, Sequence
from pydantic import BaseModel, Field

from dejihai.engine.timegrid import effective_duration, effective_end_minutes, effective_start_minutes


class LaneAssignment(BaseModel):
    """Where a task renders within its location's track."""

    lane_index: int = Field(0, ge=0, description="Zero-based lane within the cluster")
    lane_count: int = Field(1, ge=1, description="Lanes opened for the task's cluster")
    has_conflict: bool = Field(False, description="True when the cluster needed more than one lane")


def _layout_sort_key(task) -> tuple:
    # Earlier start first; on equal starts the longer task goes first.
    return (effective_start_minutes(task), -effective_duration(task))


def build_clusters(tasks: Sequence) -> List[list]:
    """Partition tasks into runs of chain-overlapping tasks.

    A task joins the current cluster while its start is before the cluster's
    running maximum end, so two tasks that never overlap can share a cluster
    when a third task bridges them.

    Args:
        tasks: Tasks already sorted by ``_layout_sort_key``

    Returns:
        Clusters in sorted order
    """
    clusters: List[list] = []
    current: list = []
    cluster_end = -1

    for task in tasks:
        start = effective_start_minutes(task)
        end = effective_end_minutes(task)
        if current and start < cluster_end:
            current.append(task)
            cluster_end = max(cluster_end, end)
        else:
            if current:
                clusters.append(current)
            current = [task]
            cluster_end = end

    if current:
        clusters.append(current)
    return clusters


def assign_lanes(cluster: Sequence) -> List[int]:
    """First-fit lane assignment for one cluster, in the cluster's order.

    A lane accepts a task when the lane's last task ends at or before the
    task's start.

    Returns:
        Lane index per cluster member, aligned with ``cluster``
    """
    lane_ends: List[int] = []
    indices: List[int] = []

    for task in cluster:
        start = effective_start_minutes(task)
        lane = next((i for i, end in enumerate(lane_ends) if start >= end), None)
        if lane is None:
            lane = len(lane_ends)
            lane_ends.append(0)
        lane_ends[lane] = effective_end_minutes(task)
        indices.append(lane)

    return indices


def layout_tasks(tasks: Sequence) -> Dict[str, LaneAssignment]:
    """Compute lane assignments for all tasks at one location.

    This function is deterministic and performs no I/O: the same task set
    always yields the same mapping.

    Args:
        tasks: Tasks assigned to one location on one day (any order)

    Returns:
        Mapping of task id to its LaneAssignment
    """
    ordered = sorted(tasks, key=_layout_sort_key)
    layout: Dict[str, LaneAssignment] = {}

    for cluster in build_clusters(ordered):
        lanes = assign_lanes(cluster)
        lane_count = max(lanes) + 1
        for task, lane in zip(cluster, lanes):
            layout[task.id] = LaneAssignment(
                lane_index=lane,
                lane_count=lane_count,
                has_conflict=lane_count > 1,
            )

    return layout


def track_lane_count(layout: Dict[str, LaneAssignment]) -> int:
    """Lanes needed to draw a location's row (at least one)."""
    return max([1] + [a.lane_count for a in layout.values()])
