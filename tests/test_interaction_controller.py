"""Tests for the schedule board interaction controller.

Uses an in-memory store that records every call so tests can assert exactly
which persistence requests a gesture issued.
"""

import pytest

from dejihai.board.controller import DropTarget, NoticeKind, ScheduleBoard, quantize_resize_delta
from dejihai.board.store import StoreResult
from dejihai.models.constants import (
    HOLIDAY_MARKER,
    NOTICE_DURATION_UPDATED,
    NOTICE_DURATION_UPDATE_FAILED,
    NOTICE_LOAD_FAILED,
    NOTICE_SCHEDULE_UPDATED,
    NOTICE_SCHEDULE_UPDATE_FAILED,
    NOTICE_SPECIAL_STATUS_FAILED,
)


class FakeStore:
    """In-memory task store."""

    def __init__(self, tasks):
        self.tasks = {t.id: t for t in tasks}
        self.updates = []
        self.list_calls = 0
        self.fail_updates = False
        self.fail_lists = False

    def list_tasks(self, day, status=None):
        self.list_calls += 1
        if self.fail_lists:
            return StoreResult.failure("connection refused")
        return StoreResult(ok=True, tasks=list(self.tasks.values()))

    def update_task(self, task_id, fields):
        self.updates.append((task_id, dict(fields)))
        if self.fail_updates:
            return StoreResult.failure("500 Server Error")
        self.tasks[task_id] = self.tasks[task_id].model_copy(update=fields)
        return StoreResult(ok=True, task=self.tasks[task_id])


@pytest.fixture
def store(make_task):
    return FakeStore([
        make_task("a", "09:00", 60),
        make_task("b", "10:00", None, location_id="loc-2"),
    ])


@pytest.fixture
def board(store, test_day):
    board = ScheduleBoard(store, test_day)
    assert board.refresh() is True
    return board


class TestDropTarget:
    """Test decoding of grid cell ids."""

    def test_parse(self):
        assert DropTarget.parse("loc-1_09:30") == DropTarget(location_id="loc-1", time_slot="09:30")

    def test_parse_location_with_underscore(self):
        assert DropTarget.parse("yard_east_07:00") == DropTarget(location_id="yard_east", time_slot="07:00")

    def test_parse_zero_pads_slot(self):
        assert DropTarget.parse("loc-1_9:30") == DropTarget(location_id="loc-1", time_slot="09:30")

    @pytest.mark.parametrize("cell_id", ["", None, "loc-1", "_09:00", "loc-1_", "loc-1_9am", "loc-1_25:00"])
    def test_parse_invalid(self, cell_id):
        assert DropTarget.parse(cell_id) is None


class TestRefresh:
    def test_refresh_loads_snapshot(self, board):
        assert {t.id for t in board.tasks} == {"a", "b"}
        assert board.notice is None

    def test_refresh_failure_keeps_snapshot(self, board, store):
        store.fail_lists = True

        assert board.refresh() is False
        assert {t.id for t in board.tasks} == {"a", "b"}
        assert board.notice.kind == NoticeKind.ERROR
        assert board.notice.text == NOTICE_LOAD_FAILED

    def test_layout_for_location(self, board):
        layout = board.layout_for("loc-1")
        assert set(layout) == {"a"}


class TestMove:
    """Test drag-and-drop moves."""

    def test_move_updates_snapshot_and_persists(self, board, store, test_day):
        assert board.move("a", DropTarget("loc-1", "11:30")) is True

        task = board.find("a")
        assert task.scheduled_start_time == "11:30"
        assert task.scheduled_end_time == "12:30"
        assert task.location_id == "loc-1"
        assert store.updates == [(
            "a",
            {
                "location_id": "loc-1",
                "scheduled_date": test_day,
                "scheduled_start_time": "11:30",
                "scheduled_end_time": "12:30",
            },
        )]
        assert board.notice.kind == NoticeKind.SUCCESS
        assert board.notice.text == NOTICE_SCHEDULE_UPDATED

    def test_move_uses_default_duration(self, board, store):
        board.move("b", DropTarget("loc-2", "07:00"))

        assert store.updates[0][1]["scheduled_end_time"] == "08:00"

    def test_move_keeps_status(self, board):
        board.move("a", DropTarget("loc-1", "11:30"))
        assert board.find("a").status == "PENDING"

    def test_cross_location_move_is_ignored(self, board, store):
        before = board.find("a")

        assert board.move("a", DropTarget("loc-2", "11:30")) is False

        assert board.find("a") == before
        assert store.updates == []
        assert board.notice is None

    def test_drop_outside_grid_is_ignored(self, board, store):
        assert board.move("a", None) is False
        assert store.updates == []

    def test_move_unknown_task(self, board, store):
        assert board.move("zzz", DropTarget("loc-1", "11:30")) is False
        assert store.updates == []

    def test_failed_move_reverts_from_store(self, board, store):
        store.fail_updates = True
        list_calls = store.list_calls

        assert board.move("a", DropTarget("loc-1", "11:30")) is False

        assert store.list_calls == list_calls + 1
        assert board.find("a").scheduled_start_time is None
        assert board.notice.kind == NoticeKind.ERROR
        assert board.notice.text == NOTICE_SCHEDULE_UPDATE_FAILED

    def test_failed_move_and_failed_reload_reports_load_failure(self, board, store):
        store.fail_updates = True
        store.fail_lists = True

        board.move("a", DropTarget("loc-1", "11:30"))

        assert board.notice.text == NOTICE_LOAD_FAILED


class TestResize:
    """Test the resize gesture state machine."""

    @pytest.mark.parametrize("dx,minutes", [
        (0, 0),
        (49, 0),
        (50, 30),
        (100, 30),
        (149, 30),
        (150, 60),
        (-49, 0),
        (-50, 0),
        (-51, -30),
        (-100, -30),
        (-300, -90),
    ])
    def test_quantize_resize_delta(self, dx, minutes):
        assert quantize_resize_delta(dx) == minutes

    def test_drag_updates_locally_without_persisting(self, board, store):
        assert board.begin_resize("a", 500) is True

        assert board.drag_resize(600) == 90
        assert board.drag_resize(700) == 120

        assert board.find("a").duration == 120
        assert store.updates == []

    def test_release_persists_once(self, board, store):
        board.begin_resize("a", 500)
        board.drag_resize(600)
        board.drag_resize(700)

        assert board.end_resize() is True

        assert store.updates == [("a", {"duration": 120, "scheduled_end_time": "11:00"})]
        assert board.resizing is None
        assert board.notice.text == NOTICE_DURATION_UPDATED

    def test_duration_clamps_at_one_slot(self, board, store):
        board.begin_resize("a", 500)

        assert board.drag_resize(200) == 30

        board.end_resize()
        assert store.updates[0][1]["duration"] == 30

    def test_resize_from_default_duration(self, board):
        board.begin_resize("b", 0)
        assert board.drag_resize(100) == 90

    def test_release_without_drag_persists_current_duration(self, board, store):
        board.begin_resize("a", 500)
        board.end_resize()

        assert store.updates == [("a", {"duration": 60, "scheduled_end_time": "10:00"})]

    def test_cancel_restores_stored_duration(self, board, store):
        board.begin_resize("b", 0)
        board.drag_resize(300)

        board.cancel_resize()

        assert board.find("b").duration is None
        assert board.resizing is None
        assert store.updates == []

    def test_only_one_resize_at_a_time(self, board):
        assert board.begin_resize("a", 0) is True
        assert board.begin_resize("b", 0) is False
        assert board.resizing.task_id == "a"

    def test_drag_and_release_when_idle(self, board, store):
        assert board.drag_resize(100) is None
        assert board.end_resize() is False
        assert store.updates == []

    def test_failed_resize_reverts(self, board, store):
        board.begin_resize("a", 0)
        board.drag_resize(300)
        store.fail_updates = True

        assert board.end_resize() is False

        assert board.find("a").duration == 60
        assert board.notice.text == NOTICE_DURATION_UPDATE_FAILED


class TestSpecialStatus:
    """Test toggling the special status marker."""

    def test_toggle_on_and_off(self, board, store):
        assert board.toggle_special_status("a") is True
        assert board.find("a").special_status == HOLIDAY_MARKER

        assert board.toggle_special_status("a") is True
        assert board.find("a").special_status is None

        assert store.updates == [
            ("a", {"special_status": HOLIDAY_MARKER}),
            ("a", {"special_status": None}),
        ]

    def test_toggle_success_posts_no_notice(self, board):
        board.toggle_special_status("a")
        assert board.notice is None

    def test_other_marker_is_replaced(self, board, store):
        store.tasks["a"] = store.tasks["a"].model_copy(update={"special_status": "要確認"})
        board.refresh()

        board.toggle_special_status("a")

        assert board.find("a").special_status == HOLIDAY_MARKER

    def test_failed_toggle_reverts(self, board, store):
        store.fail_updates = True

        assert board.toggle_special_status("a") is False

        assert board.find("a").special_status is None
        assert board.notice.kind == NoticeKind.ERROR
        assert board.notice.text == NOTICE_SPECIAL_STATUS_FAILED

    def test_dismiss_notice(self, board):
        board.move("a", DropTarget("loc-1", "11:30"))
        board.dismiss_notice()
        assert board.notice is None
