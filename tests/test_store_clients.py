"""Tests for the board's task store clients."""

from datetime import date
from unittest.mock import MagicMock

import requests

from dejihai.board.store import ApiTaskStore, RepositoryTaskStore


def _task_json(task_id="a", **overrides):
    data = {
        "id": task_id,
        "location_id": "loc-1",
        "free_form_title": "足場材",
        "requested_date": "2025-01-15",
        "requested_time": "09:00",
        "status": "PENDING",
        "created_at": "2025-01-10T08:00:00",
        "updated_at": "2025-01-10T08:00:00",
    }
    data.update(overrides)
    return data


def _response(payload):
    response = MagicMock()
    response.json.return_value = payload
    response.raise_for_status.return_value = None
    return response


class TestApiTaskStore:
    """Test the HTTP-backed store (no network)."""

    def test_base_url_from_env(self, monkeypatch):
        monkeypatch.setenv("DEJIHAI_API_URL", "http://yard-server:9000/")
        store = ApiTaskStore(session=MagicMock())
        assert store.base_url == "http://yard-server:9000"

    def test_list_tasks(self):
        session = MagicMock()
        session.get.return_value = _response([_task_json("a"), _task_json("b")])
        store = ApiTaskStore(base_url="http://api", session=session)

        result = store.list_tasks(date(2025, 1, 15))

        assert result.ok is True
        assert [t.id for t in result.tasks] == ["a", "b"]
        args, kwargs = session.get.call_args
        assert args[0] == "http://api/api/tasks"
        assert kwargs["params"] == {"date": "2025-01-15"}
        assert kwargs["timeout"] == 10

    def test_update_task_serializes_dates(self):
        session = MagicMock()
        session.patch.return_value = _response(_task_json("a", scheduled_date="2025-01-15"))
        store = ApiTaskStore(base_url="http://api", session=session)

        result = store.update_task("a", {"scheduled_date": date(2025, 1, 15), "scheduled_start_time": "10:00"})

        assert result.ok is True
        assert result.task.scheduled_date == date(2025, 1, 15)
        args, kwargs = session.patch.call_args
        assert args[0] == "http://api/api/tasks/a"
        assert kwargs["json"] == {"scheduled_date": "2025-01-15", "scheduled_start_time": "10:00"}

    def test_http_error_is_a_failed_result(self):
        session = MagicMock()
        response = _response({})
        response.raise_for_status.side_effect = requests.HTTPError("500 Server Error")
        session.patch.return_value = response
        store = ApiTaskStore(base_url="http://api", session=session)

        result = store.update_task("a", {"duration": 60})

        assert result.ok is False
        assert "500" in result.error

    def test_connection_error_is_a_failed_result(self):
        session = MagicMock()
        session.get.side_effect = requests.ConnectionError("refused")
        store = ApiTaskStore(base_url="http://api", session=session)

        result = store.list_tasks(date(2025, 1, 15))

        assert result.ok is False
        assert result.tasks == []

    def test_malformed_body_is_a_failed_result(self):
        session = MagicMock()
        session.get.return_value = _response([{"id": "a"}])
        store = ApiTaskStore(base_url="http://api", session=session)

        assert store.list_tasks(date(2025, 1, 15)).ok is False


class TestRepositoryTaskStore:
    """Test the database-backed store."""

    def test_round_trip(self, task_repository, test_day):
        created = task_repository.create({
            "location_id": "loc-1",
            "requested_date": test_day,
            "requested_time": "09:00",
            "free_form_title": "足場材",
        })
        store = RepositoryTaskStore(task_repository)

        updated = store.update_task(created.id, {"duration": 90})
        listed = store.list_tasks(test_day)

        assert updated.ok is True
        assert updated.task.duration == 90
        assert [t.id for t in listed.tasks] == [created.id]

    def test_missing_task_is_a_failed_result(self, task_repository):
        result = RepositoryTaskStore(task_repository).update_task("nonexistent-id", {"duration": 60})

        assert result.ok is False
        assert "not found" in result.error
