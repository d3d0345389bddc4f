# tests/test_task_models.py

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from todo_sync.tasks.task_models import Task, TaskStats, format_timestamp, next_timestamp


@pytest.mark.parametrize(
    ("total", "completed", "rate"),
    [(3, 1, 33), (3, 2, 67), (0, 0, 0), (8, 1, 13), (2, 1, 50), (4, 4, 100)],
)
def test_completion_rate_rounds_half_up(total: int, completed: int, rate: int) -> None:
    assert TaskStats(total=total, completed=completed).completion_rate == rate


def test_stats_from_tasks() -> None:
    stats = TaskStats.from_tasks(
        [Task(text="a", completed=True), Task(text="b"), Task(text="c", completed=True)]
    )

    assert (stats.total, stats.completed, stats.pending) == (3, 2, 1)


def test_format_timestamp_is_utc_millis_with_z() -> None:
    dt = datetime(2024, 5, 1, 10, 0, 0, 123456, tzinfo=timezone.utc)

    assert format_timestamp(dt) == "2024-05-01T10:00:00.123Z"


def test_next_timestamp_moves_past_previous_when_clock_is_stuck() -> None:
    now = datetime(2024, 5, 1, 10, 0, 0, tzinfo=timezone.utc)

    assert next_timestamp(now, "2024-05-01T10:00:00.000Z") == "2024-05-01T10:00:00.001Z"
    assert next_timestamp(now, "2024-05-01T09:00:00.000Z") == "2024-05-01T10:00:00.000Z"
    assert next_timestamp(now, None) == "2024-05-01T10:00:00.000Z"


def test_next_timestamp_uses_latest_of_all_floors() -> None:
    now = datetime(2024, 5, 1, 10, 0, 0, tzinfo=timezone.utc)

    assert next_timestamp(now, "2024-05-01T11:00:00.000Z", None) == "2024-05-01T11:00:00.001Z"
    assert (
        next_timestamp(now, "2024-05-01T09:00:00.000Z", "2024-05-01T12:00:00.000Z")
        == "2024-05-01T12:00:00.001Z"
    )
