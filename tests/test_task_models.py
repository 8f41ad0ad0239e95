# tests/test_task_models.py

from __future__ import annotations

import pytest

from todo_keeper.tasks.task_models import Task, filter_valid_tasks, is_valid_task_record, next_id_for


@pytest.mark.parametrize(
    "raw, expected",
    [
        ({"id": 1, "text": "a"}, True),
        ({"id": 2.0, "text": ""}, True),
        ({"id": 3, "text": "x", "completed": True, "createdAt": "2024-01-01T00:00:00.000Z"}, True),
        ({"bad": 1}, False),
        ({"id": "x", "text": "b"}, False),
        ({"id": 1, "text": 5}, False),
        ({"id": True, "text": "bool id"}, False),
        ({"id": None, "text": "t"}, False),
        ({"id": float("nan"), "text": "n"}, False),
        ([1, "a"], False),
        (None, False),
        ("task", False),
    ],
)
def test_validity_predicate(raw, expected) -> None:
    assert is_valid_task_record(raw) is expected


def test_from_record_fills_defaults() -> None:
    task = Task.from_record({"id": 7.0, "text": "walk"})
    assert task.id == 7
    assert isinstance(task.id, int)
    assert task.completed is False
    assert task.created_at.endswith("Z")


def test_record_uses_camel_case_created_at() -> None:
    task = Task(id=1, text="a", completed=True, created_at="2024-05-01T10:00:00.000Z")
    assert task.to_record() == {
        "id": 1,
        "text": "a",
        "completed": True,
        "createdAt": "2024-05-01T10:00:00.000Z",
    }


def test_filter_and_next_id() -> None:
    tasks = filter_valid_tasks([{"id": 4, "text": "a"}, {"bad": 1}, {"id": 9, "text": "b"}])
    assert [t.id for t in tasks] == [4, 9]
    assert next_id_for(tasks) == 10
    assert next_id_for([]) == 1
