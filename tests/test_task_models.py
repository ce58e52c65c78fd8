# tests/test_task_models.py

from __future__ import annotations

from datetime import datetime

import pytest

from taskminder.errors import InvalidInput
from taskminder.tasks.task_models import Task, format_deadline, parse_deadline, parse_task


def test_parse_task_date_only_deadline_is_local_midnight() -> None:
    task = parse_task("  Pay rent ", "1", "2030-05-01")
    assert task == Task(title="Pay rent", priority=1, deadline=datetime(2030, 5, 1).timestamp())


def test_parse_task_accepts_time_and_negative_priority() -> None:
    task = parse_task("Call", "-3", "2030-05-01T18:30")
    assert task.priority == -3
    assert task.deadline == datetime(2030, 5, 1, 18, 30).timestamp()


@pytest.mark.parametrize("raw", [None, "", "-", "none"])
def test_parse_deadline_placeholders_mean_no_deadline(raw) -> None:
    assert parse_deadline(raw) is None


def test_parse_task_rejects_bad_fields() -> None:
    with pytest.raises(InvalidInput) as e1:
        parse_task("x", "high", "2030-01-01")
    assert e1.value.field == "priority"

    with pytest.raises(InvalidInput) as e2:
        parse_task("x", "1", "01/05/2030")
    assert e2.value.field == "deadline"

    with pytest.raises(InvalidInput) as e3:
        parse_task("   ", "1", None)
    assert e3.value.field == "title"


def test_invalid_input_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        parse_task("x", "1.5")


def test_task_equality_is_by_value_and_describe() -> None:
    a = Task("Read", 2, None)
    b = Task("Read", 2, None)
    assert a == b
    assert a.describe() == "Read (Priority: 2, Deadline: none)"
    assert not a.has_deadline()


def test_describe_survives_out_of_range_deadline() -> None:
    assert Task("far", 1, 1e20).describe() == "far (Priority: 1, Deadline: @1e+20)"
    assert format_deadline(float("inf")) == "@inf"
