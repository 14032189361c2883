"""Shared fixtures for timetable tests."""

from typing import Any

import pytest

from src.timetable.models import RoutineEntry


def _make_entry(**overrides: Any) -> RoutineEntry:
    """A valid Monday 09:00-10:00 lecture; override any field by attribute name."""
    fields: dict[str, Any] = {
        "day_of_week": "Monday",
        "slot_code": "A1",
        "subject_offering_id": "OFF-101",
        "start_time": "09:00",
        "end_time": "10:00",
        "classroom_id": "R-12",
        "is_lab_session": False,
        "is_class_session": True,
        "class_teacher_id": "T1",
        "academic_year": "2025-26",
        "semester": "3",
        "section": "A",
    }
    fields.update(overrides)
    return RoutineEntry(**fields)


@pytest.fixture
def make_entry():
    return _make_entry


@pytest.fixture
def entry() -> RoutineEntry:
    return _make_entry()
