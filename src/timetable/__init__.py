"""Weekly class routine timetable for the college portal.

Grid placement, composite-key CRUD and role-scoped visibility for routine
entries fetched from the routine backend.
"""

from src.timetable.access import filter_visible
from src.timetable.grid import TimetableGrid, session_category
from src.timetable.keys import RoutineKey, derive_key
from src.timetable.models import (
    DAYS,
    OperationResult,
    RefinementFilters,
    Role,
    RoutineEntry,
    ViewerContext,
)
from src.timetable.registry import RoutineRegistry
from src.timetable.store import InMemoryRoutineStore

__all__ = [
    "DAYS",
    "InMemoryRoutineStore",
    "OperationResult",
    "RefinementFilters",
    "Role",
    "RoutineEntry",
    "RoutineKey",
    "RoutineRegistry",
    "TimetableGrid",
    "ViewerContext",
    "derive_key",
    "filter_visible",
    "session_category",
]
