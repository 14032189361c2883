"""TimetableGrid - places visible routines into day x hour cells.

Coordinate space (matches the weekly view):
  columns: DAYS, Monday .. Saturday
  rows:    GRID_HOURS, 8 .. 18 (whole-hour labels)

A routine occupies row h when comparable(start) <= h < comparable(end), using
the half-hour rounding from timecodec. Cells are never merged or deduplicated:
parallel sessions (a lab and a lecture in different rooms) are all returned,
in the order of the input set.

Nothing here is cached; every query re-scans the entry list, so the grid always
reflects the set it was built from.
"""

from collections.abc import Iterable, Iterator

from src.timetable.keys import RoutineKey, derive_key
from src.timetable.logging import get_logger
from src.timetable.models import DAYS, RoutineEntry, SessionCategory
from src.timetable.timecodec import DAY_END_HOUR, DAY_START_HOUR, to_comparable_hour

log = get_logger(__name__)

GRID_HOURS: tuple[int, ...] = tuple(range(DAY_START_HOUR, DAY_END_HOUR + 1))


def session_category(entry: RoutineEntry) -> SessionCategory:
    if entry.is_lab_session and entry.is_class_session:
        return SessionCategory.HYBRID
    if entry.is_lab_session:
        return SessionCategory.LAB
    if entry.is_class_session:
        return SessionCategory.CLASS
    return SessionCategory.PLAIN


def occupies(entry: RoutineEntry, hour: float) -> bool:
    """True if the entry's time range covers the given row.

    Unparseable times never occupy any row.
    """
    try:
        start = to_comparable_hour(entry.start_time)
        end = to_comparable_hour(entry.end_time)
    except ValueError:
        log.debug(
            "routine_time_unparseable",
            start=entry.start_time,
            end=entry.end_time,
        )
        return False
    return start <= hour < end


class TimetableGrid:
    """Weekly grid view over a (usually already filtered) routine set."""

    def __init__(self, entries: Iterable[RoutineEntry]) -> None:
        self.entries = list(entries)

    def entries_at(self, day: str | int, hour: float) -> list[RoutineEntry]:
        """Routines occupying the cell at (day, hour).

        Args:
            day: Day name ("Monday") or 0-based column index.
            hour: Row label, e.g. 9 for the 09:00 row.

        Returns:
            Matching routines in input order; empty if none or if the column
            index is outside the grid.
        """
        if isinstance(day, int):
            if not 0 <= day < len(DAYS):
                return []
            day_name = DAYS[day]
        else:
            day_name = day
        return [
            e for e in self.entries if e.day_of_week == day_name and occupies(e, hour)
        ]

    def rows(self) -> Iterator[tuple[int, list[list[RoutineEntry]]]]:
        """Yield (hour, cells) for every row, one cell per day."""
        for hour in GRID_HOURS:
            yield hour, [self.entries_at(day, hour) for day in DAYS]

    def is_empty(self) -> bool:
        return not any(cell for _, cells in self.rows() for cell in cells)


def overlaps(a_start: str, a_end: str, b_start: str, b_end: str) -> bool:
    """Half-open overlap of two time ranges in comparable hours.

    Ranges with unparseable bounds never overlap anything.
    """
    try:
        a_from, a_to = to_comparable_hour(a_start), to_comparable_hour(a_end)
        b_from, b_to = to_comparable_hour(b_start), to_comparable_hour(b_end)
    except ValueError:
        return False
    return a_from < b_to and a_to > b_from


def find_teacher_conflicts(
    candidate: RoutineEntry,
    entries: Iterable[RoutineEntry],
    ignore_key: RoutineKey | None = None,
) -> list[RoutineEntry]:
    """Routines that double-book the candidate's class teacher.

    A conflict is another routine on the same day and section, with the same
    class teacher, whose time range overlaps. Unassigned routines never
    conflict. ignore_key excludes the record being edited.
    """
    if candidate.class_teacher_id is None:
        return []

    conflicts = []
    for entry in entries:
        if ignore_key is not None and derive_key(entry) == ignore_key:
            continue
        if (
            entry.day_of_week == candidate.day_of_week
            and entry.section == candidate.section
            and entry.class_teacher_id == candidate.class_teacher_id
            and overlaps(
                entry.start_time, entry.end_time, candidate.start_time, candidate.end_time
            )
        ):
            conflicts.append(entry)
    return conflicts


def available_teachers(
    teacher_ids: Iterable[str],
    entries: Iterable[RoutineEntry],
    day: str,
    start: str,
    end: str,
    keep: str | None = None,
) -> list[str]:
    """Teachers with no routine on `day` overlapping start..end.

    Without a complete day/start/end every teacher is returned. `keep` is
    always retained (the teacher already assigned to the routine being edited).
    """
    teacher_ids = [str(t) for t in teacher_ids]
    if not day or not start or not end:
        return teacher_ids

    busy = {
        e.class_teacher_id
        for e in entries
        if e.day_of_week == day
        and e.class_teacher_id is not None
        and overlaps(e.start_time, e.end_time, start, end)
    }
    return [t for t in teacher_ids if t not in busy or t == keep]
