"""Role-scoped visibility and admin refinement filters.

Two steps, applied in order:
  1. Role scoping: teachers only see routines they are class teacher of.
  2. Admin refinement: optional course and academic-year filters. Other roles
     skip this step even when filter values are set.

The academic year has been exposed by the backend under several column names.
ACADEMIC_YEAR_FIELDS lists every accepted alias; a routine matches the filter
if any of them equals the requested year.
"""

from collections.abc import Iterable

from src.timetable.logging import get_logger
from src.timetable.models import RefinementFilters, Role, RoutineEntry, ViewerContext

log = get_logger(__name__)

ACADEMIC_YEAR_FIELDS: tuple[str, ...] = ("acad_year", "acadyearid", "academicyearid")


def filter_visible(
    entries: Iterable[RoutineEntry],
    viewer: ViewerContext,
    filters: RefinementFilters | None = None,
) -> list[RoutineEntry]:
    """Narrow the full routine set to what the viewer may see.

    Order is preserved. Never raises for absent fields.

    Args:
        entries: Full routine set as fetched.
        viewer: Role (and teacher id) of the person viewing.
        filters: Admin-only refinement; ignored for other roles.

    Returns:
        The visible routines, in input order.
    """
    visible = list(entries)

    if viewer.role is Role.TEACHER:
        visible = [e for e in visible if _taught_by(e, viewer.teacher_id)]

    if viewer.role is Role.ADMIN and filters is not None:
        if filters.course_id:
            visible = [e for e in visible if e.subject_offering_id == filters.course_id]
        if filters.academic_year:
            visible = [e for e in visible if _in_academic_year(e, filters.academic_year)]

    log.debug("routines_filtered", role=viewer.role.value, visible=len(visible))
    return visible


def _taught_by(entry: RoutineEntry, teacher_id: str | None) -> bool:
    if entry.class_teacher_id is None or teacher_id is None:
        return False
    return str(entry.class_teacher_id) == str(teacher_id)


def academic_years_of(entry: RoutineEntry) -> list[str]:
    """All academic-year values an entry carries, across known aliases."""
    extra = entry.model_extra or {}
    values = [entry.academic_year]
    values.extend(str(extra[f]) for f in ACADEMIC_YEAR_FIELDS[1:] if extra.get(f) is not None)
    return [v for v in values if v]


def _in_academic_year(entry: RoutineEntry, year: str) -> bool:
    return year in academic_years_of(entry)
