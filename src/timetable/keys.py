"""Composite natural key of a routine entry.

Routines have no surrogate id. A record is identified by seven fields, any of
which may be changed by an update, so updates carry the pre-edit key alongside
the new field values.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from src.timetable.models import RoutineEntry

KEY_FIELDS: tuple[str, ...] = (
    "day_of_week",
    "slot_code",
    "subject_offering_id",
    "classroom_id",
    "semester",
    "section",
    "academic_year",
)


class RoutineKey(BaseModel):
    """Frozen, hashable 7-field identity. Equality is exact, field by field."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    day_of_week: str = Field(default="", alias="drdayofweek")
    slot_code: str = Field(default="", alias="drslot")
    subject_offering_id: str = Field(default="", alias="drsubjid")
    classroom_id: str = Field(default="", alias="drclassroomid")
    semester: str = Field(default="", alias="stu_curr_semester")
    section: str = Field(default="", alias="stu_section")
    academic_year: str = Field(default="", alias="acad_year")

    def as_selector(self) -> dict[str, Any]:
        """Wire-format selector used for delete and as update's "original"."""
        return self.model_dump(by_alias=True)

    def missing_fields(self) -> list[str]:
        return [name for name in KEY_FIELDS if not getattr(self, name)]


def derive_key(entry: RoutineEntry) -> RoutineKey:
    return RoutineKey(**{name: getattr(entry, name) for name in KEY_FIELDS})


def keys_equal(a: RoutineKey, b: RoutineKey) -> bool:
    return all(getattr(a, name) == getattr(b, name) for name in KEY_FIELDS)


def render_key(item: RoutineEntry | RoutineKey) -> str:
    """Stable string key for rendering, fields joined with "_"."""
    key = item if isinstance(item, RoutineKey) else derive_key(item)
    return "_".join(getattr(key, name) for name in KEY_FIELDS)
