"""Pydantic models for routine data.

All data structures use Pydantic v2 for validation, serialization, and type safety.
Attribute names are snake_case; the backend's wire names are accepted as aliases
and produced again by to_payload().
"""

from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Any, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PositiveInt,
    ValidationError,
    field_validator,
)

from src.timetable.logging import get_logger

log = get_logger(__name__)

DAYS: tuple[str, ...] = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)

SLOT_CODES: tuple[str, ...] = ("A1", "A2", "B1", "B2", "C1", "C2", "D1", "D2")

# Session keys the login flow has used over time
_ROLE_FIELDS = ("user_role", "role")
_TEACHER_ID_FIELDS = ("teacher_id", "teacherid", "teacherId", "teacherID")

# Flag strings read as false; any other non-empty string is true
_FALSE_TOKENS = frozenset({"", "0", "false", "f", "no", "n", "off", "none", "null"})


class Role(str, Enum):
    ADMIN = "admin"
    TEACHER = "teacher"
    OTHER = "other"


class SessionCategory(str, Enum):
    """Visual category of a routine, derived from its lab/class flags."""

    HYBRID = "hybrid"
    LAB = "lab"
    CLASS = "class"
    PLAIN = "plain"


class RoutineEntry(BaseModel):
    """A single scheduled teaching session.

    Parsed leniently: upstream records may omit fields, send numeric ids or
    carry extra fields (kept in model_extra, e.g. alternative academic-year
    columns). Strict checks happen in RoutineRegistry before submission.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    day_of_week: str = Field(default="", alias="drdayofweek")
    slot_code: str = Field(default="", alias="drslot")
    subject_offering_id: str = Field(default="", alias="drsubjid")
    start_time: str = Field(default="", alias="drfrom")  # "09:30"
    end_time: str = Field(default="", alias="drto")
    classroom_id: str = Field(default="", alias="drclassroomid")
    is_lab_session: bool = Field(default=False, alias="drislabsession")
    is_class_session: bool = Field(default=False, alias="drisclasssession")
    routine_count: PositiveInt | None = Field(default=None, alias="drroutcnt")
    class_teacher_id: str | None = Field(default=None, alias="drclassteacherid")
    academic_year: str = Field(default="", alias="acad_year")
    semester: str = Field(default="", alias="stu_curr_semester")
    section: str = Field(default="", alias="stu_section")

    @field_validator(
        "day_of_week",
        "slot_code",
        "subject_offering_id",
        "start_time",
        "end_time",
        "classroom_id",
        "academic_year",
        "semester",
        "section",
        mode="before",
    )
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @field_validator("class_teacher_id", mode="before")
    @classmethod
    def _coerce_teacher(cls, value: Any) -> str | None:
        if value is None or value == "":
            return None
        return str(value)

    @field_validator("routine_count", mode="before")
    @classmethod
    def _lenient_count(cls, value: Any) -> int | None:
        # Informational only; anything that is not a positive count is dropped
        try:
            count = int(value)
        except (TypeError, ValueError):
            return None
        return count if count > 0 else None

    @field_validator("is_lab_session", "is_class_session", mode="before")
    @classmethod
    def _coerce_flag(cls, value: Any) -> bool:
        # Both 1/0 and "true"/"false" occur upstream
        if isinstance(value, str):
            return value.strip().lower() not in _FALSE_TOKENS
        return bool(value)

    def to_payload(self) -> dict[str, Any]:
        """Serialize with the backend's field names, extras included."""
        return self.model_dump(by_alias=True)


class ViewerContext(BaseModel):
    """Who is looking at the timetable. Supplied per call, never global."""

    role: Role = Role.ADMIN
    teacher_id: str | None = None

    @classmethod
    def from_session(
        cls, session: Mapping[str, Any] | None, default_role: str = "admin"
    ) -> "ViewerContext":
        """Build a viewer from a raw login-session mapping.

        An absent or empty session falls back to default_role. Role tokens are
        matched loosely ("Teacher", "class_teacher", "SuperAdmin").
        """
        if not session:
            return cls(role=_role_from_token(default_role))

        raw_role = next(
            (str(session[f]) for f in _ROLE_FIELDS if session.get(f)), ""
        )
        role = _role_from_token(raw_role) if raw_role else _role_from_token(default_role)

        teacher_id = next(
            (str(session[f]) for f in _TEACHER_ID_FIELDS if session.get(f)), None
        )
        return cls(role=role, teacher_id=teacher_id)


def _role_from_token(token: str) -> Role:
    token = token.lower()
    if "teach" in token:
        return Role.TEACHER
    if "admin" in token:
        return Role.ADMIN
    return Role.OTHER


class RefinementFilters(BaseModel):
    """Admin-side filters applied after role scoping."""

    course_id: str | None = None
    academic_year: str | None = None


class OperationResult(BaseModel):
    """Outcome of a registry mutation."""

    status: Literal["ok", "validation", "rejected"]
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @classmethod
    def success(cls, message: str) -> "OperationResult":
        return cls(status="ok", message=message)

    @classmethod
    def invalid(cls, message: str) -> "OperationResult":
        return cls(status="validation", message=message)

    @classmethod
    def rejected(cls, message: str) -> "OperationResult":
        return cls(status="rejected", message=message)


def parse_routines(records: Iterable[Mapping[str, Any]]) -> list[RoutineEntry]:
    """Parse raw backend records, skipping (and logging) unparseable ones."""
    entries: list[RoutineEntry] = []
    for index, record in enumerate(records):
        try:
            entries.append(RoutineEntry.model_validate(record))
        except ValidationError as e:
            log.warning(
                "routine_record_skipped",
                index=index,
                errors=e.error_count(),
            )
    return entries
