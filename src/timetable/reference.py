"""Reference datasets shown alongside the timetable.

Offerings, classrooms, teachers, academic years and students are loaded from
separate sources. Each dataset degrades to an empty list on failure so a
missing teacher list never blocks rendering the grid. Students are only used
to derive the semester and section choices.
"""

from collections.abc import Awaitable, Callable, Iterable, Mapping
from typing import Any

from pydantic import BaseModel, TypeAdapter

from src.timetable.logging import get_logger

log = get_logger(__name__)

Loader = Callable[[], Awaitable[Any]]
_RECORDS = TypeAdapter(list[dict[str, Any]])

# Dataset name -> envelope key the backend wraps the list in
DATASET_ENVELOPES: dict[str, str] = {
    "offerings": "offerings",
    "classrooms": "classrooms",
    "teachers": "teachers",
    "academic_years": "acadyears",
    "students": "students",
}


def unwrap_records(payload: Any, envelope: str) -> list[dict[str, Any]]:
    """Accept either a bare list or {envelope: [...]}; anything else is empty."""
    if isinstance(payload, list):
        return payload
    if isinstance(payload, Mapping) and isinstance(payload.get(envelope), list):
        return payload[envelope]
    return []


def _is_number(value: str) -> bool:
    try:
        float(value)
    except ValueError:
        return False
    return True


def _distinct(values: Iterable[Any]) -> list[str]:
    return list(dict.fromkeys(str(v) for v in values if v))


class ReferenceData(BaseModel):
    offerings: list[dict[str, Any]] = []
    classrooms: list[dict[str, Any]] = []
    teachers: list[dict[str, Any]] = []
    academic_years: list[dict[str, Any]] = []
    students: list[dict[str, Any]] = []

    @classmethod
    async def load(cls, sources: Mapping[str, Loader]) -> "ReferenceData":
        """Load every dataset that has a source.

        Args:
            sources: Dataset name (see DATASET_ENVELOPES) -> async loader
                returning the raw backend payload.

        Returns:
            ReferenceData with failed or missing datasets left empty.
        """
        data: dict[str, list[dict[str, Any]]] = {}
        for name, envelope in DATASET_ENVELOPES.items():
            loader = sources.get(name)
            if loader is None:
                continue
            try:
                data[name] = _RECORDS.validate_python(unwrap_records(await loader(), envelope))
            except Exception as e:
                log.warning(
                    "reference_fetch_failed", dataset=name, error=str(e), type=type(e).__name__
                )
                data[name] = []
        log.debug("reference_loaded", counts={k: len(v) for k, v in data.items()})
        return cls(**data)

    def semesters(self) -> list[str]:
        """Known semesters: numeric order when all are numbers, else text order."""
        values = _distinct(s.get("stu_curr_semester") for s in self.students)
        if all(_is_number(v) for v in values):
            return sorted(values, key=float)
        return sorted(values)

    def sections(self) -> list[str]:
        return sorted(_distinct(s.get("stu_section") for s in self.students))

    def teacher_ids(self) -> list[str]:
        return _distinct(t.get("teacherid") for t in self.teachers)

    def teacher_label(self, teacher_id: str | None) -> str:
        if not teacher_id:
            return "Not Assigned"
        teacher = next(
            (t for t in self.teachers if str(t.get("teacherid")) == str(teacher_id)),
            None,
        )
        if teacher is None:
            return f"({teacher_id})"
        return f"{teacher.get('teachername', '')} ({teacher['teacherid']})"

    def classroom_label(self, classroom_id: str) -> str:
        room = next(
            (r for r in self.classrooms if str(r.get("classroomid")) == str(classroom_id)),
            None,
        )
        if room is None:
            return f"Classroom - {classroom_id}"
        return room.get("classroomname") or f"Classroom - {room['classroomid']}"

    def offering_label(self, offering_id: str) -> str:
        offering = next(
            (o for o in self.offerings if str(o.get("offerid")) == str(offering_id)),
            None,
        )
        if offering and offering.get("coursename"):
            return f"{offering['coursename']} ({offering_id})"
        return offering_id

    def academic_year_options(self) -> list[str]:
        """Filter values for the academic-year selector.

        Each value is also its label, and it is what filter_visible compares
        against the routine's academic-year fields.
        """
        options = []
        for year in self.academic_years:
            value = next(
                (year[f] for f in ("acadyearname", "name", "acadyearid", "id") if year.get(f)),
                None,
            )
            if value is not None:
                options.append(str(value))
        return options
