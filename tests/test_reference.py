"""Tests for reference datasets and display labels."""

from src.timetable.reference import ReferenceData, unwrap_records


def _loader(payload):
    async def load():
        return payload

    return load


async def _failing():
    raise ConnectionError("teachers endpoint down")


async def test_load_unwraps_envelopes_and_lists():
    data = await ReferenceData.load(
        {
            "offerings": _loader({"offerings": [{"offerid": "OFF-1"}]}),
            "classrooms": _loader([{"classroomid": "R-1"}]),
            "academic_years": _loader({"acadyears": [{"acadyearname": "2025-26"}]}),
        }
    )
    assert data.offerings == [{"offerid": "OFF-1"}]
    assert data.classrooms == [{"classroomid": "R-1"}]
    assert data.academic_years == [{"acadyearname": "2025-26"}]
    assert data.teachers == []
    assert data.students == []


async def test_failed_dataset_degrades_to_empty():
    data = await ReferenceData.load(
        {
            "teachers": _failing,
            "classrooms": _loader([{"classroomid": "R-1"}]),
        }
    )
    assert data.teachers == []
    assert data.classrooms == [{"classroomid": "R-1"}]


async def test_malformed_dataset_degrades_without_losing_the_others():
    data = await ReferenceData.load(
        {
            "academic_years": _loader(["2025-26", "2026-27"]),
            "teachers": _loader({"teachers": [{"teacherid": 15, "teachername": "R. Das"}]}),
        }
    )
    assert data.academic_years == []
    assert data.academic_year_options() == []
    assert data.teacher_label("15") == "R. Das (15)"


def test_unwrap_records_rejects_unexpected_shapes():
    assert unwrap_records({"other": []}, "students") == []
    assert unwrap_records("error", "students") == []
    assert unwrap_records(None, "students") == []


def test_semesters_sorted_numerically_when_all_numeric():
    data = ReferenceData(
        students=[
            {"stu_curr_semester": "10"},
            {"stu_curr_semester": 2},
            {"stu_curr_semester": "2"},
            {"stu_curr_semester": ""},
            {"stu_curr_semester": "1"},
        ]
    )
    assert data.semesters() == ["1", "2", "10"]


def test_semesters_sorted_lexicographically_otherwise():
    data = ReferenceData(
        students=[{"stu_curr_semester": "10"}, {"stu_curr_semester": "2"}, {"stu_curr_semester": "II"}]
    )
    assert data.semesters() == ["10", "2", "II"]


def test_sections_sorted():
    data = ReferenceData(
        students=[{"stu_section": "C"}, {"stu_section": "A"}, {"stu_section": "C"}, {}]
    )
    assert data.sections() == ["A", "C"]


def test_teacher_label():
    data = ReferenceData(teachers=[{"teacherid": 15, "teachername": "R. Das"}])
    assert data.teacher_label(None) == "Not Assigned"
    assert data.teacher_label("") == "Not Assigned"
    assert data.teacher_label("15") == "R. Das (15)"
    assert data.teacher_label("99") == "(99)"
    assert data.teacher_ids() == ["15"]


def test_classroom_label():
    data = ReferenceData(
        classrooms=[
            {"classroomid": "R-1", "classroomname": "Seminar Hall"},
            {"classroomid": "R-2"},
        ]
    )
    assert data.classroom_label("R-1") == "Seminar Hall"
    assert data.classroom_label("R-2") == "Classroom - R-2"
    assert data.classroom_label("R-3") == "Classroom - R-3"


def test_offering_label():
    data = ReferenceData(
        offerings=[{"offerid": "OFF-1", "coursename": "B.Sc Physics"}, {"offerid": "OFF-2"}]
    )
    assert data.offering_label("OFF-1") == "B.Sc Physics (OFF-1)"
    assert data.offering_label("OFF-2") == "OFF-2"
    assert data.offering_label("OFF-3") == "OFF-3"


def test_academic_year_options_use_first_present_field():
    data = ReferenceData(
        academic_years=[
            {"acadyearname": "2025-26", "acadyearid": 3},
            {"name": "2024-25"},
            {"id": 7},
            {},
        ]
    )
    assert data.academic_year_options() == ["2025-26", "2024-25", "7"]
