"""Tests for the render_timetable CLI script."""

import argparse
import importlib.util
import json
from pathlib import Path

import pytest

SCRIPT = Path(__file__).resolve().parent.parent / "scripts" / "render_timetable.py"


@pytest.fixture(scope="module")
def cli():
    spec = importlib.util.spec_from_file_location("render_timetable", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def _args(**overrides):
    values = {
        "input": None,
        "session": None,
        "role": None,
        "teacher_id": None,
        "course": None,
        "academic_year": None,
        "json": False,
        "output": None,
    }
    values.update(overrides)
    return argparse.Namespace(**values)


@pytest.fixture
def dump(tmp_path, make_entry):
    path = tmp_path / "routines.json"
    records = [
        make_entry(class_teacher_id="T1").to_payload(),
        make_entry(
            class_teacher_id="T2",
            day_of_week="Friday",
            slot_code="C1",
            start_time="13:30",
            end_time="15:00",
            is_lab_session=True,
        ).to_payload(),
    ]
    path.write_text(json.dumps({"routines": records}), encoding="utf-8")
    return path


async def test_table_output(cli, dump, capsys):
    assert await cli.main(_args(input=str(dump))) == 0
    out = capsys.readouterr().out
    lines = out.splitlines()
    header = next(line for line in lines if line.startswith("Hour"))
    assert "Mon" in header and "Sat" in header
    assert any(line.startswith("9:00") and "OFF-101@R-12 09:00-10:00" in line for line in lines)


async def test_json_output_for_teacher(cli, dump, tmp_path):
    output = tmp_path / "out" / "grid.json"
    code = await cli.main(
        _args(input=str(dump), role="teacher", teacher_id="T2", json=True, output=str(output))
    )
    assert code == 0

    cells = json.loads(output.read_text(encoding="utf-8"))
    assert [(c["day"], c["hour"]) for c in cells] == [("Friday", 14)]
    routine = cells[0]["routines"][0]
    assert routine["category"] == "hybrid"
    assert routine["time"] == "13:30 - 15:00"
    assert routine["drclassteacherid"] == "T2"


async def test_missing_input(cli, tmp_path):
    assert await cli.main(_args(input=str(tmp_path / "nope.json"))) == 1


async def test_malformed_input(cli, tmp_path, capsys):
    broken = tmp_path / "routines.json"
    broken.write_text('{"routines": [', encoding="utf-8")
    assert await cli.main(_args(input=str(broken))) == 1
    captured = capsys.readouterr()
    assert "not valid JSON" in captured.err
    assert "Hour" not in captured.out
