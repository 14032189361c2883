"""Render the weekly routine timetable from a JSON dump as a table or JSON.

Standalone CLI script. Loads a routine dump (a list of routine records, or
{"routines": [...]}), applies the viewer's visibility rules and prints the
Monday-Saturday x 08:00-18:00 grid.

Run with: python scripts/render_timetable.py --input data/routines.json
Teacher:  python scripts/render_timetable.py --input data/routines.json --role teacher --teacher-id T1
Session:  python scripts/render_timetable.py --input data/routines.json --session data/session.json
Filters:  python scripts/render_timetable.py --input data/routines.json --course OFF-101 --academic-year 2025-26
JSON:     python scripts/render_timetable.py --input data/routines.json --json --output data/grid.json

Exit codes:
  0 = success (table or JSON on stdout, or file written with --output)
  1 = error (message on stderr)
"""

import argparse
import asyncio
import json
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Add project root to path for src imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from src.timetable.access import filter_visible  # noqa: E402
from src.timetable.config import get_config  # noqa: E402
from src.timetable.grid import TimetableGrid, session_category  # noqa: E402
from src.timetable.keys import render_key  # noqa: E402
from src.timetable.logging import setup_logging  # noqa: E402
from src.timetable.models import (  # noqa: E402
    DAYS,
    RefinementFilters,
    Role,
    RoutineEntry,
    ViewerContext,
)
from src.timetable.reference import unwrap_records  # noqa: E402
from src.timetable.registry import RoutineRegistry  # noqa: E402
from src.timetable.store import InMemoryRoutineStore  # noqa: E402
from src.timetable.timecodec import day_short, format_range  # noqa: E402


def _log(msg: str) -> None:
    """Write diagnostic messages to stderr so stdout stays clean for JSON."""
    print(msg, file=sys.stderr)


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Render the weekly routine timetable from a JSON dump.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--input",
        type=str,
        required=True,
        help="Routine dump: a JSON list or {\"routines\": [...]}.",
    )

    viewer_group = parser.add_mutually_exclusive_group()
    viewer_group.add_argument(
        "--session",
        type=str,
        default=None,
        help="JSON file with the login session (role, teacher_id).",
    )
    viewer_group.add_argument(
        "--role",
        choices=[r.value for r in Role],
        default=None,
        help="Viewer role (default: TIMETABLE_DEFAULT_ROLE, admin).",
    )
    parser.add_argument(
        "--teacher-id",
        type=str,
        default=None,
        help="Teacher id for --role teacher.",
    )

    parser.add_argument("--course", type=str, default=None, help="Admin: course offering id.")
    parser.add_argument(
        "--academic-year", type=str, default=None, help="Admin: academic year."
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output occupied cells as JSON instead of a table.",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Write output to this file instead of stdout.",
    )
    return parser.parse_args()


def _viewer_from_args(args: argparse.Namespace, default_role: str) -> ViewerContext:
    if args.session:
        session = json.loads(Path(args.session).read_text(encoding="utf-8"))
        return ViewerContext.from_session(session, default_role=default_role)
    if args.role:
        return ViewerContext(role=Role(args.role), teacher_id=args.teacher_id)
    return ViewerContext.from_session(None, default_role=default_role)


def _cell_text(entry: RoutineEntry) -> str:
    return f"{entry.subject_offering_id}@{entry.classroom_id} {entry.start_time}-{entry.end_time}"


def _format_grid(grid: TimetableGrid) -> str:
    """Format the grid as a text table: one row per hour, one column per day.

    Co-occupying routines in a cell are joined with " / ".
    """
    headers = ["Hour", *(day_short(d) for d in DAYS)]
    rows = []
    for hour, cells in grid.rows():
        rows.append(
            [f"{hour}:00", *(" / ".join(_cell_text(e) for e in cell) or "-" for cell in cells)]
        )

    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(cell))

    header_line = " | ".join(h.ljust(widths[i]) for i, h in enumerate(headers))
    separator = "-+-".join("-" * w for w in widths)
    row_lines = [" | ".join(cell.ljust(widths[i]) for i, cell in enumerate(row)) for row in rows]

    return "\n".join([header_line, separator, *row_lines])


def _grid_as_json(grid: TimetableGrid) -> list[dict]:
    """Occupied cells only, with the data a renderer needs per routine."""
    result = []
    for hour, cells in grid.rows():
        for day, cell in zip(DAYS, cells):
            if not cell:
                continue
            result.append(
                {
                    "day": day,
                    "hour": hour,
                    "routines": [
                        {
                            "key": render_key(e),
                            "category": session_category(e).value,
                            "time": format_range(e.start_time, e.end_time),
                            **e.to_payload(),
                        }
                        for e in cell
                    ],
                }
            )
    return result


async def main(args: argparse.Namespace) -> int:
    config = get_config()
    input_path = Path(args.input)
    if not input_path.exists():
        _log(f"Error: input file not found: {input_path}")
        return 1

    try:
        payload = json.loads(input_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        _log(f"Error: {input_path} is not valid JSON: {e}")
        return 1

    records = unwrap_records(payload, "routines")
    registry = RoutineRegistry(InMemoryRoutineStore(records))
    routines = await registry.refresh()

    viewer = _viewer_from_args(args, config.default_role)
    filters = RefinementFilters(course_id=args.course, academic_year=args.academic_year)
    visible = filter_visible(routines, viewer, filters)
    _log(f"render_timetable: {len(visible)}/{len(routines)} routines visible as {viewer.role.value}")

    grid = TimetableGrid(visible)
    if args.json:
        output = json.dumps(_grid_as_json(grid), indent=2, ensure_ascii=False)
    else:
        output = _format_grid(grid)

    if args.output:
        out = Path(args.output)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(output + "\n", encoding="utf-8")
        _log(f"  Written to {out}")
    else:
        print(output)
    return 0


if __name__ == "__main__":
    _config = get_config()
    setup_logging(json_output=_config.log_json, log_level=_config.log_level)
    sys.exit(asyncio.run(main(_parse_args())))
