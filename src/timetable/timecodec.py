"""Clock-time parsing and the half-hour catalogue used by the timetable.

Times travel as "HH:MM" strings. For row placement they are reduced to a
comparable hour at half-hour resolution: minutes below 30 round down to the
hour, 30 and above count as half past. "09:45" therefore compares as 9.5.
"""

DAY_START_HOUR = 8
DAY_END_HOUR = 18

# Every valid start/end mark, 08:00 .. 18:00 inclusive (21 values)
HALF_HOUR_MARKS: tuple[str, ...] = tuple(
    f"{hour:02d}:{minute:02d}"
    for hour in range(DAY_START_HOUR, DAY_END_HOUR)
    for minute in (0, 30)
) + (f"{DAY_END_HOUR:02d}:00",)


def to_comparable_hour(value: str | None) -> float:
    """Convert "HH:MM" to its half-hour-resolution hour.

    Empty or missing input is treated as midnight (0), so such an entry never
    lands in a daytime row. Seconds, if present, are ignored.

    Raises:
        ValueError: If the hour or minute part is not an integer.
    """
    if not value:
        return 0
    parts = value.strip().split(":")
    hour = int(parts[0])
    minute = int(parts[1]) if len(parts) > 1 and parts[1] else 0
    return hour + (0.5 if minute >= 30 else 0)


def half_hour_marks() -> tuple[str, ...]:
    """Return the ordered catalogue of valid start/end marks."""
    return HALF_HOUR_MARKS


def is_valid_mark(value: str | None) -> bool:
    return value in HALF_HOUR_MARKS


def format_range(start: str | None, end: str | None) -> str:
    """Display string for a time range; "--" when either bound is missing."""
    if not start or not end:
        return "--"
    return f"{start} - {end}"


def format_duration(start: str | None, end: str | None) -> str:
    """Short duration badge, e.g. "2h" or "90m". Empty for non-positive spans."""
    hours = to_comparable_hour(end) - to_comparable_hour(start)
    if hours <= 0:
        return ""
    minutes = round(hours * 60)
    if minutes % 60 == 0:
        return f"{minutes // 60}h"
    return f"{minutes}m"


def day_short(day: str | None) -> str:
    return day[:3] if day else ""
