"""
Day-of-week and calendar helpers for the weekly broadcast schedule.
"""

import re
from datetime import date, datetime, timedelta
from typing import Optional
from zoneinfo import ZoneInfo

UNKNOWN_DAY = "Unknown"

# Sunday-first, the order the schedule page lists days in
WEEKDAYS = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]

# datetime.weekday() numbering (Monday == 0)
_WEEKDAY_INDEX = {
    "Monday": 0,
    "Tuesday": 1,
    "Wednesday": 2,
    "Thursday": 3,
    "Friday": 4,
    "Saturday": 5,
    "Sunday": 6,
}

_DAY_ALIASES = {
    "sun": "Sunday", "sunday": "Sunday",
    "mon": "Monday", "monday": "Monday",
    "tue": "Tuesday", "tues": "Tuesday", "tuesday": "Tuesday",
    "wed": "Wednesday", "wednesday": "Wednesday",
    "thu": "Thursday", "thur": "Thursday", "thurs": "Thursday", "thursday": "Thursday",
    "fri": "Friday", "friday": "Friday",
    "sat": "Saturday", "saturday": "Saturday",
}


def normalize_day(value: Optional[str]) -> str:
    """
    Map a free-form day label to a canonical weekday name.

    Exact names and common abbreviations match first ("sat", "Thurs.");
    otherwise the first full weekday name found in the text wins
    ("Monday, Oct 20" -> "Monday"). Anything else is "Unknown".
    """
    if not value:
        return UNKNOWN_DAY

    cleaned = re.sub(r"[^a-z ]", "", value.lower()).strip()
    if cleaned in _DAY_ALIASES:
        return _DAY_ALIASES[cleaned]

    return find_weekday_in_text(value)


def find_weekday_in_text(text: Optional[str]) -> str:
    """Return the first weekday (checked Sunday..Saturday) mentioned in text."""
    if not text:
        return UNKNOWN_DAY

    lowered = text.lower()
    for day in WEEKDAYS:
        if day.lower() in lowered:
            return day
    return UNKNOWN_DAY


def is_known_day(day: str) -> bool:
    return day in _WEEKDAY_INDEX


def next_occurrence(day: str, reference: date) -> date:
    """
    Earliest date on or after ``reference`` that falls on ``day``.

    Same-day counts: if ``reference`` already is a ``day`` it is returned
    unchanged.

    Raises:
        ValueError: if ``day`` is not a canonical weekday name
    """
    if day not in _WEEKDAY_INDEX:
        raise ValueError(f"Unknown weekday: {day!r}")

    days_ahead = (_WEEKDAY_INDEX[day] - reference.weekday()) % 7
    return reference + timedelta(days=days_ahead)


def next_airing_after(day: str, reference: date) -> date:
    """Earliest date strictly after ``reference`` that falls on ``day``."""
    occurrence = next_occurrence(day, reference)
    if occurrence == reference:
        occurrence += timedelta(days=7)
    return occurrence


def air_date_for(day: str, reference: date) -> str:
    """ISO air date for a schedule slot; unknown days pin to the reference date."""
    if not is_known_day(day):
        return format_iso(reference)
    return format_iso(next_occurrence(day, reference))


def format_iso(value: date) -> str:
    return value.isoformat()


def today(timezone: str = "UTC") -> date:
    """Current calendar date in the given IANA timezone."""
    return datetime.now(ZoneInfo(timezone)).date()


def previous_day(value: date) -> date:
    return value - timedelta(days=1)
