"""Parsing and formatting of human time-of-day strings and day names.

Day numbers follow cron: Sunday=0 ... Saturday=6.
"""

import re

from nudge_bot.scheduling.errors import (
    InvalidDayName,
    InvalidDayOfWeek,
    InvalidFormat,
    InvalidHour,
    InvalidMinute,
)

DAY_NAMES = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)

_DAY_ALIASES: dict[str, int] = {
    "sunday": 0,
    "sun": 0,
    "monday": 1,
    "mon": 1,
    "tuesday": 2,
    "tue": 2,
    "tues": 2,
    "wednesday": 3,
    "wed": 3,
    "thursday": 4,
    "thu": 4,
    "thur": 4,
    "thurs": 4,
    "friday": 5,
    "fri": 5,
    "saturday": 6,
    "sat": 6,
}

# A leading "-" fails the pattern, so negative hours surface as InvalidFormat.
_TIME_24H = re.compile(r"^([0-9]{1,2}):([0-9]{2})$")
_TIME_12H = re.compile(r"^([0-9]{1,2}):([0-9]{2})\s*(am|pm)$", re.IGNORECASE)
_MERIDIEM = re.compile(r"(am|pm)$", re.IGNORECASE)


def check_hour(hour: int) -> int:
    if not 0 <= hour <= 23:
        raise InvalidHour(f"Invalid hour: {hour}. Must be between 0-23.")
    return hour


def check_minute(minute: int) -> int:
    if not 0 <= minute <= 59:
        raise InvalidMinute(f"Invalid minute: {minute}. Must be between 0-59.")
    return minute


def check_day_of_week(day_of_week: int) -> int:
    if not 0 <= day_of_week <= 6:
        raise InvalidDayOfWeek(
            f"Invalid day of week: {day_of_week}. "
            "Must be between 0-6 (0=Sunday, 6=Saturday)."
        )
    return day_of_week


def parse_time(text: str) -> tuple[int, int]:
    """Parse 24-hour "H:MM" / "HH:MM" into (hour, minute)."""
    match = _TIME_24H.match(text)
    if not match:
        raise InvalidFormat(
            f'Invalid time format: "{text}". '
            'Expected HH:MM format (e.g., "14:30" or "9:00").'
        )
    hour = check_hour(int(match.group(1)))
    minute = check_minute(int(match.group(2)))
    return hour, minute


def parse_time_12h(text: str) -> tuple[int, int]:
    """Parse "h:mm AM|PM" into a 24-hour (hour, minute)."""
    match = _TIME_12H.match(text.strip())
    if not match:
        raise InvalidFormat(
            f'Invalid time format: "{text}". Expected 12-hour format (e.g., "2:30 PM").'
        )
    hour = int(match.group(1))
    if not 1 <= hour <= 12:
        raise InvalidHour(f"Invalid hour: {hour}. Must be between 1-12.")
    minute = check_minute(int(match.group(2)))

    pm = match.group(3).lower() == "pm"
    if pm and hour != 12:
        hour += 12
    elif not pm and hour == 12:
        hour = 0
    return hour, minute


def parse_clock(text: str) -> tuple[int, int]:
    """Parse either form; a trailing AM/PM selects the 12-hour reading."""
    stripped = text.strip()
    if _MERIDIEM.search(stripped):
        return parse_time_12h(stripped)
    return parse_time(stripped)


def format_time(hour: int, minute: int) -> str:
    """Stored 24-hour form, zero-padded: "09:05"."""
    return f"{check_hour(hour):02d}:{check_minute(minute):02d}"


def format_time_12h(text: str) -> str:
    """"14:30" -> "2:30 PM"."""
    hour, minute = parse_time(text)
    period = "PM" if hour >= 12 else "AM"
    display = hour % 12 or 12
    return f"{display}:{minute:02d} {period}"


def parse_day_name(text: str) -> int:
    """Full or abbreviated day name, case-insensitive, to 0 (Sunday) .. 6."""
    day = _DAY_ALIASES.get(text.strip().lower())
    if day is None:
        raise InvalidDayName(
            f'Invalid day name: "{text}". '
            'Expected day name like "Monday", "mon", "Friday", etc.'
        )
    return day


def format_day_name(day_of_week: int) -> str:
    return DAY_NAMES[check_day_of_week(day_of_week)]
