"""Zoned calendar arithmetic on immutable datetime values."""

from datetime import UTC, date, datetime, time
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from nudge_bot.scheduling.errors import InvalidTimezone


def load_zone(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError) as e:
        raise InvalidTimezone(f"Unknown timezone: {name!r}") from e


def to_local(instant: datetime, tz: ZoneInfo) -> datetime:
    """View an instant on tz's wall clock. Naive values are taken as tz wall time."""
    if instant.tzinfo is None:
        return instant.replace(tzinfo=tz)
    return instant.astimezone(tz)


def at_local(day: date, hour: int, minute: int, tz: ZoneInfo) -> datetime:
    """The instant tz's clock reads hour:minute on day.

    Readings skipped by a DST gap resolve to the same offset past the gap
    (02:30 on a spring-forward night becomes 03:30). Repeated readings pick
    the first occurrence.
    """
    naive = datetime.combine(day, time(hour, minute))
    return naive.replace(tzinfo=tz).astimezone(UTC).astimezone(tz)


def not_after(a: datetime, b: datetime) -> bool:
    """a <= b as absolute instants.

    Aware datetimes sharing a tzinfo compare by wall clock and ignore fold,
    so both sides go through UTC first.
    """
    return a.astimezone(UTC) <= b.astimezone(UTC)


def sunday_weekday(value: datetime | date) -> int:
    """Weekday with Sunday=0 ... Saturday=6 (cron numbering)."""
    return (value.weekday() + 1) % 7
