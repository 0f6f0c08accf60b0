"""Next trigger instant for once / daily / weekly reminders.

Reminder times are wall-clock readings in the deployment zone (config.TZ).
Day offsets are applied to the local calendar date, then the clock is set,
so a reminder keeps its local time across DST changes and month or year ends.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from enum import StrEnum
from zoneinfo import ZoneInfo

from nudge_bot import config
from nudge_bot.scheduling.errors import InvalidDayOfWeek, InvalidFrequency, TriggerInPast
from nudge_bot.scheduling.timeparse import check_day_of_week, parse_time
from nudge_bot.scheduling.zoned import at_local, not_after, sunday_weekday, to_local


class Frequency(StrEnum):
    ONCE = "once"
    DAILY = "daily"
    WEEKLY = "weekly"


def parse_frequency(value: str) -> Frequency:
    try:
        return Frequency(value)
    except ValueError as e:
        choices = ", ".join(f.value for f in Frequency)
        raise InvalidFrequency(f"Invalid frequency: {value!r}. Must be one of {choices}.") from e


def compute_next_trigger(
    time: str,
    frequency: str,
    day_of_week: int | None,
    reference_now: datetime,
    *,
    tz: ZoneInfo | None = None,
    target_date: date | None = None,
) -> datetime:
    """First instant after reference_now at which the reminder should fire.

    target_date pins a `once` reminder to a calendar date instead of the next
    occurrence of its time; it is ignored for other frequencies.
    """
    hour, minute = parse_time(time)
    freq = parse_frequency(frequency)
    zone = tz or config.TZ
    now = to_local(reference_now, zone)
    today = now.date()

    if freq is Frequency.ONCE and target_date is not None:
        pinned = at_local(target_date, hour, minute, zone)
        if not_after(pinned, now):
            raise TriggerInPast(
                f"{target_date.isoformat()} {time} is not after {now.isoformat()}"
            )
        return pinned

    candidate = at_local(today, hour, minute, zone)

    if freq is Frequency.WEEKLY:
        if day_of_week is None:
            raise InvalidDayOfWeek("Weekly reminders need a day of week (0-6).")
        check_day_of_week(day_of_week)
        days_until = (day_of_week - sunday_weekday(now) + 7) % 7
        # Same weekday: today's slot if still ahead, otherwise a week out
        if days_until == 0 and not_after(candidate, now):
            days_until = 7
    else:
        days_until = 1 if not_after(candidate, now) else 0

    return at_local(today + timedelta(days=days_until), hour, minute, zone)
