"""Five-field cron expressions for "this time, this weekday, every week" schedules."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

from apscheduler.triggers.cron import CronTrigger

from nudge_bot.scheduling.errors import InvalidFormat
from nudge_bot.scheduling.timeparse import check_day_of_week, check_hour, check_minute

log = logging.getLogger(__name__)

_ONE_MICROSECOND = timedelta(microseconds=1)

# Standard cron: 0=Sunday. APScheduler CronTrigger: 0=Monday.
# Convert numeric values to named days to avoid the mismatch.
_CRON_DOW = {
    "0": "sun",
    "1": "mon",
    "2": "tue",
    "3": "wed",
    "4": "thu",
    "5": "fri",
    "6": "sat",
    "7": "sun",
}


def build_cron(minute: int, hour: int, day_of_week: int) -> str:
    """Weekly cron expression: build_cron(0, 12, 1) == "0 12 * * 1" (Mondays at noon).

    Fields are validated in order: minute, hour, day of week.
    """
    check_minute(minute)
    check_hour(hour)
    check_day_of_week(day_of_week)
    expression = f"{minute} {hour} * * {day_of_week}"
    log.debug("Built cron expression %r", expression)
    return expression


def _convert_dow(dow: str) -> str:
    """Convert standard cron day_of_week (0=Sun) to APScheduler names."""
    if dow == "*" or dow.startswith("*/"):
        return dow

    converted = []
    for part in dow.split(","):
        step = ""
        if "/" in part:
            part, step = part.split("/", 1)
            step = f"/{step}"
        if "-" in part:
            a, b = part.split("-", 1)
            converted.append(f"{_CRON_DOW.get(a, a)}-{_CRON_DOW.get(b, b)}{step}")
        else:
            converted.append(f"{_CRON_DOW.get(part, part)}{step}")
    return ",".join(converted)


def cron_trigger(expression: str, tz: ZoneInfo) -> CronTrigger:
    parts = expression.split()
    if len(parts) != 5:
        raise InvalidFormat(
            f"Invalid cron expression: {expression!r}. Expected 5 space-separated fields."
        )
    try:
        return CronTrigger(
            minute=parts[0],
            hour=parts[1],
            day=parts[2],
            month=parts[3],
            day_of_week=_convert_dow(parts[4]),
            timezone=tz,
        )
    except ValueError as e:
        raise InvalidFormat(f"Invalid cron expression: {expression!r}: {e}") from e


def next_cron_fire(expression: str, after: datetime, tz: ZoneInfo) -> datetime | None:
    """Next fire time strictly after `after`, on tz's wall clock."""
    trigger = cron_trigger(expression, tz)
    # CronTrigger treats `now` as inclusive and rounds it up to a whole second,
    # so one microsecond past `after` yields the first fire strictly after it.
    return trigger.get_next_fire_time(None, after.astimezone(tz) + _ONE_MICROSECOND)
