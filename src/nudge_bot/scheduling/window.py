"""Weekly event window: Monday 12:00 through the following Monday 11:59.

All arithmetic is done on the zone's local calendar, so a DST change inside
the window never moves the local clock reading of either boundary.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

from nudge_bot.scheduling.errors import InvalidTimezone
from nudge_bot.scheduling.zoned import at_local, load_zone, not_after, to_local

log = logging.getLogger(__name__)

_MONDAY = 0  # date.weekday()
_WINDOW_START = (12, 0)
_WINDOW_END = (11, 59)


@dataclass(frozen=True, slots=True)
class EventWindow:
    start: datetime
    end: datetime


def is_valid_timezone(tz: str) -> bool:
    """True if tz names a zone in the IANA database."""
    try:
        load_zone(tz)
    except InvalidTimezone:
        return False
    return True


def _now(zone: ZoneInfo, now: datetime | None) -> datetime:
    return to_local(now, zone) if now is not None else datetime.now(zone)


def next_monday_noon(tz: str, *, now: datetime | None = None) -> datetime:
    """The first Monday 12:00 local strictly after now.

    Monday morning returns today; Monday at or after noon returns next week.
    """
    zone = load_zone(tz)
    local_now = _now(zone, now)
    days_ahead = (_MONDAY - local_now.weekday()) % 7
    target = at_local(local_now.date() + timedelta(days=days_ahead), *_WINDOW_START, zone)
    if not_after(target, local_now):
        target = at_local(target.date() + timedelta(days=7), *_WINDOW_START, zone)
    log.debug("Next Monday noon in %s after %s: %s", tz, local_now.isoformat(), target.isoformat())
    return target


def following_monday_end(start: datetime, tz: str) -> datetime:
    """11:59 local, seven calendar days after start's local date."""
    zone = load_zone(tz)
    local_start = to_local(start, zone)
    end = at_local(local_start.date() + timedelta(days=7), *_WINDOW_END, zone)
    log.debug("Following Monday end in %s from %s: %s", tz, local_start.isoformat(), end.isoformat())
    return end


def event_window(tz: str, *, now: datetime | None = None) -> EventWindow:
    start = next_monday_noon(tz, now=now)
    end = following_monday_end(start, tz)
    log.info("Event window in %s: %s -> %s", tz, start.isoformat(), end.isoformat())
    return EventWindow(start=start, end=end)
