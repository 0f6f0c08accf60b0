"""Reminder data model and markdown persistence.

Reminders fire once, daily or weekly at a wall-clock time in the deployment
zone. Cancelling a reminder, or firing a one-shot, flips `active` off; files
are never deleted by the scheduler.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date, datetime
from uuid import uuid4

from nudge_bot import config, storage
from nudge_bot.scheduling.errors import InvalidDayOfWeek, InvalidMessage, ReminderError
from nudge_bot.scheduling.timeparse import (
    check_day_of_week,
    format_day_name,
    format_time,
    format_time_12h,
    parse_time,
)
from nudge_bot.scheduling.triggers import Frequency, compute_next_trigger, parse_frequency
from nudge_bot.scheduling.zoned import to_local

REMINDERS_DIR = storage.DATA_DIR / "reminders"
log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Reminder:
    id: str
    message: str
    time: str  # HH:MM, 24-hour, deployment zone
    frequency: str = Frequency.ONCE.value
    day_of_week: int | None = None  # 0=Sunday, weekly only
    channel_id: str = ""
    user_id: str = ""
    guild_id: str = ""
    active: bool = True
    next_trigger: str | None = None  # ISO datetime

    def __post_init__(self) -> None:
        if not self.message.strip():
            raise InvalidMessage("Reminder message must not be empty")
        freq = parse_frequency(self.frequency)
        if freq is Frequency.WEEKLY:
            if self.day_of_week is None:
                raise InvalidDayOfWeek("Weekly reminders need a day of week (0-6).")
            check_day_of_week(self.day_of_week)
        elif self.day_of_week is not None:
            raise InvalidDayOfWeek(f"day_of_week only applies to weekly reminders, not {freq}")
        if self.active and self.next_trigger is None:
            raise ValueError("Active reminders need a next_trigger")

    @property
    def trigger_at(self) -> datetime | None:
        if self.next_trigger is None:
            return None
        return datetime.fromisoformat(self.next_trigger)

    @property
    def schedule_label(self) -> str:
        """"once at 2:30 PM", "daily at 9:00 AM", "weekly on Monday at 12:00 PM"."""
        try:
            when = format_time_12h(self.time)
        except ReminderError:
            when = self.time
        if self.frequency == Frequency.WEEKLY and self.day_of_week is not None:
            return f"weekly on {format_day_name(self.day_of_week)} at {when}"
        return f"{self.frequency} at {when}"

    @staticmethod
    def new(
        message: str,
        *,
        time: str,
        frequency: str = Frequency.ONCE.value,
        day_of_week: int | None = None,
        channel_id: str = "",
        user_id: str = "",
        guild_id: str = "",
        target_date: date | None = None,
        now: datetime | None = None,
    ) -> Reminder:
        """Validate input and compute the first trigger from now."""
        stored_time = format_time(*parse_time(time))
        reference = now or datetime.now(config.TZ)
        next_trigger = compute_next_trigger(
            stored_time, frequency, day_of_week, reference, target_date=target_date
        )
        return Reminder(
            id=uuid4().hex[:8],
            message=message,
            time=stored_time,
            frequency=frequency,
            day_of_week=day_of_week,
            channel_id=channel_id,
            user_id=user_id,
            guild_id=guild_id,
            next_trigger=next_trigger.isoformat(),
        )


def _sort_key(reminder: Reminder) -> float:
    """Trigger as a POSIX timestamp; missing or unreadable triggers sort last and never come due."""
    try:
        trigger = reminder.trigger_at
    except ValueError:
        log.warning("Reminder %s has unreadable next_trigger %r", reminder.id, reminder.next_trigger)
        return float("inf")
    if trigger is None:
        return float("inf")
    # Offset-less triggers are deployment wall time, not host time
    return to_local(trigger, config.TZ).timestamp()


def append_reminder(reminder: Reminder) -> None:
    storage.write_md(REMINDERS_DIR, reminder)
    log.info("Added reminder %s (%s)", reminder.id, reminder.schedule_label)


def save_reminder(reminder: Reminder) -> None:
    """Overwrite the stored copy of reminder (matched by id)."""
    storage.write_md(REMINDERS_DIR, reminder)


def list_reminders() -> list[Reminder]:
    return storage.read_md_dir(REMINDERS_DIR, Reminder)


def get_reminder(reminder_id: str) -> Reminder | None:
    return next((r for r in list_reminders() if r.id == reminder_id), None)


def claim_reminder(reminder: Reminder) -> bool:
    """True if the stored copy is still active with the trigger it was read with."""
    stored = get_reminder(reminder.id)
    return (
        stored is not None
        and stored.active
        and stored.next_trigger == reminder.next_trigger
    )


def active_reminders(guild_id: str | None = None) -> list[Reminder]:
    """Active reminders ordered by next trigger, optionally for one guild."""
    reminders = [
        r
        for r in list_reminders()
        if r.active and (guild_id is None or r.guild_id == guild_id)
    ]
    return sorted(reminders, key=_sort_key)


def due_reminders(now: datetime) -> list[Reminder]:
    """Active reminders whose trigger instant is at or before now, oldest first."""
    cutoff = to_local(now, config.TZ).timestamp()
    return [r for r in active_reminders() if _sort_key(r) <= cutoff]


def deactivate_reminder(reminder_id: str, guild_id: str | None = None) -> bool:
    """Soft-delete. False if missing, already inactive, or owned by another guild."""
    reminder = get_reminder(reminder_id)
    if reminder is None or not reminder.active:
        return False
    if guild_id is not None and reminder.guild_id != guild_id:
        return False
    save_reminder(replace(reminder, active=False))
    log.info("Cancelled reminder %s", reminder_id)
    return True


class FileReminderStore:
    """Scheduler-facing store over the markdown reminder files."""

    def due(self, now: datetime) -> list[Reminder]:
        return due_reminders(now)

    def claim(self, reminder: Reminder) -> bool:
        return claim_reminder(reminder)

    def save(self, reminder: Reminder) -> None:
        save_reminder(reminder)
