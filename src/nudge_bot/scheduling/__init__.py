"""Scheduling: trigger math, event windows, cron, reminders and the dispatch loop."""

from nudge_bot.scheduling.cron import build_cron, cron_trigger, next_cron_fire
from nudge_bot.scheduling.reminders import (
    FileReminderStore,
    Reminder,
    active_reminders,
    append_reminder,
    claim_reminder,
    deactivate_reminder,
    due_reminders,
    list_reminders,
)
from nudge_bot.scheduling.scheduler import ReminderScheduler, SchedulerState, advance
from nudge_bot.scheduling.triggers import Frequency, compute_next_trigger
from nudge_bot.scheduling.window import (
    EventWindow,
    event_window,
    following_monday_end,
    is_valid_timezone,
    next_monday_noon,
)

__all__ = [
    "EventWindow",
    "FileReminderStore",
    "Frequency",
    "Reminder",
    "ReminderScheduler",
    "SchedulerState",
    "active_reminders",
    "advance",
    "append_reminder",
    "build_cron",
    "claim_reminder",
    "compute_next_trigger",
    "cron_trigger",
    "deactivate_reminder",
    "due_reminders",
    "event_window",
    "following_monday_end",
    "is_valid_timezone",
    "list_reminders",
    "next_cron_fire",
    "next_monday_noon",
]
