"""Reminder dispatch loop on APScheduler.

An interval job polls the store for due reminders, hands each one to the
dispatcher, then retires it (once) or moves its trigger forward (daily,
weekly). One poll runs at a time; a tick that lands while a poll is still in
flight is skipped.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Protocol

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from nudge_bot import config
from nudge_bot.scheduling.errors import ReminderError
from nudge_bot.scheduling.reminders import Reminder
from nudge_bot.scheduling.triggers import Frequency, compute_next_trigger

log = logging.getLogger(__name__)

Clock = Callable[[], datetime]
Dispatch = Callable[[Reminder], Awaitable[None]]


class ReminderStore(Protocol):
    def due(self, now: datetime) -> list[Reminder]: ...

    def claim(self, reminder: Reminder) -> bool: ...

    def save(self, reminder: Reminder) -> None: ...


class SchedulerState(Enum):
    IDLE = "idle"
    POLLING = "polling"


@dataclass(slots=True)
class PollResult:
    """Reminder ids touched by one poll."""

    dispatched: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)  # dispatch raised; still rescheduled
    skipped: list[str] = field(default_factory=list)  # left due for the next tick


def advance(reminder: Reminder, now: datetime) -> Reminder:
    """The reminder's state after firing at now."""
    if reminder.frequency == Frequency.ONCE:
        return replace(reminder, active=False)
    next_trigger = compute_next_trigger(
        reminder.time, reminder.frequency, reminder.day_of_week, now
    )
    return replace(reminder, next_trigger=next_trigger.isoformat())


def _system_clock() -> datetime:
    return datetime.now(config.TZ)


class ReminderScheduler:
    def __init__(
        self,
        store: ReminderStore,
        dispatch: Dispatch,
        *,
        clock: Clock | None = None,
        poll_seconds: int | None = None,
    ) -> None:
        self.store = store
        self.dispatch = dispatch
        self.clock = clock or _system_clock
        self.poll_seconds = poll_seconds or config.POLL_SECONDS
        self._state = SchedulerState.IDLE
        self._idle = asyncio.Event()
        self._idle.set()
        self._scheduler: AsyncIOScheduler | None = None

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def running(self) -> bool:
        return self._scheduler is not None

    async def poll(self) -> PollResult | None:
        """Run one tick. Returns None when a poll was already in flight."""
        if self._state is SchedulerState.POLLING:
            log.debug("Poll still in flight, skipping tick")
            return None

        self._state = SchedulerState.POLLING
        self._idle.clear()
        try:
            now = self.clock()
            result = PollResult()
            due = self.store.due(now)
            if due:
                log.info("Processing %d due reminder(s)", len(due))
            for reminder in due:
                await self._handle(reminder, now, result)
            return result
        finally:
            self._state = SchedulerState.IDLE
            self._idle.set()

    async def _handle(self, reminder: Reminder, now: datetime, result: PollResult) -> None:
        # A reminder that cannot be rescheduled is never dispatched.
        try:
            updated = advance(reminder, now)
        except ReminderError as e:
            log.warning("Skipping reminder %s: %s", reminder.id, e)
            result.skipped.append(reminder.id)
            return

        try:
            await self.dispatch(reminder)
        except Exception:
            log.exception("Dispatch failed for reminder %s", reminder.id)
            result.failed.append(reminder.id)
        else:
            result.dispatched.append(reminder.id)

        # Dispatch awaits the network; a cancel may have landed meanwhile.
        try:
            if not self.store.claim(reminder):
                log.info("Reminder %s changed during dispatch, not rescheduling", reminder.id)
                return
            self.store.save(updated)
        except Exception:
            log.exception("Could not persist reminder %s; it stays due", reminder.id)
            result.skipped.append(reminder.id)
            return

        if updated.active:
            log.info("Reminder %s rescheduled for %s", reminder.id, updated.next_trigger)
        else:
            log.info("One-time reminder %s retired", reminder.id)

    async def _tick(self) -> None:
        try:
            await self.poll()
        except Exception:
            log.exception("Reminder poll failed")

    def start(self) -> AsyncIOScheduler:
        """Start polling every poll_seconds; the first tick runs immediately. Needs a running loop."""
        if self._scheduler is not None:
            return self._scheduler
        scheduler = AsyncIOScheduler(timezone=config.TZ)
        # max_instances=2 keeps APScheduler from logging a warning when a tick
        # lands during a slow poll; poll() itself drops the overlapping tick.
        scheduler.add_job(
            self._tick,
            IntervalTrigger(seconds=self.poll_seconds, timezone=config.TZ),
            id="reminder_poll",
            max_instances=2,
            coalesce=True,
            next_run_time=datetime.now(config.TZ),
        )
        scheduler.start()
        self._scheduler = scheduler
        log.info("Reminder scheduler started (every %ds)", self.poll_seconds)
        return scheduler

    async def stop(self) -> None:
        """Stop the timer and wait for an in-flight poll to finish."""
        if self._scheduler is None:
            return
        self._scheduler.shutdown(wait=False)
        self._scheduler = None
        await self._idle.wait()
        log.info("Reminder scheduler stopped")
