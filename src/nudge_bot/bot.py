"""Discord client that delivers due reminders to their channels."""

import logging

import discord

from nudge_bot.scheduling import FileReminderStore, Reminder, ReminderScheduler
from nudge_bot.scheduling.scheduler import Dispatch, ReminderStore

log = logging.getLogger(__name__)


class DeliveryError(RuntimeError):
    """A reminder's channel is missing or cannot receive messages."""


def format_reminder(reminder: Reminder) -> str:
    mention = f"<@{reminder.user_id}> " if reminder.user_id else ""
    return f"{mention}⏰ Reminder: **{reminder.message}**"


def channel_dispatcher(client: discord.Client) -> Dispatch:
    """Dispatch callable that posts a reminder to its channel_id."""

    async def dispatch(reminder: Reminder) -> None:
        if not reminder.channel_id:
            raise DeliveryError(f"Reminder {reminder.id} has no channel")
        channel_id = int(reminder.channel_id)
        channel = client.get_channel(channel_id)
        if channel is None:
            try:
                channel = await client.fetch_channel(channel_id)
            except discord.NotFound as e:
                raise DeliveryError(f"Channel {channel_id} not found") from e
        if not isinstance(channel, discord.abc.Messageable):
            raise DeliveryError(f"Channel {channel_id} cannot receive messages")
        await channel.send(format_reminder(reminder))
        log.info("Delivered reminder %s to channel %s", reminder.id, channel_id)

    return dispatch


class NudgeBot(discord.Client):
    """Owns the reminder scheduler; starts it on first ready, stops it on close."""

    def __init__(self, store: ReminderStore | None = None) -> None:
        super().__init__(intents=discord.Intents.default())
        self.scheduler = ReminderScheduler(store or FileReminderStore(), channel_dispatcher(self))
        self._ready_fired = False

    async def on_ready(self) -> None:
        print(f"nudge-bot online as {self.user}")

        # on_ready fires again on every reconnect; init must only happen once
        if self._ready_fired:
            return
        self._ready_fired = True

        self.scheduler.start()
        print(f"scheduler started: polling every {self.scheduler.poll_seconds}s")

    async def close(self) -> None:
        await self.scheduler.stop()
        await super().close()


def create_bot() -> NudgeBot:
    return NudgeBot()
