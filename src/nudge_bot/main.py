"""Entry point for nudge-bot."""

from __future__ import annotations

import asyncio
import logging
import os
import signal
import sys
from importlib import import_module
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from nudge_bot.bot import NudgeBot

HELP = """\
nudge-bot -- recurring Discord reminders

commands:
  nudge-bot                  Run the Discord bot
  nudge-bot reminder add     Schedule a once / daily / weekly reminder
  nudge-bot reminder list    Show active reminders
  nudge-bot reminder cancel  Cancel a reminder by ID
  nudge-bot event window     Show the next Monday-noon event window
  nudge-bot event cron       Build a weekly cron expression
  nudge-bot help             Show this help message

examples:
  nudge-bot reminder add -t "9:00 AM" -f daily -m "stand-up" --channel 123
  nudge-bot reminder add -t 18:30 -f weekly --day fri -m "timesheets"
  nudge-bot event window --tz Europe/Berlin
  nudge-bot event cron -t "12:00 PM" -d Monday
"""

log = logging.getLogger(__name__)


def _setup_logging() -> None:
    from nudge_bot.config import LOG_LEVEL

    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _dispatch_subcommand() -> bool:
    """Route CLI subcommands. Returns True if handled."""
    if len(sys.argv) < 2:
        return False
    cmd = sys.argv[1]
    rest = sys.argv[2:]
    if cmd in ("help", "--help", "-h"):
        print(HELP)
        return True
    routes: dict[str, tuple[str, str]] = {
        "reminder": ("nudge_bot.scheduling.reminder_cmd", "run_reminder_command"),
        "event": ("nudge_bot.scheduling.event_cmd", "run_event_command"),
    }
    if cmd in routes:
        mod_path, func_name = routes[cmd]
        getattr(import_module(mod_path), func_name)(rest)
        return True
    print(f"unknown command: {cmd}\n", file=sys.stderr)
    print(HELP, file=sys.stderr)
    raise SystemExit(1)


async def _run(bot: NudgeBot, token: str) -> None:
    """Run the bot; close it (and its scheduler) on SIGTERM/SIGINT."""
    loop = asyncio.get_running_loop()
    _background_tasks: set[asyncio.Task[None]] = set()

    def _on_signal(sig_name: str) -> None:
        log.info("Received %s, shutting down", sig_name)
        task = loop.create_task(bot.close())
        _background_tasks.add(task)
        task.add_done_callback(_background_tasks.discard)

    loop.add_signal_handler(signal.SIGTERM, _on_signal, "SIGTERM")
    loop.add_signal_handler(signal.SIGINT, _on_signal, "SIGINT")

    try:
        await bot.start(token)
    except asyncio.CancelledError:
        pass  # Signal handler already closed the bot
    finally:
        if not bot.is_closed():
            await bot.close()


def main() -> None:
    _setup_logging()
    if _dispatch_subcommand():
        return

    token = os.environ.get("DISCORD_TOKEN")
    if not token:
        print("Set DISCORD_TOKEN in .env")
        raise SystemExit(1)

    from nudge_bot.bot import create_bot

    bot = create_bot()
    asyncio.run(_run(bot, token))


if __name__ == "__main__":
    main()
