"""CLI handler for `nudge-bot reminder` subcommand."""

import argparse
import sys
from datetime import date

from nudge_bot.scheduling.errors import ReminderError
from nudge_bot.scheduling.reminders import (
    Reminder,
    active_reminders,
    append_reminder,
    deactivate_reminder,
)
from nudge_bot.scheduling.timeparse import format_time, parse_clock, parse_day_name
from nudge_bot.scheduling.triggers import Frequency


def _fmt_schedule(r: Reminder) -> str:
    nxt = r.next_trigger[:16].replace("T", " ") if r.next_trigger else "-"
    return f"{r.schedule_label}  (next {nxt})"


def run_reminder_command(argv: list[str]) -> None:
    parser = argparse.ArgumentParser(prog="nudge-bot reminder")
    sub = parser.add_subparsers(dest="action")

    add_p = sub.add_parser("add", help="Schedule a reminder")
    add_p.add_argument("--message", "-m", required=True, help="Reminder message")
    add_p.add_argument(
        "--time", "-t", required=True, help='Time of day, "14:30" or "2:30 PM"'
    )
    add_p.add_argument(
        "--frequency",
        "-f",
        default=Frequency.ONCE.value,
        choices=[f.value for f in Frequency],
    )
    add_p.add_argument("--day", help="Day name for weekly reminders (e.g. Mon)")
    add_p.add_argument(
        "--date", type=date.fromisoformat, help="YYYY-MM-DD for one-time reminders"
    )
    add_p.add_argument("--channel", default="", help="Discord channel ID")
    add_p.add_argument("--user", default="", help="Discord user ID to mention")
    add_p.add_argument("--guild", default="", help="Discord guild ID")

    list_p = sub.add_parser("list", help="Show active reminders")
    list_p.add_argument("--guild", default=None, help="Only this guild's reminders")

    cancel_p = sub.add_parser("cancel", help="Cancel a reminder by ID")
    cancel_p.add_argument("id", help="Reminder ID")
    cancel_p.add_argument("--guild", default=None, help="Guild that owns the reminder")

    args = parser.parse_args(argv)

    if args.action == "add":
        _handle_add(args)
    elif args.action == "list":
        _handle_list(args.guild)
    elif args.action == "cancel":
        _handle_cancel(args.id, args.guild)
    else:
        parser.print_help()
        sys.exit(1)


def _handle_add(args: argparse.Namespace) -> None:
    try:
        hour, minute = parse_clock(args.time)
        day_of_week = parse_day_name(args.day) if args.day is not None else None
        if args.frequency == Frequency.WEEKLY and day_of_week is None:
            raise ReminderError("--day is required for weekly reminders")
        reminder = Reminder.new(
            message=args.message,
            time=format_time(hour, minute),
            frequency=args.frequency,
            day_of_week=day_of_week,
            channel_id=args.channel,
            user_id=args.user,
            guild_id=args.guild,
            target_date=args.date,
        )
    except ReminderError as e:
        print(f"error: {e}", file=sys.stderr)
        sys.exit(1)
    append_reminder(reminder)
    print(f"scheduled {reminder.id}: {_fmt_schedule(reminder)} -- {reminder.message}")


def _handle_list(guild_id: str | None) -> None:
    reminders = active_reminders(guild_id)
    if not reminders:
        print("no active reminders")
        return
    for r in reminders:
        print(f"  {r.id}  {_fmt_schedule(r):48s}  {r.message}")


def _handle_cancel(reminder_id: str, guild_id: str | None) -> None:
    if deactivate_reminder(reminder_id, guild_id):
        print(f"cancelled {reminder_id}")
    else:
        print(f"reminder {reminder_id} not found")
        sys.exit(1)
