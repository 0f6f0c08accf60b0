"""CLI handler for `nudge-bot event` subcommand: weekly event windows and cron lines."""

import argparse
import sys
from datetime import datetime

from nudge_bot import config
from nudge_bot.scheduling.cron import build_cron, next_cron_fire
from nudge_bot.scheduling.errors import ReminderError
from nudge_bot.scheduling.timeparse import format_day_name, parse_clock, parse_day_name
from nudge_bot.scheduling.window import event_window
from nudge_bot.scheduling.zoned import load_zone

_FMT = "%a %Y-%m-%d %H:%M %Z"


def run_event_command(argv: list[str]) -> None:
    parser = argparse.ArgumentParser(prog="nudge-bot event")
    sub = parser.add_subparsers(dest="action")

    window_p = sub.add_parser("window", help="Show the upcoming Monday-to-Monday window")
    window_p.add_argument("--tz", default=None, help="IANA timezone name")

    cron_p = sub.add_parser("cron", help="Build a weekly cron expression")
    cron_p.add_argument("--time", "-t", required=True, help='"12:00" or "12:00 PM"')
    cron_p.add_argument("--day", "-d", required=True, help="Day name (e.g. Monday)")
    cron_p.add_argument("--tz", default=None, help="IANA timezone name")

    args = parser.parse_args(argv)

    try:
        if args.action == "window":
            _handle_window(args.tz or config.EVENT_TZ)
        elif args.action == "cron":
            _handle_cron(args.time, args.day, args.tz or config.EVENT_TZ)
        else:
            parser.print_help()
            sys.exit(1)
    except ReminderError as e:
        print(f"error: {e}", file=sys.stderr)
        sys.exit(1)


def _handle_window(tz: str) -> None:
    window = event_window(tz)
    print(f"start: {window.start.strftime(_FMT)}")
    print(f"end:   {window.end.strftime(_FMT)}")


def _handle_cron(time_text: str, day_text: str, tz: str) -> None:
    hour, minute = parse_clock(time_text)
    day_of_week = parse_day_name(day_text)
    expression = build_cron(minute, hour, day_of_week)
    zone = load_zone(tz)
    nxt = next_cron_fire(expression, datetime.now(zone), zone)
    print(f"{expression}  # every {format_day_name(day_of_week)} at {hour:02d}:{minute:02d} {tz}")
    if nxt is not None:
        print(f"next: {nxt.strftime(_FMT)}")
