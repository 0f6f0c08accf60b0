"""Deployment settings loaded from environment variables."""

import os
import sys
from pathlib import Path
from typing import NoReturn
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

load_dotenv()


def _detect_local_tz() -> str:
    """Detect the system's IANA timezone name. Falls back to UTC."""
    # Debian/Ubuntu: plain text file with IANA name
    etc_tz = Path("/etc/timezone")
    if etc_tz.exists():
        name = etc_tz.read_text().strip()
        if name:
            return name

    # Most Linux/WSL: /etc/localtime is a symlink into zoneinfo
    localtime = Path("/etc/localtime")
    if localtime.is_symlink():
        target = str(localtime.resolve())
        marker = "/zoneinfo/"
        idx = target.find(marker)
        if idx != -1:
            return target[idx + len(marker) :]

    return "UTC"


def _fail(message: str) -> NoReturn:
    print(message, file=sys.stderr)
    print("Fix it in .env or your environment.", file=sys.stderr)
    raise SystemExit(1)


def _load_zone(var: str, default: str) -> ZoneInfo:
    name = os.environ.get(var) or default
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        _fail(f"{var}: unknown timezone {name!r}")


def _load_poll_seconds() -> int:
    raw = os.environ.get("NUDGE_POLL_SECONDS") or "60"
    try:
        seconds = int(raw)
    except ValueError:
        seconds = 0
    if seconds < 1:
        _fail(f"NUDGE_POLL_SECONDS must be a positive integer, got {raw!r}")
    return seconds


# Reminder times are wall-clock readings in this zone; there is no per-reminder zone.
TZ: ZoneInfo = _load_zone("NUDGE_TIMEZONE", _detect_local_tz())
EVENT_TZ: str = _load_zone("NUDGE_EVENT_TIMEZONE", "America/Los_Angeles").key
POLL_SECONDS: int = _load_poll_seconds()
LOG_LEVEL: str = (os.environ.get("NUDGE_LOG_LEVEL") or "INFO").upper()
