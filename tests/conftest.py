"""Shared fixtures for nudge-bot tests."""

import os

os.environ.setdefault("NUDGE_TIMEZONE", "America/Los_Angeles")
os.environ.setdefault("NUDGE_EVENT_TIMEZONE", "America/Los_Angeles")

from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

LA = ZoneInfo("America/Los_Angeles")


@pytest.fixture(autouse=True)
def _fixed_zone(monkeypatch):
    """Pin the deployment zone so trigger math never depends on the host."""
    import nudge_bot.config as config_mod

    monkeypatch.setattr(config_mod, "TZ", LA)


@pytest.fixture()
def data_dir(tmp_path, monkeypatch):
    """Redirect all data file paths to a temp directory."""
    import nudge_bot.scheduling.reminders as reminders_mod
    import nudge_bot.storage as storage_mod

    monkeypatch.setattr(storage_mod, "DATA_DIR", tmp_path)
    monkeypatch.setattr(reminders_mod, "REMINDERS_DIR", tmp_path / "reminders")
    return tmp_path


class FakeClock:
    """Injectable clock; tests move `now` by hand."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture()
def clock():
    return FakeClock(datetime(2026, 10, 20, 9, 5, tzinfo=LA))
