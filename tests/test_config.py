"""Tests for config module."""

import importlib
from zoneinfo import ZoneInfo

import dotenv
import pytest

import nudge_bot.config as config_mod


@pytest.fixture()
def reload_config(monkeypatch):
    """Reload config under a patched environment, then restore it."""
    monkeypatch.setattr(dotenv, "load_dotenv", lambda: None)
    yield lambda: importlib.reload(config_mod)
    monkeypatch.undo()
    importlib.reload(config_mod)


def test_defaults(reload_config, monkeypatch):
    monkeypatch.delenv("NUDGE_POLL_SECONDS", raising=False)
    monkeypatch.delenv("NUDGE_LOG_LEVEL", raising=False)
    monkeypatch.delenv("NUDGE_EVENT_TIMEZONE", raising=False)

    reload_config()

    assert config_mod.POLL_SECONDS == 60
    assert config_mod.LOG_LEVEL == "INFO"
    assert config_mod.EVENT_TZ == "America/Los_Angeles"


def test_values_from_environment(reload_config, monkeypatch):
    monkeypatch.setenv("NUDGE_TIMEZONE", "Europe/Berlin")
    monkeypatch.setenv("NUDGE_EVENT_TIMEZONE", "Asia/Tokyo")
    monkeypatch.setenv("NUDGE_POLL_SECONDS", "15")
    monkeypatch.setenv("NUDGE_LOG_LEVEL", "debug")

    reload_config()

    assert config_mod.TZ == ZoneInfo("Europe/Berlin")
    assert config_mod.EVENT_TZ == "Asia/Tokyo"
    assert config_mod.POLL_SECONDS == 15
    assert config_mod.LOG_LEVEL == "DEBUG"


def test_unknown_timezone_exits(reload_config, monkeypatch, capsys):
    monkeypatch.setenv("NUDGE_TIMEZONE", "Mars/Olympus_Mons")

    with pytest.raises(SystemExit):
        reload_config()

    assert "NUDGE_TIMEZONE" in capsys.readouterr().err


def test_timezone_directory_exits(reload_config, monkeypatch, capsys):
    monkeypatch.setenv("NUDGE_EVENT_TIMEZONE", "America")

    with pytest.raises(SystemExit):
        reload_config()

    assert "NUDGE_EVENT_TIMEZONE: unknown timezone 'America'" in capsys.readouterr().err


@pytest.mark.parametrize("value", ["0", "-5", "soon"])
def test_bad_poll_seconds_exits(reload_config, monkeypatch, value):
    monkeypatch.setenv("NUDGE_POLL_SECONDS", value)

    with pytest.raises(SystemExit):
        reload_config()


def test_detect_local_tz_returns_a_name():
    name = config_mod._detect_local_tz()

    assert isinstance(name, str)
    assert name
