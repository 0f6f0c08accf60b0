"""Tests for cron.py — weekly cron builder and APScheduler translation."""

from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from nudge_bot.scheduling.cron import _convert_dow, build_cron, cron_trigger, next_cron_fire
from nudge_bot.scheduling.errors import InvalidDayOfWeek, InvalidFormat, InvalidHour, InvalidMinute

LA = ZoneInfo("America/Los_Angeles")


def test_build_cron_monday_noon():
    assert build_cron(0, 12, 1) == "0 12 * * 1"


def test_build_cron_friday_evening():
    assert build_cron(30, 18, 5) == "30 18 * * 5"


def test_build_cron_bounds_are_inclusive():
    assert build_cron(59, 23, 6) == "59 23 * * 6"
    assert build_cron(0, 0, 0) == "0 0 * * 0"


def test_build_cron_invalid_minute():
    with pytest.raises(InvalidMinute):
        build_cron(-1, 12, 1)
    with pytest.raises(InvalidMinute):
        build_cron(60, 12, 1)


def test_build_cron_invalid_hour():
    with pytest.raises(InvalidHour):
        build_cron(0, 24, 1)


def test_build_cron_invalid_day_of_week():
    with pytest.raises(InvalidDayOfWeek):
        build_cron(0, 12, 7)


def test_build_cron_checks_minute_then_hour_then_day():
    with pytest.raises(InvalidMinute):
        build_cron(-1, 24, 7)
    with pytest.raises(InvalidHour):
        build_cron(0, 24, 7)


@pytest.mark.parametrize(
    ("dow", "expected"),
    [
        ("*", "*"),
        ("*/2", "*/2"),
        ("1", "mon"),
        ("0", "sun"),
        ("7", "sun"),
        ("1-5", "mon-fri"),
        ("0,6", "sun,sat"),
        ("1-5/2", "mon-fri/2"),
    ],
)
def test_convert_dow(dow, expected):
    assert _convert_dow(dow) == expected


def test_next_cron_fire_weekly():
    # Tuesday morning -> the following Monday at noon
    after = datetime(2026, 10, 20, 9, 0, tzinfo=LA)

    fire = next_cron_fire("0 12 * * 1", after, LA)

    assert fire == datetime(2026, 10, 26, 12, 0, tzinfo=LA)
    assert fire.weekday() == 0


def test_next_cron_fire_is_strictly_after():
    after = datetime(2026, 10, 26, 12, 0, tzinfo=LA)

    fire = next_cron_fire("0 12 * * 1", after, LA)

    assert fire.date().isoformat() == "2026-11-02"
    assert (fire.hour, fire.minute) == (12, 0)


def test_next_cron_fire_within_last_second_before_slot():
    after = datetime(2026, 10, 19, 11, 59, 59, 500000, tzinfo=LA)

    fire = next_cron_fire("0 12 * * 1", after, LA)

    assert fire == datetime(2026, 10, 19, 12, 0, tzinfo=LA)


def test_next_cron_fire_just_past_slot():
    after = datetime(2026, 10, 19, 12, 0, 0, 1, tzinfo=LA)

    fire = next_cron_fire("0 12 * * 1", after, LA)

    assert fire == datetime(2026, 10, 26, 12, 0, tzinfo=LA)


def test_cron_trigger_requires_five_fields():
    with pytest.raises(InvalidFormat):
        cron_trigger("0 12 * *", LA)


def test_cron_trigger_rejects_out_of_range_field():
    with pytest.raises(InvalidFormat):
        cron_trigger("99 12 * * 1", LA)
