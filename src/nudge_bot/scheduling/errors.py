"""Validation errors raised by the reminder scheduling core."""


class ReminderError(ValueError):
    """Base class for bad reminder input. Never retried."""


class InvalidMessage(ReminderError):
    pass


class InvalidFormat(ReminderError):
    pass


class InvalidHour(ReminderError):
    pass


class InvalidMinute(ReminderError):
    pass


class InvalidDayOfWeek(ReminderError):
    pass


class InvalidDayName(ReminderError):
    pass


class InvalidFrequency(ReminderError):
    pass


class InvalidTimezone(ReminderError):
    pass


class TriggerInPast(ReminderError):
    """A one-shot reminder's target date and time has already passed."""
