"""Exception types raised by the time_ticker core.

The controller is the only place that catches these; everything below it
raises and lets the caller decide.
"""


class TimeTickerError(Exception):
    pass


# ---- time input parsing ----

class ParseError(TimeTickerError):
    """Malformed time input text. Shown to the user, never mutates tasks."""


class InvalidFormat(ParseError):
    pass


class MissingTimeInput(ParseError):
    pass


class InvalidDurationUnit(ParseError):
    def __init__(self, unit: str):
        super().__init__(f"Invalid duration unit: '{unit}'")
        self.unit = unit


class ZeroDuration(ParseError):
    def __init__(self):
        super().__init__("Duration cannot be zero")


class TimezoneConversion(ParseError):
    pass


# ---- clock / registry ----

class ClockError(TimeTickerError):
    """A wall-clock read failed (or went backwards past a start mark)."""


class LockError(TimeTickerError):
    def __init__(self, timeout: float):
        super().__init__(f"Failed to acquire lock on tasks within {timeout:g}s")
        self.timeout = timeout


class TaskNotFound(TimeTickerError):
    def __init__(self, index: int):
        super().__init__(f"Task not found at index: {index}")
        self.index = index


# ---- menu action strings ----

class ActionDecodeError(TimeTickerError):
    pass


class InvalidActionFormat(ActionDecodeError):
    def __init__(self, action: str):
        super().__init__(f"Invalid action string format: '{action}'")
        self.action = action


class ParseActionIndex(ActionDecodeError):
    def __init__(self, action: str, suffix: str):
        super().__init__(f"Failed to parse index from action string '{action}': '{suffix}'")
        self.action = action
        self.suffix = suffix
