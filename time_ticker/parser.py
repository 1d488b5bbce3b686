"""Parse the compact task shorthand typed into the "new task" dialog.

    1h30m#学习     duration of 1.5 hours labelled 学习
    25m            duration of 25 minutes, default label
    @19:00#工作    deadline at the next 19:00 local time

Everything after the first ``#`` is the label.
"""
import re
from datetime import datetime, timedelta, tzinfo
from typing import Optional, Tuple

from .errors import (
    InvalidDurationUnit,
    InvalidFormat,
    MissingTimeInput,
    TimezoneConversion,
    ZeroDuration,
)
from .models import DEFAULT_LABEL, DeadlineKind, DurationKind, TaskKind

_DURATION_TOKEN = re.compile(r"(\d+)\s*([hm])")
_UNIT_SECONDS = {"h": 3600, "m": 60}


def parse_time_input(text: str, now: Optional[datetime] = None) -> Tuple[str, TaskKind]:
    """Return ``(label, kind)`` for ``text`` or raise a ParseError.

    ``now`` pins the reference instant for deadlines. An aware datetime also
    fixes the local zone; ``None`` means the current time in the system zone.
    """
    time_part, _, label_part = text.partition("#")
    time_str = time_part.strip()
    label = label_part.strip() or DEFAULT_LABEL

    if not time_str:
        raise MissingTimeInput("Time string is missing or empty")

    if time_str.startswith("@"):
        return label, _parse_deadline(time_str[1:], now)
    return label, _parse_duration(time_str)


def _parse_deadline(clock_str: str, now: Optional[datetime]) -> DeadlineKind:
    try:
        at = datetime.strptime(clock_str, "%H:%M").time()
    except ValueError as e:
        raise InvalidFormat(f"Invalid deadline time '{clock_str}', expected HH:MM") from e

    tz = now.tzinfo if now is not None else None
    wall_now = (now or datetime.now()).replace(tzinfo=None)

    deadline = datetime.combine(wall_now.date(), at)
    if deadline < wall_now:
        deadline += timedelta(days=1)

    return DeadlineKind(_localize(deadline, tz))


def _localize(naive: datetime, tz: Optional[tzinfo]) -> datetime:
    # both folds agree on the offset unless the wall time is ambiguous or skipped (DST)
    if tz is None:
        early = naive.replace(fold=0).astimezone()
        late = naive.replace(fold=1).astimezone()
    else:
        early = naive.replace(tzinfo=tz, fold=0)
        late = naive.replace(tzinfo=tz, fold=1)
    if early.utcoffset() != late.utcoffset():
        raise TimezoneConversion(f"Failed to convert {naive.isoformat()} to local timezone")
    return early


def _parse_duration(time_str: str) -> DurationKind:
    tokens = _DURATION_TOKEN.findall(time_str)
    if not tokens:
        raise InvalidFormat(f"Invalid duration format: '{time_str}'")

    seconds = 0
    for value, unit in tokens:
        if unit not in _UNIT_SECONDS:
            raise InvalidDurationUnit(unit)
        try:
            amount = int(value)
        except ValueError as e:
            # digit runs past the interpreter's int conversion limit
            raise InvalidFormat(f"Invalid number in '{time_str}'") from e
        seconds += amount * _UNIT_SECONDS[unit]

    if seconds == 0:
        raise ZeroDuration()
    try:
        return DurationKind(timedelta(seconds=seconds))
    except OverflowError as e:
        raise InvalidFormat(f"Duration too large: '{time_str}'") from e
