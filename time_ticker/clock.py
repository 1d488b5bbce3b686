from datetime import datetime
from typing import Protocol

from .errors import ClockError


class Clock(Protocol):
    def now(self) -> datetime:
        """Timezone-aware local time. Raises ClockError when unreadable."""
        ...


class SystemClock:
    def now(self) -> datetime:
        try:
            return datetime.now().astimezone()
        except (OSError, OverflowError, ValueError) as e:
            raise ClockError(f"SystemTime error: {e}") from e


SYSTEM_CLOCK = SystemClock()
