import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import List, Optional, Union

from .clock import SYSTEM_CLOCK, Clock
from .errors import ClockError

logger = logging.getLogger(__name__)

ZERO = timedelta(0)
DEFAULT_LABEL = "未命名"


@dataclass(frozen=True)
class DurationKind:
    # 时间段类型：固定长度倒计时
    total: timedelta


@dataclass(frozen=True)
class DeadlineKind:
    # 截止时间类型：倒计时到某个本地时间点
    at: datetime


TaskKind = Union[DurationKind, DeadlineKind]


def _until(at: datetime, now: datetime) -> timedelta:
    return max(at - now, ZERO)


@dataclass
class Task:
    label: str
    kind: TaskKind
    clock: Clock = field(default=SYSTEM_CLOCK, repr=False, compare=False)
    running: bool = False
    started_at: Optional[datetime] = None
    # committed countdown value; only written on create/pause/reset
    remaining: timedelta = ZERO
    pinned: bool = False

    @classmethod
    def create(cls, label: str, kind: TaskKind, clock: Optional[Clock] = None) -> "Task":
        clock = clock or SYSTEM_CLOCK
        if isinstance(kind, DurationKind):
            remaining = kind.total
        else:
            remaining = _until(kind.at, clock.now())
        return cls(label=label, kind=kind, clock=clock, remaining=remaining)

    @property
    def is_duration(self) -> bool:
        return isinstance(self.kind, DurationKind)

    @property
    def is_deadline(self) -> bool:
        return isinstance(self.kind, DeadlineKind)

    def _elapsed(self, now: datetime) -> timedelta:
        elapsed = now - self.started_at
        if elapsed < ZERO:
            raise ClockError(f"clock reads {now.isoformat()}, before start mark {self.started_at.isoformat()}")
        return elapsed

    def start(self):
        if self.running:
            return
        now = self.clock.now()
        self.running = True
        self.started_at = now

    def pause(self):
        if not self.running:
            return
        # a clock failure leaves the task untouched
        remaining = max(self.remaining - self._elapsed(self.clock.now()), ZERO)
        self.remaining = remaining
        self.started_at = None
        self.running = False

    def reset(self):
        if isinstance(self.kind, DurationKind):
            remaining = self.kind.total
        else:
            remaining = _until(self.kind.at, self.clock.now())
        self.running = False
        self.started_at = None
        self.remaining = remaining

    def remaining_time(self) -> timedelta:
        """Time left on this task.

        Duration tasks behave like a stopwatch: elapsed time only counts while
        running and is subtracted from the committed ``remaining``. Deadline
        tasks behave like an alarm and are always measured live against the
        deadline, whatever the running/paused state says.
        """
        if isinstance(self.kind, DeadlineKind):
            return _until(self.kind.at, self.clock.now())
        if not self.running:
            return self.remaining
        return max(self.remaining - self._elapsed(self.clock.now()), ZERO)


def format_remaining(remaining: timedelta) -> str:
    secs = max(0, int(remaining.total_seconds()))
    h = secs // 3600
    m = (secs % 3600) // 60
    s = secs % 60
    return f"{h:02d}:{m:02d}:{s:02d}"


def format_display(remaining: timedelta, label: str) -> str:
    return f"{format_remaining(remaining)}#{label}"


def format_pinned_title(remaining: timedelta) -> str:
    # 固定托盘只显示 MM:SS
    parts = format_remaining(remaining).split(":")
    if len(parts) >= 3:
        return f"{parts[1]}:{parts[2]}"
    return "00:00"


@dataclass(frozen=True)
class TaskView:
    """Display-ready copy of one task, taken under the registry lock."""

    index: int
    label: str
    remaining: timedelta
    running: bool
    is_duration: bool
    pinned: bool

    @classmethod
    def of(cls, index: int, task: Task, remaining: timedelta) -> "TaskView":
        return cls(
            index=index,
            label=task.label,
            remaining=remaining,
            running=task.running,
            is_duration=task.is_duration,
            pinned=task.pinned,
        )

    @property
    def time_text(self) -> str:
        return format_remaining(self.remaining)

    @property
    def display_text(self) -> str:
        return format_display(self.remaining, self.label)

    @property
    def title_text(self) -> str:
        return format_pinned_title(self.remaining)


def bootstrap_tasks(clock: Optional[Clock] = None) -> List[Task]:
    """The demo task list a fresh process starts with."""
    clock = clock or SYSTEM_CLOCK
    demo = [
        ("工作1", lambda now: DeadlineKind(now + timedelta(hours=1))),
        ("学习1", lambda now: DurationKind(timedelta(minutes=30))),
        ("工作2", lambda now: DeadlineKind(now + timedelta(hours=2))),
        ("学习2", lambda now: DurationKind(timedelta(minutes=15))),
        ("工作3", lambda now: DeadlineKind(now + timedelta(hours=3))),
        ("学习3", lambda now: DurationKind(timedelta(minutes=45))),
    ]
    tasks = []
    for label, make_kind in demo:
        try:
            tasks.append(Task.create(label, make_kind(clock.now()), clock=clock))
        except ClockError as e:
            logger.error("Failed to create initial task %s: %s", label, e)
    return tasks
