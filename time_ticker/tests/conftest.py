from datetime import datetime, timedelta, timezone

import pytest

from time_ticker.controller import TickerController
from time_ticker.errors import ClockError
from time_ticker.models import DeadlineKind, DurationKind, Task
from time_ticker.repository import TaskRegistry

LOCAL = timezone(timedelta(hours=8))


class FakeClock:
    """Manually advanced clock; ``fail = True`` makes every read raise."""

    def __init__(self, start=None):
        self.current = start or datetime(2024, 5, 1, 12, 0, 0, tzinfo=LOCAL)
        self.fail = False

    def now(self):
        if self.fail:
            raise ClockError("clock unavailable")
        return self.current

    def advance(self, seconds: float):
        self.current += timedelta(seconds=seconds)


class FakePresenter:
    """Records everything the controller asks the GUI to do."""

    def __init__(self):
        self.inputs = []
        self.errors = []
        self.menu_refreshes = 0
        self.views = []
        self.quit_called = False
        self.fail_create = False
        self.create_hook = None
        self.created = []
        self.updated = []
        self.destroyed = []

    def prompt_new_task(self):
        return self.inputs.pop(0) if self.inputs else None

    def show_error(self, message):
        self.errors.append(message)

    def refresh_menu(self):
        self.menu_refreshes += 1

    def update_views(self, views):
        self.views = list(views)

    def quit(self):
        self.quit_called = True

    def create_surface(self, display):
        if self.create_hook is not None:
            self.create_hook()
        if self.fail_create:
            raise RuntimeError("no tray available")
        surface = {"index": display.index}
        self.created.append(surface)
        return surface

    def update_surface(self, surface, display):
        self.updated.append((surface, display.display_text))

    def destroy_surface(self, surface):
        self.destroyed.append(surface)


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def presenter():
    return FakePresenter()


@pytest.fixture()
def registry(clock):
    """Three duration tasks (10m, 20m, 30m) and one deadline an hour away."""
    tasks = [
        Task.create("a", DurationKind(timedelta(minutes=10)), clock=clock),
        Task.create("b", DurationKind(timedelta(minutes=20)), clock=clock),
        Task.create("c", DurationKind(timedelta(minutes=30)), clock=clock),
        Task.create("d", DeadlineKind(clock.now() + timedelta(hours=1)), clock=clock),
    ]
    return TaskRegistry(tasks, lock_timeout=0.05)


@pytest.fixture()
def controller(registry, presenter, clock):
    return TickerController(registry, presenter, clock=clock)


@pytest.fixture()
def task_at(registry):
    """Look up a task by index under the registry lock."""

    def lookup(index):
        with registry.editing(index) as task:
            return task

    return lookup
