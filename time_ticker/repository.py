import threading
from contextlib import contextmanager
from typing import Iterator, List, Optional

from .errors import LockError, TaskNotFound
from .models import Task


class TaskRegistry:
    """Ordered, index-addressed task list shared by the GUI thread and the ticker.

    One lock guards the whole sequence. Keep critical sections short and never
    call into widgets while holding it.
    """

    def __init__(self, tasks: Optional[List[Task]] = None, lock_timeout: float = 1.0):
        self._tasks: List[Task] = list(tasks or [])
        self._lock = threading.Lock()
        self.lock_timeout = lock_timeout

    @contextmanager
    def locked(self) -> Iterator[List[Task]]:
        if not self._lock.acquire(timeout=self.lock_timeout):
            raise LockError(self.lock_timeout)
        try:
            yield self._tasks
        finally:
            self._lock.release()

    @contextmanager
    def editing(self, index: int) -> Iterator[Task]:
        """Hold the lock and yield the task at ``index``."""
        with self.locked() as tasks:
            if not 0 <= index < len(tasks):
                raise TaskNotFound(index)
            yield tasks[index]

    def add_task(self, task: Task) -> int:
        with self.locked() as tasks:
            tasks.append(task)
            return len(tasks) - 1

    def delete_task(self, index: int) -> Task:
        # every task after ``index`` moves down by one
        with self.locked() as tasks:
            if 0 <= index < len(tasks):
                return tasks.pop(index)
        raise TaskNotFound(index)

    def __len__(self) -> int:
        with self.locked() as tasks:
            return len(tasks)
