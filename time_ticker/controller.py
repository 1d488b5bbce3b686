"""Executes menu commands against the task registry.

This is the one place that mutates tasks and the one place that catches core
errors: a bad click, a clock hiccup or a busy lock only abandons the current
command and gets logged.
"""
import logging
from datetime import timedelta
from typing import Callable, Dict, List, Optional, Protocol

from .actions import ActionRouter, Command, Verb
from .clock import Clock
from .errors import ClockError, LockError, ParseError, TaskNotFound
from .models import Task, TaskView
from .parser import parse_time_input
from .pins import PinSet, SurfaceFactory
from .repository import TaskRegistry

logger = logging.getLogger(__name__)


class Presenter(SurfaceFactory, Protocol):
    """What the controller needs from the GUI."""

    def prompt_new_task(self) -> Optional[str]: ...

    def show_error(self, message: str) -> None: ...

    def refresh_menu(self) -> None: ...

    def update_views(self, views: List[TaskView]) -> None: ...

    def quit(self) -> None: ...


class TickerController:
    def __init__(
        self,
        registry: TaskRegistry,
        presenter: Presenter,
        router: Optional[ActionRouter] = None,
        pins: Optional[PinSet] = None,
        clock: Optional[Clock] = None,
    ):
        self.registry = registry
        self.clock = clock
        self.presenter = presenter
        self.router = router or ActionRouter()
        self.pins = pins or PinSet(factory=presenter)
        self._handlers: Dict[Verb, Callable[[Command], bool]] = {
            Verb.TOGGLE: self._toggle,
            Verb.PINNED_TOGGLE: self._toggle,
            Verb.RESET: self._reset,
            Verb.PINNED_RESET: self._reset,
            Verb.DELETE: self._delete,
            Verb.PIN: self._pin,
            Verb.UNPIN: self._unpin,
            Verb.NEW_TASK: self._new_task,
            Verb.EDIT: self._edit,
            Verb.QUIT: self._quit,
        }

    # ---- inbound ----

    def handle_action(self, identifier: str):
        command = self.router.route(identifier)
        if command is None:
            return
        logger.debug("menu %s -> %s", identifier, command.encode())
        self.execute(command)

    def execute(self, command: Command):
        try:
            changed = self._handlers[command.verb](command)
        except LockError as e:
            logger.error("Failed to lock tasks for %s: %s", command.encode(), e)
            return
        except TaskNotFound as e:
            logger.error("%s (%s)", e, command.verb)
            return
        if changed:
            self.presenter.refresh_menu()
            self.tick()

    # ---- outbound ----

    def snapshot(self) -> List[TaskView]:
        with self.registry.locked() as tasks:
            return [TaskView.of(i, t, self._remaining(t)) for i, t in enumerate(tasks)]

    def tick(self) -> List[TaskView]:
        try:
            views = self.snapshot()
        except LockError as e:
            logger.error("Failed to lock tasks for tick: %s", e)
            return []
        for view in views:
            if self.pins.is_pinned(view.index):
                self.pins.refresh(view)
        self.presenter.update_views(views)
        return views

    @staticmethod
    def tooltip(views: List[TaskView]) -> str:
        return "\n".join(v.display_text for v in views)

    # ---- command handlers; return True when the menu needs rebuilding ----

    @staticmethod
    def _remaining(task: Task) -> timedelta:
        try:
            return task.remaining_time()
        except ClockError as e:
            logger.error("Failed to read remaining time of '%s': %s", task.label, e)
            return task.remaining

    def _toggle(self, command: Command) -> bool:
        prefix = "固定任务" if command.verb is Verb.PINNED_TOGGLE else "任务"
        with self.registry.editing(command.index) as task:
            try:
                if task.running:
                    task.pause()
                    logger.info("⏸️ %s '%s' 已暂停", prefix, task.label)
                else:
                    task.start()
                    logger.info("▶️ %s '%s' 已开始", prefix, task.label)
            except ClockError as e:
                logger.error("Failed to toggle task %s: %s", task.label, e)
                return False
        return True

    def _reset(self, command: Command) -> bool:
        prefix = "固定任务" if command.verb is Verb.PINNED_RESET else "任务"
        with self.registry.editing(command.index) as task:
            try:
                task.reset()
            except ClockError as e:
                logger.error("Failed to reset task %s: %s", task.label, e)
                return False
            logger.info("🔄 %s '%s' 已重置", prefix, task.label)
        return True

    def _delete(self, command: Command) -> bool:
        index = command.index
        task = self.registry.delete_task(index)
        # pins and menu ids of later tasks move down with them
        self.pins.on_task_deleted(index)
        self.router.shift_after_delete(index)
        logger.warning("🗑️ 任务 '%s' 已删除", task.label)
        return True

    def _pin(self, command: Command) -> bool:
        with self.registry.editing(command.index) as task:
            task.pinned = not task.pinned
            view = TaskView.of(command.index, task, self._remaining(task))

        if not view.pinned:
            self._drop_pin(command.index)
            logger.info("📌 任务 '%s' 已取消固定", view.label)
            return True

        try:
            self.pins.pin(view)
        except Exception:
            logger.exception("Failed to create pinned tray icon for task '%s'", view.label)
            self._revert_pin(task)
        else:
            logger.info("📌 任务 '%s' 已固定", view.label)
        return True

    def _revert_pin(self, task: Task):
        try:
            with self.registry.locked():
                task.pinned = False
        except LockError as e:
            logger.error("Failed to lock tasks to revert pin of '%s': %s", task.label, e)
            task.pinned = False

    def _unpin(self, command: Command) -> bool:
        with self.registry.editing(command.index) as task:
            task.pinned = False
            label = task.label
        self._drop_pin(command.index)
        logger.info("📌 任务 '%s' 已取消固定", label)
        return True

    def _drop_pin(self, index: int):
        self.pins.unpin(index)
        self.router.forget_index(index)

    def _new_task(self, command: Command) -> bool:
        logger.info("📝 开始新建任务")
        text = self.presenter.prompt_new_task()
        if text is None:
            logger.info("用户取消了新建任务")
            return False
        logger.info("用户输入: %s", text)
        try:
            label, kind = parse_time_input(text)
        except ParseError as e:
            logger.error("❌ 解析任务输入失败: %s", e)
            self.presenter.show_error(str(e))
            return False
        try:
            task = Task.create(label, kind, clock=self.clock)
        except ClockError as e:
            logger.error("❌ 创建任务对象失败: %s", e)
            return False
        self.registry.add_task(task)
        logger.info("✅ 成功创建任务: %s", label)
        return True

    def _edit(self, command: Command) -> bool:
        logger.warning("✏️ 编辑功能待实现 (task %s)", command.index)
        return False

    def _quit(self, command: Command) -> bool:
        logger.info("退出")
        self.presenter.quit()
        return False
