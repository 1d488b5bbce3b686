import logging
from typing import Dict, List, Optional

from PySide6.QtCore import QObject, Qt, Slot
from PySide6.QtGui import QAction, QColor, QFont, QIcon, QPainter, QPixmap
from PySide6.QtWidgets import QApplication, QMenu, QStyle, QSystemTrayIcon

from ..actions import Command, Verb
from ..controller import TickerController
from ..errors import LockError
from ..models import TaskView
from ..pins import PinnedDisplay
from ..repository import TaskRegistry
from .dialogs import ask_new_task, show_parse_error
from .ticker import TickSource

logger = logging.getLogger(__name__)

# Simple translation mapping for menu captions
_TRANSLATIONS = {
    "zh": {
        "start": "开始",
        "pause": "暂停",
        "reset": "重置",
        "new": "新增",
        "edit": "编辑",
        "delete": "删除",
        "pin": "固定",
        "unpin": "取消固定",
        "new_task": "新建任务",
        "quit": "退出",
    },
    "en": {
        "start": "Start",
        "pause": "Pause",
        "reset": "Reset",
        "new": "New",
        "edit": "Edit",
        "delete": "Delete",
        "pin": "Pin",
        "unpin": "Unpin",
        "new_task": "New task",
        "quit": "Quit",
    },
}


def title_icon(text: str, size: int = 32) -> QIcon:
    # pinned tray icons show the task's MM:SS instead of the logo
    pm = QPixmap(size, size)
    pm.fill(QColor(45, 45, 45))
    painter = QPainter(pm)
    painter.setRenderHint(QPainter.Antialiasing)
    painter.setPen(Qt.white)
    painter.setFont(QFont("Monospace", int(size * 0.28), QFont.Bold))
    painter.drawText(pm.rect(), Qt.AlignCenter, text)
    painter.end()
    return QIcon(pm)


class PinnedSurface:
    """Widgets behind one pinned task's own tray icon."""

    def __init__(self, tray: QSystemTrayIcon, menu: QMenu, time_action: QAction, control_action: Optional[QAction]):
        self.tray = tray
        self.menu = menu
        self.time_action = time_action
        self.control_action = control_action


class TrayApp(QObject):
    """Tray icon + menus; the presentation side of TickerController."""

    def __init__(self, app: QApplication, registry: TaskRegistry, settings):
        super().__init__(app)
        self.app = app
        self.settings = settings
        self.lang = settings.lang
        self.icon = self._load_icon()
        self.controller = TickerController(registry, presenter=self)

        # 任务索引 -> 子菜单 / 开始暂停按钮，用于每秒更新文本
        self._submenus: Dict[int, QMenu] = {}
        self._control_actions: Dict[int, QAction] = {}
        self._menu: Optional[QMenu] = None

        self.tray = QSystemTrayIcon(self.icon, self)
        self.tray.setToolTip(settings.app_name)
        self.refresh_menu()

        self.ticker = TickSource(settings.tick_seconds, self)
        self.ticker.tick.connect(self._on_tick)

    def start(self):
        self.tray.show()
        self.controller.tick()
        self.ticker.start()

    def _tr(self, key: str) -> str:
        return _TRANSLATIONS.get(self.lang, _TRANSLATIONS["zh"]).get(key, key)

    def _caption(self, running: bool) -> str:
        return self._tr("pause") if running else self._tr("start")

    def _load_icon(self) -> QIcon:
        path = self.settings.icon_path
        if path.exists():
            return QIcon(str(path))
        logger.debug("Icon %s not found, using the standard icon", path)
        return self.app.style().standardIcon(QStyle.StandardPixmap.SP_ComputerIcon)

    def _add_action(self, menu: QMenu, text: str, command: Command) -> QAction:
        ident = self.controller.router.bind(command)
        action = menu.addAction(text)
        action.triggered.connect(lambda _checked=False, ident=ident: self._on_triggered(ident))
        return action

    @Slot()
    def _on_tick(self):
        self.controller.tick()

    def _on_triggered(self, ident: str):
        self.controller.handle_action(ident)

    # ---- Presenter ----

    def refresh_menu(self):
        router = self.controller.router
        router.rebuild()
        self._submenus.clear()
        self._control_actions.clear()

        try:
            views = self.controller.snapshot()
        except LockError as e:
            logger.error("Failed to lock tasks for menu rebuild: %s", e)
            views = []

        menu = QMenu()
        for view in views:
            i = view.index
            sub = menu.addMenu(view.display_text)
            self._submenus[i] = sub
            # 截止时间类型任务不需要开始/暂停/重置
            if view.is_duration:
                self._control_actions[i] = self._add_action(sub, self._caption(view.running), Command(Verb.TOGGLE, i))
                self._add_action(sub, self._tr("reset"), Command(Verb.RESET, i))
            sub.addSeparator()
            self._add_action(sub, self._tr("new"), Command(Verb.NEW_TASK))
            self._add_action(sub, self._tr("edit"), Command(Verb.EDIT, i))
            self._add_action(sub, self._tr("delete"), Command(Verb.DELETE, i))
            self._add_action(sub, self._tr("unpin") if view.pinned else self._tr("pin"), Command(Verb.PIN, i))

        menu.addSeparator()
        self._add_action(menu, self._tr("new_task"), Command(Verb.NEW_TASK))
        menu.addSeparator()
        self._add_action(menu, self._tr("quit"), Command(Verb.QUIT))

        self.tray.setContextMenu(menu)
        # the tray does not own its menu; keep it alive until replaced
        old, self._menu = self._menu, menu
        if old is not None:
            old.deleteLater()

    def update_views(self, views: List[TaskView]):
        for view in views:
            sub = self._submenus.get(view.index)
            if sub is not None:
                sub.setTitle(view.display_text)
            control = self._control_actions.get(view.index)
            if control is not None:
                control.setText(self._caption(view.running))
        self.tray.setToolTip(self.controller.tooltip(views) or self.settings.app_name)

    def prompt_new_task(self) -> Optional[str]:
        return ask_new_task(None, lang=self.lang)

    def show_error(self, message: str):
        show_parse_error(None, message, lang=self.lang)

    def quit(self):
        self.ticker.stop()
        self.controller.pins.clear()
        self.tray.hide()
        self.app.quit()

    # ---- SurfaceFactory ----

    def create_surface(self, display: PinnedDisplay) -> PinnedSurface:
        menu = QMenu()
        time_action = menu.addAction(display.display_text)
        time_action.setEnabled(False)
        menu.addSeparator()

        control_action = None
        if display.control_running is not None:
            control_action = self._add_action(
                menu, self._caption(display.control_running), Command(Verb.PINNED_TOGGLE, display.index)
            )
            self._add_action(menu, self._tr("reset"), Command(Verb.PINNED_RESET, display.index))
            menu.addSeparator()
        self._add_action(menu, self._tr("unpin"), Command(Verb.UNPIN, display.index))

        tray = QSystemTrayIcon(title_icon(display.title_text), self)
        tray.setContextMenu(menu)
        tray.setToolTip(display.display_text)
        tray.show()
        return PinnedSurface(tray, menu, time_action, control_action)

    def update_surface(self, surface: PinnedSurface, display: PinnedDisplay):
        surface.tray.setIcon(title_icon(display.title_text))
        surface.tray.setToolTip(display.display_text)
        surface.time_action.setText(display.display_text)
        if surface.control_action is not None and display.control_running is not None:
            surface.control_action.setText(self._caption(display.control_running))

    def destroy_surface(self, surface: PinnedSurface):
        surface.tray.hide()
        surface.tray.deleteLater()
        surface.menu.deleteLater()
