import logging
import sys

from PySide6.QtCore import QtMsgType, qInstallMessageHandler
from PySide6.QtGui import QFontDatabase
from PySide6.QtWidgets import QApplication, QSystemTrayIcon

from .config import get_settings
from .logging_setup import setup_logging
from .models import bootstrap_tasks
from .repository import TaskRegistry
from .ui.tray import TrayApp

logger = logging.getLogger(__name__)
qt_logger = logging.getLogger("qt")

_QT_LEVELS = {
    QtMsgType.QtDebugMsg: logging.DEBUG,
    QtMsgType.QtInfoMsg: logging.INFO,
    QtMsgType.QtWarningMsg: logging.WARNING,
    QtMsgType.QtCriticalMsg: logging.ERROR,
    QtMsgType.QtFatalMsg: logging.CRITICAL,
}


# 把 Qt 自己的日志转到 logging，并过滤掉已知的无害启动消息
def _qt_msg_handler(mode, context, message):
    if "Can't find filter element" in message:
        return
    qt_logger.log(_QT_LEVELS.get(mode, logging.WARNING), "%s", message)


def main():
    settings = get_settings()
    console_level = getattr(logging, str(settings.log_level).upper(), logging.INFO)
    log_file = setup_logging(log_dir=settings.log_dir, console_level=console_level)
    qInstallMessageHandler(_qt_msg_handler)

    logger.info("🚀 %s 应用程序启动", settings.app_name)
    logger.debug("Logging to %s", log_file)

    app = QApplication(sys.argv)
    # 只有托盘图标，没有主窗口；关闭对话框不能退出程序
    app.setQuitOnLastWindowClosed(False)
    app.setFont(QFontDatabase.systemFont(QFontDatabase.GeneralFont))

    if not QSystemTrayIcon.isSystemTrayAvailable():
        logger.error("System tray is not available on this desktop")
        sys.exit(1)

    tasks = bootstrap_tasks() if settings.demo_tasks else []
    registry = TaskRegistry(tasks, lock_timeout=settings.lock_timeout)

    tray = TrayApp(app, registry, settings)
    tray.start()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
