from PySide6.QtWidgets import (
    QDialog,
    QFormLayout,
    QLabel,
    QLineEdit,
    QDialogButtonBox,
    QMessageBox,
)
from PySide6.QtCore import Qt

_TEXT = {
    "zh": {
        "title": "新建任务",
        "hint": "请输入任务信息：\n\n格式示例：\n• 时间段：1h30m#学习\n• 截止时间：@19:00#工作\n\n其中 # 后面是任务名称（可选）",
        "input": "任务：",
        "default": "1h#新任务",
        "error_title": "输入错误",
        "error_fmt": "解析任务输入失败：\n\n{error}\n\n请检查输入格式：\n• 时间段：1h30m#任务名\n• 截止时间：@19:00#任务名",
    },
    "en": {
        "title": "New task",
        "hint": "Enter the task:\n\nExamples:\n• Duration: 1h30m#study\n• Deadline: @19:00#work\n\nThe part after # is the (optional) name",
        "input": "Task:",
        "default": "1h#new task",
        "error_title": "Invalid input",
        "error_fmt": "Could not parse the task:\n\n{error}\n\nExpected:\n• Duration: 1h30m#name\n• Deadline: @19:00#name",
    },
}


class NewTaskDialog(QDialog):
    def __init__(self, parent=None, lang: str = "zh"):
        super().__init__(parent)
        text = _TEXT.get(lang, _TEXT["zh"])
        self.setWindowTitle(text["title"])
        self.resize(360, 180)
        self.setWindowFlag(Qt.WindowStaysOnTopHint, True)

        layout = QFormLayout(self)

        hint = QLabel(text["hint"])
        hint.setWordWrap(True)
        self.input_edit = QLineEdit(text["default"])
        self.input_edit.selectAll()

        layout.addRow(hint)
        layout.addRow(text["input"], self.input_edit)

        buttons = QDialogButtonBox(QDialogButtonBox.Ok | QDialogButtonBox.Cancel, Qt.Horizontal, self)
        buttons.accepted.connect(self.accept)
        buttons.rejected.connect(self.reject)
        layout.addRow(buttons)

    def get_value(self):
        value = self.input_edit.text().strip()
        return value or None


def ask_new_task(parent=None, lang: str = "zh"):
    """Show the dialog; the entered text, or None when cancelled/empty."""
    dlg = NewTaskDialog(parent, lang=lang)
    if dlg.exec():
        return dlg.get_value()
    return None


def show_parse_error(parent, message: str, lang: str = "zh"):
    text = _TEXT.get(lang, _TEXT["zh"])
    QMessageBox.warning(parent, text["error_title"], text["error_fmt"].format(error=message))
