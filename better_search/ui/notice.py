from __future__ import annotations

from PySide6.QtCore import QPoint, Qt, QTimer
from PySide6.QtWidgets import QApplication, QLabel, QWidget


class Notice(QLabel):
    """Small frameless popup that hides itself after ``timeout_ms``."""

    def __init__(self, message: str, timeout_ms: int = 10000, parent: QWidget | None = None):
        super().__init__(str(message or ""), parent)
        self.setWindowFlags(Qt.ToolTip | Qt.FramelessWindowHint)
        self.setWordWrap(True)
        self.setMaximumWidth(420)
        self.setMargin(10)
        self.setStyleSheet(
            "QLabel { background-color: #333; color: #eee; border: 1px solid #555; border-radius: 4px; }"
        )

        self._hide_timer = QTimer(self)
        self._hide_timer.setSingleShot(True)
        self._hide_timer.timeout.connect(self.hide)

        self.adjustSize()
        self._place()
        self.show()
        if timeout_ms > 0:
            self._hide_timer.start(int(timeout_ms))

    def _place(self) -> None:
        anchor = QApplication.activeWindow()
        if anchor is not None:
            corner = anchor.mapToGlobal(QPoint(anchor.width(), 0))
            self.move(corner.x() - self.width() - 16, corner.y() + 16)
            return
        screen = QApplication.primaryScreen()
        if screen is None:
            return
        area = screen.availableGeometry()
        self.move(area.right() - self.width() - 16, area.top() + 16)

    def hide(self) -> None:
        self._hide_timer.stop()
        super().hide()
