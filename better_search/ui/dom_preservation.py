"""Replace a match widget's contents while keeping host action buttons alive."""

from __future__ import annotations

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QLayout, QVBoxLayout, QWidget

REPLACE_BUTTON_NAME = "search-result-file-match-replace-button"
HOVER_BUTTON_NAME = "search-result-hover-button"


def capture_host_actions(el: QWidget) -> list[QWidget]:
    """Replace button first, then hover buttons, in the order Qt lists them."""
    captured: list[QWidget] = []
    replace_button = el.findChild(QWidget, REPLACE_BUTTON_NAME)
    if replace_button is not None:
        captured.append(replace_button)
    for button in el.findChildren(QWidget, HOVER_BUTTON_NAME):
        if button is not replace_button:
            captured.append(button)
    return captured


def _explicitly_hidden(widget: QWidget) -> bool:
    return widget.isHidden() and widget.testAttribute(Qt.WA_WState_ExplicitShowHide)


def _clear_layout(layout: QLayout) -> None:
    while layout.count():
        item = layout.takeAt(0)
        widget = item.widget()
        if widget is not None:
            widget.setParent(None)
            widget.deleteLater()
            continue
        nested = item.layout()
        if nested is not None:
            _clear_layout(nested)
            nested.deleteLater()


def clear_children(el: QWidget) -> None:
    layout = el.layout()
    if layout is not None:
        _clear_layout(layout)
    for child in el.findChildren(QWidget, options=Qt.FindDirectChildrenOnly):
        child.setParent(None)
        child.deleteLater()


def replace_children_preserving_actions(el: QWidget, mount: QWidget) -> list[QWidget]:
    """Swap ``el``'s children for ``mount`` and re-attach the host buttons after it.

    ``el`` itself is never replaced, so the host can still find it later to add
    buttons lazily. Returns the preserved buttons.
    """
    actions = capture_host_actions(el)
    hidden = [_explicitly_hidden(button) for button in actions]
    for button in actions:
        button.setParent(None)

    clear_children(el)

    layout = el.layout()
    if layout is None:
        layout = QVBoxLayout(el)
        layout.setContentsMargins(0, 0, 0, 0)
    layout.addWidget(mount)
    for button, was_hidden in zip(actions, hidden):
        layout.addWidget(button)
        if was_hidden:
            button.hide()
        elif el.isVisible():
            button.show()
    return actions
