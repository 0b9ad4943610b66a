from __future__ import annotations

import html
import re
from typing import Any, Callable, Sequence

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import QLabel, QVBoxLayout, QWidget
from shiboken6 import isValid as _is_qobject_valid

from better_search.services.context_tree import ContextTreeNode, SectionWithMatch

INDENT_PX = 14
HIGHLIGHT_STYLE = "background-color: #6b5a1e; color: #fff;"


def highlight_html(text: str, highlights: Sequence[str]) -> str:
    """HTML-escape ``text`` and wrap every case-insensitive highlight hit."""
    needles = sorted({h for h in highlights if h}, key=len, reverse=True)
    source = str(text or "")
    if not needles:
        return html.escape(source).replace("\n", "<br>")

    pattern = re.compile("|".join(re.escape(n) for n in needles), re.IGNORECASE)
    parts: list[str] = []
    last = 0
    for hit in pattern.finditer(source):
        parts.append(html.escape(source[last:hit.start()]))
        parts.append(f'<span style="{HIGHLIGHT_STYLE}">{html.escape(hit.group(0))}</span>')
        last = hit.end()
    parts.append(html.escape(source[last:]))
    return "".join(parts).replace("\n", "<br>")


class _SectionLabel(QLabel):
    clicked = Signal()

    def mouseReleaseEvent(self, event):
        if event.button() == Qt.LeftButton:
            self.clicked.emit()
        super().mouseReleaseEvent(event)


class ContextTreeView(QWidget):
    sectionActivated = Signal(str, int)

    def __init__(self, tree: ContextTreeNode, highlights: Sequence[str], parent=None):
        super().__init__(parent)
        self.setObjectName("better-search-context-tree")
        self._highlights = list(highlights)
        self.section_labels: list[QLabel] = []

        self._layout = QVBoxLayout(self)
        self._layout.setContentsMargins(0, 0, 0, 0)
        self._layout.setSpacing(2)

        self._append_node(tree, depth=0)

    def _append_node(self, node: ContextTreeNode, *, depth: int) -> None:
        if node.type != "file":
            crumb = QLabel(html.escape(node.text or ""), self)
            crumb.setTextFormat(Qt.RichText)
            crumb.setObjectName(f"better-search-{node.type}")
            crumb.setContentsMargins(depth * INDENT_PX, 0, 0, 0)
            if node.type == "heading":
                font = crumb.font()
                font.setBold(True)
                crumb.setFont(font)
            self._layout.addWidget(crumb)
            depth += 1

        for section in node.sections_with_matches:
            self._append_section(node, section, depth=depth)
        for child in node.children():
            self._append_node(child, depth=depth)

    def _append_section(self, node: ContextTreeNode, section: SectionWithMatch, *, depth: int) -> None:
        label = _SectionLabel(self)
        label.setObjectName("better-search-section")
        label.setTextFormat(Qt.RichText)
        label.setWordWrap(True)
        label.setText(highlight_html(section.text, self._highlights))
        label.setContentsMargins(depth * INDENT_PX, 0, 0, 0)
        label.setCursor(Qt.PointingHandCursor)
        line = section.cache.position.start.line
        label.clicked.connect(lambda path=node.file_path, ln=line: self.sectionActivated.emit(path, ln))
        self._layout.addWidget(label)
        self.section_labels.append(label)


def render_context_tree(
    *,
    highlights: Sequence[str],
    context_tree: ContextTreeNode,
    mount_target: QWidget,
    infinity_scroll: Any = None,
    on_activate: Callable[[str, int], None] | None = None,
) -> Callable[[], None]:
    view = ContextTreeView(context_tree, highlights, mount_target)
    if on_activate is not None:
        view.sectionActivated.connect(on_activate)

    layout = mount_target.layout()
    if layout is None:
        layout = QVBoxLayout(mount_target)
        layout.setContentsMargins(0, 0, 0, 0)
    layout.addWidget(view)

    invalidate = getattr(infinity_scroll, "invalidate_all", None)
    if callable(invalidate):
        invalidate()

    disposed = False

    def dispose() -> None:
        nonlocal disposed
        if disposed:
            return
        disposed = True
        if not _is_qobject_valid(view):
            return
        view.setParent(None)
        view.deleteLater()

    return dispose
