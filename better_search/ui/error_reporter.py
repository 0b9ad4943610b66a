from __future__ import annotations

import logging
from typing import Any, Callable

from PySide6.QtWidgets import QApplication

from better_search.core.errors import error_label
from better_search.ui.notice import Notice

logger = logging.getLogger(__name__)

NOTICE_PREFIX = "Better Search Views"
DEFAULT_NOTICE_TIMEOUT_MS = 10000

NoticeFactory = Callable[[str, int], Any]


def _qt_notice(message: str, timeout_ms: int) -> Notice | None:
    if QApplication.instance() is None:
        return None
    return Notice(message, timeout_ms)


class ErrorReporter:
    """Logs failures and keeps a single user notice on screen for the latest one."""

    def __init__(
        self,
        *,
        timeout_ms: int = DEFAULT_NOTICE_TIMEOUT_MS,
        notice_factory: NoticeFactory | None = None,
    ) -> None:
        self.timeout_ms = int(timeout_ms)
        self._notice_factory = notice_factory if notice_factory is not None else _qt_notice
        self.current_notice: Any = None

    def report(self, error: BaseException, message: str) -> None:
        try:
            logger.error(
                "%s. Reason: %s",
                message,
                error,
                exc_info=(type(error), error, error.__traceback__),
            )
        except Exception:
            pass

        try:
            if self.current_notice is not None:
                self.current_notice.hide()
            self.current_notice = None
            text = (
                f"{NOTICE_PREFIX}: {message} (while {error_label(error)}). "
                "Please report an issue with the details from the log attached."
            )
            self.current_notice = self._notice_factory(text, self.timeout_ms)
        except Exception:
            try:
                logger.exception("Could not show error notice.")
            except Exception:
                pass
