"""Entry point that switches the search result augmentation on and off."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable

from better_search.settings_models import PluginSettings, default_plugin_settings, normalize_plugin_settings
from better_search.settings_store import JsonSettingsStore
from better_search.ui.error_reporter import ErrorReporter, NoticeFactory
from better_search.ui.patcher import ContextCollaborators, Patcher

logger = logging.getLogger(__name__)

PACKAGE_LOGGER = "better_search"


class BetterSearchViewsPlugin:
    def __init__(
        self,
        component_cls: type,
        *,
        settings_path: str | Path | None = None,
        open_file: Callable[[str, int], Any] | None = None,
        collaborators: ContextCollaborators | None = None,
        notice_factory: NoticeFactory | None = None,
    ) -> None:
        self.component_cls = component_cls
        self.settings_store = JsonSettingsStore(
            Path(settings_path) if settings_path else None,
            default_plugin_settings(),
        )
        self._open_file = open_file
        self._collaborators = collaborators
        self._notice_factory = notice_factory
        self._cleanups: list[Callable[[], None]] = []
        self.patcher: Patcher | None = None
        self.settings: PluginSettings = normalize_plugin_settings(default_plugin_settings())

    @property
    def loaded(self) -> bool:
        return self.patcher is not None

    def register(self, callback: Callable[[], None]) -> None:
        self._cleanups.append(callback)

    def load(self) -> None:
        if self.patcher is not None:
            return
        self.settings = normalize_plugin_settings(self.settings_store.load())
        if self.settings_store.last_error:
            logger.warning("Using default settings: %s", self.settings_store.last_error)
        logging.getLogger(PACKAGE_LOGGER).setLevel(self.settings["log_level"])
        if not self.settings["enabled"]:
            logger.info("Search result augmentation is disabled.")
            return

        reporter = ErrorReporter(
            timeout_ms=self.settings["error_notice_timeout_ms"],
            notice_factory=self._notice_factory,
        )
        self.patcher = Patcher(self, collaborators=self._collaborators, reporter=reporter)
        self.patcher.patch_component(self.component_cls)

    def unload(self) -> None:
        cleanups, self._cleanups = self._cleanups, []
        for cleanup in reversed(cleanups):
            try:
                cleanup()
            except Exception:
                logger.warning("Could not remove a search hook.", exc_info=True)
        self.patcher = None

    def set_enabled(self, enabled: bool) -> None:
        if self.settings_store.set("enabled", bool(enabled)):
            self.settings_store.save()
        self.settings["enabled"] = bool(enabled)
        if enabled:
            self.load()
        else:
            self.unload()

    def open_location(self, file_path: str, line: int) -> None:
        if self._open_file is None:
            return
        try:
            self._open_file(file_path, line)
        except Exception:
            logger.exception("Could not open %s at line %s.", file_path, line)
