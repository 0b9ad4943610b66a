from __future__ import annotations

import json
from copy import deepcopy
from pathlib import Path
from typing import Any, Mapping


class SettingsStoreError(RuntimeError):
    """Raised when a settings file cannot be saved."""


def with_defaults(data: Mapping[str, Any], defaults: Mapping[str, Any]) -> dict[str, Any]:
    """Plugin settings are one flat object: stored keys win, missing keys take the default."""
    merged = deepcopy(dict(defaults))
    merged.update(deepcopy(dict(data)))
    return merged


class JsonSettingsStore:
    """Plugin settings kept in one JSON object, with defaults filled in on load.

    ``path=None`` keeps everything in memory.
    """

    def __init__(self, path: Path | None, defaults: Mapping[str, Any]) -> None:
        self.path = Path(path) if path is not None else None
        self.defaults: dict[str, Any] = deepcopy(dict(defaults))
        self.data: dict[str, Any] = {}
        self.dirty: bool = False
        self.last_error: str | None = None

    def load(self) -> dict[str, Any]:
        self.last_error = None
        if self.path is None:
            self.data = with_defaults(self.data, self.defaults)
            return self.data
        if not self.path.exists():
            self.data = with_defaults({}, self.defaults)
            self.dirty = True
            return self.data

        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            # Keep the plugin usable without touching the unreadable file.
            self.last_error = str(exc)
            raw = {}
        if not isinstance(raw, dict):
            self.last_error = (
                f"Settings root in '{self.path}' must be a JSON object, found {type(raw).__name__}."
            )
            raw = {}

        self.data = with_defaults(raw, self.defaults)
        self.dirty = False
        return self.data

    def save(self) -> None:
        if self.path is None:
            self.dirty = False
            return
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(self.data, indent=2, sort_keys=True), encoding="utf-8")
        except OSError as exc:
            raise SettingsStoreError(f"Could not write settings file '{self.path}': {exc}") from exc
        self.dirty = False
        self.last_error = None

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, self.defaults.get(key, default))

    def set(self, key: str, value: Any) -> bool:
        """Store ``value`` under ``key``; returns False when nothing changed."""
        if key not in self.defaults:
            raise KeyError(f"Unknown setting '{key}'.")
        if key in self.data and self.data[key] == value:
            return False
        self.data[key] = value
        self.dirty = True
        return True
