from __future__ import annotations

from copy import deepcopy
from typing import Any, TypedDict

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class PluginSettings(TypedDict, total=False):
    enabled: bool
    error_notice_timeout_ms: int
    log_level: str


_DEFAULT_PLUGIN_SETTINGS: PluginSettings = {
    "enabled": True,
    "error_notice_timeout_ms": 10000,
    "log_level": "WARNING",
}


def default_plugin_settings() -> dict[str, Any]:
    return deepcopy(dict(_DEFAULT_PLUGIN_SETTINGS))


def normalize_plugin_settings(data: dict[str, Any]) -> PluginSettings:
    """Coerce stored values into the types the plugin expects."""
    defaults = _DEFAULT_PLUGIN_SETTINGS
    try:
        timeout_ms = max(0, int(data.get("error_notice_timeout_ms", defaults["error_notice_timeout_ms"])))
    except (TypeError, ValueError):
        timeout_ms = defaults["error_notice_timeout_ms"]
    level = str(data.get("log_level") or defaults["log_level"]).strip().upper()
    if level not in LOG_LEVELS:
        level = defaults["log_level"]
    return {
        "enabled": bool(data.get("enabled", defaults["enabled"])),
        "error_notice_timeout_ms": timeout_ms,
        "log_level": level,
    }
