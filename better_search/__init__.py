"""Hierarchical context views for host search and backlink result lists."""

from .plugin import BetterSearchViewsPlugin
from .ui.patcher import ContextCollaborators, Patcher

__all__ = ["BetterSearchViewsPlugin", "ContextCollaborators", "Patcher"]
