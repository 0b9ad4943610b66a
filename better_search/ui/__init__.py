from .context_tree_view import ContextTreeView, render_context_tree
from .error_reporter import ErrorReporter
from .notice import Notice

__all__ = ["ContextTreeView", "ErrorReporter", "Notice", "render_context_tree"]
