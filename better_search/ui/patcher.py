"""Hooks the host's search result classes and mounts context trees into them."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Sequence

from PySide6.QtWidgets import QVBoxLayout, QWidget

from better_search.core.disposer_registry import DisposerRegistry
from better_search.core.errors import (
    AugmentationError,
    BetterSearchError,
    DisposalError,
    PatchInstallationError,
)
from better_search.core.host_adapter import (
    Match,
    file_of,
    file_path_of,
    has_backlinks,
    infinity_scroll_of,
    is_search_view,
    match_children,
    match_element,
    match_from_child,
    owning_result_set,
    result_dom_of,
    set_match_children,
)
from better_search.core.idempotency import AugmentationTracker, ExtensionPoint, IdentityWeakSet, PatchGuard
from better_search.core.monkey import around
from better_search.services.context_tree import build_context_tree
from better_search.services.context_tree_dedupe import dedupe_context_tree
from better_search.services.highlights import highlights_for
from better_search.services.match_classifier import partition_matches
from better_search.services.metadata_cache import Position
from better_search.services.position import offsets_to_position
from better_search.services.section import section_containing
from better_search.ui.context_tree_view import render_context_tree
from better_search.ui.dom_preservation import replace_children_preserving_actions
from better_search.ui.error_reporter import ErrorReporter

if TYPE_CHECKING:
    from better_search.plugin import BetterSearchViewsPlugin

logger = logging.getLogger(__name__)

PATCH_FAILED_MESSAGE = "Error while patching search internals"


@dataclass(slots=True)
class ContextCollaborators:
    offsets_to_position: Callable[..., Position] = offsets_to_position
    section_containing: Callable[..., Any] = section_containing
    build_context_tree: Callable[..., Any] = build_context_tree
    dedupe_context_tree: Callable[[Any], Any] = dedupe_context_tree
    render_context_tree: Callable[..., Callable[[], None]] = render_context_tree


def _wrap_error(error_cls: type[BetterSearchError], message: str, cause: BaseException) -> BetterSearchError:
    if isinstance(cause, error_cls):
        return cause
    error = error_cls(f"{message}: {cause}")
    error.__cause__ = cause
    return error


class Patcher:
    def __init__(
        self,
        plugin: BetterSearchViewsPlugin,
        *,
        collaborators: ContextCollaborators | None = None,
        reporter: ErrorReporter | None = None,
    ) -> None:
        self.plugin = plugin
        self.collaborators = collaborators or ContextCollaborators()
        self.reporter = reporter or ErrorReporter()
        self.patch_guard = PatchGuard()
        self.augmented_items = AugmentationTracker()
        self.wrapped_matches = IdentityWeakSet()
        self.disposer_registry = DisposerRegistry()

    # Extension points

    def patch_component(self, component_cls: type) -> None:
        if not self.patch_guard.mark_patched(ExtensionPoint.CONTAINER_ATTACH):
            return
        patcher = self

        def add_child(old):
            def wrapper(self, child, *args, **kwargs):
                if (is_search_view(self) or has_backlinks(child)) and patcher.patch_guard.mark_patched(
                    ExtensionPoint.RESULT_ADD
                ):
                    try:
                        patcher.patch_search_result_dom(result_dom_of(child))
                    except Exception as exc:
                        patcher.report_patch_failure(exc)
                return old(self, child, *args, **kwargs)

            return wrapper

        try:
            self.plugin.register(around(component_cls, add_child=add_child))
        except Exception as exc:
            self.report_patch_failure(exc)

    def patch_search_result_dom(self, search_result_dom: Any) -> None:
        patcher = self

        def add_result(old):
            def wrapper(self, *args, **kwargs):
                patcher.track_result_set(self)
                result = old(self, *args, **kwargs)

                if patcher.patch_guard.mark_patched(ExtensionPoint.ITEM_RENDER):
                    try:
                        patcher.patch_search_result_item(result)
                    except Exception as exc:
                        patcher.report_patch_failure(exc)
                return result

            return wrapper

        def empty_results(old):
            def wrapper(self, *args, **kwargs):
                patcher.release_result_set(self)
                return old(self, *args, **kwargs)

            return wrapper

        self.plugin.register(
            around(type(search_result_dom), add_result=add_result, empty_results=empty_results)
        )

    def patch_search_result_item(self, search_result_item: Any) -> None:
        if search_result_item is None:
            raise PatchInstallationError("The host returned no result item to patch.")
        patcher = self

        def render_content_matches(old):
            def wrapper(self, *args, **kwargs):
                result = old(self, *args, **kwargs)
                patcher.augment_result_item(self)
                return result

            return wrapper

        self.plugin.register(
            around(type(search_result_item), render_content_matches=render_content_matches)
        )

    # Result set lifecycle

    def track_result_set(self, result_set: Any) -> None:
        try:
            self.disposer_registry.on_result_set_created(result_set)
        except Exception as exc:
            self.reporter.report(
                _wrap_error(AugmentationError, "Could not track result set", exc),
                "Failed to track search results",
            )

    def release_result_set(self, result_set: Any) -> None:
        try:
            failures = self.disposer_registry.on_result_set_emptied(result_set)
        except Exception as exc:
            failures = [exc]
        if not failures:
            return
        error = DisposalError(f"{len(failures)} disposer(s) failed", failures)
        error.__cause__ = failures[0]
        self.reporter.report(error, "Failed to clean up search results")

    # Item augmentation

    def augment_result_item(self, item: Any) -> bool:
        """Mount a context tree for ``item`` once. Returns True when a mount happened."""
        children = match_children(item)
        try:
            if self.augmented_items.has_augmented(item) or not children:
                return False
            self.augmented_items.mark_augmented(item)
            return self._augment(item, children)
        except Exception as exc:
            self.reporter.report(
                _wrap_error(AugmentationError, "Augmentation failed", exc),
                f"Failed to mount context tree for file path: {file_path_of(item)}",
            )
            return False

    def _augment(self, item: Any, children: Sequence[Any]) -> bool:
        collaborators = self.collaborators
        matches = [match_from_child(child) for child in children]
        partition = partition_matches(
            matches,
            to_position=collaborators.offsets_to_position,
            find_section=collaborators.section_containing,
        )

        if partition.all_code:
            logger.debug("Deferring %s: every match is in a code block.", file_path_of(item))
            return False
        if partition.has_property_match:
            logger.debug("Deferring %s: property match present.", file_path_of(item))
            return False

        first = partition.non_code[0]
        file = file_of(item)
        only_in_file_name = first.structure is None or not first.structure.sections or first.content == ""
        if file.extension == "canvas" or only_in_file_name:
            logger.debug("Deferring %s: no body structure to place matches in.", file.path)
            return False

        positions = [
            collaborators.offsets_to_position(match.content, *match.range) for match in partition.non_code
        ]
        highlights = highlights_for(partition.non_code)

        mounted = self.mount_context_tree_on_match_el(item, first, positions, highlights)
        if mounted:
            set_match_children(item, [first.source, *(match.source for match in partition.code)])
        return mounted

    def mount_context_tree_on_match_el(
        self,
        item: Any,
        match: Match,
        positions: list[Position],
        highlights: list[str],
    ) -> bool:
        if self.wrapped_matches.has(match.source):
            return False
        self.wrapped_matches.add(match.source)

        collaborators = self.collaborators
        file = file_of(item)
        el = match_element(match.source)

        context_tree = collaborators.build_context_tree(
            positions=positions,
            file_contents=match.content,
            stat=file.stat,
            file_path=file.path,
            **match.structure.as_metadata(),
        )

        mount_point = QWidget()
        mount_layout = QVBoxLayout(mount_point)
        mount_layout.setContentsMargins(0, 0, 0, 0)

        dispose = collaborators.render_context_tree(
            highlights=highlights,
            context_tree=collaborators.dedupe_context_tree(context_tree),
            mount_target=mount_point,
            infinity_scroll=infinity_scroll_of(item),
            on_activate=self.plugin.open_location,
        )
        self.disposer_registry.register_disposer(owning_result_set(item), dispose)

        replace_children_preserving_actions(el, mount_point)
        return True

    def report_patch_failure(self, exc: BaseException) -> None:
        self.reporter.report(_wrap_error(PatchInstallationError, PATCH_FAILED_MESSAGE, exc), PATCH_FAILED_MESSAGE)
