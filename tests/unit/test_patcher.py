"""End-to-end tests for hooking the host search classes and augmenting items."""

from __future__ import annotations

import logging

from PySide6.QtWidgets import QLabel, QWidget

from better_search import BetterSearchViewsPlugin, ContextCollaborators
from better_search.core.host_adapter import match_from_child
from better_search.core.idempotency import AugmentationTracker
from better_search.services.context_tree import build_context_tree
from better_search.services.position import offsets_to_position
from host_fakes import CODE_FOO, LIST_FOO, PARAGRAPH_FOO, RecordedNotices

CONTEXT_TREE_NAME = "better-search-context-tree"


def _layout_widgets(el: QWidget) -> list[QWidget]:
    layout = el.layout()
    return [layout.itemAt(i).widget() for i in range(layout.count())]


class TestPatchInstallation:
    def test_container_attach_wraps_result_set_once(self, host, plugin):
        """Many search views attaching results wrap the shared class once."""
        host.attached_search_view()
        wrapped_add_result = host.ResultDom.add_result

        for _ in range(5):
            host.attached_search_view()

        assert host.ResultDom.add_result is wrapped_add_result
        assert not hasattr(wrapped_add_result.__wrapped__, "__wrapped__")
        # container-attach plus result-add/empty
        assert len(plugin._cleanups) == 2

    def test_item_render_wrapped_once(self, host, plugin):
        _, dom = host.attached_search_view()
        dom.add_result(host.File("a.md"), [host.child()])
        wrapped_render = host.ResultItem.render_content_matches

        for name in ("b.md", "c.md", "d.md"):
            dom.add_result(host.File(name), [host.child()])

        assert host.ResultItem.render_content_matches is wrapped_render
        assert len(plugin._cleanups) == 3

    def test_plain_component_is_ignored(self, host, plugin):
        component = host.Component()
        component.add_child(host.ResultHolder(dom=host.ResultDom()))

        assert not hasattr(host.ResultDom.add_result, "__wrapped__")
        assert component.children

    def test_backlink_pane_is_patched(self, host, plugin):
        dom = host.ResultDom()
        host.BacklinkPane().add_child(host.ResultHolder(backlink_dom=dom))

        assert hasattr(host.ResultDom.add_result, "__wrapped__")

    def test_missing_extension_point_is_reported(self, notices):
        class Bare:
            pass

        plugin = BetterSearchViewsPlugin(Bare, notice_factory=notices)
        plugin.load()

        assert len(notices) == 1
        assert "patching search internals" in notices.texts[0]
        plugin.unload()

    def test_item_patch_failure_keeps_host_result(self, host, plugin, notices):
        class NoItemDom:
            def add_result(self):
                return None

            def empty_results(self):
                return None

        host.SearchView().add_child(host.ResultHolder(dom=NoItemDom()))

        assert NoItemDom().add_result() is None
        assert len(notices) == 1
        assert "patching search internals" in notices.texts[0]

    def test_unload_restores_host_methods(self, host, plugin):
        original_add_result = host.ResultDom.__dict__["add_result"]
        original_render = host.ResultItem.__dict__["render_content_matches"]
        _, dom = host.attached_search_view()
        dom.add_result(host.File("a.md"), [host.child()])

        plugin.unload()

        assert not hasattr(host.Component.add_child, "__wrapped__")
        assert host.ResultDom.__dict__["add_result"] is original_add_result
        assert host.ResultItem.__dict__["render_content_matches"] is original_render
        assert plugin.patcher is None

    def test_disabled_plugin_does_not_patch(self, host, tmp_path, notices):
        settings = tmp_path / "settings.json"
        settings.write_text('{"enabled": false}', encoding="utf-8")
        plugin = BetterSearchViewsPlugin(host.Component, settings_path=settings, notice_factory=notices)
        plugin.load()

        assert not plugin.loaded
        assert not hasattr(host.Component.add_child, "__wrapped__")

        plugin.set_enabled(True)
        assert plugin.loaded
        assert hasattr(host.Component.add_child, "__wrapped__")
        plugin.unload()


class TestItemAugmentation:
    def test_render_many_times_mounts_once(self, host, plugin, renderer):
        _, dom = host.attached_search_view()
        item = dom.add_result(host.File("notes/a.md"), [host.child()])

        results = [item.render_content_matches() for _ in range(4)]

        assert results == ["rendered:notes/a.md"] * 4
        assert item.render_count == 4
        assert len(renderer.mounts) == 1
        assert plugin.patcher.disposer_registry.pending_count(dom) == 1

    def test_mount_replaces_host_snippet(self, host, plugin, renderer):
        _, dom = host.attached_search_view()
        child = host.child()
        item = dom.add_result(host.File("notes/a.md"), [child])

        item.render_content_matches()

        assert child.el.findChild(QLabel, "host-snippet") is None
        assert child.el.findChild(QWidget, CONTEXT_TREE_NAME) is not None
        assert renderer.mounts[0]["highlights"] == ["foo"]
        assert dom.infinity_scroll.invalidations == 1

    def test_all_code_matches_are_left_to_host(self, host, plugin, renderer):
        _, dom = host.attached_search_view()
        code_child = host.child(CODE_FOO)
        item = dom.add_result(host.File("a.md"), [code_child])

        assert item.render_content_matches() == "rendered:a.md"

        assert renderer.mounts == []
        assert item.v_children.children == [code_child]
        assert code_child.el.findChild(QLabel, "host-snippet") is not None

    def test_property_match_defers_whole_item(self, host, plugin, renderer):
        _, dom = host.attached_search_view()
        children = [host.child(PARAGRAPH_FOO), host.child(CODE_FOO), host.child(property_key="tags")]
        item = dom.add_result(host.File("a.md"), children)

        item.render_content_matches()

        assert renderer.mounts == []
        assert item.v_children.children == children

    def test_mixed_matches_keep_first_normal_and_code(self, host, plugin, renderer):
        _, dom = host.attached_search_view()
        code_child = host.child(CODE_FOO)
        first_normal = host.child(PARAGRAPH_FOO)
        second_normal = host.child(LIST_FOO)
        item = dom.add_result(host.File("a.md"), [code_child, first_normal, second_normal])

        item.render_content_matches()

        assert len(renderer.mounts) == 1
        assert item.v_children.children == [first_normal, code_child]
        assert first_normal.el.findChild(QWidget, CONTEXT_TREE_NAME) is not None
        assert code_child.el.findChild(QWidget, CONTEXT_TREE_NAME) is None

    def test_canvas_files_are_deferred(self, host, plugin, renderer):
        _, dom = host.attached_search_view()
        children = [host.child(), host.child(LIST_FOO)]
        item = dom.add_result(host.File("board.canvas", extension="canvas"), children)

        item.render_content_matches()

        assert renderer.mounts == []
        assert item.v_children.children == children

    def test_match_without_structure_is_deferred(self, host, plugin, renderer):
        _, dom = host.attached_search_view()
        item = dom.add_result(host.File("a.md"), [host.child(cache=None)])

        item.render_content_matches()

        assert renderer.mounts == []

    def test_file_name_only_match_is_quietly_deferred(self, host, plugin, renderer, notices, caplog):
        _, dom = host.attached_search_view()
        children = [host.child((0, 3), content="", cache=None)]
        item = dom.add_result(host.File("foo.md"), children)

        with caplog.at_level(logging.ERROR, logger="better_search"):
            assert item.render_content_matches() == "rendered:foo.md"

        assert renderer.mounts == []
        assert len(notices) == 0
        assert [r for r in caplog.records if r.levelno >= logging.ERROR] == []
        assert item.v_children.children == children

    def test_mounted_match_is_inert_when_item_is_rendered_afresh(self, host, plugin, renderer):
        """Losing the item-level flag must not mount the same match widget twice."""
        _, dom = host.attached_search_view()
        child = host.child()
        item = dom.add_result(host.File("a.md"), [child])
        item.render_content_matches()

        plugin.patcher.augmented_items = AugmentationTracker()
        item.render_content_matches()

        assert len(renderer.mounts) == 1
        assert plugin.patcher.disposer_registry.pending_count(dom) == 1
        assert len(child.el.findChildren(QWidget, CONTEXT_TREE_NAME)) == 1

    def test_mount_on_same_match_twice_is_inert(self, host, plugin, renderer):
        _, dom = host.attached_search_view()
        child = host.child()
        item = dom.add_result(host.File("a.md"), [child])
        match = match_from_child(child)
        positions = [offsets_to_position(match.content, *match.range)]
        patcher = plugin.patcher

        assert patcher.mount_context_tree_on_match_el(item, match, positions, ["foo"]) is True
        assert patcher.mount_context_tree_on_match_el(item, match, positions, ["foo"]) is False
        assert patcher.wrapped_matches.has(child)
        assert len(renderer.mounts) == 1
        assert patcher.disposer_registry.pending_count(dom) == 1

    def test_item_without_matches_is_untouched(self, host, plugin, renderer):
        _, dom = host.attached_search_view()
        item = dom.add_result(host.File("a.md"), [])

        assert item.render_content_matches() == "rendered:a.md"
        assert renderer.mounts == []
        assert not plugin.patcher.augmented_items.has_augmented(item)

    def test_host_action_buttons_survive_mount(self, host, plugin):
        _, dom = host.attached_search_view()
        child = host.child()
        link = child.add_button(host.REPLACE_BUTTON_NAME, "Link")
        hover = child.add_button(host.HOVER_BUTTON_NAME, "Open")
        item = dom.add_result(host.File("a.md"), [child])

        item.render_content_matches()

        widgets = _layout_widgets(child.el)
        assert len(widgets) == 3
        assert widgets[0].findChild(QWidget, CONTEXT_TREE_NAME) is not None
        assert widgets[1] is link
        assert widgets[2] is hover
        assert link.parent() is child.el
        assert child.el.findChild(QWidget, host.REPLACE_BUTTON_NAME) is link


class TestDisposal:
    def test_emptying_runs_only_own_disposers(self, host, plugin, renderer):
        _, dom_a = host.attached_search_view()
        dom_b = host.ResultDom()
        child_a = host.child()
        item_a = dom_a.add_result(host.File("a.md"), [child_a])
        item_b = dom_b.add_result(host.File("b.md"), [host.child()])
        item_a.render_content_matches()
        item_b.render_content_matches()

        dom_a.empty_results()

        assert renderer.disposed == [0]
        assert dom_a.empty_count == 1
        assert child_a.el.findChild(QWidget, CONTEXT_TREE_NAME) is None

        dom_a.empty_results()
        assert renderer.disposed == [0]

        dom_b.empty_results()
        assert renderer.disposed == [0, 1]

    def test_failing_disposer_does_not_stop_batch(self, host, notices):
        disposed: list[int] = []
        mounted: list[int] = []

        def render(**kwargs):
            index = len(mounted)
            mounted.append(index)

            def dispose():
                disposed.append(index)
                if index == 0:
                    raise RuntimeError("dispose failed")

            return dispose

        plugin = BetterSearchViewsPlugin(
            host.Component,
            collaborators=ContextCollaborators(render_context_tree=render),
            notice_factory=notices,
        )
        plugin.load()
        _, dom = host.attached_search_view()
        for name in ("a.md", "b.md"):
            dom.add_result(host.File(name), [host.child()]).render_content_matches()

        dom.empty_results()

        assert disposed == [0, 1]
        assert len(notices) == 1
        assert "cleaning up search results" in notices.texts[0]
        plugin.unload()


class TestFailureIsolation:
    def test_builder_failure_affects_only_its_item(self, host, renderer):
        notices = RecordedNotices()

        def flaky_build(**kwargs):
            if kwargs["file_path"] == "x.md":
                raise RuntimeError("boom")
            return build_context_tree(**kwargs)

        plugin = BetterSearchViewsPlugin(
            host.Component,
            collaborators=ContextCollaborators(build_context_tree=flaky_build, render_context_tree=renderer),
            notice_factory=notices,
        )
        plugin.load()
        _, dom = host.attached_search_view()
        x_children = [host.child()]
        item_x = dom.add_result(host.File("x.md"), x_children)
        item_y = dom.add_result(host.File("y.md"), [host.child()])

        assert item_x.render_content_matches() == "rendered:x.md"
        item_y.render_content_matches()
        item_x.render_content_matches()

        assert len(notices) == 1
        assert "x.md" in notices.texts[0]
        assert len(renderer.mounts) == 1
        assert item_x.v_children.children == x_children
        plugin.unload()

    def test_new_report_hides_previous_notice(self, host, notices):
        def broken_build(**kwargs):
            raise RuntimeError("boom")

        plugin = BetterSearchViewsPlugin(
            host.Component,
            collaborators=ContextCollaborators(build_context_tree=broken_build),
            notice_factory=notices,
        )
        plugin.load()
        _, dom = host.attached_search_view()
        for name in ("a.md", "b.md"):
            dom.add_result(host.File(name), [host.child()]).render_content_matches()

        assert len(notices) == 2
        assert notices.shown[0].hidden
        assert not notices.shown[1].hidden
        plugin.unload()
