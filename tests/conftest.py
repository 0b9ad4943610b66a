"""Shared test fixtures for the search result augmentation layer."""

from __future__ import annotations

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PySide6.QtWidgets import QApplication

from better_search import BetterSearchViewsPlugin, ContextCollaborators
from host_fakes import RecordedNotices, RecordingRenderer, make_host


@pytest.fixture(scope="session", autouse=True)
def qapp():
    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture
def host():
    """Fresh host classes, so every test patches its own copies."""
    return make_host()


@pytest.fixture
def renderer():
    return RecordingRenderer()


@pytest.fixture
def notices():
    return RecordedNotices()


@pytest.fixture
def collaborators(renderer):
    return ContextCollaborators(render_context_tree=renderer)


@pytest.fixture
def plugin(host, collaborators, notices):
    plugin = BetterSearchViewsPlugin(
        host.Component,
        collaborators=collaborators,
        notice_factory=notices,
    )
    plugin.load()
    yield plugin
    plugin.unload()
