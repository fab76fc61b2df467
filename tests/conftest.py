"""Shared fixtures: headless Qt, an INI-backed store and a live controller."""

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PySide6.QtCore import QSettings
from PySide6.QtWidgets import QApplication

from file_icons.core.commands import CommandRegistry
from file_icons.core.config_store import ConfigStore
from file_icons.core.options import OPTIONS, OptionsController


@pytest.fixture(scope="session")
def qapp():
    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture
def settings(tmp_path, qapp):
    return QSettings(str(tmp_path / "settings.ini"), QSettings.IniFormat)


@pytest.fixture
def store(settings):
    return ConfigStore(OPTIONS, settings)


@pytest.fixture
def commands(qapp):
    return CommandRegistry()


@pytest.fixture
def options(store, commands):
    controller = OptionsController(store, commands)
    controller.init()
    yield controller
    if controller.is_initialized:
        controller.reset()


@pytest.fixture
def recorder():
    """Collects (option, value) pairs from change events."""
    class Recorder:
        def __init__(self):
            self.events = []

        def __call__(self, event):
            self.events.append((event.option, event.value))

    return Recorder()
