"""Tests for the QSettings-backed config store."""

import pytest

from file_icons.core.errors import InvalidOption, TypeMismatch


def test_defaults_when_unset(store):
    assert store.get("coloured") is True
    assert store.get("defaultIconClass") == "default-icon"
    assert store.get("themeTone") == "dark"


def test_set_writes_through_and_notifies(store, settings):
    seen = []
    store.value_changed.connect(lambda name, value: seen.append((name, value)))
    store.set("coloured", False)
    assert seen == [("coloured", False)]
    assert store.get("coloured") is False
    assert settings.contains("file-icons/coloured")


def test_set_same_value_is_silent(store):
    seen = []
    store.value_changed.connect(lambda name, value: seen.append(name))
    store.set("themeTone", "dark")
    assert seen == []


def test_values_survive_a_new_store(store, settings):
    from file_icons.core.config_store import ConfigStore
    from file_icons.core.options import OPTIONS

    store.set("coloured", False)
    store.set("themeTone", "light")
    reopened = ConfigStore(OPTIONS, settings)
    assert reopened.get("coloured") is False
    assert reopened.get("themeTone") == "light"


def test_undecodable_value_falls_back_to_default(store, settings, caplog):
    settings.setValue("file-icons/themeTone", "sepia")
    settings.setValue("file-icons/coloured", "maybe")
    assert store.get("themeTone") == "dark"
    assert store.get("coloured") is True
    assert "sepia" in caplog.text


def test_observe_delivers_current_then_changes(store):
    seen = []
    sub = store.observe("coloured", seen.append)
    store.set("coloured", False)
    store.set("themeTone", "light")
    sub.dispose()
    store.set("coloured", True)
    assert seen == [True, False]


def test_unset_notifies_when_effective_value_changes(store):
    seen = []
    store.set("coloured", False)
    store.observe("coloured", seen.append)
    store.unset("coloured")
    assert seen == [False, True]
    assert store.get("coloured") is True


def test_schema_is_enforced(store):
    with pytest.raises(InvalidOption):
        store.get("nope")
    with pytest.raises(TypeMismatch):
        store.set("themeTone", "sepia")
    with pytest.raises(TypeMismatch):
        store.set("coloured", "yes")


def test_reload_picks_up_writes_from_another_settings_object(store):
    from PySide6.QtCore import QSettings

    seen = []
    store.observe("coloured", seen.append)
    other = QSettings(store.file_name, QSettings.IniFormat)
    other.setValue("file-icons/coloured", False)
    other.setValue("file-icons/themeTone", "light")
    other.sync()
    assert sorted(store.reload()) == ["coloured", "themeTone"]
    assert seen == [True, False]
    assert store.get("themeTone") == "light"


def test_reload_without_outside_changes_is_silent(store):
    seen = []
    store.set("coloured", False)
    store.value_changed.connect(lambda name, value: seen.append(name))
    assert store.reload() == []
    assert seen == []


def test_settings_file_is_watched_once_written(store):
    store.set("coloured", False)
    assert store.file_name in store.watched_files()
