"""Tests for the options controller lifecycle, mirror and events."""

import pytest

from file_icons.core.errors import InvalidOption, InvalidState, ToggleOnNonBoolean, TypeMismatch
from file_icons.core.events import ChangeEvent
from file_icons.core.options import (
    DEBUG_OUTLINES, DEBUG_OUTLINES_PROPERTY, MAX_DISPATCH_DEPTH, COMMAND_TARGET, TOGGLE_COLOURS,
    OptionsController,
)


def test_init_mirrors_store_values(store, commands):
    store.set("themeTone", "light")
    controller = OptionsController(store, commands)
    controller.init()
    assert controller.get("themeTone") == "light"
    assert controller.get("coloured") is True
    assert controller.snapshot()["defaultIconClass"] == "default-icon"
    controller.reset()


def test_toggle_then_set_scenario(options, recorder):
    options.on_change("coloured", recorder)
    options.toggle("coloured")
    assert recorder.events == [("coloured", False)]
    assert options.get("coloured") is False
    options.set("coloured", True)
    assert recorder.events == [("coloured", False), ("coloured", True)]


def test_double_toggle_restores_value(options, recorder):
    for name in ("coloured", "onChanges", "tabPaneIcon"):
        options.on_change(name, recorder)
        original = options.get(name)
        options.toggle(name)
        options.toggle(name)
        assert options.get(name) == original
    assert recorder.events == [
        ("coloured", False), ("coloured", True),
        ("onChanges", True), ("onChanges", False),
        ("tabPaneIcon", False), ("tabPaneIcon", True),
    ]


def test_set_is_visible_immediately(options, store):
    options.set("defaultIconClass", "icon-file-text")
    assert options.get("defaultIconClass") == "icon-file-text"
    assert store.get("defaultIconClass") == "icon-file-text"


def test_handler_reads_consistent_mirror(options):
    seen = []
    options.on_change("themeTone", lambda ev: seen.append((ev.value, options.get("themeTone"))))
    options.set("themeTone", "light")
    assert seen == [("light", "light")]


def test_type_mismatch_leaves_value_unchanged(options, recorder):
    options.on_change("coloured", recorder)
    with pytest.raises(TypeMismatch):
        options.set("coloured", "not-a-boolean")
    with pytest.raises(TypeMismatch):
        options.set("themeTone", "sepia")
    assert options.get("coloured") is True
    assert recorder.events == []


def test_unknown_option(options):
    with pytest.raises(InvalidOption):
        options.get("iconSize")
    with pytest.raises(InvalidOption):
        options.set("iconSize", True)
    with pytest.raises(InvalidOption):
        options.toggle("iconSize")
    with pytest.raises(InvalidOption):
        options.on_change("iconSize", lambda ev: None)


def test_toggle_on_non_boolean(options):
    with pytest.raises(ToggleOnNonBoolean):
        options.toggle("themeTone")
    with pytest.raises(ToggleOnNonBoolean):
        options.toggle("defaultIconClass")
    assert options.get("themeTone") == "dark"


def test_external_store_changes_are_mirrored(options, store, recorder):
    options.on_change("coloured", recorder)
    store.set("coloured", False)
    assert options.get("coloured") is False
    assert recorder.events == [("coloured", False)]


def test_edits_from_another_process_are_mirrored(options, store, recorder):
    from PySide6.QtCore import QSettings

    options.on_change("onChanges", recorder)
    other = QSettings(store.file_name, QSettings.IniFormat)
    other.setValue("file-icons/onChanges", True)
    other.sync()
    store.reload()
    assert options.get("onChanges") is True
    assert recorder.events == [("onChanges", True)]


def test_two_handlers_then_dispose_first(options):
    calls = []
    first = options.on_change("coloured", lambda ev: calls.append("first"))
    options.on_change("coloured", lambda ev: calls.append("second"))
    options.toggle("coloured")
    assert calls == ["first", "second"]
    first.dispose()
    options.toggle("coloured")
    assert calls == ["first", "second", "second"]


def test_dispose_during_dispatch(options):
    calls = []
    subs = []

    def first(ev):
        calls.append("first")
        subs[1].dispose()

    subs.append(options.on_change("coloured", first))
    subs.append(options.on_change("coloured", lambda ev: calls.append("second")))
    options.toggle("coloured")
    assert calls == ["first", "second"]
    options.toggle("coloured")
    assert calls == ["first", "second", "first"]


def test_reset_emits_one_destroy_and_stops_changes(options, store, recorder):
    destroyed = []
    options.on_change("coloured", recorder)
    options.on_destroy(destroyed.append)
    options.reset()
    assert len(destroyed) == 1
    store.set("coloured", False)
    assert recorder.events == []
    with pytest.raises(InvalidState):
        options.set("coloured", True)
    with pytest.raises(InvalidState):
        options.toggle("coloured")
    with pytest.raises(InvalidState):
        options.get("coloured")
    with pytest.raises(InvalidState):
        options.on_change("coloured", recorder)
    with pytest.raises(InvalidState):
        options.on_destroy(recorder)
    with pytest.raises(InvalidState):
        options.reset()


def test_reinit_after_reset(options, store, recorder):
    options.reset()
    store.set("coloured", False)
    options.init()
    assert options.get("coloured") is False
    options.on_change("coloured", recorder)
    options.toggle("coloured")
    assert recorder.events == [("coloured", True)]


def test_double_init_is_rejected(options):
    with pytest.raises(InvalidState):
        options.init()


def test_faulty_consumer_does_not_corrupt_state(options, recorder):
    def broken(ev):
        raise ValueError("consumer bug")

    options.on_change("coloured", broken)
    options.on_change("coloured", recorder)
    options.toggle("coloured")
    assert options.get("coloured") is False
    assert recorder.events == [("coloured", False)]


def test_handler_setting_same_value_terminates(options, recorder):
    options.on_change("coloured", lambda ev: options.set("coloured", ev.value))
    options.on_change("coloured", recorder)
    options.toggle("coloured")
    assert recorder.events == [("coloured", False)]


def test_runaway_handler_is_cut_off(options):
    seen = []

    def flip(ev):
        seen.append(ev.value)
        options.toggle("coloured")

    options.on_change("coloured", flip)
    options.toggle("coloured")
    assert len(seen) == MAX_DISPATCH_DEPTH
    assert options.get("coloured") in (True, False)


def test_toggle_colours_command(options, commands, recorder):
    options.on_change("coloured", recorder)
    assert commands.dispatch(COMMAND_TARGET, TOGGLE_COLOURS)
    assert recorder.events == [("coloured", False)]


def test_debug_outlines_command_flips_root_property(options, commands, qapp):
    from PySide6.QtWidgets import QWidget

    root = QWidget()
    options.root = root
    commands.dispatch(COMMAND_TARGET, DEBUG_OUTLINES)
    assert root.property(DEBUG_OUTLINES_PROPERTY) is True
    commands.dispatch(COMMAND_TARGET, DEBUG_OUTLINES)
    assert root.property(DEBUG_OUTLINES_PROPERTY) is False


def test_commands_released_on_reset(options, commands):
    assert commands.commands(COMMAND_TARGET) == [DEBUG_OUTLINES, TOGGLE_COLOURS]
    options.reset()
    assert commands.commands(COMMAND_TARGET) == []
    assert not commands.dispatch(COMMAND_TARGET, TOGGLE_COLOURS)


def test_change_event_payload(options):
    events = []
    options.on_change("themeTone", events.append)
    options.set("themeTone", "light")
    assert events == [ChangeEvent("themeTone", "light")]
