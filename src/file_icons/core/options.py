"""Live mirror of the options that drive icon rendering.

The controller is the only write path for these options. ``set`` writes
through to the ConfigStore and the local mirror is refreshed by the store's
own change notification, so local and external edits take the same route:

    store.set -> value_changed -> mirror updated -> ChangeEvent emitted

Because that chain runs synchronously, a change handler that calls ``set``
re-enters the controller before the outer ``set`` returns. Writes of a value
already in effect are dropped by the store, which ends most cycles; a
handler that keeps flipping the option it reacts to is cut off after
``MAX_DISPATCH_DEPTH`` nested dispatches.
"""
from __future__ import annotations
import logging
from typing import Callable, Dict, Optional

from .commands import COMMAND_TARGET, CommandRegistry
from .config_store import BOOL, ENUM, STRING, ConfigStore, ConfigValue, OptionSpec
from .errors import InvalidOption, InvalidState, ToggleOnNonBoolean
from .events import (
    DID_DESTROY, ChangeEvent, CompositeDisposable, DestroyEvent, Disposable, Emitter, did_change,
)

logger = logging.getLogger(__name__)

OPTIONS = (
    OptionSpec("coloured", BOOL, True),
    OptionSpec("onChanges", BOOL, False),
    OptionSpec("tabPaneIcon", BOOL, True),
    OptionSpec("defaultIconClass", STRING, "default-icon"),
    OptionSpec("themeTone", ENUM, "dark", choices=("dark", "light")),
)

TOGGLE_COLOURS = "file-icons:toggle-colours"
DEBUG_OUTLINES = "file-icons:debug-outlines"
DEBUG_OUTLINES_PROPERTY = "debugOutlines"

MAX_DISPATCH_DEPTH = 32


class OptionsController:
    """Owns the option mirror and republishes store changes as events.

    Construct one per application and hand it to whoever needs it. Call
    ``init()`` before use and ``reset()`` on teardown; ``init()`` may be
    called again after a reset.
    """

    def __init__(self, store: ConfigStore, commands: CommandRegistry, root=None):
        self._store = store
        self._commands = commands
        self._specs: Dict[str, OptionSpec] = {s.name: s for s in OPTIONS}
        self._values: Dict[str, ConfigValue] = {}
        self._depth: Dict[str, int] = {}
        self._emitter: Optional[Emitter] = None
        self._disposables: Optional[CompositeDisposable] = None
        self.root = root

    @property
    def is_initialized(self) -> bool:
        return self._emitter is not None

    def names(self) -> list[str]:
        return list(self._specs)

    # ---- lifecycle -----------------------------------------------------
    def init(self):
        if self.is_initialized:
            raise InvalidState("Options already initialised; call reset() first")
        self._emitter = Emitter()
        self._disposables = CompositeDisposable()
        for name in self._specs:
            self._disposables.add(
                self._store.observe(name, lambda value, n=name: self._mirror(n, value))
            )
        self._register_commands()
        logger.info("Options initialised: %s", self._values)

    def reset(self):
        emitter, disposables = self._require_initialized(), self._disposables
        disposables.dispose()
        self._disposables = None
        emitter.emit(DID_DESTROY, DestroyEvent())
        emitter.dispose()
        self._emitter = None
        self._values.clear()
        self._depth.clear()
        logger.info("Options reset")

    # ---- access --------------------------------------------------------
    def get(self, name: str) -> ConfigValue:
        self._require_initialized()
        self._spec(name)
        return self._values[name]

    def snapshot(self) -> Dict[str, ConfigValue]:
        self._require_initialized()
        return dict(self._values)

    def set(self, name: str, value: ConfigValue):
        self._require_initialized()
        self._spec(name).validate(value)
        if self._depth.get(name, 0) >= MAX_DISPATCH_DEPTH:
            raise InvalidState(f"Change handlers for {name!r} keep re-setting it")
        self._store.set(name, value)

    def toggle(self, name: str):
        self._require_initialized()
        if self._spec(name).kind != BOOL:
            raise ToggleOnNonBoolean(name)
        self.set(name, not self._values[name])

    # ---- subscriptions -------------------------------------------------
    def on_change(self, name: str, handler: Callable[[ChangeEvent], None]) -> Disposable:
        emitter = self._require_initialized()
        self._spec(name)
        return emitter.on(did_change(name), handler)

    def on_destroy(self, handler: Callable[[DestroyEvent], None]) -> Disposable:
        return self._require_initialized().on(DID_DESTROY, handler)

    # ---- internals -----------------------------------------------------
    def _mirror(self, name: str, value: ConfigValue):
        if self._emitter is None:
            return
        self._values[name] = value
        logger.debug("Option %s -> %r", name, value)
        self._depth[name] = self._depth.get(name, 0) + 1
        try:
            self._emitter.emit(did_change(name), ChangeEvent(name, value))
        finally:
            self._depth[name] -= 1

    def _spec(self, name: str) -> OptionSpec:
        try:
            return self._specs[name]
        except KeyError:
            raise InvalidOption(name) from None

    def _require_initialized(self) -> Emitter:
        if self._emitter is None:
            raise InvalidState("Options are not initialised")
        return self._emitter

    def _register_commands(self):
        self._disposables.add(
            self._commands.add(COMMAND_TARGET, TOGGLE_COLOURS, lambda: self.toggle("coloured")),
            self._commands.add(COMMAND_TARGET, DEBUG_OUTLINES, self._toggle_debug_outlines),
        )

    def _toggle_debug_outlines(self):
        root = self.root
        if root is None:
            logger.debug("No root container for debug outlines")
            return
        root.setProperty(DEBUG_OUTLINES_PROPERTY, not bool(root.property(DEBUG_OUTLINES_PROPERTY)))
        style = root.style()
        style.unpolish(root)
        style.polish(root)
        root.update()


__all__ = [
    "OptionsController", "OPTIONS", "COMMAND_TARGET", "TOGGLE_COLOURS", "DEBUG_OUTLINES",
    "DEBUG_OUTLINES_PROPERTY", "MAX_DISPATCH_DEPTH",
]
