from __future__ import annotations
from dataclasses import dataclass
import logging
import os
from typing import Any, Callable, Dict, Iterable, Optional, Tuple

from PySide6.QtCore import QFileSystemWatcher, QObject, QSettings, Signal

from .errors import InvalidOption, TypeMismatch
from .events import Disposable

logger = logging.getLogger(__name__)

ConfigValue = Any

BOOL = "bool"
STRING = "string"
ENUM = "enum"

_TRUE_STRINGS = {"true", "1", "yes", "on"}
_FALSE_STRINGS = {"false", "0", "no", "off"}


@dataclass(frozen=True)
class OptionSpec:
    """Declared name, kind and domain of a stored option."""
    name: str
    kind: str
    default: ConfigValue
    choices: Tuple[str, ...] = ()

    def accepts(self, value) -> bool:
        if self.kind == BOOL:
            return isinstance(value, bool)
        if self.kind == ENUM:
            return isinstance(value, str) and value in self.choices
        return isinstance(value, str)

    def expected(self) -> str:
        if self.kind == BOOL:
            return "a boolean"
        if self.kind == ENUM:
            return "one of " + ", ".join(repr(c) for c in self.choices)
        return "a string"

    def validate(self, value):
        if not self.accepts(value):
            raise TypeMismatch(self.name, value, self.expected())
        return value

    def decode(self, raw) -> ConfigValue:
        """Turn a raw QSettings value back into the declared type.

        INI backed settings hand booleans back as strings, so those are
        parsed here. Anything undecodable yields ``None``.
        """
        if raw is None:
            return None
        if self.kind == BOOL:
            if isinstance(raw, bool):
                return raw
            text = str(raw).strip().lower()
            if text in _TRUE_STRINGS:
                return True
            if text in _FALSE_STRINGS:
                return False
            return None
        if not isinstance(raw, str):
            return None
        if self.kind == ENUM and raw not in self.choices:
            return None
        return raw


class ConfigStore(QObject):
    """Adapter over QSettings exposing get/set/observe per named option.

    Every key lives under ``<namespace>/<name>``. Writes notify observers
    synchronously through ``value_changed`` on the calling thread; writing
    the value already in effect is dropped without notification. File-backed
    settings are watched, so edits made by another process (or another
    QSettings on the same file) reach observers too.
    """
    value_changed = Signal(str, object)

    def __init__(self, specs: Iterable[OptionSpec], settings: Optional[QSettings] = None,
                 namespace: str = "file-icons", parent=None):
        super().__init__(parent)
        self._specs: Dict[str, OptionSpec] = {s.name: s for s in specs}
        self._settings = settings if settings is not None else QSettings("file-icons", "file-icons")
        self._namespace = namespace
        self._last: Dict[str, ConfigValue] = {name: self.get(name) for name in self._specs}
        self._watcher = QFileSystemWatcher(self)
        self._watcher.fileChanged.connect(self._on_file_changed)
        self._watcher.directoryChanged.connect(self._on_file_changed)
        self._watch()

    # ---- schema --------------------------------------------------------
    def spec(self, name: str) -> OptionSpec:
        try:
            return self._specs[name]
        except KeyError:
            raise InvalidOption(name) from None

    def names(self) -> list[str]:
        return list(self._specs)

    def key(self, name: str) -> str:
        return f"{self._namespace}/{name}"

    @property
    def file_name(self) -> str:
        return self._settings.fileName()

    def watched_files(self) -> list[str]:
        return self._watcher.files()

    # ---- access --------------------------------------------------------
    def get(self, name: str) -> ConfigValue:
        spec = self.spec(name)
        key = self.key(name)
        if not self._settings.contains(key):
            return spec.default
        raw = self._settings.value(key)
        value = spec.decode(raw)
        if value is None:
            logger.warning("Ignoring stored value %r for %s; using default %r", raw, key, spec.default)
            return spec.default
        return value

    def set(self, name: str, value: ConfigValue):
        spec = self.spec(name)
        spec.validate(value)
        if self.get(name) == value:
            return
        self._settings.setValue(self.key(name), value)
        self._settings.sync()
        self._watch()
        logger.debug("Stored %s = %r", self.key(name), value)
        self._last[name] = value
        self.value_changed.emit(name, value)

    def unset(self, name: str):
        before = self.get(name)
        self._settings.remove(self.key(name))
        self._settings.sync()
        after = self.get(name)
        self._last[name] = after
        if after != before:
            self.value_changed.emit(name, after)

    def reload(self) -> list[str]:
        """Re-read the backing store and notify for keys changed elsewhere.

        Returns the names whose effective value differs from the last one
        seen by this store.
        """
        self._settings.sync()
        changed = []
        for name in self._specs:
            value = self.get(name)
            if value != self._last.get(name):
                self._last[name] = value
                changed.append(name)
        for name in changed:
            logger.debug("External change to %s = %r", self.key(name), self._last[name])
            self.value_changed.emit(name, self._last[name])
        return changed

    def observe(self, name: str, callback: Callable[[ConfigValue], None]) -> Disposable:
        """Call ``callback`` with the current value now and on every change."""
        self.spec(name)

        def _on_changed(changed: str, value):
            if changed == name:
                callback(value)

        self.value_changed.connect(_on_changed)
        callback(self.get(name))
        return Disposable(lambda: self.value_changed.disconnect(_on_changed))

    # ---- external changes ----------------------------------------------
    def _watch(self):
        # QSettings rewrites its file by rename, which drops the file watch;
        # the directory watch catches the replacement.
        path = self.file_name
        if not path:
            return
        directory = os.path.dirname(path)
        if directory and os.path.isdir(directory) and directory not in self._watcher.directories():
            self._watcher.addPath(directory)
        if os.path.isfile(path) and path not in self._watcher.files():
            self._watcher.addPath(path)

    def _on_file_changed(self, _path: str):
        self._watch()
        self.reload()


__all__ = ["OptionSpec", "ConfigStore", "BOOL", "STRING", "ENUM"]
