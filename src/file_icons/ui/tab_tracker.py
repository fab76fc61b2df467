from __future__ import annotations
from dataclasses import dataclass, field
import logging
from pathlib import Path
from typing import Dict, List

from PySide6.QtGui import QIcon

from file_icons.core.events import ChangeEvent, CompositeDisposable, DestroyEvent, Disposable
from file_icons.core.options import OptionsController
from .file_icons import FileIconRegistry, badge_icon, colour_of
from .tabbed_editor import TabbedEditor, normalize

logger = logging.getLogger(__name__)

# Options whose changes alter tab visuals
WATCHED_OPTIONS = ("coloured", "onChanges", "tabPaneIcon", "defaultIconClass", "themeTone")


@dataclass
class TabEntry:
    path: str
    modified: bool = False
    classes: List[str] = field(default_factory=list)


def _connection(signal, slot) -> Disposable:
    signal.connect(slot)

    def _disconnect():
        try:
            signal.disconnect(slot)
        except (RuntimeError, TypeError):  # host widget already gone
            logger.debug("Signal already disconnected: %r", slot)

    return Disposable(_disconnect)


class TabTracker:
    """Keeps icon and colour classes of every open tab in sync with options.

    Listens to option changes and to the editor's file lifecycle (open,
    save, rename, modify, close). Stops listening on its own when the
    controller is reset.
    """

    def __init__(self, options: OptionsController, editor: TabbedEditor, registry: FileIconRegistry):
        self._options = options
        self._editor = editor
        self._registry = registry
        self._entries: Dict[str, TabEntry] = {}
        self._subscriptions = CompositeDisposable()
        for name in WATCHED_OPTIONS:
            self._subscriptions.add(options.on_change(name, self._on_option_changed))
        self._subscriptions.add(
            options.on_destroy(self._on_destroy),
            _connection(editor.tab_opened, self._on_opened),
            _connection(editor.tab_saved, self._on_saved),
            _connection(editor.tab_renamed, self._on_renamed),
            _connection(editor.tab_closed, self._on_closed),
            _connection(editor.tab_modified, self._on_modified),
        )
        for path in editor.paths():
            self._on_opened(path)

    @property
    def active(self) -> bool:
        return not self._subscriptions.disposed

    def tracked_paths(self) -> list[str]:
        return list(self._entries)

    def classes_for(self, path) -> list[str]:
        entry = self._entries.get(normalize(path))
        return list(entry.classes) if entry else []

    def refresh_all(self):
        for path in list(self._entries):
            self._apply(path)

    def dispose(self):
        self._subscriptions.dispose()
        self._entries.clear()

    # ---- computation ---------------------------------------------------
    def compute_classes(self, path: str, modified: bool) -> list[str]:
        opts = self._options.snapshot()
        if not opts["tabPaneIcon"]:
            return ["title"]
        coloured = opts["coloured"] and (modified or not opts["onChanges"])
        return ["title"] + self._registry.icon_classes(
            Path(path),
            coloured=coloured,
            tone=opts["themeTone"],
            default_class=opts["defaultIconClass"],
        )

    def _apply(self, path: str):
        entry = self._entries.get(path)
        if entry is None:
            return
        entry.classes = self.compute_classes(path, entry.modified)
        icon = badge_icon(entry.classes) if len(entry.classes) > 1 else QIcon()
        self._editor.apply_tab_visual(path, entry.classes, icon, colour_of(entry.classes))
        logger.debug("Tab %s -> %s", path, " ".join(entry.classes))

    # ---- option events -------------------------------------------------
    def _on_option_changed(self, event: ChangeEvent):
        logger.debug("Recomputing %d tabs after %s changed", len(self._entries), event.option)
        self.refresh_all()

    def _on_destroy(self, _event: DestroyEvent):
        logger.debug("Options destroyed; tab tracker detaching")
        self.dispose()

    # ---- file lifecycle ------------------------------------------------
    def _on_opened(self, path: str):
        if not path:
            return
        path = normalize(path)
        pane = self._editor.editor_for(path)
        self._entries[path] = TabEntry(path, modified=pane.is_modified() if pane else False)
        self._apply(path)

    def _on_saved(self, path: str):
        entry = self._entries.get(normalize(path))
        if entry is None:
            self._on_opened(path)
            return
        entry.modified = False
        self._apply(entry.path)

    def _on_renamed(self, old: str, new: str):
        entry = self._entries.pop(normalize(old), None)
        new = normalize(new)
        self._entries[new] = TabEntry(new, modified=entry.modified if entry else False)
        self._apply(new)

    def _on_modified(self, path: str, modified: bool):
        entry = self._entries.get(normalize(path))
        if entry is None or entry.modified == modified:
            return
        entry.modified = modified
        self._apply(entry.path)

    def _on_closed(self, path: str):
        self._entries.pop(normalize(path), None)


__all__ = ["TabTracker", "TabEntry", "WATCHED_OPTIONS"]
