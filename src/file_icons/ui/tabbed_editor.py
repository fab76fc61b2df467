from __future__ import annotations
import logging
from pathlib import Path

from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QColor, QIcon
from PySide6.QtWidgets import (
    QWidget,
    QVBoxLayout,
    QTabBar,
    QStackedWidget,
    QPlainTextEdit,
)

logger = logging.getLogger(__name__)

UNTITLED = "untitled"


def normalize(path) -> str:
    return str(Path(path).resolve())


def read_text(path: str) -> str:
    """Read ``path`` as UTF-8; a missing file reads as empty.

    Undecodable files raise UnicodeDecodeError rather than being opened
    lossily and written back altered on save.
    """
    try:
        return Path(path).read_text(encoding="utf-8")
    except FileNotFoundError:
        return ""


class EditorPane(QPlainTextEdit):
    """Plain text pane, bound to a file on disk once it has a path."""

    def __init__(self, path: str | None = None, parent=None):
        super().__init__(parent)
        self.path = path
        self.setLineWrapMode(QPlainTextEdit.NoWrap)
        self.setStyleSheet(
            "QPlainTextEdit { background:#1f2123; color:#e3e5e8; border:none; padding:6px 0 6px 0; }"
        )

    def load(self, text: str):
        self.setPlainText(text)
        self.document().setModified(False)

    def save(self):
        if self.path is None:
            raise ValueError("Untitled pane needs a path before saving")
        Path(self.path).write_text(self.toPlainText(), encoding="utf-8")
        self.document().setModified(False)

    def is_modified(self) -> bool:
        return self.document().isModified()


class TabbedEditor(QWidget):
    """Tabbed editor container; announces file lifecycle through signals.

    Tabs are keyed by resolved absolute path, kept in each tab's tooltip
    so the mapping survives tab moves. Untitled panes have an empty tooltip
    and stay out of the mapping (and out of every lifecycle signal) until
    they are first saved.
    """
    tab_opened = Signal(str)
    tab_saved = Signal(str)
    tab_renamed = Signal(str, str)
    tab_closed = Signal(str)
    tab_modified = Signal(str, bool)

    def __init__(self, parent=None):
        super().__init__(parent)
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)

        self._tab_bar = QTabBar(self)
        self._tab_bar.setMovable(True)
        self._tab_bar.setTabsClosable(True)
        self._tab_bar.setDocumentMode(True)
        self._tab_bar.setElideMode(Qt.ElideRight)
        self._tab_bar.setExpanding(False)
        self._tab_bar.tabCloseRequested.connect(self._close_index)
        self._tab_bar.currentChanged.connect(self._on_tab_changed)
        self._tab_bar.tabMoved.connect(self._on_tab_moved)

        self._stack = QStackedWidget(self)
        layout.addWidget(self._tab_bar)
        layout.addWidget(self._stack, 1)

        self._path_to_index: dict[str, int] = {}
        self._editors: list[EditorPane] = []
        self._apply_style()

    # ---- styling -------------------------------------------------------
    def _apply_style(self):
        self._tab_bar.setStyleSheet(
            "QTabBar { background:#1f2123; }"
            "QTabBar::tab { background:#2a2c2f; color:#cfd2d6;"
            " padding:5px 10px 3px 10px; margin-right:0;"
            " border:1px solid #3a3d41; border-bottom:0;"
            " min-height:24px; min-width:70px; }"
            "QTabBar::tab:selected { background:#34373a; border-top:2px solid #2f80ed; padding-top:3px; }"
            "QTabBar::tab:hover { background:#323539; }"
        )

    # ---- public API ----------------------------------------------------
    @property
    def tab_bar(self) -> QTabBar:
        return self._tab_bar

    def open_file(self, path) -> EditorPane:
        norm = normalize(path)
        if norm in self._path_to_index:
            index = self._path_to_index[norm]
            self._tab_bar.setCurrentIndex(index)
            return self._editors[index]
        text = read_text(norm)
        editor = self._add_pane(EditorPane(norm, self._stack), Path(norm).name, norm)
        editor.load(text)
        logger.debug("Opened %s", norm)
        self.tab_opened.emit(norm)
        return editor

    def new_file(self) -> EditorPane:
        """Open an empty pane with no path; it gets one on first save."""
        editor = self._add_pane(EditorPane(None, self._stack), UNTITLED, "")
        self._tab_bar.setTabData(self.index_of_editor(editor), "title")
        logger.debug("Opened untitled pane")
        return editor

    def save(self, path=None, as_path=None):
        """Save the pane for ``path`` (default: current) to disk.

        ``as_path`` gives an untitled pane its first path, or saves an
        existing one under a new name; either way ``tab_saved`` carries the
        path written.
        """
        editor = self.editor_for(path) if path is not None else self.current_editor()
        if editor is None:
            return
        if as_path is not None:
            target = normalize(as_path)
            if target != editor.path and self.index_of(target) >= 0:
                raise FileExistsError(target)
            index = self.index_of_editor(editor)
            editor.path = target
            self._tab_bar.setTabText(index, Path(target).name)
            self._tab_bar.setTabToolTip(index, target)
            self._rebuild_mapping()
        editor.save()
        logger.debug("Saved %s", editor.path)
        self.tab_saved.emit(editor.path)

    def rename(self, old_path, new_path):
        """Move ``old_path`` to ``new_path`` on disk and retarget its tab.

        Refuses to replace an existing file or another open tab.
        """
        old = normalize(old_path)
        new = normalize(new_path)
        index = self.index_of(old)
        if index < 0:
            raise KeyError(old)
        if new == old:
            return
        if Path(new).exists() or self.index_of(new) >= 0:
            raise FileExistsError(new)
        if Path(old).exists():
            Path(old).rename(new)
        editor = self._editors[index]
        editor.path = new
        self._tab_bar.setTabText(index, Path(new).name)
        self._tab_bar.setTabToolTip(index, new)
        self._rebuild_mapping()
        logger.debug("Renamed %s -> %s", old, new)
        self.tab_renamed.emit(old, new)

    def close_path(self, path):
        index = self.index_of(path)
        if index >= 0:
            self._close_index(index)

    def close_current(self):
        index = self._tab_bar.currentIndex()
        if index >= 0:
            self._close_index(index)

    def index_of(self, path) -> int:
        return self._path_to_index.get(normalize(path), -1)

    def index_of_editor(self, editor: EditorPane) -> int:
        try:
            return self._editors.index(editor)
        except ValueError:
            return -1

    def editor_for(self, path) -> EditorPane | None:
        index = self.index_of(path)
        return self._editors[index] if 0 <= index < len(self._editors) else None

    def paths(self) -> list[str]:
        """Paths of all titled tabs, in tab order."""
        return [p for p in (self._tab_bar.tabToolTip(i) for i in range(self._tab_bar.count())) if p]

    def current_editor(self) -> EditorPane | None:
        w = self._stack.currentWidget()
        return w if isinstance(w, EditorPane) else None

    def current_path(self) -> str | None:
        idx = self._tab_bar.currentIndex()
        if idx < 0:
            return None
        return self._tab_bar.tabToolTip(idx) or None

    def apply_tab_visual(self, path, classes: list[str], icon: QIcon, colour: QColor | None):
        index = self.index_of(path)
        if index < 0:
            return
        self._tab_bar.setTabData(index, " ".join(classes))
        self._tab_bar.setTabIcon(index, icon)
        self._tab_bar.setTabTextColor(index, colour if colour is not None else QColor())

    # ---- internal slots ------------------------------------------------
    def _add_pane(self, editor: EditorPane, title: str, tooltip: str) -> EditorPane:
        editor.document().modificationChanged.connect(
            lambda modified, e=editor: self._on_modification_changed(e, modified)
        )
        self._stack.addWidget(editor)
        self._editors.append(editor)
        tab_index = self._tab_bar.addTab(title)
        self._tab_bar.setTabToolTip(tab_index, tooltip)
        self._rebuild_mapping()
        self._tab_bar.setCurrentIndex(tab_index)
        self._stack.setCurrentWidget(editor)
        return editor

    def _on_modification_changed(self, editor: EditorPane, modified: bool):
        if editor.path:
            self.tab_modified.emit(editor.path, modified)

    def _close_index(self, index: int):
        path = self._tab_bar.tabToolTip(index)
        if 0 <= index < len(self._editors):
            w = self._editors.pop(index)
            self._stack.removeWidget(w)
            w.deleteLater()
        self._tab_bar.removeTab(index)
        self._rebuild_mapping()
        if self._tab_bar.count():
            self._set_current_editor_by_tab()
        logger.debug("Closed %s", path or UNTITLED)
        if path:
            self.tab_closed.emit(path)

    def _on_tab_changed(self, index: int):
        if index < 0:
            return
        self._set_current_editor_by_tab()

    def _on_tab_moved(self, from_index: int, to_index: int):
        if from_index == to_index:
            return
        if 0 <= from_index < len(self._editors):
            editor = self._editors.pop(from_index)
            to_index = max(0, min(to_index, len(self._editors)))
            self._editors.insert(to_index, editor)
        self._rebuild_mapping()
        self._set_current_editor_by_tab()

    # ---- mapping -------------------------------------------------------
    def _rebuild_mapping(self):
        self._path_to_index.clear()
        for i in range(self._tab_bar.count()):
            p = self._tab_bar.tabToolTip(i)
            if p:
                self._path_to_index[p] = i

    def _set_current_editor_by_tab(self):
        idx = self._tab_bar.currentIndex()
        if 0 <= idx < len(self._editors):
            self._stack.setCurrentWidget(self._editors[idx])


__all__ = ["TabbedEditor", "EditorPane", "normalize", "read_text", "UNTITLED"]
