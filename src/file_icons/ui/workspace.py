from __future__ import annotations
import logging
from pathlib import Path

from PySide6.QtCore import QDir, QIdentityProxyModel, QModelIndex, QSize, Qt
from PySide6.QtGui import QIcon
from PySide6.QtWidgets import (
    QFileSystemModel, QHBoxLayout, QLabel, QSizePolicy, QSplitter, QTreeView, QVBoxLayout, QWidget,
)

from file_icons.core.events import CompositeDisposable
from file_icons.core.options import DEBUG_OUTLINES_PROPERTY, OptionsController
from .file_icons import FileIconRegistry, badge_icon
from .tabbed_editor import TabbedEditor

logger = logging.getLogger(__name__)

ICON_CLASSES_ROLE = Qt.UserRole + 1

# Options whose changes alter tree entry icons
TREE_OPTIONS = ("coloured", "defaultIconClass", "themeTone")


class FileIconProxyModel(QIdentityProxyModel):
    """Decorates file entries of a QFileSystemModel with icon classes.

    Directories stay icon-less (the tree's chevrons already show them).
    Icons are computed on every ``data`` call from the live option mirror,
    so a view repaint is all a change needs.
    """

    def __init__(self, registry: FileIconRegistry, options: OptionsController, parent=None):
        super().__init__(parent)
        self._registry = registry
        self._options = options

    def icon_classes(self, index: QModelIndex) -> list[str]:
        source = self.sourceModel()
        src_index = self.mapToSource(index)
        if not isinstance(source, QFileSystemModel) or source.isDir(src_index):
            return []
        if not self._options.is_initialized:
            return []
        opts = self._options.snapshot()
        return self._registry.icon_classes(
            Path(source.filePath(src_index)),
            coloured=opts["coloured"],
            tone=opts["themeTone"],
            default_class=opts["defaultIconClass"],
        )

    def data(self, index, role=Qt.DisplayRole):  # type: ignore[override]
        if index.isValid() and index.column() == 0:
            if role == Qt.DecorationRole:
                classes = self.icon_classes(index)
                return badge_icon(classes) if classes else QIcon()
            if role == ICON_CLASSES_ROLE:
                return " ".join(self.icon_classes(index))
        return super().data(index, role)


class Workspace(QWidget):
    """Root container: file tree on the left, tabbed editor on the right."""

    def __init__(self, options: OptionsController, registry: FileIconRegistry,
                 root_path: str | None = None, parent=None):
        super().__init__(parent)
        self.setObjectName("workspace")
        self.setProperty(DEBUG_OUTLINES_PROPERTY, False)
        self._options = options
        self._subscriptions = CompositeDisposable()

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)
        splitter = QSplitter(Qt.Horizontal, self)
        splitter.setChildrenCollapsible(False)
        splitter.setHandleWidth(2)

        # Explorer ---------------------------------------------------------
        explorer = QWidget(splitter)
        explorer_layout = QVBoxLayout(explorer)
        explorer_layout.setContentsMargins(0, 0, 0, 0)
        explorer_layout.setSpacing(0)
        explorer.setMinimumWidth(160)
        header = QWidget(explorer)
        header.setFixedHeight(24)
        header_layout = QHBoxLayout(header)
        header_layout.setContentsMargins(8, 0, 4, 0)
        header_label = QLabel("Explorer", header)
        header_label.setStyleSheet("color:#cfd2d6; font-weight:bold; font-size:11px;")
        header_layout.addWidget(header_label)
        header_layout.addStretch()
        explorer_layout.addWidget(header)

        root = root_path or QDir.currentPath()
        self.fs_model = QFileSystemModel(self)
        self.fs_model.setRootPath(root)
        self.fs_model.setFilter(QDir.AllDirs | QDir.NoDotAndDotDot | QDir.Files)
        self.icon_model = FileIconProxyModel(registry, options, self)
        self.icon_model.setSourceModel(self.fs_model)
        tree = QTreeView(explorer)
        tree.setModel(self.icon_model)
        tree.setRootIndex(self.icon_model.mapFromSource(self.fs_model.index(root)))
        tree.setHeaderHidden(True)
        for col in range(1, self.fs_model.columnCount()):
            tree.setColumnHidden(col, True)
        tree.setIndentation(14)
        tree.setIconSize(QSize(14, 14))
        tree.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)
        tree.setStyleSheet(
            "QTreeView { background:#242629; color:#e3e5e8; border:none; outline:0; padding-left:5px; }"
            "QTreeView::item:selected { background:#3a3d41; }"
        )
        tree.doubleClicked.connect(self._on_tree_activated)
        self.tree = tree
        explorer_layout.addWidget(tree)
        splitter.addWidget(explorer)

        # Editor -----------------------------------------------------------
        self.editor = TabbedEditor(splitter)
        splitter.addWidget(self.editor)
        splitter.setStretchFactor(0, 0)
        splitter.setStretchFactor(1, 1)
        splitter.setSizes([260, 640])
        splitter.setStyleSheet("QSplitter::handle { background:#303234; }")
        layout.addWidget(splitter, 1)

        self.setStyleSheet(
            f'QWidget#workspace[{DEBUG_OUTLINES_PROPERTY}="true"] QWidget {{ border:1px dashed #e06c75; }}'
        )
        if options.is_initialized:
            self.attach_options()

    def attach_options(self):
        """Repaint the tree whenever an option it depends on changes."""
        for name in TREE_OPTIONS:
            self._subscriptions.add(self._options.on_change(name, lambda _ev: self.refresh_tree()))
        self._subscriptions.add(self._options.on_destroy(lambda _ev: self.detach_options()))

    def detach_options(self):
        self._subscriptions.dispose()
        self._subscriptions = CompositeDisposable()

    def refresh_tree(self):
        self.tree.viewport().update()

    def debug_outlines(self) -> bool:
        return bool(self.property(DEBUG_OUTLINES_PROPERTY))

    def _on_tree_activated(self, index: QModelIndex):
        src = self.icon_model.mapToSource(index)
        if self.fs_model.isDir(src):
            return
        path = self.fs_model.filePath(src)
        try:
            self.editor.open_file(path)
        except UnicodeDecodeError:
            logger.warning("Not opening %s: not UTF-8 text", path)


__all__ = ["Workspace", "FileIconProxyModel", "ICON_CLASSES_ROLE"]
