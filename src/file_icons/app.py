from __future__ import annotations
import logging
import os

from PySide6.QtCore import QSettings
from PySide6.QtWidgets import QApplication, QFileDialog, QMainWindow

from .core.commands import CommandRegistry
from .core.config_store import ConfigStore
from .core.menu_framework import MenuAction, MenuDefinition, MenuRegistry
from .core.options import DEBUG_OUTLINES, OPTIONS, TOGGLE_COLOURS, OptionsController
from .ui.file_icon_config import apply_file_icon_config
from .ui.tab_tracker import TabTracker
from .ui.workspace import Workspace

logger = logging.getLogger(__name__)


def configure_logging():
    level = os.environ.get("FILE_ICONS_LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


class FileIconsApplication:
    def __init__(self, argv, settings: QSettings | None = None):
        configure_logging()
        self.app = QApplication.instance() or QApplication(argv)
        self.store = ConfigStore(OPTIONS, settings)
        self.commands = CommandRegistry()
        self.options = OptionsController(self.store, self.commands)
        self.options.init()
        self.registry = apply_file_icon_config()

        self.window = QMainWindow()
        self.window.setWindowTitle("File Icons")
        self.window.resize(900, 600)
        self.workspace = Workspace(self.options, self.registry)
        self.options.root = self.workspace
        self.window.setCentralWidget(self.workspace)
        self.tracker = TabTracker(self.options, self.workspace.editor, self.registry)
        self.menus = MenuRegistry(self.commands)
        self._register_default_menus()
        self.window.setMenuBar(self.menus.build(self.window))
        self.app.aboutToQuit.connect(self.shutdown)

        for path in argv[1:]:
            if os.path.isfile(path):
                self.open_path(path)

    # --- menu setup ---
    def _register_default_menus(self):
        editor = self.workspace.editor
        self.menus.add_menu(MenuDefinition(
            "File",
            actions=[
                MenuAction("New File", callback=editor.new_file, shortcut="Ctrl+N"),
                MenuAction("Open...", callback=self._file_open, shortcut="Ctrl+O"),
                MenuAction("Save", callback=self._save, shortcut="Ctrl+S"),
                MenuAction("Save As...", callback=self._save_as, shortcut="Ctrl+Shift+S"),
                MenuAction.separator(),
                MenuAction("Close Tab", callback=editor.close_current, shortcut="Ctrl+W"),
            ]
        ))
        self.menus.add_menu(MenuDefinition(
            "View",
            actions=[
                MenuAction.command_action("Toggle Colours", TOGGLE_COLOURS, shortcut="Ctrl+Alt+C"),
                MenuAction("Toggle Tab Icons", callback=lambda: self.options.toggle("tabPaneIcon")),
                MenuAction("Colour Only Changed Files", callback=lambda: self.options.toggle("onChanges")),
                MenuAction.submenu("Theme Tone", [
                    MenuAction("Dark", callback=lambda: self.options.set("themeTone", "dark")),
                    MenuAction("Light", callback=lambda: self.options.set("themeTone", "light")),
                ]),
                MenuAction.separator(),
                MenuAction.command_action("Debug Outlines", DEBUG_OUTLINES),
            ]
        ))

    # --- file ops ---
    def _file_open(self):
        path, _ = QFileDialog.getOpenFileName(self.window, "Open File")
        if path:
            self.open_path(path)

    def open_path(self, path) -> bool:
        try:
            self.workspace.editor.open_file(path)
        except UnicodeDecodeError:
            logger.warning("Not opening %s: not UTF-8 text", path)
            return False
        return True

    def _save_as(self):
        path, _ = QFileDialog.getSaveFileName(self.window, "Save As")
        if path:
            self.workspace.editor.save(as_path=path)

    def _save(self):
        editor = self.workspace.editor
        pane = editor.current_editor()
        if pane is not None and pane.path is None:
            self._save_as()
        else:
            editor.save()

    def shutdown(self):
        if self.options.is_initialized:
            self.options.reset()

    def run(self):
        self.window.show()
        return self.app.exec()
