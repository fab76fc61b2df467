from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from PySide6.QtWidgets import QMenuBar, QMenu
from PySide6.QtGui import QAction

from .commands import COMMAND_TARGET, CommandRegistry

ActionCallback = Callable[[], None]


@dataclass
class MenuAction:
    """A menu entry bound to a callback or to a registered command.

    Use ``MenuAction.command_action(text, name)`` to dispatch a command,
    ``MenuAction.submenu(title, actions)`` for a submenu and
    ``MenuAction.separator()`` for a separator line.
    """
    text: str
    callback: Optional[ActionCallback] = None
    command: str | None = None
    shortcut: str | None = None
    enabled: bool = True
    submenu_def: 'MenuDefinition | None' = None
    _separator: bool = False

    def build(self, parent, commands: CommandRegistry | None = None) -> QAction | QMenu | None:
        if self._separator:
            return None
        if self.submenu_def:
            menu = QMenu(self.text, parent)
            self.submenu_def.build_into(menu, commands)
            return menu
        act = QAction(self.text, parent)
        if self.shortcut:
            act.setShortcut(self.shortcut)
        if self.callback:
            act.triggered.connect(self.callback)  # type: ignore[arg-type]
        elif self.command and commands is not None:
            name = self.command
            act.triggered.connect(lambda *_: commands.dispatch(COMMAND_TARGET, name))
            act.setData(name)
        act.setEnabled(self.enabled)
        return act

    # --- helpers ---
    @classmethod
    def separator(cls):
        return cls(text="--", _separator=True, enabled=False)

    @classmethod
    def submenu(cls, title: str, actions: List['MenuAction']):
        return cls(text=title, submenu_def=MenuDefinition(title, actions))

    @classmethod
    def command_action(cls, text: str, command: str, shortcut: str | None = None):
        return cls(text=text, command=command, shortcut=shortcut)


@dataclass
class MenuDefinition:
    title: str
    actions: List[MenuAction] = field(default_factory=list)

    def build_into(self, menubar_or_menu: QMenuBar | QMenu, commands: CommandRegistry | None = None):
        for item in self.actions:
            if item._separator:
                menubar_or_menu.addSeparator()
                continue
            built = item.build(menubar_or_menu, commands)
            if built is None:
                continue
            if isinstance(built, QMenu):
                menubar_or_menu.addMenu(built)
            else:
                menubar_or_menu.addAction(built)


class MenuRegistry:
    """Registry to (re)build a QMenuBar from definitions."""
    def __init__(self, commands: CommandRegistry | None = None):
        self._menus: list[MenuDefinition] = []
        self._commands = commands

    def add_menu(self, menu: MenuDefinition):
        self._menus.append(menu)
        return self

    def build(self, parent) -> QMenuBar:
        bar = QMenuBar(parent)
        bar.setNativeMenuBar(False)
        for m in self._menus:
            menu = bar.addMenu(m.title)
            m.build_into(menu, self._commands)
        return bar


__all__ = [
    "MenuAction", "MenuDefinition", "MenuRegistry", "COMMAND_TARGET",
]
