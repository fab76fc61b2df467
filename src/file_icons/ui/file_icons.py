from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from PySide6.QtCore import Qt
from PySide6.QtGui import QColor, QFont, QIcon, QPainter, QPixmap

"""File icon classes and colour classes.

Usage:
    from .file_icons import FileIconRegistry
    registry = FileIconRegistry()
    registry.register_extension("md", "markdown-icon", "medium-blue")
    registry.register_filename(".bowerrc", "bower-icon", "medium-yellow", light_colour="medium-orange")
    registry.icon_classes(Path("notes.md"), coloured=True, tone="dark", default_class="default-icon")
    # -> ["icon", "markdown-icon", "medium-blue"]

Entries are resolved in this order:
    1. Exact filename match (case-insensitive)
    2. Extension match, longest dotted suffix first ("tar.gz" before "gz")
    3. No match: the caller's default icon class, uncoloured
"""

# Colour class -> RGB, used to paint tab text and icon badges
PALETTE: Dict[str, str] = {
    "light-blue": "#6bc5f8",
    "medium-blue": "#4c8fd6",
    "dark-blue": "#2f5f9e",
    "medium-yellow": "#e0c44c",
    "dark-yellow": "#b3951d",
    "medium-orange": "#e58a3c",
    "medium-green": "#6aa84f",
    "dark-green": "#3d7a2a",
    "medium-red": "#d9534f",
    "medium-purple": "#9b6bd6",
    "medium-maroon": "#a6445a",
    "medium-cyan": "#3fb8c2",
}

_BADGE_SIZE = 16


@dataclass(frozen=True)
class IconEntry:
    icon_class: str
    colour: Optional[str] = None
    light_colour: Optional[str] = None

    def colour_for(self, tone: str) -> Optional[str]:
        if tone == "light" and self.light_colour:
            return self.light_colour
        return self.colour


class FileIconRegistry:
    def __init__(self):
        self._by_extension: Dict[str, IconEntry] = {}
        self._by_filename: Dict[str, IconEntry] = {}

    def register_extension(self, ext: str, icon_class: str, colour: str | None = None,
                           light_colour: str | None = None):
        ext = ext.lower().lstrip('.')
        self._by_extension[ext] = IconEntry(icon_class, colour, light_colour)

    def register_filename(self, filename: str, icon_class: str, colour: str | None = None,
                          light_colour: str | None = None):
        self._by_filename[filename.lower()] = IconEntry(icon_class, colour, light_colour)

    def entry_for(self, file_path: Path) -> Optional[IconEntry]:
        name = file_path.name.lower()
        if name in self._by_filename:
            return self._by_filename[name]
        # "archive.tar.gz" tries "tar.gz" then "gz"
        parts = name.split('.')[1:]
        for i in range(len(parts)):
            ext = '.'.join(parts[i:])
            if ext in self._by_extension:
                return self._by_extension[ext]
        return None

    def icon_classes(self, file_path: Path, *, coloured: bool = True, tone: str = "dark",
                     default_class: str = "default-icon") -> List[str]:
        entry = self.entry_for(file_path)
        if entry is None:
            return ["icon"] + default_class.split()
        classes = ["icon", entry.icon_class]
        colour = entry.colour_for(tone)
        if coloured and colour:
            classes.append(colour)
        return classes


def colour_of(classes: List[str]) -> Optional[QColor]:
    """First colour class in ``classes`` as a QColor, if any."""
    for cls in classes:
        if cls in PALETTE:
            return QColor(PALETTE[cls])
    return None


def badge_icon(classes: List[str]) -> QIcon:
    """Paint a small lettered badge standing in for the icon-font glyph."""
    icon_class = next((c for c in classes if c.endswith("-icon")), "")
    letter = (icon_class[:1] or "?").upper()
    colour = colour_of(classes) or QColor("#9da5b4")
    pix = QPixmap(_BADGE_SIZE, _BADGE_SIZE)
    pix.fill(Qt.transparent)
    painter = QPainter(pix)
    painter.setRenderHint(QPainter.Antialiasing, True)
    painter.setPen(Qt.NoPen)
    painter.setBrush(colour)
    painter.drawRoundedRect(1, 1, _BADGE_SIZE - 2, _BADGE_SIZE - 2, 3, 3)
    font = QFont()
    font.setPixelSize(10)
    font.setBold(True)
    painter.setFont(font)
    painter.setPen(QColor("#1f2123"))
    painter.drawText(pix.rect(), Qt.AlignCenter, letter)
    painter.end()
    return QIcon(pix)


__all__ = ["IconEntry", "FileIconRegistry", "PALETTE", "colour_of", "badge_icon"]
