"""Tests for icon class lookup."""

from pathlib import Path

import pytest

from file_icons.ui.file_icon_config import apply_file_icon_config
from file_icons.ui.file_icons import FileIconRegistry, badge_icon, colour_of


@pytest.fixture
def registry():
    return apply_file_icon_config()


def test_extension_lookup(registry):
    assert registry.icon_classes(Path("notes/markdown.md")) == ["icon", "markdown-icon", "medium-blue"]


def test_filename_beats_extension(registry):
    assert registry.icon_classes(Path("README.md"))[1] == "book-icon"
    assert registry.icon_classes(Path("bower.json"))[1] == "bower-icon"


def test_longest_suffix_wins(registry):
    assert registry.icon_classes(Path("dist.tar.gz"))[2] == "dark-green"
    assert registry.icon_classes(Path("log.gz"))[2] == "medium-green"


def test_light_tone_uses_alternate_colour(registry):
    assert registry.icon_classes(Path("la.tex"), tone="light") == ["icon", "tex-icon", "dark-blue"]
    assert registry.icon_classes(Path(".bowerrc"), tone="light")[2] == "medium-orange"
    # entries without a light variant keep their colour
    assert registry.icon_classes(Path("a.md"), tone="light")[2] == "medium-blue"


def test_uncoloured(registry):
    assert registry.icon_classes(Path("a.md"), coloured=False) == ["icon", "markdown-icon"]


def test_default_class_for_unknown_files(registry):
    assert registry.icon_classes(Path("data.xyz")) == ["icon", "default-icon"]
    assert registry.icon_classes(Path("noext"), default_class="icon-file-text") == ["icon", "icon-file-text"]


def test_case_insensitive():
    registry = FileIconRegistry()
    registry.register_extension(".PY", "python-icon", "dark-blue")
    assert registry.entry_for(Path("MAIN.Py")).icon_class == "python-icon"


def test_badge_icon_and_colour(qapp):
    classes = ["icon", "markdown-icon", "medium-blue"]
    assert colour_of(classes).name() == "#4c8fd6"
    assert colour_of(["icon", "markdown-icon"]) is None
    assert not badge_icon(classes).isNull()
