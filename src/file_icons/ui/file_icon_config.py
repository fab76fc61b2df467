"""Central place to declare file icon mappings.

Edit this file to add or change icons without touching the tab or tree code.

How to add icons:
    1. Pick an icon class (e.g. "python-icon") and a colour class from
       ``file_icons.PALETTE``.
    2. Add a line in ICONS_BY_EXTENSION or ICONS_BY_FILENAME below.
    3. Thin glyphs that wash out on light themes take a third element: the
       colour used when the theme tone is "light".

Supported keys:
    - Extensions: without leading dot (e.g. "py", "json", "tar.gz")
    - Filenames: exact match (case-insensitive) like "README.md" or ".bowerrc"
"""
from __future__ import annotations
from .file_icons import FileIconRegistry

# Map extensions -> (icon class, colour[, light-theme colour])
ICONS_BY_EXTENSION = {
    "py": ("python-icon", "dark-blue"),
    "md": ("markdown-icon", "medium-blue"),
    "markdown": ("markdown-icon", "medium-blue"),
    "tex": ("tex-icon", "medium-blue", "dark-blue"),
    "json": ("database-icon", "medium-yellow", "dark-yellow"),
    "js": ("js-icon", "medium-yellow", "dark-yellow"),
    "ts": ("ts-icon", "medium-blue"),
    "html": ("html5-icon", "medium-orange"),
    "css": ("css3-icon", "medium-blue"),
    "toml": ("config-icon", "medium-maroon"),
    "yml": ("yaml-icon", "medium-red"),
    "yaml": ("yaml-icon", "medium-red"),
    "sh": ("terminal-icon", "medium-purple"),
    "tar.gz": ("zip-icon", "dark-green"),
    "gz": ("zip-icon", "medium-green"),
}

# Groups of extensions that share the same icon
GROUPED_EXTENSION_ICONS = {
    ("image-icon", "medium-orange"): [
        "png", "jpg", "jpeg", "gif", "bmp", "tif", "tiff", "webp", "svg", "ico",
    ],
    ("text-icon", "medium-cyan"): [
        "txt", "text", "log",
    ],
}

# Map exact filenames -> (icon class, colour[, light-theme colour])
ICONS_BY_FILENAME = {
    ".bowerrc": ("bower-icon", "medium-yellow", "medium-orange"),
    "bower.json": ("bower-icon", "medium-yellow", "medium-orange"),
    "readme.md": ("book-icon", "medium-blue"),
    ".gitignore": ("git-icon", "medium-red"),
    "makefile": ("config-icon", "dark-yellow"),
}


def apply_file_icon_config(registry: FileIconRegistry | None = None) -> FileIconRegistry:
    """Register all configured icons into ``registry`` (a new one by default)."""
    if registry is None:
        registry = FileIconRegistry()
    for ext, entry in ICONS_BY_EXTENSION.items():
        registry.register_extension(ext, *entry)
    for entry, extensions in GROUPED_EXTENSION_ICONS.items():
        for ext in extensions:
            registry.register_extension(ext, *entry)
    for name, entry in ICONS_BY_FILENAME.items():
        registry.register_filename(name, *entry)
    return registry
