"""
File Icons
----------
File-type icon and colour classes for editor tabs and tree entries,
kept live against user configuration. Built with PySide6.
"""

__version__ = "0.1.0.dev1"

from .main import main

__all__ = ["__version__", "main"]
