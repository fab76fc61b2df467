"""Errors raised by the options layer.

All of them are raised synchronously, before any write reaches the config
store, so callers can catch and carry on.
"""
from __future__ import annotations


class OptionsError(Exception):
    """Base exception for option operations."""


class InvalidOption(OptionsError, KeyError):
    """Raised when an option name is not tracked."""

    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"Unknown option: {self.name!r}"


class TypeMismatch(OptionsError, TypeError):
    """Raised when a value falls outside an option's declared domain."""

    def __init__(self, name: str, value, expected: str):
        super().__init__(f"Option {name!r} expects {expected}, got {value!r}")
        self.name = name
        self.value = value
        self.expected = expected


class InvalidState(OptionsError):
    """Raised for operations outside the init/reset lifecycle."""


class ToggleOnNonBoolean(OptionsError):
    """Raised when toggling an option that is not boolean."""

    def __init__(self, name: str):
        super().__init__(f"Option {name!r} is not boolean and cannot be toggled")
        self.name = name


__all__ = [
    "OptionsError", "InvalidOption", "TypeMismatch", "InvalidState", "ToggleOnNonBoolean",
]
