from __future__ import annotations
import logging
from typing import Callable, Dict, Tuple

from .events import Disposable

logger = logging.getLogger(__name__)

CommandHandler = Callable[[], None]

COMMAND_TARGET = "workspace"


class CommandRegistry:
    """Host-level invocable actions, keyed by ``(target, name)``.

    ``target`` scopes a command to part of the UI (``"workspace"`` is the
    root container). Registering returns a Disposable that removes the
    binding again; a newer registration for the same key wins.
    """
    def __init__(self):
        self._handlers: Dict[Tuple[str, str], CommandHandler] = {}

    def add(self, target: str, name: str, handler: CommandHandler) -> Disposable:
        key = (target, name)
        if key in self._handlers:
            logger.warning("Command %s on %s registered twice; replacing", name, target)
        self._handlers[key] = handler

        def _remove():
            if self._handlers.get(key) is handler:
                del self._handlers[key]

        return Disposable(_remove)

    def dispatch(self, target: str, name: str) -> bool:
        handler = self._handlers.get((target, name))
        if handler is None:
            logger.debug("No command %s on %s", name, target)
            return False
        logger.debug("Dispatching %s on %s", name, target)
        handler()
        return True

    def commands(self, target: str) -> list[str]:
        return sorted(n for t, n in self._handlers if t == target)

    def has(self, target: str, name: str) -> bool:
        return (target, name) in self._handlers


__all__ = ["CommandRegistry", "COMMAND_TARGET"]
