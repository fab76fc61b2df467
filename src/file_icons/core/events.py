from __future__ import annotations
from dataclasses import dataclass
import logging
from typing import Any, Callable, Dict, Hashable, List, Optional

from .errors import InvalidState

"""Disposables and a small typed event emitter.

Usage:
    emitter = Emitter()
    sub = emitter.on(("did-change", "coloured"), lambda ev: print(ev.value))
    emitter.emit(("did-change", "coloured"), ChangeEvent("coloured", False))
    sub.dispose()          # stop listening
    emitter.dispose()      # further on()/emit() raise InvalidState

Handlers run synchronously in registration order. Each emit walks a snapshot
of the handler list, so subscribing or disposing from inside a handler only
affects the next emit.
"""

logger = logging.getLogger(__name__)

ConfigValue = Any  # bool | str
Handler = Callable[[Any], None]


@dataclass(frozen=True)
class ChangeEvent:
    option: str
    value: ConfigValue


@dataclass(frozen=True)
class DestroyEvent:
    pass


DID_DESTROY = "did-destroy"


def did_change(option: str) -> tuple[str, str]:
    """Channel key for change events of a single option."""
    return ("did-change", option)


class Disposable:
    """Runs a callback once, the first time it is disposed."""

    def __init__(self, callback: Optional[Callable[[], None]] = None):
        self._callback = callback
        self._disposed = False

    @property
    def disposed(self) -> bool:
        return self._disposed

    def dispose(self):
        if self._disposed:
            return
        self._disposed = True
        cb, self._callback = self._callback, None
        if cb is not None:
            cb()


class CompositeDisposable(Disposable):
    """Disposes a group of disposables together, in insertion order."""

    def __init__(self, *disposables: Disposable):
        super().__init__()
        self._items: List[Disposable] = []
        self.add(*disposables)

    def add(self, *disposables: Disposable):
        for item in disposables:
            if self.disposed:
                item.dispose()
            elif item not in self._items:
                self._items.append(item)
        return self

    def __len__(self) -> int:
        return len(self._items)

    def dispose(self):
        if self.disposed:
            return
        super().dispose()
        items, self._items = self._items, []
        for item in items:
            item.dispose()


class _Subscription(Disposable):
    def __init__(self, emitter: 'Emitter', channel: Hashable, handler: Handler):
        super().__init__(lambda: emitter._remove(channel, self))
        self.handler = handler


class Emitter:
    """Named-channel publish/subscribe with explicit disposal."""

    def __init__(self):
        self._handlers: Dict[Hashable, List[_Subscription]] = {}
        self._disposed = False

    @property
    def disposed(self) -> bool:
        return self._disposed

    def on(self, channel: Hashable, handler: Handler) -> Disposable:
        self._check_alive("subscribe to")
        sub = _Subscription(self, channel, handler)
        self._handlers.setdefault(channel, []).append(sub)
        return sub

    def emit(self, channel: Hashable, event=None):
        self._check_alive("emit on")
        # snapshot: changes made by handlers apply from the next emit
        for sub in list(self._handlers.get(channel, ())):
            try:
                sub.handler(event)
            except Exception:
                logger.exception("Handler %r failed on %r", sub.handler, channel)

    def listener_count(self, channel: Hashable) -> int:
        return len(self._handlers.get(channel, ()))

    def dispose(self):
        self._handlers.clear()
        self._disposed = True

    def _remove(self, channel: Hashable, sub: _Subscription):
        subs = self._handlers.get(channel)
        if not subs:
            return
        try:
            subs.remove(sub)
        except ValueError:
            return
        if not subs:
            del self._handlers[channel]

    def _check_alive(self, what: str):
        if self._disposed:
            raise InvalidState(f"Cannot {what} a disposed emitter")


__all__ = [
    "ChangeEvent", "DestroyEvent", "DID_DESTROY", "did_change",
    "Disposable", "CompositeDisposable", "Emitter",
]
