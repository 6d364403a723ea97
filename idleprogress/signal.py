"""Payload-less change broadcast with per-tick coalescing."""
from __future__ import annotations

from typing import Callable

_Listener = Callable[[], None]


class ChangeSignal:
    """Observers subscribe; emitters ``publish``; the owner ``flush``es once per tick.

    Any number of publishes between two flushes produce a single call to
    each listener.
    """

    def __init__(self) -> None:
        self._listeners: list[_Listener] = []
        self._pending = False

    def subscribe(self, listener: _Listener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: _Listener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    def publish(self) -> None:
        self._pending = True

    @property
    def pending(self) -> bool:
        return self._pending

    def flush(self) -> bool:
        """Deliver a queued notification. Returns True if listeners were called."""
        if not self._pending:
            return False
        self._pending = False
        for listener in list(self._listeners):
            listener()
        return True

    def clear(self) -> None:
        self._pending = False
