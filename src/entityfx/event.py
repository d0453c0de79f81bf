"""Broadcast events — synchronous multi-listener notification.

An Event holds an ordered list of callbacks. emit(*args) calls each of
them with the same arguments, in subscription order. subscribe() returns a
disposer, so listeners can be removed without keeping the callback around.

While an emit is running:
- a listener unsubscribed mid-emission is not called for the rest of it
- a listener subscribed mid-emission is first called on the next emit
Removed slots are blanked during emission and compacted afterwards.
"""

from __future__ import annotations

from typing import Callable

Listener = Callable[..., None]
Disposer = Callable[[], None]


class Event:
    """Synchronous broadcast event."""

    __slots__ = ("_listeners", "_emitting", "_dirty")

    def __init__(self) -> None:
        self._listeners: list[Listener | None] = []
        self._emitting = 0
        self._dirty = False

    @property
    def number_of_listeners(self) -> int:
        if not self._dirty:
            return len(self._listeners)
        return sum(1 for cb in self._listeners if cb is not None)

    def subscribe(self, callback: Listener) -> Disposer:
        """Register a callback. Returns a function that removes it."""
        self._listeners.append(callback)
        removed = False

        def _unsubscribe() -> None:
            nonlocal removed
            if not removed:
                removed = True
                self.unsubscribe(callback)

        return _unsubscribe

    def unsubscribe(self, callback: Listener) -> bool:
        """Remove one subscription of callback. Returns False if it was not subscribed.

        Bound methods compare equal across attribute lookups, so
        unsubscribe(obj.method) matches an earlier subscribe(obj.method).
        """
        for index, existing in enumerate(self._listeners):
            if existing is not None and existing == callback:
                break
        else:
            return False
        if self._emitting:
            self._listeners[index] = None
            self._dirty = True
        else:
            del self._listeners[index]
        return True

    def emit(self, *args) -> None:
        """Call every listener with args."""
        listeners = self._listeners
        count = len(listeners)
        self._emitting += 1
        try:
            for index in range(count):
                callback = listeners[index]
                if callback is not None:
                    callback(*args)
        finally:
            self._emitting -= 1
            if not self._emitting and self._dirty:
                self._listeners[:] = [cb for cb in listeners if cb is not None]
                self._dirty = False

    def __repr__(self) -> str:
        return f"Event(listeners={self.number_of_listeners})"
