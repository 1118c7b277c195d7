"""
Observer registration and cancellation primitives shared by the session
stores and the route guard.
"""
from __future__ import annotations

from typing import Callable

from clinic.exceptions import StaleTransition


class Subscription:
    """Handle returned by ``subscribe``.  ``unsubscribe`` may be called twice."""

    def __init__(self, release: Callable[[], None]) -> None:
        self._release = release
        self.active = True

    def unsubscribe(self) -> None:
        if not self.active:
            return
        self.active = False
        self._release()


class Observable:
    """Ordered list of listeners notified with positional event arguments."""

    def __init__(self) -> None:
        self._listeners: dict[object, Callable[..., None]] = {}

    def subscribe(self, callback: Callable[..., None]) -> Subscription:
        key = object()
        self._listeners[key] = callback
        return Subscription(lambda: self._listeners.pop(key, None))

    def emit(self, *args) -> None:
        # Snapshot: a listener may unsubscribe others while we iterate
        for callback in list(self._listeners.values()):
            callback(*args)

    def __len__(self) -> int:
        return len(self._listeners)


class CancellationToken:
    """Marks the lifetime of one mounted consumer."""

    def __init__(self) -> None:
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True

    def raise_if_cancelled(self) -> None:
        if self.cancelled:
            raise StaleTransition('transition arrived after unmount')
