"""Synchronous event bus for skin lifecycle events."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any, Callable


@dataclass(frozen=True)
class SkinSaved:
    skin_id: int


@dataclass(frozen=True)
class SkinDeleted:
    skin_id: int
    descendant_ids: frozenset[int] = frozenset()


@dataclass(frozen=True)
class ParentsChanged:
    child_skin_id: int


@dataclass(frozen=True)
class SettingsChanged:
    key: str


Listener = Callable[[Any], None]


class EventBus:
    """Publish-subscribe bus; listeners run on the emitting thread in registration order.

    Listeners registered while an event is being dispatched receive the next
    event, not the current one.
    """

    def __init__(self) -> None:
        self._listeners: dict[type, list[Listener]] = {}
        self._global_listeners: list[Listener] = []
        self._lock = threading.Lock()

    def subscribe(self, event_type: type, callback: Listener) -> None:
        with self._lock:
            self._listeners.setdefault(event_type, []).append(callback)

    def on_all(self, callback: Listener) -> None:
        """Register a callback that receives every event, before typed listeners."""
        with self._lock:
            self._global_listeners.append(callback)

    def emit(self, event: Any) -> None:
        with self._lock:
            listeners = [*self._global_listeners, *self._listeners.get(type(event), [])]
        for callback in listeners:
            callback(event)
